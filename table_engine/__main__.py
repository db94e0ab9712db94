from __future__ import annotations

from table_engine.app.cli import app


def main() -> None:
    app(prog_name="table-engine")


if __name__ == "__main__":
    main()
