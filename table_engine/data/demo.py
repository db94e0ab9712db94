"""Demo audit-log records for trying out the engine."""
from __future__ import annotations

import datetime as dt

from . import models
from .repo import Database

_USERS = ["admin", "ops", "auditor", "finance"]
_MODULES = ["users", "orders", "projects", "customers", "permissions"]
_OPERATIONS = ["create", "update", "delete", "export"]


def demo_audit_logs(count: int = 37) -> list[dict[str, object]]:
    start = dt.datetime(2024, 1, 1, 9, 0, tzinfo=dt.timezone.utc)
    rows: list[dict[str, object]] = []
    for index in range(count):
        module = _MODULES[index % len(_MODULES)]
        operation = _OPERATIONS[index % len(_OPERATIONS)]
        failed = index % 9 == 8
        rows.append(
            {
                "username": _USERS[index % len(_USERS)],
                "module": module,
                "operation": operation,
                "method": f"{module}.{operation}",
                "execution_time": 20 + (index * 37) % 400,
                "status": 0 if failed else 1,
                "error_msg": "permission denied" if failed else None,
                "ip": f"10.0.0.{index % 250 + 1}",
                "created_at": start + dt.timedelta(minutes=15 * index),
            }
        )
    return rows


def seed_audit_logs(db: Database, count: int = 37) -> int:
    """Insert ``count`` demo audit logs and return how many rows were written."""

    db.create_all()
    rows = demo_audit_logs(count)
    with db.session_scope() as session:
        session.add_all(models.AuditLog(**row) for row in rows)
    return len(rows)


__all__ = ["demo_audit_logs", "seed_audit_logs"]
