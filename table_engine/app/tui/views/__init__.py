from .base import RecordView

__all__ = ["RecordView"]
