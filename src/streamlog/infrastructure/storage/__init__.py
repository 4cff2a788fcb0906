"""Record storage facade."""

from .service import RecordStore

__all__ = ["RecordStore"]
