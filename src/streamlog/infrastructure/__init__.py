"""
Infrastructure components: backing APIs, hook bus and the record store facade.
"""

from .api import LocalRecordAPI, RecordAPI, RemoteRecordAPI
from .hooks import HookBus, HookType
from .storage import RecordStore

__all__ = [
    "HookBus",
    "HookType",
    "LocalRecordAPI",
    "RecordAPI",
    "RecordStore",
    "RemoteRecordAPI",
]
