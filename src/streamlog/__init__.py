"""
streamlog - Activity record store

This package provides the persistence facade of an activity log. It includes:

- Record normalization and defaults
- A hook bus for observing and rewriting records and query results
- Backing APIs for the hosted indexing service and a local JSON file
- Query building for record listings

For more information, please see the documentation.
"""

__version__ = "0.1.0"
__author__ = "Stream Team"
__license__ = "See LICENSE file"

# Version compatibility check
import sys

if sys.version_info < (3, 12):
    raise RuntimeError("streamlog requires Python 3.12 or higher")

# Import commonly used components for easier access
from .infrastructure.hooks import HookBus, HookType
from .infrastructure.storage import RecordStore

__all__ = [
    "HookBus",
    "HookType",
    "RecordStore",
]
