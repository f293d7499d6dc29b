"""
Persistence module for DentSync.

Provides local blob storage and the load/save contract for the app state.
"""

from dentsync.db.migrations import migrate_patient, migrate_payload
from dentsync.db.storage import (
  DEFAULT_STORAGE_KEY,
  LocalStorage,
  dump_state,
  load_state,
  save_state,
)

__all__ = [
  "DEFAULT_STORAGE_KEY",
  "LocalStorage",
  "dump_state",
  "load_state",
  "migrate_patient",
  "migrate_payload",
  "save_state",
]
