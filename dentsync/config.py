"""
Configuration for DentSync.

Settings come from environment variables and are read once per process.
"""

import logging
import os
from pathlib import Path
from typing import Optional


DEFAULT_DATA_DIR = Path.home() / ".dentsync"
DEFAULT_STORAGE_KEY = "dentSyncData"
DEFAULT_LOG_LEVEL = "WARNING"


class DentSyncConfig:
  """Configuration for local storage and logging."""

  def __init__(self):
    self.data_dir = Path(os.environ.get("DENTSYNC_DATA_DIR") or DEFAULT_DATA_DIR).expanduser()
    self.storage_key = os.environ.get("DENTSYNC_STORAGE_KEY") or DEFAULT_STORAGE_KEY
    self.log_level = (os.environ.get("DENTSYNC_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()

  @property
  def log_level_number(self) -> int:
    """Numeric logging level; unknown names fall back to WARNING."""
    level = logging.getLevelName(self.log_level)
    return level if isinstance(level, int) else logging.WARNING

  def validate(self) -> None:
    """Raise error if not properly configured."""
    if not self.storage_key.strip():
      raise ValueError("DENTSYNC_STORAGE_KEY must not be blank")
    if self.data_dir.exists() and not self.data_dir.is_dir():
      raise ValueError(f"DENTSYNC_DATA_DIR is not a directory: {self.data_dir}")


# -----------------------------------------------------------------------------
# Singleton instance
# -----------------------------------------------------------------------------

_config: Optional[DentSyncConfig] = None


def get_config() -> DentSyncConfig:
  """Get the DentSync configuration (singleton)."""
  global _config
  if _config is None:
    _config = DentSyncConfig()
    _config.validate()
  return _config


def reset_config() -> None:
  """Reset the configuration singleton (useful for testing)."""
  global _config
  _config = None
