"""
Durable local storage for DentSync.

The whole persisted state is one JSON blob stored under a fixed key. Loading
never fails: missing or damaged data degrades to defaults. Saving never
raises: failures are logged and the in-memory state carries on.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError

from dentsync.config import DEFAULT_STORAGE_KEY
from dentsync.db.migrations import migrate_payload
from dentsync.models import (
  AppState,
  Appointment,
  BillingEntry,
  CaseNote,
  Document,
  FinancialTransaction,
  MedicalHistory,
  Patient,
  PersistedState,
  Prescription,
  Shortcut,
  ToothRecord,
  TreatmentPlanItem,
)

logger = logging.getLogger(__name__)

_RECORD_ADAPTERS: dict[str, TypeAdapter] = {
  "patients": TypeAdapter(Patient),
  "appointments": TypeAdapter(Appointment),
  "transactions": TypeAdapter(FinancialTransaction),
  "shortcuts": TypeAdapter(Shortcut),
}

# Per-item validation inside one stored patient
_PATIENT_ITEM_ADAPTERS: dict[str, TypeAdapter] = {
  "treatmentPlan": TypeAdapter(TreatmentPlanItem),
  "caseNotes": TypeAdapter(CaseNote),
  "generalNotes": TypeAdapter(CaseNote),
  "prescriptions": TypeAdapter(Prescription),
  "billing": TypeAdapter(BillingEntry),
  "documents": TypeAdapter(Document),
}
_TOOTH_ADAPTER = TypeAdapter(ToothRecord)


class LocalStorage:
  """
  Key/value store of text blobs, one file per key.

  Mirrors the browser localStorage calls the app was designed around.
  """

  def __init__(self, data_dir: Union[str, Path]):
    self.data_dir = Path(data_dir)

  def _path(self, key: str) -> Path:
    return self.data_dir / f"{key}.json"

  def get_item(self, key: str) -> Optional[str]:
    """Get the stored text for a key, or None if nothing is stored."""
    path = self._path(key)
    if not path.exists():
      return None
    return path.read_text(encoding="utf-8")

  def set_item(self, key: str, value: str) -> None:
    """Store text under a key, replacing the previous value atomically."""
    self.data_dir.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
    try:
      with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(value)
      os.replace(tmp_name, self._path(key))
    except BaseException:
      Path(tmp_name).unlink(missing_ok=True)
      raise

  def remove_item(self, key: str) -> None:
    self._path(key).unlink(missing_ok=True)


# -----------------------------------------------------------------------------
# Serialization
# -----------------------------------------------------------------------------


def dump_state(state: PersistedState) -> str:
  """Serialize the durable fields of a state snapshot."""
  if isinstance(state, AppState):
    state = state.persisted()
  return state.model_dump_json(by_alias=True)


def save_state(storage: LocalStorage, state: PersistedState, key: str = DEFAULT_STORAGE_KEY) -> bool:
  """
  Persist a state snapshot.

  Returns True on success. Failures are logged, never raised.
  """
  try:
    storage.set_item(key, dump_state(state))
  except (OSError, ValueError):
    logger.exception("Failed to save state under %r", key)
    return False
  return True


def load_state(storage: LocalStorage, key: str = DEFAULT_STORAGE_KEY) -> AppState:
  """
  Load the stored state, falling back to defaults.

  The returned state always starts unauthenticated and waiting for the
  auth provider, whatever was stored.
  """
  try:
    raw = storage.get_item(key)
  except (OSError, UnicodeDecodeError):
    logger.exception("Failed to read stored state under %r", key)
    return AppState()

  if raw is None:
    return AppState()

  try:
    payload = json.loads(raw)
  except ValueError:
    logger.warning("Stored state under %r is not valid JSON; starting from defaults", key)
    return AppState()

  if not isinstance(payload, dict):
    logger.warning("Stored state under %r is not an object; starting from defaults", key)
    return AppState()

  return AppState.from_persisted(_validate(migrate_payload(payload)))


def _validate(payload: dict[str, Any]) -> PersistedState:
  try:
    return PersistedState.model_validate(payload)
  except ValidationError as exc:
    logger.warning(
      "Stored state has %d invalid value(s); keeping the records that validate",
      exc.error_count(),
    )
  return PersistedState.model_validate(_salvage(payload))


def _salvage(payload: dict[str, Any]) -> dict[str, Any]:
  """Drop the individual records and settings that fail validation."""
  clean: dict[str, Any] = {}
  for field, value in payload.items():
    adapter = _RECORD_ADAPTERS.get(field)
    if adapter is None:
      try:
        PersistedState.model_validate({field: value})
      except ValidationError:
        logger.warning("Discarding invalid stored setting %r", field)
        continue
      clean[field] = value
      continue

    records = []
    for index, record in enumerate(value):
      try:
        records.append(adapter.validate_python(record))
        continue
      except ValidationError:
        pass
      if field == "patients":
        patient = _salvage_patient(record, index)
        if patient is not None:
          records.append(patient)
          continue
      logger.warning("Discarding invalid stored record %s[%d]", field, index)
    clean[field] = records
  return clean


def _salvage_patient(record: Any, index: int) -> Optional[Patient]:
  """
  Rebuild a stored patient from the parts that validate.

  Invalid sub-records and chart entries are dropped one by one. Returns None
  only when the patient itself (identity and contact fields) cannot be built.
  """
  if not isinstance(record, dict):
    return None

  repaired = dict(record)
  for field, adapter in _PATIENT_ITEM_ADAPTERS.items():
    items = repaired.get(field)
    kept = []
    for position, item in enumerate(items if isinstance(items, list) else []):
      try:
        kept.append(adapter.validate_python(item))
      except ValidationError:
        logger.warning(
          "Discarding invalid stored record patients[%d].%s[%d]", index, field, position
        )
    repaired[field] = kept

  chart = repaired.get("dentalChart")
  teeth = {}
  for tooth_id, entry in (chart.items() if isinstance(chart, dict) else []):
    try:
      teeth[str(tooth_id)] = _TOOTH_ADAPTER.validate_python(entry)
    except ValidationError:
      logger.warning("Discarding invalid chart entry patients[%d].dentalChart[%r]", index, tooth_id)
  repaired["dentalChart"] = teeth

  try:
    MedicalHistory.model_validate(repaired.get("medicalHistory"))
  except ValidationError:
    logger.warning("Resetting invalid medical history of patients[%d]", index)
    repaired["medicalHistory"] = {}
  for field in ("email", "address"):
    if not isinstance(repaired.get(field), str):
      repaired[field] = ""

  try:
    return Patient.model_validate(repaired)
  except ValidationError:
    return None
