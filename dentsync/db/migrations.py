"""
Forward-compatible migration of stored DentSync payloads.

Older versions of the app stored patients without the dental chart,
treatment plan, notes, prescriptions or documents, and templates without
every message type. `migrate_payload` back-fills all of them and runs on
every load, whatever version wrote the data.
"""

from typing import Any

from dentsync.models import DEFAULT_CLINIC_NAME, WhatsAppTemplates


# Patient fields added after the first release, with their empty values
PATIENT_DEFAULTS: dict[str, Any] = {
  "dentalChart": dict,
  "treatmentPlan": list,
  "caseNotes": list,
  "generalNotes": list,
  "prescriptions": list,
  "billing": list,
  "documents": list,
}

SETTINGS_DEFAULTS: dict[str, str] = {
  "clinicName": DEFAULT_CLINIC_NAME,
  "clinicContactNumber": "",
  "clinicLogo": "",
  "clinicAddress": "",
}

COLLECTIONS = ("patients", "appointments", "transactions", "shortcuts")


def default_templates() -> dict[str, str]:
  """Stored form of the built-in message templates."""
  return WhatsAppTemplates().model_dump(by_alias=True)


def migrate_patient(patient: dict) -> dict:
  """Back-fill missing or null sub-collections of one stored patient."""
  migrated = dict(patient)
  for field, factory in PATIENT_DEFAULTS.items():
    if migrated.get(field) is None:
      migrated[field] = factory()

  history = migrated.get("medicalHistory")
  if not isinstance(history, dict):
    history = {}
  migrated["medicalHistory"] = {
    "allergies": history.get("allergies") or "",
    "conditions": history.get("conditions") or "",
  }

  for field in ("email", "address"):
    if migrated.get(field) is None:
      migrated[field] = ""
  return migrated


def migrate_payload(payload: dict) -> dict:
  """
  Bring a stored payload up to the current layout.

  Empty settings fall back to their defaults, missing collections become
  empty lists, and stored templates are merged over the defaults.
  """
  migrated = dict(payload)

  for field, default in SETTINGS_DEFAULTS.items():
    migrated[field] = payload.get(field) or default

  for field in COLLECTIONS:
    value = payload.get(field)
    migrated[field] = value if isinstance(value, list) else []

  migrated["patients"] = [
    migrate_patient(p) if isinstance(p, dict) else p
    for p in migrated["patients"]
  ]

  templates = payload.get("whatsappTemplates")
  migrated["whatsappTemplates"] = {
    **default_templates(),
    **(templates if isinstance(templates, dict) else {}),
  }
  return migrated
