"""
JSON exporter for DentSync.

Exports patients or the whole clinic state as clean, human-readable JSON
using the same camelCase layout as local storage.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from dentsync.models import AppState, DentalModel, Patient, PrescriptionStatus


def export_json(
    record: DentalModel,
    output_path: Path | None = None,
    indent: int = 2,
) -> str:
    """
    Export a patient or state snapshot to JSON format.

    Args:
        record: The patient or state to export
        output_path: Optional path to write the JSON file
        indent: JSON indentation level

    Returns:
        JSON string representation of the record
    """
    if isinstance(record, AppState):
        # Session fields never leave the process
        record = record.persisted()

    data = record.model_dump(mode="json", by_alias=True)
    json_str = json.dumps(data, indent=indent, ensure_ascii=False)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_str, encoding="utf-8")

    return json_str


def export_json_summary(patient: Patient) -> dict[str, Any]:
    """
    Export a summary of the patient (useful for listings/previews).

    Returns a dict with key patient information.
    """
    return {
        "id": patient.id,
        "name": patient.full_name,
        "date_of_birth": patient.date_of_birth,
        "gender": patient.gender.value,
        "phone": patient.phone,
        "treatment_items": len(patient.treatment_plan),
        "active_prescriptions": sum(
            1 for p in patient.prescriptions if p.status == PrescriptionStatus.ACTIVE
        ),
        "outstanding": patient.outstanding_balance,
        "documents": len(patient.documents),
    }
