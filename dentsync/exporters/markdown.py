"""
Markdown exporter for DentSync.

Exports a patient report as Markdown, with the same sections the clinic
prints for patients.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from dentsync.models import AppState, Patient, ToothCondition

from .sections import ReportSections, selected

# FDI tooth numbering, in chart order
TOOTH_IDS = {
    "upper_right": ["18", "17", "16", "15", "14", "13", "12", "11"],
    "upper_left": ["21", "22", "23", "24", "25", "26", "27", "28"],
    "lower_left": ["38", "37", "36", "35", "34", "33", "32", "31"],
    "lower_right": ["48", "47", "46", "45", "44", "43", "42", "41"],
}

CONDITION_DESCRIPTIONS = {
    ToothCondition.HEALTHY: "No signs of decay or damage.",
    ToothCondition.CARIES: "Presence of tooth decay.",
    ToothCondition.FILLING: "Restoration material placed on the tooth.",
    ToothCondition.CROWN: "A cap placed over the entire tooth.",
    ToothCondition.RCT: "Root Canal Treatment has been performed.",
    ToothCondition.MISSING: "Tooth is not present in the arch.",
    ToothCondition.IMPLANT: "Artificial tooth root is in place.",
    ToothCondition.OTHER: "Other conditions noted (see notes).",
}


def _money(amount: float) -> str:
    return f"₹{amount:.2f}"


def export_markdown(
    patient: Patient,
    clinic: AppState,
    sections: ReportSections | None = None,
    output_path: Path | None = None,
) -> str:
    """
    Export a patient report to Markdown format.

    Args:
        patient: The patient to report on
        clinic: State supplying the clinic name and address
        sections: Which sections to include (all when omitted)
        output_path: Optional path to write the Markdown file

    Returns:
        Markdown string of the report
    """
    lines = []

    # Header
    lines.append(f"# {clinic.clinic_name}")
    if clinic.clinic_address:
        lines.append("")
        lines.append(clinic.clinic_address)
    lines.append("")
    lines.append("## Patient Report")
    lines.append("")
    lines.append(f"**{patient.full_name}**")
    lines.append("")
    lines.append(f"- **DOB:** {patient.date_of_birth} | **Gender:** {patient.gender.value}")
    lines.append(f"- **Phone:** {patient.phone} | **Email:** {patient.email or '-'}")
    lines.append(f"- **Address:** {patient.address or '-'}")
    lines.append("")

    if selected(sections, "dental_chart"):
        charted = [
            (tooth_id, patient.tooth(tooth_id))
            for quadrant in TOOTH_IDS.values()
            for tooth_id in quadrant
        ]
        findings = [(t, r) for t, r in charted if r.condition != ToothCondition.HEALTHY]
        lines.append("## Dental Chart")
        lines.append("")
        if findings:
            lines.append("| Tooth | Condition | Notes |")
            lines.append("|---|---|---|")
            for tooth_id, record in findings:
                lines.append(f"| {tooth_id} | {record.condition.value} | {record.notes} |")
        else:
            lines.append("All teeth healthy.")
        lines.append("")
        lines.append("**Legend**")
        lines.append("")
        for condition, description in CONDITION_DESCRIPTIONS.items():
            lines.append(f"- **{condition.value}:** {description}")
        lines.append("")

    if selected(sections, "treatment_plan") and patient.treatment_plan:
        lines.append("## Treatment Plan")
        lines.append("")
        lines.append("| Date | Procedure | Tooth | Cost (INR) | Status |")
        lines.append("|---|---|---|---|---|")
        for item in patient.treatment_plan:
            lines.append(
                f"| {item.date} | {item.procedure} | {item.tooth} | "
                f"{_money(item.cost)} | {item.status.value} |"
            )
        lines.append("")

    if selected(sections, "prescriptions") and patient.prescriptions:
        lines.append("## Prescriptions")
        lines.append("")
        lines.append("| Medication | Type | Dosage | Duration | Status |")
        lines.append("|---|---|---|---|---|")
        for rx in patient.prescriptions:
            lines.append(
                f"| {rx.medication} | {rx.drug_type} | {rx.dosage} | "
                f"{rx.duration} | {rx.status.value} |"
            )
        lines.append("")

    if selected(sections, "case_notes") and patient.case_notes:
        lines.append("## Case Notes")
        lines.append("")
        for note in patient.case_notes:
            lines.append(f"- **{note.date}:** {note.note}")
        lines.append("")

    if selected(sections, "billing") and patient.billing:
        lines.append("## Billing")
        lines.append("")
        lines.append("| Date | Description | Amount (INR) | Status |")
        lines.append("|---|---|---|---|")
        for entry in patient.billing:
            lines.append(
                f"| {entry.date} | {entry.description} | "
                f"{_money(entry.amount)} | {entry.status.value} |"
            )
        lines.append("")
        if patient.outstanding_balance > 0:
            lines.append(f"**Total Outstanding: {_money(patient.outstanding_balance)}**")
            lines.append("")

    if selected(sections, "documents") and patient.documents:
        lines.append("## Documents")
        lines.append("")
        lines.append("| File Name | Type | Uploaded Date |")
        lines.append("|---|---|---|")
        for doc in patient.documents:
            lines.append(f"| {doc.name} | {doc.type} | {_format_upload_date(doc.uploaded_at)} |")
        lines.append("")

    markdown = "\n".join(lines)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(markdown, encoding="utf-8")

    return markdown


def _format_upload_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d")
    except ValueError:
        return value
