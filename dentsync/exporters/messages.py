"""
WhatsApp message templating.

Fills the clinic's message templates with patient and appointment details.
Placeholders have the form {{key}}; unknown placeholders are left as-is.
"""

from __future__ import annotations

from datetime import date

from dentsync.models import AppState, Appointment, Patient, ToothCondition

from .sections import ReportSections, selected

CONTACT_FALLBACK = "[Clinic Phone Number]"
ADDRESS_FALLBACK = "[Clinic Address]"


def render(template: str, **replacements: str) -> str:
    """Substitute every {{key}} occurrence with its replacement."""
    message = template
    for key, value in replacements.items():
        message = message.replace(f"{{{{{key}}}}}", str(value))
    return message


def _ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_appointment_date(value: str) -> str:
    """'2024-03-01' -> 'Friday, March 1st, 2024'. Unparseable dates pass through."""
    try:
        when = date.fromisoformat(value)
    except ValueError:
        return value
    return f"{when:%A}, {when:%B} {_ordinal(when.day)}, {when.year}"


def _clinic_replacements(clinic: AppState) -> dict[str, str]:
    return {
        "clinic_name": clinic.clinic_name,
        "clinic_contact": clinic.clinic_contact_number or CONTACT_FALLBACK,
        "clinic_address": clinic.clinic_address or ADDRESS_FALLBACK,
    }


def report_summary(patient: Patient, sections: ReportSections | None = None) -> str:
    """Plain-text summary of the selected report sections."""
    parts = []

    if selected(sections, "dental_chart"):
        findings = [
            (tooth_id, record)
            for tooth_id, record in patient.dental_chart.items()
            if record.condition != ToothCondition.HEALTHY
        ]
        if findings:
            lines = ["*Dental Summary*:"]
            for tooth_id, record in findings:
                notes = f" ({record.notes})" if record.notes else ""
                lines.append(f"- Tooth {tooth_id}: {record.condition.value}{notes}")
            parts.append("\n".join(lines))

    if selected(sections, "treatment_plan") and patient.treatment_plan:
        lines = ["*Treatment Plan*:"]
        for item in patient.treatment_plan:
            lines.append(
                f"- {item.procedure} (Tooth: {item.tooth or 'N/A'}), "
                f"Cost: ₹{item.cost:.2f}, Status: {item.status.value}"
            )
        parts.append("\n".join(lines))

    if selected(sections, "prescriptions") and patient.prescriptions:
        lines = ["*Prescriptions*:"]
        for rx in patient.prescriptions:
            lines.append(f"- {rx.medication} {rx.dosage} ({rx.status.value})")
        parts.append("\n".join(lines))

    if selected(sections, "case_notes") and patient.case_notes:
        lines = ["*Recent Case Notes*:"]
        for note in patient.case_notes[-2:]:
            lines.append(f"- ({note.date}) {note.note}")
        parts.append("\n".join(lines))

    if selected(sections, "billing") and patient.billing:
        parts.append(
            "*Billing Summary*:\n"
            f"- Total Outstanding: *₹{patient.outstanding_balance:.2f}*"
        )

    if not parts:
        return "No information to report for the selected sections."
    return "\n\n".join(parts)


def patient_report_message(
    patient: Patient,
    clinic: AppState,
    doctor_name: str,
    visit_date: str,
    sections: ReportSections | None = None,
) -> str:
    return render(
        clinic.whatsapp_templates.patient_report,
        patient_name=patient.full_name,
        visit_date=visit_date,
        doctor_name=doctor_name,
        report_summary=report_summary(patient, sections),
        **_clinic_replacements(clinic),
    )


def _appointment_message(template: str, appointment: Appointment, patient: Patient, clinic: AppState) -> str:
    return render(
        template,
        patient_name=patient.full_name,
        procedure=appointment.procedure,
        doctor_name=appointment.doctor,
        appointment_date=format_appointment_date(appointment.date),
        appointment_time=appointment.time,
        **_clinic_replacements(clinic),
    )


def appointment_confirmation_message(appointment: Appointment, patient: Patient, clinic: AppState) -> str:
    return _appointment_message(
        clinic.whatsapp_templates.appointment_confirmation, appointment, patient, clinic
    )


def appointment_reminder_message(appointment: Appointment, patient: Patient, clinic: AppState) -> str:
    return _appointment_message(
        clinic.whatsapp_templates.appointment_reminder, appointment, patient, clinic
    )
