"""
Clinic-level data models for DentSync.

Appointments, the financial ledger, form shortcuts, message templates and the
root application state.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field

from .patient import (
    DentalModel,
    Patient,
    PrescriptionStatus,
    generate_id,
)
from .user import User


DEFAULT_CLINIC_NAME = "DentSync Clinic"


# =============================================================================
# SCHEDULING AND LEDGER
# =============================================================================


class Appointment(DentalModel):
    id: str = Field(default_factory=generate_id)
    patient_id: str
    patient_name: str
    doctor: str
    procedure: str
    date: str  # YYYY-MM-DD
    time: str  # HH:mm


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class FinancialTransaction(DentalModel):
    """A ledger entry, entered by hand or synthesized from a paid bill."""
    id: str = Field(default_factory=generate_id)
    date: str
    type: TransactionType
    category: str
    description: str
    amount: float


# =============================================================================
# SHORTCUTS
# =============================================================================


class ShortcutCategory(str, Enum):
    NOTES = "notes"
    DOCTORS = "doctors"
    BILLING = "billing"
    PRESCRIPTIONS = "prescriptions"


class BillingTemplate(DentalModel):
    description: str
    amount: float


class PrescriptionTemplate(DentalModel):
    """Any subset of prescription fields, minus id and dates."""
    medication: str | None = None
    dosage: str | None = None
    frequency: str | None = None
    drug_type: str | None = None
    duration: str | None = None
    route: str | None = None
    instructions: str | None = None
    advice: str | None = None
    doctor: str | None = None
    status: PrescriptionStatus | None = None


class NoteShortcut(DentalModel):
    id: str = Field(default_factory=generate_id)
    category: Literal[ShortcutCategory.NOTES] = ShortcutCategory.NOTES
    value: str


class DoctorShortcut(DentalModel):
    id: str = Field(default_factory=generate_id)
    category: Literal[ShortcutCategory.DOCTORS] = ShortcutCategory.DOCTORS
    value: str


class BillingShortcut(DentalModel):
    id: str = Field(default_factory=generate_id)
    category: Literal[ShortcutCategory.BILLING] = ShortcutCategory.BILLING
    value: BillingTemplate


class PrescriptionShortcut(DentalModel):
    id: str = Field(default_factory=generate_id)
    category: Literal[ShortcutCategory.PRESCRIPTIONS] = ShortcutCategory.PRESCRIPTIONS
    value: PrescriptionTemplate


Shortcut = Annotated[
    Union[NoteShortcut, DoctorShortcut, BillingShortcut, PrescriptionShortcut],
    Field(discriminator="category"),
]


# =============================================================================
# MESSAGE TEMPLATES
# =============================================================================


DEFAULT_PATIENT_REPORT = """Hello {{patient_name}},

This is from {{clinic_name}}.

Your dental report from your visit on {{visit_date}} with Dr. {{doctor_name}} is now ready.

{{report_summary}}

If you have any questions, feel free to reply to this message.

Thank you for choosing {{clinic_name}}!
Contact us: {{clinic_contact}}
Address: {{clinic_address}}

- Team {{clinic_name}}"""

DEFAULT_APPOINTMENT_CONFIRMATION = """Hello {{patient_name}},

This is a confirmation for your appointment at *{{clinic_name}}*.

*Details:*
- *Procedure:* {{procedure}}
- *Doctor:* {{doctor_name}}
- *Date:* {{appointment_date}}
- *Time:* {{appointment_time}}

Please arrive 10 minutes early. If you need to reschedule, please contact us at {{clinic_contact}}.
Our Address: {{clinic_address}}

Thank you,
Team {{clinic_name}}"""

DEFAULT_APPOINTMENT_REMINDER = """Hello {{patient_name}},

This is a friendly reminder for your upcoming appointment at *{{clinic_name}}*.

*Details:*
- *Procedure:* {{procedure}}
- *Doctor:* {{doctor_name}}
- *Date:* {{appointment_date}}
- *Time:* {{appointment_time}}

We look forward to seeing you. If you have any questions or need to reschedule, please contact us at {{clinic_contact}}.
Our Address: {{clinic_address}}

Thank you,
Team {{clinic_name}}"""


class WhatsAppTemplates(DentalModel):
    """Outgoing message templates with {{placeholder}} tokens."""
    patient_report: str = DEFAULT_PATIENT_REPORT
    appointment_confirmation: str = DEFAULT_APPOINTMENT_CONFIRMATION
    appointment_reminder: str = DEFAULT_APPOINTMENT_REMINDER


# =============================================================================
# APPLICATION STATE
# =============================================================================


class PersistedState(DentalModel):
    """
    The durable part of the application state.

    This is exactly what gets written to local storage; session fields
    are never part of it.
    """
    clinic_name: str = DEFAULT_CLINIC_NAME
    clinic_contact_number: str = ""
    clinic_logo: str = ""  # data URL
    clinic_address: str = ""
    patients: list[Patient] = Field(default_factory=list)
    appointments: list[Appointment] = Field(default_factory=list)
    transactions: list[FinancialTransaction] = Field(default_factory=list)
    shortcuts: list[Shortcut] = Field(default_factory=list)
    whatsapp_templates: WhatsAppTemplates = Field(default_factory=WhatsAppTemplates)


class AppState(PersistedState):
    """
    Root state snapshot.

    Adds the volatile session fields, which are rebuilt from the auth
    provider on every run. The app starts out waiting for the provider.
    """
    is_authenticated: bool = False
    is_auth_loading: bool = True
    user: User | None = None

    def persisted(self) -> PersistedState:
        """Project the state onto its durable fields."""
        return PersistedState.model_validate(
            {name: getattr(self, name) for name in PersistedState.model_fields}
        )

    @classmethod
    def from_persisted(cls, persisted: PersistedState) -> "AppState":
        return cls.model_validate(
            {name: getattr(persisted, name) for name in PersistedState.model_fields}
        )

    def get_patient(self, patient_id: str) -> Patient | None:
        for patient in self.patients:
            if patient.id == patient_id:
                return patient
        return None

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        for appointment in self.appointments:
            if appointment.id == appointment_id:
                return appointment
        return None
