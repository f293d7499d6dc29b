"""
Domain models for DentSync.
"""

from .patient import (
    BillingEntry,
    BillingStatus,
    CaseNote,
    DentalModel,
    Document,
    Gender,
    MedicalHistory,
    Patient,
    Prescription,
    PrescriptionStatus,
    ToothCondition,
    ToothRecord,
    TreatmentPlanItem,
    TreatmentStatus,
    generate_id,
)
from .clinic import (
    DEFAULT_CLINIC_NAME,
    AppState,
    Appointment,
    BillingShortcut,
    BillingTemplate,
    DoctorShortcut,
    FinancialTransaction,
    NoteShortcut,
    PersistedState,
    PrescriptionShortcut,
    PrescriptionTemplate,
    Shortcut,
    ShortcutCategory,
    TransactionType,
    WhatsAppTemplates,
)
from .user import User

__all__ = [
    "AppState",
    "Appointment",
    "BillingEntry",
    "BillingShortcut",
    "BillingStatus",
    "BillingTemplate",
    "CaseNote",
    "DEFAULT_CLINIC_NAME",
    "DentalModel",
    "Document",
    "DoctorShortcut",
    "FinancialTransaction",
    "Gender",
    "MedicalHistory",
    "NoteShortcut",
    "Patient",
    "PersistedState",
    "Prescription",
    "PrescriptionShortcut",
    "PrescriptionStatus",
    "PrescriptionTemplate",
    "Shortcut",
    "ShortcutCategory",
    "ToothCondition",
    "ToothRecord",
    "TransactionType",
    "TreatmentPlanItem",
    "TreatmentStatus",
    "User",
    "WhatsAppTemplates",
    "generate_id",
]
