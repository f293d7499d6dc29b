"""
Patient data models for DentSync.

These Pydantic models define the patient record and every sub-record it owns:
dental chart, treatment plan, notes, prescriptions, billing and documents.
Models are frozen; the reducer produces updated copies instead of mutating.
"""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def generate_id() -> str:
    """Generate a unique identifier."""
    return str(uuid4())[:8]


class DentalModel(BaseModel):
    """
    Base model for all stored records.

    Attributes are snake_case in Python and camelCase in the stored blob.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# =============================================================================
# ENUMS
# =============================================================================


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class ToothCondition(str, Enum):
    HEALTHY = "Healthy"
    CARIES = "Caries"
    FILLING = "Filling"
    CROWN = "Crown"
    RCT = "RCT"  # Root canal treatment
    MISSING = "Missing"
    IMPLANT = "Implant"
    OTHER = "Other"


class TreatmentStatus(str, Enum):
    PLANNED = "Planned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"


class PrescriptionStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    DISCONTINUED = "Discontinued"


class BillingStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


# =============================================================================
# SUB-RECORDS
# =============================================================================


class MedicalHistory(DentalModel):
    """Free-text allergies and systemic conditions."""
    allergies: str = ""
    conditions: str = ""


class ToothRecord(DentalModel):
    """Charted state of a single tooth."""
    condition: ToothCondition = ToothCondition.HEALTHY
    notes: str = ""


class TreatmentPlanItem(DentalModel):
    """
    A planned or performed procedure.

    `is_billed` only ever goes from False to True, when a billing entry
    linked to this item is added.
    """
    id: str = Field(default_factory=generate_id)
    procedure: str
    tooth: str = ""  # FDI number, e.g. "11", "24"
    status: TreatmentStatus = TreatmentStatus.PLANNED
    cost: float = 0.0
    date: str
    is_billed: bool = False


class CaseNote(DentalModel):
    id: str = Field(default_factory=generate_id)
    date: str
    note: str


class Prescription(DentalModel):
    id: str = Field(default_factory=generate_id)
    medication: str
    dosage: str = ""
    frequency: str = ""
    drug_type: str = ""
    duration: str = ""
    route: str = ""
    instructions: str = ""
    advice: str = ""
    doctor: str = ""
    status: PrescriptionStatus = PrescriptionStatus.ACTIVE
    start_date: str = ""
    end_date: str = ""


class BillingEntry(DentalModel):
    """A single charge to a patient."""
    id: str = Field(default_factory=generate_id)
    date: str
    description: str
    amount: float
    status: BillingStatus = BillingStatus.PENDING


class Document(DentalModel):
    """An attachment stored inline as a data URL."""
    id: str = Field(default_factory=generate_id)
    name: str
    type: str = ""
    size: int = 0
    url: str = ""
    uploaded_at: str = ""


# =============================================================================
# PATIENT (ROOT MODEL)
# =============================================================================


class Patient(DentalModel):
    """
    Complete patient record.

    Patients are created by the add-patient action and never removed.
    The dental chart is sparse: a tooth without an entry is Healthy.
    """
    id: str = Field(default_factory=generate_id)

    # Identity and demographics
    first_name: str
    last_name: str
    date_of_birth: str
    gender: Gender
    phone: str
    email: str = ""
    address: str = ""

    medical_history: MedicalHistory = Field(default_factory=MedicalHistory)

    # Clinical record
    dental_chart: dict[str, ToothRecord] = Field(default_factory=dict)
    treatment_plan: list[TreatmentPlanItem] = Field(default_factory=list)
    case_notes: list[CaseNote] = Field(default_factory=list)
    general_notes: list[CaseNote] = Field(default_factory=list)
    prescriptions: list[Prescription] = Field(default_factory=list)

    # Administrative
    billing: list[BillingEntry] = Field(default_factory=list)
    documents: list[Document] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def outstanding_balance(self) -> float:
        """Sum of all pending billing entries."""
        return sum(b.amount for b in self.billing if b.status == BillingStatus.PENDING)

    def tooth(self, tooth_id: str) -> ToothRecord:
        """Get the charted state of a tooth, Healthy when not charted."""
        return self.dental_chart.get(tooth_id) or ToothRecord()

    def get_billing(self, billing_id: str) -> BillingEntry | None:
        for entry in self.billing:
            if entry.id == billing_id:
                return entry
        return None

    def get_plan_item(self, item_id: str) -> TreatmentPlanItem | None:
        for item in self.treatment_plan:
            if item.id == item_id:
                return item
        return None
