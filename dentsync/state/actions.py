"""
Action vocabulary for the DentSync state core.

Every change to the application state is expressed as one of the actions
below. Actions are frozen models tagged by `type`; `parse_action` turns the
wire form `{"type": "ADD_BILLING", "payload": {...}}` into a typed action.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union, get_args

from pydantic import Field

from dentsync.models import (
    Appointment,
    BillingEntry,
    BillingStatus,
    CaseNote,
    DentalModel,
    Document,
    FinancialTransaction,
    Patient,
    Prescription,
    Shortcut,
    ToothRecord,
    TreatmentPlanItem,
    User,
    WhatsAppTemplates,
)


class ActionType(str, Enum):
    # Session
    SET_USER = "SET_USER"
    LOGOUT = "LOGOUT"

    # Clinic settings
    UPDATE_SETTINGS = "UPDATE_SETTINGS"

    # Top-level collections
    ADD_PATIENT = "ADD_PATIENT"
    UPDATE_PATIENT = "UPDATE_PATIENT"
    ADD_APPOINTMENT = "ADD_APPOINTMENT"
    UPDATE_APPOINTMENT = "UPDATE_APPOINTMENT"
    DELETE_APPOINTMENT = "DELETE_APPOINTMENT"
    ADD_TRANSACTION = "ADD_TRANSACTION"
    UPDATE_TRANSACTION = "UPDATE_TRANSACTION"
    DELETE_TRANSACTION = "DELETE_TRANSACTION"
    ADD_SHORTCUT = "ADD_SHORTCUT"
    DELETE_SHORTCUT = "DELETE_SHORTCUT"

    # Patient-scoped sub-collections
    ADD_PRESCRIPTION = "ADD_PRESCRIPTION"
    UPDATE_PRESCRIPTION = "UPDATE_PRESCRIPTION"
    DELETE_PRESCRIPTION = "DELETE_PRESCRIPTION"
    ADD_BILLING = "ADD_BILLING"
    UPDATE_BILLING = "UPDATE_BILLING"  # status transition, may synthesize income
    UPDATE_BILLING_ITEM = "UPDATE_BILLING_ITEM"  # full replace, no side effect
    ADD_CASE_NOTE = "ADD_CASE_NOTE"
    ADD_GENERAL_NOTE = "ADD_GENERAL_NOTE"
    UPDATE_DENTAL_CHART = "UPDATE_DENTAL_CHART"
    ADD_TREATMENT_PLAN_ITEM = "ADD_TREATMENT_PLAN_ITEM"
    UPDATE_TREATMENT_PLAN_ITEM = "UPDATE_TREATMENT_PLAN_ITEM"
    DELETE_TREATMENT_PLAN_ITEM = "DELETE_TREATMENT_PLAN_ITEM"
    ADD_DOCUMENT = "ADD_DOCUMENT"
    DELETE_DOCUMENT = "DELETE_DOCUMENT"


class BaseAction(DentalModel):
    """
    Base class for actions.

    `payload_field` names the attribute that receives the whole wire payload
    for actions whose payload is a single entity (e.g. ADD_PATIENT).
    """
    payload_field: ClassVar[Optional[str]] = None


# =============================================================================
# SESSION AND SETTINGS
# =============================================================================


class SetUser(BaseAction):
    payload_field: ClassVar[Optional[str]] = "user"
    type: Literal[ActionType.SET_USER] = ActionType.SET_USER
    user: User


class Logout(BaseAction):
    type: Literal[ActionType.LOGOUT] = ActionType.LOGOUT


class UpdateSettings(BaseAction):
    """Shallow merge; only the fields actually supplied with a value are applied."""
    type: Literal[ActionType.UPDATE_SETTINGS] = ActionType.UPDATE_SETTINGS
    clinic_name: Optional[str] = None
    clinic_contact_number: Optional[str] = None
    clinic_logo: Optional[str] = None
    clinic_address: Optional[str] = None
    whatsapp_templates: Optional[WhatsAppTemplates] = None

    def changes(self) -> dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name != "type" and getattr(self, name) is not None
        }


# =============================================================================
# TOP-LEVEL COLLECTIONS
# =============================================================================


class AddPatient(BaseAction):
    payload_field: ClassVar[Optional[str]] = "patient"
    type: Literal[ActionType.ADD_PATIENT] = ActionType.ADD_PATIENT
    patient: Patient


class UpdatePatient(BaseAction):
    payload_field: ClassVar[Optional[str]] = "patient"
    type: Literal[ActionType.UPDATE_PATIENT] = ActionType.UPDATE_PATIENT
    patient: Patient


class AddAppointment(BaseAction):
    payload_field: ClassVar[Optional[str]] = "appointment"
    type: Literal[ActionType.ADD_APPOINTMENT] = ActionType.ADD_APPOINTMENT
    appointment: Appointment


class UpdateAppointment(BaseAction):
    payload_field: ClassVar[Optional[str]] = "appointment"
    type: Literal[ActionType.UPDATE_APPOINTMENT] = ActionType.UPDATE_APPOINTMENT
    appointment: Appointment


class DeleteAppointment(BaseAction):
    type: Literal[ActionType.DELETE_APPOINTMENT] = ActionType.DELETE_APPOINTMENT
    id: str


class AddTransaction(BaseAction):
    payload_field: ClassVar[Optional[str]] = "transaction"
    type: Literal[ActionType.ADD_TRANSACTION] = ActionType.ADD_TRANSACTION
    transaction: FinancialTransaction


class UpdateTransaction(BaseAction):
    payload_field: ClassVar[Optional[str]] = "transaction"
    type: Literal[ActionType.UPDATE_TRANSACTION] = ActionType.UPDATE_TRANSACTION
    transaction: FinancialTransaction


class DeleteTransaction(BaseAction):
    type: Literal[ActionType.DELETE_TRANSACTION] = ActionType.DELETE_TRANSACTION
    id: str


class AddShortcut(BaseAction):
    payload_field: ClassVar[Optional[str]] = "shortcut"
    type: Literal[ActionType.ADD_SHORTCUT] = ActionType.ADD_SHORTCUT
    shortcut: Shortcut


class DeleteShortcut(BaseAction):
    type: Literal[ActionType.DELETE_SHORTCUT] = ActionType.DELETE_SHORTCUT
    id: str


# =============================================================================
# PATIENT-SCOPED ACTIONS
# =============================================================================


class AddPrescription(BaseAction):
    type: Literal[ActionType.ADD_PRESCRIPTION] = ActionType.ADD_PRESCRIPTION
    patient_id: str
    prescription: Prescription


class UpdatePrescription(BaseAction):
    type: Literal[ActionType.UPDATE_PRESCRIPTION] = ActionType.UPDATE_PRESCRIPTION
    patient_id: str
    prescription: Prescription


class DeletePrescription(BaseAction):
    type: Literal[ActionType.DELETE_PRESCRIPTION] = ActionType.DELETE_PRESCRIPTION
    patient_id: str
    prescription_id: str


class AddBilling(BaseAction):
    """Append a billing entry, optionally marking a plan item as billed."""
    type: Literal[ActionType.ADD_BILLING] = ActionType.ADD_BILLING
    patient_id: str
    billing: BillingEntry
    treatment_plan_item_id: Optional[str] = None


class UpdateBilling(BaseAction):
    """Change the status of a billing entry."""
    type: Literal[ActionType.UPDATE_BILLING] = ActionType.UPDATE_BILLING
    patient_id: str
    billing_id: str
    status: BillingStatus


class UpdateBillingItem(BaseAction):
    """Replace a billing entry wholesale (edits, not payments)."""
    type: Literal[ActionType.UPDATE_BILLING_ITEM] = ActionType.UPDATE_BILLING_ITEM
    patient_id: str
    billing_item: BillingEntry


class AddCaseNote(BaseAction):
    type: Literal[ActionType.ADD_CASE_NOTE] = ActionType.ADD_CASE_NOTE
    patient_id: str
    case_note: CaseNote


class AddGeneralNote(BaseAction):
    type: Literal[ActionType.ADD_GENERAL_NOTE] = ActionType.ADD_GENERAL_NOTE
    patient_id: str
    note: CaseNote


class UpdateDentalChart(BaseAction):
    """Carries the complete chart for the patient, not a single tooth."""
    type: Literal[ActionType.UPDATE_DENTAL_CHART] = ActionType.UPDATE_DENTAL_CHART
    patient_id: str
    chart_data: dict[str, ToothRecord]


class AddTreatmentPlanItem(BaseAction):
    type: Literal[ActionType.ADD_TREATMENT_PLAN_ITEM] = ActionType.ADD_TREATMENT_PLAN_ITEM
    patient_id: str
    item: TreatmentPlanItem


class UpdateTreatmentPlanItem(BaseAction):
    type: Literal[ActionType.UPDATE_TREATMENT_PLAN_ITEM] = ActionType.UPDATE_TREATMENT_PLAN_ITEM
    patient_id: str
    item: TreatmentPlanItem


class DeleteTreatmentPlanItem(BaseAction):
    type: Literal[ActionType.DELETE_TREATMENT_PLAN_ITEM] = ActionType.DELETE_TREATMENT_PLAN_ITEM
    patient_id: str
    item_id: str


class AddDocument(BaseAction):
    type: Literal[ActionType.ADD_DOCUMENT] = ActionType.ADD_DOCUMENT
    patient_id: str
    document: Document


class DeleteDocument(BaseAction):
    type: Literal[ActionType.DELETE_DOCUMENT] = ActionType.DELETE_DOCUMENT
    patient_id: str
    document_id: str


Action = Annotated[
    Union[
        SetUser,
        Logout,
        UpdateSettings,
        AddPatient,
        UpdatePatient,
        AddAppointment,
        UpdateAppointment,
        DeleteAppointment,
        AddTransaction,
        UpdateTransaction,
        DeleteTransaction,
        AddShortcut,
        DeleteShortcut,
        AddPrescription,
        UpdatePrescription,
        DeletePrescription,
        AddBilling,
        UpdateBilling,
        UpdateBillingItem,
        AddCaseNote,
        AddGeneralNote,
        UpdateDentalChart,
        AddTreatmentPlanItem,
        UpdateTreatmentPlanItem,
        DeleteTreatmentPlanItem,
        AddDocument,
        DeleteDocument,
    ],
    Field(discriminator="type"),
]

ACTION_MODELS: dict[ActionType, type[BaseAction]] = {
    model.model_fields["type"].default: model
    for model in get_args(get_args(Action)[0])
}


def parse_action(data: dict[str, Any]) -> BaseAction:
    """
    Build a typed action from its wire form.

    Raises ValueError for an unknown type and pydantic's ValidationError
    for a payload that does not fit the action.
    """
    action_type = ActionType(data.get("type"))
    model = ACTION_MODELS[action_type]
    payload = data.get("payload") or {}

    if model.payload_field:
        return model.model_validate({model.payload_field: payload})
    return model.model_validate(payload)
