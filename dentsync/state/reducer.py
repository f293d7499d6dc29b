"""
The DentSync reducer.

`reduce(state, action)` maps the current state snapshot and one action to
the next snapshot. It never mutates its input and never raises: an action it
does not know, or one that refers to an id that does not exist, yields the
very same state object back.

Cross-entity rules live here:
- marking a billing entry Paid appends exactly one income transaction;
- adding a billing entry linked to a treatment-plan item latches the item's
  `is_billed` flag.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence, TypeVar

from dentsync.models import (
    AppState,
    BillingEntry,
    BillingStatus,
    FinancialTransaction,
    Patient,
    TransactionType,
    generate_id,
)

from .actions import (
    ACTION_MODELS,
    ActionType,
    AddAppointment,
    AddBilling,
    AddCaseNote,
    AddDocument,
    AddGeneralNote,
    AddPatient,
    AddPrescription,
    AddShortcut,
    AddTransaction,
    AddTreatmentPlanItem,
    BaseAction,
    DeleteAppointment,
    DeleteDocument,
    DeletePrescription,
    DeleteShortcut,
    DeleteTransaction,
    DeleteTreatmentPlanItem,
    Logout,
    SetUser,
    UpdateAppointment,
    UpdateBilling,
    UpdateBillingItem,
    UpdateDentalChart,
    UpdatePatient,
    UpdatePrescription,
    UpdateSettings,
    UpdateTransaction,
    UpdateTreatmentPlanItem,
)

logger = logging.getLogger(__name__)

PAYMENT_CATEGORY = "Patient Payment"

T = TypeVar("T")
Handler = Callable[[AppState, BaseAction, datetime], AppState]

_HANDLERS: dict[ActionType, Handler] = {}


def _handles(action_type: ActionType) -> Callable[[Handler], Handler]:
    def register(handler: Handler) -> Handler:
        _HANDLERS[action_type] = handler
        return handler
    return register


def reduce(state: AppState, action: BaseAction, now: datetime | None = None) -> AppState:
    """
    Apply one action to the state.

    Args:
        state: The current snapshot
        action: The action to apply
        now: Clock reading used for synthesized records (defaults to now)

    Returns:
        The next snapshot, or `state` itself when nothing changed
    """
    action_type = getattr(action, "type", None)
    handler = _HANDLERS.get(action_type) if isinstance(action_type, ActionType) else None
    if handler is None or not isinstance(action, ACTION_MODELS[action_type]):
        logger.debug("Ignoring unrecognised action %r", action)
        return state
    return handler(state, action, now or datetime.now())


# =============================================================================
# COLLECTION HELPERS
# =============================================================================


def _replace_by_id(items: Sequence[T], replacement: T) -> Sequence[T]:
    """New list with the item sharing `replacement`'s id swapped out."""
    for index, item in enumerate(items):
        if item.id == replacement.id:
            return [*items[:index], replacement, *items[index + 1:]]
    return items


def _remove_by_id(items: Sequence[T], item_id: str) -> Sequence[T]:
    kept = [item for item in items if item.id != item_id]
    if len(kept) == len(items):
        return items
    return kept


def _update_patient(
    state: AppState,
    patient_id: str,
    change: Callable[[Patient], Patient],
) -> AppState:
    """Apply `change` to one patient, leaving every other patient untouched."""
    for index, patient in enumerate(state.patients):
        if patient.id == patient_id:
            updated = change(patient)
            if updated is patient:
                return state
            patients = [*state.patients[:index], updated, *state.patients[index + 1:]]
            return state.model_copy(update={"patients": patients})
    return state


def _update_patient_field(
    state: AppState,
    patient_id: str,
    field: str,
    change: Callable,
) -> AppState:
    def apply(patient: Patient) -> Patient:
        current = getattr(patient, field)
        updated = change(current)
        if updated is current:
            return patient
        return patient.model_copy(update={field: updated})

    return _update_patient(state, patient_id, apply)


def _set_collection(state: AppState, field: str, items: Sequence) -> AppState:
    if items is getattr(state, field):
        return state
    return state.model_copy(update={field: items})


# =============================================================================
# SESSION AND SETTINGS
# =============================================================================


@_handles(ActionType.SET_USER)
def _set_user(state: AppState, action: SetUser, now: datetime) -> AppState:
    return state.model_copy(update={
        "is_authenticated": True,
        "is_auth_loading": False,
        "user": action.user,
    })


@_handles(ActionType.LOGOUT)
def _logout(state: AppState, action: Logout, now: datetime) -> AppState:
    return state.model_copy(update={
        "is_authenticated": False,
        "is_auth_loading": False,
        "user": None,
    })


@_handles(ActionType.UPDATE_SETTINGS)
def _update_settings(state: AppState, action: UpdateSettings, now: datetime) -> AppState:
    changes = action.changes()
    if not changes:
        return state
    return state.model_copy(update=changes)


# =============================================================================
# PATIENTS, APPOINTMENTS, TRANSACTIONS, SHORTCUTS
# =============================================================================


@_handles(ActionType.ADD_PATIENT)
def _add_patient(state: AppState, action: AddPatient, now: datetime) -> AppState:
    return state.model_copy(update={"patients": [*state.patients, action.patient]})


@_handles(ActionType.UPDATE_PATIENT)
def _update_patient_record(state: AppState, action: UpdatePatient, now: datetime) -> AppState:
    # Replace only; an unknown id is not an upsert.
    return _set_collection(state, "patients", _replace_by_id(state.patients, action.patient))


@_handles(ActionType.ADD_APPOINTMENT)
def _add_appointment(state: AppState, action: AddAppointment, now: datetime) -> AppState:
    return state.model_copy(update={"appointments": [*state.appointments, action.appointment]})


@_handles(ActionType.UPDATE_APPOINTMENT)
def _update_appointment(state: AppState, action: UpdateAppointment, now: datetime) -> AppState:
    return _set_collection(
        state, "appointments", _replace_by_id(state.appointments, action.appointment)
    )


@_handles(ActionType.DELETE_APPOINTMENT)
def _delete_appointment(state: AppState, action: DeleteAppointment, now: datetime) -> AppState:
    return _set_collection(state, "appointments", _remove_by_id(state.appointments, action.id))


@_handles(ActionType.ADD_TRANSACTION)
def _add_transaction(state: AppState, action: AddTransaction, now: datetime) -> AppState:
    return state.model_copy(update={"transactions": [*state.transactions, action.transaction]})


@_handles(ActionType.UPDATE_TRANSACTION)
def _update_transaction(state: AppState, action: UpdateTransaction, now: datetime) -> AppState:
    return _set_collection(
        state, "transactions", _replace_by_id(state.transactions, action.transaction)
    )


@_handles(ActionType.DELETE_TRANSACTION)
def _delete_transaction(state: AppState, action: DeleteTransaction, now: datetime) -> AppState:
    return _set_collection(state, "transactions", _remove_by_id(state.transactions, action.id))


@_handles(ActionType.ADD_SHORTCUT)
def _add_shortcut(state: AppState, action: AddShortcut, now: datetime) -> AppState:
    return state.model_copy(update={"shortcuts": [*state.shortcuts, action.shortcut]})


@_handles(ActionType.DELETE_SHORTCUT)
def _delete_shortcut(state: AppState, action: DeleteShortcut, now: datetime) -> AppState:
    return _set_collection(state, "shortcuts", _remove_by_id(state.shortcuts, action.id))


# =============================================================================
# PRESCRIPTIONS
# =============================================================================


@_handles(ActionType.ADD_PRESCRIPTION)
def _add_prescription(state: AppState, action: AddPrescription, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "prescriptions",
        lambda items: [*items, action.prescription],
    )


@_handles(ActionType.UPDATE_PRESCRIPTION)
def _update_prescription(state: AppState, action: UpdatePrescription, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "prescriptions",
        lambda items: _replace_by_id(items, action.prescription),
    )


@_handles(ActionType.DELETE_PRESCRIPTION)
def _delete_prescription(state: AppState, action: DeletePrescription, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "prescriptions",
        lambda items: _remove_by_id(items, action.prescription_id),
    )


# =============================================================================
# BILLING
# =============================================================================


def _payment_transaction(patient: Patient, entry: BillingEntry, now: datetime) -> FinancialTransaction:
    """Income record for a billing entry that has just been paid."""
    return FinancialTransaction(
        id=generate_id(),
        date=now.date().isoformat(),
        type=TransactionType.INCOME,
        category=PAYMENT_CATEGORY,
        description=f'Payment from {patient.full_name} for "{entry.description}"',
        amount=entry.amount,
    )


@_handles(ActionType.ADD_BILLING)
def _add_billing(state: AppState, action: AddBilling, now: datetime) -> AppState:
    def apply(patient: Patient) -> Patient:
        update = {"billing": [*patient.billing, action.billing]}
        if action.treatment_plan_item_id:
            # A missing plan item leaves the plan as it was; the entry is still added.
            update["treatment_plan"] = [
                item.model_copy(update={"is_billed": True})
                if item.id == action.treatment_plan_item_id else item
                for item in patient.treatment_plan
            ]
        return patient.model_copy(update=update)

    return _update_patient(state, action.patient_id, apply)


@_handles(ActionType.UPDATE_BILLING)
def _update_billing_status(state: AppState, action: UpdateBilling, now: datetime) -> AppState:
    patient = state.get_patient(action.patient_id)
    if patient is None:
        return state
    entry = patient.get_billing(action.billing_id)
    if entry is None or entry.status == action.status:
        return state

    billing = _replace_by_id(patient.billing, entry.model_copy(update={"status": action.status}))
    state = _update_patient(
        state, patient.id, lambda p: p.model_copy(update={"billing": billing})
    )

    # entry.status differs from action.status here, so this is a real Pending -> Paid move
    if action.status == BillingStatus.PAID:
        transaction = _payment_transaction(patient, entry, now)
        state = state.model_copy(update={"transactions": [*state.transactions, transaction]})
        logger.info(
            "Recorded payment of %.2f from patient %s (billing %s)",
            entry.amount, patient.id, entry.id,
        )
    return state


@_handles(ActionType.UPDATE_BILLING_ITEM)
def _update_billing_item(state: AppState, action: UpdateBillingItem, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "billing",
        lambda items: _replace_by_id(items, action.billing_item),
    )


# =============================================================================
# NOTES AND DENTAL CHART
# =============================================================================


@_handles(ActionType.ADD_CASE_NOTE)
def _add_case_note(state: AppState, action: AddCaseNote, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "case_notes",
        lambda notes: [*notes, action.case_note],
    )


@_handles(ActionType.ADD_GENERAL_NOTE)
def _add_general_note(state: AppState, action: AddGeneralNote, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "general_notes",
        lambda notes: [*notes, action.note],
    )


@_handles(ActionType.UPDATE_DENTAL_CHART)
def _update_dental_chart(state: AppState, action: UpdateDentalChart, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "dental_chart",
        lambda chart: dict(action.chart_data),
    )


# =============================================================================
# TREATMENT PLAN AND DOCUMENTS
# =============================================================================


@_handles(ActionType.ADD_TREATMENT_PLAN_ITEM)
def _add_plan_item(state: AppState, action: AddTreatmentPlanItem, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "treatment_plan",
        lambda items: [*items, action.item],
    )


@_handles(ActionType.UPDATE_TREATMENT_PLAN_ITEM)
def _update_plan_item(state: AppState, action: UpdateTreatmentPlanItem, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "treatment_plan",
        lambda items: _replace_by_id(items, action.item),
    )


@_handles(ActionType.DELETE_TREATMENT_PLAN_ITEM)
def _delete_plan_item(state: AppState, action: DeleteTreatmentPlanItem, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "treatment_plan",
        lambda items: _remove_by_id(items, action.item_id),
    )


@_handles(ActionType.ADD_DOCUMENT)
def _add_document(state: AppState, action: AddDocument, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "documents",
        lambda docs: [*docs, action.document],
    )


@_handles(ActionType.DELETE_DOCUMENT)
def _delete_document(state: AppState, action: DeleteDocument, now: datetime) -> AppState:
    return _update_patient_field(
        state, action.patient_id, "documents",
        lambda docs: _remove_by_id(docs, action.document_id),
    )
