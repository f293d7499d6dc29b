"""
State core for DentSync: actions, reducer and the state container.
"""

from .actions import (
    ACTION_MODELS,
    Action,
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
    parse_action,
)
from .reducer import reduce
from .store import Store

__all__ = [
    "ACTION_MODELS",
    "Action",
    "ActionType",
    "AddAppointment",
    "AddBilling",
    "AddCaseNote",
    "AddDocument",
    "AddGeneralNote",
    "AddPatient",
    "AddPrescription",
    "AddShortcut",
    "AddTransaction",
    "AddTreatmentPlanItem",
    "BaseAction",
    "DeleteAppointment",
    "DeleteDocument",
    "DeletePrescription",
    "DeleteShortcut",
    "DeleteTransaction",
    "DeleteTreatmentPlanItem",
    "Logout",
    "SetUser",
    "Store",
    "UpdateAppointment",
    "UpdateBilling",
    "UpdateBillingItem",
    "UpdateDentalChart",
    "UpdatePatient",
    "UpdatePrescription",
    "UpdateSettings",
    "UpdateTransaction",
    "UpdateTreatmentPlanItem",
    "parse_action",
    "reduce",
]
