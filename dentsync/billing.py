"""
Billing review for treatment-plan items.

When a plan item is completed and has not been billed yet, the clinic is
offered a billing entry built from it. Confirming dispatches ADD_BILLING
with the item link, which latches the item's `is_billed` flag.
"""

from __future__ import annotations

from datetime import date

from dentsync.models import BillingEntry, BillingStatus, TreatmentPlanItem, TreatmentStatus
from dentsync.state import AddBilling, Store, UpdateBilling


def needs_billing_review(item: TreatmentPlanItem) -> bool:
    """A completed item that has not been billed yet."""
    return item.status == TreatmentStatus.COMPLETED and not item.is_billed


def billing_entry_for(item: TreatmentPlanItem, today: date | None = None) -> BillingEntry:
    """Pending billing entry charging for a plan item."""
    return BillingEntry(
        date=(today or date.today()).isoformat(),
        description=f"{item.procedure} (Tooth #{item.tooth or 'N/A'})",
        amount=item.cost,
        status=BillingStatus.PENDING,
    )


def bill_plan_item(
    store: Store,
    patient_id: str,
    item: TreatmentPlanItem,
    today: date | None = None,
) -> BillingEntry | None:
    """
    Add a billing entry for a plan item.

    Returns None without dispatching anything if the item is already billed.
    """
    if item.is_billed:
        return None
    entry = billing_entry_for(item, today)
    store.dispatch(AddBilling(
        patient_id=patient_id,
        billing=entry,
        treatment_plan_item_id=item.id,
    ))
    return entry


def mark_paid(store: Store, patient_id: str, billing_id: str) -> None:
    store.dispatch(UpdateBilling(
        patient_id=patient_id,
        billing_id=billing_id,
        status=BillingStatus.PAID,
    ))
