"""
Financial reporting over the DentSync state.

Read-only summaries for the financials page and the dashboard. Nothing here
changes the state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from dentsync.models import (
    AppState,
    BillingStatus,
    FinancialTransaction,
    Patient,
    TransactionType,
)


@dataclass
class FinancialSummary:
    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense


@dataclass
class MonthSummary:
    month: date  # first day of the month
    income: float = 0.0
    expense: float = 0.0

    @property
    def label(self) -> str:
        return self.month.strftime("%b")


@dataclass
class DashboardStats:
    patient_count: int
    appointments_today: int
    pending_bills: int
    outstanding: float
    income_this_month: float


def parse_date(value: str) -> date | None:
    """Parse the leading YYYY-MM-DD of a stored date; None if it isn't one."""
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


def filter_transactions(
    transactions: Iterable[FinancialTransaction],
    start: date | None = None,
    end: date | None = None,
) -> list[FinancialTransaction]:
    """
    Transactions dated within [start, end], both inclusive.

    Without both bounds every transaction is returned.
    """
    if start is None or end is None:
        return list(transactions)
    selected = []
    for transaction in transactions:
        when = parse_date(transaction.date)
        if when is not None and start <= when <= end:
            selected.append(transaction)
    return selected


def summarize(transactions: Iterable[FinancialTransaction]) -> FinancialSummary:
    summary = FinancialSummary()
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            summary.income += transaction.amount
        else:
            summary.expense += transaction.amount
    return summary


def total_outstanding(patients: Iterable[Patient]) -> float:
    """Total of all pending billing entries across patients."""
    return sum(
        entry.amount
        for patient in patients
        for entry in patient.billing
        if entry.status == BillingStatus.PENDING
    )


def _shift_month(month: date, offset: int) -> date:
    index = month.year * 12 + (month.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def monthly_summary(
    transactions: Iterable[FinancialTransaction],
    today: date | None = None,
    months: int = 6,
) -> list[MonthSummary]:
    """
    Income and expense per calendar month, oldest first.

    Covers the current month and the `months - 1` before it. Transactions
    with unparseable dates are left out.
    """
    current = (today or date.today()).replace(day=1)
    buckets = {
        _shift_month(current, -offset): MonthSummary(month=_shift_month(current, -offset))
        for offset in range(months - 1, -1, -1)
    }
    for transaction in transactions:
        when = parse_date(transaction.date)
        if when is None:
            continue
        bucket = buckets.get(when.replace(day=1))
        if bucket is None:
            continue
        if transaction.type == TransactionType.INCOME:
            bucket.income += transaction.amount
        else:
            bucket.expense += transaction.amount
    return list(buckets.values())


def dashboard_stats(state: AppState, today: date | None = None) -> DashboardStats:
    today = today or date.today()
    month_start = today.replace(day=1)
    this_month = filter_transactions(
        state.transactions, month_start, _shift_month(month_start, 1) - timedelta(days=1)
    )
    return DashboardStats(
        patient_count=len(state.patients),
        appointments_today=sum(1 for a in state.appointments if parse_date(a.date) == today),
        pending_bills=sum(
            1 for p in state.patients for b in p.billing if b.status == BillingStatus.PENDING
        ),
        outstanding=total_outstanding(state.patients),
        income_this_month=summarize(this_month).income,
    )
