"""
CSV exporter for the financial ledger.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from dentsync.models import FinancialTransaction

CSV_HEADERS = ["Date", "Type", "Category", "Description", "Amount (INR)"]


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def export_financials_csv(
    transactions: Iterable[FinancialTransaction],
    output_path: Path | None = None,
) -> str:
    """
    Export transactions as CSV, one row per transaction.

    Descriptions are always quoted; amounts have two decimals.
    """
    rows = [",".join(CSV_HEADERS)]
    for t in transactions:
        rows.append(",".join([
            t.date,
            t.type.value,
            t.category,
            _quote(t.description),
            f"{t.amount:.2f}",
        ]))
    csv_text = "\n".join(rows)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(csv_text, encoding="utf-8")

    return csv_text
