"""
Form shortcuts.

A shortcut is a saved value that pre-fills one of the clinic's forms. Each
category targets a different form and carries a different kind of value.
"""

from __future__ import annotations

from typing import Any

from dentsync.models import (
    AppState,
    BillingShortcut,
    DoctorShortcut,
    NoteShortcut,
    PrescriptionShortcut,
    Shortcut,
    ShortcutCategory,
)


# Suggestions offered before the clinic has saved any of its own
PREDEFINED_SHORTCUTS: dict[ShortcutCategory, list[str]] = {
    ShortcutCategory.PRESCRIPTIONS: [
        "Amoxicillin 500mg", "Ibuprofen 400mg", "Paracetamol 500mg", "Metronidazole 400mg",
    ],
    ShortcutCategory.BILLING: [
        "Consultation Fee", "X-Ray", "Scaling & Polishing", "Tooth Extraction", "Root Canal Treatment",
    ],
    ShortcutCategory.NOTES: [
        "RCT initiated on", "Patient advised for extraction of",
        "Caries excavation done on", "Follow-up after 1 week",
    ],
    ShortcutCategory.DOCTORS: ["Dr. Sharma", "Dr. Gupta"],
}


def prefill(shortcut: Shortcut) -> dict[str, Any]:
    """
    Form fields a shortcut fills in.

    Returns a mapping of field name to value for the shortcut's target form.
    """
    if isinstance(shortcut, NoteShortcut):
        return {"note": shortcut.value}
    if isinstance(shortcut, DoctorShortcut):
        return {"doctor": shortcut.value}
    if isinstance(shortcut, BillingShortcut):
        return {
            "description": shortcut.value.description,
            "amount": shortcut.value.amount,
        }
    if isinstance(shortcut, PrescriptionShortcut):
        return shortcut.value.model_dump(exclude_none=True)
    raise TypeError(f"Unknown shortcut type: {type(shortcut).__name__}")


def shortcuts_for(state: AppState, category: ShortcutCategory) -> list[Shortcut]:
    """Saved shortcuts of one category, in the order they were added."""
    return [s for s in state.shortcuts if s.category == category]


def suggestions_for(state: AppState, category: ShortcutCategory) -> list[str]:
    """Labels to offer for a text field: saved shortcuts first, then built-ins."""
    labels = []
    for shortcut in shortcuts_for(state, category):
        if isinstance(shortcut, BillingShortcut):
            labels.append(shortcut.value.description)
        elif isinstance(shortcut, PrescriptionShortcut):
            labels.append(shortcut.value.medication or "")
        else:
            labels.append(shortcut.value)
    labels.extend(label for label in PREDEFINED_SHORTCUTS[category] if label not in labels)
    return [label for label in labels if label]
