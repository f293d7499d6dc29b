"""
Section selection for patient reports.

Reports take a mapping of section name to bool. A missing mapping means
every section; a missing key means the section is left out.
"""

from __future__ import annotations

REPORT_SECTIONS = (
    "dental_chart",
    "treatment_plan",
    "prescriptions",
    "case_notes",
    "billing",
    "documents",
)

ReportSections = dict[str, bool]


def all_sections() -> ReportSections:
    return {name: True for name in REPORT_SECTIONS}


def parse_sections(names: str | None) -> ReportSections | None:
    """
    Build a selection from a comma-separated list of section names.

    Raises ValueError for a name that is not a report section.
    """
    if not names:
        return None
    chosen = [n.strip().replace("-", "_") for n in names.split(",") if n.strip()]
    unknown = [n for n in chosen if n not in REPORT_SECTIONS]
    if unknown:
        raise ValueError(f"Unknown report section(s): {', '.join(unknown)}")
    return {name: name in chosen for name in REPORT_SECTIONS}


def selected(sections: ReportSections | None, name: str) -> bool:
    if sections is None:
        return True
    return bool(sections.get(name, False))
