"""
Export functionality for DentSync.
"""

from .csv_export import export_financials_csv
from .json_export import export_json, export_json_summary
from .markdown import export_markdown
from .messages import (
    appointment_confirmation_message,
    appointment_reminder_message,
    patient_report_message,
    render,
    report_summary,
)
from .sections import REPORT_SECTIONS, ReportSections, all_sections, parse_sections

__all__ = [
    "REPORT_SECTIONS",
    "ReportSections",
    "all_sections",
    "appointment_confirmation_message",
    "appointment_reminder_message",
    "export_financials_csv",
    "export_json",
    "export_json_summary",
    "export_markdown",
    "parse_sections",
    "patient_report_message",
    "render",
    "report_summary",
]
