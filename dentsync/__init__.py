"""
DentSync - dental practice management core.

Patient records, scheduling, billing and financial reporting for a single
clinic, kept in local storage.
"""

__version__ = "0.1.0"
