"""
Utility helpers used by the conversion tool.

This subpackage exposes convenience functions for structured logging,
URL/filename handling and image downloads.
"""

from .errors import ERRORS, report_error, report_ok, report_warning
from .urls import filename_from_url, markdown_image, resolve_url

__all__ = [
    "ERRORS",
    "report_error",
    "report_ok",
    "report_warning",
    "filename_from_url",
    "markdown_image",
    "resolve_url",
]
