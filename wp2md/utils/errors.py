"""
Structured logging helpers and exceptions for the conversion.

The :mod:`wp2md.utils.errors` module centralizes the writing of log entries
for failed, skipped and successful operations during a conversion run.  Each
entry is appended to a JSON Lines file under ``reports/conversion`` so that
the information can be reviewed or parsed after a run.

Three public reporting functions are provided:

``report_error``
    Record an error that occurred for a post.  An optional exception can be
    supplied and will be serialized to the log.

``report_warning``
    Record a recoverable problem (an unresolved reference that was skipped).

``report_ok``
    Record a successful step for a post.  Additional key/value information can
    be attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
Reporting never raises: if the log file cannot be written the failure is
printed and the run goes on.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

# Mapping of event codes used throughout the conversion to descriptive
# messages.  The same lookup is used by all three reporting functions.
ERRORS: Dict[str, str] = {
    "ORPHAN_IMAGE": "Image belongs to no known post",
    "GALLERY_NOT_FOUND": "Could not find gallery referenced by shortcode",
    "IMAGE_NOT_FOUND": "Could not find image referenced by gallery",
    "GALLERY_IMAGE_REQUIRED": "Gallery shortcode references a missing image, post skipped",
    "IMAGE_DOWNLOAD": "Failed to download image",
    "POST_WRITTEN": "Post written successfully",
}

_REPORT_DIR = os.path.join("reports", "conversion")


class ConversionError(Exception):
    """Base class for errors raised by the conversion."""


class InvalidExportError(ConversionError, ValueError):
    """The export file or one of its required fields cannot be read."""


class UnresolvedImageError(ConversionError):
    """A shortcode lists an image id that has no attachment record."""

    def __init__(self, image_id: str, shortcode: str) -> None:
        super().__init__(f"Image {image_id} referenced by {shortcode} not found")
        self.image_id = image_id
        self.shortcode = shortcode


def _write_jsonl(filename: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``filename``."""
    path = os.path.join(_REPORT_DIR, filename)
    try:
        os.makedirs(_REPORT_DIR, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        print(f"[WARNING] Could not write report entry to {path}: {e}")


def _entry(code: str, post: Any) -> Dict[str, Any]:
    return {
        "code": code,
        "message": ERRORS.get(code, code),
        "id": getattr(post, "id", None),
        "slug": getattr(post, "slug", None),
        "language": getattr(post, "language", None),
    }


def report_error(code: str, post: Any, exc: Optional[Exception] = None) -> None:
    """Log an error event for ``post``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    post:
        The post associated with the error, or ``None``.  Only ``id``,
        ``slug`` and ``language`` are referenced if present.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry.
    """
    entry = _entry(code, post)
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {entry['message']} - {entry['slug'] or ''} {entry.get('error', '')}".rstrip())
    _write_jsonl("errors.jsonl", entry)


def report_warning(code: str, post: Any, detail: Optional[Dict[str, Any]] = None) -> None:
    """Log a recoverable problem for ``post``; ``detail`` is merged into the entry."""
    entry = _entry(code, post)
    if detail:
        entry.update(detail)
    details = " ".join(f"{k}={v}" for k, v in (detail or {}).items())
    print(f"[WARNING] {entry['message']} - {entry['slug'] or ''} {details}".rstrip())
    _write_jsonl("warnings.jsonl", entry)


def report_ok(code: str, post: Any, extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for ``post``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    post:
        The post associated with the event.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    """
    entry = _entry(code, post)
    if extra:
        entry.update(extra)
    print(f"[OK] {entry['message']} - {entry['slug'] or ''}")
    _write_jsonl("success.jsonl", entry)
