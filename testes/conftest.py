import json
import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wp2md.utils import errors

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")


@pytest.fixture(autouse=True)
def report_dir(tmp_path, monkeypatch):
    """Keep JSONL reports of every test inside its own temporary directory."""
    path = tmp_path / "reports"
    monkeypatch.setattr(errors, "_REPORT_DIR", str(path))
    return path


@pytest.fixture
def read_report(report_dir):
    """Return the entries of one report file (``warnings``, ``errors``, ``success``)."""

    def _read(name):
        path = report_dir / f"{name}.jsonl"
        if not path.exists():
            return []
        with open(path, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    return _read


@pytest.fixture
def export_path():
    return os.path.join(DATA_DIR, "export.xml")
