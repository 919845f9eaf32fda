"""Pytest configuration for backend tests.

Settings are read from the environment at import time, so the upload
directory and Mongo connection values are set before any app module loads.
The pymongo collection itself is replaced with a Mock per test.
"""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

UPLOAD_ROOT = tempfile.mkdtemp(prefix="track-uploads-")
os.environ["UPLOAD_DIR"] = UPLOAD_ROOT
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ["MONGO_TIMEOUT_MS"] = "50"

from repositories import track_repository  # noqa: E402


@pytest.fixture
def collection(monkeypatch):
    """Mock standing in for the tracks collection."""
    mock_collection = MagicMock()
    monkeypatch.setattr(track_repository, "TRACKS_COLLECTION", mock_collection)
    return mock_collection


@pytest.fixture
def upload_dir():
    """The configured upload directory, emptied after each test."""
    path = Path(UPLOAD_ROOT)
    yield path
    for entry in path.iterdir():
        if entry.is_dir():
            shutil.rmtree(entry)
        else:
            entry.unlink()
