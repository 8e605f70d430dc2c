"""
Pytest configuration and shared fixtures.

Every test gets a fresh application with an in-memory SQLite database and
a temporary documents directory for recordings.
"""

import pytest

from app import create_app
from app.config import TestingConfig
from app.extensions import db


class FakeAudioStore:
    """Audio store double that records delete calls."""

    def __init__(self, failing=()):
        self.deleted = []
        self.failing = set(failing)
        self.current_recording_filename = None

    def delete_recording(self, filename):
        self.deleted.append(filename)
        if filename in self.failing:
            raise OSError(f"cannot delete {filename}")


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        DOCUMENTS_DIR = str(tmp_path / "documents")

    app = create_app(Config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def audio(app):
    return app.extensions["audio_manager"]


@pytest.fixture
def fake_audio():
    return FakeAudioStore()


@pytest.fixture
def make_recording(audio):
    """Create a recording file directly in the recordings directory."""

    def _make(filename, data=b"\x00\x01audio"):
        (audio.recordings_directory / filename).write_bytes(data)
        return filename

    return _make
