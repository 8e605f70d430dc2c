"""Recording, playback and on-disk storage of diary voice recordings.

Recordings are stored in a private subdirectory of the documents directory
under a generated name (``<uuid>.m4a``).  Entries only keep that bare filename
in a `ContentField`; this module is the only place that turns it into a path.

Failures never raise past this module: operations report them through a
boolean or None return value and log what went wrong.
"""

from __future__ import annotations

import logging
import os
import threading
import uuid
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class MicrophonePermission(Enum):
    GRANTED = 'granted'
    DENIED = 'denied'
    UNDETERMINED = 'undetermined'


def _grant(manager: "AudioManager") -> bool:
    return True


class AudioManager:
    """Single-instance recorder and player bound to a recordings directory.

    One recording and one playback may be active at the same time; starting
    another of the same kind stops the previous one.
    """

    def __init__(self, app=None, permission_prompt: Callable[["AudioManager"], bool] = _grant):
        self.documents_dir: Optional[Path] = None
        self.subdirectory = 'UnwindRecordings'
        self.file_extension = 'm4a'
        self.permission_status = MicrophonePermission.UNDETERMINED
        self.permission_prompt = permission_prompt

        self._lock = threading.RLock()
        self._recording_file = None
        self._recording_filename: Optional[str] = None
        self.is_playing = False
        self.current_playback_filename: Optional[str] = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.stop_recording()
        self.stop_playback()
        self.documents_dir = Path(app.config.get('DOCUMENTS_DIR') or app.instance_path)
        self.subdirectory = app.config.get('RECORDINGS_SUBDIRECTORY', self.subdirectory)
        self.file_extension = app.config.get('AUDIO_FILE_EXTENSION', self.file_extension).lstrip('.')
        try:
            self.permission_status = MicrophonePermission(
                str(app.config.get('MICROPHONE_PERMISSION', 'undetermined')).lower())
        except ValueError:
            logger.warning("Unknown MICROPHONE_PERMISSION %r, treating as undetermined",
                           app.config.get('MICROPHONE_PERMISSION'))
            self.permission_status = MicrophonePermission.UNDETERMINED
        app.extensions['audio_manager'] = self

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    @property
    def recordings_directory(self) -> Path:
        """Directory holding the recordings, created on first use."""
        if self.documents_dir is None:
            raise RuntimeError("AudioManager is not bound to an application")
        directory = self.documents_dir / self.subdirectory
        if not directory.is_dir():
            directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        return directory

    def path_for(self, filename: str) -> Path:
        """Full path of a recording. Only bare filenames are accepted."""
        if not filename or secure_filename(filename) != filename:
            raise ValueError(f"Invalid recording filename: {filename!r}")
        return self.recordings_directory / filename

    def _new_filename(self) -> str:
        return f"{uuid.uuid4()}.{self.file_extension}"

    def list_recordings(self) -> List[str]:
        suffix = f".{self.file_extension}"
        return sorted(p.name for p in self.recordings_directory.iterdir()
                      if p.is_file() and p.name.endswith(suffix))

    def exists(self, filename: str) -> bool:
        try:
            return self.path_for(filename).is_file()
        except ValueError:
            return False

    def modified_at(self, filename: str) -> float:
        """Last modification time of a recording, as a POSIX timestamp."""
        return self.path_for(filename).stat().st_mtime

    # ------------------------------------------------------------------
    # Microphone permission
    # ------------------------------------------------------------------

    def request_microphone_permission(self, completion: Callable[[bool], None]) -> None:
        """Resolve microphone access and call `completion` once with the result.

        An undetermined status is settled by asking `permission_prompt`; the
        answer is remembered like an OS permission dialog.
        """
        with self._lock:
            if self.permission_status is MicrophonePermission.UNDETERMINED:
                try:
                    allowed = bool(self.permission_prompt(self))
                except Exception:
                    logger.exception("Microphone permission prompt failed")
                    allowed = False
                self.permission_status = (MicrophonePermission.GRANTED if allowed
                                          else MicrophonePermission.DENIED)
            granted = self.permission_status is MicrophonePermission.GRANTED
        completion(granted)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    @property
    def is_recording(self) -> bool:
        return self._recording_file is not None

    @property
    def current_recording_filename(self) -> Optional[str]:
        return self._recording_filename

    def start_recording(self) -> bool:
        """Start a new recording under a fresh filename.

        Returns False if microphone access is denied or the file cannot be
        created. A recording already in progress is stopped and discarded.
        """
        result = []
        self.request_microphone_permission(result.append)
        if not result[0]:
            logger.info("Recording not started: microphone permission denied")
            return False

        with self._lock:
            superseded = self.stop_recording()
            if superseded:
                logger.info("Discarding superseded recording %s", superseded)
                self.delete_recording(superseded)

            filename = self._new_filename()
            try:
                handle = open(self.path_for(filename), 'wb')
            except OSError as exc:
                logger.error("Could not start recording %s: %s", filename, exc)
                return False
            self._recording_file = handle
            self._recording_filename = filename
            logger.debug("Recording started: %s", filename)
            return True

    def write_chunk(self, data: bytes) -> bool:
        """Append captured audio to the active recording."""
        with self._lock:
            if self._recording_file is None:
                return False
            try:
                self._recording_file.write(data)
            except OSError as exc:
                logger.error("Could not write to recording %s: %s", self._recording_filename, exc)
                return False
            return True

    def stop_recording(self) -> Optional[str]:
        """Finish the active recording and return its filename, or None."""
        with self._lock:
            handle, filename = self._recording_file, self._recording_filename
            if handle is None:
                return None
            self._recording_file = None
            self._recording_filename = None
            try:
                handle.close()
            except OSError as exc:
                logger.error("Could not finalize recording %s: %s", filename, exc)
                return None
            logger.debug("Recording stopped: %s", filename)
            return filename

    def save_upload(self, stream, original_name: str = '') -> Optional[str]:
        """Store an already recorded file and return its generated filename."""
        if original_name and not original_name.lower().endswith(f".{self.file_extension}"):
            logger.info("Rejected upload %r: expected .%s", original_name, self.file_extension)
            return None
        filename = self._new_filename()
        try:
            with open(self.path_for(filename), 'wb') as handle:
                while True:
                    chunk = stream.read(64 * 1024)
                    if not chunk:
                        break
                    handle.write(chunk)
        except OSError as exc:
            logger.error("Could not store upload %s: %s", filename, exc)
            self.delete_recording(filename)
            return None
        return filename

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def play(self, filename: str) -> Optional[Path]:
        """Make `filename` the active playback and return its path.

        Any other playback is stopped first. Returns None if the recording
        does not exist.
        """
        with self._lock:
            self.stop_playback()
            try:
                path = self.path_for(filename)
            except ValueError as exc:
                logger.info("Playback refused: %s", exc)
                return None
            if not path.is_file():
                logger.info("Playback refused: %s does not exist", filename)
                return None
            self.is_playing = True
            self.current_playback_filename = filename
            return path

    def pause_playback(self) -> None:
        with self._lock:
            self.is_playing = False

    def resume_playback(self) -> None:
        with self._lock:
            if self.current_playback_filename is not None:
                self.is_playing = True

    def stop_playback(self) -> None:
        with self._lock:
            self.is_playing = False
            self.current_playback_filename = None

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_recording(self, filename: str) -> None:
        """Remove a recording from disk. Missing files are ignored."""
        with self._lock:
            if self.current_playback_filename == filename:
                self.stop_playback()
            if self._recording_filename == filename:
                self.stop_recording()
            try:
                path = self.path_for(filename)
            except ValueError as exc:
                logger.warning("Not deleting recording: %s", exc)
                return
            try:
                os.remove(path)
            except FileNotFoundError:
                return
            except OSError as exc:
                logger.warning("Could not delete recording %s: %s", filename, exc)
                return
            logger.debug("Deleted recording %s", filename)
