"""Save, edit and delete flows for diary entries.

Entries only reference recordings by filename; the files themselves belong to
the audio store.  Every flow that can drop a reference compares the entry's
recordings before and after the change and deletes the ones no longer
referenced, so the recordings directory stays in step with the database.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from flask import current_app

from app.extensions import db
from .content import DiaryContentFields
from .models import DiaryEntry, UNTITLED
from .need_met import NeedMet
from .schema_modes import DEFAULT_SCHEMA_MODE, SchemaMode, parse_mode, resolve_mode


def resolve_title(title: Optional[str]) -> str:
    """Blank titles are saved as "Untitled"."""
    if title is None or not title.strip():
        return UNTITLED
    return title


def unreferenced_filenames(before: Iterable[str], after: Iterable[str]) -> Set[str]:
    """Recordings referenced in `before` but no longer in `after`."""
    return set(before) - set(after)


@dataclass
class EntryDraft:
    """In-memory working copy edited by a form before it is saved."""

    title: str = ''
    schema_mode: SchemaMode = DEFAULT_SCHEMA_MODE
    need_met: NeedMet = NeedMet.UNSURE
    content_fields: DiaryContentFields = field(default_factory=DiaryContentFields)

    @classmethod
    def from_entry(cls, entry: DiaryEntry) -> "EntryDraft":
        return cls(
            title=entry.title,
            schema_mode=resolve_mode(entry.schema_mode),
            need_met=entry.need_met,
            content_fields=entry.content_fields,
        )

    @classmethod
    def from_payload(cls, data) -> "EntryDraft":
        """Build a draft from request JSON. Raises ValueError on bad input."""
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")

        title = data.get('title', '')
        if title is None:
            title = ''
        if not isinstance(title, str):
            raise ValueError("'title' must be a string")

        raw_mode = data.get('schema_mode', DEFAULT_SCHEMA_MODE.value)
        mode = parse_mode(raw_mode)
        if mode is None:
            raise ValueError(f"Unknown schema mode: {raw_mode!r}")

        raw_need_met = data.get('need_met')
        if raw_need_met is None or isinstance(raw_need_met, bool):
            need_met = NeedMet.from_bool(raw_need_met)
        else:
            need_met = NeedMet.parse(raw_need_met)
        content_fields = DiaryContentFields.from_dict(data.get('fields') or {})
        return cls(title=title, schema_mode=mode, need_met=need_met, content_fields=content_fields)

    @property
    def audio_filenames(self) -> List[str]:
        return self.content_fields.audio_filenames()

    def apply_to(self, entry: DiaryEntry) -> None:
        """Copy every field of the draft onto `entry` in one step."""
        entry.title = resolve_title(self.title)
        entry.schema_mode = self.schema_mode.value
        entry.need_met = self.need_met
        entry.content_fields = self.content_fields


def _discard_recordings(audio, filenames: Iterable[str]) -> None:
    # Each deletion is independent; one failure must not stop the rest
    for filename in filenames:
        try:
            audio.delete_recording(filename)
        except Exception as exc:
            current_app.logger.warning("Failed to delete recording %s: %s", filename, exc)


def create_entry(draft: EntryDraft) -> DiaryEntry:
    """Persist a new entry built from `draft`."""
    entry = DiaryEntry(schema_mode=draft.schema_mode)
    draft.apply_to(entry)
    db.session.add(entry)
    db.session.commit()
    current_app.logger.info("Created diary entry %s", entry.id)
    return entry


def update_entry(entry: DiaryEntry, draft: EntryDraft, audio) -> Set[str]:
    """Apply an edit and delete the recordings it stopped referencing.

    Returns the set of deleted filenames. Nothing is deleted if the commit
    fails; the session is rolled back and the error propagates.
    """
    before = set(entry.audio_filenames)
    draft.apply_to(entry)
    after = set(entry.audio_filenames)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    removed = unreferenced_filenames(before, after)
    _discard_recordings(audio, removed)
    current_app.logger.info("Updated diary entry %s (%d recording(s) removed)", entry.id, len(removed))
    return removed


def delete_entry(entry: DiaryEntry, audio) -> List[str]:
    """Delete an entry together with all of its recordings."""
    filenames = entry.audio_filenames
    _discard_recordings(audio, filenames)

    db.session.delete(entry)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info("Deleted diary entry %s", entry.id)
    return filenames


def discard_draft(draft: EntryDraft, audio, entry: Optional[DiaryEntry] = None) -> Set[str]:
    """Throw away a cancelled draft and the recordings only it referenced.

    Recordings still referenced by any saved entry, including the one being
    edited, are kept.
    """
    kept = referenced_filenames()
    if entry is not None:
        kept.update(entry.audio_filenames)
    removed = unreferenced_filenames(draft.audio_filenames, kept)
    _discard_recordings(audio, removed)
    return removed


def referenced_filenames() -> Set[str]:
    """Every recording referenced by a live entry."""
    referenced = set()
    for entry in db.session.execute(db.select(DiaryEntry)).scalars():
        referenced.update(entry.audio_filenames)
    return referenced


def find_orphaned_recordings(audio, grace_seconds: Optional[float] = None) -> List[str]:
    """Recordings on disk that no entry references.

    Files modified within the last `grace_seconds` (default
    ``ORPHAN_GRACE_SECONDS``) may still belong to an unsaved draft and are
    skipped.
    """
    if grace_seconds is None:
        grace_seconds = current_app.config.get('ORPHAN_GRACE_SECONDS', 0)
    referenced = referenced_filenames()
    # The file being recorded right now is not referenced yet
    active = audio.current_recording_filename
    cutoff = time.time() - grace_seconds
    return [
        name for name in audio.list_recordings()
        if name not in referenced and name != active
        and (grace_seconds <= 0 or audio.modified_at(name) <= cutoff)
    ]


def find_missing_recordings(audio) -> List[str]:
    """Recordings referenced by an entry but absent from disk."""
    return sorted(name for name in referenced_filenames() if not audio.exists(name))


def prune_orphaned_recordings(audio, grace_seconds: Optional[float] = None) -> List[str]:
    orphans = find_orphaned_recordings(audio, grace_seconds)
    _discard_recordings(audio, orphans)
    return orphans
