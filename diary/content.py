"""Answer slots of a diary entry.

A `ContentField` is one answer: either free text or the filename of a voice
recording owned by the audio store.  `DiaryContentFields` groups the nine
optional answers of the diary template and is what gets stored as a single
JSON blob next to the entry's scalar columns.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class ContentField:
    """A single answer. When `is_audio` is true, `content` is a filename."""

    is_audio: bool = False
    content: str = ""

    @classmethod
    def text(cls, content: str) -> "ContentField":
        return cls(is_audio=False, content=content)

    @classmethod
    def audio(cls, filename: str) -> "ContentField":
        return cls(is_audio=True, content=filename)

    @property
    def is_empty(self) -> bool:
        return not self.content

    @property
    def audio_filename(self) -> Optional[str]:
        """Filename of the attached recording, or None for text/empty fields."""
        if self.is_audio and self.content:
            return self.content
        return None

    def to_dict(self) -> dict:
        return {'is_audio': self.is_audio, 'content': self.content}

    @classmethod
    def from_dict(cls, data) -> "ContentField":
        if not isinstance(data, dict):
            raise ValueError(f"Content field must be an object, got {type(data).__name__}")
        is_audio = data.get('is_audio', False)
        content = data.get('content', "")
        if not isinstance(is_audio, bool):
            raise ValueError("'is_audio' must be a boolean")
        if not isinstance(content, str):
            raise ValueError("'content' must be a string")
        return cls(is_audio=is_audio, content=content)


# Display labels, in template order
SLOT_LABELS = {
    'situation': 'Situation',
    'physical_awareness': 'Physical Awareness',
    'thoughts': 'Thoughts',
    'feelings': 'Feelings',
    'action_taken': 'Action Taken',
    'wants': 'Wants',
    'facts': 'Facts',
    'underlying_need': 'Underlying Need',
    'result': 'Result',
}


@dataclass
class DiaryContentFields:
    """The nine optional answers of the diary template. None means unanswered."""

    situation: Optional[ContentField] = None
    physical_awareness: Optional[ContentField] = None
    thoughts: Optional[ContentField] = None
    feelings: Optional[ContentField] = None
    action_taken: Optional[ContentField] = None
    wants: Optional[ContentField] = None
    facts: Optional[ContentField] = None
    underlying_need: Optional[ContentField] = None
    result: Optional[ContentField] = None

    def items(self) -> Iterator[Tuple[str, Optional[ContentField]]]:
        for slot in SLOT_NAMES:
            yield slot, getattr(self, slot)

    def audio_filenames(self) -> List[str]:
        """Filenames of all non-empty audio answers, in template order."""
        return [field.audio_filename for _, field in self.items()
                if field is not None and field.audio_filename]

    def to_dict(self) -> dict:
        return {slot: field.to_dict() for slot, field in self.items() if field is not None}

    @classmethod
    def from_dict(cls, data) -> "DiaryContentFields":
        if not isinstance(data, dict):
            raise ValueError(f"Content fields must be an object, got {type(data).__name__}")
        decoded = {}
        for slot in SLOT_NAMES:
            value = data.get(slot)
            # Unknown keys are skipped so newer blobs still load
            decoded[slot] = None if value is None else ContentField.from_dict(value)
        return cls(**decoded)

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict(), ensure_ascii=False).encode('utf-8')

    @classmethod
    def from_json(cls, blob: bytes) -> "DiaryContentFields":
        return cls.from_dict(json.loads(blob))


SLOT_NAMES = tuple(f.name for f in fields(DiaryContentFields))
