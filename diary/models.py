import logging
import uuid
from datetime import datetime, timezone

from app.extensions import db
from .content import DiaryContentFields
from .need_met import NeedMet
from .schema_modes import resolve_mode

logger = logging.getLogger(__name__)

UNTITLED = 'Untitled'


def _utcnow():
    return datetime.now(timezone.utc)


class _ContentSlot:
    """Read/write access to one answer slot of the entry's content blob."""

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, entry, owner=None):
        if entry is None:
            return self
        return getattr(entry.content_fields, self.name)

    def __set__(self, entry, value):
        fields = entry.content_fields
        setattr(fields, self.name, value)
        entry.content_fields = fields


class DiaryEntry(db.Model):
    """Diary entry model.

    Scalar metadata lives in regular columns; the nine answers are stored
    together as an encoded `DiaryContentFields` blob.
    """
    __tablename__ = 'diary_entries'

    id = db.Column(db.String(36), primary_key=True)
    date = db.Column(db.DateTime, nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False, default='')
    schema_mode = db.Column(db.String(100), nullable=False)
    was_need_met = db.Column(db.Boolean, nullable=True)
    content_fields_data = db.Column(db.LargeBinary, nullable=True)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    situation = _ContentSlot()
    physical_awareness = _ContentSlot()
    thoughts = _ContentSlot()
    feelings = _ContentSlot()
    action_taken = _ContentSlot()
    wants = _ContentSlot()
    facts = _ContentSlot()
    underlying_need = _ContentSlot()
    result = _ContentSlot()

    def __init__(self, schema_mode, content_fields=None, **kwargs):
        kwargs.setdefault('id', str(uuid.uuid4()))
        kwargs.setdefault('date', _utcnow())
        kwargs.setdefault('title', '')
        # Accept either a SchemaMode or its raw string
        raw_mode = getattr(schema_mode, 'value', schema_mode)
        super(DiaryEntry, self).__init__(schema_mode=raw_mode, **kwargs)
        self.content_fields = content_fields if content_fields is not None else DiaryContentFields()

    @property
    def content_fields(self):
        """Decoded answers. An absent or unreadable blob reads as no answers."""
        if not self.content_fields_data:
            return DiaryContentFields()
        try:
            return DiaryContentFields.from_json(self.content_fields_data)
        except (ValueError, TypeError, UnicodeDecodeError) as exc:
            logger.warning("Unreadable content fields on entry %s: %s", self.id, exc)
            return DiaryContentFields()

    @content_fields.setter
    def content_fields(self, value):
        self.content_fields_data = value.to_json()

    @property
    def audio_filenames(self):
        """Filenames of every recording referenced by this entry."""
        return self.content_fields.audio_filenames()

    @property
    def mode(self):
        return resolve_mode(self.schema_mode)

    @property
    def need_met(self):
        return NeedMet.from_bool(self.was_need_met)

    @need_met.setter
    def need_met(self, choice):
        self.was_need_met = choice.to_bool()

    @property
    def display_title(self):
        return self.title if self.title and self.title.strip() else UNTITLED

    def to_dict(self):
        """Return entry data as dictionary."""
        fields = self.content_fields
        mode = self.mode
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'title': self.title,
            'display_title': self.display_title,
            'schema_mode': self.schema_mode,
            'resolved_schema_mode': mode.value,
            'schema_mode_category': mode.category.value,
            'need_met': self.need_met.value,
            'fields': {
                slot: (field.to_dict() if field is not None else None)
                for slot, field in fields.items()
            },
            'audio_filenames': fields.audio_filenames(),
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<DiaryEntry {self.display_title}>'
