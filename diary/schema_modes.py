"""Schema therapy modes used to tag diary entries.

Entries store the mode's raw string value, not an index, so the values below
are part of the storage format.  Renaming or removing a member makes older
entries fall back to `DEFAULT_SCHEMA_MODE` when read.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import List, Optional, Tuple


class SchemaMode(str, Enum):
    # Child modes
    VULNERABLE = 'Vulnerable'
    ANGRY = 'Angry'

    # Coping modes
    COMPLIANT_SURRENDERER = 'Compliant Surrenderer'
    DETACHED_PROTECTOR = 'Detached Protector'
    AVOIDANT_PROTECTOR = 'Avoidant Protector'
    ANGRY_PROTECTOR = 'Angry Protector'
    DETACHED_SELF_SOOTHER = 'Detached Self-Soother'
    SUSPICIOUS_OVER_CONTROLLER = 'Suspicious Over-Controller'
    BULLY_AND_ATTACK = 'Bully and Attack'
    SELF_AGGRANDIZER = 'Self-Aggrandizer'
    PERFECTIONISM = 'Perfectionism'
    PLEASING = 'Pleasing'

    # Parent modes
    PUNITIVE_PARENT = 'Punitive Parent'
    DEMANDING_PARENT = 'Demanding Parent'

    # Healthy modes
    HEALTHY_ADULT = 'Healthy Adult'
    HAPPY_CHILD = 'Happy Child'

    @property
    def category(self) -> "SchemaModeCategory":
        return category_for(self)


class SchemaModeCategory(str, Enum):
    CHILD = 'Child Modes'
    COPING = 'Coping Modes'
    PARENT = 'Parent Modes'
    HEALTHY = 'Healthy Mode'

    @property
    def modes(self) -> List[SchemaMode]:
        return modes_in(self)


DEFAULT_SCHEMA_MODE = SchemaMode.HEALTHY_ADULT

_CATEGORY_BY_MODE = MappingProxyType({
    SchemaMode.VULNERABLE: SchemaModeCategory.CHILD,
    SchemaMode.ANGRY: SchemaModeCategory.CHILD,
    SchemaMode.COMPLIANT_SURRENDERER: SchemaModeCategory.COPING,
    SchemaMode.DETACHED_PROTECTOR: SchemaModeCategory.COPING,
    SchemaMode.AVOIDANT_PROTECTOR: SchemaModeCategory.COPING,
    SchemaMode.ANGRY_PROTECTOR: SchemaModeCategory.COPING,
    SchemaMode.DETACHED_SELF_SOOTHER: SchemaModeCategory.COPING,
    SchemaMode.SUSPICIOUS_OVER_CONTROLLER: SchemaModeCategory.COPING,
    SchemaMode.BULLY_AND_ATTACK: SchemaModeCategory.COPING,
    SchemaMode.SELF_AGGRANDIZER: SchemaModeCategory.COPING,
    SchemaMode.PERFECTIONISM: SchemaModeCategory.COPING,
    SchemaMode.PLEASING: SchemaModeCategory.COPING,
    SchemaMode.PUNITIVE_PARENT: SchemaModeCategory.PARENT,
    SchemaMode.DEMANDING_PARENT: SchemaModeCategory.PARENT,
    SchemaMode.HEALTHY_ADULT: SchemaModeCategory.HEALTHY,
    SchemaMode.HAPPY_CHILD: SchemaModeCategory.HEALTHY,
})

if set(_CATEGORY_BY_MODE) != set(SchemaMode):
    raise RuntimeError("every schema mode needs a category")

_MODES_BY_CATEGORY = MappingProxyType({
    category: tuple(mode for mode in SchemaMode if _CATEGORY_BY_MODE[mode] is category)
    for category in SchemaModeCategory
})


def category_for(mode: SchemaMode) -> SchemaModeCategory:
    return _CATEGORY_BY_MODE[mode]


def modes_in(category: SchemaModeCategory) -> List[SchemaMode]:
    return list(_MODES_BY_CATEGORY[category])


def grouped_modes() -> List[Tuple[SchemaModeCategory, List[SchemaMode]]]:
    """All modes grouped by category, in presentation order."""
    return [(category, modes_in(category)) for category in SchemaModeCategory]


def parse_mode(raw) -> Optional[SchemaMode]:
    """Return the mode whose raw value is `raw`, or None if there is none."""
    if isinstance(raw, SchemaMode):
        return raw
    try:
        return SchemaMode(raw)
    except (ValueError, TypeError):
        return None


def resolve_mode(raw, fallback: SchemaMode = DEFAULT_SCHEMA_MODE) -> SchemaMode:
    mode = parse_mode(raw)
    return fallback if mode is None else mode
