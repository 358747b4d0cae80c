"""
Colour assignment for owning entities (clubs, zones, districts).

Each entity id hashes onto one slot of a small fixed palette. Within one
rendered view, assign_colors() walks the visible ids in a stable order and
re-hashes an id with a salt ("{id}-{attempt}") when its slot is already taken
by an earlier id, so that entities on screen together are told apart. The
assignment is only deterministic for a given visible set; the same id may get
a different colour in a view containing different entities.
"""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class EntityColor:
    bg: str
    text: str
    border: str
    bg_hex: str
    text_hex: str
    border_hex: str

    def to_dict(self) -> dict:
        return {
            'bg': self.bg,
            'text': self.text,
            'border': self.border,
            'bgColor': self.bg_hex,
            'textColor': self.text_hex,
            'borderColor': self.border_hex,
        }


PALETTE = (
    EntityColor('bg-blue-100', 'text-blue-800', 'bg-blue-500', '#dbeafe', '#1e40af', '#3b82f6'),
    EntityColor('bg-green-100', 'text-green-800', 'bg-green-500', '#dcfce7', '#166534', '#22c55e'),
    EntityColor('bg-purple-100', 'text-purple-800', 'bg-purple-500', '#f3e8ff', '#6b21a8', '#a855f7'),
    EntityColor('bg-orange-100', 'text-orange-800', 'bg-orange-500', '#ffedd5', '#9a3412', '#f97316'),
    EntityColor('bg-pink-100', 'text-pink-800', 'bg-pink-500', '#fce7f3', '#9d174d', '#ec4899'),
    EntityColor('bg-indigo-100', 'text-indigo-800', 'bg-indigo-500', '#e0e7ff', '#3730a3', '#6366f1'),
    EntityColor('bg-teal-100', 'text-teal-800', 'bg-teal-500', '#ccfbf1', '#115e59', '#14b8a6'),
    EntityColor('bg-amber-100', 'text-amber-800', 'bg-amber-500', '#fef3c7', '#92400e', '#f59e0b'),
)

# Used for events whose owner id is missing
DEFAULT_COLOR = EntityColor('bg-gray-100', 'text-gray-800', 'bg-gray-500', '#f3f4f6', '#1f2937', '#6b7280')

MAX_RETRIES = 16


def _utf16_units(value: str):
    for char in value:
        code = ord(char)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 + (code >> 10)
            yield 0xDC00 + (code & 0x3FF)
        else:
            yield code


def entity_hash(value: str) -> int:
    """hash*31 + code unit over the string, wrapped to a signed 32-bit integer."""
    result = 0
    for unit in _utf16_units(value):
        result = (result * 31 + unit) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return result


def palette_slot(entity_id: str, attempt: int = 0, palette_size: int = len(PALETTE)) -> int:
    """Palette index for an id; attempt > 0 salts the id as '{id}-{attempt}'."""
    key = entity_id if attempt == 0 else f"{entity_id}-{attempt}"
    return abs(entity_hash(key)) % palette_size


def assign_slots(entity_ids: Iterable[str], max_retries: int = MAX_RETRIES,
                 palette_size: int = len(PALETTE)) -> dict[str, int]:
    """
    Assign palette slots to the ids visible in one render.

    Ids are visited in sorted order. A collision is retried with salted
    hashes up to max_retries times; when every retry collides the unsalted
    slot is kept.
    """
    slots = {}
    claimed = set()

    for entity_id in sorted({entity_id for entity_id in entity_ids if entity_id}):
        slot = palette_slot(entity_id, palette_size=palette_size)
        if slot in claimed:
            for attempt in range(1, max_retries + 1):
                salted = palette_slot(entity_id, attempt, palette_size)
                if salted not in claimed:
                    slot = salted
                    break
        slots[entity_id] = slot
        claimed.add(slot)

    return slots


def assign_colors(entity_ids: Iterable[str], max_retries: int = MAX_RETRIES) -> dict[str, EntityColor]:
    """Map each visible entity id to its colour for this render."""
    return {
        entity_id: PALETTE[slot]
        for entity_id, slot in assign_slots(entity_ids, max_retries).items()
    }
