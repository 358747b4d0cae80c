"""
Unit tests for entity colour assignment.
"""
import ctypes
import pytest
from collections import defaultdict

from clubcal.calendar.colors import (
    PALETTE, DEFAULT_COLOR, MAX_RETRIES,
    entity_hash, palette_slot, assign_slots, assign_colors
)


def reference_hash(value):
    """(hash << 5) - hash + code, truncated to int32 after every step."""
    result = 0
    for char in value:
        result = ctypes.c_int32((result << 5) - result + ord(char)).value
    return result


def colliding_ids(count=2):
    """Ids sharing one unsalted palette slot, in sorted order."""
    by_slot = defaultdict(list)
    for n in range(1000):
        entity_id = f'club-{n}'
        by_slot[palette_slot(entity_id)].append(entity_id)
    group = max(by_slot.values(), key=len)
    return sorted(group)[:count]


@pytest.mark.unit
class TestEntityHash:
    """Test cases for the string hash."""

    def test_known_values(self):
        """Test hashes of short strings."""
        assert entity_hash('') == 0
        assert entity_hash('a') == 97
        assert entity_hash('ab') == 3105

    @pytest.mark.parametrize('value', [
        'club-1',
        '3f2b1c9e-7d4a-4b8e-9a61-0c5d2e8f7a13',
        'a much longer identifier that overflows thirty two bits many times',
        'Zone É',
    ])
    def test_matches_wrapping_reference(self, value):
        """Test the hash wraps like signed 32-bit arithmetic."""
        assert entity_hash(value) == reference_hash(value)

    def test_hash_is_signed(self):
        """Test long strings can hash to negative values."""
        values = [entity_hash(f'entity-{n}-with-a-long-suffix') for n in range(50)]
        assert any(value < 0 for value in values)
        assert all(-2**31 <= value < 2**31 for value in values)

    def test_astral_characters_hash_as_surrogate_pairs(self):
        """Test characters outside the BMP count as two UTF-16 code units."""
        assert entity_hash('\U0001F600') == 0xD83D * 31 + 0xDE00


@pytest.mark.unit
class TestPaletteSlot:
    """Test cases for single id colour lookup."""

    def test_palette_has_eight_colors(self):
        """Test the palette size."""
        assert len(PALETTE) == 8

    def test_slot_from_hash(self):
        """Test the slot is the absolute hash modulo the palette size."""
        for entity_id in ['club-1', 'zone-7', 'district-3']:
            assert palette_slot(entity_id) == abs(entity_hash(entity_id)) % 8

    def test_salted_slot(self):
        """Test attempts hash the id with a numeric suffix."""
        assert palette_slot('club-1', attempt=3) == abs(entity_hash('club-1-3')) % 8

    def test_deterministic(self):
        """Test the same id always maps to the same colour."""
        expected = {'club-42': PALETTE[palette_slot('club-42')]}
        assert assign_colors(['club-42']) == expected
        assert assign_colors(['club-42']) == expected

    def test_missing_ids_get_no_palette_color(self):
        """Test events without an owner id are left to the grey fallback."""
        assert assign_colors([None, '']) == {}
        assert DEFAULT_COLOR not in PALETTE

    def test_color_to_dict(self):
        """Test the JSON form carries class names and hex values."""
        data = PALETTE[0].to_dict()
        assert data == {
            'bg': 'bg-blue-100',
            'text': 'text-blue-800',
            'border': 'bg-blue-500',
            'bgColor': '#dbeafe',
            'textColor': '#1e40af',
            'borderColor': '#3b82f6',
        }


@pytest.mark.unit
class TestAssignSlots:
    """Test cases for per-render collision avoidance."""

    def test_single_id_keeps_base_slot(self):
        """Test an id with no competition gets its unsalted slot."""
        assert assign_slots(['club-1']) == {'club-1': palette_slot('club-1')}

    def test_missing_and_duplicate_ids_ignored(self):
        """Test falsy ids are dropped and duplicates assigned once."""
        slots = assign_slots(['club-1', None, '', 'club-1'])
        assert list(slots) == ['club-1']

    def test_collision_is_resolved(self):
        """Test two ids sharing a base slot are told apart."""
        first, second = colliding_ids()
        assert palette_slot(first) == palette_slot(second)

        slots = assign_slots([second, first])
        assert slots[first] == palette_slot(first)
        assert slots[second] != slots[first]

    def test_full_palette_of_colliding_ids(self):
        """Test nine ids on one base slot fill all eight colours before any repeat."""
        ids = colliding_ids(9)
        assert len(ids) == 9
        assert len({palette_slot(entity_id) for entity_id in ids}) == 1

        slots = assign_slots(ids)
        first_eight = sorted(ids)[:len(PALETTE)]
        assert len({slots[entity_id] for entity_id in first_eight}) == len(PALETTE)

    def test_order_of_input_does_not_matter(self):
        """Test assignment depends on the visible set, not the input order."""
        ids = [f'club-{n}' for n in range(6)]
        assert assign_slots(ids) == assign_slots(list(reversed(ids)))

    def test_assignment_depends_on_visible_set(self):
        """Test the same id can change colour when other entities are visible."""
        first, second = colliding_ids()
        alone = assign_slots([second])[second]
        together = assign_slots([first, second])[second]
        assert alone == palette_slot(second)
        assert together != alone

    def test_retry_rules(self):
        """
        Test every id either takes its base slot when free, the first free
        salted slot, or falls back to the base slot when all retries collide.
        """
        ids = [f'club-{n}' for n in range(12)]
        slots = assign_slots(ids)

        claimed = set()
        for entity_id in sorted(ids):
            base = palette_slot(entity_id)
            if base not in claimed:
                expected = base
            else:
                free = [palette_slot(entity_id, attempt) for attempt in range(1, MAX_RETRIES + 1)
                        if palette_slot(entity_id, attempt) not in claimed]
                expected = free[0] if free else base
            assert slots[entity_id] == expected
            claimed.add(slots[entity_id])

    def test_more_entities_than_colors(self):
        """Test a full palette still assigns every id a valid slot."""
        ids = [f'club-{n}' for n in range(20)]
        slots = assign_slots(ids)
        assert set(slots) == set(ids)
        assert all(0 <= slot < len(PALETTE) for slot in slots.values())

    def test_zero_retries_keeps_collisions(self):
        """Test retries can be switched off."""
        first, second = colliding_ids()
        slots = assign_slots([first, second], max_retries=0)
        assert slots[first] == slots[second]

    def test_assign_colors_maps_to_palette(self):
        """Test colours come from the palette by assigned slot."""
        ids = ['club-1', 'zone-2', 'district-3']
        colors = assign_colors(ids)
        slots = assign_slots(ids)
        assert colors == {entity_id: PALETTE[slot] for entity_id, slot in slots.items()}
