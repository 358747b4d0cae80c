"""
Scope selection for the calendar.

A FilterConfig is the user's filter bar state: search text, at most one
selected club/zone/district, a visibility filter and two inclusion flags.
resolve_scope() turns it into one of four predicate shapes:

    Unscoped                                   no entity restriction
    ExactClub(club_id)                         events owned by that club
    ZoneScope(zone_id, include_clubs)          zone events [+ its clubs']
    DistrictScope(district_id, include_zones, include_clubs)

The scope's own entity is always included. Children are only included when
their flag is set, and an unset flag counts as set.
"""

from dataclasses import dataclass, replace
from typing import Optional, Union, assert_never

VISIBILITY_FILTERS = ('all', 'public', 'private', 'internal')

_TRUE_STRINGS = ('true', 'on', '1', 'yes')
_FALSE_STRINGS = ('false', 'off', '0', 'no')


def _parse_flag(value) -> Optional[bool]:
    """Tri-state flag from a mapping value; None and '' mean unset."""
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == '':
        return None
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"Invalid boolean flag: {value!r}")


@dataclass(frozen=True)
class FilterConfig:
    """Filter bar state, passed explicitly to every calendar call."""

    search: str = ''
    district_id: str = ''
    zone_id: str = ''
    club_id: str = ''
    visibility: str = 'all'
    include_zone_events: Optional[bool] = None
    include_club_events: Optional[bool] = None

    def __post_init__(self):
        if self.visibility not in VISIBILITY_FILTERS:
            raise ValueError(f"Invalid visibility filter: {self.visibility!r}")

    @classmethod
    def from_mapping(cls, data) -> 'FilterConfig':
        """
        Build a config from the persisted/query-string form.

        Accepts the camelCase keys of the stored filter object
        (districtId, includeZoneEvents, ...) as well as snake_case keys.
        """
        def pick(camel, snake, default=None):
            if camel in data:
                return data.get(camel)
            return data.get(snake, default)

        return cls(
            search=pick('search', 'search', '') or '',
            district_id=pick('districtId', 'district_id', '') or '',
            zone_id=pick('zoneId', 'zone_id', '') or '',
            club_id=pick('clubId', 'club_id', '') or '',
            visibility=pick('visibility', 'visibility', 'all') or 'all',
            include_zone_events=_parse_flag(pick('includeZoneEvents', 'include_zone_events')),
            include_club_events=_parse_flag(pick('includeClubEvents', 'include_club_events')),
        )

    def to_dict(self) -> dict:
        """The persisted filter object; unset flags are written as true."""
        return {
            'search': self.search,
            'districtId': self.district_id,
            'zoneId': self.zone_id,
            'clubId': self.club_id,
            'visibility': self.visibility,
            'includeZoneEvents': self.include_zone_events is not False,
            'includeClubEvents': self.include_club_events is not False,
        }

    @property
    def selected_entity(self) -> Optional[tuple[str, str]]:
        """(entity_type, entity_id) of the selection; the most specific populated id wins."""
        if self.club_id:
            return 'club', self.club_id
        if self.zone_id:
            return 'zone', self.zone_id
        if self.district_id:
            return 'district', self.district_id
        return None


def update_filters(config: FilterConfig, **changes) -> FilterConfig:
    """
    Return a new config with changes applied.

    Selecting a club, zone or district clears the other two so that at most
    one entity is selected.
    """
    entity_keys = ('club_id', 'zone_id', 'district_id')
    selected = [key for key in entity_keys if changes.get(key)]
    if len(selected) > 1:
        raise ValueError(f"Only one entity can be selected, got {selected}")
    if selected:
        for key in entity_keys:
            changes.setdefault(key, '')
    return replace(config, **changes)


def clear_filters() -> FilterConfig:
    return FilterConfig()


@dataclass(frozen=True)
class Unscoped:
    pass


@dataclass(frozen=True)
class ExactClub:
    club_id: str


@dataclass(frozen=True)
class ZoneScope:
    zone_id: str
    include_clubs: bool = True


@dataclass(frozen=True)
class DistrictScope:
    district_id: str
    include_zones: bool = True
    include_clubs: bool = True


ScopePredicate = Union[Unscoped, ExactClub, ZoneScope, DistrictScope]


def resolve_scope(config: FilterConfig) -> ScopePredicate:
    """
    Translate the filter bar selection into a scope predicate.

    The shape follows the declared entity type even when the id is unknown;
    an unknown id simply yields no child members later on.
    """
    selection = config.selected_entity
    if selection is None:
        return Unscoped()

    entity_type, entity_id = selection
    include_zones = config.include_zone_events is not False
    include_clubs = config.include_club_events is not False

    if entity_type == 'club':
        return ExactClub(entity_id)
    if entity_type == 'zone':
        return ZoneScope(entity_id, include_clubs=include_clubs)
    return DistrictScope(entity_id, include_zones=include_zones, include_clubs=include_clubs)


def predicate_to_dict(predicate: ScopePredicate) -> dict:
    """JSON form of a predicate for the rendering layer."""
    if isinstance(predicate, Unscoped):
        return {'type': 'unscoped'}
    if isinstance(predicate, ExactClub):
        return {'type': 'club', 'id': predicate.club_id}
    if isinstance(predicate, ZoneScope):
        return {'type': 'zone', 'id': predicate.zone_id, 'includeClubs': predicate.include_clubs}
    if isinstance(predicate, DistrictScope):
        return {
            'type': 'district',
            'id': predicate.district_id,
            'includeZones': predicate.include_zones,
            'includeClubs': predicate.include_clubs,
        }
    assert_never(predicate)


def describe_predicate(predicate: ScopePredicate) -> Optional[str]:
    """Short label for the selected scope, e.g. 'district selected (+Zones, +Clubs)'."""
    if isinstance(predicate, Unscoped):
        return None
    if isinstance(predicate, ExactClub):
        return 'club selected'
    if isinstance(predicate, ZoneScope):
        return 'zone selected (+Clubs)' if predicate.include_clubs else 'zone selected'
    if isinstance(predicate, DistrictScope):
        includes = []
        if predicate.include_zones:
            includes.append('+Zones')
        if predicate.include_clubs:
            includes.append('+Clubs')
        if includes:
            return f"district selected ({', '.join(includes)})"
        return 'district selected'
    assert_never(predicate)


def describe_scope(config: FilterConfig) -> str:
    """Filter state text shown above the calendar."""
    active = []
    if config.search:
        active.append(f'"{config.search}"')
    scope_text = describe_predicate(resolve_scope(config))
    if scope_text:
        active.append(scope_text)
    if config.visibility != 'all':
        active.append(config.visibility.title())

    if not active:
        return 'No filters applied'
    return ' • '.join(active)
