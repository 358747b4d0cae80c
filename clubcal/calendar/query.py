"""
Turn a scope predicate into flat database conditions and fetch events.

The events table only knows each event's owner (entity_type, entity_id), so
hierarchy scopes are expanded up front: the zone and club ids under the
selected zone or district are looked up through EntityHierarchy and the
predicate becomes a union of equality / IN conditions, e.g.

    (entity_type = 'zone' AND entity_id = :zone)
    OR (entity_type = 'club' AND entity_id IN (:c1, :c2))

Events whose owner is not in the tree are never part of those id sets, so
they drop out of hierarchy scopes but still show up when unscoped.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, assert_never

import sqlalchemy as sa
import sqlalchemy.orm as so
from sqlalchemy.exc import SQLAlchemyError

from clubcal import db
from clubcal.models import Club, Zone, Event
from clubcal.errors import ResolutionFailed, FetchFailed
from clubcal.calendar.scope import (
    ScopePredicate, Unscoped, ExactClub, ZoneScope, DistrictScope
)


class EntityHierarchy:
    """Lookups over the district → zone → club tree."""

    def __init__(self, session=None):
        self.session = session or db.session

    def _ids(self, query, description: str) -> frozenset:
        try:
            return frozenset(self.session.scalars(query).all())
        except SQLAlchemyError as e:
            raise ResolutionFailed(f"Could not resolve {description}", cause=e) from e

    def zone_ids_in_district(self, district_id: str) -> frozenset:
        return self._ids(
            sa.select(Zone.id).where(Zone.district_id == district_id),
            f"zones of district {district_id}"
        )

    def club_ids_in_zone(self, zone_id: str) -> frozenset:
        return self._ids(
            sa.select(Club.id).where(Club.zone_id == zone_id),
            f"clubs of zone {zone_id}"
        )

    def club_ids_in_district(self, district_id: str) -> frozenset:
        """Clubs whose zone belongs to the district."""
        return self._ids(
            sa.select(Club.id)
            .join(Zone, Club.zone_id == Zone.id)
            .where(Zone.district_id == district_id),
            f"clubs of district {district_id}"
        )


@dataclass(frozen=True)
class ScopeMembers:
    """A scope predicate together with the child ids it expands to."""

    predicate: ScopePredicate
    zone_ids: frozenset = frozenset()
    club_ids: frozenset = frozenset()

    def matches(self, event) -> bool:
        """Evaluate the scope against one event in Python."""
        predicate = self.predicate
        entity_type, entity_id = event.entity_type, event.entity_id

        if isinstance(predicate, Unscoped):
            return True
        if isinstance(predicate, ExactClub):
            return entity_type == 'club' and entity_id == predicate.club_id
        if isinstance(predicate, ZoneScope):
            if entity_type == 'zone':
                return entity_id == predicate.zone_id
            return entity_type == 'club' and entity_id in self.club_ids
        if isinstance(predicate, DistrictScope):
            if entity_type == 'district':
                return entity_id == predicate.district_id
            if entity_type == 'zone':
                return entity_id in self.zone_ids
            return entity_type == 'club' and entity_id in self.club_ids
        assert_never(predicate)


def resolve_members(predicate: ScopePredicate, hierarchy: EntityHierarchy) -> ScopeMembers:
    """
    Look up the child ids an included category needs.

    Raises:
        ResolutionFailed: if a hierarchy lookup fails
    """
    if isinstance(predicate, (Unscoped, ExactClub)):
        return ScopeMembers(predicate)

    if isinstance(predicate, ZoneScope):
        club_ids = hierarchy.club_ids_in_zone(predicate.zone_id) if predicate.include_clubs else frozenset()
        return ScopeMembers(predicate, club_ids=club_ids)

    if isinstance(predicate, DistrictScope):
        zone_ids = frozenset()
        club_ids = frozenset()
        if predicate.include_zones:
            zone_ids = hierarchy.zone_ids_in_district(predicate.district_id)
        if predicate.include_clubs:
            club_ids = hierarchy.club_ids_in_district(predicate.district_id)
        return ScopeMembers(predicate, zone_ids=zone_ids, club_ids=club_ids)

    assert_never(predicate)


def _owned_by(entity_type: str, entity_id: str):
    return sa.and_(Event.entity_type == entity_type, Event.entity_id == entity_id)


def _owned_by_any(entity_type: str, entity_ids: frozenset):
    return sa.and_(Event.entity_type == entity_type, Event.entity_id.in_(sorted(entity_ids)))


def scope_condition(members: ScopeMembers):
    """
    The ownership condition for a scope, or None when unscoped.

    Included categories with no members add no clause, so an empty zone
    never widens or empties the union.
    """
    predicate = members.predicate

    if isinstance(predicate, Unscoped):
        return None

    if isinstance(predicate, ExactClub):
        return _owned_by('club', predicate.club_id)

    if isinstance(predicate, ZoneScope):
        clauses = [_owned_by('zone', predicate.zone_id)]
        if predicate.include_clubs and members.club_ids:
            clauses.append(_owned_by_any('club', members.club_ids))
        return sa.or_(*clauses)

    if isinstance(predicate, DistrictScope):
        clauses = [_owned_by('district', predicate.district_id)]
        if predicate.include_zones and members.zone_ids:
            clauses.append(_owned_by_any('zone', members.zone_ids))
        if predicate.include_clubs and members.club_ids:
            clauses.append(_owned_by_any('club', members.club_ids))
        return sa.or_(*clauses)

    assert_never(predicate)


def compose_conditions(members: ScopeMembers, visibility: str = 'all',
                       window: Optional[tuple[date, date]] = None) -> list:
    """
    Build the where-conditions for an event fetch.

    Args:
        members: Resolved scope
        visibility: 'all' or the visibility class to keep
        window: Optional inclusive (first_day, last_day); keeps events
            whose date range overlaps it

    Returns:
        List of SQLAlchemy conditions to AND together
    """
    conditions = []

    ownership = scope_condition(members)
    if ownership is not None:
        conditions.append(ownership)

    if visibility != 'all':
        conditions.append(Event.visibility == visibility)

    if window is not None:
        first_day, last_day = window
        conditions.append(Event.start_date <= datetime.combine(last_day, time.max))
        conditions.append(Event.end_date >= datetime.combine(first_day, time.min))

    return conditions


def fetch_events(conditions: list, session=None) -> list:
    """
    Run the event select with owner names loaded for display.

    Raises:
        FetchFailed: if the query fails
    """
    session = session or db.session
    query = (
        sa.select(Event)
        .where(*conditions)
        .options(
            so.selectinload(Event.club),
            so.selectinload(Event.zone),
            so.selectinload(Event.district),
        )
        .order_by(Event.start_date, Event.id)
    )
    try:
        return list(session.scalars(query).all())
    except SQLAlchemyError as e:
        raise FetchFailed("Could not load events", cause=e) from e
