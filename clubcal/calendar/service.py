"""
Calendar view pipeline.

resolve scope → expand hierarchy → compose conditions → fetch → search →
layout → colours. Each call takes the filter configuration explicitly and
keeps no state between calls.
"""

from dataclasses import dataclass
from datetime import date

from flask import current_app

from clubcal.calendar.colors import assign_colors, MAX_RETRIES
from clubcal.calendar.layout import (
    MonthLayout, layout_month, month_grid, events_on_date,
    MAX_DAY_EVENTS, HEADER_HEIGHT, ROW_HEIGHT
)
from clubcal.calendar.query import (
    EntityHierarchy, ScopeMembers, resolve_members, compose_conditions, fetch_events
)
from clubcal.calendar.scope import FilterConfig, ScopePredicate, resolve_scope, describe_scope
from clubcal.calendar.search import filter_events


@dataclass
class MonthView:
    config: FilterConfig
    predicate: ScopePredicate
    description: str
    events: list
    layout: MonthLayout
    colors: dict


@dataclass
class DayView:
    config: FilterConfig
    predicate: ScopePredicate
    day: date
    events: list
    colors: dict


def _visible_events(config: FilterConfig, window: tuple[date, date], session=None) -> tuple[ScopeMembers, list]:
    predicate = resolve_scope(config)
    members = resolve_members(predicate, EntityHierarchy(session))
    conditions = compose_conditions(members, config.visibility, window)
    events = fetch_events(conditions, session)
    return members, filter_events(events, config.search)


def build_month_view(config: FilterConfig, year: int, month: int, session=None) -> MonthView:
    """
    Build everything the month grid needs for one filter configuration.

    Raises:
        ResolutionFailed: hierarchy lookup failed
        FetchFailed: event fetch failed
    """
    settings = current_app.config
    cells = month_grid(year, month)
    grid_days = [cell for cell in cells if cell is not None]
    window = (grid_days[0], grid_days[-1])

    members, events = _visible_events(config, window, session)

    layout = layout_month(
        year, month, events, cells,
        max_day_events=settings.get('CALENDAR_MAX_DAY_EVENTS', MAX_DAY_EVENTS),
        header_height=settings.get('CALENDAR_HEADER_HEIGHT', HEADER_HEIGHT),
        row_height=settings.get('CALENDAR_ROW_HEIGHT', ROW_HEIGHT),
    )
    if layout.skipped:
        current_app.logger.warning(f"{len(layout.skipped)} event(s) with unusable dates left off {year}-{month:02d}")

    colors = assign_colors((event.entity_id for event in events),
                           settings.get('COLOR_MAX_RETRIES', MAX_RETRIES))

    current_app.logger.debug(f"Month view {year}-{month:02d}: {len(events)} events for {members.predicate}")

    return MonthView(
        config=config,
        predicate=members.predicate,
        description=describe_scope(config),
        events=events,
        layout=layout,
        colors=colors,
    )


def build_day_view(config: FilterConfig, day: date, session=None) -> DayView:
    """Events on one date for the selected-day panel."""
    members, events = _visible_events(config, (day, day), session)
    day_events = events_on_date(events, day)
    colors = assign_colors((event.entity_id for event in day_events),
                           current_app.config.get('COLOR_MAX_RETRIES', MAX_RETRIES))
    return DayView(config=config, predicate=members.predicate, day=day, events=day_events, colors=colors)
