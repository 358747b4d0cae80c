"""
Month grid layout for the calendar view.

The grid is a Sunday-start month padded with blank cells (None) to whole
weeks. Every event is classified by its date-only range:

- single-day events are listed in the cell of their day, up to a display
  limit, with an overflow count for the rest;
- multi-day events are drawn as spanning bars, one segment per week row the
  event touches, positioned by column and row index.

Concurrent multi-day events in the same row share the row's vertical offset;
no lane packing is done.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional, Sequence

from clubcal.calendar.dates import (
    try_date_only, is_same_date, is_date_in_range, days_between, day_of_week, month_bounds
)

logger = logging.getLogger(__name__)

MAX_DAY_EVENTS = 3
HEADER_HEIGHT = 40
ROW_HEIGHT = 97


@dataclass(frozen=True)
class SpanSegment:
    """The part of one multi-day event drawn in one week row."""

    event: Any
    row: int
    start_column: int
    column_span: int
    days_span_total: int
    days_into_event: int
    is_start_day: bool
    is_end_day: bool
    top: int

    @property
    def left(self) -> float:
        return self.start_column / 7

    @property
    def width(self) -> float:
        return self.column_span / 7

    @property
    def show_label(self) -> bool:
        # Title only on the event's real first day, not on every week
        return self.is_start_day


@dataclass
class DayCell:
    date: date
    index: int
    row: int
    single_day_events: list = field(default_factory=list)
    multi_day_events: list = field(default_factory=list)
    max_events: int = MAX_DAY_EVENTS

    @property
    def events(self) -> list:
        """Single-day events that fit in the cell."""
        return self.single_day_events[:self.max_events]

    @property
    def overflow(self) -> int:
        return max(0, len(self.single_day_events) - self.max_events)


@dataclass
class MonthLayout:
    year: int
    month: int
    cells: list
    spans: list
    skipped: list = field(default_factory=list)

    @property
    def weeks(self) -> int:
        return (len(self.cells) + 6) // 7


def month_grid(year: int, month: int) -> list:
    """Sunday-start cells for one month: dates, with None padding to full weeks."""
    first, last = month_bounds(year, month)
    cells = [None] * day_of_week(first)
    cells.extend(first + timedelta(days=offset) for offset in range((last - first).days + 1))
    cells.extend([None] * (-len(cells) % 7))
    return cells


def event_date_range(event) -> Optional[tuple[date, date]]:
    """(start, end) calendar days of an event, or None when its dates are unusable."""
    start = try_date_only(getattr(event, 'start_date', None))
    end = try_date_only(getattr(event, 'end_date', None))
    if start is None or end is None or end < start:
        return None
    return start, end


def is_multi_day(event) -> bool:
    """True when the event's start and end fall on different calendar days."""
    return not is_same_date(event.start_date, event.end_date)


def spanning_segment(event, start: date, end: date, cell_date: date, cell_index: int,
                     header_height: int = HEADER_HEIGHT, row_height: int = ROW_HEIGHT) -> SpanSegment:
    """
    Geometry of the bar drawn from cell_date to the end of its week or the
    end of the event, whichever comes first.
    """
    days_span_total = days_between(start, end) + 1
    column = day_of_week(cell_date)
    days_into_event = days_between(start, cell_date)

    days_remaining_in_week = 7 - column
    days_remaining_in_event = days_span_total - days_into_event
    column_span = max(0, min(days_remaining_in_week, days_remaining_in_event))

    row = cell_index // 7
    return SpanSegment(
        event=event,
        row=row,
        start_column=column,
        column_span=column_span,
        days_span_total=days_span_total,
        days_into_event=days_into_event,
        is_start_day=cell_date == start,
        is_end_day=column_span > 0 and cell_date + timedelta(days=column_span - 1) == end,
        top=header_height + row * row_height,
    )


def _cell_date(cell, year: int, month: int) -> Optional[date]:
    """Resolve a grid cell (date, day-of-month or (y, m, d) triple) to a date."""
    if cell is None:
        return None
    if isinstance(cell, date):
        return cell
    try:
        if isinstance(cell, int):
            return date(year, month, cell)
        return date(*cell)
    except (TypeError, ValueError):
        logger.warning(f"Skipping grid cell without a resolvable date: {cell!r}")
        return None


def layout_month(year: int, month: int, events: Sequence, cells: Optional[Sequence] = None,
                 max_day_events: int = MAX_DAY_EVENTS, header_height: int = HEADER_HEIGHT,
                 row_height: int = ROW_HEIGHT) -> MonthLayout:
    """
    Place events onto the month grid.

    Args:
        year, month: The month being displayed
        events: Visible events, already scope- and search-filtered
        cells: Grid cells; defaults to month_grid(year, month)
        max_day_events: Single-day events shown per cell before overflow
        header_height, row_height: Pixel geometry used for bar offsets

    Returns:
        MonthLayout with one DayCell (or None for blanks) per grid cell and
        one SpanSegment per (multi-day event, week row) pair

    Events with missing or inverted dates are left out and reported in
    MonthLayout.skipped; they never abort the layout.
    """
    if cells is None:
        cells = month_grid(year, month)

    placed = []
    skipped = []
    for event in events:
        date_range = event_date_range(event)
        if date_range is None:
            logger.warning(f"Excluding event {getattr(event, 'id', None)!r} from calendar grid: unusable dates "
                           f"{getattr(event, 'start_date', None)!r} - {getattr(event, 'end_date', None)!r}")
            skipped.append(event)
            continue
        placed.append((event, *date_range))

    day_cells = []
    spans = []
    segments_drawn = set()

    for index, cell in enumerate(cells):
        cell_date = _cell_date(cell, year, month)
        if cell_date is None:
            day_cells.append(None)
            continue

        day_cell = DayCell(date=cell_date, index=index, row=index // 7, max_events=max_day_events)

        for position, (event, start, end) in enumerate(placed):
            if not start <= cell_date <= end:
                continue

            if not is_multi_day(event):
                day_cell.single_day_events.append(event)
                continue

            day_cell.multi_day_events.append(event)

            # First covered cell of each row draws the bar for that row
            key = (position, day_cell.row)
            if key not in segments_drawn:
                segments_drawn.add(key)
                spans.append(spanning_segment(event, start, end, cell_date, index,
                                              header_height, row_height))

        day_cells.append(day_cell)

    return MonthLayout(year=year, month=month, cells=day_cells, spans=spans, skipped=skipped)


def events_on_date(events: Sequence, day: date) -> list:
    """Every event whose date range contains day (the selected-day panel)."""
    matching = []
    for event in events:
        date_range = event_date_range(event)
        if date_range is not None and is_date_in_range(day, *date_range):
            matching.append(event)
    return matching


def event_status(event, today: Optional[date] = None) -> str:
    """'today' while the event is running, 'upcoming' before it, 'past' after it."""
    today = today or date.today()
    date_range = event_date_range(event)
    if date_range is None:
        return 'past'
    start, end = date_range
    if start <= today <= end:
        return 'today'
    if start > today:
        return 'upcoming'
    return 'past'
