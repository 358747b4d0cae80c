"""
Free-text search over fetched events.
"""

from typing import Sequence


def _search_fields(event):
    yield getattr(event, 'title', None)
    yield getattr(event, 'description', None)
    yield getattr(event, 'location', None)
    yield getattr(event, 'owner_name', None)


def matches_search(event, term: str) -> bool:
    """Case-insensitive substring match; term must already be lower-cased."""
    return any(value and term in value.lower() for value in _search_fields(event))


def filter_events(events: Sequence, search: str) -> list:
    """
    Keep events whose title, description, location or owner name contain
    the search text as typed, ignoring case. Only an empty search keeps every
    event, in its original order; whitespace is part of the term.
    """
    if not search:
        return list(events)
    term = search.lower()
    return [event for event in events if matches_search(event, term)]
