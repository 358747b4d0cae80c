# Calendar API routes
from datetime import date, datetime
from flask import jsonify, request, current_app, abort

from clubcal.calendar import bp
from clubcal.calendar.colors import DEFAULT_COLOR
from clubcal.calendar.dates import shift_month
from clubcal.calendar.layout import event_date_range, event_status, is_multi_day
from clubcal.calendar.scope import FilterConfig, predicate_to_dict
from clubcal.calendar.service import build_month_view, build_day_view
from clubcal.errors import CalendarError


def _filters_from_request():
    """Read the filter configuration from the query string, 400 on bad values."""
    try:
        return FilterConfig.from_mapping(request.args)
    except ValueError as e:
        abort(400, description=str(e))


def _month_link(year, month, step):
    """Neighbouring month for prev/next navigation, None past the supported years."""
    year, month = shift_month(year, month, step)
    if not 1 <= year <= 9999:
        return None
    return {'year': year, 'month': month}


def _isoformat(value):
    return value.isoformat() if hasattr(value, 'isoformat') else value


def _event_data(event, colors, today):
    """Format one event for the calendar front end."""
    date_range = event_date_range(event)
    color = colors.get(event.entity_id, DEFAULT_COLOR)
    return {
        'id': event.id,
        'title': event.title,
        'description': event.description,
        'location': event.location,
        'start_date': _isoformat(event.start_date),
        'end_date': _isoformat(event.end_date),
        'visibility': event.visibility,
        'entity_type': event.entity_type,
        'entity_id': event.entity_id,
        'owner_name': event.owner_name,
        'event_url': event.event_url,
        'image_url': event.image_url,
        'status': event_status(event, today),
        'multi_day': date_range is not None and is_multi_day(event),
        'color': color.to_dict(),
    }


@bp.route('/month/<int:year>/<int:month>')
def month_view(year, month):
    """
    Month grid for the current filter configuration (AJAX endpoint)

    Query string: search, clubId | zoneId | districtId, visibility,
    includeZoneEvents, includeClubEvents
    """
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        abort(400, description=f'Invalid month: {year}-{month}')

    config = _filters_from_request()

    try:
        view = build_month_view(config, year, month)
    except CalendarError:
        raise
    except Exception as e:
        current_app.logger.error(f"Error building month view {year}-{month}: {str(e)}")
        return jsonify({
            'success': False,
            'error': 'An error occurred while building the calendar'
        }), 500

    today = date.today()

    cells = []
    for cell in view.layout.cells:
        if cell is None:
            cells.append(None)
            continue
        cells.append({
            'date': cell.date.isoformat(),
            'row': cell.row,
            'events': [event.id for event in cell.events],
            'overflow': cell.overflow,
            'multi_day_events': [event.id for event in cell.multi_day_events],
            'is_today': cell.date == today,
        })

    spans = [{
        'event_id': segment.event.id,
        'row': segment.row,
        'column': segment.start_column,
        'span': segment.column_span,
        'days_span': segment.days_span_total,
        'left': segment.left,
        'width': segment.width,
        'top': segment.top,
        'is_start_day': segment.is_start_day,
        'is_end_day': segment.is_end_day,
        'show_label': segment.show_label,
    } for segment in view.layout.spans]

    return jsonify({
        'success': True,
        'year': year,
        'month': month,
        'previous': _month_link(year, month, -1),
        'next': _month_link(year, month, 1),
        'weeks': view.layout.weeks,
        'filters': config.to_dict(),
        'scope': predicate_to_dict(view.predicate),
        'description': view.description,
        'events': [_event_data(event, view.colors, today) for event in view.events],
        'colors': {entity_id: color.to_dict() for entity_id, color in view.colors.items()},
        'cells': cells,
        'spans': spans,
        'skipped': [event.id for event in view.layout.skipped],
    })


@bp.route('/day/<string:selected_date>')
def day_view(selected_date):
    """
    Events on a specific date for the selected-day panel (AJAX endpoint)
    """
    try:
        day = datetime.strptime(selected_date, '%Y-%m-%d').date()
    except ValueError:
        abort(400, description=f'Invalid date: {selected_date}')

    config = _filters_from_request()

    try:
        view = build_day_view(config, day)
    except CalendarError:
        raise
    except Exception as e:
        current_app.logger.error(f"Error getting events for {selected_date}: {str(e)}")
        return jsonify({
            'success': False,
            'error': 'An error occurred while loading events'
        }), 500

    today = date.today()
    return jsonify({
        'success': True,
        'date': selected_date,
        'scope': predicate_to_dict(view.predicate),
        'events': [_event_data(event, view.colors, today) for event in view.events],
        'count': len(view.events),
    })
