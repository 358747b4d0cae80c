"""
Integration tests for the calendar JSON API.
"""
import pytest
import json
from datetime import datetime
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from clubcal.errors import FetchFailed, ResolutionFailed
from tests.fixtures.factories import EventFactory


@pytest.mark.integration
@pytest.mark.api
class TestMonthRoute:
    """Test cases for GET /api/calendar/month/<year>/<month>."""

    def test_month_unscoped(self, client, db_session, hierarchy_events):
        """Test the month grid with no filters."""
        response = client.get('/api/calendar/month/2024/3')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['success'] is True
        assert data['year'] == 2024
        assert data['month'] == 3
        assert data['weeks'] == 6
        assert data['scope'] == {'type': 'unscoped'}
        assert data['description'] == 'No filters applied'
        assert len(data['events']) == 8
        assert data['skipped'] == []

        assert len(data['cells']) == 42
        assert data['cells'][:5] == [None] * 5
        cell = data['cells'][19]
        assert cell['date'] == '2024-03-15'
        assert cell['row'] == 2
        assert len(cell['events']) == 3
        assert cell['overflow'] == 5
        assert cell['is_today'] is False

    def test_month_event_data(self, client, db_session, hierarchy, hierarchy_events):
        """Test the fields sent for each event."""
        response = client.get(f'/api/calendar/month/2024/3?clubId={hierarchy.club_a.id}')

        data = json.loads(response.data)
        assert data['scope'] == {'type': 'club', 'id': hierarchy.club_a.id}
        assert len(data['events']) == 1

        event = data['events'][0]
        assert event['id'] == hierarchy_events.club_a.id
        assert event['title'] == 'Riverside Pancake Breakfast'
        assert event['start_date'] == '2024-03-15T19:00:00'
        assert event['entity_type'] == 'club'
        assert event['entity_id'] == hierarchy.club_a.id
        assert event['owner_name'] == 'Riverside Kinsmen'
        assert event['status'] == 'past'
        assert event['multi_day'] is False
        assert event['color'] == data['colors'][hierarchy.club_a.id]
        assert set(event['color']) == {'bg', 'text', 'border', 'bgColor', 'textColor', 'borderColor'}

    def test_month_district_scope_filters(self, client, db_session, hierarchy, hierarchy_events):
        """Test district selection with the club flag turned off."""
        response = client.get(
            f'/api/calendar/month/2024/3?districtId={hierarchy.district.id}&includeClubEvents=false'
        )

        data = json.loads(response.data)
        assert data['scope'] == {
            'type': 'district', 'id': hierarchy.district.id, 'includeZones': True, 'includeClubs': False
        }
        assert {event['id'] for event in data['events']} == {
            hierarchy_events.district.id, hierarchy_events.zone_1.id, hierarchy_events.zone_2.id
        }
        assert data['filters']['includeClubEvents'] is False
        assert data['filters']['includeZoneEvents'] is True
        assert data['description'] == 'district selected (+Zones)'

    def test_month_search_and_visibility(self, client, db_session, hierarchy_events):
        """Test search text and visibility are applied together."""
        response = client.get('/api/calendar/month/2024/3?search=bingo&visibility=private')
        data = json.loads(response.data)
        assert [event['id'] for event in data['events']] == [hierarchy_events.club_b.id]
        assert data['description'] == '"bingo" • Private'

    def test_month_spans(self, client, db_session, hierarchy):
        """Test spanning segments for a multi-day event."""
        event = EventFactory.create(
            owner=hierarchy.club_a,
            start_date=datetime(2024, 3, 30, 9, 0),
            end_date=datetime(2024, 4, 2, 17, 0),
        )
        response = client.get('/api/calendar/month/2024/3')
        data = json.loads(response.data)

        assert len(data['spans']) == 2
        first, second = data['spans']
        assert first['event_id'] == event.id
        assert (first['row'], first['column'], first['span'], first['top']) == (4, 6, 1, 428)
        assert first['show_label'] is True
        assert (second['row'], second['column'], second['span'], second['top']) == (5, 0, 3, 525)
        assert second['is_end_day'] is True
        assert second['show_label'] is False
        assert data['cells'][35]['multi_day_events'] == [event.id]

    def test_month_empty(self, client, db_session):
        """Test a month with no events."""
        response = client.get('/api/calendar/month/2025/2')
        data = json.loads(response.data)
        assert response.status_code == 200
        assert data['events'] == []
        assert data['spans'] == []
        assert data['colors'] == {}

    @pytest.mark.parametrize('url', [
        '/api/calendar/month/2024/13',
        '/api/calendar/month/2024/0',
        '/api/calendar/month/2024/3?visibility=everyone',
        '/api/calendar/month/2024/3?includeZoneEvents=maybe',
    ])
    def test_month_bad_request(self, client, db_session, url):
        """Test invalid months and filters are rejected."""
        response = client.get(url)
        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['success'] is False
        assert data['error']

    def test_month_fetch_failure(self, client, db_session):
        """Test a failed fetch returns a retryable error."""
        error = FetchFailed('Could not load events', cause=OperationalError('SELECT', {}, Exception('db down')))
        with patch('clubcal.calendar.service.fetch_events', side_effect=error):
            response = client.get('/api/calendar/month/2024/3')

        assert response.status_code == 503
        data = json.loads(response.data)
        assert data == {'success': False, 'error': 'Could not load events', 'retry': True}

    def test_month_resolution_failure(self, client, db_session, hierarchy):
        """Test a failed hierarchy lookup returns a retryable error."""
        with patch('clubcal.calendar.service.resolve_members',
                   side_effect=ResolutionFailed('Could not resolve zones')):
            response = client.get(f'/api/calendar/month/2024/3?districtId={hierarchy.district.id}')

        assert response.status_code == 503
        data = json.loads(response.data)
        assert data['retry'] is True
        assert data['error'] == 'Could not resolve zones'

    def test_month_unexpected_error(self, client, db_session):
        """Test other failures return a generic error."""
        with patch('clubcal.calendar.routes.build_month_view', side_effect=RuntimeError('boom')):
            response = client.get('/api/calendar/month/2024/3')

        assert response.status_code == 500
        data = json.loads(response.data)
        assert data['success'] is False
        assert 'boom' not in data['error']

    def test_month_navigation(self, client, db_session):
        """Test previous and next months wrap across years."""
        data = json.loads(client.get('/api/calendar/month/2024/1').data)
        assert data['previous'] == {'year': 2023, 'month': 12}
        assert data['next'] == {'year': 2024, 'month': 2}

    def test_last_supported_month(self, client, db_session, hierarchy):
        """Test December 9999 is served and has no next month."""
        event = EventFactory.create(
            owner=hierarchy.club_a,
            start_date=datetime(9999, 12, 31, 9, 0),
            end_date=datetime(9999, 12, 31, 17, 0),
        )
        response = client.get('/api/calendar/month/9999/12')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert [item['id'] for item in data['events']] == [event.id]
        assert data['previous'] == {'year': 9999, 'month': 11}
        assert data['next'] is None

    def test_first_supported_month(self, client, db_session):
        """Test January of year 1 has no previous month."""
        response = client.get('/api/calendar/month/1/1')
        assert response.status_code == 200
        assert json.loads(response.data)['previous'] is None

    def test_response_headers(self, client, db_session):
        """Test calendar responses are not cached."""
        response = client.get('/api/calendar/month/2024/3')
        assert response.headers['Cache-Control'] == 'no-store'
        assert response.headers['X-Content-Type-Options'] == 'nosniff'


@pytest.mark.integration
@pytest.mark.api
class TestDayRoute:
    """Test cases for GET /api/calendar/day/<date>."""

    def test_day_events(self, client, db_session, hierarchy, hierarchy_events):
        """Test the events for one day within a zone."""
        response = client.get(f'/api/calendar/day/2024-03-15?zoneId={hierarchy.zone_1.id}')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['success'] is True
        assert data['date'] == '2024-03-15'
        assert data['count'] == 3
        assert {event['id'] for event in data['events']} == {
            hierarchy_events.zone_1.id, hierarchy_events.club_a.id, hierarchy_events.club_b.id
        }

    def test_day_without_events(self, client, db_session, hierarchy_events):
        """Test a day with nothing on."""
        response = client.get('/api/calendar/day/2024-03-16')
        data = json.loads(response.data)
        assert data['count'] == 0
        assert data['events'] == []

    def test_last_supported_day(self, client, db_session):
        """Test the final representable day is served."""
        response = client.get('/api/calendar/day/9999-12-31')
        assert response.status_code == 200
        assert json.loads(response.data)['count'] == 0

    @pytest.mark.parametrize('selected_date', ['2024-02-30', 'tomorrow', '15-03-2024'])
    def test_day_invalid_date(self, client, db_session, selected_date):
        """Test malformed dates are rejected."""
        response = client.get(f'/api/calendar/day/{selected_date}')
        assert response.status_code == 400
        assert json.loads(response.data)['success'] is False

    def test_day_fetch_failure(self, client, db_session):
        """Test a failed fetch returns a retryable error."""
        with patch('clubcal.calendar.service.fetch_events', side_effect=FetchFailed('Could not load events')):
            response = client.get('/api/calendar/day/2024-03-15')

        assert response.status_code == 503
        assert json.loads(response.data)['retry'] is True

    def test_unknown_route(self, client, db_session):
        """Test unknown API paths return JSON 404."""
        response = client.get('/api/calendar/week/2024/3')
        assert response.status_code == 404
        assert json.loads(response.data)['success'] is False
