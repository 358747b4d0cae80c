"""
Test configuration and fixtures for the Club Calendar application.
"""
import os

# Set environment variables for testing
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"

import pytest
from datetime import datetime
from types import SimpleNamespace
from clubcal import create_app, db
from clubcal.models import Event
from tests.fixtures.factories import DistrictFactory, ZoneFactory, ClubFactory, EventFactory


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    # Create application context and set up database
    with app.app_context():
        # Ensure all models are registered with SQLAlchemy
        from clubcal import models

        # Create all database tables
        db.create_all()

        import sqlalchemy as sa
        inspector = sa.inspect(db.engine)
        tables = inspector.get_table_names()
        if 'events' not in tables:
            raise RuntimeError(f"Database setup failed. Tables created: {tables}")

        yield app

        # Clean up after all tests in session
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Create database session for testing."""
    with app.app_context():
        yield db.session

        # Clear all tables for clean state between tests
        try:
            for table in reversed(db.metadata.sorted_tables):
                db.session.execute(table.delete())
            db.session.commit()
        except Exception:
            db.session.rollback()
        finally:
            db.session.remove()


@pytest.fixture
def hierarchy(db_session):
    """
    District D with zone Z1 (clubs A, B) and zone Z2 (club C), plus a second
    district D2 with zone Z3 (club X).
    """
    district = DistrictFactory.create(name='District 1')
    zone_1 = ZoneFactory.create(name='Zone A', district=district)
    zone_2 = ZoneFactory.create(name='Zone B', district=district)
    club_a = ClubFactory.create(name='Riverside Kinsmen', zone=zone_1)
    club_b = ClubFactory.create(name='Lakeview Kinette', zone=zone_1, club_type='Kinette')
    club_c = ClubFactory.create(name='Hillcrest Kin', zone=zone_2, club_type='Kin')

    other_district = DistrictFactory.create(name='District 2')
    zone_3 = ZoneFactory.create(name='Zone C', district=other_district)
    club_x = ClubFactory.create(name='Far Away Kinsmen', zone=zone_3)

    return SimpleNamespace(
        district=district, zone_1=zone_1, zone_2=zone_2,
        club_a=club_a, club_b=club_b, club_c=club_c,
        other_district=other_district, zone_3=zone_3, club_x=club_x,
    )


@pytest.fixture
def hierarchy_events(db_session, hierarchy):
    """
    One event per owner in the hierarchy fixture, all on 2024-03-15, plus an
    orphaned club event whose owner does not exist.
    """
    when = datetime(2024, 3, 15, 19, 0)
    events = SimpleNamespace(
        district=EventFactory.create(title='District Convention', owner=hierarchy.district, start_date=when),
        zone_1=EventFactory.create(title='Zone A Council', owner=hierarchy.zone_1, start_date=when),
        zone_2=EventFactory.create(title='Zone B Council', owner=hierarchy.zone_2, start_date=when),
        club_a=EventFactory.create(title='Riverside Pancake Breakfast', owner=hierarchy.club_a, start_date=when),
        club_b=EventFactory.create(title='Lakeview Bingo', owner=hierarchy.club_b, start_date=when,
                                   visibility='private'),
        club_c=EventFactory.create(title='Hillcrest Fish Fry', owner=hierarchy.club_c, start_date=when),
        club_x=EventFactory.create(title='Far Away Gala', owner=hierarchy.club_x, start_date=when),
    )

    # Owner id that is not in the tree
    orphan = Event(
        title='Orphaned Car Wash',
        start_date=when,
        end_date=when,
        visibility='public',
        entity_type='club',
        entity_id='missing-club-id',
    )
    db.session.add(orphan)
    db.session.commit()
    events.orphan = orphan

    return events
