"""
Import the district → zone → club tree from a CSV export.

Expected columns (header row first):

    province, district, zone, city, club name, type

Districts are matched by name, zones by name within their district and clubs
by name within their zone, so running an import twice creates nothing new.
"""

import csv
from typing import IO

import sqlalchemy as sa
from flask import current_app

from clubcal import db
from clubcal.models import District, Zone, Club

CLUB_TYPES = ('Kinsmen', 'Kinette', 'Kin')


def parse_club_rows(stream: IO[str]) -> list[dict]:
    """Read CSV rows into dicts, skipping the header and blank lines."""
    rows = []
    reader = csv.reader(stream)
    next(reader, None)

    for line_number, fields in enumerate(reader, start=2):
        if not any(field.strip() for field in fields):
            continue
        if len(fields) < 6:
            raise ValueError(f"Line {line_number}: expected 6 columns, got {len(fields)}")

        province, district, zone, city, club_name, club_type = (field.strip() for field in fields[:6])
        if not district or not zone or not club_name:
            raise ValueError(f"Line {line_number}: district, zone and club name are required")

        rows.append({
            'province': province,
            'district': district,
            'zone': zone,
            'city': city,
            'club_name': club_name,
            'club_type': club_type if club_type in CLUB_TYPES else None,
        })
    return rows


def import_clubs_csv(stream: IO[str], session=None) -> dict:
    """
    Create any districts, zones and clubs from the CSV that do not exist yet.

    Returns:
        Dictionary with counts of created districts, zones and clubs
    """
    session = session or db.session
    created = {'districts': 0, 'zones': 0, 'clubs': 0}

    districts = {}
    zones = {}

    for row in parse_club_rows(stream):
        district = districts.get(row['district'])
        if district is None:
            district = session.scalar(sa.select(District).where(District.name == row['district']))
            if district is None:
                district = District(name=row['district'], province=row['province'] or None)
                session.add(district)
                session.flush()
                created['districts'] += 1
            districts[row['district']] = district

        zone_key = (district.id, row['zone'])
        zone = zones.get(zone_key)
        if zone is None:
            zone = session.scalar(
                sa.select(Zone).where(Zone.district_id == district.id, Zone.name == row['zone'])
            )
            if zone is None:
                zone = Zone(name=row['zone'], district_id=district.id)
                session.add(zone)
                session.flush()
                created['zones'] += 1
            zones[zone_key] = zone

        club = session.scalar(
            sa.select(Club).where(Club.zone_id == zone.id, Club.name == row['club_name'])
        )
        if club is None:
            session.add(Club(
                name=row['club_name'],
                city=row['city'] or None,
                club_type=row['club_type'],
                zone_id=zone.id,
                district_id=district.id,
            ))
            session.flush()
            created['clubs'] += 1

    session.commit()
    current_app.logger.info(
        f"Club import created {created['districts']} districts, {created['zones']} zones, {created['clubs']} clubs"
    )
    return created
