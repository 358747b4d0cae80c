#!/usr/bin/env python3
"""
Club Hierarchy Import Script

Loads districts, zones and clubs from a CSV export into the database.
Existing entries are matched by name and left untouched, so the script can be
re-run after the CSV is updated.

Usage:
    source venv/bin/activate
    flask db upgrade
    python bin/import_clubs.py district1clubs.csv
"""

import os
import sys

# Add the parent directory to the path so we can import our modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Load environment variables from .flaskenv
from dotenv import load_dotenv
load_dotenv('.flaskenv')

from clubcal import create_app, db
from clubcal.imports import import_clubs_csv


def verify_database_structure():
    """Verify that the migrated tables exist."""
    print("Verifying database structure...")

    expected_tables = ['districts', 'zones', 'clubs', 'events']

    inspector = db.inspect(db.engine)
    existing_tables = inspector.get_table_names()

    missing_tables = []
    for table in expected_tables:
        if table in existing_tables:
            print(f"  ✓ Table '{table}' exists")
        else:
            print(f"  ✗ Table '{table}' missing")
            missing_tables.append(table)

    if missing_tables:
        print(f"\nERROR: Missing tables: {missing_tables}")
        print("Please run the database migration first:")
        print("  flask db upgrade")
        return False

    return True


def main():
    """Main function to import the club hierarchy."""
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)

    csv_path = sys.argv[1]

    print("=" * 60)
    print("CLUB CALENDAR - Club Hierarchy Import")
    print("=" * 60)

    app = create_app(os.getenv('FLASK_CONFIG') or 'development')

    with app.app_context():
        if not verify_database_structure():
            sys.exit(1)

        try:
            with open(csv_path, newline='', encoding='utf-8') as stream:
                created = import_clubs_csv(stream)
        except (OSError, ValueError) as e:
            print(f"\nERROR: {e}")
            sys.exit(1)

        print("\n" + "=" * 60)
        print("IMPORT COMPLETE!")
        print("=" * 60)
        print(f"Districts created: {created['districts']}")
        print(f"Zones created: {created['zones']}")
        print(f"Clubs created: {created['clubs']}")


if __name__ == '__main__':
    main()
