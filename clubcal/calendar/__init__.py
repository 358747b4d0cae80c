"""
Calendar blueprint.

Serves month and day views of club, zone and district events as JSON for the
calendar front end. The layout, scope and colour logic lives in the modules
of this package and does not depend on the request:

- scope: filter configuration and scope predicates
- query: hierarchy expansion, database conditions and event fetch
- search: free-text filter
- layout: month grid and multi-day spanning bars
- colors: per-entity palette assignment
"""

from flask import Blueprint

bp = Blueprint('calendar', __name__)

from clubcal.calendar import routes
