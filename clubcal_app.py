import sqlalchemy as sa
import sqlalchemy.orm as so
from dotenv import load_dotenv
from clubcal import create_app, db
from clubcal.models import District, Zone, Club, Event
import os

load_dotenv('.flaskenv')

app = create_app(os.getenv('FLASK_CONFIG') or 'development')

@app.shell_context_processor
def make_shell_context():
    return {
        'sa': sa,
        'so': so,
        'db': db,
        'District': District,
        'Zone': Zone,
        'Club': Club,
        'Event': Event,
    }

if __name__ == '__main__':
    app.run(debug=True)
