from flask import jsonify, current_app
from clubcal import db


class CalendarError(Exception):
    """Base class for failures that stop a calendar view from being built."""

    status_code = 503

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ResolutionFailed(CalendarError):
    """The entity hierarchy lookup (zones of a district, clubs of a zone) could not complete."""


class FetchFailed(CalendarError):
    """The event fetch against the database failed."""


def register_error_handlers(app):
    """Register error handlers with the Flask application"""

    @app.errorhandler(CalendarError)
    def calendar_error(error):
        db.session.rollback()
        current_app.logger.error(f"{type(error).__name__}: {error.message} (cause: {error.cause!r})")
        return jsonify({
            'success': False,
            'error': error.message,
            'retry': True
        }), error.status_code

    @app.errorhandler(400)
    def bad_request_error(error):
        return jsonify({'success': False, 'error': getattr(error, 'description', 'Bad request')}), 400

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'success': False, 'error': 'An internal error occurred'}), 500
