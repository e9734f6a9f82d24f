from flask import jsonify
from werkzeug.exceptions import HTTPException

UPSTREAM_SNIPPET_LENGTH = 200


class FieldReportsError(Exception):
    """Base class for errors rendered as JSON responses."""
    status_code = 500
    message = 'Internal error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message}


class Unauthorized(FieldReportsError):
    """Missing, malformed, expired, revoked or unknown session.

    The response body never says which.
    """
    status_code = 401
    message = 'Unauthorized'

    def __init__(self):
        super().__init__()


class ValidationError(FieldReportsError):
    status_code = 400
    message = 'Invalid request body'


class ConfigurationError(FieldReportsError):
    status_code = 500
    message = 'Server is not configured'


class UpstreamError(FieldReportsError):
    """The spreadsheet endpoint failed or answered with something unusable."""
    status_code = 502
    message = 'Upstream returned malformed response'

    def __init__(self, message=None, upstream_status=None, body=''):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = truncate_snippet(body)

    def to_dict(self):
        return {
            'error': self.message,
            'upstream_status': self.upstream_status,
            'upstream_body': self.body,
        }


def truncate_snippet(text, limit=UPSTREAM_SNIPPET_LENGTH):
    if text is None:
        return ''
    text = str(text)
    if len(text) <= limit:
        return text
    return text[:limit] + '...'


def register_error_handlers(app):
    @app.errorhandler(FieldReportsError)
    def handle_field_reports_error(error):
        if error.status_code >= 500:
            app.logger.error('%s: %s', type(error).__name__, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code
