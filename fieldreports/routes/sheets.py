from flask import Blueprint, request, jsonify, g, current_app
from fieldreports.auth_utils import require_session
from fieldreports.errors import ValidationError
from fieldreports.services.sanitizer import sanitize_rows, sanitize_cell
from fieldreports.services.sheets_service import get_sheets_client
from fieldreports.utils import cell_text

sheets_bp = Blueprint('sheets', __name__, url_prefix='/api')

def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Expected a JSON object body')
    return data

@sheets_bp.route('/sheets', methods=['GET'])
@require_session
def fetch_reports():
    """Rows owned by the session user; a username query parameter is ignored."""
    username = g.identity.username
    requested = request.args.get('username')
    if requested and requested != username:
        current_app.logger.info('Ignoring username parameter %r for session user %s', requested, username)

    rows = get_sheets_client().fetch_rows(username)
    rows = [row for row in rows if row and cell_text(row[0]) == username]

    report_code = (request.args.get('reportCode') or '').strip()
    if report_code:
        rows = [row for row in rows if cell_text(row[-1]) == report_code]

    return jsonify({'data': rows}), 200

@sheets_bp.route('/sheets', methods=['POST'])
@require_session
def create_report():
    data = _json_body()
    rows = sanitize_rows(data.get('rows'), g.identity.username)

    result = get_sheets_client().append_rows(rows)
    current_app.logger.info('Appended %d row(s) for %s', len(rows), g.identity.username)
    return jsonify(result), 200

@sheets_bp.route('/sheets', methods=['PUT'])
@require_session
def update_report():
    data = _json_body()
    report_code = data.get('reportCode')
    if not isinstance(report_code, str) or not report_code.strip():
        raise ValidationError('reportCode is required')
    report_code = sanitize_cell(report_code.strip())

    # the last cell of every row is overwritten with the report code
    rows = sanitize_rows(data.get('rows'), g.identity.username, min_cells=2)
    for row in rows:
        row[-1] = report_code

    result = get_sheets_client().replace_rows(report_code, rows)
    current_app.logger.info('Replaced report %s with %d row(s) for %s', report_code, len(rows), g.identity.username)
    return jsonify(result), 200
