from flask import Blueprint, request, jsonify, g, current_app
from fieldreports.auth_utils import require_session
from fieldreports.services.account_service import (
    RegistrationError,
    register_account,
    verify_login,
    create_session,
    revoke_session,
    validate_username,
    validate_password,
)

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    try:
        account = register_account(data.get('username'), data.get('password'))
    except RegistrationError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({'message': 'Account created successfully', 'username': account.username}), 201

@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')

    error = validate_username(username) or validate_password(password)
    if error:
        return jsonify({'error': error}), 400

    account = verify_login(username, password, ip_address=request.remote_addr or 'unknown')
    if account is None:
        return jsonify({'error': 'Invalid credentials'}), 401

    session = create_session(account, current_app.config['SESSION_LIFETIME_HOURS'])
    return jsonify({
        'access_token': session.token,
        'username': account.username,
        'user_id': account.id,
        'expires_at': session.expires_at.isoformat(),
    }), 200

@auth_bp.route('/logout', methods=['POST'])
@require_session
def logout():
    revoke_session(g.session_token)
    return jsonify({'message': 'Logged out'}), 200

@auth_bp.route('/session', methods=['GET'])
@require_session
def current_session():
    return jsonify({'username': g.identity.username, 'user_id': g.identity.user_id}), 200
