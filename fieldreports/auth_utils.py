import logging
import re
from functools import wraps
from flask import request, current_app, g

from fieldreports.errors import Unauthorized
from fieldreports.services.account_service import AccountStoreError

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r'[0-9a-f]{64}')

def extract_bearer_token(header):
    if not header or not header.startswith('Bearer '):
        return None
    parts = header.split(None, 1)
    return parts[1].strip() if len(parts) == 2 else None

def get_account_store():
    return current_app.extensions['account_store']

def validate_session(token, store=None):
    """Resolve a bearer token to its SessionIdentity or raise Unauthorized.

    Malformed tokens are rejected before the store is consulted. Unknown,
    expired and revoked sessions, and store failures, all raise the same error.
    """
    if not isinstance(token, str) or not TOKEN_PATTERN.fullmatch(token):
        raise Unauthorized()

    if store is None:
        store = get_account_store()
    try:
        identity = store.lookup_session(token)
    except AccountStoreError:
        logger.exception('Account store lookup failed')
        raise Unauthorized()

    if identity is None:
        raise Unauthorized()
    return identity

def require_session(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        token = extract_bearer_token(request.headers.get('Authorization', ''))
        # identity lives on g, so it is discarded with the request
        g.identity = validate_session(token)
        g.session_token = token
        return f(*args, **kwargs)
    return wrapper
