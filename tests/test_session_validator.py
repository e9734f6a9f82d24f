from unittest.mock import Mock

import pytest

from fieldreports.auth_utils import extract_bearer_token, validate_session
from fieldreports.errors import Unauthorized
from fieldreports.services.account_service import AccountStoreError, SessionIdentity

VALID_TOKEN = 'a' * 64


@pytest.mark.parametrize('token', [
    None,
    '',
    'a' * 63,
    'a' * 65,
    'A' * 64,
    'g' * 64,
    'a' * 64 + '\n',
    ' ' + 'a' * 63,
    12345,
])
def test_malformed_token_never_reaches_store(token):
    store = Mock()
    with pytest.raises(Unauthorized):
        validate_session(token, store)
    assert store.lookup_session.call_count == 0

def test_valid_token_returns_identity():
    store = Mock()
    store.lookup_session.return_value = SessionIdentity(username='alice', user_id=7)

    identity = validate_session(VALID_TOKEN, store)

    assert identity.username == 'alice'
    assert identity.user_id == 7
    store.lookup_session.assert_called_once_with(VALID_TOKEN)

def test_unknown_token_is_unauthorized():
    store = Mock()
    store.lookup_session.return_value = None
    with pytest.raises(Unauthorized):
        validate_session(VALID_TOKEN, store)

def test_store_failure_is_unauthorized():
    store = Mock()
    store.lookup_session.side_effect = AccountStoreError('connection refused')
    with pytest.raises(Unauthorized) as excinfo:
        validate_session(VALID_TOKEN, store)
    assert 'connection refused' not in str(excinfo.value)

def test_extract_bearer_token():
    assert extract_bearer_token(f'Bearer {VALID_TOKEN}') == VALID_TOKEN
    assert extract_bearer_token(VALID_TOKEN) is None
    assert extract_bearer_token('Basic abc') is None
    assert extract_bearer_token('') is None

def test_rejections_are_indistinguishable(client, sheets, app):
    malformed = client.get('/api/sheets', headers={'Authorization': 'Bearer nope'})
    unknown = client.get('/api/sheets', headers={'Authorization': f'Bearer {VALID_TOKEN}'})
    missing = client.get('/api/sheets')

    app.extensions['account_store'] = Mock(**{'lookup_session.side_effect': AccountStoreError('down')})
    store_down = client.get('/api/sheets', headers={'Authorization': f'Bearer {VALID_TOKEN}'})

    for response in (malformed, unknown, missing, store_down):
        assert response.status_code == 401
        assert response.json == {'error': 'Unauthorized'}
    assert sheets.calls == []
