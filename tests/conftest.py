import json

import pytest
from fieldreports import create_app
from fieldreports.extensions import db


class FakeSheetsClient:
    """Stands in for the spreadsheet endpoint and records every call."""

    def __init__(self):
        self.rows = []
        self.calls = []
        self.write_result = {'success': True}
        self.error = None

    def _record(self, *call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    def fetch_rows(self, username):
        self._record('fetch', username)
        return [list(row) for row in self.rows]

    def append_rows(self, rows):
        self._record('append', rows)
        return dict(self.write_result)

    def replace_rows(self, report_code, rows):
        self._record('replace', report_code, rows)
        return dict(self.write_result)


class StubResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)
        self.reason = 'STUB'

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


class StubSession:
    """Minimal requests.Session replacement returning queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self.request('GET', url, **kwargs)

    def post(self, url, **kwargs):
        return self.request('POST', url, **kwargs)

    def put(self, url, **kwargs):
        return self.request('PUT', url, **kwargs)


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def sheets(app):
    fake = FakeSheetsClient()
    app.extensions['sheets_client'] = fake
    return fake


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def stub_response():
    return StubResponse


@pytest.fixture
def stub_session():
    return StubSession


def login_as(client, username, password='secret123'):
    client.post('/auth/register', json={'username': username, 'password': password})
    response = client.post('/auth/login', json={'username': username, 'password': password})
    return response.json['access_token']


@pytest.fixture
def alice_token(client):
    return login_as(client, 'alice')


@pytest.fixture
def alice_headers(alice_token):
    return {'Authorization': f'Bearer {alice_token}'}
