import logging

import requests
from flask import current_app

from fieldreports.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class SheetsClient:
    """Relays row reads and writes to the spreadsheet-automation endpoint.

    Every method performs exactly one HTTP call and never retries.
    """

    def __init__(self, endpoint_url, timeout=None, session=None):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_rows(self, username):
        response, body = self._request('GET', params={'username': username})
        if isinstance(body, dict) and 'data' in body:
            body = body['data']
        if not isinstance(body, list) or not all(isinstance(row, list) for row in body):
            raise UpstreamError(upstream_status=response.status_code, body=response.text)
        return body

    def append_rows(self, rows):
        return self._write({'action': 'append', 'rows': rows})

    def replace_rows(self, report_code, rows):
        return self._write({'action': 'update', 'reportCode': report_code, 'rows': rows})

    def _write(self, payload):
        response, body = self._request('POST', json=payload)
        if not isinstance(body, dict):
            raise UpstreamError(upstream_status=response.status_code, body=response.text)
        result = {'success': body.get('success') is True}
        if not result['success'] and body.get('error'):
            result['error'] = str(body['error'])
        return result

    def _request(self, method, **kwargs):
        try:
            response = self.session.request(method, self.endpoint_url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.exception('Spreadsheet endpoint request failed')
            raise UpstreamError('Upstream request failed', body=str(e)) from e

        if not response.ok:
            logger.warning('Spreadsheet endpoint returned %s', response.status_code)
            raise UpstreamError('Upstream returned an error', upstream_status=response.status_code, body=response.text)

        try:
            return response, response.json()
        except ValueError:
            logger.warning('Spreadsheet endpoint returned a non-JSON body (status %s)', response.status_code)
            raise UpstreamError(upstream_status=response.status_code, body=response.text)


def get_sheets_client():
    """Client registered on the app, or one built from SHEETS_ENDPOINT_URL."""
    client = current_app.extensions.get('sheets_client')
    if client is not None:
        return client
    endpoint_url = current_app.config.get('SHEETS_ENDPOINT_URL')
    if not endpoint_url:
        raise ConfigurationError('Spreadsheet endpoint URL is not configured')
    return SheetsClient(endpoint_url, timeout=current_app.config.get('SHEETS_TIMEOUT'))
