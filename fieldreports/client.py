"""HTTP client for the reports proxy, as used by the data-entry front end."""
import logging

import requests

from fieldreports.layouts import ColumnLayout
from fieldreports.report_mapping import group_reports, report_to_rows, row_to_report

logger = logging.getLogger(__name__)


class ReportsClientError(Exception):
    def __init__(self, status, message):
        super().__init__(f'{status}: {message}')
        self.status = status
        self.message = message


class ReportsClient:
    def __init__(self, base_url, token, username=None, layout=ColumnLayout.V35, session=None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.username = username
        self.layout = layout
        self.session = session or requests.Session()

    @classmethod
    def login(cls, base_url, username, password, layout=ColumnLayout.V35, session=None):
        session = session or requests.Session()
        response = session.post(f"{base_url.rstrip('/')}/auth/login",
                                json={'username': username, 'password': password})
        body = cls._parse(response)
        return cls(base_url, body['access_token'], username=body['username'], layout=layout, session=session)

    @property
    def sheets_url(self):
        return f'{self.base_url}/api/sheets'

    def _headers(self):
        return {'Authorization': f'Bearer {self.token}'}

    @staticmethod
    def _parse(response):
        try:
            body = response.json()
        except ValueError:
            body = None
        if not response.ok:
            message = body.get('error') if isinstance(body, dict) else response.text[:200]
            raise ReportsClientError(response.status_code, message or response.reason)
        return body

    def fetch_rows(self, report_code=None):
        params = {'reportCode': report_code} if report_code else None
        body = self._parse(self.session.get(self.sheets_url, params=params, headers=self._headers()))
        # older deployments answered with a bare list
        if isinstance(body, dict):
            body = body.get('data', [])
        return body or []

    def fetch_reports(self):
        return [row_to_report(row, self.layout) for row in self.fetch_rows()]

    def fetch_grouped_reports(self):
        return group_reports(self.fetch_reports())

    def fetch_reports_by_code(self, report_code):
        return [row_to_report(row, self.layout) for row in self.fetch_rows(report_code)]

    def submit_report(self, form):
        rows = report_to_rows(form, self.username or '', self.layout)
        body = self._parse(self.session.post(self.sheets_url, json={'rows': rows}, headers=self._headers()))
        logger.info('Submitted %d row(s) for report %s', len(rows), rows[0][-1])
        return isinstance(body, dict) and body.get('success') is True

    def update_report(self, form):
        if not form.report_code:
            raise ValueError('Cannot update a report without a report code')
        rows = report_to_rows(form, self.username or '', self.layout)
        body = self._parse(self.session.put(
            self.sheets_url,
            json={'reportCode': form.report_code, 'rows': rows},
            headers=self._headers(),
        ))
        return isinstance(body, dict) and body.get('success') is True

    def logout(self):
        self._parse(self.session.post(f'{self.base_url}/auth/logout', headers=self._headers()))
        self.token = None
