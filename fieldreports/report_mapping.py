"""Conversion between structured report forms and flat spreadsheet rows."""
import re
import time
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import List, Optional

import pandas as pd

from fieldreports.layouts import (
    BASIC_FIELDS,
    COMPLETED_COLUMNS,
    FOLLOW_UP_COLUMNS,
    NUMERIC_COLUMNS,
    ColumnLayout,
    LayoutMismatchError,
)
from fieldreports.utils import cell_text, is_blank

DEFAULT_URGENCY = '正常'
BASE36_DIGITS = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'

ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
YEAR_FIRST = re.compile(r'^(\d{4})[/-](\d{1,2})[/-](\d{1,2})')
DAY_FIRST = re.compile(r'^(\d{1,2})[/-](\d{1,2})[/-](\d{4})')


class CaseKind(Enum):
    COMPLETED = 'completed'
    FOLLOW_UP = 'follow_up'
    BASIC_ONLY = 'basic'


@dataclass
class BasicInfo:
    date: str = ''
    team: str = ''
    installer1: str = ''
    installer2: str = ''
    installer3: str = ''
    installer4: str = ''


@dataclass
class CompletedCase:
    address: str = ''
    actual_duration: str = ''
    difficulties: str = ''
    measuring_colleague: str = ''
    customer_feedback: str = ''
    customer_witness: str = ''
    doors_installed: object = ''
    windows_installed: object = ''
    aluminum_installed: object = ''
    old_grilles_removed: object = ''


@dataclass
class FollowUpCase:
    address: str = ''
    duration: str = ''
    materials_cut: object = ''
    materials_supplemented: object = ''
    reorders: object = ''
    measuring_colleague: str = ''
    reorder_location: str = ''
    responsibility: str = ''
    urgency: str = ''
    details: str = ''
    customer_feedback: str = ''
    doors_installed: object = ''
    windows_installed: object = ''
    aluminum_installed: object = ''
    old_grilles_removed: object = ''


@dataclass
class ReportForm:
    basic_info: BasicInfo = field(default_factory=BasicInfo)
    completed_cases: List[CompletedCase] = field(default_factory=list)
    follow_up_cases: List[FollowUpCase] = field(default_factory=list)
    report_code: str = ''


@dataclass
class Report:
    """One decoded row, tagged with the kind of case it carries."""
    username: str
    basic_info: BasicInfo
    report_code: str
    kind: CaseKind
    completed: Optional[CompletedCase] = None
    follow_up: Optional[FollowUpCase] = None


@dataclass
class GroupedReport:
    report_code: str
    username: str
    basic_info: BasicInfo
    completed_cases: List[CompletedCase] = field(default_factory=list)
    follow_up_cases: List[FollowUpCase] = field(default_factory=list)
    reports: List[Report] = field(default_factory=list)

    @property
    def completed_count(self):
        return len(self.completed_cases)

    @property
    def follow_up_count(self):
        return len(self.follow_up_cases)


def generate_report_code(now_ms=None):
    """RPT-<base36 millisecond timestamp>, upper case."""
    n = int(time.time() * 1000) if now_ms is None else int(now_ms)
    digits = ''
    while True:
        n, rem = divmod(n, 36)
        digits = BASE36_DIGITS[rem] + digits
        if n == 0:
            break
    return f'RPT-{digits}'


def normalize_date(value):
    """Canonicalize a sheet date to YYYY-MM-DD, or '' when it cannot be read."""
    text = '' if value is None else str(value).strip()
    if not text:
        return ''
    if ISO_DATE.match(text):
        return text

    match = YEAR_FIRST.match(text)
    if match:
        y, m, d = match.groups()
        return f'{y}-{m.zfill(2)}-{d.zfill(2)}'

    match = DAY_FIRST.match(text)
    if match:
        d, m, y = match.groups()
        return f'{y}-{m.zfill(2)}-{d.zfill(2)}'

    try:
        parsed = pd.to_datetime(text, errors='coerce')
    except (ValueError, OverflowError):
        return ''
    if pd.isna(parsed):
        return ''
    return parsed.strftime('%Y-%m-%d')


def _parse_count(value, default):
    if is_blank(value) or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    match = re.match(r'^\s*([+-]?\d+)', str(value))
    return int(match.group(1)) if match else default


def _cell_text(value):
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return '' if value is None else str(value)


def _is_present(value, zero_is_blank=False):
    if is_blank(value):
        return False
    return not (zero_is_blank and str(value).strip() == '0')


def _has_case_data(case, zero_is_blank=False):
    return any(_is_present(v, zero_is_blank) for v in (case.address, case.doors_installed, case.windows_installed))


def row_to_report(row, layout=ColumnLayout.V35):
    """Decode one positional row into a Report."""
    columns = layout.columns
    cells = list(row)[:layout.width]
    cells += [''] * (layout.width - len(cells))
    values = {}
    for column, cell in zip(columns, cells):
        if column in NUMERIC_COLUMNS:
            values[column] = _parse_count(cell, layout.numeric_default)
        else:
            values[column] = _cell_text(cell)

    version = cell_text(values['layout_version']) if layout.has_version else ''
    if version and version != str(layout.value):
        raise LayoutMismatchError(
            f"Row declares layout {version}, expected {layout.value}"
        )

    basic = BasicInfo(**{name: values[name] for name in BASIC_FIELDS})
    completed = CompletedCase(**{attr: values[column] for column, attr in COMPLETED_COLUMNS})
    follow_up = FollowUpCase(**{attr: values[column] for column, attr in FOLLOW_UP_COLUMNS})

    # without a case-type column blank counts were written back as 0
    zero_is_blank = not layout.has_case_type
    kind = None
    if layout.has_case_type and values['case_type']:
        try:
            kind = CaseKind(values['case_type'])
        except ValueError:
            kind = None
    if kind is None:
        if _has_case_data(completed, zero_is_blank):
            kind = CaseKind.COMPLETED
        elif _has_case_data(follow_up, zero_is_blank):
            kind = CaseKind.FOLLOW_UP
        else:
            kind = CaseKind.BASIC_ONLY

    report = Report(
        username=cell_text(values['username']),
        basic_info=basic,
        report_code=cell_text(values['report_code']),
        kind=kind,
    )
    if kind is CaseKind.COMPLETED or (zero_is_blank and _has_case_data(completed, True)):
        report.completed = completed
    if kind is CaseKind.FOLLOW_UP or (zero_is_blank and _has_case_data(follow_up, True)):
        report.follow_up = follow_up
    return report


def _build_row(username, basic, report_code, layout, kind, completed=None, follow_up=None):
    values = {'username': username, 'report_code': report_code}
    values.update(asdict(basic))
    for column, attr in COMPLETED_COLUMNS:
        values[column] = _cell_text(getattr(completed, attr)) if completed else ''
    for column, attr in FOLLOW_UP_COLUMNS:
        values[column] = _cell_text(getattr(follow_up, attr)) if follow_up else ''
    values['case_type'] = kind.value
    values['layout_version'] = str(layout.value)
    return [values[column] for column in layout.columns]


def report_to_rows(form, username, layout=ColumnLayout.V35):
    """Flatten a ReportForm into one row per filled-in case.

    A report with no filled-in cases still yields a single basic-info row.
    """
    report_code = form.report_code or generate_report_code()
    rows = []
    for case in form.completed_cases:
        if _has_case_data(case):
            rows.append(_build_row(username, form.basic_info, report_code, layout,
                                   CaseKind.COMPLETED, completed=case))
    for case in form.follow_up_cases:
        if _has_case_data(case):
            rows.append(_build_row(username, form.basic_info, report_code, layout,
                                   CaseKind.FOLLOW_UP, follow_up=case))
    if not rows:
        rows.append(_build_row(username, form.basic_info, report_code, layout, CaseKind.BASIC_ONLY))
    return rows


def group_reports(reports):
    """Group decoded rows by report code, keeping first-seen order."""
    groups = {}
    for index, report in enumerate(reports):
        key = report.report_code or f'temp-{index}'
        group = groups.get(key)
        if group is None:
            group = groups[key] = GroupedReport(
                report_code=report.report_code,
                username=report.username,
                basic_info=report.basic_info,
            )
        group.reports.append(report)
        if report.completed is not None:
            group.completed_cases.append(report.completed)
        if report.follow_up is not None:
            group.follow_up_cases.append(report.follow_up)
    return list(groups.values())


def _as_form_text(value):
    # blank and zero counts both come back as an empty input
    if is_blank(value) or value == 0:
        return ''
    return str(value)


def _case_to_form(case, cls):
    values = {}
    for f in fields(cls):
        values[f.name] = _as_form_text(getattr(case, f.name))
    return cls(**values)


def grouped_to_form(group):
    """Editable form data for an existing report."""
    completed = [_case_to_form(c, CompletedCase) for c in group.completed_cases]
    follow_ups = [_case_to_form(c, FollowUpCase) for c in group.follow_up_cases]
    for case in follow_ups:
        case.urgency = case.urgency or DEFAULT_URGENCY

    basic = BasicInfo(**asdict(group.basic_info))
    basic.date = normalize_date(basic.date)
    return ReportForm(
        basic_info=basic,
        completed_cases=completed or [CompletedCase()],
        follow_up_cases=follow_ups or [FollowUpCase(urgency=DEFAULT_URGENCY)],
        report_code=group.report_code,
    )
