"""Column layouts for report rows stored in the spreadsheet.

A row is positional: column 0 is the owning username and the last column is
the report code. The columns in between depend on the layout revision, which
is always chosen explicitly and never guessed from a row's width.
"""
from enum import Enum

BASIC_FIELDS = (
    'date',
    'team',
    'installer1',
    'installer2',
    'installer3',
    'installer4',
)

# (row column, CompletedCase attribute)
COMPLETED_COLUMNS = (
    ('address', 'address'),
    ('actual_duration', 'actual_duration'),
    ('difficulties', 'difficulties'),
    ('measuring_colleague', 'measuring_colleague'),
    ('customer_feedback', 'customer_feedback'),
    ('customer_witness', 'customer_witness'),
    ('doors_installed', 'doors_installed'),
    ('windows_installed', 'windows_installed'),
    ('aluminum_installed', 'aluminum_installed'),
    ('old_grilles_removed', 'old_grilles_removed'),
)

# (row column, FollowUpCase attribute)
FOLLOW_UP_COLUMNS = (
    ('follow_up_address', 'address'),
    ('follow_up_duration', 'duration'),
    ('materials_cut', 'materials_cut'),
    ('materials_supplemented', 'materials_supplemented'),
    ('reorders', 'reorders'),
    ('follow_up_measuring_colleague', 'measuring_colleague'),
    ('reorder_location', 'reorder_location'),
    ('responsibility', 'responsibility'),
    ('urgency', 'urgency'),
    ('follow_up_details', 'details'),
    ('follow_up_customer_feedback', 'customer_feedback'),
    ('follow_up_doors_installed', 'doors_installed'),
    ('follow_up_windows_installed', 'windows_installed'),
    ('follow_up_aluminum_installed', 'aluminum_installed'),
    ('follow_up_old_grilles_removed', 'old_grilles_removed'),
)

NUMERIC_COLUMNS = frozenset({
    'doors_installed', 'windows_installed', 'aluminum_installed', 'old_grilles_removed',
    'materials_cut', 'materials_supplemented', 'reorders',
    'follow_up_doors_installed', 'follow_up_windows_installed',
    'follow_up_aluminum_installed', 'follow_up_old_grilles_removed',
})

_BASE_COLUMNS = (
    ('username',)
    + BASIC_FIELDS
    + tuple(column for column, _ in COMPLETED_COLUMNS)
    + tuple(column for column, _ in FOLLOW_UP_COLUMNS)
)


class LayoutMismatchError(ValueError):
    """A self-describing row names a different layout than the one requested."""


class ColumnLayout(Enum):
    V33 = 33
    V34 = 34  # adds an explicit case-type column
    V35 = 35  # adds a layout-version column as well

    @classmethod
    def from_width(cls, width):
        try:
            return cls(int(width))
        except (TypeError, ValueError):
            raise ValueError(f'Unknown column layout: {width!r}') from None

    @property
    def columns(self):
        extra = {
            ColumnLayout.V33: (),
            ColumnLayout.V34: ('case_type',),
            ColumnLayout.V35: ('case_type', 'layout_version'),
        }[self]
        return _BASE_COLUMNS + extra + ('report_code',)

    @property
    def width(self):
        return self.value

    @property
    def numeric_default(self):
        # the first revision wrote 0 for blank counts
        return 0 if self is ColumnLayout.V33 else ''

    @property
    def has_case_type(self):
        return 'case_type' in self.columns

    @property
    def has_version(self):
        return 'layout_version' in self.columns

    def index(self, column):
        return self.columns.index(column)
