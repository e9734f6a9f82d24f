import pytest

from fieldreports.errors import ValidationError
from fieldreports.services.sanitizer import MAX_CELL_LENGTH, sanitize_cell, sanitize_rows


def test_identity_column_is_pinned():
    rows = [['mallory', '2024-01-05', 'A'], ['', '2024-01-05', 'A'], [None, 'x']]
    result = sanitize_rows(rows, 'alice')
    assert [row[0] for row in result] == ['alice', 'alice', 'alice']

def test_angle_brackets_are_escaped():
    result = sanitize_rows([['alice', '<script>alert(1)</script>']], 'alice')
    assert result[0][1] == '&lt;script&gt;alert(1)&lt;/script&gt;'

def test_long_cells_are_truncated():
    result = sanitize_rows([['alice', 'x' * (MAX_CELL_LENGTH + 50)]], 'alice')
    assert len(result[0][1]) == MAX_CELL_LENGTH

def test_non_string_scalars_pass_through():
    result = sanitize_rows([['alice', 3, 2.5, True, None]], 'alice')
    assert result[0] == ['alice', 3, 2.5, True, None]

def test_clean_rows_are_unchanged_apart_from_identity():
    row = ['bob', '2024-01-05', 'Team A', '123 Main', '2', '', 'RPT-X']
    once = sanitize_rows([row], 'alice')
    twice = sanitize_rows(once, 'alice')
    assert once == twice
    assert once[0][1:] == row[1:]

def test_input_is_not_mutated():
    rows = [['bob', '<b>']]
    sanitize_rows(rows, 'alice')
    assert rows == [['bob', '<b>']]

@pytest.mark.parametrize('rows', [
    None,
    [],
    'not rows',
    {'0': ['alice']},
    [['alice', 'ok'], 'not a row'],
    [['alice', 'ok'], []],
    [['alice', {'nested': 'cell'}]],
    [['alice', ['nested']]],
])
def test_malformed_batches_are_rejected(rows):
    with pytest.raises(ValidationError):
        sanitize_rows(rows, 'alice')

def test_min_cells():
    with pytest.raises(ValidationError):
        sanitize_rows([['alice']], 'alice', min_cells=2)

def test_escaped_cell_stays_within_limit():
    assert sanitize_cell('<' * MAX_CELL_LENGTH) == '&lt;' * (MAX_CELL_LENGTH // 4)
    assert len(sanitize_cell('x<' * MAX_CELL_LENGTH)) <= MAX_CELL_LENGTH

def test_clamp_never_splits_an_entity():
    value = 'a' * (MAX_CELL_LENGTH - 2) + '<>'
    assert sanitize_cell(value) == 'a' * (MAX_CELL_LENGTH - 2)

def test_escaped_text_fits_exactly():
    value = 'a' * (MAX_CELL_LENGTH - 4) + '<b'
    assert sanitize_cell(value) == 'a' * (MAX_CELL_LENGTH - 4) + '&lt;'
