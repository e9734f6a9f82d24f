from fieldreports.errors import ValidationError

MAX_CELL_LENGTH = 1000
SCALAR_TYPES = (str, int, float, bool, type(None))
ESCAPES = {'<': '&lt;', '>': '&gt;'}


def sanitize_cell(value):
    """Escape angle brackets and clamp a string cell; other scalars pass through.

    The clamp applies to the escaped text and never splits an entity.
    """
    if not isinstance(value, str):
        return value
    if len(value) <= MAX_CELL_LENGTH and '<' not in value and '>' not in value:
        return value

    parts = []
    size = 0
    for ch in value:
        piece = ESCAPES.get(ch, ch)
        if size + len(piece) > MAX_CELL_LENGTH:
            break
        parts.append(piece)
        size += len(piece)
    return ''.join(parts)


def sanitize_rows(rows, username, min_cells=1):
    """Return a sanitized copy of rows with column 0 pinned to username.

    Raises ValidationError for the whole batch if any row is malformed.
    """
    if not isinstance(rows, list) or not rows:
        raise ValidationError('rows must be a non-empty array')

    for idx, row in enumerate(rows):
        if not isinstance(row, list):
            raise ValidationError(f'Row {idx} must be an array')
        if len(row) < min_cells:
            raise ValidationError(f'Row {idx} must have at least {min_cells} cell(s)')
        for cell in row:
            if not isinstance(cell, SCALAR_TYPES):
                raise ValidationError(f'Row {idx} contains a non-scalar cell')

    return [[username] + [sanitize_cell(cell) for cell in row[1:]] for row in rows]
