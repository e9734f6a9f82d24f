from datetime import datetime, timezone

def utcnow():
    """Returns the current UTC time as a naive datetime, matching what the database stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def is_blank(value) -> bool:
    if value is None:
        return True
    return str(value).strip() == ''

def cell_text(value) -> str:
    """Spreadsheet cells may come back as numbers; compare them as trimmed text."""
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()
