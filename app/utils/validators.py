import re
from typing import Any, Iterable, Optional, Tuple


def validate_email_format(email: str) -> bool:
    """Validate email format."""
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def is_positive_int(value: Any) -> bool:
    """True for a JSON integer greater than zero (booleans excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def parse_positive_int(value: Any) -> Optional[int]:
    """Parse a path or query id. Returns None unless it is a positive integer."""
    if is_positive_int(value):
        return value
    if isinstance(value, str) and re.fullmatch(r'\s*\d+\s*', value):
        number = int(value)
        return number if number > 0 else None
    return None


def parse_int_param(value: Optional[str], default: int) -> int:
    """Parse an integer query parameter, falling back to default when absent or invalid."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def parse_bool_param(value: Optional[str], default: bool = False) -> bool:
    """Parse a boolean query parameter ("true"/"false")."""
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes')


def validate_required_fields(data: dict, fields: Iterable[str]) -> Tuple[bool, str]:
    """Check that every field is present and non-empty."""
    fields = list(fields)
    missing = [field for field in fields if data.get(field) in (None, '')]
    if missing:
        if len(fields) == 1:
            return False, f"{fields[0]} is required"
        joined = ', '.join(fields[:-1]) + f", and {fields[-1]}" if len(fields) > 2 else ' and '.join(fields)
        return False, f"{joined} are required fields"
    return True, "OK"


def validate_max_length(value: Optional[str], field: str, max_length: int) -> Tuple[bool, str]:
    """Validate an optional string against a column length."""
    if value is None:
        return True, "OK"
    if not isinstance(value, str):
        return False, f"{field} must be a string"
    if len(value) > max_length:
        return False, f"{field} must be {max_length} characters or less"
    return True, "OK"


def validate_lengths(data: dict, limits: dict) -> Tuple[bool, str]:
    """Validate several fields of a request body against their column lengths."""
    for field, max_length in limits.items():
        is_valid, message = validate_max_length(data.get(field), field, max_length)
        if not is_valid:
            return False, message
    return True, "OK"


def validate_choice(value: str, field: str, choices: Iterable[str]) -> Tuple[bool, str]:
    """Validate an enumerated query parameter."""
    choices = list(choices)
    if value not in choices:
        return False, f"Invalid {field} parameter. Valid options: {', '.join(choices)}"
    return True, "OK"
