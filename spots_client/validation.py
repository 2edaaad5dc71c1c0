from spots_client.exceptions import ValidationException


def is_positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def require_positive_id(value, name):
    """Raise ValidationException unless value is a positive integer id."""
    if not is_positive_int(value):
        raise ValidationException(f"Valid {name} is required")
    return value


def require_choice(value, name, choices):
    if value not in choices:
        raise ValidationException(f"Invalid {name}. Valid options: {', '.join(choices)}")
    return value


def bool_param(value):
    return "true" if value else "false"
