"""
Base model utilities.

Helpers shared by the models' get_dict() implementations.
"""

from datetime import date, datetime


def isoformat(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def columns_dict(model, exclude=()):
    """Serialize every column of a model row, with ISO 8601 datetimes."""
    data = {}
    for column in model.__table__.columns:
        column_name = column.name
        if column_name in exclude:
            continue
        data[column_name] = isoformat(getattr(model, column_name))
    return data
