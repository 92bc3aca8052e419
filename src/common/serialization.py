"""Serialization utilities."""

from dataclasses import asdict
from datetime import date, datetime


def _serialize_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    return value


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to dict, converting datetimes and dates to ISO strings."""
    data = asdict(obj)
    for key, value in data.items():
        data[key] = _serialize_value(value)
    return data
