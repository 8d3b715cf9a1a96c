"""
Adapters from external record shapes to the canonical tank and reading fields.

Imports, CSV uploads and partner feeds name the same concept several ways
(safe_fill vs capacity vs safe_level). Everything past this module only
sees the canonical names.
"""
from datetime import datetime
import math
from typing import Any, Dict, List, Optional

TANK_FIELD_ALIASES: Dict[str, List[str]] = {
    'location': ['location', 'location_name', 'site', 'name'],
    'product_type': ['product_type', 'product', 'fuel_type'],
    'safe_level': ['safe_level', 'safe_fill', 'capacity', 'capacity_liters', 'tank_capacity'],
    'min_level': ['min_level', 'minimum_level', 'min', 'min_fill'],
    'group_id': ['group_id', 'tank_group_id'],
    'subgroup': ['subgroup', 'sub_group', 'depot'],
    'address': ['address'],
    'notes': ['notes'],
    'latitude': ['latitude', 'lat'],
    'longitude': ['longitude', 'lng', 'lon'],
}

READING_FIELD_ALIASES: Dict[str, List[str]] = {
    'timestamp': ['timestamp', 'created_at', 'reading_at', 't', 'Time', 'Read Date', 'date'],
    'value': ['value', 'level', 'level_liters', 'dip', 'litres', 'liters', 'Tank Volume', 'volume', 'g'],
    'recorded_by': ['recorded_by', 'recorder', 'source', 'user'],
}

NUMERIC_TANK_FIELDS = ('safe_level', 'min_level', 'latitude', 'longitude')

DATE_FORMATS = [
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%dT%H:%M:%S',
    '%d/%m/%Y %H:%M:%S',
    '%d/%m/%Y %H:%M',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%d',
]


def pick(record: Dict[str, Any], aliases: List[str]) -> Any:
    """Value of the first alias present in record with a non-blank value."""
    for key in aliases:
        if key in record:
            value = record[key]
            if isinstance(value, str):
                value = value.strip()
                if value == '':
                    continue
            if value is not None:
                return value
    return None


def to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.replace(',', '').strip().strip('"')
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Not a finite number: {value!r}")
    return number


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return (value - value.utcoffset()).replace(tzinfo=None)
        return value
    text = str(value).strip().strip('"')
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    # ISO 8601 with offset or fraction; stored naive in UTC
    parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
    if parsed.tzinfo is not None:
        parsed = (parsed - parsed.utcoffset()).replace(tzinfo=None)
    return parsed


def normalize_tank_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    record = {}
    for field, aliases in TANK_FIELD_ALIASES.items():
        value = pick(raw, aliases)
        if field in NUMERIC_TANK_FIELDS:
            value = to_float(value)
        elif field == 'group_id' and value is not None:
            value = int(value)
        record[field] = value

    if record['min_level'] is None:
        record['min_level'] = 0.0
    if not record['location']:
        raise ValueError("Tank record has no location")
    return record


def normalize_reading_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Canonical reading dict. Raises ValueError or KeyError for unusable rows."""
    ts = pick(raw, READING_FIELD_ALIASES['timestamp'])
    value = pick(raw, READING_FIELD_ALIASES['value'])
    if ts is None or value is None:
        raise KeyError("Reading record is missing a timestamp or value")

    level = to_float(value)
    if level < 0:
        raise ValueError(f"Reading value cannot be negative: {level}")

    recorded_by = pick(raw, READING_FIELD_ALIASES['recorded_by'])
    return {
        'timestamp': parse_timestamp(ts),
        'value': level,
        'recorded_by': str(recorded_by) if recorded_by is not None else None,
    }
