"""
JSON payload conversion for calculation results
Engine dataclasses -> camelCase dicts with currency as JSON numbers
"""

import dataclasses
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic.alias_generators import to_camel


def to_payload(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {to_camel(f.name): to_payload(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {to_payload(k) if isinstance(k, Enum) else k: to_payload(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(to_payload(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    return value
