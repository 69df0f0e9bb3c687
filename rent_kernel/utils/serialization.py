"""
JSON-safe conversion of frozen domain records.

``to_primitive`` turns a dataclass tree into dicts, lists, strings and
numbers; ``from_primitive`` rebuilds the dataclass from that shape using
its type hints.  Decimals travel as strings so no precision is lost.
"""

import dataclasses
import json
import types
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Union, get_args, get_origin, get_type_hints
from uuid import UUID


def to_primitive(value: Any) -> Any:
    """Recursively convert a record to JSON-compatible primitives."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_primitive(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [to_primitive(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_primitive(v) for k, v in value.items()}
    return value


def from_primitive(cls: type, data: Any) -> Any:
    """
    Rebuild a value of type ``cls`` from ``to_primitive`` output.

    Raises:
        ValueError: If ``data`` cannot be read as ``cls``.
    """
    return _decode(cls, data)


def _decode(hint: Any, data: Any) -> Any:
    if data is None:
        return None

    origin = get_origin(hint)
    if origin in (Union, types.UnionType):
        members = [a for a in get_args(hint) if a is not type(None)]
        if len(members) != 1:
            raise ValueError(f"Cannot decode ambiguous union {hint}")
        return _decode(members[0], data)
    if origin is tuple:
        args = get_args(hint)
        item = args[0] if args else Any
        return tuple(_decode(item, v) for v in data)
    if origin is list:
        args = get_args(hint)
        item = args[0] if args else Any
        return [_decode(item, v) for v in data]

    if hint is Any:
        return data
    if dataclasses.is_dataclass(hint):
        hints = get_type_hints(hint)
        kwargs = {
            f.name: _decode(hints[f.name], data[f.name])
            for f in dataclasses.fields(hint)
            if f.init and f.name in data
        }
        return hint(**kwargs)
    if isinstance(hint, type) and issubclass(hint, Enum):
        return hint(data)
    if hint is Decimal:
        return Decimal(str(data))
    if hint is UUID:
        return data if isinstance(data, UUID) else UUID(str(data))
    if hint is datetime:
        return data if isinstance(data, datetime) else datetime.fromisoformat(data)
    if hint is date:
        return data if isinstance(data, date) else date.fromisoformat(data)
    return data


def dumps(value: Any, **kwargs: Any) -> str:
    """``json.dumps`` of ``to_primitive(value)``."""
    return json.dumps(to_primitive(value), **kwargs)
