"""Serialization: convert typed Python values into generic JSON values.

Encoding follows the runtime value, so a subtype stored under a base-typed
member emits its own members. It never calls constructors and never consults
the class registry; a subtype that must round-trip through a class tag adds a
member carrying the tag itself (see ``examples/basic_usage.py``).
"""

import json
from enum import Enum
from pathlib import PurePath
from typing import Any

from ..config import COMPACT_SEPARATORS, PRETTY_INDENT
from ..exceptions import JsonizeSchemaError, type_name
from ..schema.descriptor import schema_of
from ..schema.typing_utils import is_aggregate

__all__ = ["encode", "encode_text", "dump_text"]


def encode(value: Any) -> Any:
    """Encode ``value`` into a generic JSON value.

    ``None`` becomes ``null``, enums their member name, paths strings,
    sequences and sets arrays, string-keyed dicts objects, and aggregates
    objects holding their output-allowed members in declaration order.

    Raises:
        JsonizeSchemaError: If the value (or a nested value) has no JSON form.
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, dict):
        return {_encode_key(key): encode(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [encode(item) for item in value]
    if is_aggregate(type(value)):
        return _encode_object(value)
    raise JsonizeSchemaError(f"Cannot encode value of type {type_name(type(value))}: {value!r}")


def _encode_key(key: Any) -> str:
    if not isinstance(key, str):
        raise JsonizeSchemaError(f"JSON object keys must be strings, got {type_name(type(key))}")
    # str-mixin enum keys keep their string value so the key decodes back unchanged
    return key.value if isinstance(key, Enum) else key


def _encode_object(obj: Any) -> dict[str, Any]:
    schema = schema_of(type(obj))
    result = {}
    for member in schema.members:
        if not member.output_allowed:
            continue
        value = member.read(obj)
        if member.output_optional and _is_initial(value, member.default):
            continue
        result[member.key] = encode(value)
    return result


def _is_initial(value: Any, default: Any) -> bool:
    """Whether ``value`` equals the member's default, in type as well as value."""
    return type(value) is type(default) and value == default


def dump_text(json_value: Any, pretty: bool = True) -> str:
    """Print a generic JSON value as text."""
    if pretty:
        return json.dumps(json_value, indent=PRETTY_INDENT, ensure_ascii=False)
    return json.dumps(json_value, separators=COMPACT_SEPARATORS, ensure_ascii=False)


def encode_text(value: Any, pretty: bool = True) -> str:
    """Encode ``value`` and print it as JSON text.

    Example:
        >>> encode_text([1, 2, 3], pretty=False)
        '[1,2,3]'
    """
    return dump_text(encode(value), pretty)
