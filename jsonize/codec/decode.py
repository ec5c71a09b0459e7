"""Deserialization: convert generic JSON values into typed Python values.

``decode_value`` is the engine entry point used recursively for every nested
value. It dispatches on the category of the target type hint:

1. raw JSON (``JsonValue``, ``Any``, ``object``, unbound TypeVars): identity
2. enums: by member name
3. ``bool``: JSON ``true``/``false`` only
4. ``str`` and paths: JSON strings, ``null`` gives ``None``
5. ``int``/``float``: JSON numbers, or strings holding a number literal
6. sequences, sets and tuples: JSON arrays, ``null`` gives ``None``
7. ``dict[str, V]``: JSON objects, ``null`` gives ``None``
8. ``Optional[T]``: ``null`` gives ``None``, anything else is decoded as ``T``
9. user-defined aggregates: see ``jsonize.codec.construct``

Public functions ``decode`` and ``decode_text`` wrap the engine with option
handling, keyed extraction and text parsing.
"""

import json
import math
import re
from enum import Enum
from pathlib import PurePath
from typing import Any, get_args, get_origin

from .construct import decode_aggregate
from ..exceptions import (
    JsonizeArityError,
    JsonizeMissingKeyError,
    JsonizeSchemaError,
    JsonizeTypeError,
    type_name,
)
from ..models import DecodeOptions
from ..schema.typing_utils import (
    MAPPING_ORIGINS,
    SEQUENCE_ORIGINS,
    SET_ORIGINS,
    UNION_ORIGINS,
    is_aggregate,
    is_identity_type,
    optional_inner,
    unwrap_annotated,
)

__all__ = ["decode_value", "decode", "decode_text", "make_options"]

_INT_LITERAL = re.compile(r"[+-]?\d+")
_FLOAT_LITERAL = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

_MISSING = object()


def decode_value(json_value: Any, tp: Any, options: DecodeOptions, context: Any = None) -> Any:
    """Decode ``json_value`` into a value of type ``tp``.

    Args:
        json_value: A generic JSON value (``None``, bool, int, float, str, list, dict).
        tp: The target type hint.
        options: Options propagated to every nested call.
        context: Value handed to constructor parameters marked ``CONTEXT``.

    Returns:
        The decoded value.

    Raises:
        JsonizeError: If the JSON cannot be converted.
        JsonizeSchemaError: If ``tp`` is not a supported type.
    """
    base, _ = unwrap_annotated(tp)

    if is_identity_type(base):
        return json_value

    origin = get_origin(base)
    if origin is not None:
        args = get_args(base)
        if origin in UNION_ORIGINS:
            inner = optional_inner(base)
            if inner is None:
                raise JsonizeSchemaError(f"Cannot decode into union {type_name(base)}")
            if json_value is None:
                return None
            return decode_value(json_value, inner, options, context)
        if origin is tuple:
            return _decode_tuple(json_value, base, args, options, context)
        if origin in SEQUENCE_ORIGINS:
            return _decode_array(json_value, base, args, list, options, context)
        if origin in SET_ORIGINS:
            container = frozenset if origin is frozenset else set
            return _decode_array(json_value, base, args, container, options, context)
        if origin in MAPPING_ORIGINS:
            return _decode_object(json_value, base, args, options, context)
        if is_aggregate(origin):
            return decode_aggregate(json_value, base, options, context)
        raise JsonizeSchemaError(f"Cannot decode into {type_name(base)}")

    if isinstance(base, type):
        if issubclass(base, Enum):
            return _decode_enum(json_value, base)
        if base is bool:
            return _decode_bool(json_value)
        if base is str:
            return _decode_string(json_value, base)
        if issubclass(base, PurePath):
            text = _decode_string(json_value, base)
            return None if text is None else base(text)
        if base is int or base is float:
            return _decode_number(json_value, base)
        if base is tuple:
            return _decode_tuple(json_value, base, (Any, ...), options, context)
        if base is list:
            return _decode_array(json_value, base, (), list, options, context)
        if base is set or base is frozenset:
            return _decode_array(json_value, base, (), base, options, context)
        if base is dict:
            return _decode_object(json_value, base, (), options, context)
        if is_aggregate(base):
            return decode_aggregate(json_value, base, options, context)

    raise JsonizeSchemaError(f"Cannot decode into {type_name(base)}")


def _decode_enum(json_value: Any, tp: type[Enum]) -> Enum:
    if isinstance(json_value, str) and json_value in tp.__members__:
        return tp.__members__[json_value]
    names = ", ".join(tp.__members__)
    raise JsonizeTypeError(tp, json_value, [f"string naming a member ({names})"])


def _decode_bool(json_value: Any) -> bool:
    if json_value is True or json_value is False:
        return json_value
    raise JsonizeTypeError(bool, json_value, ["true", "false"])


def _decode_string(json_value: Any, tp: type) -> str | None:
    if json_value is None:
        return None
    if isinstance(json_value, str):
        return json_value
    raise JsonizeTypeError(tp, json_value, ["string", "null"])


def _decode_number(json_value: Any, tp: type) -> int | float:
    """Coerce a JSON number, or a string holding a number of the target's lexical class."""
    if isinstance(json_value, (int, float)) and not isinstance(json_value, bool):
        if tp is int and not math.isfinite(json_value):
            raise JsonizeTypeError(tp, json_value, ["finite number"])
        return _convert_number(json_value, tp, json_value)
    if isinstance(json_value, str):
        text = json_value.strip()
        literal = _INT_LITERAL if tp is int else _FLOAT_LITERAL
        if literal.fullmatch(text):
            return _convert_number(text, tp, json_value)
        raise JsonizeTypeError(tp, json_value, [f"string holding {tp.__name__} literal"])
    raise JsonizeTypeError(tp, json_value, ["float", "integer", "unsigned integer", "string"])


def _convert_number(source: int | float | str, tp: type, json_value: Any) -> int | float:
    try:
        return tp(source)
    except (OverflowError, ValueError) as e:
        # out of float range, or past the interpreter's integer digit limit
        raise JsonizeTypeError(tp, json_value, [f"{tp.__name__} in range"]) from e


def _decode_array(
    json_value: Any,
    tp: Any,
    args: tuple,
    container: type,
    options: DecodeOptions,
    context: Any,
) -> Any:
    if json_value is None:
        return None
    if not isinstance(json_value, list):
        raise JsonizeTypeError(tp, json_value, ["array", "null"])
    item_type = args[0] if args else Any
    return container(decode_value(item, item_type, options, context) for item in json_value)


def _decode_tuple(
    json_value: Any, tp: Any, args: tuple, options: DecodeOptions, context: Any
) -> tuple | None:
    if len(args) == 2 and args[1] is Ellipsis:
        return _decode_array(json_value, tp, args[:1], tuple, options, context)
    if json_value is None:
        return None
    if not isinstance(json_value, list):
        raise JsonizeTypeError(tp, json_value, ["array", "null"])
    if len(json_value) != len(args):
        raise JsonizeArityError(tp, json_value, len(args))
    return tuple(
        decode_value(item, item_type, options, context)
        for item, item_type in zip(json_value, args)
    )


def _decode_object(
    json_value: Any, tp: Any, args: tuple, options: DecodeOptions, context: Any
) -> dict | None:
    if args and not (args[0] is str or args[0] is Any):
        raise JsonizeSchemaError(f"JSON object keys are strings, cannot decode into {type_name(tp)}")
    if json_value is None:
        return None
    if not isinstance(json_value, dict):
        raise JsonizeTypeError(tp, json_value, ["object", "null"])
    value_type = args[1] if len(args) == 2 else Any
    return {key: decode_value(val, value_type, options, context) for key, val in json_value.items()}


def make_options(options: DecodeOptions | None, overrides: dict[str, Any]) -> DecodeOptions:
    """Combine explicit options with keyword overrides such as ``class_key=None``."""
    if options is None:
        return DecodeOptions(**overrides)
    if overrides:
        return options.model_copy(update=overrides)
    return options


def decode(
    json_value: Any,
    tp: Any,
    *,
    key: str | None = None,
    default: Any = _MISSING,
    options: DecodeOptions | None = None,
    **overrides: Any,
) -> Any:
    """Decode a generic JSON value into ``tp``.

    Args:
        json_value: The JSON value, as returned by ``json.loads``.
        tp: The target type hint, e.g. ``int``, ``list[Point]`` or ``Entity``.
        key: If given, ``json_value`` must be an object and only the value under
            ``key`` is decoded.
        default: With ``key``, returned instead of failing when the key is absent.
        options: Decode options; keyword ``overrides`` (``class_key``,
            ``class_map``, ``context``, ``registry``) are applied on top.

    Returns:
        The decoded value.

    Raises:
        JsonizeError: If the JSON cannot be converted to ``tp``.
        JsonizeMissingKeyError: If ``key`` is absent and no ``default`` was given.

    Example:
        >>> decode({"a": 1, "b": 2}, int, key="a")
        1
        >>> decode({"a": 1}, int, key="c", default=7)
        7
    """
    opts = make_options(options, overrides)
    if key is not None:
        if not isinstance(json_value, dict):
            raise JsonizeTypeError(tp, json_value, ["object"])
        if key not in json_value:
            if default is _MISSING:
                raise JsonizeMissingKeyError(tp, json_value, key)
            return default
        json_value = json_value[key]
    return decode_value(json_value, tp, opts, opts.context)


def decode_text(
    text: str | bytes,
    tp: Any,
    *,
    options: DecodeOptions | None = None,
    **overrides: Any,
) -> Any:
    """Parse JSON text and decode it into ``tp``.

    Raises:
        json.JSONDecodeError: If ``text`` is not valid JSON.
        JsonizeError: If the parsed value cannot be converted to ``tp``.
    """
    return decode(json.loads(text), tp, options=options, **overrides)
