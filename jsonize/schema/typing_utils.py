"""Helpers for inspecting the type hints that drive (de)serialization.

Functions:
    unwrap_annotated: Split ``Annotated`` metadata from the underlying hint.
    optional_inner: Detect ``T | None`` and return ``T``.
    is_identity_type: Whether a hint keeps the raw JSON value.
    is_aggregate: Whether a class is described by a jsonize schema.
    typevar_mapping: TypeVar bindings of a parametrised generic class.
    substitute_typevars: Apply TypeVar bindings to a hint.
    zero_value: The zero/default value of a hint.
    check_supported: Validate that a hint can be (de)serialized.
"""

import collections.abc
import dataclasses
import types
from enum import Enum
from pathlib import PurePath
from typing import Annotated, Any, Mapping, TypeVar, Union, get_args, get_origin

from ..exceptions import JsonizeSchemaError, type_name
from ..models import JsonValue

__all__ = [
    "SEQUENCE_ORIGINS",
    "SET_ORIGINS",
    "MAPPING_ORIGINS",
    "unwrap_annotated",
    "optional_inner",
    "is_identity_type",
    "is_aggregate",
    "typevar_mapping",
    "substitute_typevars",
    "zero_value",
    "check_supported",
]

SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
)
SET_ORIGINS = (set, frozenset, collections.abc.Set, collections.abc.MutableSet)
MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
UNION_ORIGINS = (Union, types.UnionType)


def unwrap_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split an ``Annotated`` hint into the bare hint and its metadata.

    Nested ``Annotated`` layers are already flattened by ``typing``, so the
    metadata is returned in the order it was written, outermost alias first.
    """
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        return base, tuple(metadata)
    return hint, ()


def optional_inner(hint: Any) -> Any | None:
    """Return ``T`` for ``T | None`` / ``Optional[T]``, otherwise ``None``."""
    if get_origin(hint) not in UNION_ORIGINS:
        return None
    args = get_args(hint)
    if type(None) not in args:
        return None
    rest = [arg for arg in args if arg is not type(None)]
    if len(rest) != 1:
        return None
    return rest[0]


def is_identity_type(hint: Any) -> bool:
    """Whether values of this hint are passed through as raw JSON."""
    return hint is Any or hint is object or hint == JsonValue or isinstance(hint, TypeVar)


def is_aggregate(cls: Any) -> bool:
    """Whether ``cls`` is a user-defined type with a jsonize schema.

    Classes decorated with ``@jsonizable`` (or inheriting from one) and plain
    dataclasses qualify.
    """
    return isinstance(cls, type) and (
        hasattr(cls, "__jsonize_config__") or dataclasses.is_dataclass(cls)
    )


def typevar_mapping(hint: Any) -> dict[TypeVar, Any]:
    """Map the TypeVars of a generic class to the arguments of a parametrised hint.

    Example:
        >>> typevar_mapping(Box[int])
        {~T: <class 'int'>}
    """
    origin = get_origin(hint)
    if origin is None:
        return {}
    params = getattr(origin, "__parameters__", ())
    return dict(zip(params, get_args(hint)))


def substitute_typevars(hint: Any, mapping: Mapping[TypeVar, Any]) -> Any:
    """Replace TypeVars in ``hint`` using ``mapping``.

    Generic aliases support subscription by their free parameters, which keeps
    ``Annotated`` metadata and container shapes intact.
    """
    if not mapping:
        return hint
    if isinstance(hint, TypeVar):
        return mapping.get(hint, hint)
    params = getattr(hint, "__parameters__", ())
    if not params or isinstance(hint, type):
        return hint
    return hint[tuple(mapping.get(param, param) for param in params)]


def zero_value(hint: Any) -> Any:
    """Return the zero value of a hint.

    Numbers are zero, booleans false, strings empty, containers empty, fixed
    tuples hold the zero of each element, enums their first member. Optional
    values, paths, aggregates and raw JSON zero to ``None``.
    """
    base, _ = unwrap_annotated(hint)
    if is_identity_type(base):
        return None
    origin = get_origin(base)
    if origin is not None:
        if origin in UNION_ORIGINS:
            return None
        if origin is tuple:
            args = get_args(base)
            if len(args) == 2 and args[1] is Ellipsis:
                return ()
            return tuple(zero_value(arg) for arg in args)
        if origin in SEQUENCE_ORIGINS:
            return []
        if origin in SET_ORIGINS:
            return frozenset() if origin is frozenset else set()
        if origin in MAPPING_ORIGINS:
            return {}
        return None
    if isinstance(base, type):
        if issubclass(base, Enum):
            return next(iter(base), None)
        if base is bool:
            return False
        if base in (int, float, str, list, dict, set, frozenset, tuple):
            return base()
    return None


def check_supported(hint: Any, owner: Any) -> None:
    """Validate that ``hint`` names something the codec can handle.

    Args:
        hint: The member or parameter hint to check.
        owner: The type declaring it, used in the error message.

    Raises:
        JsonizeSchemaError: If the hint (or any part of it) is unsupported.
    """
    base, _ = unwrap_annotated(hint)
    if is_identity_type(base):
        return
    origin = get_origin(base)
    if origin is not None:
        args = get_args(base)
        if origin in UNION_ORIGINS:
            inner = optional_inner(base)
            if inner is None:
                raise JsonizeSchemaError(
                    f"{type_name(owner)}: unions other than Optional[...] are not supported: {type_name(hint)}"
                )
            check_supported(inner, owner)
            return
        if origin in MAPPING_ORIGINS:
            if args and not (args[0] is str or args[0] is Any):
                raise JsonizeSchemaError(
                    f"{type_name(owner)}: JSON object keys are strings, cannot use {type_name(hint)}"
                )
            for arg in args[1:]:
                check_supported(arg, owner)
            return
        if origin is tuple or origin in SEQUENCE_ORIGINS or origin in SET_ORIGINS:
            for arg in args:
                if arg is not Ellipsis:
                    check_supported(arg, owner)
            return
        if is_aggregate(origin):
            for arg in args:
                check_supported(arg, owner)
            return
        raise JsonizeSchemaError(f"{type_name(owner)}: unsupported type {type_name(hint)}")
    if isinstance(base, type):
        if issubclass(base, (Enum, PurePath)) or base in (bool, int, float, str):
            return
        if base in (list, tuple, set, frozenset, dict):
            return
        if is_aggregate(base):
            return
    raise JsonizeSchemaError(f"{type_name(owner)}: unsupported type {type_name(hint)}")
