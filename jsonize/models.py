"""Shared models for jsonize: JSON value alias, serialization modes and decode options.

This module defines the small vocabulary every other module speaks:

- ``JsonValue``: the generic JSON tree produced by the standard ``json`` module.
- ``JsonizeIn`` / ``JsonizeOut`` / ``Jsonize``: per-member direction and
  optionality modes, combined by ``jsonize`` marks.
- ``DecodeOptions``: the per-call configuration propagated to every recursive
  decode.
"""

from enum import StrEnum
from typing import Any, Callable, Dict, List, TypeAlias, Union

from pydantic import BaseModel, Field

from .config import DEFAULT_CLASS_KEY

__all__ = [
    "JsonValue",
    "JsonizeIn",
    "JsonizeOut",
    "Jsonize",
    "DecodeOptions",
    "json_kind",
]

JsonValue: TypeAlias = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]
"""A generic JSON value as produced by ``json.loads``.

Annotating a member with ``JsonValue`` (or ``Any``) keeps the raw JSON tree
without conversion.
"""


class JsonizeIn(StrEnum):
    """Controls whether a member is read during deserialization."""

    UNSPECIFIED = "unspecified"
    """Inherit from an enclosing mark; behaves like ``YES`` if nothing is set."""
    YES = "yes"
    """Always deserialize; fail if the key is missing."""
    OPT = "opt"
    """Deserialize if present; a missing key is not an error."""
    NO = "no"
    """Never deserialize this member."""


class JsonizeOut(StrEnum):
    """Controls whether a member is written during serialization."""

    UNSPECIFIED = "unspecified"
    """Inherit from an enclosing mark; behaves like ``YES`` if nothing is set."""
    YES = "yes"
    """Always serialize."""
    OPT = "opt"
    """Serialize only if the value differs from the member's default."""
    NO = "no"
    """Never serialize this member."""


class Jsonize(StrEnum):
    """Shortcut setting both ``JsonizeIn`` and ``JsonizeOut``."""

    YES = "yes"
    """Equivalent to ``JsonizeIn.YES`` and ``JsonizeOut.YES``."""
    OPT = "opt"
    """Equivalent to ``JsonizeIn.OPT`` and ``JsonizeOut.OPT``."""


class DecodeOptions(BaseModel):
    """Configuration passed to a top-level decode and propagated to nested calls."""

    class_key: str | None = DEFAULT_CLASS_KEY
    """Key of the polymorphic type tag. ``None`` disables class-tag dispatch."""

    class_map: Callable[[str], str | None] | None = None
    """Optional remapping of a raw tag to a registered tag.

    Returning ``None`` means the remap declined, and the raw tag is used.
    """

    context: Any = None
    """Value injected into constructor parameters marked with ``CONTEXT`` at top level."""

    registry: Any = Field(default=None, exclude=True)
    """The ``ClassRegistry`` to consult. ``None`` means the process-wide registry."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


def json_kind(value: Any) -> str:
    """Name the JSON kind of a value, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
