"""Declarative marks used to describe how a type is (de)serialized.

- ``jsonize(...)`` marks a member, a property, a constructor parameter or a
  constructor. Parameters may be given in any order: a key string renaming the
  member, a ``Jsonize`` shortcut, a ``JsonizeIn`` and/or a ``JsonizeOut``.
- ``CONTEXT`` marks a constructor parameter that receives the decode context
  instead of a JSON value.
- ``@jsonizable`` enables a class and sets its class-wide options.

Marks stack. They are applied from the outermost layer (the class defaults,
then type-alias metadata, then the member's own metadata) to the innermost,
and the innermost explicit setting wins::

    OptStr = Annotated[str, jsonize(Jsonize.OPT)]

    @jsonizable
    class Settings:
        name: str                                   # required, key "name"
        title: Annotated[OptStr, jsonize("_title")] # optional, key "_title"
        ratio: Annotated[OptStr, jsonize(JsonizeIn.YES)]  # required input, optional output
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, TypeVar

from ..exceptions import JsonizeSchemaError
from ..models import Jsonize, JsonizeIn, JsonizeOut

__all__ = [
    "jsonize",
    "CONTEXT",
    "JsonizableConfig",
    "jsonizable",
    "marks_of",
    "resolve_marks",
]

MARKS_ATTR = "__jsonize__"

T = TypeVar("T")


class jsonize:
    """A serialization mark.

    Examples:
        ``Annotated[int, jsonize("id")]`` renames a member,
        ``Annotated[str, jsonize(Jsonize.OPT)]`` makes it optional both ways,
        ``@jsonize`` above ``__init__`` or a classmethod makes it a constructor
        eligible for decoding, ``@jsonize("label")`` above a property makes the
        property a member under key ``label``.
    """

    __slots__ = ("key", "perform_in", "perform_out")

    def __new__(cls, *params):
        # bare decorator use: @jsonize
        if len(params) == 1 and _is_decoration_target(params[0]):
            return cls()(params[0])
        return super().__new__(cls)

    def __init__(self, *params):
        self.key: str | None = None
        self.perform_in = JsonizeIn.UNSPECIFIED
        self.perform_out = JsonizeOut.UNSPECIFIED
        for param in params:
            if isinstance(param, Jsonize):
                self.perform_in = JsonizeIn(param.value)
                self.perform_out = JsonizeOut(param.value)
            elif isinstance(param, JsonizeIn):
                self.perform_in = param
            elif isinstance(param, JsonizeOut):
                self.perform_out = param
            elif isinstance(param, str):
                self.key = param
            else:
                raise JsonizeSchemaError(f"invalid jsonize parameter of type {type(param).__name__}")

    def __repr__(self) -> str:
        parts = []
        if self.key is not None:
            parts.append(repr(self.key))
        if self.perform_in is not JsonizeIn.UNSPECIFIED:
            parts.append(f"in={self.perform_in.value}")
        if self.perform_out is not JsonizeOut.UNSPECIFIED:
            parts.append(f"out={self.perform_out.value}")
        return f"jsonize({', '.join(parts)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, jsonize):
            return NotImplemented
        return (self.key, self.perform_in, self.perform_out) == (
            other.key,
            other.perform_in,
            other.perform_out,
        )

    def __hash__(self) -> int:
        return hash((self.key, self.perform_in, self.perform_out))

    def __call__(self, target: T) -> T:
        """Attach this mark to a function, property, classmethod or staticmethod."""
        func = _marked_function(target)
        if func is None:
            raise JsonizeSchemaError(f"jsonize cannot decorate {target!r}")
        # decorators apply bottom-up, so the new mark is the outer one
        setattr(func, MARKS_ATTR, (self,) + getattr(func, MARKS_ATTR, ()))
        return target


class _ContextMarker:
    """Marker type of ``CONTEXT``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CONTEXT"


CONTEXT = _ContextMarker()
"""Annotated metadata for a constructor parameter that receives the decode context.

When a member of aggregate type is decoded, the context is the instance whose
members are being populated; at top level it is ``DecodeOptions.context``.
"""


def _is_decoration_target(obj: Any) -> bool:
    return isinstance(obj, (property, classmethod, staticmethod)) or (
        callable(obj) and hasattr(obj, "__code__")
    )


def _marked_function(target: Any) -> Callable | None:
    """Return the function object that carries the marks of ``target``."""
    if isinstance(target, property):
        return target.fget
    if isinstance(target, (classmethod, staticmethod)):
        return target.__func__
    if hasattr(target, "__code__"):
        return target
    return None


def marks_of(target: Any) -> tuple[jsonize, ...]:
    """Return the jsonize marks attached to a function, property or (static/class)method."""
    func = _marked_function(target)
    if func is None:
        return ()
    return getattr(func, MARKS_ATTR, ())


def resolve_marks(
    marks: Iterable[jsonize],
) -> tuple[str | None, JsonizeIn, JsonizeOut]:
    """Collapse a stack of marks, outermost first, into one effective setting.

    Returns:
        The key (``None`` if never renamed), and the effective input and output
        modes. Modes left unspecified by every mark resolve to ``YES``.
    """
    key = None
    perform_in = JsonizeIn.UNSPECIFIED
    perform_out = JsonizeOut.UNSPECIFIED
    for mark in marks:
        if mark.key is not None:
            key = mark.key
        if mark.perform_in is not JsonizeIn.UNSPECIFIED:
            perform_in = mark.perform_in
        if mark.perform_out is not JsonizeOut.UNSPECIFIED:
            perform_out = mark.perform_out
    if perform_in is JsonizeIn.UNSPECIFIED:
        perform_in = JsonizeIn.YES
    if perform_out is JsonizeOut.UNSPECIFIED:
        perform_out = JsonizeOut.YES
    return key, perform_in, perform_out


@dataclass(frozen=True)
class JsonizableConfig:
    """Class-wide options recorded by ``@jsonizable``."""

    ignore_extra_keys: bool = True
    """Silently ignore JSON keys that match no member."""
    explicit: bool = False
    """Only annotated fields carrying a jsonize mark are members."""
    defaults: tuple[jsonize, ...] = field(default_factory=tuple)
    """Outermost mark layer applied to every member."""
    polymorphic: bool = True
    """Whether class-tag dispatch applies when decoding into this type."""
    default_construct: bool | None = None
    """Force (True) or forbid (False) default construction; None decides automatically."""


def jsonizable(
    cls: type | None = None,
    *,
    ignore_extra_keys: bool = True,
    explicit: bool = False,
    defaults: jsonize | Iterable[jsonize] = (),
    polymorphic: bool = True,
    default_construct: bool | None = None,
    tags: Iterable[str] = (),
):
    """Enable (de)serialization for a class.

    Can be used bare (``@jsonizable``) or with options
    (``@jsonizable(ignore_extra_keys=False)``).

    Args:
        cls: The class, when used as a bare decorator.
        ignore_extra_keys: If False, decoding fails on JSON keys matching no member.
        explicit: If True, only fields with a jsonize mark are members; otherwise
            every annotated public field is.
        defaults: Mark(s) applied to every member as the outermost layer.
        polymorphic: Whether a class tag in the input selects a registered subtype.
        default_construct: Override detection of the default construction path.
        tags: Register the class in the process-wide class registry under these
            tags (and its fully qualified name).

    Returns:
        The class, unmodified apart from the ``__jsonize_config__`` attribute.
    """
    if isinstance(defaults, jsonize):
        defaults = (defaults,)
    config = JsonizableConfig(
        ignore_extra_keys=ignore_extra_keys,
        explicit=explicit,
        defaults=tuple(defaults),
        polymorphic=polymorphic,
        default_construct=default_construct,
    )
    tags = tuple(tags)

    def wrap(klass: type) -> type:
        klass.__jsonize_config__ = config
        if tags:
            from ..registry import register_class_tag

            register_class_tag(klass, *tags)
        return klass

    if cls is None:
        return wrap
    return wrap(cls)
