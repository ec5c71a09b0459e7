"""Type schema descriptors derived from class declarations.

A ``TypeSchema`` lists the members and the constructors of a type that take
part in (de)serialization. It is built once per class, on first use, from the
class annotations, ``jsonize`` marks and ``@jsonizable`` options, then cached
for the lifetime of the process.

Classes:
    MemberSpec: A field or property read/written by the codec.
    ParamSpec: A constructor parameter.
    ConstructorSpec: A constructor eligible for decoding.
    TypeSchema: The full descriptor of a type.

Functions:
    schema_of: Return the cached schema of a class, building it if needed.
    build_schema: Build a schema without caching.
"""

import dataclasses
import inspect
from dataclasses import dataclass
from functools import partial
from threading import RLock
from typing import Any, Callable, ClassVar, Literal, get_origin, get_type_hints

from .attribute import CONTEXT, JsonizableConfig, jsonize, marks_of, resolve_marks
from .typing_utils import check_supported, is_aggregate, unwrap_annotated, zero_value
from ..exceptions import JsonizeSchemaError, type_name
from ..models import JsonizeIn, JsonizeOut
from ..utils.logger import logger

__all__ = [
    "MemberSpec",
    "ParamSpec",
    "ConstructorSpec",
    "TypeSchema",
    "schema_of",
    "build_schema",
    "clear_schema_cache",
]

DefaultConstruction = Literal["call", "blank"]

_DEFAULT_CONFIG = JsonizableConfig()


@dataclass(frozen=True)
class MemberSpec:
    """A field or property (de)serialized under ``key``."""

    name: str
    """Attribute name on the instance."""
    key: str
    """JSON object key (the attribute name unless renamed)."""
    value_type: Any
    """Type hint of the member, ``Annotated`` metadata stripped."""
    input_mode: JsonizeIn
    """Resolved input mode, never ``UNSPECIFIED``."""
    output_mode: JsonizeOut
    """Resolved output mode, never ``UNSPECIFIED``."""
    default_factory: Callable[[], Any]
    """Produces the member's default value (declared default or zero value)."""
    is_property: bool = False
    """Whether the member is a property rather than a plain attribute."""
    writable: bool = True
    """False for read-only properties; present keys are then ignored on input."""

    @property
    def input_allowed(self) -> bool:
        return self.input_mode is not JsonizeIn.NO

    @property
    def output_allowed(self) -> bool:
        return self.output_mode is not JsonizeOut.NO

    @property
    def input_optional(self) -> bool:
        return self.input_mode is JsonizeIn.OPT

    @property
    def output_optional(self) -> bool:
        return self.output_mode is JsonizeOut.OPT

    @property
    def default(self) -> Any:
        """The member's default value, compared against by optional output."""
        return self.default_factory()

    def read(self, obj: Any) -> Any:
        return getattr(obj, self.name)

    def write(self, obj: Any, value: Any) -> None:
        try:
            setattr(obj, self.name, value)
        except dataclasses.FrozenInstanceError:
            # object.__setattr__ still goes through property setters
            object.__setattr__(obj, self.name, value)


@dataclass(frozen=True)
class ParamSpec:
    """A constructor parameter, filled from the JSON key ``key``."""

    name: str
    key: str
    value_type: Any
    kind: inspect._ParameterKind
    has_default: bool = False
    default: Any = None
    is_context: bool = False
    """Receives the decode context instead of a JSON value."""

    @property
    def required(self) -> bool:
        return not self.has_default and not self.is_context


@dataclass(frozen=True)
class ConstructorSpec:
    """A constructor marked with ``jsonize``: ``__init__`` or a class/static method."""

    owner: type
    name: str
    params: tuple[ParamSpec, ...]

    @property
    def value_params(self) -> tuple[ParamSpec, ...]:
        """Parameters filled from JSON, i.e. everything but context parameters."""
        return tuple(p for p in self.params if not p.is_context)

    @property
    def signature(self) -> str:
        """Human-readable signature, e.g. ``Point.from_polar(r: float, theta: float)``."""
        params = ", ".join(f"{p.name}: {type_name(p.value_type)}" for p in self.value_params)
        if self.name == "__init__":
            return f"{self.owner.__qualname__}({params})"
        return f"{self.owner.__qualname__}.{self.name}({params})"

    def can_satisfy(self, obj: dict) -> bool:
        """Whether every required parameter key is present in the JSON object."""
        return all(p.key in obj for p in self.params if p.required)

    def invoke(self, cls: type, values: dict[str, Any], context: Any) -> Any:
        """Call the constructor with decoded values keyed by parameter name.

        Absent parameters fall back to their declared defaults.
        """
        factory = cls if self.name == "__init__" else getattr(cls, self.name)
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for param in self.params:
            if param.is_context:
                value = context
            elif param.name in values:
                value = values[param.name]
            elif param.kind is inspect.Parameter.POSITIONAL_ONLY:
                value = param.default
            else:
                continue
            if param.kind is inspect.Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[param.name] = value
        return factory(*args, **kwargs)


@dataclass(frozen=True)
class TypeSchema:
    """Immutable (de)serialization descriptor of one class."""

    cls: type
    members: tuple[MemberSpec, ...]
    constructors: tuple[ConstructorSpec, ...]
    ignore_extra_keys: bool = True
    polymorphic: bool = True
    default_construction: DefaultConstruction | None = "call"
    """How to default-construct: call ``cls()``, build a blank instance, or not at all."""
    init_context_params: tuple[str, ...] = ()
    """Names of ``__init__`` parameters receiving the context on default construction."""
    blank_fields: tuple[tuple[str, Callable[[], Any]], ...] = ()
    """Attributes pre-set on a blank instance, with their default factories."""

    @property
    def member_keys(self) -> frozenset[str]:
        return frozenset(member.key for member in self.members)

    def member(self, name: str) -> MemberSpec:
        """Look up a member by attribute name."""
        for member in self.members:
            if member.name == name:
                return member
        raise KeyError(name)


_SCHEMA_CACHE: dict[type, TypeSchema] = {}
_SCHEMA_LOCK = RLock()


def schema_of(cls: type) -> TypeSchema:
    """Return the schema of ``cls``, building and caching it on first use.

    Raises:
        JsonizeSchemaError: If ``cls`` is not jsonizable or its declaration is invalid.
    """
    schema = _SCHEMA_CACHE.get(cls)
    if schema is not None:
        return schema
    with _SCHEMA_LOCK:
        schema = _SCHEMA_CACHE.get(cls)
        if schema is None:
            schema = build_schema(cls)
            _SCHEMA_CACHE[cls] = schema
    return schema


def clear_schema_cache() -> None:
    """Drop every cached schema. Intended for tests redefining classes."""
    with _SCHEMA_LOCK:
        _SCHEMA_CACHE.clear()


def build_schema(cls: type) -> TypeSchema:
    """Build the schema of ``cls`` from its declaration.

    Members are the annotated fields (base classes first, in declaration
    order) followed by properties carrying a ``jsonize`` mark. Constructors are
    ``__init__`` and class/static methods carrying a ``jsonize`` mark, in
    definition order.

    Raises:
        JsonizeSchemaError: If ``cls`` is not jsonizable, a hint cannot be
            resolved or is unsupported, or two members share a key.
    """
    if not is_aggregate(cls):
        raise JsonizeSchemaError(
            f"{type_name(cls)} is not jsonizable; decorate it with @jsonizable or make it a dataclass"
        )
    config: JsonizableConfig = getattr(cls, "__jsonize_config__", _DEFAULT_CONFIG)

    members = _collect_field_members(cls, config) + _collect_property_members(cls, config)
    _check_unique_keys(cls, [m.key for m in members], "member")

    constructors = _collect_constructors(cls)
    construction, init_context_params = _default_construction(cls, config, constructors)

    schema = TypeSchema(
        cls=cls,
        members=tuple(members),
        constructors=tuple(constructors),
        ignore_extra_keys=config.ignore_extra_keys,
        polymorphic=config.polymorphic,
        default_construction=construction,
        init_context_params=init_context_params,
        blank_fields=_blank_fields(cls, members) if construction == "blank" else (),
    )
    logger.debug(
        f"Built schema for {type_name(cls)}: members={[m.key for m in schema.members]}, "
        f"constructors={[c.signature for c in schema.constructors]}, "
        f"default_construction={schema.default_construction}"
    )
    return schema


def _resolve_hints(target: Any, owner: type) -> dict[str, Any]:
    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as e:
        raise JsonizeSchemaError(f"Cannot resolve type hints of {type_name(owner)}: {e}") from e


def _field_default_factory(cls: type, name: str, value_type: Any) -> Callable[[], Any]:
    """Default of a field: dataclass default/default_factory, class attribute, or zero value."""
    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            if f.name != name:
                continue
            if f.default is not dataclasses.MISSING:
                return partial(_identity, f.default)
            if f.default_factory is not dataclasses.MISSING:
                return f.default_factory
            break
    elif name in _class_attributes(cls):
        return partial(_identity, _class_attributes(cls)[name])
    return partial(zero_value, value_type)


def _identity(value: Any) -> Any:
    return value


def _class_attributes(cls: type) -> dict[str, Any]:
    attrs: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if not name.startswith("__") and not inspect.isroutine(value):
                attrs[name] = value
    return attrs


def _collect_field_members(cls: type, config: JsonizableConfig) -> list[MemberSpec]:
    members = []
    for name, hint in _resolve_hints(cls, cls).items():
        base, metadata = unwrap_annotated(hint)
        if get_origin(base) is ClassVar or base is ClassVar:
            continue
        if isinstance(base, dataclasses.InitVar):
            continue
        if isinstance(getattr(cls, name, None), property):
            # a property redefining an annotated field is collected as a property
            continue
        own_marks = tuple(m for m in metadata if isinstance(m, jsonize))
        if config.explicit and not own_marks:
            continue
        if name.startswith("_") and not own_marks:
            continue
        key, perform_in, perform_out = resolve_marks(config.defaults + own_marks)
        check_supported(base, cls)
        members.append(
            MemberSpec(
                name=name,
                key=key or name,
                value_type=base,
                input_mode=perform_in,
                output_mode=perform_out,
                default_factory=_field_default_factory(cls, name, base),
            )
        )
    return members


def _collect_property_members(cls: type, config: JsonizableConfig) -> list[MemberSpec]:
    props: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property):
                props[name] = attr
            elif name in props:
                del props[name]

    members = []
    for name, prop in props.items():
        marks = marks_of(prop)
        if not marks:
            continue
        hint = _resolve_hints(prop.fget, cls).get("return")
        if hint is None and prop.fset is not None:
            setter_hints = _resolve_hints(prop.fset, cls)
            setter_hints.pop("return", None)
            hint = next(iter(setter_hints.values()), None)
        if hint is None:
            hint = Any
        base, metadata = unwrap_annotated(hint)
        type_marks = tuple(m for m in metadata if isinstance(m, jsonize))
        key, perform_in, perform_out = resolve_marks(config.defaults + type_marks + marks)
        check_supported(base, cls)
        members.append(
            MemberSpec(
                name=name,
                key=key or name,
                value_type=base,
                input_mode=perform_in,
                output_mode=perform_out,
                default_factory=partial(zero_value, base),
                is_property=True,
                writable=prop.fset is not None,
            )
        )
    return members


def _check_unique_keys(cls: type, keys: list[str], what: str) -> None:
    seen = set()
    for key in keys:
        if key in seen:
            raise JsonizeSchemaError(f"{type_name(cls)}: duplicate {what} key {key!r}")
        seen.add(key)


def _collect_constructors(cls: type) -> list[ConstructorSpec]:
    constructors = []
    if marks_of(cls.__init__):
        constructors.append(
            ConstructorSpec(owner=cls, name="__init__", params=_params_of(cls, cls.__init__, True))
        )

    factories: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, (classmethod, staticmethod)) and marks_of(attr):
                factories[name] = attr
            elif name in factories:
                del factories[name]
    for name, attr in factories.items():
        constructors.append(
            ConstructorSpec(
                owner=cls,
                name=name,
                params=_params_of(cls, attr.__func__, isinstance(attr, classmethod)),
            )
        )
    return constructors


def _params_of(
    cls: type, func: Callable, skip_first: bool, validate: bool = True
) -> tuple[ParamSpec, ...]:
    """Describe the parameters of a constructor function.

    ``skip_first`` drops ``self``/``cls``. Variadic parameters cannot be
    filled by key and are left out. With ``validate`` off (an unmarked
    ``__init__`` inspected for default construction) parameter types are not
    checked and unresolvable hints are ignored.
    """
    try:
        hints = _resolve_hints(func, cls)
    except JsonizeSchemaError:
        if validate:
            raise
        hints = {}
    parameters = list(inspect.signature(func).parameters.values())
    if skip_first:
        parameters = parameters[1:]

    params = []
    for param in parameters:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        base, metadata = unwrap_annotated(hints.get(param.name, Any))
        is_context = any(m is CONTEXT for m in metadata)
        key, _, _ = resolve_marks(m for m in metadata if isinstance(m, jsonize))
        if validate and not is_context:
            check_supported(base, cls)
        has_default = param.default is not inspect.Parameter.empty
        params.append(
            ParamSpec(
                name=param.name,
                key=key or param.name,
                value_type=base,
                kind=param.kind,
                has_default=has_default,
                default=param.default if has_default else None,
                is_context=is_context,
            )
        )
    if validate:
        _check_unique_keys(
            cls, [p.key for p in params if not p.is_context], "constructor parameter"
        )
    return tuple(params)


def _default_construction(
    cls: type, config: JsonizableConfig, constructors: list[ConstructorSpec]
) -> tuple[DefaultConstruction | None, tuple[str, ...]]:
    """Decide how a default instance of ``cls`` is made.

    ``cls()`` is used when ``__init__`` needs nothing but context parameters.
    Otherwise a blank instance is built from ``cls.__new__`` for dataclasses
    without marked constructors, or when ``default_construct=True``.
    """
    if config.default_construct is False:
        return None, ()

    if cls.__init__ is object.__init__:
        return "call", ()

    try:
        params = _params_of(cls, cls.__init__, True, validate=False)
    except ValueError:
        # no introspectable signature, e.g. an __init__ implemented in C
        params = ()
    if not any(p.required for p in params):
        return "call", tuple(p.name for p in params if p.is_context)

    if config.default_construct or (dataclasses.is_dataclass(cls) and not constructors):
        return "blank", ()
    return None, ()


def _blank_fields(cls: type, members: list[MemberSpec]) -> tuple[tuple[str, Callable], ...]:
    fields = {m.name: m.default_factory for m in members if not m.is_property}
    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            if f.name not in fields:
                fields[f.name] = _field_default_factory(cls, f.name, f.type)
    return tuple(fields.items())
