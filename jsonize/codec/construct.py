"""Construction of user-defined aggregates from JSON.

Decoding an aggregate walks a fixed sequence of strategies. Each is tried
only when the previous ones do not apply; a strategy that applies and fails
ends the decode with its error:

1. ``null`` decodes to ``None``.
2. A non-object value goes to the single-parameter constructor
   (``JsonizeNoPrimitiveConstructorError`` if there is none).
3. A non-null class tag selects a registered subtype, decoded without tag lookup
   (``JsonizeUnregisteredClassError`` if the tag is unknown).
4. The first marked constructor whose required keys are all present is called.
5. The type is default-constructed and its members populated.

If marked constructors exist but none matched and there is no default
construction path, ``JsonizeConstructorError`` lists what was attempted.
"""

from typing import Any, get_origin

from . import decode
from ..exceptions import (
    JsonizeConstructorError,
    JsonizeMismatchError,
    JsonizeNoPrimitiveConstructorError,
    JsonizeTypeError,
    JsonizeUnregisteredClassError,
    type_name,
)
from ..models import DecodeOptions
from ..registry import CLASS_REGISTRY
from ..schema.descriptor import ConstructorSpec, TypeSchema, schema_of
from ..schema.typing_utils import substitute_typevars, typevar_mapping
from ..utils.logger import logger

__all__ = ["decode_aggregate", "default_construct", "populate"]


def decode_aggregate(
    json_value: Any,
    tp: Any,
    options: DecodeOptions,
    context: Any = None,
    *,
    dispatch: bool = True,
    consumed_key: str | None = None,
) -> Any:
    """Decode a JSON value into a user-defined aggregate type.

    Args:
        json_value: The JSON value.
        tp: The aggregate class, or a parametrised generic of one (``Box[int]``).
        options: Decode options, passed unchanged to nested values.
        context: Value for ``CONTEXT`` constructor parameters.
        dispatch: Whether class-tag lookup applies to this object. It is off
            for the object selected by a tag, and only for that object.
        consumed_key: Tag key already used for dispatch; never reported as extra.

    Returns:
        The constructed instance, or ``None`` for JSON ``null``.
    """
    if json_value is None:
        return None

    cls = get_origin(tp) or tp
    schema = schema_of(cls)
    typevars = typevar_mapping(tp)

    if not isinstance(json_value, dict):
        return _invoke_primitive_constructor(json_value, tp, schema, typevars, options, context)

    class_key = options.class_key
    if dispatch and schema.polymorphic and class_key is not None and class_key in json_value:
        if json_value[class_key] is not None:
            return _dispatch_class_tag(json_value, tp, cls, class_key, options, context)
        # a null tag names no subtype; the object decodes as the target type
        consumed_key = class_key

    for ctor in schema.constructors:
        if ctor.can_satisfy(json_value):
            logger.debug(f"Decoding {type_name(tp)} with constructor {ctor.signature}")
            return _invoke_constructor(json_value, ctor, cls, typevars, options, context)

    if schema.default_construction is None:
        raise JsonizeConstructorError(tp, json_value, [c.signature for c in schema.constructors])

    obj = default_construct(schema, context)
    populate(obj, json_value, schema, options, tp=tp, consumed_key=consumed_key)
    return obj


def _decode_param(json_value, param, typevars, options, context):
    return decode.decode_value(
        json_value, substitute_typevars(param.value_type, typevars), options, context
    )


def _invoke_primitive_constructor(
    json_value: Any,
    tp: Any,
    schema: TypeSchema,
    typevars: dict,
    options: DecodeOptions,
    context: Any,
) -> Any:
    """Build an instance from a non-object value through a single-parameter constructor."""
    for ctor in schema.constructors:
        params = ctor.value_params
        if len(params) == 1:
            value = _decode_param(json_value, params[0], typevars, options, context)
            return ctor.invoke(schema.cls, {params[0].name: value}, context)
    raise JsonizeNoPrimitiveConstructorError(tp, json_value)


def _dispatch_class_tag(
    json_value: dict,
    tp: Any,
    cls: type,
    class_key: str,
    options: DecodeOptions,
    context: Any,
) -> Any:
    """Decode an object as the registered subtype named by its class tag."""
    tag = json_value[class_key]
    if not isinstance(tag, str):
        raise JsonizeTypeError(tp, tag, ["string"])
    if options.class_map is not None:
        remapped = options.class_map(tag)
        if remapped:
            tag = remapped

    registry = options.registry if options.registry is not None else CLASS_REGISTRY
    concrete = registry.lookup(tag, cls)
    if concrete is None:
        raise JsonizeUnregisteredClassError(tp, json_value, tag)

    logger.debug(f"Class tag {tag!r} selects {type_name(concrete)} for {type_name(tp)}")
    return decode_aggregate(
        json_value, concrete, options, context, dispatch=False, consumed_key=class_key
    )


def _invoke_constructor(
    json_value: dict,
    ctor: ConstructorSpec,
    cls: type,
    typevars: dict,
    options: DecodeOptions,
    context: Any,
) -> Any:
    values = {
        param.name: _decode_param(json_value[param.key], param, typevars, options, context)
        for param in ctor.value_params
        if param.key in json_value
    }
    return ctor.invoke(cls, values, context)


def default_construct(schema: TypeSchema, context: Any = None) -> Any:
    """Create a default instance of the schema's class, ready to be populated.

    Raises:
        JsonizeConstructorError: If the type has no default construction path.
    """
    cls = schema.cls
    if schema.default_construction == "call":
        return cls(**{name: context for name in schema.init_context_params})
    if schema.default_construction == "blank":
        obj = cls.__new__(cls)
        for name, factory in schema.blank_fields:
            object.__setattr__(obj, name, factory())
        return obj
    raise JsonizeConstructorError(cls, None, [c.signature for c in schema.constructors])


def populate(
    obj: Any,
    json_value: dict,
    schema: TypeSchema,
    options: DecodeOptions,
    *,
    tp: Any = None,
    consumed_key: str | None = None,
) -> None:
    """Assign decoded JSON object values to the members of ``obj``.

    Every input-allowed member whose key is present is decoded, with ``obj``
    as the context of nested values, and written. Required members that are
    absent, and (for strict types) keys matching no member, are collected and
    reported together.

    Raises:
        JsonizeMismatchError: If required keys are missing or extra keys are present.
    """
    tp = tp if tp is not None else schema.cls
    typevars = typevar_mapping(tp)
    missing_keys = []

    for member in schema.members:
        # read-only properties accept their key but never require it
        if not member.input_allowed or not member.writable:
            continue
        if member.key in json_value:
            value = decode.decode_value(
                json_value[member.key],
                substitute_typevars(member.value_type, typevars),
                options,
                obj,
            )
            member.write(obj, value)
        elif not member.input_optional:
            missing_keys.append(member.key)

    extra_keys = []
    if not schema.ignore_extra_keys:
        known = schema.member_keys
        extra_keys = [key for key in json_value if key not in known and key != consumed_key]

    if missing_keys or extra_keys:
        raise JsonizeMismatchError(tp, json_value, missing_keys, extra_keys)
