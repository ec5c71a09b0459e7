"""Type schema layer of jsonize.

This package turns class declarations into immutable ``TypeSchema``
descriptors consumed by the codec engine:

- ``attribute``: the ``jsonize`` mark, the ``CONTEXT`` marker and ``@jsonizable``
- ``descriptor``: ``MemberSpec``/``ConstructorSpec``/``TypeSchema`` and the schema cache
- ``typing_utils``: helpers over type hints (zero values, TypeVar substitution, validation)
"""

from .attribute import CONTEXT, JsonizableConfig, jsonizable, jsonize
from .descriptor import (
    ConstructorSpec,
    MemberSpec,
    ParamSpec,
    TypeSchema,
    build_schema,
    clear_schema_cache,
    schema_of,
)
