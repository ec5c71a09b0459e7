"""Codec engine of jsonize.

- ``decode``: JSON value -> typed value (``decode``, ``decode_text``, ``decode_value``)
- ``construct``: aggregate construction (constructors, class tags, member population)
- ``encode``: typed value -> JSON value (``encode``, ``encode_text``)
"""

# decode must be imported before construct, which refers back to it
from .decode import decode, decode_text, decode_value, make_options
from .construct import decode_aggregate, default_construct, populate
from .encode import dump_text, encode, encode_text
