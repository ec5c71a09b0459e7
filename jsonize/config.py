# jsonize/config.py
import os

from dotenv import load_dotenv

load_dotenv(override=False)

# Key carrying the polymorphic type tag in JSON objects.
DEFAULT_CLASS_KEY = os.getenv("JSONIZE_CLASS_KEY", "class")

# Indentation used by pretty-printed output (encode_text, write_json).
PRETTY_INDENT = int(os.getenv("JSONIZE_PRETTY_INDENT", "2"))

COMPACT_SEPARATORS = (",", ":")

FILE_ENCODING = "utf-8"
