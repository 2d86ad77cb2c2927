"""switchparse — switch CLI output to JSON Lines, one schema per command."""
__version__ = "0.1.0"

from .models import ABSENT, Schema, DecodedRecord
from .engine import ExtractionEngine, extract
from .schemas import Platform, get_schema, list_schemas
from .envelope import Envelope, build_envelopes, write_jsonl
from .errors import SwitchParseError, HeaderNotFoundError

__all__ = [
    "ABSENT", "Schema", "DecodedRecord",
    "ExtractionEngine", "extract",
    "Platform", "get_schema", "list_schemas",
    "Envelope", "build_envelopes", "write_jsonl",
    "SwitchParseError", "HeaderNotFoundError",
]
