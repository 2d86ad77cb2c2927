"""
Switch Output Extraction — Core Data Models
Vendor-neutral. Layout-driven. One schema per command.

The question at every line:
  Which section is this? → Does it start, extend, or close a record? → Is the record complete?
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# ============================================================
# Absent sentinel
# ============================================================

class _Absent:
    """Placeholder or unparsable value. Not zero, not empty string."""

    _instance: Optional[_Absent] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()


# ============================================================
# Input — lines and sections
# ============================================================

@dataclass(frozen=True)
class RawLine:
    number: int                         # 1-based position in the document
    text: str


class SectionState(Enum):
    PREAMBLE = "preamble"               # banners, prompts, echoed commands
    HEADER = "header"
    SEPARATOR = "separator"             # dashed underline rows
    BODY = "body"
    TRAILER = "trailer"                 # blank line, closes open records


# ============================================================
# Schema — declarative description of one command's layout
# ============================================================

class FieldKind(Enum):
    TEXT = "text"
    INT = "int"
    FLOAT = "float"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = True
    default: Any = ABSENT               # used when an optional field never appears


class MatchMode(Enum):
    PREFIX = "prefix"
    CONTAINS = "contains"


@dataclass(frozen=True)
class FlagRule:
    """One marker in a flag alphabet. Rules are non-exclusive."""
    token: str                          # "+", "*", "CP", "(R)"
    attribute: str                      # output attribute name
    field: Optional[str] = None         # overrides Schema.flags_field
    whole_token: bool = False           # match a whitespace-delimited token only
    whole_value: bool = False           # match the entire stripped field value


@dataclass(frozen=True)
class ClassificationRule:
    keyword: str
    category: str
    mode: MatchMode = MatchMode.PREFIX


@dataclass(frozen=True)
class TokenRowSpec:
    """
    Whitespace-tokenized row layout.

    The first token is the entity (validated by prefix). Tokens between it
    and the first enumerated status value form a free-text name, so names
    with spaces survive. Tokens after the status map onto trailing_fields;
    the last trailing field absorbs any overflow.
    """
    entity_field: str
    name_field: str
    status_field: str
    trailing_fields: tuple[str, ...]
    entity_prefixes: tuple[str, ...]
    status_values: tuple[str, ...]
    min_tokens: int = 4
    name_placeholder: str = "--"
    overflow_joiner: str = ""


@dataclass(frozen=True)
class BlockSpec:
    """
    Multi-line entity layout.

    open_pattern starts a record; field_patterns extend it. Every pattern
    uses named groups whose names are schema field names.

    opens_on_field: a field line seen while no record is open starts one
    (blocks whose first line is optional, delimited by separators).
    closed_by_breaks: blank and separator lines close the open record.
    Turn off for blocks with blank lines and rules inside them.
    """
    open_pattern: str
    field_patterns: tuple[str, ...] = ()
    multiline_fields: tuple[str, ...] = ()
    opens_on_field: bool = False
    closed_by_breaks: bool = True


@dataclass(frozen=True)
class HeaderColumns:
    """
    Table whose value columns are named by the most recent header line.

    A document may repeat the table with different headers:

        Port        InOctets    InUcastPkts
        Eth1/1      2050276     650373
        Port        OutOctets   OutUcastPkts
        Eth1/1      31953836    2314463

    The first column is the entity. Each later header label is looked up
    in `labels`; unknown labels are read and discarded. A row must have
    exactly one token per header label.
    """
    entity_field: str
    labels: tuple[tuple[str, str], ...]     # ("InOctets", "in_octets")


DEFAULT_SEPARATOR = r"^\s*-{3,}[\s\-]*$"


@dataclass(frozen=True)
class Schema:
    """
    Everything the engine needs to know about one command's output.

    Exactly one of row_pattern, token_row, header_columns, block
    describes record shape.
    """
    name: str                           # parser name, e.g. "ip-arp"
    data_type: str                      # envelope data_type constant
    fields: tuple[FieldSpec, ...]
    command: str = ""                   # default CLI command
    description: str = ""

    # Sections
    header_markers: tuple[str, ...] = ()  # all must appear in the header line
    header_underline: bool = False      # consume the line right after the header
    separator_pattern: str = DEFAULT_SEPARATOR
    ignore_patterns: tuple[str, ...] = ()

    # Record shape
    row_pattern: Optional[str] = None
    token_row: Optional[TokenRowSpec] = None
    header_columns: Optional[HeaderColumns] = None
    block: Optional[BlockSpec] = None

    # Continuation
    continuation_field: Optional[str] = None
    continuation_suffixes: tuple[str, ...] = ()
    continuation_max_width: int = 4

    # Flags
    flags_field: Optional[str] = None
    flags: tuple[FlagRule, ...] = ()

    # Classification
    classify_field: Optional[str] = None
    category_attribute: str = "category"
    classification: tuple[ClassificationRule, ...] = ()
    default_category: str = "unknown"

    def __post_init__(self):
        shapes = [
            s for s in (self.row_pattern, self.token_row, self.header_columns, self.block)
            if s is not None
        ]
        if len(shapes) != 1:
            raise ValueError(
                f"schema {self.name!r} needs exactly one of "
                f"row_pattern, token_row, header_columns, block"
            )
        if self.header_columns is not None and not self.header_markers:
            raise ValueError(f"schema {self.name!r}: header_columns needs header_markers")
        names = self.field_names
        if len(set(names)) != len(names):
            raise ValueError(f"schema {self.name!r} has duplicate field names")

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def requires_header(self) -> bool:
        return bool(self.header_markers)

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    def missing_fields(self, values: dict[str, Any]) -> tuple[str, ...]:
        # Filled means matched. A matched-but-unparsable value is ABSENT and still counts.
        return tuple(name for name in self.required_fields if name not in values)


# ============================================================
# Records — in progress and finished
# ============================================================

@dataclass
class PendingRecord:
    """A record under construction. At most one exists per scan."""
    line_number: int
    values: dict[str, Any] = field(default_factory=dict)
    buffer_field: Optional[str] = None  # multi-line field currently accumulating
    merged: bool = False                # continuation already applied

    def append_to_buffer(self, text: str) -> None:
        if self.buffer_field is None:
            return
        current = self.values.get(self.buffer_field) or ""
        self.values[self.buffer_field] = f"{current}\n{text}" if current else text


@dataclass(frozen=True)
class DecodedRecord:
    """A finished record. Field order is schema order."""
    values: tuple[tuple[str, Any], ...]
    attributes: tuple[tuple[str, bool], ...] = ()
    category_attribute: Optional[str] = None
    category: Optional[str] = None
    line_number: int = 0

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.values:
            if key == name:
                return value
        for key, value in self.attributes:
            if key == name:
                return value
        if name == self.category_attribute:
            return self.category
        return default

    def as_message(self) -> dict[str, Any]:
        message: dict[str, Any] = dict(self.values)
        message.update(self.attributes)
        if self.category_attribute:
            message[self.category_attribute] = self.category
        return message
