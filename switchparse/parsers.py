"""
Switch Output Extraction — Line-Level Parsers

The leaf layer: one raw line → section tag, field values, flags, category.

  Line Classifier   blank / separator / header / body / preamble
  Row Matcher       tokenized or anchored-pattern rows → named raw values
  Coercion          raw text → str / int / float / ABSENT
  Flag Decoder      marker characters → independent booleans
  Type Classifier   keyword/prefix table → coarse category

Every function here:
  - Takes plain strings and a Schema (or a piece of one)
  - Never raises on bad input; a line that doesn't fit returns None
  - Holds no state between calls
"""

from __future__ import annotations
import math
import re
import logging
from typing import Any, Optional

from .models import (
    ABSENT, Schema, SectionState, FieldKind,
    FlagRule, ClassificationRule, MatchMode, TokenRowSpec, HeaderColumns,
)

logger = logging.getLogger("switchparse.parsers")


# ============================================================
# Utility — value coercion
# ============================================================

PLACEHOLDERS = frozenset({"", "-", "--", "N/A", "NA", "n/a"})


def _strip_number(raw: str) -> str:
    """Drop thousands separators and surrounding whitespace."""
    return raw.strip().replace(",", "")


def _safe_int(raw: str) -> Any:
    text = _strip_number(raw)
    if text in PLACEHOLDERS:
        return ABSENT
    try:
        return int(text)
    except ValueError:
        # "1.0e3" style counters show up on some releases
        try:
            value = float(text)
        except ValueError:
            return ABSENT
        return int(value) if value.is_integer() else ABSENT


def _safe_float(raw: str) -> Any:
    text = _strip_number(raw)
    if text in PLACEHOLDERS:
        return ABSENT
    try:
        value = float(text)
    except ValueError:
        return ABSENT
    # "nan" and "inf" parse, but have no JSON encoding
    return value if math.isfinite(value) else ABSENT


def coerce_value(raw: Optional[str], kind: FieldKind) -> Any:
    """
    Convert a raw captured string to the field's kind.

    Placeholders and garbage in numeric fields become ABSENT. Text is
    returned stripped; it is never turned into ABSENT.
    """
    if raw is None:
        return ABSENT if kind != FieldKind.TEXT else ""
    if kind == FieldKind.INT:
        return _safe_int(raw)
    if kind == FieldKind.FLOAT:
        return _safe_float(raw)
    return raw.strip()


# ============================================================
# Line Classifier
# ============================================================

def is_separator(text: str, schema: Schema) -> bool:
    return re.match(schema.separator_pattern, text) is not None


def is_header(text: str, schema: Schema) -> bool:
    if not schema.header_markers:
        return False
    return all(marker in text for marker in schema.header_markers)


def classify_line(
    text: str,
    schema: Schema,
    current: SectionState = SectionState.PREAMBLE,
    header_seen: bool = False,
) -> SectionState:
    """
    Tag one raw line. Priority order matters:
    blank > separator > header > header underline > ignored > body/preamble.
    """
    if not text.strip():
        return SectionState.TRAILER

    if is_separator(text, schema):
        return SectionState.SEPARATOR

    if is_header(text, schema):
        return SectionState.HEADER

    # Underlines like "---------+-----------------+--------" aren't pure
    # dashes; the schema says to eat whatever follows the header.
    if current == SectionState.HEADER and schema.header_underline:
        return SectionState.SEPARATOR

    for pattern in schema.ignore_patterns:
        if re.search(pattern, text):
            return SectionState.PREAMBLE

    if header_seen or not schema.requires_header:
        return SectionState.BODY
    return SectionState.PREAMBLE


# ============================================================
# Row Matcher
# ============================================================

def _has_entity_prefix(token: str, spec: TokenRowSpec) -> bool:
    return any(token.startswith(prefix) for prefix in spec.entity_prefixes)


def _match_tokens(text: str, spec: TokenRowSpec) -> Optional[dict[str, str]]:
    """
    Parse: Eth1/1   uplink to spine 1   connected 1   full  100G  QSFP-100G-CR4

    Name is everything between the entity and the first status token.
    """
    tokens = text.split()
    if len(tokens) < spec.min_tokens:
        return None

    if not _has_entity_prefix(tokens[0], spec):
        return None

    status_index = -1
    for i in range(1, len(tokens)):
        if tokens[i] in spec.status_values:
            status_index = i
            break
    if status_index == -1:
        return None

    values = {
        spec.entity_field: tokens[0],
        spec.name_field: " ".join(tokens[1:status_index]) or spec.name_placeholder,
        spec.status_field: tokens[status_index],
    }

    remaining = tokens[status_index + 1:]
    trailing = spec.trailing_fields
    for i, name in enumerate(trailing):
        if i >= len(remaining):
            break
        if i == len(trailing) - 1:
            values[name] = spec.overflow_joiner.join(remaining[i:])
        else:
            values[name] = remaining[i]
    return values


def match_pattern(text: str, pattern: str) -> Optional[dict[str, str]]:
    m = re.match(pattern, text.strip())
    if not m:
        return None
    return {k: (v if v is not None else "") for k, v in m.groupdict().items()}


Columns = tuple[Optional[str], ...]


def header_columns(text: str, spec: HeaderColumns) -> Columns:
    """
    Parse: Port        Align-Err    FCS-Err   Xmit-Err

    → ("interface_name", "align_err", "fcs_err", "xmit_err")
    Labels the schema doesn't know map to None.
    """
    labels = dict(spec.labels)
    tokens = text.split()
    if not tokens:
        return ()
    return (spec.entity_field,) + tuple(labels.get(token) for token in tokens[1:])


def _match_columns(text: str, columns: Columns) -> Optional[dict[str, str]]:
    tokens = text.split()
    if not columns or len(tokens) != len(columns):
        return None
    return {name: token for name, token in zip(columns, tokens) if name is not None}


class RowMatcher:
    """Turn one body line into named raw values, or None."""

    def __init__(self, schema: Schema):
        self.schema = schema

    def match(self, text: str, columns: Columns = ()) -> Optional[dict[str, str]]:
        """columns: the current header's field names, for header_columns schemas."""
        if not text or not text.strip():
            return None
        if self.schema.token_row is not None:
            return _match_tokens(text, self.schema.token_row)
        if self.schema.row_pattern is not None:
            return match_pattern(text, self.schema.row_pattern)
        if self.schema.header_columns is not None:
            return _match_columns(text, columns)
        return None

    def looks_like_row(self, text: str) -> bool:
        """
        New-record shape test used by the continuation merger.
        Entity prefix alone is enough. A wrapped fragment never has one.
        """
        if self.match(text) is not None:
            return True
        spec = self.schema.token_row
        if spec is not None:
            stripped = text.strip()
            return any(stripped.startswith(p) for p in spec.entity_prefixes)
        return False

    def coerce(self, raw: dict[str, str]) -> dict[str, Any]:
        """Apply field kinds. Unknown capture groups are dropped."""
        values: dict[str, Any] = {}
        for spec in self.schema.fields:
            if spec.name in raw:
                values[spec.name] = coerce_value(raw[spec.name], spec.kind)
        return values


# ============================================================
# Flag Decoder
# ============================================================

def _flag_present(raw: str, rule: FlagRule) -> bool:
    if rule.whole_value:
        return raw.strip() == rule.token
    if rule.whole_token:
        return rule.token in raw.split()
    return rule.token in raw


def decode_flags(raw: Any, alphabet: tuple[FlagRule, ...] | list[FlagRule]) -> dict[str, bool]:
    """
    Test every rule independently against one flags field.
    "+ *" sets both rules; unknown characters are ignored.
    """
    text = raw if isinstance(raw, str) else ""
    return {rule.attribute: _flag_present(text, rule) for rule in alphabet}


def decode_record_flags(values: dict[str, Any], schema: Schema) -> dict[str, bool]:
    """Decode a schema's alphabet, honoring per-rule field overrides."""
    result: dict[str, bool] = {}
    for rule in schema.flags:
        source = rule.field or schema.flags_field
        raw = values.get(source, "") if source else ""
        result.update(decode_flags(raw, (rule,)))
    return result


# ============================================================
# Type Classifier
# ============================================================

def classify_type(
    value: Any,
    rules: tuple[ClassificationRule, ...] | list[ClassificationRule],
    default: str = "unknown",
) -> str:
    """First match wins. Case-insensitive. Never fails."""
    if not isinstance(value, str) or not value:
        return default
    text = value.strip().lower()
    for rule in rules:
        keyword = rule.keyword.lower()
        if rule.mode == MatchMode.PREFIX and text.startswith(keyword):
            return rule.category
        if rule.mode == MatchMode.CONTAINS and keyword in text:
            return rule.category
    return default
