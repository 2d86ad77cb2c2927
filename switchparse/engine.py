"""
Extraction Engine — one forward pass from raw lines to decoded records.

Sequence per line:
    1. Line Classifier tags the line (preamble / header / separator / body / trailer)
    2. A held "soft" record gets its one line of lookahead (continuation merge)
    3. Trailer / separator / header close whatever is pending
    4. Body lines go to the Row Matcher (tables) or Block Accumulator (blocks)
    5. Finished records pass through the Record Emitter, in input order

All mutable state lives in ScanState, owned by a single iter_records() call.
An engine instance is just a schema plus a matcher, so one engine can serve
many documents and many threads at once.

Block Accumulator states:

    IDLE ──open line──▶ COLLECTING ──field line──▶ COLLECTING
                            │
                            ├── next open line ─▶ emit (if complete) ─▶ COLLECTING
                            ├── blank / separator ─▶ emit (if complete) ─▶ IDLE
                            └── end of input ─▶ flush (if complete)

    With opens_on_field, a field line in IDLE also opens a record. Without
    closed_by_breaks, blank and separator lines only end a multi-line field.

Header-column tables remember the field names of the last header seen;
each header line replaces them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional, Union
import logging

from .models import (
    ABSENT, Schema, SectionState, RawLine, PendingRecord, DecodedRecord,
)
from .parsers import (
    Columns, RowMatcher, classify_line, match_pattern, header_columns,
    decode_record_flags, classify_type,
)
from .errors import HeaderNotFoundError

logger = logging.getLogger("switchparse.engine")

MAX_NOTES = 20      # dropped-record notes kept per scan; the count is always exact


# ============================================================
# Scan State
# ============================================================

@dataclass
class ScanState:
    """Single-owner state threaded through one scan."""
    section: SectionState = SectionState.PREAMBLE
    header_seen: bool = False
    columns: Columns = ()                     # field names from the last header
    pending: Optional[PendingRecord] = None   # open block record
    held: Optional[PendingRecord] = None      # row awaiting continuation lookahead

    # Counters for diagnostics
    lines: int = 0
    content_lines: int = 0                    # lines with anything but whitespace
    emitted: int = 0
    skipped: int = 0
    dropped: int = 0
    merged: int = 0
    notes: list[str] = field(default_factory=list)

    def note(self, text: str) -> None:
        if len(self.notes) < MAX_NOTES:
            self.notes.append(text)


# ============================================================
# Record Emitter
# ============================================================

def emit_record(
    schema: Schema,
    values: dict[str, Any],
    line_number: int = 0,
) -> Optional[DecodedRecord]:
    """
    Assemble a DecodedRecord in schema order, or None if a required
    field was never filled.
    """
    if schema.missing_fields(values):
        return None

    ordered = tuple(
        (spec.name, values.get(spec.name, spec.default))
        for spec in schema.fields
    )

    attributes = tuple(decode_record_flags(values, schema).items())

    category = None
    if schema.classify_field:
        category = classify_type(
            values.get(schema.classify_field, ABSENT),
            schema.classification,
            schema.default_category,
        )

    return DecodedRecord(
        values=ordered,
        attributes=attributes,
        category_attribute=schema.category_attribute if schema.classify_field else None,
        category=category,
        line_number=line_number,
    )


# ============================================================
# Engine
# ============================================================

Source = Union[str, Iterable[str]]


class ExtractionEngine:
    """Drive one schema over a document. Stateless between runs."""

    def __init__(self, schema: Schema):
        self.schema = schema
        self.matcher = RowMatcher(schema)

    # ── Public API ──

    def run(self, source: Source, state: Optional[ScanState] = None) -> list[DecodedRecord]:
        return list(self.iter_records(source, state))

    def iter_records(
        self, source: Source, state: Optional[ScanState] = None,
    ) -> Iterator[DecodedRecord]:
        """
        Stream DecodedRecords in input order.

        Raises HeaderNotFoundError at end of input if the schema needs a
        header and none was seen. Input with nothing but whitespace is
        reported as empty.
        """
        if state is None:
            state = ScanState()
        if isinstance(source, str):
            source = source.splitlines()

        for number, text in enumerate(source, start=1):
            state.lines = number
            line = RawLine(number=number, text=text.rstrip("\r\n"))
            if line.text.strip():
                state.content_lines += 1
            yield from self._step(line, state)

        yield from self._finish(state)

    # ── Per-line dispatch ──

    def _step(self, line: RawLine, state: ScanState) -> Iterator[DecodedRecord]:
        section = classify_line(line.text, self.schema, state.section, state.header_seen)
        state.section = section

        if state.held is not None:
            if section == SectionState.BODY and self._merge_continuation(line, state):
                yield from self._release_held(state)
                return
            yield from self._release_held(state)

        if section == SectionState.HEADER:
            state.header_seen = True
            if self.schema.header_columns is not None:
                state.columns = header_columns(line.text, self.schema.header_columns)
            yield from self._close_pending(state)
            return

        if section in (SectionState.TRAILER, SectionState.SEPARATOR):
            block = self.schema.block
            if block is None or block.closed_by_breaks:
                yield from self._close_pending(state)
            elif state.pending is not None:
                state.pending.buffer_field = None
            return

        if section == SectionState.PREAMBLE:
            state.skipped += 1
            return

        if self.schema.block is not None:
            yield from self._accumulate(line, state)
        else:
            yield from self._match_row(line, state)

    def _finish(self, state: ScanState) -> Iterator[DecodedRecord]:
        yield from self._release_held(state)
        yield from self._close_pending(state)

        if self.schema.requires_header and not state.header_seen:
            raise HeaderNotFoundError(self.schema.name, state.content_lines)

    def _yield_if_complete(
        self, pending: PendingRecord, state: ScanState,
    ) -> Iterator[DecodedRecord]:
        missing = self.schema.missing_fields(pending.values)
        if missing:
            state.dropped += 1
            state.note(f"line {pending.line_number}: missing {', '.join(missing)}")
            logger.debug(
                f"[{self.schema.name}] dropped incomplete record from line "
                f"{pending.line_number}: missing {list(missing)}"
            )
            return
        state.emitted += 1
        yield emit_record(self.schema, pending.values, pending.line_number)

    # ============================================================
    # Row Matcher path + Continuation Merger
    # ============================================================

    def _match_row(self, line: RawLine, state: ScanState) -> Iterator[DecodedRecord]:
        raw = self.matcher.match(line.text, state.columns)
        if raw is None:
            state.skipped += 1
            logger.debug(f"[{self.schema.name}] line {line.number} skipped: {line.text!r}")
            return

        pending = PendingRecord(
            line_number=line.number,
            values=self.matcher.coerce(raw),
        )

        if self._is_truncated(pending):
            state.held = pending
            return

        yield from self._yield_if_complete(pending, state)

    def _is_truncated(self, pending: PendingRecord) -> bool:
        """Last free-text field ends with a known-truncatable suffix."""
        name = self.schema.continuation_field
        if not name or not self.schema.continuation_suffixes:
            return False
        value = pending.values.get(name)
        if not isinstance(value, str) or not value:
            return False
        return any(value.endswith(s) for s in self.schema.continuation_suffixes)

    def _merge_continuation(self, line: RawLine, state: ScanState) -> bool:
        """
        Append a short, non-row-shaped fragment to the held record.
        At most one merge per record.
        """
        held = state.held
        if held is None or held.merged:
            return False

        fragment = line.text.strip()
        if not fragment or len(fragment) > self.schema.continuation_max_width:
            return False
        if self.matcher.looks_like_row(line.text):
            return False

        name = self.schema.continuation_field
        held.values[name] = f"{held.values.get(name, '')}{fragment}"
        held.merged = True
        state.merged += 1
        logger.debug(
            f"[{self.schema.name}] merged continuation {fragment!r} "
            f"from line {line.number} into line {held.line_number}"
        )
        return True

    def _release_held(self, state: ScanState) -> Iterator[DecodedRecord]:
        held = state.held
        if held is None:
            return
        state.held = None
        yield from self._yield_if_complete(held, state)

    # ============================================================
    # Block Accumulator
    # ============================================================

    def _accumulate(self, line: RawLine, state: ScanState) -> Iterator[DecodedRecord]:
        block = self.schema.block

        opened = match_pattern(line.text, block.open_pattern)
        if opened is not None:
            yield from self._close_pending(state)
            state.pending = PendingRecord(
                line_number=line.number,
                values=self.matcher.coerce(opened),
            )
            state.pending.buffer_field = self._multiline_key(opened)
            return

        pending = state.pending
        if pending is None and not block.opens_on_field:
            state.skipped += 1
            return

        for pattern in block.field_patterns:
            captured = match_pattern(line.text, pattern)
            if captured is not None:
                if pending is None:
                    pending = state.pending = PendingRecord(line_number=line.number)
                pending.values.update(self.matcher.coerce(captured))
                pending.buffer_field = self._multiline_key(captured)
                return

        if pending is None:
            state.skipped += 1
            return

        if pending.buffer_field is not None:
            pending.append_to_buffer(line.text.strip())
            return

        # Optional / vendor-variable lines inside a block
        state.skipped += 1

    def _multiline_key(self, captured: dict[str, str]) -> Optional[str]:
        for name in captured:
            if name in self.schema.block.multiline_fields:
                return name
        return None

    def _close_pending(self, state: ScanState) -> Iterator[DecodedRecord]:
        pending = state.pending
        if pending is None:
            return
        state.pending = None
        pending.buffer_field = None
        yield from self._yield_if_complete(pending, state)


def extract(schema: Schema, source: Source) -> list[DecodedRecord]:
    """Convenience wrapper: one schema, one document, all records."""
    return ExtractionEngine(schema).run(source)
