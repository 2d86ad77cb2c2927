"""
Switch Output Extraction — Diagnostic Framework

Every parse, traceable. Two levels:
  1. Run summary (ParseReport, logged at INFO, shown on stderr with -debug)
  2. Line-level detail (--debug/--log: skipped lines, dropped blocks, merges)

Philosophy: if a parser returns zero records, we need to know WHY.
  - Was the input empty?
  - Was the header never found (wrong command output)?
  - Did rows fail to match, or did blocks close incomplete?
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import json
import logging

from .engine import ExtractionEngine, ScanState, Source
from .errors import HeaderNotFoundError
from .models import Schema, DecodedRecord


# ============================================================
# Structured Diagnostic Records
# ============================================================

class ParseResult(Enum):
    OK = "ok"                       # records emitted, nothing dropped
    PARTIAL = "partial"             # records emitted, some blocks dropped
    NO_RECORDS = "no-records"       # header seen, nothing matched
    NO_HEADER = "no-header"         # wrong command output
    EMPTY_INPUT = "empty-input"     # nothing to parse


@dataclass
class ParseReport:
    """What one engine run saw and did."""
    schema: str
    data_type: str = ""
    lines: int = 0
    content_lines: int = 0          # non-blank
    records: int = 0
    skipped: int = 0
    dropped: int = 0
    merged: int = 0
    result: ParseResult = ParseResult.OK
    detail: str = ""
    notes: list[str] = field(default_factory=list)

    @classmethod
    def from_state(cls, schema: Schema, state: ScanState) -> ParseReport:
        return cls(
            schema=schema.name,
            data_type=schema.data_type,
            lines=state.lines,
            content_lines=state.content_lines,
            records=state.emitted,
            skipped=state.skipped,
            dropped=state.dropped,
            merged=state.merged,
            notes=list(state.notes),
        )

    def to_dict(self) -> dict:
        return {
            "schema": self.schema,
            "data_type": self.data_type,
            "lines": self.lines,
            "content_lines": self.content_lines,
            "records": self.records,
            "skipped": self.skipped,
            "dropped": self.dropped,
            "merged": self.merged,
            "result": self.result.value,
            "detail": self.detail,
            "notes": self.notes,
        }

    def dump_json(self, path: str):
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)


# ============================================================
# Logging Configuration
# ============================================================
#
# Verbosity levels:
#   default         : nothing but the CLI's own stderr messages
#   --debug         : everything, to stderr
#   --log FILE      : everything, to file (stdout stays clean JSON)
#

def setup_logging(
    log_file: Optional[str] = None,
    debug: bool = False,
    verbose: bool = False,
) -> logging.Logger:
    """
    Configure logging for a parse run.

    - log_file: write debug-level to file
    - debug: debug-level to stderr
    - verbose: info-level to stderr
    """
    logger = logging.getLogger("switchparse")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # File handler: always debug level
    if log_file:
        fh = logging.FileHandler(log_file, mode="w")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    # Stderr handler: keeps stdout for JSON Lines
    if debug or verbose:
        sh = logging.StreamHandler()
        sh.setLevel(logging.DEBUG if debug else logging.INFO)
        sh.setFormatter(formatter)
        logger.addHandler(sh)

    # Null handler if nothing else, to silence "no handler" warnings
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


# ============================================================
# Diagnostic-Aware Parse Wrapper
# ============================================================
#
# The CLI runs every parse through this. It captures what happened
# and returns both the records and the report.
#

def _judge(report: ParseReport) -> ParseResult:
    if report.content_lines == 0:
        return ParseResult.EMPTY_INPUT
    if report.records == 0:
        return ParseResult.NO_RECORDS
    if report.dropped:
        return ParseResult.PARTIAL
    return ParseResult.OK


def parse_with_diagnostics(
    schema: Schema,
    source: Source,
    logger: Optional[logging.Logger] = None,
) -> tuple[list[DecodedRecord], ParseReport]:
    """
    Run the engine over one document with full diagnostics.

    Returns:
        (records, report)

    HeaderNotFoundError is re-raised with the report attached as
    e.report; it is the one failure the caller has to see.
    """
    log = logger or logging.getLogger("switchparse.diagnostics")
    state = ScanState()

    if isinstance(source, str) and not source.strip():
        log.warning(f"[{schema.name}] Empty or whitespace-only input")

    try:
        records = ExtractionEngine(schema).run(source, state)
    except HeaderNotFoundError as e:
        report = ParseReport.from_state(schema, state)
        report.result = (
            ParseResult.EMPTY_INPUT if state.content_lines == 0 else ParseResult.NO_HEADER
        )
        report.detail = str(e)
        e.report = report
        log.error(
            f"[{schema.name}] {e}\n"
            f"  Expected header markers: {', '.join(schema.header_markers)}"
        )
        raise

    report = ParseReport.from_state(schema, state)
    report.result = _judge(report)
    if report.result == ParseResult.NO_RECORDS:
        report.detail = "no records matched"
    elif report.result == ParseResult.PARTIAL:
        report.detail = f"{report.dropped} incomplete record(s) dropped"

    log.info(dump_report_summary(report))
    return records, report


# ============================================================
# Diagnostic Dump Formats
# ============================================================

def dump_report_summary(report: ParseReport) -> str:
    """One-line summary for stderr or the log file."""
    line = (
        f"{report.schema}: {report.records} records from {report.lines} lines "
        f"(skipped {report.skipped}, dropped {report.dropped}, merged {report.merged}) "
        f"→ {report.result.value.upper()}"
    )
    if report.detail:
        line += f" ({report.detail})"
    return line
