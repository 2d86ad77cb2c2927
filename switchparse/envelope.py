"""
Output envelope shared by every parser.

Each DecodedRecord is wrapped as:

    {"data_type": "...", "timestamp": "2025-06-01T12:00:00Z",
     "date": "2025-06-01", "message": {...record fields...}}

and written one object per line (JSON Lines). ABSENT values serialize
as null and come back as ABSENT, so a record survives the round trip
field-for-field.

Usage:
    from .envelope import build_envelopes, write_jsonl
    count = write_jsonl(build_envelopes(records, schema), sys.stdout)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator, Optional, TextIO
import json

from .models import ABSENT, Schema, DecodedRecord


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _to_json_value(value: Any) -> Any:
    return None if value is ABSENT else value


def _from_json_value(value: Any) -> Any:
    return ABSENT if value is None else value


@dataclass
class Envelope:
    data_type: str
    timestamp: str
    date: str
    message: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "data_type": self.data_type,
            "timestamp": self.timestamp,
            "date": self.date,
            "message": {k: _to_json_value(v) for k, v in self.message.items()},
        }

    def to_json(self) -> str:
        # NaN and Infinity are not JSON; raise rather than write them
        return json.dumps(self.to_dict(), allow_nan=False)

    @classmethod
    def from_dict(cls, data: dict) -> Envelope:
        message = data.get("message") or {}
        return cls(
            data_type=data.get("data_type", ""),
            timestamp=data.get("timestamp", ""),
            date=data.get("date", ""),
            message={k: _from_json_value(v) for k, v in message.items()},
        )

    @classmethod
    def from_json(cls, text: str) -> Envelope:
        return cls.from_dict(json.loads(text))


def wrap_record(record: DecodedRecord, data_type: str, moment: datetime) -> Envelope:
    """RFC 3339 timestamp (UTC, seconds precision) plus calendar date."""
    moment = _as_utc(moment)
    return Envelope(
        data_type=data_type,
        timestamp=moment.strftime("%Y-%m-%dT%H:%M:%SZ"),
        date=moment.strftime("%Y-%m-%d"),
        message=record.as_message(),
    )


def build_envelopes(
    records: Iterable[DecodedRecord],
    schema: Schema,
    now: Optional[datetime] = None,
) -> Iterator[Envelope]:
    """
    Wrap records lazily. One instant is stamped on the whole run so
    every line from one capture carries the same timestamp.
    """
    moment = now or datetime.now(timezone.utc)
    for record in records:
        yield wrap_record(record, schema.data_type, moment)


def write_jsonl(envelopes: Iterable[Envelope], stream: TextIO) -> int:
    """Write one JSON object per line. Returns the number written."""
    count = 0
    for envelope in envelopes:
        stream.write(envelope.to_json())
        stream.write("\n")
        count += 1
    return count


def read_jsonl(stream: TextIO) -> list[Envelope]:
    return [Envelope.from_json(line) for line in stream if line.strip()]
