import io
import json
from datetime import datetime, timezone, timedelta

import pytest

from switchparse.engine import extract
from switchparse.envelope import (
    Envelope, build_envelopes, write_jsonl, read_jsonl, wrap_record,
)
from switchparse.models import ABSENT
from switchparse.schemas import Platform, get_schema

from .test_schemas import NXOS_LLDP, NXOS_ARP

NOW = datetime(2025, 6, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


def lldp_records():
    return extract(get_schema(Platform.CISCO_NXOS, "lldp-neighbor"), NXOS_LLDP)


def test_envelope_shape():
    schema = get_schema(Platform.CISCO_NXOS, "ip-arp")
    record = extract(schema, NXOS_ARP)[0]
    envelope = wrap_record(record, schema.data_type, NOW)
    data = json.loads(envelope.to_json())
    assert list(data) == ["data_type", "timestamp", "date", "message"]
    assert data["data_type"] == "cisco_nexus_arp_entry"
    assert data["timestamp"] == "2025-06-01T12:30:45Z"
    assert data["date"] == "2025-06-01"
    assert data["message"]["cfsoe_sync"] is True


def test_timestamp_converted_to_utc():
    eastern = datetime(2025, 6, 1, 22, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
    record = lldp_records()[0]
    envelope = wrap_record(record, "x", eastern)
    assert envelope.timestamp == "2025-06-02T03:00:00Z"
    assert envelope.date == "2025-06-02"


def test_absent_serializes_as_null():
    record = lldp_records()[1]
    data = json.loads(wrap_record(record, "x", NOW).to_json())
    assert data["message"]["max_frame_size"] is None
    assert data["message"]["port_description"] == ""


def test_round_trip_field_for_field():
    schema = get_schema(Platform.CISCO_NXOS, "lldp-neighbor")
    for envelope in build_envelopes(lldp_records(), schema, now=NOW):
        restored = Envelope.from_json(envelope.to_json())
        assert restored == envelope
        assert list(restored.message) == list(envelope.message)

    second = Envelope.from_json(
        next(iter(build_envelopes(lldp_records()[1:], schema, now=NOW))).to_json()
    )
    assert second.message["max_frame_size"] is ABSENT


def test_one_instant_per_run():
    schema = get_schema(Platform.CISCO_NXOS, "lldp-neighbor")
    stamps = {e.timestamp for e in build_envelopes(lldp_records(), schema)}
    assert len(stamps) == 1


def test_write_jsonl_counts_and_reads_back():
    schema = get_schema(Platform.CISCO_NXOS, "ip-arp")
    envelopes = list(build_envelopes(extract(schema, NXOS_ARP), schema, now=NOW))

    buf = io.StringIO()
    assert write_jsonl(envelopes, buf) == 4

    lines = buf.getvalue().splitlines()
    assert len(lines) == 4
    assert all(json.loads(line)["data_type"] == schema.data_type for line in lines)

    buf.seek(0)
    assert read_jsonl(buf) == envelopes


def test_write_jsonl_empty():
    buf = io.StringIO()
    assert write_jsonl([], buf) == 0
    assert buf.getvalue() == ""


def test_non_finite_reading_serialized_as_null():
    schema = get_schema(Platform.DELL_OS10, "environment-temperature")
    text = (
        "Unit   Sensor   Current   Minor   Major   Status\n"
        "1      CPU      nan       70      inf     Ok\n"
    )
    records = extract(schema, text)
    assert records[0].get("current_temp") is ABSENT
    assert records[0].get("major_threshold") is ABSENT
    line = wrap_record(records[0], schema.data_type, NOW).to_json()
    assert "NaN" not in line and "Infinity" not in line
    message = json.loads(line)["message"]
    assert message["current_temp"] is None
    assert message["minor_threshold"] == 70.0


def test_envelope_refuses_non_finite_numbers():
    envelope = Envelope("x", "2025-06-01T00:00:00Z", "2025-06-01", {"x": float("nan")})
    with pytest.raises(ValueError):
        envelope.to_json()
