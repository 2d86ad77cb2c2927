import pytest

from switchparse.models import (
    ABSENT, Schema, FieldSpec, FieldKind, SectionState,
    TokenRowSpec, HeaderColumns, FlagRule, ClassificationRule, MatchMode,
)
from switchparse.parsers import (
    coerce_value, classify_line, RowMatcher, decode_flags,
    decode_record_flags, classify_type, match_pattern, header_columns,
)
from switchparse.schemas import NXOS_IP_ARP, NXOS_MAC_ADDRESS, NXOS_INTERFACE_STATUS


TABLE = Schema(
    name="counters",
    data_type="test_counters",
    fields=(
        FieldSpec("port"),
        FieldSpec("in_octets", FieldKind.INT),
        FieldSpec("load", FieldKind.FLOAT, required=False),
    ),
    header_markers=("Port", "InOctets"),
    ignore_patterns=(r"^switch#",),
    row_pattern=r"^(?P<port>\S+)\s+(?P<in_octets>\S+)(?:\s+(?P<load>\S+))?$",
)


# ============================================================
# Coercion
# ============================================================

@pytest.mark.parametrize("raw", ["--", "N/A", "", "-", "   "])
def test_placeholder_numerics_are_absent(raw):
    assert coerce_value(raw, FieldKind.INT) is ABSENT
    assert coerce_value(raw, FieldKind.FLOAT) is ABSENT


def test_int_coercion_handles_thousands_separators():
    assert coerce_value("1,234,567", FieldKind.INT) == 1234567
    assert coerce_value("42", FieldKind.INT) == 42


def test_garbage_numeric_is_absent_not_zero():
    value = coerce_value("abc", FieldKind.INT)
    assert value is ABSENT
    assert value != 0


def test_float_coercion():
    assert coerce_value("38.5", FieldKind.FLOAT) == 38.5


@pytest.mark.parametrize("raw", ["nan", "NaN", "inf", "-inf", "Infinity"])
def test_non_finite_numerics_are_absent(raw):
    assert coerce_value(raw, FieldKind.FLOAT) is ABSENT
    assert coerce_value(raw, FieldKind.INT) is ABSENT


def test_text_is_stripped_never_absent():
    assert coerce_value("  Ok ", FieldKind.TEXT) == "Ok"
    assert coerce_value("--", FieldKind.TEXT) == "--"
    assert coerce_value(None, FieldKind.TEXT) == ""


def test_absent_is_falsy_singleton():
    assert not ABSENT
    assert repr(ABSENT) == "ABSENT"
    assert type(ABSENT)() is ABSENT


# ============================================================
# Line Classifier
# ============================================================

def test_classify_blank_is_trailer():
    assert classify_line("   ", TABLE) == SectionState.TRAILER


def test_classify_dashes_is_separator():
    assert classify_line("------  --------", TABLE) == SectionState.SEPARATOR


def test_classify_header():
    assert classify_line("Port    InOctets   Load", TABLE) == SectionState.HEADER


def test_body_requires_header_seen():
    assert classify_line("Eth1/1  100", TABLE) == SectionState.PREAMBLE
    assert classify_line("Eth1/1  100", TABLE, header_seen=True) == SectionState.BODY


def test_ignore_patterns_win_over_body():
    line = "switch# show counters"
    assert classify_line(line, TABLE, header_seen=True) == SectionState.PREAMBLE


def test_header_underline_consumed_only_right_after_header():
    underline = "---------+-----------------+--------+---------"
    assert classify_line(
        underline, NXOS_MAC_ADDRESS, SectionState.HEADER, header_seen=True,
    ) == SectionState.SEPARATOR
    assert classify_line(
        underline, NXOS_MAC_ADDRESS, SectionState.BODY, header_seen=True,
    ) == SectionState.BODY


# ============================================================
# Row Matcher
# ============================================================

def test_pattern_row_coerces_by_kind():
    matcher = RowMatcher(TABLE)
    raw = matcher.match("Eth1/1   12,345   0.75")
    assert raw == {"port": "Eth1/1", "in_octets": "12,345", "load": "0.75"}
    assert matcher.coerce(raw) == {"port": "Eth1/1", "in_octets": 12345, "load": 0.75}


def test_pattern_row_optional_group_is_empty_string():
    raw = RowMatcher(TABLE).match("Eth1/2   10")
    assert raw["load"] == ""
    assert RowMatcher(TABLE).coerce(raw)["load"] is ABSENT


def test_pattern_row_no_match():
    assert RowMatcher(TABLE).match("Total: 3 interfaces listed here") is None


def test_token_row_name_with_spaces():
    matcher = RowMatcher(NXOS_INTERFACE_STATUS)
    raw = matcher.match(
        "Eth1/49       uplink to spine 1  connected routed    full    100G    QSFP-100G-CR4"
    )
    assert raw == {
        "port": "Eth1/49",
        "name": "uplink to spine 1",
        "status": "connected",
        "vlan": "routed",
        "duplex": "full",
        "speed": "100G",
        "type": "QSFP-100G-CR4",
    }


def test_token_row_overflow_joins_into_last_field():
    raw = RowMatcher(NXOS_INTERFACE_STATUS).match(
        "Eth1/5  --  connected 1 full 10G 10Gbase SR"
    )
    assert raw["type"] == "10GbaseSR"


def test_token_row_rejects_unknown_entity_and_missing_status():
    matcher = RowMatcher(NXOS_INTERFACE_STATUS)
    assert matcher.match("Foo1/1  x  connected 1 full 10G") is None
    assert matcher.match("Eth1/1  x  sleeping 1 full 10G") is None


def test_looks_like_row_on_entity_prefix_alone():
    matcher = RowMatcher(NXOS_INTERFACE_STATUS)
    assert matcher.looks_like_row("Eth1/7")
    assert not matcher.looks_like_row("   CC")


def test_match_pattern_strips_input():
    assert match_pattern("   abc  ", r"^(?P<x>\w+)$") == {"x": "abc"}


# ============================================================
# Flag Decoder
# ============================================================

def test_flags_are_independent():
    flags = decode_flags("+ *", NXOS_IP_ARP.flags)
    assert flags["cfsoe_sync"] is True
    assert flags["non_active_fhrp"] is True
    assert flags["throttled_glean"] is False


def test_flags_order_insensitive_and_unknown_ignored():
    assert decode_flags("* +", NXOS_IP_ARP.flags) == decode_flags("+ *", NXOS_IP_ARP.flags)
    flags = decode_flags("% !", NXOS_IP_ARP.flags)
    assert not any(flags.values())


def test_flags_non_string_is_all_false():
    flags = decode_flags(ABSENT, NXOS_IP_ARP.flags)
    assert set(flags) == {rule.attribute for rule in NXOS_IP_ARP.flags}
    assert not any(flags.values())


def test_whole_token_flag():
    rules = (FlagRule("S", "static", whole_token=True),)
    assert decode_flags("S", rules) == {"static": True}
    assert decode_flags("PS", rules) == {"static": False}


def test_whole_value_flag():
    rules = (FlagRule("present", "present", whole_value=True),)
    assert decode_flags(" present ", rules) == {"present": True}
    assert decode_flags("not present", rules) == {"present": False}


def test_flag_field_override():
    values = {"entry_flags": "G", "port": "sup-eth1(R)"}
    flags = decode_record_flags(values, NXOS_MAC_ADDRESS)
    assert flags["gateway_mac"] is True
    assert flags["routed_mac"] is True
    assert flags["primary_entry"] is False


# ============================================================
# Type Classifier
# ============================================================

RULES = (
    ClassificationRule("vlan", "vlan"),
    ClassificationRule("eth", "ethernet"),
    ClassificationRule("power supply", "power_supply", MatchMode.CONTAINS),
)


def test_classify_prefix_case_insensitive():
    assert classify_type("Vlan201", RULES) == "vlan"
    assert classify_type("Eth1/1", RULES) == "ethernet"


def test_classify_contains():
    assert classify_type("Power Supply 1", RULES) == "power_supply"


def test_classify_first_match_wins():
    rules = (ClassificationRule("e", "first"), ClassificationRule("eth", "second"))
    assert classify_type("eth1", rules) == "first"


def test_classify_fallback_never_fails():
    assert classify_type("tunnel5", RULES) == "unknown"
    assert classify_type("tunnel5", RULES, default="other") == "other"
    assert classify_type(ABSENT, RULES, default="other") == "other"
    assert classify_type("", RULES) == "unknown"


# ============================================================
# Header-named columns
# ============================================================

COLUMNS = HeaderColumns(
    entity_field="port",
    labels=(("InOctets", "in_octets"), ("OutOctets", "out_octets")),
)

COLUMN_TABLE = Schema(
    name="columns",
    data_type="test_columns",
    fields=(
        FieldSpec("port"),
        FieldSpec("in_octets", FieldKind.INT, required=False),
        FieldSpec("out_octets", FieldKind.INT, required=False),
    ),
    header_markers=("Port",),
    header_columns=COLUMNS,
)


def test_header_columns_maps_labels():
    assert header_columns("Port    InOctets   Mystery", COLUMNS) == ("port", "in_octets", None)


def test_column_row_needs_one_token_per_label():
    matcher = RowMatcher(COLUMN_TABLE)
    columns = ("port", "in_octets", None)
    assert matcher.match("Eth1/1  1200  7", columns) == {"port": "Eth1/1", "in_octets": "1200"}
    assert matcher.match("Eth1/1  1200", columns) is None
    assert matcher.match("Eth1/1  1200  7", ()) is None


def test_schema_needs_exactly_one_shape():
    with pytest.raises(ValueError):
        Schema(
            name="bad",
            data_type="bad",
            fields=(FieldSpec("port"),),
            header_markers=("Port",),
            row_pattern=r"^(?P<port>\S+)$",
            header_columns=COLUMNS,
        )


def test_header_columns_need_header_markers():
    with pytest.raises(ValueError):
        Schema(
            name="bad",
            data_type="bad",
            fields=(FieldSpec("port"),),
            header_columns=COLUMNS,
        )
