"""
Switch Output Extraction — Platforms, Command Schemas, and Registry

Platform: which CLI dialect produced the text, and which local shell runs commands.
Schemas: one declarative Schema per supported command, per platform.
Registry: get_schema(platform, name) → Schema, the dispatch the CLI front end uses.

Adding a command is a data task: declare fields, a row shape, and
optionally flags and a classification table. No new control flow.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import re

from .models import (
    Schema, FieldSpec, FieldKind, TokenRowSpec, BlockSpec, HeaderColumns,
    FlagRule, ClassificationRule, MatchMode,
)
from .errors import UnknownParserError


# ============================================================
# Platforms
# ============================================================

class Platform(Enum):
    CISCO_NXOS = "cisco_nxos"
    DELL_OS10 = "dell_os10"


# Local command shell per platform, invoked as [*shell, command]
COMMAND_SHELLS: dict[Platform, tuple[str, ...]] = {
    Platform.CISCO_NXOS: ("vsh", "-c"),
    Platform.DELL_OS10:  ("/opt/dell/os10/bin/clish", "-c"),
}


@dataclass
class FingerprintSignature:
    """Patterns that identify a platform from captured output."""
    platform: Platform
    patterns: list[str]                 # any match = positive ID


FINGERPRINTS = [
    FingerprintSignature(
        platform=Platform.CISCO_NXOS,
        patterns=[
            r"Cisco Nexus Operating System",
            r"NX-OS",
            r"cisco Nexus",
        ],
    ),
    FingerprintSignature(
        platform=Platform.DELL_OS10,
        patterns=[
            r"Dell EMC Networking OS10",
            r"Dell SmartFabric OS10",
            r"OS10 Enterprise",
            r"/opt/dell/os10",
        ],
    ),
]


def fingerprint_platform(output: str) -> Optional[Platform]:
    """
    Guess the platform from raw text. Only version banners and similar
    output carry a signature, so None is the common answer.
    """
    for sig in FINGERPRINTS:
        for pattern in sig.patterns:
            if re.search(pattern, output, re.IGNORECASE):
                return sig.platform
    return None


def parse_platform(value: str) -> Platform:
    """Accept 'cisco_nxos', 'cisco', 'nexus', 'dell_os10', 'dell', 'os10'."""
    text = (value or "").strip().lower().replace("-", "_")
    aliases = {
        "cisco": Platform.CISCO_NXOS,
        "nexus": Platform.CISCO_NXOS,
        "nxos": Platform.CISCO_NXOS,
        "dell": Platform.DELL_OS10,
        "os10": Platform.DELL_OS10,
    }
    if text in aliases:
        return aliases[text]
    return Platform(text)


# ============================================================
# Shared tables
# ============================================================

_PROMPT = r"^\S+#\s*(show\s.*)?$"            # "leaf-1# show ip arp"
_IPV4 = r"\d+\.\d+\.\d+\.\d+"
_DOTTED_MAC = r"[0-9a-fA-F]{4}\.[0-9a-fA-F]{4}\.[0-9a-fA-F]{4}"

_NXOS_INTERFACE_TYPES = (
    ClassificationRule("vlan", "vlan"),
    ClassificationRule("ethernet", "ethernet"),
    ClassificationRule("eth", "ethernet"),
    ClassificationRule("port-channel", "port-channel"),
    ClassificationRule("po", "port-channel"),
    ClassificationRule("mgmt", "management"),
    ClassificationRule("tunnel", "tunnel"),
    ClassificationRule("loopback", "loopback"),
    ClassificationRule("lo", "loopback"),
)

_OS10_INTERFACE_TYPES = (
    ClassificationRule("vlan", "vlan"),
    ClassificationRule("ethernet", "ethernet"),
    ClassificationRule("port-channel", "port-channel"),
    ClassificationRule("mgmt", "management"),
    ClassificationRule("management", "management"),
    ClassificationRule("loopback", "loopback"),
    ClassificationRule("virtual-network", "virtual-network"),
)

_INVENTORY_OPEN = (
    r'^NAME:\s*"?(?P<name>[^"]*?)"?\s*,\s*'
    r'DESCR:\s*"?(?P<description>[^"]*?)"?\s*$'
)
_INVENTORY_IDS = (
    r"^PID:\s*(?P<product_id>[^,]*?)\s*,\s*"
    r"VID:\s*(?P<version_id>[^,]*?)\s*,\s*"
    r"SN:\s*(?P<serial_number>.*?)\s*$"
)
_INVENTORY_FIELDS = (
    FieldSpec("name"),
    FieldSpec("description", required=False, default=""),
    FieldSpec("product_id", required=False, default=""),
    FieldSpec("version_id", required=False, default=""),
    FieldSpec("serial_number", required=False, default=""),
)


# ============================================================
# Cisco Nexus (NX-OS)
# ============================================================

NXOS_ENVIRONMENT_TEMPERATURE = Schema(
    name="environment-temperature",
    data_type="cisco_nexus_environment_temperature",
    command="show environment temperature",
    description="Parses 'show environment temperature' output",
    fields=(
        FieldSpec("module"),
        FieldSpec("sensor"),
        FieldSpec("major_threshold"),
        FieldSpec("minor_threshold"),
        FieldSpec("current_temp"),
        FieldSpec("status"),
    ),
    header_markers=("Module", "Sensor"),
    ignore_patterns=(_PROMPT,),
    # 1        FRONT           80              70          28         Ok
    row_pattern=(
        r"^(?P<module>\d+)\s+(?P<sensor>\S+)\s+(?P<major_threshold>\d+)\s+"
        r"(?P<minor_threshold>\d+)\s+(?P<current_temp>\d+)\s+(?P<status>.+?)$"
    ),
)

NXOS_IP_ARP = Schema(
    name="ip-arp",
    data_type="cisco_nexus_arp_entry",
    command="show ip arp",
    description="Parses 'show ip arp' output",
    fields=(
        FieldSpec("ip_address"),
        FieldSpec("age"),
        FieldSpec("mac_address"),
        FieldSpec("interface"),
        FieldSpec("flags_raw", required=False, default=""),
    ),
    header_markers=("Address", "Age", "MAC Address", "Interface"),
    ignore_patterns=(_PROMPT, r"Total number of entries"),
    # 100.69.161.75   00:03:39  02ec.a040.0001  Vlan201         +
    row_pattern=(
        rf"^(?P<ip_address>{_IPV4})\s+(?P<age>[0-9.:]+|-)\s+"
        rf"(?P<mac_address>{_DOTTED_MAC}|INCOMPLETE)\s+"
        r"(?P<interface>\S+)\s*(?P<flags_raw>.*)$"
    ),
    flags_field="flags_raw",
    flags=(
        FlagRule("*", "non_active_fhrp"),
        FlagRule("+", "cfsoe_sync"),
        FlagRule("#", "throttled_glean"),
        FlagRule("CP", "control_plane_l2rib"),
        FlagRule("PS", "peer_sync_l2rib"),
        FlagRule("RO", "re_originated_peer_sync"),
        FlagRule("D", "static_down_interface"),
    ),
    classify_field="interface",
    category_attribute="interface_type",
    classification=_NXOS_INTERFACE_TYPES,
    default_category="other",
)

NXOS_INVENTORY = Schema(
    name="inventory",
    data_type="cisco_nexus_inventory",
    command="show inventory all",
    description="Parses 'show inventory all' output",
    fields=_INVENTORY_FIELDS,
    block=BlockSpec(
        open_pattern=_INVENTORY_OPEN,
        field_patterns=(_INVENTORY_IDS,),
    ),
    classify_field="name",
    category_attribute="component_type",
    classification=(
        ClassificationRule("chassis", "chassis", MatchMode.CONTAINS),
        ClassificationRule("slot", "slot", MatchMode.CONTAINS),
        ClassificationRule("power supply", "power_supply", MatchMode.CONTAINS),
        ClassificationRule("fan", "fan", MatchMode.CONTAINS),
        ClassificationRule("ethernet", "transceiver", MatchMode.CONTAINS),
    ),
)

NXOS_INTERFACE_STATUS = Schema(
    name="interface-status",
    data_type="cisco_nexus_interface_status",
    command="show interface status",
    description="Parses 'show interface status' output",
    fields=(
        FieldSpec("port"),
        FieldSpec("name"),
        FieldSpec("status"),
        FieldSpec("vlan", required=False, default=""),
        FieldSpec("duplex", required=False, default=""),
        FieldSpec("speed", required=False, default=""),
        FieldSpec("type", required=False, default=""),
    ),
    header_markers=("Port", "Name", "Status", "Vlan", "Duplex"),
    # Eth1/49       uplink spine-1     connected 1         full    100G    QSFP-100G-P
    #                                                                      CC
    token_row=TokenRowSpec(
        entity_field="port",
        name_field="name",
        status_field="status",
        trailing_fields=("vlan", "duplex", "speed", "type"),
        entity_prefixes=("Eth", "mgmt", "Po", "Lo", "Vlan"),
        status_values=(
            "connected", "notconnec", "disabled", "down", "routed",
            "sfpAbsent", "xcvrAbsen", "noOperMem", "channelDo",
        ),
    ),
    continuation_field="type",
    continuation_suffixes=("-P", "-SR", "-LR", "-CR", "-AOC", "-PSM", "-CSR"),
    continuation_max_width=4,
    classify_field="port",
    category_attribute="interface_type",
    classification=_NXOS_INTERFACE_TYPES,
    default_category="other",
)

NXOS_MAC_ADDRESS = Schema(
    name="mac-address",
    data_type="cisco_nexus_mac_table",
    command="show mac address-table",
    description="Parses 'show mac address-table' output",
    fields=(
        FieldSpec("entry_flags", required=False, default=""),
        FieldSpec("vlan"),
        FieldSpec("mac_address"),
        FieldSpec("type"),
        FieldSpec("age"),
        FieldSpec("secure"),
        FieldSpec("ntfy"),
        FieldSpec("port"),
    ),
    header_markers=("VLAN", "MAC Address"),
    header_underline=True,
    # *  201     5ca6.2dbb.64a7   dynamic  0         F      F    Po50
    row_pattern=(
        r"^(?P<entry_flags>[*+GCO~]?)\s*(?P<vlan>\S+)\s+"
        rf"(?P<mac_address>{_DOTTED_MAC})\s+(?P<type>\S+)\s+(?P<age>\S+)\s+"
        r"(?P<secure>\S+)\s+(?P<ntfy>\S+)\s+(?P<port>.+?)$"
    ),
    flags_field="entry_flags",
    flags=(
        FlagRule("*", "primary_entry"),
        FlagRule("G", "gateway_mac"),
        FlagRule("(R)", "routed_mac", field="port"),
        FlagRule("O", "overlay_mac"),
        FlagRule("+", "vpc_peer_link"),
        FlagRule("C", "control_plane_mac"),
        FlagRule("~", "vsan"),
    ),
)

NXOS_LLDP_NEIGHBOR = Schema(
    name="lldp-neighbor",
    data_type="cisco_nexus_lldp_neighbor",
    command="show lldp neighbors detail",
    description="Parses 'show lldp neighbors detail' output",
    fields=(
        FieldSpec("chassis_id"),
        FieldSpec("port_id"),
        FieldSpec("local_port_id"),
        FieldSpec("port_description", required=False, default=""),
        FieldSpec("system_name", required=False, default=""),
        FieldSpec("system_description", required=False, default=""),
        FieldSpec("time_remaining", FieldKind.INT, required=False),
        FieldSpec("system_capabilities", required=False, default=""),
        FieldSpec("enabled_capabilities", required=False, default=""),
        FieldSpec("management_address", required=False, default=""),
        FieldSpec("management_address_ipv6", required=False, default=""),
        FieldSpec("vlan_id", required=False, default=""),
        FieldSpec("max_frame_size", FieldKind.INT, required=False),
        FieldSpec("link_agg_capability", required=False, default=""),
        FieldSpec("link_agg_status", required=False, default=""),
        FieldSpec("link_agg_id", FieldKind.INT, required=False),
    ),
    block=BlockSpec(
        open_pattern=r"^Chassis id:\s+(?P<chassis_id>.+)$",
        field_patterns=(
            r"^Port id:\s+(?P<port_id>.+)$",
            r"^Local Port id:\s+(?P<local_port_id>.+)$",
            r"^Port Description:\s+(?P<port_description>.+)$",
            r"^System Name:\s+(?P<system_name>.+)$",
            r"^System Description:\s+(?P<system_description>.+)$",
            r"^Time remaining:\s+(?P<time_remaining>\S+)",
            r"^System Capabilities:\s+(?P<system_capabilities>.+)$",
            r"^Enabled Capabilities:\s+(?P<enabled_capabilities>.+)$",
            r"^Management Address IPV6:\s+(?P<management_address_ipv6>.+)$",
            r"^Management Address:\s+(?P<management_address>.+)$",
            r"^Vlan ID:\s+(?P<vlan_id>.+)$",
            r"^Max Frame Size:\s+(?P<max_frame_size>.+)$",
            r"^Capability:\s+(?P<link_agg_capability>.+)$",
            r"^Status\s*:\s+(?P<link_agg_status>.+)$",
            r"^Link agg ID\s*:\s+(?P<link_agg_id>.+)$",
        ),
        multiline_fields=("system_description",),
    ),
)

_NXOS_TRAFFIC_COUNTERS = (
    ("InOctets", "in_octets"),
    ("InUcastPkts", "in_ucast_pkts"),
    ("InMcastPkts", "in_mcast_pkts"),
    ("InBcastPkts", "in_bcast_pkts"),
    ("OutOctets", "out_octets"),
    ("OutUcastPkts", "out_ucast_pkts"),
    ("OutMcastPkts", "out_mcast_pkts"),
    ("OutBcastPkts", "out_bcast_pkts"),
)

# One record per interface per table; a counter the table doesn't carry is null
NXOS_INTERFACE_COUNTERS = Schema(
    name="interface-counters",
    data_type="cisco_nexus_interface_counters",
    command="show interface counters",
    description="Parses 'show interface counters' output",
    fields=(FieldSpec("interface_name"),) + tuple(
        FieldSpec(name, FieldKind.INT, required=False) for _, name in _NXOS_TRAFFIC_COUNTERS
    ),
    header_markers=("Port",),
    ignore_patterns=(_PROMPT,),
    # Port                                     InOctets                      InUcastPkts
    # Eth1/1                               205027653248                        650373664
    header_columns=HeaderColumns(
        entity_field="interface_name",
        labels=_NXOS_TRAFFIC_COUNTERS,
    ),
    classify_field="interface_name",
    category_attribute="interface_type",
    classification=_NXOS_INTERFACE_TYPES,
    default_category="other",
)

_NXOS_ERROR_COUNTERS = (
    ("Align-Err", "align_err"),
    ("FCS-Err", "fcs_err"),
    ("Xmit-Err", "xmit_err"),
    ("Rcv-Err", "rcv_err"),
    ("UnderSize", "under_size"),
    ("OutDiscards", "out_discards"),
    ("Single-Col", "single_col"),
    ("Multi-Col", "multi_col"),
    ("Late-Col", "late_col"),
    ("Exces-Col", "exces_col"),
    ("Carri-Sen", "carri_sen"),
    ("Runts", "runts"),
    ("Giants", "giants"),
    ("SQETest-Err", "sqetest_err"),
    ("Deferred-Tx", "deferred_tx"),
    ("IntMacTx-Er", "intmac_tx_er"),
    ("IntMacRx-Er", "intmac_rx_er"),
    ("Symbol-Err", "symbol_err"),
    ("InDiscards", "in_discards"),
    ("Stomped-CRC", "stomped_crc"),
)

NXOS_INTERFACE_ERROR_COUNTERS = Schema(
    name="interface-error-counters",
    data_type="cisco_nexus_interface_error_counters",
    command="show interface counters errors",
    description="Parses 'show interface counters errors' output",
    fields=(FieldSpec("interface_name"),) + tuple(
        FieldSpec(name, FieldKind.INT, required=False) for _, name in _NXOS_ERROR_COUNTERS
    ),
    header_markers=("Port",),
    ignore_patterns=(_PROMPT,),
    # Port          Align-Err    FCS-Err   Xmit-Err    Rcv-Err  UnderSize OutDiscards
    # mgmt0                   0          0         --         --         --          --
    header_columns=HeaderColumns(
        entity_field="interface_name",
        labels=_NXOS_ERROR_COUNTERS,
    ),
    classify_field="interface_name",
    category_attribute="interface_type",
    classification=_NXOS_INTERFACE_TYPES,
    default_category="other",
)


def _uptime_span(prefix: str) -> str:
    """2 days, 22 hours, 1 minutes, 51 seconds"""
    return (
        rf"(?P<{prefix}_days>\d+)\s+days?,\s+(?P<{prefix}_hours>\d+)\s+hours?,\s+"
        rf"(?P<{prefix}_minutes>\d+)\s+minutes?,\s+(?P<{prefix}_seconds>\d+)\s+seconds?"
    )


def _uptime_fields(prefix: str) -> tuple[FieldSpec, ...]:
    return tuple(
        FieldSpec(f"{prefix}_{unit}", FieldKind.INT, required=False)
        for unit in ("days", "hours", "minutes", "seconds")
    ) + (FieldSpec(f"{prefix}_total", required=False, default=""),)


NXOS_SYSTEM_UPTIME = Schema(
    name="system-uptime",
    data_type="cisco_nexus_system_uptime",
    command="show system uptime",
    description="Parses 'show system uptime' output",
    fields=(
        (FieldSpec("system_start_time"),)
        + _uptime_fields("system_uptime")
        + _uptime_fields("kernel_uptime")
    ),
    block=BlockSpec(
        open_pattern=r"^System start time:\s+(?P<system_start_time>.+?)\s*$",
        field_patterns=(
            rf"^System uptime:\s+(?P<system_uptime_total>{_uptime_span('system_uptime')})",
            rf"^Kernel uptime:\s+(?P<kernel_uptime_total>{_uptime_span('kernel_uptime')})",
        ),
    ),
)

NXOS_TRANSCEIVER = Schema(
    name="transceiver",
    data_type="cisco_nexus_transceiver",
    command="show interface transceiver details",
    description="Parses 'show interface transceiver details' output",
    fields=(
        FieldSpec("interface_name"),
        FieldSpec("transceiver_status", required=False, default=""),
        FieldSpec("type", required=False, default=""),
        FieldSpec("manufacturer", required=False, default=""),
        FieldSpec("part_number", required=False, default=""),
        FieldSpec("revision", required=False, default=""),
        FieldSpec("serial_number", required=False, default=""),
        FieldSpec("nominal_bitrate", FieldKind.INT, required=False),   # MBit/sec
        FieldSpec("link_length", required=False, default=""),
        FieldSpec("cable_type", required=False, default=""),
        FieldSpec("cisco_id", required=False, default=""),
        FieldSpec("cisco_extended_id", required=False, default=""),
        FieldSpec("cisco_part_number", required=False, default=""),
        FieldSpec("cisco_product_id", required=False, default=""),
        FieldSpec("cisco_version_id", required=False, default=""),
        FieldSpec("dom_calibration", required=False, default=""),
        FieldSpec("temperature_c", FieldKind.FLOAT, required=False),
        FieldSpec("voltage_v", FieldKind.FLOAT, required=False),
        FieldSpec("current_ma", FieldKind.FLOAT, required=False),
        FieldSpec("tx_power_dbm", FieldKind.FLOAT, required=False),
        FieldSpec("rx_power_dbm", FieldKind.FLOAT, required=False),
        FieldSpec("transmit_fault_count", FieldKind.INT, required=False),
    ),
    # Blank lines and dashed rules occur inside one interface's section
    block=BlockSpec(
        open_pattern=r"^(?P<interface_name>Ethernet\d+(?:/\d+)+)$",
        field_patterns=(
            r"^transceiver is (?P<transceiver_status>.+?)\s*$",
            r"^type is (?P<type>.+?)\s*$",
            r"^name is (?P<manufacturer>.+?)\s*$",
            r"^part number is (?P<part_number>.+?)\s*$",
            r"^revision is (?P<revision>.+?)\s*$",
            r"^serial number is (?P<serial_number>.+?)\s*$",
            r"^nominal bitrate is (?P<nominal_bitrate>\d+)",
            r"^Link length supported for (?P<link_length>.+?)\s*$",
            r"^cable type is (?P<cable_type>.+?)\s*$",
            r"^cisco id is (?P<cisco_id>.+?)\s*$",
            r"^cisco extended id number is (?P<cisco_extended_id>.+?)\s*$",
            r"^cisco part number is (?P<cisco_part_number>.+?)\s*$",
            r"^cisco product id is (?P<cisco_product_id>.+?)\s*$",
            r"^cisco version id is (?P<cisco_version_id>.+?)\s*$",
            r"^SFP Detail Diagnostics Information\s*\((?P<dom_calibration>[^)]*)\)",
            # Temperature   34.22 C        80.00 C    -10.00 C     75.00 C       -5.00 C
            r"^Temperature\s+(?P<temperature_c>-?[\d.]+)\s+C\b",
            r"^Voltage\s+(?P<voltage_v>-?[\d.]+)\s+V\b",
            r"^Current\s+(?P<current_ma>-?[\d.]+)\s+mA\b",
            r"^Tx Power\s+(?P<tx_power_dbm>-?[\d.]+)\s+dBm\b",
            r"^Rx Power\s+(?P<rx_power_dbm>-?[\d.]+)\s+dBm\b",
            r"^Transmit Fault Count\s*=\s*(?P<transmit_fault_count>\d+)",
        ),
        closed_by_breaks=False,
    ),
    flags=(
        FlagRule("present", "transceiver_present", field="transceiver_status", whole_value=True),
        FlagRule("calibration", "dom_supported", field="dom_calibration"),
    ),
)


# ============================================================
# Dell OS10
# ============================================================

OS10_ENVIRONMENT_TEMPERATURE = Schema(
    name="environment-temperature",
    data_type="dell_os10_environment_temperature",
    command="show environment temperature",
    description="Parses 'show environment temperature' output",
    fields=(
        FieldSpec("unit"),
        FieldSpec("sensor"),
        FieldSpec("current_temp", FieldKind.FLOAT),
        FieldSpec("minor_threshold", FieldKind.FLOAT),
        FieldSpec("major_threshold", FieldKind.FLOAT),
        FieldSpec("status"),
    ),
    header_markers=("Unit", "Sensor", "Current"),
    # 1     CPU           45        70        80        Ok
    row_pattern=(
        r"^(?P<unit>\S+)\s+(?P<sensor>\S+)\s+(?P<current_temp>\S+)\s+"
        r"(?P<minor_threshold>\S+)\s+(?P<major_threshold>\S+)\s+(?P<status>\S+)$"
    ),
)

OS10_IP_ARP = Schema(
    name="ip-arp",
    data_type="dell_os10_arp_entry",
    command="show ip arp",
    description="Parses 'show ip arp' output",
    fields=(
        FieldSpec("ip_address"),
        FieldSpec("hardware_address"),
        FieldSpec("interface"),
        FieldSpec("egress_interface", required=False, default=""),
        FieldSpec("private_vlan", required=False, default=""),
    ),
    header_markers=("Address", "Hardware address"),
    ignore_patterns=(r"Total Entries", r"Static Entries", r"Dynamic Entries"),
    # 192.168.2.2      90:b1:1c:f4:a6:e6    ethernet1/1/49:1   ethernet1/1/49:1
    row_pattern=(
        rf"^(?P<ip_address>{_IPV4})\s+(?P<hardware_address>[0-9a-fA-F:]+)\s+"
        r"(?P<interface>\S+)(?:\s+(?P<egress_interface>\S+))?"
        r"(?:\s+pv\s+(?P<private_vlan>\d+))?\s*$"
    ),
    classify_field="interface",
    category_attribute="interface_type",
    classification=_OS10_INTERFACE_TYPES,
    default_category="other",
)

OS10_INVENTORY = Schema(
    name="inventory",
    data_type="dell_os10_inventory",
    command="show inventory",
    description="Parses 'show inventory' output",
    fields=_INVENTORY_FIELDS,
    block=BlockSpec(
        open_pattern=_INVENTORY_OPEN,
        field_patterns=(_INVENTORY_IDS,),
    ),
    classify_field="name",
    category_attribute="component_type",
    classification=(
        ClassificationRule("chassis", "chassis", MatchMode.CONTAINS),
        ClassificationRule("unit", "unit", MatchMode.CONTAINS),
        ClassificationRule("power supply", "power_supply", MatchMode.CONTAINS),
        ClassificationRule("psu", "power_supply", MatchMode.CONTAINS),
        ClassificationRule("fan", "fan", MatchMode.CONTAINS),
        ClassificationRule("ethernet", "transceiver", MatchMode.CONTAINS),
        ClassificationRule("sfp", "transceiver", MatchMode.CONTAINS),
        ClassificationRule("module", "module", MatchMode.CONTAINS),
    ),
)

OS10_VERSION = Schema(
    name="version",
    data_type="dell_os10_version",
    command="show version",
    description="Parses 'show version' output",
    fields=(
        FieldSpec("os_name"),
        FieldSpec("os_version", required=False, default=""),
        FieldSpec("build_version", required=False, default=""),
        FieldSpec("build_time", required=False, default=""),
        FieldSpec("system_type", required=False, default=""),
        FieldSpec("architecture", required=False, default=""),
        FieldSpec("up_time", required=False, default=""),
    ),
    block=BlockSpec(
        open_pattern=r"^(?P<os_name>Dell\s.+?)\s*$",
        field_patterns=(
            r"^OS Version:\s+(?P<os_version>.+?)\s*$",
            r"^Build Version:\s+(?P<build_version>.+?)\s*$",
            r"^Build Time:\s+(?P<build_time>.+?)\s*$",
            r"^System Type:\s+(?P<system_type>.+?)\s*$",
            r"^Architecture:\s+(?P<architecture>.+?)\s*$",
            r"^Up Time:\s+(?P<up_time>.+?)\s*$",
        ),
    ),
)

_OS10_SHORT_INTERFACE_TYPES = (
    ClassificationRule("eth", "ethernet"),
    ClassificationRule("po", "port-channel"),
    ClassificationRule("vl", "vlan"),
    ClassificationRule("lo", "loopback"),
    ClassificationRule("ma", "management"),
)

OS10_INTERFACE_STATUS = Schema(
    name="interface-status",
    data_type="dell_os10_interface_status",
    command="show interface status",
    description="Parses 'show interface status' output",
    fields=(
        FieldSpec("port"),
        FieldSpec("description", required=False, default=""),
        FieldSpec("status"),
        FieldSpec("speed", required=False, default=""),
        FieldSpec("duplex", required=False, default=""),
        FieldSpec("mode", required=False, default=""),
        FieldSpec("vlan", required=False, default=""),
        FieldSpec("tagged_vlans", required=False, default=""),
    ),
    header_markers=("Port", "Status", "Speed"),
    # Eth 1/1/1:1     To-Spine1       up       10G      full     T    1    100-200
    row_pattern=(
        r"^(?P<port>(?:Eth|Po|Vl|Lo|Ma)\s*\S+)\s+(?:(?P<description>.*?)\s+)?"
        r"(?P<status>up|down|admin-down)\s+(?P<speed>\S+)\s+(?P<duplex>\S+)\s+"
        r"(?P<mode>\S+)(?:\s+(?P<vlan>\S+))?(?:\s+(?P<tagged_vlans>.+?))?\s*$"
    ),
    flags=(
        FlagRule("up", "is_up", field="status", whole_value=True),
    ),
    classify_field="port",
    category_attribute="interface_type",
    classification=_OS10_SHORT_INTERFACE_TYPES,
    default_category="other",
)

OS10_LLDP_NEIGHBOR = Schema(
    name="lldp-neighbor",
    data_type="dell_os10_lldp_neighbor",
    command="show lldp neighbors detail",
    description="Parses 'show lldp neighbors detail' output",
    fields=(
        FieldSpec("local_port_id"),
        FieldSpec("remote_chassis_id"),
        FieldSpec("remote_chassis_id_subtype", required=False, default=""),
        FieldSpec("remote_port_id", required=False, default=""),
        FieldSpec("remote_port_subtype", required=False, default=""),
        FieldSpec("remote_port_description", required=False, default=""),
        FieldSpec("remote_system_name", required=False, default=""),
        FieldSpec("remote_system_description", required=False, default=""),
        FieldSpec("remote_ttl", FieldKind.INT, required=False),
        FieldSpec("remote_max_frame_size", FieldKind.INT, required=False),
        FieldSpec("remote_aggregation_status", required=False, default=""),
        FieldSpec("management_address_ipv4", required=False, default=""),
        FieldSpec("management_address_ipv6", required=False, default=""),
        FieldSpec("system_capabilities", required=False, default=""),
        FieldSpec("enabled_capabilities", required=False, default=""),
        FieldSpec("time_since_last_change", required=False, default=""),
        FieldSpec("auto_neg_supported_raw", required=False, default=""),
        FieldSpec("auto_neg_enabled_raw", required=False, default=""),
    ),
    # Neighbors are delimited by dashed rules; the subtype line is optional
    block=BlockSpec(
        open_pattern=r"^Remote Chassis ID Subtype:\s+(?P<remote_chassis_id_subtype>.+)$",
        field_patterns=(
            r"^Remote Chassis ID:\s+(?P<remote_chassis_id>.+)$",
            r"^Remote Port Subtype:\s+(?P<remote_port_subtype>.+)$",
            r"^Remote Port ID:\s+(?P<remote_port_id>.+)$",
            r"^Remote Port Description:\s+(?P<remote_port_description>.+)$",
            r"^Local Port ID:\s+(?P<local_port_id>.+)$",
            r"^Remote System Name:\s+(?P<remote_system_name>.+)$",
            r"^Remote System Desc:\s+(?P<remote_system_description>.+)$",
            r"^Remote TTL:\s+(?P<remote_ttl>\d+)",
            r"^Remote Max Frame Size:\s+(?P<remote_max_frame_size>\d+)",
            r"^Remote Aggregation Status:\s+(?P<remote_aggregation_status>.+)$",
            r"^Remote Management Address \(IPv4\):\s+(?P<management_address_ipv4>.+)$",
            r"^Remote Management Address \(IPv6\):\s+(?P<management_address_ipv6>.+)$",
            r"^Existing System Capabilities:\s+(?P<system_capabilities>.+)$",
            r"^Enabled System Capabilities:\s+(?P<enabled_capabilities>.+)$",
            r"^Time since last information change of this neighbor:\s+"
            r"(?P<time_since_last_change>.+)$",
            r"^Auto-neg supported:\s+(?P<auto_neg_supported_raw>\d+)",
            r"^Auto-neg enabled:\s+(?P<auto_neg_enabled_raw>\d+)",
        ),
        multiline_fields=("remote_system_description",),
        opens_on_field=True,
    ),
    flags=(
        FlagRule("1", "auto_neg_supported", field="auto_neg_supported_raw", whole_value=True),
        FlagRule("1", "auto_neg_enabled", field="auto_neg_enabled_raw", whole_value=True),
    ),
)

OS10_MAC_ADDRESS = Schema(
    name="mac-address",
    data_type="dell_os10_mac_table",
    command="show mac address-table",
    description="Parses 'show mac address-table' output",
    fields=(
        FieldSpec("vlan"),
        FieldSpec("mac_address"),
        FieldSpec("type"),
        FieldSpec("interface"),
        FieldSpec("private_vlan", required=False, default=""),
    ),
    header_markers=("VlanId", "Mac Address"),
    # 1       90:b1:1c:f4:a6:8f  dynamic  ethernet1/1/3    pv 200
    row_pattern=(
        r"^(?P<vlan>\d+)\s+(?P<mac_address>[0-9a-fA-F:]+)\s+(?P<type>\S+)\s+"
        r"(?P<interface>\S+)(?:\s+pv\s+(?P<private_vlan>\d+))?\s*$"
    ),
    classify_field="interface",
    category_attribute="interface_type",
    classification=_OS10_INTERFACE_TYPES,
    default_category="other",
)

OS10_INTERFACE_ERROR_COUNTERS = Schema(
    name="interface-error-counters",
    data_type="dell_os10_interface_error_counters",
    command="show interface counters errors",
    description="Parses 'show interface counters errors' output",
    fields=(
        FieldSpec("interface_name"),
        FieldSpec("rx_err", FieldKind.INT, required=False),
        FieldSpec("rx_drop", FieldKind.INT, required=False),
        FieldSpec("rx_overrun", FieldKind.INT, required=False),
        FieldSpec("tx_err", FieldKind.INT, required=False),
        FieldSpec("tx_drop", FieldKind.INT, required=False),
        FieldSpec("tx_overrun", FieldKind.INT, required=False),
    ),
    header_markers=("Interface", "RX-Err"),
    ignore_patterns=(_PROMPT,),
    # Interface         RX-Err   RX-Drop  RX-OVR   TX-Err   TX-Drop  TX-OVR
    # ethernet1/1/1     0        10       0        0        5        0
    header_columns=HeaderColumns(
        entity_field="interface_name",
        labels=(
            ("RX-Err", "rx_err"),
            ("RX-Drop", "rx_drop"),
            ("RX-OVR", "rx_overrun"),
            ("TX-Err", "tx_err"),
            ("TX-Drop", "tx_drop"),
            ("TX-OVR", "tx_overrun"),
        ),
    ),
    classify_field="interface_name",
    category_attribute="interface_type",
    classification=_OS10_INTERFACE_TYPES,
    default_category="other",
)

OS10_SYSTEM_UPTIME = Schema(
    name="system-uptime",
    data_type="dell_os10_system_uptime",
    command="show uptime",
    description="Parses 'show uptime' output",
    fields=(
        FieldSpec("raw_uptime"),
        FieldSpec("weeks", FieldKind.INT, required=False),
        FieldSpec("days", FieldKind.INT, required=False),
        FieldSpec("hours", FieldKind.INT),
        FieldSpec("minutes", FieldKind.INT),
        FieldSpec("seconds", FieldKind.INT),
    ),
    ignore_patterns=(_PROMPT,),
    # 9 weeks 3 days 01:24:11
    row_pattern=(
        r"^(?P<raw_uptime>(?:(?P<weeks>\d+)\s+weeks?\s+)?(?:(?P<days>\d+)\s+days?\s+)?"
        r"(?P<hours>\d+):(?P<minutes>\d+):(?P<seconds>\d+))$"
    ),
)


# ============================================================
# Schema Registry — dispatch by platform and parser name
# ============================================================

_SCHEMA_REGISTRY: dict[tuple[Platform, str], Schema] = {
    # Cisco Nexus
    (Platform.CISCO_NXOS, NXOS_ENVIRONMENT_TEMPERATURE.name): NXOS_ENVIRONMENT_TEMPERATURE,
    (Platform.CISCO_NXOS, NXOS_IP_ARP.name):                  NXOS_IP_ARP,
    (Platform.CISCO_NXOS, NXOS_INVENTORY.name):               NXOS_INVENTORY,
    (Platform.CISCO_NXOS, NXOS_INTERFACE_STATUS.name):        NXOS_INTERFACE_STATUS,
    (Platform.CISCO_NXOS, NXOS_MAC_ADDRESS.name):             NXOS_MAC_ADDRESS,
    (Platform.CISCO_NXOS, NXOS_LLDP_NEIGHBOR.name):           NXOS_LLDP_NEIGHBOR,
    (Platform.CISCO_NXOS, NXOS_INTERFACE_COUNTERS.name):      NXOS_INTERFACE_COUNTERS,
    (Platform.CISCO_NXOS, NXOS_INTERFACE_ERROR_COUNTERS.name): NXOS_INTERFACE_ERROR_COUNTERS,
    (Platform.CISCO_NXOS, NXOS_SYSTEM_UPTIME.name):           NXOS_SYSTEM_UPTIME,
    (Platform.CISCO_NXOS, NXOS_TRANSCEIVER.name):             NXOS_TRANSCEIVER,

    # Dell OS10
    (Platform.DELL_OS10, OS10_ENVIRONMENT_TEMPERATURE.name):  OS10_ENVIRONMENT_TEMPERATURE,
    (Platform.DELL_OS10, OS10_IP_ARP.name):                   OS10_IP_ARP,
    (Platform.DELL_OS10, OS10_INVENTORY.name):                OS10_INVENTORY,
    (Platform.DELL_OS10, OS10_VERSION.name):                  OS10_VERSION,
    (Platform.DELL_OS10, OS10_INTERFACE_STATUS.name):         OS10_INTERFACE_STATUS,
    (Platform.DELL_OS10, OS10_LLDP_NEIGHBOR.name):            OS10_LLDP_NEIGHBOR,
    (Platform.DELL_OS10, OS10_MAC_ADDRESS.name):              OS10_MAC_ADDRESS,
    (Platform.DELL_OS10, OS10_INTERFACE_ERROR_COUNTERS.name): OS10_INTERFACE_ERROR_COUNTERS,
    (Platform.DELL_OS10, OS10_SYSTEM_UPTIME.name):            OS10_SYSTEM_UPTIME,
}


def find_schema(platform: Platform, name: str) -> Optional[Schema]:
    """Registry lookup. Names are case-insensitive. None if not registered."""
    return _SCHEMA_REGISTRY.get((platform, (name or "").strip().lower()))


def get_schema(platform: Platform, name: str) -> Schema:
    schema = find_schema(platform, name)
    if schema is None:
        raise UnknownParserError(name, platform.value)
    return schema


def list_schemas(platform: Optional[Platform] = None) -> list[tuple[Platform, Schema]]:
    """Registered schemas, sorted by platform then name."""
    items = [
        (p, s) for (p, _), s in _SCHEMA_REGISTRY.items()
        if platform is None or p == platform
    ]
    return sorted(items, key=lambda item: (item[0].value, item[1].name))


def platforms_for(name: str) -> list[Platform]:
    """Every platform that registers a parser under this name."""
    key = (name or "").strip().lower()
    return [p for p in Platform if (p, key) in _SCHEMA_REGISTRY]
