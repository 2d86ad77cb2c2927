"""
switchparse — command line front end.

    switchparse -parser ip-arp -input arp.txt
    switchparse -parser inventory -platform dell_os10 -commands commands.json -o inv.jsonl
    switchparse -list

Picks a schema, gets raw text from the transport, runs the engine and
writes one JSON envelope per record. stdout carries only JSON Lines;
everything else goes to stderr.
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from rich.console import Console
from rich.table import Table

from . import __version__
from .diagnostics import setup_logging, parse_with_diagnostics
from .envelope import build_envelopes, write_jsonl
from .errors import SwitchParseError
from .schemas import (
    Platform, parse_platform, fingerprint_platform, platforms_for,
    get_schema, list_schemas,
)
from .transport import DEFAULT_TIMEOUT, load_manifest, read_input, fetch_from_manifest

PLATFORM_ENV = "SWITCHPARSE_PLATFORM"


# ============================================================
# Run configuration
# ============================================================

@dataclass
class RunConfig:
    parser: str
    platform: Optional[Platform] = None     # None → resolve at run time

    # Input: exactly one
    input_file: Optional[str] = None
    commands_file: Optional[str] = None

    # Output
    output_file: Optional[str] = None       # None → stdout

    # Diagnostics
    log_file: Optional[str] = None
    debug: bool = False

    # Transport
    timeout: float = DEFAULT_TIMEOUT


def resolve_platform(
    config: RunConfig,
    text: Optional[str] = None,
    environ: Optional[dict] = None,
) -> Platform:
    """
    First answer wins:
      1. -platform
      2. $SWITCHPARSE_PLATFORM
      3. the only platform that has this parser
      4. a version banner in the captured text
      5. cisco_nxos
    """
    if config.platform is not None:
        return config.platform

    env = os.environ if environ is None else environ
    if env.get(PLATFORM_ENV):
        try:
            return parse_platform(env[PLATFORM_ENV])
        except ValueError:
            raise SwitchParseError(
                f"{PLATFORM_ENV}={env[PLATFORM_ENV]!r} is not a known platform"
            ) from None

    candidates = platforms_for(config.parser)
    if len(candidates) == 1:
        return candidates[0]

    if text:
        guessed = fingerprint_platform(text)
        if guessed is not None:
            return guessed

    return Platform.CISCO_NXOS


# ============================================================
# Commands
# ============================================================

def print_parser_list(platform: Optional[Platform] = None, console: Optional[Console] = None):
    console = console or Console()
    table = Table(title="Available parsers")
    table.add_column("Platform", style="cyan")
    table.add_column("Parser", style="bold")
    table.add_column("Command")
    table.add_column("data_type", style="dim")
    for p, schema in list_schemas(platform):
        table.add_row(p.value, schema.name, schema.command, schema.data_type)
    console.print(table)


def run(config: RunConfig, stdout: Optional[TextIO] = None) -> int:
    """Parse one document per config. Returns the number of records written."""
    logger = setup_logging(log_file=config.log_file, debug=config.debug)

    if config.input_file:
        text = read_input(config.input_file)
        platform = resolve_platform(config, text)
    else:
        platform = resolve_platform(config)
        manifest = load_manifest(config.commands_file)
        get_schema(platform, config.parser)     # fail before touching the switch
        text = fetch_from_manifest(manifest, config.parser, platform, config.timeout)

    schema = get_schema(platform, config.parser)
    logger.debug(f"Parser {schema.name} on {platform.value} → {schema.data_type}")

    records, _report = parse_with_diagnostics(schema, text, logger=logger)
    envelopes = build_envelopes(records, schema)

    if config.output_file:
        try:
            with open(config.output_file, "w") as f:
                count = write_jsonl(envelopes, f)
        except OSError as e:
            raise SwitchParseError(f"cannot write {config.output_file}: {e}") from e
        Console(stderr=True, soft_wrap=True).print(
            f"Parsed {count} {schema.name} records → {config.output_file}",
            highlight=False,
            markup=False,
        )
        return count

    return write_jsonl(envelopes, stdout or sys.stdout)


# ============================================================
# Argument parsing
# ============================================================

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="switchparse",
        description="Parse switch CLI output into JSON Lines",
        add_help=False,
    )
    parser.add_argument("-h", "-help", "--help", dest="help", action="store_true",
                        help="Show this help and exit")
    parser.add_argument("-version", "--version", dest="version", action="store_true",
                        help="Print the version and exit")
    parser.add_argument("-list", "--list", dest="list", action="store_true",
                        help="List available parsers")
    parser.add_argument("-p", "-parser", "--parser", dest="parser", default=None,
                        help="Parser name, e.g. ip-arp, inventory")
    parser.add_argument("-platform", "--platform", dest="platform", default=None,
                        help="cisco_nxos or dell_os10 (default: $SWITCHPARSE_PLATFORM)")
    parser.add_argument("-i", "-input", "--input", dest="input", default=None,
                        help="Read CLI output from this file")
    parser.add_argument("-commands", "--commands", dest="commands", default=None,
                        help="Commands manifest; run the parser's command on this switch")
    parser.add_argument("-o", "-output", "--output", dest="output", default=None,
                        help="Write JSON Lines here instead of stdout")
    parser.add_argument("-log", "--log", dest="log", default=None,
                        help="Write debug log to this file")
    parser.add_argument("-debug", "--debug", dest="debug", action="store_true",
                        help="Debug logging to stderr")
    parser.add_argument("-timeout", "--timeout", dest="timeout", type=float,
                        default=DEFAULT_TIMEOUT, help="Command timeout in seconds")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_arg_parser()
    err = Console(stderr=True, highlight=False, soft_wrap=True)

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse already printed its message
        return 0 if e.code in (0, None) else 1

    if args.help:
        parser.print_help()
        return 0

    if args.version:
        print(f"switchparse {__version__}")
        return 0

    platform = None
    if args.platform:
        try:
            platform = parse_platform(args.platform)
        except ValueError:
            err.print(f"Error: unknown platform {args.platform!r}", markup=False)
            return 1

    if args.list:
        print_parser_list(platform)
        return 0

    if not args.parser:
        err.print("Error: -parser is required (see -list)", markup=False)
        parser.print_usage(sys.stderr)
        return 1

    if bool(args.input) == bool(args.commands):
        err.print("Error: give exactly one of -input or -commands", markup=False)
        parser.print_usage(sys.stderr)
        return 1

    config = RunConfig(
        parser=args.parser,
        platform=platform,
        input_file=args.input,
        commands_file=args.commands,
        output_file=args.output,
        log_file=args.log,
        debug=args.debug,
        timeout=args.timeout,
    )

    try:
        run(config)
    except SwitchParseError as e:
        err.print(f"Error: {e}", markup=False)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
