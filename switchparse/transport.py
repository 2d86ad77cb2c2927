"""
Switch Output Extraction — Transport

Where the raw text comes from. Two sources:
  1. A capture file, read verbatim (-input)
  2. A named command from the commands manifest, run through the
     switch's local CLI shell (-commands)

Manifest format:

    {"commands": [
        {"name": "ip-arp", "command": "show ip arp"},
        {"name": "inventory", "command": "show inventory all"}
    ]}

I/O failures, non-zero exits, timeouts and missing command names all
surface as TransportError subclasses. Nothing here parses device text.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import json
import logging
import subprocess
import time

from .errors import TransportError, ManifestError, CommandNotFoundError
from .schemas import Platform, COMMAND_SHELLS

logger = logging.getLogger("switchparse.transport")

DEFAULT_TIMEOUT = 30.0


# ============================================================
# Commands manifest
# ============================================================

@dataclass
class CommandEntry:
    name: str
    command: str


@dataclass
class CommandManifest:
    commands: list[CommandEntry] = field(default_factory=list)
    source: str = ""                    # path it was loaded from, for messages

    def find(self, name: str) -> CommandEntry:
        for entry in self.commands:
            if entry.name == name:
                return entry
        raise CommandNotFoundError(name, self.source)

    def names(self) -> list[str]:
        return [entry.name for entry in self.commands]

    @classmethod
    def from_dict(cls, data: dict, source: str = "") -> CommandManifest:
        if not isinstance(data, dict) or not isinstance(data.get("commands"), list):
            raise ManifestError(f"{source or 'manifest'}: expected an object with a 'commands' list")

        entries = []
        for i, item in enumerate(data["commands"]):
            if not isinstance(item, dict):
                raise ManifestError(f"{source or 'manifest'}: commands[{i}] is not an object")
            name = item.get("name")
            command = item.get("command")
            if not isinstance(name, str) or not name or not isinstance(command, str) or not command:
                raise ManifestError(
                    f"{source or 'manifest'}: commands[{i}] needs non-empty 'name' and 'command'"
                )
            entries.append(CommandEntry(name=name, command=command))
        return cls(commands=entries, source=source)


def load_manifest(path: str) -> CommandManifest:
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise ManifestError(f"cannot read commands file {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(
            f"{path}: JSON decode error at line {e.lineno} col {e.colno}: {e.msg}"
        ) from e

    manifest = CommandManifest.from_dict(data, source=path)
    logger.debug(f"Loaded {len(manifest.commands)} commands from {path}")
    return manifest


# ============================================================
# Input sources
# ============================================================

def read_input(path: str) -> str:
    """Read a capture file verbatim. Undecodable bytes are replaced, not fatal."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        raise TransportError(f"cannot read input file {path}: {e}") from e
    logger.debug(f"Read {len(text)} chars from {path}")
    return text


def build_argv(command: str, platform: Platform) -> list[str]:
    return [*COMMAND_SHELLS[platform], command]


def run_command(
    command: str,
    platform: Platform,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> str:
    """
    Run one show command through the platform's local CLI shell and
    return its stdout.
    """
    argv = build_argv(command, platform)
    logger.info(f"Running: {' '.join(argv)}")
    start = time.monotonic()

    try:
        proc = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise TransportError(
            f"{argv[0]} not found; is this running on a {platform.value} switch?"
        ) from e
    except subprocess.TimeoutExpired as e:
        raise TransportError(f"'{command}' timed out after {timeout}s") from e
    except OSError as e:
        raise TransportError(f"failed to execute '{command}': {e}") from e

    elapsed_ms = (time.monotonic() - start) * 1000
    logger.debug(
        f"'{command}' exited {proc.returncode} in {elapsed_ms:.0f}ms, "
        f"{len(proc.stdout)} chars"
    )

    if proc.returncode != 0:
        detail = (proc.stderr or proc.stdout or "").strip()
        raise TransportError(
            f"'{command}' exited with status {proc.returncode}"
            + (f": {detail[:200]}" if detail else "")
        )
    return proc.stdout


def fetch_from_manifest(
    manifest: CommandManifest,
    name: str,
    platform: Platform,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> str:
    """Look up a command by parser name and run it."""
    entry = manifest.find(name)
    return run_command(entry.command, platform, timeout)
