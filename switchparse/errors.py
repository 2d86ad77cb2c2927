"""Exceptions that escape the engine and its collaborators."""

from __future__ import annotations


class SwitchParseError(Exception):
    """Base for everything the CLI reports as a failure."""


class HeaderNotFoundError(SwitchParseError):
    """The schema requires a table header and the document never had one."""

    def __init__(self, schema_name: str, line_count: int):
        self.schema_name = schema_name
        self.line_count = line_count
        if line_count == 0:
            detail = "input was empty"
        else:
            detail = f"no table header in {line_count} lines; wrong command output?"
        super().__init__(f"{schema_name}: {detail}")


class UnknownParserError(SwitchParseError):
    def __init__(self, name: str, platform: str):
        self.name = name
        self.platform = platform
        super().__init__(f"unknown parser {name!r} for platform {platform}")


class TransportError(SwitchParseError):
    """Reading input or running a device command failed."""


class ManifestError(TransportError):
    """The commands manifest is missing or malformed."""


class CommandNotFoundError(TransportError):
    def __init__(self, name: str, manifest: str = ""):
        self.name = name
        where = f" in {manifest}" if manifest else ""
        super().__init__(f"{name} command not found{where}")
