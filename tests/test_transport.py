import json
import subprocess

import pytest

from switchparse import transport
from switchparse.errors import TransportError, ManifestError, CommandNotFoundError
from switchparse.schemas import Platform
from switchparse.transport import (
    CommandManifest, load_manifest, read_input, run_command, build_argv,
    fetch_from_manifest,
)


def write_manifest(path, data):
    path.write_text(json.dumps(data))
    return str(path)


# ============================================================
# Manifest
# ============================================================

def test_load_manifest(tmp_path):
    path = write_manifest(tmp_path / "commands.json", {"commands": [
        {"name": "ip-arp", "command": "show ip arp"},
        {"name": "inventory", "command": "show inventory all"},
    ]})
    manifest = load_manifest(path)
    assert manifest.names() == ["ip-arp", "inventory"]
    assert manifest.find("inventory").command == "show inventory all"


def test_find_missing_command(tmp_path):
    path = write_manifest(tmp_path / "commands.json", {"commands": []})
    with pytest.raises(CommandNotFoundError) as exc:
        load_manifest(path).find("ip-arp")
    assert "ip-arp command not found" in str(exc.value)
    assert isinstance(exc.value, TransportError)


def test_manifest_missing_file(tmp_path):
    with pytest.raises(ManifestError):
        load_manifest(str(tmp_path / "nope.json"))


def test_manifest_bad_json(tmp_path):
    path = tmp_path / "commands.json"
    path.write_text("{not json")
    with pytest.raises(ManifestError) as exc:
        load_manifest(str(path))
    assert "JSON decode error" in str(exc.value)


@pytest.mark.parametrize("data", [
    [],
    {"cmds": []},
    {"commands": ["show ip arp"]},
    {"commands": [{"name": "ip-arp"}]},
    {"commands": [{"name": "", "command": "show ip arp"}]},
])
def test_manifest_bad_shape(data):
    with pytest.raises(ManifestError):
        CommandManifest.from_dict(data, source="commands.json")


# ============================================================
# Input file
# ============================================================

def test_read_input_verbatim(tmp_path):
    path = tmp_path / "capture.txt"
    path.write_text("line one\n  line two  \n")
    assert read_input(str(path)) == "line one\n  line two  \n"


def test_read_input_missing(tmp_path):
    with pytest.raises(TransportError):
        read_input(str(tmp_path / "missing.txt"))


# ============================================================
# Command execution
# ============================================================

def test_build_argv_per_platform():
    assert build_argv("show ip arp", Platform.CISCO_NXOS) == ["vsh", "-c", "show ip arp"]
    assert build_argv("show version", Platform.DELL_OS10) == [
        "/opt/dell/os10/bin/clish", "-c", "show version",
    ]


def test_run_command_returns_stdout(monkeypatch):
    calls = []

    def fake_run(argv, **kwargs):
        calls.append((argv, kwargs))
        return subprocess.CompletedProcess(argv, 0, stdout="output\n", stderr="")

    monkeypatch.setattr(transport.subprocess, "run", fake_run)
    assert run_command("show ip arp", Platform.CISCO_NXOS, timeout=5) == "output\n"
    argv, kwargs = calls[0]
    assert argv == ["vsh", "-c", "show ip arp"]
    assert kwargs["timeout"] == 5


def test_run_command_nonzero_exit(monkeypatch):
    def fake_run(argv, **kwargs):
        return subprocess.CompletedProcess(argv, 16, stdout="", stderr="% Invalid command")

    monkeypatch.setattr(transport.subprocess, "run", fake_run)
    with pytest.raises(TransportError) as exc:
        run_command("show nonsense", Platform.CISCO_NXOS)
    assert "status 16" in str(exc.value)
    assert "Invalid command" in str(exc.value)


def test_run_command_missing_shell(monkeypatch):
    def fake_run(argv, **kwargs):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(transport.subprocess, "run", fake_run)
    with pytest.raises(TransportError) as exc:
        run_command("show version", Platform.DELL_OS10)
    assert "dell_os10" in str(exc.value)


def test_run_command_timeout(monkeypatch):
    def fake_run(argv, **kwargs):
        raise subprocess.TimeoutExpired(argv, kwargs["timeout"])

    monkeypatch.setattr(transport.subprocess, "run", fake_run)
    with pytest.raises(TransportError) as exc:
        run_command("show tech-support", Platform.CISCO_NXOS, timeout=1)
    assert "timed out" in str(exc.value)


def test_fetch_from_manifest(monkeypatch):
    manifest = CommandManifest.from_dict(
        {"commands": [{"name": "version", "command": "show version"}]}
    )

    def fake_run(argv, **kwargs):
        return subprocess.CompletedProcess(argv, 0, stdout=argv[-1], stderr="")

    monkeypatch.setattr(transport.subprocess, "run", fake_run)
    assert fetch_from_manifest(manifest, "version", Platform.DELL_OS10) == "show version"
    with pytest.raises(CommandNotFoundError):
        fetch_from_manifest(manifest, "inventory", Platform.DELL_OS10)
