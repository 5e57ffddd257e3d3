"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from sockdump.config import SockdumpConfig


def test_defaults():
    config = SockdumpConfig()
    assert config.min_size == 12
    assert config.max_tcp_seq == 5
    assert not config.debug
    assert config.strace_path == "strace"
    assert config.string_limit == 12
    assert config.payload_limit == 24


def test_load_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SOCKDUMP_MIN_SIZE", "20")
    monkeypatch.setenv("SOCKDUMP_MAX_TCP_SEQ", "3")
    monkeypatch.setenv("SOCKDUMP_DEBUG", "yes")
    monkeypatch.setenv("SOCKDUMP_STRACE", "/usr/local/bin/strace")
    monkeypatch.setenv("SOCKDUMP_STRING_LIMIT", "64")

    config = SockdumpConfig.load()
    assert config.min_size == 20
    assert config.max_tcp_seq == 3
    assert config.debug
    assert config.strace_path == "/usr/local/bin/strace"
    assert config.string_limit == 64
    assert config.payload_limit == 40


def test_load_rejects_bad_env_int(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SOCKDUMP_MIN_SIZE", "big")
    with pytest.raises(ValueError, match="SOCKDUMP_MIN_SIZE"):
        SockdumpConfig.load()


def test_load_rejects_negative_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SOCKDUMP_MAX_TCP_SEQ", "-1")
    with pytest.raises(ValueError, match="max_tcp_seq"):
        SockdumpConfig.load()


def test_from_yaml(tmp_path: Path):
    path = tmp_path / "sockdump.yaml"
    path.write_text("min_size: 4\nmax_tcp_seq: 10\ndebug: true\n", encoding="utf-8")
    config = SockdumpConfig.from_yaml(path)
    assert config.min_size == 4
    assert config.max_tcp_seq == 10
    assert config.debug


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "sockdump.yaml"
    path.write_text("min_size: 4\n", encoding="utf-8")
    monkeypatch.setenv("SOCKDUMP_MIN_SIZE", "8")
    assert SockdumpConfig.load(path).min_size == 8


def test_empty_yaml_gives_defaults(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert SockdumpConfig.from_yaml(path) == SockdumpConfig()


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("- min_size\n", "mapping"),
        ("min_size: 4\ncolour: blue\n", "Unknown config keys: colour"),
        ("min_size: -4\n", "min_size"),
        ("min_size:\n", "min_size must be an integer, got None"),
        ("max_tcp_seq: [1, 2]\n", "max_tcp_seq must be an integer"),
        ("max_tcp_seq: true\n", "max_tcp_seq must be an integer"),
        ("debug: maybe\n", "debug must be a boolean"),
        ("strace_path: [strace]\n", "strace_path must be a non-empty string"),
    ],
)
def test_from_yaml_rejects_bad_files(tmp_path: Path, text: str, message: str):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ValueError, match=message):
        SockdumpConfig.from_yaml(path)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("debug: false\n", False),
        ("debug: true\n", True),
        ('debug: "false"\n', False),
        ('debug: "yes"\n', True),
        ('debug: "0"\n', False),
    ],
)
def test_from_yaml_parses_booleans(tmp_path: Path, text: str, expected: bool):
    path = tmp_path / "sockdump.yaml"
    path.write_text(text, encoding="utf-8")
    assert SockdumpConfig.from_yaml(path).debug is expected
