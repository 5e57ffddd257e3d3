"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from sockdump.config import SockdumpConfig
from sockdump.engine.dispatch import SyscallDispatcher
from sockdump.engine.reconstructor import Reconstructor
from sockdump.engine.state import SocketStateStore


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def http_trace_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "http_client.trace"


@pytest.fixture
def store() -> SocketStateStore:
    return SocketStateStore()


@pytest.fixture
def dispatcher(store: SocketStateStore) -> SyscallDispatcher:
    return SyscallDispatcher(store)


@pytest.fixture
def diagnostics() -> list[str]:
    return []


@pytest.fixture
def reconstructor(diagnostics: list[str]) -> Reconstructor:
    return Reconstructor(SockdumpConfig(), on_diagnostic=diagnostics.append)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SOCKDUMP_MIN_SIZE",
        "SOCKDUMP_MAX_TCP_SEQ",
        "SOCKDUMP_DEBUG",
        "SOCKDUMP_STRACE",
        "SOCKDUMP_STRING_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)
