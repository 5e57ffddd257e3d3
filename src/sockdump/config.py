"""Global configuration — thresholds, tracer settings, env vars, YAML file."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass
class SockdumpConfig:
    """Application-wide configuration."""

    min_size: int = 12  # bytes per packet
    max_tcp_seq: int = 5  # packets per TCP flow direction
    debug: bool = False
    strace_path: str = "strace"
    string_limit: int = 12  # strace -s
    verbose: bool = False

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.min_size < 0:
            raise ValueError(f"min_size must be >= 0, got {self.min_size}")
        if self.max_tcp_seq < 0:
            raise ValueError(f"max_tcp_seq must be >= 0, got {self.max_tcp_seq}")
        if self.string_limit <= 0:
            raise ValueError(f"string_limit must be > 0, got {self.string_limit}")

    @property
    def payload_limit(self) -> int:
        """Number of payload tokens kept in machine output."""
        return 2 * self.min_size

    @classmethod
    def load(cls, path: str | Path | None = None) -> SockdumpConfig:
        """Load config: defaults, then optional YAML file, then env vars."""
        config = cls.from_yaml(path) if path else cls()

        env_min = os.environ.get("SOCKDUMP_MIN_SIZE")
        if env_min:
            config.min_size = _env_int("SOCKDUMP_MIN_SIZE", env_min)

        env_seq = os.environ.get("SOCKDUMP_MAX_TCP_SEQ")
        if env_seq:
            config.max_tcp_seq = _env_int("SOCKDUMP_MAX_TCP_SEQ", env_seq)

        env_debug = os.environ.get("SOCKDUMP_DEBUG")
        if env_debug:
            config.debug = env_debug.strip().lower() in _TRUTHY

        env_strace = os.environ.get("SOCKDUMP_STRACE")
        if env_strace:
            config.strace_path = env_strace

        env_limit = os.environ.get("SOCKDUMP_STRING_LIMIT")
        if env_limit:
            config.string_limit = _env_int("SOCKDUMP_STRING_LIMIT", env_limit)

        config.validate()
        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> SockdumpConfig:
        """Build a config from a YAML mapping; unknown keys are rejected."""
        text = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(text)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("Config YAML must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        kwargs: dict[str, object] = {}
        for key, value in data.items():
            if key in ("debug", "verbose"):
                kwargs[key] = _yaml_bool(key, value)
            elif key == "strace_path":
                if not isinstance(value, str) or not value:
                    raise ValueError(
                        f"{key} must be a non-empty string, got {value!r}"
                    )
                kwargs[key] = value
            else:
                kwargs[key] = _yaml_int(key, value)
        return cls(**kwargs)  # type: ignore[arg-type]


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _yaml_int(key: str, value: object) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {value!r}") from None


def _yaml_bool(key: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUTHY | _FALSY:
        return value.strip().lower() in _TRUTHY
    raise ValueError(f"{key} must be a boolean, got {value!r}")
