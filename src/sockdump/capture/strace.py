"""Live trace source — runs strace and streams its output lines."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

_STRACE_FLAGS = ("-f", "-q", "-ttt", "-v", "-xx")
_TRACE_SET = "trace=network,read,write"


class TracerError(RuntimeError):
    """The tracer could not be started."""


def build_strace_command(
    target: Sequence[str],
    strace_path: str = "strace",
    string_limit: int = 12,
) -> list[str]:
    """Build the strace argv for a PID (single numeric arg) or a command."""
    if not target:
        raise ValueError("No trace target given")

    cmd = [strace_path, *_STRACE_FLAGS, "-s", str(string_limit), "-e", _TRACE_SET]
    if len(target) == 1 and target[0].isdigit():
        return [*cmd, "-p", target[0]]
    return [*cmd, "--", *target]


class StraceSource:
    """Spawns strace and yields its trace lines (written to stderr)."""

    def __init__(
        self,
        target: Sequence[str],
        strace_path: str = "strace",
        string_limit: int = 12,
    ) -> None:
        self._argv = build_strace_command(target, strace_path, string_limit)
        self._proc: subprocess.Popen[str] | None = None

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    @property
    def returncode(self) -> int | None:
        if self._proc is None:
            return None
        return self._proc.returncode

    @property
    def exit_status(self) -> int:
        """Shell-style exit status; death by signal N maps to 128 + N."""
        rc = self.returncode
        if rc is None:
            return 0
        if rc < 0:
            return 128 - rc
        return rc

    @property
    def is_running(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    def start(self) -> None:
        try:
            self._proc = subprocess.Popen(
                self._argv,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except FileNotFoundError:
            raise TracerError(f"tracer not found: {self._argv[0]}") from None
        except OSError as exc:
            raise TracerError(f"cannot start tracer: {exc}") from exc
        logger.info("Started %s (PID %d)", " ".join(self._argv), self._proc.pid)

    def lines(self) -> Iterator[str]:
        """Yield trace lines until the tracer closes its output."""
        if self._proc is None or self._proc.stderr is None:
            raise RuntimeError("Tracer not started — call start() first")
        yield from self._proc.stderr
        self._proc.wait()
        logger.info("Tracer exited with code %d", self._proc.returncode)

    def stop(self) -> None:
        """Terminate the tracer if it is still running."""
        if self._proc is not None and self._proc.poll() is None:
            self._proc.terminate()
            try:
                self._proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._proc.kill()
                self._proc.wait()

    def __enter__(self) -> StraceSource:
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()
