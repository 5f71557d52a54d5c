"""Blocking execution of gifsicle with combined output capture."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass

from .error_handling import ProcessExecutionError, ProcessTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Captured stdout+stderr text and exit status of one run."""

    output: str
    exit_status: int
    command: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    def check(self) -> ProcessResult:
        """Return self, or raise ProcessExecutionError for a non-zero exit."""
        if not self.ok:
            tool = os.path.basename(self.command[0]) if self.command else "process"
            raise ProcessExecutionError(
                f"{tool} failed with exit code {self.exit_status}: {self.output.strip()[:500]}",
                context={"command": " ".join(self.command)},
                output=self.output,
                exit_status=self.exit_status,
            )
        return self


def run_process(
    executable: str | os.PathLike[str],
    args: Sequence[str],
    timeout: float | None = None,
) -> ProcessResult:
    """Run *executable* with *args* and return its combined output.

    Standard error is merged into standard output, and the pipe is drained
    line by line while the process runs, so large output cannot fill the
    pipe buffer and stall the child. The process is waited on only after its
    output stream closes.

    Args:
        executable: Program to run
        args: Arguments, one list entry per argv token
        timeout: Seconds before the process is killed; None waits forever

    Returns:
        ProcessResult with the full text output, whatever the exit status.

    Raises:
        ProcessExecutionError: If the process cannot be started
        ProcessTimeoutError: If the process is killed after *timeout*
    """
    cmd = [str(executable), *[str(a) for a in args]]
    logger.debug(f"Running: {' '.join(cmd)}")

    start_time = time.perf_counter()
    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )
    except OSError as e:
        raise ProcessExecutionError(
            f"Failed to launch {cmd[0]}: {e}",
            cause=e,
            context={"command": " ".join(cmd)},
        ) from e

    timed_out = threading.Event()

    def _kill() -> None:
        # A child that already exited is not a timeout.
        if proc.poll() is None:
            timed_out.set()
            proc.kill()

    timer = threading.Timer(timeout, _kill) if timeout is not None else None
    lines: list[str] = []
    try:
        if timer is not None:
            timer.daemon = True
            timer.start()
        assert proc.stdout is not None
        with proc.stdout:
            for line in proc.stdout:
                lines.append(line.rstrip("\r\n"))
        exit_status = proc.wait()
    finally:
        if timer is not None:
            timer.cancel()
        if proc.poll() is None:
            proc.kill()
            proc.wait()

    output = "".join(f"{line}\n" for line in lines)
    elapsed_ms = int((time.perf_counter() - start_time) * 1000)

    if timed_out.is_set() and exit_status != 0:
        raise ProcessTimeoutError(
            f"{os.path.basename(cmd[0])} timed out after {timeout} seconds",
            context={"command": " ".join(cmd), "timeout": timeout},
            output=output,
            exit_status=exit_status,
        )

    logger.debug(f"{os.path.basename(cmd[0])} exited with {exit_status} in {elapsed_ms} ms")
    return ProcessResult(output=output, exit_status=exit_status, command=tuple(cmd))
