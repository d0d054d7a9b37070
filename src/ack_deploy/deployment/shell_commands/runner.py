"""Command runner for executing external programs.

This module provides the process execution used by all specialized
command modules (docker, kubectl, aliyun).
"""

from __future__ import annotations

import os
import queue
import subprocess
import threading
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import IO

from loguru import logger

from .types import CommandResult, OutputStream

LineSink = Callable[[str], None]

# Exit code reported when the executable cannot be found
MISSING_EXECUTABLE_RETURNCODE = 127
TIMEOUT_RETURNCODE = -1


def _decode(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode(errors="replace")
    return data


class CommandRunner:
    """Low-level command executor with consistent result handling.

    Exit code 0 is the only success criterion. A process that outlives its
    timeout is killed and reported as failed; a missing executable is
    reported as a failed result instead of raising.
    """

    def __init__(self, project_root: Path) -> None:
        """Initialize the command runner.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
        """
        self.project_root = project_root

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
        input_data: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a command and return structured result.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            capture_output: Whether to capture stdout/stderr
            input_data: Text written to the process's stdin
            timeout: Seconds before the process is killed

        Returns:
            CommandResult with success status, output, and return code
        """
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                list(cmd),
                cwd=cwd or self.project_root,
                capture_output=capture_output,
                text=True,
                input=input_data,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.warning(f"Command timed out after {timeout}s: {' '.join(cmd)}")
            return CommandResult(
                success=False,
                stdout=_decode(e.stdout),
                stderr=_decode(e.stderr),
                returncode=TIMEOUT_RETURNCODE,
                timed_out=True,
            )
        except FileNotFoundError as e:
            logger.debug(f"Executable not found: {cmd[0]}")
            return CommandResult(
                success=False,
                stderr=str(e),
                returncode=MISSING_EXECUTABLE_RETURNCODE,
            )

        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def run_streaming(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        input_data: str | None = None,
        timeout: float | None = None,
        on_output: LineSink | None = None,
        on_error: LineSink | None = None,
    ) -> CommandResult:
        """Execute a command with real-time output streaming.

        Each line is handed to ``on_output`` (stdout) or ``on_error``
        (stderr) as soon as it arrives. When ``on_error`` is not given,
        stderr lines go to ``on_output`` as well.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            input_data: Text written to the process's stdin
            timeout: Seconds before the process is killed
            on_output: Callback for each stdout line
            on_error: Callback for each stderr line

        Returns:
            CommandResult with success status, collected output, and return code
        """
        logger.debug(f"Streaming: {' '.join(cmd)}")

        # Set environment to disable output buffering
        env = os.environ.copy()
        env["PYTHONUNBUFFERED"] = "1"

        try:
            process = subprocess.Popen(
                list(cmd),
                cwd=cwd or self.project_root,
                stdin=subprocess.PIPE if input_data is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
                env=env,
            )
        except FileNotFoundError as e:
            logger.debug(f"Executable not found: {cmd[0]}")
            return CommandResult(
                success=False,
                stderr=str(e),
                returncode=MISSING_EXECUTABLE_RETURNCODE,
            )

        lines: queue.Queue[tuple[OutputStream, str | None]] = queue.Queue()
        readers = [
            threading.Thread(
                target=self._pump, args=(process.stdout, OutputStream.STDOUT, lines)
            ),
            threading.Thread(
                target=self._pump, args=(process.stderr, OutputStream.STDERR, lines)
            ),
        ]
        for reader in readers:
            reader.daemon = True
            reader.start()

        if input_data is not None and process.stdin:
            try:
                process.stdin.write(input_data)
            except BrokenPipeError:
                logger.debug("Process closed stdin before reading all input")
            finally:
                process.stdin.close()

        collected: dict[OutputStream, list[str]] = {
            OutputStream.STDOUT: [],
            OutputStream.STDERR: [],
        }
        sinks = {
            OutputStream.STDOUT: on_output,
            OutputStream.STDERR: on_error or on_output,
        }
        deadline = time.monotonic() + timeout if timeout is not None else None
        open_streams = len(readers)
        timed_out = False

        while open_streams:
            wait = 0.1
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    timed_out = True
                    break
                wait = min(wait, remaining)
            try:
                stream, line = lines.get(timeout=wait)
            except queue.Empty:
                continue
            if line is None:
                open_streams -= 1
                continue
            collected[stream].append(line)
            sink = sinks[stream]
            if sink:
                sink(line)

        if timed_out:
            logger.warning(f"Command timed out after {timeout}s: {' '.join(cmd)}")
            process.kill()
        process.wait()
        for reader in readers:
            reader.join(timeout=1)

        return CommandResult(
            success=not timed_out and process.returncode == 0,
            stdout="\n".join(collected[OutputStream.STDOUT]),
            stderr="\n".join(collected[OutputStream.STDERR]),
            returncode=TIMEOUT_RETURNCODE if timed_out else process.returncode,
            timed_out=timed_out,
        )

    @staticmethod
    def _pump(
        pipe: IO[str] | None,
        stream: OutputStream,
        lines: queue.Queue[tuple[OutputStream, str | None]],
    ) -> None:
        """Forward non-empty lines from a pipe onto the queue."""
        if pipe is None:
            lines.put((stream, None))
            return
        try:
            for line in iter(pipe.readline, ""):
                line = line.rstrip("\r\n")
                if line:
                    lines.put((stream, line))
        finally:
            pipe.close()
            lines.put((stream, None))
