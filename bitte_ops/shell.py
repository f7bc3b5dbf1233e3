# /*
# Copyright 2026 The Bitte Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Run external commands with structured failure semantics.

Every invocation spawns exactly one child process through ``sh`` and either
returns an :class:`ExecutionResult` or raises :class:`RetryableError`.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shlex
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, TextIO, Union

import sh

from bitte_ops import component_logger
from bitte_ops.errors import RetryableError


class Redirect(Enum):
    """Stdio redirection policies."""

    CLOSE = "close"
    INHERIT = "inherit"
    LOG = "log"
    CAPTURE = "capture"


StdinTarget = Union[Redirect, str, TextIO]
OutputTarget = Union[Redirect, TextIO, Callable[[str], None]]
ProcessCallback = Callable[[sh.RunningCommand], None]

_log = component_logger("shell")
_OUTPUT_REDIRECTS = frozenset({Redirect.LOG, Redirect.CAPTURE})


@dataclass(frozen=True)
class CommandSpec:
    """A single external command invocation.

    Attributes:
        executable: Name or path of the program to run.
        args: Ordered argument list passed to the program.
        env: Environment overrides merged over the current environment, or None
            to inherit it unchanged.
        stdin: ``Redirect.CLOSE`` (default), ``Redirect.INHERIT``, a string fed
            as input, or a readable file object.
        stdout: ``Redirect.LOG`` (default), ``Redirect.CAPTURE``, a writable
            file object, or a per-line callback.
        stderr: Same choices as ``stdout``.
        cwd: Working directory, or None for the current one.
        logger: Logger receiving the invocation line and streamed output.
    """

    executable: str
    args: Sequence[str] = ()
    env: Mapping[str, str] | None = None
    stdin: StdinTarget = Redirect.CLOSE
    stdout: OutputTarget = Redirect.LOG
    stderr: OutputTarget = Redirect.LOG
    cwd: Path | None = None
    logger: logging.Logger | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.executable:
            raise ValueError("CommandSpec requires a non-empty executable")
        object.__setattr__(self, "args", tuple(self.args))
        for arg in self.args:
            if not isinstance(arg, str):
                raise TypeError(f"Command argument must be a string, got {type(arg).__name__}")
        for stream, target in (("stdout", self.stdout), ("stderr", self.stderr)):
            if isinstance(target, Redirect) and target not in _OUTPUT_REDIRECTS:
                raise ValueError(f"Unsupported {stream} redirection: {target.value}")

    @property
    def argv(self) -> list[str]:
        """Full command line, executable first."""
        return [self.executable, *self.args]


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a successful invocation.

    Attributes:
        exit_status: Child exit status (always 0 for returned results).
        stdout: Captured standard output, empty unless captured.
        stderr: Captured standard error, empty unless captured.
    """

    exit_status: int
    stdout: str = ""
    stderr: str = ""


Executor = Callable[[CommandSpec], ExecutionResult]


# ============================================================================
# Stdio wiring
# ============================================================================

def _stdin_arg(target: StdinTarget) -> Any:
    """Translate a stdin policy into the value ``sh`` expects for ``_in``."""
    if target is Redirect.CLOSE:
        # Empty input: sh closes the write end immediately, the child reads EOF.
        return ""
    if target is Redirect.INHERIT:
        return sys.stdin
    if isinstance(target, Redirect):
        raise ValueError(f"Unsupported stdin redirection: {target.value}")
    return target


def _output_callback(target: OutputTarget, log: logging.Logger, buffer: list[str]) -> Callable[[str], None]:
    """Build the per-line ``sh`` callback for one output stream.

    Callbacks must return None: ``sh`` stops feeding a callback that returns a
    truthy value.
    """
    if target is Redirect.LOG:
        def _log_line(line: str) -> None:
            log.debug("%s", line.rstrip("\n"))
        return _log_line

    if target is Redirect.CAPTURE:
        def _capture(line: str) -> None:
            buffer.append(line)
        return _capture

    if isinstance(target, Redirect):
        raise ValueError(f"Unsupported output redirection: {target.value}")

    write = getattr(target, "write", None)
    if write is not None:
        def _write(line: str) -> None:
            write(line)
        return _write

    callback = target

    def _forward(line: str) -> None:
        callback(line)
    return _forward


# ============================================================================
# Execution
# ============================================================================

def run(spec: CommandSpec, on_process: ProcessCallback | None = None) -> ExecutionResult:
    """Run a command and wait for it to exit.

    Args:
        spec: Command to run and its stdio policy.
        on_process: Optional callback handed the live ``sh.RunningCommand``
            before the process is awaited, for interactive or streaming use.

    Returns:
        Result carrying the exit status and any captured output.

    Raises:
        RetryableError: If the process exits with a non-zero status.
        sh.CommandNotFound: If the executable cannot be found.
    """
    log = spec.logger or _log
    stdout_buf: list[str] = []
    stderr_buf: list[str] = []

    kwargs: dict[str, Any] = {
        "_in": _stdin_arg(spec.stdin),
        "_out": _output_callback(spec.stdout, log, stdout_buf),
        "_err": _output_callback(spec.stderr, log, stderr_buf),
        "_tty_out": False,
        "_decode_errors": "replace",
    }
    if spec.env is not None:
        kwargs["_env"] = {**os.environ, **spec.env}
    if spec.cwd is not None:
        kwargs["_cwd"] = str(spec.cwd)

    log.debug("run: %s", shlex.join(spec.argv))
    command = sh.Command(spec.executable)

    try:
        if on_process is None:
            process = command(*spec.args, _return_cmd=True, **kwargs)
        else:
            process = command(*spec.args, _bg=True, _bg_exc=False, **kwargs)
            try:
                on_process(process)
            except BaseException:
                with contextlib.suppress(ProcessLookupError):
                    process.terminate()
                raise
            process.wait()
    except sh.ErrorReturnCode as err:
        raise RetryableError(err.exit_code, spec.argv) from err

    return ExecutionResult(
        exit_status=process.exit_code,
        stdout="".join(stdout_buf),
        stderr="".join(stderr_buf),
    )

