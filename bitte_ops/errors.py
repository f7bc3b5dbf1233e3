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

"""Exception hierarchy for command, workspace, and reachability failures."""

from __future__ import annotations

from collections.abc import Sequence


class BitteError(RuntimeError):
    """Base error for bitte_ops orchestration helpers."""


class RetryableError(BitteError):
    """Raised when an external command exits with a non-zero status.

    Re-running the command may succeed; callers decide whether to retry.

    Attributes:
        exit_status: Exit status reported by the child process.
        command: Full command line that failed.
    """

    def __init__(self, exit_status: int, command: Sequence[str] = ()) -> None:
        self.exit_status = exit_status
        self.command = list(command)
        cmdline = " ".join(self.command) or "<unknown>"
        super().__init__(f"Process exited with {exit_status}: {cmdline}")


class ReachabilityError(BitteError):
    """Raised when a host never accepted a connection within the attempt bound.

    Attributes:
        host: Target host.
        port: Target port.
        attempts: Number of connection attempts made.
    """

    def __init__(self, host: str, port: int, attempts: int) -> None:
        self.host = host
        self.port = port
        self.attempts = attempts
        super().__init__(f"Couldn't connect to {host}:{port} after {attempts} attempts")


class OrganizationNotFoundError(BitteError):
    """Raised when the Terraform organization cannot be resolved."""


class TerraformCredentialsError(BitteError):
    """Raised when no Terraform Cloud API token is available."""
