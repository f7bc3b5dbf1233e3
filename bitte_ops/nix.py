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

"""Evaluate flake attributes with ``nix eval --json``."""

from __future__ import annotations

import json
import logging
from typing import Any

from bitte_ops import component_logger
from bitte_ops.constants import NIX_CLI
from bitte_ops.shell import CommandSpec, Executor, Redirect, run


def nix_eval(
    attr: str,
    apply: str | None = None,
    *,
    executor: Executor = run,
    logger: logging.Logger | None = None,
) -> Any:
    """Evaluate *attr* and decode the result.

    Args:
        attr: Installable to evaluate (e.g. ``.#clusters.prod.topology``).
        apply: Optional Nix function applied to the value before printing.
        executor: Command executor, ``shell.run`` by default.
        logger: Logger handle, or None for the component default.

    Returns:
        The decoded JSON value.

    Raises:
        RetryableError: If ``nix`` exits non-zero.
        json.JSONDecodeError: If the output is not JSON.
    """
    args = ["eval", "--json", attr]
    if apply is not None:
        args += ["--apply", apply]
    spec = CommandSpec(
        NIX_CLI,
        args,
        stdout=Redirect.CAPTURE,
        logger=logger or component_logger("nix"),
    )
    return json.loads(executor(spec).stdout)
