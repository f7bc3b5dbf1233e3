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

"""bitte_ops - command execution and Terraform workspace orchestration for Bitte clusters."""

from __future__ import annotations

import logging

from rich.console import Console

console = Console(stderr=True)
logger = logging.getLogger("bitte_ops")


def component_logger(name: str) -> logging.Logger:
    """Return the logger handle handed to a component at construction.

    Args:
        name: Short component name (e.g. ``shell`` or ``aws``).

    Returns:
        Child of the package logger scoped to the component.
    """
    return logger.getChild(name)


def configure_logging(level: int = logging.INFO) -> None:
    """Install the default log format for operator tooling.

    Args:
        level: Root log level.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
