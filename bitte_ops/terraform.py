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

"""Terraform workspace switching with guaranteed restoration.

The active workspace lives only in Terraform's own state; it is re-queried on
every :meth:`TerraformWorkspaces.show` and never cached here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from bitte_ops import component_logger, console
from bitte_ops.cluster import Cluster
from bitte_ops.constants import TERRAFORM_CLI
from bitte_ops.organization import resolve_organization
from bitte_ops.shell import CommandSpec, ExecutionResult, Executor, Redirect, run
from bitte_ops.tfc import TerraformCloudClient, Workspace


def remote_workspace_name(cluster: Cluster | str, name: str) -> str:
    """Name of *name* in the shared organization (``<cluster>_<name>``)."""
    return f"{cluster}_{name}"


@dataclass(frozen=True)
class WorkspaceScope:
    """Workspaces involved in one :meth:`TerraformWorkspaces.scope` block.

    Attributes:
        original: Workspace active when the scope was entered.
        target: Workspace the scoped body runs against.
    """

    original: str
    target: str

    @property
    def switched(self) -> bool:
        return self.original != self.target


class TerraformWorkspaces:
    """Drive ``terraform workspace`` and the workspaces API for one configuration.

    Args:
        api: Terraform Cloud client used to list and create workspaces.
        organization: Organization owning the workspaces, or None to resolve it
            (env override, then local state) on every API call.
        executor: Command executor, ``shell.run`` by default.
        cwd: Terraform configuration directory, or None for the current one.
        logger: Logger handle, or None for the component default.
    """

    def __init__(
        self,
        api: TerraformCloudClient,
        *,
        organization: str | None = None,
        executor: Executor = run,
        cwd: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api = api
        self._organization = organization
        self._executor = executor
        self._cwd = cwd
        self._logger = logger or component_logger("terraform")

    @property
    def organization(self) -> str:
        return self._organization or resolve_organization(logger=self._logger)

    def _terraform(self, *args: str, capture: bool = False) -> ExecutionResult:
        spec = CommandSpec(
            TERRAFORM_CLI,
            args,
            stdout=Redirect.CAPTURE if capture else Redirect.LOG,
            cwd=self._cwd,
            logger=self._logger,
        )
        return self._executor(spec)

    # ------------------------------------------------------------------------
    # Primitive transitions
    # ------------------------------------------------------------------------

    def show(self) -> str:
        """Return the currently selected workspace."""
        return self._terraform("workspace", "show", capture=True).stdout.strip()

    def list_workspaces(self) -> list[str]:
        """Return the names of all workspaces in the organization."""
        return [workspace.attributes.name for workspace in self._api.list_workspaces(self.organization)]

    def select(self, name: str, *, init: bool = True) -> None:
        """Select workspace *name*, then re-run ``terraform init`` unless *init* is False.

        Raises:
            RetryableError: If either command fails.
        """
        self._terraform("workspace", "select", name)
        if init:
            self._terraform("init")

    def create(self, cluster: Cluster | str, name: str) -> Workspace:
        """Create the cluster-namespaced workspace ``<cluster>_<name>``."""
        return self._api.create_workspace(self.organization, remote_workspace_name(cluster, name))

    # ------------------------------------------------------------------------
    # Scoped switching
    # ------------------------------------------------------------------------

    @contextmanager
    def scope(self, cluster: Cluster | str, name: str) -> Iterator[WorkspaceScope]:
        """Run a block with workspace *name* selected, then restore the original.

        When *name* is already active nothing is selected, created, or restored.
        Otherwise the namespaced workspace is created if missing, selected, and
        initialised; on exit the original workspace is selected again without
        ``init``. Restoration runs however the block exits, including failures
        after the original workspace was read.

        Args:
            cluster: Cluster the workspace belongs to.
            name: Workspace to select for the block.

        Yields:
            The original and target workspace names.
        """
        current = WorkspaceScope(original=self.show(), target=name)
        try:
            if current.switched:
                console.print(
                    f"[yellow]\u2139\ufe0f  Switching workspace {current.original} -> {name}[/yellow]")
                if remote_workspace_name(cluster, name) not in self.list_workspaces():
                    self.create(cluster, name)
                self.select(name)
            yield current
        except Exception as err:
            if current.switched:
                self._logger.error("Workspace %s failed, restoring %s: %r", name, current.original, err)
            raise
        finally:
            if current.switched:
                self._logger.info("Restoring workspace %s", current.original)
                self.select(current.original, init=False)
