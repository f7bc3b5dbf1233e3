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

"""Resolve the Terraform organization from the environment or local state."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from bitte_ops import component_logger
from bitte_ops.config import TerraformSettings
from bitte_ops.constants import ENV_TERRAFORM_ORGANIZATION, TERRAFORM_STATE_FILE
from bitte_ops.errors import OrganizationNotFoundError


class _StateModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class BackendConfig(_StateModel):
    organization: str


class Backend(_StateModel):
    config: BackendConfig


class LocalTerraformState(_StateModel):
    """The parts of ``.terraform/terraform.tfstate`` that name the organization."""

    backend: Backend

    @classmethod
    def load(cls, path: Path = TERRAFORM_STATE_FILE) -> LocalTerraformState:
        """Parse the local state file.

        Raises:
            OSError: If the file cannot be read.
            pydantic.ValidationError: If it is not the expected JSON shape.
        """
        return cls.model_validate_json(path.read_bytes())


def resolve_organization(
    settings: TerraformSettings | None = None,
    state_file: Path = TERRAFORM_STATE_FILE,
    *,
    logger: logging.Logger | None = None,
) -> str:
    """Return the Terraform organization to operate on.

    ``TERRAFORM_ORGANIZATION`` wins when set and non-empty; the local state file
    is not read in that case. Otherwise the organization is taken from
    ``backend.config.organization`` in *state_file*.

    Args:
        settings: Terraform settings, or None to load them from the environment.
        state_file: Local state file to fall back to.
        logger: Logger handle, or None for the component default.

    Returns:
        Organization name.

    Raises:
        OrganizationNotFoundError: If the override is unset and the state file is
            missing or malformed.
    """
    log = logger or component_logger("organization")
    settings = settings or TerraformSettings()
    if settings.organization:
        log.debug("Using organization %s from %s", settings.organization, ENV_TERRAFORM_ORGANIZATION)
        return settings.organization

    try:
        state = LocalTerraformState.load(state_file)
    except (OSError, ValidationError) as err:
        raise OrganizationNotFoundError(
            f"{ENV_TERRAFORM_ORGANIZATION} is not set and {state_file} has no backend organization"
        ) from err

    log.debug("Using organization %s from %s", state.backend.config.organization, state_file)
    return state.backend.config.organization
