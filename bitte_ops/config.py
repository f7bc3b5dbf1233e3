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

"""Configuration classes loaded from the environment."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bitte_ops.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_TERRAFORM_ADDRESS,
    TERRAFORM_CREDENTIALS_FILE,
)


# ============================================================================
# Configuration classes
# ============================================================================

class TerraformSettings(BaseSettings):
    """Terraform Cloud configuration, auto-loaded from TERRAFORM_* env vars.

    Attributes:
        organization: Organization override (``TERRAFORM_ORGANIZATION``), or None
            to fall back to the local state file.
        address: Base URL of the Terraform Cloud/Enterprise API.
        token: API token, or None to read it from the credentials file.
        credentials_file: Location of the ``terraform login`` credentials file.
    """

    model_config = SettingsConfigDict(env_prefix="TERRAFORM_", env_ignore_empty=True, extra="ignore")

    organization: str | None = None
    address: str = DEFAULT_TERRAFORM_ADDRESS
    token: str | None = Field(default=None, repr=False)
    credentials_file: Path = TERRAFORM_CREDENTIALS_FILE


class AwsSettings(BaseSettings):
    """Cloud CLI configuration, auto-loaded from AWS_* env vars.

    Attributes:
        region: Region every cloud CLI invocation is scoped to.
    """

    model_config = SettingsConfigDict(env_prefix="AWS_", env_ignore_empty=True, extra="ignore")

    region: str = Field(default=DEFAULT_AWS_REGION, pattern=r"^[a-z]{2}(-[a-z]+)+-\d+$")


class ClusterSettings(BaseSettings):
    """Cluster identity, auto-loaded from BITTE_* env vars.

    Attributes:
        cluster: Name of the cluster being operated on.
    """

    model_config = SettingsConfigDict(env_prefix="BITTE_", env_ignore_empty=True, extra="ignore")

    cluster: str = Field(min_length=1)
