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

"""Terraform Cloud workspace API client."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bitte_ops import component_logger
from bitte_ops.config import TerraformSettings
from bitte_ops.constants import (
    DEFAULT_TERRAFORM_ADDRESS,
    TERRAFORM_API_CONTENT_TYPE,
    TERRAFORM_API_PAGE_SIZE,
    TERRAFORM_API_TIMEOUT_SECONDS,
)
from bitte_ops.errors import TerraformCredentialsError


# ============================================================================
# API documents
# ============================================================================

class _Document(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class WorkspaceAttributes(_Document):
    name: str


class Workspace(_Document):
    """Workspace record as returned by the workspaces API."""

    id: str
    type: str = "workspaces"
    attributes: WorkspaceAttributes


class _Pagination(_Document):
    current_page: int = Field(default=1, alias="current-page")
    next_page: int | None = Field(default=None, alias="next-page")


class _Meta(_Document):
    pagination: _Pagination | None = None


class _WorkspaceList(_Document):
    data: list[Workspace]
    meta: _Meta | None = None


class _WorkspaceDocument(_Document):
    data: Workspace


class _Credential(_Document):
    token: str = Field(repr=False)


class _CredentialsFile(_Document):
    credentials: dict[str, _Credential]


def read_credentials_token(path: Path, host: str) -> str:
    """Read the API token ``terraform login`` stored for *host*.

    Args:
        path: Credentials file (``~`` is expanded).
        host: API host the token was issued for (e.g. ``app.terraform.io``).

    Returns:
        The stored token.

    Raises:
        TerraformCredentialsError: If the file is missing, malformed, or has no
            entry for *host*.
    """
    path = path.expanduser()
    try:
        creds = _CredentialsFile.model_validate_json(path.read_bytes())
    except (OSError, ValidationError) as err:
        raise TerraformCredentialsError(
            f"Couldn't read {path}. Make sure you are logged into terraform: run `terraform login`"
        ) from err
    if host not in creds.credentials:
        raise TerraformCredentialsError(f"No credentials for {host} in {path}")
    return creds.credentials[host].token


# ============================================================================
# Client
# ============================================================================

class TerraformCloudClient:
    """List and create workspaces through the Terraform Cloud API."""

    def __init__(
        self,
        token: str,
        address: str = DEFAULT_TERRAFORM_ADDRESS,
        *,
        transport: httpx.BaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not token:
            raise TerraformCredentialsError("Terraform Cloud API token is required")
        self._logger = logger or component_logger("tfc")
        self._client = httpx.Client(
            base_url=address.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": TERRAFORM_API_CONTENT_TYPE,
            },
            timeout=TERRAFORM_API_TIMEOUT_SECONDS,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: TerraformSettings | None = None, **kwargs) -> TerraformCloudClient:
        """Create a client from env settings, falling back to the credentials file."""
        settings = settings or TerraformSettings()
        token = settings.token or read_credentials_token(
            settings.credentials_file, httpx.URL(settings.address).host)
        return cls(token, settings.address, **kwargs)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> TerraformCloudClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def list_workspaces(self, organization: str) -> list[Workspace]:
        """List every workspace of *organization*, following pagination.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
        """
        workspaces: list[Workspace] = []
        page: int | None = 1
        while page is not None:
            resp = self._client.get(
                f"/api/v2/organizations/{organization}/workspaces",
                params={"page[number]": page, "page[size]": TERRAFORM_API_PAGE_SIZE},
            )
            resp.raise_for_status()
            doc = _WorkspaceList.model_validate_json(resp.content)
            workspaces.extend(doc.data)
            pagination = doc.meta.pagination if doc.meta else None
            page = pagination.next_page if pagination else None
        self._logger.debug("Organization %s has %d workspaces", organization, len(workspaces))
        return workspaces

    def create_workspace(self, organization: str, name: str) -> Workspace:
        """Create workspace *name* in *organization*.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response (e.g. 422 if it exists).
        """
        self._logger.info("Creating workspace %s in %s", name, organization)
        resp = self._client.post(
            f"/api/v2/organizations/{organization}/workspaces",
            json={"data": {"type": "workspaces", "attributes": {"name": name}}},
        )
        resp.raise_for_status()
        return _WorkspaceDocument.model_validate_json(resp.content).data
