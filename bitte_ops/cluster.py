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

"""Cluster identity and the on-disk secrets layout derived from it."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from bitte_ops.config import ClusterSettings
from bitte_ops.constants import ENCRYPTED_DIR, SECRETS_DIR, SSH_KEY_PREFIX


@dataclass(frozen=True)
class Cluster:
    """Read-only cluster identity.

    Attributes:
        name: Cluster name; namespaces workspace names and secret paths.
    """

    name: str

    @classmethod
    def from_settings(cls, settings: ClusterSettings | None = None) -> Cluster:
        """Load the cluster name from ``BITTE_CLUSTER``."""
        settings = settings or ClusterSettings()
        return cls(settings.cluster)

    def __str__(self) -> str:
        return self.name


def secrets_dir(root: Path = Path(".")) -> Path:
    return root / SECRETS_DIR


def encrypted_dir(root: Path = Path(".")) -> Path:
    return root / ENCRYPTED_DIR


def ssh_key_path(cluster: Cluster, root: Path = Path(".")) -> Path:
    """Location of the cluster's SSH private key (``secrets/ssh-<cluster>``)."""
    return secrets_dir(root) / f"{SSH_KEY_PREFIX}{cluster.name}"


def ssh_key_args(cluster: Cluster, root: Path = Path(".")) -> list[str]:
    """Identity flag for ssh invocations.

    Args:
        cluster: Cluster whose key to use.
        root: Directory containing ``secrets/``.

    Returns:
        ``["-i", <key path>]`` if the key exists, otherwise an empty list.
    """
    path = ssh_key_path(cluster, root)
    if path.exists():
        return ["-i", str(path)]
    return []


def mtime(path: Path) -> datetime:
    """Modification time of *path* as an aware UTC datetime."""
    return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
