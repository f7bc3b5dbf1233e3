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

"""Region-scoped AWS CLI client returning typed resource collections."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bitte_ops import component_logger
from bitte_ops.aws_types import AutoScalingGroups, Instances, KmsKeys
from bitte_ops.config import AwsSettings
from bitte_ops.constants import AWS_CLI, HEALTH_STATUS_UNHEALTHY
from bitte_ops.shell import CommandSpec, Executor, Redirect, run


class AwsClient:
    """Build, run, and decode ``aws`` invocations for one region.

    Every call runs ``aws --region <region> --output json <service> <operation>``
    with stdout captured and stderr logged. Responses are decoded in full with
    pydantic; a shape mismatch raises ``pydantic.ValidationError`` and a failed
    command raises ``RetryableError``. Nothing is cached between calls.
    """

    def __init__(
        self,
        region: str,
        *,
        executor: Executor = run,
        logger: logging.Logger | None = None,
    ) -> None:
        self._region = region
        self._executor = executor
        self._logger = logger or component_logger("aws")

    @classmethod
    def from_settings(cls, settings: AwsSettings | None = None, **kwargs) -> AwsClient:
        """Create a client for the region configured in the environment."""
        settings = settings or AwsSettings()
        return cls(settings.region, **kwargs)

    @property
    def region(self) -> str:
        return self._region

    def aws(self, service: str, operation: str, args: Sequence[str] = ()) -> str:
        """Run one AWS CLI operation and return its captured stdout.

        Args:
            service: CLI service name (e.g. ``ec2``).
            operation: Service operation (e.g. ``describe-instances``).
            args: Extra arguments appended after the operation.

        Returns:
            Raw standard output of the command.

        Raises:
            RetryableError: If the CLI exits non-zero.
        """
        spec = CommandSpec(
            AWS_CLI,
            ["--region", self._region, "--output", "json", service, operation, *args],
            stdout=Redirect.CAPTURE,
            logger=self._logger,
        )
        return self._executor(spec).stdout

    def auto_scaling_groups(self) -> AutoScalingGroups:
        return AutoScalingGroups.model_validate_json(
            self.aws("autoscaling", "describe-auto-scaling-groups"))

    def describe_instances(self, instance_ids: Sequence[str] | None = None) -> Instances:
        """Describe EC2 instances, optionally restricted to *instance_ids*.

        An empty or missing id list describes every instance in the region.
        """
        args: list[str] = []
        if instance_ids:
            args = ["--instance-ids", *instance_ids]
        return Instances.model_validate_json(self.aws("ec2", "describe-instances", args))

    def list_keys(self) -> KmsKeys:
        return KmsKeys.model_validate_json(self.aws("kms", "list-keys"))

    def reap(self, instance_id: str) -> str:
        """Mark an instance unhealthy so its autoscaling group replaces it.

        The replacement itself is not awaited or verified.

        Args:
            instance_id: EC2 instance to mark.

        Returns:
            Raw CLI output of the health mutation.
        """
        self._logger.info("Marking %s as %s", instance_id, HEALTH_STATUS_UNHEALTHY)
        return self.aws("autoscaling", "set-instance-health", [
            "--instance-id", instance_id, "--health-status", HEALTH_STATUS_UNHEALTHY,
        ])
