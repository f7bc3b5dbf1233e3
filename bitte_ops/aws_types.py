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

"""Typed views of the JSON documents returned by the AWS CLI.

Only the fields the orchestration layer routes on are modelled; everything
else in a response is ignored. Field names map to the CLI's PascalCase keys.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class _AwsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, frozen=True, extra="ignore")


class Tag(_AwsModel):
    """Key/value tag attached to a resource."""

    key: str
    value: str


# ============================================================================
# Autoscaling
# ============================================================================

class AsgInstance(_AwsModel):
    """Instance membership record inside an autoscaling group."""

    instance_id: str
    availability_zone: str
    lifecycle_state: str
    health_status: str
    instance_type: str | None = None
    protected_from_scale_in: bool = False


class AutoScalingGroup(_AwsModel):
    """Autoscaling group with its capacity bounds and member instances."""

    auto_scaling_group_name: str
    auto_scaling_group_arn: str | None = Field(default=None, alias="AutoScalingGroupARN")
    min_size: int
    max_size: int
    desired_capacity: int
    availability_zones: tuple[str, ...] = ()
    instances: tuple[AsgInstance, ...] = ()
    tags: tuple[Tag, ...] = ()


class AutoScalingGroups(_AwsModel):
    """Response of ``autoscaling describe-auto-scaling-groups``."""

    auto_scaling_groups: tuple[AutoScalingGroup, ...]
    next_token: str | None = None

    def by_name(self, name: str) -> AutoScalingGroup | None:
        """Return the group called *name*, or None."""
        for group in self.auto_scaling_groups:
            if group.auto_scaling_group_name == name:
                return group
        return None


# ============================================================================
# EC2
# ============================================================================

class InstanceState(_AwsModel):
    code: int
    name: str


class Instance(_AwsModel):
    """EC2 instance as reported by ``ec2 describe-instances``."""

    instance_id: str
    instance_type: str | None = None
    state: InstanceState
    launch_time: datetime | None = None
    private_ip_address: str | None = None
    public_ip_address: str | None = None
    private_dns_name: str | None = None
    public_dns_name: str | None = None
    tags: tuple[Tag, ...] = ()

    @property
    def name(self) -> str | None:
        """Value of the ``Name`` tag, if any."""
        for tag in self.tags:
            if tag.key == "Name":
                return tag.value
        return None


class Reservation(_AwsModel):
    reservation_id: str
    owner_id: str | None = None
    instances: tuple[Instance, ...] = ()


class Instances(_AwsModel):
    """Response of ``ec2 describe-instances``."""

    reservations: tuple[Reservation, ...]
    next_token: str | None = None

    @property
    def instances(self) -> list[Instance]:
        """All instances across reservations, in response order."""
        return [instance for reservation in self.reservations for instance in reservation.instances]


# ============================================================================
# KMS
# ============================================================================

class KmsKey(_AwsModel):
    key_id: str
    key_arn: str


class KmsKeys(_AwsModel):
    """Response of ``kms list-keys``."""

    keys: tuple[KmsKey, ...]
    truncated: bool = False
    next_marker: str | None = None
