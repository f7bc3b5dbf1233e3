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

"""Executable names, environment variables, paths, and retry bounds."""

from __future__ import annotations

from pathlib import Path

# -- Executables --
AWS_CLI = "aws"
TERRAFORM_CLI = "terraform"
NIX_CLI = "nix"

# -- Environment --
ENV_TERRAFORM_ORGANIZATION = "TERRAFORM_ORGANIZATION"

# -- Relative paths --
TERRAFORM_STATE_FILE = Path(".terraform") / "terraform.tfstate"
SECRETS_DIR = Path("secrets")
ENCRYPTED_DIR = Path("encrypted")
SSH_KEY_PREFIX = "ssh-"

# -- Terraform Cloud --
DEFAULT_TERRAFORM_ADDRESS = "https://app.terraform.io"
TERRAFORM_CREDENTIALS_FILE = Path("~/.terraform.d/credentials.tfrc.json")
TERRAFORM_API_CONTENT_TYPE = "application/vnd.api+json"
TERRAFORM_API_TIMEOUT_SECONDS = 30.0
TERRAFORM_API_PAGE_SIZE = 100

# -- Cloud CLI --
DEFAULT_AWS_REGION = "eu-central-1"
HEALTH_STATUS_UNHEALTHY = "Unhealthy"

# -- Reachability --
SSH_PORT = 22
SSH_WAIT_RETRIES = 120
SSH_WAIT_MAX_ATTEMPTS = SSH_WAIT_RETRIES + 1
SSH_WAIT_INTERVAL_SECONDS = 1
SSH_CONNECT_TIMEOUT_SECONDS = 5.0
