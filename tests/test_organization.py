"""Tests for Terraform organization resolution."""

from __future__ import annotations

import json

import pytest

from bitte_ops.config import TerraformSettings
from bitte_ops.errors import OrganizationNotFoundError
from bitte_ops.organization import LocalTerraformState, resolve_organization


@pytest.fixture
def state_file(tmp_path):
    path = tmp_path / ".terraform" / "terraform.tfstate"
    path.parent.mkdir()
    path.write_text(json.dumps({
        "version": 3,
        "serial": 1,
        "backend": {
            "type": "remote",
            "config": {"hostname": "app.terraform.io", "organization": "org-b"},
        },
    }))
    return path


def test_environment_wins_without_reading_state(monkeypatch, state_file):
    monkeypatch.setenv("TERRAFORM_ORGANIZATION", "org-a")

    def _fail(*args, **kwargs):
        raise AssertionError("state file must not be read")

    monkeypatch.setattr(LocalTerraformState, "load", _fail)
    assert resolve_organization(state_file=state_file) == "org-a"


def test_falls_back_to_state_file(state_file):
    assert resolve_organization(state_file=state_file) == "org-b"


def test_empty_environment_value_is_ignored(monkeypatch, state_file):
    monkeypatch.setenv("TERRAFORM_ORGANIZATION", "")
    assert resolve_organization(state_file=state_file) == "org-b"


def test_explicit_settings(state_file):
    assert resolve_organization(TerraformSettings(organization="org-c"), state_file) == "org-c"


def test_missing_state_file_is_fatal(tmp_path):
    with pytest.raises(OrganizationNotFoundError, match="TERRAFORM_ORGANIZATION"):
        resolve_organization(state_file=tmp_path / "terraform.tfstate")


@pytest.mark.parametrize("content", [
    "not json",
    json.dumps({"version": 3}),
    json.dumps({"backend": {"config": {}}}),
    json.dumps({"backend": {"config": {"organization": 42}}}),
])
def test_malformed_state_file_is_fatal(tmp_path, content):
    path = tmp_path / "terraform.tfstate"
    path.write_text(content)
    with pytest.raises(OrganizationNotFoundError):
        resolve_organization(state_file=path)
