from __future__ import annotations

import os
from pathlib import Path

import pytest

from bitte_ops.errors import RetryableError
from bitte_ops.shell import CommandSpec, ExecutionResult


class FakeExecutor:
    """Records command specs and replays scripted outputs keyed by argv."""

    def __init__(self, outputs=None, failures=None):
        self.outputs = dict(outputs or {})
        self.failures = dict(failures or {})
        self.calls: list[CommandSpec] = []

    def __call__(self, spec: CommandSpec) -> ExecutionResult:
        self.calls.append(spec)
        key = tuple(spec.argv)
        if key in self.failures:
            raise RetryableError(self.failures[key], spec.argv)
        out = self.outputs.get(key, "")
        if isinstance(out, list):
            out = out.pop(0)
        return ExecutionResult(exit_status=0, stdout=out)

    @property
    def argvs(self) -> list[list[str]]:
        return [spec.argv for spec in self.calls]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in (
        "TERRAFORM_ORGANIZATION",
        "TERRAFORM_TOKEN",
        "TERRAFORM_ADDRESS",
        "TERRAFORM_CREDENTIALS_FILE",
        "AWS_REGION",
        "BITTE_CLUSTER",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def stub_bin(tmp_path, monkeypatch):
    """Install shell-script stand-ins for CLIs at the front of ``PATH``."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def install(name: str, body: str) -> Path:
        path = bin_dir / name
        path.write_text("#!/bin/sh\n" + body)
        path.chmod(0o755)
        return path

    return install
