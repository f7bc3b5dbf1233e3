"""Tests for the bounded SSH reachability poll."""

from __future__ import annotations

import errno
import socket
from unittest.mock import MagicMock

import pytest

from bitte_ops import reachability
from bitte_ops.constants import SSH_CONNECT_TIMEOUT_SECONDS
from bitte_ops.errors import ReachabilityError
from bitte_ops.reachability import is_connect_error, wait_for_connection


class FakeConnector:
    """Stands in for socket.create_connection, failing a fixed number of times."""

    def __init__(self, failures: int | None, error: OSError | None = None):
        self.failures = failures
        self.error = error or ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused")
        self.addresses: list[tuple[str, int]] = []
        self.timeouts: list[float | None] = []
        self.connection = MagicMock()

    def __call__(self, address, timeout=None, *args, **kwargs):
        self.addresses.append(address)
        self.timeouts.append(timeout)
        if self.failures is None or len(self.addresses) <= self.failures:
            raise self.error
        return self.connection


@pytest.fixture
def sleeps() -> list[float]:
    return []


def _patch(monkeypatch, connector: FakeConnector) -> FakeConnector:
    monkeypatch.setattr(reachability.socket, "create_connection", connector)
    return connector


class TestWaitForConnection:

    def test_immediate_success_closes_connection(self, monkeypatch, sleeps):
        connector = _patch(monkeypatch, FakeConnector(failures=0))
        wait_for_connection("10.0.0.5", sleep=sleeps.append)
        assert connector.addresses == [("10.0.0.5", 22)]
        connector.connection.__exit__.assert_called_once()
        assert sleeps == []

    def test_success_on_third_attempt(self, monkeypatch, sleeps):
        connector = _patch(monkeypatch, FakeConnector(failures=2))
        wait_for_connection("10.0.0.5", sleep=sleeps.append)
        assert len(connector.addresses) == 3
        assert sleeps == [1, 1]

    def test_never_accepting_exhausts_121_attempts(self, monkeypatch, sleeps):
        connector = _patch(monkeypatch, FakeConnector(failures=None))
        with pytest.raises(ReachabilityError, match="10.0.0.5") as exc_info:
            wait_for_connection("10.0.0.5", sleep=sleeps.append)
        assert len(connector.addresses) == 121
        assert sleeps == [1] * 120
        assert exc_info.value.attempts == 121
        assert exc_info.value.port == 22
        assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)

    def test_custom_port_and_bound(self, monkeypatch, sleeps):
        connector = _patch(monkeypatch, FakeConnector(failures=None))
        with pytest.raises(ReachabilityError, match="example.internal:2222"):
            wait_for_connection("example.internal", 2222, attempts=4, interval=0.5, sleep=sleeps.append)
        assert connector.addresses == [("example.internal", 2222)] * 4
        assert sleeps == [0.5] * 3

    def test_unreachable_host_is_retried(self, monkeypatch, sleeps):
        error = OSError(errno.EHOSTUNREACH, "No route to host")
        connector = _patch(monkeypatch, FakeConnector(failures=1, error=error))
        wait_for_connection("10.0.0.5", sleep=sleeps.append)
        assert len(connector.addresses) == 2

    @pytest.mark.parametrize("code", [errno.EHOSTDOWN, errno.ENETDOWN, errno.EADDRNOTAVAIL])
    def test_booting_network_errors_are_retried(self, monkeypatch, sleeps, code):
        connector = _patch(monkeypatch, FakeConnector(failures=2, error=OSError(code, "not yet")))
        wait_for_connection("10.0.0.5", sleep=sleeps.append)
        assert len(connector.addresses) == 3
        assert sleeps == [1, 1]

    def test_each_attempt_is_time_bounded(self, monkeypatch, sleeps):
        connector = _patch(monkeypatch, FakeConnector(failures=1, error=TimeoutError("timed out")))
        wait_for_connection("10.0.0.5", sleep=sleeps.append)
        assert connector.timeouts == [SSH_CONNECT_TIMEOUT_SECONDS] * 2

    def test_custom_attempt_timeout(self, monkeypatch, sleeps):
        connector = _patch(monkeypatch, FakeConnector(failures=0))
        wait_for_connection("10.0.0.5", timeout=0.25, sleep=sleeps.append)
        assert connector.timeouts == [0.25]

    def test_dns_failure_propagates_immediately(self, monkeypatch, sleeps):
        error = socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        connector = _patch(monkeypatch, FakeConnector(failures=None, error=error))
        with pytest.raises(socket.gaierror):
            wait_for_connection("nope.invalid", sleep=sleeps.append)
        assert len(connector.addresses) == 1
        assert sleeps == []

    def test_other_os_error_propagates_immediately(self, monkeypatch, sleeps):
        error = PermissionError(errno.EACCES, "Permission denied")
        connector = _patch(monkeypatch, FakeConnector(failures=None, error=error))
        with pytest.raises(PermissionError):
            wait_for_connection("10.0.0.5", sleep=sleeps.append)
        assert len(connector.addresses) == 1


class TestIsConnectError:

    @pytest.mark.parametrize("exc", [
        ConnectionRefusedError(errno.ECONNREFUSED, "refused"),
        TimeoutError("timed out"),
        OSError(errno.ETIMEDOUT, "timed out"),
        OSError(errno.EHOSTUNREACH, "no route"),
        OSError(errno.ENETUNREACH, "network unreachable"),
        OSError(errno.EHOSTDOWN, "host is down"),
        OSError(errno.ENETDOWN, "network is down"),
        OSError(errno.EADDRNOTAVAIL, "address not available"),
    ])
    def test_connect_errors(self, exc):
        assert is_connect_error(exc)

    @pytest.mark.parametrize("exc", [
        socket.gaierror(socket.EAI_NONAME, "unknown host"),
        PermissionError(errno.EACCES, "denied"),
        ConnectionResetError(errno.ECONNRESET, "reset"),
        ValueError("not a socket error"),
    ])
    def test_other_errors(self, exc):
        assert not is_connect_error(exc)
