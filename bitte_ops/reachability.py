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

"""Wait for a freshly provisioned node to accept TCP connections."""

from __future__ import annotations

import errno
import logging
import socket
import time
from collections.abc import Callable

from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception, stop_after_attempt, wait_fixed

from bitte_ops import component_logger
from bitte_ops.constants import (
    SSH_CONNECT_TIMEOUT_SECONDS,
    SSH_PORT,
    SSH_WAIT_INTERVAL_SECONDS,
    SSH_WAIT_MAX_ATTEMPTS,
)
from bitte_ops.errors import ReachabilityError

_CONNECT_ERRNOS = frozenset({
    errno.ECONNREFUSED,
    errno.EHOSTUNREACH,
    errno.EHOSTDOWN,
    errno.ENETUNREACH,
    errno.ENETDOWN,
    errno.EADDRNOTAVAIL,
    errno.ETIMEDOUT,
})


def is_connect_error(exc: BaseException) -> bool:
    """Whether *exc* means the connection could not be established.

    Name resolution failures and other socket errors are not connect errors.
    """
    if isinstance(exc, socket.gaierror):
        return False
    if isinstance(exc, (ConnectionRefusedError, TimeoutError)):
        return True
    return isinstance(exc, OSError) and exc.errno in _CONNECT_ERRNOS


def _connect(host: str, port: int, timeout: float) -> None:
    with socket.create_connection((host, port), timeout=timeout):
        pass


def wait_for_connection(
    host: str,
    port: int = SSH_PORT,
    *,
    attempts: int = SSH_WAIT_MAX_ATTEMPTS,
    interval: float = SSH_WAIT_INTERVAL_SECONDS,
    timeout: float = SSH_CONNECT_TIMEOUT_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    logger: logging.Logger | None = None,
) -> None:
    """Block until *host* accepts a connection on *port*.

    Makes up to *attempts* connection attempts, sleeping *interval* seconds
    between them; the defaults give roughly two minutes against a host that
    refuses, and each attempt gives up after *timeout* seconds against one
    that drops packets. The connection is closed as soon as it is
    established.

    Args:
        host: Host name or IP address.
        port: TCP port, 22 by default.
        attempts: Total number of attempts, including the first.
        interval: Seconds to sleep after each failed attempt.
        timeout: Seconds a single attempt may wait for the handshake.
        sleep: Sleep function used between attempts.
        logger: Logger handle, or None for the component default.

    Raises:
        ReachabilityError: If no attempt succeeded.
        OSError: Any non-connect failure (e.g. DNS), raised on the attempt it occurs.
    """
    log = logger or component_logger("reachability")
    log.debug("Connecting to %s:%d...", host, port)

    def _log_retry(retry_state: RetryCallState) -> None:
        remaining = attempts - retry_state.attempt_number
        log.debug("Connection to %s failed again. %d attempts remaining", host, remaining)

    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(interval),
        retry=retry_if_exception(is_connect_error),
        before_sleep=_log_retry,
        sleep=sleep,
    )
    try:
        retrying(_connect, host, port, timeout)
    except RetryError as err:
        raise ReachabilityError(host, port, attempts) from err.last_attempt.exception()

    log.debug("Connected to %s.", host)
