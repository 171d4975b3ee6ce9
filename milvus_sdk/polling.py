"""
Bounded polling used to turn the server's asynchronous operations (load,
flush, index build) into blocking calls.
"""
import logging
import time
from typing import Any, Callable, Optional

from pymilvus.grpc_gen import common_pb2

from .models import R

logger = logging.getLogger(__name__)


class SyncPoller:
    """
    Repeatedly probe the server until an operation completes.

    Each round calls ``probe``. A non-successful probe result is returned as
    is, without another attempt. Otherwise ``is_failed`` may name a failure
    reason, which ends the wait with ``SERVER_ERROR``; ``is_complete`` ends it
    with success. Once ``timeout`` seconds have passed since the first probe
    the result is ``WAIT_TIMEOUT``; until then the poller sleeps ``interval``
    seconds between rounds.
    """

    def __init__(
        self,
        probe: Callable[[], R],
        is_complete: Callable[[Any], bool],
        interval: float,
        timeout: float,
        description: str,
        is_failed: Optional[Callable[[Any], Optional[str]]] = None,
        failure_code: int = common_pb2.ErrorCode.UnexpectedError,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.probe = probe
        self.is_complete = is_complete
        self.interval = interval
        self.timeout = timeout
        self.description = description
        self.is_failed = is_failed
        self.failure_code = int(failure_code)
        self._clock = clock
        self._sleep = sleep

    def wait(self) -> R:
        """Poll until completion, failure or timeout.

        Returns a successful ``R`` carrying the last probe payload on
        completion.
        """
        start = self._clock()
        rounds = 0
        while True:
            rounds += 1
            result = self.probe()
            if not result.ok:
                logger.warning("Stopped waiting for %s: probe returned %s (%s)",
                               self.description, result.status.value, result.message)
                return result
            if self.is_failed is not None:
                reason = self.is_failed(result.data)
                if reason is not None:
                    logger.warning("Stopped waiting for %s: %s", self.description, reason)
                    return R.server_error(self.failure_code, reason)
            if self.is_complete(result.data):
                logger.debug("%s completed after %d round(s)", self.description, rounds)
                return result
            elapsed = self._clock() - start
            if elapsed >= self.timeout:
                logger.warning("Timed out waiting for %s after %.1f seconds", self.description, elapsed)
                return R.wait_timeout(f"Waiting for {self.description} timed out after {self.timeout} seconds")
            logger.debug("Waiting for %s, round %d", self.description, rounds)
            self._sleep(self.interval)
