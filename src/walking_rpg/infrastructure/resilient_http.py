import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx


logger = logging.getLogger(__name__)

RETRY_STATUSES = frozenset({408, 425, 429, 500, 502, 503, 504})
TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


class CircuitOpenError(RuntimeError):
    """A webhook host failed too often and is being skipped for a while."""


class CircuitBreaker:
    """Counts transient failures per host and blocks it once ``threshold`` is reached."""

    def __init__(
        self,
        threshold: int = 3,
        cooldown_seconds: float = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.threshold = max(1, int(threshold))
        self.cooldown_seconds = max(0.0, float(cooldown_seconds))
        self._clock = clock
        self._failures: Dict[str, int] = {}
        self._blocked_until: Dict[str, float] = {}

    def check(self, host: str) -> None:
        until = self._blocked_until.get(host)
        if until is None:
            return
        if self._clock() < until:
            raise CircuitOpenError(f"skipping {host} after {self._failures.get(host, 0)} failures")
        # Cooldown over: give the host a fresh start.
        self.succeeded(host)

    def failed(self, host: str) -> None:
        count = self._failures.get(host, 0) + 1
        self._failures[host] = count
        if count >= self.threshold:
            self._blocked_until[host] = self._clock() + self.cooldown_seconds
            logger.warning("Webhook host blocked", extra={"host": host, "failures": count})

    def succeeded(self, host: str) -> None:
        self._failures.pop(host, None)
        self._blocked_until.pop(host, None)

    def reset(self) -> None:
        self._failures.clear()
        self._blocked_until.clear()


DEFAULT_BREAKER = CircuitBreaker()


def reset_circuit_breakers() -> None:
    DEFAULT_BREAKER.reset()


def _host_of(client: httpx.Client, path: str) -> str:
    base = str(getattr(client, "base_url", "") or "")
    if base:
        return base
    return httpx.URL(path).host or path


def _json_body(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {"text": response.text}
    return body if isinstance(body, dict) else {"results": body}


def post_json_with_retry(
    client: httpx.Client,
    path: str,
    *,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    retries: int = 0,
    backoff_seconds: float = 0.2,
    breaker: Optional[CircuitBreaker] = None,
) -> Dict[str, Any]:
    """POST ``payload`` as JSON, retrying timeouts and 5xx-style statuses with doubling backoff."""
    breaker = breaker or DEFAULT_BREAKER
    host = _host_of(client, path)
    attempts = max(0, int(retries)) + 1

    for attempt in range(1, attempts + 1):
        breaker.check(host)
        try:
            response = client.post(path, json=payload, headers=headers)
            transient = response.status_code in RETRY_STATUSES
            if not transient:
                response.raise_for_status()
        except TRANSIENT_ERRORS:
            breaker.failed(host)
            if attempt == attempts:
                raise
        else:
            if not transient:
                breaker.succeeded(host)
                return _json_body(response)
            breaker.failed(host)
            if attempt == attempts:
                response.raise_for_status()

        delay = max(0.0, backoff_seconds) * 2 ** (attempt - 1)
        logger.info("Retrying webhook post", extra={"host": host, "attempt": attempt, "delay": delay})
        if delay:
            time.sleep(delay)

    return {}
