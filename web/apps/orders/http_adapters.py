"""Order confirmation delivered through a transactional mail HTTP API.

``HttpMailClient`` is the ``Notifier`` used when SMTP is not available to the
deployment and mail goes out through a provider's REST endpoint instead
(``POST {MAIL_API_URL}/messages`` with a bearer API key). The message body is
the same one ``EmailNotifier`` sends.

Calls carry the caller's ``X-Request-ID``, are retried with exponential
backoff on transport errors and 5xx answers, and go through a
``CircuitBreaker`` so a provider outage fails fast instead of tying up the
notification workers.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

import httpx
from django.conf import settings

from gateway.middleware import REQUEST_ID_CTX

from .adapters import render_confirmation
from .domain import Notifier, OrderNotice

logger = logging.getLogger(__name__)


class BreakerState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class CircuitOpen(RuntimeError):
    """The breaker refused the call; the downstream was not contacted."""

    def __init__(self, name: str, state: BreakerState):
        super().__init__(f"{name}: circuit {state.value}")
        self.state = state


class CircuitBreaker:
    """Stop calling a downstream after ``fail_threshold`` consecutive failures.

    Once open, calls are refused for ``reset_timeout`` seconds. The first call
    after that is let through as a trial (HALF_OPEN, one at a time): success
    closes the breaker, failure opens it again for another full timeout.

    Callers pair ``allow()`` with ``record(ok)`` and call ``release()`` when
    the protected block exits.
    """

    def __init__(self, name: str, fail_threshold: int, reset_timeout: float,
                 clock: Callable[[], float] = time.monotonic):
        self.name = name
        self.fail_threshold = fail_threshold
        self.reset_timeout = reset_timeout
        self._clock = clock
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._state = BreakerState.CLOSED
            self._failures = 0
            self._opened_at: Optional[float] = None
            self._trial_running = False

    def _expire(self) -> None:
        # lock held by caller
        if self._state is BreakerState.OPEN and self._clock() - self._opened_at >= self.reset_timeout:
            self._state = BreakerState.HALF_OPEN
            self._trial_running = False

    @property
    def state(self) -> BreakerState:
        with self._lock:
            self._expire()
            return self._state

    def allow(self) -> BreakerState:
        """Admit one call or raise ``CircuitOpen``; returns the state it ran under."""
        with self._lock:
            self._expire()
            if self._state is BreakerState.OPEN or (self._state is BreakerState.HALF_OPEN and self._trial_running):
                raise CircuitOpen(self.name, self._state)
            if self._state is BreakerState.HALF_OPEN:
                self._trial_running = True
            return self._state

    def record(self, ok: bool) -> None:
        with self._lock:
            if ok:
                self._state, self._failures = BreakerState.CLOSED, 0
                return
            self._failures += 1
            if self._state is BreakerState.HALF_OPEN or self._failures >= self.fail_threshold:
                self._state = BreakerState.OPEN
                self._opened_at = self._clock()

    def release(self) -> None:
        with self._lock:
            self._trial_running = False


mail_api_breaker = CircuitBreaker(
    "mail-api",
    getattr(settings, "HTTP_CIRCUIT_FAIL_THRESHOLD", 5),
    getattr(settings, "HTTP_CIRCUIT_RESET_TIMEOUT", 30.0),
)


def _headers(api_key: str, circuit: BreakerState) -> dict:
    headers = {"X-Circuit-State": circuit.value}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    rid = REQUEST_ID_CTX.get()
    if rid and rid != "-":
        headers["X-Request-ID"] = rid
    return headers


def _backoff_delays():
    """Yield the pause before each retry; one value fewer than attempts."""
    attempts = max(1, getattr(settings, "HTTP_RETRY_MAX", 3))
    base = getattr(settings, "HTTP_RETRY_BACKOFF_BASE", 0.15)
    cap = getattr(settings, "HTTP_RETRY_MAX_SLEEP", 0.5)
    for n in range(attempts - 1):
        yield min(base * 2 ** n, cap)


class HttpMailClient(Notifier):
    """Send the confirmation mail through the provider's HTTP API."""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, from_email: str | None = None,
                 timeout: float | None = None, breaker: CircuitBreaker | None = None):
        self.base_url = (base_url or settings.MAIL_API_URL).rstrip("/")
        self.api_key = settings.MAIL_API_KEY if api_key is None else api_key
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECS
        self.breaker = breaker or mail_api_breaker

    def _message(self, notice: OrderNotice) -> dict:
        mail = render_confirmation(notice)
        return {
            "from": self.from_email,
            "to": [{"email": notice.customer_email, "name": notice.customer_name}],
            "subject": mail.subject,
            "text": mail.text,
            "html": mail.html,
            "metadata": {"order_id": str(notice.order_id), "order_number": notice.number},
        }

    def order_created(self, notice: OrderNotice) -> None:
        """Hand the confirmation to the mail API.

        2xx means accepted. 4xx means the provider rejected the message: it
        is raised at once and does not count against the breaker. Transport
        errors and 5xx are retried and, once retries run out, raised and
        counted as a breaker failure.

        Raises:
            CircuitOpen: The breaker refused the call.
            httpx.RequestError: Transport failure on the last attempt.
            httpx.HTTPStatusError: A rejection, or a 5xx on the last attempt.
        """
        message = self._message(notice)
        headers = _headers(self.api_key, self.breaker.allow())
        delays = _backoff_delays()
        retries = 0
        try:
            with httpx.Client(timeout=self.timeout) as client:
                while True:
                    headers["X-Retry-Count"] = str(retries)
                    try:
                        resp = client.post(f"{self.base_url}/messages", json=message, headers=headers)
                        failure = None
                    except httpx.RequestError as e:
                        resp, failure = None, e

                    if resp is not None and resp.status_code < 500:
                        self.breaker.record(True)
                        if resp.status_code >= 300:
                            resp.raise_for_status()
                        return

                    delay = next(delays, None)
                    if delay is None:
                        self.breaker.record(False)
                        logger.warning(
                            "mail API unavailable",
                            extra={"order_id": str(notice.order_id), "attempts": retries + 1},
                        )
                        if failure is not None:
                            raise failure
                        resp.raise_for_status()
                        return
                    retries += 1
                    time.sleep(delay)
        finally:
            self.breaker.release()
