"""Outbound HTTP with a bounded timeout, a small retry budget and cancellation.

Transport failures, HTTP 429 and 5xx responses are retried; a numeric
``Retry-After`` header on 429 overrides the configured delay. Any other HTTP
error is raised immediately. A caller-supplied ``threading.Event`` cancels the
call between attempts and interrupts the back-off sleep.
"""

import logging
import threading
import time
from typing import Any, Dict, Optional

import requests

from airport_search.errors import OperationCancelled

LOGGER = logging.getLogger(__name__)

USER_AGENT = "airport-search/1.0"
MAX_RETRY_AFTER_SECONDS = 30.0


def check_cancelled(cancel_event: Optional[threading.Event], what: str = "operation") -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelled(f"{what} cancelled")


def _is_retryable(exc: requests.RequestException) -> bool:
    if isinstance(exc, requests.HTTPError):
        status = getattr(exc.response, "status_code", None)
        return status is not None and (status == 429 or status >= 500)
    return True


def _retry_delay(exc: requests.RequestException, delay_seconds: float) -> float:
    response = getattr(exc, "response", None)
    if response is None or getattr(response, "status_code", None) != 429:
        return delay_seconds
    retry_after = response.headers.get("Retry-After")
    try:
        # Retry-After can be seconds or an HTTP date; only seconds are honoured
        seconds = float(retry_after) if retry_after is not None else delay_seconds * 2
    except (TypeError, ValueError):
        seconds = delay_seconds * 2
    return min(max(seconds, 0.0), MAX_RETRY_AFTER_SECONDS)


def _sleep(seconds: float, cancel_event: Optional[threading.Event], what: str) -> None:
    if seconds <= 0:
        return
    if cancel_event is None:
        time.sleep(seconds)
    elif cancel_event.wait(seconds):
        raise OperationCancelled(f"{what} cancelled")


def send_with_retries(
    session: requests.Session,
    method: str,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Dict[str, Any]] = None,
    timeout: float = 10.0,
    attempts: int = 2,
    delay_seconds: float = 1.0,
    cancel_event: Optional[threading.Event] = None,
    label: str = "http",
) -> requests.Response:
    """Send a request and return the successful response.

    Raises:
        OperationCancelled: if ``cancel_event`` is set before or between attempts.
        requests.RequestException: the last failure once the budget is spent.
    """
    attempts = max(1, int(attempts))
    for attempt in range(1, attempts + 1):
        check_cancelled(cancel_event, label)
        try:
            response = session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=timeout,
                headers={"User-Agent": USER_AGENT},
            )
            response.raise_for_status()
            return response
        except requests.RequestException as exc:
            if attempt == attempts or not _is_retryable(exc):
                LOGGER.warning(
                    "%s request failed (attempt %s/%s), giving up: %s",
                    label,
                    attempt,
                    attempts,
                    exc,
                )
                raise
            sleep_s = _retry_delay(exc, delay_seconds)
            LOGGER.warning(
                "%s request failed (attempt %s/%s), retrying in %.1fs: %s",
                label,
                attempt,
                attempts,
                sleep_s,
                exc,
            )
            _sleep(sleep_s, cancel_event, label)
    raise AssertionError("unreachable")  # pragma: no cover


def get_json(session: requests.Session, url: str, **kwargs: Any) -> Any:
    return send_with_retries(session, "GET", url, **kwargs).json()


def post_json(session: requests.Session, url: str, payload: Dict[str, Any], **kwargs: Any) -> Any:
    return send_with_retries(session, "POST", url, json=payload, **kwargs).json()


def get_text(session: requests.Session, url: str, **kwargs: Any) -> str:
    return send_with_retries(session, "GET", url, **kwargs).text


__all__ = [
    "MAX_RETRY_AFTER_SECONDS",
    "USER_AGENT",
    "check_cancelled",
    "get_json",
    "get_text",
    "post_json",
    "send_with_retries",
]
