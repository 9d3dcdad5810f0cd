"""Base fetcher, upstream error types and the rate-limit aware GET helper."""

import logging
from typing import Optional

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from config import AppConfig

logger = logging.getLogger(__name__)

USER_AGENT = "steam-update-notifier/0.1 (Steam news and build update notifier)"
DEFAULT_TIMEOUT = 5
RATE_LIMIT_BACKOFF = 10
RATE_LIMIT_MAX_ATTEMPTS = 5

# Statuses that mean "come back later" rather than "this request is wrong"
RETRYABLE_STATUSES = (429, 503)


class UpstreamError(Exception):
    """Non-retryable failure talking to an upstream source."""

    def __init__(self, status: Optional[int], url: str, detail: str = ""):
        self.status = status
        self.url = url
        message = f"Upstream error {status} from {url}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class RateLimited(UpstreamError):
    """Raised on 429/503. Retried with a fixed backoff, re-raised after the cap."""


class ParseError(Exception):
    """Upstream payload or tool output did not have the expected shape."""


def _get_once(url: str, timeout: float) -> bytes:
    try:
        resp = requests.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
    except requests.RequestException as e:
        raise UpstreamError(None, url, str(e)) from e

    if resp.status_code in RETRYABLE_STATUSES:
        raise RateLimited(resp.status_code, url)
    if not 200 <= resp.status_code < 300:
        raise UpstreamError(resp.status_code, url)
    return resp.content


def fetch(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    backoff_seconds: float = RATE_LIMIT_BACKOFF,
    max_attempts: int = RATE_LIMIT_MAX_ATTEMPTS,
) -> bytes:
    """GET url and return the raw body.

    Rate-limit responses are retried after a fixed sleep, up to max_attempts
    requests in total; the last RateLimited is then re-raised. Any other
    non-2xx status or transport failure raises UpstreamError immediately.
    """
    logger.debug("GET %s", url)
    retryer = Retrying(
        retry=retry_if_exception_type(RateLimited),
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(backoff_seconds),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retryer(_get_once, url, timeout)


class BaseFetcher:
    """Shares request settings from AppConfig between the Steam API fetchers."""

    def __init__(self, config: AppConfig):
        self._timeout = config.request_timeout_seconds
        self._backoff = config.rate_limit_backoff_seconds
        self._max_attempts = config.rate_limit_max_attempts

    def _get(self, url: str) -> bytes:
        return fetch(
            url,
            timeout=self._timeout,
            backoff_seconds=self._backoff,
            max_attempts=self._max_attempts,
        )
