"""
Image download helpers.

Posts carry the absolute URLs of every image they depend on.  The functions
here fetch those URLs into a post's ``images/`` directory.  A simple rate
limiter keeps the run from hammering the old WordPress host, and a generic
retry wrapper handles transient network errors and server-side rate
limiting responses (429 or 5xx).
"""

from __future__ import annotations

import os
import time
from typing import Callable, Dict, Optional

import requests

from .urls import filename_from_url

DEFAULT_TIMEOUT = 30

###############################################################################
# Rate limiting and retry utilities
###############################################################################

class RateLimiter:
    """
    Simple time-based rate limiter.  Ensures that no more than ``rpm``
    requests are dispatched per minute.
    """

    def __init__(self, rpm: int = 120) -> None:
        self.rpm = max(1, rpm)
        self.interval = 60.0 / float(self.rpm)
        self._last = 0.0

    def wait(self, time_fn: Callable[[], float] = time.time, sleep_fn: Callable[[float], None] = time.sleep) -> None:
        now = time_fn()
        dt = now - self._last
        if dt < self.interval:
            sleep_fn(self.interval - dt)
        self._last = time_fn()


def with_retries(
    fn: Callable[[], requests.Response],
    *,
    max_attempts: int = 4,
    base_delay: float = 0.7,
    sleep_fn: Optional[Callable[[float], None]] = None,
) -> requests.Response:
    """
    Execute a function returning a ``requests.Response``, retrying on
    transient HTTP errors.  Retries are attempted on status codes 429
    (too many requests) and 5xx server errors, and on transport errors.
    Backoff is exponential unless the server sends ``Retry-After``.

    :param fn: A zero-argument callable that performs the HTTP request.
    :param max_attempts: Maximum number of attempts before giving up.
    :param base_delay: Base delay in seconds for exponential backoff.
    :return: The successful ``requests.Response``.
    :raises requests.HTTPError: if all attempts fail.
    """
    sleep_fn = sleep_fn or time.sleep
    attempt = 0
    while True:
        try:
            resp = fn()
            resp.raise_for_status()
            return resp
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status not in (429, 500, 502, 503, 504) or attempt >= max_attempts - 1:
                raise
            retry_after = e.response.headers.get("Retry-After")
            if retry_after and retry_after.isdigit():
                wait = float(retry_after)
            else:
                wait = base_delay * (2 ** attempt)
            sleep_fn(wait)
            attempt += 1
        except requests.RequestException:
            if attempt >= max_attempts - 1:
                raise
            sleep_fn(base_delay * (2 ** attempt))
            attempt += 1


def download_image(
    url: str,
    images_dir: str,
    *,
    limiter: Optional[RateLimiter] = None,
    session: Optional[requests.Session] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Download ``url`` into ``images_dir`` under its URL-derived filename.

    Returns the written path, or ``None`` when the file already existed.
    Network errors propagate to the caller after retries are exhausted.
    """
    filename = filename_from_url(url)
    target = os.path.join(images_dir, filename)
    if os.path.exists(target):
        return None

    getter = session.get if session is not None else requests.get
    if limiter is not None:
        limiter.wait()

    def do_request() -> requests.Response:
        return getter(url, headers=headers, timeout=DEFAULT_TIMEOUT)

    resp = with_retries(do_request)
    os.makedirs(images_dir, exist_ok=True)
    with open(target, "wb") as f:
        f.write(resp.content)
    return target
