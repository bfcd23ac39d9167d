"""
Module: fetching.client

Purpose:
    Shared HTTP session and the retry loop used for every request the
    tool makes (image downloads and card lookups).

Key Functions:
    - create_session(): One pooled requests.Session per run
    - request_with_retry(): GET with bounded attempts and backoff
    - backoff_delay(): Seconds to wait before the next attempt
    - read_json(): Decode a JSON body without triggering a retry

Retry policy:
    - 2xx: success
    - 429: wait Retry-After seconds when it is a plain integer,
      otherwise 2**attempt seconds
    - 408/5xx and transport errors: wait 2**attempt seconds
    - any other status: PermanentHTTPError, no retry
    - no wait after the final attempt

Dependencies:
    - requests: HTTP client and connection pooling

Used By:
    - fetching.fetcher: Image downloads
    - resolving.local, resolving.remote: JSON lookups
    - controller: Session lifecycle
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Mapping, Optional, Tuple, TypeVar

import requests
from requests.adapters import HTTPAdapter

from .config import FetchConfig
from .errors import (
    FetchError,
    InvalidResponseError,
    PermanentHTTPError,
    RateLimitedError,
    RetriesExhaustedError,
    TransientTransportError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOO_MANY_REQUESTS = 429
REQUEST_TIMEOUT = 408


def create_session(config: FetchConfig, pool_size: int = 10) -> requests.Session:
    """
    Build the HTTP session shared by all workers of a run.

    The session is configured once and only read afterwards. Retries are
    handled by request_with_retry, so the adapter itself never retries.

    Args:
        config: Fetch configuration (user agent)
        pool_size: Connections kept per host, at least the worker count

    Returns:
        Configured requests.Session

    Example:
        >>> with create_session(FetchConfig(), pool_size=8) as session:
        ...     fetcher = AssetFetcher(session, FetchConfig())
    """
    adapter = HTTPAdapter(
        pool_connections=pool_size,
        pool_maxsize=pool_size,
        max_retries=0,
    )
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"User-Agent": config.user_agent})
    return session


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Return Retry-After as whole seconds, or None if missing or not an integer."""
    if value is None:
        return None
    value = value.strip()
    # isdigit() alone lets through non-ASCII digits such as "²"
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def backoff_delay(attempt: int, response: Optional[requests.Response] = None) -> float:
    """
    Seconds to sleep after a failed attempt.

    Args:
        attempt: 1-based number of the attempt that just failed
        response: Response of that attempt, if one was received

    Returns:
        Retry-After for a 429 carrying a numeric header, else 2**attempt
    """
    if response is not None and response.status_code == TOO_MANY_REQUESTS:
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        if retry_after is not None:
            return float(retry_after)
    return float(2 ** attempt)


def _is_retryable_status(status: int) -> bool:
    return status == TOO_MANY_REQUESTS or status == REQUEST_TIMEOUT or 500 <= status < 600


def request_with_retry(
    session: requests.Session,
    url: str,
    *,
    config: FetchConfig,
    consume: Callable[[requests.Response], T],
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Dict[str, str]] = None,
    stream: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[T, int]:
    """
    GET a URL until it succeeds, fails permanently, or runs out of attempts.

    consume() runs inside the attempt loop on the successful response, so
    a connection dropped while reading the body counts as a transport
    error and is retried like any other. The response is always closed.

    Args:
        session: Shared HTTP session
        url: Target URL
        config: Attempt ceiling and timeout
        consume: Turns the successful response into the result
        headers: Extra per-request headers
        params: Query parameters
        stream: Stream the body instead of loading it eagerly
        sleep: Sleep function (injected by tests)

    Returns:
        Tuple of (consume() result, attempts used)

    Raises:
        PermanentHTTPError: Non-retryable status
        RetriesExhaustedError: Attempt ceiling reached
        FetchError: Raised by consume(), with attempts filled in
    """
    last_error: Optional[FetchError] = None
    last_status: Optional[int] = None

    for attempt in range(1, config.max_attempts + 1):
        is_last = attempt == config.max_attempts

        try:
            response = session.get(
                url,
                headers=dict(headers or {}),
                params=params,
                stream=stream,
                timeout=config.timeout,
            )
        except requests.RequestException as e:
            last_error = TransientTransportError(
                f"{type(e).__name__}: {e}", url=url, attempts=attempt,
            )
            last_status = None
            if is_last:
                break
            delay = backoff_delay(attempt)
            logger.warning(
                f"Transport error for {url} (attempt {attempt}/{config.max_attempts}): "
                f"{e}. Retrying in {delay:.0f}s"
            )
            sleep(delay)
            continue

        try:
            status = response.status_code
            if 200 <= status < 300:
                try:
                    return consume(response), attempt
                except requests.RequestException as e:
                    last_error = TransientTransportError(
                        f"{type(e).__name__} while reading body: {e}",
                        url=url, status=status, attempts=attempt,
                    )
                    last_status = status
                except FetchError as e:
                    e.url = e.url or url
                    e.attempts = attempt
                    raise
            elif _is_retryable_status(status):
                last_status = status
                error_type = RateLimitedError if status == TOO_MANY_REQUESTS else TransientTransportError
                last_error = error_type(f"HTTP {status}", url=url, status=status, attempts=attempt)
            else:
                raise PermanentHTTPError(
                    f"HTTP {status} for {url}", url=url, status=status, attempts=attempt,
                )

            if is_last:
                break
            delay = backoff_delay(attempt, response)
        finally:
            response.close()

        if last_status == TOO_MANY_REQUESTS:
            logger.warning(
                f"Rate limited on {url} (attempt {attempt}/{config.max_attempts}). "
                f"Retrying in {delay:.0f}s"
            )
        else:
            logger.warning(
                f"{last_error} for {url} (attempt {attempt}/{config.max_attempts}). "
                f"Retrying in {delay:.0f}s"
            )
        sleep(delay)

    detail = f"HTTP {last_status}" if last_status is not None else str(last_error)
    raise RetriesExhaustedError(
        f"Gave up on {url} after {config.max_attempts} attempt(s), last error: {detail}",
        url=url,
        status=last_status,
        attempts=config.max_attempts,
        last_error=last_error,
    )


def read_json(response: requests.Response):
    """
    Decode a JSON response body.

    requests' JSONDecodeError is a RequestException, which the retry loop
    would treat as a dropped connection. A 2xx body that is not JSON will
    not improve on retry, so it is reported as InvalidResponseError.
    """
    try:
        return response.json()
    except ValueError as e:
        raise InvalidResponseError(
            f"Response body is not valid JSON: {e}", status=response.status_code,
        ) from e
