from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)


@dataclass(frozen=True)
class RunContext:
    run_date_utc: str
    started_at_utc: str
    settings: dict[str, Any]
    debug: bool = False


def sleep_seconds(seconds: float) -> None:
    if seconds <= 0:
        return
    time.sleep(seconds)


def compute_backoff_seconds(
    attempt: int,
    *,
    base: float,
    jitter: float,
    max_backoff_seconds: float = 30.0,
) -> float:
    delay = min(base * (2**attempt), max_backoff_seconds)
    if jitter > 0:
        delay += random.uniform(0.0, jitter)
    return delay


def _retry_after_seconds(resp: requests.Response) -> float | None:
    value = resp.headers.get("Retry-After")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def get_with_retries(
    session: requests.Session,
    url: str,
    *,
    timeout_seconds: float,
    max_retries: int,
    backoff_base_seconds: float,
    backoff_jitter_seconds: float,
    params: dict[str, str] | None = None,
    retry_statuses: tuple[int, ...] = RETRY_STATUSES,
) -> requests.Response:
    """GET `url`, retrying transient statuses and transport errors.

    The final failure is raised as-is: an HTTPError for a retryable status
    that never cleared, or the last RequestException.
    """

    for attempt in range(max_retries + 1):
        try:
            resp = session.get(url, params=params, timeout=timeout_seconds)
        except requests.RequestException as exc:
            if attempt >= max_retries:
                raise
            logger.warning(f"[fetch] Attempt {attempt + 1} failed for {url}: {exc}")
        else:
            if resp.status_code not in retry_statuses:
                resp.raise_for_status()
                return resp
            if attempt >= max_retries:
                resp.raise_for_status()

            logger.warning(
                f"[fetch] Attempt {attempt + 1} got HTTP {resp.status_code} for {url}"
            )
            retry_after = _retry_after_seconds(resp)
            if retry_after is not None:
                sleep_seconds(retry_after)

        sleep_seconds(
            compute_backoff_seconds(
                attempt,
                base=backoff_base_seconds,
                jitter=backoff_jitter_seconds,
            )
        )

    raise RuntimeError("unreachable: retry loop exited without a result")
