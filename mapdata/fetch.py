from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import requests

from mapdata.base import RunContext, get_with_retries
from utils.settings import get_setting

logger = logging.getLogger(__name__)


def _parse_document(text: str, origin: str) -> dict[str, Any]:
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError(f"Map data from {origin} is not a JSON object")
    return payload


def build_session(settings: dict[str, Any]) -> requests.Session:
    session = requests.Session()

    headers = get_setting(settings, "source.headers", {}) or {}
    session.headers.update({str(k): str(v) for k, v in headers.items()})

    user_agent = str(get_setting(settings, "http.user_agent", "")).strip()
    if user_agent:
        session.headers.update({"User-Agent": user_agent})
    session.headers.setdefault("Accept", "application/json")
    return session


def fetch_document(
    ctx: RunContext, session: requests.Session | None = None
) -> dict[str, Any]:
    settings = ctx.settings
    url = str(get_setting(settings, "source.url", "")).strip()
    if not url:
        raise ValueError("source.url is not configured")

    params = get_setting(settings, "source.params", None) or None
    if session is None:
        session = build_session(settings)

    logger.info(f"[fetch] Fetching map data from {url}")
    resp = get_with_retries(
        session,
        url,
        params=params,
        timeout_seconds=float(get_setting(settings, "http.timeout_seconds", 60)),
        max_retries=int(get_setting(settings, "http.max_retries", 3)),
        backoff_base_seconds=float(get_setting(settings, "http.backoff_base_seconds", 0.5)),
        backoff_jitter_seconds=float(
            get_setting(settings, "http.backoff_jitter_seconds", 0.25)
        ),
    )

    # The CDN may prepend a UTF-8 BOM, which breaks resp.json().
    text = resp.content.decode("utf-8-sig", errors="replace")
    data = _parse_document(text, url)
    if ctx.debug:
        logger.debug(f"[fetch] Received {len(resp.content)} bytes")
    return data


def load_document(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    logger.info(f"[fetch] Loading map data from {path}")
    text = path.read_bytes().decode("utf-8-sig", errors="replace")
    return _parse_document(text, str(path))
