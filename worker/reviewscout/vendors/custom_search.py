"""Client utilities for the Google Custom Search JSON API."""

import logging
import threading
from typing import Any, Dict, List

import requests

from reviewscout.core.errors import PageFetchFailed

logger = logging.getLogger(__name__)
_BASE_URL = "https://www.googleapis.com/customsearch/v1"

# Shards may be searched from several threads; each thread gets its own session.
_LOCAL = threading.local()


def _get_session() -> requests.Session:
    session = getattr(_LOCAL, "session", None)
    if session is None:
        session = requests.Session()
        _LOCAL.session = session
    return session


def search_page(query: str, api_key: str, cx: str, start: int, timeout: float = 10) -> List[Dict[str, Any]]:
    """Fetch one results window and return its ``items`` (possibly empty).

    Any transport error, timeout, non-200 status or undecodable body is
    reported as :class:`PageFetchFailed`.
    """
    params = {"key": api_key, "cx": cx, "q": query, "start": str(start)}
    try:
        response = _get_session().get(_BASE_URL, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise PageFetchFailed(f"request for start={start} failed: {exc}") from exc

    if response.status_code != 200:
        raise PageFetchFailed(f"start={start} returned status {response.status_code}: {response.text[:200]}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise PageFetchFailed(f"start={start} returned a non-JSON body") from exc

    if not isinstance(payload, dict):
        raise PageFetchFailed(f"start={start} returned a {type(payload).__name__} instead of an object")

    items = payload.get("items") or []
    if not isinstance(items, list):
        logger.debug("Ignoring non-list items for start=%s: %r", start, items)
        return []
    return items
