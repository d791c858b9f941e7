"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"

DETAIL_FIELDS = (
    "place_id,name,formatted_address,geometry,website,formatted_phone_number,"
    "rating,user_ratings_total,reviews,address_components"
)


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


def _json_object(response: requests.Response, endpoint: str) -> Dict[str, Any]:
    payload = response.json()
    if not isinstance(payload, dict):
        logger.error("%s returned a %s instead of an object", endpoint, type(payload).__name__)
        raise GooglePlacesError(f"{endpoint} returned an unexpected payload")
    return payload


def text_search(query: str, api_key: str, timeout: float = 10) -> Dict[str, Any]:
    params = {"query": query, "key": api_key}
    response = _SESSION.get(f"{_BASE_URL}/textsearch/json", params=params, timeout=timeout)
    response.raise_for_status()
    payload = _json_object(response, "text_search")
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("text_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    return payload


def place_details(place_id: str, api_key: str, timeout: float = 10) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": DETAIL_FIELDS}
    response = _SESSION.get(f"{_BASE_URL}/details/json", params=params, timeout=timeout)
    response.raise_for_status()
    payload = _json_object(response, "place_details")
    status = payload.get("status")
    if status != "OK":
        logger.error("place_details failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    result = payload.get("result") or {}
    if not isinstance(result, dict):
        logger.error("place_details returned a %s result for %s", type(result).__name__, place_id)
        raise GooglePlacesError("place_details returned an unexpected result")
    return result
