"""Entity resolution against the Google Places directory."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from reviewscout.core.errors import DetailUnavailable, NotFound
from reviewscout.etl.transform import to_partial_entity, to_resolved_entity
from reviewscout.models import ResolvedEntity
from reviewscout.vendors import google_places

logger = logging.getLogger(__name__)


class EntityResolver:
    """Turns a free-text name and locality into a canonical :class:`ResolvedEntity`.

    The first text-lookup candidate carrying a ``place_id`` is taken as the
    match. A failed detail lookup degrades to a partial entity instead of
    failing the run.
    """

    def __init__(self, api_key: str, timeout: float = 10, include_country: bool = True) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._include_country = include_country

    def build_text_query(self, name: str, city: str, country: str) -> str:
        parts = [name, city, country] if self._include_country and country else [name, city]
        return ", ".join(parts)

    def resolve(self, name: str, city: str, country: str) -> ResolvedEntity:
        query = self.build_text_query(name, city, country)
        candidate = self._first_candidate(query)
        place_id = candidate["place_id"]

        try:
            details = self._fetch_details(place_id)
        except DetailUnavailable as exc:
            logger.warning("Using text lookup data only for place_id=%s: %s", place_id, exc)
            return to_partial_entity(candidate, fallback_city=city, fallback_country=country)

        entity = to_resolved_entity(candidate, details, fallback_city=city, fallback_country=country)
        logger.info("Resolved %r to %r (place_id=%s)", name, entity.name, entity.place_id)
        return entity

    def _first_candidate(self, query: str) -> Dict[str, Any]:
        logger.info("Running Places text search for query=%s", query)
        try:
            payload = google_places.text_search(query=query, api_key=self._api_key, timeout=self._timeout)
        except (requests.RequestException, ValueError, google_places.GooglePlacesError) as exc:
            raise NotFound(f"directory lookup failed for {query!r}: {exc}") from exc

        results: List[Any] = payload.get("results") or []
        if not isinstance(results, list):
            raise NotFound(f"directory lookup for {query!r} returned malformed results")
        for result in results:
            if isinstance(result, dict) and result.get("place_id"):
                return result
            logger.debug("Skipping candidate without place_id: %s", result)
        raise NotFound(f"no directory results for {query!r} (status={payload.get('status')})")

    def _fetch_details(self, place_id: str) -> Dict[str, Any]:
        try:
            details = google_places.place_details(place_id=place_id, api_key=self._api_key, timeout=self._timeout)
        except (requests.RequestException, ValueError, google_places.GooglePlacesError) as exc:
            raise DetailUnavailable(str(exc)) from exc
        if not details:
            raise DetailUnavailable(f"empty detail result for place_id={place_id}")
        return details
