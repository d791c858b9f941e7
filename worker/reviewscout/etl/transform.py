"""Utilities for turning Places payloads into entities and entities into output rows."""

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from reviewscout.models import OutputRecord, ResolvedEntity, Review, SearchHit

logger = logging.getLogger(__name__)


def parse_city_country(address_components: Iterable[Dict[str, Any]]) -> Tuple[Optional[str], Optional[str]]:
    city = None
    country = None
    for component in address_components or []:
        types = set(component.get("types", []))
        if "locality" in types or "administrative_area_level_2" in types:
            city = component.get("long_name")
        if "country" in types:
            country = component.get("long_name")
    return city, country


def _location(result: Dict[str, Any]) -> Tuple[Optional[float], Optional[float]]:
    location = (result.get("geometry") or {}).get("location") or {}
    return _safe_float(location.get("lat")), _safe_float(location.get("lng"))


def first_review(reviews: Any) -> Optional[Review]:
    if not isinstance(reviews, list) or not reviews:
        return None
    raw = reviews[0]
    if not isinstance(raw, dict):
        return None
    return Review(
        author=_strip_or_none(raw.get("author_name")) or "",
        rating=_safe_int(raw.get("rating")),
        text=_strip_or_none(raw.get("text")) or "",
    )


def to_resolved_entity(
    candidate: Dict[str, Any],
    details: Dict[str, Any],
    fallback_city: Optional[str],
    fallback_country: Optional[str],
) -> ResolvedEntity:
    """Combine a text-lookup candidate with its details; details win field by field."""
    text_lat, text_lng = _location(candidate)
    detail_lat, detail_lng = _location(details)
    city, country = parse_city_country(details.get("address_components", []))

    return ResolvedEntity(
        name=_strip_or_none(details.get("name")) or _strip_or_none(candidate.get("name")) or "",
        formatted_address=_strip_or_none(details.get("formatted_address"))
        or _strip_or_none(candidate.get("formatted_address")),
        latitude=detail_lat if detail_lat is not None else text_lat,
        longitude=detail_lng if detail_lng is not None else text_lng,
        place_id=details.get("place_id") or candidate.get("place_id"),
        website=_strip_or_none(details.get("website")),
        phone=_strip_or_none(details.get("formatted_phone_number")),
        rating=_safe_float(details.get("rating")),
        review_count=_safe_int(details.get("user_ratings_total")),
        review=first_review(details.get("reviews")),
        city=city or fallback_city,
        country=country or fallback_country,
        detail_available=True,
    )


def to_partial_entity(
    candidate: Dict[str, Any],
    fallback_city: Optional[str],
    fallback_country: Optional[str],
) -> ResolvedEntity:
    """Entity built from the text lookup alone, with every metadata field left empty."""
    lat, lng = _location(candidate)
    return ResolvedEntity(
        name=_strip_or_none(candidate.get("name")) or "",
        formatted_address=_strip_or_none(candidate.get("formatted_address")),
        latitude=lat,
        longitude=lng,
        place_id=candidate.get("place_id"),
        city=fallback_city,
        country=fallback_country,
        detail_available=False,
    )


def to_output_record(hit: SearchHit, entity: ResolvedEntity) -> OutputRecord:
    review = entity.review or Review()
    return OutputRecord(
        platform=hit.platform,
        title=hit.title,
        link=hit.link,
        rating=f"{entity.rating:.1f}" if entity.rating is not None else "",
        user_ratings_total=str(entity.review_count) if entity.review_count is not None else "",
        review_author=review.author,
        review_rating=str(review.rating) if review.rating is not None else "",
        review_text=review.text,
    )


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)

    if isinstance(value, str):
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            pass
        digits = "".join(ch for ch in value if ch.isdigit())
        if digits:
            return int(digits)
    return None
