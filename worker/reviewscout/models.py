"""Core data models shared by the review lookup pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

# An ordered, non-empty slice of the configured platform list.
PlatformShard = List[str]


@dataclass(slots=True)
class EntitySearchRequest:
    """What the caller asked for; ``address`` is advisory and never queried."""

    name: str
    city: str
    country: str = ""
    address: Optional[str] = None
    platforms_file: Optional[str] = None

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        self.city = (self.city or "").strip()
        self.country = (self.country or "").strip()
        if not self.name:
            raise ValueError("name must be provided")
        if not self.city:
            raise ValueError("city must be provided")


@dataclass(frozen=True, slots=True)
class Review:
    author: str = ""
    rating: Optional[int] = None
    text: str = ""


@dataclass(frozen=True, slots=True)
class ResolvedEntity:
    """Canonical directory record for the entity being looked up."""

    name: str
    formatted_address: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    place_id: str
    website: Optional[str] = None
    phone: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    review: Optional[Review] = None
    city: Optional[str] = None
    country: Optional[str] = None
    detail_available: bool = True


@dataclass(frozen=True, slots=True)
class SearchHit:
    platform: str
    title: str
    link: str
    page_start: int = 1
    position: int = 0


@dataclass(frozen=True, slots=True)
class OutputRecord:
    """Flat, display-ready row combining a hit with entity metadata."""

    platform: str
    title: str
    link: str
    rating: str = ""
    user_ratings_total: str = ""
    review_author: str = ""
    review_rating: str = ""
    review_text: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
