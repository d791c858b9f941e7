"""Paginated, platform-scoped web search with relevance filtering."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from reviewscout.core.errors import PageFetchFailed
from reviewscout.core.relevance import title_matches, tokenize_name
from reviewscout.models import SearchHit
from reviewscout.vendors import custom_search

logger = logging.getLogger(__name__)

PAGE_SIZE = 10
FIRST_START = 1


def merge_hits(candidates: Iterable[SearchHit]) -> Dict[str, SearchHit]:
    """Keep one hit per platform: the one latest in pagination order.

    "Latest" means the greatest ``(page_start, position)``, so the result does
    not depend on the order candidates are supplied in.
    """
    merged: Dict[str, SearchHit] = {}
    for hit in candidates:
        current = merged.get(hit.platform)
        if current is None or (hit.page_start, hit.position) > (current.page_start, current.position):
            merged[hit.platform] = hit
    return merged


class PlatformSearchClient:
    """Runs site-restricted searches for one platform shard at a time."""

    def __init__(self, api_key: str, cx: str, timeout: float = 10, page_size: int = PAGE_SIZE) -> None:
        self._api_key = api_key
        self._cx = cx
        self._timeout = timeout
        self._page_size = page_size

    def search(
        self,
        query: str,
        shard: Sequence[str],
        entity_name: str,
        max_pages: int = 3,
    ) -> Dict[str, SearchHit]:
        name_tokens = tokenize_name(entity_name)
        candidates: List[SearchHit] = []

        for page in range(max_pages):
            start = FIRST_START + page * self._page_size
            items = self._fetch_page(query, start)
            if items is None:
                continue
            logger.debug("Fetched %d items for start=%d", len(items), start)
            candidates.extend(self._accepted_hits(items, shard, name_tokens, start))

        hits = merge_hits(candidates)
        logger.info("Shard %s yielded %d/%d platform hits", list(shard), len(hits), len(shard))
        return hits

    def _fetch_page(self, query: str, start: int) -> Optional[List[Dict[str, Any]]]:
        try:
            return custom_search.search_page(query, self._api_key, self._cx, start, timeout=self._timeout)
        except PageFetchFailed as exc:
            logger.warning("Skipping search page: %s", exc)
            return None

    @staticmethod
    def _accepted_hits(
        items: List[Dict[str, Any]],
        shard: Sequence[str],
        name_tokens: Sequence[str],
        start: int,
    ) -> List[SearchHit]:
        hits: List[SearchHit] = []
        for position, item in enumerate(items):
            if not isinstance(item, dict):
                continue
            title = item.get("title") or ""
            link = item.get("link") or ""
            if not title_matches(title.lower(), name_tokens):
                logger.debug("Rejected title %r", title)
                continue
            for platform in shard:
                if platform in link:
                    hits.append(SearchHit(platform=platform, title=title, link=link, page_start=start, position=position))
        return hits
