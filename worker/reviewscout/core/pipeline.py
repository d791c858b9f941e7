"""Resolve an entity, search its review platforms and merge the results."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from reviewscout.core.config import Settings
from reviewscout.core.errors import NotFound, ResolutionFailed
from reviewscout.core.platform_search import PlatformSearchClient
from reviewscout.core.query_builder import build_base_query, build_site_query
from reviewscout.core.resolver import EntityResolver
from reviewscout.etl.transform import to_output_record
from reviewscout.models import EntitySearchRequest, OutputRecord, PlatformShard, ResolvedEntity, SearchHit

logger = logging.getLogger(__name__)

DEFAULT_SHARD_WIDTH = 5


class Stage(str, Enum):
    RESOLVING = "resolving"
    SEARCHING = "searching"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"


def partition_platforms(platforms: Sequence[str], width: int = DEFAULT_SHARD_WIDTH) -> List[PlatformShard]:
    if width < 1:
        raise ValueError("shard width must be at least 1")
    return [list(platforms[i : i + width]) for i in range(0, len(platforms), width)]


class AggregationPipeline:
    def __init__(
        self,
        resolver: EntityResolver,
        search_client: PlatformSearchClient,
        shard_width: int = DEFAULT_SHARD_WIDTH,
        max_pages: int = 3,
        max_workers: int = 1,
    ) -> None:
        self._resolver = resolver
        self._search_client = search_client
        self._shard_width = shard_width
        self._max_pages = max_pages
        self._max_workers = max(1, max_workers)

    def run(
        self,
        request: EntitySearchRequest,
        platforms: Sequence[str],
    ) -> Tuple[ResolvedEntity, List[OutputRecord]]:
        stage = Stage.RESOLVING
        logger.info("stage=%s name=%r city=%r country=%r", stage.value, request.name, request.city, request.country)
        try:
            entity = self._resolver.resolve(request.name, request.city, request.country)
        except NotFound as exc:
            logger.error("stage=%s resolution failed for %r: %s", Stage.FAILED.value, request.name, exc)
            raise ResolutionFailed(f"could not resolve {request.name!r} in {request.city}: {exc}") from exc

        stage = Stage.SEARCHING
        shards = partition_platforms(platforms, self._shard_width)
        logger.info("stage=%s shards=%d platforms=%d", stage.value, len(shards), len(platforms))
        base_query = build_base_query(entity.name, request.city, request.country)
        shard_hits = self._search_shards(base_query, shards, entity.name)

        stage = Stage.MERGING
        logger.info("stage=%s", stage.value)
        records = [to_output_record(hit, entity) for hits in shard_hits for hit in hits.values()]

        stage = Stage.DONE
        logger.info("stage=%s records=%d", stage.value, len(records))
        return entity, records

    def _search_shards(self, base_query: str, shards: List[PlatformShard], entity_name: str) -> List[Dict[str, SearchHit]]:
        if self._max_workers == 1 or len(shards) < 2:
            return [self._search_shard(base_query, shard, entity_name) for shard in shards]

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(shards))) as executor:
            futures = [executor.submit(self._search_shard, base_query, shard, entity_name) for shard in shards]
            return [future.result() for future in futures]

    def _search_shard(self, base_query: str, shard: PlatformShard, entity_name: str) -> Dict[str, SearchHit]:
        query = build_site_query(base_query, shard)
        try:
            return self._search_client.search(query, shard, entity_name, max_pages=self._max_pages)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Search failed for shard %s: %s", shard, exc)
            return {}


def build_pipeline(settings: Settings, max_pages: Optional[int] = None) -> AggregationPipeline:
    resolver = EntityResolver(
        api_key=settings.google_api_key,
        timeout=settings.request_timeout,
        include_country=settings.text_search_include_country,
    )
    search_client = PlatformSearchClient(
        api_key=settings.google_api_key,
        cx=settings.google_cx,
        timeout=settings.request_timeout,
    )
    return AggregationPipeline(
        resolver,
        search_client,
        shard_width=settings.shard_width,
        max_pages=settings.max_pages if max_pages is None else max_pages,
        max_workers=settings.search_workers,
    )
