"""CLI job to look up an entity's review platform pages and export them."""

import argparse
import logging
from typing import List, Optional, Tuple

from reviewscout.core.config import ConfigError, get_settings, load_platforms, require_credentials
from reviewscout.core.errors import ResolutionFailed
from reviewscout.core.pipeline import build_pipeline
from reviewscout.etl.export import write_records_csv
from reviewscout.models import EntitySearchRequest, OutputRecord, ResolvedEntity

logger = logging.getLogger(__name__)


def run_search_job(
    *,
    name: str,
    city: str,
    country: str,
    address: Optional[str] = None,
    platforms_file: Optional[str] = None,
    max_pages: Optional[int] = None,
    export: bool = True,
) -> Tuple[ResolvedEntity, List[OutputRecord], Optional[str]]:
    settings = get_settings()
    require_credentials(settings)

    request = EntitySearchRequest(
        name=name,
        city=city,
        country=country,
        address=address,
        platforms_file=platforms_file or settings.default_platforms_file,
    )
    platforms = load_platforms(request.platforms_file, settings.platforms_dir)

    pipeline = build_pipeline(settings, max_pages=max_pages)
    entity, records = pipeline.run(request, platforms)

    filename = None
    if export:
        filename = str(write_records_csv(records, entity.name, settings.results_dir))

    logger.info("Completed lookup for %r: records=%d file=%s", entity.name, len(records), filename)
    return entity, records, filename


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find an entity's pages on review platforms")
    parser.add_argument("--name", dest="name", required=True, help="Entity name, e.g. a hotel")
    parser.add_argument("--city", dest="city", required=True, help="City the entity is in")
    parser.add_argument("--country", dest="country", default="", help="Country the entity is in")
    parser.add_argument("--address", dest="address", help="Optional street address (informational)")
    parser.add_argument(
        "--platforms-file",
        dest="platforms_file",
        default=get_settings().default_platforms_file,
        help="Platform list file inside PLATFORMS_DIR",
    )
    parser.add_argument(
        "--max-pages",
        dest="max_pages",
        type=int,
        default=get_settings().max_pages,
        help="Number of search result pages to scan per platform shard",
    )
    parser.add_argument("--no-export", dest="export", action="store_false", help="Skip writing the CSV file")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    try:
        run_search_job(
            name=args.name,
            city=args.city,
            country=args.country,
            address=args.address,
            platforms_file=args.platforms_file,
            max_pages=args.max_pages,
            export=args.export,
        )
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except (ResolutionFailed, ValueError) as exc:
        logger.error("Lookup failed: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
