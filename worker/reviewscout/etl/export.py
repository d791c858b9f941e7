"""CSV persistence for output records."""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from reviewscout.models import OutputRecord

logger = logging.getLogger(__name__)

CSV_HEADER = (
    "Platform",
    "Title",
    "Link",
    "Rating",
    "User Ratings",
    "Review Author",
    "Review Rating",
    "Review Text",
)


def build_filename(entity_name: str, now: Optional[datetime] = None) -> str:
    timestamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    safe_name = "_".join(entity_name.split()).replace("/", "_") or "entity"
    return f"{timestamp}-{safe_name}.csv"


def write_records_csv(
    records: Iterable[OutputRecord],
    entity_name: str,
    results_dir: str,
    now: Optional[datetime] = None,
) -> Path:
    """Write ``records`` under ``results_dir`` and return the file path."""
    directory = Path(results_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory.joinpath(build_filename(entity_name, now))

    count = 0
    with path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(CSV_HEADER)
        for record in records:
            writer.writerow(
                [
                    record.platform,
                    record.title,
                    record.link,
                    record.rating,
                    record.user_ratings_total,
                    record.review_author,
                    record.review_rating,
                    record.review_text,
                ]
            )
            count += 1

    logger.info("Saved %d records to %s", count, path)
    return path
