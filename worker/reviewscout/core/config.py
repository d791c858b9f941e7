"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_DEFAULT_PLATFORMS_DIR = str(Path(__file__).resolve().parents[2].joinpath("platforms"))
_TRUTHY = {"1", "true", "yes"}


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    google_cx: str
    worker_port: int = 7001
    max_pages: int = 3
    shard_width: int = 5
    request_timeout: float = 10.0
    platforms_dir: str = _DEFAULT_PLATFORMS_DIR
    default_platforms_file: str = "hotels.txt"
    results_dir: str = "results"
    text_search_include_country: bool = True
    search_workers: int = 1


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    google_cx = os.getenv("GOOGLE_CX", "")
    worker_port = int(os.getenv("WORKER_PORT", "7001"))
    max_pages = int(os.getenv("WORKER_MAX_PAGES", "3"))
    shard_width = max(1, int(os.getenv("PLATFORM_SHARD_WIDTH", "5")))
    request_timeout = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
    platforms_dir = os.getenv("PLATFORMS_DIR", _DEFAULT_PLATFORMS_DIR)
    default_platforms_file = os.getenv("DEFAULT_PLATFORMS_FILE", "hotels.txt")
    results_dir = os.getenv("RESULTS_DIR", "results")
    include_country = os.getenv("TEXT_SEARCH_INCLUDE_COUNTRY", "true").lower() in _TRUTHY
    search_workers = max(1, int(os.getenv("SEARCH_WORKERS", "1")))

    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; Places and Custom Search requests will fail.")
    if not google_cx:
        logger.warning("GOOGLE_CX is not configured; platform searches will fail.")

    return Settings(
        google_api_key=google_api_key,
        google_cx=google_cx,
        worker_port=worker_port,
        max_pages=max_pages,
        shard_width=shard_width,
        request_timeout=request_timeout,
        platforms_dir=platforms_dir,
        default_platforms_file=default_platforms_file,
        results_dir=results_dir,
        text_search_include_country=include_country,
        search_workers=search_workers,
    )


def require_credentials(settings: Settings) -> None:
    if not settings.google_api_key:
        raise ConfigError("GOOGLE_API_KEY must be set in the environment to run a lookup.")
    if not settings.google_cx:
        raise ConfigError("GOOGLE_CX must be set in the environment to run a lookup.")


def load_platforms(selector: str, platforms_dir: str) -> List[str]:
    """Read a newline-delimited platform file, keeping first occurrences in order.

    ``selector`` must be a bare file name inside ``platforms_dir``; blank lines
    and ``#`` comments are ignored.
    """
    name = (selector or "").strip()
    if not name or Path(name).name != name or name in {".", ".."}:
        raise ConfigError(f"Invalid platforms file selector: {selector!r}")

    path = Path(platforms_dir).joinpath(name)
    if not path.is_file():
        raise ConfigError(f"Platforms file not found: {path}")

    platforms: List[str] = []
    seen = set()
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            domain = line.strip()
            if not domain or domain.startswith("#"):
                continue
            if domain in seen:
                logger.debug("Dropping duplicate platform %s from %s", domain, path)
                continue
            seen.add(domain)
            platforms.append(domain)

    logger.info("Loaded %d platforms from %s", len(platforms), path)
    return platforms
