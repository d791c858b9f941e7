"""Search query construction for platform-scoped lookups."""

from typing import Sequence

from reviewscout.core.errors import ShardEmpty


def build_base_query(name: str, city: str, country: str) -> str:
    return " ".join(filter(None, [name, city, country]))


def build_site_query(base_query: str, shard: Sequence[str]) -> str:
    """Prefix ``base_query`` with ``site:`` clauses for every domain in ``shard``.

    >>> build_site_query("X Y Z", ["a.com", "b.com"])
    'site:a.com OR site:b.com X Y Z'
    """
    if not shard:
        raise ShardEmpty("cannot build a site-restricted query for an empty platform shard")
    sites = " OR ".join(f"site:{domain}" for domain in shard)
    return f"{sites} {base_query}"
