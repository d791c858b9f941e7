import pytest

from reviewscout.core.errors import ShardEmpty
from reviewscout.core.query_builder import build_base_query, build_site_query


def test_build_base_query():
    assert build_base_query("Grand Hotel", "Paris", "France") == "Grand Hotel Paris France"


def test_build_site_query_joins_sites_with_or():
    assert build_site_query("X Y Z", ["a.com", "b.com"]) == "site:a.com OR site:b.com X Y Z"


def test_build_site_query_single_platform():
    assert build_site_query("Grand Hotel Paris France", ["booking.com"]) == "site:booking.com Grand Hotel Paris France"


def test_build_site_query_rejects_empty_shard():
    with pytest.raises(ShardEmpty):
        build_site_query("X Y Z", [])


def test_build_base_query_skips_empty_parts():
    assert build_base_query("Grand Hotel", "Paris", "") == "Grand Hotel Paris"
    assert build_site_query(build_base_query("Grand Hotel", "Paris", ""), ["a.com"]) == "site:a.com Grand Hotel Paris"
