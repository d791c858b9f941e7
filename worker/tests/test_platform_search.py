import pytest

from reviewscout.core import platform_search
from reviewscout.core.errors import PageFetchFailed
from reviewscout.core.platform_search import PlatformSearchClient, merge_hits
from reviewscout.models import SearchHit


@pytest.fixture
def pages(monkeypatch):
    """Map of start offset -> items list, or an exception to raise."""
    responses = {}
    calls = []

    def fake_search_page(query, api_key, cx, start, timeout=10):
        calls.append((query, api_key, cx, start, timeout))
        outcome = responses.get(start, [])
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(platform_search.custom_search, "search_page", fake_search_page)
    return responses, calls


def test_search_pages_through_windows(pages):
    responses, calls = pages
    client = PlatformSearchClient("key", "cx", timeout=4)

    client.search("q", ["booking.com"], "Grand Hotel", max_pages=3)

    assert [call[3] for call in calls] == [1, 11, 21]
    assert all(call[1:3] == ("key", "cx") and call[4] == 4 for call in calls)


def test_search_filters_titles_and_attributes_platforms(pages):
    responses, _ = pages
    responses[1] = [
        {"title": "Grand Hotel Paris Reviews", "link": "https://booking.com/grand-hotel"},
        {"title": "Cheap flights to Paris", "link": "https://expedia.com/flights"},
        {"title": "HOTEL GRAND - Expedia", "link": "https://www.expedia.com/grand"},
        {"title": "Grand Hotel", "link": "https://unrelated.org/grand"},
    ]
    client = PlatformSearchClient("key", "cx")

    hits = client.search("q", ["booking.com", "expedia.com", "agoda.com"], "Grand Hotel", max_pages=1)

    assert set(hits) == {"booking.com", "expedia.com"}
    assert hits["booking.com"].title == "Grand Hotel Paris Reviews"
    assert hits["booking.com"].link == "https://booking.com/grand-hotel"
    assert hits["expedia.com"].link == "https://www.expedia.com/grand"
    assert "agoda.com" not in hits


def test_failed_page_does_not_drop_other_pages(pages):
    responses, calls = pages
    responses[1] = PageFetchFailed("status 500")
    responses[11] = [{"title": "Grand Hotel Paris", "link": "https://booking.com/grand"}]
    responses[21] = PageFetchFailed("timeout")
    client = PlatformSearchClient("key", "cx")

    hits = client.search("q", ["booking.com"], "Grand Hotel", max_pages=3)

    assert len(calls) == 3
    assert hits["booking.com"].link == "https://booking.com/grand"
    assert hits["booking.com"].page_start == 11


def test_last_accepted_match_in_pagination_order_wins(pages):
    responses, _ = pages
    responses[1] = [
        {"title": "Grand Hotel A", "link": "https://booking.com/a"},
        {"title": "Grand Hotel B", "link": "https://booking.com/b"},
    ]
    responses[11] = [{"title": "Grand Hotel C", "link": "https://booking.com/c"}]
    responses[21] = [{"title": "Something else", "link": "https://booking.com/d"}]
    client = PlatformSearchClient("key", "cx")

    hits = client.search("q", ["booking.com"], "Grand Hotel", max_pages=3)

    assert hits["booking.com"].link == "https://booking.com/c"


def test_no_hits_is_empty_mapping(pages):
    client = PlatformSearchClient("key", "cx")
    assert client.search("q", ["booking.com"], "Grand Hotel", max_pages=2) == {}


def test_merge_hits_is_independent_of_arrival_order():
    early = SearchHit("booking.com", "A", "https://booking.com/a", page_start=1, position=5)
    later = SearchHit("booking.com", "B", "https://booking.com/b", page_start=11, position=0)
    same_page = SearchHit("booking.com", "C", "https://booking.com/c", page_start=11, position=2)
    other = SearchHit("agoda.com", "D", "https://agoda.com/d", page_start=1, position=0)

    forward = merge_hits([early, later, same_page, other])
    backward = merge_hits([other, same_page, later, early])

    assert forward == backward
    assert forward["booking.com"] is same_page
    assert forward["agoda.com"] is other


class _JsonResponse:
    def __init__(self, payload):
        self.status_code = 200
        self.text = ""
        self._payload = payload

    def json(self):
        return self._payload


class _PagedSession:
    def __init__(self, bodies):
        self.bodies = bodies

    def get(self, url, params=None, timeout=None):
        return _JsonResponse(self.bodies[int(params["start"])])


def test_malformed_page_body_only_skips_that_page(monkeypatch):
    session = _PagedSession(
        {
            1: {"items": [{"title": "Grand Hotel Paris", "link": "https://booking.com/grand"}]},
            11: ["unexpected"],
            21: {},
        }
    )
    monkeypatch.setattr(platform_search.custom_search, "_get_session", lambda: session)
    client = PlatformSearchClient("key", "cx")

    hits = client.search("q", ["booking.com"], "Grand Hotel", max_pages=3)

    assert hits["booking.com"].link == "https://booking.com/grand"
