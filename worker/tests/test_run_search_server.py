import pytest

from reviewscout.core.config import Settings
from reviewscout.core.errors import ResolutionFailed
from reviewscout.jobs import run_search_server
from reviewscout.models import OutputRecord, ResolvedEntity

ENTITY = ResolvedEntity(
    name="Grand Hotel",
    formatted_address="2 Rue Scribe, Paris",
    latitude=48.87,
    longitude=2.33,
    place_id="P1",
)


class DummyPipeline:
    def __init__(self, submitted, error=None):
        self.submitted = submitted
        self.error = error

    def run(self, request, platforms):
        self.submitted["request"] = request
        self.submitted["platforms"] = platforms
        if self.error is not None:
            raise self.error
        return ENTITY, [OutputRecord("booking.com", "Grand Hotel Paris", "https://booking.com/g", "4.5", "120")]


@pytest.fixture
def server(monkeypatch, tmp_path):
    tmp_path.joinpath("hotels.txt").write_text("booking.com\nagoda.com\n", encoding="utf-8")
    submitted = {"error": None}
    settings = Settings(
        google_api_key="k",
        google_cx="cx",
        platforms_dir=str(tmp_path),
        results_dir=str(tmp_path.joinpath("results")),
    )
    monkeypatch.setattr(run_search_server, "get_settings", lambda: settings)
    monkeypatch.setattr(
        run_search_server, "build_pipeline", lambda settings: DummyPipeline(submitted, submitted["error"])
    )
    submitted["client"] = run_search_server.app.test_client()
    submitted["results_dir"] = tmp_path.joinpath("results")
    return submitted


def test_health_endpoint(server):
    response = server["client"].get("/healthz")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"
    assert response.get_json()["credentials_configured"] is True


def test_process_validates_payload(server):
    client = server["client"]
    assert client.post("/process", json={}).status_code == 400
    assert client.post("/process", json={"name": "Grand Hotel"}).status_code == 400
    assert client.post("/process", json={"name": "Grand Hotel", "city": "Paris", "platforms_file": "../x"}).status_code == 400
    assert client.post("/process", json={"name": "Grand Hotel", "city": "Paris", "platforms_file": "missing.txt"}).status_code == 400


def test_process_returns_records_and_file(server):
    response = server["client"].post(
        "/process", json={"hotel_name": "Grand Hotel", "city": "Paris", "country": "France"}
    )

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["refined_name"] == "Grand Hotel"
    assert data["refined_address"] == "2 Rue Scribe, Paris"
    assert data["place_id"] == "P1"
    assert data["results"][0]["platform"] == "booking.com"
    assert data["results"][0]["rating"] == "4.5"
    assert server["request"].country == "France"
    assert server["platforms"] == ["booking.com", "agoda.com"]
    assert server["results_dir"].joinpath(data["file"]).is_file()


def test_process_resolution_failure_is_404(server):
    server["error"] = ResolutionFailed("could not resolve")
    response = server["client"].post("/process", json={"name": "Ghost Inn", "city": "Paris"})
    assert response.status_code == 404
    assert "could not resolve" in response.get_json()["error"]


def test_download_serves_exported_file(server):
    data = server["client"].post("/process", json={"name": "Grand Hotel", "city": "Paris"}).get_json()["data"]

    response = server["client"].get("/download", query_string={"file": data["file"]})

    assert response.status_code == 200
    assert "attachment" in response.headers["Content-Disposition"]
    assert response.data.startswith(b"Platform,Title,Link")


def test_download_rejects_bad_names(server):
    client = server["client"]
    assert client.get("/download").status_code == 400
    assert client.get("/download", query_string={"file": "../secrets.csv"}).status_code == 400
    assert client.get("/download", query_string={"file": "missing.csv"}).status_code == 404
