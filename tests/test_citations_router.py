"""Tests for the citation editing API."""

import pytest
from fastapi.testclient import TestClient

from citeshift.main import app
from citeshift.routers.citations import get_editor
from citeshift.services.bibliography import Bibliography
from citeshift.services.citation_editor import CitationEditor


TEXT = "See [cite/t:@smith2020; @doe2019] and [cite:@lee2021]."


@pytest.fixture
def client():
    """Test client with an editor backed by an in-memory bibliography."""
    bibliography = Bibliography({
        "smith2020": {"year": "2020"},
        "doe2019": {"year": "2019"},
        "lee2021": {"year": "2021"},
    })
    app.dependency_overrides[get_editor] = lambda: CitationEditor(bibliography=bibliography)
    yield TestClient(app)
    app.dependency_overrides.clear()


def body(offset, **extra):
    return {"text": TEXT, "offset": offset, **extra}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestStyleEndpoints:
    """Tests for style endpoints."""

    def test_list_styles(self, client):
        response = client.get("/api/styles")

        assert response.status_code == 200
        styles = response.json()
        assert styles[0]["token"] is None
        assert {"token": "t", "command": "\\citet", "current": False} in styles

    def test_select_style(self, client):
        response = client.post("/api/style/select", json=body(TEXT.index("@doe")))

        current = [s["token"] for s in response.json() if s["current"]]
        assert current == ["t"]

    def test_update_style(self, client):
        response = client.post("/api/style", json=body(TEXT.index("@doe"), style="p"))

        data = response.json()
        assert response.status_code == 200
        assert data["replacement"]["text"] == "[cite/p:"
        assert data["offset"] == TEXT.index("@doe")


class TestEditEndpoints:
    """Tests for reordering and editing endpoints."""

    def test_shift_right(self, client):
        response = client.post("/api/shift/right", json=body(TEXT.index("@smith")))

        data = response.json()
        assert response.status_code == 200
        assert data["replacement"]["text"] == "@doe2019; @smith2020"
        # the cursor follows @smith2020 to its new position
        assert data["offset"] == TEXT.index("@smith") + len("@doe2019; ")

    def test_shift_single_reference_is_bad_request(self, client):
        response = client.post("/api/shift/left", json=body(TEXT.index("@lee")))

        assert response.status_code == 400
        assert response.json()["detail"] == "only one reference, cannot shift"

    def test_invalid_direction(self, client):
        response = client.post("/api/shift/up", json=body(0))

        assert response.status_code == 422

    def test_sort_by_year(self, client):
        response = client.post("/api/sort/year", json=body(TEXT.index("@doe")))

        assert response.json()["replacement"] is None

    def test_annotation_warning(self, client):
        response = client.post(
            "/api/reference/annotation",
            json=body(TEXT.index("@doe"), prefix="see ", suffix=""),
        )

        data = response.json()
        assert data["warnings"] == ["prefix not supported here"]
        assert data["replacement"]["text"] == "@smith2020; see @doe2019"

    def test_kill(self, client):
        response = client.post("/api/reference/kill", json=body(TEXT.index("@lee")))

        data = response.json()
        assert data["clipboard_text"] == "@lee2021"
        assert data["replacement"]["text"] == ""

    def test_mark(self, client):
        offset = TEXT.index("@doe")

        response = client.post("/api/reference/mark", json=body(offset))

        assert response.json()["region"] == [offset, offset + len("@doe2019")]

    def test_not_on_reference(self, client):
        response = client.post("/api/reference/delete", json=body(0))

        assert response.status_code == 400
        assert response.json()["detail"] == "not on a citation reference"

    def test_offset_past_end(self, client):
        response = client.post("/api/reference/copy", json=body(len(TEXT) + 5))

        assert response.status_code == 422


class TestNavigationEndpoint:
    def test_next_crosses_citations(self, client):
        response = client.post("/api/navigate/next", json=body(TEXT.index("@doe")))

        assert response.json()["offset"] == TEXT.index("@lee")

    def test_start_outside_citation(self, client):
        response = client.post("/api/navigate/start", json=body(0))

        assert response.status_code == 400


class TestKeyEndpoints:
    """Tests for key suggestion and insertion endpoints."""

    def test_suggestions(self, client):
        text = "[cite:@doe2018]"

        response = client.post("/api/reference/suggestions", json={"text": text, "offset": 7})

        assert response.json()[0]["key"] == "doe2019"

    def test_replace_key(self, client):
        response = client.post("/api/reference/key", json=body(TEXT.index("@doe"), key="doe2018"))

        assert response.json()["replacement"]["text"] == "@smith2020; @doe2018"

    def test_insert_keys(self, client):
        response = client.post("/api/reference/insert", json=body(0, keys=["lee2021"]))

        data = response.json()
        assert data["replacement"] == {"begin": 0, "end": 0, "text": "[cite:@lee2021]"}

    def test_list_keys(self, client):
        response = client.get("/api/keys")

        assert [c["key"] for c in response.json()] == ["doe2019", "lee2021", "smith2020"]
