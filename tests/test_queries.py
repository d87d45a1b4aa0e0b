import json

import httpx
import pytest

from pagewarden.inference.core.tasks import queries
from pagewarden.inference.core.tasks.queries import (
    SearchQueries,
    get_search_query,
    pick_query,
)
from pagewarden.utils.settings import settings
from pagewarden.utils.utils import normalize_string


def test_normalize_string():
    assert normalize_string("  Qu'est-ce que c'est?! ") == "qu'est-ce que c'est"
    assert normalize_string("Café Olé") == "cafe ole"


def test_pick_query_matches_normalized_title():
    entries = [
        SearchQueries(title="Discover Paris!", queries=["eiffel tower height"]),
        SearchQueries(title="Other", queries=["unused"]),
    ]

    assert pick_query(entries, "discover paris") == "eiffel tower height"
    assert pick_query(entries, "Unknown activity") == "Unknown activity"


@pytest.mark.asyncio
async def test_get_search_query_from_local_file(tmp_path, monkeypatch):
    path = tmp_path / "queries.json"
    path.write_text(
        json.dumps([{"title": "Find a recipe", "queries": ["lasagna recipe"]}])
    )
    monkeypatch.setattr(settings, "SEARCH_ON_BING_LOCAL_QUERIES", True)
    monkeypatch.setattr(settings, "LOCAL_QUERIES_PATH", str(path))

    assert await get_search_query("Find a Recipe?") == "lasagna recipe"


@pytest.mark.asyncio
async def test_get_search_query_falls_back_to_title(monkeypatch):
    async def offline(url):
        raise ConnectionError("offline")

    monkeypatch.setattr(settings, "SEARCH_ON_BING_LOCAL_QUERIES", False)
    monkeypatch.setattr(queries, "fetch_remote_queries", offline)

    assert await get_search_query("Find a recipe") == "Find a recipe"


def serve_queries(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def client_with_transport(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_with_transport)
    monkeypatch.setattr(settings, "SEARCH_ON_BING_LOCAL_QUERIES", False)


@pytest.mark.asyncio
async def test_get_search_query_from_plain_text_remote(monkeypatch):
    body = json.dumps([{"title": "Plan a trip", "queries": ["cheap flights"]}])
    serve_queries(
        monkeypatch,
        lambda request: httpx.Response(
            200, text=body, headers={"content-type": "text/plain"}
        ),
    )

    assert await get_search_query("Plan a trip") == "cheap flights"


@pytest.mark.asyncio
async def test_remote_status_error_falls_back_to_title(monkeypatch, caplog):
    serve_queries(monkeypatch, lambda request: httpx.Response(404, text="gone"))

    with caplog.at_level("ERROR", logger="pagewarden"):
        assert await get_search_query("Plan a trip") == "Plan a trip"

    assert "Failed to fetch queries: 404 - gone" in caplog.text
