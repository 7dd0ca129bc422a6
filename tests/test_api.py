from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from gitmeta.context.github import MockCommitsClient
from gitmeta.enricher import MetadataEnricher
from gitmeta.main import app

HISTORY = [
    {
        "author": {"avatar_url": "https://avatars.example/ada"},
        "commit": {
            "author": {
                "name": "Ada",
                "email": "ada@example.com",
                "date": "2020-01-01T00:00:00Z",
            }
        },
    }
]


def test_health_check():
    with TestClient(app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_content_is_enriched():
    with TestClient(app) as client:
        mock_client = MockCommitsClient(history=HISTORY)
        app.state.enricher = MetadataEnricher(client=mock_client)
        response = client.get("/content/a/b/docs/index.md", params={"ref": "feature/x"})

    assert response.status_code == 200
    body = response.json()
    assert body["contextPath"] == "myinjectedcontextpath"
    assert body["committers"] == [
        {"avatar_url": "https://avatars.example/ada", "display": "Ada | ada@example.com"}
    ]
    assert body["lastModified"]["raw"] == "2020-01-01T00:00:00Z"
    assert mock_client.calls[0].path == "/docs/index.md"
    assert mock_client.calls[0].ref == "feature/x"


def test_degraded_history_renders_unknown():
    with TestClient(app) as client:
        app.state.enricher = MetadataEnricher(client=MockCommitsClient(history={}))
        response = client.get("/content/a/b/x")

    assert response.status_code == 200
    assert response.json()["lastModified"] == {"raw": None, "display": "Unknown"}
    assert response.json()["committers"] == []


def test_enrichment_failure_returns_500():
    failing = AsyncMock()
    failing.fetch_commit_history.side_effect = RuntimeError("boom")

    with TestClient(app, raise_server_exceptions=False) as client:
        app.state.enricher = MetadataEnricher(client=failing)
        response = client.get("/content/a/b/x")

    assert response.status_code == 500
    assert response.json() == {"error": "internal_error", "detail": "boom"}


def test_ref_defaults_to_main():
    mock_client = MockCommitsClient()
    with TestClient(app) as client:
        app.state.enricher = MetadataEnricher(client=mock_client)
        response = client.get("/content/a/b/x")

    assert response.status_code == 200
    assert mock_client.calls[0].ref == "main"
