import pytest
from unittest.mock import AsyncMock, Mock
from fastapi.testclient import TestClient

from main import app
from scholar_gateway.controllers.arxiv_controller import get_arxiv_service
from scholar_gateway.controllers.pubmed_controller import get_pubmed_service
from scholar_gateway.models.search import (
    ArxivPaper, ArxivSearchResponse, PubMedPaper, PubMedSearchResponse
)
from scholar_gateway.utils.errors import QueryValidationError, UpstreamFetchError

ARXIV_RESULT = ArxivSearchResponse(
    papers=[
        ArxivPaper(
            id="http://arxiv.org/abs/2101.00001v1",
            title="Quantum Computing for Everyone",
            authors=["Alice Smith"],
            summary="An introduction.",
            categories=["quant-ph"],
            pdf_url="http://arxiv.org/pdf/2101.00001v1",
            published_date="2021-01-01T10:00:00Z",
            updated_date="2021-01-02T10:00:00Z"
        ),
        ArxivPaper(
            id="http://arxiv.org/abs/2102.00002v2",
            title="Error Correction",
            authors=["Bob Jones", "Carol White"],
            pdf_url="http://arxiv.org/pdf/2102.00002v2"
        )
    ],
    total_results=1423,
    next_cursor="2"
)

PUBMED_RESULT = PubMedSearchResponse(
    papers=[
        PubMedPaper(
            pmid="31452104",
            title="CRISPR screens",
            authors=["Zhang Feng"],
            doi="10.1038/s41588-019-0001-1",
            journal="Nature genetics",
            publish_date="2019"
        )
    ],
    total_results=245
)


@pytest.fixture
def arxiv_service():
    service = Mock()
    service.search = AsyncMock(return_value=ARXIV_RESULT)
    return service


@pytest.fixture
def pubmed_service():
    service = Mock()
    service.search = AsyncMock(return_value=PUBMED_RESULT)
    return service


@pytest.fixture
def client(arxiv_service, pubmed_service):
    app.dependency_overrides[get_arxiv_service] = lambda: arxiv_service
    app.dependency_overrides[get_pubmed_service] = lambda: pubmed_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_arxiv_search_envelope(client, arxiv_service):
    response = client.post("/api/arxiv", json={
        "query": "quantum computing", "searchField": "title", "maxResults": 2
    })

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.headers["cache-control"] == "max-age=3600"

    data = response.json()
    assert data["totalResults"] == 1423
    assert data["nextCursor"] == "2"
    assert len(data["papers"]) == 2
    assert data["papers"][0]["pdfUrl"] == "http://arxiv.org/pdf/2101.00001v1"
    assert data["papers"][0]["publishedDate"] == "2021-01-01T10:00:00Z"
    assert "doi" not in data["papers"][0]

    request = arxiv_service.search.await_args.args[0]
    assert request.query == "quantum computing"
    assert request.search_field == "title"
    assert request.max_results == 2
    assert request.sort_by == "relevance"
    assert request.sort_order == "descending"


def test_pubmed_search_envelope(client, pubmed_service):
    response = client.post("/api/pubmed", json={"query": "CRISPR", "yearStart": 2018})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "max-age=3600"

    data = response.json()
    assert data == {
        "papers": [{
            "pmid": "31452104",
            "title": "CRISPR screens",
            "authors": ["Zhang Feng"],
            "doi": "10.1038/s41588-019-0001-1",
            "journal": "Nature genetics",
            "publishDate": "2019"
        }],
        "totalResults": 245
    }
    assert pubmed_service.search.await_args.args[0].year_start == 2018


@pytest.mark.parametrize("path", ["/api/arxiv", "/api/pubmed"])
def test_wrong_method_is_rejected(client, path):
    response = client.get(path)

    assert response.status_code == 405
    assert response.json()["errorType"] == "MethodNotAllowed"
    assert response.json()["body"]["message"]


@pytest.mark.parametrize("body", [
    {},
    {"query": ""},
    {"query": "   "},
    {"query": "quantum", "maxResults": 0},
    {"query": "quantum", "searchField": "journal"},
    {"query": "quantum", "yearStart": 2022, "yearEnd": 2020},
])
def test_invalid_arxiv_request(client, arxiv_service, body):
    response = client.post("/api/arxiv", json=body)

    assert response.status_code == 400
    assert response.json()["errorType"] == "BadRequest"
    arxiv_service.search.assert_not_awaited()


@pytest.mark.parametrize("path, service_name", [
    ("/api/arxiv", "arxiv_service"),
    ("/api/pubmed", "pubmed_service"),
])
def test_large_max_results_is_forwarded(client, request, path, service_name):
    service = request.getfixturevalue(service_name)

    response = client.post(path, json={"query": "quantum", "maxResults": 150})

    assert response.status_code == 200
    assert service.search.await_args.args[0].max_results == 150


def test_invalid_pubmed_sort(client, pubmed_service):
    response = client.post("/api/pubmed", json={"query": "CRISPR", "sortBy": "citations"})

    assert response.status_code == 400
    assert "sortBy" in response.json()["body"]["message"]
    pubmed_service.search.assert_not_awaited()


def test_upstream_failure_is_internal_error(client, arxiv_service):
    arxiv_service.search.side_effect = UpstreamFetchError("ArXiv API returned status 503")

    response = client.post("/api/arxiv", json={"query": "quantum"})

    assert response.status_code == 500
    assert response.json() == {
        "errorType": "InternalServerError",
        "body": {"message": "ArXiv API returned status 503"}
    }


def test_unexpected_failure_is_internal_error(client, pubmed_service):
    pubmed_service.search.side_effect = KeyError("PubmedArticleSet")

    response = client.post("/api/pubmed", json={"query": "CRISPR"})

    assert response.status_code == 500
    assert response.json()["errorType"] == "InternalServerError"


def test_query_validation_error_is_bad_request(client, pubmed_service):
    pubmed_service.search.side_effect = QueryValidationError("query must not be empty")

    response = client.post("/api/pubmed", json={"query": "CRISPR"})

    assert response.status_code == 400
    assert response.json()["body"]["message"] == "query must not be empty"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
