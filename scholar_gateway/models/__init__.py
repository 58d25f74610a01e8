from .search import (
    SearchRequest, ArxivSearchRequest, PubMedSearchRequest,
    ArxivPaper, PubMedPaper,
    ArxivSearchResponse, PubMedSearchResponse,
)

__all__ = [
    "SearchRequest", "ArxivSearchRequest", "PubMedSearchRequest",
    "ArxivPaper", "PubMedPaper",
    "ArxivSearchResponse", "PubMedSearchResponse",
]
