import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..models.search import ArxivPaper, ArxivSearchRequest, ArxivSearchResponse
from ..utils.config import Config
from ..utils.errors import ResponseShapeError, UpstreamFetchError
from .query_builder import build_arxiv_query
from .rate_limiter import RateLimiter, get_rate_limiter
from .xml_tree import as_list, child, parse_xml, require, text_of

logger = logging.getLogger(__name__)

class ArxivService:
    def __init__(self, rate_limiter: Optional[RateLimiter] = None):
        self.base_url = Config.ARXIV_BASE_URL
        self.headers = {
            'User-Agent': Config.USER_AGENT
        }
        self.timeout = Config.API_TIMEOUT
        self.rate_limiter = rate_limiter or get_rate_limiter("arxiv")

    async def search(self, request: ArxivSearchRequest) -> ArxivSearchResponse:
        """Search ArXiv and normalize a single page of results"""
        query_params = {
            'search_query': build_arxiv_query(request),
            'start': 0,
            'max_results': request.max_results,
            'sortBy': request.sort_by,
            'sortOrder': request.sort_order
        }
        logger.info("ArXiv API query params: %s", query_params)

        response_text = await self._fetch(query_params)
        papers, total_results = self._parse_response(response_text)
        logger.info("ArXiv returned %d papers of %d total", len(papers), total_results)

        # Only a hint that more results may exist, not a resumable token
        next_cursor = str(request.max_results) if len(papers) == request.max_results else None

        return ArxivSearchResponse(
            papers=papers,
            total_results=total_results,
            next_cursor=next_cursor
        )

    async def _fetch(self, query_params: Dict[str, Any]) -> str:
        await self.rate_limiter.acquire()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=query_params, headers=self.headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(f"ArXiv API returned status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"ArXiv API request failed: {e}") from e

        logger.debug("ArXiv API response status: %s", response.status_code)
        return response.text

    def _parse_response(self, response_text: str) -> Tuple[List[ArxivPaper], int]:
        """Parse the ArXiv Atom feed into papers plus the total hit count"""
        feed = require(parse_xml(response_text), "feed")
        if not isinstance(feed, dict):
            raise ResponseShapeError("ArXiv feed has no content")

        entries = as_list(feed.get("entry"))
        self._raise_for_error_entry(entries)
        papers = [self._parse_entry(entry) for entry in entries]

        total_node = as_list(require(feed, "opensearch:totalResults"))
        try:
            total_results = int(text_of(total_node[0]).strip())
        except ValueError as e:
            raise ResponseShapeError(f"Invalid ArXiv totalResults: {e}") from e

        return papers, total_results

    def _raise_for_error_entry(self, entries: List[Any]):
        # ArXiv reports bad queries as a feed holding a single error entry
        for entry in entries:
            if "/api/errors" in text_of(child(entry, "id")):
                message = text_of(child(entry, "summary")).strip() or "unknown error"
                raise UpstreamFetchError(f"ArXiv API error: {message}")

    def _parse_entry(self, entry: Any) -> ArxivPaper:
        """Parse a single ArXiv entry into an ArxivPaper"""
        if not isinstance(entry, dict):
            raise ResponseShapeError("ArXiv entry has no content")

        authors = [text_of(child(author, "name")).strip() for author in as_list(entry.get("author"))]

        categories = [
            category["term"] for category in as_list(entry.get("category"))
            if isinstance(category, dict) and category.get("term")
        ]

        pdf_link = next(
            (link for link in as_list(entry.get("link"))
             if isinstance(link, dict) and link.get("title") == "pdf"),
            None
        )

        return ArxivPaper(
            id=text_of(require(entry, "id")).strip(),
            title=text_of(entry.get("title")).strip(),
            authors=authors,
            summary=text_of(entry.get("summary")).strip(),
            categories=categories,
            doi=text_of(entry.get("arxiv:doi")).strip() or None,
            journal_ref=text_of(entry.get("arxiv:journal_ref")).strip() or None,
            pdf_url=pdf_link.get("href") if pdf_link else None,
            published_date=text_of(entry.get("published")),
            updated_date=text_of(entry.get("updated"))
        )
