"""
PubMed Service
Two-step E-utilities search: esearch for PMIDs, then efetch for the records
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..models.search import PubMedPaper, PubMedSearchRequest, PubMedSearchResponse
from ..utils.config import Config
from ..utils.errors import ResponseShapeError, UpstreamFetchError
from .query_builder import build_pubmed_query
from .rate_limiter import RateLimiter, get_rate_limiter
from .xml_tree import as_list, child, parse_xml, require, text_of

logger = logging.getLogger(__name__)


class PubMedService:
    """Searches PubMed and maps PubmedArticle records to PubMedPaper"""

    def __init__(self, rate_limiter: Optional[RateLimiter] = None, api_key: Optional[str] = None):
        self.base_url = Config.PUBMED_BASE_URL
        self.api_key = api_key or Config.PUBMED_API_KEY
        self.headers = {
            'User-Agent': Config.USER_AGENT
        }
        self.timeout = Config.API_TIMEOUT
        self.rate_limiter = rate_limiter or get_rate_limiter("pubmed")

    async def search(self, request: PubMedSearchRequest) -> PubMedSearchResponse:
        term = build_pubmed_query(request)
        pmids, total_results = await self.search_ids(term, request.max_results, request.sort_by)

        if not pmids:
            logger.info("PubMed search returned no ids for term %r", term)
            return PubMedSearchResponse(papers=[], total_results=0)

        papers = await self.fetch_details(pmids)
        logger.info("PubMed returned %d papers of %d total", len(papers), total_results)
        return PubMedSearchResponse(papers=papers, total_results=total_results)

    async def search_ids(self, term: str, max_results: int, sort_by: str) -> Tuple[List[str], int]:
        """Run esearch and return the PMIDs plus the total hit count"""
        params = {
            'db': 'pubmed',
            'term': term,
            'retmax': max_results,
            'sort': sort_by,
            'retmode': 'xml',
        }
        logger.info("PubMed esearch params: %s", params)
        response_text = await self._fetch("esearch.fcgi", params)

        result = require(parse_xml(response_text), "eSearchResult")
        pmids = [text_of(pmid).strip() for pmid in as_list(child(result, "IdList", "Id"))]
        pmids = [pmid for pmid in pmids if pmid]
        if not pmids:
            return [], 0

        try:
            total_results = int(text_of(require(result, "Count")).strip())
        except ValueError as e:
            raise ResponseShapeError(f"Invalid PubMed Count: {e}") from e
        return pmids, total_results

    async def fetch_details(self, pmids: List[str]) -> List[PubMedPaper]:
        """Run efetch for a batch of PMIDs"""
        params = {
            'db': 'pubmed',
            'id': ','.join(pmids),
            'retmode': 'xml',
        }
        response_text = await self._fetch("efetch.fcgi", params)

        article_set = require(parse_xml(response_text), "PubmedArticleSet")
        return [self._parse_article(article) for article in as_list(child(article_set, "PubmedArticle"))]

    async def _fetch(self, endpoint: str, params: Dict[str, Any]) -> str:
        params = {**params, **self._identity_params()}
        url = f"{self.base_url}/{endpoint}"

        await self.rate_limiter.acquire()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params, headers=self.headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(f"PubMed {endpoint} returned status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"PubMed {endpoint} request failed: {e}") from e

        return response.text

    def _identity_params(self) -> Dict[str, str]:
        params = {'tool': Config.NCBI_TOOL}
        if Config.NCBI_EMAIL:
            params['email'] = Config.NCBI_EMAIL
        if self.api_key:
            params['api_key'] = self.api_key
        return params

    def _parse_article(self, article: Any) -> PubMedPaper:
        medline = require(article, "MedlineCitation")
        article_data = require(medline, "Article")
        if not isinstance(article_data, dict):
            raise ResponseShapeError("PubMed Article has no content")
        pub_date = child(article_data, "Journal", "JournalIssue", "PubDate")

        return PubMedPaper(
            pmid=text_of(require(medline, "PMID")).strip(),
            title=text_of(article_data.get("ArticleTitle")).strip(),
            authors=self._parse_authors(article_data),
            abstract=self._parse_abstract(article_data),
            doi=self._parse_doi(article, article_data),
            journal=text_of(child(article_data, "Journal", "Title")).strip(),
            publish_date=text_of(child(pub_date, "Year")) or text_of(child(pub_date, "MedlineDate"))
        )

    def _parse_authors(self, article_data: Dict[str, Any]) -> List[str]:
        authors = []
        for author in as_list(child(article_data, "AuthorList", "Author")):
            collective = text_of(child(author, "CollectiveName")).strip()
            if collective:
                authors.append(collective)
                continue
            name = f"{text_of(child(author, 'LastName'))} {text_of(child(author, 'ForeName'))}".strip()
            if name:
                authors.append(name)
        return authors

    def _parse_abstract(self, article_data: Dict[str, Any]) -> Optional[str]:
        # Structured abstracts carry one labelled AbstractText per section
        sections = []
        for section in as_list(child(article_data, "Abstract", "AbstractText")):
            text = text_of(section).strip()
            if not text:
                continue
            label = child(section, "Label")
            sections.append(f"{label}: {text}" if label else text)
        return "\n".join(sections) or None

    def _parse_doi(self, article: Dict[str, Any], article_data: Dict[str, Any]) -> Optional[str]:
        for location in as_list(article_data.get("ELocationID")):
            if isinstance(location, dict) and location.get("EIdType") == "doi":
                doi = text_of(location).strip()
                if doi:
                    return doi

        # Older records only list the DOI among the PubmedData article ids
        for article_id in as_list(child(article, "PubmedData", "ArticleIdList", "ArticleId")):
            if isinstance(article_id, dict) and article_id.get("IdType") == "doi":
                doi = text_of(article_id).strip()
                if doi:
                    return doi
        return None
