"""
Query builders: translate a search request into each source's query grammar.

Both builders are pure string construction, the same request always gives
the same query string.
"""

from typing import Optional

from ..models.search import ArxivSearchRequest, PubMedSearchRequest
from ..utils.errors import QueryValidationError

ARXIV_FIELD_PREFIXES = {
    "title": "ti",
    "author": "au",
    "abstract": "abs",
}

# Open bounds of arXiv's inclusive submittedDate range
ARXIV_EARLIEST_DATE = "00000101"
ARXIV_LATEST_DATE = "99991231"


def _require_query(query: Optional[str]) -> str:
    if query is None or not query.strip():
        raise QueryValidationError("query must not be empty")
    return query


def build_arxiv_query(request: ArxivSearchRequest) -> str:
    """Build an arXiv `search_query` value.

    The search field picks the prefix (`ti:`, `au:`, `abs:`, else `all:`).
    Year bounds add `submittedDate` range clauses, each one-sided bound
    padded with the widest date, and the field query is ANDed with them:
    `(ti:foo) AND (submittedDate:[20200101 TO 99991231])`.
    """
    query = _require_query(request.query)
    prefix = ARXIV_FIELD_PREFIXES.get(request.search_field, "all")
    search_query = f"{prefix}:{query}"

    date_clauses = []
    if request.year_start:
        date_clauses.append(f"submittedDate:[{request.year_start}0101 TO {ARXIV_LATEST_DATE}]")
    if request.year_end:
        date_clauses.append(f"submittedDate:[{ARXIV_EARLIEST_DATE} TO {request.year_end}1231]")

    if date_clauses:
        search_query = f"({search_query}) AND ({' AND '.join(date_clauses)})"
    return search_query


def build_pubmed_query(request: PubMedSearchRequest) -> str:
    """Build a PubMed `term` value.

    The query is passed through untouched unless a year bound is given, in
    which case it becomes `(<query>) AND (<start>[PDAT] : <end>[PDAT])`. A
    missing bound leaves its side of the `:` empty.
    """
    query = _require_query(request.query)
    if not (request.year_start or request.year_end):
        return query

    start = f"{request.year_start}[PDAT]" if request.year_start else ""
    end = f"{request.year_end}[PDAT]" if request.year_end else ""
    return f"({query}) AND ({start} : {end})"
