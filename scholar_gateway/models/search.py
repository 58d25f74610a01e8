from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List

from ..utils.config import Config

class CamelModel(BaseModel):
    """Accepts and serializes camelCase keys, snake_case also accepted on input"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# ============================================================================
# SEARCH REQUESTS
# ============================================================================

class SearchRequest(CamelModel):
    """Fields common to every source"""
    query: str = Field(..., min_length=1)
    max_results: int = Field(default=Config.DEFAULT_MAX_RESULTS, ge=1)
    year_start: Optional[int] = Field(default=None, ge=1, le=9999)
    year_end: Optional[int] = Field(default=None, ge=1, le=9999)

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be blank")
        return value

    @model_validator(mode="after")
    def check_year_range(self):
        if self.year_start is not None and self.year_end is not None and self.year_start > self.year_end:
            raise ValueError("yearStart must not be after yearEnd")
        return self

class ArxivSearchRequest(SearchRequest):
    search_field: str = Field(default="all", pattern="^(all|title|author|abstract)$")
    sort_by: str = Field(default=Config.DEFAULT_SORT_BY, pattern="^(relevance|lastUpdatedDate|submittedDate)$")
    sort_order: str = Field(default=Config.DEFAULT_SORT_ORDER, pattern="^(ascending|descending)$")

class PubMedSearchRequest(SearchRequest):
    sort_by: str = Field(default="relevance", pattern="^(relevance|pub_date)$")

# ============================================================================
# NORMALIZED PAPERS
# ============================================================================

class ArxivPaper(CamelModel):
    id: str
    title: str
    authors: List[str] = []
    summary: str = ""
    categories: List[str] = []
    doi: Optional[str] = None
    journal_ref: Optional[str] = None
    pdf_url: Optional[str] = None
    published_date: str = ""
    updated_date: str = ""

class PubMedPaper(CamelModel):
    pmid: str
    title: str
    authors: List[str] = []
    abstract: Optional[str] = None
    doi: Optional[str] = None
    journal: str = ""
    publish_date: str = ""

# ============================================================================
# RESPONSE ENVELOPES
# ============================================================================

class ArxivSearchResponse(CamelModel):
    papers: List[ArxivPaper]
    total_results: int
    next_cursor: Optional[str] = None

class PubMedSearchResponse(CamelModel):
    papers: List[PubMedPaper]
    total_results: int
