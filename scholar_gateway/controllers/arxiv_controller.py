"""
ArXiv Controller
POST-only search endpoint for the arXiv preprint repository
"""

import logging

from fastapi import APIRouter, Depends

from ..models.search import ArxivSearchRequest, ArxivSearchResponse
from ..services.arxiv_service import ArxivService
from ..utils.errors import ErrorType, QueryValidationError, create_error_response
from ..utils.responses import cached_json_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ArXiv"])


def get_arxiv_service() -> ArxivService:
    return ArxivService()


@router.post("/arxiv", response_model=ArxivSearchResponse)
async def search_arxiv(
    request: ArxivSearchRequest,
    service: ArxivService = Depends(get_arxiv_service)
):
    """
    🔍 Search arXiv preprints

    **Example body:**
    `{"query": "quantum computing", "searchField": "title", "maxResults": 2}`
    """
    try:
        result = await service.search(request)
    except QueryValidationError as e:
        return create_error_response(ErrorType.BAD_REQUEST, str(e))
    except Exception as e:
        logger.exception("arXiv API Error")
        return create_error_response(ErrorType.INTERNAL_SERVER_ERROR, str(e) or None)

    return cached_json_response(result)
