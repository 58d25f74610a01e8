"""
PubMed Controller
POST-only search endpoint for the PubMed literature index
"""

import logging

from fastapi import APIRouter, Depends

from ..models.search import PubMedSearchRequest, PubMedSearchResponse
from ..services.pubmed_service import PubMedService
from ..utils.errors import ErrorType, QueryValidationError, create_error_response
from ..utils.responses import cached_json_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["PubMed"])


def get_pubmed_service() -> PubMedService:
    return PubMedService()


@router.post("/pubmed", response_model=PubMedSearchResponse)
async def search_pubmed(
    request: PubMedSearchRequest,
    service: PubMedService = Depends(get_pubmed_service)
):
    """🧬 Search PubMed (esearch for ids, then efetch for the records)"""
    try:
        result = await service.search(request)
    except QueryValidationError as e:
        return create_error_response(ErrorType.BAD_REQUEST, str(e))
    except Exception as e:
        logger.exception("PubMed API Error")
        return create_error_response(ErrorType.INTERNAL_SERVER_ERROR, str(e) or None)

    return cached_json_response(result)
