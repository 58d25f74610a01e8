from dotenv import load_dotenv
load_dotenv('.env.local')  # Load environment variables FIRST

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from scholar_gateway.controllers.arxiv_controller import router as arxiv_router
from scholar_gateway.controllers.pubmed_controller import router as pubmed_router
from scholar_gateway.utils.config import Config
from scholar_gateway.utils.errors import ErrorType, create_error_response, error_type_for_status

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("scholar_gateway")

app = FastAPI(
    title="Scholar Gateway",
    description="📚 One search request, normalized results from arXiv and PubMed",
    version="1.0.0"
)

app.include_router(arxiv_router)
app.include_router(pubmed_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["*"],
)

if not Config.PUBMED_API_KEY:
    logger.warning("PUBMED_API_KEY is not set, NCBI allows fewer requests without a key")

# ============================================================================
# ERROR ENVELOPES
# ============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error_type = error_type_for_status(exc.status_code)
    message = exc.detail if isinstance(exc.detail, str) else None
    return create_error_response(error_type, message)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return create_error_response(ErrorType.BAD_REQUEST, "; ".join(messages) or None)

# ============================================================================
# SERVICE INFO
# ============================================================================

@app.get("/")
async def root():
    return {
        "message": "📚 Scholar Gateway",
        "description": "Uniform literature search over arXiv and PubMed",
        "endpoints": {
            "arxiv": "POST /api/arxiv",
            "pubmed": "POST /api/pubmed"
        },
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Scholar Gateway"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
