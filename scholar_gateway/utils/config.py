import os
from dotenv import load_dotenv

# Load environment variables from .env.local file
load_dotenv('.env.local')

class Config:
    """Application configuration settings"""

    # ArXiv API Settings
    ARXIV_BASE_URL = "http://export.arxiv.org/api/query"
    ARXIV_RATE_LIMIT = float(os.getenv("ARXIV_RATE_LIMIT", "3.0"))  # arXiv throttles per IP

    # PubMed E-utilities Settings
    PUBMED_BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
    PUBMED_API_KEY = os.getenv("PUBMED_API_KEY")
    PUBMED_RATE_LIMIT = float(os.getenv("PUBMED_RATE_LIMIT", "0.1"))  # 10 req/s with an API key, use 0.34 without one
    NCBI_TOOL = os.getenv("NCBI_TOOL", "scholar-gateway")
    NCBI_EMAIL = os.getenv("NCBI_EMAIL")

    # Outbound HTTP
    API_TIMEOUT = 30.0
    USER_AGENT = "ScholarGateway/1.0"

    # Search Defaults
    DEFAULT_MAX_RESULTS = 10
    DEFAULT_SORT_BY = "relevance"
    DEFAULT_SORT_ORDER = "descending"

    # Response Settings
    CACHE_MAX_AGE = 3600

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
