"""
ClearLabel - configuration and logging setup
Settings are read from the environment (and a local .env file)
"""

import os
import logging

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Central configuration for the health engine"""

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # Catalog (Open Food Facts family)
    USER_AGENT = os.getenv('CLEARLABEL_USER_AGENT', 'ClearLabel - Python Health Engine')
    FOOD_CATALOG_URL = "https://world.openfoodfacts.org"
    BEAUTY_CATALOG_URL = "https://world.openbeautyfacts.org"
    PET_FOOD_CATALOG_URL = "https://world.openpetfoodfacts.org"
    SEARCH_PATH = "/cgi/search.pl"
    PRODUCT_PATH = "/api/v2/product/{barcode}.json"

    # Network
    CATALOG_TIMEOUT = float(os.getenv('CATALOG_TIMEOUT', '15'))
    CATALOG_RETRIES = int(os.getenv('CATALOG_RETRIES', '1'))
    CATALOG_BACKOFF = float(os.getenv('CATALOG_BACKOFF', '1.0'))
    CATALOG_PAGE_SIZE = int(os.getenv('CATALOG_PAGE_SIZE', '20'))
    RETRYABLE_STATUSES = (408, 429, 500, 502, 503, 504)

    # Ranking
    MAX_SEARCH_TERMS = int(os.getenv('MAX_SEARCH_TERMS', '2'))
    MAX_ALTERNATIVES = int(os.getenv('MAX_ALTERNATIVES', '5'))

    # Tolerances (independent of each other)
    SCORE_TIE_TOLERANCE = int(os.getenv('SCORE_TIE_TOLERANCE', '5'))
    QUANTITY_TOLERANCE_PERCENT = float(os.getenv('QUANTITY_TOLERANCE_PERCENT', '5'))

    # Product lookup cache
    CACHE_MAX_SIZE = int(os.getenv('CACHE_MAX_SIZE', '50'))
    CACHE_TTL_DAYS = int(os.getenv('CACHE_TTL_DAYS', '7'))


def setup_logging(level: str = None):
    """Configure root logging once for CLI and app entry points"""
    logging.basicConfig(
        level=level or Config.LOG_LEVEL,
        format=Config.LOG_FORMAT
    )
