"""
cuddlyoctopus.com product scraper package.

Exports:
- ProductRecord: frozen dataclass describing a product, including its 18+ image
- get_product_by_url: fetch and parse a single product page
- parse_product_page: parse already fetched product page bytes
- FetchConfig: headers and timeouts used by the fetcher
- scrape_to_excel: scrape several product pages and save them into Excel
"""

from .errors import (
    ImageCatalogMalformed,
    ImageIDParseFailed,
    ScraperError,
    StructuredDataError,
    StructuredDataMalformed,
    StructuredDataMissing,
    URLShapeInvalid,
)
from .fetch import FetchConfig, FetchTimeout
from .pipeline import get_product_by_url, parse_product_page
from .types import CatalogEntry, Offer, ProductRecord
from .cli import scrape_to_excel

__all__ = [
    "CatalogEntry",
    "FetchConfig",
    "FetchTimeout",
    "ImageCatalogMalformed",
    "ImageIDParseFailed",
    "Offer",
    "ProductRecord",
    "ScraperError",
    "StructuredDataError",
    "StructuredDataMalformed",
    "StructuredDataMissing",
    "URLShapeInvalid",
    "get_product_by_url",
    "parse_product_page",
    "scrape_to_excel",
]
