from __future__ import annotations

import functools
import logging
import re
from typing import Callable, Optional, Sequence

from .errors import URLShapeInvalid
from .extract import extract_product
from .fetch import FetchConfig, fetch_page
from .resolve import DEFAULT_RESOLVERS, SITE_URL, AlternateImageResolver, resolve_alternate_image
from .types import ProductRecord


logger = logging.getLogger(__name__)

PRODUCT_URL_RE = re.compile(re.escape(SITE_URL) + r"product/[^/]+")

Fetcher = Callable[[str], bytes]


def validate_product_url(url: str) -> str:
    if not isinstance(url, str) or not PRODUCT_URL_RE.match(url):
        raise URLShapeInvalid(f"not a product page URL: {url!r}")
    return url


def parse_product_page(
    page: bytes,
    resolvers: Sequence[AlternateImageResolver] = DEFAULT_RESOLVERS,
) -> ProductRecord:
    """Build the product record from already fetched page bytes."""
    product = extract_product(page)
    return resolve_alternate_image(product, page, resolvers)


def get_product_by_url(
    url: str,
    fetcher: Optional[Fetcher] = None,
    config: Optional[FetchConfig] = None,
    resolvers: Sequence[AlternateImageResolver] = DEFAULT_RESOLVERS,
) -> ProductRecord:
    """
    Fetch a product page and return its record, alternate image included.

    Raises URLShapeInvalid before any network call for non-product URLs.
    Transport errors from the fetcher propagate unchanged.
    """
    validate_product_url(url)
    fetch = fetcher or functools.partial(fetch_page, config=config or FetchConfig())
    page = fetch(url)
    product = parse_product_page(page, resolvers)
    logger.info("Parsed %s: %s (alternate image: %s)", url, product.name, product.alternate_image or "none")
    return product
