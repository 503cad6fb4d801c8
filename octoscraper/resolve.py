"""
Alternate (r18) image resolution.

The structured data only names the main image. Two page layouts expose the
alternate image differently, so each gets its own resolver:

- ``IdArithmeticResolver``: older pages. The alternate upload is usually the
  main upload's ID plus one. The guess is only trusted when the page itself
  references it inside embedded JSON (with ``\\/`` escaped slashes).
- ``CatalogResolver``: newer pages with a WooCommerce variation catalog in
  ``data-product_variations``. The row tagged ``r18`` carries the image.

Both return the alternate image URL or ``None``. ``None`` means the product
has no alternate image and is not an error.
"""

from __future__ import annotations

import html
import json
import logging
import re
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Iterable, List, Optional, Protocol, Sequence

from .errors import ImageCatalogMalformed, ImageIDParseFailed
from .types import CatalogEntry, ProductRecord


logger = logging.getLogger(__name__)

SITE_URL = "https://cuddlyoctopus.com/"
UPLOADS_PREFIX = re.escape(SITE_URL) + r"wp-content/uploads/[0-9]+/[0-9]{2}/"

IMAGE_ID_RE = re.compile(UPLOADS_PREFIX + r"([0-9]+)")
IMAGE_PART_RE = re.compile((UPLOADS_PREFIX + r"([0-9]+-[0-9]+)").encode())
CATALOG_RE = re.compile(rb'data-product_variations="(\[[^"]*\])"')

RESTRICTED_VARIANT = "r18"


class AlternateImageResolver(Protocol):
    def applies(self, product: ProductRecord, page: bytes) -> bool:
        ...

    def resolve(self, product: ProductRecord, page: bytes) -> Optional[str]:
        ...


def escape_slashes(url: str) -> bytes:
    """URL as it appears inside JSON embedded in the page: ``/`` written as ``\\/``."""
    return url.replace("/", "\\/").encode()


def _page_references(page: bytes, url: str) -> bool:
    return escape_slashes(url) in page


class IdArithmeticResolver:
    def applies(self, product: ProductRecord, page: bytes) -> bool:
        return IMAGE_ID_RE.search(product.main_image) is not None

    def image_id(self, main_image: str) -> tuple[str, int]:
        m = IMAGE_ID_RE.search(main_image)
        if not m:
            raise ImageIDParseFailed(f"no upload ID in image URL {main_image!r}")
        try:
            return m.group(1), int(m.group(1))
        except ValueError as exc:
            raise ImageIDParseFailed(f"bad upload ID in image URL {main_image!r}") from exc

    def resolve(self, product: ProductRecord, page: bytes) -> Optional[str]:
        main_image = product.main_image
        raw_id, image_id = self.image_id(main_image)
        next_id = str(image_id + 1)

        candidate = main_image.replace(raw_id, next_id, 1)
        if _page_references(page, candidate):
            return candidate

        # Some uploads are numbered "<id>-<part>"; the alternate then takes the
        # place of that whole token.
        m = IMAGE_PART_RE.search(page)
        if not m:
            logger.debug("No alternate image for %s: %s not on page", main_image, candidate)
            return None
        part_id = m.group(1).decode()
        candidate = main_image.replace(part_id, next_id, 1)
        if candidate != main_image and _page_references(page, candidate):
            return candidate
        logger.debug("No alternate image for %s: fallback %s not on page", main_image, candidate)
        return None


def _decode_catalog_entry(obj: Any) -> CatalogEntry:
    if not isinstance(obj, dict):
        raise ImageCatalogMalformed(f"catalog entry must be an object, got {type(obj).__name__}")
    attributes = obj.get("attributes") or {}
    if not isinstance(attributes, dict):
        raise ImageCatalogMalformed("catalog entry 'attributes' must be an object")
    image = obj.get("image") or {}
    if not isinstance(image, dict):
        raise ImageCatalogMalformed("catalog entry 'image' must be an object")
    image_url = image.get("url") or None
    if image_url is not None and not isinstance(image_url, str):
        raise ImageCatalogMalformed("catalog entry image 'url' must be a string")
    return CatalogEntry(
        attributes=MappingProxyType(dict(attributes)),
        image_url=image_url,
        variation_id=obj.get("variation_id"),
        display_price=obj.get("display_price"),
        is_in_stock=obj.get("is_in_stock"),
        weight=obj.get("weight"),
        dimensions=obj.get("dimensions"),
    )


def parse_catalog(page: bytes) -> Optional[List[CatalogEntry]]:
    """Decode the variation catalog, or return None when the page has none."""
    m = CATALOG_RE.search(page)
    if not m:
        return None
    text = html.unescape(m.group(1).decode("utf-8", errors="replace"))
    try:
        rows = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ImageCatalogMalformed(f"variation catalog is not valid JSON: {exc}") from exc
    if not isinstance(rows, list):
        raise ImageCatalogMalformed("variation catalog must be a list")
    return [_decode_catalog_entry(row) for row in rows]


def find_restricted_image(entries: Iterable[CatalogEntry]) -> Optional[str]:
    for entry in entries:
        if entry.variant == RESTRICTED_VARIANT:
            return entry.image_url
    return None


class CatalogResolver:
    def applies(self, product: ProductRecord, page: bytes) -> bool:
        return CATALOG_RE.search(page) is not None

    def resolve(self, product: ProductRecord, page: bytes) -> Optional[str]:
        entries = parse_catalog(page) or []
        return find_restricted_image(entries)


DEFAULT_RESOLVERS: Sequence[AlternateImageResolver] = (
    CatalogResolver(),
    IdArithmeticResolver(),
)


def select_resolver(
    product: ProductRecord,
    page: bytes,
    resolvers: Sequence[AlternateImageResolver] = DEFAULT_RESOLVERS,
) -> AlternateImageResolver:
    for resolver in resolvers:
        if resolver.applies(product, page):
            return resolver
    if not resolvers:
        raise ValueError("no alternate image resolvers given")
    # nothing matched: the last resolver runs and reports why it cannot apply
    return resolvers[-1]


def resolve_alternate_image(
    product: ProductRecord,
    page: bytes,
    resolvers: Sequence[AlternateImageResolver] = DEFAULT_RESOLVERS,
) -> ProductRecord:
    resolver = select_resolver(product, page, resolvers)
    alternate = resolver.resolve(product, page)
    logger.debug(
        "%s resolved alternate image for %s: %s",
        type(resolver).__name__,
        product.url or product.main_image,
        alternate,
    )
    return replace(product, alternate_image=alternate)
