from __future__ import annotations

import html
import json
from typing import Any, Mapping

from bs4 import BeautifulSoup

from .errors import StructuredDataMalformed, StructuredDataMissing
from .types import Offer, PriceSpecification, ProductRecord, Seller


def normalize_text(text: str) -> str:
    """Decode HTML character entities. Safe to apply to already-plain text."""
    return html.unescape(text)


def extract_structured_data(page: bytes) -> Any:
    """Return the decoded JSON of the first ``application/ld+json`` script on the page."""
    soup = BeautifulSoup(page, "lxml")
    # only a bare <script type="application/ld+json">; plugin blocks carry extra attributes
    tag = soup.find(lambda t: t.name == "script" and t.attrs == {"type": "application/ld+json"})
    if tag is None:
        raise StructuredDataMissing("no application/ld+json script block on the page")
    try:
        return json.loads(tag.string or "")
    except json.JSONDecodeError as exc:
        raise StructuredDataMalformed(f"structured data is not valid JSON: {exc}") from exc


def _field(obj: Mapping[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise StructuredDataMalformed(f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _scalar(obj: Mapping[str, Any], key: str) -> str:
    # offer values are carried through; numbers are kept as their text form
    value = obj.get(key)
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise StructuredDataMalformed(f"{key!r} must be a string or number, got {type(value).__name__}")
    return str(value)


def _object(obj: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = obj.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise StructuredDataMalformed(f"{key!r} must be an object, got {type(value).__name__}")
    return value


def _decode_offer(obj: Any) -> Offer:
    if not isinstance(obj, dict):
        raise StructuredDataMalformed(f"offer must be an object, got {type(obj).__name__}")
    spec = _object(obj, "priceSpecification")
    seller = _object(obj, "seller")
    return Offer(
        type=_field(obj, "@type"),
        price=_scalar(obj, "price"),
        price_valid_until=_scalar(obj, "priceValidUntil"),
        price_currency=_field(obj, "priceCurrency"),
        availability=_field(obj, "availability"),
        url=_field(obj, "url"),
        price_specification=PriceSpecification(
            price=_scalar(spec, "price"),
            price_currency=_field(spec, "priceCurrency"),
            value_added_tax_included=_scalar(spec, "valueAddedTaxIncluded"),
        ),
        seller=Seller(
            type=_field(seller, "@type"),
            name=_field(seller, "name"),
            url=_field(seller, "url"),
        ),
    )


def _main_image(obj: Mapping[str, Any]) -> str:
    image = obj.get("image")
    if isinstance(image, list):
        image = image[0] if image else None
    if image is None or image == "":
        raise StructuredDataMalformed("structured data has no product image")
    if not isinstance(image, str):
        raise StructuredDataMalformed(f"'image' must be a string, got {type(image).__name__}")
    return image


def decode_product(data: Any) -> ProductRecord:
    """Map decoded JSON-LD onto a ProductRecord with normalized name and description."""
    if not isinstance(data, dict):
        raise StructuredDataMalformed(f"structured data must be an object, got {type(data).__name__}")

    sku = data.get("sku")
    if sku is not None and (isinstance(sku, bool) or not isinstance(sku, int)):
        raise StructuredDataMalformed(f"'sku' must be an integer, got {sku!r}")

    offers = data.get("offers")
    if offers is None:
        offers = []
    if not isinstance(offers, list):
        raise StructuredDataMalformed(f"'offers' must be a list, got {type(offers).__name__}")

    return ProductRecord(
        context=_field(data, "@context"),
        type=_field(data, "@type"),
        id=_field(data, "@id"),
        name=normalize_text(_field(data, "name")),
        url=_field(data, "url"),
        description=normalize_text(_field(data, "description")),
        main_image=_main_image(data),
        sku=sku,
        offers=tuple(_decode_offer(o) for o in offers),
    )


def extract_product(page: bytes) -> ProductRecord:
    return decode_product(extract_structured_data(page))
