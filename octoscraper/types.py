from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class PriceSpecification:
    price: str = ""
    price_currency: str = ""
    value_added_tax_included: str = ""


@dataclass(frozen=True)
class Seller:
    type: str = ""
    name: str = ""
    url: str = ""


@dataclass(frozen=True)
class Offer:
    type: str = ""
    price: str = ""
    price_valid_until: str = ""
    price_currency: str = ""
    availability: str = ""
    url: str = ""
    price_specification: PriceSpecification = field(default_factory=PriceSpecification)
    seller: Seller = field(default_factory=Seller)


@dataclass(frozen=True)
class ProductRecord:
    main_image: str
    context: str = ""
    type: str = ""
    id: str = ""
    name: str = ""
    url: str = ""
    description: str = ""
    sku: Optional[int] = None
    offers: Tuple[Offer, ...] = ()
    alternate_image: Optional[str] = None

    @property
    def price(self) -> Optional[str]:
        """Price of the first offer, if any."""
        return self.offers[0].price if self.offers else None


@dataclass(frozen=True)
class CatalogEntry:
    """One row of the per-variant catalog embedded in newer product pages."""

    attributes: Mapping[str, str] = field(default_factory=dict)
    image_url: Optional[str] = None
    variation_id: Optional[int] = None
    display_price: Any = None
    is_in_stock: Optional[bool] = None
    weight: Any = None
    dimensions: Any = None

    @property
    def variant(self) -> Optional[str]:
        return self.attributes.get("attribute_pa_variant")
