"""
Error types raised by the product pipeline.

Transport failures are not wrapped: they surface as ``requests`` exceptions.
"""


class ScraperError(Exception):
    """Base class for every error the pipeline raises itself."""


class URLShapeInvalid(ScraperError, ValueError):
    """The URL is not a product page URL. Raised before any network call."""


class StructuredDataError(ScraperError):
    """The page no longer carries the expected JSON-LD product block."""


class StructuredDataMissing(StructuredDataError):
    pass


class StructuredDataMalformed(StructuredDataError, ValueError):
    pass


class ImageIDParseFailed(ScraperError, ValueError):
    """The main image URL has no numeric upload identifier."""


class ImageCatalogMalformed(ScraperError, ValueError):
    """The embedded variation catalog could not be decoded."""
