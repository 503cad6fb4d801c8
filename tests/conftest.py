import html
import json

UPLOADS = "https://cuddlyoctopus.com/wp-content/uploads/2020/01/"


def product_ld(**overrides):
    data = {
        "@context": "https://schema.org/",
        "@type": "Product",
        "@id": "https://cuddlyoctopus.com/product/asuna/#product",
        "name": "Asuna &amp; Kirito",
        "url": "https://cuddlyoctopus.com/product/asuna/",
        "description": "Dakimakura cover &quot;Asuna&quot;",
        "image": UPLOADS + "919-foo.jpg",
        "sku": 1234,
        "offers": [
            {
                "@type": "Offer",
                "price": "89.00",
                "priceValidUntil": "2022-12-31",
                "priceSpecification": {
                    "price": "89.00",
                    "priceCurrency": "USD",
                    "valueAddedTaxIncluded": "false",
                },
                "priceCurrency": "USD",
                "availability": "http://schema.org/InStock",
                "url": "https://cuddlyoctopus.com/product/asuna/",
                "seller": {
                    "@type": "Organization",
                    "name": "Cuddly Octopus",
                    "url": "https://cuddlyoctopus.com",
                },
            }
        ],
    }
    data.update(overrides)
    return data


def escaped(url):
    return url.replace("/", "\\/")


def build_page(ld=None, body="", raw_ld=None):
    """Product page with a JSON-LD block in the head and ``body`` appended."""
    if raw_ld is None:
        raw_ld = json.dumps(ld if ld is not None else product_ld())
    return (
        "<!DOCTYPE html><html><head><title>Asuna</title>"
        f'<script type="application/ld+json">{raw_ld}</script>'
        f"</head><body>{body}</body></html>"
    ).encode("utf-8")


def gallery_json(*urls):
    """Inline script with image URLs JSON-encoded, as the product gallery embeds them."""
    items = ",".join('{"src":"%s"}' % escaped(u) for u in urls)
    return f"<script>var gallery = [{items}];</script>"


def catalog_attr(rows):
    return (
        '<form class="variations_form cart" '
        f'data-product_variations="{html.escape(json.dumps(rows), quote=True)}"></form>'
    )


def variation(variant, image_url, **extra):
    row = {
        "attributes": {"attribute_pa_variant": variant},
        "image": {"url": image_url, "title": variant},
        "variation_id": 100,
        "display_price": 89,
        "is_in_stock": True,
        "weight": "0.5",
        "dimensions": {"length": "150", "width": "50", "height": ""},
    }
    row.update(extra)
    return row
