from openpyxl import Workbook, load_workbook

from octoscraper.excel_writer import DEFAULT_HEADERS_EN, DEFAULT_HEADERS_RU, write_products_to_excel
from octoscraper.types import Offer, ProductRecord

from conftest import UPLOADS


def _product(n, alternate=None):
    return ProductRecord(
        main_image=f"{UPLOADS}{n}.jpg",
        name=f"Product {n}",
        url=f"https://cuddlyoctopus.com/product/p{n}/",
        description="Cover",
        sku=n,
        offers=(Offer(price="89.00", price_currency="USD"),),
        alternate_image=alternate,
    )


def test_writes_header_and_rows(tmp_path):
    out = tmp_path / "products.xlsx"

    write_products_to_excel([_product(1, UPLOADS + "2.jpg"), _product(3)], out_path=str(out))

    ws = load_workbook(out).active
    assert [c.value for c in ws[1]] == DEFAULT_HEADERS_RU
    assert [c.value for c in ws[2]] == [
        "Product 1",
        1,
        "89.00",
        "USD",
        "https://cuddlyoctopus.com/product/p1/",
        UPLOADS + "1.jpg",
        UPLOADS + "2.jpg",
        "Cover",
    ]
    assert ws.cell(row=3, column=1).value == "Product 3"
    assert ws.cell(row=3, column=7).value is None
    assert ws.max_row == 3


def test_appends_to_template_without_modifying_it(tmp_path):
    template = tmp_path / "template.xlsx"
    wb = Workbook()
    wb.active.append(["My name", "My sku"])
    wb.save(template)
    out = tmp_path / "out.xlsx"

    write_products_to_excel([_product(1)], out_path=str(out), template_path=str(template), headers=DEFAULT_HEADERS_EN)

    ws = load_workbook(out).active
    assert ws.cell(row=1, column=1).value == "My name"
    assert ws.cell(row=2, column=1).value == "Product 1"
    assert load_workbook(template).active.max_row == 1


def test_product_without_offers(tmp_path):
    out = tmp_path / "products.xlsx"
    product = ProductRecord(main_image=UPLOADS + "1.jpg", name="Bare")

    write_products_to_excel([product], out_path=str(out), headers=DEFAULT_HEADERS_EN)

    ws = load_workbook(out).active
    assert [c.value for c in ws[1]] == DEFAULT_HEADERS_EN
    assert ws.cell(row=2, column=3).value is None
