from __future__ import annotations

import os
from typing import Iterable, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from .types import ProductRecord


DEFAULT_HEADERS_RU = [
    "Название",
    "Артикул",
    "Цена",
    "Валюта",
    "Ссылка",
    "Изображение",
    "Изображение 18+",
    "Описание",
]

DEFAULT_HEADERS_EN = [
    "Name",
    "SKU",
    "Price",
    "Currency",
    "URL",
    "Image",
    "Image (18+)",
    "Description",
]


def _ensure_sheet(wb_path: Optional[str]) -> tuple[Workbook, Worksheet]:
    if wb_path and os.path.exists(wb_path):
        wb = load_workbook(wb_path)
        return wb, wb.active
    wb = Workbook()
    return wb, wb.active


def _row(p: ProductRecord) -> list:
    offer = p.offers[0] if p.offers else None
    return [
        p.name,
        p.sku,
        offer.price if offer else None,
        offer.price_currency if offer else None,
        p.url,
        p.main_image,
        p.alternate_image,
        p.description,
    ]


def write_products_to_excel(
    products: Iterable[ProductRecord],
    out_path: str,
    template_path: Optional[str] = None,
    headers: Optional[list[str]] = None,
) -> None:
    headers = headers or DEFAULT_HEADERS_RU

    # the template is only read; the result always goes to out_path
    wb_path_to_open = template_path if (template_path and os.path.exists(template_path)) else None
    wb, ws = _ensure_sheet(wb_path_to_open)

    if ws.max_row == 1 and ws.max_column == 1 and (ws.cell(row=1, column=1).value is None):
        for col_idx, title in enumerate(headers, start=1):
            ws.cell(row=1, column=col_idx).value = title

    start_row = ws.max_row + 1
    for row_idx, p in enumerate(products, start=start_row):
        for col_idx, value in enumerate(_row(p), start=1):
            ws.cell(row=row_idx, column=col_idx).value = value

    wb.save(out_path)
