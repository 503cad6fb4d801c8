from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace

import urllib3
from typing import List, Optional, Sequence

from .excel_writer import DEFAULT_HEADERS_EN, DEFAULT_HEADERS_RU, write_products_to_excel
from .fetch import FetchConfig
from .pipeline import Fetcher, get_product_by_url
from .types import ProductRecord


MESSAGES = {
    "ru": {
        "stage_fetch": "[1/2] Загрузка страниц товаров… Всего к обработке: {total}",
        "progress": "[{current}/{total}] ({percent}%) Обработка: {url} (осталось: {remaining})",
        "progress_ok": "[{current}/{total}] Успешно: {name}",
        "progress_alt": "[{current}/{total}] Изображение 18+: {url}",
        "warn_failed": "[warn] не удалось получить/извлечь {url}: {error}",
        "stage_save": "[2/2] Сохранение в Excel…",
        "success": "Парсинг успешно завершён. Сохранено товаров: {count}",
        "file": "Файл: {path}",
        "error": "Ошибка парсинга: {error}",
        "interrupted": "Прервано пользователем",
        "help_desc": (
            "Сбор данных о товарах cuddlyoctopus.com и экспорт в Excel.\n"
            "Данные берутся из JSON-LD страницы, включая изображение 18+."
        ),
        "help_url": "Ссылки на страницы товаров (https://cuddlyoctopus.com/product/<slug>/)",
        "help_out": "Путь для сохранения Excel (по умолчанию products.xlsx)",
        "help_template": "Путь к Excel-шаблону (необязательно)",
        "help_delay": "Задержка между запросами (сек)",
        "help_ua": "Переопределить User-Agent",
        "help_timeout": "Общий таймаут запроса (сек)",
        "help_lang": "Язык сообщений: ru или en (по умолчанию ru)",
        "help_verbose": "Подробный журнал",
    },
    "en": {
        "stage_fetch": "[1/2] Fetching product pages… Total to process: {total}",
        "progress": "[{current}/{total}] ({percent}%) Processing: {url} (remaining: {remaining})",
        "progress_ok": "[{current}/{total}] Success: {name}",
        "progress_alt": "[{current}/{total}] 18+ image: {url}",
        "warn_failed": "[warn] failed to fetch/extract {url}: {error}",
        "stage_save": "[2/2] Saving to Excel…",
        "success": "Parsing has been successfully completed. Saved products: {count}",
        "file": "File: {path}",
        "error": "Parsing error: {error}",
        "interrupted": "Interrupted by user",
        "help_desc": (
            "Collect product data from cuddlyoctopus.com and export to Excel.\n"
            "Data comes from the page JSON-LD, including the 18+ image."
        ),
        "help_url": "Product page URLs (https://cuddlyoctopus.com/product/<slug>/)",
        "help_out": "Path to Excel output (default products.xlsx)",
        "help_template": "Path to Excel template (optional)",
        "help_delay": "Delay between requests (sec)",
        "help_ua": "Override User-Agent",
        "help_timeout": "Overall request timeout (sec)",
        "help_lang": "Messages language: ru or en (default ru)",
        "help_verbose": "Verbose logging",
    },
}


def _msg(lang: str, key: str, **kwargs) -> str:
    lang_key = lang if lang in MESSAGES else "ru"
    template = MESSAGES[lang_key].get(key, "")
    return template.format(**kwargs)


def scrape_to_excel(
    urls: Sequence[str],
    out_path: str,
    template_path: Optional[str] = None,
    delay: float = 0.3,
    user_agent: Optional[str] = None,
    timeout: Optional[float] = None,
    lang: str = "ru",
    fetcher: Optional[Fetcher] = None,
) -> List[ProductRecord]:
    """Scrape the given product pages and save them into Excel.

    Returns the list of extracted products.
    """
    config = FetchConfig().with_user_agent(user_agent)
    if timeout:
        config = replace(config, total_timeout=timeout)

    unique_urls = list(dict.fromkeys(urls))
    total = len(unique_urls)
    print(_msg(lang, "stage_fetch", total=total), flush=True)

    products: List[ProductRecord] = []
    for current, url in enumerate(unique_urls, start=1):
        print(
            _msg(
                lang,
                "progress",
                current=current,
                total=total,
                percent=int(round(current * 100 / total)),
                url=url,
                remaining=total - current,
            ),
            flush=True,
        )
        try:
            if current > 1 and delay > 0:
                time.sleep(delay)
            product = get_product_by_url(url, fetcher=fetcher, config=config)
        except Exception as exc:
            print(_msg(lang, "warn_failed", url=url, error=exc), file=sys.stderr)
            continue
        products.append(product)
        print(_msg(lang, "progress_ok", current=current, total=total, name=product.name), flush=True)
        if product.alternate_image:
            print(_msg(lang, "progress_alt", current=current, total=total, url=product.alternate_image), flush=True)

    print(_msg(lang, "stage_save"), flush=True)
    headers = DEFAULT_HEADERS_EN if lang == "en" else DEFAULT_HEADERS_RU
    write_products_to_excel(products, out_path=out_path, template_path=template_path, headers=headers)
    return products


def _build_arg_parser(lang: str = "ru") -> argparse.ArgumentParser:
    loc = MESSAGES.get(lang, MESSAGES["ru"])
    p = argparse.ArgumentParser(
        prog="octoscraper",
        description=loc["help_desc"],
    )
    p.add_argument("urls", nargs="+", metavar="url", help=loc["help_url"])
    p.add_argument(
        "-o",
        "--out",
        dest="out_path",
        default="products.xlsx",
        help=loc["help_out"],
    )
    p.add_argument(
        "-t",
        "--template",
        dest="template_path",
        default=None,
        help=loc["help_template"],
    )
    p.add_argument(
        "-d",
        "--delay",
        dest="delay",
        type=float,
        default=0.3,
        help=loc["help_delay"],
    )
    p.add_argument(
        "-H",
        "--user-agent",
        dest="user_agent",
        default=None,
        help=loc["help_ua"],
    )
    p.add_argument(
        "--timeout",
        dest="timeout",
        type=float,
        default=None,
        help=loc["help_timeout"],
    )
    p.add_argument(
        "--lang",
        dest="lang",
        choices=["ru", "en"],
        default=lang,
        help=loc["help_lang"],
    )
    p.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help=loc["help_verbose"],
    )
    return p


def main(argv: Optional[list[str]] = None) -> int:
    # Help text is always RU: --lang is only known after parsing, and a second pass isn't worth it.
    parser = _build_arg_parser("ru")
    args = parser.parse_args(argv)
    lang = args.lang
    # the fetcher talks to the site with TLS verification off
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    try:
        products = scrape_to_excel(
            urls=args.urls,
            out_path=args.out_path,
            template_path=args.template_path,
            delay=args.delay,
            user_agent=args.user_agent,
            timeout=args.timeout,
            lang=lang,
        )
        print(_msg(lang, "success", count=len(products)))
        print(_msg(lang, "file", path=args.out_path))
        return 0
    except KeyboardInterrupt:
        print(_msg(lang, "interrupted"), file=sys.stderr)
        return 130
    except Exception as exc:
        print(_msg(lang, "error", error=exc), file=sys.stderr)
        return 1
