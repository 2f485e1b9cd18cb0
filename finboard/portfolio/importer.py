"""
Import holdings from a CSV or XLSX export of a portfolio sheet.

Columns are positional; the first row is a header and is skipped:

    0 serial no, 1 stock name, 2 purchase price, 3 quantity, 4 investment,
    5 exchange, 6 sector, 7 CMP, 8 present value, 9 gain/loss, 10 P/E,
    11 latest earnings

Sector total/summary rows and rows without a name are ignored, as are rows
whose purchase price or quantity is not positive.
"""

import codecs
import logging
import math

from django.core.files.uploadedfile import UploadedFile
from tablib import Dataset

from finboard.portfolio.types import StockHolding
from finboard.utils.file import get_file_extension

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "xlsx")
SKIPPED_ROW_MARKERS = ("total", "summary")


class ImportException(Exception):
    def __init__(self, message, rows=None):
        self.message = message
        self.rows = rows


def _cell(row, index):
    return row[index] if index < len(row) else None


def _to_number(value) -> float:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return number if math.isfinite(number) else 0


def _text(value, default: str) -> str:
    text = str(value).strip() if value is not None else ""
    return text or default


def get_imported_dataset(file, file_format):
    if file_format == "csv":
        file = codecs.iterdecode(file, "utf-8-sig")
    return Dataset().load(file, format=file_format)


def parse_holdings(dataset: Dataset) -> list[StockHolding]:
    holdings = []
    for index, row in enumerate(dataset, start=1):
        name = _cell(row, 1)
        if name is None or str(name).strip() == "":
            continue
        name = str(name).strip()
        if any(marker in name.lower() for marker in SKIPPED_ROW_MARKERS):
            continue

        holding = StockHolding(
            id=f"imported-{index}",
            particulars=name,
            purchase_price=_to_number(_cell(row, 2)),
            quantity=int(_to_number(_cell(row, 3))),
            investment=_to_number(_cell(row, 4)),
            exchange=_text(_cell(row, 5), "NSE"),
            sector=_text(_cell(row, 6), "Others"),
            cmp=_to_number(_cell(row, 7)),
            present_value=_to_number(_cell(row, 8)),
            gain_loss=_to_number(_cell(row, 9)),
            pe_ratio=_to_number(_cell(row, 10)),
            latest_earnings=_to_number(_cell(row, 11)),
        )
        if holding.purchase_price > 0 and holding.quantity > 0:
            holdings.append(holding)
        else:
            logger.debug(f"Skipping row {index} ({name}): purchase price and quantity must be positive")
    return holdings


def import_holdings(file: UploadedFile) -> list[StockHolding]:
    file_format = get_file_extension(file)
    if file_format not in SUPPORTED_FORMATS:
        raise ImportException(f"Invalid file format. Only 'CSV' and 'XLSX' are supported. Got {file_format}")

    dataset = get_imported_dataset(file, file_format)
    if not dataset.headers:
        raise ImportException("The uploaded file did not contain any headers")

    holdings = parse_holdings(dataset)
    if not holdings:
        raise ImportException("No valid holdings found in the uploaded file")
    logger.info(f"Imported {len(holdings)} holdings from {file_format} upload")
    return holdings
