import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from tablib import Dataset

from finboard.portfolio.importer import ImportException, import_holdings, parse_holdings

HEADERS = [
    "No",
    "Particulars",
    "Purchase Price",
    "Qty",
    "Investment",
    "NSE/BSE",
    "Sector",
    "CMP",
    "Present Value",
    "Gain/Loss",
    "P/E",
    "Latest Earnings",
]


def _dataset(*rows):
    return Dataset(*rows, headers=HEADERS)


def test_parse_holdings():
    dataset = _dataset(
        [1, "TCS", 3800, 50, 190000, "NSE", "Technology", 3850.25, 192512.5, 2512.5, 25.2, 95.75],
        [2, "Technology Total", "", "", 190000, "", "", "", "", "", "", ""],
        [3, "", "", "", "", "", "", "", "", "", "", ""],
        [4, "SUZLON", "45", "100", "4,500", "", "", "", "", "", "", ""],
        [5, "BROKEN", 0, 10, 0, "NSE", "Power", "", "", "", "", ""],
    )

    holdings = parse_holdings(dataset)

    assert [h.particulars for h in holdings] == ["TCS", "SUZLON"]
    tcs, suzlon = holdings
    assert tcs.id == "imported-1"
    assert tcs.purchase_price == 3800
    assert tcs.quantity == 50
    assert tcs.cmp == 3850.25
    assert tcs.pe_ratio == 25.2
    assert suzlon.investment == 4500
    assert suzlon.exchange == "NSE"
    assert suzlon.sector == "Others"
    assert suzlon.cmp == 0


def test_summary_rows_are_skipped():
    dataset = _dataset([1, "Portfolio Summary", 1, 1, 1, "", "", "", "", "", "", ""])
    assert parse_holdings(dataset) == []


def test_import_csv():
    content = (
        ",".join(HEADERS) + "\n"
        "1,RELIANCE,2400,100,240000,NSE,Oil & Gas,2450.75,245075,5075,18.5,125.5\n"
        "2,INFY,1400,75,105000,BSE,Technology,1450.5,108787.5,3787.5,22.8,78.25\n"
    )
    upload = SimpleUploadedFile("portfolio.csv", content.encode("utf-8"), content_type="text/csv")

    holdings = import_holdings(upload)

    assert [h.particulars for h in holdings] == ["RELIANCE", "INFY"]
    assert holdings[1].exchange == "BSE"
    assert holdings[0].investment == 240000


def test_import_xlsx():
    dataset = _dataset([1, "WIPRO", 440, 200, 88000, "NSE", "Technology", 450.25, 90050, 2050, 20.1, 45.5])
    upload = SimpleUploadedFile("portfolio.xlsx", dataset.export("xlsx"))

    holdings = import_holdings(upload)

    assert len(holdings) == 1
    assert holdings[0].quantity == 200
    assert holdings[0].latest_earnings == 45.5


def test_import_rejects_other_formats():
    upload = SimpleUploadedFile("portfolio.json", b"{}", content_type="application/json")

    with pytest.raises(ImportException) as exc_info:
        import_holdings(upload)
    assert exc_info.value.message == "Invalid file format. Only 'CSV' and 'XLSX' are supported. Got json"


def test_import_without_valid_rows():
    content = ",".join(HEADERS) + "\n" + "1,Grand Total,,,,,,,,,,\n"
    upload = SimpleUploadedFile("portfolio.csv", content.encode("utf-8"), content_type="text/csv")

    with pytest.raises(ImportException):
        import_holdings(upload)
