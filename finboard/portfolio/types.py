import dataclasses
import datetime


def _now():
    return datetime.datetime.now(datetime.UTC)


@dataclasses.dataclass
class StockHolding:
    id: str
    particulars: str
    purchase_price: float
    quantity: float
    investment: float
    exchange: str = "NSE"
    sector: str = "Others"
    cmp: float = 0
    present_value: float = 0
    gain_loss: float = 0
    pe_ratio: float = 0
    latest_earnings: float = 0
    portfolio_percentage: float = 0
    market_cap: float | None = None
    flagged: bool = False
    last_updated: datetime.datetime = dataclasses.field(default_factory=_now)


@dataclasses.dataclass
class SectorSummary:
    sector: str
    total_investment: float
    total_present_value: float
    total_gain_loss: float
    stock_count: int


@dataclasses.dataclass
class PortfolioData:
    holdings: list[StockHolding]
    sector_summaries: list[SectorSummary]
    total_investment: float
    total_present_value: float
    total_gain_loss: float
    total_gain_loss_percentage: float


@dataclasses.dataclass
class FinancialData:
    """Market data for one symbol."""

    cmp: float
    pe_ratio: float
    latest_earnings: float
    last_updated: datetime.datetime = dataclasses.field(default_factory=_now)
