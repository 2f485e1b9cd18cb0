"""
Portfolio of stock holdings with sector roll-ups.

Holdings live in process memory, seeded with a sample portfolio. Every
change recomputes each holding's share of total investment; market data
updates recompute present value and gain/loss from the new price.
"""

import copy
import dataclasses
import logging
import time
import uuid
from collections.abc import Callable
from functools import cache

import pandas as pd
from django.conf import settings

from finboard.portfolio.market_data import MockMarketDataProvider
from finboard.portfolio.types import FinancialData, PortfolioData, SectorSummary, StockHolding

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_INTERVAL = 15


def _sample(id, particulars, purchase_price, quantity, sector, cmp, pe_ratio, latest_earnings):
    investment = purchase_price * quantity
    present_value = cmp * quantity
    return StockHolding(
        id=id,
        particulars=particulars,
        purchase_price=purchase_price,
        quantity=quantity,
        investment=investment,
        exchange="NSE",
        sector=sector,
        cmp=cmp,
        present_value=present_value,
        gain_loss=present_value - investment,
        pe_ratio=pe_ratio,
        latest_earnings=latest_earnings,
    )


SAMPLE_PORTFOLIO = [
    _sample("1", "RELIANCE", 2400.00, 100, "Oil & Gas", 2450.75, 18.5, 125.50),
    _sample("2", "TCS", 3800.00, 50, "Technology", 3850.25, 25.2, 95.75),
    _sample("3", "INFY", 1400.00, 75, "Technology", 1450.50, 22.8, 78.25),
    _sample("4", "HDFC", 1600.00, 60, "Financial Services", 1650.00, 19.8, 112.50),
    _sample("5", "ICICIBANK", 900.00, 100, "Financial Services", 950.75, 16.5, 68.75),
    _sample("6", "WIPRO", 440.00, 200, "Technology", 450.25, 20.1, 45.50),
    _sample("7", "TATAMOTORS", 720.00, 120, "Automobile", 750.50, 28.5, 35.25),
    _sample("8", "AXISBANK", 820.00, 100, "Financial Services", 850.00, 17.2, 58.90),
]


class HoldingNotFound(Exception):
    pass


class PortfolioService:
    def __init__(
        self,
        market_data: Callable[[str], FinancialData] | None = None,
        holdings: list[StockHolding] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.market_data = market_data or MockMarketDataProvider()
        self.clock = clock
        self.last_refreshed: float | None = None
        self.holdings: list[StockHolding] = copy.deepcopy(SAMPLE_PORTFOLIO if holdings is None else holdings)
        self._recalculate_percentages()

    def _recalculate_percentages(self) -> None:
        total_investment = sum(holding.investment for holding in self.holdings)
        for holding in self.holdings:
            holding.portfolio_percentage = holding.investment / total_investment * 100 if total_investment else 0

    def get_portfolio_data(self) -> PortfolioData:
        total_investment = sum(holding.investment for holding in self.holdings)
        total_present_value = sum(holding.present_value for holding in self.holdings)
        total_gain_loss = total_present_value - total_investment
        return PortfolioData(
            holdings=copy.deepcopy(self.holdings),
            sector_summaries=self.sector_summaries(),
            total_investment=total_investment,
            total_present_value=total_present_value,
            total_gain_loss=total_gain_loss,
            total_gain_loss_percentage=total_gain_loss / total_investment * 100 if total_investment > 0 else 0,
        )

    def sector_summaries(self) -> list[SectorSummary]:
        """Per-sector totals, in the order each sector first appears."""
        if not self.holdings:
            return []

        df = pd.DataFrame([dataclasses.asdict(holding) for holding in self.holdings])
        grouped = df.groupby("sector", sort=False).agg(
            total_investment=("investment", "sum"),
            total_present_value=("present_value", "sum"),
            total_gain_loss=("gain_loss", "sum"),
            stock_count=("id", "count"),
        )
        return [
            SectorSummary(
                sector=sector,
                total_investment=float(row.total_investment),
                total_present_value=float(row.total_present_value),
                total_gain_loss=float(row.total_gain_loss),
                stock_count=int(row.stock_count),
            )
            for sector, row in grouped.iterrows()
        ]

    def update_financial_data(self) -> int:
        """Refresh market data for every holding; returns how many were updated."""
        updated = 0
        for holding in self.holdings:
            try:
                quote = self.market_data(holding.particulars)
            except Exception as e:
                logger.warning(f"Failed to update market data for {holding.particulars}: {e}")
                continue

            holding.cmp = quote.cmp
            holding.pe_ratio = quote.pe_ratio
            holding.latest_earnings = quote.latest_earnings
            holding.present_value = holding.cmp * holding.quantity
            holding.gain_loss = holding.present_value - holding.investment
            holding.last_updated = quote.last_updated
            updated += 1

        self.last_refreshed = self.clock()
        logger.info(f"Updated market data for {updated}/{len(self.holdings)} holdings")
        return updated

    def refresh_if_stale(self) -> bool:
        interval = getattr(settings, "PORTFOLIO_UPDATE_INTERVAL", DEFAULT_UPDATE_INTERVAL)
        if self.last_refreshed is not None and self.clock() - self.last_refreshed < interval:
            return False
        self.update_financial_data()
        return True

    def add_holding(
        self,
        particulars: str,
        purchase_price: float,
        quantity: float,
        exchange: str = "NSE",
        sector: str = "Others",
        investment: float | None = None,
    ) -> StockHolding:
        holding = StockHolding(
            id=uuid.uuid4().hex,
            particulars=particulars,
            purchase_price=purchase_price,
            quantity=quantity,
            investment=purchase_price * quantity if investment is None else investment,
            exchange=exchange,
            sector=sector,
        )
        self.holdings.append(holding)
        self._recalculate_percentages()
        return holding

    def remove_holding(self, holding_id: str) -> None:
        self.holdings = [holding for holding in self.holdings if holding.id != holding_id]
        self._recalculate_percentages()

    def update_holding(self, holding_id: str, **updates) -> StockHolding:
        for index, holding in enumerate(self.holdings):
            if holding.id == holding_id:
                updates.pop("id", None)
                self.holdings[index] = dataclasses.replace(holding, **updates)
                self._recalculate_percentages()
                return self.holdings[index]
        raise HoldingNotFound(f"Holding {holding_id} not found")

    def replace_holdings(self, holdings: list[StockHolding]) -> None:
        self.holdings = list(holdings)
        self.last_refreshed = None
        self._recalculate_percentages()
        logger.info(f"Portfolio replaced with {len(self.holdings)} imported holdings")

    def reset_to_sample_data(self) -> None:
        self.replace_holdings(copy.deepcopy(SAMPLE_PORTFOLIO))

    @property
    def holdings_count(self) -> int:
        return len(self.holdings)

    def has_data(self) -> bool:
        return bool(self.holdings)


@cache
def get_portfolio_service() -> PortfolioService:
    return PortfolioService()
