'''
Portfolio-level aggregation of priced holdings.
'''

import dataclasses
from math import fsum
from typing import Iterable, Mapping

from fairvalue.domain.types import Holding
from fairvalue.domain.types import ManualPriceMark
from fairvalue.domain.types import PortfolioSummary
from fairvalue.domain.types import Transaction
from fairvalue.portfolio.lots import aggregate_lots
from fairvalue.portfolio.pricer import price_holdings


def build_summary(holdings: Iterable[Holding]) -> PortfolioSummary:
  '''
  Total the holdings and attach portfolio weights.

  Weights are market_value / total_market_value * 100, or 0 for every
  holding when the total is 0. Holdings are ordered by descending market
  value; the sort is stable, so ties keep their incoming (ticker) order.

  Args:
    holdings: Priced holdings

  Returns:
    PortfolioSummary
  '''
  holdings = list(holdings)
  total_market_value = fsum(h.market_value for h in holdings)
  total_cost_basis = fsum(h.total_cost_basis for h in holdings)

  weighted = []
  for h in holdings:
    if total_market_value > 0:
      pct = h.market_value / total_market_value * 100.0
    else:
      pct = 0.0
    weighted.append(dataclasses.replace(h, portfolio_percentage=pct))

  weighted.sort(key=lambda h: h.market_value, reverse=True)

  return PortfolioSummary(
      holdings=tuple(weighted),
      total_market_value=total_market_value,
      total_cost_basis=total_cost_basis,
  )


def summarize_portfolio(
    transactions: Iterable[Transaction],
    marks: Mapping[str, ManualPriceMark],
) -> PortfolioSummary:
  '''Aggregate lots, price them and total the portfolio in one pass.'''
  positions = aggregate_lots(transactions)
  return build_summary(price_holdings(positions, marks))
