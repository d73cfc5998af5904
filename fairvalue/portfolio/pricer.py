'''
Mark-to-market pricing of open lot positions.

Prices come from manual marks only. A ticker without a mark is priced at
its own average cost, so its unrealized gain/loss is exactly zero.
'''

from typing import Iterable, Mapping, Tuple

from fairvalue.domain.types import Holding
from fairvalue.domain.types import LotPosition
from fairvalue.domain.types import ManualPriceMark


def price_position(
    position: LotPosition,
    mark: ManualPriceMark | None = None,
) -> Holding:
  '''
  Price one position.

  Args:
    position: Open position (net shares > 0)
    mark: Manual mark for the ticker, if any

  Returns:
    Holding with portfolio_percentage left at 0
  '''
  shares = position.net_shares
  average_cost = position.average_cost

  if mark is not None:
    mark_price, mark_date = mark.price, mark.as_of
  else:
    mark_price, mark_date = average_cost, None

  total_cost_basis = shares * average_cost
  market_value = shares * mark_price

  return Holding(
      ticker=position.ticker,
      shares=shares,
      average_cost=average_cost,
      total_cost_basis=total_cost_basis,
      mark_price=mark_price,
      mark_date=mark_date,
      market_value=market_value,
      unrealized_gain_loss=market_value - total_cost_basis,
  )


def price_holdings(
    positions: Iterable[LotPosition],
    marks: Mapping[str, ManualPriceMark],
) -> Tuple[Holding, ...]:
  '''Price every open position, preserving input order.'''
  return tuple(
      price_position(p, marks.get(p.ticker))
      for p in positions
      if p.net_shares > 0)
