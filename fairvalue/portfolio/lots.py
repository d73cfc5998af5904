'''
Average-cost lot aggregation.

Reduces a list of transactions into one LotPosition per ticker. Amounts
are summed with math.fsum, which is exactly rounded, so the result does
not depend on the order in which transactions arrive.

SELL commissions do not enter the cost basis; realized proceeds are not
tracked.
'''

from collections import defaultdict
from math import fsum
from typing import Dict, Iterable, List, Tuple

from fairvalue.domain.types import LotPosition
from fairvalue.domain.types import Side
from fairvalue.domain.types import Transaction


def aggregate_lots(
    transactions: Iterable[Transaction],
    include_closed: bool = False,
) -> Tuple[LotPosition, ...]:
  '''
  Aggregate transactions into per-ticker positions.

  Quantities are assumed to be strictly positive (checked by the
  validator). A ticker sold without any buys ends with negative net
  shares; short positions are not modeled.

  Args:
    transactions: Transactions of one portfolio, in any order
    include_closed: Also return tickers with net shares <= 0

  Returns:
    Positions ordered by ticker
  '''
  bought: Dict[str, List[float]] = defaultdict(list)
  buy_cost: Dict[str, List[float]] = defaultdict(list)
  sold: Dict[str, List[float]] = defaultdict(list)

  for tx in transactions:
    if tx.side is Side.BUY:
      bought[tx.ticker].append(tx.quantity)
      buy_cost[tx.ticker].append(tx.quantity * tx.price)
      if tx.commission:
        buy_cost[tx.ticker].append(tx.commission)
    else:
      sold[tx.ticker].append(tx.quantity)

  positions = []
  for ticker in sorted(set(bought) | set(sold)):
    position = LotPosition(
        ticker=ticker,
        total_bought=fsum(bought.get(ticker, ())),
        total_buy_cost=fsum(buy_cost.get(ticker, ())),
        total_sold=fsum(sold.get(ticker, ())),
    )
    if include_closed or position.net_shares > 0:
      positions.append(position)

  return tuple(positions)
