'''
Portfolio ledger: transactions plus manual price marks.

A Portfolio is an immutable value. Recording a transaction, deleting one
or updating a price returns a new Portfolio; the summary is recomputed
from scratch on every call.

Usage:
  portfolio = Portfolio(name='Core')
  portfolio = portfolio.record_transaction('aapl', 'BUY', '2024-01-02',
                                           quantity=10, price=185.0)
  portfolio = portfolio.update_price('AAPL', 190.0, '2024-03-01')
  summary = portfolio.summary()
'''

from dataclasses import dataclass, field, replace
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from fairvalue.domain.types import ManualPriceMark
from fairvalue.domain.types import PortfolioSummary
from fairvalue.domain.types import Side
from fairvalue.domain.types import Transaction
from fairvalue.domain.validation import check_price_mark
from fairvalue.domain.validation import check_transaction
from fairvalue.domain.validation import raise_on_failures
from fairvalue.portfolio.summary import summarize_portfolio

logger = logging.getLogger(__name__)


def normalize_ticker(ticker: str) -> str:
  return ticker.strip().upper()


@dataclass(frozen=True)
class Portfolio:
  '''
  Self-reported investment portfolio.

  Attributes:
    name: Display name
    transactions: Recorded transactions, in entry order
    price_marks: At most one live manual mark per ticker (not hashed)
  '''
  name: str
  transactions: Tuple[Transaction, ...] = ()
  price_marks: Mapping[str, ManualPriceMark] = field(
      default_factory=lambda: MappingProxyType({}), hash=False)

  def record_transaction(
      self,
      ticker: str,
      side: Union[Side, str],
      date: str,
      quantity: float,
      price: float,
      commission: Optional[float] = None,
  ) -> 'Portfolio':
    '''
    Validate and append a transaction.

    Raises:
      InvalidInputError: If the transaction fails validation
    '''
    tx = Transaction(
        ticker=normalize_ticker(ticker),
        side=Side.parse(side),
        date=date,
        quantity=quantity,
        price=price,
        commission=commission,
    )
    return self.add_transaction(tx)

  def add_transaction(self, tx: Transaction) -> 'Portfolio':
    '''
    Validate and append an already built transaction.

    The ticker is normalized the same way as price mark keys.
    '''
    raise_on_failures(check_transaction(tx))
    tx = replace(tx, ticker=normalize_ticker(tx.ticker))
    if any(t.transaction_id == tx.transaction_id for t in self.transactions):
      raise ValueError(f'Duplicate transaction id {tx.transaction_id}')
    logger.debug('%s: %s %s x%s @ %s', self.name, tx.side.value, tx.ticker,
                 tx.quantity, tx.price)
    return replace(self, transactions=self.transactions + (tx,))

  def delete_transaction(self, transaction_id: str) -> 'Portfolio':
    '''
    Remove a transaction entirely.

    Raises:
      KeyError: If no transaction has this id
    '''
    remaining = tuple(
        t for t in self.transactions if t.transaction_id != transaction_id)
    if len(remaining) == len(self.transactions):
      raise KeyError(f'Unknown transaction id: {transaction_id}')
    return replace(self, transactions=remaining)

  def update_price(self, ticker: str, price: float, as_of: str) -> 'Portfolio':
    '''
    Set the manual mark for a ticker, replacing any previous mark.

    Raises:
      InvalidInputError: If the price or date is invalid
    '''
    mark = ManualPriceMark(ticker=normalize_ticker(ticker),
                           price=price,
                           as_of=as_of)
    raise_on_failures(check_price_mark(mark))
    marks = dict(self.price_marks)
    marks[mark.ticker] = mark
    return replace(self, price_marks=MappingProxyType(marks))

  def summary(self) -> PortfolioSummary:
    '''Recompute holdings and totals from the current ledger.'''
    return summarize_portfolio(self.transactions, self.price_marks)

  def to_dict(self) -> Dict[str, Any]:
    return {
        'name': self.name,
        'transactions': [t.to_dict() for t in self.transactions],
        'price_marks': {
            ticker: {
                'price': mark.price,
                'as_of': mark.as_of
            } for ticker, mark in self.price_marks.items()
        },
    }

  @classmethod
  def from_dict(cls, data: Mapping[str, Any]) -> 'Portfolio':
    '''
    Rebuild a portfolio from a dictionary, validating every record.

    Raises:
      InvalidInputError: If any transaction or mark fails validation
    '''
    portfolio = cls(name=data.get('name', 'Portfolio'))
    for raw in data.get('transactions', []):
      portfolio = portfolio.add_transaction(Transaction.from_dict(raw))
    for ticker, raw_mark in data.get('price_marks', {}).items():
      portfolio = portfolio.update_price(ticker, raw_mark['price'],
                                         raw_mark['as_of'])
    return portfolio
