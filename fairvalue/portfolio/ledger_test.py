import pytest

from fairvalue.domain.errors import InvalidInputError
from fairvalue.domain.types import Side
from fairvalue.domain.types import Transaction
from fairvalue.portfolio.ledger import Portfolio


@pytest.fixture
def portfolio() -> Portfolio:
  return (Portfolio(name='Core')
          .record_transaction('abc', 'buy', '2024-01-02', 10, 10.0)
          .record_transaction('ABC', Side.BUY, '2024-02-01', 10, 20.0)
          .record_transaction('xyz', 'BUY', '2024-02-15', 4, 25.0, 1.0))


class TestRecordTransaction:
  """Tests for Portfolio.record_transaction."""

  def test_ticker_and_side_normalized(self, portfolio):
    first = portfolio.transactions[0]

    assert first.ticker == 'ABC'
    assert first.side is Side.BUY

  def test_unique_ids(self, portfolio):
    ids = {t.transaction_id for t in portfolio.transactions}

    assert len(ids) == 3

  def test_returns_new_portfolio(self):
    """The receiver is never mutated."""
    empty = Portfolio(name='Core')
    updated = empty.record_transaction('ABC', 'BUY', '2024-01-02', 1, 1.0)

    assert empty.transactions == ()
    assert len(updated.transactions) == 1

  @pytest.mark.parametrize('quantity', [0, -5])
  def test_non_positive_quantity_rejected(self, quantity):
    with pytest.raises(InvalidInputError, match='Quantity'):
      Portfolio(name='Core').record_transaction('ABC', 'BUY', '2024-01-02',
                                                quantity, 10.0)

  def test_negative_price_rejected(self):
    with pytest.raises(InvalidInputError, match='Price'):
      Portfolio(name='Core').record_transaction('ABC', 'BUY', '2024-01-02', 1,
                                                -1.0)

  def test_bad_date_rejected(self):
    with pytest.raises(InvalidInputError, match='YYYY-MM-DD'):
      Portfolio(name='Core').record_transaction('ABC', 'BUY', '01/02/2024', 1,
                                                1.0)

  def test_unknown_side_rejected(self):
    with pytest.raises(InvalidInputError, match='Unknown transaction side'):
      Portfolio(name='Core').record_transaction('ABC', 'HOLD', '2024-01-02', 1,
                                                1.0)


class TestAddTransaction:
  """Tests for Portfolio.add_transaction."""

  def test_ticker_normalized_to_match_marks(self):
    """A lower-case ticker still picks up its manual mark."""
    tx = Transaction(ticker=' aapl ',
                     side=Side.BUY,
                     date='2024-01-02',
                     quantity=10,
                     price=100.0)
    portfolio = (Portfolio(name='Core').add_transaction(tx)
                 .update_price('aapl', 150.0, '2024-03-01'))

    holding = portfolio.summary().holdings[0]

    assert portfolio.transactions[0].ticker == 'AAPL'
    assert portfolio.transactions[0].transaction_id == tx.transaction_id
    assert holding.mark_price == 150.0
    assert holding.mark_date == '2024-03-01'
    assert holding.unrealized_gain_loss == pytest.approx(500.0)

  def test_duplicate_id_rejected(self, portfolio):
    with pytest.raises(ValueError, match='Duplicate transaction id'):
      portfolio.add_transaction(portfolio.transactions[0])


class TestDeleteTransaction:
  """Tests for Portfolio.delete_transaction."""

  def test_removes_entirely(self, portfolio):
    target = portfolio.transactions[1]
    updated = portfolio.delete_transaction(target.transaction_id)

    assert target not in updated.transactions
    assert len(updated.transactions) == 2
    shares = {h.ticker: h.shares for h in updated.summary().holdings}
    assert shares == {'ABC': 10, 'XYZ': 4}

  def test_unknown_id(self, portfolio):
    with pytest.raises(KeyError):
      portfolio.delete_transaction('txn-missing')


class TestUpdatePrice:
  """Tests for Portfolio.update_price."""

  def test_overwrites_previous_mark(self, portfolio):
    updated = (portfolio.update_price('abc', 18.0, '2024-03-01')
               .update_price('ABC', 21.0, '2024-04-01'))

    assert len(updated.price_marks) == 1
    assert updated.price_marks['ABC'].price == 21.0
    assert updated.price_marks['ABC'].as_of == '2024-04-01'

  def test_negative_price_rejected(self, portfolio):
    with pytest.raises(InvalidInputError):
      portfolio.update_price('ABC', -1.0, '2024-03-01')

  def test_original_unchanged(self, portfolio):
    portfolio.update_price('ABC', 18.0, '2024-03-01')

    assert dict(portfolio.price_marks) == {}


class TestHash:
  """Tests for Portfolio hashing."""

  def test_hash_ignores_marks(self, portfolio):
    marked = portfolio.update_price('ABC', 18.0, '2024-03-01')

    assert hash(marked) == hash(portfolio)
    assert marked != portfolio
    assert len({portfolio, marked}) == 2


class TestSummary:
  """Tests for Portfolio.summary."""

  def test_recomputed_after_changes(self, portfolio):
    """ABC: 20 sh avg 15 marked 18 -> 360; XYZ: 4 sh cost 101 -> 101."""
    summary = portfolio.update_price('ABC', 18.0, '2024-03-01').summary()

    abc = summary.holdings[0]
    assert abc.ticker == 'ABC'
    assert abc.average_cost == pytest.approx(15.0)
    assert abc.total_cost_basis == pytest.approx(300.0)
    assert abc.unrealized_gain_loss == pytest.approx(60.0)
    assert summary.total_market_value == pytest.approx(461.0)

  def test_dict_round_trip(self, portfolio):
    marked = portfolio.update_price('XYZ', 30.0, '2024-03-01')
    rebuilt = Portfolio.from_dict(marked.to_dict())

    assert rebuilt.transactions == marked.transactions
    assert rebuilt.summary() == marked.summary()
