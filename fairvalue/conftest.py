import pytest

from fairvalue.domain.types import BaseYearFinancials
from fairvalue.domain.types import DCFAssumptions
from fairvalue.domain.types import EquityBridge
from fairvalue.domain.types import RelativeInputs
from fairvalue.domain.types import Side
from fairvalue.domain.types import Transaction
from fairvalue.domain.types import ValuationInputs


def _make_inputs(
    growth: tuple[float | None, ...] = (5, 5, 5, 5, 5),
    margin: tuple[float | None, ...] = (20, 20, 20, 20, 20),
    projection_years: int = 5,
    discount_rate: float = 10,
    perpetual_growth_rate: float = 2,
    revenue: float = 100_000_000,
    diluted_shares: float = 50_000_000,
    market_price: float | None = None,
) -> ValuationInputs:
  """Helper to build a valuation case around the reference company."""
  return ValuationInputs(
      base_year=BaseYearFinancials(
          revenue=revenue,
          ebit=20_000_000,
          tax_rate=21,
          depreciation_and_amortization=5_000_000,
          capex=7_000_000,
          change_in_nwc=2_000_000,
      ),
      assumptions=DCFAssumptions(
          projection_years=projection_years,
          revenue_growth=growth,
          ebit_margin=margin,
          discount_rate=discount_rate,
          perpetual_growth_rate=perpetual_growth_rate,
      ),
      equity_bridge=EquityBridge(
          total_debt=30_000_000,
          cash=10_000_000,
          diluted_shares=diluted_shares,
      ),
      relative=RelativeInputs(
          net_income=12_000_000,
          ebitda=25_000_000,
          peer_pe=15,
          peer_ev_ebitda=10,
          current_market_price=market_price,
      ),
  )


def _make_tx(
    ticker: str,
    side: Side,
    quantity: float,
    price: float,
    commission: float | None = None,
    date: str = '2024-01-02',
) -> Transaction:
  """Helper to build a transaction."""
  return Transaction(ticker=ticker,
                     side=side,
                     date=date,
                     quantity=quantity,
                     price=price,
                     commission=commission)


@pytest.fixture
def reference_inputs() -> ValuationInputs:
  """Reference case: flat 5% growth, 20% margin, WACC 10%, g 2%."""
  return _make_inputs()


@pytest.fixture
def reference_case_dict() -> dict:
  """Reference case as stored on disk, with a market price."""
  return {
      'case_name': 'Reference Co',
      'inputs': _make_inputs(market_price=5.5).to_dict(),
  }


@pytest.fixture
def mixed_transactions() -> list[Transaction]:
  """Buys and sells across three tickers with fractional prices."""
  return [
      _make_tx('AAPL', Side.BUY, 10, 150.1, commission=1.0),
      _make_tx('MSFT', Side.BUY, 5, 300.3),
      _make_tx('AAPL', Side.BUY, 5, 160.7),
      _make_tx('AAPL', Side.SELL, 3, 170.2, commission=2.5),
      _make_tx('TSLA', Side.BUY, 2, 0.1),
      _make_tx('TSLA', Side.BUY, 2, 0.2),
      _make_tx('MSFT', Side.SELL, 5, 310.0),
  ]


@pytest.fixture
def make_inputs():
  """Factory fixture for valuation cases."""
  return _make_inputs


@pytest.fixture
def make_tx():
  """Factory fixture for transactions."""
  return _make_tx
