'''
Input validation for transactions, price marks and valuation cases.

Each check produces a CheckResult. Callers collect the results of the
relevant checks and hand them to raise_on_failures(), which turns any
failure into an InvalidInputError carrying every failed detail.
'''

from dataclasses import dataclass
import datetime
from math import isfinite
from typing import Iterable, List, Optional

from fairvalue.domain.errors import InvalidInputError
from fairvalue.domain.types import ManualPriceMark
from fairvalue.domain.types import Side
from fairvalue.domain.types import Transaction
from fairvalue.domain.types import ValuationInputs


@dataclass(frozen=True)
class CheckResult:
  """Result of a single validation check."""

  name: str
  ok: bool
  details: str

  def __str__(self) -> str:
    status = '✓' if self.ok else '✗'
    return f'{status} {self.name}: {self.details}'


def pass_result(name: str, details: str) -> CheckResult:
  """Create a passing CheckResult."""
  return CheckResult(name=name, ok=True, details=details)


def fail_result(name: str, details: str) -> CheckResult:
  """Create a failing CheckResult."""
  return CheckResult(name=name, ok=False, details=details)


def _is_iso_date(value: str) -> bool:
  if not isinstance(value, str) or len(value) != 10:
    return False
  try:
    datetime.date.fromisoformat(value)
  except ValueError:
    return False
  return True


def _is_number(value: Optional[float]) -> bool:
  return (isinstance(value, (int, float)) and not isinstance(value, bool) and
          isfinite(value))


def check_date(name: str, value: str) -> CheckResult:
  if _is_iso_date(value):
    return pass_result(name, value)
  return fail_result(name, f'expected YYYY-MM-DD, got {value!r}')


def check_transaction(tx: Transaction) -> List[CheckResult]:
  '''
  Validate a transaction before it reaches the lot aggregator.

  Args:
    tx: Transaction to check

  Returns:
    One CheckResult per rule
  '''
  results = []

  if tx.ticker and tx.ticker.strip():
    results.append(pass_result('ticker', tx.ticker))
  else:
    results.append(fail_result('ticker', 'Ticker is required'))

  if isinstance(tx.side, Side):
    results.append(pass_result('side', tx.side.value))
  else:
    results.append(fail_result('side', f'unknown side {tx.side!r}'))

  results.append(check_date('date', tx.date))

  if _is_number(tx.quantity) and tx.quantity > 0:
    results.append(pass_result('quantity', str(tx.quantity)))
  else:
    results.append(
        fail_result('quantity',
                    f'Quantity must be a positive number, got {tx.quantity}'))

  if _is_number(tx.price) and tx.price >= 0:
    results.append(pass_result('price', str(tx.price)))
  else:
    results.append(
        fail_result('price',
                    f'Price must be a non-negative number, got {tx.price}'))

  if tx.commission is None:
    results.append(pass_result('commission', 'none'))
  elif _is_number(tx.commission) and tx.commission >= 0:
    results.append(pass_result('commission', str(tx.commission)))
  else:
    results.append(
        fail_result('commission',
                    f'Commission must be non-negative, got {tx.commission}'))

  return results


def check_price_mark(mark: ManualPriceMark) -> List[CheckResult]:
  '''Validate a manual price mark.'''
  results = []
  if mark.ticker and mark.ticker.strip():
    results.append(pass_result('ticker', mark.ticker))
  else:
    results.append(fail_result('ticker', 'Ticker is required'))

  if _is_number(mark.price) and mark.price >= 0:
    results.append(pass_result('price', str(mark.price)))
  else:
    results.append(
        fail_result('price',
                    f'Price must be a non-negative number, got {mark.price}'))

  results.append(check_date('as_of', mark.as_of))
  return results


def check_valuation_inputs(inputs: ValuationInputs) -> List[CheckResult]:
  '''
  Validate a valuation case before running the engines.

  Assumption arrays of the wrong length are not a failure here; the
  configured path policy decides how to treat them. WACC versus perpetual
  growth is left to the DCF engine, which raises DegenerateValuationError.
  '''
  results = []
  base = inputs.base_year
  dcf = inputs.assumptions

  numeric_fields = {
      'base_year.revenue': base.revenue,
      'base_year.ebit': base.ebit,
      'base_year.tax_rate': base.tax_rate,
      'base_year.depreciation_and_amortization':
          base.depreciation_and_amortization,
      'base_year.capex': base.capex,
      'base_year.change_in_nwc': base.change_in_nwc,
      'assumptions.discount_rate': dcf.discount_rate,
      'assumptions.perpetual_growth_rate': dcf.perpetual_growth_rate,
      'equity_bridge.total_debt': inputs.equity_bridge.total_debt,
      'equity_bridge.cash': inputs.equity_bridge.cash,
      'equity_bridge.diluted_shares': inputs.equity_bridge.diluted_shares,
      'relative.net_income': inputs.relative.net_income,
      'relative.ebitda': inputs.relative.ebitda,
      'relative.peer_pe': inputs.relative.peer_pe,
      'relative.peer_ev_ebitda': inputs.relative.peer_ev_ebitda,
  }
  if inputs.relative.current_market_price is not None:
    numeric_fields['relative.current_market_price'] = (
        inputs.relative.current_market_price)
  # None entries are missing years, left to the path policy.
  for i, g in enumerate(dcf.revenue_growth, start=1):
    if g is not None:
      numeric_fields[f'assumptions.revenue_growth[{i}]'] = g
  for i, m in enumerate(dcf.ebit_margin, start=1):
    if m is not None:
      numeric_fields[f'assumptions.ebit_margin[{i}]'] = m

  bad = [name for name, value in numeric_fields.items() if not _is_number(value)]
  if bad:
    results.append(fail_result('finite', f'non-finite values: {", ".join(bad)}'))
  else:
    results.append(pass_result('finite', f'{len(numeric_fields)} fields'))

  if _is_number(base.revenue) and base.revenue > 0:
    results.append(pass_result('base_revenue', f'{base.revenue:,.0f}'))
  else:
    results.append(
        fail_result('base_revenue',
                    f'Base revenue must be positive, got {base.revenue}'))

  if isinstance(dcf.projection_years, int) and dcf.projection_years >= 1:
    results.append(pass_result('projection_years', str(dcf.projection_years)))
  else:
    results.append(
        fail_result('projection_years',
                    f'Horizon must be at least 1 year, '
                    f'got {dcf.projection_years}'))

  if _is_number(dcf.discount_rate) and dcf.discount_rate <= -100:
    results.append(
        fail_result('discount_rate',
                    f'WACC must be above -100%, got {dcf.discount_rate}'))
  else:
    results.append(pass_result('discount_rate', f'{dcf.discount_rate}%'))

  return results


def raise_on_failures(results: Iterable[CheckResult]) -> None:
  '''Raise InvalidInputError listing every failed check, if any.'''
  failures = [r for r in results if not r.ok]
  if failures:
    raise InvalidInputError('; '.join(f'{r.name}: {r.details}'
                                      for r in failures))
