'''
Domain types for the valuation and portfolio engines.

These dataclasses provide typed interfaces between components. Source
records (transactions, price marks, valuation inputs) are supplied by the
caller; every other type is derived and recomputed from scratch on each
query, never patched in place.

Percentages on the input side are whole numbers (21 means 21%). They are
converted to decimals once, in PreparedInputs, and never leak back out.
'''

from dataclasses import asdict, dataclass, field
import enum
from typing import (Any, Dict, Generic, List, Mapping, Optional, Tuple,
                    TypeVar, Union)
import uuid

import pandas as pd

from fairvalue.domain.errors import InvalidInputError

T = TypeVar('T')


def pct_to_decimal(percentage: float) -> float:
  '''Convert a whole-number percentage (5 for 5%) to a decimal (0.05).'''
  return percentage / 100.0


@dataclass
class PolicyOutput(Generic[T]):
  '''
  Standard output from any policy.

  Attributes:
    value: The computed value (type depends on policy)
    diag: Dictionary of diagnostic information
  '''
  value: T
  diag: Dict[str, Any] = field(default_factory=dict)


# ----------------------------
# Portfolio ledger
# ----------------------------


class Side(str, enum.Enum):
  '''Direction of a transaction.'''
  BUY = 'BUY'
  SELL = 'SELL'

  @classmethod
  def parse(cls, value: Union['Side', str]) -> 'Side':
    '''Accept a Side or a case-insensitive 'buy' / 'sell' string.'''
    if isinstance(value, cls):
      return value
    try:
      return cls(str(value).strip().upper())
    except ValueError as e:
      raise InvalidInputError(f'Unknown transaction side: {value!r}') from e


def _new_transaction_id() -> str:
  return f'txn-{uuid.uuid4().hex[:12]}'


@dataclass(frozen=True)
class Transaction:
  '''
  A single buy or sell of one instrument.

  Attributes:
    ticker: Instrument ticker symbol
    side: BUY or SELL
    date: Trade date (YYYY-MM-DD)
    quantity: Number of shares, strictly positive
    price: Price per share, non-negative
    commission: Optional commission paid, non-negative
    transaction_id: Unique id within the owning portfolio
  '''
  ticker: str
  side: Side
  date: str
  quantity: float
  price: float
  commission: Optional[float] = None
  transaction_id: str = field(default_factory=_new_transaction_id)

  @classmethod
  def from_dict(cls, data: Mapping[str, Any]) -> 'Transaction':
    '''Create from a dictionary as stored in a ledger file.'''
    kwargs = dict(data)
    kwargs['side'] = Side.parse(kwargs['side'])
    return cls(**kwargs)

  def to_dict(self) -> Dict[str, Any]:
    result = asdict(self)
    result['side'] = self.side.value
    return result


@dataclass(frozen=True)
class ManualPriceMark:
  '''
  Manually entered market price for one ticker.

  Attributes:
    ticker: Instrument ticker symbol
    price: Price per share, non-negative
    as_of: Date the price was observed (YYYY-MM-DD)
  '''
  ticker: str
  price: float
  as_of: str


@dataclass(frozen=True)
class LotPosition:
  '''
  Per-ticker aggregate of all buys and sells.

  Attributes:
    ticker: Instrument ticker symbol
    total_bought: Sum of BUY quantities
    total_buy_cost: Sum of BUY quantity * price + BUY commission
    total_sold: Sum of SELL quantities
  '''
  ticker: str
  total_bought: float
  total_buy_cost: float
  total_sold: float

  @property
  def net_shares(self) -> float:
    return self.total_bought - self.total_sold

  @property
  def average_cost(self) -> float:
    '''Volume-weighted buy price, 0 when nothing was bought.'''
    if self.total_bought <= 0:
      return 0.0
    return self.total_buy_cost / self.total_bought


@dataclass(frozen=True)
class Holding:
  '''
  Open position priced against a manual mark.

  Attributes:
    ticker: Instrument ticker symbol
    shares: Net shares held (always > 0)
    average_cost: Average cost per share
    total_cost_basis: shares * average_cost
    mark_price: Manual mark, or average cost when no mark exists
    mark_date: As-of date of the manual mark (None on fallback)
    market_value: shares * mark_price
    unrealized_gain_loss: market_value - total_cost_basis
    portfolio_percentage: Share of total portfolio market value, in percent
  '''
  ticker: str
  shares: float
  average_cost: float
  total_cost_basis: float
  mark_price: float
  mark_date: Optional[str]
  market_value: float
  unrealized_gain_loss: float
  portfolio_percentage: float = 0.0

  @property
  def has_manual_mark(self) -> bool:
    return self.mark_date is not None


@dataclass(frozen=True)
class PortfolioSummary:
  '''
  Portfolio-level totals over all open holdings.

  Attributes:
    holdings: Holdings sorted by descending market value
    total_market_value: Sum of holding market values
    total_cost_basis: Sum of holding cost bases
  '''
  holdings: Tuple[Holding, ...]
  total_market_value: float
  total_cost_basis: float

  @property
  def total_unrealized_gain_loss(self) -> float:
    return self.total_market_value - self.total_cost_basis

  def to_frame(self) -> pd.DataFrame:
    '''Holdings as a DataFrame indexed by ticker, in summary order.'''
    columns = [f.name for f in Holding.__dataclass_fields__.values()]
    frame = pd.DataFrame([asdict(h) for h in self.holdings], columns=columns)
    return frame.set_index('ticker')


# ----------------------------
# Valuation inputs
# ----------------------------


@dataclass(frozen=True)
class BaseYearFinancials:
  '''
  Trailing-period financials the projection starts from.

  Attributes:
    revenue: Base-year revenue, must be > 0
    ebit: Base-year EBIT (informational; projections use margins)
    tax_rate: Effective tax rate, whole-number percent
    depreciation_and_amortization: Base-year D&A
    capex: Base-year capital expenditures
    change_in_nwc: Base-year change in net working capital
  '''
  revenue: float
  ebit: float
  tax_rate: float
  depreciation_and_amortization: float
  capex: float
  change_in_nwc: float


def _optional_float(value: Any) -> Optional[float]:
  return None if value is None else float(value)


@dataclass(frozen=True)
class DCFAssumptions:
  '''
  Forecast assumptions, all percentages as whole numbers.

  Attributes:
    projection_years: Explicit forecast horizon N
    revenue_growth: Per-year revenue growth, N entries (None if missing)
    ebit_margin: Per-year EBIT margin, N entries (None if missing)
    discount_rate: WACC
    perpetual_growth_rate: Terminal growth rate
  '''
  projection_years: int
  revenue_growth: Tuple[Optional[float], ...]
  ebit_margin: Tuple[Optional[float], ...]
  discount_rate: float
  perpetual_growth_rate: float


@dataclass(frozen=True)
class EquityBridge:
  '''Inputs that turn enterprise value into a per-share figure.'''
  total_debt: float
  cash: float
  diluted_shares: float


@dataclass(frozen=True)
class RelativeInputs:
  '''
  Inputs for multiple-based valuation.

  Attributes:
    net_income: Company net income (TTM)
    ebitda: Company EBITDA (TTM)
    peer_pe: Peer average P/E ratio
    peer_ev_ebitda: Peer average EV/EBITDA ratio
    current_market_price: Observed share price, if known
  '''
  net_income: float
  ebitda: float
  peer_pe: float
  peer_ev_ebitda: float
  current_market_price: Optional[float] = None


@dataclass(frozen=True)
class ValuationInputs:
  '''Everything a valuation case needs, exactly as the user entered it.'''
  base_year: BaseYearFinancials
  assumptions: DCFAssumptions
  equity_bridge: EquityBridge
  relative: RelativeInputs

  def to_dict(self) -> Dict[str, Any]:
    '''Convert to a JSON-friendly dictionary (percentages unchanged).'''
    result = asdict(self)
    result['assumptions']['revenue_growth'] = list(
        self.assumptions.revenue_growth)
    result['assumptions']['ebit_margin'] = list(self.assumptions.ebit_margin)
    return result

  @classmethod
  def from_dict(cls,
                data: Mapping[str, Any],
                default_projection_years: int = 5) -> 'ValuationInputs':
    '''
    Create from a dictionary such as a stored case.

    A null growth or margin entry is kept as None; the path policy decides
    what a missing year means.

    Args:
      data: Mapping with base_year, assumptions, equity_bridge and
        relative sections
      default_projection_years: Horizon used when the case omits it

    Returns:
      ValuationInputs
    '''
    assumptions = dict(data['assumptions'])
    assumptions.setdefault('projection_years', default_projection_years)
    assumptions['revenue_growth'] = tuple(
        _optional_float(g) for g in assumptions.get('revenue_growth', ()))
    assumptions['ebit_margin'] = tuple(
        _optional_float(m) for m in assumptions.get('ebit_margin', ()))
    return cls(
        base_year=BaseYearFinancials(**data['base_year']),
        assumptions=DCFAssumptions(**assumptions),
        equity_bridge=EquityBridge(**data['equity_bridge']),
        relative=RelativeInputs(**data['relative']),
    )


@dataclass(frozen=True)
class ReinvestmentRatios:
  '''
  Reinvestment items expressed as fractions of revenue.

  Attributes:
    da_to_revenue: D&A / revenue
    capex_to_revenue: Capex / revenue
    nwc_to_revenue: Change in NWC / revenue
  '''
  da_to_revenue: float
  capex_to_revenue: float
  nwc_to_revenue: float


@dataclass(frozen=True)
class PreparedInputs:
  '''
  Fully prepared inputs for the DCF engine, all rates as decimals.

  Attributes:
    base_revenue: Revenue the projection grows from
    tax_rate: Tax rate applied to every projected year
    growth_path: Revenue growth per year [g1, ..., gN]
    margin_path: EBIT margin per year [m1, ..., mN]
    ratios: Reinvestment ratios from the reinvestment policy
    discount_rate: WACC
    g_terminal: Perpetual growth rate
  '''
  base_revenue: float
  tax_rate: float
  growth_path: Tuple[float, ...]
  margin_path: Tuple[float, ...]
  ratios: ReinvestmentRatios
  discount_rate: float
  g_terminal: float

  @property
  def n_years(self) -> int:
    return len(self.growth_path)


# ----------------------------
# Valuation outputs
# ----------------------------


@dataclass(frozen=True)
class ProjectedFinancials:
  '''One explicit forecast year.'''
  year: int
  revenue: float
  ebit: float
  tax: float
  nopat: float
  depreciation_and_amortization: float
  capex: float
  change_in_nwc: float
  fcff: float
  discounted_fcff: float


@dataclass(frozen=True)
class DCFOutput:
  '''
  Result of the DCF engine.

  Attributes:
    projections: One ProjectedFinancials per forecast year
    sum_discounted_fcff: PV of the explicit period
    terminal_value: Gordon growth value at year N
    pv_terminal_value: Terminal value discounted to today
    enterprise_value: sum_discounted_fcff + pv_terminal_value
    equity_value: enterprise_value - debt + cash
    per_share: equity_value / diluted shares (0 without shares)
  '''
  projections: Tuple[ProjectedFinancials, ...]
  sum_discounted_fcff: float
  terminal_value: float
  pv_terminal_value: float
  enterprise_value: float
  equity_value: float
  per_share: float


@dataclass(frozen=True)
class RelativeOutput:
  '''Implied values from peer multiples.'''
  implied_equity_pe: float
  per_share_pe: float
  implied_ev_ebitda: float
  implied_equity_ev_ebitda: float
  per_share_ev_ebitda: float


@dataclass(frozen=True)
class ComparisonEntry:
  '''One bar of the football field.'''
  label: str
  value: float


@dataclass(frozen=True)
class ValuationResults:
  '''
  Complete valuation result with diagnostics.

  Attributes:
    per_share_dcf: Intrinsic value per share from the DCF
    per_share_pe: Implied value per share from peer P/E
    per_share_ev_ebitda: Implied value per share from peer EV/EBITDA
    enterprise_value: DCF enterprise value
    equity_value: DCF equity value
    terminal_value: Undiscounted terminal value
    pv_terminal_value: Discounted terminal value
    sum_discounted_fcff: PV of the explicit forecast period
    projections: Full projection table
    comparison: Football field entries, ascending by value
    diag: Merged diagnostics from all policies
  '''
  per_share_dcf: float
  per_share_pe: float
  per_share_ev_ebitda: float
  enterprise_value: float
  equity_value: float
  terminal_value: float
  pv_terminal_value: float
  sum_discounted_fcff: float
  projections: Tuple[ProjectedFinancials, ...]
  comparison: Tuple[ComparisonEntry, ...]
  diag: Dict[str, Any] = field(default_factory=dict, compare=False)

  def to_dict(self) -> Dict[str, Any]:
    '''Convert headline figures to a flat dictionary.'''
    result: Dict[str, Any] = {
        'per_share_dcf': self.per_share_dcf,
        'per_share_pe': self.per_share_pe,
        'per_share_ev_ebitda': self.per_share_ev_ebitda,
        'enterprise_value': self.enterprise_value,
        'equity_value': self.equity_value,
        'terminal_value': self.terminal_value,
        'pv_terminal_value': self.pv_terminal_value,
        'sum_discounted_fcff': self.sum_discounted_fcff,
    }
    result.update(self.diag)
    return result

  def comparison_pairs(self) -> List[Tuple[str, float]]:
    return [(entry.label, entry.value) for entry in self.comparison]

  def projection_frame(self) -> pd.DataFrame:
    '''Projection table as a DataFrame indexed by forecast year.'''
    columns = [f.name for f in ProjectedFinancials.__dataclass_fields__.values()]
    frame = pd.DataFrame([asdict(p) for p in self.projections],
                         columns=columns)
    return frame.set_index('year')


@dataclass(frozen=True)
class ValuationCase:
  '''
  A named valuation case.

  Attributes:
    case_name: Display name
    inputs: Case inputs
    results: Results of the last run, None until the case is valued
  '''
  case_name: str
  inputs: ValuationInputs
  results: Optional[ValuationResults] = field(default=None, compare=False)

  def to_dict(self) -> Dict[str, Any]:
    '''Stored form: name and inputs only, results are always recomputed.'''
    return {'case_name': self.case_name, 'inputs': self.inputs.to_dict()}

  @classmethod
  def from_dict(cls,
                data: Mapping[str, Any],
                default_name: str = 'Untitled',
                default_projection_years: int = 5) -> 'ValuationCase':
    '''
    Create from either {"case_name": ..., "inputs": {...}} or a bare
    inputs mapping, which takes default_name.
    '''
    raw_inputs = data['inputs'] if 'inputs' in data else data
    return cls(case_name=data.get('case_name', default_name),
               inputs=ValuationInputs.from_dict(
                   raw_inputs,
                   default_projection_years=default_projection_years))
