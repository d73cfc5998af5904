"""
Relative valuation from peer trading multiples.

Negative income or multiples are not rejected; they simply flow through
to negative implied values.
"""

from fairvalue.domain.types import EquityBridge
from fairvalue.domain.types import RelativeInputs
from fairvalue.domain.types import RelativeOutput
from fairvalue.engine.dcf import equity_per_share


def compute_relative_value(
    relative: RelativeInputs,
    bridge: EquityBridge,
) -> RelativeOutput:
  """
  Apply peer P/E and EV/EBITDA to the company's earnings.

  P/E gives equity value directly. EV/EBITDA gives enterprise value, which
  is bridged to equity with debt and cash.

  Args:
    relative: Company earnings and peer multiples
    bridge: Debt, cash and diluted shares

  Returns:
    RelativeOutput with implied totals and per-share values
  """
  implied_equity_pe = relative.net_income * relative.peer_pe

  implied_ev = relative.ebitda * relative.peer_ev_ebitda
  implied_equity_ev = implied_ev - bridge.total_debt + bridge.cash

  return RelativeOutput(
      implied_equity_pe=implied_equity_pe,
      per_share_pe=equity_per_share(implied_equity_pe, bridge.diluted_shares),
      implied_ev_ebitda=implied_ev,
      implied_equity_ev_ebitda=implied_equity_ev,
      per_share_ev_ebitda=equity_per_share(implied_equity_ev,
                                           bridge.diluted_shares),
  )
