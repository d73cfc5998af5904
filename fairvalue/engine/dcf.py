"""
Pure DCF math engine.

This module contains pure functions for DCF calculations. No pandas, no I/O,
just numeric computations on PreparedInputs, where every rate is already a
decimal. The orchestrator prepares inputs through the policies and then
calls compute_dcf().

Key functions:
  project_financials: Year-by-year FCFF forecast
  compute_terminal_value: Gordon growth terminal value at year N
  compute_dcf: Main entry point, enterprise value to value per share
"""

from collections.abc import Sequence
import logging
from math import isfinite

from fairvalue.domain.errors import DegenerateValuationError
from fairvalue.domain.errors import InvalidInputError
from fairvalue.domain.types import DCFOutput
from fairvalue.domain.types import PreparedInputs
from fairvalue.domain.types import ProjectedFinancials

logger = logging.getLogger(__name__)


def discount_factor(discount_rate: float, year: int) -> float:
  """Whole-period discount factor (1 + r)^t, no mid-year convention."""
  return (1.0 + discount_rate)**year


def equity_per_share(equity_value: float, diluted_shares: float) -> float:
  """Equity value per diluted share, 0 when there are no shares."""
  if diluted_shares <= 0:
    return 0.0
  return equity_value / diluted_shares


def _check_prepared(inputs: PreparedInputs) -> None:
  ratios = inputs.ratios
  scalars = [
      inputs.base_revenue, inputs.tax_rate, inputs.discount_rate,
      inputs.g_terminal, ratios.da_to_revenue, ratios.capex_to_revenue,
      ratios.nwc_to_revenue
  ]
  if not all(isfinite(x) for x in scalars):
    raise InvalidInputError('DCF inputs must be finite numbers')
  if not all(isfinite(x) for x in (*inputs.growth_path, *inputs.margin_path)):
    raise InvalidInputError('Growth and margin paths must be finite numbers')
  if inputs.base_revenue <= 0:
    raise InvalidInputError(
        f'Base revenue must be positive, got {inputs.base_revenue}')
  if inputs.n_years < 1:
    raise InvalidInputError('Projection horizon must be at least 1 year')
  if inputs.discount_rate <= -1.0:
    raise InvalidInputError(
        f'Discount rate must be above -100%, got {inputs.discount_rate:.4f}')
  if len(inputs.margin_path) != inputs.n_years:
    raise InvalidInputError(
        f'Margin path has {len(inputs.margin_path)} entries, '
        f'growth path has {inputs.n_years}')


def project_financials(inputs: PreparedInputs) -> tuple[ProjectedFinancials, ...]:
  """
  Project the explicit forecast period.

  Revenue compounds year over year, so each year depends on the one before
  it and the loop is strictly sequential. D&A, capex and change in NWC keep
  their base-year ratio to revenue.

  Args:
    inputs: Prepared inputs (rates as decimals)

  Returns:
    One ProjectedFinancials per year, year 1 first
  """
  _check_prepared(inputs)
  ratios = inputs.ratios

  projections = []
  current_revenue = inputs.base_revenue

  for t, (growth, margin) in enumerate(zip(inputs.growth_path,
                                           inputs.margin_path),
                                       start=1):
    revenue = current_revenue * (1.0 + growth)
    ebit = revenue * margin
    tax = ebit * inputs.tax_rate
    nopat = ebit - tax

    da = revenue * ratios.da_to_revenue
    capex = revenue * ratios.capex_to_revenue
    change_in_nwc = revenue * ratios.nwc_to_revenue

    fcff = nopat + da - capex - change_in_nwc
    discounted = fcff / discount_factor(inputs.discount_rate, t)

    projections.append(
        ProjectedFinancials(
            year=t,
            revenue=revenue,
            ebit=ebit,
            tax=tax,
            nopat=nopat,
            depreciation_and_amortization=da,
            capex=capex,
            change_in_nwc=change_in_nwc,
            fcff=fcff,
            discounted_fcff=discounted,
        ))
    current_revenue = revenue

  return tuple(projections)


def compute_terminal_value(
    final_fcff: float,
    g_terminal: float,
    discount_rate: float,
) -> float:
  """
  Compute undiscounted terminal value using the Gordon Growth Model.

  Args:
    final_fcff: FCFF of the last explicit year
    g_terminal: Perpetual growth rate
    discount_rate: WACC

  Returns:
    Terminal value as of the final explicit year

  Raises:
    DegenerateValuationError: If discount_rate <= g_terminal
  """
  if discount_rate <= g_terminal:
    logger.debug('Degenerate terminal value: r=%.4f g=%.4f', discount_rate,
                 g_terminal)
    raise DegenerateValuationError(discount_rate, g_terminal)

  return final_fcff * (1.0 + g_terminal) / (discount_rate - g_terminal)


def sum_discounted(projections: Sequence[ProjectedFinancials]) -> float:
  return sum(p.discounted_fcff for p in projections)


def compute_dcf(
    inputs: PreparedInputs,
    total_debt: float,
    cash: float,
    diluted_shares: float,
) -> DCFOutput:
  """
  Compute enterprise, equity and per-share value with a two-stage DCF.

  Stage 1: Explicit forecast of FCFF, discounted year by year
  Stage 2: Gordon growth terminal value, discounted from year N

  Args:
    inputs: Prepared inputs (rates as decimals)
    total_debt: Total interest-bearing debt
    cash: Cash and equivalents
    diluted_shares: Diluted shares outstanding

  Returns:
    DCFOutput with the projection table and valuation bridge

  Raises:
    InvalidInputError: Non-positive base revenue, empty horizon,
      WACC at or below -100% or non-finite inputs
    DegenerateValuationError: WACC <= perpetual growth
  """
  if inputs.discount_rate <= inputs.g_terminal:
    raise DegenerateValuationError(inputs.discount_rate, inputs.g_terminal)

  projections = project_financials(inputs)
  pv_explicit = sum_discounted(projections)

  terminal_value = compute_terminal_value(projections[-1].fcff,
                                          inputs.g_terminal,
                                          inputs.discount_rate)
  pv_terminal = terminal_value / discount_factor(inputs.discount_rate,
                                                 inputs.n_years)

  enterprise_value = pv_explicit + pv_terminal
  equity_value = enterprise_value - total_debt + cash

  return DCFOutput(
      projections=projections,
      sum_discounted_fcff=pv_explicit,
      terminal_value=terminal_value,
      pv_terminal_value=pv_terminal,
      enterprise_value=enterprise_value,
      equity_value=equity_value,
      per_share=equity_per_share(equity_value, diluted_shares),
  )
