"""
WACC x perpetual growth sensitivity of the per-share DCF value.

This module builds 2D tables showing how DCF value per share varies across
discount rates (WACC) and perpetual growth rates. Rates are whole-number
percentages, matching the case inputs.

CLI Usage:
  python -m fairvalue.analysis.sensitivity \\
      --case case.json \\
      --wacc 8,9,10,11,12 \\
      --growth 1,2,3
"""

import argparse
import dataclasses
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from fairvalue.domain.errors import DegenerateValuationError
from fairvalue.domain.types import pct_to_decimal
from fairvalue.domain.types import ValuationInputs
from fairvalue.domain.validation import check_valuation_inputs
from fairvalue.domain.validation import raise_on_failures
from fairvalue.engine.dcf import compute_dcf
from fairvalue.run import load_case
from fairvalue.run import prepare_inputs
from fairvalue.scenarios.config import SCENARIO_PRESETS
from fairvalue.scenarios.config import ScenarioConfig

logger = logging.getLogger(__name__)


class SensitivityTableBuilder:
  """
  Build 2D sensitivity tables for DCF value per share.

  Varies WACC and perpetual growth while keeping the projection (growth,
  margins, reinvestment) fixed at the case's inputs.
  """

  def __init__(
      self,
      inputs: ValuationInputs,
      base_config: ScenarioConfig | None = None,
  ):
    """
    Validate the case and prepare its fixed projection inputs.

    Args:
        inputs: Valuation case inputs
        base_config: Scenario configuration for policies
    """
    self.inputs = inputs
    self.base_config = base_config or ScenarioConfig.default()

    raise_on_failures(check_valuation_inputs(inputs))
    self.prepared, _ = prepare_inputs(inputs, self.base_config)

    logger.info('Sensitivity base case prepared')
    logger.info('  Base revenue: $%.2fM', self.prepared.base_revenue / 1e6)
    logger.info('  Horizon: %d years', self.prepared.n_years)

  def build(
      self,
      discount_rates: list[float],
      perpetual_growth_rates: list[float],
  ) -> pd.DataFrame:
    """
    Re-run the DCF for every (WACC, growth) pair.

    Args:
        discount_rates: WACC values in percent (e.g., [8, 10, 12])
        perpetual_growth_rates: Terminal growth values in percent
                                (e.g., [1, 2, 3])

    Returns:
        DataFrame with WACC as index, perpetual growth as columns and
        DCF value per share as cells; NaN where WACC <= growth
    """
    if not discount_rates:
      raise ValueError('discount_rates cannot be empty')
    if not perpetual_growth_rates:
      raise ValueError('perpetual_growth_rates cannot be empty')

    logger.info('Grid: %d WACC x %d growth values', len(discount_rates),
                len(perpetual_growth_rates))

    bridge = self.inputs.equity_bridge
    data_rows = []

    for r in discount_rates:
      row_data = []
      for g in perpetual_growth_rates:
        prepared = dataclasses.replace(self.prepared,
                                       discount_rate=pct_to_decimal(r),
                                       g_terminal=pct_to_decimal(g))
        try:
          dcf = compute_dcf(prepared,
                            total_debt=bridge.total_debt,
                            cash=bridge.cash,
                            diluted_shares=bridge.diluted_shares)
          row_data.append(dcf.per_share)
        except DegenerateValuationError:
          row_data.append(np.nan)
      data_rows.append(row_data)

    r_labels = [f'{r:g}%' for r in discount_rates]
    g_labels = [f'{g:g}%' for g in perpetual_growth_rates]

    df = pd.DataFrame(data_rows, index=r_labels, columns=g_labels)
    df.index.name = 'WACC'
    df.columns.name = 'Perpetual Growth'

    return df


def _parse_float_list(s: str) -> list[float]:
  """Parse comma-separated float list."""
  return [float(x.strip()) for x in s.split(',')]


def main() -> None:
  """CLI entrypoint for sensitivity analysis."""
  parser = argparse.ArgumentParser(
      description='Per-share DCF value across WACC and perpetual growth',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  python -m fairvalue.analysis.sensitivity \\
      --case case.json --wacc 8,10,12 --growth 1,2,3
      """)

  parser.add_argument('--case',
                      type=Path,
                      required=True,
                      help='Path to a valuation case JSON file')
  parser.add_argument('--scenario',
                      type=str,
                      default='default',
                      choices=sorted(SCENARIO_PRESETS),
                      help='Scenario preset')
  parser.add_argument('--wacc',
                      type=str,
                      required=True,
                      help='Comma-separated WACC values in percent')
  parser.add_argument('--growth',
                      type=str,
                      required=True,
                      help='Comma-separated perpetual growth values in percent')
  parser.add_argument('--output',
                      type=Path,
                      help='Write the table to this CSV path')
  parser.add_argument('--verbose',
                      '-v',
                      action='store_true',
                      help='Log at DEBUG level')

  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  config = SCENARIO_PRESETS[args.scenario]()
  case = load_case(args.case, config)
  logger.info('Case: %s', case.case_name)

  builder = SensitivityTableBuilder(case.inputs, config)
  table = builder.build(_parse_float_list(args.wacc),
                        _parse_float_list(args.growth))

  logger.info('\n%s', table.to_string(float_format=lambda x: f'{x:.2f}'))

  if args.output:
    table.to_csv(args.output)
    logger.info('Sensitivity table written to %s', args.output)


if __name__ == '__main__':
  main()
