'''
Single-case valuation entrypoint.

This module provides the main entry point for running valuations. It:
1. Validates the case inputs
2. Applies policies from the scenario configuration
3. Runs the DCF and relative valuation engines
4. Returns ValuationResults with the football field and full diagnostics

Usage:
  from fairvalue.run import run_valuation
  from fairvalue.scenarios.config import ScenarioConfig

  result = run_valuation(inputs, config=ScenarioConfig.default())
  print(f"DCF: ${result.per_share_dcf:.2f}")
'''

import argparse
import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from fairvalue.domain.types import ComparisonEntry
from fairvalue.domain.types import pct_to_decimal
from fairvalue.domain.types import PreparedInputs
from fairvalue.domain.types import RelativeOutput
from fairvalue.domain.types import ValuationCase
from fairvalue.domain.types import ValuationInputs
from fairvalue.domain.types import ValuationResults
from fairvalue.domain.validation import check_valuation_inputs
from fairvalue.domain.validation import raise_on_failures
from fairvalue.engine.dcf import compute_dcf
from fairvalue.engine.relative import compute_relative_value
from fairvalue.scenarios.config import SCENARIO_PRESETS
from fairvalue.scenarios.config import ScenarioConfig
from fairvalue.scenarios.registry import create_policies

logger = logging.getLogger(__name__)

DCF_LABEL = 'DCF Value'
PE_LABEL = 'Peer P/E Value'
EV_EBITDA_LABEL = 'Peer EV/EBITDA Value'
MARKET_LABEL = 'Market Price'


def prepare_inputs(
    inputs: ValuationInputs,
    config: ScenarioConfig,
) -> Tuple[PreparedInputs, Dict[str, Any]]:
  '''
  Apply the scenario's policies to turn a case into engine inputs.

  Args:
    inputs: Case inputs with whole-number percentages
    config: Scenario selecting the policies

  Returns:
    Tuple of (PreparedInputs, diagnostics)
  '''
  policies = create_policies(config)
  assumptions = inputs.assumptions
  n_years = assumptions.projection_years
  all_diag: Dict[str, Any] = {'scenario': config.name, 'n_years': n_years}

  growth_result = policies['paths'].compute(assumptions.revenue_growth,
                                            n_years,
                                            label='revenue_growth')
  all_diag.update({f'growth_{k}': v for k, v in growth_result.diag.items()})

  margin_result = policies['paths'].compute(assumptions.ebit_margin,
                                            n_years,
                                            label='ebit_margin')
  all_diag.update({f'margin_{k}': v for k, v in margin_result.diag.items()})

  reinvestment_result = policies['reinvestment'].compute(inputs.base_year)
  all_diag.update(
      {f'reinvestment_{k}': v for k, v in reinvestment_result.diag.items()})

  prepared = PreparedInputs(
      base_revenue=inputs.base_year.revenue,
      tax_rate=pct_to_decimal(inputs.base_year.tax_rate),
      growth_path=growth_result.value,
      margin_path=margin_result.value,
      ratios=reinvestment_result.value,
      discount_rate=pct_to_decimal(assumptions.discount_rate),
      g_terminal=pct_to_decimal(assumptions.perpetual_growth_rate),
  )
  return prepared, all_diag


def build_comparison(
    per_share_dcf: float,
    relative: RelativeOutput,
    market_price: Optional[float] = None,
) -> Tuple[ComparisonEntry, ...]:
  '''
  Build football field entries sorted ascending by value.

  The observed market price is only included when one was supplied.
  '''
  entries = [
      ComparisonEntry(DCF_LABEL, per_share_dcf),
      ComparisonEntry(PE_LABEL, relative.per_share_pe),
      ComparisonEntry(EV_EBITDA_LABEL, relative.per_share_ev_ebitda),
  ]
  if market_price is not None:
    entries.append(ComparisonEntry(MARKET_LABEL, market_price))
  return tuple(sorted(entries, key=lambda e: e.value))


def run_valuation(
    inputs: ValuationInputs,
    config: Optional[ScenarioConfig] = None,
    validate: bool = True,
) -> ValuationResults:
  '''
  Run DCF and relative valuation for one case.

  Args:
    inputs: Case inputs with whole-number percentages
    config: ScenarioConfig (default: ScenarioConfig.default())
    validate: Run input validation before the engines

  Returns:
    ValuationResults, freshly computed

  Raises:
    InvalidInputError: Inputs rejected by validation or the engine
    DegenerateValuationError: WACC <= perpetual growth
  '''
  if config is None:
    config = ScenarioConfig.default()

  if validate:
    raise_on_failures(check_valuation_inputs(inputs))

  prepared, all_diag = prepare_inputs(inputs, config)
  bridge = inputs.equity_bridge

  dcf = compute_dcf(prepared,
                    total_debt=bridge.total_debt,
                    cash=bridge.cash,
                    diluted_shares=bridge.diluted_shares)
  relative = compute_relative_value(inputs.relative, bridge)

  all_diag['implied_equity_pe'] = relative.implied_equity_pe
  all_diag['implied_ev_ebitda'] = relative.implied_ev_ebitda
  all_diag['implied_equity_ev_ebitda'] = relative.implied_equity_ev_ebitda
  if bridge.diluted_shares <= 0:
    logger.debug('No diluted shares; per-share values reported as 0')
    all_diag['zero_share_guard'] = True

  return ValuationResults(
      per_share_dcf=dcf.per_share,
      per_share_pe=relative.per_share_pe,
      per_share_ev_ebitda=relative.per_share_ev_ebitda,
      enterprise_value=dcf.enterprise_value,
      equity_value=dcf.equity_value,
      terminal_value=dcf.terminal_value,
      pv_terminal_value=dcf.pv_terminal_value,
      sum_discounted_fcff=dcf.sum_discounted_fcff,
      projections=dcf.projections,
      comparison=build_comparison(dcf.per_share, relative,
                                  inputs.relative.current_market_price),
      diag=all_diag,
  )


def load_case(path: Path,
              config: Optional[ScenarioConfig] = None) -> ValuationCase:
  '''
  Load a stored valuation case from a JSON file.

  The file holds either the inputs mapping itself or
  {"case_name": ..., "inputs": {...}}. A bare mapping is named after the
  file.

  Returns:
    ValuationCase without results
  '''
  if not path.exists():
    raise FileNotFoundError(f'Case file not found: {path}')
  if config is None:
    config = ScenarioConfig.default()

  return ValuationCase.from_dict(
      json.loads(path.read_text()),
      default_name=path.stem,
      default_projection_years=config.projection_years)


def run_case(case: ValuationCase,
             config: Optional[ScenarioConfig] = None) -> ValuationCase:
  '''Value a case, returning a copy that carries fresh results.'''
  return dataclasses.replace(case,
                             results=run_valuation(case.inputs, config=config))


def log_report(case_name: str, config: ScenarioConfig,
               result: ValuationResults) -> None:
  '''Log a human-readable valuation report.'''
  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('Valuation - %s', case_name)
  logger.info('Scenario: %s', config.name)
  logger.info(separator)

  logger.info('\nProjections:')
  for p in result.projections:
    logger.info('  Y%d  Revenue $%s  FCFF $%s  PV $%s', p.year,
                f'{p.revenue:,.0f}', f'{p.fcff:,.0f}',
                f'{p.discounted_fcff:,.0f}')

  logger.info('\nDCF:')
  logger.info('  Sum of PV(FCFF): $%s', f'{result.sum_discounted_fcff:,.0f}')
  logger.info('  Terminal Value: $%s', f'{result.terminal_value:,.0f}')
  logger.info('  PV(Terminal Value): $%s', f'{result.pv_terminal_value:,.0f}')
  logger.info('  Enterprise Value: $%s', f'{result.enterprise_value:,.0f}')
  logger.info('  Equity Value: $%s', f'{result.equity_value:,.0f}')

  logger.info('\nFootball Field:')
  for label, value in result.comparison_pairs():
    logger.info('  %-22s $%.2f', label, value)
  logger.info('%s\n', separator)


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Run DCF and relative valuation')
  parser.add_argument('--case',
                      type=Path,
                      required=True,
                      help='Path to a valuation case JSON file')
  parser.add_argument(
      '--scenario',
      type=str,
      default='default',
      choices=sorted(SCENARIO_PRESETS),
      help='Scenario preset',
  )
  parser.add_argument('--output',
                      type=Path,
                      help='Write the projection table to this CSV path')
  args = parser.parse_args()

  config = SCENARIO_PRESETS[args.scenario]()
  case = run_case(load_case(args.case, config), config)

  log_report(case.case_name, config, case.results)

  if args.output:
    case.results.projection_frame().to_csv(args.output)
    logger.info('Projections written to %s', args.output)


if __name__ == '__main__':
  logging.basicConfig(
      level=logging.INFO,
      format='%(message)s',
  )
  main()
