'''
Portfolio holdings report.

CLI Usage:
  python -m fairvalue.portfolio.report --ledger portfolio.json
  python -m fairvalue.portfolio.report --ledger portfolio.json \\
      --output holdings.csv
'''

import argparse
import json
import logging
from pathlib import Path

from fairvalue.domain.types import PortfolioSummary
from fairvalue.portfolio.ledger import Portfolio

logger = logging.getLogger(__name__)


def load_portfolio(path: Path) -> Portfolio:
  '''Load and validate a portfolio ledger JSON file.'''
  if not path.exists():
    raise FileNotFoundError(f'Ledger file not found: {path}')
  return Portfolio.from_dict(json.loads(path.read_text()))


def log_summary(name: str, summary: PortfolioSummary) -> None:
  '''Log holdings and totals.'''
  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('Portfolio - %s', name)
  logger.info(separator)

  if not summary.holdings:
    logger.info('  No open holdings')

  for h in summary.holdings:
    source = h.mark_date if h.has_manual_mark else 'avg cost'
    logger.info('  %-8s %12.4f sh  avg $%.2f  mark $%.2f (%s)  '
                'value $%s  P/L $%s  %.2f%%', h.ticker, h.shares,
                h.average_cost, h.mark_price, source, f'{h.market_value:,.2f}',
                f'{h.unrealized_gain_loss:,.2f}', h.portfolio_percentage)

  logger.info('\nTotals:')
  logger.info('  Market Value: $%s', f'{summary.total_market_value:,.2f}')
  logger.info('  Cost Basis: $%s', f'{summary.total_cost_basis:,.2f}')
  logger.info('  Unrealized G/L: $%s',
              f'{summary.total_unrealized_gain_loss:,.2f}')
  logger.info('%s\n', separator)


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Portfolio holdings report')
  parser.add_argument('--ledger',
                      type=Path,
                      required=True,
                      help='Path to a portfolio ledger JSON file')
  parser.add_argument('--output',
                      type=Path,
                      help='Write the holdings table to this CSV path')
  args = parser.parse_args()

  portfolio = load_portfolio(args.ledger)
  summary = portfolio.summary()
  log_summary(portfolio.name, summary)

  if args.output:
    summary.to_frame().to_csv(args.output)
    logger.info('Holdings written to %s', args.output)


if __name__ == '__main__':
  logging.basicConfig(
      level=logging.INFO,
      format='%(message)s',
  )
  main()
