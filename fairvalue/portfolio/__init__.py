"""Portfolio ledger: lot aggregation, pricing and summary."""

from fairvalue.portfolio.ledger import Portfolio
from fairvalue.portfolio.lots import aggregate_lots
from fairvalue.portfolio.pricer import price_holdings
from fairvalue.portfolio.summary import build_summary
from fairvalue.portfolio.summary import summarize_portfolio

__all__ = [
    'Portfolio',
    'aggregate_lots',
    'build_summary',
    'price_holdings',
    'summarize_portfolio',
]
