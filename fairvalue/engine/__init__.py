'''DCF and relative valuation engines with pure math functions.'''

from fairvalue.engine.dcf import (
    compute_dcf,
    compute_terminal_value,
    equity_per_share,
    project_financials,
)
from fairvalue.engine.relative import compute_relative_value

__all__ = [
    'compute_dcf',
    'compute_relative_value',
    'compute_terminal_value',
    'equity_per_share',
    'project_financials',
]
