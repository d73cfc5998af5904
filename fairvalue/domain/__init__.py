"""Domain types for the valuation and portfolio engines."""

from fairvalue.domain.errors import DegenerateValuationError
from fairvalue.domain.errors import InvalidInputError
from fairvalue.domain.errors import ValuationError
from fairvalue.domain.types import Holding
from fairvalue.domain.types import ManualPriceMark
from fairvalue.domain.types import PolicyOutput
from fairvalue.domain.types import PortfolioSummary
from fairvalue.domain.types import PreparedInputs
from fairvalue.domain.types import Side
from fairvalue.domain.types import Transaction
from fairvalue.domain.types import ValuationCase
from fairvalue.domain.types import ValuationInputs
from fairvalue.domain.types import ValuationResults

__all__ = [
    'DegenerateValuationError',
    'Holding',
    'InvalidInputError',
    'ManualPriceMark',
    'PolicyOutput',
    'PortfolioSummary',
    'PreparedInputs',
    'Side',
    'Transaction',
    'ValuationCase',
    'ValuationError',
    'ValuationInputs',
    'ValuationResults',
]
