'''
Assumption path policies.

These policies turn the per-year growth and margin arrays a user entered
(whole-number percentages) into decimal paths of exactly n_years entries
for the DCF engine.

The policy returns a sequence of rates [r1, r2, ..., rN], one per year of
the explicit forecast period.
'''

from abc import ABC, abstractmethod
import logging
from typing import Optional, Sequence, Tuple

from fairvalue.domain.errors import InvalidInputError
from fairvalue.domain.types import pct_to_decimal
from fairvalue.domain.types import PolicyOutput

logger = logging.getLogger(__name__)


class PathPolicy(ABC):
  '''
  Base class for assumption path policies.

  Subclasses implement compute() to return one decimal rate per forecast
  year.
  '''

  @abstractmethod
  def compute(
      self,
      percentages: Sequence[Optional[float]],
      n_years: int,
      label: str = 'path',
  ) -> PolicyOutput[Tuple[float, ...]]:
    '''
    Compute the per-year decimal path.

    Args:
      percentages: Entered values, whole-number percent (5 means 5%);
        None marks a missing year
      n_years: Number of explicit forecast years
      label: Name used in diagnostics and errors (e.g. 'revenue_growth')

    Returns:
      PolicyOutput with a tuple of n_years decimal rates
    '''


class ZeroPadPath(PathPolicy):
  '''
  Permissive path: missing years count as 0%, surplus entries are ignored.

  A None entry is a missing year too. A wrong-length array is not an
  error under this policy. The diagnostics count padded, truncated and
  missing years.
  '''

  def compute(
      self,
      percentages: Sequence[Optional[float]],
      n_years: int,
      label: str = 'path',
  ) -> PolicyOutput[Tuple[float, ...]]:
    '''Pad with zeros or truncate to n_years.'''
    entered = list(percentages)
    padded = max(0, n_years - len(entered))
    truncated = max(0, len(entered) - n_years)
    window = entered[:n_years]
    missing = sum(1 for p in window if p is None)
    if padded or truncated or missing:
      logger.debug('%s: %d entries for %d years '
                   '(padded=%d, truncated=%d, missing=%d)', label,
                   len(entered), n_years, padded, truncated, missing)

    window = [0.0 if p is None else p for p in window] + [0.0] * padded
    return PolicyOutput(value=tuple(pct_to_decimal(p) for p in window),
                        diag={
                            'path_method': 'zero_pad',
                            'entries': len(entered),
                            'padded': padded,
                            'truncated': truncated,
                            'missing': missing,
                        })


class StrictPath(PathPolicy):
  '''Strict path: exactly n_years entries, none of them missing.'''

  def compute(
      self,
      percentages: Sequence[Optional[float]],
      n_years: int,
      label: str = 'path',
  ) -> PolicyOutput[Tuple[float, ...]]:
    '''Convert to decimals, rejecting a length mismatch.'''
    if len(percentages) != n_years:
      raise InvalidInputError(f'{label} has {len(percentages)} entries, '
                              f'expected {n_years}')
    missing = [i for i, p in enumerate(percentages, start=1) if p is None]
    if missing:
      raise InvalidInputError(f'{label} is missing years {missing}')
    return PolicyOutput(value=tuple(pct_to_decimal(p) for p in percentages),
                        diag={
                            'path_method': 'strict',
                            'entries': len(percentages),
                        })
