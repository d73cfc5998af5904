'''
Error taxonomy for the valuation and portfolio engines.

All errors subclass ValueError, so callers that already guard engine calls
with `except ValueError` keep working. Zero-denominator situations (no shares,
no buys) are not errors: the engines return 0 for them.
'''


class ValuationError(ValueError):
  '''Base class for all engine errors.'''


class InvalidInputError(ValuationError):
  '''
  Input that the engines refuse to compute with.

  Raised for non-positive base revenue, non-finite numbers, a projection
  horizon below one year, and transactions or price marks rejected by the
  validator.
  '''


class DegenerateValuationError(ValuationError):
  '''
  Terminal value is undefined because WACC <= perpetual growth.

  Attributes:
    discount_rate: WACC as a decimal
    g_terminal: Perpetual growth rate as a decimal
  '''

  def __init__(self, discount_rate: float, g_terminal: float):
    self.discount_rate = discount_rate
    self.g_terminal = g_terminal
    super().__init__(
        f'WACC ({discount_rate:.2%}) must exceed perpetual growth '
        f'({g_terminal:.2%}) for a finite terminal value')
