'''
Reinvestment policies.

These policies determine how depreciation, capital expenditures and the
change in net working capital evolve over the forecast, expressed as
fractions of projected revenue.
'''

from abc import ABC, abstractmethod

from fairvalue.domain.errors import InvalidInputError
from fairvalue.domain.types import BaseYearFinancials
from fairvalue.domain.types import PolicyOutput
from fairvalue.domain.types import ReinvestmentRatios


class ReinvestmentPolicy(ABC):
  '''
  Base class for reinvestment policies.

  Subclasses implement compute() to return revenue ratios for D&A, capex
  and change in NWC.
  '''

  @abstractmethod
  def compute(self,
              base_year: BaseYearFinancials) -> PolicyOutput[ReinvestmentRatios]:
    '''
    Compute reinvestment ratios.

    Args:
      base_year: Trailing-period financials

    Returns:
      PolicyOutput with ReinvestmentRatios and diagnostics
    '''


class BaseYearRatio(ReinvestmentPolicy):
  '''
  Hold each item's base-year share of revenue constant.

  Every projected year scales D&A, capex and change in NWC linearly with
  projected revenue.
  '''

  def compute(self,
              base_year: BaseYearFinancials) -> PolicyOutput[ReinvestmentRatios]:
    '''Divide each base-year item by base-year revenue.'''
    revenue = base_year.revenue
    if revenue <= 0:
      raise InvalidInputError(
          f'Base revenue must be positive to derive ratios, got {revenue}')

    ratios = ReinvestmentRatios(
        da_to_revenue=base_year.depreciation_and_amortization / revenue,
        capex_to_revenue=base_year.capex / revenue,
        nwc_to_revenue=base_year.change_in_nwc / revenue,
    )
    return PolicyOutput(value=ratios,
                        diag={
                            'reinvestment_method': 'base_ratio',
                            'da_to_revenue': ratios.da_to_revenue,
                            'capex_to_revenue': ratios.capex_to_revenue,
                            'nwc_to_revenue': ratios.nwc_to_revenue,
                        })
