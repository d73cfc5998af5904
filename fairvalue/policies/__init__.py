"""
Valuation policies for preparing DCF inputs.

Each policy prepares one component of the forecast (assumption paths,
reinvestment) and returns both a value and diagnostic information.

To add a new policy:
1. Create a new class inheriting from the appropriate base (e.g.,
   ReinvestmentPolicy)
2. Implement the compute() method returning PolicyOutput
3. Register in scenarios/registry.py

Example:
  class BaseYearRatio(ReinvestmentPolicy):
    def compute(self, base_year):
      revenue = base_year.revenue
      ratios = ReinvestmentRatios(
          da_to_revenue=base_year.depreciation_and_amortization / revenue,
          capex_to_revenue=base_year.capex / revenue,
          nwc_to_revenue=base_year.change_in_nwc / revenue)
      return PolicyOutput(value=ratios,
                          diag={'reinvestment_method': 'base_ratio'})
"""

from fairvalue.policies.paths import PathPolicy
from fairvalue.policies.paths import StrictPath
from fairvalue.policies.paths import ZeroPadPath
from fairvalue.policies.reinvestment import BaseYearRatio
from fairvalue.policies.reinvestment import ReinvestmentPolicy

__all__ = [
  'PathPolicy', 'ZeroPadPath', 'StrictPath',
  'ReinvestmentPolicy', 'BaseYearRatio',
]
