'''
Valuation analysis utilities.

Note: To avoid RuntimeWarning when using -m flag, import directly:
  from fairvalue.analysis.sensitivity import SensitivityTableBuilder
'''
