import math

import pytest

from fairvalue.analysis.sensitivity import _parse_float_list
from fairvalue.analysis.sensitivity import SensitivityTableBuilder
from fairvalue.domain.errors import InvalidInputError
from fairvalue.scenarios.config import ScenarioConfig


class TestSensitivityTableBuilder:
  """Tests for SensitivityTableBuilder."""

  def test_table_shape_and_labels(self, reference_inputs):
    table = SensitivityTableBuilder(reference_inputs).build([8, 10, 12],
                                                            [1, 2.5])

    assert table.shape == (3, 2)
    assert list(table.index) == ['8%', '10%', '12%']
    assert list(table.columns) == ['1%', '2.5%']
    assert table.index.name == 'WACC'
    assert table.columns.name == 'Perpetual Growth'

  def test_base_cell_matches_valuation(self, reference_inputs):
    table = SensitivityTableBuilder(reference_inputs).build([10], [2])

    assert table.loc['10%', '2%'] == pytest.approx(3.0130600604, rel=1e-9)

  def test_degenerate_cells_are_nan(self, reference_inputs):
    table = SensitivityTableBuilder(reference_inputs).build([5, 10], [2, 5])

    assert math.isnan(table.loc['5%', '5%'])
    assert not math.isnan(table.loc['5%', '2%'])
    assert not math.isnan(table.loc['10%', '5%'])

  def test_value_falls_as_wacc_rises(self, reference_inputs):
    table = SensitivityTableBuilder(reference_inputs).build([8, 10, 12], [2])
    column = table['2%']

    assert column['8%'] > column['10%'] > column['12%']

  def test_empty_rates_rejected(self, reference_inputs):
    builder = SensitivityTableBuilder(reference_inputs)

    with pytest.raises(ValueError, match='discount_rates'):
      builder.build([], [2])
    with pytest.raises(ValueError, match='perpetual_growth_rates'):
      builder.build([10], [])

  def test_invalid_case_rejected(self, make_inputs):
    with pytest.raises(InvalidInputError, match='base_revenue'):
      SensitivityTableBuilder(make_inputs(revenue=-1))

  def test_strict_scenario_rejects_short_paths(self, make_inputs):
    with pytest.raises(InvalidInputError, match='revenue_growth'):
      SensitivityTableBuilder(make_inputs(growth=(5, 5)),
                              ScenarioConfig.strict())


def test_parse_float_list():
  assert _parse_float_list('8, 9.5,10') == [8.0, 9.5, 10.0]
