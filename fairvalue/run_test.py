import json
import logging

import pytest

from fairvalue.domain.errors import DegenerateValuationError
from fairvalue.domain.errors import InvalidInputError
from fairvalue.run import EV_EBITDA_LABEL
from fairvalue.run import DCF_LABEL
from fairvalue.run import load_case
from fairvalue.run import log_report
from fairvalue.run import MARKET_LABEL
from fairvalue.run import PE_LABEL
from fairvalue.run import prepare_inputs
from fairvalue.run import run_case
from fairvalue.run import run_valuation
from fairvalue.scenarios.config import ScenarioConfig


class TestPrepareInputs:
  """Tests for prepare_inputs function."""

  def test_percentages_converted(self, reference_inputs):
    prepared, diag = prepare_inputs(reference_inputs, ScenarioConfig.default())

    assert prepared.tax_rate == pytest.approx(0.21)
    assert prepared.discount_rate == pytest.approx(0.10)
    assert prepared.g_terminal == pytest.approx(0.02)
    assert prepared.growth_path == pytest.approx((0.05,) * 5)
    assert prepared.ratios.capex_to_revenue == pytest.approx(0.07)
    assert diag['scenario'] == 'default'
    assert diag['growth_path_method'] == 'zero_pad'
    assert diag['reinvestment_reinvestment_method'] == 'base_ratio'

  def test_short_arrays_padded(self, make_inputs):
    prepared, diag = prepare_inputs(
        make_inputs(growth=(5, 5, 5), margin=(20,) * 7),
        ScenarioConfig.default())

    assert prepared.growth_path == pytest.approx((0.05, 0.05, 0.05, 0.0, 0.0))
    assert len(prepared.margin_path) == 5
    assert diag['growth_padded'] == 2
    assert diag['margin_truncated'] == 2


class TestRunValuation:
  """Tests for run_valuation function."""

  def test_reference_case(self, reference_inputs):
    """Golden values for the reference company."""
    result = run_valuation(reference_inputs)

    assert result.per_share_dcf == pytest.approx(3.0130600604, abs=1e-6)
    assert result.enterprise_value == pytest.approx(170_653_003.02, abs=1.0)
    assert result.per_share_pe == pytest.approx(3.60)
    assert result.per_share_ev_ebitda == pytest.approx(4.60)
    assert len(result.projections) == 5

  def test_comparison_sorted_without_market_price(self, reference_inputs):
    result = run_valuation(reference_inputs)

    assert [label for label, _ in result.comparison_pairs()] == [
        DCF_LABEL, PE_LABEL, EV_EBITDA_LABEL
    ]

  def test_comparison_includes_market_price(self, make_inputs):
    result = run_valuation(make_inputs(market_price=3.5))
    pairs = result.comparison_pairs()

    assert [label for label, _ in pairs] == [
        DCF_LABEL, MARKET_LABEL, PE_LABEL, EV_EBITDA_LABEL
    ]
    values = [value for _, value in pairs]
    assert values == sorted(values)

  def test_zero_market_price_is_included(self, make_inputs):
    """A market price of 0 is supplied, not missing."""
    result = run_valuation(make_inputs(market_price=0.0))

    assert result.comparison[0].label == MARKET_LABEL

  def test_padding_flattens_missing_years(self, make_inputs):
    """Years beyond the entered growth array grow at 0%."""
    result = run_valuation(make_inputs(growth=(5, 5, 5)))
    revenues = [p.revenue for p in result.projections]

    assert revenues[3] == pytest.approx(revenues[2])
    assert revenues[4] == pytest.approx(revenues[2])

  def test_strict_scenario_rejects_short_arrays(self, make_inputs):
    with pytest.raises(InvalidInputError, match='revenue_growth has 3'):
      run_valuation(make_inputs(growth=(5, 5, 5)),
                    config=ScenarioConfig.strict())

  @pytest.mark.parametrize('wacc,growth', [(5, 5), (4, 5)])
  def test_degenerate_rates(self, make_inputs, wacc, growth):
    with pytest.raises(DegenerateValuationError):
      run_valuation(make_inputs(discount_rate=wacc,
                                perpetual_growth_rate=growth))

  @pytest.mark.parametrize('revenue', [0, -100])
  def test_non_positive_revenue(self, make_inputs, revenue):
    with pytest.raises(InvalidInputError, match='base_revenue'):
      run_valuation(make_inputs(revenue=revenue))

  def test_engine_rejects_zero_revenue_without_validation(self, make_inputs):
    with pytest.raises(InvalidInputError):
      run_valuation(make_inputs(revenue=0), validate=False)

  def test_missing_growth_year_counts_as_zero(self, make_inputs):
    """A None year behaves exactly like an explicit 0% year."""
    gap = run_valuation(make_inputs(growth=(5, None, 5, 5, 5)))
    zero = run_valuation(make_inputs(growth=(5, 0, 5, 5, 5)))

    assert gap.per_share_dcf == pytest.approx(zero.per_share_dcf)
    assert gap.diag['growth_missing'] == 1
    assert zero.diag['growth_missing'] == 0

  def test_strict_rejects_missing_margin_year(self, make_inputs):
    inputs = make_inputs(margin=(20, 20, None, 20, 20))

    with pytest.raises(InvalidInputError, match='ebit_margin is missing years'):
      run_valuation(inputs, config=ScenarioConfig.strict())

  def test_wacc_at_minus_100_rejected(self, make_inputs):
    inputs = make_inputs(discount_rate=-100, perpetual_growth_rate=-150)

    with pytest.raises(InvalidInputError, match='discount_rate'):
      run_valuation(inputs)

  def test_engine_rejects_wacc_at_minus_100_without_validation(
      self, make_inputs):
    inputs = make_inputs(discount_rate=-100, perpetual_growth_rate=-150)

    with pytest.raises(InvalidInputError, match='above -100%'):
      run_valuation(inputs, validate=False)

  def test_zero_shares(self, make_inputs):
    result = run_valuation(make_inputs(diluted_shares=0))

    assert result.per_share_dcf == 0.0
    assert result.per_share_pe == 0.0
    assert result.per_share_ev_ebitda == 0.0
    assert result.diag['zero_share_guard'] is True

  def test_fresh_results(self, reference_inputs):
    """Each call recomputes; results compare equal but are not shared."""
    first = run_valuation(reference_inputs)
    second = run_valuation(reference_inputs)

    assert first == second
    assert first is not second

  def test_projection_frame(self, reference_inputs):
    frame = run_valuation(reference_inputs).projection_frame()

    assert list(frame.index) == [1, 2, 3, 4, 5]
    assert frame.loc[1, 'revenue'] == pytest.approx(105_000_000)


class TestLoadCase:
  """Tests for load_case function."""

  def test_wrapped_case(self, tmp_path, reference_case_dict):
    path = tmp_path / 'case.json'
    path.write_text(json.dumps(reference_case_dict))

    case = load_case(path)

    assert case.case_name == 'Reference Co'
    assert case.results is None
    assert case.inputs.relative.current_market_price == 5.5
    assert run_valuation(case.inputs).per_share_dcf == pytest.approx(
        3.0130600604, abs=1e-6)

  def test_missing_horizon_uses_config(self, tmp_path, reference_case_dict):
    raw = reference_case_dict['inputs']
    del raw['assumptions']['projection_years']
    path = tmp_path / 'bare.json'
    path.write_text(json.dumps(raw))

    case = load_case(path, ScenarioConfig(projection_years=3))

    assert case.case_name == 'bare'
    assert case.inputs.assumptions.projection_years == 3

  def test_missing_file(self, tmp_path):
    with pytest.raises(FileNotFoundError):
      load_case(tmp_path / 'nope.json')


class TestRunCase:
  """Tests for run_case function."""

  def test_attaches_results(self, tmp_path, reference_case_dict):
    path = tmp_path / 'case.json'
    path.write_text(json.dumps(reference_case_dict))
    case = load_case(path)

    valued = run_case(case)

    assert case.results is None
    assert valued.case_name == 'Reference Co'
    assert valued.results.per_share_dcf == pytest.approx(3.0130600604,
                                                         abs=1e-6)
    assert valued == case

  def test_null_growth_entry_in_stored_case(self, tmp_path,
                                            reference_case_dict):
    reference_case_dict['inputs']['assumptions']['revenue_growth'][1] = None
    path = tmp_path / 'case.json'
    path.write_text(json.dumps(reference_case_dict))

    valued = run_case(load_case(path))

    assert valued.inputs.assumptions.revenue_growth[1] is None
    assert valued.results.projections[1].revenue == pytest.approx(105_000_000)


class TestLogReport:

  def test_logs_football_field(self, reference_inputs, caplog):
    result = run_valuation(reference_inputs)
    with caplog.at_level(logging.INFO, logger='fairvalue.run'):
      log_report('Reference Co', ScenarioConfig.default(), result)

    assert 'Valuation - Reference Co' in caplog.text
    assert DCF_LABEL in caplog.text
