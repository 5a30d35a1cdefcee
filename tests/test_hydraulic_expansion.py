"""Tests for API 521 hydraulic (thermal) expansion relief."""

import pytest

from hydraulic_expansion import (
    HydraulicExpansionInputs,
    HydraulicScenarioType,
    calculate_hydraulic_expansion_flow,
    gpm_to_lb_hr,
    thermal_expansion_flow_gpm,
)


def test_equation_2():
    q = thermal_expansion_flow_gpm(0.0005, 1_000_000, 0.7, 0.5)
    assert q == pytest.approx(500 / 175)


def test_gpm_to_lb_hr():
    assert gpm_to_lb_hr(1.0, 1.0) == pytest.approx(8.34 * 60)


class TestHydraulicExpansionCase:
    def test_flows(self):
        result = calculate_hydraulic_expansion_flow(HydraulicExpansionInputs(heat_input_rate=1_000_000))
        q = 500 / 175
        W = q * 8.34 * 0.7 * 60
        assert result.volumetric_flow_rate == pytest.approx(q)
        assert result.mass_flow_rate == pytest.approx(W)
        assert result.asme_viii_design_flow == pytest.approx(W / 0.9)
        assert result.relief_time_estimate is None
        assert result.is_calculated

    def test_relief_time(self):
        result = calculate_hydraulic_expansion_flow(
            HydraulicExpansionInputs(heat_input_rate=1_000_000, trapped_volume=100))
        assert result.relief_time_estimate == pytest.approx(100 / (500 / 175))

    @pytest.mark.parametrize("field", [
        "heat_input_rate", "cubic_expansion_coefficient", "specific_heat_capacity", "relative_density",
    ])
    def test_incomplete_inputs_give_zero_without_error(self, field):
        values = dict(heat_input_rate=1_000_000)
        values[field] = 0
        result = calculate_hydraulic_expansion_flow(HydraulicExpansionInputs(**values))
        assert result.calculated_relieving_flow == 0
        assert result.asme_viii_design_flow == 0
        assert result.errors == []
        assert not result.is_calculated

    def test_scenario_type_reported(self):
        result = calculate_hydraulic_expansion_flow(HydraulicExpansionInputs(
            heat_input_rate=1000, scenario_type=HydraulicScenarioType.SOLAR_HEATING))
        assert result.to_dict()["scenario_type"] == "solar-heating"

    def test_working_fluid_reported(self):
        result = calculate_hydraulic_expansion_flow(HydraulicExpansionInputs(
            heat_input_rate=1000, working_fluid="Benzene"))
        assert result.working_fluid == "Benzene"
