"""Tests for the API 521 environmental factor F."""

import pytest

from environmental_factor import (
    EnvironmentalFactorParams,
    StorageType,
    environmental_factor,
    evaluate_environmental_factor,
)


def insulated(material="Calcium Silicate Type II", thickness=2.0, temperature=200.0):
    return EnvironmentalFactorParams(
        insulation_material=material,
        insulation_thickness_in=thickness,
        process_temperature_f=temperature,
    )


class TestStorage:
    def test_bare_vessel(self):
        assert environmental_factor(EnvironmentalFactorParams()) == 1.0

    def test_earth_covered(self):
        assert environmental_factor(EnvironmentalFactorParams(StorageType.EARTH_COVERED)) == 0.03

    def test_below_grade(self):
        assert environmental_factor(EnvironmentalFactorParams(StorageType.BELOW_GRADE)) == 0.0

    def test_storage_overrides_insulation(self):
        params = EnvironmentalFactorParams(StorageType.EARTH_COVERED, "Calcium Silicate Type II", 2, 200)
        assert environmental_factor(params) == 0.03


class TestInsulationCredit:
    def test_calcium_silicate(self):
        expected = (0.77 / 2.0) * (1 / (1660 - 200)) * 260
        assert environmental_factor(insulated()) == pytest.approx(expected)
        assert environmental_factor(insulated()) == pytest.approx(0.0686, abs=1e-4)

    def test_partial_inputs_fall_back_to_bare(self):
        result = evaluate_environmental_factor(insulated(thickness=None))
        assert result.value == 1.0
        assert result.warnings == []

    def test_negative_thickness_falls_back_to_bare(self):
        result = evaluate_environmental_factor(insulated(thickness=-2.0))
        assert result.value == 1.0
        assert "thickness must be greater than 0" in result.warnings[0]

    def test_low_temperature_material_rejected(self):
        result = evaluate_environmental_factor(insulated(material="Cellular Glass Type I"))
        assert result.value == 1.0
        assert "minimum for fire credit" in result.warnings[0]

    def test_1200f_material_accepted(self):
        assert environmental_factor(insulated(material="Mineral Fiber Blanket/Block")) < 1.0

    def test_unknown_material(self):
        result = evaluate_environmental_factor(insulated(material="Styrofoam"))
        assert result.value == 1.0
        assert "Unknown insulation material" in result.warnings[0]

    def test_process_above_fire_temperature(self):
        result = evaluate_environmental_factor(insulated(temperature=1700))
        assert result.value == 1.0
        assert result.warnings

    def test_clamped_to_one(self):
        result = evaluate_environmental_factor(
            insulated(material="Dense Cementitious", thickness=0.5, temperature=1000))
        assert result.value == 1.0
        assert "out of range" in result.warnings[0]
