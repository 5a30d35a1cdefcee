"""Tests for fluid, gas and insulation reference tables."""

import pytest

from property_store import (
    COMMON_GASES,
    DEFAULT_GAS_PROPERTY,
    custom_gas_property,
    get_fluid_names,
    get_fluid_property,
    get_gas_property,
    get_insulation_material,
    get_insulation_materials,
)


class TestFluids:
    def test_lookup_is_case_insensitive(self):
        water = get_fluid_property("WATER")
        assert water.name == "Water"
        assert water.heat_of_vaporization == 970
        assert get_fluid_property("  methylene chloride ").molecular_weight == 84.93

    def test_unknown_fluid_is_none(self):
        assert get_fluid_property("unobtainium") is None
        assert get_fluid_property("") is None

    def test_names_sorted(self):
        names = get_fluid_names()
        assert len(names) == 20
        assert names == sorted(names)
        assert names[0] == "Acetaldehyde"

    def test_air_has_no_latent_heat(self):
        assert get_fluid_property("air").heat_of_vaporization == 0


class TestGases:
    def test_lookup(self):
        co2 = get_gas_property("CO2")
        assert co2.molecular_weight == 44.01
        assert co2.default_z == 0.99

    def test_unknown_gas_is_none(self):
        assert get_gas_property("xenon") is None

    def test_default_is_nitrogen(self):
        assert DEFAULT_GAS_PROPERTY is COMMON_GASES["nitrogen"]
        assert DEFAULT_GAS_PROPERTY.specific_gravity == 0.967

    def test_custom_gas_specific_gravity_from_mw(self):
        gas = custom_gas_property(28.97)
        assert gas.specific_gravity == pytest.approx(1.0)
        assert gas.default_z == 1.0

    def test_custom_gas_explicit_values(self):
        gas = custom_gas_property(58.12, specific_gravity=2.0, default_z=0.9, name="Butane")
        assert gas.name == "Butane"
        assert gas.specific_gravity == 2.0
        assert gas.default_z == 0.9


class TestInsulation:
    def test_six_materials(self):
        assert len(get_insulation_materials()) == 6

    def test_lookup(self):
        material = get_insulation_material("calcium silicate type ii")
        assert material.max_temperature_f == 1700
        assert material.thermal_conductivity == 0.77

    def test_unknown(self):
        assert get_insulation_material("Styrofoam") is None
