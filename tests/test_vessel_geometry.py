"""Tests for vessel head areas and fire exposed (wetted) area."""

import math

import pytest

from relief_base import FireCode
from vessel_geometry import (
    HeadType,
    VesselGeometry,
    VesselOrientation,
    fire_exposed_area,
    head_area_table,
    standard_diameters,
    vessel_head_area,
)


class TestHeadArea:
    def test_flat(self):
        assert vessel_head_area(12, HeadType.FLAT) == pytest.approx(36 * math.pi / 144)

    def test_small_hemispherical_formula(self):
        assert vessel_head_area(6, HeadType.HEMISPHERICAL) == pytest.approx(36 / 144 * 1.57)

    def test_table_lookups(self):
        assert vessel_head_area(48, HeadType.HEMISPHERICAL) == 14.89
        assert vessel_head_area(48, HeadType.ELLIPTICAL) == 17.21
        assert vessel_head_area(4.5, HeadType.ELLIPTICAL) == 0.1524

    def test_unmatched_diameter_is_zero(self):
        assert vessel_head_area(50, HeadType.ELLIPTICAL) == 0
        assert vessel_head_area(7, HeadType.HEMISPHERICAL) == 0

    def test_non_positive_diameter(self):
        assert vessel_head_area(0, HeadType.FLAT) == 0
        assert vessel_head_area(-12, HeadType.ELLIPTICAL) == 0

    def test_standard_diameters(self):
        diameters = standard_diameters()
        assert len(diameters) == 34
        assert set(head_area_table(HeadType.ELLIPTICAL)) == set(diameters)
        assert len(head_area_table(HeadType.FLAT)) == 34


class TestSphere:
    def test_api_521_bottom_hemisphere(self):
        vessel = VesselGeometry(240, 0, orientation=VesselOrientation.SPHERE)
        assert fire_exposed_area(vessel, FireCode.API_521) == pytest.approx(628.3, abs=0.1)

    def test_api_521_ignores_height_limit(self):
        vessel = VesselGeometry(240, 0, orientation=VesselOrientation.SPHERE)
        elevated = fire_exposed_area(vessel, FireCode.API_521, fire_source_elevation_ft=-100)
        assert elevated == pytest.approx(2 * math.pi * 10 ** 2)

    def test_nfpa_30_fraction(self):
        vessel = VesselGeometry(240, 0, orientation=VesselOrientation.SPHERE)
        assert fire_exposed_area(vessel, FireCode.NFPA_30) == pytest.approx(4 * math.pi * 100 * 0.55)


class TestCylinder:
    shell_10ft = 2 * math.pi * 2 * 10  # 4 ft diameter, 10 ft tall

    def test_vertical_nfpa_30(self):
        vessel = VesselGeometry(48, 120)
        assert fire_exposed_area(vessel, FireCode.NFPA_30) == pytest.approx(self.shell_10ft + 2 * 17.21)

    def test_skirt_protected_bottom_head(self):
        vessel = VesselGeometry(48, 120)
        area = fire_exposed_area(vessel, FireCode.NFPA_30, head_protected_by_skirt=True)
        assert area == pytest.approx(self.shell_10ft + 17.21)

    def test_horizontal_nfpa_30(self):
        vessel = VesselGeometry(48, 120, orientation=VesselOrientation.HORIZONTAL)
        assert fire_exposed_area(vessel, FireCode.NFPA_30) == pytest.approx(self.shell_10ft + 2 * 17.21)

    def test_api_521_height_limit(self):
        vessel = VesselGeometry(48, 360)  # 30 ft tall
        area = fire_exposed_area(vessel, FireCode.API_521)
        assert area == pytest.approx(2 * math.pi * 2 * 25 + 17.21)

    def test_api_521_fire_source_elevation_raises_limit(self):
        vessel = VesselGeometry(48, 360)
        area = fire_exposed_area(vessel, FireCode.API_521, fire_source_elevation_ft=10)
        assert area == pytest.approx(2 * math.pi * 2 * 30 + 2 * 17.21)

    def test_nfpa_30_has_no_height_limit(self):
        vessel = VesselGeometry(48, 360)
        assert fire_exposed_area(vessel, FireCode.NFPA_30) == pytest.approx(2 * math.pi * 2 * 30 + 2 * 17.21)

    def test_vessel_above_limit_is_zero(self):
        vessel = VesselGeometry(48, 120)
        assert fire_exposed_area(vessel, FireCode.API_521, fire_source_elevation_ft=-30) == 0

    def test_missing_dimensions(self):
        assert fire_exposed_area(VesselGeometry(48, 0), FireCode.NFPA_30) == 0
        assert fire_exposed_area(VesselGeometry(0, 120), FireCode.NFPA_30) == 0

    def test_nonstandard_diameter_shell_only(self):
        vessel = VesselGeometry(50, 120)
        expected = 2 * math.pi * (50 / 24) * 10
        assert fire_exposed_area(vessel, FireCode.NFPA_30) == pytest.approx(expected)
