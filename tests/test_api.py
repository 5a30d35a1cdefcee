"""Tests for the FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


class TestReferenceEndpoints:
    def test_root(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_health(self):
        assert client.get("/health").json()["status"] == "healthy"

    def test_fluids(self):
        fluids = client.get("/fluids").json()["fluids"]
        assert len(fluids) == 20
        assert fluids[0]["name"] == "Acetaldehyde"

    def test_fluid_lookup(self):
        response = client.get("/fluids/water")
        assert response.status_code == 200
        assert response.json()["heat_of_vaporization"] == 970

    def test_unknown_fluid(self):
        assert client.get("/fluids/unobtainium").status_code == 404

    def test_gases(self):
        gases = client.get("/gases").json()["gases"]
        assert {g["id"] for g in gases} == {"nitrogen", "air", "oxygen", "co2", "methane", "custom"}

    def test_unknown_gas(self):
        assert client.get("/gases/xenon").status_code == 404

    def test_insulation_materials(self):
        assert len(client.get("/insulation-materials").json()["materials"]) == 6

    def test_vessel_head_areas(self):
        data = client.get("/vessel-head-areas").json()
        assert len(data["standard_diameters"]) == 34
        assert set(data["head_areas"]) == {"Elliptical", "Hemispherical", "Flat"}

    def test_heat_input_formulas(self):
        data = client.get("/heat-input-formulas").json()
        assert len(data["formulas"]["NFPA 30"]) == 4
        assert len(data["formulas"]["API 521"]) == 3
        assert len(data["nfpa_30_reduction_factors"]) == 4


class TestCalculationEndpoints:
    def test_head_area(self):
        response = client.post("/vessel/head-area", json={"diameter_in": 48, "head_type": "Elliptical"})
        assert response.json()["area_ft2"] == 17.21

    def test_sphere_fire_exposed_area(self):
        response = client.post("/vessel/fire-exposed-area", json={
            "vessel": {"diameter_in": 240, "orientation": "sphere"},
            "fire_code": "API 521",
        })
        assert response.json()["wetted_area_ft2"] == pytest.approx(628.3, abs=0.1)

    def test_environmental_factor(self):
        response = client.post("/environmental-factor", json={"storage_type": "earth-covered"})
        assert response.json() == {"value": 0.03, "warnings": []}

    def test_heat_input(self):
        response = client.post("/heat-input", json={"fire_code": "NFPA 30", "wetted_area_ft2": 100})
        assert response.json()["value"] == pytest.approx(2_000_000)

    def test_heat_input_no_formula(self):
        response = client.post("/heat-input", json={"fire_code": "NFPA 30", "wetted_area_ft2": 5})
        assert response.json()["value"] is None

    def test_case_pressure(self):
        data = client.post("/case-pressure", json={"mawp_psig": 100}).json()
        assert data["max_allowed_venting_pressure_psig"] == pytest.approx(110)
        assert data["max_allowable_backpressure_psig"] == pytest.approx(10)

    def test_invalid_enum_is_422(self):
        response = client.post("/vessel/head-area", json={"diameter_in": 48, "head_type": "Conical"})
        assert response.status_code == 422


class TestCaseEndpoints:
    def test_control_valve(self):
        response = client.post("/cases/control-valve-failure", json={
            "total_cv": 10, "inlet_pressure_psig": 100, "outlet_pressure_psig": 15,
        })
        data = response.json()
        assert data["case_id"] == "control-valve-failure"
        assert data["flow_regime"] == "choked"
        assert data["calculated_relieving_flow"] == pytest.approx(47800, rel=1e-3)
        assert data["is_calculated"] is True

    def test_control_valve_custom_gas(self):
        data = client.post("/cases/control-valve-failure", json={
            "is_manual_flow_input": True, "manual_flow_rate": 1000,
            "gas": "custom", "custom_molecular_weight": 44.0,
        }).json()
        assert data["gas_name"] == "Custom Gas"
        assert data["calculated_relieving_flow"] == pytest.approx(1000 / 44.0 * 379)

    def test_control_valve_unknown_gas(self):
        response = client.post("/cases/control-valve-failure", json={"gas": "xenon"})
        assert response.status_code == 404

    def test_control_valve_errors_in_body(self):
        response = client.post("/cases/control-valve-failure", json={
            "total_cv": 10, "inlet_pressure_psig": 10, "outlet_pressure_psig": 20,
        })
        assert response.status_code == 200
        assert response.json()["reason"] == "No forward pressure drop"

    def test_external_fire(self):
        data = client.post("/cases/external-fire", json={
            "vessel": {"diameter_in": 48, "straight_side_height_in": 120},
            "working_fluid": "Hexane",
        }).json()
        assert data["is_calculated"] is True
        assert data["heat_of_vaporization"] == 144

    def test_tube_rupture_default_relieving_pressure(self):
        data = client.post("/cases/heat-exchanger-tube-rupture", json={
            "high_pressure_side_psig": 500, "low_pressure_design_psig": 100,
        }).json()
        assert data["pressure_differential"] == pytest.approx(390)
        assert data["relief_required"] is True

    def test_hydraulic_expansion(self):
        data = client.post("/cases/hydraulic-expansion", json={"heat_input_rate": 1_000_000}).json()
        assert data["volumetric_flow_rate"] == pytest.approx(500 / 175)

    def test_blocked_outlet(self):
        data = client.post("/cases/blocked-outlet", json={
            "vessel_mawp_psig": 100, "source_type": "positive-displacement-pump",
            "max_source_flow_rate": 9000,
        }).json()
        assert data["asme_viii_design_flow"] == pytest.approx(10000)

    def test_cooling_reflux_failure(self):
        data = client.post("/cases/cooling-reflux-failure", json={
            "failure_mode": "air-cooler-fan", "incoming_vapor_rate": 10000,
        }).json()
        assert data["calculated_relieving_flow"] == pytest.approx(7500)

    def test_liquid_overfill(self):
        data = client.post("/cases/liquid-overfill", json={"max_pump_in_rate": 4500}).json()
        assert data["asme_viii_design_flow"] == pytest.approx(5000)

    def test_design_basis_flow(self):
        data = client.post("/design-basis-flow", json={"cases": [
            {"case_id": "A", "asme_viii_design_flow": 500, "is_calculated": True, "is_selected": True},
            {"case_id": "B", "asme_viii_design_flow": 900, "is_calculated": True, "is_selected": True},
            {"case_id": "C", "asme_viii_design_flow": 9999, "is_calculated": True, "is_selected": False},
        ]}).json()
        assert data["design_basis_flow"]["flow"] == 900
        assert data["design_basis_flow"]["case_id"] == "B"

    def test_design_basis_flow_none(self):
        data = client.post("/design-basis-flow", json={"cases": []}).json()
        assert data["design_basis_flow"] is None
