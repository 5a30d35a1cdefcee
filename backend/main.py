"""
Relief Flow API - FastAPI Backend

REST API for pressure vessel relief scenario flow calculations per
API 521, NFPA 30 and ASME Section VIII

Author: Franc Engineering
"""

import logging
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
import uvicorn

from app_settings import API_TITLE, API_VERSION, CORS_ORIGINS, HOST, PORT, setup_logging
from control_valve import GasFlowInputs, calculate_gas_control_valve_flow
from design_basis import CASE_NAMES, CaseFlowResult, CaseId, get_design_basis_flow
from environmental_factor import EnvironmentalFactorParams, StorageType, evaluate_environmental_factor
from fire_relief import (
    NFPA_30_REDUCTION_FACTORS,
    ExternalFireInputs,
    calculate_external_fire_flow,
    get_heat_input_formulas,
    heat_input,
)
from hydraulic_expansion import (
    HydraulicExpansionInputs,
    HydraulicScenarioType,
    calculate_hydraulic_expansion_flow,
)
from property_store import (
    COMMON_GASES,
    custom_gas_property,
    get_fluid_names,
    get_fluid_property,
    get_gas_property,
    get_insulation_materials,
)
from relief_base import ACCUMULATION_SINGLE_DEVICE, FireCode, ReliefResult, case_pressure, plain
from tube_rupture import ExchangerType, FluidState, TubeRuptureInputs, calculate_tube_rupture_flow
from unit_conversions import ManualFlowUnit
from upset_cases import (
    BlockedOutletInputs,
    CoolingRefluxInputs,
    FailureMode,
    LiquidOverfillInputs,
    SourceType,
    calculate_blocked_outlet_flow,
    calculate_cooling_reflux_failure_flow,
    calculate_liquid_overfill_flow,
)
from vessel_geometry import (
    HeadType,
    VesselGeometry,
    VesselOrientation,
    fire_exposed_area,
    head_area_table,
    standard_diameters,
    vessel_head_area,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=API_TITLE,
    description="API for relief scenario flow rates per API 521 / NFPA 30 / ASME VIII",
    version=API_VERSION,
    contact={
        "name": "Franc Engineering",
        "url": "https://franceng.com",
        "email": "info@franceng.com"
    }
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request Models
class VesselInput(BaseModel):
    diameter_in: float = Field(..., description="Vessel inside diameter in inches")
    straight_side_height_in: float = Field(0, description="Straight side height (vertical) or length (horizontal) in inches")
    head_type: HeadType = Field(HeadType.ELLIPTICAL, description="'Elliptical', 'Hemispherical' or 'Flat'")
    orientation: VesselOrientation = Field(VesselOrientation.VERTICAL, description="'vertical', 'horizontal' or 'sphere'")

    def to_geometry(self) -> VesselGeometry:
        return VesselGeometry(self.diameter_in, self.straight_side_height_in,
                              self.head_type, self.orientation)


class HeadAreaRequest(BaseModel):
    diameter_in: float = Field(..., description="Vessel diameter in inches")
    head_type: HeadType = Field(HeadType.ELLIPTICAL, description="Head type")


class FireExposedAreaRequest(BaseModel):
    vessel: VesselInput
    fire_code: FireCode = Field(FireCode.NFPA_30, description="'NFPA 30' or 'API 521'")
    head_protected_by_skirt: bool = Field(False, description="Bottom head shielded by a support skirt")
    fire_source_elevation_ft: float = Field(0, description="Fire source elevation above grade in feet")


class EnvironmentalFactorInput(BaseModel):
    storage_type: StorageType = Field(StorageType.ABOVE_GRADE, description="'above-grade', 'earth-covered' or 'below-grade'")
    insulation_material: Optional[str] = Field(None, description="Insulation material name")
    insulation_thickness_in: Optional[float] = Field(None, description="Insulation thickness in inches")
    process_temperature_f: Optional[float] = Field(None, description="Process temperature in °F")

    def to_params(self) -> EnvironmentalFactorParams:
        return EnvironmentalFactorParams(self.storage_type, self.insulation_material,
                                         self.insulation_thickness_in, self.process_temperature_f)


class HeatInputRequest(BaseModel):
    fire_code: FireCode = Field(FireCode.NFPA_30, description="'NFPA 30' or 'API 521'")
    wetted_area_ft2: float = Field(..., description="Wetted area in ft²")
    has_adequate_drainage: Optional[bool] = Field(None, description="API 521 drainage/firefighting adequacy")
    environmental_factor: Optional[float] = Field(None, ge=0, le=1, description="API 521 environmental factor F")


class CasePressureRequest(BaseModel):
    mawp_psig: float = Field(..., description="Vessel MAWP in psig")
    percent_of_mawp: float = Field(ACCUMULATION_SINGLE_DEVICE, gt=0, description="Allowed venting pressure as % of MAWP")


class ExternalFireRequest(BaseModel):
    vessel: VesselInput
    fire_code: FireCode = Field(FireCode.NFPA_30, description="'NFPA 30' or 'API 521'")
    heat_of_vaporization: Optional[float] = Field(None, description="Latent heat in Btu/lb (looked up from working fluid if omitted)")
    working_fluid: Optional[str] = Field(None, description="Working fluid name")
    has_adequate_drainage: Optional[bool] = Field(None, description="API 521 drainage/firefighting adequacy")
    environment: Optional[EnvironmentalFactorInput] = None
    nfpa_reduction_factor: float = Field(1.0, description="NFPA 30 reduction factor (1.0, 0.5, 0.4, 0.3)")
    head_protected_by_skirt: bool = Field(False, description="Bottom head shielded by a support skirt")
    fire_source_elevation_ft: float = Field(0, description="Fire source elevation above grade in feet")


class ControlValveRequest(BaseModel):
    is_manual_flow_input: bool = Field(False, description="Use a known flow rate instead of Cv/pressures")
    manual_flow_rate: Optional[float] = Field(None, description="Known flow rate in manual_flow_unit")
    manual_flow_unit: ManualFlowUnit = Field(ManualFlowUnit.LB_HR, description="'lb/hr', 'SCFH', 'kg/hr' or 'kg/s'")
    total_cv: Optional[float] = Field(None, description="Control valve Cv")
    bypass_cv: Optional[float] = Field(None, description="Bypass valve Cv")
    consider_bypass: bool = Field(False, description="Include the bypass valve")
    inlet_pressure_psig: Optional[float] = Field(None, description="Maximum upstream supply pressure in psig")
    outlet_pressure_psig: Optional[float] = Field(None, description="Vessel relieving pressure in psig")
    temperature_f: Optional[float] = Field(None, description="Gas temperature in °F (default 80)")
    compressibility_z: Optional[float] = Field(None, description="Compressibility factor (default from gas)")
    xt: Optional[float] = Field(None, description="Pressure drop ratio factor (default 0.7)")
    gas: str = Field("nitrogen", description="Gas key: nitrogen, air, oxygen, co2, methane, custom")
    custom_molecular_weight: Optional[float] = Field(None, description="Custom gas molecular weight")
    custom_specific_gravity: Optional[float] = Field(None, description="Custom gas specific gravity (default MW / 28.97)")
    custom_z: float = Field(1.0, description="Custom gas default Z")
    outlet_flow_credit: Optional[float] = Field(None, description="Normal outlet flow credit in SCFH")
    credit_outlet_flow: bool = Field(False, description="Apply the outlet flow credit")


class BlockedOutletRequest(BaseModel):
    vessel_mawp_psig: float = Field(..., description="Vessel MAWP in psig")
    source_type: SourceType = Field(SourceType.CENTRIFUGAL_PUMP, description="Upstream source type")
    max_source_pressure_psig: float = Field(0, description="Maximum source pressure in psig")
    max_source_flow_rate: float = Field(0, description="Maximum source flow in lb/hr")
    outlet_flow_credit: Optional[float] = Field(None, description="Normal outlet flow credit in lb/hr")
    credit_outlet_flow: bool = False
    working_fluid: Optional[str] = None


class CoolingRefluxRequest(BaseModel):
    failure_mode: FailureMode = Field(FailureMode.TOTAL_CONDENSING, description="Condenser failure mode")
    incoming_vapor_rate: float = Field(0, description="Vapor to condenser at relieving conditions, lb/hr")
    outgoing_vapor_rate: float = Field(0, description="Vapor leaving a partial condenser, lb/hr")
    natural_convection_credit: float = Field(25, description="Air cooler natural convection credit, %")
    pump_around_heat_duty: float = Field(0, description="Pump-around heat duty in Btu/hr")
    latent_heat_of_vaporization: Optional[float] = Field(None, description="Latent heat in Btu/lb")
    working_fluid: Optional[str] = None


class HydraulicExpansionRequest(BaseModel):
    heat_input_rate: float = Field(0, description="Heat transfer rate in Btu/hr")
    cubic_expansion_coefficient: float = Field(0.0005, description="αv in 1/°F")
    specific_heat_capacity: float = Field(0.5, description="c in Btu/lb·°F")
    relative_density: float = Field(0.7, description="d relative to water at 60°F")
    trapped_volume: Optional[float] = Field(None, description="Trapped liquid volume in gallons")
    scenario_type: HydraulicScenarioType = HydraulicScenarioType.COLD_FLUID_SHUTIN
    working_fluid: Optional[str] = None


class TubeRuptureRequest(BaseModel):
    high_pressure_side_psig: float = Field(..., description="High-pressure side pressure in psig")
    low_pressure_design_psig: float = Field(..., description="Low-pressure side design pressure (MAWP) in psig")
    relieving_pressure_psig: Optional[float] = Field(None, description="Low-pressure side relieving pressure (default MAWP x percent_of_mawp)")
    percent_of_mawp: float = Field(ACCUMULATION_SINGLE_DEVICE, gt=0, description="Allowed venting pressure as % of MAWP")
    fluid_state: FluidState = FluidState.LIQUID
    exchanger_type: ExchangerType = ExchangerType.SHELL_AND_TUBE
    tube_inner_diameter_in: float = Field(0.75, description="Tube inner diameter in inches")
    number_of_tubes: int = Field(1, description="Number of failed tubes")
    fluid_density: float = Field(62.4, description="Liquid density in lb/ft³")
    molecular_weight: float = Field(28, description="Gas molecular weight")
    specific_heat_ratio: float = Field(1.4, description="Gas k = Cp/Cv")
    temperature_f: float = Field(80, description="Gas temperature in °F")


class LiquidOverfillRequest(BaseModel):
    max_pump_in_rate: float = Field(0, description="Maximum liquid pump-in rate in lb/hr")
    outlet_flow_credit: Optional[float] = Field(None, description="Normal outlet flow credit in lb/hr")
    credit_outlet_flow: bool = False
    working_fluid: Optional[str] = None


class CaseFlowInput(BaseModel):
    case_id: str
    case_name: str = ""
    asme_viii_design_flow: Optional[float] = None
    is_calculated: bool = False
    is_selected: bool = False


class DesignBasisRequest(BaseModel):
    cases: List[CaseFlowInput]


def case_response(case_id: CaseId, result: ReliefResult) -> Dict:
    response = {"case_id": case_id.value, "case_name": CASE_NAMES[case_id]}
    response.update(result.to_dict())
    return response


# Reference Data Endpoints
@app.get("/")
async def root():
    return {
        "message": API_TITLE,
        "version": API_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": API_VERSION}


@app.get("/fluids")
async def list_fluids():
    """Get working fluid properties"""
    return {"fluids": [plain(get_fluid_property(name)) for name in get_fluid_names()]}


@app.get("/fluids/{name}")
async def get_fluid(name: str):
    fluid = get_fluid_property(name)
    if fluid is None:
        raise HTTPException(status_code=404, detail=f"Unknown fluid: {name}")
    return plain(fluid)


@app.get("/gases")
async def list_gases():
    """Get gas properties for control valve failure"""
    return {"gases": [{"id": key, **plain(gas)} for key, gas in COMMON_GASES.items()]}


@app.get("/gases/{key}")
async def get_gas(key: str):
    gas = get_gas_property(key)
    if gas is None:
        raise HTTPException(status_code=404, detail=f"Unknown gas: {key}")
    return {"id": key.strip().lower(), **plain(gas)}


@app.get("/insulation-materials")
async def list_insulation_materials():
    """Get API 521 Table 6 insulation materials"""
    return {"materials": plain(get_insulation_materials())}


@app.get("/vessel-head-areas")
async def list_vessel_head_areas():
    """Get head areas by standard diameter"""
    return {
        "standard_diameters": standard_diameters(),
        "head_areas": {
            head_type.value: [
                {"diameter_in": d, "area_ft2": area}
                for d, area in head_area_table(head_type).items()
            ]
            for head_type in HeadType
        }
    }


@app.get("/heat-input-formulas")
async def list_heat_input_formulas():
    """Get NFPA 30 and API 521 fire heat input formulas"""
    return {
        "formulas": {code.value: plain(get_heat_input_formulas(code)) for code in FireCode},
        "nfpa_30_reduction_factors": [
            {"factor": factor, "description": description}
            for factor, description in NFPA_30_REDUCTION_FACTORS.items()
        ]
    }


# Calculation Endpoints
@app.post("/vessel/head-area")
async def calculate_head_area(request: HeadAreaRequest):
    area = vessel_head_area(request.diameter_in, request.head_type)
    return {"diameter_in": request.diameter_in, "head_type": request.head_type.value, "area_ft2": area}


@app.post("/vessel/fire-exposed-area")
async def calculate_fire_exposed_area(request: FireExposedAreaRequest):
    area = fire_exposed_area(
        request.vessel.to_geometry(),
        request.fire_code,
        head_protected_by_skirt=request.head_protected_by_skirt,
        fire_source_elevation_ft=request.fire_source_elevation_ft
    )
    return {"fire_code": request.fire_code.value, "wetted_area_ft2": area}


@app.post("/environmental-factor")
async def calculate_environmental_factor(request: EnvironmentalFactorInput):
    return plain(evaluate_environmental_factor(request.to_params()))


@app.post("/heat-input")
async def calculate_heat_input(request: HeatInputRequest):
    result = heat_input(request.fire_code, request.wetted_area_ft2,
                        request.has_adequate_drainage, request.environmental_factor)
    if result is None:
        return {"value": None, "formula": None, "environmental_factor": None}
    return plain(result)


@app.post("/case-pressure")
async def calculate_case_pressure(request: CasePressureRequest):
    return plain(case_pressure(request.mawp_psig, request.percent_of_mawp))


# Relief Case Endpoints
@app.post("/cases/external-fire")
async def external_fire(request: ExternalFireRequest):
    inputs = ExternalFireInputs(
        vessel=request.vessel.to_geometry(),
        fire_code=request.fire_code,
        heat_of_vaporization=request.heat_of_vaporization,
        working_fluid=request.working_fluid,
        has_adequate_drainage=request.has_adequate_drainage,
        environment=request.environment.to_params() if request.environment else None,
        nfpa_reduction_factor=request.nfpa_reduction_factor,
        head_protected_by_skirt=request.head_protected_by_skirt,
        fire_source_elevation_ft=request.fire_source_elevation_ft
    )
    return case_response(CaseId.EXTERNAL_FIRE, calculate_external_fire_flow(inputs))


@app.post("/cases/control-valve-failure")
async def control_valve_failure(request: ControlValveRequest):
    if request.gas.strip().lower() == "custom" and request.custom_molecular_weight is not None:
        gas = custom_gas_property(request.custom_molecular_weight,
                                  request.custom_specific_gravity,
                                  request.custom_z)
    else:
        gas = get_gas_property(request.gas)
        if gas is None:
            raise HTTPException(status_code=404, detail=f"Unknown gas: {request.gas}")

    inputs = GasFlowInputs(
        is_manual_flow_input=request.is_manual_flow_input,
        manual_flow_rate=request.manual_flow_rate,
        manual_flow_unit=request.manual_flow_unit,
        total_cv=request.total_cv,
        bypass_cv=request.bypass_cv,
        consider_bypass=request.consider_bypass,
        inlet_pressure_psig=request.inlet_pressure_psig,
        outlet_pressure_psig=request.outlet_pressure_psig,
        temperature_f=request.temperature_f,
        compressibility_z=request.compressibility_z,
        xt=request.xt,
        gas=gas,
        outlet_flow_credit=request.outlet_flow_credit,
        credit_outlet_flow=request.credit_outlet_flow
    )
    return case_response(CaseId.CONTROL_VALVE_FAILURE, calculate_gas_control_valve_flow(inputs))


@app.post("/cases/blocked-outlet")
async def blocked_outlet(request: BlockedOutletRequest):
    inputs = BlockedOutletInputs(**request.model_dump())
    return case_response(CaseId.BLOCKED_OUTLET, calculate_blocked_outlet_flow(inputs))


@app.post("/cases/cooling-reflux-failure")
async def cooling_reflux_failure(request: CoolingRefluxRequest):
    inputs = CoolingRefluxInputs(**request.model_dump())
    return case_response(CaseId.COOLING_REFLUX_FAILURE, calculate_cooling_reflux_failure_flow(inputs))


@app.post("/cases/hydraulic-expansion")
async def hydraulic_expansion(request: HydraulicExpansionRequest):
    inputs = HydraulicExpansionInputs(**request.model_dump())
    return case_response(CaseId.HYDRAULIC_EXPANSION, calculate_hydraulic_expansion_flow(inputs))


@app.post("/cases/heat-exchanger-tube-rupture")
async def heat_exchanger_tube_rupture(request: TubeRuptureRequest):
    data = request.model_dump()
    percent = data.pop("percent_of_mawp")
    if data["relieving_pressure_psig"] is None:
        pressures = case_pressure(request.low_pressure_design_psig, percent)
        data["relieving_pressure_psig"] = pressures.max_allowed_venting_pressure_psig
    inputs = TubeRuptureInputs(**data)
    return case_response(CaseId.HEAT_EXCHANGER_TUBE_RUPTURE, calculate_tube_rupture_flow(inputs))


@app.post("/cases/liquid-overfill")
async def liquid_overfill(request: LiquidOverfillRequest):
    inputs = LiquidOverfillInputs(**request.model_dump())
    return case_response(CaseId.LIQUID_OVERFILL, calculate_liquid_overfill_flow(inputs))


@app.post("/design-basis-flow")
async def design_basis_flow(request: DesignBasisRequest):
    """Highest ASME VIII design flow among selected, calculated cases"""
    results = [CaseFlowResult(**case.model_dump()) for case in request.cases]
    governing = get_design_basis_flow(results)
    return {"design_basis_flow": plain(governing) if governing else None}


if __name__ == "__main__":
    setup_logging()
    logger.info("Starting %s on %s:%s", API_TITLE, HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)
