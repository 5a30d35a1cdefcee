"""
External Fire Relief Calculations per NFPA 30 and API 521

Implements:
- Piecewise heat input formulas Q = C * F * A^n
- Relieving rate W = Q / λ
- Complete external fire case (wetted area, F factor, reduction factor)

Author: Franc Engineering
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from environmental_factor import EnvironmentalFactorParams, evaluate_environmental_factor
from property_store import get_fluid_property
from relief_base import FireCode, ReliefResult, asme_viii_design_flow
from vessel_geometry import VesselGeometry, fire_exposed_area

logger = logging.getLogger(__name__)


NFPA_30_MIN_AREA_FT2 = 20
EQUIVALENT_AIR_FLOW_FACTOR = 10.28

# NFPA 30 §22.7.3.5 reduction factors for fire protection measures
NFPA_30_REDUCTION_FACTORS = {
    1.0: "No fire protection measures",
    0.5: "Drainage provided (area > 200 sq ft)",
    0.4: "Water spray system + drainage",
    0.3: "Automatic water spray OR insulation",
}


class FormulaVariant(Enum):
    NFPA_BAND = "nfpa_band"
    SMALL_FIRE = "small"
    LARGE_FIRE = "large"
    NO_DRAINAGE = "no_drainage"


@dataclass(frozen=True)
class HeatInputFormula:
    """Q = coefficient * A^exponent over an area range (ft²)"""
    fire_code: FireCode
    variant: FormulaVariant
    area_range_min: float
    area_range_max: Optional[float]
    coefficient: float
    exponent: float
    formula: str
    description: str = ""

    def applies_to(self, area_ft2: float) -> bool:
        return (area_ft2 >= self.area_range_min
                and (self.area_range_max is None or area_ft2 <= self.area_range_max))

    def evaluate(self, area_ft2: float) -> float:
        return self.coefficient * area_ft2 ** self.exponent


# NFPA 30 (2018) - piecewise by wetted area
NFPA_30_HEAT_INPUT_FORMULAS = [
    HeatInputFormula(FireCode.NFPA_30, FormulaVariant.NFPA_BAND, 20, 200, 20000, 1.0,
                     "20,000A", "Area 20-200 sq ft"),
    HeatInputFormula(FireCode.NFPA_30, FormulaVariant.NFPA_BAND, 200, 1000, 199300, 0.566,
                     "199,300A^0.566", "Area 200-1000 sq ft"),
    HeatInputFormula(FireCode.NFPA_30, FormulaVariant.NFPA_BAND, 1000, 2800, 963400, 0.338,
                     "963,400A^0.338", "Area 1000-2800 sq ft"),
    HeatInputFormula(FireCode.NFPA_30, FormulaVariant.NFPA_BAND, 2800, None, 21000, 0.82,
                     "21,000A^0.82", "Area >2800 sq ft"),
]

# API 521 - selected by drainage/firefighting adequacy, not by area
API_521_HEAT_INPUT_FORMULAS = [
    HeatInputFormula(FireCode.API_521, FormulaVariant.SMALL_FIRE, 0, None, 21000, -0.18,
                     "21,000FA^-0.18", "Small fires (q)"),
    HeatInputFormula(FireCode.API_521, FormulaVariant.LARGE_FIRE, 0, None, 21000, 0.82,
                     "21,000FA^0.82", "Large fires (Q)"),
    HeatInputFormula(FireCode.API_521, FormulaVariant.NO_DRAINAGE, 0, None, 34500, 0.82,
                     "34,500FA^0.82", "No adequate drainage/firefighting (Q)"),
]


@dataclass(frozen=True)
class HeatInputResult:
    value: float  # BTU/hr
    formula: HeatInputFormula
    environmental_factor: Optional[float] = None


def get_heat_input_formulas(fire_code: FireCode) -> List[HeatInputFormula]:
    if fire_code is FireCode.NFPA_30:
        return list(NFPA_30_HEAT_INPUT_FORMULAS)
    elif fire_code is FireCode.API_521:
        return list(API_521_HEAT_INPUT_FORMULAS)
    else:
        raise ValueError(f"Unknown fire code: {fire_code}")


def heat_input_formula(fire_code: FireCode,
                       area_ft2: float,
                       has_adequate_drainage: Optional[bool] = None) -> Optional[HeatInputFormula]:
    """
    Select the heat input formula for a wetted area

    NFPA 30 bands are closed intervals; at a shared edge the lower band wins.
    API 521 uses 34,500FA^0.82 only when drainage is explicitly inadequate.

    Returns:
        Formula, or None when no formula applies (area ≤ 0 or below 20 ft² for NFPA 30)
    """
    if area_ft2 is None or area_ft2 <= 0:
        return None

    if fire_code is FireCode.NFPA_30:
        for formula in NFPA_30_HEAT_INPUT_FORMULAS:
            if formula.applies_to(area_ft2):
                return formula
        return None
    elif fire_code is FireCode.API_521:
        variant = FormulaVariant.NO_DRAINAGE if has_adequate_drainage is False else FormulaVariant.LARGE_FIRE
        for formula in API_521_HEAT_INPUT_FORMULAS:
            if formula.variant is variant:
                return formula
        return None
    else:
        raise ValueError(f"Unknown fire code: {fire_code}")


def heat_input(fire_code: FireCode,
               area_ft2: float,
               has_adequate_drainage: Optional[bool] = None,
               environmental_factor: Optional[float] = None) -> Optional[HeatInputResult]:
    """
    Calculate fire heat input

    Q = C * A^n          (NFPA 30)
    Q = C * F * A^n      (API 521, F defaults to 1.0 for bare vessel)

    Args:
        fire_code: NFPA 30 or API 521
        area_ft2: Wetted surface area in ft²
        has_adequate_drainage: API 521 drainage/firefighting adequacy
        environmental_factor: API 521 environmental factor F

    Returns:
        Heat input in BTU/hr with the formula used, None if no formula applies
    """
    formula = heat_input_formula(fire_code, area_ft2, has_adequate_drainage)
    if formula is None:
        return None

    if fire_code is FireCode.API_521:
        F = 1.0 if environmental_factor is None else environmental_factor
        return HeatInputResult(formula.evaluate(area_ft2) * F, formula, F)

    return HeatInputResult(formula.evaluate(area_ft2), formula)


def fire_relieving_flow(heat_input_btu_hr: float,
                        heat_of_vaporization_btu_lb: Optional[float]) -> Optional[float]:
    """
    Calculate vapor relief rate for fire case

    W = Q / λ

    Returns:
        Relief rate in lb/hr, None when λ is missing or not positive
    """
    if heat_of_vaporization_btu_lb is None or heat_of_vaporization_btu_lb <= 0:
        return None
    return heat_input_btu_hr / heat_of_vaporization_btu_lb


@dataclass(frozen=True)
class ExternalFireInputs:
    vessel: VesselGeometry
    fire_code: FireCode = FireCode.NFPA_30
    heat_of_vaporization: Optional[float] = None  # Btu/lb, looked up from working_fluid if None
    working_fluid: Optional[str] = None
    has_adequate_drainage: Optional[bool] = None
    environment: Optional[EnvironmentalFactorParams] = None
    nfpa_reduction_factor: float = 1.0
    head_protected_by_skirt: bool = False
    fire_source_elevation_ft: float = 0.0


@dataclass
class ExternalFireResult(ReliefResult):
    fire_code: Optional[FireCode] = None
    wetted_area: Optional[float] = None  # ft²
    environmental_factor: Optional[float] = None
    heat_input: Optional[float] = None  # BTU/hr
    formula: Optional[HeatInputFormula] = None
    heat_of_vaporization: Optional[float] = None
    nfpa_reduction_factor: Optional[float] = None
    equivalent_air_flow: Optional[float] = None


def calculate_external_fire_flow(inputs: ExternalFireInputs) -> ExternalFireResult:
    """
    Calculate required relief for the external fire case

    Relieving flow (lb/hr) = Q / λ, ASME VIII design flow = relieving flow / 0.9
    """
    result = ExternalFireResult(fire_code=inputs.fire_code)

    latent_heat = inputs.heat_of_vaporization
    if latent_heat is None and inputs.working_fluid:
        fluid = get_fluid_property(inputs.working_fluid)
        if fluid is None:
            result.reason = "Unknown working fluid"
            result.errors.append(f"Unknown working fluid: {inputs.working_fluid}")
            return result
        latent_heat = fluid.heat_of_vaporization
    result.heat_of_vaporization = latent_heat

    if not latent_heat or latent_heat <= 0:
        result.reason = "No heat of vaporization"
        result.errors.append("Heat of vaporization must be greater than 0")
        return result

    area = fire_exposed_area(
        inputs.vessel,
        inputs.fire_code,
        head_protected_by_skirt=inputs.head_protected_by_skirt,
        fire_source_elevation_ft=inputs.fire_source_elevation_ft,
    )
    result.wetted_area = area

    if area <= 0:
        result.reason = "Invalid fire exposed area"
        result.errors.append("Fire exposed area must be greater than 0 - check vessel dimensions")
        return result

    if inputs.fire_code is FireCode.API_521 and inputs.has_adequate_drainage is None:
        result.reason = "API 521 requires drainage selection"
        result.errors.append("Select whether adequate drainage and firefighting are provided")
        return result

    F = None
    if inputs.fire_code is FireCode.API_521:
        env = evaluate_environmental_factor(inputs.environment or EnvironmentalFactorParams())
        F = env.value
        result.warnings.extend(env.warnings)
        if F == 0:
            result.warnings.append("Environmental factor is 0 - no fire heat input")

    heat = heat_input(inputs.fire_code, area, inputs.has_adequate_drainage, F)
    if heat is None:
        if inputs.fire_code is FireCode.NFPA_30 and area < NFPA_30_MIN_AREA_FT2:
            result.reason = f"NFPA 30 requires area ≥ 20 sq ft (current: {area:.1f} sq ft)"
        else:
            result.reason = "Heat input calculation failed"
        result.errors.append(result.reason)
        return result

    result.formula = heat.formula
    result.environmental_factor = heat.environmental_factor
    Q = heat.value

    if inputs.fire_code is FireCode.NFPA_30:
        reduction = inputs.nfpa_reduction_factor
        if reduction is None or reduction <= 0 or reduction > 1:
            result.reason = "Invalid NFPA 30 reduction factor"
            result.errors.append("NFPA 30 reduction factor must be greater than 0 and at most 1")
            return result
        if reduction < 1.0:
            Q = Q * reduction
        result.nfpa_reduction_factor = reduction

    result.heat_input = Q
    W = fire_relieving_flow(Q, latent_heat)

    result.calculated_relieving_flow = W
    result.mass_flow_rate = W
    result.asme_viii_design_flow = asme_viii_design_flow(W)
    result.equivalent_air_flow = W * EQUIVALENT_AIR_FLOW_FACTOR

    logger.debug("External fire: A=%.1f ft², Q=%.0f BTU/hr, W=%.0f lb/hr", area, Q, W)
    return result
