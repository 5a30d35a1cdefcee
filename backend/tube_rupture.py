"""
Heat Exchanger Tube Rupture per API 521 §4.4.14

Guillotine break of one (or more) tubes at the tubesheet. High-pressure
fluid flows through both ends of the broken tube into the low-pressure side.

Implements:
- Liquid orifice flow (also used, conservatively, for flashing liquid)
- Compressible orifice flow, choked and sub-critical
- Relief requirement check (high-pressure side vs low-pressure side design)

Author: Franc Engineering
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from relief_base import ReliefResult, asme_viii_design_flow
from unit_conversions import SECONDS_PER_HOUR, fahrenheit_to_rankine, psig_to_psia

logger = logging.getLogger(__name__)


# Constants
DISCHARGE_COEFFICIENT = 0.6  # sharp-edged orifice
G_C = 32.174  # ft/s²
R_GAS = 10.73  # psia·ft³/(lbmol·R)
PSF_PER_PSI = 144
DYNAMIC_ANALYSIS_DIFFERENTIAL_PSI = 1000  # API 521 §4.4.14.2.2


class FluidState(Enum):
    LIQUID = "liquid"
    GAS = "gas"
    FLASHING_LIQUID = "flashing-liquid"


class ExchangerType(Enum):
    SHELL_AND_TUBE = "shell-and-tube"
    DOUBLE_PIPE = "double-pipe"
    PLATE_AND_FRAME = "plate-and-frame"


@dataclass(frozen=True)
class TubeRuptureInputs:
    high_pressure_side_psig: float
    low_pressure_design_psig: float  # low-pressure side MAWP
    relieving_pressure_psig: float  # low-pressure side max allowed venting pressure
    fluid_state: FluidState = FluidState.LIQUID
    exchanger_type: ExchangerType = ExchangerType.SHELL_AND_TUBE
    tube_inner_diameter_in: float = 0.75
    number_of_tubes: int = 1
    fluid_density: float = 62.4  # lb/ft³, water
    molecular_weight: float = 28
    specific_heat_ratio: float = 1.4
    temperature_f: float = 80


@dataclass
class TubeRuptureResult(ReliefResult):
    relief_required: bool = False
    fluid_state: Optional[FluidState] = None
    exchanger_type: Optional[ExchangerType] = None
    tube_flow_area: float = 0.0  # ft²
    per_tube_flow: float = 0.0  # lb/hr
    total_flow: float = 0.0  # lb/hr
    pressure_differential: float = 0.0  # psi
    flow_regime: Optional[str] = None


def tube_flow_area_ft2(tube_inner_diameter_in: float) -> float:
    """A = π * (d/12)² / 4"""
    return math.pi * (tube_inner_diameter_in / 12) ** 2 / 4


def liquid_orifice_mass_flow(area_ft2: float, delta_p_psi: float, density_lb_ft3: float) -> float:
    """
    Incompressible orifice flow

    v = C * sqrt(2 * g * ΔP / ρ)
    W = v * A * ρ * 3600

    Returns:
        Mass flow in lb/hr, 0 when there is no forward differential
    """
    if delta_p_psi <= 0 or density_lb_ft3 <= 0:
        return 0.0
    velocity = DISCHARGE_COEFFICIENT * math.sqrt(2 * G_C * delta_p_psi * PSF_PER_PSI / density_lb_ft3)
    return velocity * area_ft2 * density_lb_ft3 * SECONDS_PER_HOUR


def critical_pressure_ratio(k: float) -> float:
    """Calculate critical pressure ratio for choked flow"""
    return (2 / (k + 1)) ** (k / (k - 1))


def is_choked(P1_psia: float, P2_psia: float, k: float) -> bool:
    """Flow is choked when P2/P1 is below the critical ratio"""
    return P2_psia / P1_psia < critical_pressure_ratio(k)


def gas_orifice_mass_flow(area_ft2: float, P1_psia: float, P2_psia: float,
                          k: float, MW: float, T_R: float) -> float:
    """
    Compressible orifice flow

    Choked:
        W = C * A * P1 * 144 * sqrt(k * g * MW / (R * T)) * sqrt((2/(k+1))^((k+1)/(k-1))) * 3600
    Sub-critical:
        W = C * A * P1 * 144 * sqrt(2 * g * k * MW / ((k-1) * R * T)) * sqrt(r^(2/k) - r^((k+1)/k)) * 3600

    Args:
        area_ft2: Flow area
        P1_psia: Upstream (high-pressure side) pressure
        P2_psia: Downstream (relieving) pressure
        k: Specific heat ratio Cp/Cv
        MW: Molecular weight
        T_R: Temperature in Rankine

    Returns:
        Mass flow in lb/hr
    """
    if P1_psia <= P2_psia:
        return 0.0

    base = DISCHARGE_COEFFICIENT * area_ft2 * P1_psia * PSF_PER_PSI
    if is_choked(P1_psia, P2_psia, k):
        density_term = math.sqrt(k * G_C * MW / (R_GAS * T_R))
        ratio_term = math.sqrt((2 / (k + 1)) ** ((k + 1) / (k - 1)))
    else:
        r = P2_psia / P1_psia
        density_term = math.sqrt(2 * G_C * k * MW / ((k - 1) * R_GAS * T_R))
        ratio_term = math.sqrt(r ** (2 / k) - r ** ((k + 1) / k))
    return base * density_term * ratio_term * SECONDS_PER_HOUR


def _validate(inputs: TubeRuptureInputs, result: TubeRuptureResult) -> None:
    pressures = (("High-pressure side", inputs.high_pressure_side_psig),
                 ("Low-pressure side design", inputs.low_pressure_design_psig),
                 ("Relieving", inputs.relieving_pressure_psig))
    for label, pressure in pressures:
        if psig_to_psia(pressure) <= 0:
            result.errors.append(f"{label} pressure must be above full vacuum (-14.7 psig)")

    if not inputs.tube_inner_diameter_in or inputs.tube_inner_diameter_in <= 0:
        result.errors.append("Tube inner diameter must be greater than 0")
    if inputs.number_of_tubes is None or inputs.number_of_tubes < 1:
        result.errors.append("Number of failed tubes must be at least 1")

    if inputs.fluid_state is FluidState.GAS:
        if inputs.specific_heat_ratio is None or inputs.specific_heat_ratio <= 1:
            result.errors.append("Specific heat ratio k must be greater than 1")
        if not inputs.molecular_weight or inputs.molecular_weight <= 0:
            result.errors.append("Molecular weight must be greater than 0")
        if fahrenheit_to_rankine(inputs.temperature_f) <= 0:
            result.errors.append("Absolute temperature must be greater than 0")
    elif inputs.fluid_state in (FluidState.LIQUID, FluidState.FLASHING_LIQUID):
        if not inputs.fluid_density or inputs.fluid_density <= 0:
            result.errors.append("Fluid density must be greater than 0")
    else:
        raise ValueError(f"Unknown fluid state: {inputs.fluid_state}")


def calculate_tube_rupture_flow(inputs: TubeRuptureInputs) -> TubeRuptureResult:
    """
    Calculate relieving flow for a heat exchanger tube rupture

    The flow is computed even when the high-pressure side does not exceed
    the low-pressure side design pressure; the result is then flagged.
    """
    result = TubeRuptureResult(fluid_state=inputs.fluid_state, exchanger_type=inputs.exchanger_type)
    result.relief_required = inputs.high_pressure_side_psig > inputs.low_pressure_design_psig
    result.pressure_differential = inputs.high_pressure_side_psig - inputs.relieving_pressure_psig

    _validate(inputs, result)
    if result.errors:
        result.reason = "Missing or invalid tube rupture inputs"
        return result

    if not result.relief_required:
        result.warnings.append(
            "Relief may not be required - high-pressure side does not exceed "
            "low-pressure side design pressure"
        )
    if inputs.high_pressure_side_psig - inputs.low_pressure_design_psig > DYNAMIC_ANALYSIS_DIFFERENTIAL_PSI:
        result.warnings.append(
            f"High pressure differential (>{DYNAMIC_ANALYSIS_DIFFERENTIAL_PSI} psi) - API-521 §4.4.14.2.2 "
            "recommends dynamic analysis in addition to the steady-state approach"
        )

    area = tube_flow_area_ft2(inputs.tube_inner_diameter_in)
    result.tube_flow_area = area

    if result.pressure_differential <= 0:
        result.warnings.append("No forward pressure differential across the ruptured tube")
        result.calculated_relieving_flow = 0.0
        result.mass_flow_rate = 0.0
        result.asme_viii_design_flow = 0.0
        return result

    if inputs.fluid_state is FluidState.GAS:
        P1 = psig_to_psia(inputs.high_pressure_side_psig)
        P2 = psig_to_psia(inputs.relieving_pressure_psig)
        k = inputs.specific_heat_ratio
        result.flow_regime = "choked" if is_choked(P1, P2, k) else "non-choked"
        per_tube = gas_orifice_mass_flow(area, P1, P2, k, inputs.molecular_weight,
                                         fahrenheit_to_rankine(inputs.temperature_f))
    else:
        # flashing liquid treated as liquid; conservative without a two-phase model
        result.flow_regime = "liquid"
        per_tube = liquid_orifice_mass_flow(area, result.pressure_differential, inputs.fluid_density)

    total = per_tube * inputs.number_of_tubes

    result.per_tube_flow = per_tube
    result.total_flow = total
    result.calculated_relieving_flow = total
    result.mass_flow_rate = total
    result.asme_viii_design_flow = asme_viii_design_flow(total)

    logger.debug("Tube rupture: %s, ΔP=%.1f psi, W=%.0f lb/hr",
                 inputs.fluid_state.value, result.pressure_differential, total)
    return result
