"""
Hydraulic (Thermal) Expansion Relief per API 521 §4.4.12

Blocked-in liquid heated by an exchanger, solar radiation or heat tracing.
API 521 Equation (2), USC units:

    q = (αv * φ) / (d * c * 500)

where q is gpm, αv the cubic expansion coefficient (1/°F), φ the heat input
(Btu/hr), d the relative density (water = 1) and c the specific heat (Btu/lb·°F).

Author: Franc Engineering
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from relief_base import ReliefResult, asme_viii_design_flow
from unit_conversions import WATER_LB_PER_GAL

logger = logging.getLogger(__name__)


EQUATION_2_CONSTANT = 500
MINUTES_PER_HOUR = 60


class HydraulicScenarioType(Enum):
    COLD_FLUID_SHUTIN = "cold-fluid-shutin"
    EXCHANGER_BLOCKED_IN = "exchanger-blocked-in"
    SOLAR_HEATING = "solar-heating"
    HEAT_TRACING = "heat-tracing"
    OTHER = "other"


@dataclass(frozen=True)
class HydraulicExpansionInputs:
    heat_input_rate: float = 0.0  # Btu/hr
    cubic_expansion_coefficient: float = 0.0005  # 1/°F, typical hydrocarbon
    specific_heat_capacity: float = 0.5  # Btu/lb·°F
    relative_density: float = 0.7
    trapped_volume: Optional[float] = None  # gallons
    scenario_type: HydraulicScenarioType = HydraulicScenarioType.COLD_FLUID_SHUTIN
    working_fluid: Optional[str] = None


@dataclass
class HydraulicExpansionResult(ReliefResult):
    scenario_type: Optional[HydraulicScenarioType] = None
    working_fluid: Optional[str] = None
    volumetric_flow_rate: float = 0.0  # gpm
    relief_time_estimate: Optional[float] = None  # minutes


def thermal_expansion_flow_gpm(cubic_expansion_coefficient: float,
                               heat_input_btu_hr: float,
                               relative_density: float,
                               specific_heat: float) -> float:
    """q (gpm) = αv * φ / (d * c * 500)"""
    return (cubic_expansion_coefficient * heat_input_btu_hr
            / (relative_density * specific_heat * EQUATION_2_CONSTANT))


def gpm_to_lb_hr(flow_gpm: float, relative_density: float) -> float:
    """lb/hr = gpm * (8.34 * d) * 60"""
    return flow_gpm * WATER_LB_PER_GAL * relative_density * MINUTES_PER_HOUR


def relief_time_minutes(trapped_volume_gal: Optional[float], flow_gpm: float) -> Optional[float]:
    """Time to relieve the trapped volume; reference only"""
    if not trapped_volume_gal or trapped_volume_gal <= 0 or flow_gpm <= 0:
        return None
    return trapped_volume_gal / flow_gpm


def calculate_hydraulic_expansion_flow(inputs: HydraulicExpansionInputs) -> HydraulicExpansionResult:
    """
    Calculate hydraulic expansion relieving flow

    Incomplete inputs (any of φ, αv, c, d not positive) give zero flow
    without errors, since this case is usually filled in step by step.
    """
    result = HydraulicExpansionResult(scenario_type=inputs.scenario_type,
                                      working_fluid=inputs.working_fluid)

    values = (inputs.heat_input_rate, inputs.cubic_expansion_coefficient,
              inputs.specific_heat_capacity, inputs.relative_density)
    if any(v is None or v <= 0 for v in values):
        result.reason = "Incomplete inputs"
        result.calculated_relieving_flow = 0.0
        result.mass_flow_rate = 0.0
        result.asme_viii_design_flow = 0.0
        return result

    q = thermal_expansion_flow_gpm(inputs.cubic_expansion_coefficient,
                                   inputs.heat_input_rate,
                                   inputs.relative_density,
                                   inputs.specific_heat_capacity)
    W = gpm_to_lb_hr(q, inputs.relative_density)

    result.volumetric_flow_rate = q
    result.calculated_relieving_flow = W
    result.mass_flow_rate = W
    result.asme_viii_design_flow = asme_viii_design_flow(W)
    result.relief_time_estimate = relief_time_minutes(inputs.trapped_volume, q)

    logger.debug("Hydraulic expansion: q=%.3f gpm, W=%.1f lb/hr", q, W)
    return result
