"""
Process Upset Relief Cases per API 521

Implements:
- Blocked outlet (closed outlet) - §4.4.2
- Cooling or reflux failure (loss of condenser) - §4.4.3
- Liquid overfill - §4.4.8

Flows are in lb/hr. ASME VIII design flow = relieving flow / 0.9.

Author: Franc Engineering
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from property_store import get_fluid_property
from relief_base import ReliefResult, asme_viii_design_flow

logger = logging.getLogger(__name__)


DEFAULT_NATURAL_CONVECTION_CREDIT = 25  # %, API 521 allows 20-30%


def outlet_credited_flow(gross_flow: float,
                         outlet_flow_credit: Optional[float],
                         credit_outlet_flow: bool):
    """
    Relief rate = upstream supply rate - normal outlet rate (not below 0)

    Returns:
        Tuple of (net flow, credit applied)
    """
    if not credit_outlet_flow or not outlet_flow_credit or outlet_flow_credit <= 0:
        return gross_flow, 0.0
    return max(0.0, gross_flow - outlet_flow_credit), outlet_flow_credit


def _finish(result: ReliefResult, flow: float) -> ReliefResult:
    result.calculated_relieving_flow = flow
    result.mass_flow_rate = flow
    result.asme_viii_design_flow = asme_viii_design_flow(flow)
    return result


def _no_flow(result: ReliefResult, reason: str) -> ReliefResult:
    result.reason = reason
    return _finish(result, 0.0)


# Blocked Outlet

class SourceType(Enum):
    CENTRIFUGAL_PUMP = "centrifugal-pump"
    POSITIVE_DISPLACEMENT_PUMP = "positive-displacement-pump"
    PRESSURE_SOURCE = "pressure-source"
    OTHER = "other"


@dataclass(frozen=True)
class BlockedOutletInputs:
    vessel_mawp_psig: float
    source_type: SourceType = SourceType.CENTRIFUGAL_PUMP
    max_source_pressure_psig: float = 0.0
    max_source_flow_rate: float = 0.0  # lb/hr
    outlet_flow_credit: Optional[float] = None  # lb/hr
    credit_outlet_flow: bool = False
    working_fluid: Optional[str] = None


@dataclass
class BlockedOutletResult(ReliefResult):
    working_fluid: Optional[str] = None
    source_exceeds_mawp: bool = False
    needs_relief: bool = False
    gross_flow_rate: float = 0.0
    outlet_credit_applied: float = 0.0


def calculate_blocked_outlet_flow(inputs: BlockedOutletInputs) -> BlockedOutletResult:
    """
    Calculate relieving flow for a blocked outlet

    A centrifugal pump whose shut-in pressure stays within MAWP needs no
    relief. Every other source type is assumed able to overpressure the vessel.
    """
    result = BlockedOutletResult(working_fluid=inputs.working_fluid)
    result.source_exceeds_mawp = inputs.max_source_pressure_psig > inputs.vessel_mawp_psig
    result.needs_relief = (result.source_exceeds_mawp
                           or inputs.source_type is not SourceType.CENTRIFUGAL_PUMP)

    if inputs.outlet_flow_credit is not None and inputs.outlet_flow_credit < 0:
        result.reason = "Invalid outlet flow credit"
        result.errors.append("Outlet flow credit cannot be negative")
        return result

    if not result.needs_relief:
        return _no_flow(result, "Source cannot exceed vessel MAWP - relief not required")
    if not inputs.max_source_flow_rate or inputs.max_source_flow_rate <= 0:
        return _no_flow(result, "No maximum source flow rate entered")

    result.gross_flow_rate = inputs.max_source_flow_rate
    net, credit = outlet_credited_flow(inputs.max_source_flow_rate,
                                       inputs.outlet_flow_credit,
                                       inputs.credit_outlet_flow)
    result.outlet_credit_applied = credit
    if credit and net <= 0:
        result.warnings.append("Outlet flow credit equals or exceeds source flow - no relief required")

    return _finish(result, net)


# Cooling / Reflux Failure

class FailureMode(Enum):
    TOTAL_CONDENSING = "total-condensing"
    PARTIAL_CONDENSING = "partial-condensing"
    AIR_COOLER_FAN = "air-cooler-fan"
    PUMP_AROUND = "pump-around"


FAILURE_MODE_DESCRIPTIONS = {
    FailureMode.TOTAL_CONDENSING:
        "API-521 4.4.3.2.2 - Total incoming vapor to condenser (complete cooling loss)",
    FailureMode.PARTIAL_CONDENSING:
        "API-521 4.4.3.2.3 - Difference between incoming and outgoing vapor rates",
    FailureMode.AIR_COOLER_FAN:
        "API-521 4.4.3.2.4 - Relief based on lost cooling capacity with natural convection credit",
    FailureMode.PUMP_AROUND:
        "API-521 4.4.3.2.7 - Vaporization from heat normally removed by pump-around",
}


@dataclass(frozen=True)
class CoolingRefluxInputs:
    """
    Vapor rates must already be at relieving conditions (from a process
    simulation or VLE calculation); they are taken as given.
    """
    failure_mode: FailureMode = FailureMode.TOTAL_CONDENSING
    incoming_vapor_rate: float = 0.0  # lb/hr
    outgoing_vapor_rate: float = 0.0  # lb/hr, partial condensing
    natural_convection_credit: float = DEFAULT_NATURAL_CONVECTION_CREDIT  # %, air cooler
    pump_around_heat_duty: float = 0.0  # Btu/hr
    latent_heat_of_vaporization: Optional[float] = None  # Btu/lb
    working_fluid: Optional[str] = None


@dataclass
class CoolingRefluxResult(ReliefResult):
    failure_mode: Optional[FailureMode] = None
    description: str = ""


def calculate_cooling_reflux_failure_flow(inputs: CoolingRefluxInputs) -> CoolingRefluxResult:
    mode = inputs.failure_mode
    if mode not in FAILURE_MODE_DESCRIPTIONS:
        raise ValueError(f"Unknown failure mode: {mode}")

    result = CoolingRefluxResult(failure_mode=mode, description=FAILURE_MODE_DESCRIPTIONS[mode])

    if mode is FailureMode.PUMP_AROUND:
        latent_heat = inputs.latent_heat_of_vaporization
        if not latent_heat and inputs.working_fluid:
            fluid = get_fluid_property(inputs.working_fluid)
            latent_heat = fluid.heat_of_vaporization if fluid else None
        if not inputs.pump_around_heat_duty or inputs.pump_around_heat_duty <= 0:
            return _no_flow(result, "No pump-around heat duty entered")
        if not latent_heat or latent_heat <= 0:
            return _no_flow(result, "No latent heat of vaporization")
        return _finish(result, inputs.pump_around_heat_duty / latent_heat)

    if not inputs.incoming_vapor_rate or inputs.incoming_vapor_rate <= 0:
        return _no_flow(result, "No incoming vapor rate entered")

    if mode is FailureMode.TOTAL_CONDENSING:
        flow = inputs.incoming_vapor_rate
    elif mode is FailureMode.PARTIAL_CONDENSING:
        if inputs.outgoing_vapor_rate is not None and inputs.outgoing_vapor_rate < 0:
            result.reason = "Invalid outgoing vapor rate"
            result.errors.append("Outgoing vapor rate cannot be negative")
            return result
        flow = max(0.0, inputs.incoming_vapor_rate - (inputs.outgoing_vapor_rate or 0.0))
    else:
        credit = max(0.0, min(100.0, inputs.natural_convection_credit))
        flow = inputs.incoming_vapor_rate * (100 - credit) / 100

    logger.debug("Cooling/reflux failure (%s): W=%.0f lb/hr", mode.value, flow)
    return _finish(result, flow)


# Liquid Overfill

@dataclass(frozen=True)
class LiquidOverfillInputs:
    max_pump_in_rate: float = 0.0  # lb/hr
    outlet_flow_credit: Optional[float] = None  # lb/hr
    credit_outlet_flow: bool = False
    working_fluid: Optional[str] = None


@dataclass
class LiquidOverfillResult(ReliefResult):
    working_fluid: Optional[str] = None
    gross_flow_rate: float = 0.0
    outlet_credit_applied: float = 0.0


def calculate_liquid_overfill_flow(inputs: LiquidOverfillInputs) -> LiquidOverfillResult:
    """Relief rate = maximum liquid pump-in rate - normal outlet flow"""
    result = LiquidOverfillResult(working_fluid=inputs.working_fluid)

    if inputs.outlet_flow_credit is not None and inputs.outlet_flow_credit < 0:
        result.reason = "Invalid outlet flow credit"
        result.errors.append("Outlet flow credit cannot be negative")
        return result
    if not inputs.max_pump_in_rate or inputs.max_pump_in_rate <= 0:
        return _no_flow(result, "No maximum pump-in rate entered")

    result.gross_flow_rate = inputs.max_pump_in_rate
    net, credit = outlet_credited_flow(inputs.max_pump_in_rate,
                                       inputs.outlet_flow_credit,
                                       inputs.credit_outlet_flow)
    result.outlet_credit_applied = credit
    return _finish(result, net)
