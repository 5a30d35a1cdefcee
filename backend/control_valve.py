"""
Control Valve Failure Flow (Gas Service)

ISA-S75.01 compressible flow through a failed-open control valve per
API 521 §4.4.8 (failure of automatic controls).

Equations (SCFH, psia, °R):
- Choked (x ≥ x_t):   Q = 1360 * Cv * x_t * P1 / sqrt(G * T * Z)
- Sub-critical:       Q = 1360 * Cv * Y * P1 * sqrt(x / (G * T * Z))
                      Y = max(2/3, 1 - x / (3 * x_t))

Author: Franc Engineering
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from property_store import DEFAULT_GAS_PROPERTY, GasProperty
from relief_base import ReliefResult
from unit_conversions import (
    ManualFlowUnit,
    convert_to_lb_per_hr,
    fahrenheit_to_rankine,
    lb_hr_to_scfh,
    psig_to_psia,
    scfh_to_lb_hr,
)

logger = logging.getLogger(__name__)


ISA_GAS_CONSTANT = 1360  # SCFH form of the ISA gas equation
DEFAULT_TEMPERATURE_F = 80
DEFAULT_XT = 0.7  # typical globe valve
MIN_EXPANSION_FACTOR = 2 / 3
HIGH_CREDIT_FRACTION = 0.7

Z_WARNING_RANGE = (0.5, 1.5)
TEMPERATURE_WARNING_RANGE_F = (-50, 200)


class FlowRegime(Enum):
    MANUAL = "manual"
    CHOKED = "choked"
    NON_CHOKED = "non-choked"


@dataclass(frozen=True)
class GasFlowInputs:
    is_manual_flow_input: bool = False
    manual_flow_rate: Optional[float] = None
    manual_flow_unit: ManualFlowUnit = ManualFlowUnit.LB_HR
    total_cv: Optional[float] = None
    bypass_cv: Optional[float] = None
    consider_bypass: bool = False
    inlet_pressure_psig: Optional[float] = None  # maximum upstream supply pressure
    outlet_pressure_psig: Optional[float] = None  # vessel relieving pressure
    temperature_f: Optional[float] = None
    compressibility_z: Optional[float] = None
    xt: Optional[float] = None
    gas: Optional[GasProperty] = None
    outlet_flow_credit: Optional[float] = None  # SCFH
    credit_outlet_flow: bool = False


@dataclass
class GasFlowResult(ReliefResult):
    """
    calculated_relieving_flow is the gross inlet flow in SCFH,
    net_relieving_flow the flow left after outlet credit
    """
    net_relieving_flow: Optional[float] = None  # SCFH
    flow_regime: Optional[FlowRegime] = None
    effective_cv: Optional[float] = None
    outlet_credit_applied: Optional[float] = None  # SCFH
    gas_name: Optional[str] = None


def expansion_factor(x: float, xt: float) -> float:
    """Y = 1 - x / (3 * x_t), not less than 2/3"""
    return max(MIN_EXPANSION_FACTOR, 1 - x / (3 * xt))


def choked_gas_flow(cv: float, xt: float, P1_psia: float,
                    G: float, T_R: float, Z: float) -> float:
    """Choked flow in SCFH"""
    return ISA_GAS_CONSTANT * cv * xt * P1_psia / math.sqrt(G * T_R * Z)


def subcritical_gas_flow(cv: float, x: float, xt: float, P1_psia: float,
                         G: float, T_R: float, Z: float) -> float:
    """Sub-critical flow in SCFH"""
    Y = expansion_factor(x, xt)
    return ISA_GAS_CONSTANT * cv * Y * P1_psia * math.sqrt(x / (G * T_R * Z))


def gas_flow_scfh(cv: float, P1_psia: float, P2_psia: float,
                  G: float, T_R: float, Z: float, xt: float = DEFAULT_XT):
    """
    Gas flow through a valve

    Args:
        cv: Effective valve flow coefficient
        P1_psia: Upstream pressure
        P2_psia: Downstream pressure
        G: Specific gravity (air = 1)
        T_R: Temperature in Rankine
        Z: Compressibility factor
        xt: Pressure drop ratio factor

    Returns:
        Tuple of (flow SCFH, flow regime); zero flow when P2 ≥ P1
    """
    if P2_psia >= P1_psia:
        return 0.0, None

    x = (P1_psia - P2_psia) / P1_psia
    if x >= xt:
        return choked_gas_flow(cv, xt, P1_psia, G, T_R, Z), FlowRegime.CHOKED
    return subcritical_gas_flow(cv, x, xt, P1_psia, G, T_R, Z), FlowRegime.NON_CHOKED


def _apply_outlet_credit(inputs: GasFlowInputs, gross_scfh: float,
                         result: GasFlowResult) -> float:
    credit = inputs.outlet_flow_credit
    if not inputs.credit_outlet_flow or not credit or credit <= 0:
        result.outlet_credit_applied = 0.0
        return gross_scfh

    result.outlet_credit_applied = credit
    net = max(0.0, gross_scfh - credit)
    if net <= 0:
        result.warnings.append("Outlet flow credit equals or exceeds inlet flow - no relief required")
    elif credit > gross_scfh * HIGH_CREDIT_FRACTION:
        result.warnings.append("Outlet flow credit is >70% of inlet flow - verify normal outlet capacity")
    return net


def _range_warnings(temperature_f: float, Z: float) -> List[str]:
    warnings = []
    if temperature_f < TEMPERATURE_WARNING_RANGE_F[0]:
        warnings.append("Very low temperature - verify compressibility factor Z")
    elif temperature_f > TEMPERATURE_WARNING_RANGE_F[1]:
        warnings.append("High temperature - verify compressibility factor Z")
    if Z < Z_WARNING_RANGE[0] or Z > Z_WARNING_RANGE[1]:
        warnings.append("Compressibility factor Z outside typical range (0.5-1.5)")
    return warnings


def _manual_flow(inputs: GasFlowInputs, gas: GasProperty, result: GasFlowResult) -> GasFlowResult:
    result.flow_regime = FlowRegime.MANUAL

    if not inputs.manual_flow_rate or inputs.manual_flow_rate <= 0:
        result.reason = "No manual flow rate entered"
        result.errors.append(result.reason)
        return result

    mass_in = convert_to_lb_per_hr(inputs.manual_flow_rate, inputs.manual_flow_unit,
                                   gas.molecular_weight)
    gross = lb_hr_to_scfh(mass_in, gas.molecular_weight)
    net = _apply_outlet_credit(inputs, gross, result)
    mass_flow = scfh_to_lb_hr(net, gas.molecular_weight)

    result.calculated_relieving_flow = gross
    result.net_relieving_flow = net
    result.mass_flow_rate = mass_flow
    result.asme_viii_design_flow = mass_flow
    return result


def _pressure_flow(inputs: GasFlowInputs, gas: GasProperty, result: GasFlowResult) -> GasFlowResult:
    cv = inputs.total_cv or 0.0
    if inputs.consider_bypass and inputs.bypass_cv and inputs.bypass_cv > 0:
        cv += inputs.bypass_cv
        result.warnings.append(f"Bypass valve included: Total effective Cv = {cv:.1f}")
    result.effective_cv = cv

    temperature_f = DEFAULT_TEMPERATURE_F if inputs.temperature_f is None else inputs.temperature_f
    Z = gas.default_z if inputs.compressibility_z is None else inputs.compressibility_z
    xt = DEFAULT_XT if inputs.xt is None else inputs.xt
    T_R = fahrenheit_to_rankine(temperature_f)

    if cv <= 0:
        result.errors.append("Total Cv must be greater than 0")
    if inputs.inlet_pressure_psig is None or inputs.inlet_pressure_psig < 0:
        result.errors.append("Inlet pressure must be non-negative")
    if inputs.outlet_pressure_psig is None or inputs.outlet_pressure_psig < 0:
        result.errors.append("Outlet pressure must be non-negative")
    if gas.molecular_weight <= 0 or gas.specific_gravity <= 0:
        result.errors.append("Gas molecular weight and specific gravity must be greater than 0")
    if Z <= 0:
        result.errors.append("Compressibility factor Z must be greater than 0")
    if xt <= 0:
        result.errors.append("Pressure drop ratio factor x_t must be greater than 0")
    if T_R <= 0:
        result.errors.append("Absolute temperature must be greater than 0")
    if inputs.outlet_flow_credit is not None and inputs.outlet_flow_credit < 0:
        result.errors.append("Outlet flow credit cannot be negative")

    if result.errors:
        result.reason = "Missing or invalid pressure calculation inputs"
        logger.debug("Control valve inputs rejected: %s", result.errors)
        return result

    P1 = psig_to_psia(inputs.inlet_pressure_psig)
    P2 = psig_to_psia(inputs.outlet_pressure_psig)

    if P2 >= P1:
        result.reason = "No forward pressure drop"
        result.errors.append("No forward pressure drop (outlet pressure ≥ inlet pressure)")
        result.calculated_relieving_flow = 0.0
        result.net_relieving_flow = 0.0
        result.mass_flow_rate = 0.0
        result.asme_viii_design_flow = 0.0
        result.outlet_credit_applied = 0.0
        return result

    result.warnings.extend(_range_warnings(temperature_f, Z))

    gross, regime = gas_flow_scfh(cv, P1, P2, gas.specific_gravity, T_R, Z, xt)
    net = _apply_outlet_credit(inputs, gross, result)
    mass_flow = scfh_to_lb_hr(net, gas.molecular_weight)

    result.flow_regime = regime
    result.calculated_relieving_flow = gross
    result.net_relieving_flow = net
    result.mass_flow_rate = mass_flow
    # inflow is already at relieving conditions; no accumulation margin
    result.asme_viii_design_flow = mass_flow

    logger.debug("Control valve: Cv=%.1f P1=%.1f P2=%.1f psia, %s, Q=%.0f SCFH",
                 cv, P1, P2, regime.value, gross)
    return result


def calculate_gas_control_valve_flow(inputs: GasFlowInputs) -> GasFlowResult:
    """
    Calculate relieving flow for a failed-open gas control valve

    Manual mode takes a known flow (lb/hr, SCFH, kg/hr or kg/s); otherwise
    the flow is computed from Cv and the upstream/downstream pressures.
    Nitrogen is assumed when no gas is given.
    """
    gas = inputs.gas or DEFAULT_GAS_PROPERTY
    result = GasFlowResult(gas_name=gas.name)

    if inputs.is_manual_flow_input:
        if gas.molecular_weight <= 0:
            result.flow_regime = FlowRegime.MANUAL
            result.reason = "Invalid gas properties"
            result.errors.append("Gas molecular weight must be greater than 0")
            return result
        if inputs.outlet_flow_credit is not None and inputs.outlet_flow_credit < 0:
            result.flow_regime = FlowRegime.MANUAL
            result.reason = "Invalid outlet flow credit"
            result.errors.append("Outlet flow credit cannot be negative")
            return result
        return _manual_flow(inputs, gas, result)

    return _pressure_flow(inputs, gas, result)
