"""
Unit Conversions for Relief Flow Calculations

Every value inside the engine is imperial (psig/psia, °F/°R, lb, ft, gpm, SCFH).
Conversions between flow bases only happen through the named functions below.

Author: Franc Engineering
"""

from enum import Enum


# Constants
SCFH_PER_LBMOL_HR = 379  # scf per lbmol at 60°F and 14.7 psia
LB_TO_KG = 0.453592
SECONDS_PER_HOUR = 3600
ATMOSPHERIC_PSI = 14.7
RANKINE_OFFSET = 459.67
WATER_LB_PER_GAL = 8.34


class ManualFlowUnit(Enum):
    LB_HR = "lb/hr"
    SCFH = "SCFH"
    KG_HR = "kg/hr"
    KG_S = "kg/s"


def lb_hr_to_scfh(mass_flow_lb_hr: float, molecular_weight: float) -> float:
    """SCFH = (lb/hr / MW) * 379"""
    return (mass_flow_lb_hr / molecular_weight) * SCFH_PER_LBMOL_HR


def scfh_to_lb_hr(flow_scfh: float, molecular_weight: float) -> float:
    """lb/hr = (SCFH / 379) * MW"""
    return (flow_scfh / SCFH_PER_LBMOL_HR) * molecular_weight


def kg_to_lb(mass_kg: float) -> float:
    return mass_kg / LB_TO_KG


def lb_to_kg(mass_lb: float) -> float:
    return mass_lb * LB_TO_KG


def psig_to_psia(pressure_psig: float) -> float:
    return pressure_psig + ATMOSPHERIC_PSI


def fahrenheit_to_rankine(temperature_f: float) -> float:
    return temperature_f + RANKINE_OFFSET


def convert_to_lb_per_hr(value: float, unit: ManualFlowUnit, molecular_weight: float) -> float:
    """
    Convert a flow rate entered in any supported unit to lb/hr

    Non-positive values convert to 0.
    """
    if not value or value <= 0:
        return 0.0

    if unit is ManualFlowUnit.LB_HR:
        return value
    elif unit is ManualFlowUnit.SCFH:
        return scfh_to_lb_hr(value, molecular_weight)
    elif unit is ManualFlowUnit.KG_HR:
        return kg_to_lb(value)
    elif unit is ManualFlowUnit.KG_S:
        return kg_to_lb(value * SECONDS_PER_HOUR)
    else:
        raise ValueError(f"Unknown flow unit: {unit}")


def convert_from_lb_per_hr(value_lb_hr: float, unit: ManualFlowUnit, molecular_weight: float) -> float:
    """Convert a flow rate in lb/hr to any supported unit"""
    if not value_lb_hr or value_lb_hr <= 0:
        return 0.0

    if unit is ManualFlowUnit.LB_HR:
        return value_lb_hr
    elif unit is ManualFlowUnit.SCFH:
        return lb_hr_to_scfh(value_lb_hr, molecular_weight)
    elif unit is ManualFlowUnit.KG_HR:
        return lb_to_kg(value_lb_hr)
    elif unit is ManualFlowUnit.KG_S:
        return lb_to_kg(value_lb_hr) / SECONDS_PER_HOUR
    else:
        raise ValueError(f"Unknown flow unit: {unit}")
