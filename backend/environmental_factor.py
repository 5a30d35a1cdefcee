"""
Environmental Factor F per API 521

API 521 §4.4.13.2.7.4, Equation (17), USC units:
    F = (k / δ_ins) * [1 / (1660 - T_f)] * 260

Table 5 special cases:
- Bare vessel: F = 1.0
- Earth-covered storage: F = 0.03
- Below-grade storage: F = 0.0
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from property_store import get_insulation_material

logger = logging.getLogger(__name__)


FIRE_TEMPERATURE_F = 1660  # API 521 §4.4.13.2.7.2
MIN_INSULATION_SERVICE_TEMP_F = 1200
F_CONVERSION_CONSTANT = 260
BARE_VESSEL_F = 1.0
EARTH_COVERED_F = 0.03
BELOW_GRADE_F = 0.0


class StorageType(Enum):
    ABOVE_GRADE = "above-grade"
    EARTH_COVERED = "earth-covered"
    BELOW_GRADE = "below-grade"


@dataclass(frozen=True)
class EnvironmentalFactorParams:
    storage_type: StorageType = StorageType.ABOVE_GRADE
    insulation_material: Optional[str] = None
    insulation_thickness_in: Optional[float] = None
    process_temperature_f: Optional[float] = None


@dataclass
class EnvironmentalFactorResult:
    value: float
    warnings: List[str] = field(default_factory=list)


def evaluate_environmental_factor(params: EnvironmentalFactorParams) -> EnvironmentalFactorResult:
    """
    Calculate environmental factor F with the reasons for any fallback

    Insulation credit is only taken when material, thickness and process
    temperature are all given. Rejected insulation falls back to bare vessel.
    """
    if params.storage_type is StorageType.BELOW_GRADE:
        return EnvironmentalFactorResult(BELOW_GRADE_F)
    if params.storage_type is StorageType.EARTH_COVERED:
        return EnvironmentalFactorResult(EARTH_COVERED_F)

    if not (params.insulation_material
            and params.insulation_thickness_in
            and params.process_temperature_f is not None):
        return EnvironmentalFactorResult(BARE_VESSEL_F)

    if params.insulation_thickness_in <= 0:
        message = f"Insulation thickness must be greater than 0 (current: {params.insulation_thickness_in:g} in)"
        logger.warning(message)
        return EnvironmentalFactorResult(BARE_VESSEL_F, [message])

    material =get_insulation_material(params.insulation_material)
    if material is None:
        message = f"Unknown insulation material: {params.insulation_material}"
        logger.warning(message)
        return EnvironmentalFactorResult(BARE_VESSEL_F, [message])

    if material.max_temperature_f < MIN_INSULATION_SERVICE_TEMP_F:
        message = (f"Insulation max temp {material.max_temperature_f:g}°F < "
                   f"{MIN_INSULATION_SERVICE_TEMP_F}°F minimum for fire credit")
        logger.warning(message)
        return EnvironmentalFactorResult(BARE_VESSEL_F, [message])

    temperature_difference = FIRE_TEMPERATURE_F - params.process_temperature_f
    if temperature_difference <= 0:
        message = "Process temperature exceeds fire temperature - cannot calculate F factor"
        logger.warning(message)
        return EnvironmentalFactorResult(BARE_VESSEL_F, [message])

    F = ((material.thermal_conductivity / params.insulation_thickness_in)
         * (1 / temperature_difference)
         * F_CONVERSION_CONSTANT)

    if F < 0 or F > 1:
        message = f"Calculated F factor {F:.4f} out of range [0, 1]"
        logger.warning(message)
        return EnvironmentalFactorResult(max(0.0, min(1.0, F)), [message])

    return EnvironmentalFactorResult(F)


def environmental_factor(params: EnvironmentalFactorParams) -> float:
    """Environmental factor F in [0, 1]"""
    return evaluate_environmental_factor(params).value
