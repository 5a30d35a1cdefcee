"""
Vessel Geometry for Fire Case Wetted Area

Implements:
- Vessel head areas (elliptical, hemispherical, flat)
- Fire exposed (wetted) area per API 521 §4.4.13.2.2 / Table 4 and NFPA 30

API 521 rules applied:
- Only wetted surface within 25 ft above the fire source counts
- Spheres: entire bottom hemisphere as a minimum, even with equator above 25 ft
- Heads protected by support skirts with limited ventilation are excluded

Diameters and straight side heights are in inches, areas in ft².

Author: Franc Engineering
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from relief_base import FireCode

logger = logging.getLogger(__name__)


# API 521 §4.4.13.2.2 - wetted area height limit above the fire source
API_521_FIRE_HEIGHT_LIMIT_FT = 25

# NFPA 30 §22.7.3.2.3 - fraction of total sphere area exposed
NFPA_30_SPHERE_FRACTION = 0.55

# Closed form applies to hemispherical heads up to 6 5/8"
HEMISPHERICAL_FORMULA_MAX_DIAMETER = 6.625


class HeadType(Enum):
    ELLIPTICAL = "Elliptical"
    HEMISPHERICAL = "Hemispherical"
    FLAT = "Flat"


class VesselOrientation(Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    SPHERE = "sphere"


@dataclass(frozen=True)
class VesselGeometry:
    diameter_in: float
    straight_side_height_in: float
    head_type: HeadType = HeadType.ELLIPTICAL
    orientation: VesselOrientation = VesselOrientation.VERTICAL


# Standard vessel diameters, inches
STANDARD_DIAMETERS = [
    4.5, 5.583, 6.625, 8.625, 10.75, 12.75, 14, 16, 18, 20, 22, 24, 30, 36, 42, 48,
    54, 60, 66, 72, 78, 84, 90, 96, 102, 108, 114, 120, 126, 132, 138, 144, 156, 168,
]

# Head area lookup, diameter (in) -> area (ft²)
HEMISPHERICAL_HEAD_AREAS: Dict[float, float] = {
    8.625: 0.48, 10.75: 0.75, 12.75: 1.05, 14: 1.32, 16: 1.65, 18: 2.09, 20: 2.59,
    22: 3.13, 24: 3.72, 30: 5.82, 36: 8.38, 42: 11.40, 48: 14.89, 54: 18.84,
    60: 23.04, 66: 28.15, 72: 33.50, 78: 39.32, 84: 45.60, 90: 52.35, 96: 59.56,
    102: 67.23, 108: 75.38, 114: 83.99, 120: 93.06, 126: 102.60, 132: 112.60,
    138: 123.07, 144: 134.00, 156: 171.79, 168: 199.24,
}

ELLIPTICAL_HEAD_AREAS: Dict[float, float] = {
    4.5: 0.1524, 5.583: 0.233, 6.625: 0.33, 8.625: 0.56, 10.75: 0.87, 12.75: 1.22,
    14: 1.46, 16: 1.91, 18: 2.42, 20: 2.99, 22: 3.61, 24: 4.30, 30: 6.72, 36: 9.68,
    42: 13.18, 48: 17.21, 54: 21.79, 60: 26.88, 66: 32.53, 72: 38.75, 78: 45.43,
    84: 52.70, 90: 60.49, 96: 70.25, 102: 77.69, 108: 87.15, 114: 98.18,
    120: 107.53, 126: 118.62, 132: 130.24, 138: 142.31, 144: 155.06, 156: 206.77,
    168: 239.81,
}


def standard_diameters() -> List[float]:
    return list(STANDARD_DIAMETERS)


def head_area_table(head_type: HeadType) -> Dict[float, float]:
    """
    Head area table for a head type

    Flat heads have no table; their areas are computed for the standard diameters.
    """
    if head_type is HeadType.ELLIPTICAL:
        return dict(ELLIPTICAL_HEAD_AREAS)
    elif head_type is HeadType.HEMISPHERICAL:
        return {d: vessel_head_area(d, head_type) for d in STANDARD_DIAMETERS}
    elif head_type is HeadType.FLAT:
        return {d: vessel_head_area(d, head_type) for d in STANDARD_DIAMETERS}
    else:
        raise ValueError(f"Unknown head type: {head_type}")


def _table_area(table: Dict[float, float], diameter_in: float, head_type: HeadType) -> float:
    # exact match only; no interpolation between standard diameters
    area = table.get(diameter_in)
    if area is None:
        logger.debug("No %s head area for diameter %s in", head_type.value, diameter_in)
        return 0.0
    return area


def vessel_head_area(diameter_in: float, head_type: HeadType) -> float:
    """
    Calculate area of a single vessel head

    Flat:          A = (D/2)² * π / 144
    Hemispherical: A = D² / 144 * 1.57 for D ≤ 6 5/8", table above
    Elliptical:    table

    Args:
        diameter_in: Vessel diameter in inches
        head_type: Head type

    Returns:
        Head area in ft², 0 for a non-standard diameter in the tables
    """
    if not diameter_in or diameter_in <= 0:
        return 0.0

    if head_type is HeadType.FLAT:
        return (diameter_in / 2) ** 2 * math.pi / 144
    elif head_type is HeadType.HEMISPHERICAL:
        if diameter_in <= HEMISPHERICAL_FORMULA_MAX_DIAMETER:
            return diameter_in ** 2 / 144 * 1.57
        return _table_area(HEMISPHERICAL_HEAD_AREAS, diameter_in, head_type)
    elif head_type is HeadType.ELLIPTICAL:
        return _table_area(ELLIPTICAL_HEAD_AREAS, diameter_in, head_type)
    else:
        raise ValueError(f"Unknown head type: {head_type}")


def sphere_wetted_area(diameter_ft: float, fire_code: FireCode) -> float:
    """
    Wetted area for a sphere or spheroid

    NFPA 30: 55% of the total sphere area
    API 521: entire bottom hemisphere, kept even when the equator is above
    the 25 ft limit
    """
    radius = diameter_ft / 2
    if fire_code is FireCode.NFPA_30:
        return 4 * math.pi * radius ** 2 * NFPA_30_SPHERE_FRACTION
    elif fire_code is FireCode.API_521:
        return 2 * math.pi * radius ** 2
    else:
        raise ValueError(f"Unknown fire code: {fire_code}")


def fire_exposed_area(vessel: VesselGeometry,
                      fire_code: FireCode,
                      head_protected_by_skirt: bool = False,
                      fire_source_elevation_ft: float = 0.0) -> float:
    """
    Calculate fire exposed (wetted) area

    Args:
        vessel: Vessel dimensions in inches, head type and orientation
        fire_code: NFPA 30 or API 521
        head_protected_by_skirt: Bottom head shielded by a support skirt
        fire_source_elevation_ft: Fire source elevation above grade in feet

    Returns:
        Wetted area in ft²
    """
    if not vessel.diameter_in or vessel.diameter_in <= 0:
        return 0.0

    diameter_ft = vessel.diameter_in / 12

    if vessel.orientation is VesselOrientation.SPHERE:
        return sphere_wetted_area(diameter_ft, fire_code)

    if not vessel.straight_side_height_in or vessel.straight_side_height_in <= 0:
        return 0.0

    radius_ft = diameter_ft / 2
    height_ft = vessel.straight_side_height_in / 12

    if fire_code is FireCode.API_521:
        height_limit: Optional[float] = fire_source_elevation_ft + API_521_FIRE_HEIGHT_LIMIT_FT
        effective_height = min(height_ft, height_limit)
    else:
        height_limit = None
        effective_height = height_ft

    if effective_height <= 0:
        # vessel entirely above the height limit
        return 0.0

    wetted_area = 2 * math.pi * radius_ft * effective_height

    head_area = vessel_head_area(vessel.diameter_in, vessel.head_type)

    if not head_protected_by_skirt:
        wetted_area += head_area

    within_limit = height_limit is None or height_ft <= height_limit

    if vessel.orientation is VesselOrientation.VERTICAL:
        if within_limit:
            wetted_area += head_area
    elif vessel.orientation is VesselOrientation.HORIZONTAL:
        # second end; a skirt only shields one of the two heads
        if within_limit:
            wetted_area += head_area
    else:
        raise ValueError(f"Unknown vessel orientation: {vessel.orientation}")

    return wetted_area
