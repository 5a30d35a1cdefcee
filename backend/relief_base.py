"""
Shared definitions for relief scenario calculations

- Fire codes (NFPA 30, API 521)
- ASME Section VIII accumulation limits and design flow factor
- Case pressure settings derived from vessel MAWP
- Base result record returned by every scenario calculator
"""

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class FireCode(Enum):
    NFPA_30 = "NFPA 30"
    API_521 = "API 521"


# ASME VIII UG-125 allowable overpressure, % of MAWP
ACCUMULATION_SINGLE_DEVICE = 110
ACCUMULATION_MULTIPLE_DEVICES = 116
ACCUMULATION_FIRE = 121

# Relieving flow / 0.9 reflects the 110% accumulation allowance
ASME_VIII_FLOW_FACTOR = 0.9


def asme_viii_design_flow(relieving_flow: Optional[float],
                          factor: float = ASME_VIII_FLOW_FACTOR) -> Optional[float]:
    """
    Inflate a relieving flow by the ASME VIII accumulation margin

    Returns None for a missing flow and 0 for a non-positive one.
    """
    if relieving_flow is None:
        return None
    if relieving_flow <= 0:
        return 0.0
    return relieving_flow / factor


@dataclass
class CasePressure:
    """Pressure limits for one relief case"""
    mawp_psig: float
    percent_of_mawp: float
    max_allowed_venting_pressure_psig: float
    max_allowable_backpressure_psig: float


def case_pressure(mawp_psig: float,
                  percent_of_mawp: float = ACCUMULATION_SINGLE_DEVICE) -> CasePressure:
    """
    Maximum allowed venting pressure (MAVP) and backpressure for a case

    MAVP = MAWP * percent / 100
    Backpressure = |MAWP - MAVP|
    """
    mavp = mawp_psig * (percent_of_mawp / 100)
    return CasePressure(
        mawp_psig=mawp_psig,
        percent_of_mawp=percent_of_mawp,
        max_allowed_venting_pressure_psig=mavp,
        max_allowable_backpressure_psig=abs(mawp_psig - mavp),
    )


def plain(value: Any) -> Any:
    """Recursively turn dataclasses and enums into JSON-friendly values"""
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [plain(v) for v in value]
    return value


@dataclass
class ReliefResult:
    """
    Fields common to every scenario result

    calculated_relieving_flow is in the scenario's native units (lb/hr for
    most cases, SCFH for gas control valve failure). Every calculation
    returns a new result; nothing is updated in place.
    """
    calculated_relieving_flow: Optional[float] = None
    mass_flow_rate: Optional[float] = None  # lb/hr
    asme_viii_design_flow: Optional[float] = None  # lb/hr
    reason: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_calculated(self) -> bool:
        return (not self.errors
                and self.asme_viii_design_flow is not None
                and self.asme_viii_design_flow > 0)

    def to_dict(self) -> Dict[str, Any]:
        data = plain(self)
        data["is_calculated"] = self.is_calculated
        return data
