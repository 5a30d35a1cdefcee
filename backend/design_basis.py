"""
Design Basis Flow

The design basis (governing) flow of a vessel is the highest ASME VIII
design flow among the relief cases that are selected and fully calculated.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from relief_base import ReliefResult

logger = logging.getLogger(__name__)


class CaseId(Enum):
    EXTERNAL_FIRE = "external-fire"
    CONTROL_VALVE_FAILURE = "control-valve-failure"
    LIQUID_OVERFILL = "liquid-overfill"
    BLOCKED_OUTLET = "blocked-outlet"
    COOLING_REFLUX_FAILURE = "cooling-reflux-failure"
    HYDRAULIC_EXPANSION = "hydraulic-expansion"
    HEAT_EXCHANGER_TUBE_RUPTURE = "heat-exchanger-tube-rupture"


CASE_NAMES: Dict[CaseId, str] = {
    CaseId.EXTERNAL_FIRE: "External Fire",
    CaseId.CONTROL_VALVE_FAILURE: "Control Valve Failure (Gas)",
    CaseId.LIQUID_OVERFILL: "Liquid Overfill",
    CaseId.BLOCKED_OUTLET: "Blocked Outlet",
    CaseId.COOLING_REFLUX_FAILURE: "Cooling/Reflux Failure",
    CaseId.HYDRAULIC_EXPANSION: "Hydraulic Expansion",
    CaseId.HEAT_EXCHANGER_TUBE_RUPTURE: "Heat Exchanger Tube Rupture",
}


@dataclass
class CaseFlowResult:
    case_id: str
    case_name: str = ""
    calculated_relieving_flow: Optional[float] = None
    mass_flow_rate: Optional[float] = None
    asme_viii_design_flow: Optional[float] = None
    is_calculated: bool = False
    is_selected: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_relief_result(cls, case_id: CaseId, result: ReliefResult,
                           is_selected: bool = True) -> "CaseFlowResult":
        return cls(
            case_id=case_id.value,
            case_name=CASE_NAMES[case_id],
            calculated_relieving_flow=result.calculated_relieving_flow,
            mass_flow_rate=result.mass_flow_rate,
            asme_viii_design_flow=result.asme_viii_design_flow,
            is_calculated=result.is_calculated,
            is_selected=is_selected,
            errors=list(result.errors),
            warnings=list(result.warnings),
        )


@dataclass(frozen=True)
class DesignBasisFlow:
    flow: float  # lb/hr
    case_id: str
    case_name: str


def get_design_basis_flow(results: Iterable[CaseFlowResult]) -> Optional[DesignBasisFlow]:
    """
    Highest ASME VIII design flow among selected, calculated cases

    Ties keep the first case in input order.

    Returns:
        DesignBasisFlow, or None when no case qualifies
    """
    governing = None
    for r in results:
        if not (r.is_selected and r.is_calculated and r.asme_viii_design_flow is not None):
            continue
        if governing is None or r.asme_viii_design_flow > governing.asme_viii_design_flow:
            governing = r

    if governing is None:
        return None
    return DesignBasisFlow(governing.asme_viii_design_flow, governing.case_id, governing.case_name)


class CaseSet:
    """Latest result and selection state of every relief case of one vessel"""

    def __init__(self, selected: Optional[Iterable[CaseId]] = None):
        chosen = set(selected or ())
        self.results: Dict[CaseId, CaseFlowResult] = {
            case_id: CaseFlowResult(case_id.value, name, is_selected=case_id in chosen)
            for case_id, name in CASE_NAMES.items()
        }

    def is_selected(self, case_id: CaseId) -> bool:
        return self.results[case_id].is_selected

    def toggle_case(self, case_id: CaseId) -> bool:
        """Flip whether a case counts toward the design basis; returns the new state"""
        entry = self.results[case_id]
        entry.is_selected = not entry.is_selected
        return entry.is_selected

    def update_case_result(self, case_id: CaseId, result: ReliefResult) -> CaseFlowResult:
        """Store the latest calculation for a case, keeping its selection"""
        entry = CaseFlowResult.from_relief_result(case_id, result, self.is_selected(case_id))
        self.results[case_id] = entry
        logger.debug("Updated %s: design flow %s", case_id.value, entry.asme_viii_design_flow)
        return entry

    def design_basis_flow(self) -> Optional[DesignBasisFlow]:
        return get_design_basis_flow(self.results.values())

    def selected_case_count(self) -> int:
        return sum(1 for r in self.results.values() if r.is_selected)

    def has_calculated_results(self) -> bool:
        return any(r.is_calculated for r in self.results.values())
