"""
Reference Property Tables for Relief Calculations

Static lookup tables for:
- Working fluids (heat of vaporization, molecular weight, liquid density)
- Gases for control valve failure (molecular weight, specific gravity, Z)
- Fire-rated insulation materials (API 521 Table 6)

Author: Franc Engineering
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

MW_AIR = 28.97  # lb/lbmol


@dataclass(frozen=True)
class FluidProperty:
    """Working fluid properties"""
    name: str
    heat_of_vaporization: float  # Btu/lb
    molecular_weight: Optional[float] = None  # lb/lbmol
    liquid_density: Optional[float] = None  # Lx


@dataclass(frozen=True)
class GasProperty:
    """Gas properties used by the ISA gas flow equations"""
    name: str
    display_name: str
    molecular_weight: float  # lb/lbmol
    specific_gravity: float  # relative to air
    default_z: float  # typical compressibility factor


@dataclass(frozen=True)
class InsulationMaterial:
    """Insulation properties for fire credit"""
    name: str
    thermal_conductivity: float  # Btu·in/(h·ft²·°F) at 1000°F
    max_temperature_f: float
    description: str = ""


# Fluid Database - heat of vaporization from industry handbooks
FLUID_PROPERTIES: Dict[str, FluidProperty] = {
    fluid.name.lower(): fluid for fluid in [
        FluidProperty("Acetaldehyde", 252, 44.05, 1673),
        FluidProperty("Acetic acid", 174, 60.05, 1348),
        FluidProperty("Acetone", 224, 58.08, 1707),
        FluidProperty("Air", 0, 28.97, 0),
        FluidProperty("Benzene", 169, 78.11, 1494),
        FluidProperty("Cyclohexane", 154, 84.16, 1413),
        FluidProperty("Dimethylamine", 250, 45.08, 1679),
        FluidProperty("Ethanol", 368, 46.07, 2498),
        FluidProperty("Ethyl acetate", 157, 88.11, 1474),
        FluidProperty("Gasoline", 145, 96, 1421),
        FluidProperty("Heptane", 137, 100.2, 1371),
        FluidProperty("Hexane", 144, 86.17, 1357),
        FluidProperty("Methanol", 474, 32.04, 2663),
        FluidProperty("Methylene Chloride", 122, 84.93, 1124),
        FluidProperty("Nitrogen", 86, 28, 455),
        FluidProperty("Octane", 132, 114.22, 1411),
        FluidProperty("Pentane", 153, 72.15, 1300),
        FluidProperty("Toluene", 156, 92.13, 1497),
        FluidProperty("Vinyl acetate", 165, 86.09, 1532),
        FluidProperty("Water", 970, 18.01, 4111),
    ]
}

# Gas Database
# MW: NIST Chemistry WebBook, SG = MW / 28.97, Z: Perry's 9th Ed.
COMMON_GASES: Dict[str, GasProperty] = {
    "nitrogen": GasProperty("Nitrogen", "Nitrogen (N₂)", 28.0134, 0.967, 1.0),
    "air": GasProperty("Air", "Air", 28.97, 1.0, 1.0),
    "oxygen": GasProperty("Oxygen", "Oxygen (O₂)", 32.0, 1.105, 1.0),
    "co2": GasProperty("Carbon Dioxide", "Carbon Dioxide (CO₂)", 44.01, 1.52, 0.99),
    "methane": GasProperty("Methane", "Methane (CH₄)", 16.04, 0.554, 0.998),
    # placeholder values until the user supplies their own
    "custom": GasProperty("Custom Gas", "Custom Gas", 28.0134, 1.0, 1.0),
}

DEFAULT_GAS_PROPERTY = COMMON_GASES["nitrogen"]

# API 521 Table 6 - fire-rated insulation must withstand 1660°F for up to 2 hours
INSULATION_MATERIALS: Dict[str, InsulationMaterial] = {
    material.name.lower(): material for material in [
        InsulationMaterial("Calcium Silicate Type I", 0.77, 1200,
                           "Common fire-rated insulation for pressure vessels"),
        InsulationMaterial("Calcium Silicate Type II", 0.77, 1700,
                           "High-temperature calcium silicate, suitable for fire protection"),
        InsulationMaterial("Mineral Fiber Blanket/Block", 0.70, 1200,
                           "Rock, slag, or glass fiber insulation"),
        InsulationMaterial("Cellular Glass Type I", 0.63, 900,
                           "Lower temperature limit, not suitable for all fire scenarios"),
        InsulationMaterial("Lightweight Cementitious", 3.6, 2000,
                           "High-temperature fire protection, higher conductivity"),
        InsulationMaterial("Dense Cementitious", 10.5, 2000,
                           "Very high temperature, but high conductivity reduces credit"),
    ]
}


def get_fluid_property(name: str) -> Optional[FluidProperty]:
    """Get fluid properties by case-insensitive name, None if unknown"""
    if not name:
        return None
    fluid = FLUID_PROPERTIES.get(name.strip().lower())
    if fluid is None:
        logger.debug("No fluid properties for %r", name)
    return fluid


def get_fluid_names() -> List[str]:
    """Sorted fluid names for dropdowns"""
    return sorted(fluid.name for fluid in FLUID_PROPERTIES.values())


def get_gas_property(key: str) -> Optional[GasProperty]:
    """Get gas properties by key (e.g. 'nitrogen', 'co2'), None if unknown"""
    if not key:
        return None
    gas = COMMON_GASES.get(key.strip().lower())
    if gas is None:
        logger.debug("No gas properties for %r", key)
    return gas


def custom_gas_property(molecular_weight: float,
                        specific_gravity: Optional[float] = None,
                        default_z: float = 1.0,
                        name: str = "Custom Gas") -> GasProperty:
    """
    Build user-supplied gas properties

    Specific gravity defaults to MW / MW_air when not given.
    """
    if specific_gravity is None:
        specific_gravity = molecular_weight / MW_AIR
    return GasProperty(name, name, molecular_weight, specific_gravity, default_z)


def get_insulation_material(name: str) -> Optional[InsulationMaterial]:
    if not name:
        return None
    return INSULATION_MATERIALS.get(name.strip().lower())


def get_insulation_materials() -> List[InsulationMaterial]:
    return list(INSULATION_MATERIALS.values())
