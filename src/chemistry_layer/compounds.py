"""
Compound catalog: immutable kinetic templates for roast chemistry.
Also holds the static roasting phase bands and preset roast profiles.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class FlavorImpact:
    """Signed sensory weights of one compound."""
    acidity: float  # -1 ~ 1
    sweetness: float
    body: float
    bitterness: float
    aroma_intensity: float  # 0 ~ 1
    aftertaste_duration: float  # seconds


@dataclass(frozen=True)
class ChemicalCompound:
    """Read-only catalog entry. Simulation runs copy the baseline concentration."""
    key: str
    name: str
    concentration: float  # mg/kg baseline in green beans
    temperature_threshold: float  # °C, no formation below
    formation_rate: float  # per 10 simulated seconds
    degradation_rate: float
    flavor_impact: FlavorImpact
    health_effects: Tuple[str, ...] = field(default_factory=tuple)


# Only this compound's formation is slowed by bean moisture
MAILLARD_COMPOUND = "maillard_products"

_COMPOUNDS: Dict[str, ChemicalCompound] = {
    "chlorogenic_acid": ChemicalCompound(
        key="chlorogenic_acid",
        name="Chlorogenic Acid",
        concentration=0.0,
        temperature_threshold=140,
        formation_rate=0.5,
        degradation_rate=0.8,
        flavor_impact=FlavorImpact(0.8, -0.2, 0.3, 0.4, 0.2, 15),
        health_effects=("antioxidant", "metabolism_boost"),
    ),
    "quinides": ChemicalCompound(
        key="quinides",
        name="Quinides",
        concentration=0.0,
        temperature_threshold=180,
        formation_rate=1.2,
        degradation_rate=0.3,
        flavor_impact=FlavorImpact(-0.4, -0.1, 0.6, 0.7, 0.4, 25),
    ),
    "maillard_products": ChemicalCompound(
        key="maillard_products",
        name="Maillard Reaction Products",
        concentration=0.0,
        temperature_threshold=150,
        formation_rate=0.8,
        degradation_rate=0.2,
        flavor_impact=FlavorImpact(-0.2, 0.6, 0.8, 0.1, 0.9, 20),
    ),
    "caramelization_products": ChemicalCompound(
        key="caramelization_products",
        name="Caramelization Products",
        concentration=0.0,
        temperature_threshold=170,
        formation_rate=0.6,
        degradation_rate=0.4,
        flavor_impact=FlavorImpact(-0.3, 0.9, 0.4, -0.2, 0.7, 18),
    ),
    "pyrazines": ChemicalCompound(
        key="pyrazines",
        name="Pyrazines",
        concentration=0.0,
        temperature_threshold=200,
        formation_rate=1.0,
        degradation_rate=0.5,
        flavor_impact=FlavorImpact(-0.1, 0.2, 0.3, 0.2, 0.8, 12),
    ),
    "furans": ChemicalCompound(
        key="furans",
        name="Furans",
        concentration=0.0,
        temperature_threshold=160,
        formation_rate=0.7,
        degradation_rate=0.6,
        flavor_impact=FlavorImpact(0.1, 0.4, 0.2, 0.1, 0.6, 10),
    ),
    "caffeine": ChemicalCompound(
        key="caffeine",
        name="Caffeine",
        concentration=12000.0,
        temperature_threshold=240,
        formation_rate=0.0,
        degradation_rate=0.1,
        flavor_impact=FlavorImpact(0.1, -0.1, 0.2, 0.8, 0.1, 30),
        health_effects=("stimulant", "alertness"),
    ),
}

COMPOUND_CATALOG: Mapping[str, ChemicalCompound] = MappingProxyType(_COMPOUNDS)


def baseline_concentrations(
    catalog: Mapping[str, ChemicalCompound] = COMPOUND_CATALOG,
) -> Dict[str, float]:
    """Fresh working table of catalog baselines (one per simulation run)."""
    return {key: compound.concentration for key, compound in catalog.items()}


@dataclass(frozen=True)
class RoastingPhase:
    """Static phase band. duration_range is informational only."""
    name: str
    temperature_range: Tuple[float, float]  # °C
    duration_range: Tuple[float, float]  # seconds
    dominant_reactions: Tuple[str, ...]
    key_compounds_formed: Tuple[str, ...]


# Ordered: classification returns the first band containing the temperature
ROASTING_PHASES: Tuple[RoastingPhase, ...] = (
    RoastingPhase(
        name="Drying Phase",
        temperature_range=(80, 160),
        duration_range=(240, 480),
        dominant_reactions=("moisture_evaporation", "protein_denaturation"),
        key_compounds_formed=("aldehydes", "organic_acids"),
    ),
    RoastingPhase(
        name="Maillard Phase",
        temperature_range=(140, 200),
        duration_range=(180, 360),
        dominant_reactions=("maillard_reaction", "strecker_degradation"),
        key_compounds_formed=("maillard_products", "pyrazines", "furans"),
    ),
    RoastingPhase(
        name="Development Phase",
        temperature_range=(180, 230),
        duration_range=(60, 180),
        dominant_reactions=("caramelization", "pyrolysis"),
        key_compounds_formed=("caramelization_products", "quinides"),
    ),
)


def get_phase(name: str) -> Optional[RoastingPhase]:
    for phase in ROASTING_PHASES:
        if phase.name == name:
            return phase
    return None


# Preset roast profiles: (temperature °C, time s)
ROAST_PRESETS: Dict[str, Tuple[float, float]] = {
    "light": (180, 600),
    "medium": (205, 720),
    "dark": (230, 900),
}
