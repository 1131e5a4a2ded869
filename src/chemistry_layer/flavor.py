"""
Flavor synthesizer: compound concentrations -> 8-dimensional sensory profile.
"""

import logging
import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional

import numpy as np

from config import get_settings
from src.chemistry_layer.compounds import COMPOUND_CATALOG, ChemicalCompound

logger = logging.getLogger(__name__)

NEUTRAL_LEVEL = 5.0
MIN_LEVEL = 0.0
MAX_LEVEL = 10.0

# Aftertaste contribution is normalized by this duration (seconds)
AFTERTASTE_NORMALIZER = 30.0

# Concentration above which a compound counts as "active" for complexity
ACTIVE_THRESHOLD = 10.0

IDEAL_BALANCE = {"acidity": 6.5, "sweetness": 6.0, "body": 6.5, "bitterness": 5.5}

ARCHETYPE_MODIFIERS: Dict[str, Dict[str, float]] = {
    "arabica": {"acidity": 1.2, "sweetness": 1.1, "bitterness": 0.9},
    "robusta": {"bitterness": 1.4, "body": 1.2, "acidity": 0.8},
    "liberica": {"body": 1.3, "aroma": 1.2, "sweetness": 0.9},
    "excelsa": {"acidity": 1.1, "aroma": 1.3, "aftertaste": 1.2},
}

RAW_DIMENSIONS = ("acidity", "sweetness", "body", "bitterness", "aroma", "aftertaste")


def clamp(value: float, low: float = MIN_LEVEL, high: float = MAX_LEVEL) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class FlavorProfile:
    """Sensory summary of one roast, every dimension on a 0~10 scale."""
    acidity: float
    sweetness: float
    body: float
    bitterness: float
    aroma: float
    aftertaste: float
    balance: float = 0.0
    complexity: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlavorProfile":
        return cls(**{name: float(data[name]) for name in cls.__dataclass_fields__})

    def normalized(self) -> Dict[str, float]:
        """Four core tastes on a 0~1 scale."""
        return {
            "acidity": self.acidity / 10,
            "sweetness": self.sweetness / 10,
            "body": self.body / 10,
            "bitterness": self.bitterness / 10,
        }


class FlavorSynthesizer:
    """Maps concentrations to a FlavorProfile and applies bean archetype modifiers."""

    def __init__(
        self,
        catalog: Optional[Mapping[str, ChemicalCompound]] = None,
        intensity_scale: Optional[float] = None,
    ):
        self.catalog = catalog if catalog is not None else COMPOUND_CATALOG
        self.intensity_scale = intensity_scale or get_settings().chemistry.intensity_scale

    def synthesize(self, concentrations: Mapping[str, float], archetype: str = "arabica") -> FlavorProfile:
        raw = self._raw_levels(concentrations)
        raw = self._apply_archetype(raw, archetype)
        profile = FlavorProfile(**raw)
        return replace(
            profile,
            balance=calculate_balance(profile),
            complexity=calculate_complexity(concentrations),
        )

    def _raw_levels(self, concentrations: Mapping[str, float]) -> Dict[str, float]:
        levels = {dim: NEUTRAL_LEVEL for dim in RAW_DIMENSIONS}

        for key, compound in self.catalog.items():
            concentration = concentrations.get(key, compound.concentration)
            intensity = min(1.0, concentration / self.intensity_scale)
            impact = compound.flavor_impact

            levels["acidity"] += impact.acidity * intensity * 2
            levels["sweetness"] += impact.sweetness * intensity * 2
            levels["body"] += impact.body * intensity * 2
            levels["bitterness"] += impact.bitterness * intensity * 2
            levels["aroma"] += impact.aroma_intensity * intensity * 2
            levels["aftertaste"] += (impact.aftertaste_duration / AFTERTASTE_NORMALIZER) * intensity

        return {dim: clamp(value) for dim, value in levels.items()}

    def _apply_archetype(self, levels: Dict[str, float], archetype: Optional[str]) -> Dict[str, float]:
        modifiers = ARCHETYPE_MODIFIERS.get((archetype or "").lower())
        if modifiers is None:
            logger.debug("Unknown archetype %r, no modifiers applied", archetype)
            return levels

        modified = dict(levels)
        for dim, factor in modifiers.items():
            modified[dim] = clamp(modified[dim] * factor)
        return modified


def calculate_balance(profile: FlavorProfile) -> float:
    """10 minus the mean absolute deviation from the ideal cup."""
    deviations = np.abs(np.array([
        profile.acidity - IDEAL_BALANCE["acidity"],
        profile.sweetness - IDEAL_BALANCE["sweetness"],
        profile.body - IDEAL_BALANCE["body"],
        profile.bitterness - IDEAL_BALANCE["bitterness"],
    ]))
    return clamp(10 - float(deviations.mean()))


def calculate_complexity(concentrations: Mapping[str, float]) -> float:
    """Compound diversity plus spread of the active concentrations."""
    if not concentrations:
        return 0.0

    active = np.array([c for c in concentrations.values() if c > ACTIVE_THRESHOLD], dtype=float)
    diversity = len(active) / len(concentrations)

    if len(active) == 0:
        spread = 0.0
    else:
        with np.errstate(over="ignore", invalid="ignore"):
            variance = float(np.var(active))
        # Runaway roasts can overflow; saturate instead of propagating nan
        spread = min(5.0, variance / 1000) if math.isfinite(variance) else 5.0

    return clamp(diversity * 5 + spread)


def synthesize(concentrations: Mapping[str, float], archetype: str = "arabica") -> FlavorProfile:
    return FlavorSynthesizer().synthesize(concentrations, archetype)
