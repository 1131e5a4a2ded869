"""
Kinetics simulator: fixed-setpoint, fixed-step integration of the compound catalog.

Each call works on its own concentration table copied from the catalog,
so runs never share state.
"""

import logging
import math
from typing import Dict, Mapping, Optional

from config import get_settings
from src.chemistry_layer.compounds import (
    COMPOUND_CATALOG,
    MAILLARD_COMPOUND,
    ChemicalCompound,
    baseline_concentrations,
)

logger = logging.getLogger(__name__)

# Cap on the per-step temperature acceleration multiplier
MAX_ACCELERATION = 2.0
# Degradation starts this many °C above a compound's threshold
DEGRADATION_MARGIN = 50.0


class KineticsSimulator:
    """Turns (temperature, time, moisture) into compound concentrations."""

    def __init__(
        self,
        catalog: Optional[Mapping[str, ChemicalCompound]] = None,
        step_seconds: Optional[int] = None,
    ):
        self.catalog = catalog if catalog is not None else COMPOUND_CATALOG
        self.step_seconds = step_seconds or get_settings().chemistry.step_seconds

    def step_count(self, total_time_seconds: float) -> int:
        if total_time_seconds <= 0:
            return 0
        return int(math.floor(total_time_seconds / self.step_seconds))

    def simulate(
        self,
        temperature: float,
        total_time_seconds: float,
        moisture_percent: float = 12.0,
        archetype: Optional[str] = None,
    ) -> Dict[str, float]:
        """Run the reactions and return concentrations (mg/kg) by compound key.

        The archetype is accepted for call-site symmetry with synthesis; bean
        species only modifies the sensory mapping, not the kinetics.
        """
        concentrations = baseline_concentrations(self.catalog)

        steps = self.step_count(total_time_seconds)
        logger.debug(
            "simulate: %.1f°C for %ss (%d steps, moisture %.1f%%, archetype=%s)",
            temperature, total_time_seconds, steps, moisture_percent, archetype,
        )

        for _ in range(steps):
            for key, compound in self.catalog.items():
                concentrations[key] = self._advance(
                    key, compound, concentrations[key], temperature, moisture_percent
                )

        return concentrations

    def _advance(
        self,
        key: str,
        compound: ChemicalCompound,
        concentration: float,
        temperature: float,
        moisture_percent: float,
    ) -> float:
        """One step for one compound."""
        threshold = compound.temperature_threshold

        if temperature >= threshold:
            moisture_factor = (1 - moisture_percent / 100) if key == MAILLARD_COMPOUND else 1.0
            formation = compound.formation_rate * self.step_seconds * moisture_factor
            concentration += formation
            # Compounds every step on the running total
            concentration *= min(MAX_ACCELERATION, temperature / threshold)
            concentration = max(0.0, concentration)

        if temperature > threshold + DEGRADATION_MARGIN:
            degradation = compound.degradation_rate * self.step_seconds
            concentration = max(0.0, concentration - degradation)

        return concentration


def simulate_reactions(
    temperature: float,
    total_time_seconds: float,
    moisture_percent: float = 12.0,
    archetype: Optional[str] = None,
) -> Dict[str, float]:
    """Module-level shortcut over a default KineticsSimulator."""
    return KineticsSimulator().simulate(
        temperature, total_time_seconds, moisture_percent, archetype
    )
