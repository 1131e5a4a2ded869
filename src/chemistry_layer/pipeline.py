"""
Roast pipeline: simulate -> synthesize -> score, as one pure call.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config import get_settings
from src.chemistry_layer.compounds import ROAST_PRESETS
from src.chemistry_layer.flavor import FlavorProfile, FlavorSynthesizer
from src.chemistry_layer.kinetics import KineticsSimulator
from src.chemistry_layer.quality import (
    calculate_sca_score,
    classify_phase,
    educational_analysis,
    quality_grade,
    roast_level,
)


@dataclass
class RoastResult:
    """Outcome of one roast."""
    temperature: float
    time_seconds: float
    archetype: str
    moisture: float
    flavor_profile: FlavorProfile
    quality_score: int
    phase_name: Optional[str]
    concentrations: Dict[str, float] = field(default_factory=dict, repr=False)
    defects: List[str] = field(default_factory=list)

    @property
    def grade(self) -> str:
        return quality_grade(self.quality_score)

    @property
    def roast_level(self) -> str:
        return roast_level(self.temperature)

    def analysis(self) -> str:
        return educational_analysis(
            self.flavor_profile, self.temperature, self.time_seconds, self.quality_score
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "time_seconds": self.time_seconds,
            "archetype": self.archetype,
            "moisture": self.moisture,
            "flavor_profile": self.flavor_profile.to_dict(),
            "quality_score": self.quality_score,
            "phase_name": self.phase_name,
            "grade": self.grade,
            "roast_level": self.roast_level,
            "defects": list(self.defects),
        }


class RoastPipeline:
    """Wires the simulator, synthesizer and scorer together."""

    def __init__(
        self,
        simulator: Optional[KineticsSimulator] = None,
        synthesizer: Optional[FlavorSynthesizer] = None,
    ):
        self.simulator = simulator or KineticsSimulator()
        self.synthesizer = synthesizer or FlavorSynthesizer()

    def roast(
        self,
        temperature: float,
        time_seconds: float,
        archetype: Optional[str] = None,
        moisture: Optional[float] = None,
        defects: Optional[Sequence[str]] = None,
    ) -> RoastResult:
        chem = get_settings().chemistry
        archetype = archetype if archetype is not None else chem.default_archetype
        moisture = moisture if moisture is not None else chem.default_moisture
        defects = list(defects or [])

        concentrations = self.simulator.simulate(temperature, time_seconds, moisture, archetype)
        profile = self.synthesizer.synthesize(concentrations, archetype)
        score = calculate_sca_score(profile, defects)
        phase = classify_phase(temperature)

        return RoastResult(
            temperature=temperature,
            time_seconds=time_seconds,
            archetype=archetype,
            moisture=moisture,
            flavor_profile=profile,
            quality_score=score,
            phase_name=phase.name if phase else None,
            concentrations=concentrations,
            defects=defects,
        )

    def roast_preset(self, preset: str, archetype: Optional[str] = None) -> RoastResult:
        temperature, time_seconds = ROAST_PRESETS[preset]
        return self.roast(temperature, time_seconds, archetype)


def roast(
    temperature: float,
    time_seconds: float,
    archetype: Optional[str] = None,
    moisture: Optional[float] = None,
    defects: Optional[Sequence[str]] = None,
) -> RoastResult:
    return RoastPipeline().roast(temperature, time_seconds, archetype, moisture, defects)


def legacy_flavor(temperature: float, time_seconds: float) -> Dict[str, float]:
    """Four core tastes on 0~1 with default bean and moisture."""
    return roast(temperature, time_seconds).flavor_profile.normalized()
