"""
Quality scorer: SCA-style cupping score, roasting phase lookup and
the descriptive labels shown next to a finished roast.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from config import get_settings
from src.chemistry_layer.compounds import COMPOUND_CATALOG, ROASTING_PHASES, RoastingPhase
from src.chemistry_layer.flavor import ACTIVE_THRESHOLD, FlavorProfile

# (upper bound exclusive, label); scanned in order
ROAST_LEVELS = [
    (190, "Light"),
    (210, "Medium-Light"),
    (220, "Medium"),
    (230, "Medium-Dark"),
]

# (minimum score, grade)
QUALITY_GRADES = [
    (90, "Outstanding"),
    (85, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (60, "Fair"),
]


def calculate_sca_score(profile: FlavorProfile, defects: Optional[Sequence[str]] = None) -> int:
    """Seven weighted cupping attributes minus a per-defect penalty, 0~100."""
    score = 0.0

    # Fragrance/Aroma (15)
    score += (profile.aroma / 10) * 15
    # Flavor (15)
    flavor_score = (profile.sweetness + profile.acidity + profile.body) / 3
    score += (flavor_score / 10) * 15
    # Aftertaste (15)
    score += (profile.aftertaste / 10) * 15
    # Acidity (15)
    score += (profile.acidity / 10) * 15
    # Body (15)
    score += (profile.body / 10) * 15
    # Balance (15)
    score += (profile.balance / 10) * 15
    # Overall (10)
    score += (profile.complexity / 10) * 10

    penalty = len(defects or []) * get_settings().chemistry.defect_penalty
    score = max(0.0, score - penalty)

    # Halves round up
    return min(100, int(math.floor(score + 0.5)))


def classify_phase(temperature: float) -> Optional[RoastingPhase]:
    """First phase whose temperature band contains the temperature.

    Duration ranges are not consulted.
    """
    for phase in ROASTING_PHASES:
        low, high = phase.temperature_range
        if low <= temperature <= high:
            return phase
    return None


def roast_level(temperature: float) -> str:
    for upper, label in ROAST_LEVELS:
        if temperature < upper:
            return label
    return "Dark"


def quality_grade(score: float) -> str:
    for minimum, grade in QUALITY_GRADES:
        if score >= minimum:
            return grade
    return "Poor"


@dataclass
class CompoundReading:
    """Display row for one compound after a roast."""
    key: str
    name: str
    concentration: float
    active: bool


def active_compounds(concentrations: Mapping[str, float]) -> List[CompoundReading]:
    readings = []
    for key, concentration in concentrations.items():
        compound = COMPOUND_CATALOG.get(key)
        readings.append(
            CompoundReading(
                key=key,
                name=compound.name if compound else key,
                concentration=concentration,
                active=concentration > ACTIVE_THRESHOLD,
            )
        )
    return readings


def _label(value: float, high: float, high_label: str, low: float, low_label: str, mid_label: str) -> str:
    if value > high:
        return high_label
    if value < low:
        return low_label
    return mid_label


def educational_analysis(
    profile: FlavorProfile,
    temperature: float,
    time_seconds: float,
    score: Optional[int] = None,
) -> str:
    """Plain-text roast report."""
    phase = classify_phase(temperature)
    if score is None:
        score = calculate_sca_score(profile)

    lines = [
        "Coffee Analysis:",
        f"SCA Score: {score}/100",
        f"Current Phase: {phase.name if phase else 'Unknown'}",
        f"Roast Time: {round(time_seconds)}s",
        "",
        "Flavor Profile:",
        f"• Acidity: {profile.acidity:.1f}/10 ({_label(profile.acidity, 7, 'Bright', 4, 'Flat', 'Balanced')})",
        f"• Sweetness: {profile.sweetness:.1f}/10 ({_label(profile.sweetness, 7, 'Sweet', 4, 'Lacking', 'Moderate')})",
        f"• Body: {profile.body:.1f}/10 ({_label(profile.body, 7, 'Full', 4, 'Light', 'Medium')})",
        f"• Bitterness: {profile.bitterness:.1f}/10 ({_label(profile.bitterness, 7, 'Strong', 3, 'Mild', 'Present')})",
        f"• Balance: {profile.balance:.1f}/10",
        f"• Complexity: {profile.complexity:.1f}/10",
        "",
    ]

    if time_seconds < 300:
        lines.append("⚠️ Short roast time - may result in underdeveloped flavors")
    elif time_seconds > 900:
        lines.append("⚠️ Long roast time - risk of over-extraction and dullness")

    if phase:
        lines.append(f"Active Reactions: {', '.join(phase.dominant_reactions)}")
        lines.append(f"Key Compounds: {', '.join(phase.key_compounds_formed)}")

    return "\n".join(lines)


def phase_table() -> List[Dict[str, object]]:
    """Phase catalog as plain rows (for the API and analytics)."""
    return [
        {
            "name": phase.name,
            "temperature_range": list(phase.temperature_range),
            "duration_range": list(phase.duration_range),
            "dominant_reactions": list(phase.dominant_reactions),
            "key_compounds_formed": list(phase.key_compounds_formed),
        }
        for phase in ROASTING_PHASES
    ]
