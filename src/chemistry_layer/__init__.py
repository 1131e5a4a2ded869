"""
Chemistry Layer - roast kinetics, flavor synthesis and cupping score.

Provides:
- COMPOUND_CATALOG / ROASTING_PHASES: static reference data
- KineticsSimulator: concentrations over time at a fixed setpoint
- FlavorSynthesizer / FlavorProfile: sensory mapping
- RoastPipeline / roast: simulate -> synthesize -> score
"""

from src.chemistry_layer.compounds import (
    COMPOUND_CATALOG,
    ROASTING_PHASES,
    ROAST_PRESETS,
    ChemicalCompound,
    FlavorImpact,
    RoastingPhase,
)
from src.chemistry_layer.kinetics import KineticsSimulator, simulate_reactions
from src.chemistry_layer.flavor import FlavorProfile, FlavorSynthesizer, synthesize
from src.chemistry_layer.quality import calculate_sca_score, classify_phase
from src.chemistry_layer.pipeline import RoastPipeline, RoastResult, legacy_flavor, roast

__all__ = [
    "COMPOUND_CATALOG",
    "ROASTING_PHASES",
    "ROAST_PRESETS",
    "ChemicalCompound",
    "FlavorImpact",
    "RoastingPhase",
    "KineticsSimulator",
    "simulate_reactions",
    "FlavorProfile",
    "FlavorSynthesizer",
    "synthesize",
    "calculate_sca_score",
    "classify_phase",
    "RoastPipeline",
    "RoastResult",
    "legacy_flavor",
    "roast",
]
