"""
Personality traits and their adaptation.

Traits are a small open set of named records drawn from TRAIT_LIBRARY.
They strengthen and weaken in response to discrete service triggers,
at most once per cooldown period, and are removed once they fade below
TRAIT_REMOVAL_THRESHOLD. Situational mood is layered on top without
touching the core traits.
"""

import json
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from config import get_settings
from config.settings import CustomerSettings
from src.simulation_layer.clock import Clock, days_between

logger = logging.getLogger(__name__)

INTENSITY_MIN = 0.1
INTENSITY_MAX = 1.0
TRAIT_REMOVAL_THRESHOLD = 0.2

OPPOSITE_DAMPING = 0.6
SYNERGY_BOOST = 1.2

STRESS_THRESHOLD = 0.6

# name -> (opposites, synergies)
TRAIT_LIBRARY: Dict[str, Tuple[FrozenSet[str], FrozenSet[str]]] = {
    "friendly": (frozenset({"grumpy"}), frozenset({"loyal", "trusting"})),
    "grumpy": (frozenset({"friendly", "patient"}), frozenset({"impatient"})),
    "picky": (frozenset({"easygoing"}), frozenset({"suspicious"})),
    "easygoing": (frozenset({"picky", "impatient"}), frozenset({"patient"})),
    "adventurous": (frozenset({"conservative"}), frozenset({"curious"})),
    "curious": (frozenset({"conservative"}), frozenset({"adventurous"})),
    "conservative": (frozenset({"adventurous", "curious"}), frozenset({"loyal"})),
    "loyal": (frozenset({"fickle"}), frozenset({"trusting"})),
    "fickle": (frozenset({"loyal"}), frozenset()),
    "patient": (frozenset({"impatient", "grumpy"}), frozenset({"easygoing"})),
    "impatient": (frozenset({"patient", "easygoing"}), frozenset({"grumpy"})),
    "trusting": (frozenset({"suspicious"}), frozenset({"loyal"})),
    "suspicious": (frozenset({"trusting"}), frozenset({"picky"})),
}

# Traits a brand-new customer may start with
STARTER_TRAITS = ("friendly", "grumpy", "picky", "adventurous", "loyal", "patient")

# trigger -> (description, [(trait, direction, delta scale)])
TRIGGER_EFFECTS: Dict[str, Tuple[str, List[Tuple[str, int, float]]]] = {
    "consistently_good_service": (
        "Reliable, high-quality service built trust",
        [("loyal", 1, 1.0), ("trusting", 1, 0.7), ("suspicious", -1, 0.5)],
    ),
    "consistently_poor_service": (
        "Repeated disappointments eroded goodwill",
        [("loyal", -1, 1.0), ("suspicious", 1, 0.7), ("grumpy", 1, 0.5)],
    ),
    "ignored_repeatedly": (
        "Being ignored made the customer short-tempered",
        [("impatient", 1, 1.0), ("grumpy", 1, 0.7), ("patient", -1, 0.5)],
    ),
    "perfect_memory_service": (
        "The barista remembered their usual order",
        [("loyal", 1, 1.0), ("friendly", 1, 0.7)],
    ),
    "introduced_to_new_flavors": (
        "Tried a new flavor on recommendation",
        [("adventurous", 1, 1.0), ("curious", 1, 0.7), ("conservative", -1, 0.5)],
    ),
}

TIME_OF_DAY_MOOD: Dict[str, Dict[str, float]] = {
    "morning": {"impatient": 0.1},
    "afternoon": {"easygoing": 0.1},
    "evening": {"patient": 0.1},
    "night": {"grumpy": 0.1},
}

WEATHER_MOOD: Dict[str, Dict[str, float]] = {
    "sunny": {"friendly": 0.15},
    "rainy": {"grumpy": 0.1, "patient": 0.05},
    "snowy": {"easygoing": 0.1},
    "hot": {"impatient": 0.1},
}


def clamp_intensity(value: float) -> float:
    return max(INTENSITY_MIN, min(INTENSITY_MAX, value))


@dataclass
class PersonalityTrait:
    name: str
    intensity: float  # 0.1~1.0
    stability: float  # 0.1~1.0, carried but not used by the default triggers
    opposites: FrozenSet[str] = field(default_factory=frozenset)
    synergies: FrozenSet[str] = field(default_factory=frozenset)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "intensity": self.intensity,
            "stability": self.stability,
            "opposites": sorted(self.opposites),
            "synergies": sorted(self.synergies),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersonalityTrait":
        return cls(
            name=str(data["name"]),
            intensity=clamp_intensity(float(data["intensity"])),
            stability=clamp_intensity(float(data["stability"])),
            opposites=frozenset(str(n) for n in data.get("opposites", [])),
            synergies=frozenset(str(n) for n in data.get("synergies", [])),
        )


@dataclass
class AdaptationRecord:
    timestamp: datetime
    trigger: str
    description: str
    intensity_delta: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "trigger": self.trigger,
            "description": self.description,
            "intensity_delta": self.intensity_delta,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdaptationRecord":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            trigger=str(data["trigger"]),
            description=str(data["description"]),
            intensity_delta=float(data["intensity_delta"]),
        )


@dataclass
class PersonalityContext:
    """Situational inputs for mood."""
    time_of_day: Optional[str] = None  # morning, afternoon, evening, night
    weather: Optional[str] = None  # sunny, rainy, snowy, hot
    stress: float = 0.0  # 0~1


@dataclass
class PersonalityProfile:
    """
    Core traits plus transient mood.
    No core trait ever sits below TRAIT_REMOVAL_THRESHOLD.
    """
    core_traits: Dict[str, PersonalityTrait] = field(default_factory=dict)
    mood_modifiers: Dict[str, float] = field(default_factory=dict)
    adaptation_history: List[AdaptationRecord] = field(default_factory=list)
    last_update: Optional[datetime] = None  # last successful adaptation

    def has_trait(self, name: str) -> bool:
        return name in self.core_traits

    def effective_intensity(self, name: str) -> float:
        core = self.core_traits[name].intensity if name in self.core_traits else 0.0
        return min(1.0, core + self.mood_modifiers.get(name, 0.0))

    def effective_intensities(self) -> Dict[str, float]:
        names = set(self.core_traits) | set(self.mood_modifiers)
        return {name: self.effective_intensity(name) for name in sorted(names)}

    def trait_names(self) -> List[str]:
        return sorted(self.core_traits)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "core_traits": {name: t.to_dict() for name, t in self.core_traits.items()},
            "mood_modifiers": dict(self.mood_modifiers),
            "adaptation_history": [r.to_dict() for r in self.adaptation_history],
            "last_update": self.last_update.isoformat() if self.last_update else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersonalityProfile":
        """Strict parse; raises ValueError/KeyError/TypeError on bad payloads."""
        traits = {}
        for name, raw in data["core_traits"].items():
            trait = PersonalityTrait.from_dict(raw)
            if trait.name != name:
                raise ValueError(f"trait key {name!r} does not match name {trait.name!r}")
            if trait.intensity < TRAIT_REMOVAL_THRESHOLD:
                raise ValueError(f"trait {name!r} below removal threshold")
            traits[name] = trait

        last_update = data.get("last_update")
        return cls(
            core_traits=traits,
            mood_modifiers={str(k): float(v) for k, v in data.get("mood_modifiers", {}).items()},
            adaptation_history=[AdaptationRecord.from_dict(r) for r in data.get("adaptation_history", [])],
            last_update=datetime.fromisoformat(last_update) if last_update else None,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, payload: str) -> "PersonalityProfile":
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("personality payload must be a JSON object")
        return cls.from_dict(data)


def make_trait(name: str, intensity: float, stability: float = 0.5) -> PersonalityTrait:
    """Build a trait with its library relations (unknown names get none)."""
    opposites, synergies = TRAIT_LIBRARY.get(name, (frozenset(), frozenset()))
    return PersonalityTrait(
        name=name,
        intensity=clamp_intensity(intensity),
        stability=clamp_intensity(stability),
        opposites=opposites,
        synergies=synergies,
    )


class PersonalityEngine:
    """Creates personalities and applies trigger, context and conflict rules."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        settings: Optional[CustomerSettings] = None,
    ):
        self.settings = settings or get_settings().customer
        self.rng = rng or random.Random(self.settings.rng_seed)
        self.clock = clock or Clock()

    def create_profile(self) -> PersonalityProfile:
        count = self.rng.randint(1, 3)
        names = self.rng.sample(STARTER_TRAITS, count)
        profile = PersonalityProfile()
        self.assign_traits(
            profile,
            {name: self.rng.uniform(0.3, 1.0) for name in names},
        )
        return profile

    def assign_traits(self, profile: PersonalityProfile, intensities: Mapping[str, float]) -> PersonalityProfile:
        """Bulk trait assignment followed by conflict resolution."""
        for name, intensity in intensities.items():
            if intensity < TRAIT_REMOVAL_THRESHOLD:
                profile.core_traits.pop(name, None)
                continue
            profile.core_traits[name] = make_trait(name, intensity, self.rng.uniform(0.1, 1.0))
        self.resolve_conflicts(profile)
        return profile

    def strengthen_trait(self, profile: PersonalityProfile, name: str, delta: float) -> None:
        delta = abs(delta)
        trait = profile.core_traits.get(name)
        if trait is not None:
            trait.intensity = clamp_intensity(trait.intensity + delta)
            return

        initial = min(1.0, delta * 2)
        if initial < TRAIT_REMOVAL_THRESHOLD:
            logger.debug("Trait %s too faint to emerge (%.3f)", name, initial)
            return
        profile.core_traits[name] = make_trait(name, initial, self.rng.uniform(0.1, 1.0))
        logger.info("Trait emerged: %s (%.2f)", name, initial)

    def weaken_trait(self, profile: PersonalityProfile, name: str, delta: float) -> None:
        trait = profile.core_traits.get(name)
        if trait is None:
            return

        remaining = trait.intensity - abs(delta)
        if remaining < TRAIT_REMOVAL_THRESHOLD:
            del profile.core_traits[name]
            logger.info("Trait faded away: %s", name)
            return
        trait.intensity = clamp_intensity(remaining)

    def can_adapt(self, profile: PersonalityProfile) -> bool:
        if profile.last_update is None:
            return True
        elapsed = days_between(profile.last_update, self.clock.now())
        return elapsed >= self.settings.adaptation_cooldown_days

    def adapt(
        self,
        profile: PersonalityProfile,
        trigger: str,
        behavior_sign: int = 1,
        intensity_delta: float = 0.1,
    ) -> bool:
        """Apply a discrete trigger. Returns True if the profile changed.

        A negative behavior_sign inverts the trigger (strengthen <-> weaken);
        zero is a no-op.
        """
        effects = TRIGGER_EFFECTS.get(trigger)
        if effects is None:
            logger.warning("Unknown adaptation trigger: %s", trigger)
            return False
        if behavior_sign == 0:
            return False
        if not self.can_adapt(profile):
            logger.debug("Adaptation %s skipped: cooldown active", trigger)
            return False

        description, changes = effects
        sign = 1 if behavior_sign > 0 else -1
        delta = abs(intensity_delta)

        for name, direction, scale in changes:
            if direction * sign > 0:
                self.strengthen_trait(profile, name, delta * scale)
            else:
                self.weaken_trait(profile, name, delta * scale)

        now = self.clock.now()
        profile.adaptation_history.append(
            AdaptationRecord(
                timestamp=now,
                trigger=trigger,
                description=description,
                intensity_delta=delta * sign,
            )
        )
        limit = self.settings.history_limit
        if len(profile.adaptation_history) > limit:
            profile.adaptation_history = profile.adaptation_history[-limit:]
        profile.last_update = now

        logger.info("Adaptation applied: %s -> %s", trigger, ", ".join(profile.trait_names()) or "(none)")
        return True

    def resolve_conflicts(self, profile: PersonalityProfile) -> PersonalityProfile:
        """Dampen the weaker of opposing traits, boost synergistic partners."""
        traits = profile.core_traits
        seen_pairs = set()

        for name in list(traits):
            trait = traits[name]
            for other_name in sorted(trait.opposites):
                pair = frozenset((name, other_name))
                if other_name not in traits or pair in seen_pairs:
                    continue
                seen_pairs.add(pair)
                other = traits[other_name]
                weaker = trait if trait.intensity < other.intensity else other
                weaker.intensity = clamp_intensity(weaker.intensity * OPPOSITE_DAMPING)

        for name in list(traits):
            for partner in sorted(traits[name].synergies):
                if partner in traits:
                    traits[partner].intensity = min(1.0, traits[partner].intensity * SYNERGY_BOOST)

        for name in [n for n, t in traits.items() if t.intensity < TRAIT_REMOVAL_THRESHOLD]:
            del traits[name]
            logger.info("Trait suppressed by conflict: %s", name)

        return profile

    def apply_context(self, profile: PersonalityProfile, context: PersonalityContext) -> PersonalityProfile:
        """Replace the mood modifiers from time of day, weather and stress."""
        mood: Dict[str, float] = {}

        def bump(values: Mapping[str, float]) -> None:
            for trait, bonus in values.items():
                mood[trait] = mood.get(trait, 0.0) + bonus

        if context.time_of_day:
            bump(TIME_OF_DAY_MOOD.get(context.time_of_day, {}))
        if context.weather:
            bump(WEATHER_MOOD.get(context.weather, {}))
        if context.stress > STRESS_THRESHOLD:
            bump({"impatient": context.stress * 0.5, "grumpy": context.stress * 0.3})

        profile.mood_modifiers = mood
        return profile

    def dump(self, profile: PersonalityProfile) -> str:
        return profile.to_json()

    def load(self, payload: Optional[str]) -> PersonalityProfile:
        """Parse a stored payload; corrupt or missing data yields a fresh profile."""
        if not payload:
            return self.create_profile()
        try:
            return PersonalityProfile.from_json(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Discarding corrupt personality payload: %s", e)
            return self.create_profile()
