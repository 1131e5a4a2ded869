"""
Customer taste preferences and the engine that evolves them.

A customer's preferences drift toward coffee they enjoyed, away from
coffee they disliked, and wander slightly on their own every week.
"""

import json
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from config import get_settings
from config.settings import CustomerSettings
from src.simulation_layer.clock import Clock, days_between
from src.simulation_layer.models import FLAVOR_DESCRIPTORS, ROAST_SCALE, ServedCoffee

logger = logging.getLogger(__name__)

SCALAR_MIN = 0.1
SCALAR_MAX = 1.0

LIKED_THRESHOLD = 70
DISLIKED_THRESHOLD = 40

DRIFT_STEP = 0.01
DRIFT_ROAST_PROBABILITY = 0.1


def clamp_scalar(value: float) -> float:
    return max(SCALAR_MIN, min(SCALAR_MAX, value))


@dataclass
class PreferenceHistoryEntry:
    """One serving the customer reacted to."""
    timestamp: datetime
    satisfaction: float
    served: ServedCoffee

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "satisfaction": self.satisfaction,
            "served": self.served.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreferenceHistoryEntry":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            satisfaction=float(data["satisfaction"]),
            served=ServedCoffee.from_dict(data["served"]),
        )


@dataclass
class CustomerPreferences:
    """
    Taste targets of one customer.
    Scalars live in [0.1, 1.0]; roast is always a level of ROAST_SCALE.
    """
    roast: str
    flavor: str
    strength: float
    sweetness: float
    acidity: float
    last_updated: datetime
    evolution_rate: float  # 0.01~0.05, fixed at creation
    history: List[PreferenceHistoryEntry] = field(default_factory=list)

    @property
    def roast_index(self) -> int:
        return ROAST_SCALE.index(self.roast)

    def set_roast_index(self, index: int) -> None:
        index = max(0, min(len(ROAST_SCALE) - 1, index))
        self.roast = ROAST_SCALE[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roast": self.roast,
            "flavor": self.flavor,
            "strength": self.strength,
            "sweetness": self.sweetness,
            "acidity": self.acidity,
            "last_updated": self.last_updated.isoformat(),
            "evolution_rate": self.evolution_rate,
            "history": [entry.to_dict() for entry in self.history],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomerPreferences":
        """Strict parse; raises ValueError/KeyError/TypeError on bad payloads."""
        roast = data["roast"]
        flavor = data["flavor"]
        if roast not in ROAST_SCALE:
            raise ValueError(f"unknown roast level: {roast!r}")
        if flavor not in FLAVOR_DESCRIPTORS:
            raise ValueError(f"unknown flavor: {flavor!r}")

        return cls(
            roast=roast,
            flavor=flavor,
            strength=clamp_scalar(float(data["strength"])),
            sweetness=clamp_scalar(float(data["sweetness"])),
            acidity=clamp_scalar(float(data["acidity"])),
            last_updated=datetime.fromisoformat(data["last_updated"]),
            evolution_rate=float(data["evolution_rate"]),
            history=[PreferenceHistoryEntry.from_dict(e) for e in data.get("history", [])],
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, payload: str) -> "CustomerPreferences":
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("preference payload must be a JSON object")
        return cls.from_dict(data)


class PreferenceEngine:
    """Creates, evolves and (de)serializes CustomerPreferences."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        settings: Optional[CustomerSettings] = None,
    ):
        self.settings = settings or get_settings().customer
        self.rng = rng or random.Random(self.settings.rng_seed)
        self.clock = clock or Clock()

    def create_preferences(self) -> CustomerPreferences:
        return CustomerPreferences(
            roast=self.rng.choice(ROAST_SCALE),
            flavor=self.rng.choice(FLAVOR_DESCRIPTORS),
            strength=self.rng.uniform(SCALAR_MIN, SCALAR_MAX),
            sweetness=self.rng.uniform(SCALAR_MIN, SCALAR_MAX),
            acidity=self.rng.uniform(SCALAR_MIN, SCALAR_MAX),
            last_updated=self.clock.now(),
            evolution_rate=self.rng.uniform(
                self.settings.evolution_rate_min, self.settings.evolution_rate_max
            ),
        )

    def evolve(
        self,
        preferences: CustomerPreferences,
        served: ServedCoffee,
        satisfaction: float,
    ) -> CustomerPreferences:
        """Record the serving and nudge preferences toward liked / away from disliked coffee."""
        self._record(preferences, served, satisfaction)

        if satisfaction > LIKED_THRESHOLD:
            self._reinforce(preferences, served)
        elif satisfaction < DISLIKED_THRESHOLD:
            self._avoid(preferences, served)

        return preferences

    def _record(self, preferences: CustomerPreferences, served: ServedCoffee, satisfaction: float) -> None:
        preferences.history.append(
            PreferenceHistoryEntry(
                timestamp=self.clock.now(),
                satisfaction=satisfaction,
                served=served,
            )
        )
        limit = self.settings.history_limit
        if len(preferences.history) > limit:
            preferences.history = preferences.history[-limit:]

    def _reinforce(self, preferences: CustomerPreferences, served: ServedCoffee) -> None:
        rate = preferences.evolution_rate

        if self.rng.random() < rate * 2:
            current = preferences.roast_index
            target = ROAST_SCALE.index(served.roast)
            if target != current:
                step = 1 if target > current else -1
                preferences.set_roast_index(current + step)
                logger.info("Roast preference moved toward %s: now %s", served.roast, preferences.roast)

        if self.rng.random() < rate:
            if preferences.flavor != served.flavor:
                logger.info("Flavor preference adopted: %s -> %s", preferences.flavor, served.flavor)
            preferences.flavor = served.flavor

        quality_factor = served.quality / 100
        bound = rate * quality_factor
        preferences.strength = clamp_scalar(preferences.strength + self.rng.uniform(-bound, bound))

    def _avoid(self, preferences: CustomerPreferences, served: ServedCoffee) -> None:
        rate = preferences.evolution_rate

        if preferences.roast == served.roast and self.rng.random() < rate:
            current = preferences.roast_index
            # At either end of the scale the only move is inward
            candidates = [i for i in (current - 1, current + 1) if 0 <= i < len(ROAST_SCALE)]
            preferences.set_roast_index(self.rng.choice(candidates))
            logger.info("Roast preference moved away from %s: now %s", served.roast, preferences.roast)

        if preferences.flavor == served.flavor and self.rng.random() < rate * 0.5:
            alternatives = [f for f in FLAVOR_DESCRIPTORS if f != served.flavor]
            preferences.flavor = self.rng.choice(alternatives)
            logger.info("Flavor preference abandoned %s for %s", served.flavor, preferences.flavor)

    def apply_natural_drift(self, preferences: CustomerPreferences) -> bool:
        """Weekly random walk of the taste targets. Returns True if a drift step ran."""
        now = self.clock.now()
        if days_between(preferences.last_updated, now) < self.settings.drift_interval_days:
            return False

        preferences.strength = clamp_scalar(preferences.strength + self.rng.choice((-DRIFT_STEP, DRIFT_STEP)))
        preferences.sweetness = clamp_scalar(preferences.sweetness + self.rng.choice((-DRIFT_STEP, DRIFT_STEP)))
        preferences.acidity = clamp_scalar(preferences.acidity + self.rng.choice((-DRIFT_STEP, DRIFT_STEP)))

        if self.rng.random() < DRIFT_ROAST_PROBABILITY:
            preferences.set_roast_index(preferences.roast_index + self.rng.choice((-1, 1)))

        preferences.last_updated = now
        logger.debug("Natural drift applied (roast=%s)", preferences.roast)
        return True

    def dump(self, preferences: CustomerPreferences) -> str:
        return preferences.to_json()

    def load(self, payload: Optional[str]) -> CustomerPreferences:
        """Parse a stored payload; corrupt or missing data yields fresh defaults."""
        if not payload:
            return self.create_preferences()
        try:
            return CustomerPreferences.from_json(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Discarding corrupt preference payload: %s", e)
            return self.create_preferences()
