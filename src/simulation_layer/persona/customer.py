"""
Customer record: one regular's tastes, personality and relationship with the café.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.simulation_layer.persona.personality import PersonalityProfile
from src.simulation_layer.persona.preferences import CustomerPreferences

RECENT_SATISFACTION_LIMIT = 5
LOYALTY_MIN = 0.0
LOYALTY_MAX = 100.0


@dataclass
class Customer:
    """
    Mutable per-customer state. Owned by exactly one writer at a time.
    """
    customer_id: str
    preferences: CustomerPreferences
    personality: PersonalityProfile

    visit_count: int = 0
    loyalty: float = 50.0  # 0~100
    average_satisfaction: float = 50.0
    recent_satisfaction: List[float] = field(default_factory=list)  # last 5
    ignored_streak: int = 0

    def record_satisfaction(self, satisfaction: float) -> None:
        self.recent_satisfaction.append(satisfaction)
        if len(self.recent_satisfaction) > RECENT_SATISFACTION_LIMIT:
            self.recent_satisfaction = self.recent_satisfaction[-RECENT_SATISFACTION_LIMIT:]

        self.visit_count += 1
        weight = 1 / self.visit_count
        self.average_satisfaction = self.average_satisfaction * (1 - weight) + satisfaction * weight
        self.loyalty = max(LOYALTY_MIN, min(LOYALTY_MAX, self.loyalty + (satisfaction - 50) / 10))

    def streak(self, n: int) -> List[float]:
        """Last n satisfactions, or fewer if not enough visits yet."""
        return self.recent_satisfaction[-n:]

    def relationship_dict(self) -> Dict[str, Any]:
        return {
            "visit_count": self.visit_count,
            "loyalty": self.loyalty,
            "average_satisfaction": self.average_satisfaction,
            "recent_satisfaction": list(self.recent_satisfaction),
            "ignored_streak": self.ignored_streak,
        }

    def apply_relationship(self, data: Dict[str, Any]) -> None:
        self.visit_count = int(data.get("visit_count", 0))
        self.loyalty = max(LOYALTY_MIN, min(LOYALTY_MAX, float(data.get("loyalty", 50.0))))
        self.average_satisfaction = float(data.get("average_satisfaction", 50.0))
        self.recent_satisfaction = [float(s) for s in data.get("recent_satisfaction", [])][-RECENT_SATISFACTION_LIMIT:]
        self.ignored_streak = int(data.get("ignored_streak", 0))

    def get_analytics(self) -> Dict[str, Any]:
        prefs = self.preferences
        return {
            "customer_id": self.customer_id,
            "visit_count": self.visit_count,
            "loyalty": round(self.loyalty, 2),
            "average_satisfaction": round(self.average_satisfaction, 2),
            "preferred_roast": prefs.roast,
            "preferred_flavor": prefs.flavor,
            "strength": round(prefs.strength, 3),
            "sweetness": round(prefs.sweetness, 3),
            "acidity": round(prefs.acidity, 3),
            "evolution_rate": round(prefs.evolution_rate, 4),
            "traits": ",".join(self.personality.trait_names()),
            "adaptations": len(self.personality.adaptation_history),
        }
