"""
Shared data models for the simulation layer.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from src.chemistry_layer.flavor import FlavorProfile

ROAST_SCALE = ("light", "medium", "dark")
FLAVOR_DESCRIPTORS = ("fruity", "floral", "spicy", "bitter", "sweet")

INTERACTION_TYPES = (
    "coffee_served",
    "order_taken",
    "customer_ignored",
    "recommendation_given",
)


@dataclass(frozen=True)
class ServedCoffee:
    """What the customer was handed: roast, flavor note and cup quality."""

    roast: str  # one of ROAST_SCALE
    flavor: str  # one of FLAVOR_DESCRIPTORS
    quality: float  # 0~100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServedCoffee":
        roast = data["roast"]
        flavor = data["flavor"]
        if roast not in ROAST_SCALE:
            raise ValueError(f"unknown roast level: {roast!r}")
        if flavor not in FLAVOR_DESCRIPTORS:
            raise ValueError(f"unknown flavor: {flavor!r}")
        return cls(roast=roast, flavor=flavor, quality=float(data["quality"]))


@dataclass
class GameContext:
    """Shop situation at the time of an interaction."""

    shop_busyness: float = 0.5  # 0~1
    player_level: int = 1


@dataclass
class InteractionEvent:
    """A single service interaction with one customer."""

    type: str  # one of INTERACTION_TYPES
    customer_id: str
    coffee_quality: Optional[float] = None  # 0~100
    response_time: Optional[float] = None  # seconds
    served: Optional[ServedCoffee] = None
    flavor_profile: Optional[FlavorProfile] = None
    recommended_flavor: Optional[str] = None
    remembered_order: bool = False
    context: GameContext = field(default_factory=GameContext)


@dataclass
class SimulationEvent:
    """A single simulation log entry (one row of the analytics output)."""

    timestamp: str
    day: int
    customer_id: str
    event_type: str
    satisfaction: float
    mood: str
    served_roast: Optional[str]
    served_flavor: Optional[str]
    quality: Optional[float]
    preferred_roast: str
    preferred_flavor: str
    loyalty: float
    triggers: str  # comma-separated adaptation triggers fired
