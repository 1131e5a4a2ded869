"""
Satisfaction evaluation.

evaluate() scores a cup against one customer's tastes and personality.
interaction_satisfaction() turns a whole service event (cup, speed, rush)
into the satisfaction figure that drives learning.
"""

from typing import Mapping, Optional

from src.chemistry_layer.flavor import FlavorProfile
from src.chemistry_layer.quality import calculate_sca_score
from src.simulation_layer.models import InteractionEvent
from src.simulation_layer.persona.preferences import CustomerPreferences

QUALITY_WEIGHT = 40
MATCH_WEIGHT = 40

# No customer-specific targets exist for these two dimensions
DEFAULT_BODY_TARGET = 5.0
DEFAULT_BITTERNESS_TARGET = 5.0

TRAIT_ACTIVE = 0.7

BASE_SATISFACTION = 50.0


def _clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))


def attribute_match(actual: float, target: float) -> float:
    return max(0.0, 100 - 10 * abs(actual - target))


def trait_modifier(profile: FlavorProfile, traits: Mapping[str, float]) -> float:
    """Additive personality bonus/penalty."""
    modifier = 0.0
    if traits.get("adventurous", 0.0) > TRAIT_ACTIVE and profile.complexity > 7:
        modifier += 10
    if traits.get("picky", 0.0) > TRAIT_ACTIVE and profile.balance < 6:
        modifier -= 15
    if traits.get("patient", 0.0) > TRAIT_ACTIVE and profile.balance > 7:
        modifier += 5
    return modifier


def evaluate(
    profile: FlavorProfile,
    preferences: CustomerPreferences,
    traits: Mapping[str, float],
    quality_score: Optional[float] = None,
) -> float:
    """Satisfaction 0~100 for one cup.

    traits maps trait name -> effective intensity. quality_score defaults to
    the cupping score of the profile.
    """
    if quality_score is None:
        quality_score = calculate_sca_score(profile)

    quality_part = (quality_score / 100) * QUALITY_WEIGHT

    matches = [
        attribute_match(profile.acidity, preferences.acidity * 10),
        attribute_match(profile.sweetness, preferences.sweetness * 10),
        attribute_match(profile.body, DEFAULT_BODY_TARGET),
        attribute_match(profile.bitterness, DEFAULT_BITTERNESS_TARGET),
    ]
    match_part = (sum(matches) / len(matches) / 100) * MATCH_WEIGHT

    return _clamp_score(quality_part + match_part + trait_modifier(profile, traits))


def interaction_satisfaction(event: InteractionEvent, cup_satisfaction: Optional[float] = None) -> float:
    """Satisfaction for a service event.

    cup_satisfaction, when given, replaces the raw coffee quality for served cups.
    """
    satisfaction = BASE_SATISFACTION
    response = event.response_time
    busyness = event.context.shop_busyness

    if event.type == "coffee_served":
        if cup_satisfaction is not None:
            satisfaction = cup_satisfaction
        elif event.coffee_quality is not None:
            satisfaction = event.coffee_quality
        elif event.served is not None:
            satisfaction = event.served.quality

        if response is not None:
            if response < 30:
                satisfaction += 10
            elif response > 120:
                satisfaction -= 20

        # Fast service during a rush impresses
        if busyness > 0.8 and response is not None and response < 60:
            satisfaction += 15

    elif event.type == "order_taken":
        satisfaction = 60
        if response is not None and response < 10:
            satisfaction += 10

    elif event.type == "customer_ignored":
        satisfaction = 30 if busyness > 0.7 else 20

    elif event.type == "recommendation_given":
        satisfaction = 70

    return _clamp_score(satisfaction)


def infer_mood(satisfaction: float) -> str:
    if satisfaction > 80:
        return "delighted"
    if satisfaction > 60:
        return "happy"
    if satisfaction > 40:
        return "neutral"
    if satisfaction > 20:
        return "disappointed"
    return "angry"
