from datetime import datetime

import pytest

from src.chemistry_layer.flavor import FlavorProfile
from src.simulation_layer.models import GameContext, InteractionEvent, ServedCoffee
from src.simulation_layer.persona.preferences import CustomerPreferences
from src.simulation_layer.satisfaction import (
    attribute_match,
    evaluate,
    infer_mood,
    interaction_satisfaction,
    trait_modifier,
)


def make_preferences(sweetness=0.6, acidity=0.9):
    return CustomerPreferences(
        roast="medium",
        flavor="fruity",
        strength=0.5,
        sweetness=sweetness,
        acidity=acidity,
        last_updated=datetime(2025, 2, 3),
        evolution_rate=0.03,
    )


def test_attribute_match():
    assert attribute_match(5, 5) == 100
    assert attribute_match(7, 5) == pytest.approx(80)
    assert attribute_match(0, 15) == 0


def test_adventurous_customer_loves_complex_cup():
    prefs = make_preferences()
    profile = FlavorProfile(
        acidity=9.0, sweetness=prefs.sweetness * 10, body=5.0, bitterness=5.0,
        aroma=6.0, aftertaste=6.0, balance=6.5, complexity=8.0,
    )
    # quality 90 -> 36, perfect matches -> 40, adventurous bonus -> 10
    result = evaluate(profile, prefs, {"adventurous": 0.9}, quality_score=90)
    assert result == pytest.approx(86)
    assert result > 80


def test_trait_modifiers_need_strong_traits():
    complex_cup = FlavorProfile(5, 5, 5, 5, 5, 5, balance=5.0, complexity=8.0)
    assert trait_modifier(complex_cup, {"adventurous": 0.7}) == 0
    assert trait_modifier(complex_cup, {"adventurous": 0.71}) == 10
    assert trait_modifier(complex_cup, {"picky": 0.8}) == -15

    balanced_cup = FlavorProfile(5, 5, 5, 5, 5, 5, balance=8.0, complexity=2.0)
    assert trait_modifier(balanced_cup, {"patient": 0.9, "picky": 0.9}) == 5


def test_evaluate_clamped():
    prefs = make_preferences(sweetness=0.1, acidity=0.1)
    awful = FlavorProfile(10, 10, 0, 0, 0, 0, balance=2.0, complexity=0.0)
    assert evaluate(awful, prefs, {"picky": 1.0}, quality_score=0) == 0.0


def test_evaluate_defaults_to_cupping_score():
    prefs = make_preferences()
    profile = FlavorProfile(5, 5, 5, 5, 5, 5, 5, 5)
    assert evaluate(profile, prefs, {}) == pytest.approx(evaluate(profile, prefs, {}, quality_score=50))


def served_event(**kwargs):
    return InteractionEvent(type="coffee_served", customer_id="c1", **kwargs)


def test_served_satisfaction_rules():
    assert interaction_satisfaction(served_event(coffee_quality=70)) == 70
    assert interaction_satisfaction(served_event(coffee_quality=70, response_time=20)) == 80
    assert interaction_satisfaction(served_event(coffee_quality=70, response_time=150)) == 50
    rush = served_event(coffee_quality=70, response_time=45, context=GameContext(shop_busyness=0.9))
    assert interaction_satisfaction(rush) == 85
    assert interaction_satisfaction(served_event(coffee_quality=95, response_time=5)) == 100


def test_served_prefers_cup_evaluation():
    event = served_event(coffee_quality=20, served=ServedCoffee("dark", "bitter", 20))
    assert interaction_satisfaction(event, cup_satisfaction=64) == 64
    assert interaction_satisfaction(served_event(served=ServedCoffee("dark", "bitter", 33))) == 33
    assert interaction_satisfaction(served_event()) == 50


def test_other_event_types():
    def event(kind, **kwargs):
        return InteractionEvent(type=kind, customer_id="c1", **kwargs)

    assert interaction_satisfaction(event("order_taken", response_time=20)) == 60
    assert interaction_satisfaction(event("order_taken", response_time=5)) == 70
    assert interaction_satisfaction(event("customer_ignored")) == 20
    assert interaction_satisfaction(event("customer_ignored", context=GameContext(shop_busyness=0.8))) == 30
    assert interaction_satisfaction(event("recommendation_given")) == 70


@pytest.mark.parametrize(
    "satisfaction,mood",
    [(95, "delighted"), (80, "happy"), (61, "happy"), (60, "neutral"),
     (41, "neutral"), (40, "disappointed"), (21, "disappointed"), (20, "angry"), (0, "angry")],
)
def test_infer_mood(satisfaction, mood):
    assert infer_mood(satisfaction) == mood


@pytest.mark.parametrize(
    "traits",
    [{}, {"adventurous": 0.9}, {"picky": 0.9}, {"adventurous": 0.9, "picky": 0.9}],
)
def test_satisfaction_never_drops_as_quality_rises(traits):
    prefs = make_preferences()
    profile = FlavorProfile(
        acidity=7.0, sweetness=5.0, body=6.0, bitterness=4.0,
        aroma=6.0, aftertaste=5.0, balance=5.5, complexity=7.5,
    )

    scores = [evaluate(profile, prefs, traits, quality_score=q) for q in range(101)]

    assert all(later >= earlier for earlier, later in zip(scores, scores[1:]))
    assert scores[-1] > scores[0]
