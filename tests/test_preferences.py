import json
import random
from datetime import datetime

import pytest

from config.settings import CustomerSettings
from src.simulation_layer.models import FLAVOR_DESCRIPTORS, ROAST_SCALE, ServedCoffee
from src.simulation_layer.persona.preferences import CustomerPreferences, PreferenceEngine


def make_preferences(roast="medium", flavor="fruity", **overrides):
    values = dict(
        roast=roast,
        flavor=flavor,
        strength=0.5,
        sweetness=0.5,
        acidity=0.5,
        last_updated=datetime(2025, 2, 3, 9, 0),
        evolution_rate=0.05,
    )
    values.update(overrides)
    return CustomerPreferences(**values)


@pytest.fixture
def engine(pinned_rng, clock):
    return PreferenceEngine(pinned_rng, clock, CustomerSettings())


def test_create_preferences_within_bounds(rng, clock):
    engine = PreferenceEngine(rng, clock, CustomerSettings())
    for _ in range(50):
        prefs = engine.create_preferences()
        assert prefs.roast in ROAST_SCALE
        assert prefs.flavor in FLAVOR_DESCRIPTORS
        for value in (prefs.strength, prefs.sweetness, prefs.acidity):
            assert 0.1 <= value <= 1.0
        assert 0.01 <= prefs.evolution_rate <= 0.05
        assert prefs.last_updated == clock.now()


def test_liked_coffee_pulls_roast_one_step(engine):
    prefs = make_preferences(roast="light", flavor="sweet")
    engine.evolve(prefs, ServedCoffee("dark", "fruity", 80), 90)

    assert prefs.roast == "medium"
    assert prefs.flavor == "fruity"
    assert prefs.strength == pytest.approx(0.5 - 0.05 * 0.8)


@pytest.mark.parametrize("roast", ["light", "dark"])
def test_disliked_roast_at_scale_edge_moves_inward(engine, roast):
    prefs = make_preferences(roast=roast)
    engine.evolve(prefs, ServedCoffee(roast, "fruity", 20), 20)

    assert prefs.roast == "medium"
    assert prefs.flavor != "fruity"


def test_disliked_but_different_coffee_leaves_preferences(engine):
    prefs = make_preferences(roast="light", flavor="floral")
    engine.evolve(prefs, ServedCoffee("dark", "bitter", 20), 25)
    assert (prefs.roast, prefs.flavor) == ("light", "floral")


def test_middling_satisfaction_only_records_history(engine):
    prefs = make_preferences()
    engine.evolve(prefs, ServedCoffee("dark", "bitter", 60), 55)

    assert (prefs.roast, prefs.flavor, prefs.strength) == ("medium", "fruity", 0.5)
    assert len(prefs.history) == 1
    assert prefs.history[0].satisfaction == 55


def test_history_capped(engine):
    prefs = make_preferences()
    for i in range(25):
        engine.evolve(prefs, ServedCoffee("medium", "fruity", 50), 50 + i % 10)
    assert len(prefs.history) == 20


def test_roast_never_leaves_scale(rng, clock):
    engine = PreferenceEngine(rng, clock, CustomerSettings())
    prefs = make_preferences(evolution_rate=0.05)
    for _ in range(500):
        served = ServedCoffee(rng.choice(ROAST_SCALE), rng.choice(FLAVOR_DESCRIPTORS), rng.uniform(0, 100))
        engine.evolve(prefs, served, rng.uniform(0, 100))
        assert prefs.roast in ROAST_SCALE
        assert 0.1 <= prefs.strength <= 1.0


def test_natural_drift_waits_a_week(engine, clock):
    prefs = make_preferences(roast="medium", last_updated=clock.now())

    clock.advance(days=6)
    assert engine.apply_natural_drift(prefs) is False
    assert prefs.sweetness == 0.5

    clock.advance(days=1)
    assert engine.apply_natural_drift(prefs) is True
    assert prefs.strength == pytest.approx(0.49)
    assert prefs.sweetness == pytest.approx(0.49)
    assert prefs.acidity == pytest.approx(0.49)
    assert prefs.roast == "light"
    assert prefs.last_updated == clock.now()

    assert engine.apply_natural_drift(prefs) is False


def test_evolve_does_not_reset_drift_timer(engine, clock):
    prefs = make_preferences(last_updated=clock.now())
    clock.advance(days=3)
    engine.evolve(prefs, ServedCoffee("dark", "bitter", 90), 90)
    assert prefs.last_updated == datetime(2025, 2, 3, 9, 0)


def test_drift_clamps_scalars(engine, clock):
    prefs = make_preferences(roast="light", strength=0.1, sweetness=0.1, acidity=0.1,
                             last_updated=clock.now())
    clock.advance(days=7)
    engine.apply_natural_drift(prefs)
    assert (prefs.strength, prefs.sweetness, prefs.acidity) == (0.1, 0.1, 0.1)
    assert prefs.roast == "light"


def test_dump_and_load(engine):
    prefs = make_preferences()
    engine.evolve(prefs, ServedCoffee("dark", "bitter", 60), 55)
    loaded = engine.load(engine.dump(prefs))

    assert loaded.roast == prefs.roast
    assert loaded.flavor == prefs.flavor
    assert loaded.last_updated == prefs.last_updated
    assert loaded.history[0].served == ServedCoffee("dark", "bitter", 60)


def test_dump_and_load_is_lossless(engine, clock):
    prefs = make_preferences(roast="dark", flavor="spicy", strength=0.73, sweetness=0.1, acidity=1.0)
    engine.evolve(prefs, ServedCoffee("dark", "bitter", 88), 91.5)
    clock.advance(days=1)
    engine.evolve(prefs, ServedCoffee("light", "floral", 30), 22.25)

    assert engine.load(engine.dump(prefs)) == prefs


def test_dump_and_load_without_history(engine):
    prefs = make_preferences(evolution_rate=0.013)
    loaded = engine.load(engine.dump(prefs))

    assert loaded == prefs
    assert loaded.history == []


@pytest.mark.parametrize(
    "payload",
    [None, "", "not json", "[1, 2]", json.dumps({"roast": "burnt", "flavor": "fruity"}), json.dumps({"roast": "light"})],
)
def test_corrupt_payload_yields_defaults(payload):
    engine = PreferenceEngine(random.Random(1), None, CustomerSettings())
    prefs = engine.load(payload)
    assert prefs.roast in ROAST_SCALE
    assert prefs.flavor in FLAVOR_DESCRIPTORS


def test_strict_parse_rejects_unknown_values():
    data = make_preferences().to_dict()
    data["flavor"] = "smoky"
    with pytest.raises(ValueError):
        CustomerPreferences.from_dict(data)


def test_repeated_disliked_roast_pushes_preference_away(engine):
    prefs = make_preferences(roast="medium", flavor="sweet")
    for _ in range(25):
        engine.evolve(prefs, ServedCoffee("medium", "fruity", 15), 20)

    assert prefs.roast == "light"
    assert prefs.flavor == "sweet"
    assert len(prefs.history) == 20


def test_repeated_disliked_roast_across_seeds(clock):
    moved = 0
    for seed in range(200):
        engine = PreferenceEngine(random.Random(seed), clock, CustomerSettings())
        prefs = make_preferences(roast="medium", flavor="sweet")
        for _ in range(25):
            engine.evolve(prefs, ServedCoffee("medium", "fruity", 15), 20)
            assert prefs.roast in ROAST_SCALE
        if prefs.roast != "medium":
            moved += 1

    # 1 - 0.95 ** 25 ~= 0.72 of customers leave the disliked level
    assert 110 <= moved <= 175
