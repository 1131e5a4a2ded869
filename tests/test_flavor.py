import pytest

from src.chemistry_layer.compounds import COMPOUND_CATALOG, baseline_concentrations
from src.chemistry_layer.flavor import (
    FlavorProfile,
    FlavorSynthesizer,
    calculate_balance,
    calculate_complexity,
    synthesize,
)
from src.chemistry_layer.kinetics import simulate_reactions

DIMENSIONS = ("acidity", "sweetness", "body", "bitterness", "aroma", "aftertaste", "balance", "complexity")


def test_zero_concentrations_give_neutral_profile():
    profile = synthesize({key: 0.0 for key in COMPOUND_CATALOG}, "no-such-bean")
    for dim in ("acidity", "sweetness", "body", "bitterness", "aroma", "aftertaste"):
        assert getattr(profile, dim) == pytest.approx(5.0)
    assert profile.complexity == 0.0


def test_baseline_caffeine_only():
    profile = synthesize(baseline_concentrations(), "unknown")
    assert profile.acidity == pytest.approx(5.2)
    assert profile.sweetness == pytest.approx(4.8)
    assert profile.body == pytest.approx(5.4)
    assert profile.bitterness == pytest.approx(6.6)
    assert profile.aroma == pytest.approx(5.2)
    assert profile.aftertaste == pytest.approx(6.0)


def test_arabica_modifiers_applied():
    profile = synthesize(baseline_concentrations(), "arabica")
    assert profile.acidity == pytest.approx(6.24)
    assert profile.sweetness == pytest.approx(5.28)
    assert profile.bitterness == pytest.approx(5.94)
    assert profile.body == pytest.approx(5.4)
    assert profile.balance == pytest.approx(10 - (0.26 + 0.72 + 1.1 + 0.44) / 4)
    assert profile.complexity == pytest.approx(5 / 7)


def test_archetype_lookup_is_case_insensitive():
    concentrations = simulate_reactions(200, 600)
    assert synthesize(concentrations, "ARABICA") == synthesize(concentrations, "arabica")


def test_below_thresholds_matches_baseline_profile():
    assert synthesize(simulate_reactions(100, 600), "arabica") == synthesize(baseline_concentrations(), "arabica")


@pytest.mark.parametrize("temperature,time_seconds", [(150, 300), (200, 600), (230, 900), (260, 1200)])
@pytest.mark.parametrize("archetype", ["arabica", "robusta", "liberica", "excelsa"])
def test_all_dimensions_within_range(temperature, time_seconds, archetype):
    profile = synthesize(simulate_reactions(temperature, time_seconds), archetype)
    for dim in DIMENSIONS:
        assert 0.0 <= getattr(profile, dim) <= 10.0


def test_saturated_concentrations_clamped():
    profile = synthesize({key: 1e9 for key in COMPOUND_CATALOG}, "robusta")
    assert profile.body == 10.0
    assert profile.bitterness == 10.0


def test_dark_robusta_is_bitter_full_and_not_bright():
    profile = synthesize(simulate_reactions(230, 720, 10), "robusta")
    assert profile.acidity <= 4.0 + 1e-9
    assert profile.bitterness > 7
    assert profile.body > 7


def test_medium_arabica_is_bright_and_sweet():
    profile = synthesize(simulate_reactions(190, 480, 12), "arabica")
    assert profile.acidity > 6
    assert profile.sweetness > 6


def test_balance_perfect_at_ideal():
    ideal = FlavorProfile(acidity=6.5, sweetness=6.0, body=6.5, bitterness=5.5, aroma=5, aftertaste=5)
    assert calculate_balance(ideal) == pytest.approx(10.0)


def test_complexity():
    assert calculate_complexity({}) == 0.0
    assert calculate_complexity({"a": 0.0, "b": 5.0}) == 0.0
    # two of four active, variance of [20, 80] is 900
    assert calculate_complexity({"a": 20.0, "b": 80.0, "c": 0.0, "d": 1.0}) == pytest.approx(2.5 + 0.9)
    # runaway concentrations saturate instead of producing nan
    assert calculate_complexity({"a": 1e300, "b": 1e308}) == pytest.approx(10.0)


def test_profile_dict_and_normalized():
    profile = FlavorProfile(8, 6, 4, 2, 5, 5, 7, 3)
    assert FlavorProfile.from_dict(profile.to_dict()) == profile
    assert profile.normalized() == pytest.approx(
        {"acidity": 0.8, "sweetness": 0.6, "body": 0.4, "bitterness": 0.2}
    )


def test_custom_intensity_scale():
    concentrations = {key: 0.0 for key in COMPOUND_CATALOG}
    concentrations["caramelization_products"] = 50.0
    coarse = FlavorSynthesizer(intensity_scale=1000.0).synthesize(concentrations, "unknown")
    fine = FlavorSynthesizer(intensity_scale=50.0).synthesize(concentrations, "unknown")
    assert fine.sweetness > coarse.sweetness
