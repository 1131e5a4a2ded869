import pandas as pd
import pytest

from src.analysis_layer.roast_analyzer import (
    FLAVOR_COLUMNS,
    best_roast,
    compare_archetypes,
    daily_satisfaction,
    profile_distance,
    summarize_events,
    sweep_roasts,
)
from src.chemistry_layer.pipeline import roast


def test_sweep_grid():
    sweep = sweep_roasts([180, 205, 230], [300, 600])

    assert len(sweep) == 6
    assert set(FLAVOR_COLUMNS) <= set(sweep.columns)
    assert {"quality_score", "grade", "phase", "roast_level"} <= set(sweep.columns)

    row = sweep[(sweep["temperature"] == 205) & (sweep["time_seconds"] == 600)].iloc[0]
    assert row["quality_score"] == roast(205, 600).quality_score


def test_best_roast():
    sweep = sweep_roasts([180, 205, 230], [300, 600, 900])
    best = best_roast(sweep)
    assert best["quality_score"] == sweep["quality_score"].max()

    sweetest = best_roast(sweep, "sweetness")
    assert sweetest["sweetness"] == sweep["sweetness"].max()


def test_best_roast_errors():
    with pytest.raises(ValueError):
        best_roast(pd.DataFrame())
    with pytest.raises(KeyError):
        best_roast(sweep_roasts([200], [600]), "crema")


def test_compare_archetypes():
    frame = compare_archetypes(230, 720, moisture=10)
    assert list(frame.index) == ["arabica", "robusta", "liberica", "excelsa"]
    assert frame.loc["robusta", "bitterness"] >= frame.loc["arabica", "bitterness"]


def test_profile_distance():
    sweep = sweep_roasts([180, 230], [600])
    a, b = sweep.iloc[0], sweep.iloc[1]
    assert profile_distance(a, a) == 0.0
    assert profile_distance(a, b) > 0.0


def event_log():
    rows = [
        ("2025-02-03 07:00", 1, "c1", 80.0, "happy", "", "medium", 52.0),
        ("2025-02-03 13:00", 1, "c2", 20.0, "angry", "", "dark", 47.0),
        ("2025-02-04 07:00", 2, "c1", 90.0, "delighted", "perfect_memory_service", "dark", 56.0),
    ]
    columns = ["timestamp", "day", "customer_id", "satisfaction", "mood", "triggers",
               "preferred_roast", "loyalty"]
    return pd.DataFrame(rows, columns=columns)


def test_summarize_events():
    summary = summarize_events(event_log()).set_index("customer_id")

    assert summary.loc["c1", "events"] == 2
    assert summary.loc["c1", "mean_satisfaction"] == pytest.approx(85)
    assert summary.loc["c1", "adaptations"] == 1
    assert summary.loc["c1", "final_roast"] == "dark"
    assert summary.loc["c2", "final_loyalty"] == 47.0

    assert summarize_events(pd.DataFrame()).empty


def test_daily_satisfaction():
    daily = daily_satisfaction(event_log()).set_index("day")
    assert daily.loc[1, "mean_satisfaction"] == pytest.approx(50)
    assert daily.loc[2, "delighted"] == 1
    assert daily_satisfaction(pd.DataFrame()).empty
