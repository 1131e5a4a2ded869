"""
Roast Analyzer - 온도 × 시간 스윕과 고객 이벤트 로그 집계

1. Sweep a grid of roast settings into a DataFrame (flavor, score, phase, grade)
2. Pick the best roast for a target (score or a single flavor dimension)
3. Summarize a simulation event log per customer and per day
"""

from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from src.chemistry_layer.pipeline import RoastPipeline

FLAVOR_COLUMNS = [
    "acidity", "sweetness", "body", "bitterness",
    "aroma", "aftertaste", "balance", "complexity",
]


def sweep_roasts(
    temperatures: Iterable[float],
    times: Iterable[float],
    archetype: str = "arabica",
    moisture: float = 12.0,
    pipeline: Optional[RoastPipeline] = None,
) -> pd.DataFrame:
    """One row per (temperature, time) roast."""
    pipeline = pipeline or RoastPipeline()
    times = list(times)
    rows = []

    for temperature in temperatures:
        for time_seconds in times:
            result = pipeline.roast(temperature, time_seconds, archetype, moisture)
            row = {
                "temperature": temperature,
                "time_seconds": time_seconds,
                "archetype": archetype,
                "quality_score": result.quality_score,
                "grade": result.grade,
                "phase": result.phase_name,
                "roast_level": result.roast_level,
            }
            row.update(result.flavor_profile.to_dict())
            rows.append(row)

    return pd.DataFrame(rows)


def best_roast(sweep: pd.DataFrame, target: str = "quality_score") -> pd.Series:
    """Row maximizing the target column; ties go to the shorter, cooler roast."""
    if sweep.empty:
        raise ValueError("empty sweep")
    if target not in sweep.columns:
        raise KeyError(target)
    ordered = sweep.sort_values(
        [target, "time_seconds", "temperature"], ascending=[False, True, True]
    )
    return ordered.iloc[0]


def compare_archetypes(
    temperature: float,
    time_seconds: float,
    archetypes: Sequence[str] = ("arabica", "robusta", "liberica", "excelsa"),
    moisture: float = 12.0,
) -> pd.DataFrame:
    """Same roast, different beans; indexed by archetype."""
    frames = [sweep_roasts([temperature], [time_seconds], a, moisture) for a in archetypes]
    return pd.concat(frames, ignore_index=True).set_index("archetype")


def summarize_events(events: pd.DataFrame) -> pd.DataFrame:
    """Per-customer satisfaction summary from a simulation event log."""
    if events.empty:
        return pd.DataFrame(
            columns=["customer_id", "events", "mean_satisfaction", "min_satisfaction",
                     "max_satisfaction", "adaptations", "final_roast", "final_loyalty"]
        )

    grouped = events.sort_values("timestamp").groupby("customer_id")
    summary = grouped.agg(
        events=("satisfaction", "size"),
        mean_satisfaction=("satisfaction", "mean"),
        min_satisfaction=("satisfaction", "min"),
        max_satisfaction=("satisfaction", "max"),
        adaptations=("triggers", lambda s: int(np.sum(s.astype(bool)))),
        final_roast=("preferred_roast", "last"),
        final_loyalty=("loyalty", "last"),
    )
    return summary.reset_index()


def daily_satisfaction(events: pd.DataFrame) -> pd.DataFrame:
    """Mean satisfaction and mood counts per simulated day."""
    if events.empty:
        return pd.DataFrame(columns=["day", "mean_satisfaction"])
    means = events.groupby("day")["satisfaction"].mean().rename("mean_satisfaction")
    moods = pd.crosstab(events["day"], events["mood"])
    return pd.concat([means, moods], axis=1).reset_index()


def profile_distance(a: pd.Series, b: pd.Series, columns: List[str] = FLAVOR_COLUMNS) -> float:
    """Euclidean distance between two sweep rows over the flavor columns."""
    return float(np.linalg.norm(a[columns].astype(float).to_numpy() - b[columns].astype(float).to_numpy()))
