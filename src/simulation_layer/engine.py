"""
Café simulation engine.
Orchestrates the day/time-slot loop: customers drop in, the barista roasts
and serves (or misses them), and every interaction feeds customer learning.
"""

import logging
import random
from dataclasses import asdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

import pandas as pd

from src.chemistry_layer.compounds import ROAST_PRESETS
from src.chemistry_layer.flavor import FlavorProfile
from src.chemistry_layer.pipeline import RoastPipeline
from src.simulation_layer.clock import ManualClock
from src.simulation_layer.learning_manager import CustomerLearningManager
from src.simulation_layer.models import (
    FLAVOR_DESCRIPTORS,
    GameContext,
    InteractionEvent,
    ServedCoffee,
    SimulationEvent,
)
from src.simulation_layer.persona.personality import PersonalityContext

logger = logging.getLogger(__name__)

ARCHETYPES = ("arabica", "robusta", "liberica", "excelsa")
WEATHER = ("sunny", "rainy", "snowy", "hot")

# Dominant sensory dimension -> flavor note printed on the cup
FLAVOR_NOTES = {
    "acidity": "fruity",
    "aroma": "floral",
    "body": "spicy",
    "bitterness": "bitter",
    "sweetness": "sweet",
}


def describe_flavor(profile: FlavorProfile) -> str:
    """Flavor note for the most pronounced dimension (ties resolve in FLAVOR_NOTES order)."""
    levels = {dim: getattr(profile, dim) for dim in FLAVOR_NOTES}
    dominant = max(levels, key=lambda dim: levels[dim])
    return FLAVOR_NOTES[dominant]


class CafeSimulationEngine:
    """
    Multi-day café simulation with time-slot granularity.
    """

    TIME_SLOTS = {
        "morning": (7, 0.6),  # (opening hour, visit probability)
        "afternoon": (13, 0.4),
        "evening": (18, 0.3),
    }

    def __init__(
        self,
        customer_ids: Sequence[str],
        manager: Optional[CustomerLearningManager] = None,
        pipeline: Optional[RoastPipeline] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[ManualClock] = None,
        ignore_probability: float = 0.1,
        recommendation_probability: float = 0.1,
    ):
        self.clock = clock or ManualClock()
        self.rng = rng or random.Random()
        self.manager = manager or CustomerLearningManager(rng=self.rng, clock=self.clock)
        self.pipeline = pipeline or RoastPipeline()
        self.customer_ids = list(customer_ids)
        self.ignore_probability = ignore_probability
        self.recommendation_probability = recommendation_probability
        self.events: List[SimulationEvent] = []

        # Stored customers resume; unknown ids get freshly generated tastes
        for cid in self.customer_ids:
            self.manager.get_customer(cid)

    def warn_if_clock_behind(self, now: datetime) -> List[str]:
        """Log a warning for each customer whose stored state is newer than `now`.

        Drift and trait adaptation stay frozen until the clock catches up.
        """
        behind = []
        for cid in self.customer_ids:
            customer = self.manager.get_customer(cid)
            stamps = [customer.preferences.last_updated, customer.personality.last_update]
            latest = max(stamp for stamp in stamps if stamp is not None)
            if now < latest:
                behind.append(cid)
                logger.warning(
                    "Customer %s was last updated %s, after the simulation clock (%s); "
                    "drift and adaptation resume once the clock passes it",
                    cid, latest.isoformat(), now.isoformat(),
                )
        return behind

    def _serve(self, customer_id: str, busyness: float) -> InteractionEvent:
        """Barista picks a preset and bean, roasts, and hands over the cup."""
        preset = self.rng.choice(sorted(ROAST_PRESETS))
        archetype = self.rng.choice(ARCHETYPES)
        result = self.pipeline.roast_preset(preset, archetype)
        customer = self.manager.get_customer(customer_id)

        return InteractionEvent(
            type="coffee_served",
            customer_id=customer_id,
            coffee_quality=result.quality_score,
            response_time=self.rng.uniform(10, 150),
            served=ServedCoffee(
                roast=preset,
                flavor=describe_flavor(result.flavor_profile),
                quality=result.quality_score,
            ),
            flavor_profile=result.flavor_profile,
            remembered_order=customer.visit_count > 3 and self.rng.random() < 0.3,
            context=GameContext(shop_busyness=busyness),
        )

    def _next_event(self, customer_id: str, busyness: float) -> InteractionEvent:
        roll = self.rng.random()
        if roll < self.ignore_probability:
            return InteractionEvent(
                type="customer_ignored",
                customer_id=customer_id,
                context=GameContext(shop_busyness=busyness),
            )
        if roll < self.ignore_probability + self.recommendation_probability:
            return InteractionEvent(
                type="recommendation_given",
                customer_id=customer_id,
                response_time=self.rng.uniform(5, 40),
                recommended_flavor=self.rng.choice(FLAVOR_DESCRIPTORS),
                context=GameContext(shop_busyness=busyness),
            )
        return self._serve(customer_id, busyness)

    def simulate_timeslot(self, day: int, slot: str, weather: str) -> List[SimulationEvent]:
        """Run one time slot across all customers."""
        _, visit_probability = self.TIME_SLOTS[slot]
        visitors = [cid for cid in self.customer_ids if self.rng.random() < visit_probability]
        busyness = len(visitors) / max(1, len(self.customer_ids))
        timestamp = self.clock.now().strftime("%Y-%m-%d %H:%M")

        step_events = []
        for cid in visitors:
            self.manager.apply_context(
                cid,
                PersonalityContext(time_of_day=slot, weather=weather, stress=self.rng.random()),
            )
            event = self._next_event(cid, busyness)
            outcome = self.manager.process_interaction(event)
            prefs = self.manager.get_customer(cid).preferences

            step_events.append(
                SimulationEvent(
                    timestamp=timestamp,
                    day=day,
                    customer_id=cid,
                    event_type=event.type,
                    satisfaction=round(outcome.satisfaction, 2),
                    mood=outcome.mood,
                    served_roast=event.served.roast if event.served else None,
                    served_flavor=event.served.flavor if event.served else None,
                    quality=event.coffee_quality,
                    preferred_roast=prefs.roast,
                    preferred_flavor=prefs.flavor,
                    loyalty=round(outcome.loyalty, 2),
                    triggers=",".join(outcome.triggers),
                )
            )
        return step_events

    def run_simulation(self, start_date: datetime, num_days: int = 7) -> pd.DataFrame:
        """
        Run the full simulation.

        Returns:
            DataFrame of all simulation events.
        """
        logger.info("Simulation start: %s ~ %d days, %d customers",
                    start_date.strftime("%Y-%m-%d"), num_days, len(self.customer_ids))
        self.warn_if_clock_behind(start_date)

        all_events: List[SimulationEvent] = []
        for day in range(num_days):
            day_start = start_date + timedelta(days=day)
            weather = self.rng.choice(WEATHER)

            for slot, (hour, _) in self.TIME_SLOTS.items():
                self.clock.set(day_start.replace(hour=hour, minute=0))
                events = self.simulate_timeslot(day + 1, slot, weather)
                all_events.extend(events)
                logger.info("Day %d %s (%s) - visits: %d", day + 1, slot, weather, len(events))

        logger.info("Simulation complete: %d total events", len(all_events))
        self.events = all_events
        return pd.DataFrame([asdict(event) for event in all_events])

    def customer_summary(self) -> Dict[str, Dict]:
        return {cid: self.manager.get_customer(cid).get_analytics() for cid in self.customer_ids}
