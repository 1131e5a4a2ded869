"""
Customer Learning Manager: service events -> satisfaction -> preference
evolution and personality adaptation, plus café-wide metrics.

Flow per interaction:
1. Load (or create) the customer record
2. Weekly natural drift of preferences
3. Score the cup against the customer's tastes and mood
4. Evolve preferences from the served coffee
5. Detect discrete behaviour triggers and adapt personality
6. Update global metrics and persist
"""

import json
import logging
import random
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from config import get_settings
from config.settings import CustomerSettings
from src.data_layer.customer_store import CustomerStore, InMemoryCustomerStore
from src.simulation_layer.clock import Clock
from src.simulation_layer.models import InteractionEvent
from src.simulation_layer.persona.customer import Customer
from src.simulation_layer.persona.personality import PersonalityContext, PersonalityEngine
from src.simulation_layer.persona.preferences import PreferenceEngine
from src.simulation_layer.satisfaction import evaluate, infer_mood, interaction_satisfaction

logger = logging.getLogger(__name__)

GLOBAL_METRICS_KEY = "global_metrics"

ADAPTATION_DELTA = 0.1
STREAK_LENGTH = 3
GOOD_STREAK_THRESHOLD = 80
POOR_STREAK_THRESHOLD = 40
IGNORED_STREAK_LENGTH = 2


@dataclass
class PlayerMetrics:
    """Café-wide running metrics."""
    total_customers_served: int = 0
    average_satisfaction: float = 50.0
    average_service_time: float = 60.0  # seconds
    specialty_recognition: float = 0.0  # how often regulars get great service


@dataclass
class InteractionOutcome:
    customer_id: str
    event_type: str
    satisfaction: float
    mood: str
    triggers: List[str] = field(default_factory=list)
    loyalty: float = 0.0


class CustomerLearningManager:
    """Keeps active customers and routes service events through the learning engines."""

    def __init__(
        self,
        store: Optional[CustomerStore] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        settings: Optional[CustomerSettings] = None,
    ):
        self.settings = settings or get_settings().customer
        self.store = store or InMemoryCustomerStore()
        self.rng = rng or random.Random(self.settings.rng_seed)
        self.clock = clock or Clock()

        self.preference_engine = PreferenceEngine(self.rng, self.clock, self.settings)
        self.personality_engine = PersonalityEngine(self.rng, self.clock, self.settings)

        self.active_customers: Dict[str, Customer] = {}
        # One lock per customer id; records are mutated by one writer at a time
        self._customer_locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._metrics_lock = threading.Lock()
        self.metrics = self._load_global_metrics()

    # ------------------------------------------------------------------
    # Customer records
    # ------------------------------------------------------------------

    @staticmethod
    def _key(customer_id: str, part: str) -> str:
        return f"customer_{customer_id}_{part}"

    def customer_lock(self, customer_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._customer_locks.get(customer_id)
            if lock is None:
                lock = self._customer_locks[customer_id] = threading.RLock()
            return lock

    def get_customer(self, customer_id: str, is_new: bool = False) -> Customer:
        """Active record, else stored record, else a freshly generated customer."""
        with self.customer_lock(customer_id):
            return self._get_customer(customer_id, is_new)

    def _get_customer(self, customer_id: str, is_new: bool) -> Customer:
        if customer_id in self.active_customers and not is_new:
            return self.active_customers[customer_id]

        if is_new:
            customer = Customer(
                customer_id=customer_id,
                preferences=self.preference_engine.create_preferences(),
                personality=self.personality_engine.create_profile(),
            )
        else:
            customer = self._load_customer(customer_id)

        self.active_customers[customer_id] = customer
        return customer

    def customer_exists(self, customer_id: str) -> bool:
        return (
            customer_id in self.active_customers
            or self.store.load(self._key(customer_id, "preferences")) is not None
        )

    def _load_customer(self, customer_id: str) -> Customer:
        preferences = self.preference_engine.load(self.store.load(self._key(customer_id, "preferences")))
        personality = self.personality_engine.load(self.store.load(self._key(customer_id, "personality")))
        customer = Customer(customer_id=customer_id, preferences=preferences, personality=personality)

        raw = self.store.load(self._key(customer_id, "relationship"))
        if raw:
            try:
                customer.apply_relationship(json.loads(raw))
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning("Discarding corrupt relationship data for %s: %s", customer_id, e)
        return customer

    def save_customer(self, customer: Customer) -> None:
        cid = customer.customer_id
        self.store.save(self._key(cid, "preferences"), self.preference_engine.dump(customer.preferences))
        self.store.save(self._key(cid, "personality"), self.personality_engine.dump(customer.personality))
        self.store.save(self._key(cid, "relationship"), json.dumps(customer.relationship_dict()))

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def process_interaction(self, event: InteractionEvent) -> InteractionOutcome:
        with self.customer_lock(event.customer_id):
            return self._process_interaction(event)

    def _process_interaction(self, event: InteractionEvent) -> InteractionOutcome:
        customer = self.get_customer(event.customer_id)
        self.preference_engine.apply_natural_drift(customer.preferences)

        cup_satisfaction = None
        if event.type == "coffee_served" and event.flavor_profile is not None:
            cup_satisfaction = evaluate(
                event.flavor_profile,
                customer.preferences,
                customer.personality.effective_intensities(),
                quality_score=event.coffee_quality,
            )

        satisfaction = interaction_satisfaction(event, cup_satisfaction)

        if event.type == "coffee_served" and event.served is not None:
            self.preference_engine.evolve(customer.preferences, event.served, satisfaction)

        customer.ignored_streak = customer.ignored_streak + 1 if event.type == "customer_ignored" else 0
        customer.record_satisfaction(satisfaction)

        fired = []
        for trigger in self._detect_triggers(customer, event, satisfaction):
            if self.personality_engine.adapt(customer.personality, trigger, 1, ADAPTATION_DELTA):
                fired.append(trigger)

        self._update_global_metrics(customer, event, satisfaction)
        self.save_customer(customer)

        outcome = InteractionOutcome(
            customer_id=customer.customer_id,
            event_type=event.type,
            satisfaction=satisfaction,
            mood=infer_mood(satisfaction),
            triggers=fired,
            loyalty=customer.loyalty,
        )
        logger.debug(
            "Customer %s %s: satisfaction=%.1f mood=%s triggers=%s",
            outcome.customer_id, outcome.event_type, satisfaction, outcome.mood, fired,
        )
        return outcome

    def _detect_triggers(self, customer: Customer, event: InteractionEvent, satisfaction: float) -> List[str]:
        triggers = []

        recent = customer.streak(STREAK_LENGTH)
        if len(recent) == STREAK_LENGTH:
            if all(s > GOOD_STREAK_THRESHOLD for s in recent):
                triggers.append("consistently_good_service")
            elif all(s < POOR_STREAK_THRESHOLD for s in recent):
                triggers.append("consistently_poor_service")

        if customer.ignored_streak >= IGNORED_STREAK_LENGTH:
            triggers.append("ignored_repeatedly")

        if event.type == "coffee_served" and event.remembered_order:
            triggers.append("perfect_memory_service")

        if (
            event.type == "recommendation_given"
            and event.recommended_flavor
            and event.recommended_flavor != customer.preferences.flavor
        ):
            triggers.append("introduced_to_new_flavors")

        return triggers

    def apply_context(self, customer_id: str, context: PersonalityContext) -> Customer:
        with self.customer_lock(customer_id):
            customer = self.get_customer(customer_id)
            self.personality_engine.apply_context(customer.personality, context)
            return customer

    # ------------------------------------------------------------------
    # Global metrics
    # ------------------------------------------------------------------

    def _update_global_metrics(self, customer: Customer, event: InteractionEvent, satisfaction: float) -> None:
        with self._metrics_lock:
            m = self.metrics
            m.total_customers_served += 1

            weight = 1 / m.total_customers_served
            m.average_satisfaction = m.average_satisfaction * (1 - weight) + satisfaction * weight

            if event.response_time is not None:
                m.average_service_time = m.average_service_time * (1 - weight) + event.response_time * weight

            # Returning customer getting good service
            if customer.visit_count > 1 and satisfaction > 70:
                m.specialty_recognition += 0.1

            self.store.save(GLOBAL_METRICS_KEY, json.dumps(asdict(m)))

    def _load_global_metrics(self) -> PlayerMetrics:
        raw = self.store.load(GLOBAL_METRICS_KEY)
        metrics = PlayerMetrics()
        if not raw:
            return metrics
        try:
            saved = json.loads(raw)
            for name in asdict(metrics):
                if name in saved:
                    setattr(metrics, name, type(getattr(metrics, name))(saved[name]))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Failed to load global metrics: %s", e)
            return PlayerMetrics()
        return metrics

    def get_global_metrics(self) -> Dict[str, Any]:
        with self._metrics_lock:
            return asdict(self.metrics)

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def get_all_customer_analytics(self) -> List[Dict[str, Any]]:
        return [customer.get_analytics() for customer in list(self.active_customers.values())]

    def analytics_frame(self) -> pd.DataFrame:
        rows = self.get_all_customer_analytics()
        if not rows:
            return pd.DataFrame(columns=["customer_id", "visit_count", "loyalty", "average_satisfaction"])
        return pd.DataFrame(rows).sort_values("customer_id").reset_index(drop=True)

    def generate_player_insights(self) -> Dict[str, List[str]]:
        insights: Dict[str, List[str]] = {
            "strengths": [],
            "improvements": [],
            "loyal_customers": [],
            "recommendations": [],
        }
        m = self.metrics

        if m.average_satisfaction > 75:
            insights["strengths"].append("Excellent customer satisfaction!")
        if m.average_service_time < 45:
            insights["strengths"].append("Quick and efficient service")
        if m.specialty_recognition > 5:
            insights["strengths"].append("Great at remembering regular customers")

        if m.average_satisfaction < 50:
            insights["improvements"].append("Focus on coffee quality and consistency")
        if m.average_service_time > 90:
            insights["improvements"].append("Try to serve customers more quickly")

        for cid, customer in sorted(self.active_customers.items()):
            if customer.loyalty > 80 and customer.visit_count > 3:
                insights["loyal_customers"].append(cid)

        if insights["loyal_customers"]:
            insights["recommendations"].append("You have loyal customers! Consider special offers for regulars.")
        if m.average_satisfaction > 70 and m.total_customers_served > 20:
            insights["recommendations"].append("You're ready for more challenging customers and complex orders!")

        return insights

    def reset_all_learning(self) -> None:
        """Forget every customer and the global metrics (new game)."""
        with self._metrics_lock:
            for key in self.store.keys():
                self.store.delete(key)
            self.active_customers.clear()
            self.metrics = PlayerMetrics()
        logger.info("All customer learning reset")
