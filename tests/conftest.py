import random
from datetime import datetime

import pytest

from src.data_layer.customer_store import InMemoryCustomerStore
from src.simulation_layer.clock import ManualClock
from src.simulation_layer.learning_manager import CustomerLearningManager


class PinnedRandom(random.Random):
    """random() always returns 0.0: every probability gate passes, uniform(a, b)
    returns a, and choice() picks the first candidate."""

    def random(self):
        return 0.0


@pytest.fixture
def clock():
    return ManualClock(datetime(2025, 2, 3, 9, 0))


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def pinned_rng():
    return PinnedRandom(7)


@pytest.fixture
def store():
    return InMemoryCustomerStore()


@pytest.fixture
def manager(store, rng, clock):
    return CustomerLearningManager(store=store, rng=rng, clock=clock)
