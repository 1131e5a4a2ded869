"""
FastAPI dependency injection providers.
"""

from functools import lru_cache

from config import Settings, get_settings
from src.chemistry_layer.pipeline import RoastPipeline
from src.data_layer.customer_store import JsonFileCustomerStore
from src.simulation_layer.learning_manager import CustomerLearningManager


@lru_cache
def get_cached_settings() -> Settings:
    return get_settings()


@lru_cache
def get_pipeline() -> RoastPipeline:
    return RoastPipeline()


@lru_cache
def get_learning_manager() -> CustomerLearningManager:
    settings = get_cached_settings()
    store = JsonFileCustomerStore(settings.paths.data_dir)
    return CustomerLearningManager(store=store, settings=settings.customer)
