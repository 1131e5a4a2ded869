"""
Data Layer - customer state persistence.

Provides:
- CustomerStore: key -> text storage interface
- InMemoryCustomerStore: dict-backed store (tests, throwaway runs)
- JsonFileCustomerStore: one JSON file per key under a directory
"""

from src.data_layer.customer_store import (
    CustomerStore,
    InMemoryCustomerStore,
    JsonFileCustomerStore,
)

__all__ = [
    "CustomerStore",
    "InMemoryCustomerStore",
    "JsonFileCustomerStore",
]
