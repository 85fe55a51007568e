"""Configuration store adapters for the order limiter."""

from app.adapters.settings_store.base import AbstractSettingsStore
from app.adapters.settings_store.in_memory import InMemorySettingsStore, build_settings_store

__all__ = ["AbstractSettingsStore", "InMemorySettingsStore", "build_settings_store"]
