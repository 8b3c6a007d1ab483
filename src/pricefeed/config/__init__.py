# src/pricefeed/config/__init__.py
"""
Configuration Module

Provides centralized configuration management using Pydantic Settings.
"""

from pricefeed.config.settings import DriverName, ProviderConfig, Settings, settings

__all__ = ["DriverName", "ProviderConfig", "Settings", "settings"]
