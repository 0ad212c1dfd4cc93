"""Configuration management."""

from config.settings import RotationSettings, get_settings

__all__ = [
    "RotationSettings",
    "get_settings",
]
