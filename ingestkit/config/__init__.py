"""Configuration layer: Settings and constants."""

from ingestkit.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
