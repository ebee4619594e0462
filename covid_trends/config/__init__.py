"""Configuration."""

from covid_trends.config.settings import Settings, RESOURCES, DEFAULT_BASE_URL

__all__ = ["Settings", "RESOURCES", "DEFAULT_BASE_URL"]
