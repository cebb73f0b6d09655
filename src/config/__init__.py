"""Configuration management for the probate leads dashboard."""

from .api import APIConfig
from .charts import ChartConfig
from .settings import Settings

__all__ = ["Settings", "ChartConfig", "APIConfig"]
