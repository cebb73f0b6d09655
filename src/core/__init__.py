"""Core application wiring and dependency injection."""

from .dependencies import DependencyContainer

__all__ = ["DependencyContainer"]
