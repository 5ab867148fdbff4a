"""Runtime services: telemetry and environment settings."""

from .settings import EngineSettings

__all__ = ["EngineSettings"]
