"""Configuration for wiretime."""

from wiretime.config.settings import Settings

__all__ = ["Settings"]
