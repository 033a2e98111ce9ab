"""Data models for tempstage."""

from .schemas import TempSettings

__all__ = ["TempSettings"]
