"""Application layer modules."""

from .engine import StateEngine
from .config import Config

__all__ = ["StateEngine", "Config"]
