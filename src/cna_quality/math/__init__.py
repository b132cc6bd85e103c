"""Mathematical primitives for architecture measures."""

from .entropy import Entropy
from .statistics import Statistics

__all__ = ["Entropy", "Statistics"]
