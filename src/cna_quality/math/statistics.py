"""Descriptive statistics used by the measure calculators."""

from typing import Sequence, Union

import numpy as np


class Statistics:
    """Basic statistical helpers."""

    @staticmethod
    def mean(values: Sequence[Union[int, float]]) -> float:
        """Compute arithmetic mean."""
        if len(values) == 0:
            return 0.0
        return float(np.mean(values))
