"""Information theory: Shannon entropy over count distributions."""

import math
from collections.abc import Mapping
from typing import Hashable, Union


class Entropy:
    """Information entropy calculations."""

    @staticmethod
    def shannon(distribution: Mapping[Hashable, Union[int, float]], base: float = 2.0) -> float:
        """
        Compute Shannon entropy H(X) = -Σ p(x) log_b p(x).

        Args:
            distribution: Dictionary with event -> count mapping
            base: Logarithm base (2 = bits, 10 = hartleys, e = nats)

        Returns:
            Entropy in units of the given base
        """
        total = sum(distribution.values())
        if total == 0:
            return 0.0

        entropy = 0.0
        for count in distribution.values():
            p = count / total
            if p > 0:
                entropy -= p * math.log(p, base)

        return entropy
