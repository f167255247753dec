# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Normally distributed return sampling.

Returns are drawn with the Box-Muller transform from a uniform random source
that is passed in, so a seeded generator gives a reproducible sequence.
"""

import math
from typing import Optional

import numpy as np

TWO_PI = 2.0 * math.pi


class ReturnSampler:
    """Draws per-period returns from a normal distribution.

    Each sample consumes two uniform draws u1, u2 in [0, 1):

        z = sqrt(-2 ln u1) * cos(2 pi u2)
        return = mean + std_dev * z

    A u1 of exactly 0 is redrawn, since ln(0) is undefined.

    Example:
        >>> sampler = ReturnSampler(np.random.default_rng(42))
        >>> r = sampler.sample(0.01, 0.0433)
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        """Initialize the sampler.

        Args:
            rng: Source of uniform randomness. Anything with a numpy
                Generator-style ``random()`` method works. If None, a
                freshly seeded generator is created.
        """
        self.rng = rng if rng is not None else np.random.default_rng()

    def _nonzero_uniform(self) -> float:
        u = self.rng.random()
        while u == 0.0:
            u = self.rng.random()
        return float(u)

    def standard_normal(self) -> float:
        """Draw one standard normal value."""
        u1 = self._nonzero_uniform()
        u2 = float(self.rng.random())
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(TWO_PI * u2)

    def sample(self, mean: float, std_dev: float) -> float:
        """Draw one return with the given per-period mean and standard deviation."""
        return mean + std_dev * self.standard_normal()

    def sample_many(self, mean: float, std_dev: float, size: int) -> np.ndarray:
        """Draw ``size`` returns at once.

        Uses the same transform and zero guard as :meth:`sample`, but draws
        the uniforms in blocks, so the values differ from ``size`` calls to
        :meth:`sample` on the same generator.
        """
        u1 = self.rng.random(size)
        zeros = u1 == 0.0
        while zeros.any():
            u1[zeros] = self.rng.random(int(zeros.sum()))
            zeros = u1 == 0.0
        u2 = self.rng.random(size)

        z = np.sqrt(-2.0 * np.log(u1)) * np.cos(TWO_PI * u2)
        return mean + std_dev * z
