"""Standard normal deviates via the Box-Muller transform."""

import math

import numpy as np

from . import UniformSource

TWO_PI = 2.0 * math.pi


class BoxMullerNormal:
    """Draws N(0, 1) deviates from a uniform source.

    Each deviate consumes two uniforms ``u`` then ``v`` and returns
    ``sqrt(-2 ln u) * cos(2 pi v)``. A uniform that lands exactly on 0 is
    re-drawn, since ``ln(0)`` is undefined.
    """

    def __init__(self, uniform: UniformSource):
        self._uniform = uniform

    def _nonzero_uniform(self) -> float:
        u = float(self._uniform.random())
        while u == 0.0:
            u = float(self._uniform.random())
        return u

    def draw(self) -> float:
        """Return a single standard normal deviate."""
        u = self._nonzero_uniform()
        v = self._nonzero_uniform()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(TWO_PI * v)

    def draw_many(self, size: int | tuple[int, ...]) -> np.ndarray:
        """Return an array of deviates with the given shape.

        Uniforms are laid out as ``(..., 2)`` pairs so the stream is consumed
        in the same order as repeated :meth:`draw` calls.
        """
        shape = (size,) if isinstance(size, int) else tuple(size)
        uv = np.asarray(self._uniform.random(shape + (2,)), dtype=float)

        zeros = uv == 0.0
        while zeros.any():
            uv[zeros] = self._uniform.random(int(zeros.sum()))
            zeros = uv == 0.0

        u = uv[..., 0]
        v = uv[..., 1]
        return np.sqrt(-2.0 * np.log(u)) * np.cos(TWO_PI * v)
