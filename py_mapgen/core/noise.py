"""
Noise field synthesis for terrain generation.

This module builds the height field:
- Seeded 2D simplex noise (permutation table drawn from the run's PRNG)
- Multi-octave accumulation with persistence/lacunarity
- Normalization of the accumulated field into [0, 1]

All sampling is vectorized with NumPy, one full-grid pass per octave.
"""

import math
from typing import Callable, Optional

import numpy as np
import structlog

from .prng import LcgPRNG

logger = structlog.get_logger()

F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0

# 12 gradient directions, indexed by perm % 12
GRAD2 = np.array(
    [
        [1, 1], [-1, 1], [1, -1], [-1, -1],
        [1, 0], [-1, 0], [1, 0], [-1, 0],
        [0, 1], [0, -1], [0, 1], [0, -1],
    ],
    dtype=np.float64,
)

MIN_SCALE = 0.0001
OFFSET_RANGE = 100000


def build_permutation_table(random: Callable[[], float]) -> np.ndarray:
    """
    Shuffle 0..255 with the given random stream and double it to 512 entries.

    Consumes exactly 255 values from ``random``.
    """
    p = list(range(256))
    for i in range(255):
        r = i + int(random() * (256 - i))
        p[i], p[r] = p[r], p[i]
    return np.array(p + p, dtype=np.int64)


class SimplexNoise:
    """
    Seed-dependent 2D simplex noise.

    The permutation table is drawn from the supplied random stream, so two
    samplers built from identically seeded streams agree exactly.
    """

    def __init__(self, random: Callable[[], float]):
        """
        Initialize the sampler.

        Args:
            random: Callable returning floats in [0, 1); 255 draws are taken
        """
        self.perm = build_permutation_table(random)
        grad_index = self.perm % 12
        self.perm_grad_x = GRAD2[grad_index, 0]
        self.perm_grad_y = GRAD2[grad_index, 1]

    def _corner(self, t, gi, dx, dy):
        """Contribution of one simplex corner."""
        t = np.asarray(t, dtype=np.float64)
        contribution = np.zeros_like(t)
        active = t >= 0
        if np.any(active):
            ta = t[active] * t[active]
            gx = self.perm_grad_x[gi[active]]
            gy = self.perm_grad_y[gi[active]]
            contribution[active] = ta * ta * (gx * dx[active] + gy * dy[active])
        return contribution

    def noise2d(self, x, y):
        """
        Sample noise at one point or an array of points.

        Returns values in roughly [-1, 1] with the same shape as the inputs.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        scalar = x.ndim == 0
        x = np.atleast_1d(x)
        y = np.atleast_1d(y)

        # Skew input space to find the simplex cell
        s = (x + y) * F2
        i = np.floor(x + s).astype(np.int64)
        j = np.floor(y + s).astype(np.int64)
        t = (i + j) * G2
        x0 = x - (i - t)
        y0 = y - (j - t)

        # Lower or upper triangle of the cell
        upper = x0 > y0
        i1 = np.where(upper, 1, 0)
        j1 = np.where(upper, 0, 1)

        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2
        x2 = x0 - 1.0 + 2.0 * G2
        y2 = y0 - 1.0 + 2.0 * G2

        ii = i & 255
        jj = j & 255
        perm = self.perm

        n0 = self._corner(0.5 - x0 * x0 - y0 * y0, ii + perm[jj], x0, y0)
        n1 = self._corner(
            0.5 - x1 * x1 - y1 * y1, ii + i1 + perm[jj + j1], x1, y1
        )
        n2 = self._corner(0.5 - x2 * x2 - y2 * y2, ii + 1 + perm[jj + 1], x2, y2)

        result = 70.0 * (n0 + n1 + n2)
        return float(result[0]) if scalar else result


def normalize(values: np.ndarray) -> np.ndarray:
    """
    Rescale values into [0, 1] using the global min/max.

    A constant field has no range and maps to all zeros.
    """
    min_value = float(np.min(values))
    max_value = float(np.max(values))
    if max_value == min_value:
        return np.zeros_like(values, dtype=np.float64)
    return (values - min_value) / (max_value - min_value)


def synthesize(
    width: int,
    height: int,
    seed: int,
    scale: float,
    octaves: int,
    persistence: float,
    lacunarity: float,
    prng: Optional[LcgPRNG] = None,
) -> np.ndarray:
    """
    Generate a normalized multi-octave noise height field.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        seed: Run seed; ignored when ``prng`` is given
        scale: Noise scale, non-positive values are clamped
        octaves: Number of noise layers
        persistence: Amplitude decay per octave
        lacunarity: Frequency growth per octave
        prng: Optional pre-built stream for this phase

    Returns:
        Flat row-major float64 array of ``width * height`` values in [0, 1]
    """
    random = prng if prng is not None else LcgPRNG(seed)
    sampler = SimplexNoise(random.random)

    if scale <= 0:
        scale = MIN_SCALE

    offsets = [
        (random.random() * OFFSET_RANGE, random.random() * OFFSET_RANGE)
        for _ in range(octaves)
    ]

    ys, xs = np.mgrid[0:height, 0:width]
    xs = xs.astype(np.float64).ravel()
    ys = ys.astype(np.float64).ravel()

    field = np.zeros(width * height, dtype=np.float64)
    amplitude = 1.0
    frequency = 1.0
    for offset_x, offset_y in offsets:
        sample_x = (xs / scale) * frequency + offset_x
        sample_y = (ys / scale) * frequency + offset_y
        field += sampler.noise2d(sample_x, sample_y) * amplitude
        amplitude *= persistence
        frequency *= lacunarity

    logger.debug(
        "Noise accumulated",
        width=width,
        height=height,
        octaves=octaves,
        raw_min=float(field.min()) if field.size else None,
        raw_max=float(field.max()) if field.size else None,
    )

    if field.size == 0:
        return field
    return normalize(field)
