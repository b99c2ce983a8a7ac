"""
River generation by greedy steepest descent.

Each river attempt:
1. Samples a source cell at mid-to-high elevation
2. Walks to the lowest of the 8 neighbours while that neighbour is lower
3. Stops at a sink, the map edge, a revisited cell or the length cap

Paths shorter than the minimum length are dropped entirely.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .prng import LcgPRNG

logger = structlog.get_logger()

RiverPath = List[int]

# Row-major scan order; ties keep the first neighbour found
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


@dataclass
class RiverOptions:
    """River tracing thresholds."""

    source_min_height: float = 0.6  # Lowest height accepted as a source
    source_max_height: float = 0.8  # Highest height accepted as a source
    source_attempts: int = 100  # Samples per river before giving up
    max_path_length: int = 1000  # Loop-safety cap on path points
    out_of_bounds_height: float = 1.0  # Height reported outside the grid


class RiverTracer:
    """Traces downhill river paths over a normalized height field."""

    def __init__(
        self,
        height_field: np.ndarray,
        width: int,
        height: int,
        options: Optional[RiverOptions] = None,
    ):
        """
        Initialize the tracer.

        Args:
            height_field: Flat row-major heights in [0, 1]
            width: Grid width
            height: Grid height
            options: Tracing thresholds
        """
        self.heights = height_field
        self.width = width
        self.height = height
        self.options = options or RiverOptions()

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def height_at(self, x: int, y: int) -> float:
        """Height at (x, y); outside the grid counts as high ground."""
        if not self.in_bounds(x, y):
            return self.options.out_of_bounds_height
        return float(self.heights[y * self.width + x])

    def _is_source(self, x: int, y: int) -> bool:
        h = self.height_at(x, y)
        return self.options.source_min_height <= h <= self.options.source_max_height

    def find_source(self, prng: LcgPRNG) -> Optional[Tuple[int, int]]:
        """
        Sample a river source cell.

        One leading (x, y) pair is drawn and discarded before the search so
        the draw order matches the reference stream.

        Returns:
            (x, y) of the first qualifying sample, or None if none was found
        """
        prng.randint(self.width)
        prng.randint(self.height)

        for _ in range(self.options.source_attempts):
            x = prng.randint(self.width)
            y = prng.randint(self.height)
            if self._is_source(x, y):
                return x, y
        return None

    def lowest_neighbor(self, x: int, y: int) -> Optional[Tuple[int, int]]:
        """Strictly lowest neighbour lower than (x, y), or None at a sink."""
        lowest = None
        lowest_height = self.height_at(x, y)
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            neighbor_height = self.height_at(nx, ny)
            if neighbor_height < lowest_height:
                lowest_height = neighbor_height
                lowest = (nx, ny)
        return lowest

    def walk(self, start_x: int, start_y: int) -> RiverPath:
        """
        Follow steepest descent from a start cell.

        The start index is always the first element.
        """
        path = [start_y * self.width + start_x]
        visited = {path[0]}
        x, y = start_x, start_y

        while len(path) < self.options.max_path_length:
            step = self.lowest_neighbor(x, y)
            if step is None:
                break  # Sink

            x, y = step
            if not self.in_bounds(x, y):
                break  # Flowed off the map

            index = y * self.width + x
            if index in visited:
                break  # Loop
            visited.add(index)
            path.append(index)

        return path

    def trace(
        self, prng: LcgPRNG, river_count: int, min_river_length: int
    ) -> List[RiverPath]:
        """
        Run ``river_count`` attempts and keep the long-enough paths.

        Returns:
            Paths in the order their attempts succeeded
        """
        rivers: List[RiverPath] = []
        skipped_sources = 0
        too_short = 0

        for _ in range(river_count):
            source = self.find_source(prng)
            if source is None:
                skipped_sources += 1
                continue

            path = self.walk(*source)
            if len(path) >= min_river_length:
                rivers.append(path)
            else:
                too_short += 1

        logger.info(
            "Rivers traced",
            requested=river_count,
            kept=len(rivers),
            no_source=skipped_sources,
            too_short=too_short,
        )
        return rivers


def trace(
    height_field: np.ndarray,
    width: int,
    height: int,
    seed: int,
    river_count: int,
    min_river_length: int,
    options: Optional[RiverOptions] = None,
) -> List[RiverPath]:
    """Trace rivers with a PRNG freshly seeded from ``seed``."""
    tracer = RiverTracer(height_field, width, height, options)
    return tracer.trace(LcgPRNG(seed), river_count, min_river_length)
