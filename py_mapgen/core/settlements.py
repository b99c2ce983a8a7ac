"""
City placement by rejection sampling.

Candidates are drawn at random and accepted only if they:
1. Sit on moderate terrain (height band)
2. Pass the river bias (non-riverside sites are mostly rejected)
3. Keep the minimum spacing to every city already placed

Accepted cities grow larger near rivers and on ideal terrain.
"""

import math
from typing import Iterable, List, Optional, Set

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field

from .prng import LcgPRNG

logger = structlog.get_logger()


class CityOptions(BaseModel):
    """City placement parameters."""

    min_height: float = Field(default=0.3, description="Lowest buildable height")
    max_height: float = Field(default=0.7, description="Highest buildable height")
    ideal_min_height: float = Field(
        default=0.4, description="Lower (exclusive) bound of ideal terrain"
    )
    ideal_max_height: float = Field(
        default=0.6, description="Upper (exclusive) bound of ideal terrain"
    )
    river_radius: int = Field(default=3, description="Square radius of river proximity")
    inland_skip_chance: float = Field(
        default=0.7, description="Chance to reject a site not near a river"
    )
    attempts_per_city: int = Field(default=10, description="Attempt budget multiplier")
    spacing_divisor: float = Field(
        default=10.0, description="Minimum spacing is width / this"
    )
    river_size_bonus: float = Field(default=1.0, description="Size bonus near rivers")
    ideal_size_bonus: float = Field(
        default=0.5, description="Size bonus on ideal terrain"
    )


class City(BaseModel):
    """A placed settlement."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(description="Grid X coordinate")
    y: int = Field(description="Grid Y coordinate")
    size: float = Field(gt=0, description="Relative settlement size")


class CityPlacer:
    """Places cities on a height field given the traced rivers."""

    def __init__(
        self,
        height_field: np.ndarray,
        rivers: Iterable[List[int]],
        width: int,
        height: int,
        options: Optional[CityOptions] = None,
    ) -> None:
        self.heights = height_field
        self.width = width
        self.height = height
        self.options = options or CityOptions()
        self.river_points: Set[int] = {index for river in rivers for index in river}
        self.min_distance = width / self.options.spacing_divisor

    def is_near_river(self, x: int, y: int, distance: Optional[int] = None) -> bool:
        """Whether any river cell lies in the square of ``distance`` around (x, y)."""
        if not self.river_points:
            return False
        if distance is None:
            distance = self.options.river_radius

        for check_y in range(max(0, y - distance), min(self.height, y + distance + 1)):
            row = check_y * self.width
            for check_x in range(max(0, x - distance), min(self.width, x + distance + 1)):
                if row + check_x in self.river_points:
                    return True
        return False

    def is_too_close(self, x: int, y: int, cities: List[City]) -> bool:
        for city in cities:
            if math.sqrt((city.x - x) ** 2 + (city.y - y) ** 2) < self.min_distance:
                return True
        return False

    def city_size(self, prng: LcgPRNG, terrain_height: float, near_river: bool) -> float:
        opts = self.options
        size = 1 + prng.random() * 2
        if near_river:
            size += opts.river_size_bonus
        if opts.ideal_min_height < terrain_height < opts.ideal_max_height:
            size += opts.ideal_size_bonus
        return size

    def place(self, prng: LcgPRNG, city_count: int) -> List[City]:
        """
        Place up to ``city_count`` cities.

        The attempt budget is ``city_count * attempts_per_city``; running out
        returns whatever was placed.
        """
        opts = self.options
        cities: List[City] = []
        max_attempts = city_count * opts.attempts_per_city
        attempts = 0

        while len(cities) < city_count and attempts < max_attempts:
            attempts += 1

            x = prng.randint(self.width)
            y = prng.randint(self.height)
            terrain_height = float(self.heights[y * self.width + x])

            if terrain_height < opts.min_height or terrain_height > opts.max_height:
                continue

            near_river = self.is_near_river(x, y)
            if not near_river and prng.random() < opts.inland_skip_chance:
                continue

            if self.is_too_close(x, y, cities):
                continue

            size = self.city_size(prng, terrain_height, near_river)
            cities.append(City(x=x, y=y, size=size))

        if len(cities) < city_count:
            logger.warning(
                "City attempt budget exhausted",
                requested=city_count,
                placed=len(cities),
                attempts=attempts,
            )
        logger.info("Cities placed", placed=len(cities), attempts=attempts)
        return cities


def place(
    height_field: np.ndarray,
    rivers: Iterable[List[int]],
    width: int,
    height: int,
    seed: int,
    city_count: int,
    options: Optional[CityOptions] = None,
) -> List[City]:
    """Place cities with a PRNG freshly seeded from ``seed``."""
    placer = CityPlacer(height_field, rivers, width, height, options)
    return placer.place(LcgPRNG(seed), city_count)
