"""
Map generation pipeline.

Runs the phases in order, each with its own PRNG seeded from the run seed:
noise field -> rivers -> cities.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple, Union

import numpy as np
import structlog
from pydantic import BaseModel, Field, ValidationError

from .exceptions import InvalidParameterError
from .hydrology import RiverPath, trace
from .noise import synthesize
from .settlements import City, place

logger = structlog.get_logger()


class GenerationParams(BaseModel):
    """Parameters for one generation run."""

    seed: int = Field(default=123456, ge=0, lt=2**32, description="Run seed")
    width: int = Field(default=800, ge=1, description="Grid width in cells")
    height: int = Field(default=600, ge=1, description="Grid height in cells")
    scale: float = Field(default=100.0, description="Noise scale")
    octaves: int = Field(default=4, ge=1, description="Number of noise layers")
    persistence: float = Field(default=0.5, description="Amplitude decay per octave")
    lacunarity: float = Field(default=2.0, description="Frequency growth per octave")
    river_count: int = Field(default=5, ge=0, description="River attempts")
    min_river_length: int = Field(default=20, ge=0, description="Shortest river kept")
    city_count: int = Field(default=8, ge=0, description="Target number of cities")


@dataclass(frozen=True, eq=False)
class GenerationResult:
    """Output of a generation run; the height field is read-only."""

    height_field: np.ndarray
    rivers: Tuple[Tuple[int, ...], ...]
    cities: Tuple[City, ...]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "height_field": self.height_field.tolist(),
            "rivers": [list(river) for river in self.rivers],
            "cities": [city.model_dump() for city in self.cities],
        }


def coerce_params(params: Union[GenerationParams, Mapping[str, Any]]) -> GenerationParams:
    """Validate a mapping into GenerationParams."""
    if isinstance(params, GenerationParams):
        return params
    try:
        return GenerationParams(**params)
    except ValidationError as e:
        raise InvalidParameterError(
            f"Invalid generation parameters: {e.error_count()} error(s)",
            errors=e.errors(),
        ) from e


def generate(params: Union[GenerationParams, Mapping[str, Any]]) -> GenerationResult:
    """
    Generate a height field, rivers and cities.

    Args:
        params: GenerationParams or a mapping of its fields

    Returns:
        GenerationResult for the rendering layer

    Raises:
        InvalidParameterError: If a mapping fails validation
    """
    params = coerce_params(params)
    start = time.perf_counter()
    logger.info("Starting map generation", **params.model_dump())

    field = synthesize(
        params.width,
        params.height,
        params.seed,
        params.scale,
        params.octaves,
        params.persistence,
        params.lacunarity,
    )
    field.setflags(write=False)

    rivers: List[RiverPath] = trace(
        field,
        params.width,
        params.height,
        params.seed,
        params.river_count,
        params.min_river_length,
    )
    cities = place(
        field, rivers, params.width, params.height, params.seed, params.city_count
    )

    logger.info(
        "Map generation completed",
        seed=params.seed,
        rivers=len(rivers),
        cities=len(cities),
        elapsed_seconds=round(time.perf_counter() - start, 3),
    )
    return GenerationResult(
        height_field=field,
        rivers=tuple(tuple(river) for river in rivers),
        cities=tuple(cities),
    )


def enforce_size_limits(params: GenerationParams, max_width: int, max_height: int) -> None:
    """Reject grids larger than the configured limits."""
    if params.width > max_width or params.height > max_height:
        raise InvalidParameterError(
            f"Map size {params.width}x{params.height} exceeds limit {max_width}x{max_height}"
        )
