"""
Map rendering and PNG export.

Draws a GenerationResult as a stylized map: terrain colored by height band,
rivers as polylines, cities as outlined circles and mountain glyphs on the
highest ground. Uses the matplotlib object API (no pyplot state) so it is
safe to call from API worker threads.
"""

import io
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
import structlog
from matplotlib.colors import to_rgb
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Polygon

from ..core.pipeline import GenerationParams, GenerationResult
from ..core.prng import LcgPRNG

logger = structlog.get_logger()

# (upper height bound, color); a height takes the first band it fits under
TERRAIN_COLORS: List[Tuple[float, str]] = [
    (0.2, "#0077be"),  # Deep water
    (0.3, "#0099cc"),  # Shallow water
    (0.4, "#e9d8a6"),  # Beach/sand
    (0.5, "#94c973"),  # Lowland
    (0.7, "#53a548"),  # Forest/hills
    (0.8, "#8b5e34"),  # Mountains
    (1.0, "#ffffff"),  # Snow peaks
]

RIVER_COLOR = "#0077be"
RIVER_WIDTH_PX = 2
CITY_COLOR = "#d62828"
CITY_OUTLINE = "#000000"
MOUNTAIN_COLOR = "#8b5e34"
SNOW_COLOR = "#ffffff"
MOUNTAIN_HEIGHT = 0.75
MOUNTAIN_SAMPLES = 50
DPI = 100


def export_filename(seed: int) -> str:
    """Download name for a rendered map."""
    return f"fantasy-map-{seed}.png"


def colorize(height_field: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Map heights to terrain colors.

    Returns:
        uint8 array of shape (height, width, 3)
    """
    thresholds = np.array([bound for bound, _ in TERRAIN_COLORS])
    palette = np.array(
        [[round(c * 255) for c in to_rgb(color)] for _, color in TERRAIN_COLORS],
        dtype=np.uint8,
    )
    heights = np.asarray(height_field, dtype=np.float64).reshape(height, width)
    band = np.searchsorted(thresholds, heights, side="left")
    # Anything above the last band falls back to the first color
    band[band >= len(TERRAIN_COLORS)] = 0
    return palette[band]


def mountain_sites(
    height_field: np.ndarray,
    width: int,
    height: int,
    seed: int,
    count: int = MOUNTAIN_SAMPLES,
) -> List[Tuple[int, int]]:
    """Sample ``count`` cells and keep those on high ground."""
    prng = LcgPRNG(seed)
    sites = []
    for _ in range(count):
        x = prng.randint(width)
        y = prng.randint(height)
        if height_field[y * width + x] > MOUNTAIN_HEIGHT:
            sites.append((x, y))
    return sites


def _px_to_points(px: float) -> float:
    return px * 72.0 / DPI


def render_map(result: GenerationResult, params: GenerationParams) -> Figure:
    """
    Draw the full map onto a figure sized one pixel per grid cell.

    Args:
        result: Output of the generation pipeline
        params: Parameters used to produce ``result``

    Returns:
        matplotlib Figure ready to save
    """
    width, height = params.width, params.height
    fig = Figure(figsize=(width / DPI, height / DPI), dpi=DPI)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_axis_off()
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)

    ax.imshow(
        colorize(result.height_field, width, height),
        extent=(0, width, height, 0),
        interpolation="nearest",
    )

    for river in result.rivers:
        xs = [index % width for index in river]
        ys = [index // width for index in river]
        ax.plot(xs, ys, color=RIVER_COLOR, linewidth=_px_to_points(RIVER_WIDTH_PX))

    for city in result.cities:
        ax.add_patch(
            Circle(
                (city.x, city.y),
                city.size + 2,
                facecolor=CITY_COLOR,
                edgecolor=CITY_OUTLINE,
                linewidth=_px_to_points(1),
            )
        )

    for x, y in mountain_sites(result.height_field, width, height, params.seed):
        ax.add_patch(
            Polygon([(x, y - 5), (x - 5, y + 5), (x + 5, y + 5)], color=MOUNTAIN_COLOR)
        )
        ax.add_patch(Polygon([(x, y - 3), (x - 2, y), (x + 2, y)], color=SNOW_COLOR))

    return fig


def render_png(result: GenerationResult, params: GenerationParams) -> bytes:
    """Render the map and return PNG bytes."""
    fig = render_map(result, params)
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=DPI)
    return buffer.getvalue()


def save_png(
    result: GenerationResult,
    params: GenerationParams,
    path: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Write the rendered map to ``path``.

    Defaults to ``fantasy-map-{seed}.png`` in the working directory.
    """
    path = Path(path) if path is not None else Path(export_filename(params.seed))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_png(result, params))
    logger.info("Map exported", path=str(path), seed=params.seed)
    return path
