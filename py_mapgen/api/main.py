"""FastAPI main application."""

import random
from typing import List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ..config import settings
from ..core.exceptions import InvalidParameterError
from ..core.pipeline import GenerationParams, enforce_size_limits, generate
from ..render import export_filename, render_png
from ..utils.logging import configure_logging

configure_logging(settings)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Fantasy Map Generator API",
    description="Procedural terrain, rivers and cities",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class MapGenerationRequest(BaseModel):
    """Request to generate a new map."""

    seed: Optional[int] = Field(None, ge=0, lt=2**32, description="Random seed; random if omitted")
    width: int = Field(settings.default_map_width, ge=1, description="Map width")
    height: int = Field(settings.default_map_height, ge=1, description="Map height")
    scale: float = Field(100, ge=50, le=200, description="Noise scale")
    octaves: int = Field(4, ge=1, le=8, description="Noise octaves")
    persistence: float = Field(0.5, ge=0.1, le=1, description="Amplitude decay per octave")
    lacunarity: float = Field(2, ge=1, le=4, description="Frequency growth per octave")
    river_count: int = Field(5, ge=0, le=15, description="River attempts")
    min_river_length: int = Field(20, ge=10, le=50, description="Shortest river kept")
    city_count: int = Field(8, ge=0, le=20, description="Target number of cities")

    def to_params(self) -> GenerationParams:
        data = self.model_dump()
        if data["seed"] is None:
            data["seed"] = random.randrange(1000000)
        return GenerationParams(**data)


class CityInfo(BaseModel):
    """A placed city."""

    x: int
    y: int
    size: float


class MapStatistics(BaseModel):
    """Summary statistics of a generated map."""

    rivers_count: int
    cities_count: int
    longest_river: int
    mean_height: float


class MapGenerationResponse(BaseModel):
    """Generated map data."""

    seed: int
    width: int
    height: int
    height_field: List[float]
    rivers: List[List[int]]
    cities: List[CityInfo]
    statistics: MapStatistics


def _run(request: MapGenerationRequest):
    params = request.to_params()
    try:
        enforce_size_limits(params, settings.max_map_width, settings.max_map_height)
        return params, generate(params)
    except InvalidParameterError as e:
        logger.warning("Rejected generation request", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Fantasy Map Generator API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/maps/generate", response_model=MapGenerationResponse)
def generate_map(request: MapGenerationRequest):
    """Generate a map and return its height field, rivers and cities."""
    logger.info("Map generation requested", request=request.model_dump())
    params, result = _run(request)
    data = result.to_dict()

    return MapGenerationResponse(
        seed=params.seed,
        width=params.width,
        height=params.height,
        height_field=data["height_field"],
        rivers=data["rivers"],
        cities=data["cities"],
        statistics=MapStatistics(
            rivers_count=len(result.rivers),
            cities_count=len(result.cities),
            longest_river=max((len(r) for r in result.rivers), default=0),
            mean_height=float(result.height_field.mean()),
        ),
    )


@app.post("/maps/render")
def render_map(request: MapGenerationRequest):
    """Generate a map and return it as a PNG download."""
    logger.info("Map render requested", request=request.model_dump())
    params, result = _run(request)
    png = render_png(result, params)
    return Response(
        content=png,
        media_type="image/png",
        headers={
            "Content-Disposition": f"attachment; filename={export_filename(params.seed)}"
        },
    )
