#!/usr/bin/env python3
"""
Generate a fantasy map from the command line and export it as PNG.
"""

import argparse
import json
import random
import sys
from pathlib import Path

import structlog

from .config import settings
from .core.exceptions import InvalidParameterError
from .core.pipeline import coerce_params, enforce_size_limits, generate
from .render import export_filename, save_png
from .utils.logging import configure_logging

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a fantasy map")
    parser.add_argument("--seed", type=int, help="Random seed (random if not specified)")
    parser.add_argument("--width", type=int, default=settings.default_map_width, help="Map width")
    parser.add_argument("--height", type=int, default=settings.default_map_height, help="Map height")
    parser.add_argument("--scale", type=float, default=100.0, help="Noise scale")
    parser.add_argument("--octaves", type=int, default=4, help="Noise octaves")
    parser.add_argument("--persistence", type=float, default=0.5, help="Amplitude decay per octave")
    parser.add_argument("--lacunarity", type=float, default=2.0, help="Frequency growth per octave")
    parser.add_argument("--rivers", dest="river_count", type=int, default=5, help="River attempts")
    parser.add_argument("--min-river-length", type=int, default=20, help="Shortest river kept")
    parser.add_argument("--cities", dest="city_count", type=int, default=8, help="Target number of cities")
    parser.add_argument("--output", help="PNG path (default: <output_dir>/fantasy-map-<seed>.png)")
    parser.add_argument("--json", dest="json_path", help="Also write the result as JSON to this path")
    return parser


def main(argv=None) -> int:
    """Entry point for the ``py-mapgen`` command."""
    configure_logging(settings)
    args = build_parser().parse_args(argv)

    values = vars(args).copy()
    output = values.pop("output")
    json_path = values.pop("json_path")
    if values["seed"] is None:
        values["seed"] = random.randrange(1000000)

    try:
        params = coerce_params(values)
        enforce_size_limits(params, settings.max_map_width, settings.max_map_height)
    except InvalidParameterError as e:
        print(f"error: {e}", file=sys.stderr)
        for error in e.errors:
            print(f"  {'.'.join(str(p) for p in error['loc'])}: {error['msg']}", file=sys.stderr)
        return 2

    result = generate(params)

    path = Path(output) if output else Path(settings.output_dir) / export_filename(params.seed)
    save_png(result, params, path)

    if json_path:
        payload = {"params": params.model_dump(), **result.to_dict()}
        json_file = Path(json_path)
        json_file.parent.mkdir(parents=True, exist_ok=True)
        json_file.write_text(json.dumps(payload))
        logger.info("Map data exported", path=json_path)

    print(f"Seed {params.seed}: {len(result.rivers)} rivers, {len(result.cities)} cities -> {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
