"""
Map rendering.

This package provides:
- Terrain color banding
- Matplotlib drawing of rivers, cities and mountains
- PNG export
"""

from .map_renderer import (
    TERRAIN_COLORS, colorize, mountain_sites, render_map, render_png,
    save_png, export_filename
)

__all__ = [
    'TERRAIN_COLORS', 'colorize', 'mountain_sites', 'render_map',
    'render_png', 'save_png', 'export_filename'
]
