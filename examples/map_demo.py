#!/usr/bin/env python3
"""
Simple demo script showing map generation capabilities.
"""

import numpy as np
from py_mapgen.core import GenerationParams, generate
from py_mapgen.render import save_png, export_filename


def main():
    """Demonstrate map generation with a few seeds."""
    print("Py-MapGen Demo")
    print("=" * 40)

    for seed in (123456, 42, 2024):
        params = GenerationParams(seed=seed, width=400, height=300)
        result = generate(params)
        field = result.height_field

        water = np.sum(field <= 0.3) / field.size * 100
        peaks = np.sum(field > 0.8) / field.size * 100

        print(f"\nSeed {seed}:")
        print("-" * 30)
        print(f"  Water: {water:.1f}%  Peaks: {peaks:.1f}%")
        print(f"  Rivers: {len(result.rivers)}"
              f" (longest {max((len(r) for r in result.rivers), default=0)} cells)")
        for city in result.cities:
            print(f"  City at ({city.x}, {city.y}) size {city.size:.2f}")

        path = save_png(result, params, export_filename(seed))
        print(f"  Saved {path}")


if __name__ == "__main__":
    main()
