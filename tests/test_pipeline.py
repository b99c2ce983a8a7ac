"""
Integration tests for the full generation pipeline.
"""

import math

import numpy as np
import pytest

from py_mapgen.core import (
    GenerationParams,
    InvalidParameterError,
    MapGenerationError,
    enforce_size_limits,
    generate,
    place,
    synthesize,
    trace,
)


@pytest.fixture
def params():
    return GenerationParams(
        seed=123456,
        width=120,
        height=90,
        scale=40.0,
        octaves=4,
        persistence=0.5,
        lacunarity=2.0,
        river_count=10,
        min_river_length=5,
        city_count=12,
    )


class TestGenerationParams:
    """Test parameter defaults and validation."""

    def test_defaults(self):
        p = GenerationParams()
        assert (p.width, p.height) == (800, 600)
        assert p.scale == 100.0
        assert p.octaves == 4
        assert p.persistence == 0.5
        assert p.lacunarity == 2.0
        assert (p.river_count, p.min_river_length, p.city_count) == (5, 20, 8)

    def test_mapping_is_accepted(self):
        result = generate({"seed": 1, "width": 8, "height": 8, "river_count": 0, "city_count": 0})
        assert result.height_field.shape == (64,)

    @pytest.mark.parametrize(
        "bad",
        [
            {"width": 0},
            {"height": -3},
            {"octaves": 0},
            {"river_count": -1},
            {"seed": -1},
            {"seed": 2**32},
        ],
    )
    def test_invalid_mapping_raises(self, bad):
        with pytest.raises(InvalidParameterError) as exc_info:
            generate(bad)
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, MapGenerationError)
        assert exc_info.value.errors

    def test_size_limits(self):
        enforce_size_limits(GenerationParams(width=100, height=100), 100, 100)
        with pytest.raises(InvalidParameterError):
            enforce_size_limits(GenerationParams(width=101, height=100), 100, 100)


class TestGenerate:
    """Test the composed pipeline."""

    def test_empty_counts_scenario(self):
        result = generate(
            GenerationParams(
                seed=123456,
                width=10,
                height=10,
                scale=100,
                octaves=4,
                persistence=0.5,
                lacunarity=2,
                river_count=0,
                city_count=0,
            )
        )
        assert result.rivers == ()
        assert result.cities == ()
        assert len(result.height_field) == 100
        assert np.all((result.height_field >= 0) & (result.height_field <= 1))

    def test_deterministic(self, params):
        a = generate(params)
        b = generate(params)
        assert np.array_equal(a.height_field, b.height_field)
        assert a.rivers == b.rivers
        assert a.cities == b.cities

    def test_normalized(self, params):
        field = generate(params).height_field
        assert field.min() == 0.0
        assert field.max() == 1.0

    def test_height_field_read_only(self, params):
        field = generate(params).height_field
        assert not field.flags.writeable
        with pytest.raises(ValueError):
            field[0] = 0.5

    def test_phases_reseed_from_run_seed(self, params):
        """Each phase restarts from the run seed rather than sharing one stream."""
        result = generate(params)
        field = synthesize(
            params.width, params.height, params.seed, params.scale,
            params.octaves, params.persistence, params.lacunarity,
        )
        rivers = trace(
            field, params.width, params.height, params.seed,
            params.river_count, params.min_river_length,
        )
        cities = place(field, rivers, params.width, params.height, params.seed, params.city_count)
        assert [list(r) for r in result.rivers] == rivers
        assert list(result.cities) == cities

    def test_river_and_city_invariants(self, params):
        result = generate(params)
        field = result.height_field
        n_cells = params.width * params.height
        assert len(result.rivers) <= params.river_count
        assert len(result.cities) <= params.city_count
        for river in result.rivers:
            assert len(river) >= params.min_river_length
            assert len(set(river)) == len(river)
            assert all(0 <= i < n_cells for i in river)
        for city in result.cities:
            assert 0.3 <= field[city.y * params.width + city.x] <= 0.7
        for i, a in enumerate(result.cities):
            for b in result.cities[i + 1:]:
                assert math.hypot(a.x - b.x, a.y - b.y) >= params.width / 10

    def test_river_prefix_between_counts(self, params):
        five = generate(params.model_copy(update={"river_count": 5, "min_river_length": 1}))
        three = generate(params.model_copy(update={"river_count": 3, "min_river_length": 1}))
        assert five.rivers[: len(three.rivers)] == three.rivers

    def test_to_dict(self, params):
        data = generate(params).to_dict()
        assert set(data) == {"height_field", "rivers", "cities"}
        assert len(data["height_field"]) == params.width * params.height
        for city in data["cities"]:
            assert set(city) == {"x", "y", "size"}

    def test_reference_map(self):
        """Small fixed-seed map matches the reference rivers and cities."""
        result = generate(
            GenerationParams(
                seed=2024, width=48, height=36, scale=20.0, octaves=4,
                persistence=0.5, lacunarity=2.0,
                river_count=6, min_river_length=3, city_count=6,
            )
        )
        assert [list(r) for r in result.rivers] == [
            [661, 710, 711],
            [1213, 1165, 1117],
            [846, 895, 942],
            [1711, 1662, 1613, 1564, 1516],
            [1551, 1598, 1645, 1692, 1691, 1690, 1689],
            [537, 488, 439, 390, 341, 293, 245, 197],
        ]
        assert [(c.x, c.y) for c in result.cities] == [
            (47, 27), (6, 32), (23, 10), (27, 23), (15, 32), (9, 11),
        ]
        assert [c.size for c in result.cities] == pytest.approx(
            [
                1.2944162706844509, 3.883717085700482, 3.402562173549086,
                1.7303545805625618, 2.8658144273795187, 2.881411963608116,
            ],
            rel=1e-12,
        )
