"""
Core map generation functionality.
"""

from .prng import LcgPRNG
from .noise import SimplexNoise, synthesize, normalize
from .hydrology import RiverTracer, RiverOptions, RiverPath, trace
from .settlements import City, CityPlacer, CityOptions, place
from .pipeline import GenerationParams, GenerationResult, generate, enforce_size_limits
from .exceptions import MapGenerationError, InvalidParameterError

__all__ = ['LcgPRNG', 'SimplexNoise', 'synthesize', 'normalize',
           'RiverTracer', 'RiverOptions', 'RiverPath', 'trace',
           'City', 'CityPlacer', 'CityOptions', 'place',
           'GenerationParams', 'GenerationResult', 'generate', 'enforce_size_limits',
           'MapGenerationError', 'InvalidParameterError']
