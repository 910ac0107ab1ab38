"""Color match scoring: metric, seed search, region growth and scoring.

Pure CPU work over an in-memory pixel buffer. Nothing here touches the
network or keeps state between calls, so one engine can be shared across
request threads.
"""

from .engine import ColorMatchEngine
from .metric import MAX_DISTANCE, distance, distance_map, is_within_tolerance
from .region import grow
from .scoring import score
from .seed import find_closest_pixel

__all__ = [
    'ColorMatchEngine',
    'MAX_DISTANCE',
    'distance',
    'distance_map',
    'find_closest_pixel',
    'grow',
    'is_within_tolerance',
    'score',
]
