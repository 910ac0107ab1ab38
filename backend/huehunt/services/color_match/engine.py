import logging
from typing import Optional

from huehunt.models import Color, PixelBuffer, ScoreResult
from .metric import distance_map
from .region import grow
from .scoring import score
from .seed import find_closest_pixel

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.15
DEFAULT_MULTIPLIER = 1.0


class ColorMatchEngine:
    """Scores a normalized pixel buffer against a target color.

    Finds the pixel closest to the target, grows a tolerance-bounded region
    from it and scores that region. Tolerance and multiplier are fixed at
    construction but may be overridden per call.
    """

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE, multiplier: float = DEFAULT_MULTIPLIER):
        if not 0 <= tolerance <= 1:
            raise ValueError(f"tolerance must be within [0, 1], got {tolerance}")
        if multiplier < 0:
            raise ValueError(f"multiplier must be non-negative, got {multiplier}")
        self.tolerance = tolerance
        self.multiplier = multiplier

    @classmethod
    def from_config(cls, config) -> 'ColorMatchEngine':
        tolerance = float(config.get('COLOR_TOLERANCE_PERCENTAGE', DEFAULT_TOLERANCE * 100)) / 100
        multiplier = float(config.get('SCORE_MULTIPLIER', DEFAULT_MULTIPLIER))
        return cls(tolerance=tolerance, multiplier=multiplier)

    def analyze(self, buffer: PixelBuffer, target: Color, tolerance: Optional[float] = None,
                multiplier: Optional[float] = None) -> ScoreResult:
        tolerance = self.tolerance if tolerance is None else tolerance
        multiplier = self.multiplier if multiplier is None else multiplier

        # One distance pass shared by the seed search, growth and scoring
        distances = distance_map(buffer, target)
        seed = find_closest_pixel(buffer, target, distances=distances)
        region = grow(buffer, seed.x, seed.y, target, tolerance, distances=distances)
        result = score(region, buffer, target, multiplier, distances=distances)

        logger.debug(
            f"[analyze] size={buffer.width}x{buffer.height} target={target.to_hex()} "
            f"seed=({seed.x},{seed.y}) seed_distance={seed.distance:.4f} region={result.pixel_count} "
            f"score={result.raw_score:.2f}"
        )
        return result
