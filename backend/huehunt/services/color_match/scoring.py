from typing import Iterable, Optional

import numpy as np

from huehunt.models import Color, PixelBuffer, ScoreResult
from .metric import distance_map


def score(matching: Iterable[int], buffer: PixelBuffer, target: Color, multiplier: float = 1.0,
          distances: Optional[np.ndarray] = None) -> ScoreResult:
    """Reduce a matched region to ``count * (1 - average distance) * multiplier``."""
    indices = np.fromiter(sorted(matching), dtype=np.int64)
    pixel_count = int(indices.size)
    if pixel_count == 0:
        return ScoreResult.empty()
    if distances is None:
        distances = distance_map(buffer, target)
    average = float(distances[indices].sum()) / pixel_count
    raw_score = pixel_count * (1 - average) * multiplier
    return ScoreResult(raw_score=raw_score, pixel_count=pixel_count, average_distance=average)
