from typing import Optional

import numpy as np

from huehunt.models import Color, PixelBuffer, SeedPixel
from .metric import distance_map


def find_closest_pixel(buffer: PixelBuffer, target: Color,
                       distances: Optional[np.ndarray] = None) -> SeedPixel:
    """Return the pixel nearest to ``target``.

    The best candidate starts at (0, 0) with the worst possible distance and
    is only replaced on strict improvement, so ties resolve to the lowest
    row-major index.
    """
    if buffer.pixel_count == 0:
        return SeedPixel(0, 0, 1.0)
    if distances is None:
        distances = distance_map(buffer, target)
    # argmin reports the first occurrence of the minimum
    index = int(np.argmin(distances))
    best = float(distances[index])
    if not best < 1.0:
        return SeedPixel(0, 0, 1.0)
    y, x = divmod(index, buffer.width)
    return SeedPixel(x, y, best)
