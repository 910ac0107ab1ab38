from collections import deque
from typing import Optional, Set

import numpy as np

from huehunt.models import Color, PixelBuffer
from .metric import distance_map


def grow(buffer: PixelBuffer, seed_x: int, seed_y: int, target: Color, tolerance: float,
         distances: Optional[np.ndarray] = None) -> Set[int]:
    """Breadth-first flood fill from the seed over 4-connected pixels.

    A pixel joins the region when its distance to ``target`` is within
    ``tolerance``; only joined pixels expand to their neighbours, so growth
    stops at the tolerance boundary. Returns the row-major indices of the
    region (empty when the seed itself does not match).
    """
    width, height = buffer.width, buffer.height
    if distances is None:
        distances = distance_map(buffer, target)
    matches = distances <= tolerance

    visited = bytearray(width * height)
    matching: Set[int] = set()
    queue = deque([(seed_x, seed_y)])

    while queue:
        x, y = queue.popleft()
        if x < 0 or x >= width or y < 0 or y >= height:
            continue
        index = y * width + x
        if visited[index]:
            continue
        visited[index] = 1

        if not matches[index]:
            continue
        matching.add(index)
        queue.append((x + 1, y))
        queue.append((x - 1, y))
        queue.append((x, y + 1))
        queue.append((x, y - 1))

    return matching
