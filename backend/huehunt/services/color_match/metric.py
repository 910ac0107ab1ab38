import math

import numpy as np

from huehunt.models import Color, PixelBuffer

# Distance between black and white: sqrt(3 * 255^2) ~= 441.67
MAX_DISTANCE = math.sqrt(3 * 255 ** 2)


def distance(a: Color, b: Color) -> float:
    """Euclidean RGB distance normalized to [0, 1]."""
    dr = a.red - b.red
    dg = a.green - b.green
    db = a.blue - b.blue
    return math.sqrt(dr * dr + dg * dg + db * db) / MAX_DISTANCE


def is_within_tolerance(pixel: Color, target: Color, tolerance: float) -> bool:
    return distance(pixel, target) <= tolerance


def distance_map(buffer: PixelBuffer, target: Color) -> np.ndarray:
    """Normalized distance of every pixel to ``target``, in row-major order.

    Squared differences are summed as integers before the square root, so
    each entry equals ``distance(buffer.pixel(i), target)`` exactly.
    """
    channels = np.frombuffer(buffer.data, dtype=np.uint8).reshape(-1, buffer.stride)[:, :3]
    diff = channels.astype(np.int64) - np.array(target.as_tuple(), dtype=np.int64)
    squared = (diff * diff).sum(axis=1)
    return np.sqrt(squared.astype(np.float64)) / MAX_DISTANCE
