"""Image normalization on top of OpenCV.

Every submission is decoded, resized with a centered "cover" fit to a fixed
size and handed to the scoring engine as RGBA bytes, which keeps the
engine's cost per request bounded by the normalized dimensions.
"""

import logging

import cv2
import numpy as np

from huehunt.errors import ImageDecodeError, SizeLimitExceeded
from huehunt.models import PixelBuffer

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 500
DEFAULT_MAX_BYTES = 50 * 1024 * 1024

_MAGIC = [
    (b'\xff\xd8\xff', 'jpeg'),
    (b'\x89PNG\r\n\x1a\n', 'png'),
    (b'GIF87a', 'gif'),
    (b'GIF89a', 'gif'),
    (b'BM', 'bmp'),
    (b'II*\x00', 'tiff'),
    (b'MM\x00*', 'tiff'),
]


def sniff_format(raw: bytes):
    if raw[:4] == b'RIFF' and raw[8:12] == b'WEBP':
        return 'webp'
    for magic, name in _MAGIC:
        if raw.startswith(magic):
            return name
    return None


class ImageNormalizer:
    def __init__(self, width: int = DEFAULT_SIZE, height: int = DEFAULT_SIZE,
                 max_bytes: int = DEFAULT_MAX_BYTES):
        if width <= 0 or height <= 0:
            raise ValueError(f"Normalized size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.max_bytes = max_bytes

    @classmethod
    def from_config(cls, config) -> 'ImageNormalizer':
        return cls(
            width=int(config.get('NORMALIZE_WIDTH', DEFAULT_SIZE)),
            height=int(config.get('NORMALIZE_HEIGHT', DEFAULT_SIZE)),
            max_bytes=int(config.get('MAX_IMAGE_BYTES', DEFAULT_MAX_BYTES)),
        )

    def check_size(self, raw: bytes) -> None:
        if len(raw) > self.max_bytes:
            raise SizeLimitExceeded(len(raw), self.max_bytes)

    def _decode(self, raw: bytes, flags: int) -> np.ndarray:
        self.check_size(raw)
        if not raw:
            raise ImageDecodeError("Empty image payload")
        try:
            image = cv2.imdecode(np.frombuffer(raw, dtype=np.uint8), flags)
        except cv2.error as exc:
            raise ImageDecodeError(f"Failed to decode image: {exc}") from exc
        if image is None:
            raise ImageDecodeError("Invalid image file")
        if image.ndim < 2 or image.shape[0] == 0 or image.shape[1] == 0:
            raise ImageDecodeError("Image has no width or height")
        return image

    def normalize(self, raw: bytes) -> PixelBuffer:
        """Decode ``raw`` and return a width x height RGBA pixel buffer."""
        image = self._decode(raw, cv2.IMREAD_COLOR)
        src_h, src_w = image.shape[:2]

        scale = max(self.width / src_w, self.height / src_h)
        new_w = max(self.width, int(round(src_w * scale)))
        new_h = max(self.height, int(round(src_h * scale)))
        interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_LINEAR
        resized = cv2.resize(image, (new_w, new_h), interpolation=interpolation)

        left = (new_w - self.width) // 2
        top = (new_h - self.height) // 2
        cropped = resized[top:top + self.height, left:left + self.width]

        rgba = cv2.cvtColor(cropped, cv2.COLOR_BGR2RGBA)
        logger.debug(f"[normalize] source={src_w}x{src_h} scaled={new_w}x{new_h} crop=({left},{top})")
        return PixelBuffer(np.ascontiguousarray(rgba).tobytes(), self.width, self.height, stride=4)

    def metadata(self, raw: bytes) -> dict:
        image = self._decode(raw, cv2.IMREAD_UNCHANGED)
        channels = 1 if image.ndim == 2 else int(image.shape[2])
        return {
            'width': int(image.shape[1]),
            'height': int(image.shape[0]),
            'channels': channels,
            'hasAlpha': channels == 4,
            'format': sniff_format(raw),
        }
