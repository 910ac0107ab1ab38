from dataclasses import dataclass


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int

    def __post_init__(self):
        for name in ('red', 'green', 'blue'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"{name} channel must be an int in [0, 255], got {value!r}")

    @classmethod
    def from_hex(cls, value: str) -> 'Color':
        h = value.lstrip('#')
        if len(h) == 3:
            h = ''.join(c * 2 for c in h)
        if len(h) != 6:
            raise ValueError(f"Not a hex color: {value!r}")
        return cls(int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    def as_tuple(self):
        return (self.red, self.green, self.blue)

    def to_dict(self):
        return {'r': self.red, 'g': self.green, 'b': self.blue, 'hex': self.to_hex()}


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major pixel grid stored as flat bytes, ``stride`` bytes per pixel.

    Only the first three channels of each pixel are read; a fourth (alpha)
    channel may be present and is ignored.
    """
    data: bytes
    width: int
    height: int
    stride: int = 4

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError("Buffer dimensions must be non-negative")
        if self.stride < 3:
            raise ValueError(f"Stride must be at least 3, got {self.stride}")
        expected = self.width * self.height * self.stride
        if len(self.data) != expected:
            raise ValueError(
                f"Buffer length {len(self.data)} does not match {self.width}x{self.height}x{self.stride}={expected}"
            )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def index_of(self, x: int, y: int) -> int:
        return y * self.width + x

    def pixel(self, index: int) -> Color:
        offset = index * self.stride
        return Color(self.data[offset], self.data[offset + 1], self.data[offset + 2])


@dataclass(frozen=True)
class SeedPixel:
    x: int
    y: int
    distance: float


@dataclass(frozen=True)
class ScoreResult:
    raw_score: float
    pixel_count: int
    average_distance: float

    @classmethod
    def empty(cls) -> 'ScoreResult':
        """No matching pixels: zero score with the worst-case average distance."""
        return cls(raw_score=0.0, pixel_count=0, average_distance=1.0)

    def to_dict(self):
        return {
            'score': self.raw_score,
            'pixelCount': self.pixel_count,
            'averageDistance': self.average_distance,
        }
