import os
import sys

import cv2
import fakeredis
import numpy as np
import pytest

# Ensure the backend root (containing the `huehunt` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from huehunt import create_app
from huehunt.models import PixelBuffer
from huehunt.services.attempts import local_day_key


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    REDIS_URL = 'redis://localhost:6379/15'
    CORS_ORIGINS = []
    MAX_DAILY_ATTEMPTS = 6
    ATTEMPT_TTL_SEC = 86400
    COLOR_TOLERANCE_PERCENTAGE = 15
    SCORE_MULTIPLIER = 1.0
    MIN_SCORE_THRESHOLD = 10
    MAX_IMAGE_BYTES = 64 * 1024
    NORMALIZE_WIDTH = 20
    NORMALIZE_HEIGHT = 20
    ATOMIC_QUOTA = True
    CONSUME_QUOTA_ON_BELOW_THRESHOLD = False


class RecordingPersister:
    """Keeps saved submissions in a list so tests can inspect them."""

    def __init__(self):
        self.saved = []

    def save(self, user_id, image_ref, result, location, color_id, attempt_number):
        record = {
            'id': len(self.saved) + 1,
            'user_id': user_id,
            'image_ref': image_ref,
            'score': result.raw_score,
            'pixel_count': result.pixel_count,
            'average_distance': result.average_distance,
            'location': location,
            'daily_color_id': color_id,
            'attempt_number': attempt_number,
        }
        self.saved.append(record)
        return record


def make_buffer(width, height, pixels, alpha=255):
    """Build an RGBA PixelBuffer from a row-major list of (r, g, b)."""
    data = bytearray()
    for r, g, b in pixels:
        data.extend((r, g, b, alpha))
    return PixelBuffer(bytes(data), width, height)


def solid_buffer(width, height, rgb):
    return make_buffer(width, height, [rgb] * (width * height))


def encode_png(rgb_array):
    """Encode an HxWx3 RGB uint8 array as PNG bytes."""
    bgr = cv2.cvtColor(np.ascontiguousarray(rgb_array, dtype=np.uint8), cv2.COLOR_RGB2BGR)
    ok, encoded = cv2.imencode('.png', bgr)
    assert ok
    return encoded.tobytes()


def solid_png(width, height, rgb):
    return encode_png(np.full((height, width, 3), rgb, dtype=np.uint8))


@pytest.fixture()
def redis_client():
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture()
def persister():
    return RecordingPersister()


@pytest.fixture()
def flask_app(redis_client, persister):
    application = create_app(TestConfig, redis_client=redis_client, persister=persister)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def red_target(redis_client):
    """Pin today's (UTC) target color to pure red."""
    redis_client.set(f"daily_color:{local_day_key(0)}", '#ff0000')
    return (255, 0, 0)
