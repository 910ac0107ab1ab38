import os


def _flag(name, default):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    REDIS_URL = os.environ.get('REDIS_URL') or 'redis://localhost:6379/0'
    CORS_ORIGINS = [o for o in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'
    ).split(',') if o]
    # Daily attempt budget per user and local day
    MAX_DAILY_ATTEMPTS = int(os.environ.get('MAX_DAILY_ATTEMPTS', '6'))
    ATTEMPT_TTL_SEC = int(os.environ.get('ATTEMPT_TTL_SEC', '86400'))
    # Scoring tunables (tolerance is a percentage of the max RGB distance)
    COLOR_TOLERANCE_PERCENTAGE = float(os.environ.get('COLOR_TOLERANCE_PERCENTAGE', '15'))
    SCORE_MULTIPLIER = float(os.environ.get('SCORE_MULTIPLIER', '1.0'))
    MIN_SCORE_THRESHOLD = float(os.environ.get('MIN_SCORE_THRESHOLD', '10'))
    # Image normalization
    MAX_IMAGE_BYTES = int(os.environ.get('MAX_IMAGE_BYTES', str(50 * 1024 * 1024)))
    NORMALIZE_WIDTH = int(os.environ.get('NORMALIZE_WIDTH', '500'))
    NORMALIZE_HEIGHT = int(os.environ.get('NORMALIZE_HEIGHT', '500'))
    # False keeps the legacy two-step check then increment
    ATOMIC_QUOTA = _flag('ATOMIC_QUOTA', 'true')
    CONSUME_QUOTA_ON_BELOW_THRESHOLD = _flag('CONSUME_QUOTA_ON_BELOW_THRESHOLD', 'false')
    # Leave room for multipart overhead on top of the image ceiling
    MAX_CONTENT_LENGTH = MAX_IMAGE_BYTES + 1024 * 1024
