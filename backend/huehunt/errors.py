"""Rejection reasons surfaced by the scoring and quota pipeline.

Each error carries a stable ``reason`` string and an HTTP status so the API
layer can render it without inspecting the message.
"""


class HueHuntError(Exception):
    reason = 'error'
    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.reason)
        self.message = message or self.reason

    def to_dict(self):
        return {'error': self.message, 'reason': self.reason}


class SizeLimitExceeded(HueHuntError):
    reason = 'image_too_large'
    status_code = 413

    def __init__(self, size, limit):
        super().__init__(f"Image size {size} exceeds maximum of {limit} bytes")
        self.size = size
        self.limit = limit


class ImageDecodeError(HueHuntError):
    reason = 'invalid_image'
    status_code = 422


class BelowThresholdError(HueHuntError):
    reason = 'score_below_threshold'
    status_code = 422

    def __init__(self, score, threshold):
        super().__init__(f"Score {score:.2f} below minimum threshold of {threshold:g}")
        self.score = score
        self.threshold = threshold

    def to_dict(self):
        payload = super().to_dict()
        payload.update({'score': self.score, 'threshold': self.threshold})
        return payload


class QuotaExceededError(HueHuntError):
    reason = 'no_attempts_remaining'
    status_code = 429

    def __init__(self, message='No attempts remaining for today'):
        super().__init__(message)


class CounterStoreError(HueHuntError):
    reason = 'counter_store_unavailable'
    status_code = 503


class InvalidTimezoneOffset(HueHuntError):
    reason = 'invalid_timezone_offset'
    status_code = 400


class PersistenceUnavailable(HueHuntError):
    reason = 'persistence_unavailable'
    status_code = 503
