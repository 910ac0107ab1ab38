"""Submission pipeline: normalize, score, gate on threshold and quota, persist.

Transport concerns stay in the API blueprint; this module only composes the
engine, the normalizer, the daily color and the attempt quota.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from huehunt.errors import BelowThresholdError, PersistenceUnavailable, QuotaExceededError
from huehunt.models import Color, ScoreResult
from .attempts import AttemptQuotaManager, local_day_key
from .color_match import ColorMatchEngine
from .daily_color import DailyColorProvider
from .imaging import ImageNormalizer

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 10


class SubmissionPersister(Protocol):
    def save(self, user_id, image_ref, result: ScoreResult, location: dict, color_id: str,
             attempt_number: int) -> dict: ...


@dataclass(frozen=True)
class Analysis:
    result: ScoreResult
    target: Color
    day_key: str

    def to_dict(self):
        payload = self.result.to_dict()
        payload['targetColor'] = self.target.to_dict()
        payload['dayKey'] = self.day_key
        return payload


class SubmissionPipeline:
    def __init__(self, engine: ColorMatchEngine, normalizer: ImageNormalizer, colors: DailyColorProvider,
                 quota: AttemptQuotaManager, persister: Optional[SubmissionPersister] = None,
                 min_score: float = DEFAULT_MIN_SCORE, atomic_quota: bool = True,
                 consume_on_below_threshold: bool = False):
        self.engine = engine
        self.normalizer = normalizer
        self.colors = colors
        self.quota = quota
        self.persister = persister
        self.min_score = min_score
        self.atomic_quota = atomic_quota
        self.consume_on_below_threshold = consume_on_below_threshold

    def analyze(self, raw: bytes, target: Optional[Color] = None, timezone_offset: float = 0) -> Analysis:
        """Score ``raw`` against ``target`` (default: the local day's color).

        Never touches the attempt quota.
        """
        buffer = self.normalizer.normalize(raw)
        now = self.quota.clock()
        if target is None:
            day_key, target = self.colors.color_for_timezone(timezone_offset, now)
        else:
            day_key = local_day_key(timezone_offset, now)
        return Analysis(self.engine.analyze(buffer, target), target, day_key)

    def admit(self, user_id, timezone_offset: float) -> int:
        """Take one attempt from the user's budget and return its ordinal."""
        if self.atomic_quota:
            return self.quota.consume_attempt(user_id, timezone_offset)
        # Legacy two-step path; racy under concurrent submissions
        if not self.quota.can_submit(user_id, timezone_offset):
            raise QuotaExceededError()
        return self.quota.record_attempt(user_id, timezone_offset)

    def submit(self, user_id, raw: bytes, timezone_offset: float = 0, image_ref=None,
               location: Optional[dict] = None) -> dict:
        if self.persister is None:
            raise PersistenceUnavailable("No submission persister configured")

        analysis = self.analyze(raw, timezone_offset=timezone_offset)
        result = analysis.result

        if result.raw_score < self.min_score:
            if self.consume_on_below_threshold:
                self.admit(user_id, timezone_offset)
            logger.info(f"[submit-reject] user={user_id} score={result.raw_score:.2f} threshold={self.min_score:g}")
            raise BelowThresholdError(result.raw_score, self.min_score)

        attempt_number = self.admit(user_id, timezone_offset)
        record = self.persister.save(
            user_id=user_id,
            image_ref=image_ref,
            result=result,
            location=location or {},
            color_id=analysis.day_key,
            attempt_number=attempt_number,
        )
        logger.info(
            f"[submit] user={user_id} day={analysis.day_key} attempt={attempt_number} score={result.raw_score:.2f}"
        )
        return record
