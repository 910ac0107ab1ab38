from datetime import datetime, timezone

import pytest

from huehunt.errors import BelowThresholdError, PersistenceUnavailable, QuotaExceededError
from huehunt.models import Color
from huehunt.services.attempts import AttemptQuotaManager, RedisCounterStore
from huehunt.services.color_match import ColorMatchEngine
from huehunt.services.daily_color import DailyColorProvider
from huehunt.services.imaging import ImageNormalizer
from huehunt.services.submission import SubmissionPipeline
from conftest import RecordingPersister, solid_png

FIXED_NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)
RED = (255, 0, 0)
GRAY = (100, 100, 100)


def make_pipeline(redis_client, persister=None, **kwargs):
    return SubmissionPipeline(
        engine=ColorMatchEngine(),
        normalizer=ImageNormalizer(width=10, height=10),
        colors=DailyColorProvider(redis_client, generator=lambda: Color(*RED)),
        quota=AttemptQuotaManager(RedisCounterStore(redis_client), max_attempts=3, clock=lambda: FIXED_NOW),
        persister=persister,
        **kwargs
    )


def test_analyze_uses_local_day_color(redis_client):
    pipeline = make_pipeline(redis_client)
    analysis = pipeline.analyze(solid_png(10, 10, RED), timezone_offset=0)
    assert analysis.day_key == '2024-05-20'
    assert analysis.target == Color(*RED)
    assert analysis.result.pixel_count == 100
    assert analysis.result.raw_score == pytest.approx(100)
    assert pipeline.quota.remaining('alice', 0) == 3


def test_analyze_with_explicit_target(redis_client):
    pipeline = make_pipeline(redis_client)
    analysis = pipeline.analyze(solid_png(10, 10, GRAY), target=Color(*GRAY), timezone_offset=13)
    assert analysis.day_key == '2024-05-21'
    assert analysis.result.pixel_count == 100
    assert redis_client.get('daily_color:2024-05-21') is None


def test_submit_persists_with_attempt_numbers(redis_client):
    persister = RecordingPersister()
    pipeline = make_pipeline(redis_client, persister)
    first = pipeline.submit('alice', solid_png(10, 10, RED), image_ref='img-1', location={'latitude': 1.0})
    second = pipeline.submit('alice', solid_png(10, 10, RED))
    assert first['attempt_number'] == 1
    assert second['attempt_number'] == 2
    assert first['daily_color_id'] == '2024-05-20'
    assert first['image_ref'] == 'img-1'
    assert first['location'] == {'latitude': 1.0}
    assert len(persister.saved) == 2


def test_submit_rejects_when_budget_spent(redis_client):
    persister = RecordingPersister()
    pipeline = make_pipeline(redis_client, persister)
    for _ in range(3):
        pipeline.submit('alice', solid_png(10, 10, RED))
    with pytest.raises(QuotaExceededError):
        pipeline.submit('alice', solid_png(10, 10, RED))
    assert len(persister.saved) == 3
    assert pipeline.quota.current_count('alice', 0) == 3


def test_below_threshold_keeps_quota_by_default(redis_client):
    persister = RecordingPersister()
    pipeline = make_pipeline(redis_client, persister)
    with pytest.raises(BelowThresholdError) as excinfo:
        pipeline.submit('alice', solid_png(10, 10, GRAY))
    assert excinfo.value.score == 0
    assert excinfo.value.threshold == 10
    assert pipeline.quota.remaining('alice', 0) == 3
    assert persister.saved == []


def test_below_threshold_can_consume_quota(redis_client):
    pipeline = make_pipeline(redis_client, RecordingPersister(), consume_on_below_threshold=True)
    with pytest.raises(BelowThresholdError):
        pipeline.submit('alice', solid_png(10, 10, GRAY))
    assert pipeline.quota.remaining('alice', 0) == 2


def test_legacy_two_step_quota(redis_client):
    persister = RecordingPersister()
    pipeline = make_pipeline(redis_client, persister, atomic_quota=False)
    numbers = [pipeline.submit('alice', solid_png(10, 10, RED))['attempt_number'] for _ in range(3)]
    assert numbers == [1, 2, 3]
    with pytest.raises(QuotaExceededError):
        pipeline.submit('alice', solid_png(10, 10, RED))


def test_submit_without_persister(redis_client):
    pipeline = make_pipeline(redis_client)
    with pytest.raises(PersistenceUnavailable):
        pipeline.submit('alice', solid_png(10, 10, RED))
    assert pipeline.quota.remaining('alice', 0) == 3


def test_daily_color_is_stable_once_created(redis_client):
    colors = iter([Color(1, 2, 3), Color(4, 5, 6)])
    provider = DailyColorProvider(redis_client, generator=lambda: next(colors))
    assert provider.color_for_date('2024-05-20') == Color(1, 2, 3)
    assert provider.color_for_date('2024-05-20') == Color(1, 2, 3)
    assert 0 < redis_client.ttl('daily_color:2024-05-20')


def test_daily_color_history_is_read_only(redis_client):
    provider = DailyColorProvider(redis_client)
    redis_client.set('daily_color:2024-05-20', '#010203')
    redis_client.set('daily_color:2024-05-18', '#040506')
    redis_client.set('daily_color:2024-05-10', '#070809')

    history = provider.history(5, now=FIXED_NOW)
    assert history == [('2024-05-20', Color(1, 2, 3)), ('2024-05-18', Color(4, 5, 6))]
    assert redis_client.get('daily_color:2024-05-19') is None
    # +13h is already the 21st locally
    assert [day for day, _ in provider.history(2, timezone_offset=13, now=FIXED_NOW)] == ['2024-05-20']
    assert provider.history(0, now=FIXED_NOW) == []
