from flask import Flask, jsonify, request
from flask_cors import CORS
import redis
from werkzeug.exceptions import RequestEntityTooLarge
from config import Config

from huehunt.errors import HueHuntError, SizeLimitExceeded


def build_pipeline(config, redis_client, persister=None):
    """Wire the engine, normalizer, daily color and quota from app config."""
    from huehunt.services.attempts import AttemptQuotaManager, RedisCounterStore
    from huehunt.services.color_match import ColorMatchEngine
    from huehunt.services.daily_color import DailyColorProvider
    from huehunt.services.imaging import ImageNormalizer
    from huehunt.services.submission import SubmissionPipeline

    return SubmissionPipeline(
        engine=ColorMatchEngine.from_config(config),
        normalizer=ImageNormalizer.from_config(config),
        colors=DailyColorProvider(redis_client),
        quota=AttemptQuotaManager.from_config(RedisCounterStore(redis_client), config),
        persister=persister,
        min_score=float(config.get('MIN_SCORE_THRESHOLD', 10)),
        atomic_quota=bool(config.get('ATOMIC_QUOTA', True)),
        consume_on_below_threshold=bool(config.get('CONSUME_QUOTA_ON_BELOW_THRESHOLD', False)),
    )


def create_app(config_class=Config, redis_client=None, persister=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS', []))

    # The Redis handle is built here (or injected by the caller) and passed
    # down explicitly; nothing below holds a module-level client.
    if redis_client is None:
        redis_client = redis.Redis.from_url(flask_app.config['REDIS_URL'], decode_responses=True)
    flask_app.extensions['redis'] = redis_client
    flask_app.extensions['huehunt'] = build_pipeline(flask_app.config, redis_client, persister)

    from huehunt.api.analysis import analysis
    # Mount under /api to match the frontend API client
    flask_app.register_blueprint(analysis, url_prefix='/api')

    @flask_app.route('/')
    def index():
        return jsonify({'message': 'Welcome to the Hue Hunt server!'})

    @flask_app.errorhandler(HueHuntError)
    def handle_hunt_error(exc):
        flask_app.logger.warning(f"[rejected] reason={exc.reason} status={exc.status_code} message={exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(RequestEntityTooLarge)
    def handle_request_too_large(exc):
        # Werkzeug rejects the body before any view runs; keep the same reason
        limit = int(flask_app.config.get('MAX_IMAGE_BYTES') or flask_app.config.get('MAX_CONTENT_LENGTH') or 0)
        return handle_hunt_error(SizeLimitExceeded(request.content_length or 0, limit))

    return flask_app
