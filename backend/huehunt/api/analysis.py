from flask import Blueprint, current_app, jsonify, request

from huehunt.services.attempts import parse_timezone_offset

analysis = Blueprint('analysis', __name__)


def _pipeline():
    return current_app.extensions['huehunt']


def _timezone_offset():
    return parse_timezone_offset(request.values.get('timezone_offset'))


def _image_bytes():
    upload = request.files.get('image')
    if upload is None:
        return None
    return upload.read()


def _coordinate(name, limit):
    """Parse a required form coordinate; None when missing, malformed or out of range."""
    value = request.form.get(name)
    if value in (None, ''):
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not -limit <= number <= limit:
        return None
    return number


def _history_days(default=7, cap=90):
    try:
        days = int(request.args.get('days', default))
    except ValueError:
        return default
    if days < 1:
        return default
    return min(days, cap)


@analysis.route('/analyze', methods=['POST'])
def analyze_image():
    raw = _image_bytes()
    if raw is None:
        return jsonify({'error': 'No image provided', 'reason': 'missing_image'}), 400
    outcome = _pipeline().analyze(raw, timezone_offset=_timezone_offset())
    current_app.logger.info(
        f"[analyze] day={outcome.day_key} score={outcome.result.raw_score:.2f} pixels={outcome.result.pixel_count}"
    )
    return jsonify(outcome.to_dict())


@analysis.route('/analyze/metadata', methods=['POST'])
def image_metadata():
    raw = _image_bytes()
    if raw is None:
        return jsonify({'error': 'No image provided', 'reason': 'missing_image'}), 400
    return jsonify({'metadata': _pipeline().normalizer.metadata(raw)})


@analysis.route('/target', methods=['GET'])
def target_color():
    day_key, color = _pipeline().colors.color_for_timezone(_timezone_offset())
    return jsonify({'dayKey': day_key, 'targetColor': color.to_dict()})


@analysis.route('/target/history', methods=['GET'])
def target_history():
    colors = _pipeline().colors.history(_history_days(), timezone_offset=_timezone_offset())
    return jsonify({
        'colors': [{'dayKey': day_key, 'targetColor': color.to_dict()} for day_key, color in colors],
    })


@analysis.route('/attempts/<string:user_id>', methods=['GET'])
def attempts_remaining(user_id):
    quota = _pipeline().quota
    offset = _timezone_offset()
    remaining = quota.remaining(user_id, offset)
    return jsonify({
        'userId': user_id,
        'dayKey': quota.day_key(offset),
        'remaining': remaining,
        'max': quota.max_attempts,
        'canSubmit': remaining > 0,
    })


@analysis.route('/submissions', methods=['POST'])
def submit_find():
    user_id = request.form.get('user_id')
    raw = _image_bytes()
    if not all([user_id, raw]):
        return jsonify({'error': 'User ID and image are required', 'reason': 'missing_fields'}), 400

    location = {
        'latitude': _coordinate('latitude', 90),
        'longitude': _coordinate('longitude', 180),
    }
    if None in location.values():
        return jsonify({'error': 'Valid latitude and longitude are required', 'reason': 'invalid_location'}), 400

    record = _pipeline().submit(
        user_id,
        raw,
        timezone_offset=_timezone_offset(),
        image_ref=request.form.get('image_ref'),
        location=location,
    )
    return jsonify(record), 201
