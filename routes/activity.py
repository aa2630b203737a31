"""
Activity routes: logging, the feed and kudos.
"""
from flask import Blueprint, jsonify
import logging
from injector import inject

from routes.params import get_json_body, require, to_int, to_float, to_date, to_bool, int_arg
from services.activity_service import ActivityService

logger = logging.getLogger(__name__)

activity_bp = Blueprint('activity', __name__, url_prefix='/api/v1/activities')


@activity_bp.route('', methods=['POST'])
@inject
def log_activity(activity_service: ActivityService):
    """
    Log an activity.

    Required fields:
    - user_id: Owner profile ID
    - category_id: Category ID
    - title: Activity title
    - date: Activity date (YYYY-MM-DD)
    - duration_hours: Hours spent (positive, at most 24)

    Optional fields: description, photo_url, proof_link, is_posted (default true)

    Returns:
        JSON with the activity, updated profile totals and unlocked badges
    """
    data = get_json_body()

    result = activity_service.log_activity(
        user_id=to_int(require(data, 'user_id'), 'user_id'),
        category_id=to_int(require(data, 'category_id'), 'category_id'),
        title=require(data, 'title'),
        activity_date=to_date(require(data, 'date'), 'date'),
        duration_hours=to_float(require(data, 'duration_hours'), 'duration_hours'),
        description=data.get('description'),
        photo_url=data.get('photo_url'),
        proof_link=data.get('proof_link'),
        is_posted=to_bool(data.get('is_posted'), 'is_posted', True)
    )
    return jsonify({'success': True, **result}), 201


@activity_bp.route('/feed', methods=['GET'])
@inject
def get_feed(activity_service: ActivityService):
    """
    Get the approved activity feed, newest first.

    Query parameters:
    - user_id: Only this user's activities
    - category_id: Only this category's activities
    - viewer_id: Profile viewing the feed (for viewer_has_kudoed)
    - limit: Maximum items (default: FEED_LIMIT)
    """
    feed = activity_service.get_feed(
        user_id=int_arg('user_id'),
        category_id=int_arg('category_id'),
        viewer_id=int_arg('viewer_id'),
        limit=int_arg('limit')
    )
    return jsonify({'success': True, 'data': feed})


@activity_bp.route('/<int:activity_id>/kudos', methods=['POST'])
@inject
def toggle_kudos(activity_id: int, activity_service: ActivityService):
    """Give or take back kudos. Required field: user_id."""
    data = get_json_body()
    result = activity_service.toggle_kudos(
        activity_id, to_int(require(data, 'user_id'), 'user_id')
    )
    return jsonify({'success': True, **result})
