"""
Admin routes: the verification queue and badge management.
"""
from flask import Blueprint, jsonify
import logging
from injector import inject

from routes.params import get_json_body, require, to_int, int_arg
from services.verification_service import VerificationService
from services.badge_service import BadgeService

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/api/v1/admin')


@admin_bp.route('/pending', methods=['GET'])
@inject
def get_pending_activities(verification_service: VerificationService):
    """
    Get activities waiting for verification.

    Query parameters:
    - admin_id: Acting administrator
    - page: Page number (default: 1)
    - per_page: Items per page (default: PENDING_PAGE_SIZE, max: MAX_PAGE_SIZE)

    Returns:
        JSON with paginated list of pending activities
    """
    result = verification_service.list_pending(
        admin_id=int_arg('admin_id'),
        page=int_arg('page', 1),
        per_page=int_arg('per_page')
    )
    return jsonify({
        'success': True,
        'data': result['activities'],
        'pagination': result['pagination']
    })


@admin_bp.route('/verify/<int:activity_id>', methods=['POST'])
@inject
def verify_activity(activity_id: int, verification_service: VerificationService):
    """
    Approve or deny a pending activity.

    Required fields:
    - admin_id: Acting administrator
    - status: approved or denied
    """
    data = get_json_body()
    result = verification_service.verify_activity(
        activity_id,
        admin_id=to_int(data.get('admin_id'), 'admin_id'),
        status=require(data, 'status')
    )
    return jsonify({'success': True, **result})


@admin_bp.route('/badges', methods=['POST'])
@inject
def create_badge(badge_service: BadgeService):
    """
    Create a badge definition.

    Required fields:
    - admin_id: Acting administrator
    - name: Badge name

    Optional fields: category_id, description, icon, tier, criteria
    (object with activities_count, xp_amount and/or hours_amount)
    """
    data = get_json_body()
    badge = badge_service.create_badge(
        admin_id=to_int(data.get('admin_id'), 'admin_id'),
        name=require(data, 'name'),
        category_id=to_int(data.get('category_id'), 'category_id'),
        description=data.get('description'),
        icon=data.get('icon'),
        criteria=data.get('criteria'),
        tier=data.get('tier') or 'bronze'
    )
    return jsonify({'success': True, 'badge': badge}), 201


@admin_bp.route('/badges/<int:badge_id>/award', methods=['POST'])
@inject
def award_badge(badge_id: int, badge_service: BadgeService):
    """Award a badge by hand. Required fields: admin_id, user_id."""
    data = get_json_body()
    user_badge = badge_service.award_badge(
        badge_id,
        user_id=to_int(require(data, 'user_id'), 'user_id'),
        admin_id=to_int(data.get('admin_id'), 'admin_id')
    )
    return jsonify({'success': True, 'user_badge': user_badge}), 201
