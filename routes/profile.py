"""
Profile routes: registration, editing, report card and badges.
"""
from flask import Blueprint, jsonify
import logging
from injector import inject

from routes.params import get_json_body, require, to_int, to_bool
from services.profile_service import ProfileService
from services.badge_service import BadgeService

logger = logging.getLogger(__name__)

profile_bp = Blueprint('profile', __name__, url_prefix='/api/v1/profiles')


@profile_bp.route('', methods=['POST'])
@inject
def register_profile(profile_service: ProfileService):
    """
    Register a new profile.

    Required fields:
    - email: Email address (unique)
    - full_name: Display name

    Optional fields: school, graduation_year, bio, is_admin

    Returns:
        JSON with the profile and success status
    """
    data = get_json_body()

    profile = profile_service.register_profile(
        email=require(data, 'email'),
        full_name=require(data, 'full_name'),
        school=data.get('school'),
        graduation_year=to_int(data.get('graduation_year'), 'graduation_year'),
        bio=data.get('bio'),
        is_admin=to_bool(data.get('is_admin'), 'is_admin', False)
    )
    return jsonify({'success': True, 'profile': profile}), 201


@profile_bp.route('/<int:profile_id>', methods=['GET'])
@inject
def get_profile(profile_id: int, profile_service: ProfileService):
    return jsonify({
        'success': True,
        'profile': profile_service.get_profile(profile_id)
    })


@profile_bp.route('/<int:profile_id>', methods=['PUT'])
@inject
def update_profile(profile_id: int, profile_service: ProfileService):
    """
    Update editable profile fields.

    Accepted fields: full_name, avatar_url, school, graduation_year, bio, is_public
    """
    data = get_json_body()
    if 'graduation_year' in data:
        data['graduation_year'] = to_int(data['graduation_year'], 'graduation_year')
    if 'is_public' in data:
        data['is_public'] = to_bool(data['is_public'], 'is_public', True)

    profile = profile_service.update_profile(profile_id, **data)
    return jsonify({'success': True, 'profile': profile})


@profile_bp.route('/<int:profile_id>/report-card', methods=['GET'])
@inject
def get_report_card(profile_id: int, profile_service: ProfileService):
    """Per-category stats and totals over the profile's approved activities."""
    return jsonify({
        'success': True,
        'report_card': profile_service.get_report_card(profile_id)
    })


@profile_bp.route('/<int:profile_id>/reconcile', methods=['POST'])
@inject
def reconcile_profile(profile_id: int, profile_service: ProfileService):
    """
    Recompute total_xp and level from approved activities (admin only).

    Required fields:
    - admin_id: Acting administrator
    """
    data = get_json_body()
    result = profile_service.reconcile_totals(
        profile_id, to_int(data.get('admin_id'), 'admin_id')
    )
    return jsonify({'success': True, **result})


@profile_bp.route('/<int:profile_id>/badges', methods=['GET'])
@inject
def get_profile_badges(profile_id: int, badge_service: BadgeService):
    return jsonify({
        'success': True,
        'data': badge_service.get_user_badges(profile_id)
    })
