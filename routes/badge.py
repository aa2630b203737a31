"""
Badge catalogue routes.
"""
from flask import Blueprint, jsonify
from injector import inject

from routes.params import int_arg
from services.badge_service import BadgeService

badge_bp = Blueprint('badge', __name__, url_prefix='/api/v1/badges')


@badge_bp.route('', methods=['GET'])
@inject
def list_badges(badge_service: BadgeService):
    """List badge definitions, optionally for one category (query: category_id)."""
    return jsonify({
        'success': True,
        'data': badge_service.list_badges(int_arg('category_id'))
    })
