"""
Category routes: listing, sub-skills, per-user progress and leaderboards.
"""
from flask import Blueprint, jsonify
import logging
from injector import inject

from routes.params import get_json_body, require, to_int, to_float, int_arg
from services.category_service import CategoryService

logger = logging.getLogger(__name__)

category_bp = Blueprint('category', __name__, url_prefix='/api/v1/categories')


@category_bp.route('', methods=['GET'])
@inject
def list_categories(category_service: CategoryService):
    """List all categories ordered by name."""
    return jsonify({
        'success': True,
        'data': category_service.list_categories()
    })


@category_bp.route('', methods=['POST'])
@inject
def create_category(category_service: CategoryService):
    """
    Create a category (admin only).

    Required fields:
    - admin_id: Acting administrator
    - name: Category name

    Optional fields: slug, description, icon, color, xp_multiplier (default 1.0)
    """
    data = get_json_body()
    multiplier = to_float(data.get('xp_multiplier'), 'xp_multiplier')

    category = category_service.create_category(
        admin_id=to_int(data.get('admin_id'), 'admin_id'),
        name=require(data, 'name'),
        slug=data.get('slug'),
        description=data.get('description'),
        icon=data.get('icon'),
        color=data.get('color'),
        xp_multiplier=1.0 if multiplier is None else multiplier
    )
    return jsonify({'success': True, 'category': category}), 201


@category_bp.route('/<int:category_id>', methods=['GET'])
@inject
def get_category(category_id: int, category_service: CategoryService):
    """
    Get a category, with the user's stats in it when user_id is given.

    Query parameters:
    - user_id: Profile whose progress to include
    """
    detail = category_service.get_category_detail(category_id, int_arg('user_id'))
    return jsonify({'success': True, **detail})


@category_bp.route('/<int:category_id>/leaderboard', methods=['GET'])
@inject
def get_leaderboard(category_id: int, category_service: CategoryService):
    """
    Get the XP leaderboard of a category.

    Query parameters:
    - limit: Maximum entries (default: LEADERBOARD_LIMIT)
    """
    entries = category_service.get_leaderboard(category_id, int_arg('limit'))
    return jsonify({
        'success': True,
        'category_id': category_id,
        'data': entries
    })


@category_bp.route('/<int:category_id>/sub-skills', methods=['POST'])
@inject
def create_sub_skill(category_id: int, category_service: CategoryService):
    """
    Add a sub-skill to a category (admin only).

    Required fields:
    - admin_id: Acting administrator
    - name: Sub-skill name

    Optional fields: description, icon
    """
    data = get_json_body()
    sub_skill = category_service.create_sub_skill(
        admin_id=to_int(data.get('admin_id'), 'admin_id'),
        category_id=category_id,
        name=require(data, 'name'),
        description=data.get('description'),
        icon=data.get('icon')
    )
    return jsonify({'success': True, 'sub_skill': sub_skill}), 201
