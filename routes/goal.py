"""
Goal routes.
"""
from flask import Blueprint, jsonify
import logging
from injector import inject

from routes.params import get_json_body, require, to_int, to_float, to_date, int_arg
from services.exceptions import ValidationError
from services.goal_service import GoalService

logger = logging.getLogger(__name__)

goal_bp = Blueprint('goal', __name__, url_prefix='/api/v1/goals')


def _required_user_id() -> int:
    user_id = int_arg('user_id')
    if user_id is None:
        raise ValidationError("user_id is required")
    return user_id


@goal_bp.route('', methods=['GET'])
@inject
def list_goals(goal_service: GoalService):
    """
    Get a user's goals with live progress.

    Query parameters:
    - user_id: Owner profile ID (required)
    """
    return jsonify({
        'success': True,
        'data': goal_service.list_goals(_required_user_id())
    })


@goal_bp.route('', methods=['POST'])
@inject
def create_goal(goal_service: GoalService):
    """
    Create a goal.

    Required fields:
    - user_id: Owner profile ID
    - category_id: Category ID
    - target_hours: Hours needed (positive)
    - period: semester, year or custom

    Optional fields:
    - start_date: YYYY-MM-DD, defaults to today
    - end_date: YYYY-MM-DD, required for custom goals
    """
    data = get_json_body()
    goal = goal_service.create_goal(
        user_id=to_int(require(data, 'user_id'), 'user_id'),
        category_id=to_int(require(data, 'category_id'), 'category_id'),
        target_hours=to_float(require(data, 'target_hours'), 'target_hours'),
        period=require(data, 'period'),
        start_date=to_date(data.get('start_date'), 'start_date'),
        end_date=to_date(data.get('end_date'), 'end_date')
    )
    return jsonify({'success': True, 'goal': goal}), 201


@goal_bp.route('/<int:goal_id>', methods=['DELETE'])
@inject
def delete_goal(goal_id: int, goal_service: GoalService):
    """Delete an active goal. Query parameter user_id must be the owner."""
    goal_service.delete_goal(goal_id, _required_user_id())
    return jsonify({'success': True, 'goal_id': goal_id})
