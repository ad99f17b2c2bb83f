# after8/api/game.py
# (Level configuration for staff, level assignment for users.)

from flask import Blueprint, request, g
from pydantic import ValidationError
from after8.jwt_auth import require_jwt, staff_required
from after8.utils import _handle_service_result, validation_error
from after8.validators import CreateLevelSchema, UpdateLevelSchema
from after8.services.game import create_level, update_level, assign_level

bp = Blueprint('game', __name__)


@bp.route('/newLevel', methods=['POST'])
@require_jwt
@staff_required
def create_level_route():
    try:
        data = CreateLevelSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _handle_service_result(validation_error(e))
    return _handle_service_result(create_level(data))


@bp.route('/updateLevel/<string:level_id>', methods=['PATCH'])
@require_jwt
@staff_required
def update_level_route(level_id):
    try:
        data = UpdateLevelSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _handle_service_result(validation_error(e))
    return _handle_service_result(update_level(level_id, data))


@bp.route('/assignLevel', methods=['POST'])
@require_jwt
def assign_level_route():
    """Recomputes the caller's score and level."""
    return _handle_service_result(assign_level(g.current_user.id))
