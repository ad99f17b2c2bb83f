# after8/api/users.py
# (User management for admins, and the caller's own profile.)

from flask import Blueprint, request, g
from pydantic import ValidationError
from after8.jwt_auth import require_jwt, admin_required
from after8.utils import _handle_service_result, validation_error
from after8.validators import CreateUserSchema, UpdateUserSchema, UpdateProfileSchema
from after8.services.users import (
    create_user,
    update_user,
    delete_user,
    get_all_users,
    get_user_by_id,
    get_my_profile,
    update_profile,
    delete_account,
    assign_badges
)

bp = Blueprint('users', __name__)


# --- ADMIN ROUTES ---

@bp.route('/authorized/create', methods=['POST'])
@require_jwt
@admin_required
def create_user_route():
    try:
        data = CreateUserSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _handle_service_result(validation_error(e))
    return _handle_service_result(create_user(data))


@bp.route('/authorized/update/<string:user_id>', methods=['PATCH'])
@require_jwt
@admin_required
def update_user_route(user_id):
    try:
        data = UpdateUserSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _handle_service_result(validation_error(e))
    return _handle_service_result(update_user(user_id, data))


@bp.route('/authorized/delete/<string:user_id>', methods=['DELETE'])
@require_jwt
@admin_required
def delete_user_route(user_id):
    return _handle_service_result(delete_user(user_id))


@bp.route('/authorized/all', methods=['GET'])
@require_jwt
@admin_required
def get_all_users_route():
    """Returns a list of all users for the admin dashboard."""
    return _handle_service_result(get_all_users())


@bp.route('/authorized/get/<string:user_id>', methods=['GET'])
@require_jwt
@admin_required
def get_user_route(user_id):
    return _handle_service_result(get_user_by_id(user_id))


# --- OWN PROFILE ROUTES ---

@bp.route('/me', methods=['GET'])
@require_jwt
def me_route():
    """Profile, badges, registrations, score and level of the caller."""
    return _handle_service_result(get_my_profile(g.current_user.id))


@bp.route('/updateProfile', methods=['PATCH'])
@require_jwt
def update_profile_route():
    try:
        data = UpdateProfileSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _handle_service_result(validation_error(e))
    return _handle_service_result(update_profile(g.current_user.id, data))


@bp.route('/deleteAccount', methods=['DELETE'])
@require_jwt
def delete_account_route():
    return _handle_service_result(delete_account(g.current_user.id))


@bp.route('/assignBadges', methods=['POST'])
@require_jwt
def assign_badges_route():
    return _handle_service_result(assign_badges(g.current_user.id))
