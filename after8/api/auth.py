# after8/api/auth.py

from flask import Blueprint, jsonify, g
from after8.jwt_auth import require_jwt

bp = Blueprint('auth', __name__)


@bp.route('/me', methods=['GET'])
@require_jwt
def get_current_user():
    """
    Returns the caller's identity as carried by the Supabase token.

    The frontend calls this after Supabase login to confirm the backend
    accepts the token and to learn the user's role.

    Response:
        200: User details with authentication status
        401: Invalid or missing token
    """
    user = g.current_user

    return jsonify({
        "is_authenticated": True,
        "user_id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
    }), 200


# NOTE: sign-up, login and logout are handled by Supabase on the frontend.
# The frontend sends the Supabase access token as "Authorization: Bearer <token>".
