"""
JWT Authentication Middleware for Supabase Integration

Verifies Supabase-issued bearer tokens, keeps the local user table in sync,
and exposes role-checking decorators for staff-only routes.
"""

import jwt
from functools import wraps
from dataclasses import dataclass
from flask import request, jsonify, g, current_app
from after8.services.jit_provisioning import ensure_user_synced, JITProvisioningError


class JWTAuthError(Exception):
    """Custom exception for JWT authentication errors"""
    def __init__(self, message, status_code=401):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


@dataclass
class UserContext:
    """
    Lightweight user context extracted from JWT token.

    All fields come from the verified token's claims, so route handlers can
    read the caller's identity and role without another database lookup.
    """
    id: str          # From JWT 'sub' claim (Supabase UUID)
    email: str       # From JWT 'email' claim
    name: str        # From JWT 'user_metadata.name' claim
    role: str        # From JWT 'user_metadata.role' claim (USER/ADMIN/MARKETING)


def extract_token_from_header():
    """
    Extracts the JWT token from the Authorization header.

    Expected format: "Authorization: Bearer <token>"

    Raises:
        JWTAuthError: If Authorization header is missing or malformed
    """
    auth_header = request.headers.get('Authorization')

    if not auth_header:
        raise JWTAuthError("Missing Authorization header", 401)

    parts = auth_header.split()

    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise JWTAuthError("Invalid Authorization header format. Expected 'Bearer <token>'", 401)

    return parts[1]


def verify_supabase_token(token):
    """
    Verifies a Supabase JWT token and extracts user claims.

    Raises:
        JWTAuthError: If token is invalid, expired, or verification fails
    """
    jwt_secret = current_app.config.get('SUPABASE_JWT_SECRET')

    if not jwt_secret:
        raise JWTAuthError("SUPABASE_JWT_SECRET not configured", 500)

    try:
        return jwt.decode(
            token,
            jwt_secret,
            algorithms=['HS256'],
            audience='authenticated',  # Supabase default audience
            options={
                'verify_exp': True,
                'verify_aud': True,
            }
        )
    except jwt.ExpiredSignatureError:
        raise JWTAuthError("Token has expired", 401)
    except jwt.InvalidAudienceError:
        raise JWTAuthError("Invalid token audience", 401)
    except jwt.InvalidTokenError as e:
        raise JWTAuthError(f"Invalid token: {str(e)}", 401)


def create_user_context_from_token(payload):
    """
    Creates a UserContext from a verified JWT payload.

    Flow:
    1. Extract claims from JWT payload
    2. Sync user to database (INSERT/UPDATE as needed)
    3. Return the lightweight UserContext (NOT the ORM object)

    Raises:
        JWTAuthError: If required claims are missing or JIT provisioning fails
    """
    user_id = payload.get('sub')
    email = payload.get('email')

    user_metadata = payload.get('user_metadata') or {}
    name = user_metadata.get('name')
    role = user_metadata.get('role') or current_app.config.get('DEFAULT_ROLE', 'USER')

    if not user_id:
        raise JWTAuthError("Token missing 'sub' claim", 401)

    if not email:
        raise JWTAuthError("Token missing 'email' claim", 401)

    if role not in current_app.config.get('USER_ROLES', ('USER', 'ADMIN', 'MARKETING')):
        current_app.logger.warning(f"Token for {user_id} carries unknown role '{role}'. Treating as USER.")
        role = 'USER'

    try:
        ensure_user_synced(user_id=user_id, email=email, name=name, role=role)
    except JITProvisioningError as e:
        current_app.logger.error(
            f"Authentication failed for {email} ({user_id}): "
            f"JIT provisioning error: {e.message}"
        )
        raise JWTAuthError("User provisioning failed. Please contact support.", 401)

    return UserContext(id=user_id, email=email, name=name, role=role)


def require_jwt(f):
    """
    Decorator to protect routes with JWT authentication.

    1. Extracts the JWT token from the Authorization header
    2. Verifies the token using the Supabase JWT secret
    3. Syncs the user and builds a UserContext from the claims
    4. Stores the UserContext on g.current_user

    Usage:
        @bp.route('/protected')
        @require_jwt
        def protected_route():
            user = g.current_user
            return jsonify({"message": f"Hello {user.name}"})

    Error Responses:
        401: Missing, invalid, or expired token
        500: Server misconfiguration
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            token = extract_token_from_header()
            payload = verify_supabase_token(token)
            g.current_user = create_user_context_from_token(payload)
            g.is_authenticated = True
        except JWTAuthError as e:
            return jsonify({"success": False, "error": e.message, "error_code": e.status_code}), e.status_code

        return f(*args, **kwargs)

    return decorated_function


def roles_required(*roles):
    """
    Decorator factory restricting a route to the given roles.

    Must be used AFTER @require_jwt. The role is read from the token
    (g.current_user.role), not the database.

    Usage:
        @bp.route('/staff-only')
        @require_jwt
        @roles_required('ADMIN', 'MARKETING')
        def staff_route():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = getattr(g, 'current_user', None)

            if not user:
                return jsonify({"success": False, "error": "Authentication required.", "error_code": 401}), 401

            if user.role not in roles:
                return jsonify({
                    "success": False,
                    "error": f"Permission denied: requires one of {', '.join(roles)}.",
                    "error_code": 403
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


admin_required = roles_required('ADMIN')
staff_required = roles_required('ADMIN', 'MARKETING')


def get_current_user():
    """Returns the UserContext of the authenticated caller, or None."""
    return getattr(g, 'current_user', None)
