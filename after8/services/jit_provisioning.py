# after8/services/jit_provisioning.py
"""
Just-in-Time User Provisioning Service

Ensures that authenticated users (verified via Supabase JWT) exist in the
local user table and that their email, name and role match the token.

Sync Strategy:
- Sync metadata on every authenticated request
- Look users up by the UUID from the JWT 'sub' claim
- Fail authentication if provisioning fails (strict mode)
"""

from flask import current_app
from after8 import db
from after8.models import User
from sqlalchemy.exc import IntegrityError, OperationalError


class JITProvisioningError(Exception):
    """Custom exception for JIT provisioning failures"""
    def __init__(self, message, original_error=None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


def ensure_user_synced(user_id, email, name, role):
    """
    Ensures a user exists in the database and metadata is synchronized.

    Args:
        user_id (str): Supabase UUID from JWT 'sub' claim
        email (str): Email from JWT 'email' claim
        name (str): Display name from JWT 'user_metadata.name' (may be None)
        role (str): Role from JWT 'user_metadata.role'

    Returns:
        User: The synchronized User ORM object

    Raises:
        JITProvisioningError: If database sync fails
    """
    try:
        user = db.session.get(User, user_id)

        if user is None:
            current_app.logger.info(f"JIT Provisioning: Creating new user {email} (ID: {user_id})")

            try:
                user = User(id=user_id, email=email, name=name, role=role, badges=[])
                db.session.add(user)
                db.session.commit()
                return user

            except IntegrityError as e:
                # Another request created the user first
                db.session.rollback()
                current_app.logger.warning(
                    f"JIT Provisioning: Race condition detected for {email}. "
                    f"Retrying query. Error: {str(e)}"
                )
                user = db.session.get(User, user_id)
                if user is None:
                    raise JITProvisioningError(
                        f"Failed to create user {email} due to integrity constraint",
                        original_error=e
                    )

        changes = []

        if user.email != email:
            changes.append(f"email: {user.email} -> {email}")
            user.email = email

        # A token without a name never blanks a name set through the profile.
        if name and user.name != name:
            changes.append(f"name: {user.name} -> {name}")
            user.name = name

        if user.role != role:
            changes.append(f"role: {user.role} -> {role}")
            user.role = role

        if changes:
            current_app.logger.info(
                f"JIT Provisioning: Syncing metadata for {email} (ID: {user_id}). "
                f"Changes: {', '.join(changes)}"
            )
            try:
                db.session.commit()
            except IntegrityError as e:
                db.session.rollback()
                raise JITProvisioningError(
                    f"Failed to sync user {email}: duplicate email",
                    original_error=e
                )

        return user

    except OperationalError as e:
        db.session.rollback()
        current_app.logger.error(
            f"JIT Provisioning: Database connection error for user {email}. Error: {str(e)}"
        )
        raise JITProvisioningError(
            "Database connection failed during user provisioning",
            original_error=e
        )
