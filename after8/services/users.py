# after8/services/users.py
# User management (admin), own profile, and badge assignment.

from flask import current_app
from sqlalchemy import or_
from supabase import create_client
from after8 import db
from after8.models import User, Event, Invitation, BadgeRule
from after8.utils import success, error

# --- BADGES ---
SPARK_MEMBER = 'SPARK_MEMBER'
AFTER8_INSIDER = 'AFTER8_INSIDER'
LEGACY_MEMBER = 'LEGACY_MEMBER'
TABLE_FAVOURITE = 'TABLE_FAVOURITE'
LEGENDARY_PRESENCE = 'LEGENDARY_PRESENCE'
GOLDEN_SPOON = 'GOLDEN_SPOON'
THE_FOOD_ORACLE = 'THE_FOOD_ORACLE'
THE_PLUS_ONE_MAGNET = 'THE_PLUS_ONE_MAGNET'
HOST_TITLE = 'HOST_TITLE'

DINNER_BADGES = (SPARK_MEMBER, AFTER8_INSIDER, LEGACY_MEMBER)
REVIEW_BADGES = (TABLE_FAVOURITE, LEGENDARY_PRESENCE)


def _supabase_admin():
    """
    Supabase Auth admin API, or None when the service role key is not set.
    """
    supabase_url = current_app.config.get('SUPABASE_URL')
    supabase_key = current_app.config.get('SUPABASE_SERVICE_ROLE_KEY')
    if not supabase_url or not supabase_key:
        return None
    return create_client(supabase_url, supabase_key).auth.admin


# --- ADMIN USER MANAGEMENT SERVICES ---

def create_user(data):
    """
    Creates the account in Supabase Auth first, then upserts the local row
    under the id Supabase assigned.
    """
    admin = _supabase_admin()
    if admin is None:
        return error("Supabase credentials not configured.", 500)

    try:
        response = admin.create_user({
            "email": data.email,
            "password": data.password,
            "email_confirm": True,
            "user_metadata": {"name": data.name, "role": data.role},
        })
        auth_user = getattr(response, 'user', None)
        if auth_user is None:
            return error("Supabase user creation failed: Unknown error", 500)
    except Exception as e:
        current_app.logger.error(f"Supabase user creation failed for {data.email}: {str(e)}")
        return error(f"Supabase user creation failed: {str(e)}", 500)

    try:
        user = db.session.get(User, auth_user.id)
        if user is None:
            user = User(id=auth_user.id, badges=[])
            db.session.add(user)

        user.email = data.email
        user.role = data.role
        if data.name is not None:
            user.name = data.name
        if data.phone is not None:
            user.phone = data.phone
        if data.location is not None:
            user.location = data.location

        db.session.commit()
        current_app.logger.info(f"Created user {user.email} ({user.role})")
        return success("User created successfully", user.to_dict(), 201)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Local user creation failed for {data.email}: {str(e)}", exc_info=True)
        return error(f"Could not create user: {str(e)}", 500)


def update_user(user_id, data):
    """
    Updates the user in Supabase Auth (so the next token carries the new
    role and name), then the local row.
    """
    user = db.session.get(User, user_id)
    if not user:
        return error("User not found.", 404)

    admin = _supabase_admin()
    if admin is None:
        return error("Supabase credentials not configured.", 500)

    try:
        admin.update_user_by_id(user_id, {
            "email": data.email,
            "password": data.password,
            "user_metadata": {"name": data.name, "phone": data.phone, "role": data.role},
        })
    except Exception as e:
        current_app.logger.error(f"Supabase Auth update failed for {user_id}: {str(e)}")
        return error(f"Supabase Auth update failed: {str(e)}", 500)

    try:
        user.email = data.email
        user.name = data.name
        user.phone = data.phone
        user.role = data.role
        user.location = data.location
        db.session.commit()
        return success("User updated successfully", user.to_dict())
    except Exception as e:
        db.session.rollback()
        return error(f"Could not update user: {str(e)}", 500)


def _delete_local_user(user):
    Invitation.query.filter(
        or_(Invitation.sender_id == user.id, Invitation.receiver_id == user.id)
    ).delete(synchronize_session=False)
    db.session.delete(user)
    db.session.commit()


def delete_user(user_id):
    """Deletes the account in Supabase Auth, then the local row and its data."""
    user = db.session.get(User, user_id)
    if not user:
        return error("User not found.", 404)

    admin = _supabase_admin()
    if admin is None:
        return error("Supabase credentials not configured.", 500)

    try:
        admin.delete_user(user_id)
    except Exception as e:
        current_app.logger.error(f"Supabase Auth delete failed for {user_id}: {str(e)}")
        return error(f"Failed to delete user in Supabase Auth: {str(e)}", 500)

    try:
        _delete_local_user(user)
        current_app.logger.info(f"Deleted user {user_id}")
        return success("User deleted successfully")
    except Exception as e:
        db.session.rollback()
        return error(f"Could not delete user: {str(e)}", 500)


def get_all_users():
    """All users for the admin dashboard."""
    try:
        users = User.query.order_by(User.email).all()
        user_list = [
            {
                "id": u.id,
                "name": u.name,
                "email": u.email,
                "phone": u.phone,
                "role": u.role,
                "location": u.location,
                "badges": list(u.badges or []),
            }
            for u in users
        ]
        return success("All users", user_list)
    except Exception as e:
        return error(f"Database error fetching users: {str(e)}", 500)


def get_user_by_id(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return error("User not found.", 404)
    return success("User profile", {
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
    })


# --- OWN PROFILE SERVICES ---

def get_my_profile(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return error("User not found.", 404)
    return success("My profile", {
        "email": user.email,
        "name": user.name,
        "badges": list(user.badges or []),
        "registrations": [r.to_dict() for r in user.registrations],
        "score": user.score,
        "level": {"name": user.level.name} if user.level else None,
    })


def update_profile(user_id, data):
    user = db.session.get(User, user_id)
    if not user:
        return error("User not found.", 404)
    try:
        user.name = data.name or ""
        user.phone = data.phone or ""
        user.location = data.location or ""
        db.session.commit()
        return success("Updated successfully")
    except Exception as e:
        db.session.rollback()
        return error(f"Could not update profile: {str(e)}", 500)


def delete_account(user_id):
    """Removes the caller's local data. The Supabase account is left to the frontend."""
    user = db.session.get(User, user_id)
    if not user:
        return error("User not found.", 404)
    try:
        _delete_local_user(user)
        return success("Deleted Account")
    except Exception as e:
        db.session.rollback()
        return error(f"Could not delete account: {str(e)}", 500)


# --- BADGES ---

def collect_user_stats(user):
    """Counters the badge rules are evaluated against."""
    ratings = [r.rating for r in user.reviews]
    comments = [len(r.comment) for r in user.reviews if r.comment]
    attended = sum(1 for r in user.registrations if r.status == 'APPROVED')
    hosted = Event.query.filter_by(admin_id=user.id).count()

    return {
        "dinnersAttended": attended,
        "dinnersHosted": hosted,
        "fiveStarReviews": sum(1 for rating in ratings if rating == 5),
        "avgRating": (sum(ratings) / len(ratings)) if ratings else 0.0,
        "maxCommentLength": max(comments) if comments else 0,
    }


def evaluate_badges(stats, rules):
    """
    Returns the badges earned under the given rules.

    A rule only awards when its relevant threshold is set and non-zero.
    THE_PLUS_ONE_MAGNET needs referral tracking and is never awarded.
    """
    earned = []
    for rule in rules:
        badge = rule.badge
        if badge in DINNER_BADGES:
            if rule.dinners and stats["dinnersAttended"] >= rule.dinners:
                earned.append(badge)
        elif badge in REVIEW_BADGES:
            if rule.reviews and stats["fiveStarReviews"] >= rule.reviews:
                earned.append(badge)
        elif badge == GOLDEN_SPOON:
            if rule.avg_rating and stats["avgRating"] >= rule.avg_rating:
                earned.append(badge)
        elif badge == THE_FOOD_ORACLE:
            if rule.comment_feed_length and stats["maxCommentLength"] >= rule.comment_feed_length:
                earned.append(badge)
        elif badge == HOST_TITLE:
            if (rule.hosted and rule.reviews
                    and stats["dinnersHosted"] >= rule.hosted
                    and stats["fiveStarReviews"] >= rule.reviews):
                earned.append(badge)
    return earned


def assign_badges(user_id):
    """Evaluates every badge rule for the user and stores the union with existing badges."""
    user = db.session.get(User, user_id)
    if not user:
        return error("User not found.", 404)

    try:
        stats = collect_user_stats(user)
        earned = evaluate_badges(stats, BadgeRule.query.order_by(BadgeRule.id).all())

        badges = list(user.badges or [])
        for badge in earned:
            if badge not in badges:
                badges.append(badge)

        # Reassign so the JSON column is flagged dirty.
        user.badges = badges
        db.session.commit()
        return success("Badges Assigned", {"badges": badges})
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Badge assignment failed for {user_id}: {str(e)}", exc_info=True)
        return error(f"Could not assign badges: {str(e)}", 500)
