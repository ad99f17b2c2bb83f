# after8/services/game.py
# Gamification levels: configuration and score-based assignment.

from flask import current_app
from after8 import db
from after8.models import Level, User
from after8.utils import success, error

# Request keys -> Level columns
LEVEL_FIELDS = {
    'name': 'name',
    'minScore': 'min_score',
    'maxScore': 'max_score',
    'dinners': 'dinners',
    'hosted': 'hosted',
    'reviews': 'reviews',
    'avgRating': 'avg_rating',
    'minReferals': 'min_referals',
    'minTagCount': 'min_tag_count',
    'commentFeedLength': 'comment_feed_length',
    'totalBadges': 'total_badges',
    'plan': 'plan',
}


def create_level(data):
    try:
        level = Level(**{column: getattr(data, key) for key, column in LEVEL_FIELDS.items()})
        db.session.add(level)
        db.session.commit()
        return success("New Level", level.to_dict(), 201)
    except Exception as e:
        db.session.rollback()
        return error(f"Database error creating level: {str(e)}", 500)


def update_level(level_id, data):
    """Applies only the keys the client actually sent."""
    level = db.session.get(Level, level_id)
    if not level:
        return error("Level not found", 404)

    try:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(level, LEVEL_FIELDS[key], value)
        db.session.commit()
        return success("Levels updated", level.to_dict())
    except Exception as e:
        db.session.rollback()
        return error(f"Database error updating level: {str(e)}", 500)


def calculate_score(registrations, badges):
    config = current_app.config
    return registrations * config['LEVEL_POINTS_PER_DINNER'] + badges * config['LEVEL_POINTS_PER_BADGE']


def find_level(levels, score):
    """First level, by ascending min_score, whose range contains the score."""
    for level in sorted(levels, key=lambda lvl: lvl.min_score):
        if level.contains(score):
            return level
    return None


def assign_level(user_id):
    """
    Recomputes the user's score from registrations and badges, stores it,
    and moves the user into the matching level.
    """
    user = db.session.get(User, user_id)
    if not user:
        return error("User not found", 404)

    try:
        score = calculate_score(len(user.registrations), len(user.badges or []))
        user.score = score

        levels = Level.query.all()
        if not levels:
            db.session.commit()
            return error("No levels configured", 500)

        level = find_level(levels, score)
        if level is None:
            db.session.commit()
            return {"success": True, "message": "User does not qualify for any level", "score": score}

        user.level_id = level.id
        db.session.commit()
        current_app.logger.info(f"User {user_id} assigned level '{level.name}' (score {score})")

        return success("Assigned level", {
            "score": score,
            "level": {
                "name": level.name,
                "minScore": level.min_score,
                "maxScore": level.max_score,
            }
        })
    except Exception as e:
        db.session.rollback()
        return error(f"Database error assigning level: {str(e)}", 500)
