# after8/services/matchmaking.py
# Questionnaire answers and the per-event compatibility grouping.

import uuid
from flask import current_app
from after8 import db
from after8.models import User, UserAnswer, EventRegistration
from after8.utils import success, error
from after8.utils.match_utils import build_answer_set, group_by_band


def _is_valid_id(value):
    try:
        uuid.UUID(str(value))
        return True
    except (ValueError, TypeError, AttributeError):
        return False


# --- ANSWER STORE ---

def save_answers(user_id, answers):
    """
    Upserts the caller's answers keyed on (user, question), all in one commit.

    Args:
        user_id (str): the authenticated user
        answers (list): validated AnswerSchema items
    """
    try:
        question_ids = [a.questionId for a in answers]
        existing = {
            row.question_id: row
            for row in UserAnswer.query.filter(
                UserAnswer.user_id == user_id,
                UserAnswer.question_id.in_(question_ids)
            ).all()
        }

        for a in answers:
            row = existing.get(a.questionId)
            if row is None:
                row = UserAnswer(user_id=user_id, question_id=a.questionId)
                db.session.add(row)
                existing[a.questionId] = row
            row.option_id = a.optionId or None
            row.scaled_value = a.scaledValue

        db.session.commit()
        return success("Answers saved successfully")

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Saving answers failed for {user_id}: {str(e)}", exc_info=True)
        return error(f"Database error saving answers: {str(e)}", 500)


def get_answers(user_id):
    """Returns a user's answers as [{questionId, optionId, scaledValue}, ...]."""
    rows = UserAnswer.query.filter_by(user_id=user_id).order_by(UserAnswer.id).all()
    return [row.to_dict() for row in rows]


# --- USER DIRECTORY ---

def get_participants(event_id):
    """
    Users registered for an event (any status but REJECTED), in registration
    order, as [{userId, name}, ...].
    """
    rows = db.session.query(User.id, User.name).join(
        EventRegistration, EventRegistration.user_id == User.id
    ).filter(
        EventRegistration.event_id == event_id,
        EventRegistration.status != 'REJECTED'
    ).order_by(EventRegistration.id).all()

    return [{"userId": user_id, "name": name} for user_id, name in rows]


def _load_answer_map(user_ids):
    """
    Builds user id -> {questionId: {optionId, scaledValue}} for the given users.
    Users without answers get an empty set.
    """
    rows_by_user = {user_id: [] for user_id in user_ids}
    if user_ids:
        rows = UserAnswer.query.filter(UserAnswer.user_id.in_(user_ids)).order_by(UserAnswer.id).all()
        for row in rows:
            rows_by_user[row.user_id].append(row.to_dict())

    return {user_id: build_answer_set(answers) for user_id, answers in rows_by_user.items()}


# --- COMPATIBILITY MATCHER ---

def get_similar_matches(event_id):
    """
    Groups an event's participants into compatibility bands.

    Each participant's score is the mean of their pair scores against every
    other participant (see after8.utils.match_utils). Read-only: nothing is
    persisted, and repeated calls on unchanged answers return the same groups.

    Returns:
        dict on success with data = {band label: [{userId, name, avgScore}]}
        tuple (dict, 400) for a malformed event id
        tuple (dict, 404) when the event has no participants
    """
    if not event_id or not _is_valid_id(event_id):
        return error("Invalid event id.", 400)

    participants = get_participants(event_id)
    if not participants:
        return error("No participants found for this event.", 404)

    answer_map = _load_answer_map([p["userId"] for p in participants])
    groups = group_by_band(participants, answer_map, bands=current_app.config['MATCH_SCORE_BANDS'])

    current_app.logger.info(
        f"Matched {len(participants)} participants for event {event_id}: "
        + ", ".join(f"{label}={len(users)}" for label, users in groups.items())
    )
    return success("Matched Groups", groups)
