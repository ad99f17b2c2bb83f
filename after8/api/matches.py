# after8/api/matches.py
# (Questionnaire answers and per-event compatibility groups.)

from flask import Blueprint, request, g
from pydantic import ValidationError
from after8.jwt_auth import require_jwt, staff_required
from after8.utils import _handle_service_result, validation_error
from after8.validators import UserAnswersSchema
from after8.services.matchmaking import save_answers, get_similar_matches

bp = Blueprint('matches', __name__)


@bp.route('/save', methods=['POST'])
@require_jwt
def save_answers_route():
    """Stores (or overwrites) the caller's questionnaire answers."""
    try:
        data = UserAnswersSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _handle_service_result(validation_error(e))
    return _handle_service_result(save_answers(g.current_user.id, data.answers))


@bp.route('/get/<string:event_id>', methods=['GET'])
@require_jwt
@staff_required
def similar_matches_route(event_id):
    """
    Participants of an event grouped into compatibility bands
    ("90-100" ... "below-50"). 404 when nobody is registered.
    """
    return _handle_service_result(get_similar_matches(event_id))
