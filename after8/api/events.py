# after8/api/events.py
# (Event routes: staff CRUD under /authorized, public listing, and the
# attendee flows: registration, invitations, reviews.)

from flask import Blueprint, request, g
from pydantic import ValidationError
from after8.jwt_auth import require_jwt, admin_required, staff_required
from after8.utils import _handle_service_result, validation_error
from after8.validators import (
    CreateEventSchema,
    UpdateEventSchema,
    FilterEventSchema,
    SearchEventSchema,
    InvitationSchema,
    AcceptInvitationSchema,
    SubmitReviewSchema
)
from after8.services.events import (
    create_event,
    update_event,
    delete_event,
    get_all_events,
    get_event_by_id,
    filter_events,
    search_events,
    register_for_event,
    check_registration,
    cancel_registration,
    send_invitation,
    reject_invitation,
    accept_invitation,
    invited_events,
    attended_events,
    submit_review,
    get_reviews
)

bp = Blueprint('events', __name__)


def _validate(schema, payload):
    """Returns (model, None) or (None, error response)."""
    try:
        return schema.model_validate(payload), None
    except ValidationError as e:
        return None, _handle_service_result(validation_error(e))


def _filter():
    criteria, failure = _validate(FilterEventSchema, request.args.to_dict())
    if failure:
        return failure
    return _handle_service_result(filter_events(criteria))


def _search():
    criteria, failure = _validate(SearchEventSchema, request.args.to_dict())
    if failure:
        return failure
    return _handle_service_result(search_events(criteria.name))


# --- STAFF ROUTES ---

@bp.route('/authorized/create', methods=['POST'])
@require_jwt
@admin_required
def create_event_route():
    data, failure = _validate(CreateEventSchema, request.get_json(silent=True) or {})
    if failure:
        return failure
    return _handle_service_result(create_event(g.current_user.id, data))


@bp.route('/authorized/delete/<string:event_id>', methods=['DELETE'])
@require_jwt
@staff_required
def delete_event_route(event_id):
    return _handle_service_result(delete_event(event_id))


@bp.route('/authorized/update/<string:event_id>', methods=['PATCH'])
@require_jwt
@staff_required
def update_event_route(event_id):
    data, failure = _validate(UpdateEventSchema, request.get_json(silent=True) or {})
    if failure:
        return failure
    return _handle_service_result(update_event(event_id, data))


@bp.route('/authorized/all', methods=['GET'])
@require_jwt
@staff_required
def staff_all_events_route():
    return _handle_service_result(get_all_events())


@bp.route('/authorized/get/<string:event_id>', methods=['GET'])
@require_jwt
@staff_required
def staff_get_event_route(event_id):
    return _handle_service_result(get_event_by_id(event_id))


@bp.route('/authorized/filter', methods=['GET'])
@require_jwt
@staff_required
def staff_filter_events_route():
    return _filter()


@bp.route('/authorized/search', methods=['GET'])
@require_jwt
@staff_required
def staff_search_events_route():
    return _search()


@bp.route('/authorized/getReviews', methods=['GET'])
@require_jwt
@staff_required
def get_reviews_route():
    return _handle_service_result(get_reviews())


# --- PUBLIC ROUTES ---

@bp.route('/all', methods=['GET'])
def all_events_route():
    return _handle_service_result(get_all_events())


@bp.route('/get/<string:event_id>', methods=['GET'])
def get_event_route(event_id):
    return _handle_service_result(get_event_by_id(event_id))


@bp.route('/filter', methods=['GET'])
def filter_events_route():
    return _filter()


@bp.route('/search', methods=['GET'])
def search_events_route():
    return _search()


# --- ATTENDEE ROUTES ---

@bp.route('/register/<string:event_id>', methods=['POST'])
@require_jwt
def register_route(event_id):
    return _handle_service_result(register_for_event(event_id, g.current_user.id))


@bp.route('/cancelRegistration/<string:event_id>', methods=['DELETE'])
@require_jwt
def cancel_registration_route(event_id):
    return _handle_service_result(cancel_registration(event_id, g.current_user.id))


@bp.route('/checkRegisteredUser/<string:event_id>', methods=['GET'])
@require_jwt
def check_registration_route(event_id):
    return _handle_service_result(check_registration(event_id, g.current_user.id))


@bp.route('/sendInvitation', methods=['POST'])
@require_jwt
def send_invitation_route():
    data, failure = _validate(InvitationSchema, request.get_json(silent=True) or {})
    if failure:
        return failure
    return _handle_service_result(send_invitation(g.current_user.id, data))


@bp.route('/rejectInvitation', methods=['POST'])
@require_jwt
def reject_invitation_route():
    data, failure = _validate(InvitationSchema, request.get_json(silent=True) or {})
    if failure:
        return failure
    return _handle_service_result(reject_invitation(data))


@bp.route('/acceptInvitation', methods=['POST'])
@require_jwt
def accept_invitation_route():
    data, failure = _validate(AcceptInvitationSchema, request.get_json(silent=True) or {})
    if failure:
        return failure
    return _handle_service_result(accept_invitation(g.current_user.id, data.eventId))


@bp.route('/invitedEvents', methods=['GET'])
@require_jwt
def invited_events_route():
    return _handle_service_result(invited_events(g.current_user.id))


@bp.route('/attendedEvents', methods=['GET'])
@require_jwt
def attended_events_route():
    return _handle_service_result(attended_events(g.current_user.id))


@bp.route('/submitReview', methods=['POST'])
@require_jwt
def submit_review_route():
    data, failure = _validate(SubmitReviewSchema, request.get_json(silent=True) or {})
    if failure:
        return failure
    return _handle_service_result(submit_review(g.current_user.id, data))
