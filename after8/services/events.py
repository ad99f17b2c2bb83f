# after8/services/events.py
# Event CRUD, registrations, invitations and reviews.

from datetime import timezone
from flask import current_app
from after8 import db
from after8.models import Event, EventRegistration, Invitation, Review
from after8.utils import success, error


def _naive_utc(value):
    """Stores schedules as naive UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _apply_event_fields(event, data):
    event.name = data.name
    event.max_seats = data.maxSeats
    event.scheduled = _naive_utc(data.scheduled)
    event.price = data.price
    event.venue = data.venue
    event.city = data.city
    event.keywords = list(data.keywords or [])
    event.plan = data.plan


# --- EVENT CRUD ---

def create_event(admin_id, data):
    try:
        event = Event(admin_id=admin_id)
        _apply_event_fields(event, data)
        db.session.add(event)
        db.session.commit()
        current_app.logger.info(f"Event '{event.name}' ({event.id}) created by {admin_id}")
        return success("Event created successfully", event.to_dict(), 201)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Event creation failed: {str(e)}", exc_info=True)
        return error(f"Database error creating event: {str(e)}", 500)


def update_event(event_id, data):
    event = db.session.get(Event, event_id)
    if not event:
        return error("Event not found", 404)
    try:
        _apply_event_fields(event, data)
        db.session.commit()
        return success("Event updated successfully", event.to_dict())
    except Exception as e:
        db.session.rollback()
        return error(f"Database error updating event: {str(e)}", 500)


def delete_event(event_id):
    event = db.session.get(Event, event_id)
    if not event:
        return error("Event not found", 404)
    try:
        db.session.delete(event)
        db.session.commit()
        current_app.logger.info(f"Event {event_id} deleted")
        return success("Event deleted successfully")
    except Exception as e:
        db.session.rollback()
        return error(f"Database error deleting event: {str(e)}", 500)


def get_all_events():
    events = Event.query.order_by(Event.scheduled).all()
    return success("Events", [e.to_dict() for e in events])


def get_event_by_id(event_id):
    event = db.session.get(Event, event_id)
    if not event:
        return error("Event not found", 404)
    return success("Event fetched successfully", event.to_dict())


def filter_events(criteria):
    """
    Events matching every given criterion: name contains (case-insensitive),
    exact city, exact price, and at least one shared keyword.
    """
    query = Event.query
    if criteria.name:
        query = query.filter(Event.name.ilike(f"%{criteria.name}%"))
    if criteria.city:
        query = query.filter(Event.city == criteria.city)
    if criteria.price is not None:
        query = query.filter(Event.price == criteria.price)

    events = query.order_by(Event.scheduled).all()

    # Keywords live in a JSON column; overlap is checked in Python so the
    # same code runs on SQLite and PostgreSQL.
    if criteria.keywords:
        wanted = set(criteria.keywords)
        events = [e for e in events if wanted.intersection(e.keywords or [])]

    return {
        "success": True,
        "message": "Filtered results retrieved successfully",
        "count": len(events),
        "data": [e.to_dict() for e in events],
    }


def search_events(name):
    query = Event.query
    if name:
        query = query.filter(Event.name.ilike(f"%{name}%"))
    events = query.order_by(Event.scheduled).all()
    return success("Searched successfully", [e.to_dict() for e in events])


# --- REGISTRATIONS ---

def _registration(event_id, user_id):
    return EventRegistration.query.filter_by(event_id=event_id, user_id=user_id).first()


def register_for_event(event_id, user_id):
    """Creates a PENDING registration. Registering twice returns the existing status."""
    if not db.session.get(Event, event_id):
        return error("Event not found", 404)

    existing = _registration(event_id, user_id)
    if existing:
        return success("Already registered", {"status": existing.status})

    try:
        registration = EventRegistration(event_id=event_id, user_id=user_id, status='PENDING')
        db.session.add(registration)
        db.session.commit()
        return success("Registration successful", registration.to_dict())
    except Exception as e:
        db.session.rollback()
        return error(f"Database error registering for event: {str(e)}", 500)


def check_registration(event_id, user_id):
    return success("Registration status", _registration(event_id, user_id) is not None)


def cancel_registration(event_id, user_id):
    registration = _registration(event_id, user_id)
    if not registration:
        return error("Registration not found", 404)
    try:
        db.session.delete(registration)
        db.session.commit()
        return success("Cancelled event successfully")
    except Exception as e:
        db.session.rollback()
        return error(f"Database error cancelling registration: {str(e)}", 500)


# --- INVITATIONS ---

def send_invitation(sender_id, data):
    """
    Invites a registered user to an event. One invitation per
    (event, receiver); the receiver's registration goes back to PENDING.
    """
    registration = _registration(data.eventId, data.receiverId)
    if not registration:
        return error("User not registered for event", 404)

    if Invitation.query.filter_by(event_id=data.eventId, receiver_id=data.receiverId).first():
        return error("Invitation already sent", 400)

    try:
        db.session.add(Invitation(
            event_id=data.eventId,
            sender_id=sender_id,
            receiver_id=data.receiverId,
            status='SENT'
        ))
        registration.status = 'PENDING'
        db.session.commit()
        return success("Invitation sent successfully")
    except Exception as e:
        db.session.rollback()
        return error(f"Database error sending invitation: {str(e)}", 500)


def reject_invitation(data):
    registration = _registration(data.eventId, data.receiverId)
    if not registration:
        return error("User not registered for event", 404)

    invitation = Invitation.query.filter_by(event_id=data.eventId, receiver_id=data.receiverId).first()
    if not invitation:
        return error("Invitation not found", 404)

    try:
        invitation.status = 'DECLINED'
        registration.status = 'REJECTED'
        db.session.commit()
        return success("Invitation rejected successfully")
    except Exception as e:
        db.session.rollback()
        return error(f"Database error rejecting invitation: {str(e)}", 500)


def accept_invitation(user_id, event_id):
    invitation = Invitation.query.filter_by(event_id=event_id, receiver_id=user_id, status='SENT').first()
    if not invitation:
        return error("No pending invitation found", 404)

    registration = _registration(event_id, user_id)
    if not registration:
        return error("User not registered for event", 404)

    try:
        invitation.status = 'ACCEPTED'
        registration.status = 'APPROVED'
        db.session.commit()
        return success("You're confirmed for the event")
    except Exception as e:
        db.session.rollback()
        return error(f"Database error accepting invitation: {str(e)}", 500)


def _invitations_with_status(user_id, status):
    invitations = Invitation.query.filter_by(receiver_id=user_id, status=status).order_by(Invitation.id).all()
    return [i.to_dict() for i in invitations]


def invited_events(user_id):
    return success("Invitations", _invitations_with_status(user_id, 'SENT'))


def attended_events(user_id):
    return success("Attended events", _invitations_with_status(user_id, 'ACCEPTED'))


# --- REVIEWS ---

def submit_review(user_id, data):
    """Stores one review per category. A user reviews an event only once."""
    if not db.session.get(Event, data.eventId):
        return error("Event not found", 404)

    if Review.query.filter_by(event_id=data.eventId, user_id=user_id).first():
        return error("You have already submitted the feedback", 400)

    try:
        for item in data.reviews:
            db.session.add(Review(
                event_id=data.eventId,
                user_id=user_id,
                category_id=item.id,
                rating=item.rating,
                comment=item.message
            ))
        db.session.commit()
        return success("Feedback submitted successfully")
    except Exception as e:
        db.session.rollback()
        return error(f"Database error saving feedback: {str(e)}", 500)


def get_reviews():
    """Every event with its creator's name and its reviews."""
    events = Event.query.order_by(Event.scheduled).all()
    return success("Events feedback", [
        {
            **e.to_dict(include_registrations=False),
            "user": {"name": e.admin.name} if e.admin else None,
            "reviews": [r.to_dict() for r in e.reviews],
        }
        for e in events
    ])
