# models.py

import uuid
from datetime import datetime
from . import db

# This file defines the database tables for users, events, registrations,
# invitations, reviews, questionnaire answers and the gamification rules.


def _uuid():
    return str(uuid.uuid4())


# --- 1. LEVEL MODEL ---
class Level(db.Model):
    """
    A gamification tier. A user sits in the level whose score range
    contains their score. A null max_score means the range is open-ended.
    """
    __tablename__ = 'level'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(64), nullable=False)
    min_score = db.Column(db.Integer, nullable=False, default=0)
    max_score = db.Column(db.Integer, nullable=True)

    dinners = db.Column(db.Integer, nullable=True)
    hosted = db.Column(db.Integer, nullable=True)
    reviews = db.Column(db.Integer, nullable=True)
    avg_rating = db.Column(db.Float, nullable=True)
    min_referals = db.Column(db.Integer, nullable=True)
    min_tag_count = db.Column(db.Integer, nullable=True)
    comment_feed_length = db.Column(db.Integer, nullable=True)
    total_badges = db.Column(db.Integer, nullable=True)
    plan = db.Column(db.String(16), nullable=False, default='BASIC')

    def contains(self, score):
        """True when score falls inside [min_score, max_score]."""
        if score < self.min_score:
            return False
        return self.max_score is None or score <= self.max_score

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'minScore': self.min_score,
            'maxScore': self.max_score,
            'dinners': self.dinners,
            'hosted': self.hosted,
            'reviews': self.reviews,
            'avgRating': self.avg_rating,
            'minReferals': self.min_referals,
            'minTagCount': self.min_tag_count,
            'commentFeedLength': self.comment_feed_length,
            'totalBadges': self.total_badges,
            'plan': self.plan,
        }


# --- 2. USER MODEL ---
class User(db.Model):
    """
    Local mirror of a Supabase Auth user. The primary key is the Supabase UUID
    ('sub' claim); rows are created by JIT provisioning or by admin creation.
    """
    __tablename__ = 'user'

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(128), nullable=True)
    email = db.Column(db.String(120), index=True, unique=True, nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    location = db.Column(db.String(128), nullable=True)
    # Role determines access to staff routes: 'USER', 'ADMIN', 'MARKETING'
    role = db.Column(db.String(16), nullable=False, default='USER')
    plan = db.Column(db.String(16), nullable=False, default='BASIC')
    score = db.Column(db.Integer, nullable=False, default=0)
    badges = db.Column(db.JSON, nullable=False, default=list)
    level_id = db.Column(db.String(36), db.ForeignKey('level.id'), nullable=True)

    level = db.relationship('Level', backref='users', lazy=True)
    registrations = db.relationship('EventRegistration', backref='user', lazy=True,
                                    cascade="all, delete-orphan")
    reviews = db.relationship('Review', backref='user', lazy=True, cascade="all, delete-orphan")
    answers = db.relationship('UserAnswer', backref='user', lazy=True, cascade="all, delete-orphan")
    events = db.relationship('Event', backref='admin', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'location': self.location,
            'role': self.role,
            'plan': self.plan,
            'score': self.score,
            'badges': list(self.badges or []),
        }

    def __repr__(self):
        return f'<User {self.email} ({self.role})>'


# --- 3. EVENT MODEL ---
class Event(db.Model):
    __tablename__ = 'event'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(128), nullable=False)
    max_seats = db.Column(db.Integer, nullable=False)
    scheduled = db.Column(db.DateTime, nullable=False)
    price = db.Column(db.Float, nullable=False)
    venue = db.Column(db.String(256), nullable=False)
    city = db.Column(db.String(128), nullable=True)
    keywords = db.Column(db.JSON, nullable=False, default=list)
    plan = db.Column(db.String(16), nullable=False, default='BASIC')
    admin_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    registrations = db.relationship('EventRegistration', backref='event', lazy=True,
                                    cascade="all, delete-orphan",
                                    order_by='EventRegistration.id')
    invitations = db.relationship('Invitation', backref='event', lazy=True, cascade="all, delete-orphan")
    reviews = db.relationship('Review', backref='event', lazy=True, cascade="all, delete-orphan")

    def to_dict(self, include_registrations=True):
        data = {
            'id': self.id,
            'name': self.name,
            'maxSeats': self.max_seats,
            'scheduled': self.scheduled.isoformat() if self.scheduled else None,
            'price': self.price,
            'venue': self.venue,
            'city': self.city,
            'keywords': list(self.keywords or []),
            'plan': self.plan,
            'adminId': self.admin_id,
        }
        if include_registrations:
            data['registrations'] = [r.to_dict() for r in self.registrations]
        return data


# --- 4. EVENT REGISTRATION MODEL ---
class EventRegistration(db.Model):
    """A user's seat request for an event: PENDING, APPROVED or REJECTED."""
    __tablename__ = 'event_registration'
    __table_args__ = (db.UniqueConstraint('event_id', 'user_id', name='uq_registration_event_user'),)

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.String(36), db.ForeignKey('event.id'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default='PENDING')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'userId': self.user_id,
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


# --- 5. INVITATION MODEL ---
class Invitation(db.Model):
    __tablename__ = 'invitation'
    __table_args__ = (db.UniqueConstraint('event_id', 'receiver_id', name='uq_invitation_event_receiver'),)

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.String(36), db.ForeignKey('event.id'), nullable=False, index=True)
    sender_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False)
    receiver_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default='SENT')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'senderId': self.sender_id,
            'receiverId': self.receiver_id,
            'status': self.status,
            'event': self.event.to_dict() if self.event else None,
        }


# --- 6. REVIEW MODEL ---
class Review(db.Model):
    __tablename__ = 'review'

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.String(36), db.ForeignKey('event.id'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    category_id = db.Column(db.String(64), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'userId': self.user_id,
            'categoryId': self.category_id,
            'rating': self.rating,
            'comment': self.comment,
        }


# --- 7. USER ANSWER MODEL ---
class UserAnswer(db.Model):
    """
    One questionnaire response. Either a categorical choice (option_id) or a
    scaled numeric value; at least one is set. Unique per (user, question).
    """
    __tablename__ = 'user_answer'
    __table_args__ = (db.UniqueConstraint('user_id', 'question_id', name='uq_answer_user_question'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    question_id = db.Column(db.String(64), nullable=False)
    option_id = db.Column(db.String(64), nullable=True)
    scaled_value = db.Column(db.Float, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'questionId': self.question_id,
            'optionId': self.option_id,
            'scaledValue': self.scaled_value,
        }


# --- 8. BADGE RULE MODEL ---
class BadgeRule(db.Model):
    """Thresholds for awarding a badge. A null or zero threshold never awards."""
    __tablename__ = 'badge_rule'

    id = db.Column(db.Integer, primary_key=True)
    badge = db.Column(db.String(64), nullable=False, unique=True)
    dinners = db.Column(db.Integer, nullable=True)
    hosted = db.Column(db.Integer, nullable=True)
    reviews = db.Column(db.Integer, nullable=True)
    avg_rating = db.Column(db.Float, nullable=True)
    comment_feed_length = db.Column(db.Integer, nullable=True)
