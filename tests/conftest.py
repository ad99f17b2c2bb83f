import time
import uuid
from datetime import datetime
from types import SimpleNamespace

import jwt
import pytest

from after8 import create_app, db
from after8.config import TestConfig
from after8.models import User, Event, EventRegistration


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_token(user_id, email, role='USER', name=None, secret=TestConfig.SUPABASE_JWT_SECRET,
               audience='authenticated', expires_in=3600):
    payload = {
        'sub': user_id,
        'email': email,
        'aud': audience,
        'exp': int(time.time()) + expires_in,
        'user_metadata': {'role': role},
    }
    if name:
        payload['user_metadata']['name'] = name
    return jwt.encode(payload, secret, algorithm='HS256')


@pytest.fixture
def auth_headers():
    """Builds an Authorization header for a user with the given role."""
    def _headers(user_id=None, role='USER', email=None, name=None):
        user_id = user_id or str(uuid.uuid4())
        email = email or f"{user_id[:8]}@after8.app"
        return {'Authorization': f"Bearer {make_token(user_id, email, role=role, name=name)}"}
    return _headers


@pytest.fixture
def make_user(app):
    def _make(name='Guest', role='USER', email=None, badges=None):
        user_id = str(uuid.uuid4())
        user = User(
            id=user_id,
            name=name,
            email=email or f"{user_id[:8]}@after8.app",
            role=role,
            badges=badges or [],
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def make_event(app):
    def _make(name='Friday Supper', admin=None, city='Lisbon', price=40.0, keywords=None):
        event = Event(
            name=name,
            max_seats=8,
            scheduled=datetime(2026, 11, 6, 20, 0),
            price=price,
            venue='Casa Nova',
            city=city,
            keywords=keywords or [],
            admin_id=admin.id if admin else None,
        )
        db.session.add(event)
        db.session.commit()
        return event
    return _make


@pytest.fixture
def register(app):
    def _register(event, user, status='PENDING'):
        registration = EventRegistration(event_id=event.id, user_id=user.id, status=status)
        db.session.add(registration)
        db.session.commit()
        return registration
    return _register


class FakeAuthAdmin:
    """Stands in for supabase.auth.admin and records every call."""

    def __init__(self):
        self.calls = []
        self.fail_with = None

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail_with:
            raise self.fail_with

    def create_user(self, attributes):
        self._record('create_user', attributes)
        return SimpleNamespace(user=SimpleNamespace(id=str(uuid.uuid4())))

    def update_user_by_id(self, user_id, attributes):
        self._record('update_user_by_id', user_id, attributes)
        return SimpleNamespace(user=SimpleNamespace(id=user_id))

    def delete_user(self, user_id):
        self._record('delete_user', user_id)


@pytest.fixture
def supabase_admin(monkeypatch):
    admin = FakeAuthAdmin()
    client = SimpleNamespace(auth=SimpleNamespace(admin=admin))
    monkeypatch.setattr('after8.services.users.create_client', lambda url, key: client)
    return admin
