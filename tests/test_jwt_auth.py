import uuid

from after8 import db
from after8.models import User
from tests.conftest import make_token


def test_missing_header_is_unauthorized(client):
    response = client.get('/api/auth/me')
    assert response.status_code == 401
    assert response.get_json()['error'] == 'Missing Authorization header'


def test_malformed_header_is_unauthorized(client):
    response = client.get('/api/auth/me', headers={'Authorization': 'Token abc'})
    assert response.status_code == 401


def test_expired_token(client):
    token = make_token(str(uuid.uuid4()), 'late@after8.app', expires_in=-60)
    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401
    assert response.get_json()['error'] == 'Token has expired'


def test_wrong_audience(client):
    token = make_token(str(uuid.uuid4()), 'aud@after8.app', audience='anon')
    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401
    assert response.get_json()['error'] == 'Invalid token audience'


def test_bad_signature(client):
    token = make_token(str(uuid.uuid4()), 'forged@after8.app', secret='another-secret-that-is-long-enough-too')
    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401


def test_first_request_provisions_user(client):
    user_id = str(uuid.uuid4())
    token = make_token(user_id, 'new@after8.app', role='MARKETING', name='Nina')

    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 200
    assert response.get_json() == {
        'is_authenticated': True,
        'user_id': user_id,
        'email': 'new@after8.app',
        'name': 'Nina',
        'role': 'MARKETING',
    }
    user = db.session.get(User, user_id)
    assert (user.email, user.name, user.role) == ('new@after8.app', 'Nina', 'MARKETING')


def test_token_metadata_is_synced(client, make_user):
    user = make_user(name='Keep Me', role='USER')
    token = make_token(user.id, 'changed@after8.app', role='ADMIN')

    assert client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'}).status_code == 200

    db.session.refresh(user)
    assert (user.email, user.role, user.name) == ('changed@after8.app', 'ADMIN', 'Keep Me')


def test_unknown_role_is_downgraded(client):
    token = make_token(str(uuid.uuid4()), 'odd@after8.app', role='SUPERUSER')
    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert response.get_json()['role'] == 'USER'


def test_duplicate_email_fails_provisioning(client, make_user):
    existing = make_user(email='taken@after8.app')
    token = make_token(str(uuid.uuid4()), existing.email)
    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401
    assert response.get_json()['error'] == 'User provisioning failed. Please contact support.'


def test_root_and_health(client):
    assert client.get('/').get_json() == {'message': 'After8 server is up'}
    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.get_json()['database'] == 'connected'
