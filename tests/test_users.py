from after8 import db
from after8.models import User, BadgeRule, Review, EventRegistration, Invitation
from after8.services.users import (
    evaluate_badges,
    SPARK_MEMBER,
    GOLDEN_SPOON,
    HOST_TITLE,
    THE_FOOD_ORACLE,
    TABLE_FAVOURITE,
    THE_PLUS_ONE_MAGNET,
)

NEW_USER = {
    'name': 'Marta',
    'email': 'marta@after8.app',
    'password': 'secret123',
    'phone': '+351900000000',
    'role': 'MARKETING',
}


def test_admin_creates_user_in_supabase_and_locally(client, auth_headers, supabase_admin):
    response = client.post('/api/users/authorized/create', headers=auth_headers(role='ADMIN'), json=NEW_USER)

    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['email'] == 'marta@after8.app'
    assert data['role'] == 'MARKETING'

    name, attributes = supabase_admin.calls[0]
    assert name == 'create_user'
    assert attributes['email_confirm'] is True
    assert attributes['user_metadata'] == {'name': 'Marta', 'role': 'MARKETING'}
    assert db.session.get(User, data['id']).phone == '+351900000000'


def test_create_user_defaults_role(client, auth_headers, supabase_admin):
    body = {k: v for k, v in NEW_USER.items() if k != 'role'}
    response = client.post('/api/users/authorized/create', headers=auth_headers(role='ADMIN'), json=body)
    assert response.get_json()['data']['role'] == 'USER'


def test_create_user_rejects_short_password(client, auth_headers, supabase_admin):
    body = dict(NEW_USER, password='123')
    response = client.post('/api/users/authorized/create', headers=auth_headers(role='ADMIN'), json=body)
    assert response.status_code == 400
    assert supabase_admin.calls == []


def test_create_user_surfaces_supabase_failure(client, auth_headers, supabase_admin):
    supabase_admin.fail_with = RuntimeError('email taken')
    response = client.post('/api/users/authorized/create', headers=auth_headers(role='ADMIN'), json=NEW_USER)

    assert response.status_code == 500
    assert 'email taken' in response.get_json()['error']
    assert User.query.filter_by(email='marta@after8.app').first() is None


def test_non_admin_cannot_manage_users(client, auth_headers, supabase_admin):
    response = client.post('/api/users/authorized/create', headers=auth_headers(role='MARKETING'), json=NEW_USER)
    assert response.status_code == 403
    assert client.get('/api/users/authorized/all', headers=auth_headers()).status_code == 403


def test_update_user(client, auth_headers, make_user, supabase_admin):
    user = make_user(name='Old')
    body = dict(NEW_USER, email=user.email, name='New', role='ADMIN')

    response = client.patch(f'/api/users/authorized/update/{user.id}', headers=auth_headers(role='ADMIN'), json=body)

    assert response.status_code == 200
    assert supabase_admin.calls[0][0:2] == ('update_user_by_id', user.id)
    db.session.refresh(user)
    assert (user.name, user.role) == ('New', 'ADMIN')


def test_update_missing_user(client, auth_headers, supabase_admin):
    response = client.patch('/api/users/authorized/update/nope', headers=auth_headers(role='ADMIN'), json=NEW_USER)
    assert response.status_code == 404
    assert supabase_admin.calls == []


def test_delete_user_removes_related_rows(client, auth_headers, make_user, make_event, register, supabase_admin):
    event = make_event()
    user, other = make_user(), make_user()
    register(event, user)
    db.session.add(Invitation(event_id=event.id, sender_id=other.id, receiver_id=user.id, status='SENT'))
    db.session.commit()
    user_id = user.id

    response = client.delete(f'/api/users/authorized/delete/{user_id}', headers=auth_headers(role='ADMIN'))

    assert response.status_code == 200
    assert supabase_admin.calls == [('delete_user', user_id)]
    assert db.session.get(User, user_id) is None
    assert EventRegistration.query.filter_by(user_id=user_id).count() == 0
    assert Invitation.query.filter_by(receiver_id=user_id).count() == 0


def test_list_and_get_users(client, auth_headers, make_user):
    user = make_user(name='Listed')
    headers = auth_headers(role='ADMIN')

    emails = [u['email'] for u in client.get('/api/users/authorized/all', headers=headers).get_json()['data']]
    assert user.email in emails

    data = client.get(f'/api/users/authorized/get/{user.id}', headers=headers).get_json()['data']
    assert data == {'name': 'Listed', 'email': user.email, 'phone': None, 'role': 'USER'}

    assert client.get('/api/users/authorized/get/missing', headers=headers).status_code == 404


def test_me_and_update_profile(client, auth_headers, make_user):
    user = make_user(name='Before')
    headers = auth_headers(user_id=user.id, email=user.email)

    response = client.patch('/api/users/updateProfile', headers=headers,
                            json={'name': 'After', 'location': 'Lisbon'})
    assert response.status_code == 200

    data = client.get('/api/users/me', headers=headers).get_json()['data']
    assert data['name'] == 'After'
    assert data['score'] == 0
    assert data['level'] is None
    assert db.session.get(User, user.id).phone == ''


def test_delete_account(client, auth_headers, make_user):
    user = make_user()
    user_id = user.id
    response = client.delete('/api/users/deleteAccount', headers=auth_headers(user_id=user_id, email=user.email))
    assert response.status_code == 200
    assert db.session.get(User, user_id) is None


class Rule:
    def __init__(self, badge, **thresholds):
        self.badge = badge
        for field in ('dinners', 'hosted', 'reviews', 'avg_rating', 'comment_feed_length'):
            setattr(self, field, thresholds.get(field))


STATS = {
    'dinnersAttended': 3,
    'dinnersHosted': 1,
    'fiveStarReviews': 2,
    'avgRating': 4.5,
    'maxCommentLength': 120,
}


def test_evaluate_badges_thresholds():
    rules = [
        Rule(SPARK_MEMBER, dinners=3),
        Rule(TABLE_FAVOURITE, reviews=5),
        Rule(GOLDEN_SPOON, avg_rating=4.5),
        Rule(THE_FOOD_ORACLE, comment_feed_length=100),
        Rule(HOST_TITLE, hosted=1, reviews=2),
        Rule(THE_PLUS_ONE_MAGNET, dinners=1),
    ]
    assert evaluate_badges(STATS, rules) == [SPARK_MEMBER, GOLDEN_SPOON, THE_FOOD_ORACLE, HOST_TITLE]


def test_unset_threshold_never_awards():
    assert evaluate_badges(STATS, [Rule(SPARK_MEMBER, dinners=0), Rule(GOLDEN_SPOON)]) == []


def test_assign_badges_merges_with_existing(client, auth_headers, make_user, make_event, register):
    user = make_user(badges=['LEGACY_MEMBER'])
    event = make_event()
    register(event, user, status='APPROVED')
    db.session.add(Review(event_id=event.id, user_id=user.id, category_id='food', rating=5, comment='Great'))
    db.session.add(BadgeRule(badge=SPARK_MEMBER, dinners=1))
    db.session.add(BadgeRule(badge=TABLE_FAVOURITE, reviews=1))
    db.session.add(BadgeRule(badge=HOST_TITLE, hosted=1, reviews=1))
    db.session.commit()

    response = client.post('/api/users/assignBadges', headers=auth_headers(user_id=user.id, email=user.email))

    assert response.status_code == 200
    assert response.get_json()['data']['badges'] == ['LEGACY_MEMBER', SPARK_MEMBER, TABLE_FAVOURITE]
    assert db.session.get(User, user.id).badges == ['LEGACY_MEMBER', SPARK_MEMBER, TABLE_FAVOURITE]
