import json

from sqlalchemy import select

from schema.club import ClubMembership, ClubRole


def test_join_public_club(client, session, make_user, make_club, auth_headers):
    user = make_user('user')
    club = make_club(name='Chess Club')

    r = client.post('/clubs/%s/join' % club.id, headers=auth_headers(user))
    assert r.status_code == 201
    assert json.loads(r.data) == {'message': "Successfully joined club", 'clubName': 'Chess Club'}

    membership = session.scalars(select(ClubMembership)).one()
    assert membership.user_id == user.id
    assert membership.role == ClubRole.MEMBER

    r = client.post('/clubs/%s/join' % club.id, headers=auth_headers(user))
    assert r.status_code == 200
    assert json.loads(r.data)['message'] == "Already a member"


def test_private_club(client, session, make_user, make_club, auth_headers):
    club = make_club(public=False)

    r = client.post('/clubs/%s/join' % club.id, headers=auth_headers(make_user('user')))
    assert r.status_code == 403
    assert json.loads(r.data)['error'] == "This club requires an invitation to join"


def test_full_club(client, session, make_user, make_club, auth_headers):
    club = make_club(max_members=1)
    first = make_user('first')
    second = make_user('second')

    assert client.post('/clubs/%s/join' % club.id, headers=auth_headers(first)).status_code == 201

    r = client.post('/clubs/%s/join' % club.id, headers=auth_headers(second))
    assert r.status_code == 409
    assert json.loads(r.data)['error'] == "This club has reached its member limit"


def test_join_club_errors(client, session, make_user, auth_headers):
    assert client.post('/clubs/missing/join').status_code == 401

    r = client.post('/clubs/missing/join', headers=auth_headers(make_user('user')))
    assert r.status_code == 404
    assert json.loads(r.data)['error'] == "Club not found"
