import json

from sqlalchemy import select

import utils
from schema.auction import AuctionParticipation, AuctionVisibility
from schema.club import LeagueRole


def test_join_requires_login(client, session, make_user, make_auction):
    auction = make_auction(make_user('owner'))

    r = client.post('/auctions/%s/join' % auction.id, json={})
    assert r.status_code == 401
    assert json.loads(r.data)['error'] == "Authentication required"


def test_join_needs_league_membership(client, session, make_user, make_league, make_auction, auth_headers):
    outsider = make_user('outsider')
    league = make_league()
    auction = make_auction(make_user('owner'), league=league)

    r = client.post('/auctions/%s/join' % auction.id, json={}, headers=auth_headers(outsider))
    assert r.status_code == 403
    assert json.loads(r.data)['error'] == \
        "Access denied. You must be a member of the league to join this auction."


def test_league_member_joins(client, session, make_user, make_league, make_auction, make_team, auth_headers):
    member = make_user('member')
    league = make_league(members=[(member, LeagueRole.MEMBER)])
    auction = make_auction(make_user('owner'), league=league)
    team = make_team(auction)
    url = '/auctions/%s/join' % auction.id

    r = client.post(url, json={'role': 'CAPTAIN', 'teamId': team.id}, headers=auth_headers(member))
    assert utils.isok(r.status_code)
    d = json.loads(r.data)
    assert d['success'] is True
    assert d['message'] == "Successfully joined auction"
    assert d['permissions']['role'] == 'CAPTAIN'
    assert d['permissions']['canJoin'] is True

    # joining again is a no-op
    assert utils.isok(client.post(url, json={}, headers=auth_headers(member)).status_code)
    participations = session.scalars(select(AuctionParticipation)).all()
    assert len(participations) == 1
    assert participations[0].team_id == team.id


def test_join_with_foreign_team(client, session, make_user, make_league, make_auction, make_team, auth_headers):
    member = make_user('member')
    league = make_league(members=[(member, LeagueRole.MEMBER)])
    owner = make_user('owner')
    auction = make_auction(owner, league=league)
    other = make_team(make_auction(owner, name='other'))

    r = client.post('/auctions/%s/join' % auction.id, json={'teamId': other.id},
        headers=auth_headers(member))
    assert r.status_code == 400


def test_permissions_anonymous(client, session, make_user, make_auction):
    private = make_auction(make_user('owner'))
    public = make_auction(private.owner, visibility=AuctionVisibility.PUBLIC)

    d = json.loads(client.get('/auctions/%s/join' % private.id).data)
    assert d['user'] is None
    assert d['permissions'] == {
        'canView': False, 'canJoin': False, 'canModerate': False, 'canManage': False, 'role': None,
    }

    d = json.loads(client.get('/auctions/%s/join' % public.id).data)
    assert d['permissions']['canView'] is True
    assert d['permissions']['canJoin'] is False


def test_permissions_owner(client, session, make_user, make_auction, auth_headers):
    owner = make_user('owner')
    auction = make_auction(owner)

    d = json.loads(client.get('/auctions/%s/join' % auction.id, headers=auth_headers(owner)).data)
    assert d['user']['id'] == owner.id
    assert d['permissions'] == {
        'canView': True, 'canJoin': True, 'canModerate': True, 'canManage': True, 'role': 'OWNER',
    }


def test_permissions_unknown_auction(client, session, make_user, auth_headers):
    r = client.get('/auctions/missing/join', headers=auth_headers(make_user('someone')))
    assert utils.isok(r.status_code)
    assert json.loads(r.data)['permissions']['canView'] is False
