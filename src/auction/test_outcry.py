import datetime
import json

import pytest

import utils
from auction import outcry
from schema.auction import BiddingType
from schema.rounds import Round, RoundStatus

IPL_CONFIG = {
    'rules': [
        {'from_multiplier': 0, 'to_multiplier': 2, 'increment': 10},
        {'from_multiplier': 2, 'to_multiplier': 5, 'increment': 25},
        {'from_multiplier': 5, 'to_multiplier': 10, 'increment': 50},
        {'from_multiplier': 10, 'to_multiplier': 9999, 'increment': 100},
    ],
    'timer_seconds': 15,
}


@pytest.mark.parametrize('current, base, expected', [
    (100, 100, 10),
    (190, 100, 10),
    (200, 100, 25),
    (499, 100, 25),
    (500, 100, 50),
    (1000, 100, 100),
    (50, 0, 1),
])
def test_bracket_increments(current, base, expected):
    config = outcry.load_config(IPL_CONFIG)
    assert outcry.calculate_increment(current, base, config) == expected


def test_custom_config_falls_back_to_last_rule():
    config = outcry.load_config({
        'rules': [
            {'from_multiplier': 0, 'to_multiplier': 3, 'increment': 5},
            {'from_multiplier': 3, 'to_multiplier': 6, 'increment': 20},
        ],
    })
    assert config.timer_seconds is None
    assert outcry.calculate_next_bid(100, 100, config) == 105
    assert outcry.calculate_next_bid(700, 100, config) == 720


def test_missing_config_steps_by_base_price():
    for raw in (None, {}):
        config = outcry.load_config(raw)
        assert config.rules == []
        assert config.timer_seconds is None
        assert outcry.calculate_next_bid(300, 40, config) == 340


def test_opening_bid_is_at_least_one():
    assert outcry.opening_bid(0) == 1
    assert outcry.opening_bid(75) == 75


def _outcry_auction(session, make_user, make_auction, make_team, budget=1000,
        base_price=100, config=None):
    owner = make_user('owner')
    a_captain = make_user('a')
    b_captain = make_user('b')
    auction = make_auction(owner, bidding_type=BiddingType.OPEN_OUTCRY, budget=budget,
        outcry_config=config)
    a = make_team(auction, name='A', captain=a_captain)
    b = make_team(auction, name='B', captain=b_captain)
    round_ = Round(auction_id=auction.id, player_id='p1', status=RoundStatus.OPEN,
        base_price=base_price)
    session.add(round_)
    session.commit()
    return auction, round_, (a, a_captain), (b, b_captain)


def test_raise_without_config_steps_by_base_price(client, session, make_user, make_auction,
        make_team, auth_headers):
    auction, _, (a, a_captain), (b, b_captain) = _outcry_auction(
        session, make_user, make_auction, make_team)
    url = '/auctions/%s/outcry/raise' % auction.id

    r = client.post(url, json={'teamId': a.id}, headers=auth_headers(a_captain))
    assert utils.isok(r.status_code)
    d = json.loads(r.data)
    assert d['amount'] == 100
    assert d['sequence'] == 1
    assert d['nextBidAmount'] == 200
    assert d['timerExpiresAt'] is None

    d = json.loads(client.post(url, json={'teamId': b.id}, headers=auth_headers(b_captain)).data)
    assert d['amount'] == 200
    assert d['sequence'] == 2
    assert d['timerExpiresAt'] is None

    bids = json.loads(client.get('/auctions/%s/bids' % auction.id).data)['bids']
    assert [(bid['teamName'], bid['amount']) for bid in bids] == [('B', 200), ('A', 100)]


def test_raise_with_brackets_and_timer(client, session, make_user, make_auction, make_team,
        auth_headers):
    auction, round_, (a, a_captain), (b, b_captain) = _outcry_auction(
        session, make_user, make_auction, make_team, config=IPL_CONFIG)
    url = '/auctions/%s/outcry/raise' % auction.id

    d = json.loads(client.post(url, json={'teamId': a.id}, headers=auth_headers(a_captain)).data)
    assert d['amount'] == 100
    assert d['nextBidAmount'] == 110
    assert d['timerExpiresAt'] is not None

    d = json.loads(client.post(url, json={'teamId': b.id}, headers=auth_headers(b_captain)).data)
    assert d['amount'] == 110

    session.refresh(round_)
    assert round_.timer_expires_at is not None
    assert utils.isoformat(round_.timer_expires_at) == d['timerExpiresAt']


def test_raise_after_timer_runs_out(client, session, make_user, make_auction, make_team,
        auth_headers):
    auction, round_, (a, a_captain), (b, b_captain) = _outcry_auction(
        session, make_user, make_auction, make_team, config=IPL_CONFIG)
    url = '/auctions/%s/outcry/raise' % auction.id

    assert utils.isok(client.post(url, json={'teamId': a.id}, headers=auth_headers(a_captain)).status_code)

    session.refresh(round_)
    round_.timer_expires_at = utils.utcnow() - datetime.timedelta(seconds=1)
    session.commit()

    r = client.post(url, json={'teamId': b.id}, headers=auth_headers(b_captain))
    assert r.status_code == 400
    assert json.loads(r.data)['error'] == "Bidding time for this round has expired"


def test_free_player_opens_at_one_and_can_be_sold(client, session, make_user, make_auction,
        make_team, auth_headers):
    auction, _, (a, a_captain), (b, b_captain) = _outcry_auction(
        session, make_user, make_auction, make_team, base_price=0)
    url = '/auctions/%s/outcry/raise' % auction.id

    d = json.loads(client.post(url, json={'teamId': a.id}, headers=auth_headers(a_captain)).data)
    assert d['amount'] == 1
    assert d['nextBidAmount'] == 2

    r = client.post('/auctions/%s/sold' % auction.id,
        json={'playerId': 'p1', 'teamId': a.id, 'amount': d['amount']})
    assert utils.isok(r.status_code)
    assert json.loads(r.data)['winningBid'] == {'marked': True, 'reason': None}


def test_raise_paddle_twice_in_a_row(client, session, make_user, make_auction, make_team, auth_headers):
    auction, _, (a, a_captain), _ = _outcry_auction(session, make_user, make_auction, make_team)
    url = '/auctions/%s/outcry/raise' % auction.id

    assert utils.isok(client.post(url, json={'teamId': a.id}, headers=auth_headers(a_captain)).status_code)
    r = client.post(url, json={'teamId': a.id}, headers=auth_headers(a_captain))
    assert r.status_code == 400
    assert json.loads(r.data)['error'] == "Your team already holds the highest bid"


def test_raise_paddle_over_budget(client, session, make_user, make_auction, make_team, auth_headers):
    auction, _, (a, a_captain), (b, b_captain) = _outcry_auction(
        session, make_user, make_auction, make_team, budget=150)
    url = '/auctions/%s/outcry/raise' % auction.id

    assert utils.isok(client.post(url, json={'teamId': a.id}, headers=auth_headers(a_captain)).status_code)
    r = client.post(url, json={'teamId': b.id}, headers=auth_headers(b_captain))
    assert r.status_code == 400
    d = json.loads(r.data)
    assert d['error'] == "Insufficient budget for this bid"
    assert d['nextBid'] == 200
    assert d['remaining'] == 150


def test_raise_paddle_on_sealed_auction(client, session, make_user, make_auction, make_team, auth_headers):
    owner = make_user('owner')
    auction = make_auction(owner)
    team = make_team(auction)

    r = client.post('/auctions/%s/outcry/raise' % auction.id, json={'teamId': team.id},
        headers=auth_headers(owner))
    assert r.status_code == 400
    assert json.loads(r.data)['error'] == "This auction does not use open outcry bidding"
