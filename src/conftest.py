#
# conftest.py - app, database and factories for the tests beside the code
#
#
import flask
import pytest

import main
from main.config import TestConfig


@pytest.fixture(scope='function')
def app():
    app = main.create_app(TestConfig)
    with app.app_context():
        import schema  # noqa: F401
        main.db.create_all()
        yield app
        main.db.session.remove()
        main.db.drop_all()


@pytest.fixture(scope='function')
def session(app):
    """The request-scoped session the views use"""
    return main.db.session


@pytest.fixture(scope='function')
def client(app):
    from flask.testing import FlaskClient

    class Client(FlaskClient):
        # requests reuse the fixture's app context, so drop the user
        # flask-login cached on g by the previous request
        def open(self, *args, **kwargs):
            flask.g.pop('_login_user', None)
            return super().open(*args, **kwargs)

    app.test_client_class = Client
    with app.test_client() as client:
        yield client


@pytest.fixture
def make_user(session):
    from schema.user import User, UserRole

    def make(name='user', email=None, admin=False):
        user = User(
            name=name,
            email=email or '%s@example.com' % name,
            role=UserRole.ADMIN if admin else UserRole.USER)
        session.add(user)
        session.commit()
        return user
    return make


@pytest.fixture
def make_club(session):
    from schema.club import Club, ClubVisibility

    def make(name='club', public=True, max_members=None):
        club = Club(
            name=name,
            visibility=ClubVisibility.PUBLIC if public else ClubVisibility.PRIVATE,
            max_members=max_members)
        session.add(club)
        session.commit()
        return club
    return make


@pytest.fixture
def make_league(session):
    from schema.club import League, LeagueMembership

    def make(name='league', club=None, members=()):
        """ members: (user, role) pairs """
        league = League(name=name, club_id=club.id if club else None)
        session.add(league)
        session.flush()
        for user, role in members:
            session.add(LeagueMembership(league_id=league.id, user_id=user.id, role=role))
        session.commit()
        return league
    return make


@pytest.fixture
def make_auction(session):
    from schema.auction import Auction, AuctionStatus, BiddingType

    def make(owner, status=AuctionStatus.LIVE, bidding_type=BiddingType.SEALED,
            league=None, budget=1000, **kwargs):
        auction = Auction(
            owner_id=owner.id,
            name=kwargs.pop('name', 'auction'),
            status=status,
            bidding_type=bidding_type,
            league_id=league.id if league else None,
            budget_per_team=budget,
            **kwargs)
        session.add(auction)
        session.commit()
        return auction
    return make


@pytest.fixture
def make_team(session):
    from schema.team import Team, TeamMember, TeamRole

    def make(auction, name='team', captain=None, members=(), budget=None):
        """ members: users added with the MEMBER role """
        if budget is None:
            budget = auction.budget_per_team
        team = Team(
            auction_id=auction.id,
            name=name,
            captain_id=captain.id if captain else None,
            budget=budget,
            original_budget=budget)
        if captain is not None:
            team.members.append(TeamMember(user_id=captain.id, role=TeamRole.CAPTAIN))
        for user in members:
            team.members.append(TeamMember(user_id=user.id, role=TeamRole.MEMBER))
        session.add(team)
        session.commit()
        return team
    return make


@pytest.fixture
def auth_headers(app):
    from auth.controller import generate_token

    def headers(user):
        return {'Authorization': 'Bearer %s' % generate_token(user.id)}
    return headers


@pytest.fixture
def failing_execute(monkeypatch):
    """ Session.execute raises OperationalError for statements picked by matches """
    from sqlalchemy.exc import OperationalError
    from sqlalchemy.orm import Session

    original = Session.execute

    def fail(matches):
        def execute(self, statement, *args, **kwargs):
            if matches(statement):
                raise OperationalError(str(statement), {}, Exception("database is unavailable"))
            return original(self, statement, *args, **kwargs)
        monkeypatch.setattr(Session, 'execute', execute)
    return fail
