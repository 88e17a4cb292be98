# auction.py
#
#
import enum

from sqlalchemy import UniqueConstraint, orm

from main import db
from schema.base import Base


class AuctionStatus(str, enum.Enum):
    DRAFT = 'DRAFT'
    LIVE = 'LIVE'
    COMPLETE = 'COMPLETE'


class BiddingType(str, enum.Enum):
    SEALED = 'SEALED'
    OPEN_OUTCRY = 'OPEN_OUTCRY'


class AuctionVisibility(str, enum.Enum):
    PUBLIC = 'PUBLIC'
    PRIVATE = 'PRIVATE'


class ParticipationRole(str, enum.Enum):
    OWNER = 'OWNER'
    MODERATOR = 'MODERATOR'
    CAPTAIN = 'CAPTAIN'
    VIEWER = 'VIEWER'


class Auction(Base):
    __tablename__ = 'auction'

    # who's running the auction
    owner_id = db.Column(db.ForeignKey('user.id'), nullable=False)
    owner = orm.relationship('User')

    # auctions outside a league can only be joined by existing participants
    league_id = db.Column(db.ForeignKey('league.id', ondelete='SET NULL'), nullable=True, index=True)
    league = orm.relationship('League')

    name = db.Column(db.String(255))
    visibility = db.Column(db.String(20), nullable=False, default=AuctionVisibility.PRIVATE)
    status = db.Column(db.String(20), nullable=False, default=AuctionStatus.DRAFT)      # DRAFT|LIVE|COMPLETE
    bidding_type = db.Column(db.String(20), nullable=False, default=BiddingType.SEALED)

    budget_per_team = db.Column(db.Integer, nullable=False, default=0)

    # increment rules for open outcry, see auction.outcry
    outcry_config = db.Column(db.JSON)

    # client maintained progress (player order, current index, ...); stored verbatim
    queue_state = db.Column(db.JSON)

    teams = orm.relationship('Team', back_populates='auction', order_by='Team.name')

    def is_live(self):
        return self.status == AuctionStatus.LIVE

    def is_open_outcry(self):
        return self.bidding_type == BiddingType.OPEN_OUTCRY

    def is_public(self):
        return self.visibility == AuctionVisibility.PUBLIC

    def encode(self):
        return {
            'id': self.id,
            'name': self.name,
            'ownerId': self.owner_id,
            'leagueId': self.league_id,
            'visibility': self.visibility,
            'status': self.status,
            'biddingType': self.bidding_type,
            'budgetPerTeam': self.budget_per_team,
            'outcryConfig': self.outcry_config,
        }


class AuctionParticipation(Base):
    __tablename__ = 'auction_participation'
    __table_args__ = (
        UniqueConstraint('auction_id', 'user_id', name='auction_participation_auction_user'),
    )

    auction_id = db.Column(db.ForeignKey('auction.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    team_id = db.Column(db.ForeignKey('team.id', ondelete='SET NULL'), nullable=True)

    role = db.Column(db.String(20), nullable=False, default=ParticipationRole.VIEWER)
