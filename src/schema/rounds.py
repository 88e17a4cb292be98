#
# rounds.py - rounds, bids and results
#
#
import enum

from sqlalchemy import Index, UniqueConstraint, orm

from main import db
from schema.base import Base
import utils


class RoundStatus(str, enum.Enum):
    OPEN = 'OPEN'
    CLOSED = 'CLOSED'


class Round(Base):
    __tablename__ = 'round'
    __table_args__ = (
        Index('round_auction_status_idx', 'auction_id', 'status'),
    )

    auction_id = db.Column(db.ForeignKey('auction.id', ondelete='CASCADE'), nullable=False)
    player_id = db.Column(db.String(36), nullable=False)
    tier_id = db.Column(db.String(36))

    status = db.Column(db.String(20), nullable=False, default=RoundStatus.OPEN)   # OPEN|CLOSED
    opened_at = db.Column(db.DateTime, nullable=False, default=utils.utcnow)
    closed_at = db.Column(db.DateTime)

    # minimum bid, and the running high bid for open outcry
    base_price = db.Column(db.Integer, nullable=False, default=0)
    current_bid_amount = db.Column(db.Integer)
    current_bid_team_id = db.Column(db.ForeignKey('team.id', ondelete='SET NULL'))
    bid_count = db.Column(db.Integer, nullable=False, default=0)

    # open outcry: raises are refused from this point on
    timer_expires_at = db.Column(db.DateTime)

    def encode(self):
        return {
            'id': self.id,
            'status': self.status,
            'playerId': self.player_id,
            'tierId': self.tier_id,
            'basePrice': self.base_price,
            'openedAt': utils.isoformat(self.opened_at),
            'closedAt': utils.isoformat(self.closed_at),
            'timerExpiresAt': utils.isoformat(self.timer_expires_at),
        }


class Bid(Base):
    __tablename__ = 'bid'
    __table_args__ = (
        Index('bid_round_team_player_idx', 'round_id', 'team_id', 'player_id'),
    )

    round_id = db.Column(db.ForeignKey('round.id', ondelete='CASCADE'), nullable=False)
    round = orm.relationship('Round')

    # plain column; a bid may point at a team that no longer exists
    team_id = db.Column(db.String(36), nullable=False)
    team = orm.relationship('Team', primaryjoin='foreign(Bid.team_id) == Team.id', viewonly=True)

    player_id = db.Column(db.String(36), nullable=False)
    amount = db.Column(db.Integer, nullable=False)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utils.utcnow)

    # open outcry only
    sequence_number = db.Column(db.Integer)

    is_winning_bid = db.Column(db.Boolean, nullable=False, default=False)


class AuctionResult(Base):
    __tablename__ = 'auction_result'
    __table_args__ = (
        UniqueConstraint('auction_id', 'player_id', name='auction_result_auction_player'),
    )

    auction_id = db.Column(db.ForeignKey('auction.id', ondelete='CASCADE'), nullable=False)
    player_id = db.Column(db.String(36), nullable=False)

    team_id = db.Column(db.ForeignKey('team.id', ondelete='CASCADE'), nullable=False, index=True)
    team = orm.relationship('Team')

    winning_bid_amount = db.Column(db.Integer, nullable=False)
    assigned_at = db.Column(db.DateTime, nullable=False, default=utils.utcnow)

    def encode(self):
        return {
            'playerId': self.player_id,
            'teamId': self.team_id,
            'amount': self.winning_bid_amount,
            'assignedAt': utils.isoformat(self.assigned_at),
        }
