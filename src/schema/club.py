#
# club.py - clubs own leagues, leagues own auctions
#
#
import enum

from sqlalchemy import UniqueConstraint, orm

from main import db
from schema.base import Base


class ClubVisibility(str, enum.Enum):
    PUBLIC = 'PUBLIC'
    PRIVATE = 'PRIVATE'


class ClubRole(str, enum.Enum):
    OWNER = 'OWNER'
    ADMIN = 'ADMIN'
    MODERATOR = 'MODERATOR'
    MEMBER = 'MEMBER'


class LeagueRole(str, enum.Enum):
    OWNER = 'OWNER'
    ADMIN = 'ADMIN'
    MEMBER = 'MEMBER'


class Club(Base):
    __tablename__ = 'club'

    name = db.Column(db.String(255), nullable=False)
    visibility = db.Column(db.String(20), nullable=False, default=ClubVisibility.PRIVATE)

    # None means no limit
    max_members = db.Column(db.Integer)

    memberships = orm.relationship('ClubMembership', back_populates='club')

    def is_public(self):
        return self.visibility == ClubVisibility.PUBLIC


class ClubMembership(Base):
    __tablename__ = 'club_membership'
    __table_args__ = (
        UniqueConstraint('club_id', 'user_id', name='club_membership_club_user'),
    )

    club_id = db.Column(db.ForeignKey('club.id', ondelete='CASCADE'), nullable=False, index=True)
    club = orm.relationship('Club', back_populates='memberships')

    user_id = db.Column(db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    user = orm.relationship('User')

    role = db.Column(db.String(20), nullable=False, default=ClubRole.MEMBER)


class League(Base):
    __tablename__ = 'league'

    name = db.Column(db.String(255), nullable=False)

    club_id = db.Column(db.ForeignKey('club.id', ondelete='SET NULL'), nullable=True)
    club = orm.relationship('Club')


class LeagueMembership(Base):
    __tablename__ = 'league_membership'
    __table_args__ = (
        UniqueConstraint('league_id', 'user_id', name='league_membership_league_user'),
    )

    league_id = db.Column(db.ForeignKey('league.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False)

    role = db.Column(db.String(20), nullable=False, default=LeagueRole.MEMBER)
