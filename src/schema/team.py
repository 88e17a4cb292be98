#
# team.py - teams bid inside a single auction
#
#
import enum

from sqlalchemy import UniqueConstraint, orm

from main import db
from schema.base import Base


class TeamRole(str, enum.Enum):
    MEMBER = 'MEMBER'
    VICE_CAPTAIN = 'VICE_CAPTAIN'
    CAPTAIN = 'CAPTAIN'


class Team(Base):
    __tablename__ = 'team'

    auction_id = db.Column(db.ForeignKey('auction.id', ondelete='CASCADE'), nullable=False, index=True)
    auction = orm.relationship('Auction', back_populates='teams')

    name = db.Column(db.String(255), nullable=False)

    captain_id = db.Column(db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)
    captain = orm.relationship('User')

    # coins left, and what the team started with
    budget = db.Column(db.Integer, nullable=False, default=0)
    original_budget = db.Column(db.Integer, nullable=False, default=0)

    members = orm.relationship('TeamMember', back_populates='team', cascade='all, delete-orphan')

    def member(self, user_id):
        for m in self.members:
            if m.user_id == user_id:
                return m
        return None

    def make_captain(self, user_id):
        """
        Point the team at a new captain and give them the CAPTAIN member
        row; anyone else holding that role drops to vice captain.
        """
        self.captain_id = user_id
        for m in self.members:
            if m.role == TeamRole.CAPTAIN and m.user_id != user_id:
                m.role = TeamRole.VICE_CAPTAIN

        member = self.member(user_id)
        if member is None:
            member = TeamMember(user_id=user_id)
            self.members.append(member)
        member.role = TeamRole.CAPTAIN
        return member


class TeamMember(Base):
    __tablename__ = 'team_member'
    __table_args__ = (
        UniqueConstraint('team_id', 'user_id', name='team_member_team_user'),
    )

    team_id = db.Column(db.ForeignKey('team.id', ondelete='CASCADE'), nullable=False, index=True)
    team = orm.relationship('Team', back_populates='members')

    user_id = db.Column(db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    user = orm.relationship('User')

    role = db.Column(db.String(20), nullable=False, default=TeamRole.MEMBER)   # MEMBER|VICE_CAPTAIN|CAPTAIN
