#
# permission - who may do what in an auction
#
# Every route that needs an authorization decision asks this module; the
# capabilities are derived from ownership, auction participation, league
# membership and the league's club.
#
from __future__ import annotations

from typing import Literal, Optional

import pydantic
import structlog
from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.orm import Session

import errors
from schema import StrictBaseModel
from schema.auction import Auction, AuctionParticipation, ParticipationRole
from schema.club import ClubMembership, ClubRole, League, LeagueMembership, LeagueRole
from schema.team import Team, TeamRole

logger = structlog.stdlib.get_logger()

Capability = Literal["canView", "canJoin", "canModerate", "canManage"]


class AuctionPermissions(StrictBaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    can_view: bool = False
    can_join: bool = False
    can_moderate: bool = False
    can_manage: bool = False
    role: Optional[str] = None

    def allows(self, capability: Capability) -> bool:
        return bool(self.model_dump(by_alias=True)[capability])

    def encode(self) -> dict:
        return self.model_dump(by_alias=True)


NO_ACCESS = AuctionPermissions()
OWNER_ACCESS = AuctionPermissions(
    can_view=True,
    can_join=True,
    can_moderate=True,
    can_manage=True,
    role=ParticipationRole.OWNER,
)


def resolve(
    session: Session, user_id: str | None, auction_id: str
) -> AuctionPermissions:
    auction = session.get(Auction, auction_id)
    if auction is None:
        return NO_ACCESS
    return resolve_for_auction(session, user_id, auction)


def resolve_for_auction(
    session: Session, user_id: str | None, auction: Auction
) -> AuctionPermissions:
    if user_id is None:
        # join always needs a league member, so anonymous users only ever view
        return AuctionPermissions(can_view=auction.is_public())

    if auction.owner_id == user_id:
        return OWNER_ACCESS

    participation = session.scalars(
        select(AuctionParticipation).where(
            AuctionParticipation.auction_id == auction.id,
            AuctionParticipation.user_id == user_id,
        )
    ).first()
    if participation is not None:
        return AuctionPermissions(
            can_view=True,
            can_join=True,
            can_moderate=participation.role
            in (ParticipationRole.OWNER, ParticipationRole.MODERATOR),
            can_manage=participation.role == ParticipationRole.OWNER,
            role=participation.role,
        )

    permissions = AuctionPermissions(can_view=auction.is_public())
    if auction.league_id is None:
        return permissions

    league_membership = session.scalars(
        select(LeagueMembership).where(
            LeagueMembership.league_id == auction.league_id,
            LeagueMembership.user_id == user_id,
        )
    ).first()
    if league_membership is not None:
        league_owner = league_membership.role == LeagueRole.OWNER
        return AuctionPermissions(
            can_view=True,
            can_join=True,
            can_moderate=league_owner,
            can_manage=league_owner,
        )

    club_role = _club_role(session, auction.league_id, user_id)
    if club_role in (ClubRole.OWNER, ClubRole.ADMIN):
        # club staff oversee the league's auctions without being able to join them
        return AuctionPermissions(
            can_view=True,
            can_moderate=True,
            can_manage=club_role == ClubRole.OWNER,
        )

    return permissions


def _club_role(session: Session, league_id: str, user_id: str) -> str | None:
    stmt = (
        select(ClubMembership.role)
        .join(League, League.club_id == ClubMembership.club_id)
        .where(League.id == league_id, ClubMembership.user_id == user_id)
    )
    return session.scalars(stmt).first()


def require(
    permissions: AuctionPermissions,
    capability: Capability,
    message: str = "Insufficient permissions",
) -> None:
    if not permissions.allows(capability):
        logger.info("Permission denied", capability=capability, role=permissions.role)
        raise errors.AccessDeniedError(message)


def can_bid_for_team(
    session: Session, user_id: str, auction: Auction, team: Team
) -> bool:
    """
    Captains and vice captains bid for their own team; the auction owner
    and moderators may bid on behalf of any team.
    """
    if team.captain_id == user_id or auction.owner_id == user_id:
        return True

    member = team.member(user_id)
    if member is not None and member.role in (TeamRole.CAPTAIN, TeamRole.VICE_CAPTAIN):
        return True

    role = session.scalars(
        select(AuctionParticipation.role).where(
            AuctionParticipation.auction_id == auction.id,
            AuctionParticipation.user_id == user_id,
        )
    ).first()
    return role in (ParticipationRole.OWNER, ParticipationRole.MODERATOR)


def can_change_captain(user_id: str, auction: Auction, team: Team) -> bool:
    return user_id in (auction.owner_id, team.captain_id)
