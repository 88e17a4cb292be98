import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

import errors
from schema.club import Club, ClubMembership, ClubRole

logger = structlog.stdlib.get_logger()


def get_club(session, club_id):
    club = session.get(Club, club_id)
    if club is None:
        raise errors.NotFoundError("Club not found")
    return club


def join_club(session, user_id, club_id):
    """
    Join a public club as a member. Returns (joined, club); joined is False
    when the user was already a member.
    """
    club = get_club(session, club_id)
    if not club.is_public():
        raise errors.AccessDeniedError("This club requires an invitation to join")

    existing = session.scalars(
        select(ClubMembership).where(
            ClubMembership.club_id == club.id,
            ClubMembership.user_id == user_id,
        )
    ).first()
    if existing is not None:
        return False, club

    if club.max_members:
        count = session.scalar(
            select(func.count(ClubMembership.id)).where(ClubMembership.club_id == club.id))
        if count >= club.max_members:
            raise errors.ConflictError("This club has reached its member limit")

    try:
        session.add(ClubMembership(club_id=club.id, user_id=user_id, role=ClubRole.MEMBER))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise errors.StoreError("Failed to join club") from e

    logger.info("Joined club", club_id=club.id, user_id=user_id)
    return True, club
