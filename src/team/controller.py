#
# team/controller.py
#
#
import structlog
from sqlalchemy.exc import SQLAlchemyError

import errors
import permission
from auction.controller import get_auction, get_team
from schema.team import TeamMember, TeamRole
from schema.user import User

logger = structlog.stdlib.get_logger()


def change_captain(session, requester_id, auction_id, team_id, form):
    """
    Hand the captaincy to an existing team member. Only the auction owner
    or the current captain may do this; the outgoing captain stays on the
    roster as vice captain.
    """
    auction = get_auction(session, auction_id)
    team = get_team(session, auction, team_id)

    if not permission.can_change_captain(requester_id, auction, team):
        raise errors.AccessDeniedError(
            "Permission denied - only auction owners and team captains can change captains")

    new_captain_id = form.new_captain_id
    if team.member(new_captain_id) is None:
        raise errors.ValidationError("New captain must be an existing team member")

    old_captain_id = team.captain_id
    try:
        team.make_captain(new_captain_id)
        if old_captain_id and old_captain_id != new_captain_id:
            old_member = team.member(old_captain_id)
            if old_member is None:
                team.members.append(TeamMember(user_id=old_captain_id, role=TeamRole.VICE_CAPTAIN))
            else:
                old_member.role = TeamRole.VICE_CAPTAIN
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise errors.StoreError("Failed to change team captain") from e

    logger.info("Changed team captain", auction_id=auction.id, team_id=team.id,
        old_captain_id=old_captain_id, new_captain_id=new_captain_id)

    user = User.get(session, new_captain_id)
    name = user.display_name if user else new_captain_id
    return {
        'success': True,
        'message': "%s has been promoted to team captain" % name,
        'newCaptain': user.encode() if user else {'id': new_captain_id},
        'team': {
            'id': team.id,
            'name': team.name,
            'captainId': team.captain_id,
        },
    }
