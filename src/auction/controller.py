#
# auction/controller.py - auctions and their teams, rounds, bids, sales, queue state
#
#
from __future__ import annotations

import dataclasses
import datetime

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError

import errors
import permission
import utils
from auction import outcry
from schema.auction import Auction, AuctionParticipation, AuctionStatus, BiddingType
from schema.club import League
from schema.rounds import AuctionResult, Bid, Round, RoundStatus
from schema.team import Team
from schema.user import User

logger = structlog.stdlib.get_logger()

UNKNOWN_TEAM_NAME = 'Unknown'


def get_auction(session, auction_id):
    auction = session.get(Auction, auction_id)
    if auction is None:
        raise errors.NotFoundError("Auction not found")
    return auction


def get_team(session, auction, team_id):
    team = session.get(Team, team_id)
    if team is None or team.auction_id != auction.id:
        raise errors.NotFoundError("Team not found")
    return team


#
# auctions
#
def create_auction(session, owner_id, form):
    """
    New auctions start in DRAFT with every team on the full budget
    """
    if form.league_id is not None and session.get(League, form.league_id) is None:
        raise errors.NotFoundError("League not found")

    outcry_config = None
    if form.bidding_type == BiddingType.OPEN_OUTCRY and form.outcry_config is not None:
        outcry_config = form.outcry_config.model_dump()

    auction = Auction(
        owner_id=owner_id,
        league_id=form.league_id,
        name=form.name,
        visibility=form.visibility,
        status=AuctionStatus.DRAFT,
        bidding_type=form.bidding_type,
        budget_per_team=form.budget_per_team,
        outcry_config=outcry_config)
    for entry in form.teams:
        auction.teams.append(_new_team(auction, entry.name))

    try:
        session.add(auction)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise errors.StoreError("Failed to create auction") from e

    logger.info("Created auction", auction_id=auction.id, owner_id=owner_id,
        bidding_type=auction.bidding_type, teams=len(form.teams))
    return auction


def _new_team(auction, name):
    return Team(
        name=name,
        budget=auction.budget_per_team,
        original_budget=auction.budget_per_team)


#
# queue state
#
def get_state(session, auction_id):
    auction = get_auction(session, auction_id)
    return {'status': auction.status, 'queueState': auction.queue_state}


def save_state(session, auction_id, form):
    """
    Replace the queue state and/or status. The document is stored as sent;
    the last writer wins.
    """
    auction = get_auction(session, auction_id)
    if form.has_queue_state:
        auction.queue_state = form.queue_state
    if form.status:
        auction.status = form.status
    session.commit()
    logger.info("Saved auction state", auction_id=auction.id, status=auction.status)
    return {'status': auction.status, 'queueState': auction.queue_state}


#
# sales
#
@dataclasses.dataclass
class SaleOutcome:
    result: dict
    winning_bid_marked: bool
    reason: str | None = None

    def encode(self):
        return {
            'success': True,
            'result': self.result,
            'winningBid': {
                'marked': self.winning_bid_marked,
                'reason': self.reason,
            },
        }


def record_sale(session, auction_id, form):
    """
    Record that a player went to a team. The result is upserted on
    (auction, player), so recording the same player again overwrites the
    earlier sale. Marking the winning bid happens afterwards and may fail
    on its own; the outcome says whether it happened.
    """
    auction = session.get(Auction, auction_id)
    if auction is None or not auction.is_live():
        raise errors.InvalidRequestError("Auction not found or not live")

    team = session.get(Team, form.team_id)
    if team is None or team.auction_id != auction.id:
        raise errors.InvalidRequestError("Team does not belong to this auction")

    try:
        result = _upsert_result(session, auction, team, form.player_id, form.amount)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise errors.StoreError("Failed to record sale") from e

    recorded = result.encode()
    logger.info("Recorded sale", auction_id=auction_id, player_id=form.player_id,
        team_id=form.team_id, amount=form.amount)

    marked, reason = _mark_winning_bid(session, auction_id, form.player_id, form.team_id)
    return SaleOutcome(result=recorded, winning_bid_marked=marked, reason=reason)


def _upsert_result(session, auction, team, player_id, amount):
    result = session.scalars(
        select(AuctionResult).where(
            AuctionResult.auction_id == auction.id,
            AuctionResult.player_id == player_id,
        )
    ).first()

    previous_team_id = None
    if result is None:
        result = AuctionResult(auction_id=auction.id, player_id=player_id)
        session.add(result)
    else:
        previous_team_id = result.team_id

    result.team_id = team.id
    result.winning_bid_amount = amount
    result.assigned_at = utils.utcnow()
    session.flush()

    refresh_budget(session, team)
    if previous_team_id is not None and previous_team_id != team.id:
        previous = session.get(Team, previous_team_id)
        if previous is not None:
            refresh_budget(session, previous)
    return result


def refresh_budget(session, team):
    """ budget = what the team started with - everything it has won """
    spent = session.scalar(
        select(func.coalesce(func.sum(AuctionResult.winning_bid_amount), 0)).where(
            AuctionResult.auction_id == team.auction_id,
            AuctionResult.team_id == team.id,
        )
    )
    team.budget = team.original_budget - spent


def _mark_winning_bid(session, auction_id, player_id, team_id):
    try:
        round_ = session.scalars(
            select(Round)
            .where(
                Round.auction_id == auction_id,
                Round.player_id == player_id,
                Round.status == RoundStatus.OPEN,
            )
            .order_by(Round.opened_at.desc())
        ).first()
        if round_ is None:
            return False, 'no_open_round'

        bid = session.scalars(
            select(Bid)
            .where(
                Bid.round_id == round_.id,
                Bid.team_id == team_id,
                Bid.player_id == player_id,
            )
            .order_by(Bid.amount.desc(), Bid.submitted_at.desc())
        ).first()
        if bid is None:
            return False, 'no_matching_bid'

        # one winner per round
        session.execute(
            update(Bid)
            .where(Bid.round_id == round_.id, Bid.id != bid.id)
            .values(is_winning_bid=False)
        )
        bid.is_winning_bid = True
        session.commit()
        return True, None
    except SQLAlchemyError:
        session.rollback()
        logger.warning("Sale recorded but winning bid not marked",
            auction_id=auction_id, player_id=player_id, team_id=team_id, exc_info=True)
        return False, 'store_error'


#
# rounds
#
def get_open_round(session, auction_id):
    return session.scalars(
        select(Round)
        .where(Round.auction_id == auction_id, Round.status == RoundStatus.OPEN)
        .order_by(Round.opened_at.desc())
        .limit(1)
    ).first()


def open_round(session, auction, form):
    """ Close whatever is open and start bidding on a player """
    now = utils.utcnow()
    closed = _close_open_rounds(session, auction.id, now)
    round_ = Round(
        auction_id=auction.id,
        player_id=form.player_id,
        tier_id=form.tier_id,
        base_price=form.base_price,
        status=RoundStatus.OPEN,
        opened_at=now,
        bid_count=0)
    session.add(round_)
    session.commit()
    logger.info("Opened round", auction_id=auction.id, round_id=round_.id,
        player_id=form.player_id, closed=closed)
    return round_


def close_round(session, auction):
    closed = _close_open_rounds(session, auction.id, utils.utcnow())
    session.commit()
    logger.info("Closed rounds", auction_id=auction.id, closed=closed)
    return closed


def _close_open_rounds(session, auction_id, now):
    res = session.execute(
        update(Round)
        .where(Round.auction_id == auction_id, Round.status == RoundStatus.OPEN)
        .values(status=RoundStatus.CLOSED, closed_at=now)
        .execution_options(synchronize_session=False)
    )
    session.expire_all()
    return res.rowcount


#
# bids
#
def get_open_round_bids(session, auction_id):
    """
    Bids in the auction's current open round. Sealed bids come highest
    first, open outcry raises newest first. A failure to read the bids
    still answers with the round id and no bids.
    """
    round_ = get_open_round(session, auction_id)
    if round_ is None:
        return {'bids': [], 'roundId': None}
    round_id, player_id = round_.id, round_.player_id

    auction = session.get(Auction, auction_id)
    is_outcry = auction is not None and auction.is_open_outcry()
    if is_outcry:
        order = (Bid.sequence_number.desc(),)
    else:
        order = (Bid.amount.desc(), Bid.submitted_at.asc())

    try:
        rows = session.execute(
            select(Bid, Team.id, Team.name)
            .outerjoin(Team, Team.id == Bid.team_id)
            .where(Bid.round_id == round_id)
            .order_by(*order)
        ).all()
    except SQLAlchemyError:
        session.rollback()
        logger.warning("Failed to fetch bids", auction_id=auction_id,
            round_id=round_id, exc_info=True)
        return {'bids': [], 'roundId': round_id}

    bids = []
    for bid, team_id, team_name in rows:
        data = {
            'id': bid.id,
            'teamId': team_id or bid.team_id,
            'teamName': team_name or UNKNOWN_TEAM_NAME,
            'amount': bid.amount,
            'submittedAt': utils.isoformat(bid.submitted_at),
        }
        if is_outcry:
            data['sequence'] = bid.sequence_number
        bids.append(data)

    return {'bids': bids, 'roundId': round_id, 'playerId': player_id}


def _authorize_bidder(session, user_id, auction, team):
    if not permission.can_bid_for_team(session, user_id, auction, team):
        raise errors.AccessDeniedError(
            "Access denied - you are not authorized to bid for this team")


def _require_open_round(session, auction):
    round_ = get_open_round(session, auction.id)
    if round_ is None:
        raise errors.InvalidRequestError("No open round")
    return round_


def submit_sealed_bid(session, user_id, auction_id, form):
    """
    One sealed bid per team per round; a second submission replaces the first
    """
    auction = get_auction(session, auction_id)
    team = get_team(session, auction, form.team_id)
    _authorize_bidder(session, user_id, auction, team)

    if not auction.is_live():
        raise errors.InvalidRequestError("Auction is not live")
    if auction.is_open_outcry():
        raise errors.InvalidRequestError("This auction uses open outcry bidding")

    round_ = _require_open_round(session, auction)
    if form.amount < round_.base_price:
        raise errors.InvalidRequestError("Minimum bid is %d" % round_.base_price)
    if form.amount > team.budget:
        raise errors.InvalidRequestError("Insufficient budget")

    bid = session.scalars(
        select(Bid).where(
            Bid.round_id == round_.id,
            Bid.team_id == team.id,
            Bid.player_id == round_.player_id,
        )
    ).first()
    if bid is None:
        bid = Bid(round_id=round_.id, team_id=team.id, player_id=round_.player_id)
        session.add(bid)
    bid.amount = form.amount
    bid.submitted_at = utils.utcnow()
    bid.sequence_number = None
    session.commit()

    logger.info("Sealed bid submitted", auction_id=auction.id, round_id=round_.id,
        team_id=team.id, amount=form.amount)
    return {
        'id': bid.id,
        'roundId': round_.id,
        'playerId': round_.player_id,
        'teamId': team.id,
        'teamName': team.name,
        'amount': bid.amount,
        'submittedAt': utils.isoformat(bid.submitted_at),
    }


def raise_paddle(session, user_id, auction_id, form):
    """
    Open outcry: the team takes the high bid at the next increment. When the
    auction has a timer, every raise restarts it and no raise is accepted
    once it has run out.
    """
    auction = get_auction(session, auction_id)
    team = get_team(session, auction, form.team_id)
    _authorize_bidder(session, user_id, auction, team)

    if not auction.is_live():
        raise errors.InvalidRequestError("Auction is not live")
    if not auction.is_open_outcry():
        raise errors.InvalidRequestError("This auction does not use open outcry bidding")

    round_ = _require_open_round(session, auction)
    now = utils.utcnow()
    if round_.timer_expires_at is not None and now >= round_.timer_expires_at:
        raise errors.InvalidRequestError("Bidding time for this round has expired")
    if round_.current_bid_team_id == team.id:
        raise errors.InvalidRequestError("Your team already holds the highest bid")

    config = outcry.load_config(auction.outcry_config)
    base_price = round_.base_price or 0
    if round_.bid_count == 0:
        amount = outcry.opening_bid(base_price)
    else:
        current = round_.current_bid_amount or base_price
        amount = outcry.calculate_next_bid(current, base_price, config)

    if amount > team.budget:
        raise errors.InvalidRequestError("Insufficient budget for this bid",
            nextBid=amount, remaining=team.budget)

    sequence = round_.bid_count + 1
    bid = Bid(
        round_id=round_.id,
        team_id=team.id,
        player_id=round_.player_id,
        amount=amount,
        sequence_number=sequence,
        submitted_at=now)
    session.add(bid)
    round_.current_bid_amount = amount
    round_.current_bid_team_id = team.id
    round_.bid_count = sequence
    if config.timer_seconds:
        round_.timer_expires_at = now + datetime.timedelta(seconds=config.timer_seconds)
    timer_expires_at = utils.isoformat(round_.timer_expires_at)
    session.commit()

    logger.info("Paddle raised", auction_id=auction.id, round_id=round_.id,
        team_id=team.id, amount=amount, sequence=sequence)
    return {
        'success': True,
        'bidId': bid.id,
        'amount': amount,
        'sequence': sequence,
        'timerExpiresAt': timer_expires_at,
        'nextBidAmount': outcry.calculate_next_bid(amount, base_price, config),
    }


#
# participation
#
def join_auction(session, user, auction_id, form):
    permissions = permission.resolve(session, user.id, auction_id)
    permission.require(permissions, 'canJoin',
        "Access denied. You must be a member of the league to join this auction.")

    auction = get_auction(session, auction_id)
    if form.team_id is not None:
        team = session.get(Team, form.team_id)
        if team is None or team.auction_id != auction.id:
            raise errors.InvalidRequestError("Team does not belong to this auction")

    existing = session.scalars(
        select(AuctionParticipation).where(
            AuctionParticipation.auction_id == auction.id,
            AuctionParticipation.user_id == user.id,
        )
    ).first()
    if existing is None:
        session.add(AuctionParticipation(
            auction_id=auction.id,
            user_id=user.id,
            role=form.role,
            team_id=form.team_id))
        session.commit()
        logger.info("Joined auction", auction_id=auction.id, user_id=user.id, role=form.role)

    return permission.resolve_for_auction(session, user.id, auction)


#
# teams
#
def list_teams(session, auction_id):
    auction = get_auction(session, auction_id)
    results = session.scalars(
        select(AuctionResult)
        .where(AuctionResult.auction_id == auction.id)
        .order_by(AuctionResult.assigned_at)
    ).all()

    won = {}
    for result in results:
        won.setdefault(result.team_id, []).append(result.encode())

    return [
        {
            'id': team.id,
            'name': team.name,
            'captainId': team.captain_id,
            'budget': team.budget,
            'originalBudget': team.original_budget,
            'players': won.get(team.id, []),
        }
        for team in auction.teams
    ]


def update_teams(session, auction, form):
    """
    Replace the auction's team list: entries with a known id are renamed,
    the rest are created, and teams left out are deleted. Only DRAFT
    auctions can be edited.
    """
    if auction.status != AuctionStatus.DRAFT:
        raise errors.InvalidRequestError("Cannot modify teams - auction must be in DRAFT status")

    existing = {team.id: team for team in auction.teams}
    for entry in form.teams:
        if entry.captain_id is not None and User.get(session, entry.captain_id) is None:
            raise errors.ValidationError("Captain must be an existing user")

    kept = set()
    try:
        for entry in form.teams:
            team = existing.get(entry.id)
            if team is None:
                team = _new_team(auction, entry.name)
                auction.teams.append(team)
            else:
                team.name = entry.name
                kept.add(team.id)
            if entry.captain_id is not None:
                team.make_captain(entry.captain_id)

        for team_id, team in existing.items():
            if team_id not in kept:
                session.delete(team)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise errors.StoreError("Failed to update teams") from e

    logger.info("Updated teams", auction_id=auction.id, teams=len(form.teams),
        deleted=len(existing) - len(kept))
    return list_teams(session, auction.id)
