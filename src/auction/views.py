import http

import flask
from flask_login import current_user
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError

import auth
import errors
import permission
import utils
from auction import controller
from forms.auction import CreateAuctionForm, UpdateTeamsForm
from forms.bid import OpenRoundForm, RaisePaddleForm, SealedBidForm
from forms.join import JoinAuctionForm
from forms.sale import SaleForm
from forms.state import StateForm
from main import db

bp = flask.Blueprint('auction', __name__, url_prefix='/auctions')


@bp.post('')
@login_required
def create_auction():
    form = CreateAuctionForm.parse(utils.json_body())
    auction = controller.create_auction(db.session, current_user.userid, form)
    return utils.jsonify(http.HTTPStatus.CREATED,
        id=auction.id,
        message="Auction created successfully",
        auction=auction.encode(),
        teams=controller.list_teams(db.session, auction.id))


@bp.get('/<auction_id>')
def get_auction(auction_id):
    auction = controller.get_auction(db.session, auction_id)
    permissions = permission.resolve_for_auction(db.session, auth.current_user_id(), auction)
    permission.require(permissions, 'canView')
    return flask.jsonify(auction=auction.encode(), permissions=permissions.encode())


@bp.post('/<auction_id>/sold')
def record_sale(auction_id):
    form = SaleForm.parse(utils.json_body())
    outcome = controller.record_sale(db.session, auction_id, form)
    return flask.jsonify(outcome.encode())


@bp.get('/<auction_id>/state')
def get_state(auction_id):
    try:
        return flask.jsonify(controller.get_state(db.session, auction_id))
    except SQLAlchemyError as e:
        raise errors.StoreError("Failed to load auction state") from e


@bp.put('/<auction_id>/state')
def save_state(auction_id):
    form = StateForm.parse(utils.json_body())
    try:
        state = controller.save_state(db.session, auction_id, form)
    except SQLAlchemyError as e:
        raise errors.StoreError("Failed to save auction state") from e
    return flask.jsonify(success=True, **state)


@bp.get('/<auction_id>/bids')
def get_bids(auction_id):
    """ Bids of the current open round """
    try:
        return flask.jsonify(controller.get_open_round_bids(db.session, auction_id))
    except SQLAlchemyError as e:
        raise errors.StoreError("Failed to fetch bids") from e


@bp.post('/<auction_id>/bids')
@login_required
def submit_bid(auction_id):
    form = SealedBidForm.parse(utils.json_body())
    bid = controller.submit_sealed_bid(db.session, current_user.userid, auction_id, form)
    return utils.jsonify(http.HTTPStatus.CREATED, success=True, bid=bid)


@bp.post('/<auction_id>/outcry/raise')
@login_required
def raise_paddle(auction_id):
    form = RaisePaddleForm.parse(utils.json_body())
    return flask.jsonify(controller.raise_paddle(db.session, current_user.userid, auction_id, form))


@bp.post('/<auction_id>/round')
@login_required
def open_round(auction_id):
    auction = controller.get_auction(db.session, auction_id)
    permission.require(
        permission.resolve_for_auction(db.session, current_user.userid, auction), 'canModerate')
    form = OpenRoundForm.parse(utils.json_body())
    try:
        round_ = controller.open_round(db.session, auction, form)
    except SQLAlchemyError as e:
        raise errors.StoreError("Failed to create round") from e
    return flask.jsonify(round=round_.encode())


@bp.delete('/<auction_id>/round')
@login_required
def close_round(auction_id):
    auction = controller.get_auction(db.session, auction_id)
    permission.require(
        permission.resolve_for_auction(db.session, current_user.userid, auction), 'canModerate')
    try:
        closed = controller.close_round(db.session, auction)
    except SQLAlchemyError as e:
        raise errors.StoreError("Failed to close round") from e
    return flask.jsonify(closed=closed)


@bp.get('/<auction_id>/join')
def get_permissions(auction_id):
    """ What the caller may do here; works without a login """
    user = auth.optional_user()
    permissions = permission.resolve(db.session, auth.current_user_id(), auction_id)
    return flask.jsonify(
        permissions=permissions.encode(),
        user=user.encode() if user else None)


@bp.post('/<auction_id>/join')
@login_required
def join(auction_id):
    form = JoinAuctionForm.parse(utils.json_body())
    try:
        permissions = controller.join_auction(db.session, current_user.user, auction_id, form)
    except SQLAlchemyError as e:
        raise errors.StoreError("Failed to join auction") from e
    return flask.jsonify(
        success=True,
        permissions=permissions.encode(),
        message="Successfully joined auction")


@bp.get('/<auction_id>/teams')
def list_teams(auction_id):
    return flask.jsonify(teams=controller.list_teams(db.session, auction_id))


@bp.put('/<auction_id>/teams')
@login_required
def update_teams(auction_id):
    auction = controller.get_auction(db.session, auction_id)
    permission.require(
        permission.resolve_for_auction(db.session, current_user.userid, auction), 'canManage')
    form = UpdateTeamsForm.parse(utils.json_body())
    teams = controller.update_teams(db.session, auction, form)
    return flask.jsonify(success=True, teams=teams)
