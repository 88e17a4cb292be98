import http

import flask
from flask_login import current_user
from flask_login import login_required

import utils
from club import controller
from main import db

bp = flask.Blueprint('club', __name__, url_prefix='/clubs')


@bp.post('/<club_id>/join')
@login_required
def join(club_id):
    joined, club = controller.join_club(db.session, current_user.userid, club_id)
    if not joined:
        return flask.jsonify(message="Already a member")
    return utils.jsonify(http.HTTPStatus.CREATED,
        message="Successfully joined club", clubName=club.name)
