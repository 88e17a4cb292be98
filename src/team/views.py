import flask
from flask_login import current_user
from flask_login import login_required

import utils
from forms.captain import ChangeCaptainForm
from main import db
from team import controller

bp = flask.Blueprint('team', __name__, url_prefix='/auctions/<auction_id>/teams')


@bp.put('/<team_id>/captain')
@login_required
def change_captain(auction_id, team_id):
    form = ChangeCaptainForm.parse(utils.json_body())
    return flask.jsonify(
        controller.change_captain(db.session, current_user.userid, auction_id, team_id, form))
