import flask
from flask_login import login_required

import auth
import errors
import utils
from monitoring import get_monitor

bp = flask.Blueprint('monitoring', __name__)


@bp.get('/metrics')
@login_required
def metrics():
    if not auth.dev_or_admin():
        raise errors.AccessDeniedError("Insufficient permissions")

    monitor = get_monitor()
    body = monitor.get_metrics()
    if flask.request.args.get('errors') == 'true':
        body['errors'] = monitor.get_errors()
    body['timestamp'] = utils.isoformat(utils.utcnow())
    body['uptime'] = round(monitor.uptime(), 2)
    return flask.jsonify(body)


@bp.route('/metrics', methods=['POST', 'DELETE'])
@auth.admin_required
def clear_metrics():
    get_monitor().clear()
    return flask.jsonify(success=True, message="Metrics cleared successfully")
