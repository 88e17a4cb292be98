import flask
import sqlalchemy as sa
import structlog

from main import db

bp = flask.Blueprint('main', __name__)
logger = structlog.stdlib.get_logger()


@bp.get('/health')
def health():
    return flask.jsonify(status='ok')


@bp.get('/health/ready')
def ready():
    """ Ready once the database answers """
    try:
        db.session.execute(sa.text('SELECT 1'))
    except sa.exc.SQLAlchemyError:
        logger.warning("Database not ready", exc_info=True)
        return flask.jsonify(status='unavailable'), 503
    return flask.jsonify(status='ok')
