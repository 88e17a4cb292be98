import click
import flask
from flask_login import current_user
from flask_login import login_required

import errors
from auth import controller
from main import db
from schema.user import User

bp = flask.Blueprint('auth', __name__, url_prefix='/auth')


@bp.get('/me')
@login_required
def me():
    return flask.jsonify(user=current_user.user.encode(), isAdmin=current_user.is_admin())


@bp.cli.command('issue-token')
@click.argument('email')
def issue_token(email):
    """Print a bearer token for the user with EMAIL."""
    user = User.get_by_email(db.session, email)
    if user is None:
        raise click.ClickException(errors.NotFoundError("User not found").message)
    click.echo(controller.generate_token(user.id))
