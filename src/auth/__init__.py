from functools import wraps

import flask
from flask_login import current_user

import errors
from auth import controller
from main import db, login_manager
from schema.user import User
from user.current_user import Anonymous, CurrentUser

login_manager.anonymous_user = Anonymous
# stateless API; nothing is kept in the cookie session
login_manager.session_protection = None


@login_manager.user_loader
def load_user(user_id):
    user = User.get(db.session, user_id)
    return CurrentUser(user) if user else None


@login_manager.request_loader
def load_user_from_request(request):
    user = controller.get_user_from_request(db.session, request)
    return CurrentUser(user) if user else None


@login_manager.unauthorized_handler
def unauthorized():
    raise errors.AuthenticationError("Authentication required")


def admin_required(func):
    @wraps(func)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        if not current_user.is_admin():
            raise errors.AccessDeniedError("Admin access required")
        return func(*args, **kwargs)
    return wrapped


def current_user_id():
    if current_user.is_authenticated:
        return current_user.userid
    return None


def optional_user():
    """ The requesting User or None; never aborts """
    if current_user.is_authenticated:
        return current_user.user
    return None


def dev_or_admin():
    return flask.current_app.debug \
        or flask.current_app.config['APP_ENV'] == 'development' \
        or current_user.is_admin()
