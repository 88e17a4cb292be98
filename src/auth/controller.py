#
# auth/controller.py
#
#
import itsdangerous
import structlog
from flask import current_app

from schema.user import User

logger = structlog.stdlib.get_logger()

BEARER_PREFIX = 'Bearer '


def _serializer():
    return itsdangerous.URLSafeTimedSerializer(current_app.config['AUTH_SECRET_KEY'])


def generate_token(user_id):
    """
    Generate a timed bearer token carrying the user id
    """
    return _serializer().dumps(str(user_id), salt=current_app.config['AUTH_TOKEN_SALT'])


def confirm_token(token, max_age=None):
    """
    Validate a bearer token; returns the user id or None
    """
    if max_age is None:
        max_age = current_app.config['AUTH_TOKEN_MAX_AGE']
    try:
        return _serializer().loads(
            token, salt=current_app.config['AUTH_TOKEN_SALT'], max_age=max_age)
    except itsdangerous.SignatureExpired:
        logger.info("Expired auth token")
    except itsdangerous.BadSignature:
        logger.info("Invalid auth token")
    return None


def get_user_from_request(session, request):
    """
    Resolve the user behind a request: a signed bearer token, or the
    X-User-Id header when an authenticating proxy sits in front of us
    """
    user_id = None

    header = request.headers.get('Authorization', '')
    if header.startswith(BEARER_PREFIX):
        user_id = confirm_token(header[len(BEARER_PREFIX):].strip())
    elif current_app.config['TRUST_USER_ID_HEADER']:
        user_id = request.headers.get('X-User-Id')

    if not user_id:
        return None
    return User.get(session, user_id)
