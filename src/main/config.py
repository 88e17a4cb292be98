#
# config.py - defaults; override with APP_CONFIG_FILE
#
#
import os


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')


class DefaultConfig(object):
    APP_ENV = os.environ.get('APP_ENV', 'production')
    DEBUG = False
    TESTING = False

    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///auction.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }

    # bearer tokens are signed with this key
    AUTH_SECRET_KEY = os.environ.get('AUTH_SECRET_KEY', SECRET_KEY)
    AUTH_TOKEN_SALT = 'auction-auth'
    AUTH_TOKEN_MAX_AGE = int(os.environ.get('AUTH_TOKEN_MAX_AGE', 7 * 24 * 3600))

    # accept X-User-Id from an authenticating proxy in front of the app
    TRUST_USER_ID_HEADER = _env_bool('TRUST_USER_ID_HEADER')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_JSON = _env_bool('LOG_JSON', True)

    METRICS_MAX_SAMPLES = 1000
    SLOW_REQUEST_MS = 1000


class TestConfig(DefaultConfig):
    APP_ENV = 'testing'
    TESTING = True
    SECRET_KEY = 'testing'
    AUTH_SECRET_KEY = 'testing-auth'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    TRUST_USER_ID_HEADER = False
    LOG_JSON = False
    LOG_LEVEL = 'WARNING'
