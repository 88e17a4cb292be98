#
# main - application factory
#
#
from __future__ import annotations

import http

import click
import flask
import structlog
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException

import errors
from main import logconfig

# unbound extensions; create_app() binds them to an app and its engine
db = SQLAlchemy()
login_manager = LoginManager()

logger = structlog.stdlib.get_logger()


def create_app(config=None) -> flask.Flask:
    """
    Build the application. `config` is either a config object or a mapping
    applied after the defaults and APP_CONFIG_FILE.
    """
    app = flask.Flask(__name__)
    app.config.from_object("main.config.DefaultConfig")
    app.config.from_envvar("APP_CONFIG_FILE", silent=True)
    if isinstance(config, dict):
        app.config.update(config)
    elif config is not None:
        app.config.from_object(config)

    logconfig.configure_logging(app)
    app.before_request(logconfig.bind_request_context)
    app.teardown_request(logconfig.clear_request_context)

    db.init_app(app)

    # register the request loader before binding the login manager
    import auth
    login_manager.init_app(app)

    import monitoring
    monitoring.init_app(app)

    _register_error_handlers(app)
    _register_blueprints(app)
    _register_commands(app)

    logger.debug("Application created", env=app.config["APP_ENV"])
    return app


def _register_blueprints(app: flask.Flask) -> None:
    from auction.views import bp as auction_bp
    from auth.views import bp as auth_bp
    from club.views import bp as club_bp
    from main.views import bp as main_bp
    from monitoring.views import bp as monitoring_bp
    from team.views import bp as team_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(auction_bp)
    app.register_blueprint(team_bp)
    app.register_blueprint(club_bp)
    app.register_blueprint(monitoring_bp)


def _register_error_handlers(app: flask.Flask) -> None:
    @app.errorhandler(errors.AuctionError)
    def handle_auction_error(e: errors.AuctionError):
        if e.status_code >= http.HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error("Request failed", error=e.message, exc_info=e.__cause__ or e)
            app.extensions["monitor"].record_error(e, status_code=e.status_code)
        return flask.jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return flask.jsonify(error=e.description), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        # full detail stays in the logs
        logger.exception("Unhandled error")
        app.extensions["monitor"].record_error(e)
        return (
            flask.jsonify(error="Internal server error"),
            http.HTTPStatus.INTERNAL_SERVER_ERROR,
        )


def _register_commands(app: flask.Flask) -> None:
    @app.cli.command("create-db")
    def create_db() -> None:
        """Create all tables on the configured database."""
        import schema  # noqa: F401

        db.create_all()
        click.echo("Created tables on %s" % db.engine.url.render_as_string())
