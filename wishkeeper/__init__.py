import logging
import os
import time
from importlib import resources

import click
from flask import Flask, request
from werkzeug.exceptions import HTTPException

from wishkeeper.config import Config
from wishkeeper.helpers import db
from wishkeeper.routes.api import api_bp, send_response


def create_app(config_class=Config, connector=None):
    """Build the Flask app.

    Args:
        config_class: settings object (see wishkeeper.config)
        connector: optional pre-built data-access connector; tests pass a fake

    Returns:
        the configured Flask app
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # NOW() in the database and local timestamps should agree
    os.environ['TZ'] = app.config['APP_TIMEZONE']
    if hasattr(time, 'tzset'):
        time.tzset()

    app.logger.setLevel(getattr(logging, app.config['LOG_LEVEL'], logging.INFO))

    db.init_app(app, connector)
    app.register_blueprint(api_bp)

    @app.after_request
    def _log_request(response):
        app.logger.info(f'{request.remote_addr} "{request.method} {request.path}" {response.status_code}')
        return response

    # Uniform envelope for errors Flask raises itself (unknown route, wrong method...)
    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        return send_response(err.code or 500, f'{err.name}.')

    @app.errorhandler(Exception)
    def _unhandled(err: Exception):
        app.logger.exception(f'Unhandled error on {request.method} {request.path}: {err}')
        return send_response(500, 'Internal server error.')

    @app.cli.command('init-db')
    def init_db_command():
        """Create the wishlists and wishes tables."""
        schema = resources.files('wishkeeper').joinpath('schema.sql').read_text(encoding='utf-8')
        if db.apply_schema(db.get_connector(), schema):
            click.echo('Schema applied.')
        else:
            raise click.ClickException('Applying the schema failed; see the log for details.')

    return app
