"""Library Management API - Flask Application.

Application factory: configuration, database, blueprints, JSON error
handlers, CLI commands and background tasks.
"""
import atexit
import logging
import os
from typing import Optional, Type

import click
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config.config import Config, config_by_name
from extensions import db
from models.member import Role
from repositories.member_repository import MemberRepository
from routes import auth_bp, books_bp, members_bp, transactions_bp
from scheduled_tasks import shutdown_scheduler, start_scheduler
from utils.errors import LibraryError

logger = logging.getLogger(__name__)


def create_app(config_class: Optional[Type[Config]] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_class: Configuration to load. Chosen from ``FLASK_ENV`` when
            omitted, falling back to ``Config``.

    Returns:
        The configured application, with tables created.
    """
    if config_class is None:
        config_class = config_by_name.get(os.environ.get('FLASK_ENV', ''), Config)
    config_class.validate()

    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config['LOG_LEVEL'], format=app.config['LOG_FORMAT'])

    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    if database_uri.startswith('sqlite:///'):
        database_dir = os.path.dirname(database_uri[len('sqlite:///'):])
        if database_dir:
            os.makedirs(database_dir, exist_ok=True)
    db.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(books_bp)
    app.register_blueprint(members_bp)
    app.register_blueprint(transactions_bp)

    register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        db.create_all()

    # Start background tasks
    if app.config['SCHEDULER_ENABLED'] and not app.testing:
        start_scheduler(app)
        atexit.register(shutdown_scheduler)

    return app


# --- Error Handlers ---

def register_error_handlers(app: Flask) -> None:
    """Render every error as ``{"success": false, "message": ...}``."""

    @app.errorhandler(LibraryError)
    def library_error(error: LibraryError):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        return jsonify({'success': False, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error: Exception):
        logger.exception('Unhandled error')
        db.session.rollback()
        return jsonify({'success': False, 'message': 'Internal Server Error'}), 500


# --- CLI Commands ---

def register_commands(app: Flask) -> None:

    @app.cli.command('init-db')
    def init_db_command():
        """Create the database tables."""
        db.create_all()
        click.echo('Initialized the database.')

    @app.cli.command('create-admin')
    @click.option('--email', required=True)
    @click.option('--password', required=True)
    @click.option('--name', default='Administrator', show_default=True)
    @click.option('--age', default=30, show_default=True, type=int)
    @click.option('--phone', required=True, help='Phone number, 10 to 12 characters.')
    @click.option('--address', default='Library front desk', show_default=True)
    def create_admin_command(email, password, name, age, phone, address):
        """Create an admin member."""
        try:
            member = MemberRepository().create({
                'name': name,
                'age': age,
                'phoneNumber': phone,
                'email': email,
                'address': address,
                'password': password,
                'role': Role.ADMIN.value,
            })
        except LibraryError as e:
            raise click.ClickException(e.message) from e
        click.echo(f'Created admin {member.email} with id {member.id}.')


if __name__ == '__main__':
    create_app().run(debug=True, host='0.0.0.0', port=5000)
