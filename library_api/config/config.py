"""Configuration file for Flask application.

This module contains all configuration settings for the library management API,
including database connection, token secrets and lifetimes, pagination limits
and business rules.
"""
import os
from datetime import timedelta


_DEV_ACCESS_SECRET = 'dev-access-token-secret-change-in-production'
_DEV_REFRESH_SECRET = 'dev-refresh-token-secret-change-in-production'


class Config:
    """Base configuration class for Flask application.

    Values are read from the environment once, when the class body is
    evaluated, and copied onto ``app.config`` by ``create_app``. Components
    read them back from the active application instead of importing globals.

    Attributes:
        SECRET_KEY (str): Flask secret key.
        SQLALCHEMY_DATABASE_URI (str): SQLAlchemy database URL.
        ACCESS_TOKEN_SECRET (str): Secret used to sign access tokens.
        REFRESH_TOKEN_SECRET (str): Secret used to sign refresh tokens.
        JWT_ALGORITHM (str): Signing algorithm for both token kinds.
        ACCESS_TOKEN_EXPIRES (timedelta): Lifetime of an access token.
        REFRESH_TOKEN_EXPIRES (timedelta): Lifetime of a refresh token.
        REFRESH_COOKIE_SECURE (bool): Whether the refresh cookie is HTTPS-only.
        DEFAULT_PAGE_LIMIT (int): Page size used when ``limit`` is omitted.
        MAX_PAGE_LIMIT (int): Largest accepted page size.
        BORROW_DURATION_DAYS (int): Default loan period in days.
        ALLOW_ADMIN_REGISTRATION (bool): Whether /register may create admins.
        SCHEDULER_ENABLED (bool): Whether background tasks are started.
        TOKEN_SWEEP_MINUTES (int): Interval of the expired refresh token sweep.
        LOG_LEVEL (str): Root logging level.
        LOG_FORMAT (str): Logging format string.
    """

    # Secret key for Flask itself
    SECRET_KEY: str = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    DATABASE_PATH: str = os.path.join(
        os.path.dirname(os.path.dirname(__file__)), 'data', 'library.db'
    )
    SQLALCHEMY_DATABASE_URI: str = os.environ.get('DATABASE_URL') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Token configuration
    ACCESS_TOKEN_SECRET: str = os.environ.get('ACCESS_TOKEN_SECRET') or _DEV_ACCESS_SECRET
    REFRESH_TOKEN_SECRET: str = os.environ.get('REFRESH_TOKEN_SECRET') or _DEV_REFRESH_SECRET
    JWT_ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRES: timedelta = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRES: timedelta = timedelta(days=5)
    REFRESH_COOKIE_SECURE: bool = os.environ.get('FLASK_ENV') == 'production'

    # Pagination
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    # Library business rules
    BORROW_DURATION_DAYS: int = 14
    ALLOW_ADMIN_REGISTRATION: bool = os.environ.get('ALLOW_ADMIN_REGISTRATION', '').lower() in ('1', 'true', 'yes')

    # Background tasks
    SCHEDULER_ENABLED: bool = os.environ.get('SCHEDULER_ENABLED', 'true').lower() in ('1', 'true', 'yes')
    TOKEN_SWEEP_MINUTES: int = 60

    # Logging
    LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT: str = '%(asctime)s %(levelname)s [%(name)s] %(message)s'

    @classmethod
    def validate(cls) -> None:
        """Check the configuration before the application starts.

        The base configuration accepts its defaults; ``ProductionConfig``
        overrides this to insist on real secrets.
        """


class DevelopmentConfig(Config):
    """Configuration for local development."""

    LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Configuration for production deployments."""

    REFRESH_COOKIE_SECURE: bool = True

    @classmethod
    def validate(cls) -> None:
        """Refuse to run with the development default secrets.

        Raises:
            RuntimeError: If a token secret was not provided by the environment.
        """
        if cls.ACCESS_TOKEN_SECRET == _DEV_ACCESS_SECRET:
            raise RuntimeError('ACCESS_TOKEN_SECRET is not defined in the environment variables')
        if cls.REFRESH_TOKEN_SECRET == _DEV_REFRESH_SECRET:
            raise RuntimeError('REFRESH_TOKEN_SECRET is not defined in the environment variables')


class TestingConfig(Config):
    """Configuration used by the test suite."""

    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = 'sqlite://'
    ACCESS_TOKEN_SECRET: str = 'testing-access-secret-0123456789abcdef0123'
    REFRESH_TOKEN_SECRET: str = 'testing-refresh-secret-0123456789abcdef012'
    REFRESH_COOKIE_SECURE: bool = False
    SCHEDULER_ENABLED: bool = False
    LOG_LEVEL: str = 'WARNING'


config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}
