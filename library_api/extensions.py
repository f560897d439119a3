"""Flask extensions initialization module.

This module initializes all Flask extensions to prevent circular imports.
Extensions are initialized here and imported into app.py and other modules.
"""
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Initialize SQLAlchemy without app binding
# Will be bound to app in create_app() function
db: SQLAlchemy = SQLAlchemy()


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement so ON DELETE CASCADE applies."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()
