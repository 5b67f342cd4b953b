"""Database module for the URL shortener application."""
from shortener.db.base import engine, get_engine, init_models, DatabaseHealthCheck
from shortener.db.session import get_db, db_transaction, SessionManager

__all__ = [
    "engine",
    "get_engine",
    "init_models",
    "DatabaseHealthCheck",
    "get_db",
    "db_transaction",
    "SessionManager",
]
