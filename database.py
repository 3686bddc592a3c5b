"""
Engine and per-request session handling
"""
import logging

from flask import current_app, g
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from models import Base

logger = logging.getLogger(__name__)


def _normalize_url(url):
    # Render and Heroku still hand out the legacy postgres:// scheme
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def init_app(app):
    """Create the engine and session factory for an app and register teardown"""
    engine = create_engine(_normalize_url(app.config["DATABASE_URL"]), future=True)
    app.extensions["db_engine"] = engine
    app.extensions["db_sessionmaker"] = sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )

    if app.config.get("CREATE_TABLES"):
        Base.metadata.create_all(engine)
        logger.info("Database tables ensured on %s", engine.url.render_as_string(hide_password=True))

    app.teardown_appcontext(close_db)


def get_db():
    """Session bound to the current request, opened on first use"""
    if "db" not in g:
        g.db = current_app.extensions["db_sessionmaker"]()
    return g.db


def close_db(exc=None):
    db = g.pop("db", None)
    if db is None:
        return
    if exc is not None:
        db.rollback()
    db.close()
