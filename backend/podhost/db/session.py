from pathlib import Path
from typing import Iterator

from alembic import command
from alembic.config import Config
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

Base = declarative_base()

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def migrate_catalog(engine: Engine) -> None:
    """Bring the catalog schema up to the latest Alembic revision"""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")


def create_catalog_engine(database_url: str) -> Engine:
    """Create the engine for the catalog and apply pending migrations"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Requests are served from a threadpool
        connect_args["check_same_thread"] = False

    engine = create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
    )
    migrate_catalog(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
