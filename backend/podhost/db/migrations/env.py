from alembic import context
from sqlalchemy import create_engine

from podhost.db import models  # noqa: F401
from podhost.db.session import Base

config = context.config
target_metadata = Base.metadata


def catalog_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    from podhost.core.config import get_settings

    return get_settings().catalog_url


def run_migrations(connection) -> None:
    # Batch mode lets later revisions alter SQLite tables
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    context.configure(
        url=catalog_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    # The application passes its own connection in; the CLI opens one
    connection = config.attributes.get("connection")
    if connection is not None:
        run_migrations(connection)
        return

    engine = create_engine(catalog_url())
    try:
        with engine.connect() as connection:
            run_migrations(connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
