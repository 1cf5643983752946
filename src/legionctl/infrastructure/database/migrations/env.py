"""Alembic environment for legionctl.

Online runs use the connection handed over in ``config.attributes`` when
there is one, else a fresh engine from :func:`create_db_engine` so the
SQLite pragmas match the ones the Store uses.
"""

from __future__ import annotations

from alembic import context

from legionctl.infrastructure.database.engine import create_db_engine
from legionctl.infrastructure.database.schema import metadata


def _configure(**kwargs: object) -> None:
    context.configure(
        target_metadata=metadata,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout instead of executing it."""
    _configure(
        url=context.config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations on the shared connection or on a private engine."""
    shared = context.config.attributes.get("connection")
    if shared is not None:
        _configure(connection=shared, render_as_batch=shared.dialect.name == "sqlite")
        with context.begin_transaction():
            context.run_migrations()
        return

    url = context.config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("sqlalchemy.url is not set in the Alembic config")
    engine = create_db_engine(url)
    try:
        with engine.connect() as connection:
            _configure(
                connection=connection,
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
