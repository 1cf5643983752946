"""Infrastructure layer — database schema, engine, migrations, store.

This layer depends on stdlib and third-party libs (SQLAlchemy, Alembic),
plus the closed enum types from the domain layer.
It must never import from services, commands, or output.
"""
