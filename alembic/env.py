"""
Alembic environment for the rrgolf remote store.

The target database comes from ``rrgolf.config.settings.database_url``
unless overridden on the command line:

    alembic -x database_url=sqlite:///other.db upgrade head

Only rrgolf's own tables (user_current_match, match_shares) are compared
during autogenerate, so a shared PostgreSQL schema with other apps' tables
does not produce drop operations. SQLite targets run in batch mode because
SQLite cannot ALTER most column properties in place.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from rrgolf.config import settings
from rrgolf.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
RRGOLF_TABLES = frozenset(target_metadata.tables)


def get_database_url() -> str:
    """-x database_url=... wins over settings."""
    return context.get_x_argument(as_dictionary=True).get("database_url") or settings.database_url


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    if type_ == "table":
        return name in RRGOLF_TABLES
    return True


def configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "include_object": include_object,
        "compare_type": True,
        "compare_server_default": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting (``alembic upgrade head --sql``)."""
    url = get_database_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = get_database_url()
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = url
    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # one-shot connection per migration run
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, **configure_options(url))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
