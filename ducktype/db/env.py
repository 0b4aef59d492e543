from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

# alembic.ini puts the repo root on sys.path (prepend_sys_path = .)
from ducktype.database import Base, get_database_url
import ducktype.models  # noqa: F401  registers the conversation tables on Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

MIGRATION_OPTIONS = {"target_metadata": Base.metadata, "compare_type": True}


# `alembic -x url=...` overrides DATABASE_URL, e.g. to render SQL for another database
def migration_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url") or get_database_url()


def emit_sql() -> None:
    context.configure(
        url=migration_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def apply_to_database() -> None:
    engine = create_engine(migration_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **MIGRATION_OPTIONS)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    emit_sql()
else:
    apply_to_database()
