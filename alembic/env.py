from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from januzzi import models  # noqa: F401  (registra as tabelas no Base)
from januzzi.config import DATABASE_URL
from januzzi.database import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# A URL vem do ambiente, igual à aplicação
config.set_main_option("sqlalchemy.url", DATABASE_URL)

target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite não altera colunas sem recriar a tabela
            render_as_batch=True
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
