"""
Schema catch-up for existing SQLite databases.

create_all() only creates missing tables. This adds columns that exist on
the models but not yet in an older database file, so upgrading the app
never requires a manual migration step.
"""
import logging
from typing import Optional
from sqlalchemy import inspect, text, MetaData
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("dashboard.migrations")


def column_sql_type(column) -> str:
    """SQLite storage type for a model column"""
    type_name = str(column.type).upper()

    if "INT" in type_name:
        return "INTEGER"
    if "BOOL" in type_name:
        return "INTEGER"
    if "FLOAT" in type_name or "NUMERIC" in type_name or "REAL" in type_name:
        return "REAL"
    # Strings, dates and datetimes are all stored as text
    return "TEXT"


def column_default_sql(column) -> Optional[str]:
    """SQL literal for a column's scalar default, or None if it has none"""
    default = column.default
    if default is None or not getattr(default, "is_scalar", False):
        return None

    value = default.arg
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return None


def build_add_column_sql(table_name: str, column) -> str:
    """ALTER TABLE statement adding one column"""
    sql = f"ALTER TABLE {table_name} ADD COLUMN {column.name} {column_sql_type(column)}"
    default = column_default_sql(column)
    if default is not None:
        sql += f" DEFAULT {default}"
        # SQLite only accepts NOT NULL on an added column when it has a default
        if not column.nullable:
            sql += " NOT NULL"
    return sql


def auto_migrate(engine: Engine, metadata: MetaData) -> int:
    """
    Add model columns that are missing from existing tables.

    Tables that do not exist yet are skipped; create_all() handles those.

    Returns:
        Number of columns added
    """
    if engine.dialect.name != "sqlite":
        logger.info(f"Skipping automatic migration for dialect {engine.dialect.name}")
        return 0

    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())

    pending = []
    for table_name, table in metadata.tables.items():
        if table_name not in existing_tables:
            logger.warning(f"Table '{table_name}' doesn't exist yet, skipping")
            continue

        existing_columns = {col["name"] for col in inspector.get_columns(table_name)}
        for column in table.columns:
            if column.name not in existing_columns:
                pending.append((f"{table_name}.{column.name}", build_add_column_sql(table_name, column)))

    if not pending:
        logger.info("Schema is up to date")
        return 0

    with engine.begin() as conn:
        for label, alter_sql in pending:
            logger.debug(f"SQL: {alter_sql}")
            try:
                conn.execute(text(alter_sql))
            except SQLAlchemyError as e:
                logger.error(f"Failed to add column {label}: {e}")
                raise
            logger.info(f"Added column {label}")

    logger.info(f"Migration completed: {len(pending)} column(s) added")
    return len(pending)
