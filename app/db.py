"""
Database helper functions for the CmisSync folder databases.
"""

import logging
import sqlite3
from contextlib import closing, contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def get_db(db_path):
    """Context manager for database connections."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def execute_sql(conn, sql, params=None):
    """Execute a single statement with bound parameters and commit it.

    Driver errors (sqlite3.Error) are left to propagate.
    """
    with closing(conn.cursor()) as cursor:
        cursor.execute(sql, params or ())
    conn.commit()


def fetch_column(conn, sql, params=None):
    """Run a query and return the first column of every row as a list.

    The cursor is drained and closed before returning, so the caller can
    write on the same connection right away.
    """
    with closing(conn.cursor()) as cursor:
        cursor.execute(sql, params or ())
        return [row[0] for row in cursor.fetchall()]


def get_column_names(conn, table):
    """Return the set of column names currently defined on a table."""
    with closing(conn.cursor()) as cursor:
        cursor.execute(f"PRAGMA table_info({table})")
        return {row[1] for row in cursor.fetchall()}


def get_database_version(conn) -> int:
    """Read the schema revision stored in the database header."""
    with closing(conn.cursor()) as cursor:
        cursor.execute("PRAGMA user_version")
        return cursor.fetchone()[0]


def set_database_version(conn, current_version: int) -> int:
    """Stamp the database with the revision following current_version.

    This is the commit point of a migration: call it last, only once every
    preceding step has succeeded. Returns the version written.
    """
    new_version = int(current_version) + 1
    # PRAGMA does not accept bound parameters
    execute_sql(conn, f"PRAGMA user_version = {new_version}")
    logger.info("Database version set to %d", new_version)
    return new_version
