"""
Upgrade a CmisSync folder database to the next schema revision.

Adds:
  - files.localPath, files.id, folders.localPath, folders.id
  - indexes on those four columns
  - downloads and failedoperations tables

Backfills object ids and folder-relative paths for existing rows by looking
every legacy path up in the CMIS repository, then re-anchors the PathPrefix
record to the folder's own directory.

Safe to re-run: DDL is guarded or uses IF NOT EXISTS, and the backfill only
visits rows whose id is still NULL. The version number is written last.
"""

import logging

from config import SCHEMA_VERSION
from db import (
    execute_sql,
    fetch_column,
    get_column_names,
    get_database_version,
    set_database_version,
)
from path_translation import translate
from remote_resolver import object_id_of, resolve

logger = logging.getLogger(__name__)

SYNCED_TABLES = ('files', 'folders')

NEW_COLUMNS = [
    ('localPath', 'TEXT'),
    ('id', 'TEXT'),
]

INDEXES = [
    ('files_localPath_index', 'files', 'localPath'),
    ('files_id_index', 'files', 'id'),
    ('folders_localPath_index', 'folders', 'localPath'),
    ('folders_id_index', 'folders', 'id'),
]

NEW_TABLES = [
    """
    CREATE TABLE IF NOT EXISTS downloads (
        path TEXT PRIMARY KEY,
        serverSideModificationDate DATE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS failedoperations (
        path TEXT PRIMARY KEY,
        lastLocalModificationDate DATE,
        uploadCounter INTEGER,
        downloadCounter INTEGER,
        changeCounter INTEGER,
        deleteCounter INTEGER,
        uploadMessage TEXT,
        downloadMessage TEXT,
        changeMessage TEXT,
        deleteMessage TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS general (
        key TEXT PRIMARY KEY,
        value TEXT
    )
    """,
]


def migrate_schema(folder, conn):
    """Add columns, indexes and tables missing from the legacy schema (idempotent)."""
    logger.info("Migrating schema for folder %s", folder.name)

    for table in SYNCED_TABLES:
        existing = get_column_names(conn, table)
        for col_name, col_type in NEW_COLUMNS:
            if col_name not in existing:
                execute_sql(conn, f"ALTER TABLE {table} ADD COLUMN {col_name} {col_type}")
                logger.info("  Added column: %s.%s %s", table, col_name, col_type)
            else:
                logger.debug("  Column already exists: %s.%s", table, col_name)

    for index_name, table, column in INDEXES:
        execute_sql(conn, f"CREATE INDEX IF NOT EXISTS {index_name} ON {table} ({column})")
    logger.info("  [OK] indexes")

    for ddl in NEW_TABLES:
        execute_sql(conn, ddl)
    logger.info("  [OK] downloads, failedoperations, general tables")


def _fill_table(conn, session, table, root_length, remote_root):
    """Backfill id and localPath for every row of table with a NULL id.

    Returns (resolved_count, unresolved_count).
    """
    # Materialized before the first UPDATE so no read cursor stays open
    legacy_paths = fetch_column(conn, f"SELECT path FROM {table} WHERE id IS NULL")
    if not legacy_paths:
        logger.info("  %s: nothing to backfill", table)
        return 0, 0

    resolved = 0
    unresolved = 0

    for legacy_path in legacy_paths:
        remote_path, local_path = translate(legacy_path, root_length, remote_root)
        object_id = object_id_of(resolve(session, remote_path))

        execute_sql(
            conn,
            f"UPDATE {table} SET id = ?, localPath = ? WHERE path = ?",
            (object_id, local_path, legacy_path),
        )
        if object_id is None:
            unresolved += 1
        else:
            resolved += 1

    logger.info("  %s: %d resolved, %d left without id", table, resolved, unresolved)
    return resolved, unresolved


def fill_missing_data(folder, conn, session, notify=None):
    """Fill the columns the legacy schema did not have.

    session is an authenticated CMIS session (see cmis_client.CmisClient).
    notify receives user-facing progress messages; defaults to the log.

    Rows are committed one at a time. If a row fails to translate or a
    lookup raises, the rows before it keep their new values and the error
    propagates; the next run starts from the rows whose id is still NULL.
    A folder whose local path does not sit under its folders path is
    rejected before any row is read.

    Returns {table: (resolved_count, unresolved_count)}.
    """
    notify = notify or logger.info
    notify(
        f'CmisSync needs to upgrade its own local data for folder "{folder.repository_id}". '
        'Please stay on the network for a few minutes.'
    )

    root_length = len(folder.legacy_root)
    counts = {}

    try:
        for table in SYNCED_TABLES:
            counts[table] = _fill_table(conn, session, table, root_length, folder.remote_path)

        # Replace repository path prefix.
        # Before: /home/user/CmisSync
        # After:  /home/user/CmisSync/myfolder
        execute_sql(
            conn,
            "INSERT OR REPLACE INTO general (key, value) VALUES ('PathPrefix', ?)",
            (folder.local_path,),
        )
    except Exception as e:
        logger.error("Failed to fill object ids for folder %s: %s", folder.name, e)
        raise

    notify(f'CmisSync has finished upgrading its own local data for folder "{folder.repository_id}".')
    return counts


def migrate(folder, conn, current_version, session, notify=None):
    """Upgrade the database one schema revision.

    Errors from any step propagate unchanged; the version number is only
    written once both the schema change and the backfill have succeeded.
    """
    migrate_schema(folder, conn)
    fill_missing_data(folder, conn, session, notify=notify)
    return set_database_version(conn, current_version)


def upgrade_database(folder, conn, session, notify=None):
    """Run the migration once if the stored version is behind SCHEMA_VERSION.

    Returns the version stored afterwards.
    """
    current_version = get_database_version(conn)
    if current_version >= SCHEMA_VERSION:
        logger.info("Database for folder %s already at version %d", folder.name, current_version)
        return current_version

    logger.info(
        "Upgrading database for folder %s from version %d",
        folder.name, current_version,
    )
    return migrate(folder, conn, current_version, session, notify=notify)
