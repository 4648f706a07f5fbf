#!/usr/bin/env python3
"""
Initialize a CmisSync folder database.

Creates either the current schema (stamped with SCHEMA_VERSION) or, with
--legacy, the pre-upgrade schema that migrate_001_object_ids.py upgrades.

Usage:
    python3 init_db.py <db-path> [--legacy]
"""

import argparse
import sqlite3
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'app'))
from config import SCHEMA_VERSION

# Never stamped: paths are keys relative to the base folders directory
LEGACY_VERSION = 0

LEGACY_SCHEMA = """
CREATE TABLE IF NOT EXISTS files (
    path TEXT PRIMARY KEY NOT NULL,
    serverSideModificationDate DATE,  -- Last modification date on the server
    checksum TEXT  -- SHA-1 of the local content
);

CREATE TABLE IF NOT EXISTS folders (
    path TEXT PRIMARY KEY NOT NULL,
    serverSideModificationDate DATE
);

CREATE TABLE IF NOT EXISTS general (
    key TEXT PRIMARY KEY,
    value TEXT  -- e.g. PathPrefix, ChangeLogToken
);
"""

SCHEMA = """
CREATE TABLE IF NOT EXISTS files (
    path TEXT PRIMARY KEY NOT NULL,
    localPath TEXT,  -- Relative to the sync folder
    id TEXT,  -- CMIS object id
    serverSideModificationDate DATE,
    checksum TEXT
);

CREATE TABLE IF NOT EXISTS folders (
    path TEXT PRIMARY KEY NOT NULL,
    localPath TEXT,
    id TEXT,
    serverSideModificationDate DATE
);

CREATE TABLE IF NOT EXISTS general (
    key TEXT PRIMARY KEY,
    value TEXT
);

CREATE TABLE IF NOT EXISTS downloads (
    path TEXT PRIMARY KEY,
    serverSideModificationDate DATE
);

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
);

CREATE INDEX IF NOT EXISTS files_localPath_index ON files (localPath);
CREATE INDEX IF NOT EXISTS files_id_index ON files (id);
CREATE INDEX IF NOT EXISTS folders_localPath_index ON folders (localPath);
CREATE INDEX IF NOT EXISTS folders_id_index ON folders (id);
"""


def init_db(db_path, legacy=False):
    """Create the schema and stamp its version."""
    schema, version = (LEGACY_SCHEMA, LEGACY_VERSION) if legacy else (SCHEMA, SCHEMA_VERSION)
    print(f"Initializing database at {db_path} (version {version})")

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()
    cursor.executescript(schema)
    cursor.execute(f"PRAGMA user_version = {version}")
    conn.commit()
    conn.close()

    print("Database initialized successfully!")
    return db_path


def main():
    parser = argparse.ArgumentParser(description='Initialize a CmisSync folder database')
    parser.add_argument('db', help='Path of the database file to create')
    parser.add_argument('--legacy', action='store_true', help='Create the pre-upgrade schema')
    args = parser.parse_args()
    init_db(args.db, legacy=args.legacy)


if __name__ == "__main__":
    main()
