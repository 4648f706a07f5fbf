#!/usr/bin/env python3
"""
Migration 001: Object ids and folder-relative paths.

Upgrades one CmisSync folder database: adds the localPath/id columns, the
downloads and failedoperations tables, and fills ids by looking every known
file and folder up in the CMIS repository. Requires network access to the
repository for the whole run.

Safe to re-run after a failure; rows resolved by an earlier attempt are
not looked up again.

Usage:
    python migrate_001_object_ids.py --folder myfolder \\
        --repository <repo-id> --remote-url <browser-binding-url> \\
        --remote-path /Sites/cmissync/documentLibrary \\
        --local-path ~/CmisSync/myfolder --user alice

    # Password comes from CMISSYNC_PASSWORD, or is prompted for.
"""

import argparse
import getpass
import logging
import sqlite3
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'app'))
from config import CMISSYNC_PASSWORD, FOLDERS_PATH, database_path
from cmis_client import CmisClient, CmisError
from db import get_db
from migration import upgrade_database
from path_translation import PathTranslationError
from sync_folder import SyncFolder

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description='Upgrade a CmisSync folder database')
    parser.add_argument('--folder', required=True, help='Sync folder name')
    parser.add_argument('--db', help='Database file (default: derived from the folder name)')
    parser.add_argument('--repository', required=True, help='CMIS repository id')
    parser.add_argument('--remote-url', required=True, help='CMIS browser binding URL')
    parser.add_argument('--remote-path', required=True, help='Remote root path of the folder')
    parser.add_argument('--local-path', required=True, help='Local directory of the folder')
    parser.add_argument('--user', default='', help='Repository user name')
    parser.add_argument('--folders-path', default=FOLDERS_PATH,
                        help='Base directory legacy paths are relative to')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    password = CMISSYNC_PASSWORD
    if args.user and not password:
        password = getpass.getpass(f"Password for {args.user}: ")

    folder = SyncFolder(
        name=args.folder,
        repository_id=args.repository,
        remote_url=args.remote_url,
        remote_path=args.remote_path,
        local_path=os.path.expanduser(args.local_path),
        user_name=args.user,
        password=password,
        folders_path=os.path.expanduser(args.folders_path) if args.folders_path else '',
    )
    db_path = args.db or database_path(folder.name)

    logger.info("Starting upgrade of %s (database: %s)", folder.name, db_path)

    try:
        with CmisClient.from_sync_folder(folder) as session, get_db(db_path) as conn:
            version = upgrade_database(folder, conn, session)
    except (CmisError, sqlite3.Error, PathTranslationError) as e:
        logger.error("Upgrade failed, database left at its previous version: %s", e)
        return 1

    logger.info("Upgrade complete: %s is at version %d", folder.name, version)
    return 0


if __name__ == '__main__':
    sys.exit(main())
