"""
Conversions between the three path forms a synchronized item can have.

  legacy path   the key the old database stored, prefixed by the legacy root
                e.g. "old-db/テスト/テスト用ファイル.pptx"
  remote path   the item's path in the CMIS repository
                e.g. "/Sites/cmissync/documentLibrary/テスト/テスト用ファイル.pptx"
  local path    the item's path relative to the sync folder
                e.g. "テスト/テスト用ファイル.pptx"

Lengths are counted in characters, never bytes.
"""

import os

SEPARATORS = "/" + os.sep


class PathTranslationError(ValueError):
    """A legacy path does not extend past the root it is supposed to live under."""


def _check_bounds(legacy_path: str, root_length: int):
    if root_length < 0:
        raise PathTranslationError(f"Negative root length: {root_length}")
    if len(legacy_path) <= root_length:
        raise PathTranslationError(
            f"Path {legacy_path!r} is not longer than its root prefix ({root_length} chars)"
        )


def legacy_root(local_path: str, folders_path: str = '') -> str:
    """Prefix of legacy paths for a folder.

    The legacy client stored paths relative to its base folders directory,
    so the prefix is the folder's local path minus that base and its
    separator. Without a base, the local path itself is the prefix.
    """
    if not folders_path:
        return local_path
    base = folders_path.rstrip(SEPARATORS)
    if len(local_path) <= len(base) + 1 or not local_path.startswith(base) \
            or local_path[len(base)] not in SEPARATORS:
        raise PathTranslationError(
            f"Local path {local_path!r} is not inside the folders path {folders_path!r}"
        )
    return local_path[len(base) + 1:]


def to_remote_path(legacy_path: str, root_length: int, remote_root: str) -> str:
    """Substitute the remote root for the legacy root prefix."""
    _check_bounds(legacy_path, root_length)
    return remote_root + legacy_path[root_length:]


def to_local_path(legacy_path: str, root_length: int) -> str:
    """Strip the legacy root and its separator, leaving a folder-relative path."""
    _check_bounds(legacy_path, root_length)
    return legacy_path[root_length + 1:]


def translate(legacy_path: str, root_length: int, remote_root: str) -> tuple[str, str]:
    """Return (remote_path, local_path) for a legacy path."""
    return (
        to_remote_path(legacy_path, root_length, remote_root),
        to_local_path(legacy_path, root_length),
    )
