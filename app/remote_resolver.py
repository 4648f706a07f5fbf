"""Resolve repository paths to object identifiers."""

import logging
from dataclasses import dataclass
from typing import Union

from cmis_client import CmisObjectNotFoundError, CmisPermissionDeniedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    object_id: str


@dataclass(frozen=True)
class NotFound:
    remote_path: str


@dataclass(frozen=True)
class PermissionDenied:
    remote_path: str


Resolution = Union[Found, NotFound, PermissionDenied]


def resolve(session, remote_path) -> Resolution:
    """Look up the object at remote_path.

    A missing object or revoked access is an expected outcome for records
    created long ago and comes back as NotFound / PermissionDenied. Any
    other CmisError propagates.
    """
    try:
        return Found(session.get_object_id_by_path(remote_path))
    except CmisObjectNotFoundError:
        logger.info('File Not Found: "%s"', remote_path)
        return NotFound(remote_path)
    except CmisPermissionDeniedError:
        logger.info('PermissionDenied: "%s"', remote_path)
        return PermissionDenied(remote_path)


def object_id_of(resolution: Resolution):
    """The identifier carried by a resolution, or None."""
    if isinstance(resolution, Found):
        return resolution.object_id
    return None
