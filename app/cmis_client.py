"""
CMIS repository client for the CmisSync database upgrade.

Wraps the CMIS 1.1 browser binding (JSON over HTTP) for the one operation the
upgrade needs: looking up an object by its repository path.

Authentication uses HTTP basic auth with the sync folder's credentials.
"""

import logging
from urllib.parse import quote

import requests

from config import HTTP_TIMEOUT

logger = logging.getLogger(__name__)

OBJECT_ID_PROPERTY = "cmis:objectId"


class CmisError(Exception):
    """Base exception for CMIS repository errors."""

    def __init__(self, message, status_code=None, response_body=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class CmisObjectNotFoundError(CmisError):
    """No object exists at the requested path."""


class CmisPermissionDeniedError(CmisError):
    """The credentials do not grant access to the requested object."""


class CmisClient:
    """Session against a single CMIS repository."""

    def __init__(self, remote_url, repository_id, user_name=None, password=None, timeout=None):
        if not remote_url:
            raise CmisError("Remote URL not configured")
        if not repository_id:
            raise CmisError("Repository ID not configured")
        self.remote_url = remote_url.rstrip("/")
        self.repository_id = repository_id
        self.timeout = timeout or HTTP_TIMEOUT
        self._http = requests.Session()
        if user_name:
            self._http.auth = (user_name, password or "")

    @classmethod
    def from_sync_folder(cls, folder, timeout=None):
        """Build a session from a SyncFolder's remote settings."""
        return cls(
            folder.remote_url,
            folder.repository_id,
            user_name=folder.user_name,
            password=folder.password,
            timeout=timeout,
        )

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def root_url(self):
        return f"{self.remote_url}/{quote(self.repository_id, safe='')}/root"

    def _request(self, method, url, params=None):
        """Make an authenticated request and decode the JSON body."""
        try:
            response = self._http.request(method, url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise CmisError(f"CMIS request failed: {e}")

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            if response.status_code == 404:
                error_class = CmisObjectNotFoundError
            elif response.status_code in (401, 403):
                error_class = CmisPermissionDeniedError
            else:
                error_class = CmisError
            raise error_class(
                f"CMIS error {response.status_code}: {body}",
                status_code=response.status_code,
                response_body=body,
            )

        try:
            return response.json()
        except ValueError:
            raise CmisError(
                f"CMIS response is not JSON: {response.text[:200]}",
                status_code=response.status_code,
                response_body=response.text,
            )

    def get_object_by_path(self, path):
        """Fetch the succinct property set of the object at a repository path."""
        if not path.startswith("/"):
            path = "/" + path
        result = self._request(
            "GET",
            self.root_url + quote(path),
            params={"cmisselector": "object", "succinct": "true"},
        )
        properties = result.get("succinctProperties")
        if properties is None:
            # Non-succinct form: {"properties": {"cmis:objectId": {"value": ...}}}
            properties = {
                name: prop.get("value")
                for name, prop in (result.get("properties") or {}).items()
            }
        return properties

    def get_object_id_by_path(self, path):
        """Return the object identifier of the object at a repository path."""
        properties = self.get_object_by_path(path)
        object_id = properties.get(OBJECT_ID_PROPERTY)
        if not object_id:
            raise CmisError(f"No {OBJECT_ID_PROPERTY} in response for {path}")
        logger.debug("Resolved %s to %s", path, object_id)
        return object_id
