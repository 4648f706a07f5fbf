"""Central configuration for the CmisSync database upgrade."""
import os
from pathlib import Path

BASE_DIR = Path(os.environ.get('CMISSYNC_BASE_DIR', Path.home() / '.config' / 'cmissync'))

# Directory that held every synchronized folder in the legacy layout.
# Legacy database paths are stored relative to it.
FOLDERS_PATH = os.environ.get('CMISSYNC_FOLDERS_PATH', str(Path.home() / 'CmisSync'))

# Schema revision this code upgrades stores to.
SCHEMA_VERSION = 1

# CMIS browser binding
HTTP_TIMEOUT = int(os.environ.get('CMISSYNC_HTTP_TIMEOUT', 30))

# Password for the remote repository (optional -- the runner prompts if empty)
CMISSYNC_PASSWORD = os.environ.get('CMISSYNC_PASSWORD', '')


def database_path(folder_name):
    """Location of the per-folder database, as the sync client lays it out."""
    return BASE_DIR / f"{folder_name}.cmissync"
