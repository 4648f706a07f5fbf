"""Identity of a synchronized folder."""

from dataclasses import dataclass

from path_translation import legacy_root


@dataclass(frozen=True)
class SyncFolder:
    """A synchronized folder, as configured in the sync client.

    local_path is the folder's own directory. folders_path is the base
    directory the legacy database stored paths relative to; leave it empty
    when legacy paths are relative to local_path itself.
    """

    name: str
    repository_id: str
    remote_url: str
    remote_path: str
    local_path: str
    user_name: str = ''
    password: str = ''
    folders_path: str = ''

    @property
    def legacy_root(self) -> str:
        """Prefix under which the legacy database recorded this folder's paths."""
        return legacy_root(self.local_path, self.folders_path)

    def __repr__(self):
        return (
            f"SyncFolder(name={self.name!r}, repository_id={self.repository_id!r}, "
            f"remote_path={self.remote_path!r}, local_path={self.local_path!r})"
        )
