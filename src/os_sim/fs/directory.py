"""Directory organisation — single-level and two-level directories.

The two textbook directory structures that predate trees:

- **Single-level**: every file lives in one flat namespace, so no two
  files anywhere on the system may share a name.  Simple, but it breaks
  down as soon as two users both want a file called ``notes``.
- **Two-level**: a *master file directory* holds one *user file
  directory* per user.  Names only have to be unique inside a user's
  own directory, so ``USER_A/notes`` and ``USER_B/notes`` coexist.

Both structures reject a duplicate name with ``FileExistsError`` and
an unknown name with ``FileNotFoundError``, as ``open(..., "x")`` and
``os.remove`` do.
"""

from __future__ import annotations

from dataclasses import dataclass

from os_sim.logging import Logger
from os_sim.workload import ConfigurationError

_SOURCE = "fs"

DEFAULT_FILE_SIZE = "2kb"
DEFAULT_USERS = ("USER_A", "USER_B")


@dataclass(frozen=True)
class FileEntry:
    """A directory entry: a file name and its (display) size."""

    name: str
    size: str = DEFAULT_FILE_SIZE


def _check_name(name: str, *, kind: str) -> str:
    stripped = name.strip()
    if not stripped:
        msg = f"{kind} name must not be empty"
        raise ConfigurationError(msg)
    return stripped


class SingleLevelDirectory:
    """One flat namespace shared by every file."""

    def __init__(self, *, logger: Logger | None = None) -> None:
        """Create an empty directory."""
        self._entries: dict[str, FileEntry] = {}
        self._logger = logger

    @property
    def files(self) -> list[FileEntry]:
        """Return the entries in creation order."""
        return list(self._entries.values())

    def create(self, name: str) -> FileEntry:
        """Add a file called *name*.

        Raises:
            ConfigurationError: If *name* is blank.
            FileExistsError: If a file with that name already exists.

        """
        name = _check_name(name, kind="File")
        if name in self._entries:
            msg = f"Duplicate name: {name}"
            raise FileExistsError(msg)
        entry = FileEntry(name=name)
        self._entries[name] = entry
        if self._logger is not None:
            self._logger.debug(f"created /{name}", source=_SOURCE)
        return entry

    def delete(self, name: str) -> None:
        """Remove the file called *name*.

        Raises:
            FileNotFoundError: If no such file exists.

        """
        if name not in self._entries:
            msg = f"No such file: {name}"
            raise FileNotFoundError(msg)
        del self._entries[name]
        if self._logger is not None:
            self._logger.debug(f"deleted /{name}", source=_SOURCE)

    def __contains__(self, name: object) -> bool:
        """Return True if a file called *name* exists."""
        return name in self._entries

    def __len__(self) -> int:
        """Return the number of files."""
        return len(self._entries)


class TwoLevelDirectory:
    """A master directory of per-user directories.

    User names are stored upper-cased, so ``add_user("carol")`` and
    ``create("CAROL", ...)`` refer to the same user.
    """

    def __init__(
        self,
        users: tuple[str, ...] = DEFAULT_USERS,
        *,
        logger: Logger | None = None,
    ) -> None:
        """Create a master directory with one empty directory per user."""
        self._logger = logger
        self._users: dict[str, SingleLevelDirectory] = {}
        for user in users:
            self.add_user(user)

    @property
    def users(self) -> list[str]:
        """Return user names in the order they were added."""
        return list(self._users)

    def add_user(self, name: str) -> str:
        """Add an empty user directory and return its (upper-cased) name.

        Raises:
            ConfigurationError: If *name* is blank.
            FileExistsError: If the user already exists.

        """
        user = _check_name(name, kind="User").upper()
        if user in self._users:
            msg = f"Duplicate user: {user}"
            raise FileExistsError(msg)
        self._users[user] = SingleLevelDirectory(logger=self._logger)
        return user

    def directory(self, user: str) -> SingleLevelDirectory:
        """Return the directory belonging to *user*.

        Raises:
            FileNotFoundError: If the user does not exist.

        """
        key = user.strip().upper()
        if key not in self._users:
            msg = f"No such user: {user}"
            raise FileNotFoundError(msg)
        return self._users[key]

    def create(self, user: str, name: str) -> FileEntry:
        """Add a file called *name* to *user*'s directory."""
        return self.directory(user).create(name)

    def delete(self, user: str, name: str) -> None:
        """Remove the file called *name* from *user*'s directory."""
        self.directory(user).delete(name)

    def files(self, user: str) -> list[FileEntry]:
        """Return *user*'s entries in creation order."""
        return self.directory(user).files
