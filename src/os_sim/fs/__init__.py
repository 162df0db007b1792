"""File organisation subsystem — single-level and two-level directories.

Re-exports public symbols so callers can write::

    from os_sim.fs import SingleLevelDirectory, TwoLevelDirectory
"""

from os_sim.fs.directory import (
    DEFAULT_FILE_SIZE,
    DEFAULT_USERS,
    FileEntry,
    SingleLevelDirectory,
    TwoLevelDirectory,
)

__all__ = [
    "DEFAULT_FILE_SIZE",
    "DEFAULT_USERS",
    "FileEntry",
    "SingleLevelDirectory",
    "TwoLevelDirectory",
]
