"""Directory catalog.

Lists the entries of a directory and classifies each one as a file, a
directory or something else. Hidden entries are never reported.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from .errors import PathUnavailable

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class EntryKind(Enum):
    """Kind of a directory entry."""
    OTHER = 0
    FILE = 1
    DIRECTORY = 2


@dataclass(frozen=True)
class DirectoryEntry:
    """A single non-hidden entry of a directory."""

    name: str
    kind: EntryKind

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def _classify(entry: os.DirEntry) -> EntryKind:
    # Links are not followed; a link to a directory is still OTHER
    if entry.is_symlink():
        return EntryKind.OTHER
    if entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    return EntryKind.OTHER


def list_directory(path: PathLike) -> List[DirectoryEntry]:
    """List the entries of a directory.

    Entries come back in filesystem enumeration order, which is not stable
    across platforms; callers must not rely on it for correctness.

    Args:
        path: Directory to list

    Returns:
        List of DirectoryEntry objects, hidden entries excluded

    Raises:
        PathUnavailable: If the directory cannot be opened or read
    """
    entries = []
    try:
        with os.scandir(path) as it:
            for entry in it:
                if entry.name.startswith("."):
                    continue
                entries.append(DirectoryEntry(name=entry.name, kind=_classify(entry)))
    except OSError as e:
        raise PathUnavailable(f"Cannot open the directory {os.fspath(path)}: {e.strerror or e}") from e

    logger.debug(f"Listed {len(entries)} entries in {os.fspath(path)}")
    return entries


def list_files(path: PathLike) -> List[str]:
    """Names of the regular files in a directory."""
    return [entry.name for entry in list_directory(path) if entry.is_file]


def list_subdirectories(path: PathLike) -> List[str]:
    """Names of the sub-directories of a directory."""
    return [entry.name for entry in list_directory(path) if entry.is_directory]
