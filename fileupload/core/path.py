"""
Filesystem value objects.

Directory and File describe locations only; they hold path strings and
perform OS operations on demand.
"""
import os
import re
from typing import Optional, Union

from .logging import get_logger

logger = get_logger('fileupload.path')

DEFAULT_DIRECTORY_MODE = 0o755

_INVALID_NAME_PATTERN = re.compile(r'[\0/\\:*<>?]')

PathLike = Union[str, 'os.PathLike[str]']


class Directory:
    """Directory (folder) in the file system."""

    __slots__ = ('_path',)

    def __init__(self, path: PathLike):
        """
        Initialize a directory.

        Args:
            path: Path of the directory (surrounding whitespace and trailing
                slashes are removed)
        """
        path = os.fspath(path).strip()
        if not path:
            raise ValueError("Directory path must not be empty")
        self._path = path.rstrip("/") or "/"

    @property
    def path(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return os.path.basename(self._path)

    @property
    def canonical_path(self) -> Optional[str]:
        """Absolute path with symlinks resolved, or None if the directory is missing."""
        if not self.exists():
            return None
        return os.path.realpath(self._path)

    def exists(self) -> bool:
        return os.path.isdir(self._path)

    def create(self, mode: int = DEFAULT_DIRECTORY_MODE) -> bool:
        """
        Attempt to create the directory.

        Args:
            mode: Permission bits for the new directory

        Returns:
            True if the directory has been created
        """
        return self._create(False, mode)

    def create_recursively(self, mode: int = DEFAULT_DIRECTORY_MODE) -> bool:
        """
        Attempt to create the directory including missing parents.

        Args:
            mode: Permission bits for each new directory

        Returns:
            True if the directory has been created
        """
        return self._create(True, mode)

    def delete_recursively(self) -> None:
        """Delete the directory and its contents. Errors are ignored."""
        if not self.exists():
            return
        for entry in _scan(self._path):
            entry_path = os.path.join(self._path, entry)
            if os.path.isdir(entry_path) and not os.path.islink(entry_path):
                Directory(entry_path).delete_recursively()
            else:
                try:
                    os.unlink(entry_path)
                except OSError as e:
                    logger.debug(f"Could not delete {entry_path}: {e}")
        try:
            os.rmdir(self._path)
        except OSError as e:
            logger.debug(f"Could not delete {self._path}: {e}")

    def _create(self, recursive: bool, mode: int) -> bool:
        try:
            if recursive:
                _makedirs(self._path, mode)
            else:
                os.mkdir(self._path, mode)
        except OSError as e:
            logger.warning(f"Could not create directory {self._path}: {e}")
            return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Directory):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"Directory('{self._path}')"


class File:
    """
    File in the file system.

    Describes the result of a successful upload: the directory it was
    stored in, its name and its (optional) extension without leading dot.
    """

    __slots__ = ('_directory', '_filename', '_extension')

    def __init__(self, directory: Directory, filename: str, extension: Optional[str] = None):
        self._directory = directory
        self._filename = str(filename).strip()
        self._extension = str(extension).strip() if extension is not None else None

    @property
    def directory(self) -> Directory:
        return self._directory

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def extension(self) -> Optional[str]:
        return self._extension

    @property
    def filename_with_extension(self) -> str:
        if self._extension is None:
            return self._filename
        return f"{self._filename}.{self._extension}"

    @property
    def path(self) -> str:
        return f"{self._directory.path.rstrip('/')}/{self.filename_with_extension}"

    @property
    def canonical_path(self) -> Optional[str]:
        """Absolute path with symlinks resolved, or None if the file is missing."""
        if not self.exists():
            return None
        return os.path.realpath(self.path)

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    @staticmethod
    def may_name_be_valid(name: str) -> bool:
        """
        Check whether a name *may* be a valid filename.

        Rejects the empty string and any name containing NUL, '/', '\\',
        ':', '*', '<', '>' or '?'. Passing does not guarantee that the
        underlying file system accepts the name.
        """
        return len(name) > 0 and _INVALID_NAME_PATTERN.search(name) is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, File):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        return self.filename_with_extension

    def __repr__(self) -> str:
        return f"File('{self.path}')"


def _scan(path: str) -> list:
    try:
        return os.listdir(path)
    except OSError:
        return []


def _makedirs(path: str, mode: int) -> None:
    # chmod each new segment, mkdir alone is subject to the umask
    missing = []
    head = os.path.abspath(path)
    while head and not os.path.isdir(head):
        missing.append(head)
        parent = os.path.dirname(head)
        if parent == head:
            break
        head = parent
    for segment in reversed(missing):
        os.mkdir(segment, mode)
        os.chmod(segment, mode)
