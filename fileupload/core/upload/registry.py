"""
Upload registry: the collaborator that received a multipart request.

The hosting server parses the request body and stores each file input in
a temporary file. The registry maps input names to those records and is
the only party allowed to move a temporary file to its destination.
"""
import os
import shutil
import tempfile
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional, Set, Union

from ..logging import get_logger

logger = get_logger('fileupload.upload.registry')


class UploadErrorCode(IntEnum):
    """Status of a received file input."""

    OK = 0
    INI_SIZE = 1  # exceeds the environment's per-file ceiling
    FORM_SIZE = 2  # exceeds the limit declared by the form
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8  # stopped by a server-side upload extension


@dataclass(frozen=True)
class UploadedFile:
    """
    Record of a received file input.

    Attributes:
        temp_path: Temporary file holding the received bytes
        size: Declared size in bytes
        original_filename: Filename declared by the client
        error: Receive status
    """
    temp_path: str
    size: int
    original_filename: str
    error: UploadErrorCode = UploadErrorCode.OK


class MemoryUploadRegistry:
    """
    In-memory upload registry.

    Tracks the temporary files it registered and refuses to move anything
    else, so a forged temp path can never pull an arbitrary local file
    into the upload directory.

    Example:
        >>> registry = MemoryUploadRegistry()
        >>> registry.register_bytes('avatar', b'...', 'me.png')
        >>> FileUpload(registry).from_input('avatar')
    """

    def __init__(self):
        self._inputs: Dict[str, UploadedFile] = {}
        self._temp_paths: Set[str] = set()

    def register(
        self,
        name: str,
        temp_path: Union[str, 'os.PathLike[str]'],
        original_filename: str,
        size: Optional[int] = None,
        error: UploadErrorCode = UploadErrorCode.OK
    ) -> UploadedFile:
        """
        Register a received file input.

        Args:
            name: Input name
            temp_path: Temporary file holding the bytes
            original_filename: Filename declared by the client
            size: Declared size (defaults to the temp file's size)
            error: Receive status

        Returns:
            The registered record
        """
        temp_path = os.fspath(temp_path)
        if size is None:
            size = os.path.getsize(temp_path) if os.path.isfile(temp_path) else 0
        uploaded = UploadedFile(
            temp_path=temp_path,
            size=size,
            original_filename=original_filename,
            error=UploadErrorCode(error)
        )
        self._inputs[name] = uploaded
        self._temp_paths.add(os.path.realpath(temp_path))
        return uploaded

    def register_bytes(
        self,
        name: str,
        data: bytes,
        original_filename: str,
        temp_dir: Optional[str] = None
    ) -> UploadedFile:
        """Store bytes in a new temporary file and register it."""
        fd, temp_path = tempfile.mkstemp(prefix='upload-', dir=temp_dir)
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        return self.register(name, temp_path, original_filename, size=len(data))

    def get(self, name: str) -> Optional[UploadedFile]:
        return self._inputs.get(name)

    def move_uploaded_file(self, temp_path: str, target_path: str) -> bool:
        """
        Move a registered temporary file to its destination.

        Args:
            temp_path: Temporary file as found in a registered record
            target_path: Destination path

        Returns:
            True if the file has been moved, False if it is unknown or
            target_path is a directory
        """
        real_temp_path = os.path.realpath(temp_path)
        if real_temp_path not in self._temp_paths:
            logger.warning(f"Refusing to move unregistered file {temp_path}")
            return False
        if not os.path.isfile(real_temp_path):
            return False
        if os.path.isdir(target_path):
            logger.error(f"Cannot move {temp_path} onto directory {target_path}")
            return False
        try:
            shutil.move(real_temp_path, target_path)
        except OSError as e:
            logger.error(f"Failed to move {temp_path} to {target_path}: {e}")
            return False
        self._temp_paths.discard(real_temp_path)
        return True

    def cleanup(self) -> None:
        """Delete registered temporary files that have not been moved."""
        for temp_path in list(self._temp_paths):
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not delete temporary file {temp_path}: {e}")
            self._temp_paths.discard(temp_path)

    def __contains__(self, name: object) -> bool:
        return name in self._inputs

    def __len__(self) -> int:
        return len(self._inputs)
