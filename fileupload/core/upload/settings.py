"""
Upload settings shared by every strategy.

Holds the size limits and the target of a single upload and resolves
the file an upload will be stored as.
"""
from typing import Optional

from Crypto.Random import get_random_bytes

from ..config import UploadEnvironment
from ..exceptions import ErrorKind, UploadError, UploadValidationError
from ..logging import get_logger
from ..path import DEFAULT_DIRECTORY_MODE, Directory, File, PathLike
from .protocols import RandomSource

logger = get_logger('fileupload.upload')

KILOBYTE = 1024
MEGABYTE = 1024 * KILOBYTE
GIGABYTE = 1024 * MEGABYTE

RANDOM_FILENAME_BYTES = 32


class UploadSettings:
    """
    Size limits and target of an upload.

    The environment ceiling is read once at construction. The individual
    limit starts at the ceiling and may only be lowered.

    Example:
        >>> settings = (UploadSettings()
        ...     .with_maximum_size_in_megabytes(2)
        ...     .with_target_directory('/srv/uploads'))
        >>> settings.maximum_size_in_kilobytes
        2048
    """

    def __init__(
        self,
        environment: Optional[UploadEnvironment] = None,
        random_source: Optional[RandomSource] = None
    ):
        """
        Initialize settings.

        Args:
            environment: Environment snapshot (defaults to UploadEnvironment.default())
            random_source: Secure random byte source for generated filenames

        Raises:
            UploadError: If the environment does not accept uploads
        """
        self._environment = environment or UploadEnvironment.default()
        self._environment.ensure_uploads_enabled()
        self._random_source = random_source or get_random_bytes

        self._max_total_size = self._environment.maximum_upload_size
        self._max_individual_size = self._max_total_size
        self._target_directory: Optional[Directory] = None
        self._target_filename: Optional[str] = None

    @property
    def environment(self) -> UploadEnvironment:
        return self._environment

    @property
    def max_total_size(self) -> int:
        """Environment ceiling in bytes."""
        return self._max_total_size

    def with_maximum_size_in_bytes(self, size: int) -> 'UploadSettings':
        """
        Restrict the size of individual files.

        Args:
            size: Size in bytes

        Returns:
            self for chaining

        Raises:
            UploadError: TOTAL_SIZE_EXCEEDED if size is above the environment ceiling
        """
        size = int(size)
        if size > self._max_total_size:
            raise UploadError(
                ErrorKind.TOTAL_SIZE_EXCEEDED,
                f"Requested limit of {size} bytes exceeds the ceiling of {self._max_total_size} bytes"
            )
        self._max_individual_size = size
        return self

    def with_maximum_size_in_kilobytes(self, size: int) -> 'UploadSettings':
        return self.with_maximum_size_in_bytes(int(size) * KILOBYTE)

    def with_maximum_size_in_megabytes(self, size: int) -> 'UploadSettings':
        return self.with_maximum_size_in_bytes(int(size) * MEGABYTE)

    def with_maximum_size_in_gigabytes(self, size: int) -> 'UploadSettings':
        return self.with_maximum_size_in_bytes(int(size) * GIGABYTE)

    @property
    def maximum_size_in_bytes(self) -> int:
        return self._max_individual_size

    @property
    def maximum_size_in_kilobytes(self) -> int:
        return self._max_individual_size // KILOBYTE

    @property
    def maximum_size_in_megabytes(self) -> int:
        return self._max_individual_size // MEGABYTE

    @property
    def maximum_size_in_gigabytes(self) -> int:
        return self._max_individual_size // GIGABYTE

    def with_target_directory(self, target_directory: PathLike) -> 'UploadSettings':
        """
        Set the directory uploaded files are stored in.

        The directory should not be publicly accessible and should never
        be controlled by the user.
        """
        self._target_directory = Directory(target_directory)
        return self

    @property
    def target_directory(self) -> Optional[str]:
        if self._target_directory is None:
            return None
        return self._target_directory.path

    def with_target_filename(self, target_filename: str) -> 'UploadSettings':
        """
        Set the name uploaded files are stored with, without extension.

        A random name is generated when none is set.
        """
        self._target_filename = str(target_filename).strip()
        return self

    @property
    def target_filename(self) -> Optional[str]:
        return self._target_filename

    def ensure_target_directory_specified(self) -> Directory:
        """
        Return the target directory, failing if none has been set.

        Raises:
            UploadError: TARGET_DIRECTORY_NOT_SPECIFIED
        """
        if self._target_directory is None:
            raise UploadError(ErrorKind.TARGET_DIRECTORY_NOT_SPECIFIED)
        return self._target_directory

    def resolve_target_filename(self) -> str:
        """
        Return the configured filename or a new random one.

        Raises:
            UploadValidationError: INVALID_FILENAME
        """
        if self._target_filename is not None:
            filename = self._target_filename
        else:
            filename = self._random_source(RANDOM_FILENAME_BYTES).hex()

        if not File.may_name_be_valid(filename):
            logger.warning(f"Rejected target filename {filename!r}")
            raise UploadValidationError(ErrorKind.INVALID_FILENAME)
        return filename

    def ensure_target_directory_exists(self) -> Directory:
        """
        Create the target directory (mode 0755) if it is missing.

        Raises:
            UploadError: TARGET_DIRECTORY_NOT_SPECIFIED or TARGET_FILE_WRITE_ERROR
        """
        directory = self.ensure_target_directory_specified()
        if not directory.exists():
            logger.debug(f"Creating target directory {directory}")
            if not directory.create_recursively(DEFAULT_DIRECTORY_MODE):
                raise UploadError(
                    ErrorKind.TARGET_FILE_WRITE_ERROR,
                    f"Target directory {directory} could not be created"
                )
        return directory

    def describe_target_file(self, extension: Optional[str]) -> File:
        """
        Resolve the file an upload will be stored as.

        Creates the target directory if necessary but writes no bytes.

        Args:
            extension: Filename extension without leading dot

        Returns:
            Description of the target file

        Raises:
            UploadValidationError: INVALID_FILENAME
            UploadError: TARGET_DIRECTORY_NOT_SPECIFIED or TARGET_FILE_WRITE_ERROR
        """
        self.ensure_target_directory_specified()
        filename = self.resolve_target_filename()
        directory = self.ensure_target_directory_exists()
        return File(directory, filename, extension)

    def __repr__(self) -> str:
        return (
            f"UploadSettings(max_individual_size={self._max_individual_size}, "
            f"target_directory={self.target_directory!r}, "
            f"target_filename={self._target_filename!r})"
        )


def write_target_file(target: File, data: bytes) -> File:
    """
    Write all bytes to the target file in one operation.

    Raises:
        UploadError: TARGET_FILE_WRITE_ERROR
    """
    try:
        with open(target.path, 'wb') as f:
            f.write(data)
    except OSError as e:
        logger.error(f"Failed to write {target.path}: {e}")
        raise UploadError(ErrorKind.TARGET_FILE_WRITE_ERROR, str(e)) from e
    logger.info(f"Stored {len(data)} bytes as {target.path}")
    return target
