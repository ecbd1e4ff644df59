"""
Upload strategy for multipart form file inputs.

The receiving server has already stored the file in a temporary
location; this strategy validates the record and moves the file.
"""
from typing import Dict, Iterable, List, Optional

from ...config import UploadEnvironment
from ...exceptions import ErrorKind, UploadError, UploadException
from ...logging import get_logger
from ...path import File
from ...utils import human_string, machine_string
from ..protocols import UploadRegistry
from ..registry import UploadErrorCode, UploadedFile
from ..settings import UploadSettings

logger = get_logger('fileupload.upload.field')

DEFAULT_ALLOWED_EXTENSIONS = (
    '7z', 'csv', 'doc', 'docx', 'gif', 'gz', 'ical', 'ics', 'jpeg', 'jpg',
    'json', 'log', 'm3u', 'm4a', 'm4v', 'mkv', 'mp3', 'mp4', 'ods', 'odt',
    'ogg', 'pdf', 'png', 'pps', 'ppt', 'pptx', 'svg', 'txt', 'vcard', 'vcf',
    'webm', 'webp', 'xls', 'xlsx', 'xml', 'xspf', 'zip',
)

# Every non-OK receive status and the failure it is reported as
ERROR_CODE_KINDS: Dict[UploadErrorCode, ErrorKind] = {
    UploadErrorCode.INI_SIZE: ErrorKind.FILE_TOO_LARGE,
    UploadErrorCode.FORM_SIZE: ErrorKind.FILE_TOO_LARGE,
    UploadErrorCode.PARTIAL: ErrorKind.UPLOAD_CANCELLED,
    UploadErrorCode.NO_FILE: ErrorKind.INPUT_NOT_FOUND,
    UploadErrorCode.NO_TMP_DIR: ErrorKind.TEMP_DIRECTORY_NOT_FOUND,
    UploadErrorCode.CANT_WRITE: ErrorKind.TEMP_FILE_WRITE_ERROR,
    UploadErrorCode.EXTENSION: ErrorKind.UPLOAD_CANCELLED_BY_SERVER,
}


def kind_for_error_code(code: int) -> Optional[ErrorKind]:
    """
    Map a receive status to a failure kind.

    Args:
        code: Receive status

    Returns:
        None for OK, SYSTEM_ERROR for unknown codes
    """
    if code == UploadErrorCode.OK:
        return None
    try:
        return ERROR_CODE_KINDS[UploadErrorCode(code)]
    except (ValueError, KeyError):
        return ErrorKind.SYSTEM_ERROR


def extension_of(filename: str) -> Optional[str]:
    """Lower-cased text after the last dot, or None."""
    _, dot, extension = filename.rpartition('.')
    if not dot:
        return None
    return extension.lower()


class FileUpload:
    """
    Stores a file selected in an HTML file input.

    Example:
        >>> upload = FileUpload(registry)
        >>> upload.settings.with_maximum_size_in_megabytes(2).with_target_directory('/srv/uploads')
        >>> stored = upload.with_allowed_extensions(['png', 'jpg']).from_input('avatar').save()
        >>> stored.filename_with_extension
        '3f9a...e1.png'
    """

    def __init__(
        self,
        registry: UploadRegistry,
        settings: Optional[UploadSettings] = None,
        environment: Optional[UploadEnvironment] = None
    ):
        """
        Initialize the upload.

        Args:
            registry: Received file inputs of the current request
            settings: Limits and target (created from environment if omitted)
            environment: Environment snapshot used when settings are omitted
        """
        self._registry = registry
        self._settings = settings or UploadSettings(environment)
        self._allowed_extensions: List[str] = list(DEFAULT_ALLOWED_EXTENSIONS)
        self._source_input_name: Optional[str] = None

    @property
    def settings(self) -> UploadSettings:
        return self._settings

    def with_allowed_extensions(self, extensions: Iterable[str]) -> 'FileUpload':
        """
        Replace the permitted filename extensions (without leading dots).

        An empty collection leaves the current set unchanged.
        """
        normalized = [str(extension).strip().lower() for extension in extensions]
        if normalized:
            self._allowed_extensions = normalized
        return self

    @property
    def allowed_extensions(self) -> List[str]:
        return list(self._allowed_extensions)

    @property
    def allowed_extensions_machine_string(self) -> str:
        return machine_string(self._allowed_extensions)

    def allowed_extensions_human_string(self, last_separator: Optional[str] = None) -> str:
        """E.g. 'JPG, PNG or GIF' with last_separator=' or '."""
        return human_string((e.upper() for e in self._allowed_extensions), last_separator)

    def from_input(self, input_name: str) -> 'FileUpload':
        """
        Set the file input to read from.

        Args:
            input_name: Usually the name attribute of the <input type="file"> element
        """
        self._source_input_name = str(input_name).strip()
        return self

    @property
    def source_input_name(self) -> Optional[str]:
        return self._source_input_name

    def save(self) -> File:
        """
        Validate the received file and move it to the target.

        Returns:
            Description of the stored file

        Raises:
            UploadValidationError: INPUT_NOT_SPECIFIED, INPUT_NOT_FOUND,
                INVALID_FILENAME, UPLOAD_CANCELLED, FILE_TOO_LARGE or
                INVALID_EXTENSION
            UploadError: on misconfiguration or server failure
        """
        if not self._source_input_name:
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_SPECIFIED)

        directory = self._settings.ensure_target_directory_specified()
        filename = self._settings.resolve_target_filename()

        uploaded = self._registry.get(self._source_input_name)
        if uploaded is None:
            logger.debug(f"Input {self._source_input_name!r} not received")
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_FOUND)

        self._check_error_code(uploaded)

        if uploaded.size > self._settings.maximum_size_in_bytes:
            logger.warning(
                f"Input {self._source_input_name!r} has {uploaded.size} bytes, "
                f"limit is {self._settings.maximum_size_in_bytes}"
            )
            raise UploadException.for_kind(ErrorKind.FILE_TOO_LARGE)

        extension = extension_of(uploaded.original_filename)
        if extension is None or extension not in self._allowed_extensions:
            logger.warning(f"Rejected extension of {uploaded.original_filename!r}")
            raise UploadException.for_kind(ErrorKind.INVALID_EXTENSION)

        self._settings.ensure_target_directory_exists()
        target = File(directory, filename, extension)

        if not self._registry.move_uploaded_file(uploaded.temp_path, target.path):
            raise UploadError(
                ErrorKind.SYSTEM_ERROR,
                f"Could not move the received file to {target.path}"
            )

        logger.info(f"Stored input {self._source_input_name!r} as {target.path}")
        return target

    def _check_error_code(self, uploaded: UploadedFile) -> None:
        kind = kind_for_error_code(uploaded.error)
        if kind is not None:
            logger.warning(
                f"Input {self._source_input_name!r} arrived with status {uploaded.error!r}"
            )
            raise UploadException.for_kind(kind)

    def __repr__(self) -> str:
        return f"FileUpload(input={self._source_input_name!r}, settings={self._settings!r})"
