"""Upload strategy for Base64-encoded data."""
import base64
import binascii
import re
from typing import Optional

from ...config import UploadEnvironment
from ...exceptions import ErrorKind, UploadException
from ...logging import get_logger
from ...path import File
from ..settings import UploadSettings, write_target_file

logger = get_logger('fileupload.upload.base64')

DEFAULT_EXTENSION = 'bin'

_WHITESPACE = re.compile(r'[ \t\r\n]+')


def decode_strict(text: str) -> Optional[bytes]:
    """
    Decode Base64 strictly.

    Spaces, tabs and line breaks are skipped. Missing padding is
    tolerated, but padding that is present must complete the last
    quantum. Any other character outside the alphabet makes the input
    invalid.

    Returns:
        Decoded bytes or None if the input is not valid Base64
    """
    text = _WHITESPACE.sub('', text)
    if '=' in text:
        if len(text) % 4 != 0:
            return None
    elif len(text) % 4 == 1:
        return None
    else:
        text += '=' * (-len(text) % 4)
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return None


class Base64Upload:
    """
    Stores Base64-encoded data.

    Example:
        >>> upload = Base64Upload(UploadSettings().with_target_directory('/srv/uploads'))
        >>> upload.with_data('aGVsbG8=').with_filename_extension('txt').save()
        File('/srv/uploads/9c1f...txt')
    """

    def __init__(
        self,
        settings: Optional[UploadSettings] = None,
        environment: Optional[UploadEnvironment] = None
    ):
        self._settings = settings or UploadSettings(environment)
        self._filename_extension: Optional[str] = None
        self._data: Optional[str] = None

    @property
    def settings(self) -> UploadSettings:
        return self._settings

    def with_filename_extension(self, extension: str) -> 'Base64Upload':
        """Set the extension (without leading dot) stored files get, 'bin' by default."""
        self._filename_extension = str(extension).strip()
        return self

    @property
    def filename_extension(self) -> Optional[str]:
        return self._filename_extension

    def with_data(self, data: str) -> 'Base64Upload':
        self._data = str(data)
        return self

    @property
    def data(self) -> Optional[str]:
        return self._data

    def save(self) -> File:
        """
        Decode the data and write it to the target.

        Raises:
            UploadValidationError: INPUT_NOT_SPECIFIED, INPUT_NOT_FOUND,
                FILE_TOO_LARGE or INVALID_FILENAME
            UploadError: on misconfiguration or write failure
        """
        if self._data is None:
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_SPECIFIED)
        if self._data == '':
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_FOUND)

        decoded = decode_strict(self._data)
        if not decoded:
            logger.warning("Rejected data that is not valid Base64")
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_FOUND)

        if len(decoded) > self._settings.maximum_size_in_bytes:
            logger.warning(
                f"Decoded {len(decoded)} bytes, limit is {self._settings.maximum_size_in_bytes}"
            )
            raise UploadException.for_kind(ErrorKind.FILE_TOO_LARGE)

        extension = self._filename_extension if self._filename_extension is not None else DEFAULT_EXTENSION
        target = self._settings.describe_target_file(extension)
        return write_target_file(target, decoded)

    def __repr__(self) -> str:
        return f"Base64Upload(extension={self._filename_extension!r}, settings={self._settings!r})"
