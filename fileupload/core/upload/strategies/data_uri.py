"""
Upload strategy for data URIs (RFC 2397).

    data:[<mediatype>][;base64],<data>

The media type decides the stored file's extension through a table of
permitted MIME types.
"""
import re
from typing import Dict, List, Mapping, Optional, Tuple
from urllib.parse import unquote_to_bytes

from ...config import UploadEnvironment
from ...exceptions import ErrorKind, UploadException
from ...logging import get_logger
from ...path import File
from ...utils import human_string, machine_string
from ..settings import UploadSettings, write_target_file
from .base64_upload import decode_strict

logger = get_logger('fileupload.upload.data_uri')

DATA_URI_PATTERN = re.compile(r'data:([a-zA-Z0-9/;=+-]*?)(;base64)?,(.*)', re.DOTALL)

DEFAULT_MEDIA_TYPE = 'text/plain;charset=US-ASCII'
CHARSET_SEPARATOR = ';charset='

DEFAULT_MIME_TYPES_AND_EXTENSIONS: Dict[str, str] = {
    'application/gzip': 'gz',
    'application/json': 'json',
    'application/msword': 'doc',
    'application/octet-stream': 'bin',
    'application/ogg': 'ogg',
    'application/pdf': 'pdf',
    'application/vnd.ms-excel': 'xls',
    'application/vnd.ms-powerpoint': 'pps',
    'application/vnd.oasis.opendocument.spreadsheet': 'ods',
    'application/vnd.oasis.opendocument.text': 'odt',
    'application/vnd.openxmlformats-officedocument.presentationml.presentation': 'pptx',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet': 'xlsx',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document': 'docx',
    'application/x-7z-compressed': '7z',
    'application/xml': 'xml',
    'application/xspf+xml': 'xspf',
    'application/zip': 'zip',
    'audio/mp4': 'm4a',
    'audio/mpeg': 'mp3',
    'audio/ogg': 'ogg',
    'audio/webm': 'weba',
    'audio/x-matroska': 'mka',
    'audio/x-mpegurl': 'm3u',
    'image/gif': 'gif',
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/svg+xml': 'svg',
    'image/webp': 'webp',
    'text/calendar': 'ics',
    'text/csv': 'csv',
    'text/plain': 'txt',
    'text/vcard': 'vcf',
    'video/mp4': 'm4v',
    'video/webm': 'webm',
    'video/x-matroska': 'mkv',
}


def parse_data_uri(uri: str) -> Optional[Tuple[str, Optional[str], bool, str]]:
    """
    Split a data URI into its components.

    Args:
        uri: Data URI

    Returns:
        (mime_type, charset, is_base64, payload) or None if uri is malformed
    """
    match = DATA_URI_PATTERN.fullmatch(uri)
    if match is None:
        return None
    media_type, base64_marker, payload = match.groups()
    mime_type, _, charset = (media_type or DEFAULT_MEDIA_TYPE).partition(CHARSET_SEPARATOR)
    return mime_type, charset or None, base64_marker is not None, payload


def decode_payload(payload: str, is_base64: bool) -> Optional[bytes]:
    """Decode a data URI payload, None if it is not valid."""
    if not is_base64:
        return unquote_to_bytes(payload.replace('+', ' '))
    # form encoding turns '+' into ' '
    return decode_strict(payload.replace(' ', '+'))


class DataUriUpload:
    """
    Stores the content of a data URI.

    Example:
        >>> upload = DataUriUpload(UploadSettings().with_target_directory('/srv/uploads'))
        >>> upload.with_uri('data:image/png;base64,iVBORw0KGgo...').save().extension
        'png'
    """

    def __init__(
        self,
        settings: Optional[UploadSettings] = None,
        environment: Optional[UploadEnvironment] = None
    ):
        self._settings = settings or UploadSettings(environment)
        self._allowed_mime_types_and_extensions = dict(DEFAULT_MIME_TYPES_AND_EXTENSIONS)
        self._uri: Optional[str] = None

    @property
    def settings(self) -> UploadSettings:
        return self._settings

    def with_allowed_mime_types_and_extensions(self, mapping: Mapping[str, str]) -> 'DataUriUpload':
        """
        Replace the permitted MIME types.

        Args:
            mapping: MIME type (e.g. 'image/jpeg') to extension without
                leading dot (e.g. 'jpg'); an empty mapping is ignored
        """
        normalized = {
            str(mime_type).strip().lower(): str(extension).strip().lower()
            for mime_type, extension in mapping.items()
        }
        if normalized:
            self._allowed_mime_types_and_extensions = normalized
        return self

    @property
    def allowed_mime_types_and_extensions(self) -> Dict[str, str]:
        return dict(self._allowed_mime_types_and_extensions)

    @property
    def allowed_mime_types(self) -> List[str]:
        return list(self._allowed_mime_types_and_extensions)

    @property
    def allowed_mime_types_machine_string(self) -> str:
        return machine_string(self._allowed_mime_types_and_extensions)

    def allowed_mime_types_human_string(self, last_separator: Optional[str] = None) -> str:
        return human_string(self._allowed_mime_types_and_extensions, last_separator)

    @property
    def allowed_extensions(self) -> List[str]:
        return list(self._allowed_mime_types_and_extensions.values())

    @property
    def allowed_extensions_machine_string(self) -> str:
        return machine_string(self.allowed_extensions)

    def allowed_extensions_human_string(self, last_separator: Optional[str] = None) -> str:
        return human_string((e.upper() for e in self.allowed_extensions), last_separator)

    def with_uri(self, uri: str) -> 'DataUriUpload':
        self._uri = str(uri)
        return self

    @property
    def uri(self) -> Optional[str]:
        return self._uri

    def save(self) -> File:
        """
        Decode the data URI and write its content to the target.

        Raises:
            UploadValidationError: INPUT_NOT_SPECIFIED, INPUT_NOT_FOUND,
                INVALID_EXTENSION, FILE_TOO_LARGE or INVALID_FILENAME
            UploadError: on misconfiguration or write failure
        """
        if self._uri is None:
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_SPECIFIED)
        if self._uri == '':
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_FOUND)

        components = parse_data_uri(self._uri)
        if components is None:
            logger.warning("Rejected malformed data URI")
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_FOUND)
        # charset is not used for decoding
        mime_type, _charset, is_base64, payload = components

        extension = self._allowed_mime_types_and_extensions.get(mime_type)
        if extension is None:
            logger.warning(f"Rejected MIME type {mime_type!r}")
            raise UploadException.for_kind(ErrorKind.INVALID_EXTENSION)

        decoded = decode_payload(payload, is_base64)
        if not decoded:
            raise UploadException.for_kind(ErrorKind.INPUT_NOT_FOUND)

        if len(decoded) > self._settings.maximum_size_in_bytes:
            logger.warning(
                f"Decoded {len(decoded)} bytes, limit is {self._settings.maximum_size_in_bytes}"
            )
            raise UploadException.for_kind(ErrorKind.FILE_TOO_LARGE)

        target = self._settings.describe_target_file(extension)
        return write_target_file(target, decoded)

    def __repr__(self) -> str:
        return f"DataUriUpload(settings={self._settings!r})"
