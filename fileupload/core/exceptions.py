"""
Exceptions for upload operations.

Every failure is described by one member of the closed ErrorKind set.
A kind is either fatal (misconfiguration or environment malfunction,
not meant to be handled by ordinary calling code) or a validation
failure (a rejected input that callers catch and turn into user
feedback). The exception tier always agrees with the kind.
"""
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Closed set of upload failure kinds."""

    # Fatal
    UPLOADS_DISABLED = ('uploads_disabled', True,
                        'File uploads are disabled in this environment')
    NO_UPLOADS_ALLOWED = ('no_uploads_allowed', True,
                          'The environment allows no file uploads per request')
    TARGET_DIRECTORY_NOT_SPECIFIED = ('target_directory_not_specified', True,
                                      'No target directory has been specified')
    TOTAL_SIZE_EXCEEDED = ('total_size_exceeded', True,
                           'The requested size limit exceeds the environment ceiling')
    TEMP_DIRECTORY_NOT_FOUND = ('temp_directory_not_found', True,
                                'The temporary upload directory is missing')
    TEMP_FILE_WRITE_ERROR = ('temp_file_write_error', True,
                             'The temporary upload file could not be written')
    TARGET_FILE_WRITE_ERROR = ('target_file_write_error', True,
                               'The target file could not be written')
    UPLOAD_CANCELLED_BY_SERVER = ('upload_cancelled_by_server', True,
                                  'The upload has been stopped by a server extension')
    SYSTEM_ERROR = ('system_error', True,
                    'The upload failed because of a system error')

    # Validation
    INPUT_NOT_SPECIFIED = ('input_not_specified', False,
                           'No input has been specified')
    INPUT_NOT_FOUND = ('input_not_found', False,
                       'The input has not been found or has been empty')
    INVALID_FILENAME = ('invalid_filename', False,
                        'The filename is invalid')
    INVALID_EXTENSION = ('invalid_extension', False,
                         'The file type is not permitted')
    FILE_TOO_LARGE = ('file_too_large', False,
                      'The file is too large')
    UPLOAD_CANCELLED = ('upload_cancelled', False,
                        'The upload has been cancelled')

    def __init__(self, code: str, fatal: bool, default_message: str) -> None:
        self.code = code
        self.fatal = fatal
        self.default_message = default_message


class UploadException(Exception):
    """Base exception for all upload failures."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            kind: Failure kind
            message: Error message (defaults to the kind's message)
        """
        self.kind = kind
        self.message = message or kind.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Machine-readable code of the failure kind."""
        return self.kind.code

    @property
    def fatal(self) -> bool:
        return self.kind.fatal

    @staticmethod
    def for_kind(kind: ErrorKind, message: Optional[str] = None) -> 'UploadException':
        """
        Create an exception of the tier matching the kind.

        Args:
            kind: Failure kind
            message: Optional custom message

        Returns:
            UploadError for fatal kinds, UploadValidationError otherwise
        """
        if kind.fatal:
            return UploadError(kind, message)
        return UploadValidationError(kind, message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}, {self.message!r})"


class UploadError(UploadException):
    """Fatal failure: misconfiguration or environment malfunction. Do not catch per kind."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None) -> None:
        if not kind.fatal:
            raise ValueError(f"{kind.name} is not a fatal error kind")
        super().__init__(kind, message)


class UploadValidationError(UploadException):
    """Rejected input, to be caught and converted to user feedback."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None) -> None:
        if kind.fatal:
            raise ValueError(f"{kind.name} is a fatal error kind")
        super().__init__(kind, message)
