"""Core components of fileupload."""
from .config import UploadEnvironment, parse_size, parse_boolean, UNLIMITED
from .exceptions import ErrorKind, UploadException, UploadError, UploadValidationError
from .path import Directory, File

__all__ = [
    'UploadEnvironment',
    'parse_size',
    'parse_boolean',
    'UNLIMITED',
    'ErrorKind',
    'UploadException',
    'UploadError',
    'UploadValidationError',
    'Directory',
    'File',
]
