"""
fileupload - Validate and store uploaded files, Base64 data and data URIs.

Usage:
    >>> from fileupload import Base64Upload, UploadSettings, UploadValidationError
    >>>
    >>> settings = UploadSettings().with_maximum_size_in_megabytes(1).with_target_directory('uploads')
    >>> try:
    ...     stored = Base64Upload(settings).with_data(payload).with_filename_extension('txt').save()
    ... except UploadValidationError as e:
    ...     print(e.kind)
"""
import logging

from .core.config import UploadEnvironment, parse_size, parse_boolean, UNLIMITED
from .core.exceptions import ErrorKind, UploadException, UploadError, UploadValidationError
from .core.logging import LOGGER_NAMES
from .core.path import Directory, File
from .core.upload import (
    FileUpload,
    Base64Upload,
    DataUriUpload,
    UploadSettings,
    UploadErrorCode,
    UploadedFile,
    MemoryUploadRegistry,
    UploadRegistry,
    UploadStrategy,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Set the level of every fileupload logger.

    Handlers are left to the application, e.g. logging.basicConfig().
    Use logging.INFO to see stored files, logging.WARNING for rejected
    uploads only.

    Args:
        level: Logging level (default: logging.INFO)
    """
    for logger_name in LOGGER_NAMES:
        logging.getLogger(logger_name).setLevel(level)


__all__ = [
    'FileUpload',
    'Base64Upload',
    'DataUriUpload',
    'UploadSettings',
    'UploadEnvironment',
    'UploadErrorCode',
    'UploadedFile',
    'MemoryUploadRegistry',
    'UploadRegistry',
    'UploadStrategy',
    'Directory',
    'File',
    'ErrorKind',
    'UploadException',
    'UploadError',
    'UploadValidationError',
    'parse_size',
    'parse_boolean',
    'UNLIMITED',
    'setup_logging',
    '__version__',
]
