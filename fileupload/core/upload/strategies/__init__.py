"""Upload strategies module."""
from .field import FileUpload, ERROR_CODE_KINDS, DEFAULT_ALLOWED_EXTENSIONS
from .base64_upload import Base64Upload
from .data_uri import DataUriUpload, DEFAULT_MIME_TYPES_AND_EXTENSIONS

__all__ = [
    'FileUpload',
    'Base64Upload',
    'DataUriUpload',
    'ERROR_CODE_KINDS',
    'DEFAULT_ALLOWED_EXTENSIONS',
    'DEFAULT_MIME_TYPES_AND_EXTENSIONS',
]
