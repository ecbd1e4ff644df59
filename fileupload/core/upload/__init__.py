"""
Upload module.

Three strategies share one settings object for size limits and target:
- FileUpload: multipart form file inputs received by the hosting server
- Base64Upload: Base64-encoded strings
- DataUriUpload: data URIs
"""
from .settings import UploadSettings, write_target_file
from .registry import UploadErrorCode, UploadedFile, MemoryUploadRegistry
from .protocols import UploadRegistry, UploadStrategy, RandomSource
from .strategies import FileUpload, Base64Upload, DataUriUpload

__all__ = [
    # Strategies
    'FileUpload',
    'Base64Upload',
    'DataUriUpload',
    
    # Settings
    'UploadSettings',
    'write_target_file',
    
    # Registry
    'UploadErrorCode',
    'UploadedFile',
    'MemoryUploadRegistry',
    
    # Protocols
    'UploadRegistry',
    'UploadStrategy',
    'RandomSource',
]
