"""
Upload environment configuration.

The environment snapshot holds the raw size and switch strings that the
hosting runtime imposes on uploads (upload ceiling, request body
ceiling, memory ceiling, uploads switch and uploads per request). It is
read once and injected; nothing here queries global state on its own.
"""
import os
import re
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ErrorKind, UploadError
from .logging import get_logger

logger = get_logger('fileupload.config')

# "No limit"
UNLIMITED = sys.maxsize

ENVIRON_PREFIX = 'FILEUPLOAD_'

_SIZE_PATTERN = re.compile(r'[+-]?\d+')

_SIZE_MULTIPLIERS = {
    'K': 1024,
    'M': 1024 * 1024,
    'G': 1024 * 1024 * 1024,
}

_FALSE_STRINGS = frozenset({'', '0', 'off', 'false', 'no', 'none'})


def parse_size(text: Optional[str]) -> int:
    """
    Parse a size string such as '128M'.

    The leading integer is multiplied by 1024, 1024^2 or 1024^3 when the
    last character is K, M or G (case-insensitive).

    Args:
        text: Size string

    Returns:
        Size in bytes, 0 if the string has no leading integer
    """
    text = (text or '').strip()
    match = _SIZE_PATTERN.match(text)
    if match is None:
        return 0
    size = int(match.group())
    return size * _SIZE_MULTIPLIERS.get(text[-1:].upper(), 1)


def parse_boolean(text: Optional[str]) -> bool:
    """Parse a switch such as 'On', 'off', '1' or 'no'."""
    return (text or '').strip().lower() not in _FALSE_STRINGS


@dataclass(frozen=True)
class UploadEnvironment:
    """
    Snapshot of environment-imposed upload limits.

    All values are kept as raw strings and parsed on access.

    Attributes:
        upload_max_filesize: Ceiling for a single uploaded file
        post_max_size: Ceiling for a whole request body (<= 0 means no limit)
        memory_limit: Memory ceiling ('-1' means no limit)
        file_uploads: Whether uploads are enabled at all
        max_file_uploads: Number of uploads allowed per request
    """
    upload_max_filesize: str = '2M'
    post_max_size: str = '8M'
    memory_limit: str = '128M'
    file_uploads: str = '1'
    max_file_uploads: str = '20'

    @classmethod
    def default(cls) -> 'UploadEnvironment':
        """Create the default environment."""
        return cls()

    @classmethod
    def unlimited(cls) -> 'UploadEnvironment':
        """Create an environment that imposes no size ceiling."""
        return cls(
            upload_max_filesize=str(UNLIMITED),
            post_max_size='0',
            memory_limit='-1'
        )

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = ENVIRON_PREFIX
    ) -> 'UploadEnvironment':
        """
        Read the environment from variables such as FILEUPLOAD_POST_MAX_SIZE.

        Args:
            environ: Variables to read (defaults to os.environ)
            prefix: Variable name prefix

        Returns:
            Environment with defaults for unset variables
        """
        if environ is None:
            environ = os.environ
        defaults = cls()
        values = {}
        for name in ('upload_max_filesize', 'post_max_size', 'memory_limit',
                     'file_uploads', 'max_file_uploads'):
            values[name] = environ.get(f"{prefix}{name.upper()}", getattr(defaults, name))
        return cls(**values)

    @property
    def maximum_upload_size(self) -> int:
        """Effective ceiling in bytes: min(upload, post, memory)."""
        post_max_size = parse_size(self.post_max_size)
        if post_max_size <= 0:
            post_max_size = UNLIMITED

        memory_limit = parse_size(self.memory_limit)
        if memory_limit == -1:
            memory_limit = UNLIMITED

        return min(parse_size(self.upload_max_filesize), post_max_size, memory_limit)

    @property
    def uploads_enabled(self) -> bool:
        return parse_boolean(self.file_uploads) and parse_size(self.max_file_uploads) > 0

    def ensure_uploads_enabled(self) -> None:
        """
        Raise if the environment does not accept uploads.

        Raises:
            UploadError: UPLOADS_DISABLED or NO_UPLOADS_ALLOWED
        """
        if not parse_boolean(self.file_uploads):
            logger.error("File uploads are disabled")
            raise UploadError(ErrorKind.UPLOADS_DISABLED)
        if parse_size(self.max_file_uploads) <= 0:
            logger.error(f"max_file_uploads is {self.max_file_uploads!r}")
            raise UploadError(ErrorKind.NO_UPLOADS_ALLOWED)
