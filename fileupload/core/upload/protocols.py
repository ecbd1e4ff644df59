"""
Protocol definitions for upload module.

Defines the interfaces of the collaborators an upload depends on and the
surface shared by every upload strategy.
"""
from typing import Callable, Optional, Protocol, TYPE_CHECKING, runtime_checkable

from ..path import File

if TYPE_CHECKING:
    from .registry import UploadedFile
    from .settings import UploadSettings


# Returns n cryptographically secure random bytes
RandomSource = Callable[[int], bytes]


@runtime_checkable
class UploadRegistry(Protocol):
    """
    Protocol for the collaborator holding received multipart file inputs.

    Implementations wrap whatever the hosting server provides.
    """

    def get(self, name: str) -> Optional['UploadedFile']:
        """
        Look up a received file input.

        Args:
            name: Input name

        Returns:
            The record or None if no such input has been received
        """
        ...

    def move_uploaded_file(self, temp_path: str, target_path: str) -> bool:
        """
        Move a received temporary file to its destination.

        Must only succeed for temporary files created by the receiving
        server, never for arbitrary local paths.

        Args:
            temp_path: Temporary file path from the record
            target_path: Destination path

        Returns:
            True if the file has been moved
        """
        ...


@runtime_checkable
class UploadStrategy(Protocol):
    """Protocol shared by all upload strategies."""

    @property
    def settings(self) -> 'UploadSettings':
        """Size limits and target of the upload."""
        ...

    def save(self) -> File:
        """
        Validate the source and store it.

        Returns:
            Description of the stored file

        Raises:
            UploadValidationError: If the input has been rejected
            UploadError: On misconfiguration or environment failure
        """
        ...
