from abc import ABC, abstractmethod
from typing import BinaryIO, Optional


class StorageError(Exception):
    """The byte store could not complete a read or write."""


class ByteStore(ABC):
    """
    Abstract base class for byte store backends.
    Content is opaque bytes keyed by name; implementations can use S3, the
    filesystem, or any other storage system.
    """

    @abstractmethod
    def put_stream(self, key: str, stream: BinaryIO) -> int:
        """
        Copy a readable stream into the store under key.

        The content must only become visible under key once the whole stream
        has been written.

        Args:
            key: Name to store the content under
            stream: Readable binary stream

        Returns:
            Number of bytes written

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def get_stream(self, key: str) -> Optional[BinaryIO]:
        """
        Open stored content for reading.

        Args:
            key: Name the content was stored under

        Returns:
            Readable binary stream (caller closes it) or None if not found
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """
        Check if content is stored under key.

        Args:
            key: Name the content was stored under

        Returns:
            True if exists, False otherwise
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete content by key.

        Args:
            key: Name the content was stored under

        Returns:
            True if deleted, False if not found
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
