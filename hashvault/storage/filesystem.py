import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional
from .base import ByteStore, StorageError


class FilesystemStorage(ByteStore):
    """
    Filesystem-based byte store.
    Stores objects in a local directory with git-like structure.
    """

    def __init__(self, base_path: str = '.hashvault/objects'):
        """
        Initialize filesystem storage.

        Args:
            base_path: Base directory for storing objects
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _make_path(self, key: str) -> Path:
        """
        Create filesystem path from key.
        Uses git-like directory structure: base/first2/rest
        e.g., .hashvault/objects/ab/cdef123456...
        """
        return self.base_path / key[:2] / key[2:]

    def put_stream(self, key: str, stream: BinaryIO) -> int:
        """
        Write a stream to the filesystem under key.

        The content is written to a temporary file in the target directory and
        renamed into place, so a failed write never leaves a partial object.
        """
        path = self._make_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix='.tmp-')
        try:
            with os.fdopen(fd, 'wb') as tmp:
                shutil.copyfileobj(stream, tmp)
                size = tmp.tell()
            os.replace(tmp_name, path)
        except Exception as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass  # Already gone
            if isinstance(e, OSError):
                raise StorageError(f"Failed to write to filesystem: {e}") from e
            raise

        return size

    def get_stream(self, key: str) -> Optional[BinaryIO]:
        path = self._make_path(key)

        try:
            return path.open('rb')
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read from filesystem: {e}") from e

    def exists(self, key: str) -> bool:
        return self._make_path(key).exists()

    def delete(self, key: str) -> bool:
        path = self._make_path(key)

        if not path.exists():
            return False

        try:
            path.unlink()
            # Try to remove empty parent directories
            try:
                path.parent.rmdir()
            except OSError:
                pass  # Directory not empty
            return True
        except OSError as e:
            raise StorageError(f"Failed to delete from filesystem: {e}") from e
