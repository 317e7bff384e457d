from .base import ByteStore, StorageError
from .s3_storage import S3Storage
from .filesystem import FilesystemStorage

__all__ = ['ByteStore', 'StorageError', 'S3Storage', 'FilesystemStorage']
