import boto3
from botocore.exceptions import BotoCoreError, ClientError
from typing import BinaryIO, Optional
from hashvault.config import Config
from .base import ByteStore, StorageError


class S3Storage(ByteStore):
    """
    Stores object content in an S3 bucket.
    Keys use a git-like fan-out under the ``objects/`` prefix.
    """

    def __init__(self, bucket: Optional[str] = None, client=None):
        """
        Args:
            bucket: Bucket name (defaults to Config.S3_BUCKET)
            client: Preconfigured boto3 S3 client (built from Config if omitted)
        """
        self.s3_client = client or boto3.client(
            's3',
            aws_access_key_id=Config.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=Config.AWS_SECRET_ACCESS_KEY,
            region_name=Config.AWS_REGION
        )
        self.bucket = bucket or Config.S3_BUCKET

    def _make_s3_key(self, key: str) -> str:
        """
        Create S3 key from an object key.
        e.g., objects/ab/cdef123456...
        """
        return f"objects/{key[:2]}/{key[2:]}"

    def put_stream(self, key: str, stream: BinaryIO) -> int:
        """Upload a stream; S3 only exposes the object once the upload completes."""
        counter = _CountingReader(stream)
        try:
            self.s3_client.upload_fileobj(
                counter,
                self.bucket,
                self._make_s3_key(key),
                ExtraArgs={'ContentType': 'application/octet-stream'}
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload to S3: {e}") from e

        return counter.bytes_read

    def get_stream(self, key: str) -> Optional[BinaryIO]:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket, Key=self._make_s3_key(key))
            return response['Body']
        except ClientError as e:
            if e.response['Error']['Code'] in ('NoSuchKey', '404'):
                return None
            raise StorageError(f"Failed to retrieve from S3: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to retrieve from S3: {e}") from e

    def exists(self, key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket, Key=self._make_s3_key(key))
            return True
        except ClientError as e:
            if e.response['Error']['Code'] in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise StorageError(f"Failed to check S3: {e}") from e

    def delete(self, key: str) -> bool:
        if not self.exists(key):
            return False

        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=self._make_s3_key(key))
            return True
        except ClientError as e:
            raise StorageError(f"Failed to delete from S3: {e}") from e


class _CountingReader:
    """File-like wrapper that counts the bytes read through it."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._stream.read(size)
        self.bytes_read += len(chunk)
        return chunk
