"""
Tests for the byte store backends
"""
import io
import os

import pytest
from botocore.exceptions import ClientError

from hashvault.core.hashing import hash_blob
from hashvault.storage import FilesystemStorage, S3Storage


def test_filesystem_put_and_get(temp_dir):
    storage = FilesystemStorage(base_path=f"{temp_dir}/objects")
    key = hash_blob(b'content')

    size = storage.put_stream(key, io.BytesIO(b'content'))

    assert size == 7
    assert storage.exists(key)
    assert os.path.exists(os.path.join(temp_dir, 'objects', key[:2], key[2:]))
    with storage.get_stream(key) as stream:
        assert stream.read() == b'content'


def test_filesystem_missing_key(temp_dir):
    storage = FilesystemStorage(base_path=f"{temp_dir}/objects")
    key = hash_blob(b'never stored')

    assert not storage.exists(key)
    assert storage.get_stream(key) is None
    assert storage.delete(key) is False


def test_filesystem_delete(temp_dir):
    storage = FilesystemStorage(base_path=f"{temp_dir}/objects")
    key = hash_blob(b'short-lived')
    storage.put_stream(key, io.BytesIO(b'short-lived'))

    assert storage.delete(key) is True
    assert not storage.exists(key)


class _BrokenStream:
    def __init__(self):
        self.calls = 0

    def read(self, size=-1):
        self.calls += 1
        if self.calls == 1:
            return b'partial'
        raise RuntimeError('connection reset')


def test_filesystem_failed_write_leaves_nothing_behind(temp_dir):
    storage = FilesystemStorage(base_path=f"{temp_dir}/objects")
    key = hash_blob(b'partial and more')

    with pytest.raises(RuntimeError):
        storage.put_stream(key, _BrokenStream())

    assert not storage.exists(key)
    fan_out_dir = os.path.join(temp_dir, 'objects', key[:2])
    assert os.listdir(fan_out_dir) == []


class FakeS3Client:
    """Just enough of the boto3 S3 client for S3Storage"""

    def __init__(self):
        self.objects = {}

    @staticmethod
    def _not_found(operation):
        return ClientError({'Error': {'Code': 'NoSuchKey', 'Message': 'Not Found'}}, operation)

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        self.objects[(bucket, key)] = fileobj.read()

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise self._not_found('GetObject')
        return {'Body': io.BytesIO(self.objects[(Bucket, Key)])}

    def head_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise ClientError({'Error': {'Code': '404', 'Message': 'Not Found'}}, 'HeadObject')
        return {}

    def delete_object(self, Bucket, Key):
        self.objects.pop((Bucket, Key), None)


def test_s3_round_trip():
    client = FakeS3Client()
    storage = S3Storage(bucket='objects-bucket', client=client)
    key = hash_blob(b's3 content')

    assert storage.put_stream(key, io.BytesIO(b's3 content')) == len(b's3 content')
    assert ('objects-bucket', f'objects/{key[:2]}/{key[2:]}') in client.objects
    assert storage.exists(key)
    assert storage.get_stream(key).read() == b's3 content'

    assert storage.delete(key) is True
    assert not storage.exists(key)
    assert storage.get_stream(key) is None
