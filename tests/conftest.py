import pytest

from blobfs.client.bucket import Bucket
from blobfs.client.exceptions import BlobFSError
from blobfs.client.memory import MemoryBucket
from blobfs.fs import BlobFS, root_prefix

class RecordingBucket(Bucket):
    """Bucket wrapper that records every call and can inject faults."""

    def __init__(self, bucket):
        self.bucket = bucket
        self.calls = []
        self.failures = {}

    def fail(self, method, error=None, times=1):
        """Make the next `times` calls of `method` raise `error`."""
        self.failures[method] = [error or BlobFSError("injected fault", code="ERR_INJECTED"), times]

    def count(self, method=None):
        return sum(1 for call in self.calls if method is None or call[0] == method)

    def reset(self):
        self.calls.clear()

    def _call(self, method, *args):
        self.calls.append((method,) + args)
        failure = self.failures.get(method)
        if failure and failure[1] > 0:
            failure[1] -= 1
            raise failure[0]
        return getattr(self.bucket, method)(*args)

    def exists(self, key):
        return self._call("exists", key)

    def attributes(self, key):
        return self._call("attributes", key)

    def read_all(self, key):
        return self._call("read_all", key)

    def list_page(self, prefix, delimiter="/", page_size=1000, token=None):
        return self._call("list_page", prefix, delimiter, page_size, token)

@pytest.fixture
def bucket():
    """Fixture to provide an empty in-memory bucket."""
    return MemoryBucket()

@pytest.fixture
def recorder(bucket):
    """Fixture to provide a call-recording wrapper around the bucket."""
    return RecordingBucket(bucket)

@pytest.fixture
def make_fs(recorder):
    """Fixture to build a BlobFS over the recording bucket with some objects written."""
    def factory(files=(), version="", prefix="", page_size=1000, data=b"hello"):
        fs = BlobFS(recorder, version=version, prefix=prefix, page_size=page_size)
        root = root_prefix(version, prefix)
        if isinstance(files, dict):
            items = files.items()
        else:
            items = [(key, data) for key in files]
        for key, content in items:
            recorder.bucket.write_all(root + key, content)
        recorder.reset()
        return fs
    return factory
