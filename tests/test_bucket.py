from datetime import datetime, timezone

import pytest

from blobfs.client import (
    ConfigurationError,
    ListIterator,
    MemoryBucket,
    ObjectError,
    ObjectNotFoundError,
    PrefixedBucket,
    open_bucket,
)
from blobfs.client.exceptions import BlobFSError

from conftest import RecordingBucket

@pytest.fixture
def filled(bucket):
    for key in ["a", "b/1", "b/2", "b/c/3", "d", "e/", "e/4"]:
        bucket.write_all(key, key.encode())
    return bucket

def test_memory_bucket_objects(bucket):
    mod_time = datetime(2023, 1, 2, tzinfo=timezone.utc)
    bucket.write_all("k", b"data", mod_time=mod_time)
    assert bucket.exists("k")
    assert not bucket.exists("missing")
    attrs = bucket.attributes("k")
    assert attrs.size == 4
    assert attrs.mod_time == mod_time
    assert bucket.read_all("k") == b"data"

    bucket.write_all("k", b"replaced")
    assert bucket.read_all("k") == b"replaced"

    bucket.delete("k")
    assert not bucket.exists("k")

def test_memory_bucket_missing_keys(bucket):
    with pytest.raises(ObjectNotFoundError) as excinfo:
        bucket.attributes("nope")
    assert excinfo.value.key == "nope"
    with pytest.raises(ObjectNotFoundError):
        bucket.read_all("nope")
    with pytest.raises(ObjectNotFoundError):
        bucket.delete("nope")
    with pytest.raises(ObjectError):
        bucket.write_all("", b"x")

def test_list_page_groups_at_delimiter(filled):
    page = filled.list_page("", "/")
    assert [(o.key, o.is_dir) for o in page.objects] == [
        ("a", False),
        ("b/", True),
        ("d", False),
        ("e/", True),
    ]
    assert page.next_token is None

    page = filled.list_page("b/", "/")
    assert [o.key for o in page.objects] == ["b/1", "b/2", "b/c/"]

    page = filled.list_page("e/", "/")
    assert [o.key for o in page.objects] == ["e/", "e/4"]

def test_list_page_flat(filled):
    page = filled.list_page("b/", "")
    assert [o.key for o in page.objects] == ["b/1", "b/2", "b/c/3"]

def test_list_page_prefix_is_raw(filled):
    # A prefix without delimiter matches partial names.
    page = filled.list_page("b", "/")
    assert [o.key for o in page.objects] == ["b/"]

def test_list_page_pagination(filled):
    keys = []
    token = None
    pages = 0
    while True:
        page = filled.list_page("", "/", page_size=1, token=token)
        pages += 1
        keys.extend(o.key for o in page.objects)
        if page.next_token is None:
            break
        token = page.next_token
    assert keys == ["a", "b/", "d", "e/"]
    assert pages == 4

def test_list_page_rejects_bad_page_size(bucket):
    with pytest.raises(ObjectError):
        bucket.list_page("", "/", page_size=0)

def test_list_iterator_walks_every_page(filled):
    recorder = RecordingBucket(filled)
    it = recorder.list("b/", "/", page_size=2)
    assert isinstance(it, ListIterator)
    assert [o.key for o in it] == ["b/1", "b/2", "b/c/"]
    assert recorder.count("list_page") == 2
    assert list(it) == []
    assert recorder.count("list_page") == 2

def test_list_iterator_retries_failed_page(filled):
    recorder = RecordingBucket(filled)
    it = recorder.list("", "/", page_size=2)
    assert next(it).key == "a"
    assert next(it).key == "b/"

    recorder.fail("list_page")
    with pytest.raises(BlobFSError):
        next(it)
    assert [o.key for o in it] == ["d", "e/"]
    tokens = [call[4] for call in recorder.calls]
    assert tokens == [None, "b/", "b/"], "A failed page is fetched again with the same token"

def test_list_iterator_first_page_failure(filled):
    recorder = RecordingBucket(filled)
    recorder.fail("list_page")
    it = recorder.list("", "/", page_size=10)
    with pytest.raises(BlobFSError):
        next(it)
    assert len(list(it)) == 4

def test_prefixed_bucket(filled):
    pb = PrefixedBucket(filled, "b/")
    assert pb.exists("1")
    assert not pb.exists("a")
    assert pb.read_all("c/3") == b"b/c/3"
    assert pb.attributes("2").size == 3
    page = pb.list_page("", "/")
    assert [(o.key, o.is_dir) for o in page.objects] == [("1", False), ("2", False), ("c/", True)]
    assert [o.key for o in pb.list("c/")] == ["c/3"]

def test_prefixed_bucket_empty_prefix(filled):
    pb = PrefixedBucket(filled, "")
    assert [o.key for o in pb.list()] == ["a", "b/", "d", "e/"]

def test_prefixed_bucket_requires_bucket():
    with pytest.raises(ConfigurationError):
        PrefixedBucket("not a bucket", "p/")

def test_open_bucket_memory():
    with open_bucket("mem://") as b:
        assert isinstance(b, MemoryBucket)
        assert not b.exists("x")

def test_open_bucket_s3(monkeypatch):
    created = {}

    class FakeS3Bucket:
        def __init__(self, name, **kwargs):
            created["name"] = name
            created.update(kwargs)

    monkeypatch.setattr("blobfs.client.s3.S3Bucket", FakeS3Bucket)
    open_bucket("s3://assets?region=eu-west-1&endpoint=http://localhost:9000")
    assert created == {"name": "assets", "region": "eu-west-1", "endpoint_url": "http://localhost:9000"}

    created.clear()
    open_bucket("s3://assets?region=eu-west-1", region="us-east-2", endpoint_url=None)
    assert created == {"name": "assets", "region": "us-east-2", "endpoint_url": None}

@pytest.mark.parametrize("url", ["s3://", "gs://bucket", "/tmp/dir", ""])
def test_open_bucket_rejects_bad_urls(url):
    with pytest.raises(ConfigurationError):
        open_bucket(url)
