import pytest

from blobfs import BlobFS, MemoryBucket, V1
from blobfs.client.exceptions import ConfigurationError
from blobfs.config import BlobFSConfig

def test_defaults():
    config = BlobFSConfig.from_env({})
    assert config.bucket_url is None
    assert config.version == V1
    assert config.prefix == ""
    assert config.endpoint_url is None
    assert config.region is None
    assert config.page_size == 1000
    assert config.log_level == "INFO"
    assert config.trace_ops is False

def test_from_env():
    config = BlobFSConfig.from_env({
        "BLOBFS_BUCKET_URL": "s3://assets",
        "BLOBFS_VERSION": "v2",
        "BLOBFS_PREFIX": "site",
        "BLOBFS_ENDPOINT_URL": "http://localhost:9000",
        "BLOBFS_REGION": "eu-west-1",
        "BLOBFS_PAGE_SIZE": "50",
        "BLOBFS_LOG_LEVEL": "debug",
        "BLOBFS_TRACE_OPS": "yes",
    })
    assert config == BlobFSConfig(
        bucket_url="s3://assets",
        version="v2",
        prefix="site",
        endpoint_url="http://localhost:9000",
        region="eu-west-1",
        page_size=50,
        log_level="DEBUG",
        trace_ops=True,
    )

def test_from_os_environ(monkeypatch):
    monkeypatch.setenv("BLOBFS_BUCKET_URL", "mem://")
    monkeypatch.setenv("BLOBFS_PAGE_SIZE", "7")
    config = BlobFSConfig.from_env()
    assert config.bucket_url == "mem://"
    assert config.page_size == 7

@pytest.mark.parametrize("value", ["ten", "0", "-5", "1.5"])
def test_invalid_page_size(value):
    with pytest.raises(ConfigurationError) as excinfo:
        BlobFSConfig.from_env({"BLOBFS_PAGE_SIZE": value})
    assert "BLOBFS_PAGE_SIZE" in str(excinfo.value)

def test_open_fs():
    config = BlobFSConfig(bucket_url="mem://", prefix="site", page_size=10)
    fs = config.open_fs()
    assert isinstance(fs, BlobFS)
    assert isinstance(fs.bucket.bucket, MemoryBucket)
    assert fs.bucket.prefix == "v1/site/"
    assert fs.page_size == 10

def test_open_without_bucket_url():
    with pytest.raises(ConfigurationError):
        BlobFSConfig().open_bucket()
