# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Configuration for blobfs.

Settings come from BLOBFS_* environment variables; command-line flags of the
mount CLI override them.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .client.bucket import DEFAULT_PAGE_SIZE, open_bucket
from .client.exceptions import ConfigurationError
from .fs import BlobFS, V1

_TRUE_VALUES = ('true', '1', 'yes')

def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if number <= 0:
        raise ConfigurationError(f"{name} must be positive, got {number}")
    return number

@dataclass
class BlobFSConfig:
    """
    Filesystem and bucket settings.

    Attributes:
        bucket_url (str): Bucket URL, e.g. "s3://my-assets" or "mem://"
        version (str): Storage version tag
        prefix (str): Sub-path prefix inside the version
        endpoint_url (str): Endpoint of an S3-compatible service
        region (str): Bucket region
        page_size (int): Page size for directory listings
        log_level (str): Logging level name
        trace_ops (bool): Trace every filesystem operation
    """
    bucket_url: Optional[str] = None
    version: str = V1
    prefix: str = ""
    endpoint_url: Optional[str] = None
    region: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE
    log_level: str = "INFO"
    trace_ops: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "BlobFSConfig":
        """
        Load settings from the environment.

        Args:
            env (Mapping, optional): Variables to read. Defaults to os.environ.

        Raises:
            ConfigurationError: If a numeric setting is not a positive integer
        """
        if env is None:
            env = os.environ
        return cls(
            bucket_url=env.get('BLOBFS_BUCKET_URL') or None,
            version=env.get('BLOBFS_VERSION', V1),
            prefix=env.get('BLOBFS_PREFIX', ""),
            endpoint_url=env.get('BLOBFS_ENDPOINT_URL') or None,
            region=env.get('BLOBFS_REGION') or None,
            page_size=_env_int(env, 'BLOBFS_PAGE_SIZE', DEFAULT_PAGE_SIZE),
            log_level=env.get('BLOBFS_LOG_LEVEL', "INFO").upper(),
            trace_ops=env.get('BLOBFS_TRACE_OPS', '').lower() in _TRUE_VALUES,
        )

    def open_bucket(self):
        """Open the configured bucket."""
        if not self.bucket_url:
            raise ConfigurationError("No bucket URL configured (set BLOBFS_BUCKET_URL)")
        return open_bucket(self.bucket_url, region=self.region, endpoint_url=self.endpoint_url)

    def open_fs(self):
        """Open the configured bucket as a BlobFS."""
        return BlobFS(self.open_bucket(), version=self.version, prefix=self.prefix, page_size=self.page_size)
