# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
blobfs: a read-only filesystem view of a flat object store.
"""
from .client import Bucket, MemoryBucket, PrefixedBucket, open_bucket
from .client.exceptions import BlobFSError, ConfigurationError
from .errors import (
    PathError,
    InvalidPathError,
    NotFoundError,
    StoreIOError,
    InvalidArgumentError,
    EndOfStream,
)
from .file import BlobFile, FileInfo, Kind
from .fs import BlobFS, V1, new, valid_path

__version__ = "0.1.0"

__all__ = [
    'BlobFS',
    'BlobFile',
    'FileInfo',
    'Kind',
    'V1',
    'new',
    'valid_path',
    'Bucket',
    'MemoryBucket',
    'PrefixedBucket',
    'open_bucket',
    'BlobFSError',
    'ConfigurationError',
    'PathError',
    'InvalidPathError',
    'NotFoundError',
    'StoreIOError',
    'InvalidArgumentError',
    'EndOfStream',
]
