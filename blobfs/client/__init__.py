# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Object store clients used by blobfs.
"""
from .bucket import Bucket, ListIterator, PrefixedBucket, open_bucket
from .exceptions import BlobFSError, BucketError, ObjectError, ObjectNotFoundError, ConfigurationError
from .memory import MemoryBucket
from .types import ObjectAttributes, ListObject, ListPage

__all__ = [
    'Bucket',
    'ListIterator',
    'PrefixedBucket',
    'open_bucket',
    'MemoryBucket',
    'BlobFSError',
    'BucketError',
    'ObjectError',
    'ObjectNotFoundError',
    'ConfigurationError',
    'ObjectAttributes',
    'ListObject',
    'ListPage',
]
