# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Bucket interface.

This module defines the four primitives the filesystem needs from a flat
object store (exact-key existence, attribute fetch, whole-object read and
a paginated, delimiter-grouped prefix listing), a resumable iterator over
that listing, and a wrapper that roots every key operation at a prefix.

Classes:
    Bucket: Abstract base class for object store clients.
    ListIterator: Resumable cursor over a paginated prefix listing.
    PrefixedBucket: Bucket wrapper that prepends a key prefix.

Functions:
    open_bucket: Open a bucket from a URL such as ``mem://`` or ``s3://name``.
"""
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import urlparse, parse_qs

from .exceptions import ConfigurationError
from .types import ListObject, ListPage, ObjectAttributes

DEFAULT_PAGE_SIZE = 1000

class Bucket(ABC):
    """
    Minimal object store client used by the filesystem.

    Implementations raise ObjectNotFoundError when an exact key is missing
    and other BlobFSError subclasses for store faults.
    """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Report whether an object exists under exactly this key."""

    @abstractmethod
    def attributes(self, key: str) -> ObjectAttributes:
        """Fetch metadata for the object stored under exactly this key."""

    @abstractmethod
    def read_all(self, key: str) -> bytes:
        """Fetch the full content of the object stored under this key."""

    @abstractmethod
    def list_page(self, prefix: str, delimiter: str = "/", page_size: int = DEFAULT_PAGE_SIZE,
                  token: Optional[str] = None) -> ListPage:
        """
        Fetch one page of a prefix listing.

        Keys sharing ``prefix`` are grouped at the first ``delimiter`` after
        it; a group is reported once, as a key ending in the delimiter.

        Args:
            prefix (str): Only keys starting with this prefix are listed.
            delimiter (str): Grouping separator, empty for a flat listing.
            page_size (int): Maximum number of results in the page.
            token (str, optional): Continuation token from the previous page.

        Returns:
            ListPage: The results and the token for the next page, which is
                None on the last page.
        """

    def list(self, prefix: str = "", delimiter: str = "/", page_size: int = DEFAULT_PAGE_SIZE) -> "ListIterator":
        """Iterate over every result of a prefix listing, page by page."""
        return ListIterator(self, prefix, delimiter, page_size)

    def close(self) -> None:
        """Release client resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

class ListIterator:
    """
    Resumable cursor over a paginated prefix listing.

    Pages are fetched on demand. A failed page fetch leaves the cursor where
    it was, so calling next() again retries the same page.
    """

    def __init__(self, bucket: Bucket, prefix: str, delimiter: str = "/", page_size: int = DEFAULT_PAGE_SIZE):
        self.bucket = bucket
        self.prefix = prefix
        self.delimiter = delimiter
        self.page_size = page_size
        self._page = None
        self._index = 0

    def __iter__(self):
        return self

    def __next__(self) -> ListObject:
        while True:
            if self._page is not None:
                if self._index < len(self._page.objects):
                    obj = self._page.objects[self._index]
                    self._index += 1
                    return obj
                if self._page.next_token is None:
                    raise StopIteration
            token = self._page.next_token if self._page is not None else None
            page = self.bucket.list_page(self.prefix, self.delimiter, self.page_size, token)
            self._page = page
            self._index = 0

class PrefixedBucket(Bucket):
    """
    Bucket wrapper that roots every key operation at a prefix.

    Keys passed in are relative to the prefix; keys returned by listings are
    made relative again.
    """

    def __init__(self, bucket: Bucket, prefix: str):
        if not isinstance(bucket, Bucket):
            raise ConfigurationError(f"Cannot wrap {type(bucket).__name__}: not a Bucket")
        self.bucket = bucket
        self.prefix = prefix

    def exists(self, key: str) -> bool:
        return self.bucket.exists(self.prefix + key)

    def attributes(self, key: str) -> ObjectAttributes:
        return self.bucket.attributes(self.prefix + key)

    def read_all(self, key: str) -> bytes:
        return self.bucket.read_all(self.prefix + key)

    def list_page(self, prefix: str, delimiter: str = "/", page_size: int = DEFAULT_PAGE_SIZE,
                  token: Optional[str] = None) -> ListPage:
        page = self.bucket.list_page(self.prefix + prefix, delimiter, page_size, token)
        objects = [
            ListObject(key=obj.key[len(self.prefix):], size=obj.size, mod_time=obj.mod_time, is_dir=obj.is_dir)
            for obj in page.objects
        ]
        return ListPage(objects=objects, next_token=page.next_token)

    def close(self) -> None:
        self.bucket.close()

    def __repr__(self):
        return f"PrefixedBucket({self.bucket!r}, prefix={self.prefix!r})"

def open_bucket(url: str, **kwargs) -> Bucket:
    """
    Open a bucket from a URL.

    Supported schemes:
        ``mem://``: a new, empty in-memory bucket.
        ``s3://<name>[?region=<region>&endpoint=<url>]``: an S3 bucket.

    Keyword arguments are passed to the bucket constructor and override the
    query parameters.

    Args:
        url (str): Bucket URL

    Returns:
        Bucket: The opened bucket

    Raises:
        ConfigurationError: If the URL scheme is not supported or the bucket
            name is missing
    """
    parsed = urlparse(url)
    if parsed.scheme == "mem":
        from .memory import MemoryBucket
        return MemoryBucket()
    if parsed.scheme == "s3":
        if not parsed.netloc:
            raise ConfigurationError(f"Missing bucket name in URL: {url}")
        from .s3 import S3Bucket
        query = {k: v[-1] for k, v in parse_qs(parsed.query).items()}
        options = {"region": query.get("region"), "endpoint_url": query.get("endpoint")}
        options.update({k: v for k, v in kwargs.items() if v is not None})
        return S3Bucket(parsed.netloc, **options)
    raise ConfigurationError(f"Unsupported bucket URL scheme: {parsed.scheme or url}")
