# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Read-only filesystem view of a bucket.

BlobFS presents the keys of a flat bucket as a tree of files and
directories. Directories are never stored: a path is a directory when some
key starts with ``path + "/"``. All paths are resolved under an effective
key prefix built from a storage version tag and a sub-path prefix, e.g.
``"v1/site/"``.

Usage:
    bucket = open_bucket("s3://my-assets")
    fs = BlobFS(bucket, version=V1, prefix="site")

    with fs.open("css/main.css") as f:
        data = f.read()

    for entry in fs.open("css").readdir():
        print(entry.name, entry.is_dir())
"""

import posixpath
import time

from .client.bucket import DEFAULT_PAGE_SIZE, PrefixedBucket
from .client.exceptions import ConfigurationError
from .errors import InvalidArgumentError, InvalidPathError, NotFoundError, StoreIOError
from .file import BlobFile, FileInfo, Kind, ROOT, classify
from .utils import logger, time_function, trace_op

# Storage layout version 1: assets live under "<bucket>/v1/<prefix>/".
V1 = "v1"

def valid_path(path: str) -> bool:
    """
    Report whether path is a valid filesystem path.

    Valid paths are unrooted, slash-separated sequences of elements, none of
    them empty, "." or "..". The root itself is ".".
    """
    if path == ROOT:
        return True
    if not isinstance(path, str) or not path:
        return False
    for element in path.split("/"):
        if element in ("", ".", ".."):
            return False
    return True

def root_prefix(version: str, prefix: str) -> str:
    """
    Effective key prefix for a version tag and a sub-path prefix.

    The prefix loses its trailing slashes and the non-empty parts are joined
    with one slash, followed by a trailing slash. With both parts empty the
    result is "", the bucket root.
    """
    parts = [part for part in (version.strip("/"), prefix.strip("/")) if part]
    if not parts:
        return ""
    return "/".join(parts) + "/"

class BlobFS:
    """
    Root resolver: opens paths of a bucket as BlobFile handles.

    Attributes:
        bucket (PrefixedBucket): The bucket, rooted at the effective prefix
        version (str): Storage version tag
        prefix (str): Sub-path prefix inside the version
        page_size (int): Page size for directory listings
    """

    def __init__(self, bucket, version: str = "", prefix: str = "", page_size: int = DEFAULT_PAGE_SIZE):
        """
        Initialize the filesystem.

        Args:
            bucket (Bucket): The bucket to present
            version (str): Storage version tag, e.g. V1. Defaults to "".
            prefix (str): Sub-path prefix. Defaults to "".
            page_size (int): Page size for directory listings. Defaults to 1000.

        Raises:
            ConfigurationError: If the bucket cannot be wrapped
        """
        if bucket is None:
            raise ConfigurationError("A bucket is required")
        if page_size <= 0:
            raise ConfigurationError(f"Invalid page size: {page_size}")
        self.version = version or ""
        self.prefix = prefix or ""
        self.page_size = page_size
        self.bucket = PrefixedBucket(bucket, root_prefix(self.version, self.prefix))
        logger.info(f"BlobFS rooted at {self.bucket.prefix!r}")

    def _make_handle(self, path: str, kind: Kind = None) -> BlobFile:
        return BlobFile(self, path, kind)

    def open(self, path: str) -> BlobFile:
        """
        Open a path for reading.

        The root "." always opens. Any other path is validated and then
        classified with an exact-key check followed by a one-entry listing
        under ``path + "/"``.

        Args:
            path (str): Path relative to the filesystem root

        Returns:
            BlobFile: A handle for the path

        Raises:
            InvalidPathError: If the path is not a valid filesystem path
            NotFoundError: If no object and no prefix matches the path
            StoreIOError: If a bucket call fails
        """
        trace_op("open", path)
        if path == ROOT:
            return self._make_handle(ROOT, Kind.DIRECTORY)
        if not valid_path(path):
            raise InvalidPathError("open", path)

        start_time = time.time()
        try:
            kind = classify(self.bucket, path)
        except Exception as e:
            logger.error(f"open {path}: store error: {e}")
            raise StoreIOError("open", path, str(e)) from e
        time_function(f"open({path}) classify", start_time)

        if kind is Kind.NOT_EXIST:
            logger.debug(f"open: {path} does not exist")
            raise NotFoundError("open", path)
        return self._make_handle(path, kind)

    def stat(self, path: str) -> FileInfo:
        """Open path and return its FileInfo."""
        with self.open(path) as f:
            return f.stat()

    def read_file(self, path: str) -> bytes:
        """
        Return the full content of a file.

        Raises:
            InvalidArgumentError: If the path is a directory
        """
        with self.open(path) as f:
            if f.is_dir():
                raise InvalidArgumentError("read", path, "is a directory")
            return f.read()

    def read_dir(self, path: str) -> list:
        """Return every entry of a directory, sorted by name."""
        with self.open(path) as f:
            entries = f.readdir(-1)
        return sorted(entries, key=lambda entry: entry.name)

    def walk(self, top: str = ROOT):
        """
        Walk the tree top-down, like os.walk.

        Yields:
            tuple: (dirpath, dirnames, filenames) for every directory
        """
        dirnames, filenames = [], []
        for entry in self.read_dir(top):
            (dirnames if entry.is_dir() else filenames).append(entry.name)
        yield top, dirnames, filenames
        for name in dirnames:
            child = name if top == ROOT else posixpath.join(top, name)
            yield from self.walk(child)

    def sub(self, path: str) -> "BlobFS":
        """
        Return a filesystem rooted at a subdirectory.

        Raises:
            InvalidPathError: If the path is not a valid filesystem path
        """
        if path == ROOT:
            return self
        if not valid_path(path):
            raise InvalidPathError("sub", path)
        prefix = posixpath.join(self.prefix, path) if self.prefix else path
        return BlobFS(self.bucket.bucket, version=self.version, prefix=prefix, page_size=self.page_size)

    def close(self) -> None:
        self.bucket.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self):
        return f"BlobFS({self.bucket!r})"

def new(version: str, bucket, prefix: str) -> BlobFS:
    """Construct a BlobFS for a version tag and prefix."""
    return BlobFS(bucket, version=version, prefix=prefix)
