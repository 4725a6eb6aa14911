# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Path handles.

A BlobFile is what BlobFS.open returns: a read-only, seekable file object
bound to one logical path, which also serves as a directory entry. Nothing
is fetched from the bucket until it is needed, and whatever is fetched
(attributes, content, the directory listing cursor) is kept for the
lifetime of the handle. A handle reflects a single snapshot of the bucket.

A handle is not safe for concurrent use; callers sharing one across
threads must serialize access themselves.
"""

import enum
import io
import posixpath
import stat as statmod
import time
from dataclasses import dataclass
from datetime import datetime

from .client.exceptions import ObjectNotFoundError
from .client.types import EPOCH
from .errors import EndOfStream, InvalidArgumentError, NotFoundError, StoreIOError
from .lazy import Once
from .utils import logger, time_function, trace_op

ROOT = "."
DELIMITER = "/"

class Kind(enum.Enum):
    """What a path denotes in the emulated tree."""
    FILE = "file"
    DIRECTORY = "directory"
    NOT_EXIST = "not_exist"

@dataclass(frozen=True)
class FileInfo:
    """Stat result for a path."""
    name: str
    size: int
    mod_time: datetime
    is_dir: bool

    @property
    def mode(self) -> int:
        if self.is_dir:
            return statmod.S_IFDIR | 0o555
        return statmod.S_IFREG | 0o444

def dir_prefix(path: str) -> str:
    """Listing prefix for the children of path: "" for the root, else path with one trailing slash."""
    if path in (ROOT, ""):
        return ""
    return path.rstrip(DELIMITER) + DELIMITER

def extension(path: str) -> str:
    """
    File-extension-like suffix of the last path element.

    Everything from the final dot of the last element, or "" when there is
    none. A trailing slash means there is no suffix.
    """
    for i in range(len(path) - 1, -1, -1):
        if path[i] == DELIMITER:
            break
        if path[i] == ".":
            return path[i:]
    return ""

def classify(bucket, path: str) -> Kind:
    """
    Decide what path denotes using two store queries.

    An exact object makes it a file; otherwise any key under ``path + "/"``
    makes it a directory. Store errors propagate to the caller.
    """
    if bucket.exists(path):
        return Kind.FILE
    page = bucket.list_page(dir_prefix(path), DELIMITER, 1)
    if page.objects:
        return Kind.DIRECTORY
    return Kind.NOT_EXIST

class BlobFile(io.RawIOBase):
    """
    Read-only file object and directory entry for one path of a BlobFS.

    Attributes:
        fs (BlobFS): The filesystem the handle was opened from
        path (str): Key of the path relative to the filesystem root, "." for the root
    """

    def __init__(self, fs, path, kind=None):
        super().__init__()
        self.fs = fs
        self.path = path
        self._offset = 0
        self._kind = Once()
        if path == ROOT:
            kind = Kind.DIRECTORY
        if kind is not None:
            self._kind.set(kind)
        self._info = Once(self._resolve_info)
        self._content = Once(self._fetch_content)
        self._iter = Once(self._open_iterator)

    def _io_error(self, op, e, partial=None):
        logger.error(f"{op} {self.path}: store error: {e}")
        return StoreIOError(op, self.path, str(e), partial=partial)

    # Directory entry

    @property
    def name(self) -> str:
        """Final element of the path; "." for the root."""
        return posixpath.basename(self.path.rstrip(DELIMITER)) or self.path

    def is_dir(self) -> bool:
        """
        Report whether the path is a directory.

        Any path whose last element carries an extension-like suffix is
        taken to be a file without asking the bucket. This is a heuristic
        for serving assets, not a guarantee: a directory named like a file
        (say ``v1.2``) is reported as a file. Otherwise a kind already known
        from open, stat or readdir is used, and only then is the bucket
        probed.

        Raises:
            StoreIOError: If the probe fails
        """
        if self.path == ROOT:
            return True
        if extension(self.path):
            return False
        kind = self._kind.peek()
        if kind is None:
            try:
                kind = self._kind.set(classify(self.fs.bucket, self.path))
            except Exception as e:
                raise self._io_error("isdir", e) from e
        return kind is Kind.DIRECTORY

    def is_file(self) -> bool:
        return not self.is_dir()

    def stat(self) -> FileInfo:
        """
        Return the attributes of the path, fetching them on first use.

        Raises:
            NotFoundError: If the path is neither an object nor a prefix
            StoreIOError: If the bucket call fails
        """
        trace_op("stat", self.path)
        return self._info.get()

    def info(self) -> FileInfo:
        return self.stat()

    def size(self) -> int:
        return self.stat().size

    def mod_time(self) -> datetime:
        return self.stat().mod_time

    def _resolve_info(self) -> FileInfo:
        if self._kind.peek() is Kind.DIRECTORY:
            return FileInfo(self.name, 0, EPOCH, True)

        start_time = time.time()
        try:
            attrs = self.fs.bucket.attributes(self.path)
        except ObjectNotFoundError:
            attrs = None
        except Exception as e:
            raise self._io_error("stat", e) from e
        time_function(f"stat({self.path}) attributes", start_time)

        if attrs is not None:
            self._kind.set(Kind.FILE)
            return FileInfo(self.name, attrs.size, attrs.mod_time, False)

        # Already classified as a file, so the object vanished after open.
        if self._kind.peek() is Kind.FILE:
            raise NotFoundError("stat", self.path)

        try:
            page = self.fs.bucket.list_page(dir_prefix(self.path), DELIMITER, 1)
        except Exception as e:
            raise self._io_error("stat", e) from e
        if not page.objects:
            raise NotFoundError("stat", self.path)
        self._kind.set(Kind.DIRECTORY)
        return FileInfo(self.name, 0, EPOCH, True)

    # File

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def _fetch_content(self) -> bytes:
        start_time = time.time()
        try:
            data = self.fs.bucket.read_all(self.path)
        except Exception as e:
            raise self._io_error("read", e) from e
        time_function(f"read({self.path}) fetched {len(data)} bytes", start_time)
        return data

    def readinto(self, b) -> int:
        """
        Copy bytes at the current offset into b and advance the offset.

        The whole object is fetched on the first call. Returns 0 at the end
        of the content, or when b is empty.

        Raises:
            ValueError: If the handle is closed
            StoreIOError: If fetching the content fails; nothing is cached and
                the next call fetches again
        """
        self._checkClosed()
        if b is None:
            return 0
        view = memoryview(b).cast("B")
        trace_op("read", self.path, size=len(view), offset=self._offset)
        if len(view) == 0:
            return 0
        content = self._content.get()
        if self._offset >= len(content):
            return 0
        chunk = content[self._offset:self._offset + len(view)]
        view[:len(chunk)] = chunk
        self._offset += len(chunk)
        return len(chunk)

    def readall(self) -> bytes:
        self._checkClosed()
        content = self._content.get()
        if self._offset >= len(content):
            return b""
        data = content[self._offset:]
        self._offset = len(content)
        return data

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Move the offset and return its new value.

        Seeking past the end is allowed; the next read returns 0 bytes.

        Raises:
            InvalidArgumentError: On an unknown whence or a negative result
            ValueError: If the handle is closed
        """
        self._checkClosed()
        trace_op("seek", self.path, offset=offset, whence=whence)
        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._offset + offset
        elif whence == io.SEEK_END:
            position = self.size() + offset
        else:
            raise InvalidArgumentError("seek", self.path, f"invalid whence {whence}")
        if position < 0:
            raise InvalidArgumentError("seek", self.path, f"negative position {position}")
        self._offset = position
        return position

    def tell(self) -> int:
        self._checkClosed()
        return self._offset

    # Directory

    def _open_iterator(self):
        return self.fs.bucket.list(dir_prefix(self.path), DELIMITER, self.fs.page_size)

    def readdir(self, n: int = -1) -> list:
        """
        Read directory entries, continuing where the previous call stopped.

        With n <= 0 every remaining entry is returned. With n > 0 at most n
        entries are returned; if the listing runs out first, EndOfStream is
        raised carrying the entries collected in this call.

        Entries are in bucket listing order.

        Raises:
            EndOfStream: If n > 0 and fewer than n entries remained
            StoreIOError: If a listing page cannot be fetched; its ``partial``
                holds the entries collected in this call and the next call
                retries the same page
        """
        trace_op("readdir", self.path, n=n)
        prefix = dir_prefix(self.path)
        entries = self._iter.get()
        results = []
        while n <= 0 or len(results) < n:
            try:
                obj = next(entries)
            except StopIteration:
                if n > 0:
                    raise EndOfStream(self.path, results)
                return results
            except Exception as e:
                raise self._io_error("readdir", e, partial=results) from e
            # Directory marker object for the directory itself.
            if obj.key == prefix:
                continue
            kind = Kind.DIRECTORY if obj.key.endswith(DELIMITER) else Kind.FILE
            results.append(self.fs._make_handle(obj.key, kind))
        return results

    def close(self) -> None:
        trace_op("close", self.path)
        super().close()

    def __repr__(self):
        kind = self._kind.peek()
        return f"<BlobFile path={self.path!r} kind={kind.value if kind else 'unknown'}>"
