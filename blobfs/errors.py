# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Filesystem errors.

Every failure reported to a filesystem caller names the operation and the
path, formatted as ``"<op> <path>: <reason>"``.
"""
from .client.exceptions import BlobFSError

class PathError(BlobFSError):
    """A filesystem operation on a path failed."""
    def __init__(self, op: str, path: str, reason: str, code: str = "ERR_PATH"):
        self.op = op
        self.path = path
        self.reason = reason
        super().__init__(f"{op} {path}: {reason}", code=code)

class InvalidPathError(PathError):
    """Malformed or disallowed path syntax."""
    def __init__(self, op: str, path: str):
        super().__init__(op, path, "invalid path", code="ERR_PATH_INVALID")

class NotFoundError(PathError):
    """No exact key and no prefix match."""
    def __init__(self, op: str, path: str):
        super().__init__(op, path, "file does not exist", code="ERR_PATH_NOT_FOUND")

class StoreIOError(PathError):
    """
    A backing store call failed for a reason other than absence.

    ``partial`` holds directory entries read before the failure, if any.
    """
    def __init__(self, op: str, path: str, reason: str, partial=None):
        self.partial = partial if partial is not None else []
        super().__init__(op, path, reason, code="ERR_PATH_IO")

class InvalidArgumentError(PathError):
    """Bad seek whence, negative offset or an operation unsupported for the node kind."""
    def __init__(self, op: str, path: str, reason: str = "invalid argument"):
        super().__init__(op, path, reason, code="ERR_PATH_INVALID_ARGUMENT")

class EndOfStream(EOFError):
    """
    No more directory entries.

    Raised by readdir(n) with n > 0 when the listing runs out before n
    entries were collected; ``partial`` holds the entries that were.
    """
    def __init__(self, path: str, partial=None):
        self.path = path
        self.partial = partial if partial is not None else []
        super().__init__(f"readdir {path}: end of directory")
