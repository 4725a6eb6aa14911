# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
In-memory bucket.

A Bucket kept in a dictionary, listing keys in lexicographic order. Used by
the tests, the examples and ``mem://`` URLs.
"""
import bisect
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, Optional, Tuple

from .bucket import Bucket, DEFAULT_PAGE_SIZE
from .exceptions import ObjectError, ObjectNotFoundError
from .types import ListObject, ListPage, ObjectAttributes

class MemoryBucket(Bucket):
    """
    Dictionary-backed bucket.

    Attributes:
        objects (dict): Maps keys to (content, modification time) pairs
        lock (threading.RLock): Lock for thread-safe operations
    """

    def __init__(self):
        self.objects: Dict[str, Tuple[bytes, datetime]] = {}
        self.lock = RLock()

    def write_all(self, key: str, data: bytes, mod_time: Optional[datetime] = None) -> None:
        """
        Store an object, replacing any previous content.

        Args:
            key (str): Object key
            data (bytes): Object content
            mod_time (datetime, optional): Modification time. Defaults to now.

        Raises:
            ObjectError: If the key is empty
        """
        if not key:
            raise ObjectError("Invalid object key", operation="PUT")
        with self.lock:
            self.objects[key] = (bytes(data), mod_time or datetime.now(timezone.utc))

    def delete(self, key: str) -> None:
        with self.lock:
            if key not in self.objects:
                raise ObjectNotFoundError(key, operation="DELETE")
            del self.objects[key]

    def exists(self, key: str) -> bool:
        with self.lock:
            return key in self.objects

    def attributes(self, key: str) -> ObjectAttributes:
        with self.lock:
            if key not in self.objects:
                raise ObjectNotFoundError(key, operation="HEAD")
            data, mod_time = self.objects[key]
        return ObjectAttributes(size=len(data), mod_time=mod_time)

    def read_all(self, key: str) -> bytes:
        with self.lock:
            if key not in self.objects:
                raise ObjectNotFoundError(key, operation="GET")
            return self.objects[key][0]

    def list_page(self, prefix: str, delimiter: str = "/", page_size: int = DEFAULT_PAGE_SIZE,
                  token: Optional[str] = None) -> ListPage:
        if page_size <= 0:
            raise ObjectError("Page size must be positive", operation="LIST")
        with self.lock:
            snapshot = sorted(self.objects.items())

        results = []
        seen_dirs = set()
        for key, (data, mod_time) in snapshot:
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if delimiter and delimiter in rest:
                dir_key = prefix + rest[:rest.index(delimiter) + len(delimiter)]
                if dir_key not in seen_dirs:
                    seen_dirs.add(dir_key)
                    results.append(ListObject(key=dir_key, is_dir=True))
                continue
            results.append(ListObject(key=key, size=len(data), mod_time=mod_time))

        # Grouping can move a directory key ahead of keys it sorted after.
        results.sort(key=lambda obj: obj.key)
        start = 0
        if token is not None:
            start = bisect.bisect_right([obj.key for obj in results], token)
        page = results[start:start + page_size]
        next_token = None
        if start + page_size < len(results):
            next_token = page[-1].key
        return ListPage(objects=page, next_token=next_token)

    def __repr__(self):
        return f"MemoryBucket({len(self.objects)} objects)"
