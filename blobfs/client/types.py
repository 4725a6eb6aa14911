from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

# Zero value for modification times that the store does not report.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

@dataclass(frozen=True)
class ObjectAttributes:
    """Metadata for an object."""
    size: int = 0
    mod_time: datetime = EPOCH
    content_type: Optional[str] = None
    etag: Optional[str] = None

@dataclass(frozen=True)
class ListObject:
    """A single listing result; is_dir marks a delimiter-grouped prefix."""
    key: str
    size: int = 0
    mod_time: datetime = EPOCH
    is_dir: bool = False

@dataclass
class ListPage:
    """One page of a prefix listing."""
    objects: List[ListObject] = field(default_factory=list)
    next_token: Optional[str] = None
