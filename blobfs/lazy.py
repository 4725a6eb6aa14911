# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Resolved-once cells.

A Once holds a value that is computed on first use and then kept for the
lifetime of its owner. A resolver that raises leaves the cell unresolved,
so the next get() tries again.
"""
from typing import Any, Callable, Optional

_UNSET = object()

class Once:
    """
    A lazily resolved value that never changes once set.

    Args:
        resolve (callable, optional): Zero-argument function computing the value
    """
    __slots__ = ('_resolve', '_value')

    def __init__(self, resolve: Optional[Callable[[], Any]] = None):
        self._resolve = resolve
        self._value = _UNSET

    @property
    def resolved(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> Any:
        if self._value is _UNSET:
            if self._resolve is None:
                raise LookupError("Once cell has no resolver and no value")
            self._value = self._resolve()
        return self._value

    def set(self, value: Any) -> Any:
        """Resolve the cell to value unless it is already resolved; return the kept value."""
        if self._value is _UNSET:
            self._value = value
        return self._value

    def peek(self, default: Any = None) -> Any:
        """Return the value if resolved, else default, without resolving."""
        return default if self._value is _UNSET else self._value

    def __repr__(self):
        if self._value is _UNSET:
            return "Once(<unresolved>)"
        return f"Once({self._value!r})"
