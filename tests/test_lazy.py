import pytest

from blobfs.lazy import Once

def test_resolves_once():
    calls = []
    cell = Once(lambda: calls.append(1) or "value")
    assert not cell.resolved
    assert cell.peek("unset") == "unset"
    assert cell.get() == "value"
    assert cell.get() == "value"
    assert calls == [1]
    assert cell.resolved

def test_failure_is_not_cached():
    attempts = []

    def resolve():
        attempts.append(1)
        if len(attempts) == 1:
            raise OSError("transient")
        return 42

    cell = Once(resolve)
    with pytest.raises(OSError):
        cell.get()
    assert not cell.resolved
    assert cell.get() == 42

def test_set_keeps_first_value():
    cell = Once()
    assert cell.set("first") == "first"
    assert cell.set("second") == "first"
    assert cell.get() == "first"

def test_get_without_resolver():
    with pytest.raises(LookupError):
        Once().get()
