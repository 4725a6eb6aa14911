import signal
import subprocess

import pytest

from blobfs.fuse import mount_utils
from blobfs.fuse.mount_utils import get_mount_options, setup_signal_handlers, unmount

class FakeRun:
    """Stands in for subprocess.run, recording commands."""

    def __init__(self, mounted=True, fail=False):
        self.commands = []
        self.mounted = mounted
        self.fail = fail

    def __call__(self, command, check=False):
        self.commands.append(command)
        if command[0] == "mountpoint":
            return subprocess.CompletedProcess(command, 0 if self.mounted else 1)
        if self.fail and check:
            raise subprocess.CalledProcessError(1, command)
        return subprocess.CompletedProcess(command, 0)

@pytest.fixture
def linux(monkeypatch):
    monkeypatch.setattr(mount_utils.platform, "system", lambda: "Linux")

def test_unmount(monkeypatch, linux):
    run = FakeRun()
    monkeypatch.setattr(mount_utils.subprocess, "run", run)
    unmount("/mnt/assets/")
    assert run.commands == [["mountpoint", "-q", "/mnt/assets"], ["fusermount", "-u", "/mnt/assets"]]

def test_unmount_not_mounted(monkeypatch, linux):
    run = FakeRun(mounted=False)
    monkeypatch.setattr(mount_utils.subprocess, "run", run)
    unmount("/mnt/assets")
    assert run.commands == [["mountpoint", "-q", "/mnt/assets"]]

def test_unmount_failure_is_logged(monkeypatch, linux):
    run = FakeRun(fail=True)
    monkeypatch.setattr(mount_utils.subprocess, "run", run)
    unmount("/mnt/assets")
    assert len(run.commands) == 2

def test_unmount_on_macos(monkeypatch):
    run = FakeRun()
    monkeypatch.setattr(mount_utils.platform, "system", lambda: "Darwin")
    monkeypatch.setattr(mount_utils.subprocess, "run", run)
    unmount("/Volumes/assets")
    assert run.commands[-1] == ["umount", "/Volumes/assets"]

def test_signal_handlers(monkeypatch):
    installed = {}
    monkeypatch.setattr(mount_utils.signal, "signal", lambda signum, handler: installed.setdefault(signum, handler))
    unmounted = []
    handler = setup_signal_handlers("/mnt/assets", unmounted.append)
    assert set(installed) == {signal.SIGINT, signal.SIGTERM}
    assert installed[signal.SIGTERM] is handler

    with pytest.raises(SystemExit) as excinfo:
        handler(signal.SIGTERM, None)
    assert excinfo.value.code == 0
    assert unmounted == ["/mnt/assets"]

def test_mount_options_are_read_only():
    options = get_mount_options()
    assert options["ro"] is True
    assert options["foreground"] is True
    assert options["fsname"] == "blobfs"
    assert "rw" not in options
