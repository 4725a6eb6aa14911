# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Mount utilities for the blobfs FUSE filesystem.

This module provides functions for unmounting, signal handling and the
mount options used when mounting a BlobFS with FUSE.
"""

import platform
import sys
import signal
import subprocess
import time
from ..utils import logger, time_function

def unmount(mountpoint):
    """
    Unmount the filesystem using fusermount (Linux) or umount (macOS).

    Args:
        mountpoint (str): Path where the filesystem is mounted
    """
    logger.info(f"Unmounting filesystem at {mountpoint}")
    start_time = time.time()

    # Normalize mountpoint (remove trailing slash)
    mountpoint = mountpoint.rstrip('/')
    command = ["umount", mountpoint] if platform.system() == "Darwin" else ["fusermount", "-u", mountpoint]
    try:
        cp = subprocess.run(["mountpoint", "-q", mountpoint])
        if cp.returncode != 0:
            logger.warning(f"{mountpoint} is not mounted, nothing to unmount.")
            time_function("unmount", start_time)
            return
    except FileNotFoundError:
        # No mountpoint(1) on this system; try the unmount anyway.
        pass

    try:
        subprocess.run(command, check=True)
        logger.info(f"Unmounted {mountpoint} gracefully.")
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        logger.error(f"Error during unmounting: {e}")
    time_function("unmount", start_time)

def setup_signal_handlers(mountpoint, unmount_func, signals=(signal.SIGINT, signal.SIGTERM)):
    """
    Unmount and exit when the process is told to stop.

    Args:
        mountpoint (str): Path where the bucket is mounted
        unmount_func (callable): Called with the mountpoint before exiting
        signals (tuple): Signals to handle. Defaults to SIGINT and SIGTERM.

    Returns:
        callable: The installed handler
    """
    def on_signal(signum, frame):
        logger.info(f"{signal.Signals(signum).name} received, unmounting {mountpoint}")
        unmount_func(mountpoint)
        sys.exit(0)

    for signum in signals:
        signal.signal(signum, on_signal)
    return on_signal

def get_mount_options(foreground=True, allow_other=False):
    """
    Get standard mount options for FUSE.

    The mount is read-only. A handle snapshots the object it reads, so the
    kernel may cache attributes and pages for a while.

    Args:
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount.
            Requires 'user_allow_other' in /etc/fuse.conf. Defaults to False.

    Returns:
        dict: Dictionary of mount options
    """
    ATTR_TIMEOUT = 60  # seconds

    options = {
        'foreground': foreground,
        'ro': True,
        'default_permissions': True,
        'kernel_cache': True,
        'entry_timeout': ATTR_TIMEOUT,
        'negative_timeout': ATTR_TIMEOUT,
        'attr_timeout': ATTR_TIMEOUT,
        'fsname': 'blobfs',
    }

    # Only add allow_other if explicitly requested
    if allow_other:
        options['allow_other'] = True

    return options
