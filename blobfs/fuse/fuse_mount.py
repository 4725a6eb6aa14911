# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Read-only FUSE mount for blobfs.

This module mounts a BlobFS as a local read-only filesystem. FUSE calls are
translated to BlobFS opens, stats, reads and directory listings; every write
operation is refused with EROFS.

Usage:
    # Create a mount point
    mkdir -p /mnt/assets

    # Mount the v1/site/ tree of a bucket
    python -m blobfs.fuse s3://my-assets /mnt/assets --prefix site

    # Now you can read the files as if they were local
    ls /mnt/assets
    cat /mnt/assets/index.html
"""

from fuse import FUSE, FuseOSError, Operations
import errno
import itertools
import os
import sys
import time
from threading import Lock

from ..client.exceptions import BlobFSError
from ..config import BlobFSConfig
from ..errors import InvalidArgumentError, InvalidPathError, NotFoundError
from ..file import ROOT
from ..utils import logger, set_trace, time_function, trace_op
from .mount_utils import unmount, setup_signal_handlers, get_mount_options

def _errno_for(e):
    """Map a blobfs error to the errno reported to FUSE."""
    if isinstance(e, (NotFoundError, InvalidPathError)):
        return errno.ENOENT
    if isinstance(e, InvalidArgumentError):
        return errno.EINVAL
    return errno.EIO

class BlobFuse(Operations):
    """
    Read-only FUSE operations over a BlobFS.

    Open files are kept in a handle table keyed by the FUSE file handle.
    FUSE runs operations on several threads, so each table entry carries a
    lock serializing reads on its BlobFile.

    Attributes:
        fs (BlobFS): The filesystem being mounted
        handles (dict): Maps file handles to (BlobFile, Lock) pairs
    """

    def __init__(self, fs):
        """
        Initialize the FUSE operations.

        Args:
            fs (BlobFS): The filesystem to mount
        """
        logger.info(f"Initializing BlobFuse with {fs!r}")
        self.fs = fs
        self.handles = {}
        self.handles_lock = Lock()
        self._next_fh = itertools.count(1)
        self.uid = os.getuid()
        self.gid = os.getgid()

    def _get_path(self, path):
        """
        Convert FUSE path to BlobFS path.

        Args:
            path (str): FUSE path, always absolute

        Returns:
            str: BlobFS path, "." for the mount root
        """
        result = path.strip('/')
        return result or ROOT

    def _open(self, op, path):
        try:
            return self.fs.open(self._get_path(path))
        except BlobFSError as e:
            logger.debug(f"{op}: {e}")
            raise FuseOSError(_errno_for(e))

    def getattr(self, path, fh=None):
        """
        Get file attributes.

        Args:
            path (str): Path to the file or directory
            fh (int, optional): File handle

        Returns:
            dict: File attributes

        Raises:
            FuseOSError: ENOENT if the path does not exist, EIO on store errors
        """
        trace_op("getattr", path, fh=fh)
        start_time = time.time()

        entry = self.handles.get(fh) if fh is not None else None
        try:
            if entry is not None:
                f, lock = entry
                with lock:
                    info = f.stat()
            else:
                with self._open("getattr", path) as f:
                    info = f.stat()
        except BlobFSError as e:
            logger.debug(f"getattr: {e}")
            raise FuseOSError(_errno_for(e))

        mtime = info.mod_time.timestamp()
        result = {
            'st_mode': info.mode,
            'st_nlink': 2 if info.is_dir else 1,
            'st_size': 4096 if info.is_dir else info.size,
            'st_uid': self.uid,
            'st_gid': self.gid,
            'st_atime': mtime,
            'st_mtime': mtime,
            'st_ctime': mtime,
            'st_blksize': 4096,
            'st_blocks': 8 if info.is_dir else (info.size + 511) // 512,
        }
        time_function("getattr", start_time)
        return result

    def readdir(self, path, fh):
        """
        List directory contents.

        Args:
            path (str): Path to the directory
            fh (int): File handle

        Returns:
            list: Entry names, including '.' and '..'

        Raises:
            FuseOSError: If the directory does not exist or cannot be listed
        """
        trace_op("readdir", path, fh=fh)
        start_time = time.time()
        with self._open("readdir", path) as f:
            try:
                entries = f.readdir(-1)
            except BlobFSError as e:
                logger.error(f"readdir: {e}")
                raise FuseOSError(_errno_for(e))
        result = ['.', '..'] + [entry.name for entry in entries]
        logger.debug(f"readdir returning {len(result)} entries for {path}")
        time_function("readdir", start_time)
        return result

    def open(self, path, flags):
        """
        Open a file for reading.

        Args:
            path (str): Path to the file
            flags (int): Open flags; anything but O_RDONLY is refused

        Returns:
            int: File handle

        Raises:
            FuseOSError: EROFS for write access, ENOENT if the file does not exist
        """
        trace_op("open", path, flags=flags)
        if (flags & os.O_ACCMODE) != os.O_RDONLY:
            raise FuseOSError(errno.EROFS)
        f = self._open("open", path)
        with self.handles_lock:
            fh = next(self._next_fh)
            self.handles[fh] = (f, Lock())
        logger.debug(f"open: {path} -> fh {fh}")
        return fh

    def read(self, path, size, offset, fh):
        """
        Read file contents.

        The first read of a handle fetches the whole object; later reads are
        served from the handle.

        Args:
            path (str): Path to the file
            size (int): Number of bytes to read
            offset (int): Offset in the file to start reading from
            fh (int): File handle

        Returns:
            bytes: The requested data, shorter at the end of the file

        Raises:
            FuseOSError: EBADF for an unknown handle, EIO if the fetch fails
        """
        trace_op("read", path, size=size, offset=offset, fh=fh)
        entry = self.handles.get(fh)
        if entry is None:
            raise FuseOSError(errno.EBADF)
        f, lock = entry
        with lock:
            try:
                f.seek(offset)
                return f.read(size)
            except BlobFSError as e:
                logger.error(f"read: {e}")
                raise FuseOSError(_errno_for(e))

    def release(self, path, fh):
        """
        Release a file handle.

        Args:
            path (str): Path to the file
            fh (int): File handle

        Returns:
            int: 0
        """
        trace_op("release", path, fh=fh)
        with self.handles_lock:
            entry = self.handles.pop(fh, None)
        if entry is not None:
            entry[0].close()
        return 0

    def access(self, path, mode):
        """
        Check access permissions.

        Raises:
            FuseOSError: EROFS for write access, ENOENT if the path does not exist
        """
        trace_op("access", path, mode=mode)
        if mode & os.W_OK:
            raise FuseOSError(errno.EROFS)
        self._open("access", path).close()
        return 0

    def statfs(self, path):
        """
        Get filesystem statistics.

        A bucket has no fixed capacity; report an empty, read-only volume.

        Args:
            path (str): Path within the filesystem (often '/')

        Returns:
            dict: statvfs attributes
        """
        trace_op("statfs", path)
        return {
            'f_bsize': 4096,
            'f_frsize': 4096,
            'f_blocks': 0,
            'f_bfree': 0,
            'f_bavail': 0,
            'f_files': 0,
            'f_ffree': 0,
            'f_favail': 0,
            'f_namemax': 1024,
        }

def mount(fs, mountpoint: str, foreground: bool = True, allow_other: bool = False):
    """
    Mount a BlobFS at the specified mountpoint.

    Args:
        fs (BlobFS): The filesystem to mount
        mountpoint (str): Local path where the filesystem should be mounted
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount.
            Requires 'user_allow_other' in /etc/fuse.conf. Defaults to False.
    """
    logger.info(f"Mounting {fs!r} at {mountpoint}")
    start_time = time.time()

    if os.path.exists(mountpoint):
        if not os.path.isdir(mountpoint):
            logger.error(f"Mountpoint path exists but is not a directory: {mountpoint}")
            print(f"Error: {mountpoint} exists but is not a directory. Please specify a directory path.")
            return
    else:
        logger.info(f"Mountpoint {mountpoint} does not exist, creating it...")
        try:
            os.makedirs(mountpoint, mode=0o755)
        except OSError as e:
            logger.error(f"Failed to create mountpoint {mountpoint}: {str(e)}")
            print(f"Error: Failed to create mountpoint directory {mountpoint}: {str(e)}")
            return

    options = get_mount_options(foreground, allow_other)
    setup_signal_handlers(mountpoint, unmount)

    try:
        logger.info(f"Starting FUSE mount with options: {options}")
        FUSE(BlobFuse(fs), mountpoint, nothreads=False, **options)
        time_function("mount", start_time)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, unmounting...")
        unmount(mountpoint)
    except RuntimeError as e:
        logger.error(f"Error during mount: {e}")
        print(f"Error: {e}")
        print(f"Check that {mountpoint} is empty and not already mounted: fusermount -u {mountpoint}")
        unmount(mountpoint)

def main(argv=None):
    """
    CLI entry point for mounting a bucket.

    Usage:
        python -m blobfs.fuse <bucket-url> <mountpoint> [--version v1] [--prefix site]

    Options default to the BLOBFS_* environment variables.
    """
    import argparse
    config = BlobFSConfig.from_env()

    parser = argparse.ArgumentParser(description='Mount a bucket as a read-only local filesystem')
    parser.add_argument('bucket_url', nargs='?', default=config.bucket_url,
                        help='Bucket URL, e.g. s3://my-assets (default: $BLOBFS_BUCKET_URL)')
    parser.add_argument('mountpoint', help='The directory to mount the bucket on')
    parser.add_argument('--version', dest='version', default=config.version,
                        help='Storage version tag (default: %(default)s)')
    parser.add_argument('--prefix', default=config.prefix, help='Sub-path prefix inside the version')
    parser.add_argument('--endpoint-url', default=config.endpoint_url, help='S3-compatible endpoint URL')
    parser.add_argument('--region', default=config.region, help='Bucket region')
    parser.add_argument('--page-size', type=int, default=config.page_size,
                        help='Page size for directory listings (default: %(default)s)')
    parser.add_argument('--allow-other', action='store_true',
                        help='Allow other users to access the mount (requires user_allow_other in /etc/fuse.conf)')
    parser.add_argument('--background', action='store_true', help='Run the mount in the background')
    parser.add_argument('--log-level', default=config.log_level,
                        help='Logging level name (default: %(default)s)')
    parser.add_argument('--trace', action='store_true', default=config.trace_ops,
                        help='Enable detailed tracing of filesystem operations for debugging')
    args = parser.parse_args(argv)

    if not args.bucket_url:
        parser.error("a bucket URL is required (argument or BLOBFS_BUCKET_URL)")
    try:
        logger.setLevel(args.log_level.upper())
    except ValueError:
        parser.error(f"unknown log level: {args.log_level}")
    if args.trace:
        set_trace(True)
        logger.setLevel("DEBUG")

    config.bucket_url = args.bucket_url
    config.version = args.version
    config.prefix = args.prefix
    config.endpoint_url = args.endpoint_url
    config.region = args.region
    config.page_size = args.page_size
    config.log_level = args.log_level.upper()
    config.trace_ops = args.trace

    try:
        fs = config.open_fs()
    except BlobFSError as e:
        logger.error(f"Failed to open bucket {args.bucket_url}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        mount(fs, args.mountpoint, foreground=not args.background, allow_other=args.allow_other)
    finally:
        fs.close()
    return 0

if __name__ == '__main__':
    sys.exit(main())
