# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Read-only FUSE mount for blobfs.

Importing blobfs.fuse.fuse_mount requires libfuse; the rest of blobfs does not.
"""
