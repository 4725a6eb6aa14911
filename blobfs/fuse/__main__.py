# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Entry point for ``python -m blobfs.fuse``.
"""
import sys

from .fuse_mount import main

sys.exit(main())
