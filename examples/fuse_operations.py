# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved
'''
This example demonstrates how to read files from a bucket mounted read-only with blobfs.

Setup:
    # Install the package
    pip install blobfs

    # Install FUSE on your system
    # On Ubuntu/Debian:
    sudo apt-get install fuse

    # On macOS (using Homebrew):
    brew install macfuse

    # Configure AWS credentials the usual boto3 way
    # (environment variables, ~/.aws/credentials or an instance role)

    # Create a mount point
    mkdir -p /mnt/assets

Usage:
    # Mount the v1/site/ tree of a bucket
    python -m blobfs.fuse s3://my-assets /mnt/assets --prefix site

    # Run this example against the mount
    python fuse_operations.py /mnt/assets

    # Unmount when done
    fusermount -u /mnt/assets   # Linux
    umount /mnt/assets          # macOS

Troubleshooting:
    # Enable debug logging and operation tracing
    export BLOBFS_LOG_LEVEL=DEBUG
    python -m blobfs.fuse s3://my-assets /mnt/assets --trace
'''
import sys
import os

def main():
    if len(sys.argv) != 2:
        print("Usage: python fuse_operations.py <mountpoint>")
        sys.exit(1)

    mountpoint = sys.argv[1]

    # Walk the mounted tree
    for dirpath, dirnames, filenames in os.walk(mountpoint):
        for name in filenames:
            path = os.path.join(dirpath, name)
            print(f"{path}: {os.path.getsize(path)} bytes")

    # Read the first file found
    for dirpath, _, filenames in os.walk(mountpoint):
        if filenames:
            path = os.path.join(dirpath, filenames[0])
            with open(path, 'rb') as f:
                print(f"First bytes of {path}: {f.read(64)!r}")
            break

    # Writes are refused with EROFS
    try:
        with open(os.path.join(mountpoint, "example.txt"), 'w') as f:
            f.write("Hello FUSE")
    except OSError as e:
        print(f"Write refused as expected: {e}")

if __name__ == '__main__':
    main()
