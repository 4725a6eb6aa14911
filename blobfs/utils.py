# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Utility functions for blobfs.

This module provides logging configuration and the timing and tracing
helpers shared by the filesystem core, the bucket clients and the FUSE
mount.
"""

import logging
import time
import os

# Enable a debug trace for all filesystem operations if requested
TRACE_OPERATIONS = os.environ.get('BLOBFS_TRACE_OPS', '').lower() in ('true', '1', 'yes')

LOG_LEVEL = os.environ.get('BLOBFS_LOG_LEVEL', 'INFO').upper()

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s] - %(message)s'
)
logger = logging.getLogger('BlobFS')
logger.setLevel(LOG_LEVEL)

def set_trace(enabled):
    """
    Turn operation tracing on or off at runtime.

    Args:
        enabled (bool): Whether trace_op should log
    """
    global TRACE_OPERATIONS
    TRACE_OPERATIONS = bool(enabled)

def time_function(func_name, start_time):
    """
    Helper function for timing operations.
    
    Calculates and logs the elapsed time for a function call.
    
    Args:
        func_name (str): Name of the function being timed
        start_time (float): Start time from time.time()
        
    Returns:
        float: Elapsed time in seconds
    """
    elapsed = time.time() - start_time
    logger.debug(f"{func_name} completed in {elapsed:.4f} seconds")
    return elapsed 

def trace_op(operation, path, **details):
    """
    Trace a filesystem operation for debugging purposes.
    
    This function logs detailed information about filesystem operations
    when the BLOBFS_TRACE_OPS environment variable is set.
    
    Args:
        operation (str): The operation being performed
        path (str): The path being operated on
        **details: Additional details to log
    """
    if TRACE_OPERATIONS:
        detail_str = ', '.join(f"{k}={v}" for k, v in details.items())
        logger.debug(f"TRACE: {operation} on {path} {detail_str}")
