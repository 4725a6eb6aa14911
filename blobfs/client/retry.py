# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Retry Module.

This module provides a retry decorator with exponential backoff for bucket
client operations. It handles throttling and network issues by automatically
retrying failed operations with increasing delays between attempts, and
converts the remaining botocore errors into blobfs exceptions.

Functions:
    retry: Decorator for retrying functions with exponential backoff.
    _convert_client_error: Helper function to convert botocore errors to blobfs exceptions.
"""
import time
from functools import wraps
from typing import Type, Callable, Any, Union, Tuple
from botocore.exceptions import BotoCoreError, ClientError, HTTPClientError
from botocore.exceptions import ConnectionError as BotoConnectionError
from .exceptions import BlobFSError, BucketError, ObjectError, ObjectNotFoundError
from ..utils import logger

RETRYABLE_ERROR_CODES = {
    "SlowDown",
    "Throttling",
    "ThrottlingException",
    "RequestTimeout",
    "RequestTimeTooSkewed",
    "InternalError",
    "ServiceUnavailable",
    "503",
    "500",
}

NOT_FOUND_ERROR_CODES = {"404", "NoSuchKey", "NotFound"}

def _error_code(e: ClientError) -> str:
    return str(e.response.get("Error", {}).get("Code", ""))

def _convert_client_error(e: Exception, operation: str = None, key: str = None) -> Union[BucketError, ObjectError, BlobFSError]:
    """
    Convert botocore errors to appropriate blobfs errors.

    This function analyzes botocore errors and converts them to more specific
    blobfs exception types based on the error code and context.

    Args:
        e (Exception): The botocore error to convert.
        operation (str, optional): The operation being performed. Defaults to None.
        key (str, optional): The object key involved. Defaults to None.

    Returns:
        Union[BucketError, ObjectError, BlobFSError]: The converted error.
    """
    if not isinstance(e, ClientError):
        return BlobFSError(f"Store request failed: {e}", code="ERR_CLIENT")

    code = _error_code(e)
    error_msg = str(e.response.get("Error", {}).get("Message", "")) or str(e)

    # Handle bucket-related errors
    if code == "NoSuchBucket":
        return BucketError("Bucket does not exist", operation="ACCESS")

    # Handle object-related errors
    if code in NOT_FOUND_ERROR_CODES:
        return ObjectNotFoundError(key or "", operation=operation)
    if code in ("AccessDenied", "403", "Forbidden"):
        return ObjectError("Access denied to object", operation=operation)
    if code == "InvalidObjectState":
        return ObjectError("Object is archived and not readable", operation=operation)

    if code in ("SlowDown", "Throttling", "ThrottlingException"):
        return BlobFSError("Rate limit exceeded", code="ERR_RATE_LIMIT")
    if code == "RequestTimeout":
        return BlobFSError("Request timed out", code="ERR_TIMEOUT")
    if code in ("InternalError", "500"):
        return BlobFSError("Internal server error", code="ERR_INTERNAL")
    if code in ("ServiceUnavailable", "503"):
        return BlobFSError("Service unavailable", code="ERR_UNAVAILABLE")

    if operation:
        return ObjectError(error_msg, operation=operation)
    return BlobFSError(error_msg)

def _is_retryable(e: Exception) -> bool:
    if isinstance(e, ClientError):
        return _error_code(e) in RETRYABLE_ERROR_CODES
    return isinstance(e, (BotoConnectionError, HTTPClientError))

def retry(
    max_attempts: int = 5,
    initial_backoff: float = 0.1,
    max_backoff: float = 5.0,
    backoff_multiplier: float = 2.0,
    retryable_exceptions: Tuple[Type[Exception], ...] = (ClientError, BotoCoreError)
) -> Callable:
    """
    Decorator for retrying a bucket method with exponential backoff.

    The wrapped method's first positional argument after ``self`` is taken to
    be the object key, which is reported in not-found errors.

    Args:
        max_attempts (int): Maximum number of attempts. Defaults to 5.
        initial_backoff (float): Initial backoff time in seconds. Defaults to 0.1.
        max_backoff (float): Maximum backoff time in seconds. Defaults to 5.0.
        backoff_multiplier (float): Multiplier for exponential backoff. Defaults to 2.0.
        retryable_exceptions (Tuple[Type[Exception], ...]): Exceptions that are
            inspected for a retry. Defaults to (ClientError, BotoCoreError).

    Returns:
        Callable: A decorator that wraps the function.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            """
            Executes the function with retry logic and exponential backoff.

            Returns:
                Any: Result of the function call.

            Raises:
                BlobFSError: If the error is not retryable or all attempts fail.
            """
            last_exception = None
            backoff = initial_backoff
            operation = func.__name__.upper()
            key = args[1] if len(args) > 1 and isinstance(args[1], str) else kwargs.get("key")

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    last_exception = e
                    if not _is_retryable(e):
                        raise _convert_client_error(e, operation, key) from e

                    logger.warning(f"Caught retryable error ({type(e).__name__}) during {func.__name__}. "
                                   f"Attempt {attempt + 1}/{max_attempts}. Retrying after {backoff:.2f}s...")
                    if attempt < max_attempts - 1:
                        time.sleep(backoff)
                        backoff = min(backoff * backoff_multiplier, max_backoff)

            # If we get here, we've exhausted all retries
            logger.error(f"{func.__name__} failed after {max_attempts} attempts: {last_exception}")
            raise _convert_client_error(last_exception, operation, key) from last_exception

        return wrapper
    return decorator
