class BlobFSError(Exception):
    """Base exception for blobfs errors."""
    def __init__(self, message: str, code: str = "ERR_UNKNOWN"):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

class BucketError(BlobFSError):
    """Bucket operation failed."""
    def __init__(self, message: str, operation: str = None):
        code = "ERR_BUCKET"
        if operation:
            code = f"ERR_BUCKET_{operation.upper()}"
        super().__init__(message, code=code)

class ObjectError(BlobFSError):
    """Object operation failed."""
    def __init__(self, message: str, operation: str = None):
        code = "ERR_OBJECT"
        if operation:
            code = f"ERR_OBJECT_{operation.upper()}"
        super().__init__(message, code=code)

class ObjectNotFoundError(ObjectError):
    """Object does not exist under the exact key."""
    def __init__(self, key: str, operation: str = None):
        self.key = key
        super().__init__(f"Object does not exist: {key}", operation=operation)

class ConfigurationError(BlobFSError):
    """Configuration or bucket setup error."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_CONFIG")
