"""
Exceptions raised by the billing models and storage layer
"""


class InvalidRangeError(ValueError):
    """Raised when a date range starts after it ends"""


class ValidationError(ValueError):
    """Raised when bill input is incomplete or inconsistent"""


class StorageError(RuntimeError):
    """Raised when a history backend fails after it has been selected"""
