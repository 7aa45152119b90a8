"""
Keystore errors.

Decode failures derive from ValidationError (also a ValueError) so callers
can treat a bad credentials file as recoverable. OS errors from path
resolution and file I/O are not wrapped.
"""


class KeystoreError(Exception):
    """Base class cho mọi lỗi của keystore"""


class RandomSourceError(KeystoreError):
    """Secure random source không cung cấp được entropy"""


class ValidationError(KeystoreError, ValueError):
    """Credentials file không hợp lệ"""

    def __init__(self, message, path=None):
        if path:
            message = f"{message}: {path}"
        super().__init__(message)
        self.path = path


class AccountMismatchError(ValidationError):
    pass


class UnsupportedAlgorithmError(ValidationError):
    pass


class AmbiguousPrivateKeyError(ValidationError):
    pass


class KeyMismatchError(ValidationError):
    pass


class MalformedKeyError(ValidationError):
    """Payload base58 hỏng hoặc sai độ dài"""


class MalformedRecordError(ValidationError):
    """File không phải JSON object"""
