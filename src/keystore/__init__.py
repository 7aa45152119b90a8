"""
Keystore layer - Key pairs, credentials files, errors
"""

from .errors import (
    KeystoreError,
    RandomSourceError,
    ValidationError,
    AccountMismatchError,
    UnsupportedAlgorithmError,
    AmbiguousPrivateKeyError,
    KeyMismatchError,
    MalformedKeyError,
    MalformedRecordError,
)
from .keypair import Ed25519KeyPair
from .store import KeyStore, resolve_store_path, read_key_pair, write_key_pair

__all__ = [
    'Ed25519KeyPair', 'KeyStore', 'resolve_store_path', 'read_key_pair', 'write_key_pair',
    'KeystoreError', 'RandomSourceError', 'ValidationError', 'AccountMismatchError',
    'UnsupportedAlgorithmError', 'AmbiguousPrivateKeyError', 'KeyMismatchError',
    'MalformedKeyError', 'MalformedRecordError',
]
