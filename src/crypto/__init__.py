"""
Cryptography layer - Ed25519 keys, key string encoding
"""

from .keys import KeyPair, derive_public_key
from .encoding import KeyEncoder

__all__ = ['KeyPair', 'KeyEncoder', 'derive_public_key']
