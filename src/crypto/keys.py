from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives import serialization

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = SEED_SIZE + PUBLIC_KEY_SIZE


class KeyPair:
    """Quản lý cặp khóa Ed25519 (raw key material)"""

    def __init__(self, private_key):
        self.private_key = private_key
        self.public_key = self.private_key.public_key()

    @staticmethod
    def generate():
        """Tạo cặp khóa mới từ CSPRNG của OpenSSL"""
        return KeyPair(ed25519.Ed25519PrivateKey.generate())

    def get_public_key_bytes(self):
        """Trả về public key dạng bytes (32 bytes)"""
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw
        )

    def get_seed_bytes(self):
        """Trả về seed của private key (32 bytes)"""
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )

    def get_private_key_bytes(self):
        """Trả về private key dạng seed || public key (64 bytes)"""
        return self.get_seed_bytes() + self.get_public_key_bytes()

    @staticmethod
    def from_bytes(private_bytes):
        """Load key từ bytes (seed 32 bytes hoặc seed || public 64 bytes)"""
        if len(private_bytes) == PRIVATE_KEY_SIZE:
            private_bytes = private_bytes[:SEED_SIZE]
        return KeyPair(ed25519.Ed25519PrivateKey.from_private_bytes(bytes(private_bytes)))


def derive_public_key(private_bytes):
    """Tính public key từ seed của private key 64 bytes"""
    if len(private_bytes) != PRIVATE_KEY_SIZE:
        raise ValueError(
            f"Ed25519 private key must be {PRIVATE_KEY_SIZE} bytes, got {len(private_bytes)}"
        )
    return KeyPair.from_bytes(private_bytes).get_public_key_bytes()
