import base58

ED25519_PREFIX = "ed25519:"


class KeyEncoder:
    """Encode/decode key dạng "ed25519:" + base58"""

    @staticmethod
    def encode(raw_key):
        """Raw bytes -> chuỗi có algorithm tag"""
        return ED25519_PREFIX + base58.b58encode(bytes(raw_key)).decode("ascii")

    @staticmethod
    def has_prefix(encoded):
        """Kiểm tra algorithm tag"""
        return isinstance(encoded, str) and encoded.startswith(ED25519_PREFIX)

    @staticmethod
    def strip_prefix(encoded):
        return encoded[len(ED25519_PREFIX):]

    @staticmethod
    def decode(encoded):
        """Chuỗi có tag -> raw bytes.

        Raises ValueError nếu thiếu tag hoặc payload không phải base58.
        """
        if not KeyEncoder.has_prefix(encoded):
            raise ValueError(f"'{encoded}' is not an Ed25519 key")
        payload = KeyEncoder.strip_prefix(encoded)
        # b58decode tự bỏ whitespace, format không cho phép
        if payload != payload.strip():
            raise ValueError(f"'{encoded}' has surrounding whitespace")
        # b58decode báo lỗi bằng ValueError với ký tự ngoài alphabet
        return base58.b58decode(payload)
