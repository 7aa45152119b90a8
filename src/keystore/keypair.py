import json

from cryptography.exceptions import InternalError

from src.crypto.encoding import KeyEncoder
from src.crypto.keys import KeyPair, PUBLIC_KEY_SIZE, SEED_SIZE, derive_public_key
from src.keystore.errors import (
    AccountMismatchError,
    AmbiguousPrivateKeyError,
    KeyMismatchError,
    MalformedKeyError,
    MalformedRecordError,
    RandomSourceError,
    UnsupportedAlgorithmError,
)

# Hai tên field cũ cho cùng một private key
PRIVATE_KEY_FIELDS = ("private_key", "secret_key")


class Ed25519KeyPair:
    """Cặp khóa Ed25519 của một account.

    Có hai đường tạo:
      - trusted: generate() / from_raw_private_key(), không kiểm tra gì
      - untrusted: decode() / from_json(), kiểm tra đầy đủ

    Raw bytes (ed25519_public_key, ed25519_private_key) luôn khớp với
    các field đã encode.
    """

    def __init__(self, account_id, public_key, private_key="", secret_key="",
                 ed25519_public_key=b"", ed25519_private_key=b""):
        self.account_id = account_id
        self.public_key = public_key
        self.private_key = private_key
        self.secret_key = secret_key
        self.ed25519_public_key = bytes(ed25519_public_key)
        self.ed25519_private_key = bytes(ed25519_private_key)

    @staticmethod
    def generate(account_id):
        """Tạo cặp khóa ngẫu nhiên cho account_id"""
        try:
            raw = KeyPair.generate()
        except (InternalError, OSError) as e:
            raise RandomSourceError(f"keystore: cannot generate Ed25519 key: {e}") from e
        return Ed25519KeyPair._from_raw(
            account_id, raw.get_public_key_bytes(), raw.get_private_key_bytes()
        )

    @staticmethod
    def from_raw_private_key(raw_private_key, account_id):
        """Wrap private key 64 bytes (seed || public) có sẵn.

        Public key lấy từ nửa sau của private key, không validate. Input
        hỏng sẽ cho ra cặp khóa không nhất quán, decode() sẽ từ chối nó.
        """
        raw_private_key = bytes(raw_private_key)
        return Ed25519KeyPair._from_raw(
            account_id, raw_private_key[SEED_SIZE:], raw_private_key
        )

    @staticmethod
    def _from_raw(account_id, pub, priv):
        return Ed25519KeyPair(
            account_id=account_id,
            public_key=KeyEncoder.encode(pub),
            private_key=KeyEncoder.encode(priv),
            secret_key="",
            ed25519_public_key=pub,
            ed25519_private_key=priv,
        )

    def encode(self):
        """Convert to dict (bỏ các slot private key rỗng)"""
        record = {
            "account_id": self.account_id,
            "public_key": self.public_key,
        }
        for field in PRIVATE_KEY_FIELDS:
            value = getattr(self, field)
            if value:
                record[field] = value
        return record

    def to_json(self):
        return json.dumps(self.encode())

    @staticmethod
    def decode(record, expected_account_id, source=None):
        """Validate record và dựng lại cặp khóa.

        Thứ tự kiểm tra: account_id, tag của public_key, slot private key,
        base58 payload, public key khớp private key. `source` (thường là path)
        chỉ dùng cho error message.
        """
        account_id = record.get("account_id", "")
        public_key = record.get("public_key") or ""
        private_key = record.get("private_key") or ""
        secret_key = record.get("secret_key") or ""

        if account_id != expected_account_id:
            raise AccountMismatchError(
                f"keystore: parsed account_id '{account_id}' does not match "
                f"with accountID '{expected_account_id}'"
            )

        if not KeyEncoder.has_prefix(public_key):
            raise UnsupportedAlgorithmError(
                f"keystore: parsed public_key '{public_key}' is not an Ed25519 key"
            )

        if private_key and secret_key:
            raise AmbiguousPrivateKeyError(
                "keystore: private_key and secret_key are defined at the same time",
                source,
            )
        if private_key:
            field, encoded_private = "private_key", private_key
        else:
            field, encoded_private = "secret_key", secret_key
        if not KeyEncoder.has_prefix(encoded_private):
            # không log private key, chỉ báo tên field
            raise UnsupportedAlgorithmError(
                f"keystore: parsed {field} is not an Ed25519 key", source
            )

        try:
            pub = KeyEncoder.decode(public_key)
            priv = KeyEncoder.decode(encoded_private)
        except ValueError as e:
            raise MalformedKeyError(f"keystore: invalid base58 key payload: {e}", source) from e

        try:
            derived = derive_public_key(priv)
        except ValueError as e:
            raise MalformedKeyError(f"keystore: parsed {field} is malformed: {e}", source) from e

        if len(pub) != PUBLIC_KEY_SIZE or pub != derived or priv[SEED_SIZE:] != derived:
            raise KeyMismatchError("keystore: public_key does not match private_key", source)

        return Ed25519KeyPair(
            account_id=account_id,
            public_key=public_key,
            private_key=private_key,
            secret_key=secret_key,
            ed25519_public_key=pub,
            ed25519_private_key=priv,
        )

    @staticmethod
    def from_json(data, expected_account_id, source=None):
        """Parse JSON (str hoặc bytes UTF-8) rồi decode"""
        try:
            if isinstance(data, (bytes, bytearray)):
                data = data.decode("utf-8")
            # RecursionError: document lồng quá sâu
            record = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            raise MalformedRecordError(f"keystore: invalid JSON: {e}", source) from e
        if not isinstance(record, dict):
            raise MalformedRecordError("keystore: credentials file is not a JSON object", source)
        return Ed25519KeyPair.decode(record, expected_account_id, source)

    def __eq__(self, other):
        if not isinstance(other, Ed25519KeyPair):
            return NotImplemented
        return (self.account_id == other.account_id
                and self.ed25519_public_key == other.ed25519_public_key
                and self.ed25519_private_key == other.ed25519_private_key)

    def __repr__(self):
        return f"Ed25519KeyPair({self.account_id}: {self.public_key})"
