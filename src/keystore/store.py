"""
Unencrypted file system key store.

Layout: <base_dir>/.near-credentials/<network_id>/<account_id>.json, one
JSON object per account, file mode 0600. No locking: concurrent writers to
the same file race and the last one wins.
"""
import os
import tempfile
from pathlib import Path

from src.keystore.errors import ValidationError
from src.keystore.keypair import Ed25519KeyPair
from src.utils.logger import Logger

CREDENTIALS_DIR = ".near-credentials"
FILE_MODE = 0o600

logger = Logger("keystore")


def resolve_store_path(base_dir, network_id, account_id):
    """Path của credentials file, không đụng tới file system"""
    return os.path.join(base_dir, CREDENTIALS_DIR, network_id, account_id + ".json")


def user_home_dir():
    """Home directory của user; RuntimeError nếu không xác định được"""
    return str(Path.home())


def write_key_pair(key_pair, path, atomic=False):
    """Ghi key pair ra file với quyền owner read/write"""
    data = key_pair.to_json().encode("utf-8")
    if atomic:
        _write_atomic(path, data)
    else:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "wb") as f:
            # mode của os.open chỉ áp dụng khi tạo file mới
            os.fchmod(f.fileno(), FILE_MODE)
            f.write(data)
    logger.log(f"Wrote key pair for {key_pair.account_id} to {path}")
    return path


def _write_atomic(path, data):
    # mkstemp tạo file với mode 0600
    directory = os.path.dirname(path) or "."
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def read_key_pair(path, expected_account_id):
    """Đọc và validate key pair từ path"""
    with open(path, "rb") as f:
        data = f.read()
    try:
        key_pair = Ed25519KeyPair.from_json(data, expected_account_id, source=path)
    except ValidationError as e:
        logger.log(f"Rejected credentials file {path}: {e}", level="warning")
        raise
    logger.log(f"Loaded key pair for {expected_account_id} from {path}", level="debug")
    return key_pair


class KeyStore:
    """Key store theo network, base directory được inject từ ngoài vào"""

    def __init__(self, base_dir=None, home_resolver=user_home_dir,
                 atomic_write=False, create_dirs=False):
        self._base_dir = base_dir
        self._home_resolver = home_resolver
        self.atomic_write = atomic_write
        self.create_dirs = create_dirs

    @staticmethod
    def from_config(config):
        return KeyStore(base_dir=config.base_dir, atomic_write=config.atomic_write,
                        create_dirs=config.create_dirs)

    @property
    def base_dir(self):
        if self._base_dir is None:
            return self._home_resolver()
        return self._base_dir

    def path_for(self, network_id, account_id):
        return resolve_store_path(self.base_dir, network_id, account_id)

    def write(self, key_pair, network_id):
        """Ghi key pair vào store, trả về path đã ghi"""
        path = self.path_for(network_id, key_pair.account_id)
        if self.create_dirs:
            os.makedirs(os.path.dirname(path), mode=0o700, exist_ok=True)
        return write_key_pair(key_pair, path, atomic=self.atomic_write)

    def load(self, network_id, account_id):
        """Load key pair của account_id trong network_id"""
        return read_key_pair(self.path_for(network_id, account_id), account_id)
