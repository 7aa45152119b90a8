import json

DEFAULT_NETWORK_ID = "testnet"


def load_config(config_file):
    """Load configuration from file"""
    with open(config_file, 'r', encoding='utf-8') as f:
        return json.load(f)


class KeystoreConfig:
    """Cấu hình keystore (base_dir, network, cách ghi file)"""

    def __init__(self, base_dir=None, network_id=DEFAULT_NETWORK_ID,
                 atomic_write=False, create_dirs=False, log_file=None):
        self.base_dir = base_dir  # None -> home directory
        self.network_id = network_id
        self.atomic_write = atomic_write
        self.create_dirs = create_dirs
        self.log_file = log_file

    @staticmethod
    def from_dict(data):
        if not isinstance(data, dict):
            raise ValueError("Config must be a JSON object")

        base_dir = _optional_str(data, "base_dir")
        log_file = _optional_str(data, "log_file")
        network_id = data.get("network_id", DEFAULT_NETWORK_ID)
        if not isinstance(network_id, str) or not network_id:
            raise ValueError(f"Config 'network_id' must be a non-empty string, got {network_id!r}")

        flags = {}
        for key in ("atomic_write", "create_dirs"):
            value = data.get(key, False)
            if not isinstance(value, bool):
                raise ValueError(f"Config '{key}' must be true/false, got {value!r}")
            flags[key] = value

        return KeystoreConfig(base_dir=base_dir, network_id=network_id,
                              log_file=log_file, **flags)

    @staticmethod
    def from_file(config_file):
        return KeystoreConfig.from_dict(load_config(config_file))

    def __repr__(self):
        return (f"KeystoreConfig(base_dir={self.base_dir!r}, network_id={self.network_id!r}, "
                f"atomic_write={self.atomic_write}, create_dirs={self.create_dirs})")


def _optional_str(data, key):
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Config '{key}' must be a string, got {value!r}")
    return value
