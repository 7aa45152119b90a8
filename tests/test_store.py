import json
import logging
import os

import pytest
from src.keystore.errors import AccountMismatchError, KeyMismatchError, MalformedRecordError
from src.keystore.keypair import Ed25519KeyPair
from src.keystore.store import (
    KeyStore,
    read_key_pair,
    resolve_store_path,
    write_key_pair,
)

ACCOUNT = "alice.testnet"
NETWORK = "testnet"

posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")


def test_resolve_store_path():
    """Path convention"""
    assert resolve_store_path("/home/u", "testnet", "alice") == \
        "/home/u/.near-credentials/testnet/alice.json"


def test_resolve_store_path_no_io(tmp_path):
    path = resolve_store_path(str(tmp_path), "mainnet", "bob.near")
    assert not os.path.exists(os.path.dirname(path))


class TestWriteRead:

    def test_write_then_read(self, tmp_path):
        kp = Ed25519KeyPair.generate(ACCOUNT)
        path = str(tmp_path / "alice.json")
        assert write_key_pair(kp, path) == path

        loaded = read_key_pair(path, ACCOUNT)
        assert loaded == kp

    def test_file_content(self, tmp_path):
        kp = Ed25519KeyPair.generate(ACCOUNT)
        path = tmp_path / "alice.json"
        write_key_pair(kp, str(path))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {
            "account_id": ACCOUNT,
            "public_key": kp.public_key,
            "private_key": kp.private_key,
        }

    @posix_only
    def test_file_mode_owner_only(self, tmp_path):
        path = str(tmp_path / "alice.json")
        write_key_pair(Ed25519KeyPair.generate(ACCOUNT), path)
        assert os.stat(path).st_mode & 0o777 == 0o600

    @posix_only
    def test_overwrite_existing_file_becomes_owner_only(self, tmp_path):
        """File cũ mode 0644 phải thành 0600 sau khi ghi đè"""
        path = tmp_path / "alice.json"
        path.write_text("{}", encoding="utf-8")
        os.chmod(path, 0o644)

        write_key_pair(Ed25519KeyPair.generate(ACCOUNT), str(path))
        assert os.stat(path).st_mode & 0o777 == 0o600

    @posix_only
    def test_atomic_file_mode_owner_only(self, tmp_path):
        path = str(tmp_path / "alice.json")
        write_key_pair(Ed25519KeyPair.generate(ACCOUNT), path, atomic=True)
        assert os.stat(path).st_mode & 0o777 == 0o600

    def test_write_does_not_mutate(self, tmp_path):
        kp = Ed25519KeyPair.generate(ACCOUNT)
        before = kp.encode()
        write_key_pair(kp, str(tmp_path / "alice.json"))
        assert kp.encode() == before

    def test_overwrite_last_writer_wins(self, tmp_path):
        path = str(tmp_path / "alice.json")
        write_key_pair(Ed25519KeyPair.generate(ACCOUNT), path)
        second = Ed25519KeyPair.generate(ACCOUNT)
        write_key_pair(second, path)
        assert read_key_pair(path, ACCOUNT) == second

    def test_atomic_write_leaves_no_temp_files(self, tmp_path):
        kp = Ed25519KeyPair.generate(ACCOUNT)
        path = str(tmp_path / "alice.json")
        write_key_pair(kp, path, atomic=True)
        assert os.listdir(tmp_path) == ["alice.json"]
        assert read_key_pair(path, ACCOUNT) == kp

    def test_atomic_write_failure_keeps_old_file(self, tmp_path, monkeypatch):
        path = str(tmp_path / "alice.json")
        old = Ed25519KeyPair.generate(ACCOUNT)
        write_key_pair(old, path)

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(OSError, match="disk full"):
            write_key_pair(Ed25519KeyPair.generate(ACCOUNT), path, atomic=True)

        monkeypatch.undo()
        assert os.listdir(tmp_path) == ["alice.json"]
        assert read_key_pair(path, ACCOUNT) == old

    def test_write_missing_directory(self, tmp_path):
        path = str(tmp_path / "missing" / "alice.json")
        with pytest.raises(FileNotFoundError):
            write_key_pair(Ed25519KeyPair.generate(ACCOUNT), path)

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_key_pair(str(tmp_path / "nobody.json"), ACCOUNT)

    def test_read_wrong_account(self, tmp_path):
        path = str(tmp_path / "bob.json")
        write_key_pair(Ed25519KeyPair.generate("bob.testnet"), path)
        with pytest.raises(AccountMismatchError):
            read_key_pair(path, ACCOUNT)

    def test_read_legacy_secret_key_file(self, tmp_path):
        kp = Ed25519KeyPair.generate(ACCOUNT)
        record = kp.encode()
        record["secret_key"] = record.pop("private_key")
        path = tmp_path / "alice.json"
        path.write_text(json.dumps(record), encoding="utf-8")

        assert read_key_pair(str(path), ACCOUNT) == kp

    def test_read_invalid_json(self, tmp_path):
        path = tmp_path / "alice.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(MalformedRecordError) as exc:
            read_key_pair(str(path), ACCOUNT)
        assert exc.value.path == str(path)

    def test_rejected_file_is_logged(self, tmp_path, caplog):
        kp = Ed25519KeyPair.generate(ACCOUNT)
        other = Ed25519KeyPair.generate(ACCOUNT)
        record = kp.encode()
        record["public_key"] = other.public_key
        path = tmp_path / "alice.json"
        path.write_text(json.dumps(record), encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="keystore"):
            with pytest.raises(KeyMismatchError):
                read_key_pair(str(path), ACCOUNT)
        assert "Rejected credentials file" in caplog.text
        assert kp.private_key not in caplog.text


class TestKeyStore:

    def test_write_and_load_by_network(self, tmp_path):
        store = KeyStore(base_dir=str(tmp_path), create_dirs=True)
        kp = Ed25519KeyPair.generate(ACCOUNT)

        filename = store.write(kp, NETWORK)
        assert filename == os.path.join(str(tmp_path), ".near-credentials", NETWORK, ACCOUNT + ".json")
        assert os.path.isfile(filename)
        assert store.load(NETWORK, ACCOUNT) == kp

    def test_write_requires_directory_by_default(self, tmp_path):
        store = KeyStore(base_dir=str(tmp_path))
        with pytest.raises(FileNotFoundError):
            store.write(Ed25519KeyPair.generate(ACCOUNT), NETWORK)

    def test_networks_are_separate(self, tmp_path):
        store = KeyStore(base_dir=str(tmp_path), create_dirs=True)
        store.write(Ed25519KeyPair.generate(ACCOUNT), "testnet")
        with pytest.raises(FileNotFoundError):
            store.load("mainnet", ACCOUNT)

    def test_atomic_store(self, tmp_path):
        store = KeyStore(base_dir=str(tmp_path), create_dirs=True, atomic_write=True)
        kp = Ed25519KeyPair.generate(ACCOUNT)
        store.write(kp, NETWORK)
        assert store.load(NETWORK, ACCOUNT) == kp

    def test_home_resolver_used_when_no_base_dir(self, tmp_path):
        store = KeyStore(home_resolver=lambda: str(tmp_path))
        assert store.path_for(NETWORK, "alice") == \
            os.path.join(str(tmp_path), ".near-credentials", NETWORK, "alice.json")

    def test_home_resolver_failure_propagates(self):
        def no_home():
            raise RuntimeError("Could not determine home directory.")

        store = KeyStore(home_resolver=no_home)
        with pytest.raises(RuntimeError, match="home directory"):
            store.load(NETWORK, ACCOUNT)
