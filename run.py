import argparse
import sys

from src.keystore.errors import KeystoreError
from src.keystore.keypair import Ed25519KeyPair
from src.keystore.store import KeyStore
from src.utils.config import KeystoreConfig
from src.utils.logger import Logger


def build_parser():
    parser = argparse.ArgumentParser(prog="keystore", description="Unencrypted NEAR credentials store")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--base-dir", help="Base directory (default: home directory)")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate and store a new Ed25519 key pair")
    gen.add_argument("account_id")
    gen.add_argument("--network", help="Network ID (default from config)")

    show = sub.add_parser("show", help="Load, verify and print the public key")
    show.add_argument("account_id")
    show.add_argument("--network", help="Network ID (default from config)")

    path = sub.add_parser("path", help="Print the credentials file path")
    path.add_argument("account_id")
    path.add_argument("--network", help="Network ID (default from config)")

    return parser


def load_settings(args):
    config = KeystoreConfig.from_file(args.config) if args.config else KeystoreConfig()
    if args.base_dir:
        config.base_dir = args.base_dir
    return config


def main(argv=None):
    """Main function"""
    args = build_parser().parse_args(argv)

    try:
        config = load_settings(args)
    except (OSError, ValueError) as e:
        print(f"ERROR: cannot load config: {e}", file=sys.stderr)
        return 1

    if config.log_file:
        Logger("keystore", config.log_file)
    store = KeyStore.from_config(config)
    network_id = args.network or config.network_id

    try:
        if args.command == "generate":
            kp = Ed25519KeyPair.generate(args.account_id)
            filename = store.write(kp, network_id)
            print(f"Key pair for {kp.account_id} written to {filename}")
            print(f"public_key: {kp.public_key}")
        elif args.command == "show":
            kp = store.load(network_id, args.account_id)
            print(f"account_id: {kp.account_id}")
            print(f"public_key: {kp.public_key}")
        elif args.command == "path":
            print(store.path_for(network_id, args.account_id))
    except (KeystoreError, OSError, RuntimeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
