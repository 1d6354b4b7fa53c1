#!/usr/bin/env python3
"""
Example: Generate and register a new API key

Generates a key pair, registers the public key in NEW_API_KEY_INDEX with a
ChangePubKey transaction (signed by the new key and by the
owner's Ethereum key), then creates an auth token with the new key.

Usage:
    python examples/setup_api_key.py
"""

import os
import sys
import time

from dotenv import load_dotenv

from lighter_signer import ClientConfig, SignerClient
from lighter_signer.errors import LighterError

load_dotenv()

NEW_API_KEY_INDEX = int(os.getenv("NEW_API_KEY_INDEX", "4"))
ETH_PRIVATE_KEY = os.getenv("ETH_PRIVATE_KEY", "")
ACCOUNT_INDEX = int(os.getenv("ACCOUNT_INDEX", "0"))


def main() -> int:
    client = SignerClient.from_native(ClientConfig.from_env())
    try:
        new_key = client.generate_api_key()
        print(f"New public key: {new_key.public_key}")

        client.create_client(new_key.private_key, NEW_API_KEY_INDEX, ACCOUNT_INDEX)
        signed = client.sign_change_pub_key(eth_private_key=ETH_PRIVATE_KEY)
        print(f"ChangePubKey submitted: {client.send(signed)}")

        # Wait for the key to be picked up before checking it
        time.sleep(10)
        client.check_client()

        print(f"Auth token: {client.create_auth_token()}")
    except LighterError as exc:
        print(f"Failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
