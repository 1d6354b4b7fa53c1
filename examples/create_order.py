#!/usr/bin/env python3
"""
Example: Place and cancel a limit order

Signs a limit buy on market 0, submits it, then cancels it by
client order index.

Usage:
    python examples/create_order.py

Environment Variables:
    LIGHTER_NETWORK: "mainnet" or "testnet" (default: mainnet)
    API_KEY_PRIVATE_KEY: 40-byte API key, hex
    ACCOUNT_INDEX: Account the key belongs to
    API_KEY_INDEX: Key slot (default: 3)
    LIGHTER_SIGNER_LIB: Path to the compiled signer library (optional)
"""

import os
import sys

from dotenv import load_dotenv

from lighter_signer import ClientConfig, SignerClient
from lighter_signer.errors import LighterError
from lighter_signer.utils.logging import configure_logging

load_dotenv()

API_KEY_PRIVATE_KEY = os.getenv("API_KEY_PRIVATE_KEY", "")
ACCOUNT_INDEX = int(os.getenv("ACCOUNT_INDEX", "0"))
API_KEY_INDEX = int(os.getenv("API_KEY_INDEX", "3"))

CLIENT_ORDER_INDEX = 123


def main() -> int:
    if not API_KEY_PRIVATE_KEY or not ACCOUNT_INDEX:
        print("Set API_KEY_PRIVATE_KEY and ACCOUNT_INDEX (see .env)")
        return 1

    configure_logging(level="INFO")
    config = ClientConfig.from_env()
    client = SignerClient.from_native(config)

    try:
        client.create_client(API_KEY_PRIVATE_KEY, API_KEY_INDEX, ACCOUNT_INDEX)
        client.check_client()

        order = client.sign_create_order(
            market_index=0,
            client_order_index=CLIENT_ORDER_INDEX,
            base_amount=1_000,  # 0.1 ETH
            price=300_000,  # $3000
            is_ask=False,
        )
        print(f"Order signed: {order.tx_hash}")
        print(f"Order submitted: {client.send(order)}")

        # A client order index can be used as the order index while the order is open
        cancel = client.sign_cancel_order(market_index=0, order_index=CLIENT_ORDER_INDEX)
        print(f"Cancel submitted: {client.send(cancel)}")
    except LighterError as exc:
        print(f"Failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
