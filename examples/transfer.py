#!/usr/bin/env python3
"""
Example: USDC transfer between accounts

Transfers need two signatures: the API key signs the L2 transaction and
the account owner's Ethereum key signs the L1 message shown below.

Usage:
    python examples/transfer.py <to_account_index> <usdc>

Environment Variables:
    ETH_PRIVATE_KEY: Ethereum key of the account owner
"""

import os
import sys

from dotenv import load_dotenv

from lighter_signer import ClientConfig, SignerClient
from lighter_signer.constants import USDC_TICKER_SCALE
from lighter_signer.errors import LighterError

load_dotenv()

API_KEY_PRIVATE_KEY = os.getenv("API_KEY_PRIVATE_KEY", "")
ETH_PRIVATE_KEY = os.getenv("ETH_PRIVATE_KEY", "")
ACCOUNT_INDEX = int(os.getenv("ACCOUNT_INDEX", "0"))
API_KEY_INDEX = int(os.getenv("API_KEY_INDEX", "3"))


def main(argv) -> int:
    if len(argv) != 3:
        print(__doc__)
        return 1
    to_account_index = int(argv[1])
    amount = int(float(argv[2]) * USDC_TICKER_SCALE)

    client = SignerClient.from_native(ClientConfig.from_env())
    try:
        client.create_client(API_KEY_PRIVATE_KEY, API_KEY_INDEX, ACCOUNT_INDEX)
        signed = client.sign_transfer(
            to_account_index,
            amount,
            memo="example transfer".ljust(32, "\0"),
            eth_private_key=ETH_PRIVATE_KEY,
        )
        print("L1 message:")
        print(signed.message_to_sign)
        print()
        print(f"Transfer submitted: {client.send(signed)}")
    except LighterError as exc:
        print(f"Failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
