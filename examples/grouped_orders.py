#!/usr/bin/env python3
"""
Example: Entry order with take-profit and stop-loss (OTOCO)

The primary order opens the position; once it fills, the two children
become active and whichever triggers first cancels the other. Children
leave base_amount at 0 and inherit the filled size.

Usage:
    python examples/grouped_orders.py
"""

import os
import sys

from dotenv import load_dotenv

from lighter_signer import ClientConfig, OrderLeg, SignerClient
from lighter_signer.constants import GroupingType, OrderType, TimeInForce
from lighter_signer.errors import LighterError

load_dotenv()

API_KEY_PRIVATE_KEY = os.getenv("API_KEY_PRIVATE_KEY", "")
ACCOUNT_INDEX = int(os.getenv("ACCOUNT_INDEX", "0"))
API_KEY_INDEX = int(os.getenv("API_KEY_INDEX", "3"))


def main() -> int:
    client = SignerClient.from_native(ClientConfig.from_env())

    entry = OrderLeg(market_index=0, base_amount=1_000, price=300_000, is_ask=False)
    take_profit = OrderLeg(
        market_index=0,
        base_amount=0,
        price=330_000,
        is_ask=True,
        order_type=OrderType.TAKE_PROFIT_LIMIT,
        time_in_force=TimeInForce.GOOD_TILL_TIME,
        reduce_only=True,
        trigger_price=330_000,
    )
    stop_loss = OrderLeg(
        market_index=0,
        base_amount=0,
        price=280_000,
        is_ask=True,
        order_type=OrderType.STOP_LOSS,
        time_in_force=TimeInForce.IMMEDIATE_OR_CANCEL,
        reduce_only=True,
        trigger_price=285_000,
    )

    try:
        client.create_client(API_KEY_PRIVATE_KEY, API_KEY_INDEX, ACCOUNT_INDEX)
        signed = client.sign_create_grouped_orders(
            GroupingType.ONE_TRIGGERS_A_ONE_CANCELS_THE_OTHER,
            [entry, take_profit, stop_loss],
        )
        print(f"Grouped order submitted: {client.send(signed)}")
    except LighterError as exc:
        print(f"Failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
