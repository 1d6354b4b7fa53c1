"""
Client configuration.

Networks are described by a static ``NETWORKS`` table; per-client settings
live in the pydantic ``ClientConfig`` model, which can be built from a
network name or from ``LIGHTER_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from lighter_signer.constants import (
    DEFAULT_ORDER_EXPIRY_MS,
    DEFAULT_TIMEOUT_MS,
    DEFAULT_TX_EXPIRY_MS,
    MAINNET_CHAIN_ID,
    TESTNET_CHAIN_ID,
)

__all__ = ["Network", "NetworkConfig", "NETWORKS", "get_network_config", "ClientConfig"]


class Network(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


@dataclass
class NetworkConfig:
    name: Network
    chain_id: int
    url: str


NETWORKS: Dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(
        name=Network.MAINNET,
        chain_id=MAINNET_CHAIN_ID,
        url="https://mainnet.zklighter.elliot.ai",
    ),
    Network.TESTNET: NetworkConfig(
        name=Network.TESTNET,
        chain_id=TESTNET_CHAIN_ID,
        url="https://testnet.zklighter.elliot.ai",
    ),
}


def get_network_config(network: Network, url: Optional[str] = None) -> NetworkConfig:
    cfg = NETWORKS[Network(network)]
    if url:
        return replace(cfg, url=url)
    return cfg


class ClientConfig(BaseModel):
    """
    Settings of one SignerClient.

    Example:
        >>> config = ClientConfig.from_network("testnet")
        >>> config.chain_id
        300
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Base URL of the exchange API")
    chain_id: int = Field(ge=0, lt=2**32, description="Chain id mixed into every hash")
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=1000,
        description="Per-request timeout in ms",
    )
    price_protection: bool = Field(
        default=True,
        description="Let the exchange reject orders far from the mark price",
    )
    channel_name: Optional[str] = Field(
        default=None,
        description="Value of the Channel-Name header on sendTx",
    )
    default_tx_expiry_ms: int = Field(
        default=DEFAULT_TX_EXPIRY_MS,
        ge=1,
        description="Horizon applied when expired_at is EXPIRY_DEFAULT",
    )
    order_expiry_ms: int = Field(
        default=DEFAULT_ORDER_EXPIRY_MS,
        ge=1,
        description="Horizon applied when order_expiry is EXPIRY_DEFAULT",
    )

    @classmethod
    def from_network(cls, network: Network | str, url: Optional[str] = None, **overrides) -> "ClientConfig":
        cfg = get_network_config(Network(network), url)
        return cls(url=cfg.url, chain_id=cfg.chain_id, **overrides)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a config from environment variables.

        Reads LIGHTER_NETWORK (default "mainnet"), LIGHTER_URL, LIGHTER_CHAIN_ID,
        LIGHTER_TIMEOUT_MS, LIGHTER_PRICE_PROTECTION and LIGHTER_CHANNEL_NAME.
        """
        env = os.environ if environ is None else environ
        cfg = get_network_config(Network(env.get("LIGHTER_NETWORK", Network.MAINNET.value)))

        values = {
            "url": env.get("LIGHTER_URL") or cfg.url,
            "chain_id": int(env.get("LIGHTER_CHAIN_ID", cfg.chain_id)),
        }
        if "LIGHTER_TIMEOUT_MS" in env:
            values["timeout_ms"] = int(env["LIGHTER_TIMEOUT_MS"])
        if "LIGHTER_PRICE_PROTECTION" in env:
            values["price_protection"] = env["LIGHTER_PRICE_PROTECTION"].strip().lower() not in ("0", "false", "no")
        if env.get("LIGHTER_CHANNEL_NAME"):
            values["channel_name"] = env["LIGHTER_CHANNEL_NAME"]
        return cls(**values)
