from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from eth_typing import ChecksumAddress

from .constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    GAS_ESTIMATION_BUFFER,
    PROVIDER_TIMEOUT_SECONDS,
)
from .utils.validation import validate_address

__all__ = ["Network", "NetworkConfig", "NETWORKS", "TransferSettings", "get_network_config"]

_DEFAULT = object()


class Network(str, Enum):
    MAINNET = "mainnet"
    SEPOLIA = "sepolia"


@dataclass
class NetworkConfig:
    name: Network
    chain_id: int
    rpc_url: str
    default_token: Optional[str]


NETWORKS: dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(
        name=Network.MAINNET,
        chain_id=1,
        rpc_url="https://ethereum-rpc.publicnode.com",
        default_token="0xdAC17F958D2ee523a2206206994597C13D831ec7",  # USDT, 6 decimals
    ),
    Network.SEPOLIA: NetworkConfig(
        name=Network.SEPOLIA,
        chain_id=11155111,
        rpc_url="https://ethereum-sepolia-rpc.publicnode.com",
        default_token=None,
    ),
}


def get_network_config(network: Network, rpc_url: Optional[str] = None) -> NetworkConfig:
    cfg = NETWORKS[Network(network)]
    if rpc_url:
        return NetworkConfig(
            name=cfg.name,
            chain_id=cfg.chain_id,
            rpc_url=rpc_url,
            default_token=cfg.default_token,
        )
    return cfg


@dataclass(frozen=True)
class TransferSettings:
    """Explicit configuration for a TransactionManager.

    Attributes:
        rpc_url: JSON-RPC endpoint
        chain_id: EIP-155 chain id
        sender: Address that owns the signing key
        token_address: ERC-20 contract; None sends native value instead
        max_attempts: Receipt polls before giving up
        poll_interval: Seconds between receipt polls
        gas_buffer: Multiplier applied to the node's gas estimate
        request_timeout: HTTP timeout for each RPC request, in seconds
    """
    rpc_url: str
    chain_id: int
    sender: ChecksumAddress
    token_address: Optional[ChecksumAddress] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    gas_buffer: float = GAS_ESTIMATION_BUFFER
    request_timeout: int = field(default=PROVIDER_TIMEOUT_SECONDS)

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "sender", validate_address(self.sender, "sender"))
        if self.token_address is not None:
            object.__setattr__(
                self, "token_address", validate_address(self.token_address, "token_address")
            )
        if not self.rpc_url:
            raise ValueError("rpc_url is required")
        if self.chain_id <= 0:
            raise ValueError("chain_id must be positive")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.poll_interval < 0:
            raise ValueError("poll_interval cannot be negative")
        if self.gas_buffer < 1.0:
            raise ValueError("gas_buffer must be >= 1.0")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

    @classmethod
    def for_network(
        cls,
        network: Network,
        sender: str,
        rpc_url: Optional[str] = None,
        token_address: Optional[str] = _DEFAULT,  # type: ignore[assignment]
        **overrides,
    ) -> "TransferSettings":
        """Build settings from the network table.

        ``token_address`` defaults to the network's default token; pass
        None explicitly for native transfers.
        """
        cfg = get_network_config(network, rpc_url)
        token = cfg.default_token if token_address is _DEFAULT else token_address
        return cls(
            rpc_url=cfg.rpc_url,
            chain_id=cfg.chain_id,
            sender=sender,  # type: ignore[arg-type]
            token_address=token,  # type: ignore[arg-type]
            **overrides,
        )
