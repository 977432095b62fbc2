"""Configuration models for the codec client and event poller."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NetworkConfig:
    """Endpoints and passphrase for one Stellar network."""

    name: str
    horizon_url: str
    soroban_url: str
    passphrase: str


NETWORKS: dict[str, NetworkConfig] = {
    "testnet": NetworkConfig(
        name="Testnet",
        horizon_url="https://horizon-testnet.stellar.org",
        soroban_url="https://soroban-testnet.stellar.org",
        passphrase="Test SDF Network ; September 2015",
    ),
    "mainnet": NetworkConfig(
        name="Mainnet",
        horizon_url="https://horizon.stellar.org",
        soroban_url="https://soroban.stellar.org",
        passphrase="Public Global Stellar Network ; September 2015",
    ),
}


@dataclass
class PollerConfig:
    """EventStreamPoller scheduling and retry configuration."""

    poll_interval: float | None = 10.0  # seconds; None or 0 disables the timer
    limit: int = 100  # events per page
    max_retries: int = 3  # attempts per fetch cycle
    backoff_base: float = 1.0  # seconds; attempt k sleeps base * 3**(k-1)
    error_multiplier: int = 2  # poll interval multiplier while recovering


@dataclass
class ClientConfig:
    """Complete client configuration."""

    network: str = "testnet"
    rpc_url: str = ""  # defaults to the network's soroban_url
    network_passphrase: str = ""  # defaults to the network's passphrase
    contract_id: str = ""
    start_ledger: int | None = None  # first getEvents call without a cursor
    log_level: str = "info"

    poller: PollerConfig = field(default_factory=PollerConfig)

    def __post_init__(self) -> None:
        net = self.network_config
        if net is not None:
            self.rpc_url = self.rpc_url or net.soroban_url
            self.network_passphrase = self.network_passphrase or net.passphrase

    @property
    def network_config(self) -> NetworkConfig | None:
        return NETWORKS.get(self.network)
