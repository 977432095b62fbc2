"""Stellar/Soroban integration components."""

from sorokit.stellar.poller import EventStreamPoller
from sorokit.stellar.rpc import SorobanRpcEventSource
from sorokit.stellar.invoker import ContractInvoker

__all__ = ["EventStreamPoller", "SorobanRpcEventSource", "ContractInvoker"]
