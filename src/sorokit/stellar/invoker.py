"""Contract invocation helpers - build call envelopes and simulate reads."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from stellar_sdk import Account, Keypair, SorobanServerAsync, TransactionBuilder, TransactionEnvelope

from sorokit.codec import TypedValueCodec
from sorokit.errors import ConfigError, TransportFailure
from sorokit.models.config import ClientConfig

log = logging.getLogger(__name__)

BASE_FEE = 100
TX_TIMEOUT = 30  # seconds


class ContractInvoker:
    """Builds invokeHostFunction envelopes from codec-encoded arguments.

    Read-only calls are simulated with a throwaway source account, so no
    signing is needed. Arguments may be plain values (auto-detected) or
    TypedArg instances for explicit kinds.
    """

    def __init__(
        self,
        contract_id: str,
        rpc_url: str,
        network_passphrase: str,
        codec: TypedValueCodec | None = None,
        server: Any = None,
    ) -> None:
        self._contract_id = contract_id
        self._rpc_url = rpc_url
        self._passphrase = network_passphrase
        self._codec = codec or TypedValueCodec()
        self._server = server

    @classmethod
    def from_config(cls, cfg: ClientConfig, codec: TypedValueCodec | None = None) -> ContractInvoker:
        if not cfg.contract_id:
            raise ConfigError("contract_id is not configured")
        return cls(cfg.contract_id, cfg.rpc_url, cfg.network_passphrase, codec=codec)

    @property
    def server(self) -> Any:
        if self._server is None:
            self._server = SorobanServerAsync(self._rpc_url)
        return self._server

    async def close(self) -> None:
        """Close the underlying RPC session."""
        if self._server is not None:
            await self._server.close()

    def build(self, function_name: str, args: Sequence[Any] = ()) -> TransactionEnvelope:
        """Build an unsigned envelope calling function_name(*args)."""
        source = Account(Keypair.random().public_key, 0)
        parameters = [self._codec.encode(arg) for arg in args]
        return (
            TransactionBuilder(source, self._passphrase, base_fee=BASE_FEE)
            .append_invoke_contract_function_op(
                contract_id=self._contract_id,
                function_name=function_name,
                parameters=parameters,
            )
            .set_timeout(TX_TIMEOUT)
            .build()
        )

    def build_invoke_xdr(self, function_name: str, args: Sequence[Any] = ()) -> str:
        return self.build(function_name, args).to_xdr()

    async def call_function(self, function_name: str, args: Sequence[Any] = ()) -> Any:
        """Simulate a read-only call and decode its return value.

        Returns None when the simulation carries no return value.
        """
        tx = self.build(function_name, args)
        try:
            sim = await self.server.simulate_transaction(tx)
        except Exception as exc:
            log.warning("simulate %s() failed: %s", function_name, exc)
            raise TransportFailure(f"simulate {function_name}() failed: {exc}") from exc

        if sim.error:
            log.warning("simulate %s() returned error: %s", function_name, sim.error)
            raise TransportFailure(f"Simulation failed: {sim.error}")

        if not sim.results or not sim.results[0].xdr:
            return None
        return self._codec.decode(sim.results[0].xdr)
