"""A synchronous daemon that drives an asynchronous one to completion."""

from __future__ import annotations

import asyncio
import enum
import warnings
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from .tx_response import CosmTxResponse, TxResponse


class ChainKind(enum.Enum):
    """The kind of network a chain belongs to."""

    LOCAL = "local"
    MAINNET = "mainnet"
    TESTNET = "testnet"


@dataclass(frozen=True)
class NetworkInfo:
    """Information shared by every chain of one network."""

    chain_name: str
    pub_address_prefix: str
    coin_type: int


@dataclass(frozen=True)
class ChainInfo:
    """Everything needed to connect to and pay fees on a chain."""

    chain_id: str
    gas_denom: str
    gas_price: float
    grpc_urls: tuple[str, ...]
    network_info: NetworkInfo
    kind: ChainKind
    lcd_url: Optional[str] = None
    fcd_url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "grpc_urls", tuple(self.grpc_urls))


def _as_cosm_response(response: Any) -> Any:
    if isinstance(response, TxResponse):
        return CosmTxResponse.from_tx_response(response)
    return response


class DaemonBase:
    """Blocking front end over an asynchronous daemon.

    ``daemon`` is the asynchronous daemon: it holds ``sender``, ``state`` and
    ``chain_info`` attributes, a ``sender_addr()`` method, a blocking
    ``flush_state()`` and coroutine methods for every chain operation.
    ``runner`` runs one awaitable to completion and returns its result; it
    defaults to :func:`asyncio.run`.
    """

    def __init__(self, daemon, runner=None):
        self.daemon = daemon
        self._runner: Callable[[Awaitable[Any]], Any] = (
            runner if runner is not None else asyncio.run
        )

    def _run(self, awaitable: Awaitable[Any]) -> Any:
        return self._runner(awaitable)

    def sender(self):
        """The sender used to sign and query."""
        return self.daemon.sender

    def set_sender(self, sender):
        """Replace the sender in place; prefer :meth:`new_sender`."""
        self.daemon.sender = sender

    def new_sender(self, sender_options):
        """A new daemon whose sender is built from ``sender_options``."""
        new_daemon = self._run(self.daemon.new_sender(sender_options))
        return DaemonBase(new_daemon, self._runner)

    def flush_state(self):
        """Forget all state kept for the current chain (local networks only)."""
        self.daemon.flush_state()

    def chain_info(self):
        """The chain this daemon talks to."""
        return self.daemon.chain_info

    def channel(self):
        """The connection channel of the sender."""
        return self.daemon.sender.channel()

    def state(self):
        """The deployment state shared with the asynchronous daemon."""
        return self.daemon.state

    def can_load_state_from_state_file(self):
        return True

    def sender_addr(self):
        """Address of the sender."""
        return self.daemon.sender_addr()

    def authz_granter(self, granter):
        """Use ``granter`` as authz granter for this daemon's sender."""
        warnings.warn(
            "use sender().set_authz_granter(granter) or sender options instead",
            DeprecationWarning,
            stacklevel=2,
        )
        self.sender().set_authz_granter(granter)
        return self

    def fee_granter(self, granter):
        """Use ``granter`` as fee granter for this daemon's sender."""
        warnings.warn(
            "use sender().set_fee_granter(granter) or sender options instead",
            DeprecationWarning,
            stacklevel=2,
        )
        self.sender().set_fee_granter(granter)
        return self

    def upload(self, uploadable):
        return self._run(self.daemon.upload(uploadable))

    def upload_with_access_config(self, contract_source, access_config):
        return self._run(self.daemon.upload_with_access_config(contract_source, access_config))

    def execute(self, exec_msg, coins, contract_address):
        return self._run(self.daemon.execute(exec_msg, coins, contract_address))

    def instantiate(self, code_id, init_msg, label, admin, coins):
        return self._run(self.daemon.instantiate(code_id, init_msg, label, admin, coins))

    def instantiate2(self, code_id, init_msg, label, admin, coins, salt):
        return self._run(
            self.daemon.instantiate2(code_id, init_msg, label, admin, coins, salt)
        )

    def migrate(self, migrate_msg, new_code_id, contract_address):
        return self._run(self.daemon.migrate(migrate_msg, new_code_id, contract_address))

    def bank_send(self, receiver, amount):
        """Send ``amount`` coins from the sender to ``receiver``."""
        response = self._run(self.sender().bank_send(receiver, list(amount)))
        return _as_cosm_response(response)

    def commit_any(self, msgs, memo=None):
        """Sign and broadcast arbitrary encoded messages."""
        return self._run(self.sender().commit_tx_any(list(msgs), memo))

    def wait_blocks(self, amount):
        self._run(self.daemon.wait_blocks(amount))

    def wait_seconds(self, secs):
        self._run(self.daemon.wait_seconds(secs))

    def next_block(self):
        self._run(self.daemon.next_block())