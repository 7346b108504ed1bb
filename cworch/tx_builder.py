"""Building, simulating and signing transactions before they are broadcast."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from .errors import DaemonError

_log = logging.getLogger(__name__)

GAS_BUFFER = 1.3
BUFFER_THRESHOLD = 200_000
SMALL_GAS_BUFFER = 1.4
DEFAULT_MEMO = "Tx committed using cworch! ⚙️"
MAX_CHAIN_ID_LENGTH = 50

_U32_MASK = 0xFFFF_FFFF
_U128_LIMIT = 1 << 128
_DENOM = re.compile(r"[A-Za-z][A-Za-z0-9/:._-]{2,127}")

_BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_BECH32_CONSTANTS = (1, 0x2BC830A3)


def _polymod(values) -> int:
    checksum = 1
    for value in values:
        top = checksum >> 25
        checksum = ((checksum & 0x1FFFFFF) << 5) ^ value
        for bit, generator in enumerate(_BECH32_GENERATOR):
            if (top >> bit) & 1:
                checksum ^= generator
    return checksum


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _five_to_eight(data: list[int]) -> bytes | None:
    acc = 0
    bits = 0
    out = bytearray()
    for value in data:
        acc = (acc << 5) | value
        bits += 5
        while bits >= 8:
            bits -= 8
            out.append((acc >> bits) & 0xFF)
    if bits >= 5 or (acc << (8 - bits)) & 0xFF:
        return None
    return bytes(out)


def _validate_account_id(address: str) -> str:
    """Check that ``address`` is a bech32 account address and return it."""

    def invalid(why: str) -> DaemonError:
        return DaemonError(f"invalid account id {address!r}: {why}")

    if address != address.lower() and address != address.upper():
        raise invalid("mixed case")
    text = address.lower()
    separator = text.rfind("1")
    if separator < 1 or separator + 7 > len(text):
        raise invalid("missing prefix or checksum")
    hrp, data_part = text[:separator], text[separator + 1 :]
    if any(not 33 <= ord(c) <= 126 for c in hrp):
        raise invalid("bad prefix character")
    try:
        data = [_BECH32_CHARSET.index(c) for c in data_part]
    except ValueError:
        raise invalid("bad data character") from None
    if _polymod(_hrp_expand(hrp) + data) not in _BECH32_CONSTANTS:
        raise invalid("bad checksum")
    payload = _five_to_eight(data[:-6])
    if payload is None:
        raise invalid("bad padding")
    if not 1 <= len(payload) <= 255:
        raise invalid("bad length")
    return address


def _validate_chain_id(chain_id: str) -> str:
    if not chain_id or len(chain_id) > MAX_CHAIN_ID_LENGTH:
        raise DaemonError(f"invalid chain id: {chain_id!r}")
    return chain_id


@dataclass(frozen=True)
class Coin:
    """An amount of a single denomination."""

    amount: int
    denom: str

    def __post_init__(self):
        if not 0 <= int(self.amount) < _U128_LIMIT:
            raise DaemonError(f"coin amount out of range: {self.amount}")
        if not _DENOM.fullmatch(self.denom):
            raise DaemonError(f"invalid denomination: {self.denom!r}")


@dataclass
class Fee:
    """The fee paid for a transaction and the gas it may use."""

    amount: list[Coin]
    gas_limit: int
    payer: str | None = None
    granter: str | None = None


@dataclass
class Body:
    """The body of a transaction: messages, memo and timeout height."""

    messages: list[Any] = field(default_factory=list)
    memo: str = ""
    timeout_height: int = 0


@dataclass(frozen=True)
class SigningAccount:
    """Account number and current sequence of a signing account."""

    account_number: int
    sequence: int


@runtime_checkable
class Signer(Protocol):
    """What a transaction builder and broadcaster need from a signing wallet."""

    async def signing_account(self) -> SigningAccount:
        """Fetch the account number and sequence of the signer."""

    async def calculate_gas(self, body: Body, sequence: int, account_number: int) -> int:
        """Simulate the body on a node and return the gas it uses."""

    def gas_price(self) -> float:
        """Price of one unit of gas in the fee denomination."""

    def build_fee(self, amount: int, gas_limit: int) -> Fee:
        """Build the fee paid for a transaction."""

    def chain_id(self) -> str:
        """Identifier of the chain the signer signs for."""

    def sign(self, body: Body, fee: Fee, sequence: int, account_number: int, chain_id: str) -> Any:
        """Sign a transaction and return it in raw form."""

    async def broadcast_tx(self, tx: Any) -> Any:
        """Submit a signed transaction and return the node's response."""

    async def average_block_speed(self) -> float:
        """Average time between blocks, in seconds."""


def get_fee_from_gas(gas, gas_price, gas_buffer=None, min_gas=0):
    """Return ``(gas_limit, fee_amount)`` for a simulated gas amount.

    A buffer is applied to cover signature verification: ``gas_buffer`` when
    given, otherwise a larger one for small transactions. The result is never
    below ``min_gas``.
    """
    if gas_buffer is not None:
        expected = gas * gas_buffer
    elif gas < BUFFER_THRESHOLD:
        expected = gas * SMALL_GAS_BUFFER
    else:
        expected = gas * GAS_BUFFER
    expected = max(float(min_gas), expected)
    fee_amount = expected * (gas_price + 0.00001)
    return max(int(expected), 0), max(int(fee_amount), 0)


class TxBuilder:
    """Collects the parts of a transaction and signs it with a signer.

    ``fee_amount``, ``gas_limit`` and ``sequence`` may be set to fix those
    values; when unset they are computed or fetched from the node.
    ``gas_buffer`` and ``min_gas`` tune the gas estimate.
    """

    def __init__(self, body):
        self.body = body
        self.fee_amount: int | None = None
        self.gas_limit: int | None = None
        self.sequence: int | None = None
        self.gas_buffer: float | None = None
        self.min_gas: int = 0

    def __repr__(self):
        return (
            f"TxBuilder(body={self.body!r}, fee_amount={self.fee_amount!r}, "
            f"gas_limit={self.gas_limit!r}, sequence={self.sequence!r})"
        )

    @staticmethod
    def build_body(msgs, memo=None, timeout=0):
        """Build a transaction body; the timeout is truncated to 32 bits."""
        return Body(
            messages=list(msgs),
            memo=DEFAULT_MEMO if memo is None else memo,
            timeout_height=int(timeout) & _U32_MASK,
        )

    @staticmethod
    def build_fee(amount, denom, gas_limit, fee_granter=None):
        """Build a fee of ``amount`` ``denom`` with an optional fee granter."""
        coin = Coin(int(amount), denom)
        granter = None if fee_granter is None else _validate_account_id(str(fee_granter))
        return Fee(amount=[coin], gas_limit=int(gas_limit), granter=granter)

    def _sequence_for(self, account: SigningAccount) -> int:
        return account.sequence if self.sequence is None else self.sequence

    async def simulate(self, signer):
        """Return the gas a simulation of this transaction uses."""
        account = await signer.signing_account()
        return await signer.calculate_gas(
            self.body, self._sequence_for(account), account.account_number
        )

    async def build(self, signer):
        """Sign the transaction and return it in raw form.

        When fee or gas limit is missing, the transaction is simulated and the
        computed gas limit is kept for later builds.
        """
        account = await signer.signing_account()
        sequence = self._sequence_for(account)

        if self.fee_amount is not None and self.gas_limit is not None:
            _log.debug("Using pre-defined fee and gas limits: %s, %s", self.fee_amount, self.gas_limit)
            tx_fee, gas_limit = self.fee_amount, self.gas_limit
        else:
            simulated = await signer.calculate_gas(self.body, sequence, account.account_number)
            _log.debug("Simulated gas needed %s", simulated)
            gas_limit, tx_fee = get_fee_from_gas(
                simulated, signer.gas_price(), self.gas_buffer, self.min_gas
            )
            _log.debug("Calculated fee needed: %s", tx_fee)
            self.gas_limit = gas_limit

        fee = signer.build_fee(tx_fee, gas_limit)
        _log.debug(
            "submitting TX: fee: %r account_nr: %s sequence: %s",
            fee,
            account.account_number,
            sequence,
        )
        chain_id = _validate_chain_id(signer.chain_id())
        return signer.sign(self.body, fee, sequence, account.account_number, chain_id)