"""A token-like contract whose messages are split into minting and base parts."""

from __future__ import annotations

from dataclasses import dataclass

from .contract import Response, StdError, to_json_binary

_U128_LIMIT = 1 << 128
_MINTER = "minter"
_BALANCE = 167


def _check_uint128(value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < _U128_LIMIT:
        raise ValueError(f"amount must be an unsigned 128-bit integer: {value!r}")


@dataclass(frozen=True)
class Mint:
    """Mint ``amount`` tokens to ``recipient``."""

    recipient: str
    amount: int

    def __post_init__(self):
        _check_uint128(self.amount)


@dataclass(frozen=True)
class Send:
    """Send ``amount`` tokens to ``contract`` together with ``msg``."""

    contract: str
    amount: int
    msg: bytes

    def __post_init__(self):
        _check_uint128(self.amount)
        object.__setattr__(self, "msg", bytes(self.msg))


@dataclass(frozen=True)
class Minter:
    """Ask who the minter is."""


@dataclass(frozen=True)
class Balance:
    """Ask for the balance of ``address``."""

    address: str


@dataclass(frozen=True)
class MinterResponse:
    minter: str


@dataclass(frozen=True)
class BalanceResponse:
    balance: int

    def __post_init__(self):
        _check_uint128(self.balance)


_MINTING_EXEC = (Mint,)
_BASE_EXEC = (Send,)
_MINTING_QUERY = (Minter,)
_BASE_QUERY = (Balance,)


@dataclass(frozen=True)
class ExecuteMsg:
    """An execute message: ``variant`` is ``"minting"`` or ``"base"``."""

    variant: str
    msg: object

    def __post_init__(self):
        expected = {"minting": _MINTING_EXEC, "base": _BASE_EXEC}.get(self.variant)
        if expected is None or not isinstance(self.msg, expected):
            raise TypeError(f"invalid execute message: {self.variant!r}, {self.msg!r}")

    @classmethod
    def wrap(cls, msg):
        """Wrap a minting or base message; an ExecuteMsg is returned unchanged."""
        if isinstance(msg, cls):
            return msg
        if isinstance(msg, _MINTING_EXEC):
            return cls("minting", msg)
        if isinstance(msg, _BASE_EXEC):
            return cls("base", msg)
        raise TypeError(f"cannot make an execute message from {msg!r}")


@dataclass(frozen=True)
class QueryMsg:
    """A query message: ``variant`` is ``"minting"`` or ``"base"``."""

    variant: str
    msg: object

    def __post_init__(self):
        expected = {"minting": _MINTING_QUERY, "base": _BASE_QUERY}.get(self.variant)
        if expected is None or not isinstance(self.msg, expected):
            raise TypeError(f"invalid query message: {self.variant!r}, {self.msg!r}")

    @classmethod
    def wrap(cls, msg):
        """Wrap a minting or base query; a QueryMsg is returned unchanged."""
        if isinstance(msg, cls):
            return msg
        if isinstance(msg, _MINTING_QUERY):
            return cls("minting", msg)
        if isinstance(msg, _BASE_QUERY):
            return cls("base", msg)
        raise TypeError(f"cannot make a query message from {msg!r}")


def instantiate(msg):
    """Instantiate the contract; the message is ignored."""
    return Response().add_attribute("action", "instantiate")


def execute(msg):
    """Accept any minting or base execute message."""
    ExecuteMsg.wrap(msg)
    return Response()


def minter_execute(msg):
    """Accept a minting execute message."""
    if not isinstance(msg, _MINTING_EXEC):
        raise TypeError(f"not a minting message: {msg!r}")
    return Response()


def base_execute(msg):
    """Accept a base execute message."""
    if not isinstance(msg, _BASE_EXEC):
        raise TypeError(f"not a base message: {msg!r}")
    return Response()


def query(msg):
    """Answer a query with JSON binary; amounts are encoded as strings."""
    wrapped = QueryMsg.wrap(msg)
    if isinstance(wrapped.msg, Minter):
        return to_json_binary(MinterResponse(_MINTER))
    if isinstance(wrapped.msg, Balance):
        return to_json_binary({"balance": str(BalanceResponse(_BALANCE).balance)})
    raise StdError(f"unknown query: {msg!r}")


def migrate(msg):
    """Migrate the contract; always succeeds."""
    return Response()