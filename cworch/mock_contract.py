"""A small contract used to exercise contract interfaces end to end."""

from __future__ import annotations

from dataclasses import dataclass

from .contract import Response, StdError, to_json_binary

_FIRST_MESSAGE_ACTION = "first message passed"
_FIRST_QUERY_RESULT = "first query passed"
_SECOND_QUERY_RESULT = 89
_MIGRATE_SUCCESS = "success"


@dataclass(frozen=True)
class InstantiateMsg:
    """Instantiation message; it carries no fields."""


@dataclass(frozen=True)
class FirstMessage:
    """Execute message without arguments."""


@dataclass(frozen=True)
class SecondMessage:
    """Execute message that accepts funds and a string argument."""

    t: str


@dataclass(frozen=True)
class FirstQuery:
    """Query answered with a fixed string."""


@dataclass(frozen=True)
class SecondQuery:
    """Query with a string argument, answered with a fixed number."""

    t: str


@dataclass(frozen=True)
class MigrateMsg:
    """Migration message; only ``t == "success"`` migrates."""

    t: str


def _expect(msg, kinds, what: str) -> None:
    if not isinstance(msg, kinds):
        raise StdError(f"unknown {what} message: {msg!r}")


def instantiate(msg):
    """Instantiate the contract."""
    _expect(msg, InstantiateMsg, "instantiate")
    return Response().add_attribute("action", "instantiate")


def execute(msg):
    """Handle an execute message."""
    _expect(msg, (FirstMessage, SecondMessage), "execute")
    return Response().add_attribute("action", _FIRST_MESSAGE_ACTION)


def query(msg):
    """Answer a query with JSON binary."""
    _expect(msg, (FirstQuery, SecondQuery), "query")
    if isinstance(msg, FirstQuery):
        return to_json_binary(_FIRST_QUERY_RESULT)
    return to_json_binary(_SECOND_QUERY_RESULT)


def migrate(msg):
    """Migrate the contract, failing unless the message says ``success``."""
    _expect(msg, MigrateMsg, "migrate")
    if msg.t == _MIGRATE_SUCCESS:
        return Response()
    raise StdError("migrate endpoint reached but no test implementation")