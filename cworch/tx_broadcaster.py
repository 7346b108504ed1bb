"""Broadcasting transactions with retry strategies for known failures."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import DaemonError, InsufficientFee, TxFailed

_log = logging.getLogger(__name__)

_U128_LIMIT = 1 << 128


@dataclass(frozen=True)
class BroadcastRetry:
    """How many times a strategy may retry; ``limit`` None means forever."""

    limit: Optional[int] = None

    @classmethod
    def infinite(cls):
        return cls(None)

    @classmethod
    def finite(cls, count):
        return cls(int(count))

    @property
    def is_infinite(self):
        return self.limit is None


@dataclass
class RetryStrategy:
    """A condition on a broadcast outcome and what to do before retrying.

    ``broadcast_condition`` receives a successful response,
    ``simulation_condition`` receives the error raised; ``action`` receives the
    transaction builder and the outcome and may change the builder.
    """

    broadcast_condition: Callable[[Any], bool]
    simulation_condition: Callable[[DaemonError], bool]
    action: Optional[Callable[[Any, Any], None]]
    max_retries: BroadcastRetry
    reason: str
    current_retries: int = 0

    def condition_met(self, result):
        """Whether this strategy applies to a response or an error."""
        if isinstance(result, BaseException):
            return bool(self.simulation_condition(result))
        return bool(self.broadcast_condition(result))

    def can_retry(self):
        """Count one retry and say whether it is still allowed."""
        if self.max_retries.is_infinite:
            return True
        self.current_retries += 1
        return self.current_retries <= self.max_retries.limit


def assert_broadcast_code_response(tx_response):
    """Return the response if its code is 0, otherwise raise TxFailed."""
    if tx_response.code == 0:
        return tx_response
    raise TxFailed(tx_response.code, tx_response.raw_log)


def assert_broadcast_code_cosm_response(tx_response):
    """Return the parsed response if its code is 0, otherwise raise TxFailed."""
    if tx_response.code == 0:
        return tx_response
    raise TxFailed(tx_response.code, tx_response.raw_log)


async def _broadcast_once(tx_builder, signer):
    try:
        tx = await tx_builder.build(signer)
        response = await signer.broadcast_tx(tx)
        _log.debug("TX broadcast response: %r", response)
        return assert_broadcast_code_response(response)
    except DaemonError as exc:
        return exc


class TxBroadcaster:
    """Broadcasts a transaction and retries it according to its strategies."""

    def __init__(self):
        self.strategies: list[RetryStrategy] = []

    def add_strategy(self, strategy):
        """Add a strategy; strategies are tested in the order they were added."""
        self.strategies.append(strategy)
        return self

    async def broadcast(self, tx_builder, signer):
        """Broadcast, retrying while some strategy applies and allows it."""
        result = await _broadcast_once(tx_builder, signer)
        _log.info("Awaiting TX inclusion in block...")
        retry = True
        while retry:
            retry = False
            for strategy in self.strategies:
                if not (strategy.condition_met(result) and strategy.can_retry()):
                    continue
                if strategy.action is not None:
                    strategy.action(tx_builder, result)
                retry = True
                block_speed = await signer.average_block_speed()
                _log.warning(
                    "Retrying broadcasting TX in %d milliseconds because of %s",
                    int(block_speed * 1000),
                    strategy.reason,
                )
                await asyncio.sleep(block_speed)
                result = await _broadcast_once(tx_builder, signer)
        if isinstance(result, BaseException):
            raise result
        return result


def has_insufficient_fee(raw_log):
    return "insufficient fees" in raw_log


def has_account_sequence_error(raw_log):
    return "incorrect account sequence" in raw_log


def _parse_u128(text: str) -> Optional[int]:
    digits = text[1:] if text.startswith("+") else text
    if digits and digits.isascii() and digits.isdigit():
        value = int(digits)
        if value < _U128_LIMIT:
            return value
    return None


def parse_suggested_fee(raw_log):
    """Read the fee the node requires, in the denomination that was paid.

    Returns None when the log does not have the expected shape.
    """
    parts = raw_log.split("required: ")
    if len(parts) != 2:
        return None
    got_parts = parts[0].split()
    if not got_parts:
        return None
    paid = got_parts[-1]
    start = next((i for i, c in enumerate(paid) if not c.isnumeric()), None)
    if start is None:
        return None
    denomination = paid[start:]
    _log.debug("denom: %s", denomination)

    required_fees = parts[1].split(denomination)
    _log.debug("required fees: %r", required_fees)

    first = required_fees[0]
    end = next((i for i in range(len(first) - 1, -1, -1) if not first[i].isnumeric()), None)
    if end is None:
        return None
    suggested = first[end:]
    _log.debug("suggested fee: %s", suggested)

    parsed = _parse_u128(suggested)
    return parsed if parsed is not None else _parse_u128(suggested[1:])


def _raise_fee_from_log(tx_builder, result):
    raw_log = result.raw_log
    new_fee = parse_suggested_fee(raw_log)
    if new_fee is None:
        raise InsufficientFee(raw_log)
    tx_builder.fee_amount = new_fee


def insufficient_fee_strategy():
    """Retry once with the fee the node suggested."""
    return RetryStrategy(
        broadcast_condition=lambda response: has_insufficient_fee(response.raw_log),
        simulation_condition=lambda error: False,
        action=_raise_fee_from_log,
        max_retries=BroadcastRetry.finite(1),
        reason="an insufficient fee error",
    )


def account_sequence_strategy():
    """Retry without limit while the account sequence is out of date."""
    return RetryStrategy(
        broadcast_condition=lambda response: has_account_sequence_error(response.raw_log),
        simulation_condition=lambda error: has_account_sequence_error(str(error)),
        action=None,
        max_retries=BroadcastRetry.infinite(),
        reason="an account sequence error",
    )