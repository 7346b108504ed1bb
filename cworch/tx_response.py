"""Transaction responses as returned by a node, and helpers to read them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .contract import ContractAttribute, ContractEvent, StdError, to_json_binary
from .errors import DaemonStdError

_log = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DATE_TIME = r"(\d{4})-(\d{1,2})-(\d{1,2})T(\d{1,2}):(\d{1,2}):(\d{1,2})"
# Fraction after the dot, left-aligned (".123" is 123 milliseconds); may be absent.
_FORMAT = re.compile(_DATE_TIME + r"(?:\.(\d+))?")
# Fraction read as a whole number of nanoseconds, then an offset that is ignored.
_FORMAT_TZ_SUPPLIED = re.compile(_DATE_TIME + r"\.(\d{1,9})[+-]\d{2}:\d{2}")
_FORMAT_SHORT_Z = re.compile(_DATE_TIME + r"Z")
_FORMAT_SHORT_Z2 = re.compile(_DATE_TIME + r"\.(\d{1,9})Z")


def _lossy(value) -> str:
    if isinstance(value, str):
        return value
    return bytes(value).decode("utf-8", errors="replace")


@dataclass
class EventAttribute:
    """A raw attribute of a block event; key and value are bytes."""

    key: bytes = b""
    value: bytes = b""
    index: bool = False


@dataclass
class Event:
    """A raw block event."""

    type: str = ""
    attributes: list[EventAttribute] = field(default_factory=list)


@dataclass
class Attribute:
    """A string attribute of a message log event."""

    key: str = ""
    value: str = ""


@dataclass
class StringEvent:
    """A message log event whose attributes are strings."""

    type: str = ""
    attributes: list[Attribute] = field(default_factory=list)


@dataclass
class AbciMessageLog:
    """The log of one message of a transaction."""

    msg_index: int = 0
    log: str = ""
    events: list[StringEvent] = field(default_factory=list)


@dataclass
class TxResponse:
    """A transaction response as a node reports it."""

    height: int = 0
    txhash: str = ""
    codespace: str = ""
    code: int = 0
    data: str = ""
    raw_log: str = ""
    logs: list[AbciMessageLog] = field(default_factory=list)
    info: str = ""
    gas_wanted: int = 0
    gas_used: int = 0
    timestamp: str = ""
    events: list[Event] = field(default_factory=list)


@dataclass
class TxResultBlockAttribute:
    """A single attribute of an event."""

    key: str
    value: str

    @classmethod
    def from_attribute(cls, attribute):
        return cls(key=attribute.key, value=attribute.value)


@dataclass
class TxResultBlockEvent:
    """A single event from a transaction and its attributes."""

    type: str
    attributes: list[TxResultBlockAttribute] = field(default_factory=list)

    @classmethod
    def from_string_event(cls, event):
        return cls(
            type=event.type,
            attributes=[TxResultBlockAttribute.from_attribute(a) for a in event.attributes],
        )

    def get_attributes(self, key):
        """All attributes whose key is ``key``."""
        return [attr for attr in self.attributes if attr.key == key]

    def get_first_attribute_value(self, key):
        """Value of the first attribute with key ``key``, or None."""
        return next((attr.value for attr in self.attributes if attr.key == key), None)


@dataclass
class TxResultBlockMsg:
    """The events from a single message in a transaction."""

    msg_index: int | None
    events: list[TxResultBlockEvent] = field(default_factory=list)

    @classmethod
    def from_abci_log(cls, log):
        return cls(
            msg_index=int(log.msg_index),
            events=[TxResultBlockEvent.from_string_event(e) for e in log.events],
        )

    @classmethod
    def from_json(cls, value):
        """Build from a decoded JSON object with ``msg_index`` and ``events``."""
        try:
            msg_index = value.get("msg_index")
            if msg_index is not None and not isinstance(msg_index, int):
                raise TypeError("msg_index must be an integer")
            events = [
                TxResultBlockEvent(
                    type=str(event["type"]),
                    attributes=[
                        TxResultBlockAttribute(key=str(a["key"]), value=str(a["value"]))
                        for a in event["attributes"]
                    ],
                )
                for event in value["events"]
            ]
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"invalid message log: {exc}") from exc
        return cls(msg_index=msg_index, events=events)


def _build(match: re.Match, fraction_us: int) -> datetime:
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    return datetime(year, month, day, hour, minute, second, fraction_us, tzinfo=timezone.utc)


def _try(pattern: re.Pattern, text: str, left_aligned: bool) -> datetime | None:
    match = pattern.fullmatch(text)
    if match is None:
        return None
    fraction = match.group(7) if match.lastindex and match.lastindex >= 7 else None
    if not fraction:
        micros = 0
    elif left_aligned:
        micros = int(fraction[:6].ljust(6, "0"))
    else:
        micros = int(fraction) // 1000
    try:
        return _build(match, micros)
    except ValueError:
        return None


def parse_timestamp(s):
    """Parse a node timestamp string into a UTC datetime."""
    sliced = s[: max(len(s) - 4, 0)] if "." in s else s
    for pattern, text, left_aligned in (
        (_FORMAT, sliced, True),
        (_FORMAT_TZ_SUPPLIED, s, False),
        (_FORMAT_SHORT_Z, sliced, False),
        (_FORMAT_SHORT_Z2, s, False),
    ):
        parsed = _try(pattern, text, left_aligned)
        if parsed is not None:
            return parsed
    _log.error("DateTime Fail %s", s)
    raise DaemonStdError(f"input is not a valid timestamp: {s!r}")


@dataclass
class CosmTxResponse:
    """The response from a transaction performed on a blockchain."""

    height: int = 0
    txhash: str = ""
    codespace: str = ""
    code: int = 0
    data: str = ""
    raw_log: str = ""
    logs: list[TxResultBlockMsg] = field(default_factory=list)
    info: str = ""
    gas_wanted: int = 0
    gas_used: int = 0
    timestamp: datetime = _EPOCH
    events: list[Event] = field(default_factory=list)

    @classmethod
    def from_tx_response(cls, tx):
        return cls(
            height=int(tx.height),
            txhash=tx.txhash,
            codespace=tx.codespace,
            code=int(tx.code),
            data=tx.data,
            raw_log=tx.raw_log,
            logs=[TxResultBlockMsg.from_abci_log(log) for log in tx.logs],
            info=tx.info,
            gas_wanted=int(tx.gas_wanted),
            gas_used=int(tx.gas_used),
            timestamp=parse_timestamp(tx.timestamp),
            events=list(tx.events),
        )

    def get_attribute_from_logs(self, event_type, attribute_key):
        """For each message log, the first matching attribute of the first matching event.

        Returns a list of ``(msg_index, value)`` pairs.
        """
        found = []
        for log_part in self.logs:
            event = next((e for e in log_part.events if e.type == event_type), None)
            if event is None:
                continue
            value = event.get_first_attribute_value(attribute_key)
            if value is not None:
                found.append((log_part.msg_index or 0, value))
        return found

    def get_events(self, event_type):
        """Events of the given type, from the logs or else from the raw events."""
        from_logs = [
            event
            for log_part in self.logs
            for event in log_part.events
            if event.type == event_type
        ]
        if from_logs:
            return from_logs
        return [
            TxResultBlockEvent(
                type=event.type,
                attributes=[
                    TxResultBlockAttribute(key=_lossy(a.key), value=_lossy(a.value))
                    for a in event.attributes
                ],
            )
            for event in self.events
            if event.type == event_type
        ]

    def index_events(self):
        """The raw events as contract events with string attributes."""
        return [
            ContractEvent(
                event.type,
                [ContractAttribute(_lossy(a.key), _lossy(a.value)) for a in event.attributes],
            )
            for event in self.events
        ]

    def data_binary(self):
        """The data field as JSON binary, or None when it is empty."""
        if not self.data:
            return None
        return to_json_binary(self.data.encode("utf-8"))

    def event_attr_value(self, event_type, attr_key):
        """The first value of ``attr_key`` among events of ``event_type``."""
        values = self.event_attr_values(event_type, attr_key)
        if values:
            return values[0]
        raise StdError(
            f"event of type {event_type} does not have a value at key {attr_key}"
        )

    def event_attr_values(self, event_type, attr_key):
        """All values of ``attr_key`` among events of ``event_type``."""
        return [
            _lossy(attr.value)
            for event in self.events
            if event.type == event_type
            for attr in event.attributes
            if _lossy(attr.key) == attr_key
        ]