"""Contract-side value types: responses, events and JSON binary encoding."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any


class StdError(Exception):
    """A generic error returned by a contract entry point."""

    def __init__(self, msg):
        self.msg = str(msg)
        super().__init__(self.msg)


@dataclass(frozen=True)
class ContractAttribute:
    """A key/value pair attached to an event or a response."""

    key: str
    value: str


@dataclass
class ContractEvent:
    """An event emitted by a contract, with its attributes in order."""

    ty: str
    attributes: list[ContractAttribute] = field(default_factory=list)

    def add_attribute(self, key, value):
        """Append an attribute and return the event for chaining."""
        self.attributes.append(ContractAttribute(str(key), str(value)))
        return self


@dataclass
class Response:
    """The result of a contract execution."""

    attributes: list[ContractAttribute] = field(default_factory=list)
    events: list[ContractEvent] = field(default_factory=list)
    data: bytes | None = None

    def add_attribute(self, key, value):
        """Append a response attribute and return the response for chaining."""
        self.attributes.append(ContractAttribute(str(key), str(value)))
        return self

    def add_event(self, event):
        """Append an event and return the response for chaining."""
        self.events.append(event)
        return self

    def has_event(self, event):
        """True if some event has the same type and holds all of the given attributes."""
        return any(
            existing.ty == event.ty
            and all(attr in existing.attributes for attr in event.attributes)
            for existing in self.events
        )


def _jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def to_json_binary(value):
    """Serialize a value to compact UTF-8 JSON bytes."""
    try:
        text = json.dumps(_jsonable(value), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StdError(f"Error serializing type: {exc}") from exc
    return text.encode("utf-8")


def from_json_binary(data):
    """Parse JSON bytes back into Python values."""
    try:
        return json.loads(bytes(data).decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise StdError(f"Error parsing into type: {exc}") from exc