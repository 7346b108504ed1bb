"""Readable dumps of contract storage for snapshot testing."""

from __future__ import annotations


def _lossy(data) -> str:
    return bytes(data).decode("utf-8", errors="replace")


def parse_storage(storage):
    """Turn raw ``(key, value)`` byte pairs into readable strings."""
    return [(_lossy(key), _lossy(value)) for key, value in storage]


def take_storage_snapshot(addresses, dump_wasm_raw):
    """Readable storage of every contract, keyed by contract id in sorted order.

    ``addresses`` maps contract ids to addresses; ``dump_wasm_raw`` returns the
    raw storage pairs of one contract address.
    """
    return {
        contract_id: parse_storage(dump_wasm_raw(address))
        for contract_id, address in sorted(dict(addresses).items())
    }