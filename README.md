# cworch

Tools for scripting interactions with CosmWasm chains: building and signing
transactions, broadcasting them with retry strategies, and reading the events
and attributes out of transaction responses.

The package has no dependencies outside the standard library.

## Installation

```
pip install cworch
```

To run the test suite:

```
pip install "cworch[test]"
pytest
```

## What is inside

- `cworch.tx_builder` — `TxBuilder`, `Body`, `Fee`, `Coin`, `SigningAccount` and
  the `Signer` protocol. `TxBuilder.build(signer)` uses the builder's
  `fee_amount` and `gas_limit` when both are set; otherwise it simulates the
  body through `signer.calculate_gas`, applies a gas buffer with
  `get_fee_from_gas`, keeps the resulting gas limit for later builds, and
  returns whatever `signer.sign` returns. `TxBuilder.simulate(signer)` returns
  the simulated gas. `TxBuilder.build_body` and `TxBuilder.build_fee` create a
  body and a fee; a fee granter must be a valid bech32 address.
- `cworch.tx_broadcaster` — `TxBroadcaster` with pluggable `RetryStrategy`
  objects, and `BroadcastRetry.finite(n)` / `BroadcastRetry.infinite()` to bound
  retries. `insufficient_fee_strategy()` reads the fee the node asks for out of
  the raw log (see `parse_suggested_fee`) and retries once;
  `account_sequence_strategy()` retries on account sequence mismatches without
  limit. `assert_broadcast_code_response` and
  `assert_broadcast_code_cosm_response` raise `TxFailed` for a non-zero code.
- `cworch.tx_response` — `TxResponse` and its log and event types as a node
  reports them, and `CosmTxResponse` (built with
  `CosmTxResponse.from_tx_response`) with `get_events`,
  `get_attribute_from_logs`, `index_events`, `data_binary`, `event_attr_value`
  and `event_attr_values`. `parse_timestamp` reads the timestamp formats nodes
  return into a UTC `datetime`.
- `cworch.errors` — `DaemonError` and its subclasses `TxFailed`,
  `InsufficientFee` and `DaemonStdError`.
- `cworch.daemon` — `DaemonBase`, a blocking front for an asynchronous daemon
  object that you supply, and the `ChainInfo`, `NetworkInfo` and `ChainKind`
  descriptions of a chain.
- `cworch.snapshots` — `parse_storage` and `take_storage_snapshot` for turning
  raw contract storage into readable key/value strings, keyed by contract id in
  sorted order.
- `cworch.contract` — a small contract model: `Response`, `ContractEvent`,
  `ContractAttribute`, `StdError`, and `to_json_binary` / `from_json_binary`.
- `cworch.mock_contract` and `cworch.cw20_example` — example contracts written
  as plain Python entry points (`instantiate`, `execute`, `query`, `migrate`).

## Example

```python
from cworch.tx_broadcaster import parse_suggested_fee

log = (
    "insufficient fees; got: 14867ujuno required: "
    "17771ibc/C4CFF46FD6DE35CA4CF4CE031E643C8FDC9BA4B99AE598E9B0ED98FE3A2319F9,"
    "444255ujuno: insufficient fee"
)
assert parse_suggested_fee(log) == 444255
```

```python
from cworch.tx_broadcaster import (
    TxBroadcaster,
    account_sequence_strategy,
    insufficient_fee_strategy,
)

broadcaster = (
    TxBroadcaster()
    .add_strategy(insufficient_fee_strategy())
    .add_strategy(account_sequence_strategy())
)
# response = await broadcaster.broadcast(tx_builder, signer)
```

Strategies are checked in the order they were added. Whenever one matches the
current outcome and still has retries left, its action runs, the broadcaster
waits `signer.average_block_speed()` seconds and broadcasts again; this goes on
until no strategy applies. A final error is raised, a final response returned.

## What the package does not do

The package does not talk to a chain by itself. It ships no wallet, no key
handling, no gRPC or HTTP client and no node queries: signing, simulating gas,
broadcasting and measuring block speed are done by the `Signer` object you pass
in. Likewise `DaemonBase` only drives an asynchronous daemon object you
provide; it does not create one. There is no local chain simulator to upload
or run the example contracts on, and no command-line tool.