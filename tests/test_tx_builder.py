import pytest

from cworch.errors import DaemonError
from cworch.tx_builder import (
    BUFFER_THRESHOLD,
    DEFAULT_MEMO,
    GAS_BUFFER,
    SMALL_GAS_BUFFER,
    Body,
    Coin,
    Fee,
    SigningAccount,
    TxBuilder,
    get_fee_from_gas,
)

VALID_ADDRESS = "abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqxw"
BAD_CHECKSUM_ADDRESS = "abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqxx"


class FakeSigner:
    def __init__(self, gas=150_000, chain_id="juno-1", account=None):
        self.gas = gas
        self._chain_id = chain_id
        self.account = account or SigningAccount(account_number=12, sequence=4)
        self.gas_calls = []
        self.signed = []

    async def signing_account(self):
        return self.account

    async def calculate_gas(self, body, sequence, account_number):
        self.gas_calls.append((body, sequence, account_number))
        return self.gas

    def gas_price(self):
        return 0.025

    def build_fee(self, amount, gas_limit):
        return TxBuilder.build_fee(amount, "ujuno", gas_limit, None)

    def chain_id(self):
        return self._chain_id

    def sign(self, body, fee, sequence, account_number, chain_id):
        raw = {
            "body": body,
            "fee": fee,
            "sequence": sequence,
            "account_number": account_number,
            "chain_id": chain_id,
        }
        self.signed.append(raw)
        return raw

    async def broadcast_tx(self, tx):
        return tx

    async def average_block_speed(self):
        return 0.0


def make_builder():
    return TxBuilder(TxBuilder.build_body([{"type_url": "/test.Msg", "value": b""}], "memo", 0))


def test_small_gas_uses_small_buffer():
    gas, _ = get_fee_from_gas(100_000, 0.0)
    assert gas / 100_000 == pytest.approx(SMALL_GAS_BUFFER, rel=1e-4)


def test_large_gas_uses_regular_buffer():
    gas, _ = get_fee_from_gas(1_000_000, 0.0)
    assert gas / 1_000_000 == pytest.approx(GAS_BUFFER, rel=1e-4)


def test_threshold_switches_buffer():
    below, _ = get_fee_from_gas(BUFFER_THRESHOLD - 1, 0.0)
    at, _ = get_fee_from_gas(BUFFER_THRESHOLD, 0.0)
    assert below > at


def test_custom_buffer_overrides_defaults():
    gas, _ = get_fee_from_gas(1000, 0.0, gas_buffer=2.0)
    assert gas == 2000


def test_min_gas_is_a_floor():
    gas, fee = get_fee_from_gas(10, 1.0, min_gas=500_000)
    assert gas == 500_000
    assert 500_000 <= fee < 500_010


def test_fee_grows_with_gas_price():
    _, cheap = get_fee_from_gas(300_000, 0.01)
    _, expensive = get_fee_from_gas(300_000, 0.5)
    assert expensive > cheap


def test_build_body_default_memo():
    body = TxBuilder.build_body(["m"], None, 10)
    assert body.memo == DEFAULT_MEMO
    assert body.messages == ["m"]
    assert body.timeout_height == 10


def test_build_body_custom_memo_and_truncated_timeout():
    body = TxBuilder.build_body([], "hello", (1 << 32) + 7)
    assert body.memo == "hello"
    assert body.timeout_height == 7


def test_build_fee_without_granter():
    fee = TxBuilder.build_fee(1234, "ujuno", 200_000, None)
    assert fee == Fee(amount=[Coin(1234, "ujuno")], gas_limit=200_000)
    assert fee.granter is None


def test_build_fee_with_granter():
    fee = TxBuilder.build_fee(5, "uosmo", 100, VALID_ADDRESS)
    assert fee.granter == VALID_ADDRESS


def test_build_fee_rejects_bad_granter():
    with pytest.raises(DaemonError):
        TxBuilder.build_fee(5, "uosmo", 100, BAD_CHECKSUM_ADDRESS)


@pytest.mark.parametrize("denom", ["", "ab", "1abc", "u osmo"])
def test_build_fee_rejects_bad_denom(denom):
    with pytest.raises(DaemonError):
        TxBuilder.build_fee(5, denom, 100, None)


@pytest.mark.asyncio
async def test_simulate_uses_account_sequence():
    signer = FakeSigner(gas=777)
    builder = make_builder()
    assert await builder.simulate(signer) == 777
    assert signer.gas_calls[0][1:] == (4, 12)


@pytest.mark.asyncio
async def test_simulate_uses_sequence_override():
    signer = FakeSigner()
    builder = make_builder()
    builder.sequence = 99
    await builder.simulate(signer)
    assert signer.gas_calls[0][1] == 99


@pytest.mark.asyncio
async def test_build_with_predefined_fee_and_gas_skips_simulation():
    signer = FakeSigner()
    builder = make_builder()
    builder.fee_amount = 5000
    builder.gas_limit = 300_000
    raw = await builder.build(signer)
    assert signer.gas_calls == []
    assert raw["fee"].amount == [Coin(5000, "ujuno")]
    assert raw["fee"].gas_limit == 300_000
    assert raw["chain_id"] == "juno-1"
    assert raw["account_number"] == 12


@pytest.mark.asyncio
async def test_build_simulates_and_keeps_gas_limit():
    signer = FakeSigner(gas=150_000)
    builder = make_builder()
    raw = await builder.build(signer)
    expected_gas, expected_fee = get_fee_from_gas(150_000, signer.gas_price())
    assert builder.gas_limit == expected_gas
    assert raw["fee"].gas_limit == expected_gas
    assert raw["fee"].amount[0].amount == expected_fee
    assert builder.fee_amount is None


@pytest.mark.asyncio
async def test_build_rejects_empty_chain_id():
    with pytest.raises(DaemonError):
        await make_builder().build(FakeSigner(chain_id=""))


def test_body_defaults():
    assert Body() == Body(messages=[], memo="", timeout_height=0)