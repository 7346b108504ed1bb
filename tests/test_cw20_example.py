import base64

import pytest

from cworch.contract import ContractAttribute, Response, from_json_binary
from cworch.cw20_example import (
    Balance,
    BalanceResponse,
    ExecuteMsg,
    Mint,
    Minter,
    QueryMsg,
    Send,
    base_execute,
    execute,
    instantiate,
    migrate,
    minter_execute,
    query,
)

PAYLOAD = base64.b64decode("cXNk")


def test_instantiate_attribute():
    assert instantiate(None).attributes == [ContractAttribute("action", "instantiate")]


def test_wrap_execute_messages():
    mint = Mint("nicoco", 150_100)
    send = Send("nicoco", 150_100, PAYLOAD)
    assert ExecuteMsg.wrap(mint) == ExecuteMsg("minting", mint)
    assert ExecuteMsg.wrap(send) == ExecuteMsg("base", send)


def test_wrap_is_idempotent():
    wrapped = ExecuteMsg.wrap(Mint("nicoco", 1))
    assert ExecuteMsg.wrap(wrapped) is wrapped
    q = QueryMsg.wrap(Minter())
    assert QueryMsg.wrap(q) is q


def test_wrap_query_messages():
    assert QueryMsg.wrap(Minter()).variant == "minting"
    assert QueryMsg.wrap(Balance("nicoco")).variant == "base"


def test_wrap_rejects_foreign_messages():
    with pytest.raises(TypeError):
        ExecuteMsg.wrap(Minter())
    with pytest.raises(TypeError):
        QueryMsg.wrap(Mint("nicoco", 1))


def test_variant_must_match_message():
    with pytest.raises(TypeError):
        ExecuteMsg("base", Mint("nicoco", 1))
    with pytest.raises(TypeError):
        QueryMsg("minting", Balance("nicoco"))


def test_execute_entry_points_return_empty_response():
    assert execute(Mint("nicoco", 150_100)) == Response()
    assert execute(ExecuteMsg.wrap(Send("nicoco", 150_100, PAYLOAD))) == Response()
    assert minter_execute(Mint("nicoco", 150_100)) == Response()
    assert base_execute(Send("nicoco", 150_100, PAYLOAD)) == Response()


def test_split_entry_points_reject_other_half():
    with pytest.raises(TypeError):
        minter_execute(Send("nicoco", 1, PAYLOAD))
    with pytest.raises(TypeError):
        base_execute(Mint("nicoco", 1))


def test_query_minter():
    assert from_json_binary(query(Minter()))["minter"] == "minter"


def test_query_balance():
    result = from_json_binary(query(QueryMsg.wrap(Balance("nicoco"))))
    assert int(result["balance"]) == 167
    assert result == {"balance": "167"}


def test_amount_validation():
    with pytest.raises(ValueError):
        Mint("nicoco", -1)
    with pytest.raises(ValueError):
        Send("nicoco", 1 << 128, PAYLOAD)
    with pytest.raises(ValueError):
        BalanceResponse(-5)


def test_send_payload_kept_as_bytes():
    send = Send("nicoco", 1, bytearray(PAYLOAD))
    assert send.msg == PAYLOAD


def test_migrate_returns_empty_response():
    assert migrate(None) == Response()