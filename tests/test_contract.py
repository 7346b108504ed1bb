import pytest

from cworch.contract import (
    ContractAttribute,
    ContractEvent,
    Response,
    StdError,
    from_json_binary,
    to_json_binary,
)


def test_string_encodes_as_json_string():
    assert to_json_binary("first query passed") == b'"first query passed"'


def test_bytes_encode_as_number_array():
    assert from_json_binary(to_json_binary(b"\x01\x02")) == [1, 2]


@pytest.mark.parametrize("value", [89, "abc", {"a": [1, 2, None]}, [True, False], None])
def test_round_trip(value):
    assert from_json_binary(to_json_binary(value)) == value


def test_unserializable_raises_std_error():
    with pytest.raises(StdError):
        to_json_binary(object())


def test_invalid_json_raises_std_error():
    with pytest.raises(StdError):
        from_json_binary(b"{not json")


def test_event_add_attribute_chains():
    event = ContractEvent("wasm").add_attribute("action", "instantiate").add_attribute("n", 3)
    assert event.attributes == [
        ContractAttribute("action", "instantiate"),
        ContractAttribute("n", "3"),
    ]


def test_response_add_attribute():
    resp = Response().add_attribute("action", "instantiate")
    assert resp.attributes == [ContractAttribute("action", "instantiate")]


def test_has_event_matches_subset_of_attributes():
    resp = Response().add_event(
        ContractEvent("wasm")
        .add_attribute("_contract_addr", "contract0")
        .add_attribute("action", "first message passed")
    )
    assert resp.has_event(ContractEvent("wasm").add_attribute("action", "first message passed"))
    assert resp.has_event(ContractEvent("wasm"))
    assert not resp.has_event(ContractEvent("wasm").add_attribute("action", "other"))
    assert not resp.has_event(ContractEvent("bank"))


def test_std_error_message():
    err = StdError("migrate endpoint reached but no test implementation")
    assert err.msg == "migrate endpoint reached but no test implementation"