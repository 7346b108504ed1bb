import pytest

from cworch.errors import DaemonError, DaemonStdError, InsufficientFee, TxFailed


def test_tx_failed_keeps_code_and_reason():
    err = TxFailed(13, "out of gas")
    assert err.code == 13
    assert err.reason == "out of gas"
    assert "out of gas" in str(err)
    assert "13" in str(err)


def test_tx_failed_message_carries_sequence_error_text():
    err = TxFailed(32, "incorrect account sequence")
    assert "incorrect account sequence" in str(err)


def test_insufficient_fee_keeps_raw_log():
    log = "insufficient fees; got: 14867ujuno"
    err = InsufficientFee(log)
    assert err.raw_log == log
    assert log in str(err)


@pytest.mark.parametrize(
    "factory, text",
    [
        (lambda: TxFailed(1, "first failure"), "first failure"),
        (lambda: InsufficientFee("fee too low"), "fee too low"),
        (lambda: DaemonStdError("std problem"), "std problem"),
    ],
)
def test_all_errors_are_daemon_errors(factory, text):
    err = factory()
    with pytest.raises(DaemonError, match=text) as excinfo:
        raise err
    assert excinfo.value is err


def test_std_error_message():
    err = DaemonStdError("bad timestamp")
    assert str(err) == "bad timestamp"