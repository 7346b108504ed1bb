"""Errors raised while building, broadcasting and reading transactions."""

from __future__ import annotations


class DaemonError(Exception):
    """Base class for every error raised by the daemon layer."""


class TxFailed(DaemonError):
    """A transaction was included but reported a non-zero result code."""

    def __init__(self, code, reason):
        self.code = int(code)
        self.reason = str(reason)
        super().__init__(f"tx failed: {self.reason} with code {self.code}")


class InsufficientFee(DaemonError):
    """The node rejected a transaction and no usable fee could be suggested."""

    def __init__(self, raw_log):
        self.raw_log = str(raw_log)
        super().__init__(f"insufficient fee: {self.raw_log}")


class DaemonStdError(DaemonError):
    """A generic failure, such as a value that could not be parsed."""