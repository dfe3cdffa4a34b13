"""Shared pytest fixtures: web3 stand-ins for the lab contract collaborator."""

from __future__ import annotations

import pytest

from lab.contract import LabContract
from lab.codec import encode_value
from lab.descriptors import FieldDescriptor

SEPOLIA_LAB = "0x9825DA98095A56a442507288F6dcbe302a59d52C"


class _Call:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def call(self):
        if self.error is not None:
            raise self.error
        return self.result


class _Tx:
    def __init__(self, fn_args):
        self.fn_args = fn_args

    def build_transaction(self, params):
        return {"data": self.fn_args, **params}


class FakeFunctions:
    """Mimics `contract.functions` for the lab ABI, backed by a list of reports."""

    def __init__(self, reports, failing=()):
        # reports: list of (value_bytes, timestamp, power), oldest first
        self.reports = reports
        self.failing = set(failing)
        self.submitted = []

    def getCurrentAggregateData(self, query_id):
        if not self.reports:
            return _Call((b"", 0, 0, 0, 0))
        value, ts, power = self.reports[-1]
        return _Call((value, power, ts, ts, 0))

    def getAggregateValueCount(self, query_id):
        return _Call(len(self.reports))

    def getAggregateByIndex(self, query_id, index):
        if index in self.failing:
            return _Call(error=RuntimeError("execution reverted"))
        return _Call(self.reports[index])

    def updateOracleDataLab(self, query_id, value):
        self.submitted.append((query_id, value))
        return _Tx((query_id, value))


class FakeContract:
    def __init__(self, address, functions):
        self.address = address
        self.functions = functions


class FakeEth:
    def __init__(self, chain_id, status=1):
        self.chain_id = chain_id
        self.status = status
        self.sent = []

    def get_transaction_count(self, address):
        return 7

    def send_raw_transaction(self, raw):
        self.sent.append(raw)
        return b"\xab" * 32

    def wait_for_transaction_receipt(self, tx_hash, timeout=120):
        return {"status": self.status, "blockNumber": 123}


class FakeWeb3:
    def __init__(self, chain_id, status=1):
        self.eth = FakeEth(chain_id, status)


class _Signed:
    def __init__(self, tx):
        self.raw_transaction = repr(sorted(tx.items())).encode()


class FakeAccount:
    address = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

    def sign_transaction(self, tx):
        return _Signed(tx)


def price_value(text: str) -> bytes:
    return encode_value([FieldDescriptor("uint256", text, 18)])


@pytest.fixture
def price_descriptors() -> list:
    return [FieldDescriptor("uint256", "", 18)]


@pytest.fixture
def reports() -> list:
    return [
        (price_value("2000"), 1_700_000_000_000, 10),
        (price_value("2050.5"), 1_700_000_060_000, 12),
        (price_value("2100"), 1_700_000_120_000, 15),
    ]


@pytest.fixture
def functions(reports) -> FakeFunctions:
    return FakeFunctions(reports)


@pytest.fixture
def lab(functions) -> LabContract:
    return LabContract(FakeContract(SEPOLIA_LAB, functions), FakeWeb3(11155111))


@pytest.fixture
def account() -> FakeAccount:
    return FakeAccount()
