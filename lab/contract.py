# lab/contract.py
"""
Lab contract client (web3)

Reads aggregated reports for a query id and submits (query id, encoded value)
pairs. The contract treats both as opaque bytes; decoding happens in
lab.format against the value descriptors.
"""

import logging

from eth_account import Account
from web3 import Web3

from lab.descriptors import AggregateReport, WORD_SIZE, from_hex
from lab.errors import InvalidValueLiteral
from lab.networks import default_contract, network_name

log = logging.getLogger("lab-contract")

_QUERY_ID = {"internalType": "bytes32", "name": "_queryId", "type": "bytes32"}

LAB_ABI = [
    {
        "type": "function",
        "name": "updateOracleDataLab",
        "stateMutability": "nonpayable",
        "inputs": [_QUERY_ID, {"internalType": "bytes", "name": "_value", "type": "bytes"}],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "getCurrentAggregateData",
        "stateMutability": "view",
        "inputs": [_QUERY_ID],
        "outputs": [
            {
                "internalType": "struct AggregateData",
                "name": "",
                "type": "tuple",
                "components": [
                    {"internalType": "bytes", "name": "value", "type": "bytes"},
                    {"internalType": "uint256", "name": "power", "type": "uint256"},
                    {"internalType": "uint256", "name": "aggregateTimestamp", "type": "uint256"},
                    {"internalType": "uint256", "name": "attestationTimestamp", "type": "uint256"},
                    {"internalType": "uint256", "name": "relayTimestamp", "type": "uint256"},
                ],
            }
        ],
    },
    {
        "type": "function",
        "name": "getAggregateValueCount",
        "stateMutability": "view",
        "inputs": [_QUERY_ID],
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "getAggregateByIndex",
        "stateMutability": "view",
        "inputs": [_QUERY_ID, {"internalType": "uint256", "name": "_index", "type": "uint256"}],
        "outputs": [
            {"internalType": "bytes", "name": "value", "type": "bytes"},
            {"internalType": "uint256", "name": "aggregateTimestamp", "type": "uint256"},
            {"internalType": "uint256", "name": "power", "type": "uint256"},
        ],
    },
]


def query_id_bytes(query_id) -> bytes:
    if isinstance(query_id, str):
        try:
            query_id = from_hex(query_id)
        except ValueError:
            raise InvalidValueLiteral(f"{query_id!r} is not a hex query id") from None
    query_id = bytes(query_id)
    if len(query_id) != WORD_SIZE:
        raise InvalidValueLiteral(f"query id must be 32 bytes, got {len(query_id)}")
    return query_id


class LabContract:
    def __init__(self, contract, w3=None):
        self.contract = contract
        self.w3 = w3

    @property
    def address(self) -> str:
        return self.contract.address

    def chain_id(self) -> int:
        return self.w3.eth.chain_id

    def current_aggregate(self, query_id) -> AggregateReport:
        data = self.contract.functions.getCurrentAggregateData(query_id_bytes(query_id)).call()
        value, power, aggregate_ts = data[0], data[1], data[2]
        return AggregateReport(value=bytes(value), timestamp=aggregate_ts, power=power)

    def value_count(self, query_id) -> int:
        return int(self.contract.functions.getAggregateValueCount(query_id_bytes(query_id)).call())

    def aggregate_by_index(self, query_id, index: int) -> AggregateReport:
        value, aggregate_ts, power = self.contract.functions.getAggregateByIndex(
            query_id_bytes(query_id), index
        ).call()[:3]
        return AggregateReport(value=bytes(value), timestamp=aggregate_ts, power=power, index=index)

    def history(self, query_id, limit: int = 5, count=None) -> list:
        """Latest `limit` reports, newest first. Entries whose call fails are skipped."""
        if count is None:
            count = self.value_count(query_id)
        reports = []
        for i in range(min(count, limit)):
            index = count - 1 - i
            try:
                reports.append(self.aggregate_by_index(query_id, index))
            except Exception as e:
                log.warning(f"getAggregateByIndex({index}) failed: {e}")
        return reports

    def submit(self, query_id, encoded_value: bytes, account, timeout: int = 120) -> str:
        """Sign and send updateOracleDataLab, wait for the receipt, return the tx hash."""
        fn = self.contract.functions.updateOracleDataLab(query_id_bytes(query_id), bytes(encoded_value))
        tx = fn.build_transaction({
            "from": account.address,
            "nonce": self.w3.eth.get_transaction_count(account.address),
        })
        signed = account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hex = Web3.to_hex(tx_hash)
        log.info(f"Submitted {tx_hex}, waiting for confirmation...")
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        if receipt["status"] != 1:
            raise RuntimeError(f"transaction {tx_hex} reverted")
        log.info(f"Confirmed {tx_hex} in block {receipt['blockNumber']}")
        return tx_hex


def connect(rpc_url: str, address: str = "") -> LabContract:
    """Build a LabContract over HTTP. Without an address, use the chain's known deployment."""
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    if not address:
        chain_id = w3.eth.chain_id
        address = default_contract(chain_id)
        if not address:
            raise RuntimeError(f"no known lab contract on {network_name(chain_id)}; set LAB_CONTRACT_ADDRESS")
    contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=LAB_ABI)
    return LabContract(contract, w3)


def load_account(private_key: str):
    if not private_key:
        return None
    return Account.from_key(private_key)
