# lab/networks.py
"""
Static network tables: chain id -> display name, and the known lab contract
deployments used for the reverse "which network is this contract on" lookup.
"""

NETWORK_NAMES = {
    1: "MAINNET",
    11155111: "SEPOLIA",
    137: "POLYGON",
    42161: "ARBITRUM",
    10: "OPTIMISM",
    8453: "BASE",
    84532: "BASE SEPOLIA",
    56: "BSC",
    43114: "AVALANCHE",
    250: "FANTOM",
    31337: "HARDHAT",
    1337: "LOCALHOST",
}

LAB_CONTRACT_ADDRESSES = {
    11155111: "0x9825DA98095A56a442507288F6dcbe302a59d52C",  # Sepolia
    84532: "0x145E61B9D7649A4686a010E22f59D375fc0FC797",     # Base Sepolia
}


def network_name(chain_id) -> str:
    if chain_id is None:
        return "UNKNOWN"
    return NETWORK_NAMES.get(chain_id, f"CHAIN {chain_id}")


def has_known_contract(chain_id) -> bool:
    return chain_id in LAB_CONTRACT_ADDRESSES


def default_contract(chain_id):
    return LAB_CONTRACT_ADDRESSES.get(chain_id)


def contract_network_id(address):
    if not address:
        return None
    for chain_id, known in LAB_CONTRACT_ADDRESSES.items():
        if known.lower() == address.lower():
            return chain_id
    return None


def is_network_mismatch(chain_id, address) -> bool:
    if not address or chain_id is None:
        return False
    contract_chain = contract_network_id(address)
    if contract_chain is None:
        return False
    return contract_chain != chain_id


def parse_chain_id(value):
    """Accept an int, a decimal string or a 0x-hex string; None if unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        try:
            return int(s, 16) if s.lower().startswith("0x") else int(s, 10)
        except ValueError:
            return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
