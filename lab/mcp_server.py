import json

from fastmcp import FastMCP

from lab.codec import build_query, encode_value as encode_value_bytes
from lab.descriptors import FieldDescriptor, QueryDescriptor, from_hex, to_hex
from lab.errors import CodecError
from lab.format import describe_report
from lab.networks import default_contract, network_name, parse_chain_id

mcp = FastMCP(
    name="Oracle Lab",
    instructions=(
        "Tools for preparing oracle lab reports:\n"
        "  • build_query_id: ABI-encode a query type and typed arguments into query data "
        "and its keccak256 query id\n"
        "  • encode_value / decode_value: ABI-encode a reported value tuple, or decode raw "
        "value bytes back into readable values\n"
        "Fields are objects {type, value, scale?}; type is one of string, uint256, int256, "
        "bool, address, bytes32, bytes. scale expands decimal strings to fixed-point integers."
    )
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _fields(fields):
    if isinstance(fields, str):
        fields = json.loads(fields)
    return tuple(FieldDescriptor.from_dict(f) for f in fields or [])


def _error(e: CodecError) -> dict:
    return {"error": e.kind, "detail": str(e)}


def query_id_result(query_type, args):
    try:
        artifact = build_query(QueryDescriptor(query_type, _fields(args)))
    except CodecError as e:
        return _error(e)
    return {"query_type": query_type, **artifact.to_dict()}


def encoded_value_result(values):
    try:
        encoded = encode_value_bytes(_fields(values))
    except CodecError as e:
        return _error(e)
    return {"encoded_value": to_hex(encoded)}


def decoded_value_result(raw, values):
    try:
        data = from_hex(raw)
    except ValueError:
        return {"error": "DecodeError", "detail": f"{raw!r} is not hex"}
    return describe_report(data, _fields(values))


def network_result(chain_id):
    cid = parse_chain_id(chain_id)
    return {"chain_id": cid, "name": network_name(cid), "lab_contract": default_contract(cid)}


# ══════════════════════════════════════════════════════════════════════════════
# Codec Tools
# ══════════════════════════════════════════════════════════════════════════════

@mcp.tool()
def build_query_id(query_type: str, args: list) -> dict:
    """Build the query data and query id for a query type and its arguments.
    Example: query_type="SpotPrice", args=[{"type": "string", "value": "eth"},
    {"type": "string", "value": "usd"}]. Use args=[] for a query with no arguments."""
    return query_id_result(query_type, args)


@mcp.tool()
def encode_value(values: list) -> dict:
    """ABI-encode a reported value tuple. Example: [{"type": "uint256",
    "value": "2100", "scale": 18}] encodes $2100 with 18 decimals."""
    return encoded_value_result(values)


@mcp.tool()
def decode_value(raw: str, values: list) -> dict:
    """Decode raw 0x-hex value bytes using the value types (and scales) they were
    encoded with. Returns decoded text, or an error if the bytes do not match."""
    return decoded_value_result(raw, values)


@mcp.tool()
def lookup_network(chain_id: str) -> dict:
    """Look up a chain id (decimal or 0x-hex): network name and the known
    lab contract deployment on it, if any."""
    return network_result(chain_id)


if __name__ == "__main__":
    mcp.run()
