from __future__ import annotations

from lab.mcp_server import decoded_value_result, encoded_value_result, network_result, query_id_result

ETH_USD_QUERY_ID = "0x83a7f3d48786ac2667503a61e8c415438ed2922eb86a2906e4ee66d9a2ce4992"


def test_query_id_result() -> None:
    args = [{"type": "string", "value": "eth"}, {"type": "string", "value": "usd"}]
    result = query_id_result("SpotPrice", args)
    assert result["query_id"] == ETH_USD_QUERY_ID
    assert result["query_type"] == "SpotPrice"


def test_query_id_result_accepts_json_text() -> None:
    args = '[{"type": "string", "value": "eth"}, {"type": "string", "value": "usd"}]'
    assert query_id_result("SpotPrice", args)["query_id"] == ETH_USD_QUERY_ID


def test_encode_and_decode() -> None:
    values = [{"type": "uint256", "value": "2100", "decimals": 18}]
    encoded = encoded_value_result(values)["encoded_value"]
    assert decoded_value_result(encoded, values)["decoded"] == "2100.0"


def test_codec_errors_returned_as_results() -> None:
    assert encoded_value_result([])["error"] == "InvalidValueLiteral"
    assert query_id_result("X", [{"type": "uint8", "value": "1"}])["error"] == "UnsupportedType"
    assert decoded_value_result("0xzz", [{"type": "uint256"}])["error"] == "DecodeError"
    assert decoded_value_result("0x" + "00" * 16, [{"type": "uint256"}])["error"].startswith("DecodeError")


def test_network_result() -> None:
    assert network_result("84532") == {
        "chain_id": 84532,
        "name": "BASE SEPOLIA",
        "lab_contract": "0x145E61B9D7649A4686a010E22f59D375fc0FC797",
    }
    assert network_result("nope")["name"] == "UNKNOWN"


def test_unencodable_string_returned_as_error() -> None:
    result = query_id_result("SpotPrice", [{"type": "string", "value": "\ud800"}])
    assert result["error"] == "InvalidValueLiteral"
