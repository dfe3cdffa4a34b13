"""Display formatting of decoded values."""

from __future__ import annotations

from lab.codec import decode_value, encode_value
from lab.descriptors import FieldDescriptor
from lab.format import describe_report, format_scaled, format_value, format_values, shorten


def test_scaled_price_round_trip() -> None:
    values = [FieldDescriptor("uint256", "2100", "18")]
    decoded = decode_value(values, encode_value(values))
    assert decoded == (2100 * 10**18,)
    assert format_values(decoded, values) == "2100.0"


def test_format_scaled_trims_trailing_zeros() -> None:
    assert format_scaled(2050_500_000, 6) == "2050.5"
    assert format_scaled(125, 2) == "1.25"
    assert format_scaled(5, 3) == "0.005"
    assert format_scaled(0, 4) == "0.0"


def test_format_scaled_negative_keeps_sign_once() -> None:
    assert format_scaled(-15, 1) == "-1.5"
    assert format_scaled(-5, 1) == "-0.5"
    assert format_scaled(-20, 1) == "-2.0"


def test_scenario_d_formatting() -> None:
    values = [FieldDescriptor("uint256", "500", "0"), FieldDescriptor("bool", "true", "0")]
    decoded = decode_value(values, encode_value(values))
    assert [format_value(v, d) for v, d in zip(decoded, values)] == ["500", "true"]
    assert format_values(decoded, values) == "500, true"


def test_natural_forms() -> None:
    assert format_value(False, FieldDescriptor("bool")) == "false"
    assert format_value(b"\xde\xad", FieldDescriptor("bytes")) == "0xdead"
    assert format_value("mystring", FieldDescriptor("string")) == "mystring"
    assert format_value(-3, FieldDescriptor("int256")) == "-3"


def test_multiple_values_comma_joined() -> None:
    values = [
        FieldDescriptor("string", "mystring", "0"),
        FieldDescriptor("uint256", "500", "0"),
        FieldDescriptor("bool", "true", "0"),
    ]
    decoded = decode_value(values, encode_value(values))
    assert format_values(decoded, values) == "mystring, 500, true"


def test_describe_report(price_descriptors) -> None:
    raw = encode_value([FieldDescriptor("uint256", "2100", 18)])
    row = describe_report(raw, price_descriptors)
    assert row["decoded"] == "2100.0"
    assert row["error"] is None
    assert row["raw"] == "0x" + raw.hex()


def test_describe_report_empty_raw(price_descriptors) -> None:
    assert describe_report(b"", price_descriptors) == {"decoded": None, "error": None, "raw": "0x"}


def test_describe_report_no_types() -> None:
    row = describe_report(b"\x00" * 32, [])
    assert row["decoded"] is None
    assert row["error"].startswith("MissingTypeInfo")


def test_describe_report_undecodable(price_descriptors) -> None:
    row = describe_report(b"\x00" * 16, price_descriptors)
    assert row["decoded"] is None
    assert row["error"].startswith("DecodeError")


def test_shorten() -> None:
    text = "0x" + "ab" * 40
    assert shorten(text) == text[:42] + "..."
    assert shorten("0x1234") == "0x1234"
    assert shorten("") == "N/A"


def test_describe_report_out_of_range_scale() -> None:
    raw = encode_value([FieldDescriptor("uint256", "1")])
    row = describe_report(raw, [FieldDescriptor("uint256", "", 500)])
    assert row["decoded"] is None
    assert row["error"].startswith("InvalidScale")
