# lab/normalize.py
"""
Field Value Normalizer

Turns a (type, raw string[, scale]) triple from form input into the Python
value the tuple encoder expects.

Scale policy: a decimal literal with more significant fractional digits than
its scale is rejected with InvalidScale. Trailing zeros past the scale are
accepted since they do not change the value.
"""

import re

from eth_utils import is_checksum_address

from lab.descriptors import (
    FieldDescriptor,
    INTEGER_TYPES,
    PRIMITIVE_TYPES,
    WORD_SIZE,
    ZERO_ADDRESS,
    ZERO_BYTES32,
    from_hex,
)
from lab.errors import InvalidNumericLiteral, InvalidScale, InvalidValueLiteral, UnsupportedType

INTEGER_RE = re.compile(r"^-?[0-9]+$")
DECIMAL_RE = re.compile(r"^(-?)([0-9]*)(?:\.([0-9]*))?$")
SCALE_RE = re.compile(r"^[0-9]+$")
ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}\Z")

UINT256_MAX = 2**256 - 1
INT256_MIN = -(2**255)
INT256_MAX = 2**255 - 1

# uint256 max has 78 digits; a larger scale could only ever encode 0.
MAX_DIGITS = len(str(UINT256_MAX))
MAX_SCALE = MAX_DIGITS - 1


def parse_scale(scale) -> int:
    """None, "" and "0" all mean unscaled (0)."""
    if scale is None or scale == "":
        return 0
    if isinstance(scale, bool):
        raise InvalidScale(f"scale must be a non-negative integer, got {scale!r}")
    if isinstance(scale, int):
        n = scale
    else:
        s = str(scale).strip()
        if not SCALE_RE.match(s) or len(s.lstrip("0")) > len(str(MAX_SCALE)):
            raise InvalidScale(f"scale must be an integer from 0 to {MAX_SCALE}, got {scale!r}")
        n = int(s)
    if not 0 <= n <= MAX_SCALE:
        raise InvalidScale(f"scale must be an integer from 0 to {MAX_SCALE}, got {scale!r}")
    return n


def check_range(type_: str, n: int, literal: str) -> int:
    if type_ == "uint256" and not 0 <= n <= UINT256_MAX:
        raise InvalidNumericLiteral(f"{literal!r} is out of range for uint256")
    if type_ == "int256" and not INT256_MIN <= n <= INT256_MAX:
        raise InvalidNumericLiteral(f"{literal!r} is out of range for int256")
    return n


def to_int(type_: str, sign: str, digits: str, literal: str) -> int:
    digits = digits.lstrip("0")
    if len(digits) > MAX_DIGITS:
        raise InvalidNumericLiteral(f"{literal!r} is out of range for {type_}")
    n = int(digits or "0")
    return check_range(type_, -n if sign else n, literal)


def parse_integer(type_: str, raw: str) -> int:
    s = raw.strip()
    if s == "":
        return 0
    if not INTEGER_RE.match(s):
        raise InvalidNumericLiteral(f"{raw!r} is not a base-10 integer")
    sign = "-" if s.startswith("-") else ""
    return to_int(type_, sign, s.lstrip("-"), raw)


def expand_scaled(type_: str, raw: str, scale: int) -> int:
    """Expand a decimal literal to an integer with `scale` fractional digits."""
    s = raw.strip()
    m = DECIMAL_RE.match(s)
    if not m or not (m.group(2) or m.group(3)):
        raise InvalidNumericLiteral(f"{raw!r} is not a decimal number")
    sign, whole, frac = m.group(1), m.group(2) or "0", m.group(3) or ""

    extra = frac[scale:]
    if extra.strip("0"):
        raise InvalidScale(
            f"{raw!r} has {len(frac.rstrip('0'))} fractional digits, scale allows {scale}"
        )
    frac = frac[:scale].ljust(scale, "0")
    return to_int(type_, sign, whole + frac, raw)


def check_address(raw: str) -> str:
    """All-lowercase and all-uppercase hex pass as is; mixed case must be an EIP-55 checksum."""
    if not ADDRESS_RE.match(raw):
        raise InvalidValueLiteral(f"{raw!r} is not a 20-byte hex address")
    digits = raw[2:]
    if digits != digits.lower() and digits != digits.upper() and not is_checksum_address(raw):
        raise InvalidValueLiteral(f"{raw!r} has an invalid EIP-55 checksum")
    return raw


def normalize_field(type_: str, raw="", scale=None):
    if type_ not in PRIMITIVE_TYPES:
        raise UnsupportedType(f"unsupported type: {type_!r}")
    raw = "" if raw is None else str(raw)

    if type_ in INTEGER_TYPES:
        n = parse_scale(scale)
        if n and raw.strip():
            return expand_scaled(type_, raw, n)
        return parse_integer(type_, raw)

    if type_ == "bool":
        return raw == "true"

    if type_ == "address":
        if raw == "":
            return ZERO_ADDRESS
        return check_address(raw)

    if type_ == "bytes32":
        if raw == "":
            return ZERO_BYTES32
        data = _hex_bytes(raw)
        if len(data) != WORD_SIZE:
            raise InvalidValueLiteral(f"bytes32 needs exactly 32 bytes, got {len(data)}")
        return data

    if type_ == "bytes":
        return _hex_bytes(raw) if raw else b""

    return raw


def normalize_descriptor(fd: FieldDescriptor):
    return normalize_field(fd.type, fd.value, fd.scale)


def _hex_bytes(raw: str) -> bytes:
    try:
        return from_hex(raw)
    except ValueError:
        raise InvalidValueLiteral(f"{raw!r} is not a hex byte string") from None
