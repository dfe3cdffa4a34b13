# lab/format.py
"""
Decoded-value formatter (display only).

Scaled integers are split at the scale boundary with trailing fractional
zeros trimmed, e.g. 2100 * 10**18 at scale 18 renders as "2100.0".
"""

from lab.codec import decode_value
from lab.descriptors import INTEGER_TYPES, to_hex
from lab.errors import CodecError
from lab.normalize import parse_scale


def format_scaled(n: int, scale: int) -> str:
    sign = "-" if n < 0 else ""
    whole, frac = divmod(abs(n), 10**scale)
    frac_str = str(frac).rjust(scale, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{frac_str}"


def format_value(value, descriptor=None) -> str:
    type_ = descriptor.type if descriptor is not None else None
    if type_ in INTEGER_TYPES:
        scale = parse_scale(descriptor.scale)
        if scale:
            return format_scaled(int(value), scale)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    return str(value)


def format_values(values, descriptors) -> str:
    descriptors = list(descriptors)
    parts = [
        format_value(v, descriptors[i] if i < len(descriptors) else None)
        for i, v in enumerate(values)
    ]
    if len(parts) == 1:
        return parts[0]
    return ", ".join(parts)


def describe_report(raw: bytes, descriptors) -> dict:
    """Decode a raw on-chain value for display; failures land in "error"."""
    raw_hex = to_hex(raw) if raw else "0x"
    try:
        decoded = decode_value(descriptors, raw)
        text = None if decoded is None else format_values(decoded, descriptors)
    except CodecError as e:
        return {"decoded": None, "error": f"{e.kind}: {e}", "raw": raw_hex}
    return {"decoded": text, "error": None, "raw": raw_hex}


def shorten(text: str, limit: int = 42) -> str:
    if not text:
        return "N/A"
    return f"{text[:limit]}..." if len(text) > limit else text
