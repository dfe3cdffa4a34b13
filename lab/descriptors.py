# lab/descriptors.py
"""
Typed descriptors captured from form input, and the artifacts built from them.
All records are frozen: an edit means building a new descriptor and
regenerating, never patching a previous artifact.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

PRIMITIVE_TYPES = ("string", "uint256", "int256", "bool", "address", "bytes32", "bytes")
INTEGER_TYPES = ("uint256", "int256")

WORD_SIZE = 32
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_BYTES32 = b"\x00" * WORD_SIZE


@dataclass(frozen=True)
class FieldDescriptor:
    type: str
    value: str = ""
    scale: Optional[Union[int, str]] = None

    @classmethod
    def from_dict(cls, d: dict) -> "FieldDescriptor":
        # "decimals" is accepted as an alias for scale
        scale = d.get("scale", d.get("decimals"))
        value = d.get("value", "")
        if isinstance(value, bool):
            value = "true" if value else "false"
        return cls(type=d.get("type", ""), value=str(value), scale=scale)

    def to_dict(self) -> dict:
        d = {"type": self.type, "value": self.value}
        if self.scale is not None:
            d["scale"] = self.scale
        return d


# Reported values use the same shape as query arguments.
ValueDescriptor = FieldDescriptor


@dataclass(frozen=True)
class QueryDescriptor:
    query_type: str
    args: tuple = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, d: dict) -> "QueryDescriptor":
        args = tuple(FieldDescriptor.from_dict(a) for a in d.get("args", []))
        return cls(query_type=d.get("query_type", ""), args=args)

    def to_dict(self) -> dict:
        return {"query_type": self.query_type, "args": [a.to_dict() for a in self.args]}


@dataclass(frozen=True)
class EncodedArtifact:
    args_encoding: bytes
    combined_encoding: bytes
    identifier: bytes

    def to_dict(self) -> dict:
        return {
            "query_data_args": to_hex(self.args_encoding),
            "query_data": to_hex(self.combined_encoding),
            "query_id": to_hex(self.identifier),
        }


@dataclass(frozen=True)
class AggregateReport:
    value: bytes
    timestamp: int
    power: int
    index: Optional[int] = None


def to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def from_hex(text: str) -> bytes:
    """Parse 0x-prefixed (or bare) hex. Raises ValueError on bad input."""
    s = text.strip()
    if s[:2] in ("0x", "0X"):
        s = s[2:]
    if len(s) % 2:
        raise ValueError(f"odd-length hex string: {text!r}")
    return bytes.fromhex(s)
