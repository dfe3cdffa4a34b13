# lab/codec.py
"""
Tuple Encoder / Decoder and Query Identifier Derivation

Encoding follows the contract ABI tuple rules (eth_abi) and the identifier
is keccak256 over the combined (query type, args) encoding, so results match
what the lab contract computes on-chain byte-for-byte.

    args_encoding     = encode(arg types, normalized arg values)
    combined_encoding = encode(["string", "bytes"], [query_type, args_encoding])
    identifier        = keccak256(combined_encoding)

Every function here is pure.
"""

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError, EncodingError
from web3 import Web3

from lab.descriptors import (
    EncodedArtifact,
    PRIMITIVE_TYPES,
    QueryDescriptor,
    WORD_SIZE,
)
from lab.errors import DecodeError, InvalidValueLiteral, MissingTypeInfo, UnsupportedType
from lab.normalize import normalize_descriptor

QUERY_DATA_TYPES = ("string", "bytes")


def check_types(types) -> list:
    types = list(types)
    for t in types:
        if t not in PRIMITIVE_TYPES:
            raise UnsupportedType(f"unsupported type: {t!r}")
    return types


def encode(types, values) -> bytes:
    types = check_types(types)
    values = list(values)
    if len(types) != len(values):
        raise InvalidValueLiteral(f"{len(types)} types but {len(values)} values")
    if not types:
        return b""
    try:
        return abi_encode(types, values)
    except (EncodingError, UnicodeEncodeError) as e:
        raise InvalidValueLiteral(str(e)) from e


def decode(types, data: bytes) -> tuple:
    types = check_types(types)
    data = bytes(data)
    if len(data) % WORD_SIZE:
        raise DecodeError(f"payload length {len(data)} is not a multiple of {WORD_SIZE}")
    head = WORD_SIZE * len(types)
    if len(data) < head:
        raise DecodeError(f"payload is {len(data)} bytes, {len(types)} fields need at least {head}")
    if not types:
        if data:
            raise DecodeError(f"{len(data)} bytes of payload but no types to decode them")
        return ()
    try:
        values = abi_decode(types, data)
    except (DecodingError, UnicodeDecodeError, OverflowError) as e:
        raise DecodeError(str(e)) from e
    return tuple(
        Web3.to_checksum_address(v) if t == "address" else v
        for t, v in zip(types, values)
    )


def encode_fields(descriptors) -> bytes:
    descriptors = list(descriptors)
    values = [normalize_descriptor(fd) for fd in descriptors]
    return encode([fd.type for fd in descriptors], values)


def encode_query_args(args) -> bytes:
    return encode_fields(args)


def derive_identifier(query_type: str, args_encoding: bytes):
    """Return (combined_encoding, identifier) for a query type and its encoded args."""
    combined = encode(QUERY_DATA_TYPES, [query_type, bytes(args_encoding)])
    return combined, bytes(Web3.keccak(combined))


def build_query(descriptor: QueryDescriptor) -> EncodedArtifact:
    if not descriptor.query_type:
        raise InvalidValueLiteral("query type must not be empty")
    args_encoding = encode_query_args(descriptor.args)
    combined, identifier = derive_identifier(descriptor.query_type, args_encoding)
    return EncodedArtifact(args_encoding, combined, identifier)


def encode_value(descriptors) -> bytes:
    descriptors = list(descriptors)
    if not descriptors:
        raise InvalidValueLiteral("at least one value is required")
    return encode_fields(descriptors)


def decode_value(descriptors, data: bytes):
    """Decode a reported value. Empty data decodes to None."""
    if not data:
        return None
    descriptors = list(descriptors or [])
    if not descriptors:
        raise MissingTypeInfo("no value types configured")
    return decode([fd.type for fd in descriptors], data)
