# lab/errors.py
"""
Codec error kinds. Every failure in normalize/encode/decode raises one of
these synchronously; nothing is stored until an operation completes.
"""


class CodecError(ValueError):
    """Base class for all codec failures."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidNumericLiteral(CodecError):
    pass


class InvalidScale(CodecError):
    pass


class UnsupportedType(CodecError):
    pass


class InvalidValueLiteral(CodecError):
    pass


class DecodeError(CodecError):
    pass


class MissingTypeInfo(CodecError):
    pass
