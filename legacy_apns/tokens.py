"""
Device token conversions

Tokens travel as 32 hex characters and are sent to the gateway as 16 bytes,
grouped into big-endian 32-bit words. The reverse direction renders each word
without zero padding, which is what the legacy gateway tooling expects.
"""
import re
import struct

from .errors import InvalidTokenFormat

TOKEN_HEX_LENGTH = 32
TOKEN_BINARY_LENGTHS = (16, 32)
WORD_HEX_LENGTH = 8
WORD_FORMAT = "!I"

_TOKEN_RE = re.compile(r"[0-9a-fA-F]{%d}" % TOKEN_HEX_LENGTH)


def validate_token(token: str) -> str:
    if not isinstance(token, str) or not _TOKEN_RE.fullmatch(token):
        raise InvalidTokenFormat(token)
    return token.lower()


def hex_to_binary(token: str) -> bytes:
    token = validate_token(token)
    words = [token[i:i + WORD_HEX_LENGTH]
             for i in range(0, TOKEN_HEX_LENGTH, WORD_HEX_LENGTH)]
    return b"".join(struct.pack(WORD_FORMAT, int(word, 16)) for word in words)


def binary_to_hex(data: bytes, padded: bool = False) -> str:
    if len(data) not in TOKEN_BINARY_LENGTHS:
        raise InvalidTokenFormat(data)
    words = struct.unpack("!{}I".format(len(data) // 4), data)
    word_format = "{:08x}" if padded else "{:x}"
    return "".join(word_format.format(word) for word in words)


__all__ = ["validate_token", "hex_to_binary", "binary_to_hex"]
