"""
APNs binary protocol related methods & constants

https://developer.apple.com/library/ios/
documentation/NetworkingInternet/Conceptual/RemoteNotificationsPG/Chapters/
LegacyFormat.html
"""
import enum
import secrets
import struct
import time
from collections import namedtuple

from .errors import (FrameTooLarge, InvalidIdentifier, InvalidTokenFormat,
                     PayloadEncodeError)

NOTIFICATION_COMMAND = 2

# |COMMAND|FRAME-LEN|{token}|{payload}|{id:4}|{expiration:4}|{priority:1}
FRAME_HEADER_FORMAT = "!BI"
ITEM_HEADER_FORMAT = "!BH"
IDENTIFIER_FORMAT = "!I"
EXPIRATION_FORMAT = "!I"
PRIORITY_FORMAT = "!B"

ERROR_FORMAT = "!BBI"
ERROR_RESPONSE_LENGTH = struct.calcsize(ERROR_FORMAT)

# timestamp, token length, token
FEEDBACK_FORMAT = "!IH32s"
FEEDBACK_RECORD_LENGTH = struct.calcsize(FEEDBACK_FORMAT)

MAX_ITEM_LENGTH = 0xFFFF
MAX_IDENTIFIER = 0xFFFFFFFF
TOKEN_LENGTH = 16
EXPIRATION_DELTA = 86400
PRIORITY_IMMEDIATE = 10


class ItemId(enum.IntEnum):
    device_token = 1
    payload = 2
    identifier = 3
    expiration = 4
    priority = 5


ErrorResponse = namedtuple('ErrorResponse', ['command', 'status', 'identifier'])


def new_identifier() -> int:
    return secrets.randbits(32)


def expiration_time(now=None) -> int:
    if now is None:
        now = time.time()
    return int(now) + EXPIRATION_DELTA


def pack_item(item_id: int, value: bytes) -> bytes:
    if len(value) > MAX_ITEM_LENGTH:
        raise FrameTooLarge(item_id, len(value))
    return struct.pack(ITEM_HEADER_FORMAT, item_id, len(value)) + value


def build_frame(payload: bytes, token: bytes, *, identifier=None,
                expiration=None, priority=PRIORITY_IMMEDIATE) -> bytes:
    """
    Pack a command 2 notification frame.

    `payload` is the serialized JSON body and `token` the binary device
    token. Items always go out in the order the gateway expects them:
    token, payload, identifier, expiration, priority.
    """
    if not payload:
        raise PayloadEncodeError("Refusing to send an empty payload")
    # oversized tokens are reported by pack_item
    if len(token) != TOKEN_LENGTH and len(token) <= MAX_ITEM_LENGTH:
        raise InvalidTokenFormat(token)
    if identifier is None:
        identifier = new_identifier()
    elif not 0 <= identifier <= MAX_IDENTIFIER:
        raise InvalidIdentifier(identifier)
    if expiration is None:
        expiration = expiration_time()
    items = b"".join([
        pack_item(ItemId.device_token, token),
        pack_item(ItemId.payload, payload),
        pack_item(ItemId.identifier, struct.pack(IDENTIFIER_FORMAT, identifier)),
        pack_item(ItemId.expiration, struct.pack(EXPIRATION_FORMAT, expiration)),
        pack_item(ItemId.priority, struct.pack(PRIORITY_FORMAT, priority)),
    ])
    return struct.pack(FRAME_HEADER_FORMAT, NOTIFICATION_COMMAND, len(items)) + items


def unpack_error_response(data: bytes) -> ErrorResponse:
    return ErrorResponse(*struct.unpack(ERROR_FORMAT, data))
