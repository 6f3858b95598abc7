import logging
import struct
from collections import namedtuple

from .apns_protocol import FEEDBACK_FORMAT, FEEDBACK_RECORD_LENGTH
from .connection import DEFAULT_TIMEOUT, ConnectionManager
from .retrying import RetryPolicy
from .tokens import binary_to_hex

logger = logging.getLogger(__name__)

PRODUCTION_SERVER_ADDR = 'feedback.push.apple.com'
SANDBOX_SERVER_ADDR = 'feedback.sandbox.push.apple.com'
SERVER_PORT = 2196


FeedbackElement = namedtuple('FeedbackElement', ['timestamp', 'token'])


def parse_feedback(stream):
    """
    Yield FeedbackElement records read from `stream` until it runs dry.

    A short read, EOF or I/O error ends the sequence, records decoded so far
    stay valid.
    """
    while True:
        try:
            data = stream.read(FEEDBACK_RECORD_LENGTH)
        except OSError as exc:
            logger.debug("Feedback stream ended with error: %s", exc)
            return
        if not data or len(data) != FEEDBACK_RECORD_LENGTH:
            logger.debug("Feedback stream ended (%d trailing bytes)",
                         len(data or b""))
            return
        timestamp, _, device_token = struct.unpack(FEEDBACK_FORMAT, data)
        yield FeedbackElement(timestamp, binary_to_hex(device_token))


def feedback_connect(cert_file: str, key_file: str = None,
                     ca_file: str = None, *, sandbox=False,
                     timeout=DEFAULT_TIMEOUT):
    client = FeedbackClient(cert_file, key_file, ca_file,
                            sandbox=sandbox, timeout=timeout)
    client.connect()
    return client


class FeedbackClient:
    def __init__(self, cert_file: str, key_file: str = None,
                 ca_file: str = None, *, sandbox=False,
                 timeout=DEFAULT_TIMEOUT):
        host = SANDBOX_SERVER_ADDR if sandbox else PRODUCTION_SERVER_ADDR
        self.sandbox = sandbox
        # feedback reads are never retried
        self._manager = ConnectionManager(
            cert_file, key_file, ca_file, address=(host, SERVER_PORT),
            retry_policy=RetryPolicy(max_attempts=1), timeout=timeout)

    @property
    def connected(self) -> bool:
        return self._manager.connected

    def connect(self):
        self._manager.connect()

    def disconnect(self):
        self._manager.disconnect()

    def fetch_all(self):
        connection = self._manager.connect()
        try:
            elements = list(parse_feedback(connection))
        finally:
            self._manager.disconnect()
        logger.info("Fetched %d feedback record(s)", len(elements))
        return elements


__all__ = ["feedback_connect", "FeedbackClient", "FeedbackElement",
           "parse_feedback"]
