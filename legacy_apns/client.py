from collections import namedtuple
from typing import Union

from .apns_protocol import build_frame, new_identifier
from .connection import DEFAULT_TIMEOUT, ConnectionManager
from .payload import Payload
from .tokens import hex_to_binary

PRODUCTION_SERVER_ADDR = 'gateway.push.apple.com'
SANDBOX_SERVER_ADDR = 'gateway.sandbox.push.apple.com'
SERVER_PORT = 2195


SendResult = namedtuple('SendResult', ['identifier', 'error'])


def connect(cert_file: str, key_file: str = None, ca_file: str = None, *,
            sandbox=False, **kwargs):
    client = ApnsClient(cert_file, key_file, ca_file, sandbox=sandbox, **kwargs)
    client.connect()
    return client


class ApnsClient:
    def __init__(self, cert_file: str, key_file: str = None,
                 ca_file: str = None, *, sandbox=False, retry_policy=None,
                 timeout=DEFAULT_TIMEOUT, response_timeout=0.0):
        host = SANDBOX_SERVER_ADDR if sandbox else PRODUCTION_SERVER_ADDR
        self.sandbox = sandbox
        self._manager = ConnectionManager(
            cert_file, key_file, ca_file, address=(host, SERVER_PORT),
            retry_policy=retry_policy, timeout=timeout,
            response_timeout=response_timeout)

    @property
    def connected(self) -> bool:
        return self._manager.connected

    def connect(self):
        self._manager.connect()

    def disconnect(self):
        self._manager.disconnect()

    def send_message(self, message: Union[Payload, str], token: str, *,
                     identifier=None) -> SendResult:
        """
        Send one notification.

        Token, payload and frame are all checked before anything is written.
        The returned SendResult carries the notification identifier and the
        gateway's error response, if it sent one back.
        """
        binary_token = hex_to_binary(token)
        if isinstance(message, Payload):
            payload = message
        else:
            payload = Payload(alert=message)
        data = payload.to_json()
        if identifier is None:
            identifier = new_identifier()
        frame = build_frame(data, binary_token, identifier=identifier)
        error = self._manager.send(frame, identifier)
        return SendResult(identifier, error)


__all__ = ["connect", "ApnsClient", "SendResult"]
