import enum
import logging
import select
import socket
import ssl
import threading

from .apns_protocol import ERROR_RESPONSE_LENGTH, unpack_error_response
from .errors import (ApnsDisconnectError, ApnsError, ConnectError, DNSError,
                     TLSConfigError)
from .retrying import DEFAULT_RETRY_POLICY

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ConnectionState(enum.Enum):
    disconnected = "disconnected"
    connected = "connected"


def create_ssl_context(cert_file: str, key_file: str = None,
                       ca_file: str = None) -> ssl.SSLContext:
    try:
        context = ssl.create_default_context(cafile=ca_file)
        context.load_cert_chain(cert_file, key_file)
    except (ssl.SSLError, OSError) as exc:
        raise TLSConfigError(
            "Could not load TLS material (cert={!r}, key={!r}, ca={!r}): "
            "{}".format(cert_file, key_file, ca_file, exc)) from exc
    return context


def open_connection(address, ssl_context: ssl.SSLContext, *,
                    timeout=DEFAULT_TIMEOUT) -> 'Connection':
    host, _ = address
    try:
        sock = socket.create_connection(address, timeout=timeout)
    except socket.gaierror as exc:
        raise DNSError(address, exc) from exc
    except OSError as exc:
        raise ConnectError(address, exc) from exc
    try:
        tls_sock = ssl_context.wrap_socket(sock, server_hostname=host)
    except OSError as exc:
        sock.close()
        raise ConnectError(address, exc) from exc
    return Connection(tls_sock)


class Connection:
    def __init__(self, sock):
        self.sock = sock
        self._closed = False
        self._at_eof = False

    @property
    def closed(self) -> bool:
        return self._closed or self._at_eof

    def close(self):
        if self._closed:
            return
        self._closed = True
        self.sock.close()

    def write(self, data: bytes):
        self.sock.sendall(data)

    def read(self, size: int) -> bytes:
        """Read until `size` bytes are collected or the peer closes."""
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self.sock.recv(remaining)
            if not chunk:
                self._at_eof = True
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def read_error_response(self, timeout=0.0):
        """
        Poll for an error-response frame for at most `timeout` seconds.

        Returns None when the gateway has nothing to say, which is the
        normal outcome of a successful delivery.
        """
        if not self.sock.pending():
            readable, _, _ = select.select([self.sock], [], [], timeout)
            if not readable:
                return None
        data = self.read(ERROR_RESPONSE_LENGTH)
        if len(data) < ERROR_RESPONSE_LENGTH:
            # connection has been dropped
            return None
        return unpack_error_response(data)


class ConnectionManager:
    """
    Owns the single TLS connection to one endpoint.

    The connection is opened lazily by ``send`` (or eagerly through
    ``connect``) and replaced whenever a write fails. All operations are
    serialized with a lock, so at most one frame is in flight.
    """

    def __init__(self, cert_file: str, key_file: str = None,
                 ca_file: str = None, *, address, retry_policy=None,
                 timeout=DEFAULT_TIMEOUT, response_timeout=0.0):
        self.cert_file = cert_file
        self.key_file = key_file
        self.ca_file = ca_file
        self.address = address
        self.retry_policy = retry_policy or DEFAULT_RETRY_POLICY
        self.timeout = timeout
        self.response_timeout = response_timeout
        self.reconnects = 0
        self._ssl_context = None
        self._connection = None
        self._lock = threading.Lock()

    @property
    def state(self) -> ConnectionState:
        if self._connection is not None and not self._connection.closed:
            return ConnectionState.connected
        return ConnectionState.disconnected

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.connected

    def _get_ssl_context(self):
        if self._ssl_context is None:
            self._ssl_context = create_ssl_context(
                self.cert_file, self.key_file, self.ca_file)
        return self._ssl_context

    def _connect(self) -> Connection:
        if self.connected:
            return self._connection
        self._discard()
        host, port = self.address
        context = self._get_ssl_context()
        logger.info("Connecting to %s:%s", host, port)
        self._connection = open_connection(
            self.address, context, timeout=self.timeout)
        return self._connection

    def _discard(self):
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def connect(self) -> Connection:
        with self._lock:
            return self._connect()

    def disconnect(self):
        with self._lock:
            self._discard()

    def send(self, frame: bytes, identifier=None):
        """
        Write `frame`, reconnecting after failed writes.

        Returns the gateway's error response as an ApnsError, or None if the
        gateway did not answer. Raises ApnsDisconnectError once the retry
        policy is exhausted.
        """
        host, port = self.address
        with self._lock:
            reason = None
            for attempt in self.retry_policy.attempts():
                if attempt > 1:
                    self.reconnects += 1
                    logger.info("Reconnecting to %s:%s (attempt %d of %d)",
                                host, port, attempt,
                                self.retry_policy.max_attempts)
                try:
                    connection = self._connect()
                    connection.write(frame)
                except ConnectError as exc:
                    reason = exc
                    logger.warning("%s", exc)
                except OSError as exc:
                    reason = exc
                    logger.warning("Sending notification %s to %s:%s failed: %s",
                                   identifier, host, port, exc)
                else:
                    return self._check_error_response(connection)
                self._discard()
            raise ApnsDisconnectError(reason, identifier,
                                      attempts=self.retry_policy.max_attempts)

    def _check_error_response(self, connection: Connection):
        try:
            response = connection.read_error_response(self.response_timeout)
        except OSError as exc:
            logger.warning("Reading error response failed: %s", exc)
            self._discard()
            return None
        if response is None:
            if connection.closed:
                logger.info("Gateway closed the connection")
                self._discard()
            return None
        error = ApnsError(response.status, response.identifier)
        logger.warning("Gateway rejected notification %s: %s",
                       response.identifier, error.description)
        # gateway drops the connection after an error response
        self._discard()
        return error


__all__ = ["Connection", "ConnectionManager", "ConnectionState",
           "create_ssl_context", "open_connection"]
