import io
import struct
from unittest import mock

import pytest

from legacy_apns import FeedbackClient, FeedbackElement, feedback_connect
from legacy_apns.feedback import parse_feedback


def record(timestamp, token_byte):
    return struct.pack("!IH32s", timestamp, 32, bytes([token_byte]) * 32)


def test_two_records():
    stream = io.BytesIO(record(100, 0xaa) + record(200, 0xbb))
    elements = list(parse_feedback(stream))
    assert elements == [FeedbackElement(100, "aa" * 32),
                        FeedbackElement(200, "bb" * 32)]


def test_partial_trailing_record():
    stream = io.BytesIO(record(100, 0xaa) + record(200, 0xbb) + b"\x01" * 10)
    elements = list(parse_feedback(stream))
    assert [e.timestamp for e in elements] == [100, 200]


def test_empty_stream():
    assert list(parse_feedback(io.BytesIO())) == []


def test_token_length_not_validated():
    data = struct.pack("!IH32s", 7, 0, b"\xcc" * 32)
    elements = list(parse_feedback(io.BytesIO(data)))
    assert elements == [FeedbackElement(7, "cc" * 32)]


def test_read_error_ends_stream():
    stream = mock.MagicMock()
    stream.read.side_effect = [record(1, 0xaa), ConnectionResetError()]
    elements = list(parse_feedback(stream))
    assert len(elements) == 1


def test_stream_is_drained_once():
    stream = io.BytesIO(record(1, 0xaa))
    elements = parse_feedback(stream)
    assert len(list(elements)) == 1
    assert list(elements) == []


@pytest.fixture
def feedback_connection():
    with mock.patch("legacy_apns.connection.create_ssl_context"), \
            mock.patch("legacy_apns.connection.open_connection") as open_connection:
        connection = mock.MagicMock()
        connection.closed = False
        connection.read.side_effect = io.BytesIO(record(300, 0xee)).read
        open_connection.return_value = connection
        yield open_connection


def test_fetch_all(feedback_connection):
    client = FeedbackClient("some.crt", "some.key")
    elements = client.fetch_all()
    assert elements == [FeedbackElement(300, "ee" * 32)]
    assert feedback_connection.call_args[0][0] == ("feedback.push.apple.com", 2196)
    assert not client.connected
    feedback_connection.return_value.close.assert_called_once_with()


def test_feedback_connect_sandbox(feedback_connection):
    client = feedback_connect("some.crt", "some.key", sandbox=True)
    assert client.connected
    assert feedback_connection.call_args[0][0] == (
        "feedback.sandbox.push.apple.com", 2196)
