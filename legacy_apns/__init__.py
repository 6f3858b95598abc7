from .client import connect, ApnsClient, SendResult
from .connection import ConnectionManager, ConnectionState
from .errors import (ApnsBaseError, ApnsError, ApnsDisconnectError,
                     ConnectError, DNSError, FrameTooLarge, InvalidIdentifier,
                     InvalidTokenFormat, PayloadEncodeError, TLSConfigError)
from .feedback import feedback_connect, FeedbackClient, FeedbackElement
from .payload import Payload, PayloadAlert
from .retrying import RetryPolicy

__all__ = ['connect', 'ApnsClient', 'SendResult', 'ConnectionManager',
           'ConnectionState', 'ApnsBaseError', 'ApnsError',
           'ApnsDisconnectError', 'ConnectError', 'DNSError', 'FrameTooLarge',
           'InvalidIdentifier', 'InvalidTokenFormat',
           'PayloadEncodeError', 'TLSConfigError',
           'feedback_connect', 'FeedbackClient', 'FeedbackElement', 'Payload',
           'PayloadAlert', 'RetryPolicy']
