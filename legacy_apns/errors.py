ERROR_DESCRIPTIONS = {
    0: "No errors encountered",
    1: "Processing error",
    2: "Missing device token",
    3: "Missing topic",
    4: "Missing payload",
    5: "Invalid token size",
    6: "Invalid topic size",
    7: "Invalid payload size",
    8: "Invalid token",
    10: "Shutdown",
    255: "None (unknown)",
}


class ApnsBaseError(Exception):
    pass


class InvalidTokenFormat(ApnsBaseError, ValueError):
    def __init__(self, token):
        super().__init__("Invalid device token: {!r}".format(token))
        self.token = token


class PayloadEncodeError(ApnsBaseError):
    pass


class InvalidIdentifier(ApnsBaseError, ValueError):
    def __init__(self, identifier):
        super().__init__("Notification identifier {!r} does not fit into "
                         "32 bits".format(identifier))
        self.identifier = identifier


class FrameTooLarge(ApnsBaseError):
    def __init__(self, item_id, length):
        super().__init__("Item {} is {} bytes long, does not fit "
                         "into frame".format(item_id, length))
        self.item_id = item_id
        self.length = length


class TLSConfigError(ApnsBaseError):
    pass


class ConnectError(ApnsBaseError):
    def __init__(self, address, reason=None):
        super().__init__("Could not connect to {}:{}: {}".format(
            address[0], address[1], reason))
        self.address = address
        self.reason = reason


class DNSError(ConnectError):
    pass


class ApnsError(ApnsBaseError):
    def __init__(self, status, identifier):
        super().__init__()
        self.status = status
        self.identifier = identifier

    @property
    def description(self):
        return ERROR_DESCRIPTIONS.get(self.status, "Unknown status")

    def __repr__(self):
        return "ApnsError(status={}, identifier={})".format(
            self.status, self.identifier)

    def __str__(self):
        return "ApnsError({}: {})".format(self.status, self.description)

    def message_was_sent(self):
        # 10 - shutdown, notification with this id was delivered
        return self.status == 10


class ApnsDisconnectError(ApnsBaseError):
    def __init__(self, reason, identifier=None, attempts=0):
        super().__init__("Gave up after {} attempt(s): {}".format(
            attempts, reason))
        self.reason = reason
        self.identifier = identifier
        self.attempts = attempts
