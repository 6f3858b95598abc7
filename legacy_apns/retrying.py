import time


class RetryPolicy:
    """
    Bounded attempt budget for the notification send path.

    ``attempts()`` yields attempt numbers starting from 1. Between attempts it
    sleeps ``backoff`` seconds, multiplying the delay by ``backoff_factor``
    every time. With the default ``backoff=0`` retries happen immediately.
    """

    def __init__(self, max_attempts=3, *, backoff=0.0, backoff_factor=2.0,
                 sleep=time.sleep):
        if max_attempts < 1:
            raise ValueError("max_attempts should be at least 1")
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.backoff_factor = backoff_factor
        self._sleep = sleep

    def attempts(self):
        resend_timeout = self.backoff
        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1 and resend_timeout > 0:
                self._sleep(resend_timeout)
                resend_timeout *= self.backoff_factor
            yield attempt

    def __repr__(self):
        return "RetryPolicy(max_attempts={}, backoff={}, backoff_factor={})".format(
            self.max_attempts, self.backoff, self.backoff_factor)


DEFAULT_RETRY_POLICY = RetryPolicy()
