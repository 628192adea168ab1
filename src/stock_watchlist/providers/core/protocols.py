"""Protocols for market data providers."""
from typing import Protocol


class PollingStreamable(Protocol):
    """Protocol for providers that use stream_by_polling.

    Must expose a mutable streaming flag so the polling loop can be stopped
    when the client disconnects or close() is called.
    """

    @property
    def streaming(self) -> bool: ...

    @streaming.setter
    def streaming(self, value: bool) -> None: ...
