"""Subscriber registry used for change and error notifications."""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

P = TypeVar("P")

Unsubscribe = Callable[[], None]


class Notifier(Generic[P]):
    """Calls every registered callback with a payload.

    A failing callback is logged and does not prevent the others from
    being called.
    """

    def __init__(self, name: str) -> None:
        """Initialize the notifier.

        Args:
            name: Name used in log messages.
        """
        self._name = name
        self._callbacks: list[Callable[[P], None]] = []

    def subscribe(self, callback: Callable[[P], None]) -> Unsubscribe:
        """Register a callback.

        Args:
            callback: Function called with the payload on every notify().

        Returns:
            Function removing the registration. Calling it twice is harmless.
        """
        self._callbacks.append(callback)
        logger.debug(
            "Subscribed to %s: %s",
            self._name,
            getattr(callback, "__name__", str(callback)),
        )

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def notify(self, payload: P) -> None:
        """Call every registered callback.

        Args:
            payload: Value passed to each callback.
        """
        # Copy so callbacks may unsubscribe while being notified
        for callback in list(self._callbacks):
            try:
                callback(payload)
            except Exception:
                logger.exception(
                    "Error in %s subscriber %s",
                    self._name,
                    getattr(callback, "__name__", str(callback)),
                )

    def __len__(self) -> int:
        return len(self._callbacks)
