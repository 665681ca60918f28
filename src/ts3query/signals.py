"""Signal Bus - synchronous pub/sub for adapter observability hooks.

The adapter emits a signal at each step of a connection's life. Listeners are
called in subscription order on the emitting thread; their return values are
ignored and their exceptions are logged, never propagated to the emitter.

Usage:
    signals = SignalBus()
    unsubscribe = signals.subscribe(Signal.COMMAND_FINISHED, on_finished)
    adapter = ServerQueryAdapter(config, signals=signals)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# Listener signature: called with the emitted arguments
SignalCallback = Callable[..., Any]

WILDCARD = "*"


class Signal(str, Enum):
    """Signals emitted by the ServerQuery adapter."""

    CONNECTED = "serverquery.connected"  # (adapter)
    COMMAND_STARTED = "serverquery.command_started"  # (command)
    COMMAND_FINISHED = "serverquery.command_finished"  # (command, reply)
    NOTIFY_EVENT = "serverquery.notify_event"  # (event)
    DISCONNECTED = "serverquery.disconnected"  # (adapter)


def _key(signal: str | Signal) -> str:
    return signal.value if isinstance(signal, Signal) else signal


class SignalBus:
    """Simple signal bus with wildcard subscription support.

    Wildcard listeners receive the signal name as their first argument.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[SignalCallback]] = {}

    def emit(self, signal: str | Signal, *args: Any) -> None:
        """Deliver a signal to all listeners.

        Args:
            signal: Signal name
            *args: Arguments passed through to each listener
        """
        name = _key(signal)

        # Copy lists so listeners may unsubscribe during delivery
        specific_subs = list(self._subscriptions.get(name, []))
        wildcard_subs = list(self._subscriptions.get(WILDCARD, []))

        for callback in specific_subs:
            try:
                callback(*args)
            except Exception:
                logger.exception(f"Error in listener for {name}")

        for callback in wildcard_subs:
            try:
                callback(name, *args)
            except Exception:
                logger.exception(f"Error in wildcard listener for {name}")

    def subscribe(self, signal: str | Signal, callback: SignalCallback) -> Callable[[], None]:
        """Subscribe to a specific signal.

        Returns:
            Unsubscribe function
        """
        return self._subscribe(_key(signal), callback)

    def subscribe_all(self, callback: SignalCallback) -> Callable[[], None]:
        """Subscribe to every signal. The callback receives (name, *args)."""
        return self._subscribe(WILDCARD, callback)

    def _subscribe(self, key: str, callback: SignalCallback) -> Callable[[], None]:
        self._subscriptions.setdefault(key, []).append(callback)

        def unsubscribe() -> None:
            if key in self._subscriptions and callback in self._subscriptions[key]:
                self._subscriptions[key].remove(callback)

        return unsubscribe

    def has_listeners(self, signal: str | Signal) -> bool:
        return bool(self._subscriptions.get(_key(signal)) or self._subscriptions.get(WILDCARD))

    def reset(self) -> None:
        """Drop all subscriptions."""
        self._subscriptions = {}
