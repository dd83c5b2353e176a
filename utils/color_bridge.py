"""
Format-preserving color state bridge.

One StateBridge per picker widget. The external side reads and writes color
strings (get/set) in whatever format it used last; the widget side only sends
plain RGB updates, which never change the remembered format or the alpha.

ComfyUI executes nodes on a worker thread while routes run on the aiohttp
loop. Each change and its listener calls form one step under a per-bridge
RLock, so listeners see changes in the order they were made and the last
notification always carries the current state.
"""

import math
import threading
from collections.abc import Mapping
from typing import Callable, Optional

from .color_parser import parse_color
from .color_serializer import serialize_state
from .color_types import CanonicalColor, ColorState

Listener = Callable[["StateBridge", ColorState], None]


def coerce_rgb(value) -> Optional[tuple[float, float, float]]:
    """
    Read a widget update as three numbers.

    Args:
        value: {"r": .., "g": .., "b": ..} or an (r, g, b) sequence

    Returns:
        (r, g, b) floats, or None if the value is not a numeric RGB triple
    """
    try:
        if isinstance(value, Mapping):
            channels = (value["r"], value["g"], value["b"])
        elif isinstance(value, str):
            return None
        else:
            channels = tuple(value)
    except (KeyError, TypeError):
        return None

    if len(channels) != 3 or any(isinstance(c, (bool, str)) or c is None for c in channels):
        return None
    try:
        result = tuple(float(c) for c in channels)
    except (TypeError, ValueError, OverflowError):
        return None
    if not all(math.isfinite(c) for c in result):
        return None
    return result


class StateBridge:
    """
    Owns the current (color, format) pair of one picker.

    Usage:
        bridge = StateBridge("rgba(0, 255, 0, 0.5)")
        bridge.update({"r": 10, "g": 20, "b": 30})
        bridge.get()  # "rgba(10, 20, 30, 0.5)"
    """

    def __init__(self, value=None, key: Optional[str] = None):
        self.key = key
        self._lock = threading.Lock()
        self._change_lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._state = parse_color(value)
        # Last widget string a node executed with
        self.executed_value = value

    @property
    def state(self) -> ColorState:
        """Current state (immutable snapshot, safe to hand to a renderer)."""
        with self._lock:
            return self._state

    @property
    def color(self) -> CanonicalColor:
        return self.state.color

    def get(self) -> str:
        """Current color serialized in the remembered format."""
        return serialize_state(self.state)

    def set(self, value) -> ColorState:
        """Replace color and format from any supported input. Invalid input resets to black/hex."""
        new_state = parse_color(value)
        with self._change_lock:
            with self._lock:
                self._state = new_state
            self._notify(new_state)
        return new_state

    def update(self, rgb) -> ColorState:
        """
        Apply a widget change (plain r/g/b, no alpha or format).

        Args:
            rgb: Mapping with r/g/b keys, or an (r, g, b) sequence

        Returns:
            New state. Alpha and format are kept from the current state.
            A malformed update is ignored and the current state returned.
        """
        channels = coerce_rgb(rgb)
        if channels is None:
            return self.state
        r, g, b = channels

        with self._change_lock:
            with self._lock:
                new_state = ColorState(self._state.color.with_rgb(r, g, b), self._state.format)
                self._state = new_state
            self._notify(new_state)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self, state: ColorState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self, state)
            except Exception as e:
                print(f"[ComfyTint] Color listener failed for {self.key}: {e}")


class BridgeRegistry:
    """Live bridges keyed by picker node id."""

    def __init__(self):
        self._lock = threading.Lock()
        self._bridges: dict[str, StateBridge] = {}
        self._listeners: list[Listener] = []

    def open(self, key, value=None) -> tuple[StateBridge, bool]:
        """
        Get the bridge for key, creating it from value if missing.

        Returns:
            (bridge, created)
        """
        key = str(key)
        with self._lock:
            bridge = self._bridges.get(key)
            if bridge is not None:
                return bridge, False
            bridge = StateBridge(value, key=key)
            for listener in self._listeners:
                bridge.subscribe(listener)
            self._bridges[key] = bridge
            return bridge, True

    def get(self, key) -> Optional[StateBridge]:
        with self._lock:
            return self._bridges.get(str(key))

    def close(self, key) -> bool:
        """Tear down a bridge. Returns False if it did not exist."""
        with self._lock:
            return self._bridges.pop(str(key), None) is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Attach a listener to every current and future bridge. Returns a function that detaches it."""
        with self._lock:
            self._listeners.append(listener)
            bridges = list(self._bridges.values())
        for bridge in bridges:
            bridge.subscribe(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
            bridges = list(self._bridges.values())
        for bridge in bridges:
            bridge.unsubscribe(listener)

    def clear(self) -> None:
        """Drop all bridges and registry listeners."""
        with self._lock:
            self._bridges.clear()
            self._listeners.clear()

    def __contains__(self, key) -> bool:
        with self._lock:
            return str(key) in self._bridges

    def __len__(self) -> int:
        with self._lock:
            return len(self._bridges)


# Shared by nodes and API routes
bridges = BridgeRegistry()
