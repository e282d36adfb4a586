"""Key-combo registry primitives and key-token helpers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

ENTER_KEYS = ("ENTER_CR", "ENTER_LF")


def is_enter(key: str) -> bool:
    return key in ENTER_KEYS


def is_printable(key: str) -> bool:
    """Return whether ``key`` is a single typed character rather than a named token."""
    return len(key) == 1 and key.isprintable()


@dataclass(frozen=True)
class KeyComboBinding:
    """Key tokens that all trigger the same viewer action."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small exact-match key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Bind every combo of ``binding``; later bindings replace earlier ones."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Bind several bindings in order and return ``self``."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def __contains__(self, key: object) -> bool:
        return key in self._handlers

    def dispatch(self, key: str) -> bool | None:
        """Invoke bound handler for ``key``; ``None`` when nothing is bound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()
