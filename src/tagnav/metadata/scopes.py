"""Per-tag scope state used for tag inheritance.

Each tag is either inactive or active at a level (an indentation width or a
heading level). Keeping the state explicit keeps the open/close transitions
small enough to test on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Union


class _Inactive:
    """Scope closed; the tag is not inherited by following lines."""

    _instance: "_Inactive | None" = None

    def __new__(cls) -> "_Inactive":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "INACTIVE"


INACTIVE = _Inactive()


@dataclass(frozen=True)
class ActiveAt:
    """Scope open at ``level``."""

    level: int


ScopeState = Union[ActiveAt, _Inactive]


class ScopeTracker:
    """Maps tags to their current :data:`ScopeState`.

    A tag that was never opened reports :data:`INACTIVE`.
    """

    def __init__(self) -> None:
        self._states: dict[str, ScopeState] = {}

    def state(self, tag: str) -> ScopeState:
        return self._states.get(tag, INACTIVE)

    def is_active(self, tag: str) -> bool:
        return isinstance(self.state(tag), ActiveAt)

    def open(self, tag: str, level: int) -> None:
        """Open ``tag`` at ``level`` unless it is already active."""
        if not self.is_active(tag):
            self._states[tag] = ActiveAt(level)

    def open_prominent(self, tag: str, level: int) -> None:
        """Open ``tag`` at ``level``, or lower an active level to ``level``.

        An active scope is only replaced by a numerically smaller
        (more prominent) level.
        """
        current = self.state(tag)
        if isinstance(current, ActiveAt) and current.level <= level:
            return
        self._states[tag] = ActiveAt(level)

    def close(self, tag: str) -> None:
        if tag in self._states:
            self._states[tag] = INACTIVE

    def close_where(self, predicate: Callable[[int], bool]) -> list[str]:
        """Close every active tag whose level satisfies ``predicate``.

        Returns:
            Tags that were closed.
        """
        closed = [tag for tag, level in self.active() if predicate(level)]
        for tag in closed:
            self._states[tag] = INACTIVE
        return closed

    def active(self) -> Iterator[tuple[str, int]]:
        """Yield ``(tag, level)`` for active scopes."""
        for tag, state in list(self._states.items()):
            if isinstance(state, ActiveAt):
                yield tag, state.level
