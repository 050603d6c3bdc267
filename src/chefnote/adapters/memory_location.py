"""In-memory location bar with browser-like history."""

from collections.abc import Callable
from dataclasses import dataclass, field

from chefnote.client.router import ROOT_TOKEN, LocationBar


@dataclass
class InMemoryLocationBar(LocationBar):
    """History stack of hash tokens.

    ``push``/``replace`` behave like programmatic history writes and do not
    notify subscribers; ``visit``/``back``/``forward`` behave like user
    navigation and do.
    """

    entries: list[str] = field(default_factory=lambda: [ROOT_TOKEN])
    index: int = 0
    _subscribers: list[Callable[[str], None]] = field(default_factory=list)

    @property
    def token(self) -> str:
        return self.entries[self.index]

    def push(self, token: str) -> None:
        del self.entries[self.index + 1 :]
        self.entries.append(token)
        self.index += 1

    def replace(self, token: str) -> None:
        self.entries[self.index] = token

    def subscribe(self, callback: Callable[[str], None]) -> None:
        self._subscribers.append(callback)

    def visit(self, token: str) -> None:
        """Simulate the user typing or following a link to a token."""
        self.push(token)
        self._notify()

    def back(self) -> None:
        """Go one entry back, if possible."""
        if self.index > 0:
            self.index -= 1
            self._notify()

    def forward(self) -> None:
        """Go one entry forward, if possible."""
        if self.index < len(self.entries) - 1:
            self.index += 1
            self._notify()

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self.token)
