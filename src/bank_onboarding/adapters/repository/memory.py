"""
In-memory ephemeral store adapter - Implements EphemeralStore protocol.

Process-local dictionary storage, used in tests and for running the
domain without a database.
"""


class InMemoryEphemeralStore:
    """
    Implements EphemeralStore protocol with a dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def put(self, key: str, value: str) -> None:
        self._items[key] = value

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._items)
