"""In-memory store for the "copied" and "cut" selection sets."""

import threading
from collections.abc import Iterable
from enum import StrEnum


class Selection(StrEnum):
    """Name of a selection set."""

    COPIED = "copied"
    CUT = "cut"


class SelectionStore:
    """Thread-safe holder of the two selection sets.

    Each set has its own lock, so work on "copied" never waits on "cut".
    Sets are stored as frozensets and swapped wholesale, so a snapshot is
    always a complete pre- or post-replace value.
    """

    def __init__(self) -> None:
        """Initialize both sets empty."""
        self._sets: dict[Selection, frozenset[str]] = {Selection.COPIED: frozenset(), Selection.CUT: frozenset()}
        self._locks: dict[Selection, threading.Lock] = {Selection.COPIED: threading.Lock(), Selection.CUT: threading.Lock()}

    def replace(self, which: Selection, paths: Iterable[str]) -> None:
        """Discard the named set and install ``paths`` in its place."""
        new_set = frozenset(paths)
        with self._locks[which]:
            self._sets[which] = new_set

    def clear(self) -> None:
        """Empty both sets."""
        # Fixed acquisition order: copied, then cut
        with self._locks[Selection.COPIED], self._locks[Selection.CUT]:
            self._sets[Selection.COPIED] = frozenset()
            self._sets[Selection.CUT] = frozenset()

    def snapshot(self, which: Selection) -> frozenset[str]:
        """Return the current contents of the named set."""
        with self._locks[which]:
            return self._sets[which]
