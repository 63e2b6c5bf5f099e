"""
HistoryStack - Linear undo/redo history of complete snapshots.

Each entry is a full, immutable element list. Pushing after an undo
truncates the redo branch. The currently rendered element list always
equals stack[index]; callers re-render after every operation.

The stack is session-local and never persisted.
"""

import logging
from typing import List, Optional

from .elements import Snapshot, EMPTY_SNAPSHOT, make_snapshot
from .errors import StateInvariantViolation

logger = logging.getLogger(__name__)


class HistoryStack:
    """
    Branch-truncating snapshot history.

    Usage:
        history = HistoryStack(initial_snapshot)
        history.push(new_snapshot)
        elements = history.undo() or history.current
    """

    def __init__(self, initial: Snapshot = EMPTY_SNAPSHOT):
        self._stack: List[Snapshot] = [make_snapshot(initial)]
        self._index = 0

    # ==================== State ====================

    @property
    def index(self) -> int:
        return self._checked_index()

    @property
    def current(self) -> Snapshot:
        return self._stack[self._checked_index()]

    @property
    def snapshots(self) -> List[Snapshot]:
        return list(self._stack)

    @property
    def can_undo(self) -> bool:
        return self._checked_index() > 0

    @property
    def can_redo(self) -> bool:
        return self._checked_index() < len(self._stack) - 1

    def __len__(self) -> int:
        return len(self._stack)

    def _checked_index(self) -> int:
        """Return the index, clamping it into range if the invariant was broken."""
        if not self._stack:
            logger.warning(str(StateInvariantViolation("history stack is empty; reseeding")))
            self._stack = [EMPTY_SNAPSHOT]
            self._index = 0
        elif not 0 <= self._index < len(self._stack):
            clamped = max(0, min(self._index, len(self._stack) - 1))
            logger.warning(str(StateInvariantViolation(
                f"history index {self._index} outside [0, {len(self._stack)}); clamped to {clamped}"
            )))
            self._index = clamped
        return self._index

    # ==================== Operations ====================

    def push(self, snapshot: Snapshot):
        """Truncate to [0..index], append snapshot and make it current."""
        index = self._checked_index()
        del self._stack[index + 1:]
        self._stack.append(make_snapshot(snapshot))
        self._index = len(self._stack) - 1

    def undo(self) -> Optional[Snapshot]:
        """Step back one entry. Returns the new current snapshot, or None if at the start."""
        index = self._checked_index()
        if index > 0:
            self._index = index - 1
            return self._stack[self._index]
        return None

    def redo(self) -> Optional[Snapshot]:
        """Step forward one entry. Returns the new current snapshot, or None if at the end."""
        index = self._checked_index()
        if index < len(self._stack) - 1:
            self._index = index + 1
            return self._stack[self._index]
        return None

    def clear(self):
        """Push an empty snapshot (undoable)."""
        self.push(EMPTY_SNAPSHOT)

    def reseed(self, snapshot: Snapshot):
        """Discard all history and start over with a single entry."""
        self._stack = [make_snapshot(snapshot)]
        self._index = 0


__all__ = ['HistoryStack']
