"""
Selection Coordinator

Holds the single "currently selected forecast point" shared by the map,
timeline and charts. Consumers register callbacks and are notified
synchronously on every successful change.
"""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


SelectionListener = Callable[[Optional[int]], None]


class SelectionCoordinator:
    """
    Two-state machine: no selection (index None) or Selected(index).

    Usage:
        selection = SelectionCoordinator()
        selection.reset(len(points))
        unsubscribe = selection.subscribe(lambda i: print(i))
        selection.select(3)
    """

    def __init__(self, point_count: int = 0):
        self._point_count = point_count
        self._selected_index: Optional[int] = None
        self._listeners: List[SelectionListener] = []

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected_index

    @property
    def point_count(self) -> int:
        return self._point_count

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def select(self, index: int) -> bool:
        """
        Select a forecast point.

        Out-of-range indices are ignored, not an error.

        Returns:
            True if the selection was applied
        """
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if not (0 <= index < self._point_count):
            logger.debug(
                f"Ignoring selection {index}, {self._point_count} points available"
            )
            return False

        self._set(index)
        return True

    def clear(self) -> None:
        """Drop the current selection."""
        self._set(None)

    def reset(self, point_count: int) -> None:
        """New generation: adopt the new point count and clear the selection."""
        self._point_count = point_count
        self._set(None)

    def _set(self, index: Optional[int]) -> None:
        self._selected_index = index
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(index)
