"""
Tests for SelectionCoordinator.
"""

from app.features.forecast import SelectionCoordinator


class TestSelect:
    """Tests for select/clear/reset transitions."""

    def test_starts_empty(self):
        selection = SelectionCoordinator(point_count=5)
        assert selection.selected_index is None

    def test_select_in_range(self):
        selection = SelectionCoordinator(point_count=5)

        assert selection.select(3) is True
        assert selection.selected_index == 3

    def test_bounds(self):
        selection = SelectionCoordinator(point_count=5)

        assert selection.select(0) is True
        assert selection.select(4) is True
        assert selection.selected_index == 4

    def test_out_of_range_ignored(self):
        """Invalid index keeps the previous selection."""
        selection = SelectionCoordinator(point_count=5)
        selection.select(2)

        assert selection.select(5) is False
        assert selection.select(-1) is False
        assert selection.selected_index == 2

    def test_non_int_ignored(self):
        selection = SelectionCoordinator(point_count=5)

        assert selection.select("2") is False
        assert selection.select(True) is False
        assert selection.selected_index is None

    def test_no_points(self):
        selection = SelectionCoordinator()
        assert selection.select(0) is False

    def test_clear(self):
        selection = SelectionCoordinator(point_count=5)
        selection.select(1)
        selection.clear()
        assert selection.selected_index is None

    def test_reset_clears_and_resizes(self):
        selection = SelectionCoordinator(point_count=5)
        selection.select(4)

        selection.reset(3)

        assert selection.selected_index is None
        assert selection.point_count == 3
        assert selection.select(4) is False


class TestListeners:
    """Synchronous broadcast to subscribers."""

    def test_all_listeners_notified(self):
        selection = SelectionCoordinator(point_count=5)
        map_view, timeline = [], []
        selection.subscribe(map_view.append)
        selection.subscribe(timeline.append)

        selection.select(2)

        assert map_view == [2]
        assert timeline == [2]

    def test_notified_before_next_read(self):
        """Listener sees the new value as current state."""
        selection = SelectionCoordinator(point_count=5)
        seen = []
        selection.subscribe(lambda index: seen.append(selection.selected_index))

        selection.select(1)

        assert seen == [1]

    def test_rejected_selection_not_broadcast(self):
        selection = SelectionCoordinator(point_count=2)
        events = []
        selection.subscribe(events.append)

        selection.select(7)

        assert events == []

    def test_clear_and_reset_broadcast_none(self):
        selection = SelectionCoordinator(point_count=5)
        events = []
        selection.subscribe(events.append)

        selection.select(1)
        selection.clear()
        selection.select(2)
        selection.reset(4)

        assert events == [1, None, 2, None]

    def test_latest_wins(self):
        selection = SelectionCoordinator(point_count=10)
        events = []
        selection.subscribe(events.append)

        for i in (1, 5, 3):
            selection.select(i)

        assert selection.selected_index == 3
        assert events[-1] == 3

    def test_unsubscribe(self):
        selection = SelectionCoordinator(point_count=5)
        events = []
        unsubscribe = selection.subscribe(events.append)

        selection.select(1)
        unsubscribe()
        selection.select(2)

        assert events == [1]

    def test_unsubscribe_during_notify(self):
        """A listener may remove itself while being notified."""
        selection = SelectionCoordinator(point_count=5)
        events = []
        unsubscribe = None

        def once(index):
            events.append(index)
            unsubscribe()

        unsubscribe = selection.subscribe(once)
        selection.select(1)
        selection.select(2)

        assert events == [1]
