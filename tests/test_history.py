"""Tests for the branch-truncating history stack."""

import logging

from blueprint_markup.core.history import HistoryStack

from conftest import make_rect, make_stroke, make_circle


class TestHistoryStack:

    def test_starts_with_single_entry(self):
        history = HistoryStack()
        assert len(history) == 1
        assert history.index == 0
        assert history.current == ()
        assert not history.can_undo
        assert not history.can_redo

    def test_seeded_with_initial_snapshot(self):
        initial = (make_rect(),)
        history = HistoryStack(initial)
        assert history.current == initial

    def test_push_moves_index_to_new_top(self):
        history = HistoryStack()
        a = (make_rect("a"),)
        history.push(a)
        assert history.index == 1
        assert history.current == a
        assert history.can_undo
        assert not history.can_redo

    def test_undo_n_times_returns_to_origin(self):
        history = HistoryStack()
        snapshots = [()]
        for i in range(5):
            snapshot = snapshots[-1] + (make_rect(f"r{i}"),)
            history.push(snapshot)
            snapshots.append(snapshot)

        for expected_index in range(4, -1, -1):
            assert history.undo() == snapshots[expected_index]
            assert history.index == expected_index
            assert history.current == history.snapshots[history.index]

        assert history.current == ()
        assert history.undo() is None
        assert history.index == 0

    def test_redo_walks_forward_again(self):
        history = HistoryStack()
        a = (make_rect("a"),)
        b = a + (make_stroke("b"),)
        history.push(a)
        history.push(b)
        history.undo()
        history.undo()

        assert history.redo() == a
        assert history.redo() == b
        assert history.redo() is None
        assert history.current == b

    def test_push_after_undo_truncates_redo_branch(self):
        history = HistoryStack()
        a = (make_rect("a"),)
        b = a + (make_stroke("b"),)
        c = a + (make_circle("c"),)

        history.push(a)
        history.push(b)
        history.undo()
        history.push(c)

        assert history.snapshots == [(), a, c]
        assert history.index == 2
        assert not history.can_redo
        assert history.redo() is None

    def test_undo_redo_do_not_mutate_entries(self):
        history = HistoryStack()
        a = (make_rect("a"),)
        history.push(a)
        before = history.snapshots
        history.undo()
        history.redo()
        assert history.snapshots == before

    def test_clear_is_undoable(self):
        a = (make_rect("a"),)
        history = HistoryStack(a)
        history.clear()
        assert history.current == ()
        assert history.undo() == a

    def test_reseed_discards_history(self):
        history = HistoryStack()
        history.push((make_rect("a"),))
        history.push((make_rect("b"),))
        loaded = (make_circle("loaded"),)

        history.reseed(loaded)

        assert history.snapshots == [loaded]
        assert history.index == 0
        assert not history.can_undo

    def test_out_of_range_index_is_clamped_and_logged(self, caplog):
        history = HistoryStack()
        history.push((make_rect("a"),))
        history._index = 7

        with caplog.at_level(logging.WARNING):
            current = history.current

        assert history.index == 1
        assert current == history.snapshots[1]
        assert "clamped" in caplog.text
