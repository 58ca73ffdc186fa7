"""Navigation and selection behavior of ``VirtualListState``."""

from __future__ import annotations

import random
import unittest

from lazytable.datasource import InMemoryDataSource
from lazytable.state import VirtualListState


def make_state(rows: int, height: int) -> VirtualListState:
    return VirtualListState(InMemoryDataSource(range(rows)), height)


class VirtualListStateTests(unittest.TestCase):
    def assert_viewport_invariant(self, state: VirtualListState) -> None:
        if state.is_empty:
            self.assertEqual(state.current_index, -1)
            self.assertEqual(state.scroll_offset, 0)
            return
        self.assertLessEqual(state.scroll_offset, state.current_index)
        self.assertLessEqual(state.current_index, state.scroll_offset + state.visible_height - 1)
        self.assertGreaterEqual(state.scroll_offset, 0)
        self.assertLessEqual(state.scroll_offset, max(0, state.total_rows - state.visible_height))
        self.assertLess(state.current_index, state.total_rows)

    def test_initial_state(self) -> None:
        state = make_state(100, 10)
        self.assertEqual(state.current_index, 0)
        self.assertEqual(state.scroll_offset, 0)
        self.assertEqual(state.visible_range(), range(0, 10))

    def test_hundred_rows_ten_visible_scenario(self) -> None:
        state = make_state(100, 10)

        for _ in range(9):
            state.move_down()
        self.assertEqual((state.current_index, state.scroll_offset), (9, 0))

        state.move_down()
        self.assertEqual(state.current_index, 10)
        self.assertEqual(state.scroll_offset, 1)

        state.move_page_down()
        self.assertEqual(state.current_index, 20)
        self.assertEqual(state.scroll_offset, 11)

        state.move_end()
        self.assertEqual(state.current_index, 99)
        self.assertEqual(state.scroll_offset, 90)

        state.move_page_up()
        self.assertEqual(state.current_index, 89)
        self.assertEqual(state.scroll_offset, 89)

        state.move_home()
        self.assertEqual(state.current_index, 0)
        self.assertEqual(state.scroll_offset, 0)

    def test_moves_clamp_at_edges(self) -> None:
        state = make_state(5, 3)
        state.move_up()
        self.assertEqual(state.current_index, 0)
        state.move_page_up()
        self.assertEqual(state.current_index, 0)

        state.move_end()
        state.move_down()
        self.assertEqual(state.current_index, 4)
        state.move_page_down()
        self.assertEqual(state.current_index, 4)
        self.assertEqual(state.scroll_offset, 2)

    def test_move_end_is_idempotent(self) -> None:
        state = make_state(37, 8)
        state.move_end()
        snapshot = (state.current_index, state.scroll_offset)
        state.move_end()
        self.assertEqual((state.current_index, state.scroll_offset), snapshot)

    def test_fewer_rows_than_height(self) -> None:
        state = make_state(3, 10)
        state.move_end()
        self.assertEqual(state.current_index, 2)
        self.assertEqual(state.scroll_offset, 0)
        self.assertEqual(state.visible_range(), range(0, 3))
        self.assertEqual(state.visible_rows(), [(0, 0), (1, 1), (2, 2)])

    def test_invariant_holds_for_random_walks(self) -> None:
        rng = random.Random(1234)
        moves = ("move_up", "move_down", "move_page_up", "move_page_down", "move_home", "move_end", "toggle_selection")
        for rows, height in ((0, 1), (1, 1), (2, 5), (10, 10), (11, 10), (100, 7), (250, 1)):
            state = make_state(rows, height)
            for _ in range(300):
                getattr(state, rng.choice(moves))()
                with self.subTest(rows=rows, height=height):
                    self.assert_viewport_invariant(state)

    def test_selection_toggles_and_persists_across_scrolling(self) -> None:
        state = make_state(50, 5)
        state.move_down()
        state.toggle_selection()
        state.move_page_down()
        state.move_page_down()
        state.toggle_selection()
        state.move_home()

        self.assertTrue(state.is_selected(1))
        self.assertTrue(state.is_selected(11))
        self.assertEqual(state.selected_rows(), [1, 11])
        self.assertEqual(state.selected_snapshot(), frozenset({1, 11}))

        state.move_down()
        state.toggle_selection()
        self.assertFalse(state.is_selected(1))
        self.assertEqual(state.current_index, 1)

        state.clear_selection()
        self.assertEqual(state.selected_rows(), [])

    def test_selected_snapshot_is_detached(self) -> None:
        state = make_state(5, 5)
        state.toggle_selection()
        snapshot = state.selected_snapshot()
        state.toggle_selection()
        self.assertEqual(snapshot, frozenset({0}))

    def test_empty_list_ignores_navigation(self) -> None:
        state = make_state(0, 10)
        for move in (state.move_up, state.move_down, state.move_page_up, state.move_page_down, state.move_home, state.move_end):
            move()
        state.toggle_selection()

        self.assertEqual(state.current_index, -1)
        self.assertEqual(state.scroll_offset, 0)
        self.assertIsNone(state.current_selection())
        self.assertEqual(state.visible_rows(), [])
        self.assertEqual(state.selected_rows(), [])
        self.assertIsNone(state.current_row_relative_position())

    def test_current_selection_and_relative_position(self) -> None:
        state = make_state(30, 4)
        for _ in range(6):
            state.move_down()
        self.assertEqual(state.current_selection(), 6)
        self.assertTrue(state.is_highlighted(6))
        self.assertEqual(state.current_row_relative_position(), 3)

    def test_total_rows_is_read_once(self) -> None:
        source = InMemoryDataSource(range(4))
        state = VirtualListState(source, 2)
        self.assertEqual(state.total_rows, 4)

    def test_height_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            make_state(5, 0)


if __name__ == "__main__":
    unittest.main()
