import unittest

from slide2048.core import Direction, apply_move
from slide2048.tiles import (
    Tile,
    ids_below_counter,
    parse_tile_id,
    reconcile,
    tiles_from_board,
    tiles_match_board,
)


def empty(n=4):
    return [[0] * n for _ in range(n)]


class TestReconcile(unittest.TestCase):

    """Minting Tests"""
    def test_fresh_board_mints_in_row_major_order(self):
        board = empty()
        board[0][3] = 2
        board[2][1] = 4
        tiles, next_id = tiles_from_board(board)
        self.assertEqual([t.id for t in tiles], ["tile-0", "tile-1"])
        self.assertEqual([(t.row, t.col, t.value) for t in tiles], [(0, 3, 2), (2, 1, 4)])
        self.assertTrue(all(t.is_new for t in tiles))
        self.assertEqual(next_id, 2)

    def test_counter_continues_from_given_value(self):
        board = empty()
        board[1][1] = 2
        tiles, next_id = reconcile([], board, 17)
        self.assertEqual(tiles[0].id, "tile-17")
        self.assertEqual(next_id, 18)

    """Identity Continuity Tests"""
    def test_stationary_tile_keeps_identity(self):
        old = [Tile(id="tile-0", value=2, row=0, col=0, is_new=True)]
        board = empty()
        board[0][0] = 2
        tiles, next_id = reconcile(old, board, 1)
        self.assertEqual(tiles, [Tile(id="tile-0", value=2, row=0, col=0)])
        self.assertFalse(tiles[0].is_new)
        self.assertEqual(next_id, 1)

    def test_pure_shift_reuses_every_identity(self):
        board = empty()
        board[0][2] = 2
        board[1][3] = 4
        board[3][1] = 2
        old, counter = tiles_from_board(board)

        shifted, moved, gain = apply_move(board, Direction.LEFT)
        self.assertTrue(moved)
        self.assertEqual(gain, 0)

        tiles, next_id = reconcile(old, shifted, counter)
        self.assertEqual(next_id, counter, "No id may be minted for a pure shift")
        self.assertEqual({t.id for t in tiles}, {t.id for t in old})
        self.assertTrue(tiles_match_board(tiles, shifted))
        self.assertFalse(any(t.is_new for t in tiles))

    def test_moved_tile_takes_first_unclaimed_match(self):
        old = [
            Tile(id="a", value=2, row=1, col=1),
            Tile(id="b", value=2, row=2, col=2),
        ]
        board = empty()
        board[0][0] = 2
        board[3][3] = 2
        tiles, _ = reconcile(old, board, 5)
        self.assertEqual([(t.id, t.row, t.col) for t in tiles], [("a", 0, 0), ("b", 3, 3)])

    def test_claimed_tile_is_not_reused_at_its_old_position(self):
        # (0, 0) is visited first and claims "b" by value; "b" then cannot
        # also be the stationary match for (1, 0).
        old = [
            Tile(id="b", value=2, row=1, col=0),
            Tile(id="a", value=2, row=0, col=1),
        ]
        board = empty()
        board[0][0] = 2
        board[1][0] = 2
        tiles, next_id = reconcile(old, board, 2)
        self.assertEqual([t.id for t in tiles], ["b", "a"])
        self.assertEqual(next_id, 2)
        self.assertTrue(tiles_match_board(tiles, board))

    """Merge and Spawn Tests"""
    def test_merged_value_without_match_is_minted(self):
        old = [
            Tile(id="tile-0", value=2, row=0, col=0),
            Tile(id="tile-1", value=2, row=0, col=1),
        ]
        board = empty()
        board[0][0] = 4
        tiles, next_id = reconcile(old, board, 2)
        self.assertEqual(len(tiles), 1)
        self.assertEqual(tiles[0].id, "tile-2")
        self.assertTrue(tiles[0].is_new)
        self.assertEqual(next_id, 3)

    def test_merged_value_reuses_an_old_tile_of_that_value(self):
        old = [
            Tile(id="x", value=2, row=0, col=2),
            Tile(id="y", value=2, row=0, col=3),
            Tile(id="z", value=4, row=3, col=3),
        ]
        board = empty()
        board[0][0] = 4
        board[3][0] = 4
        tiles, next_id = reconcile(old, board, 3)
        self.assertEqual([t.id for t in tiles], ["z", "tile-3"])
        self.assertEqual(next_id, 4)

    def test_each_old_tile_is_claimed_once(self):
        old = [Tile(id="only", value=2, row=0, col=0)]
        board = empty()
        board[0][0] = 2
        board[0][1] = 2
        board[0][2] = 2
        tiles, next_id = reconcile(old, board, 1)
        self.assertEqual([t.id for t in tiles], ["only", "tile-1", "tile-2"])
        self.assertEqual([t.is_new for t in tiles], [False, True, True])
        self.assertEqual(next_id, 3)

    def test_tiles_disappear_with_their_cells(self):
        old = [Tile(id="gone", value=8, row=2, col=2)]
        tiles, next_id = reconcile(old, empty(), 1)
        self.assertEqual(tiles, [])
        self.assertEqual(next_id, 1)


class TestTilesMatchBoard(unittest.TestCase):

    def test_detects_mismatches(self):
        board = empty(2)
        board[0][0] = 2
        good = [Tile(id="t", value=2, row=0, col=0)]
        self.assertTrue(tiles_match_board(good, board))
        self.assertFalse(tiles_match_board([], board))
        self.assertFalse(tiles_match_board([Tile(id="t", value=4, row=0, col=0)], board))
        self.assertFalse(tiles_match_board(good + [Tile(id="t", value=2, row=0, col=0)], board))
        self.assertFalse(tiles_match_board([Tile(id="t", value=2, row=5, col=0)], board))


class TestTileIds(unittest.TestCase):

    def test_parse_tile_id(self):
        self.assertEqual(parse_tile_id("tile-0"), 0)
        self.assertEqual(parse_tile_id("tile-42"), 42)
        for other in ("tile-", "tile-x", "tile--1", "block-3", "7"):
            self.assertIsNone(parse_tile_id(other), other)

    def test_ids_must_be_below_counter(self):
        tiles = [Tile(id="tile-0", value=2, row=0, col=0), Tile(id="tile-4", value=2, row=0, col=1)]
        self.assertTrue(ids_below_counter(tiles, 5))
        self.assertFalse(ids_below_counter(tiles, 4))
        self.assertTrue(ids_below_counter([Tile(id="custom", value=2, row=0, col=0)], 0))

    def test_reconcile_never_reissues_a_live_id(self):
        old, counter = tiles_from_board([[0, 2], [0, 0]])
        self.assertTrue(ids_below_counter(old, counter))
        tiles, _ = reconcile(old, [[2, 0], [0, 2]], counter)
        self.assertEqual(len({t.id for t in tiles}), 2)


if __name__ == "__main__":
    unittest.main()
