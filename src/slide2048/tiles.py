# tiles.py
# Tile identities for the renderer, carried across board transitions.

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Set, Tuple

from .core import Board, get_board_size


def format_tile_id(counter: int) -> str:
    return f"tile-{counter}"


@dataclass(frozen=True)
class Tile:
    """
    One non-empty board cell as seen by the renderer.

    Attributes:
        id: Stable identifier, assigned once when the tile is minted
        value: Power of two >= 2
        row: Row index on the board
        col: Column index on the board
        is_new: True only on the transition that minted this tile
        merged_from: Optional pair of ids this tile was merged from
    """
    id: str
    value: int
    row: int
    col: int
    is_new: bool = False
    merged_from: Optional[Tuple[str, str]] = None

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)


def parse_tile_id(tile_id: str) -> Optional[int]:
    """Counter value of a minted id, or None if `tile_id` is not of the form tile-<n>."""
    prefix, _, number = tile_id.partition("-")
    if prefix != "tile" or not number.isdigit():
        return None
    return int(number)


def ids_below_counter(tiles: Sequence[Tile], next_tile_id: int) -> bool:
    """True if every minted id in `tiles` was issued before `next_tile_id`."""
    for tile in tiles:
        counter = parse_tile_id(tile.id)
        if counter is not None and counter >= next_tile_id:
            return False
    return True


class ReconcileResult(NamedTuple):
    """New tile list plus the advanced id counter."""
    tiles: List[Tile]
    next_tile_id: int


def reconcile(old_tiles: Sequence[Tile], new_board: Board, next_tile_id: int) -> ReconcileResult:
    """
    Maps the pre-move tiles onto a post-move board.

    Cells of `new_board` are visited in row-major order. For each non-empty cell:

    1. an unclaimed old tile at the same position with the same value keeps
       its id;
    2. otherwise the first unclaimed old tile (in list order) with the same
       value is moved to the cell;
    3. otherwise a fresh id is minted from `next_tile_id` and the tile is
       flagged `is_new`.

    Each old tile is claimed at most once. Rule 2 does not try to recover the
    true source of a move when several old tiles share a value.

    Args:
        old_tiles: Tiles of the previous state
        new_board: Board after the move (and spawn)
        next_tile_id: Counter used to mint fresh ids

    Returns:
        ReconcileResult with one tile per non-zero cell and the new counter
    """
    n = get_board_size(new_board)
    claimed: Set[int] = set()
    new_tiles: List[Tile] = []
    counter = next_tile_id

    for r in range(n):
        for c in range(n):
            value = new_board[r][c]
            if value == 0:
                continue

            match = _find_stationary(old_tiles, claimed, r, c, value)
            if match is None:
                match = _find_moved(old_tiles, claimed, value)

            if match is not None:
                claimed.add(match)
                new_tiles.append(Tile(id=old_tiles[match].id, value=value, row=r, col=c))
            else:
                new_tiles.append(Tile(id=format_tile_id(counter), value=value, row=r, col=c, is_new=True))
                counter += 1

    return ReconcileResult(new_tiles, counter)


def _find_stationary(old_tiles: Sequence[Tile], claimed: Set[int], row: int, col: int, value: int) -> Optional[int]:
    for idx, tile in enumerate(old_tiles):
        if idx not in claimed and tile.row == row and tile.col == col and tile.value == value:
            return idx
    return None


def _find_moved(old_tiles: Sequence[Tile], claimed: Set[int], value: int) -> Optional[int]:
    for idx, tile in enumerate(old_tiles):
        if idx not in claimed and tile.value == value:
            return idx
    return None


def tiles_from_board(board: Board, next_tile_id: int = 0) -> ReconcileResult:
    """Mints a fresh tile for every non-empty cell, e.g. for a new game."""
    return reconcile([], board, next_tile_id)


def tiles_match_board(tiles: Sequence[Tile], board: Board) -> bool:
    """
    True if there is exactly one tile per non-zero cell, values agree and
    ids are unique.
    """
    n = get_board_size(board)
    seen_positions = set()
    seen_ids = set()
    for tile in tiles:
        if not (0 <= tile.row < n and 0 <= tile.col < n):
            return False
        if board[tile.row][tile.col] != tile.value:
            return False
        if tile.position in seen_positions or tile.id in seen_ids:
            return False
        seen_positions.add(tile.position)
        seen_ids.add(tile.id)
    occupied = sum(1 for row in board for value in row if value != 0)
    return occupied == len(tiles)
