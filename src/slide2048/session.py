# session.py
# Game lifecycle as pure functions over an explicit GameState.
# Callers own the state; every accepted transition returns a new one.

from dataclasses import dataclass, field, replace
from typing import Any, List, NamedTuple, Optional, Tuple
import logging
import random

from . import core
from .controls import parse_direction
from .core import Board, GameProgressState
from .tiles import Tile, reconcile, tiles_from_board

logger = logging.getLogger(__name__)

DEFAULT_BOARD_SIZE = 4
DEFAULT_WIN_TILE = 2048


@dataclass(frozen=True)
class Snapshot:
    """Everything undo needs to restore a previous state."""
    board: Tuple[Tuple[int, ...], ...]
    tiles: Tuple[Tile, ...]
    score: int
    next_tile_id: int


@dataclass(frozen=True)
class GameState:
    """
    One game session.

    Attributes:
        board: N x N cell values, 0 for empty
        tiles: One Tile per non-zero cell
        score: Score of the current game
        best_score: Best score across games, never lowered
        next_tile_id: Counter for minting tile ids
        history: Snapshots of previous states, oldest first
        win_tile: Tile value that marks the game as won

    The instance is frozen but `board` and `tiles` are plain lists; treat them
    as read-only. Transitions always build new lists and never edit these.
    """
    board: List[List[int]]
    tiles: List[Tile]
    score: int = 0
    best_score: int = 0
    next_tile_id: int = 0
    history: Tuple[Snapshot, ...] = field(default_factory=tuple)
    win_tile: int = DEFAULT_WIN_TILE

    @property
    def size(self) -> int:
        return len(self.board)

    @property
    def game_over(self) -> bool:
        return core.is_game_over(self.board)

    @property
    def won(self) -> bool:
        return core.check_for_win(self.board, self.win_tile)

    @property
    def progress(self) -> GameProgressState:
        return core.determine_game_status(self.board, self.win_tile)

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            board=tuple(tuple(row) for row in self.board),
            tiles=tuple(self.tiles),
            score=self.score,
            next_tile_id=self.next_tile_id,
        )


class MoveOutcome(NamedTuple):
    """Result of one input: the state to commit and what happened."""
    state: GameState
    moved: bool
    score_delta: int


def new_game(size: int = DEFAULT_BOARD_SIZE, rng: Optional[random.Random] = None, best_score: int = 0,
             win_tile: int = DEFAULT_WIN_TILE, four_probability: float = 0.1) -> GameState:
    """
    Starts a new game: empty board with two spawned tiles, score 0, no history.
    Args:
        size (int): Dimension of the N x N board.
        rng (random.Random): Source of randomness; a fresh unseeded one if omitted.
        best_score (int): Best score carried over from earlier games.
        win_tile (int): Tile value that marks the game as won.
        four_probability (float): Chance a spawned tile is a 4.
    Returns:
        GameState: The initial state.
    Raises:
        ValueError: If size is not a positive integer.
    """
    if rng is None:
        rng = random.Random()

    board = core.empty_board(size)
    for _ in range(2):
        board, _ = core.add_random_tile(board, rng, four_probability)

    tiles, next_tile_id = tiles_from_board(board)
    logger.debug("New %dx%d game started", size, size)
    return GameState(
        board=board,
        tiles=tiles,
        score=0,
        best_score=best_score,
        next_tile_id=next_tile_id,
        history=(),
        win_tile=win_tile,
    )


def move(state: GameState, direction: Any, rng: Optional[random.Random] = None,
         four_probability: float = 0.1) -> MoveOutcome:
    """
    Applies one input to the state.

    An accepted move compacts the board, spawns a tile into a random empty
    cell (if any), reconciles tile identities, adds the score delta and
    pushes a snapshot onto the history, all in one step. Unrecognised input,
    moves after game over and moves that change nothing return the input
    state untouched.
    Args:
        state (GameState): Current state.
        direction: A Direction or anything parse_direction understands.
        rng (random.Random): Source of randomness for the spawn.
        four_probability (float): Chance a spawned tile is a 4.
    Returns:
        MoveOutcome: The state to commit, whether the move was accepted, and
                     the score delta.
    """
    parsed = parse_direction(direction)
    if parsed is None:
        logger.debug("Ignoring unrecognised direction %r", direction)
        return MoveOutcome(state, False, 0)

    if state.game_over:
        logger.debug("Ignoring %s: game is over", parsed.value)
        return MoveOutcome(state, False, 0)

    board_after_slide, moved, score_delta = core.apply_move(state.board, parsed)
    if not moved:
        logger.debug("Move %s changed nothing", parsed.value)
        return MoveOutcome(state, False, 0)

    if rng is None:
        rng = random.Random()
    final_board, _ = core.add_random_tile(board_after_slide, rng, four_probability)
    tiles, next_tile_id = reconcile(state.tiles, final_board, state.next_tile_id)

    score = state.score + score_delta
    new_state = replace(
        state,
        board=final_board,
        tiles=tiles,
        score=score,
        best_score=max(state.best_score, score),
        next_tile_id=next_tile_id,
        history=state.history + (state.snapshot(),),
    )
    logger.debug("Move %s accepted, score +%d", parsed.value, score_delta)
    return MoveOutcome(new_state, True, score_delta)


def undo(state: GameState) -> GameState:
    """
    Restores the most recent snapshot and drops it from the history.
    The best score is kept. With an empty history the state is returned as is.
    """
    if not state.history:
        logger.debug("Nothing to undo")
        return state

    previous = state.history[-1]
    return replace(
        state,
        board=[list(row) for row in previous.board],
        tiles=list(previous.tiles),
        score=previous.score,
        next_tile_id=previous.next_tile_id,
        history=state.history[:-1],
    )


def restart(state: GameState, rng: Optional[random.Random] = None, four_probability: float = 0.1) -> GameState:
    """New game on the same board size, carrying the best score forward."""
    return new_game(state.size, rng, best_score=state.best_score,
                    win_tile=state.win_tile, four_probability=four_probability)


def from_board(board: Board, score: int = 0, best_score: int = 0,
               win_tile: int = DEFAULT_WIN_TILE) -> GameState:
    """Builds a state around an existing board, minting tiles for its cells."""
    core.validate_board(board)
    tiles, next_tile_id = tiles_from_board(board)
    return GameState(
        board=core.copy_board(board),
        tiles=tiles,
        score=score,
        best_score=max(best_score, score),
        next_tile_id=next_tile_id,
        win_tile=win_tile,
    )
