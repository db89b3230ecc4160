"""
slide2048 - a sliding-tile (2048) grid transition engine.

Usage:
    import random
    from slide2048 import Direction, new_game, move

    rng = random.Random(7)
    state = new_game(4, rng)
    outcome = move(state, Direction.LEFT, rng)
    if outcome.moved:
        state = outcome.state
"""

from .core import Direction, GameProgressState, apply_move, compact_line, is_game_over
from .session import GameState, MoveOutcome, Snapshot, move, new_game, undo
from .tiles import Tile, reconcile

__all__ = [
    "Direction",
    "GameProgressState",
    "GameState",
    "MoveOutcome",
    "Snapshot",
    "Tile",
    "apply_move",
    "compact_line",
    "is_game_over",
    "move",
    "new_game",
    "reconcile",
    "undo",
]
