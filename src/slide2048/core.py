# core.py
# Stateless grid transition engine: line compaction, whole-board moves,
# tile spawning and the terminal-state predicates built on top of them.

from enum import Enum
from typing import List, NamedTuple, Optional, Tuple
import logging
import random

logger = logging.getLogger(__name__)

Board = List[List[int]]


class GameProgressState(Enum):
    """Represents the current progress state of the game."""
    IN_PROGRESS = 1
    GAME_OVER = 2  # Lost
    GAME_WON = 3


class Direction(str, Enum):
    """Represents the possible move directions."""
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class LineResult(NamedTuple):
    """Outcome of compacting a single row or column."""
    line: List[int]
    moved: bool
    score_gain: int


class MoveResult(NamedTuple):
    """Outcome of applying a direction to a whole board (before any spawn)."""
    board: Board
    moved: bool
    score_delta: int


# --- Board Helper Functions ---

def get_board_size(board: Board) -> int:
    """
    Gets the size (N) of an N x N board.
    Args:
        board (Board): The game board.
    Returns:
        int: The dimension of the board.
    Raises:
        ValueError: If the board is not square or empty.
    """
    if not board or not all(len(row) == len(board) for row in board):
        raise ValueError("Board must be a non-empty square matrix.")
    return len(board)


def is_power_of_two(value: int) -> bool:
    return value >= 2 and (value & (value - 1)) == 0


def validate_board(board: Board) -> int:
    """
    Checks that a board is square and that every cell is 0 or a power of two.
    Args:
        board (Board): The board to validate.
    Returns:
        int: The dimension of the board.
    Raises:
        ValueError: On a malformed board.
    """
    n = get_board_size(board)
    for r in range(n):
        for c in range(n):
            value = board[r][c]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Cell ({r}, {c}) is not an integer: {value!r}")
            if value != 0 and not is_power_of_two(value):
                raise ValueError(f"Cell ({r}, {c}) must be 0 or a power of two >= 2, got {value}.")
    return n


def empty_board(size: int) -> Board:
    if not isinstance(size, int) or size <= 0:
        raise ValueError("Board size must be a positive integer.")
    return [[0] * size for _ in range(size)]


def copy_board(board: Board) -> Board:
    return [list(row) for row in board]


def get_empty_cells(board: Board) -> List[Tuple[int, int]]:
    """
    Get coordinates of empty (0-value) cells in the given board, in row-major order.
    Args:
        board (Board): The board to check.
    Returns:
        List[Tuple[int, int]]: List of (row, col) tuples for empty cells.
    """
    n = get_board_size(board)
    empty_cells = []
    for row in range(n):
        for col in range(n):
            if board[row][col] == 0:
                empty_cells.append((row, col))
    return empty_cells


def add_random_tile(board: Board, rng: random.Random,
                    four_probability: float = 0.1) -> Tuple[Board, bool]:
    """
    Adds a new tile (2, or 4 with `four_probability`) to a uniformly chosen empty
    cell on a copy of the board.
    Args:
        board (Board): The current game board.
        rng (random.Random): Source of randomness for the cell and the value.
        four_probability (float): Chance that the spawned tile is a 4.
    Returns:
        Tuple[Board, bool]: A new board with the added tile and a boolean
                            indicating if a tile was successfully added.
                            If no empty cells, returns a copy of the board and False.
    """
    empty_cells = get_empty_cells(board)
    new_board = copy_board(board)
    if not empty_cells:
        logger.debug("No empty cell to spawn into; spawn skipped")
        return new_board, False

    row, col = rng.choice(empty_cells)
    new_board[row][col] = 4 if rng.random() < four_probability else 2
    return new_board, True


# --- Line Manipulation (Board Compactor) ---

def _compress_line(line: List[int]) -> List[int]:
    """Moves all non-zero tiles to the start of the line, keeping their order."""
    n = len(line)
    compressed = [value for value in line if value != 0]
    return compressed + [0] * (n - len(compressed))


def _merge_line(line: List[int]) -> Tuple[List[int], int]:
    """
    Merges adjacent identical numbers in a compressed line, leftmost pair first.
    A freshly merged value is never merged again in the same pass.
    Returns:
        Tuple[List[int], int]: Merged line (zero padded) and the score from merges.
    """
    n = len(line)
    score_increase = 0
    new_line_merged = [0] * n
    write_idx = 0
    read_idx = 0

    while read_idx < n and line[read_idx] != 0:
        current_val = line[read_idx]
        if read_idx + 1 < n and current_val == line[read_idx + 1]:
            merged_value = current_val * 2
            new_line_merged[write_idx] = merged_value
            score_increase += merged_value
            read_idx += 2  # Skip current and next tile (which was merged)
        else:
            new_line_merged[write_idx] = current_val
            read_idx += 1
        write_idx += 1

    return new_line_merged, score_increase


def compact_line(line: List[int]) -> LineResult:
    """
    Compacts a single line towards index 0: removes gaps, merges equal
    neighbours once per tile and pads with zeros.
    Args:
        line (List[int]): The line to process. It is not modified.
    Returns:
        LineResult: The processed line, whether it differs from the input,
                    and the score gained from merges.
    """
    merged_line, score_gain = _merge_line(_compress_line(line))
    moved = merged_line != list(line)
    return LineResult(merged_line, moved, score_gain)


# --- Board Transformations ---

def transpose_board(board: Board) -> Board:
    """
    Transposes a given board (swaps rows and columns).
    Args:
        board (Board): The board to transpose.
    Returns:
        Board: A new transposed board.
    """
    n = get_board_size(board)
    new_board = [[0] * n for _ in range(n)]
    for r in range(n):
        for c in range(n):
            new_board[c][r] = board[r][c]
    return new_board


def reverse_rows(board: Board) -> Board:
    """Returns a new board with each row reversed."""
    return [row[::-1] for row in board]


# --- Core Game Move Processing (Transition Orchestrator) ---

def _apply_left_processing_to_all_lines(board: Board) -> MoveResult:
    """
    Compacts every row of a board towards the left.
    Returns:
        MoveResult: The processed board, whether any row changed, and the
                    total score increase.
    """
    processed_board = []
    board_changed_overall = False
    total_score_increase = 0

    for row in board:
        final_line, line_changed, score_from_line = compact_line(row)
        processed_board.append(final_line)
        board_changed_overall = board_changed_overall or line_changed
        total_score_increase += score_from_line

    return MoveResult(processed_board, board_changed_overall, total_score_increase)


def apply_move(board: Board, direction: Direction) -> MoveResult:
    """
    Applies a move in the specified direction to a copy of the board.

    Every direction is reduced to a leftward compaction: RIGHT reverses the
    rows, UP transposes, DOWN transposes and reverses. The merge scan
    therefore always runs in travel order.
    Args:
        board (Board): The current game board.
        direction (Direction): The direction to move.
    Returns:
        MoveResult: The new board, whether it changed, and the score gained.
                    When nothing moved the returned board equals the input.
    Raises:
        ValueError: If an invalid direction is specified.
    """
    get_board_size(board)

    if direction == Direction.LEFT:
        return _apply_left_processing_to_all_lines(board)

    if direction == Direction.RIGHT:
        processed, moved, score = _apply_left_processing_to_all_lines(reverse_rows(board))
        return MoveResult(reverse_rows(processed), moved, score)

    if direction == Direction.UP:
        processed, moved, score = _apply_left_processing_to_all_lines(transpose_board(board))
        return MoveResult(transpose_board(processed), moved, score)

    if direction == Direction.DOWN:
        reversed_transposed = reverse_rows(transpose_board(board))
        processed, moved, score = _apply_left_processing_to_all_lines(reversed_transposed)
        return MoveResult(transpose_board(reverse_rows(processed)), moved, score)

    raise ValueError(f"Invalid direction specified for apply_move: {direction!r}")


# --- Game State Checks ---

def check_for_win(board: Board, win_tile: int = 2048) -> bool:
    """
    Check if the game is won (a tile with at least win_tile value exists).
    Args:
        board (Board): The game board.
        win_tile (int): The tile value that signifies a win. Default is 2048.
    Returns:
        bool: True if the game is won, False otherwise.
    """
    return any(value >= win_tile for row in board for value in row)


def is_move_possible_in_direction(board: Board, direction: Direction) -> bool:
    """True if moving in `direction` would change the board."""
    return apply_move(board, direction).moved


def available_moves(board: Board) -> List[Direction]:
    return [direction for direction in Direction if is_move_possible_in_direction(board, direction)]


def is_game_over(board: Board) -> bool:
    """
    A board is terminal when no direction changes it. Computed on demand,
    never cached.
    """
    return not any(is_move_possible_in_direction(board, direction) for direction in Direction)


def determine_game_status(board: Board, win_tile: Optional[int] = 2048) -> GameProgressState:
    """
    Determines the current progress state of the game based on the board.
    Game over takes precedence: a won board with no legal move is finished.
    Args:
        board (Board): The current game board.
        win_tile (Optional[int]): The tile value that signifies a win, or None
                                  to disable win detection.
    Returns:
        GameProgressState: The current state (IN_PROGRESS, GAME_WON, GAME_OVER).
    """
    if is_game_over(board):
        return GameProgressState.GAME_OVER
    if win_tile is not None and check_for_win(board, win_tile):
        return GameProgressState.GAME_WON
    return GameProgressState.IN_PROGRESS
