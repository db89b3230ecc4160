from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from typing import List, Optional, Tuple
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
import logging
import random

from . import core, session
from .controls import DEFAULT_SWIPE_THRESHOLD, classify_swipe, parse_direction
from .tiles import Tile, ids_below_counter, tiles_match_board

logger = logging.getLogger(__name__)

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Game API",
    description="A stateless API for playing the 2048 game. "\
                "Manage your game state (board, tiles, score, history) on the client side.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Pydantic Models for API requests and responses ---

class TileData(BaseModel):
    """A single tile as consumed by a renderer."""
    id: str = Field(..., description="Stable tile identifier, e.g. 'tile-3'.")
    value: int = Field(..., ge=2, description="Tile value (a power of two).")
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)
    is_new: bool = Field(default=False, description="True on the move that created this tile.")
    merged_from: Optional[Tuple[str, str]] = Field(default=None, description="Ids this tile was merged from.")


class SnapshotData(BaseModel):
    """A previous state kept for undo."""
    board: List[List[int]]
    tiles: List[TileData]
    score: int = Field(..., ge=0)
    next_tile_id: int = Field(..., ge=0)


class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    size: Optional[int] = Field(
        default=4,
        gt=1, # Board size must be at least 2x2
        description="Size of the N x N game board (e.g., 4 for a 4x4 board)."
    )
    win_tile: Optional[int] = Field(
        default=2048,
        gt=0,
        description="The tile value to achieve for winning the game (e.g., 2048)."
    )
    best_score: int = Field(default=0, ge=0, description="Best score carried over from earlier games.")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible tile spawns.")


class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    board: List[List[int]] = Field(..., description="The N x N game board, represented as a list of lists.")
    tiles: List[TileData] = Field(..., description="One tile per non-empty cell.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    best_score: int = Field(default=0, ge=0, description="Best score across games.")
    next_tile_id: int = Field(..., ge=0, description="Counter used to mint new tile ids.")
    history: List[SnapshotData] = Field(default_factory=list, description="Previous states, oldest first.")
    win_tile: int = Field(default=2048, gt=0, description="The tile value required to win this game instance.")
    progress: core.GameProgressState = Field(
        default=core.GameProgressState.IN_PROGRESS,
        description="Current progress state of the game (IN_PROGRESS, GAME_WON, GAME_OVER)."
    )
    game_over: bool = Field(default=False, description="True when no direction can change the board.")
    board_size: int = Field(default=4, gt=0, description="The dimension N of the N x N board.")


class SwipeData(BaseModel):
    """A completed touch gesture in screen coordinates."""
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    threshold: float = Field(default=DEFAULT_SWIPE_THRESHOLD, ge=0, description="Minimum displacement for a move.")


class MoveRequestData(BaseModel):
    """Data required to make a move. Either `direction` or `swipe` is used, `direction` first."""
    state: GameStateData = Field(..., description="Current game state before the move.")
    direction: Optional[str] = Field(
        default=None,
        description="Direction of the move (UP, DOWN, LEFT, RIGHT, or a key such as ArrowUp)."
    )
    swipe: Optional[SwipeData] = Field(default=None, description="Swipe gesture to classify when no direction is given.")
    seed: Optional[int] = Field(default=None, description="Seed for a reproducible tile spawn.")


class UndoRequestData(BaseModel):
    state: GameStateData


class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    score_delta: int = Field(default=0, ge=0, description="Score gained by this move.")
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was invalid, game ended, or other info."
    )

# --- Conversions between API models and engine state ---

def _tile_to_data(tile: Tile) -> TileData:
    return TileData(id=tile.id, value=tile.value, row=tile.row, col=tile.col,
                    is_new=tile.is_new, merged_from=tile.merged_from)


def _tile_from_data(data: TileData) -> Tile:
    return Tile(id=data.id, value=data.value, row=data.row, col=data.col,
                is_new=data.is_new, merged_from=data.merged_from)


def state_to_data(state: session.GameState) -> GameStateData:
    """Serializes an engine state for the client."""
    return GameStateData(
        board=[list(row) for row in state.board],
        tiles=[_tile_to_data(t) for t in state.tiles],
        score=state.score,
        best_score=state.best_score,
        next_tile_id=state.next_tile_id,
        history=[
            SnapshotData(
                board=[list(row) for row in snap.board],
                tiles=[_tile_to_data(t) for t in snap.tiles],
                score=snap.score,
                next_tile_id=snap.next_tile_id,
            )
            for snap in state.history
        ],
        win_tile=state.win_tile,
        progress=state.progress,
        game_over=state.game_over,
        board_size=state.size,
    )


def state_from_data(data: GameStateData) -> session.GameState:
    """
    Rebuilds an engine state from client data.
    Raises:
        ValueError: If a board is malformed, tiles disagree with their board, or
                    the id counter would reissue an id already in use.
    """
    core.validate_board(data.board)
    tiles = [_tile_from_data(t) for t in data.tiles]
    if not tiles_match_board(tiles, data.board):
        raise ValueError("Tiles must match the non-empty cells of the board one to one.")
    if not ids_below_counter(tiles, data.next_tile_id):
        raise ValueError("next_tile_id must be greater than every tile-<n> id in use.")

    history = []
    for snap in data.history:
        core.validate_board(snap.board)
        snap_tiles = [_tile_from_data(t) for t in snap.tiles]
        if not tiles_match_board(snap_tiles, snap.board):
            raise ValueError("History tiles must match the non-empty cells of their board one to one.")
        if not ids_below_counter(snap_tiles, data.next_tile_id):
            raise ValueError("next_tile_id must be greater than every tile-<n> id in the history.")
        history.append(session.Snapshot(
            board=tuple(tuple(row) for row in snap.board),
            tiles=tuple(snap_tiles),
            score=snap.score,
            next_tile_id=snap.next_tile_id,
        ))

    return session.GameState(
        board=[list(row) for row in data.board],
        tiles=tiles,
        score=data.score,
        best_score=max(data.best_score, data.score),
        next_tile_id=data.next_tile_id,
        history=tuple(history),
        win_tile=data.win_tile,
    )


def _resolve_direction(request_data: MoveRequestData):
    """Picks the explicit direction, else classifies the swipe. None means no usable input."""
    if request_data.direction is not None:
        return parse_direction(request_data.direction)
    swipe = request_data.swipe
    if swipe is None:
        return None
    return classify_swipe((swipe.start_x, swipe.start_y), (swipe.end_x, swipe.end_y), swipe.threshold)


# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit("100/minute")
async def start_new_game(request: Request, settings: NewGameSettings):
    """
    Initializes a new 2048 game based on the provided settings.

    - **size**: Dimension of the N x N board (e.g., 4 for 4x4). Default is 4.
    - **win_tile**: Tile value to reach to win (e.g., 2048). Default is 2048.
    - **best_score**: Best score to carry into the new game.
    - **seed**: Optional seed for reproducible spawns.

    Returns the initial game state, including the board with two random tiles
    and their tile records, score (0) and an empty history.
    """
    try:
        state = session.new_game(
            settings.size if settings.size is not None else 4,
            random.Random(settings.seed),
            best_score=settings.best_score,
            win_tile=settings.win_tile if settings.win_tile is not None else 2048,
        )
        return state_to_data(state)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error in /game/new: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred during game creation: {str(e)}")


@app.post("/game/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit("100/minute")
async def make_move(request: Request, request_data: MoveRequestData):
    """
    Processes a player's move in the game.

    The API will:
    1. Slide and merge tiles in the requested direction (or the direction
       classified from `swipe` when no direction is given).
    2. If the board changed, add a new random tile (2 or 4) and carry tile
       identities over to the new board.
    3. Push the previous state onto the history and report the new status.

    An unrecognised direction, a move after game over, or a move that changes
    nothing returns the state unchanged with `move_was_effective` false.
    """
    try:
        current_state = state_from_data(request_data.state)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid game state in request: {str(e)}")

    try:
        direction = _resolve_direction(request_data)
        outcome = session.move(current_state, direction, random.Random(request_data.seed))

        message_for_client: Optional[str] = None
        if not outcome.moved:
            if direction is None and request_data.direction is None and request_data.swipe is not None:
                message_for_client = "Swipe too short; input ignored."
            elif direction is None:
                message_for_client = "Unrecognized direction; input ignored."
            elif current_state.game_over:
                message_for_client = "Game Over. No more valid moves."
            else:
                message_for_client = "Move was not effective; board state unchanged by slide."

        new_state = outcome.state
        if outcome.moved:
            if new_state.game_over:
                message_for_client = "Game Over. No more valid moves."
            elif new_state.won:
                message_for_client = "Congratulations! You won!"

        return MoveResponseData(
            **state_to_data(new_state).model_dump(),
            move_was_effective=outcome.moved,
            score_delta=outcome.score_delta,
            message=message_for_client
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Error processing move: {str(e)}")
    except Exception as e:
        logger.error("Unexpected error in /game/move: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while processing the move: {str(e)}")


@app.post("/game/undo", response_model=GameStateData, summary="Undo the Last Move")
@limiter.limit("100/minute")
async def undo_move(request: Request, request_data: UndoRequestData):
    """
    Restores the most recent state from the history. With an empty history
    the state is returned unchanged.
    """
    try:
        current_state = state_from_data(request_data.state)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid game state in request: {str(e)}")
    return state_to_data(session.undo(current_state))
