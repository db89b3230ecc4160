# cli_driver.py
# Terminal front-end for the 2048 engine.

import argparse
import logging
import random
from typing import Callable, List, Optional

from . import session
from .best_score import BestScoreStore
from .controls import parse_direction
from .core import GameProgressState
from .settings import SETTINGS_FILE, load_settings

logger = logging.getLogger(__name__)

PROMPT = "Enter move (W/A/S/D or up/down/left/right, U undo, N new game, Q quit): "


def run(settings, store: BestScoreStore, read_input: Callable[[str], str] = input,
        rng: Optional[random.Random] = None) -> session.GameState:
    """
    Runs the interactive loop until the player quits or input runs out.
    Returns the final state.
    """
    if rng is None:
        rng = random.Random(settings.seed)

    state = session.new_game(settings.board_size, rng, best_score=store.load(),
                             win_tile=settings.win_tile, four_probability=settings.four_probability)
    display_board_state(state)

    while True:
        try:
            move_input = read_input(PROMPT).strip().upper()
        except EOFError:
            break

        if move_input == 'Q':
            print("Quitting game.")
            break

        if move_input == 'U':
            if not state.can_undo:
                print("Nothing to undo.")
            state = session.undo(state)
        elif move_input == 'N':
            state = session.restart(state, rng, settings.four_probability)
        else:
            chosen_direction = parse_direction(move_input)
            if chosen_direction is None:
                print("Invalid input. Use W, A, S, D.")
                continue
            if state.game_over:
                print("The game is over. Press N for a new game or Q to quit.")
                continue

            outcome = session.move(state, chosen_direction, rng, settings.four_probability)
            if not outcome.moved:
                print("Move did not change the board. Try a different direction.")
                continue

            state = outcome.state
            if state.best_score > store.load():
                store.save(state.best_score)

        display_board_state(state)

    print("\n--- Final Board State ---")
    display_board_state(state)
    return state


# --- Display Function ---
def display_board_state(state: session.GameState):
    """Prints the board, score, and game status to the console."""
    print(f"\nScore: {state.score}    Best: {state.best_score}")
    progress = state.progress
    status_message = {
        GameProgressState.IN_PROGRESS: f"Status: {progress.name}",
        GameProgressState.GAME_WON: "YOU WON! Keep going for a higher score.",
        GameProgressState.GAME_OVER: "GAME OVER!"
    }
    print(status_message.get(progress, f"Status: {progress.name} (Unknown)"))

    for row in state.board:
        print("\t".join(str(value) if value else "." for value in row))
    print("-" * (len(state.board) * 6)) # Adjust width based on board size


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Play 2048 in the terminal.")
    parser.add_argument("--config", default=str(SETTINGS_FILE), help="Path to a JSON settings file.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible tile spawns.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    settings = load_settings(args.config)
    if args.seed is not None:
        settings = settings.model_copy(update={"seed": args.seed})

    run(settings, BestScoreStore(settings.best_score_file))


if __name__ == "__main__":
    main()
