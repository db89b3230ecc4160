"""
Settings Module

Game configuration backed by an optional JSON file. Missing keys fall back
to the defaults declared on GameSettings.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

SETTINGS_FILE = Path("config.json")


class GameSettings(BaseModel):
    """Tunable parameters for a game session."""
    board_size: int = Field(
        default=4,
        gt=1,
        description="Size of the N x N game board."
    )
    win_tile: int = Field(
        default=2048,
        gt=0,
        description="Tile value that marks the game as won."
    )
    four_probability: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Chance that a spawned tile is a 4 instead of a 2."
    )
    best_score_file: str = Field(
        default="best_score.json",
        description="Where the best score is persisted."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for tile spawning; None means nondeterministic."
    )


def load_settings(path: Union[str, Path] = SETTINGS_FILE) -> GameSettings:
    """
    Load settings from a JSON file.

    Returns:
        GameSettings. Returns defaults if the file is missing or invalid.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Settings file %s not found, using defaults", path)
        return GameSettings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        settings = GameSettings(**data)
        logger.debug("Settings loaded: %s", settings)
        return settings

    except (json.JSONDecodeError, OSError, TypeError, ValidationError) as e:
        logger.warning("Failed to load settings from %s: %s, using defaults", path, e)
        return GameSettings()


def save_settings(settings: GameSettings, path: Union[str, Path] = SETTINGS_FILE) -> None:
    """
    Save settings to a JSON file.

    Args:
        settings: Settings to save
        path: Destination file
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings.model_dump(), f, indent=2)
        logger.debug("Settings saved: %s", settings)
    except OSError as e:
        logger.error("Failed to save settings: %s", e)
