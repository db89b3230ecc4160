"""
Best score persistence.

A single integer kept in a JSON key-value file, read at startup and written
whenever a new best is reached.
"""

import json
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "2048-best-score"


class BestScoreStore:
    """Durable store for the best score."""

    def __init__(self, path: Union[str, Path], key: str = BEST_SCORE_KEY):
        self.path = Path(path)
        self.key = key

    def load(self) -> int:
        """
        Read the stored best score.

        Returns:
            The best score, or 0 if nothing usable is stored.
        """
        if not self.path.exists():
            return 0

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to read best score from %s: %s", self.path, e)
            return 0

        value = data.get(self.key, 0) if isinstance(data, dict) else 0
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning("Ignoring invalid best score %r in %s", value, self.path)
            return 0
        return value

    def save(self, score: int) -> None:
        """Write `score`, keeping any other keys already in the file."""
        data = {}
        if self.path.exists():
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    data = loaded
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Overwriting unreadable best score file %s: %s", self.path, e)

        data[self.key] = int(score)
        try:
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            logger.debug("Best score %d saved to %s", score, self.path)
        except OSError as e:
            logger.error("Failed to save best score: %s", e)

    def update(self, score: int) -> int:
        """Persist `score` if it beats the stored value. Returns the best score."""
        best = self.load()
        if score > best:
            self.save(score)
            return score
        return best
