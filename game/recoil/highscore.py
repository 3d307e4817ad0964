"""
High-score persistence: a single integer
"""

from __future__ import annotations

import json
import logging
import os

logger = logging.getLogger(__name__)


class InMemoryHighScoreStore:
    def __init__(self, value: int = 0):
        self.value = value

    def load(self) -> int:
        return self.value

    def save(self, value: int):
        self.value = int(value)


class JsonHighScoreStore:
    """Stores {"high_score": N} in a JSON file"""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> int:
        if not os.path.exists(self.path):
            return 0
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            return max(0, int(data.get("high_score", 0)))
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("Could not read high score from %s: %s", self.path, exc)
            return 0

    def save(self, value: int):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"high_score": int(value)}, f)
