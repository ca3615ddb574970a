import logging
import os

log = logging.getLogger(__name__)

# Where high score will be stored
HIGH_FILE = os.environ.get("FLAPPY_HIGHSCORE_FILE", "flappy_highscore.txt")


class HighScoreStore:
    """The one persisted value: the best score, as base-10 text in a file."""

    def __init__(self, path=HIGH_FILE):
        self.path = path

    def load(self):
        # missing, empty or garbled files all count as "no high score yet"
        try:
            with open(self.path, "r") as f:
                return max(0, int(f.read().strip() or 0))
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as e:
            log.warning("ignoring unreadable high score in %s: %s", self.path, e)
            return 0

    def save(self, v):
        try:
            with open(self.path, "w") as f:
                f.write(str(int(v)))
        except OSError as e:
            log.warning("could not save high score to %s: %s", self.path, e)
