"""
Word list loading and tile feedback for Wordle guesses.
"""
import os
import logging
from collections import Counter
from enum import Enum
from typing import List, Sequence, Tuple

logger = logging.getLogger(__name__)

WORD_LENGTH = 5
DEFAULT_WORDS_FILE = os.path.join(os.path.dirname(__file__), "data", "words.txt")


class TileStatus(Enum):
    """Feedback for a single letter of a guess."""
    MATCHED = "matched"
    PARTIAL = "partial"
    UNMATCHED = "unmatched"


class WordListError(ValueError):
    """Raised when a word list is empty or holds a malformed entry."""


def is_well_formed(word: str) -> bool:
    return len(word) == WORD_LENGTH and word.isascii() and word.isalpha()


class WordList:
    """Ordered, read-only sequence of uppercase target words."""

    def __init__(self, words: Sequence[str]):
        normalized = tuple(word.strip().upper() for word in words)
        if not normalized:
            raise WordListError("Word list cannot be empty")
        for index, word in enumerate(normalized):
            if not is_well_formed(word):
                raise WordListError(
                    f"Word at index {index} '{word}' is not {WORD_LENGTH} alphabetic characters"
                )
        self._words = normalized

    def __len__(self):
        return len(self._words)

    def __getitem__(self, index):
        return self._words[index]

    def __iter__(self):
        return iter(self._words)

    @property
    def last_index(self) -> int:
        return len(self._words) - 1

    def __repr__(self):
        return f"<WordList(words={len(self._words)})>"


# Load target words from a text file, one per line, blank lines skipped.
def load_word_list(path: str = DEFAULT_WORDS_FILE) -> WordList:
    with open(path, "r", encoding="utf-8") as f:
        word_list = WordList([line for line in f if line.strip()])
    logger.info("Loaded %d words from %s", len(word_list), path)
    return word_list


def evaluate_guess(guess: str, target: str) -> List[TileStatus]:
    """
    Compute the status of every letter of ``guess`` against ``target``.

    Exact matches are marked first and spend the target's budget for that
    letter. Remaining budget is handed to misplaced letters left to right, so
    a letter is never marked more often than it occurs in the target.

    Args:
        guess: Uppercase guessed word
        target: Uppercase target word of the same length

    Returns:
        One TileStatus per position
    """
    if len(guess) != len(target):
        raise ValueError("Guess and target must be the same length")

    result = [TileStatus.UNMATCHED] * len(target)
    remaining = Counter(target)

    # First pass: exact matches
    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            result[i] = TileStatus.MATCHED
            remaining[g] -= 1

    # Second pass: misplaced letters while budget remains
    for i, g in enumerate(guess):
        if result[i] is TileStatus.MATCHED:
            continue
        if remaining[g] > 0:
            result[i] = TileStatus.PARTIAL
            remaining[g] -= 1

    return result


def tile_status(guess: str, position: int, target: str) -> TileStatus:
    """Status of the letter at ``position`` in ``guess``."""
    return evaluate_guess(guess, target)[position]


def score_row(guess: str, target: str) -> List[Tuple[str, TileStatus]]:
    return list(zip(guess, evaluate_guess(guess, target)))
