"""
Per-session game state and the round state machine.
"""
import logging
from dataclasses import asdict, dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional

from validation import GuessValidator, ValidationResult
from wordle_logic import WordList, score_row

logger = logging.getLogger(__name__)

MAX_GUESSES = 6

WINNER_MESSAGE = "Great job!"
LOSER_MESSAGE = "Oops! You're out of guesses."
NO_MORE_WORDS_MESSAGE = "That's it! There are no more words!"


class Outcome(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"
    LIST_EXHAUSTED = "list_exhausted"


class GameError(Exception):
    """Base class for game errors."""


class InvalidTransition(GameError):
    """An operation was called in a state that does not allow it."""


def round_half_up(value: float, digits: int = 0):
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


@dataclass
class Stats:
    rounds_played: int = 0
    wins: int = 0
    win_rate: int = 0
    current_streak: int = 0
    best_streak: int = 0
    guess_counts: List[int] = field(default_factory=list)
    average_guesses: float = 0.0

    def record_round(self, won: bool, guess_count: int):
        """Fold one concluded round into the totals. Call once per round."""
        if won:
            self.current_streak += 1
            self.best_streak = max(self.best_streak, self.current_streak)
            self.wins += 1
        else:
            self.current_streak = 0
        self.rounds_played += 1
        self.win_rate = round_half_up(self.wins / self.rounds_played * 100)
        self.guess_counts.append(guess_count)
        self.average_guesses = round_half_up(sum(self.guess_counts) / len(self.guess_counts), 1)


@dataclass
class GameState:
    """Everything stored for one player between requests."""
    round_index: int = 0
    guesses: List[str] = field(default_factory=list)
    current_guess: Optional[str] = None
    outcome: Outcome = Outcome.IN_PROGRESS
    error_message: Optional[str] = None
    stats: Stats = field(default_factory=Stats)

    @property
    def concluded(self) -> bool:
        return self.outcome in (Outcome.WON, Outcome.LOST)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "GameState":
        return cls(
            round_index=data.get("round_index", 0),
            guesses=list(data.get("guesses", [])),
            current_guess=data.get("current_guess"),
            outcome=Outcome(data.get("outcome", Outcome.IN_PROGRESS.value)),
            error_message=data.get("error_message"),
            stats=Stats(**data.get("stats", {})),
        )


class RoundMachine:
    """
    Drives a GameState through rounds over a fixed word list.

    The word list and validator are shared by every session; the state is
    passed to each call and mutated in place.
    """

    def __init__(self, word_list: WordList, validator: Optional[GuessValidator] = None):
        self.word_list = word_list
        self.validator = validator or GuessValidator()

    def new_state(self) -> GameState:
        return GameState()

    def target_word(self, state: GameState) -> str:
        return self.word_list[state.round_index]

    def game_won(self, state: GameState) -> bool:
        return state.current_guess == self.target_word(state)

    def game_lost(self, state: GameState) -> bool:
        return len(state.guesses) == MAX_GUESSES and not self.game_won(state)

    def list_exhausted(self, state: GameState) -> bool:
        if state.outcome is Outcome.LIST_EXHAUSTED:
            return True
        return state.concluded and state.round_index == self.word_list.last_index

    def submit_guess(self, state: GameState, raw: str) -> ValidationResult:
        """
        Validate and record a guess.

        A rejected guess only sets ``error_message``. An accepted guess that
        ends the round moves the state to WON or LOST and updates the stats.

        Raises:
            InvalidTransition: the round is not in progress
        """
        if state.outcome is not Outcome.IN_PROGRESS:
            raise InvalidTransition(f"Cannot guess while round is {state.outcome.value}")

        result = self.validator.validate(raw, state.guesses)
        if not result.ok:
            state.error_message = result.message
            return result

        state.guesses.append(result.word)
        state.current_guess = result.word
        state.error_message = None

        if self.game_won(state):
            self._conclude(state, Outcome.WON)
        elif self.game_lost(state):
            self._conclude(state, Outcome.LOST)
        return result

    def _conclude(self, state: GameState, outcome: Outcome):
        state.outcome = outcome
        state.stats.record_round(outcome is Outcome.WON, len(state.guesses))
        logger.info(
            "Round %d %s in %d guesses", state.round_index, outcome.value, len(state.guesses)
        )
        if self.list_exhausted(state):
            logger.info("Word list exhausted after round %d", state.round_index)

    def play_again(self, state: GameState) -> bool:
        """
        Move on to the next word.

        Returns False, and settles the state on LIST_EXHAUSTED, when the
        round just played used the last word.

        Raises:
            InvalidTransition: the current round has not concluded
        """
        if self.list_exhausted(state):
            state.outcome = Outcome.LIST_EXHAUSTED
            return False
        if not state.concluded:
            raise InvalidTransition("Cannot start a new round before this one ends")

        state.round_index += 1
        state.guesses = []
        state.current_guess = None
        state.outcome = Outcome.IN_PROGRESS
        state.error_message = None
        return True

    def reset(self, state: GameState) -> GameState:
        fresh = self.new_state()
        state.round_index = fresh.round_index
        state.guesses = fresh.guesses
        state.current_guess = fresh.current_guess
        state.outcome = fresh.outcome
        state.error_message = fresh.error_message
        state.stats = fresh.stats
        logger.info("Game state reset")
        return state

    def render_model(self, state: GameState) -> dict:
        """View data for the page; the target only shows after a loss."""
        target = self.target_word(state)
        exhausted = self.list_exhausted(state)
        won = state.outcome is Outcome.WON
        lost = state.outcome is Outcome.LOST

        messages = []
        if state.error_message:
            messages.append(state.error_message)
        if won:
            messages.append(WINNER_MESSAGE)
        if lost:
            messages.append(LOSER_MESSAGE)
        if exhausted:
            messages.append(NO_MORE_WORDS_MESSAGE)

        return {
            "round": state.round_index + 1,
            "total_rounds": len(self.word_list),
            "rows": [
                [(letter, status.value) for letter, status in score_row(guess, target)]
                for guess in state.guesses
            ],
            "remaining_guesses": MAX_GUESSES - len(state.guesses),
            "outcome": state.outcome.value,
            "error_message": state.error_message,
            "messages": messages,
            "show_input": state.outcome is Outcome.IN_PROGRESS,
            "show_play_again": (won or lost) and not exhausted,
            "show_reset": True,
            "answer": target if lost else None,
            "stats": {
                "rounds_played": state.stats.rounds_played,
                "wins": state.stats.wins,
                "win_rate": state.stats.win_rate,
                "current_streak": state.stats.current_streak,
                "best_streak": state.stats.best_streak,
                "guess_counts": list(state.stats.guess_counts),
                "average_guesses": state.stats.average_guesses,
            },
        }
