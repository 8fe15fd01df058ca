"""
Guess validation: format, repeats and an optional dictionary lookup.
"""
import logging
from enum import Enum
from typing import Callable, Iterable, Optional

import requests

from wordle_logic import is_well_formed

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY_URL = "https://dictionaryapi.com/api/v3/references/collegiate/json/{word}"


class Rejection(Enum):
    """Reasons a submitted guess is turned down."""
    MALFORMED_WORD = "malformed_word"
    DUPLICATE_GUESS = "duplicate_guess"
    NOT_A_REAL_WORD = "not_a_real_word"


class DictionaryLookupError(Exception):
    """The dictionary service could not answer."""


class ValidationResult:
    """Outcome of validating one raw submission."""

    def __init__(self, word: str, reason: Optional[Rejection] = None):
        self.word = word
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> Optional[str]:
        if self.reason is Rejection.MALFORMED_WORD:
            return "Word must be exactly 5 alphabetic characters."
        if self.reason is Rejection.DUPLICATE_GUESS:
            return f"You've already used {self.word}."
        if self.reason is Rejection.NOT_A_REAL_WORD:
            return "Word must be a real word."
        return None

    def __eq__(self, other):
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.word == other.word and self.reason == other.reason

    def __repr__(self):
        return f"<ValidationResult(word='{self.word}', reason={self.reason})>"


class DictionaryClient:
    """
    Real-word lookup against the Merriam-Webster collegiate API.

    Known words come back as a list of entry objects carrying ``meta.uuid``;
    unknown words come back as a list of spelling suggestions.
    """

    def __init__(self, api_key: str, url: str = DEFAULT_DICTIONARY_URL,
                 timeout: float = 3.0, http: Optional[requests.Session] = None):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.http = http or requests.Session()

    def is_real_word(self, word: str) -> bool:
        try:
            response = self.http.get(
                self.url.format(word=word.lower()),
                params={"key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            entries = response.json()
        except (requests.RequestException, ValueError) as e:
            raise DictionaryLookupError(f"Lookup for {word} failed: {e}") from e

        if not isinstance(entries, list):
            raise DictionaryLookupError(f"Unexpected payload for {word}: {type(entries).__name__}")

        return any(
            isinstance(entry, dict) and entry.get("meta", {}).get("uuid")
            for entry in entries
        )


class GuessValidator:
    """
    Checks a raw guess in order: format, repeat, then dictionary.

    The first failing check wins. ``word_checker`` is optional; without it
    any well-formed, unused word is accepted.
    """

    def __init__(self, word_checker: Optional[Callable[[str], bool]] = None):
        self.word_checker = word_checker

    def validate(self, raw: str, prior_guesses: Iterable[str]) -> ValidationResult:
        word = (raw or "").strip().upper()

        if not is_well_formed(word):
            return ValidationResult(word, Rejection.MALFORMED_WORD)

        if word in {guess.upper() for guess in prior_guesses}:
            return ValidationResult(word, Rejection.DUPLICATE_GUESS)

        if self.word_checker is not None and not self._is_real_word(word):
            return ValidationResult(word, Rejection.NOT_A_REAL_WORD)

        return ValidationResult(word)

    def _is_real_word(self, word: str) -> bool:
        try:
            return bool(self.word_checker(word))
        except DictionaryLookupError as e:
            # Fail closed: an unreachable dictionary rejects the guess.
            logger.warning("Dictionary lookup failed, rejecting %s: %s", word, e)
            return False
