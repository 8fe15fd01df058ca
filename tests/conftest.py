import pytest

from app import create_app
from game import RoundMachine
from store import MemoryGameStore
from validation import GuessValidator
from wordle_logic import WordList

WORDS = ["CRANE", "SPEED", "PLANT"]


class StubDictionary:
    """Records lookups; words in ``unknown`` are not real."""

    def __init__(self, unknown=()):
        self.unknown = set(unknown)
        self.calls = []

    def __call__(self, word):
        self.calls.append(word)
        return word not in self.unknown


@pytest.fixture
def word_list():
    return WordList(WORDS)


@pytest.fixture
def machine(word_list):
    return RoundMachine(word_list, GuessValidator())


@pytest.fixture
def state(machine):
    return machine.new_state()


@pytest.fixture
def dictionary():
    return StubDictionary(unknown={"XYZZY"})


@pytest.fixture
def store():
    return MemoryGameStore(lock_timeout=0.5)


@pytest.fixture
def app(word_list, dictionary, store):
    return create_app("testing", word_list=word_list, word_checker=dictionary, store=store)


@pytest.fixture
def client(app):
    return app.test_client()
