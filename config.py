"""
Flask configuration, read from the environment (and a local .env file).
"""
import os

from cachelib import SimpleCache
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")
    WORDS_FILE = os.environ.get("WORDS_FILE", os.path.join(BASE_DIR, "data", "words.txt"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Game state store and per-session locking
    REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
    GAME_STORE = os.environ.get("GAME_STORE", "redis")
    GAME_STATE_TTL = int(os.environ.get("GAME_STATE_TTL", 86400))
    GAME_LOCK_TIMEOUT = float(os.environ.get("GAME_LOCK_TIMEOUT", 5))

    # Real-word lookup is skipped when no key is set
    DICTIONARY_API_URL = os.environ.get(
        "DICTIONARY_API_URL",
        "https://dictionaryapi.com/api/v3/references/collegiate/json/{word}",
    )
    DICTIONARY_API_KEY = os.environ.get("DICTIONARY_API_KEY")
    DICTIONARY_TIMEOUT = float(os.environ.get("DICTIONARY_TIMEOUT", 3))

    # Flask-Session server-side sessions
    SESSION_TYPE = "redis"
    SESSION_PERMANENT = False
    SESSION_USE_SIGNER = True


class DevelopmentConfig(Config):
    DEBUG = True
    GAME_STORE = os.environ.get("GAME_STORE", "memory")
    SESSION_TYPE = "cachelib"
    SESSION_CACHELIB = SimpleCache()


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    GAME_STORE = "memory"
    GAME_LOCK_TIMEOUT = 1.0
    DICTIONARY_API_KEY = None
    SESSION_TYPE = "cachelib"
    SESSION_CACHELIB = SimpleCache()


class ProductionConfig(Config):
    pass


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
