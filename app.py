import os
import logging
from uuid import uuid4

import redis
from flask import Flask, current_app, jsonify, redirect, render_template, request, session, url_for
from flask_session import Session

from config import config
from game import InvalidTransition, RoundMachine
from store import StoreBusyError, create_store, game_transaction
from validation import DictionaryClient, GuessValidator
from wordle_logic import load_word_list

GAME_ID_KEY = "game_id"


# Flask app setup
def create_app(config_name=None, word_list=None, word_checker=None, store=None):
    """
    Factory function to create and configure Flask app.

    ``word_list``, ``word_checker`` and ``store`` override what the config
    would build; tests use them to inject fixtures.
    """
    app = Flask(__name__)
    app.config.from_object(config[config_name or os.environ.get("FLASK_CONFIG", "default")])
    logging.basicConfig(level=app.config["LOG_LEVEL"])

    # Redis-backed server-side sessions
    if app.config["SESSION_TYPE"] == "redis":
        app.config["SESSION_REDIS"] = redis.from_url(app.config["REDIS_URL"])
    Session(app)

    if word_list is None:
        word_list = load_word_list(app.config["WORDS_FILE"])
    if word_checker is None and app.config["DICTIONARY_API_KEY"]:
        word_checker = DictionaryClient(
            app.config["DICTIONARY_API_KEY"],
            url=app.config["DICTIONARY_API_URL"],
            timeout=app.config["DICTIONARY_TIMEOUT"],
        ).is_real_word

    app.extensions["round_machine"] = RoundMachine(word_list, GuessValidator(word_checker))
    app.extensions["game_store"] = store or create_store(app.config)

    register_routes(app)
    return app


def machine():
    return current_app.extensions["round_machine"]


def game_store():
    return current_app.extensions["game_store"]


def current_game_id():
    """Opaque id tying the browser session to its stored game state."""
    if GAME_ID_KEY not in session:
        session[GAME_ID_KEY] = uuid4().hex
    return session[GAME_ID_KEY]


def transaction():
    return game_transaction(game_store(), current_game_id(), machine().new_state)


def register_routes(app):

    # --------------------
    # Page routes
    # --------------------
    @app.route("/")
    def index():
        """Render the board, starting a fresh game on first visit."""
        with transaction() as state:
            model = machine().render_model(state)
            # Errors are shown once
            state.error_message = None
        return render_template("index.html", **model)

    @app.route("/", methods=["POST"])
    def submit_guess():
        """Record a guess from the form field ``current_word``."""
        word = request.form.get("current_word", "")
        try:
            with transaction() as state:
                machine().submit_guess(state, word)
        except InvalidTransition as e:
            current_app.logger.warning("Rejected guess for game %s: %s", current_game_id(), e)
        return redirect(url_for("index"))

    @app.route("/play-again", methods=["POST"])
    def play_again():
        """Advance to the next word."""
        try:
            with transaction() as state:
                machine().play_again(state)
        except InvalidTransition as e:
            current_app.logger.warning("Rejected play-again for game %s: %s", current_game_id(), e)
        return redirect(url_for("index"))

    @app.route("/reset", methods=["POST"])
    def reset():
        """Start over from the first word with zeroed statistics."""
        with transaction() as state:
            machine().reset(state)
        return redirect(url_for("index"))

    # --------------------
    # JSON routes
    # --------------------
    @app.route("/state")
    def state():
        """Current render model as JSON."""
        with transaction() as game_state:
            model = machine().render_model(game_state)
        return jsonify(model)

    @app.route("/health")
    def health():
        """Health check endpoint"""
        return jsonify({
            "status": "ok",
            "words_loaded": len(machine().word_list),
        })

    @app.errorhandler(StoreBusyError)
    def store_busy(e):
        current_app.logger.error("Store busy: %s", e)
        return jsonify({"error": "Another request for this game is in progress"}), 503


if __name__ == "__main__":
    app = create_app()
    print(f"Loaded {len(app.extensions['round_machine'].word_list)} words")
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=app.config.get("DEBUG", False))
