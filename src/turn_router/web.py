"""
Flask transport for Turn Router.

Delivers (session_id, message) pairs to the router and returns the
responses each turn produced as JSON.
"""
import logging
import uuid
from typing import Optional

from flask import Flask, jsonify, request, session

from .app import TurnRouterApp
from .config_loader import load_config_from_env
from .exceptions import ConfigurationError, LookupFailure, NoMatchError

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 500


def _session_id(data: dict) -> str:
    """Use the caller's session id, else one kept in the Flask session."""
    session_id = data.get("session_id")
    if session_id:
        return str(session_id)
    if "session_id" not in session:
        session["session_id"] = str(uuid.uuid4())
    return session["session_id"]


def _read_text(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Missing '{key}' in request body")
    if len(value) > MAX_MESSAGE_LENGTH:
        raise ValueError(f"'{key}' exceeds maximum length of {MAX_MESSAGE_LENGTH} characters")
    return value.strip()


def create_app(router_app: Optional[TurnRouterApp] = None, secret_key: Optional[str] = None) -> Flask:
    """
    Build the Flask application.

    :param router_app: Initialized TurnRouterApp; built from the environment when omitted
    :param secret_key: Flask session secret; random when omitted
    :return: Flask app
    """
    if router_app is None:
        router_app = TurnRouterApp(load_config_from_env())
        router_app.initialize()

    app = Flask(__name__)
    app.secret_key = secret_key or uuid.uuid4().hex

    def _run_turn(key: str, turn):
        data = request.get_json(silent=True) or {}
        try:
            text = _read_text(data, key)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        session_id = _session_id(data)
        try:
            responses = turn(text, session_id)
        except LookupFailure as e:
            logger.warning(f"Lookup failed - Session: {session_id}: {e}")
            return jsonify({"error": str(e), "session_id": session_id}), 502
        except NoMatchError as e:
            logger.error(f"Unhandled turn - Session: {session_id}: {e}")
            return jsonify({"error": str(e), "session_id": session_id}), 500
        except ConfigurationError as e:
            logger.error(f"Configuration error - Session: {session_id}: {e}")
            return jsonify({"error": str(e), "session_id": session_id}), 500

        logger.info(f"Turn complete - Session: {session_id}, Responses: {len(responses)}")
        return jsonify({
            "session_id": session_id,
            "responses": [response.to_dict() for response in responses],
        })

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/turn", methods=["POST"])
    def turn():
        """Deliver one message to a session."""
        return _run_turn("message", lambda text, sid: router_app.chat(text, session_id=sid))

    @app.route("/api/ask", methods=["POST"])
    def ask():
        """Ask the knowledge base on behalf of a session."""
        return _run_turn("question", lambda text, sid: router_app.ask(text, session_id=sid))

    @app.route("/api/session/<session_id>/reset", methods=["POST"])
    def reset(session_id: str):
        router_app.reset(session_id)
        logger.info(f"Session reset - Session: {session_id}")
        return jsonify({"status": "success", "session_id": session_id})

    return app
