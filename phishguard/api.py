"""Flask API for PhishGuard.

Run: python -m phishguard.api
"""

import logging
from flask import Flask, request, jsonify, abort
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import redis as redis_lib

from . import __version__, config
from .app.scanner import scan_url
from .errors import EmptyInput, InputRejected
from .store import build_store

# Logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("api")

# Flask app
app = Flask(__name__)

# Rate limiter: prefer Redis storage in production when REDIS_URL is set
if config.REDIS_URL:
    try:
        redis_lib.from_url(config.REDIS_URL).ping()
        limiter = Limiter(app=app, key_func=get_remote_address,
                          default_limits=["60 per minute"], storage_uri=config.REDIS_URL)
        logger.info("Using Redis at %s for rate limiting", config.REDIS_URL)
    except Exception:
        logger.exception("Failed to connect to Redis, falling back to in-memory limiter")
        limiter = Limiter(app=app, key_func=get_remote_address, default_limits=["60 per minute"])
else:
    limiter = Limiter(app=app, key_func=get_remote_address, default_limits=["60 per minute"])

if config.API_KEY:
    logger.info("API key enabled")

# Scan history shared by all requests
store = build_store()


def require_api_key() -> None:
    if not config.API_KEY:
        return
    key = request.headers.get("X-API-Key") or request.args.get("api_key")
    if not key or key != config.API_KEY:
        abort(401, description="Invalid or missing API key")


def _int_arg(name: str, default: int, low: int, high: int) -> int:
    value = int(request.args.get(name, default))
    return min(high, max(low, value))


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "version": __version__})


@app.route("/scan", methods=["POST"])
@limiter.limit("30 per minute")
def scan():
    require_api_key()
    data = request.get_json(silent=True)
    if not data or "url" not in data:
        return jsonify({"error": "missing 'url' in JSON body"}), 400
    if not isinstance(data["url"], str):
        return jsonify({"error": "'url' must be a string"}), 400

    try:
        result = scan_url(data["url"], store=store)
    except EmptyInput:
        return jsonify({"error": "empty url"}), 400
    except InputRejected:
        return jsonify({"error": "missing dot"}), 400

    logger.info("Scan %s -> %d %s", result.url, result.score, result.category.value)
    return jsonify(result.to_dict()), 200


@app.route("/history", methods=["GET"])
@limiter.limit("20 per minute")
def history():
    require_api_key()
    try:
        limit = _int_arg("limit", config.HISTORY_CAPACITY, 1, config.HISTORY_CAPACITY)
    except ValueError:
        return jsonify({"error": "limit must be integer"}), 400
    rows = [r.to_dict() for r in store.recent_window(limit)]
    return jsonify({"count": len(rows), "rows": rows})


@app.route("/stats", methods=["GET"])
@limiter.limit("20 per minute")
def stats():
    require_api_key()
    try:
        window = _int_arg("window", config.RECENT_WINDOW, 1, config.HISTORY_CAPACITY)
    except ValueError:
        return jsonify({"error": "window must be integer"}), 400
    return jsonify(store.stats(window).to_dict())


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=config.PORT, debug=False)
