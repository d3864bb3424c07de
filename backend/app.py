import os
import logging
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from dotenv import load_dotenv

from autopilot import list_levels
from config import load_config
from domain.constants import CLOSED, OPEN, SPEED_LADDER
from main import run_simulation
from services.stats_recorder import StatsRecorder

load_dotenv()

app = Flask(__name__)
logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)

MAX_SIMULATION_TICKS = 5000

# Allowed origins can be configured via CORS_ALLOWED_ORIGINS env var (comma-separated)
allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS")
if allowed_origins_env:
    allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]
else:
    # sensible defaults for local dev
    allowed_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

CORS(app, resources={r"/api/*": {"origins": allowed_origins}})


def get_stats_recorder() -> StatsRecorder:
    """One recorder per request, pointed at STATS_DB_PATH (falls back to SNAKE_STATS_DB_PATH)."""
    if "stats_recorder" not in g:
        g.stats_recorder = StatsRecorder(db_path=app.config.get("STATS_DB_PATH"))
    return g.stats_recorder


@app.route("/api/levels", methods=["GET"])
def get_levels():
    """List the autopilot levels."""
    return jsonify({"levels": list_levels()})


@app.route("/api/speeds", methods=["GET"])
def get_speeds():
    """List the speed ladder (seconds per tick, slowest first)."""
    return jsonify({
        "speeds": [{"level": i, "interval": interval} for i, interval in enumerate(SPEED_LADDER)]
    })


@app.route("/api/simulate", methods=["POST"])
def simulate():
    """
    Run one headless autopilot game and return its summary. The game is
    recorded in the lifetime stats served by /api/stats.

    JSON body (all optional):
    - width, height: board size
    - walls: true for a closed board, false for wrap-around
    - level: autopilot level
    - speed_level: index into the speed ladder
    - power_ups: enable power-ups
    - max_ticks: tick limit (capped at MAX_SIMULATION_TICKS)
    - seed: random seed
    - include_history: include every snapshot
    """
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    overrides = {}
    try:
        if "width" in body:
            overrides["width"] = int(body["width"])
        if "height" in body:
            overrides["height"] = int(body["height"])
        if "walls" in body:
            overrides["boundary_mode"] = CLOSED if bool(body["walls"]) else OPEN
        if "level" in body:
            overrides["autopilot_level"] = str(body["level"])
        if "speed_level" in body:
            overrides["speed_level"] = int(body["speed_level"])
        if "power_ups" in body:
            overrides["power_ups_enabled"] = bool(body["power_ups"])

        max_ticks = int(body.get("max_ticks", 1000))
        if max_ticks <= 0:
            raise ValueError("max_ticks must be positive")
        max_ticks = min(max_ticks, MAX_SIMULATION_TICKS)
        seed = body.get("seed")
        seed = int(seed) if seed is not None else None

        config = load_config(**overrides)
    except (TypeError, ValueError) as error:
        return jsonify({"error": str(error)}), 400

    try:
        result = run_simulation(
            config,
            max_ticks=max_ticks,
            seed=seed,
            include_history=bool(body.get("include_history", False)),
            stats=get_stats_recorder(),
        )
        return jsonify(result)
    except Exception as error:
        logger.error(f"Error running simulation: {error}")
        return jsonify({"error": "Simulation failed"}), 500


@app.route("/api/stats", methods=["GET"])
def get_stats():
    """Lifetime stats: high score, games played, AI games played, playtime."""
    try:
        return jsonify(get_stats_recorder().get_stats().to_dict())
    except Exception as error:
        logger.error(f"Error fetching stats: {error}")
        return jsonify({"error": "Failed to fetch stats"}), 500


@app.route("/api/stats", methods=["DELETE"])
def delete_stats():
    """
    Delete stored stats.

    Query parameters:
    - scope: 'high_score' to reset only the high score, 'all' (default) for everything
    """
    scope = request.args.get("scope", "all")
    if scope not in ("high_score", "all"):
        return jsonify({"error": f"Unknown scope '{scope}'"}), 400

    try:
        recorder = get_stats_recorder()
        recorder.delete_data(high_score_only=(scope == "high_score"))
        return jsonify({"deleted": scope, "stats": recorder.get_stats().to_dict()})
    except Exception as error:
        logger.error(f"Error deleting stats: {error}")
        return jsonify({"error": "Failed to delete stats"}), 500


if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port)
