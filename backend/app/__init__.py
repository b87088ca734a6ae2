"""Flask application factory."""

import json
import os
from flask import Flask
from flask_cors import CORS

from services.jira_sprint import STORY_POINTS_FIELDS
from services.sprint_trimmer import DEFAULT_CAPACITY

CONFIG_DIR = os.path.join(os.path.dirname(__file__), "..", "config")


def load_trimmer_config(app):
    """Load capacity and Jira field defaults from config file."""
    app.config["TRIMMER_DEFAULT_CAPACITY"] = DEFAULT_CAPACITY
    app.config["TRIMMER_STORY_POINTS_FIELDS"] = list(STORY_POINTS_FIELDS)
    app.config["TRIMMER_MAX_RESULTS"] = 100

    config_path = os.path.join(CONFIG_DIR, "trimmer-config.json")

    if os.path.exists(config_path):
        try:
            with open(config_path, "r") as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            app.logger.warning(f"Failed to load trimmer config: {e}")
            return

        if not isinstance(config, dict):
            app.logger.warning("Ignoring trimmer config: expected a JSON object")
            return

        app.config["TRIMMER_DEFAULT_CAPACITY"] = config.get(
            "defaultCapacity", DEFAULT_CAPACITY
        )
        app.config["TRIMMER_STORY_POINTS_FIELDS"] = config.get(
            "storyPointsFields", list(STORY_POINTS_FIELDS)
        )
        app.config["TRIMMER_MAX_RESULTS"] = config.get("maxResults", 100)
        app.logger.info(f"Loaded trimmer config from {config_path}")
    else:
        app.logger.info("No trimmer-config.json found, using defaults")


def create_app():
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Enable CORS for frontend
    CORS(app, resources={
        r"/api/*": {
            "origins": ["http://localhost:5173", "http://127.0.0.1:5173"],
            "methods": ["GET", "POST", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    app.config["PLANNING_STATE_FILE"] = os.path.join(CONFIG_DIR, "planning-state.json")

    # Register blueprints
    from app.api import sprint, capacity, trim, planning
    app.register_blueprint(sprint.bp)
    app.register_blueprint(capacity.bp)
    app.register_blueprint(trim.bp)
    app.register_blueprint(planning.bp)

    load_trimmer_config(app)

    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok"}

    return app
