"""Saved planning state API endpoints.

Keeps each project's Jira config and developer capacity in a local JSON
file so they survive browser sessions. Intended for local use only:
API tokens are stored as given.
"""

import json
import os
from flask import Blueprint, current_app, request, jsonify

bp = Blueprint("planning", __name__, url_prefix="/api/planning")


def _state_file():
    return current_app.config["PLANNING_STATE_FILE"]


def _load_state():
    """Load all saved projects from file."""
    path = _state_file()
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r") as f:
            state = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        current_app.logger.warning(f"Ignoring unreadable planning state: {e}")
        return {}

    if not isinstance(state, dict):
        current_app.logger.warning("Ignoring planning state: expected a JSON object")
        return {}
    return state


def _save_state(state):
    """Save all projects to file.

    Written to a sibling temp file, then renamed over the old one.
    """
    path = _state_file()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w") as f:
        json.dump(state, f, indent=2)
    os.replace(tmp_path, path)


@bp.route("/<project_key>", methods=["GET"])
def get_planning_state(project_key):
    """Get the saved config and capacity for a project.

    Returns empty config/capacity when nothing is saved yet.
    """
    project = _load_state().get(project_key, {})
    return jsonify({
        "data": {
            "config": project.get("config", {}),
            "capacity": project.get("capacity", {})
        }
    })


@bp.route("/<project_key>", methods=["POST"])
def save_planning_state(project_key):
    """Save planning state for a project.

    Expects JSON body with optional fields:
        - config: { baseUrl, email, apiToken, projectKey, sprintName, labels }
        - capacity: { developer: story points }

    Merges with the existing state (doesn't overwrite unspecified fields).
    """
    data = request.get_json(silent=True)

    if not data or not isinstance(data, dict):
        return jsonify({"error": "Missing request body"}), 400

    for field in ("config", "capacity"):
        if field in data and not isinstance(data[field], dict):
            return jsonify({"error": f"{field} must be an object"}), 400

    state = _load_state()
    project = state.setdefault(project_key, {})

    if "config" in data:
        project["config"] = data["config"]

    if "capacity" in data:
        project["capacity"] = data["capacity"]

    _save_state(state)

    return jsonify({"data": project})


@bp.route("/<project_key>", methods=["DELETE"])
def clear_planning_state(project_key):
    """Forget everything saved for a project."""
    state = _load_state()

    if project_key in state:
        del state[project_key]
        _save_state(state)

    return jsonify({"data": {"cleared": True}})
