"""Sprint data API endpoints."""

from flask import Blueprint, current_app, request, jsonify
import requests

from services.jira_sprint import JiraSprintError, JiraSprintService, missing_config_fields
from services.sprint_trimmer import calculate_sprint_stats

bp = Blueprint("sprint", __name__, url_prefix="/api/sprint")


@bp.route("/issues", methods=["POST"])
def get_sprint_issues():
    """Fetch the issues of a sprint from Jira.

    Expects JSON body with:
        - config: { baseUrl, email, apiToken, projectKey, sprintName, labels }

    The sprint is matched loosely by name on the project's first board.
    Labels, when given, restrict the issues to any of them.
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("config"), dict):
        return jsonify({"error": "Missing request body"}), 400

    config = data["config"]
    if missing_config_fields(config):
        return jsonify({"error": "Missing required configuration fields"}), 400

    try:
        service = JiraSprintService(
            config["baseUrl"], config["email"], config["apiToken"],
            sp_fields=current_app.config["TRIMMER_STORY_POINTS_FIELDS"],
            max_results=current_app.config["TRIMMER_MAX_RESULTS"]
        )
        result = service.get_sprint_issues(config)
        return jsonify({"data": result})

    except JiraSprintError as e:
        return jsonify({"error": e.message}), e.status_code
    except requests.exceptions.Timeout:
        return jsonify({"error": "Connection to Jira timed out"}), 504
    except requests.exceptions.RequestException as e:
        current_app.logger.error(f"Jira API error: {e}")
        return jsonify({"error": f"Failed to connect to Jira: {str(e)}"}), 500


@bp.route("/stats", methods=["POST"])
def get_sprint_stats():
    """Summarize sprint issues by assignee.

    Expects JSON body with:
        - issues: list of sprint issues
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("issues"), list):
        return jsonify({"error": "Missing required field: issues"}), 400

    if not all(isinstance(issue, dict) for issue in data["issues"]):
        return jsonify({"error": "issues must be a list of objects"}), 400

    return jsonify({"data": calculate_sprint_stats(data["issues"])})
