"""Sprint trim suggestion API endpoints."""

from flask import Blueprint, request, jsonify

from services.sprint_trimmer import calculate_trim_summary, suggest_trims

bp = Blueprint("trim", __name__, url_prefix="/api/trim")


@bp.route("/suggestions", methods=["POST"])
def get_trim_suggestions():
    """Suggest issues to remove from an overloaded sprint.

    Expects JSON body with:
        - issues: list of sprint issues
        - capacity: { developer: story points }
        - selected: optional list of issue keys picked for removal

    Returns:
        - suggestions: [{issue, reason, impact}], highest impact first
        - suggestedKeys: keys of all suggested issues
        - summary: workload before and after removing the selection
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("issues"), list):
        return jsonify({"error": "Missing required field: issues"}), 400

    if not all(isinstance(issue, dict) for issue in data["issues"]):
        return jsonify({"error": "issues must be a list of objects"}), 400

    capacity = data.get("capacity")
    if not isinstance(capacity, dict):
        return jsonify({"error": "Missing required field: capacity"}), 400

    selected = data.get("selected") or []
    if not isinstance(selected, list):
        return jsonify({"error": "selected must be a list of issue keys"}), 400

    issues = data["issues"]
    suggestions = suggest_trims(issues, capacity)

    return jsonify({
        "data": {
            "suggestions": suggestions,
            "suggestedKeys": [s["issue"].get("key") for s in suggestions],
            "summary": calculate_trim_summary(issues, capacity, selected)
        }
    })
