"""Developer capacity API endpoints."""

from flask import Blueprint, current_app, request, jsonify

from services.sprint_trimmer import calculate_capacity_report, initialize_capacity

bp = Blueprint("capacity", __name__, url_prefix="/api/capacity")


@bp.route("/report", methods=["POST"])
def get_capacity_report():
    """Compare each developer's workload with their capacity.

    Expects JSON body with:
        - issues: list of sprint issues
        - capacity: optional { developer: story points }

    Developers without a capacity get the configured default (32 SP).

    Returns:
        - Capacity map actually used
        - Per-developer workload, utilization and status
        - Team totals
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("issues"), list):
        return jsonify({"error": "Missing required field: issues"}), 400

    if not all(isinstance(issue, dict) for issue in data["issues"]):
        return jsonify({"error": "issues must be a list of objects"}), 400

    capacity = data.get("capacity") or {}
    if not isinstance(capacity, dict):
        return jsonify({"error": "capacity must be an object"}), 400

    issues = data["issues"]
    capacity = initialize_capacity(
        issues, capacity, current_app.config["TRIMMER_DEFAULT_CAPACITY"]
    )

    report = calculate_capacity_report(issues, capacity)
    report["capacity"] = capacity
    return jsonify({"data": report})
