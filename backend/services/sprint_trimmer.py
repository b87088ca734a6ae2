"""Sprint trimming calculations.

Works on issue dicts already transformed from Jira search results
(see services.jira_sprint.transform_issue):

    {"key", "summary", "assignee", "storyPoints", "status", "priority", "labels"}

Everything here is pure: callers own the issue list and capacity map.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 32

# Lower number = removed first
PRIORITY_ORDER = {
    "lowest": 0,
    "low": 1,
    "medium": 2,
    "high": 3,
    "highest": 4,
}
DEFAULT_PRIORITY_RANK = PRIORITY_ORDER["medium"]


def _points(issue: dict):
    """Story points of an issue, missing or null counts as 0."""
    return issue.get("storyPoints") or 0


def _format_points(value) -> str:
    """Format story points the way the dashboard shows them (5, not 5.0)."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def priority_rank(priority: Optional[str]) -> int:
    """Rank a Jira priority name, unknown or missing priorities count as medium."""
    return PRIORITY_ORDER.get((priority or "").lower(), DEFAULT_PRIORITY_RANK)


def calculate_workload(issues: list) -> dict:
    """Sum story points per assignee, skipping unassigned issues.

    Developers keep the order in which they first appear.
    """
    workload = {}
    for issue in issues:
        assignee = issue.get("assignee")
        if not assignee:
            continue
        workload[assignee] = workload.get(assignee, 0) + _points(issue)
    return workload


def _trim_order(issues: list) -> list:
    """Lowest priority first, then largest story points first."""
    return sorted(
        issues,
        key=lambda i: (priority_rank(i.get("priority")), -_points(i))
    )


def suggest_trims(issues: list, capacity: dict) -> list:
    """Suggest issues to remove so each developer fits their capacity.

    For every overloaded developer, walks their issues in trim order and
    suggests removals until the overload is covered. Each suggestion's
    impact is capped at the overload still remaining, but the full story
    points of the issue are counted against it, so a developer never
    gets more suggestions than needed.

    Args:
        issues: Transformed sprint issues
        capacity: Developer name -> story point capacity (missing means 0)

    Returns:
        List of {"issue", "reason", "impact"} dicts, highest impact first
    """
    suggestions = []

    for developer, workload in calculate_workload(issues).items():
        developer_capacity = capacity.get(developer) or 0
        if workload <= developer_capacity:
            continue

        overload = workload - developer_capacity
        logger.debug(
            f"{developer} overloaded: workload={workload} capacity={developer_capacity}"
        )

        developer_issues = _trim_order(
            [i for i in issues if i.get("assignee") == developer]
        )
        reason = f"{developer} is overloaded by {_format_points(overload)} SP"

        remaining_overload = overload
        for issue in developer_issues:
            if remaining_overload <= 0:
                break

            points = _points(issue)
            suggestions.append({
                "issue": issue,
                "reason": reason,
                "impact": min(points, remaining_overload),
            })
            remaining_overload -= points

    suggestions.sort(key=lambda s: s["impact"], reverse=True)
    return suggestions


def calculate_sprint_stats(issues: list) -> dict:
    """Overview figures for the sprint data view."""
    developer_stats = {}
    assigned_count = 0

    for issue in issues:
        assignee = issue.get("assignee")
        if not assignee:
            continue
        assigned_count += 1

        if assignee not in developer_stats:
            developer_stats[assignee] = {"issues": 0, "storyPoints": 0, "issueKeys": []}
        stats = developer_stats[assignee]
        stats["issues"] += 1
        stats["storyPoints"] += _points(issue)
        stats["issueKeys"].append(issue.get("key"))

    return {
        "totalIssues": len(issues),
        "totalStoryPoints": sum(_points(i) for i in issues),
        "assignedCount": assigned_count,
        "unassignedCount": len(issues) - assigned_count,
        "developerStats": developer_stats,
    }


def initialize_capacity(issues: list, capacity: Optional[dict] = None,
                        default_capacity=DEFAULT_CAPACITY) -> dict:
    """Build a capacity map covering every assigned developer.

    Keeps existing non-zero capacities, fills the rest with the default
    and drops developers no longer assigned to anything.
    """
    capacity = capacity or {}
    return {
        developer: capacity.get(developer) or default_capacity
        for developer in calculate_workload(issues)
    }


def utilization_status(utilization: float) -> str:
    if utilization <= 80:
        return "Optimal"
    if utilization <= 100:
        return "At Capacity"
    return "Overloaded"


def calculate_capacity_report(issues: list, capacity: dict) -> dict:
    """Per-developer workload against capacity, plus team totals."""
    workload = calculate_workload(issues)
    developers = []

    for developer, current_workload in workload.items():
        developer_capacity = capacity.get(developer) or 0
        utilization = (
            current_workload / developer_capacity * 100 if developer_capacity > 0 else 0
        )
        developers.append({
            "developer": developer,
            "workload": current_workload,
            "capacity": developer_capacity,
            "utilization": round(utilization, 1),
            "status": utilization_status(utilization),
            "overloaded": utilization > 100,
        })

    total_capacity = sum(capacity.values())
    total_workload = sum(workload.values())

    return {
        "developers": developers,
        "totalCapacity": total_capacity,
        "totalWorkload": total_workload,
        "remainingCapacity": total_capacity - total_workload,
    }


def calculate_trim_summary(issues: list, capacity: dict, selected_keys=None) -> dict:
    """Sprint totals before and after removing the selected issues.

    Keys not found in the issue list contribute 0 points.
    """
    selected_keys = set(selected_keys or [])
    points_by_key = {i.get("key"): _points(i) for i in issues}

    total_capacity = sum(capacity.values())
    total_workload = sum(calculate_workload(issues).values())
    selected_points = sum(points_by_key.get(key, 0) for key in selected_keys)
    new_workload = total_workload - selected_points

    return {
        "totalCapacity": total_capacity,
        "totalWorkload": total_workload,
        "selectedStoryPoints": selected_points,
        "selectedCount": len(selected_keys),
        "newWorkload": new_workload,
        "isSprintOverloaded": total_workload > total_capacity,
        "isBalanced": new_workload <= total_capacity,
        "overload": total_workload - total_capacity,
        "remainingOverload": new_workload - total_capacity,
    }
