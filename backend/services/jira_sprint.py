"""Jira client for loading the issues of a single sprint."""

import logging
from typing import Optional
import requests

logger = logging.getLogger(__name__)

# Common story points fields, checked in order
STORY_POINTS_FIELDS = [
    "customfield_10016",
    "customfield_10020",
    "customfield_10026",
    "customfield_10002",
]

ISSUE_FIELDS = ["summary", "assignee", "status", "priority", "labels"]

REQUIRED_CONFIG_FIELDS = ["baseUrl", "email", "apiToken", "projectKey", "sprintName"]


class JiraSprintError(Exception):
    """Jira lookup failure with the HTTP status to report to the client."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def missing_config_fields(config: dict) -> list:
    """Return the required Jira config fields that are empty or absent."""
    return [field for field in REQUIRED_CONFIG_FIELDS if not config.get(field)]


def build_jql(sprint_id: int, labels: Optional[list] = None) -> str:
    """JQL for a sprint, optionally restricted to any of the given labels."""
    jql = f"sprint = {sprint_id}"

    if labels:
        label_query = " OR ".join(f'labels = "{label}"' for label in labels)
        jql += f" AND ({label_query})"

    return jql


def get_story_points(fields: dict, sp_fields: Optional[list] = None) -> float:
    """Story points from the first candidate field holding a non-zero number.

    Some candidates hold other data on some instances (e.g. customfield_10020
    is often the sprint list), so anything that is not a number is skipped.
    """
    for field_id in sp_fields or STORY_POINTS_FIELDS:
        value = fields.get(field_id)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if value:
            return value
    return 0


def transform_issue(issue: dict, sp_fields: Optional[list] = None) -> dict:
    """Flatten a Jira search result into the sprint issue shape."""
    fields = issue.get("fields", {})
    assignee = fields.get("assignee") or {}

    return {
        "key": issue.get("key"),
        "summary": fields.get("summary", ""),
        "assignee": assignee.get("displayName") or None,
        "storyPoints": get_story_points(fields, sp_fields),
        "status": (fields.get("status") or {}).get("name", ""),
        "priority": (fields.get("priority") or {}).get("name", "Medium"),
        "labels": fields.get("labels") or [],
    }


def sprint_matches(sprint_name: str, wanted: str) -> bool:
    """Loose sprint name match: either name contains the other, ignoring case."""
    name = sprint_name.lower()
    wanted = wanted.lower()
    return wanted in name or name in wanted


class JiraSprintService:
    """Resolves a project's sprint by name and fetches its issues."""

    def __init__(self, server: str, email: str, token: str,
                 sp_fields: Optional[list] = None, max_results: int = 100):
        self.server = server.rstrip("/")
        self.email = email
        self.token = token
        self.sp_fields = sp_fields or STORY_POINTS_FIELDS
        self.max_results = max_results

    def _request(self, method: str, endpoint: str, what: str,
                 params: Optional[dict] = None, json: Optional[dict] = None):
        """Make authenticated request to Jira API.

        Raises JiraSprintError carrying Jira's status code on non-2xx responses.
        """
        response = requests.request(
            method,
            f"{self.server}{endpoint}",
            auth=(self.email, self.token),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            params=params,
            json=json,
            timeout=30
        )

        if not response.ok:
            logger.warning(f"Jira {what} failed: {response.status_code}")
            raise JiraSprintError(
                f"Failed to {what}: {response.status_code} - {response.text}",
                response.status_code
            )

        return response.json()

    def find_board(self, project_key: str) -> dict:
        """Get the first board of a project."""
        data = self._request(
            "GET", "/rest/agile/1.0/board", "fetch boards",
            params={"projectKeyOrId": project_key}
        )

        boards = data.get("values") or []
        if not boards:
            raise JiraSprintError(f"No boards found for project {project_key}", 404)

        return boards[0]

    def find_sprint(self, board_id: int, sprint_name: str) -> dict:
        """Find a sprint on the board by (loose) name."""
        data = self._request(
            "GET", f"/rest/agile/1.0/board/{board_id}/sprint", "fetch sprints",
            params={"state": "active,future,closed", "maxResults": 50}
        )

        sprints = data.get("values", [])
        for sprint in sprints:
            if sprint_matches(sprint.get("name", ""), sprint_name):
                return sprint

        available = ", ".join(s.get("name", "") for s in sprints)
        raise JiraSprintError(
            f'Sprint "{sprint_name}" not found. Available sprints: {available}', 404
        )

    def search_issues(self, jql: str) -> list:
        """Run a JQL search and return the raw Jira issues."""
        data = self._request(
            "POST", "/rest/api/3/search", "search issues",
            json={
                "jql": jql,
                "fields": ISSUE_FIELDS + self.sp_fields,
                "maxResults": self.max_results,
            }
        )
        return data.get("issues", [])

    def get_sprint_issues(self, config: dict) -> dict:
        """Load the issues of the configured sprint.

        Args:
            config: Jira config with projectKey, sprintName and optional labels

        Returns:
            Dict with the matched sprint and its transformed issues
        """
        board = self.find_board(config["projectKey"])
        sprint = self.find_sprint(board["id"], config["sprintName"])
        logger.info(f"Resolved sprint {sprint.get('name')} ({sprint['id']}) on board {board['id']}")

        jql = build_jql(sprint["id"], config.get("labels"))
        issues = [transform_issue(i, self.sp_fields) for i in self.search_issues(jql)]

        return {
            "sprint": {
                "id": sprint["id"],
                "name": sprint.get("name"),
                "state": sprint.get("state"),
                "startDate": sprint.get("startDate"),
                "endDate": sprint.get("endDate"),
                "goal": sprint.get("goal")
            },
            "issues": issues
        }
