"""Shared fixtures for Sprint Trimmer tests."""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def jira_config():
    """Jira connection config as sent by the frontend."""
    return {
        "baseUrl": "https://test.atlassian.net",
        "email": "test@example.com",
        "apiToken": "test-token-123",
        "projectKey": "PROJ",
        "sprintName": "Sprint 5",
        "labels": []
    }


@pytest.fixture
def sample_issues():
    """Transformed sprint issues for two developers and one unassigned."""
    return [
        {
            "key": "PROJ-1",
            "summary": "Checkout redesign",
            "assignee": "Alice",
            "storyPoints": 5,
            "status": "To Do",
            "priority": "High",
            "labels": ["frontend"]
        },
        {
            "key": "PROJ-2",
            "summary": "Fix typo in footer",
            "assignee": "Alice",
            "storyPoints": 3,
            "status": "To Do",
            "priority": "Low",
            "labels": []
        },
        {
            "key": "PROJ-3",
            "summary": "Payment webhook retries",
            "assignee": "Bob",
            "storyPoints": 8,
            "status": "In Progress",
            "priority": "Medium",
            "labels": ["backend"]
        },
        {
            "key": "PROJ-4",
            "summary": "Spike: search indexing",
            "assignee": None,
            "storyPoints": 2,
            "status": "To Do",
            "priority": "Lowest",
            "labels": []
        }
    ]


@pytest.fixture
def jira_search_issue():
    """Raw Jira search result for one issue."""
    return {
        "key": "PROJ-10",
        "fields": {
            "summary": "Implement feature X",
            "assignee": {"displayName": "Alice Smith", "accountId": "abc"},
            "status": {"name": "In Progress"},
            "priority": {"name": "High"},
            "labels": ["backend", "api"],
            "customfield_10016": 5.0,
            "customfield_10020": [{"id": 7, "name": "Sprint 5"}]
        }
    }


@pytest.fixture
def boards_response():
    return {"values": [{"id": 42, "name": "PROJ board"}, {"id": 43, "name": "Other"}]}


@pytest.fixture
def sprints_response():
    return {
        "values": [
            {"id": 100, "name": "PROJ Sprint 4", "state": "closed"},
            {
                "id": 101,
                "name": "PROJ Sprint 5",
                "state": "active",
                "startDate": "2024-02-12T00:00:00.000Z",
                "endDate": "2024-02-25T00:00:00.000Z",
                "goal": "Ship checkout"
            },
            {"id": 102, "name": "PROJ Sprint 6", "state": "future"}
        ]
    }


@pytest.fixture
def app(tmp_path):
    """Create Flask test app."""
    from app import create_app
    app = create_app()
    app.config['TESTING'] = True
    app.config['PLANNING_STATE_FILE'] = str(tmp_path / "planning-state.json")
    return app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    return app.test_client()
