from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from soloquest.domain.seed import demo_projects
from soloquest.services.stats_service import (
    dashboard_summary,
    filter_projects,
    project_progress,
    project_stats,
    recent_activity,
    weekly_activity,
)


def test_dashboard_summary_on_demo_data():
    summary = dashboard_summary(demo_projects())
    assert summary == {
        "totalProjects": 3,
        "activeProjects": 1,
        "completedProjects": 1,
        "totalTasks": 9,
        "todoTasks": 2,
        "inProgressTasks": 1,
        "completedTasks": 6,
        "completionRate": 67,
    }


def test_dashboard_summary_empty():
    assert dashboard_summary([])["completionRate"] == 0


def test_project_progress():
    website = demo_projects()[0]
    assert project_progress(website) == {"total": 3, "todo": 1, "inProgress": 1, "completed": 1, "percent": 33}


def test_project_stats_series_and_top_projects():
    stats = project_stats(demo_projects(), today=date(2024, 1, 10))
    assert stats["summary"]["planningProjects"] == 1
    assert stats["projectStatus"] == [
        {"name": "Planning", "value": 1},
        {"name": "Active", "value": 1},
        {"name": "Completed", "value": 1},
    ]
    assert [item["name"] for item in stats["topProjects"]] == ["Budget Tracker", "Personal Website", "Weather App"]
    assert stats["topProjects"][0] == {"name": "Budget Tracker", "total": 4, "todo": 0, "inProgress": 0, "completed": 4}


def test_weekly_activity_starts_on_sunday():
    tasks = [t for p in demo_projects() for t in p.tasks]
    # 2024-01-10 is a Wednesday; its week starts Sunday 2024-01-07.
    week = weekly_activity(tasks, date(2024, 1, 10))
    assert len(week) == 7
    assert week[0]["name"] == "Sun"
    assert week[0]["date"] == "Jan 7"
    assert week[0] == {"name": "Sun", "date": "Jan 7", "completed": 1, "created": 1}
    assert week[3] == {"name": "Wed", "date": "Jan 10", "completed": 0, "created": 1}


def test_recent_activity():
    activity = recent_activity(demo_projects())
    assert [p["name"] for p in activity["recentProjects"]] == ["Personal Website", "Weather App", "Budget Tracker"]
    assert len(activity["recentTasks"]) == 5
    assert activity["recentTasks"][0]["id"] == "202"
    assert activity["recentTasks"][0]["projectName"] == "Weather App"


def test_filter_projects_by_status_and_query():
    projects = demo_projects()
    assert [p.id for p in filter_projects(projects, status="active")] == ["1"]
    assert [p.id for p in filter_projects(projects, query="FINANCE")] == ["3"]
    assert [p.id for p in filter_projects(projects, status="all", query="weather")] == ["2"]
    assert len(filter_projects(projects)) == 3
    with pytest.raises(ValueError):
        filter_projects(projects, status="paused")
