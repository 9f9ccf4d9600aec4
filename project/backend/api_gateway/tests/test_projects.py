"""
Tests for project endpoints.
"""

from unittest.mock import AsyncMock, patch

TEST_USER_ID = "550e8400-e29b-41d4-a716-446655440000"


def test_projects_require_auth(client):
    response = client.get("/api/v1/projects")
    assert response.status_code in (401, 403)


def test_create_project(authed_client, mock_database_client, mock_table):
    inserted = {
        "id": "p1",
        "user_id": TEST_USER_ID,
        "title": "Spring launch",
        "type": "ugc_video",
        "status": "processing",
        "video_data": {"script": "Try our app"},
        "created_at": "2026-03-01T10:00:00+00:00"
    }
    mock_table.execute.return_value.data = [inserted]

    with patch("api_gateway.routes.projects.db", mock_database_client):
        response = authed_client.post("/api/v1/projects", json={
            "title": "Spring launch",
            "type": "ugc_video",
            "videoData": {"script": "Try our app"},
        })

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == "p1"
    assert data["status"] == "processing"
    assert data["video_data"] == {"script": "Try our app"}
    assert data["error_message"] is None
    row = mock_table.insert.call_args.args[0]
    assert row["user_id"] == TEST_USER_ID
    assert row["status"] == "processing"
    assert row["type"] == "ugc_video"
    assert row["video_data"] == {"script": "Try our app"}


def test_create_project_invalid_type(authed_client):
    response = authed_client.post("/api/v1/projects", json={"title": "x", "type": "podcast"})
    assert response.status_code == 400


def test_list_projects(authed_client, mock_database_client, mock_table, sample_project):
    mock_table.execute.return_value.data = [sample_project]
    mock_table.execute.return_value.count = 7

    with patch("api_gateway.routes.projects.db", mock_database_client):
        response = authed_client.get("/api/v1/projects?status=error&limit=5&offset=5")

    assert response.status_code == 200
    data = response.json()
    assert [p["id"] for p in data["projects"]] == [sample_project["id"]]
    assert data["projects"][0]["error_message"] == "Video generation failed"
    assert data["projects"][0]["created_at"].startswith("2026-03-01T10:00:00")
    assert data["total"] == 7
    assert data["limit"] == 5
    assert data["offset"] == 5

    mock_table.eq.assert_any_call("user_id", TEST_USER_ID)
    mock_table.eq.assert_any_call("status", "error")
    mock_table.order.assert_called_once_with("created_at", desc=True)
    mock_table.range.assert_called_once_with(5, 9)


def test_list_projects_invalid_status(authed_client):
    response = authed_client.get("/api/v1/projects?status=queued")

    assert response.status_code == 400
    assert "Invalid status filter" in response.json()["error"]


def test_list_projects_limit_bounds(authed_client):
    response = authed_client.get("/api/v1/projects?limit=51")
    assert response.status_code == 400


def test_get_project(authed_client, sample_project):
    with patch("api_gateway.dependencies.get_project", new=AsyncMock(return_value=sample_project)):
        response = authed_client.get(f"/api/v1/projects/{sample_project['id']}")

    assert response.status_code == 200
    assert response.json()["title"] == "Spring launch"


def test_get_project_not_found(authed_client):
    with patch("api_gateway.dependencies.get_project", new=AsyncMock(return_value=None)):
        response = authed_client.get("/api/v1/projects/missing")

    assert response.status_code == 404


def test_retry_project(authed_client, sample_project):
    mock_mark = AsyncMock(return_value=True)

    with patch("api_gateway.dependencies.get_project", new=AsyncMock(return_value=sample_project)), \
         patch("api_gateway.routes.projects.mark_processing", new=mock_mark):
        response = authed_client.post(f"/api/v1/projects/{sample_project['id']}/retry")

    assert response.status_code == 200
    assert response.json() == {"id": sample_project["id"], "status": "processing"}
    mock_mark.assert_awaited_once_with(sample_project["id"])


def test_retry_project_in_progress(authed_client, sample_project):
    sample_project["status"] = "processing"

    with patch("api_gateway.dependencies.get_project", new=AsyncMock(return_value=sample_project)):
        response = authed_client.post(f"/api/v1/projects/{sample_project['id']}/retry")

    assert response.status_code == 400
    assert "Cannot retry" in response.json()["detail"]


def test_retry_project_other_user(authed_client, sample_project):
    sample_project["user_id"] = "someone-else"

    with patch("api_gateway.dependencies.get_project", new=AsyncMock(return_value=sample_project)):
        response = authed_client.post(f"/api/v1/projects/{sample_project['id']}/retry")

    assert response.status_code == 403


def test_list_projects_null_video_data(authed_client, mock_database_client, mock_table, sample_project):
    sample_project["video_data"] = None
    mock_table.execute.return_value.data = [sample_project]
    mock_table.execute.return_value.count = None

    with patch("api_gateway.routes.projects.db", mock_database_client):
        response = authed_client.get("/api/v1/projects")

    assert response.status_code == 200
    data = response.json()
    assert data["projects"][0]["video_data"] == {}
    assert data["total"] == 1
