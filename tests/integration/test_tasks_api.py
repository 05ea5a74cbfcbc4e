"""Integration tests for the tasks API."""

from fastapi import status

from taskboard.models.task import TaskItem, TaskStatus


class TestTaskCrud:
    """Create, read, update and delete through the API."""

    def test_create_task(self, client, standard_user, auth_headers):
        """Test creating a task returns it in the standard envelope."""
        response = client.post(
            "/api/v1/tasks",
            json={"title": "  Plan sprint ", "description": "Next two weeks"},
            headers=auth_headers(standard_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["error"] is None
        assert body["data"]["title"] == "Plan sprint"
        assert body["data"]["status"] == "Open"
        assert body["data"]["status_label"] == "Open"
        assert body["data"]["owner_id"] == standard_user.id
        assert body["data"]["owner_name"] == "Stan Standard"

    def test_read_only_cannot_create(self, client, read_only_user, auth_headers):
        """Test ReadOnly users are refused task creation."""
        response = client.post(
            "/api/v1/tasks", json={"title": "Nope"}, headers=auth_headers(read_only_user)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"]["code"] == "AUTH_INSUFFICIENT_PERMISSIONS"

    def test_blank_title_is_validation_error(self, client, standard_user, auth_headers):
        """Test a whitespace title yields a field-level validation error."""
        response = client.post(
            "/api/v1/tasks", json={"title": "   "}, headers=auth_headers(standard_user)
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "title" in error["details"]

    def test_title_too_long_is_validation_error(self, client, standard_user, auth_headers):
        """Test an over-long title is rejected before persistence."""
        response = client.post(
            "/api/v1/tasks", json={"title": "x" * 201}, headers=auth_headers(standard_user)
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "title" in response.json()["error"]["details"]

    def test_get_task_not_visible_is_404(
        self, client, standard_user, other_user, make_task, auth_headers
    ):
        """Test another user's task looks exactly like a missing one."""
        task = make_task(other_user)

        hidden = client.get(f"/api/v1/tasks/{task.id}", headers=auth_headers(standard_user))
        missing = client.get("/api/v1/tasks/99999", headers=auth_headers(standard_user))

        assert hidden.status_code == missing.status_code == status.HTTP_404_NOT_FOUND
        assert hidden.json()["error"]["code"] == "TASK_NOT_FOUND"

    def test_update_and_complete(self, client, standard_user, make_task, auth_headers):
        """Test a full update into Completed stamps completed_at."""
        task = make_task(standard_user)

        response = client.put(
            f"/api/v1/tasks/{task.id}",
            json={"title": "Finished", "description": None, "status": "Completed"},
            headers=auth_headers(standard_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["title"] == "Finished"
        assert data["completed_at"] is not None

    def test_status_patch(self, client, standard_user, make_task, auth_headers):
        """Test the status-only endpoint."""
        task = make_task(standard_user, status=TaskStatus.COMPLETED)

        response = client.patch(
            f"/api/v1/tasks/{task.id}/status",
            json={"status": "OnHold"},
            headers=auth_headers(standard_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["status"] == "OnHold"
        assert data["status_label"] == "On Hold"
        assert data["completed_at"] is None

    def test_admin_delete_is_refused(self, client, admin_user, other_user, make_task, auth_headers):
        """Test Admin cannot delete tasks."""
        task = make_task(other_user)

        response = client.delete(f"/api/v1/tasks/{task.id}", headers=auth_headers(admin_user))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_owner_delete(self, client, db_session, standard_user, make_task, auth_headers):
        """Test the owner deletes a task."""
        task = make_task(standard_user)
        task_id = task.id

        response = client.delete(f"/api/v1/tasks/{task_id}", headers=auth_headers(standard_user))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert db_session.get(TaskItem, task_id) is None

    def test_bulk_delete(self, client, standard_user, other_user, make_task, auth_headers):
        """Test bulk delete reports whether anything was removed."""
        mine = make_task(standard_user)
        theirs = make_task(other_user)

        response = client.post(
            "/api/v1/tasks/bulk-delete",
            json={"task_ids": [mine.id, theirs.id]},
            headers=auth_headers(standard_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == {"deleted": True}


class TestTaskListings:
    """Listing endpoints and their paging conventions."""

    def test_my_tasks_one_based_paging(self, client, standard_user, make_task, auth_headers):
        """Test /tasks/mine pages from 1 with pagination metadata."""
        for i in range(45):
            make_task(standard_user, title=f"Task {i:02d}")

        response = client.get(
            "/api/v1/tasks/mine",
            params={"page": 2, "page_size": 20, "sort_by": "title", "sort_descending": False},
            headers=auth_headers(standard_user),
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["meta"] == {"total": 45, "page": 2, "page_size": 20, "total_pages": 3}
        assert body["data"][0]["title"] == "Task 20"
        assert len(body["data"]) == 20

    def test_page_zero_rejected_for_filter_listing(self, client, standard_user, auth_headers):
        """Test the filter listing does not accept page 0."""
        response = client.get(
            "/api/v1/tasks/mine", params={"page": 0}, headers=auth_headers(standard_user)
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_grid_zero_based_paging(self, client, standard_user, make_task, auth_headers):
        """Test /tasks/grid pages from 0."""
        for i in range(3):
            make_task(standard_user, title=f"Task {i}")

        response = client.get(
            "/api/v1/tasks/grid",
            params={"page": 0, "page_size": 2, "sort_by": "title"},
            headers=auth_headers(standard_user),
        )

        body = response.json()
        assert [t["title"] for t in body["data"]] == ["Task 0", "Task 1"]
        assert body["meta"]["total"] == 3

    def test_all_tasks_empty_for_standard_user(
        self, client, standard_user, other_user, make_task, auth_headers
    ):
        """Test /tasks/all is empty (not an error) without cross-user visibility."""
        make_task(other_user)

        response = client.get("/api/v1/tasks/all", headers=auth_headers(standard_user))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == []
        assert response.json()["meta"]["total"] == 0

    def test_all_tasks_for_admin(self, client, admin_user, other_user, make_task, auth_headers):
        """Test /tasks/all lists other users' tasks for Admin."""
        make_task(other_user, title="Theirs")

        response = client.get("/api/v1/tasks/all", headers=auth_headers(admin_user))

        assert [t["title"] for t in response.json()["data"]] == ["Theirs"]

    def test_stats(self, client, standard_user, make_task, auth_headers):
        """Test /tasks/stats for the caller's tasks."""
        make_task(standard_user, status=TaskStatus.COMPLETED)
        make_task(standard_user)
        make_task(standard_user, status=TaskStatus.IN_PROGRESS)

        response = client.get("/api/v1/tasks/stats", headers=auth_headers(standard_user))

        data = response.json()["data"]
        assert data["total_tasks"] == 3
        assert data["completion_rate"] == 33.33
        assert data["tasks_by_status"]["In Progress"] == 1

    def test_unauthenticated_request_rejected(self, client):
        """Test requests without a bearer token get 401."""
        response = client.get("/api/v1/tasks/mine")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"
