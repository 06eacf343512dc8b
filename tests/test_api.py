import pytest
from fastapi.testclient import TestClient

from lecturer_api.app.core.config import Settings
from lecturer_api.app.api.deps import get_lecturer_service
from lecturer_api.app.main import create_app

from conftest import DEFAULT_COURSES, SECRET

PREFIX = "/api/v1/plugins/lecturer"


class TestCoursesEndpoint:
    """GET /courses."""

    def test_returns_seeded_courses(self, client):
        response = client.get(f"{PREFIX}/courses")
        assert response.status_code == 200
        assert sorted(response.json()) == sorted(DEFAULT_COURSES)

    def test_degrades_to_defaults_when_store_is_down(self, tmp_path):
        settings = Settings(
            database_url=str(tmp_path / "missing" / "db.sqlite"),
            default_courses="BIO 100-1,BIO 100-2",
            store_timeout=0.1,
        )
        # No ``with`` block: startup would fail on the unreachable store.
        client = TestClient(create_app(settings))
        response = client.get(f"{PREFIX}/courses")
        assert response.status_code == 200
        assert response.json() == ["BIO 100-1", "BIO 100-2"]


class TestAddEndpoint:
    """POST /add."""

    def test_requires_login(self, client):
        response = client.post(f"{PREFIX}/add", json={"courseSection": "MATH 101-1", "lecturerName": "Dr. A"})
        assert response.status_code == 401

    def test_rejects_bad_token(self, client):
        response = client.post(
            f"{PREFIX}/add",
            json={"courseSection": "MATH 101-1", "lecturerName": "Dr. A"},
            headers={"Authorization": "Bearer not.a.token"},
        )
        assert response.status_code == 401

    def test_add_with_json(self, client, auth_headers):
        response = client.post(
            f"{PREFIX}/add",
            json={"courseSection": "MATH 101-1", "lecturerName": "Dr. A"},
            headers=auth_headers("u1"),
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_add_with_form_data(self, client, auth_headers):
        response = client.post(
            f"{PREFIX}/add",
            data={"courseSection": "MATH 101-1", "lecturerName": "Dr. A"},
            headers=auth_headers("u1"),
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_duplicate_is_a_business_rejection(self, client, auth_headers):
        body = {"courseSection": "MATH 101-1", "lecturerName": "Dr. A"}
        client.post(f"{PREFIX}/add", json=body, headers=auth_headers("u1"))
        response = client.post(f"{PREFIX}/add", json=body, headers=auth_headers("u2"))
        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "already exists"}

    @pytest.mark.parametrize(
        "body",
        [
            {"courseSection": "MATH 101-1"},
            {"lecturerName": "Dr. A"},
            {"courseSection": "MATH 101-1", "lecturerName": "  "},
        ],
    )
    def test_missing_fields(self, client, auth_headers, body):
        response = client.post(f"{PREFIX}/add", json=body, headers=auth_headers("u1"))
        assert response.status_code == 400
        assert "error" in response.json()

    def test_non_object_body(self, client, auth_headers):
        response = client.post(f"{PREFIX}/add", json=["MATH 101-1"], headers=auth_headers("u1"))
        assert response.status_code == 400


class TestVoteEndpoint:
    """POST /vote."""

    @pytest.fixture(autouse=True)
    def lecturer(self, client, auth_headers):
        client.post(
            f"{PREFIX}/add",
            json={"courseSection": "MATH 101-1", "lecturerName": "Dr. A"},
            headers=auth_headers("u0"),
        )

    def vote(self, client, headers, vote_type):
        return client.post(
            f"{PREFIX}/vote",
            data={"courseSection": "MATH 101-1", "lecturerName": "Dr. A", "voteType": vote_type},
            headers=headers,
        )

    def test_requires_login(self, client):
        response = client.post(
            f"{PREFIX}/vote",
            json={"courseSection": "MATH 101-1", "lecturerName": "Dr. A", "voteType": "up"},
        )
        assert response.status_code == 401

    def test_vote_once(self, client, auth_headers):
        assert self.vote(client, auth_headers("u1"), "up").json() == {"success": True}
        second = self.vote(client, auth_headers("u1"), "up")
        assert second.status_code == 200
        assert second.json() == {"success": False, "message": "already voted"}

    def test_invalid_vote_type(self, client, auth_headers):
        response = self.vote(client, auth_headers("u1"), "maybe")
        assert response.status_code == 400
        assert "voteType" in response.json()["error"]

    def test_unknown_lecturer(self, client, auth_headers):
        response = client.post(
            f"{PREFIX}/vote",
            json={"courseSection": "MATH 101-1", "lecturerName": "Dr. Z", "voteType": "up"},
            headers=auth_headers("u1"),
        )
        assert response.json() == {"success": False, "message": "lecturer not found"}


class TestListEndpoint:
    """GET /list/{courseSection}."""

    def test_empty_section(self, client):
        response = client.get(f"{PREFIX}/list/MATH 101-2")
        assert response.status_code == 200
        assert response.json() == []

    def test_lists_lecturers_with_camel_case_keys(self, client, auth_headers):
        client.post(
            f"{PREFIX}/add",
            json={"courseSection": "ENG 101-1", "lecturerName": "Dr. B"},
            headers=auth_headers("u1"),
        )
        response = client.get(f"{PREFIX}/list/ENG%20101-1")
        assert response.status_code == 200
        [lecturer] = response.json()
        assert set(lecturer) == {"courseSection", "name", "votes", "addedBy", "timestamp"}
        assert lecturer["courseSection"] == "ENG 101-1"
        assert lecturer["name"] == "Dr. B"
        assert lecturer["votes"] == 0
        assert lecturer["addedBy"] == "u1"


class TestStoreFailures:
    """Infrastructure errors become HTTP 500 with an error message."""

    @pytest.fixture
    def broken_client(self, tmp_path):
        settings = Settings(
            database_url=str(tmp_path / "missing" / "db.sqlite"),
            secret_key=SECRET,
            store_timeout=0.1,
        )
        return TestClient(create_app(settings))

    def test_add(self, broken_client, auth_headers):
        response = broken_client.post(
            f"{PREFIX}/add",
            json={"courseSection": "MATH 101-1", "lecturerName": "Dr. A"},
            headers=auth_headers("u1"),
        )
        assert response.status_code == 500
        assert response.json()["error"]

    def test_list(self, broken_client):
        response = broken_client.get(f"{PREFIX}/list/MATH 101-1")
        assert response.status_code == 500
        assert "error" in response.json()


class TestUnexpectedErrors:
    """Errors outside the service hierarchy still answer with JSON."""

    def test_unexpected_error_is_json(self, settings):
        class ExplodingService:
            async def list_lecturers(self, course_section):
                raise RuntimeError("boom")

        app = create_app(settings)
        app.dependency_overrides[get_lecturer_service] = lambda: ExplodingService()
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get(f"{PREFIX}/list/MATH 101-1")
        assert response.status_code == 500
        assert response.json() == {"error": "boom"}


def test_scenario_over_http(client, auth_headers):
    add = {"courseSection": "MATH 101-1", "lecturerName": "Dr. A"}
    up = dict(add, voteType="up")
    down = dict(add, voteType="down")

    assert client.post(f"{PREFIX}/add", json=add, headers=auth_headers("U1")).json() == {"success": True}
    assert client.post(f"{PREFIX}/add", json=add, headers=auth_headers("U2")).json()["success"] is False
    assert client.post(f"{PREFIX}/vote", json=up, headers=auth_headers("U1")).json() == {"success": True}
    assert client.post(f"{PREFIX}/vote", json=up, headers=auth_headers("U1")).json()["success"] is False
    assert client.post(f"{PREFIX}/vote", json=down, headers=auth_headers("U2")).json() == {"success": True}

    listed = client.get(f"{PREFIX}/list/MATH 101-1").json()
    assert len(listed) == 1
    assert listed[0]["votes"] == 0
