"""Integration tests for tenant isolation.

A school admin works inside their own school only. Any school id they send
is replaced with their own, and rows of other schools look missing.
"""

import pytest


@pytest.fixture
async def foreign_rows(tenants, oakdale):
    """A classroom and a student owned by Oakdale."""
    classroom = await tenants.classroom(oakdale.id, "Room 201")
    student = await tenants.student(oakdale.id, "carol@x.com", classroom_id=classroom.id)
    return classroom, student


@pytest.fixture
async def own_rows(tenants, greenwood):
    """A classroom and a student owned by Greenwood."""
    classroom = await tenants.classroom(greenwood.id, "Room 101")
    student = await tenants.student(greenwood.id, "alice@x.com", classroom_id=classroom.id)
    return classroom, student


class TestListIsolation:
    """Tests that listings never leak another school's rows."""

    async def test_classroom_list_ignores_requested_school(
        self, client, headers_for, greenwood_admin, oakdale, own_rows, foreign_rows
    ) -> None:
        response = await client.get(
            f"/api/classrooms?schoolId={oakdale.id}", headers=headers_for(greenwood_admin)
        )

        names = [c["name"] for c in response.json()["data"]["classrooms"]]
        assert names == ["Room 101"]

    async def test_student_list_ignores_requested_school(
        self, client, headers_for, greenwood_admin, oakdale, own_rows, foreign_rows
    ) -> None:
        foreign_classroom, _ = foreign_rows

        by_school = await client.get(f"/api/students?schoolId={oakdale.id}", headers=headers_for(greenwood_admin))
        by_classroom = await client.get(
            f"/api/students?classroomId={foreign_classroom.id}", headers=headers_for(greenwood_admin)
        )

        assert [s["email"] for s in by_school.json()["data"]["students"]] == ["alice@x.com"]
        assert by_classroom.json()["data"]["total"] == 0

    async def test_superadmin_sees_every_school(
        self, client, superadmin_headers, own_rows, foreign_rows
    ) -> None:
        response = await client.get("/api/students", headers=superadmin_headers)

        assert response.json()["data"]["total"] == 2


class TestByIdIsolation:
    """Tests that by-id access to another school's rows is a 404."""

    async def test_foreign_classroom(self, client, headers_for, greenwood_admin, oakdale, foreign_rows) -> None:
        classroom, _ = foreign_rows
        headers = headers_for(greenwood_admin)
        path = f"/api/classrooms/{classroom.id}?schoolId={oakdale.id}"

        responses = [
            await client.get(path, headers=headers),
            await client.put(path, json={"capacity": 1}, headers=headers),
            await client.delete(path, headers=headers),
        ]

        assert [r.status_code for r in responses] == [404, 404, 404]
        assert all(r.json()["message"] == "Classroom not found" for r in responses)

    async def test_foreign_student(self, client, headers_for, greenwood_admin, oakdale, foreign_rows) -> None:
        _, student = foreign_rows
        headers = headers_for(greenwood_admin)
        path = f"/api/students/{student.id}?schoolId={oakdale.id}"

        responses = [
            await client.get(path, headers=headers),
            await client.put(path, json={"firstName": "Hacked"}, headers=headers),
            await client.delete(path, headers=headers),
        ]

        assert [r.status_code for r in responses] == [404, 404, 404]

    async def test_foreign_rows_are_untouched(
        self, client, headers_for, superadmin_headers, greenwood_admin, foreign_rows
    ) -> None:
        classroom, student = foreign_rows
        headers = headers_for(greenwood_admin)
        await client.put(f"/api/classrooms/{classroom.id}", json={"capacity": 1}, headers=headers)
        await client.delete(f"/api/students/{student.id}", headers=headers)

        classroom_now = await client.get(f"/api/classrooms/{classroom.id}", headers=superadmin_headers)
        student_now = await client.get(f"/api/students/{student.id}", headers=superadmin_headers)

        assert classroom_now.json()["data"]["capacity"] == 30
        assert student_now.json()["data"]["isEnrolled"] is True

    async def test_foreign_student_cannot_be_transferred(
        self, client, headers_for, greenwood_admin, greenwood, foreign_rows
    ) -> None:
        _, student = foreign_rows

        response = await client.post(
            f"/api/students/{student.id}/transfer",
            json={"targetSchoolId": greenwood.id},
            headers=headers_for(greenwood_admin),
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Student not found"


class TestCreateIsolation:
    """Tests that school admins always create inside their own school."""

    async def test_classroom_lands_in_own_school(
        self, client, headers_for, greenwood_admin, greenwood, oakdale
    ) -> None:
        response = await client.post(
            "/api/classrooms",
            json={"name": "Room 101", "schoolId": oakdale.id, "capacity": 20},
            headers=headers_for(greenwood_admin),
        )

        assert response.status_code == 201
        assert response.json()["data"]["schoolId"] == greenwood.id

    async def test_student_lands_in_own_school(
        self, client, headers_for, greenwood_admin, greenwood, oakdale
    ) -> None:
        response = await client.post(
            "/api/students",
            json={"firstName": "Dan", "lastName": "Ray", "email": "dan@x.com", "schoolId": oakdale.id},
            headers=headers_for(greenwood_admin),
        )

        assert response.status_code == 201
        assert response.json()["data"]["schoolId"] == greenwood.id

    async def test_foreign_classroom_cannot_be_assigned(
        self, client, headers_for, greenwood_admin, foreign_rows
    ) -> None:
        classroom, _ = foreign_rows

        response = await client.post(
            "/api/students",
            json={"firstName": "Dan", "lastName": "Ray", "email": "dan@x.com", "classroomId": classroom.id},
            headers=headers_for(greenwood_admin),
        )

        assert response.status_code == 404

    async def test_users_endpoints_are_superadmin_only(self, client, headers_for, greenwood_admin) -> None:
        headers = headers_for(greenwood_admin)

        listed = await client.get("/api/users", headers=headers)
        deleted = await client.delete(f"/api/users/{greenwood_admin.id}", headers=headers)

        assert listed.status_code == 403
        assert deleted.status_code == 403
