import os
import uuid

import pytest
from fastapi import status

from errors.course_errors import (
    CourseNotFoundError,
    DuplicateCourseError,
    AlreadyEnrolledError,
    NotEnrolledError,
    AlreadyAssignedError,
    NotAssignedError,
)
from errors.user_errors import UserNotFoundError
from models.course_model import Enrollment, SupervisorCourse
from models.assignment_model import Assignment
from schemas.course_schema import CourseCreate
from schemas.assignment_schema import AssignmentCreate
from services.assignment_service import create_assignment
from services.storage_service import url_to_path
from services.course_service import (
    create_course,
    get_course_by_id,
    delete_course,
    enroll_student,
    unenroll_student,
    is_enrolled,
    assign_supervisor,
    remove_supervisor,
    get_course_students,
)
from conftest import auth_header, claims_for

CTRL = "controllers.course_controller"
COURSE_PAYLOAD = {"code": "ISIS-4426", "name": "Thesis Seminar", "category": "Graduate"}

@pytest.fixture
def course(db):
    return create_course(db, CourseCreate(**COURSE_PAYLOAD))

# =======================================================
#                 Courses
# =======================================================

def test_create_course_duplicate_code(db, course):
    with pytest.raises(DuplicateCourseError):
        create_course(db, CourseCreate(**COURSE_PAYLOAD))

def test_create_course_duplicate_http(client, make_admin, course):
    admin = make_admin()
    r = client.post("/api/courses", json = COURSE_PAYLOAD, headers = auth_header(admin))
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert "code" in r.json()["detail"]

def test_create_course_mocked(client, make_admin, monkeypatch):
    admin = make_admin()
    cid = str(uuid.uuid4())
    def fake_create_course(db, data):
        return {"id": cid, **data.model_dump(), "supervisors": [], "enrolled_count": 0}
    monkeypatch.setattr(f"{CTRL}.create_course", fake_create_course)

    r = client.post("/api/courses", json = COURSE_PAYLOAD, headers = auth_header(admin))
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["id"] == cid

def test_get_course_not_found(client, make_student):
    student = make_student()
    r = client.get(f"/api/courses/{uuid.uuid4()}", headers = auth_header(student))
    assert r.status_code == status.HTTP_404_NOT_FOUND

def test_course_lists_supervisors_and_enrolled_count(client, db, course, make_student, make_supervisor):
    supervisor = make_supervisor(first_name = "Grace", last_name = "Hopper")
    assign_supervisor(db, supervisor.id, course.id)
    enroll_student(db, make_student().id, course.id)
    enroll_student(db, make_student().id, course.id)

    r = client.get(f"/api/courses/{course.id}", headers = auth_header(supervisor))
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["enrolled_count"] == 2
    assert [s["last_name"] for s in body["supervisors"]] == ["Hopper"]

def test_delete_course_removes_dependents(db, course, make_student, make_supervisor):
    supervisor = make_supervisor()
    assign_supervisor(db, supervisor.id, course.id)
    enroll_student(db, make_student().id, course.id)
    create_assignment(db, course.id, AssignmentCreate(title = "Proposal"), claims_for(supervisor))

    delete_course(db, course.id)

    assert db.query(Enrollment).count() == 0
    assert db.query(SupervisorCourse).count() == 0
    assert db.query(Assignment).count() == 0
    with pytest.raises(CourseNotFoundError):
        get_course_by_id(db, course.id)

def test_delete_course_removes_submitted_files(client, course, make_admin, make_student, make_supervisor, db):
    supervisor = make_supervisor()
    student = make_student()
    assign_supervisor(db, supervisor.id, course.id)
    enroll_student(db, student.id, course.id)
    assignment = create_assignment(db, course.id, AssignmentCreate(title = "Proposal"), claims_for(supervisor))

    r = client.post(f"/api/assignments/{assignment.id}/submit", files = {"file": ("thesis.pdf", b"%PDF-1.4", "application/pdf")}, headers = auth_header(student))
    stored = url_to_path(r.json()["file_url"])
    assert os.path.exists(stored)

    r = client.delete(f"/api/courses/{course.id}", headers = auth_header(make_admin()))
    assert r.status_code == status.HTTP_200_OK
    assert not os.path.exists(stored)

def test_delete_course_http(client, make_admin, course):
    admin = make_admin()
    r = client.delete(f"/api/courses/{course.id}", headers = auth_header(admin))
    assert r.status_code == status.HTTP_200_OK
    r = client.delete(f"/api/courses/{course.id}", headers = auth_header(admin))
    assert r.status_code == status.HTTP_404_NOT_FOUND

# =======================================================
#                 Enrollment
# =======================================================

def test_enroll_twice_is_rejected(db, course, make_student):
    student = make_student()
    enroll_student(db, student.id, course.id)
    with pytest.raises(AlreadyEnrolledError):
        enroll_student(db, student.id, course.id)
    assert db.query(Enrollment).count() == 1

def test_unenroll_twice_is_rejected(db, course, make_student):
    student = make_student()
    enroll_student(db, student.id, course.id)
    unenroll_student(db, student.id, course.id)
    assert not is_enrolled(db, student.id, course.id)
    with pytest.raises(NotEnrolledError):
        unenroll_student(db, student.id, course.id)

def test_only_students_can_be_enrolled(db, course, make_supervisor):
    supervisor = make_supervisor()
    with pytest.raises(UserNotFoundError):
        enroll_student(db, supervisor.id, course.id)

def test_enroll_unknown_course(db, make_student):
    with pytest.raises(CourseNotFoundError):
        enroll_student(db, make_student().id, uuid.uuid4())

def test_enroll_http_flow(client, make_supervisor, make_student, course):
    supervisor = make_supervisor()
    student = make_student()
    body = {"student_id": str(student.id), "course_id": str(course.id)}

    r = client.post("/api/courses/enroll", json = body, headers = auth_header(supervisor))
    assert r.status_code == status.HTTP_201_CREATED

    r = client.post("/api/courses/enroll", json = body, headers = auth_header(supervisor))
    assert r.status_code == status.HTTP_409_CONFLICT

    r = client.get("/api/courses/enrolled", headers = auth_header(student))
    assert [c["code"] for c in r.json()] == [COURSE_PAYLOAD["code"]]

    r = client.request("DELETE", "/api/courses/enroll", json = body, headers = auth_header(supervisor))
    assert r.status_code == status.HTTP_200_OK

    r = client.request("DELETE", "/api/courses/enroll", json = body, headers = auth_header(supervisor))
    assert r.status_code == status.HTTP_404_NOT_FOUND

def test_students_cannot_enroll_themselves(client, make_student, course):
    student = make_student()
    body = {"student_id": str(student.id), "course_id": str(course.id)}
    r = client.post("/api/courses/enroll", json = body, headers = auth_header(student))
    assert r.status_code == status.HTTP_403_FORBIDDEN

def test_course_roster(db, course, make_student):
    enroll_student(db, make_student(last_name = "Zuse").id, course.id)
    enroll_student(db, make_student(last_name = "Babbage").id, course.id)
    roster = get_course_students(db, course.id)
    assert [s["last_name"] for s in roster] == ["Babbage", "Zuse"]
    assert all(s["student_id"] for s in roster)

# =======================================================
#                 Supervisors
# =======================================================

def test_assign_supervisor_twice_is_rejected(db, course, make_supervisor):
    supervisor = make_supervisor()
    assign_supervisor(db, supervisor.id, course.id)
    with pytest.raises(AlreadyAssignedError):
        assign_supervisor(db, supervisor.id, course.id)

def test_remove_unassigned_supervisor(db, course, make_supervisor):
    supervisor = make_supervisor()
    with pytest.raises(NotAssignedError):
        remove_supervisor(db, supervisor.id, course.id)

def test_only_supervisors_can_be_assigned(db, course, make_student):
    with pytest.raises(UserNotFoundError):
        assign_supervisor(db, make_student().id, course.id)

def test_supervisor_http_flow(client, make_admin, make_supervisor, course):
    admin = make_admin()
    supervisor = make_supervisor()

    r = client.post(f"/api/courses/{course.id}/supervisors", json = {"supervisor_id": str(supervisor.id)}, headers = auth_header(admin))
    assert r.status_code == status.HTTP_201_CREATED

    r = client.get("/api/courses/supervisor/courses", headers = auth_header(supervisor))
    assert [c["code"] for c in r.json()] == [COURSE_PAYLOAD["code"]]

    r = client.delete(f"/api/courses/{course.id}/supervisors/{supervisor.id}", headers = auth_header(admin))
    assert r.status_code == status.HTTP_200_OK

    r = client.delete(f"/api/courses/{course.id}/supervisors/{supervisor.id}", headers = auth_header(admin))
    assert r.status_code == status.HTTP_404_NOT_FOUND

# =======================================================
#                 End to end
# =======================================================

def test_student_sees_course_after_supervisor_enrolls(client, make_admin, make_supervisor):
    admin = make_admin()
    supervisor = make_supervisor()
    payload = {
        "role": "STUDENT", "email": "new.student@example.com", "password": "Passw0rd!",
        "first_name": "New", "last_name": "Student", "student_id": "S-5555",
        "department": "Computer Science", "program": "Thesis Program", "enrollment_year": 2025,
    }
    student_id = client.post("/api/auth/register", json = payload).json()["id"]
    token = client.post("/api/auth/login", json = {"email": payload["email"], "password": payload["password"]}).json()["access_token"]
    student_headers = {"Authorization": f"Bearer {token}"}

    assert client.get("/api/courses/enrolled", headers = student_headers).json() == []

    course = client.post("/api/courses", json = {"code": "CS101", "name": "Intro", "category": "Core"}, headers = auth_header(admin)).json()
    r = client.post("/api/courses/enroll", json = {"student_id": student_id, "course_id": course["id"]}, headers = auth_header(supervisor))
    assert r.status_code == status.HTTP_201_CREATED

    enrolled = client.get("/api/courses/enrolled", headers = student_headers).json()
    assert [c["code"] for c in enrolled] == ["CS101"]
    assert enrolled[0]["enrolled_count"] == 1
