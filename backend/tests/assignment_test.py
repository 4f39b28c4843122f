import os
import uuid

import pytest
from fastapi import status

import services.assignment_service as assignment_service
from errors.assignment_errors import InvalidGradeError, NotCourseSupervisorError, SubmissionNotFoundError, UnsupportedFileTypeError
from models.assignment_model import AssignmentSubmission, SubmissionStatus
from schemas.assignment_schema import AssignmentCreate
from schemas.course_schema import CourseCreate
from services.assignment_service import create_assignment, grade_submission, validate_extension
from services.course_service import create_course, enroll_student, assign_supervisor
from services.storage_service import SUBMISSION_DIR, url_to_path
from conftest import auth_header, claims_for

PDF = ("thesis.pdf", b"%PDF-1.4 thesis draft", "application/pdf")
EXE = ("thesis.exe", b"MZ\x90\x00", "application/octet-stream")

@pytest.fixture
def setup(db, make_student, make_supervisor):
    course = create_course(db, CourseCreate(code = "ISIS-4426", name = "Thesis Seminar", category = "Graduate"))
    supervisor = make_supervisor()
    assign_supervisor(db, supervisor.id, course.id)
    student = make_student()
    enroll_student(db, student.id, course.id)
    assignment = create_assignment(db, course.id, AssignmentCreate(title = "Proposal", instructions = "Two pages"), claims_for(supervisor))
    return {"course": course, "supervisor": supervisor, "student": student, "assignment": assignment}

def _submit(client, assignment_id, user, file = PDF):
    files = {"file": file} if file else None
    return client.post(f"/api/assignments/{assignment_id}/submit", files = files, headers = auth_header(user))

def _submission_count(db):
    db.expire_all()
    return db.query(AssignmentSubmission).count()

# =======================================================
#                 Upload validation
# =======================================================

@pytest.mark.parametrize("filename", ["a.pdf", "b.DOC", "c.docx"])
def test_allowed_extensions(filename):
    assert validate_extension(filename) in (".pdf", ".doc", ".docx")

@pytest.mark.parametrize("filename", ["a.exe", "b.txt", "noextension", ""])
def test_rejected_extensions(filename):
    with pytest.raises(UnsupportedFileTypeError):
        validate_extension(filename)

# =======================================================
#                 POST /api/assignments/{id}/submit
# =======================================================

def test_not_enrolled_is_checked_before_file_type(client, db, setup, make_student):
    outsider = make_student()
    r = _submit(client, setup["assignment"].id, outsider, EXE)
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert "not enrolled" in r.json()["detail"]
    assert _submission_count(db) == 0

def test_unsupported_type_creates_nothing(client, db, setup):
    before = os.listdir(SUBMISSION_DIR) if os.path.isdir(SUBMISSION_DIR) else []
    r = _submit(client, setup["assignment"].id, setup["student"], EXE)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert "Allowed types: .pdf, .doc, .docx" in r.json()["detail"]
    assert _submission_count(db) == 0
    after = os.listdir(SUBMISSION_DIR) if os.path.isdir(SUBMISSION_DIR) else []
    assert sorted(after) == sorted(before)

def test_missing_file_is_400(client, setup):
    r = _submit(client, setup["assignment"].id, setup["student"], None)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == "No file uploaded"

def test_too_large_is_413(client, db, setup, monkeypatch):
    monkeypatch.setattr(assignment_service, "MAX_FILE_SIZE", 8)
    r = _submit(client, setup["assignment"].id, setup["student"])
    assert r.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    assert _submission_count(db) == 0

def test_file_of_exactly_max_size_is_accepted(client, db, setup, monkeypatch):
    monkeypatch.setattr(assignment_service, "MAX_FILE_SIZE", 64)
    r = _submit(client, setup["assignment"].id, setup["student"], ("limit.pdf", b"x" * 64, "application/pdf"))
    assert r.status_code == status.HTTP_200_OK
    assert os.path.getsize(url_to_path(r.json()["file_url"])) == 64
    assert _submission_count(db) == 1

def test_file_one_byte_over_max_size_is_413(client, db, setup, monkeypatch):
    monkeypatch.setattr(assignment_service, "MAX_FILE_SIZE", 64)
    before = os.listdir(SUBMISSION_DIR) if os.path.isdir(SUBMISSION_DIR) else []
    r = _submit(client, setup["assignment"].id, setup["student"], ("over.pdf", b"x" * 65, "application/pdf"))
    assert r.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    assert _submission_count(db) == 0
    assert sorted(os.listdir(SUBMISSION_DIR)) == sorted(before)

def test_default_max_file_size_is_ten_megabytes():
    assert assignment_service.MAX_FILE_SIZE == 10 * 1024 * 1024

def test_unknown_assignment_is_404(client, setup):
    r = _submit(client, uuid.uuid4(), setup["student"])
    assert r.status_code == status.HTTP_404_NOT_FOUND

def test_supervisor_cannot_submit(client, setup):
    r = _submit(client, setup["assignment"].id, setup["supervisor"])
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.json()["detail"]["required_roles"] == ["STUDENT"]

def test_submit_then_resubmit_keeps_one_row(client, db, setup):
    first = _submit(client, setup["assignment"].id, setup["student"])
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["status"] == "SUBMITTED"
    first_url = first.json()["file_url"]
    assert first_url.startswith("/uploads/assignments/")
    assert os.path.exists(url_to_path(first_url))

    second = _submit(client, setup["assignment"].id, setup["student"], ("final.docx", b"docx bytes", "application/octet-stream"))
    assert second.status_code == status.HTTP_200_OK
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["file_url"] != first_url
    assert second.json()["file_url"].endswith(".docx")
    assert not os.path.exists(url_to_path(first_url))
    assert _submission_count(db) == 1

def test_submitted_file_is_served_at_its_url(client, setup):
    r = _submit(client, setup["assignment"].id, setup["student"])
    assert r.status_code == status.HTTP_200_OK

    served = client.get(r.json()["file_url"])
    assert served.status_code == status.HTTP_200_OK
    assert served.content == PDF[1]

def test_concurrent_first_submission_updates_existing_row(client, db, setup, monkeypatch):
    first = _submit(client, setup["assignment"].id, setup["student"]).json()

    # The second request misses the row the first one inserted
    real_find = assignment_service._find_submission
    calls = {"n": 0}
    def find_after_race(db, assignment_id, student_id):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find(db, assignment_id, student_id)
    monkeypatch.setattr(assignment_service, "_find_submission", find_after_race)

    second = _submit(client, setup["assignment"].id, setup["student"], ("final.docx", b"docx bytes", "application/octet-stream"))
    assert second.status_code == status.HTTP_200_OK
    assert second.json()["id"] == first["id"]
    assert second.json()["file_url"].endswith(".docx")
    assert _submission_count(db) == 1
    assert not os.path.exists(url_to_path(first["file_url"]))
    assert os.path.exists(url_to_path(second.json()["file_url"]))

def test_get_own_submission(client, setup):
    r = client.get(f"/api/assignments/{setup['assignment'].id}/submission", headers = auth_header(setup["student"]))
    assert r.status_code == status.HTTP_404_NOT_FOUND

    _submit(client, setup["assignment"].id, setup["student"])
    r = client.get(f"/api/assignments/{setup['assignment'].id}/submission", headers = auth_header(setup["student"]))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["student_id"] == str(setup["student"].id)

# =======================================================
#                 Grading
# =======================================================

@pytest.mark.parametrize("grade", [0, 100, 87.5])
def test_grade_within_range(client, setup, grade):
    sub = _submit(client, setup["assignment"].id, setup["student"]).json()
    r = client.post(f"/api/assignments/submissions/{sub['id']}/grade", json = {"grade": grade, "feedback": "ok"}, headers = auth_header(setup["supervisor"]))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["status"] == "GRADED"
    assert r.json()["grade"] == grade

@pytest.mark.parametrize("grade", [-1, 150, 100.01])
def test_grade_out_of_range(client, setup, grade):
    sub = _submit(client, setup["assignment"].id, setup["student"]).json()
    r = client.post(f"/api/assignments/submissions/{sub['id']}/grade", json = {"grade": grade}, headers = auth_header(setup["supervisor"]))
    assert r.status_code == status.HTTP_400_BAD_REQUEST

def test_grade_range_checked_before_lookup(db):
    with pytest.raises(InvalidGradeError):
        grade_submission(db, uuid.uuid4(), uuid.uuid4(), 101)

def test_grade_unknown_submission(db):
    with pytest.raises(SubmissionNotFoundError):
        grade_submission(db, uuid.uuid4(), uuid.uuid4(), 50)

def test_grade_by_other_supervisor_is_403(client, setup, make_supervisor):
    sub = _submit(client, setup["assignment"].id, setup["student"]).json()
    stranger = make_supervisor()
    r = client.post(f"/api/assignments/submissions/{sub['id']}/grade", json = {"grade": 90}, headers = auth_header(stranger))
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert "does not supervise" in r.json()["detail"]

def test_resubmission_after_grading_clears_grade(client, setup):
    sub = _submit(client, setup["assignment"].id, setup["student"]).json()
    client.post(f"/api/assignments/submissions/{sub['id']}/grade", json = {"grade": 70, "feedback": "revise"}, headers = auth_header(setup["supervisor"]))

    r = _submit(client, setup["assignment"].id, setup["student"])
    assert r.json()["status"] == "SUBMITTED"
    assert r.json()["grade"] is None
    assert r.json()["feedback"] is None

def test_reviews_split_pending_and_completed(client, setup, make_student, db):
    other = make_student()
    enroll_student(db, other.id, setup["course"].id)

    graded = _submit(client, setup["assignment"].id, setup["student"]).json()
    _submit(client, setup["assignment"].id, other)
    client.post(f"/api/assignments/submissions/{graded['id']}/grade", json = {"grade": 95}, headers = auth_header(setup["supervisor"]))

    r = client.get("/api/assignments/reviews", headers = auth_header(setup["supervisor"]))
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert [s["student"]["id"] for s in body["pending"]] == [str(other.id)]
    assert [s["id"] for s in body["completed"]] == [graded["id"]]
    assert body["completed"][0]["assignment"]["course"]["code"] == "ISIS-4426"

def test_reviews_empty_for_unassigned_supervisor(client, make_supervisor):
    r = client.get("/api/assignments/reviews", headers = auth_header(make_supervisor()))
    assert r.json() == {"pending": [], "completed": []}

# =======================================================
#                 Course assignments
# =======================================================

def test_student_sees_own_status(client, setup):
    path = f"/api/courses/{setup['course'].id}/assignments"
    r = client.get(path, headers = auth_header(setup["student"]))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()[0]["status"] == "PENDING"

    _submit(client, setup["assignment"].id, setup["student"])
    r = client.get(path, headers = auth_header(setup["student"]))
    assert r.json()[0]["status"] == "SUBMITTED"
    assert r.json()[0]["file_url"]

def test_not_enrolled_student_cannot_list_assignments(client, setup, make_student):
    r = client.get(f"/api/courses/{setup['course'].id}/assignments", headers = auth_header(make_student()))
    assert r.status_code == status.HTTP_403_FORBIDDEN

def test_staff_sees_plain_assignments(client, setup):
    r = client.get(f"/api/courses/{setup['course'].id}/assignments", headers = auth_header(setup["supervisor"]))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()[0]["title"] == "Proposal"
    assert r.json()[0]["status"] is None

def test_only_course_supervisor_or_admin_creates_assignments(client, setup, make_supervisor, make_admin):
    path = f"/api/courses/{setup['course'].id}/assignments"
    r = client.post(path, json = {"title": "Draft"}, headers = auth_header(make_supervisor()))
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.post(path, json = {"title": "Draft"}, headers = auth_header(make_admin()))
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["course_id"] == str(setup["course"].id)

def test_create_assignment_service_rejects_stranger(db, setup, make_supervisor):
    with pytest.raises(NotCourseSupervisorError):
        create_assignment(db, setup["course"].id, AssignmentCreate(title = "Draft"), claims_for(make_supervisor()))

def test_update_instructions(client, setup):
    path = f"/api/courses/{setup['course'].id}/assignments/{setup['assignment'].id}"
    r = client.put(path, json = {"instructions": "  Three pages  "}, headers = auth_header(setup["supervisor"]))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["instructions"] == "Three pages"

    r = client.put(f"/api/courses/{uuid.uuid4()}/assignments/{setup['assignment'].id}", json = {"instructions": "x"}, headers = auth_header(setup["supervisor"]))
    assert r.status_code == status.HTTP_404_NOT_FOUND

def test_course_and_student_submission_listings(client, setup):
    _submit(client, setup["assignment"].id, setup["student"])

    r = client.get(f"/api/courses/{setup['course'].id}/assignments/submissions", headers = auth_header(setup["supervisor"]))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()[0]["student"]["id"] == str(setup["student"].id)

    r = client.get("/api/assignments/student/submissions", headers = auth_header(setup["student"]))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()[0]["assignment"]["title"] == "Proposal"
    assert r.json()[0]["status"] == SubmissionStatus.submitted.value
