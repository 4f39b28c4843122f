from errors.assignment_errors import (
    AssignmentNotFoundError,
    SubmissionNotFoundError,
    UnsupportedFileTypeError,
    FileTooLargeError,
    MissingFileError,
    InvalidGradeError,
    NotCourseSupervisorError,
)
from models.assignment_model import Assignment, AssignmentSubmission, SubmissionStatus
from schemas.assignment_schema import AssignmentCreate, AssignmentUpdate
from services.course_service import get_course_by_id, is_enrolled, is_course_supervisor
from services.storage_service import SUBMISSION_DIR, submission_url, url_to_path, remove_file
from errors.db_errors import IntegrityConstraintError
from errors.course_errors import NotEnrolledError
from models.course_model import SupervisorCourse
from sqlalchemy.orm import Session, selectinload
from datetime import datetime, timezone
from schemas.auth_schema import SessionClaims
from sqlalchemy.exc import IntegrityError
from models.user_model import UserRole
from fastapi import UploadFile
import secrets
import logging
import time
import os

logger = logging.getLogger("app.services.assignment")

MAX_FILE_SIZE = 10 * 1024 * 1024
ALLOWED_EXTENSIONS = [".pdf", ".doc", ".docx"]
CHUNK_SIZE = 1024 * 1024
MIN_GRADE = 0
MAX_GRADE = 100

def _detail_loaders():
    return (
        selectinload(AssignmentSubmission.assignment).selectinload(Assignment.course),
        selectinload(AssignmentSubmission.student),
    )


def _check_can_manage(db: Session, user: SessionClaims, course_id):
    if user.role == UserRole.admin:
        return
    if not is_course_supervisor(db, user.user_id, course_id):
        logger.warning("User id=%s does not supervise course id=%s", user.user_id, course_id)
        raise NotCourseSupervisorError(str(user.user_id), str(course_id))


def validate_extension(filename: str) -> str:
    extension = os.path.splitext(filename or "")[1].lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise UnsupportedFileTypeError(extension, ALLOWED_EXTENSIONS)
    return extension


# Write the upload to disk and return its public reference
def _store_upload(file: UploadFile, extension: str) -> str:
    os.makedirs(SUBMISSION_DIR, exist_ok = True)
    filename = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"
    filepath = os.path.join(SUBMISSION_DIR, filename)

    size = 0
    with open(filepath, "wb") as f:
        while True:
            chunk = file.file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > MAX_FILE_SIZE:
                break
            f.write(chunk)

    if size > MAX_FILE_SIZE:
        os.remove(filepath)
        logger.warning("Upload %s exceeds max file size", file.filename)
        raise FileTooLargeError(size, MAX_FILE_SIZE)

    return submission_url(filename)


def _find_submission(db: Session, assignment_id, student_id):
    return db.query(AssignmentSubmission).filter(
        AssignmentSubmission.assignment_id == assignment_id,
        AssignmentSubmission.student_id == student_id,
    ).first()


def _apply_upload(submission: AssignmentSubmission, file_url: str):
    submission.file_url = file_url
    submission.status = SubmissionStatus.submitted
    submission.submission_date = datetime.now(timezone.utc)
    submission.grade = None
    submission.feedback = None


# Create assignment (POST)
def create_assignment(db: Session, course_id, data: AssignmentCreate, user: SessionClaims):
    logger.info("Creating assignment title=%s course id=%s", data.title, course_id)
    get_course_by_id(db, course_id)
    _check_can_manage(db, user, course_id)

    assignment = Assignment(course_id = course_id, title = data.title, instructions = data.instructions)
    try:
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        logger.info("Assignment created successfully id=%s", assignment.id)
        return assignment

    except IntegrityError as e:
        db.rollback()
        logger.error("IntegrityError when creating assignment: %s", str(e))
        raise IntegrityConstraintError("Create Assignment")


# Get assignment by id (GET)
def get_assignment_by_id(db: Session, assignment_id):
    logger.debug("Fetching assignment by id=%s", assignment_id)
    assignment = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not assignment:
        raise AssignmentNotFoundError("id", str(assignment_id))
    return assignment


# Update instructions (PUT)
def update_instructions(db: Session, course_id, assignment_id, data: AssignmentUpdate, user: SessionClaims):
    logger.info("Updating instructions for assignment id=%s", assignment_id)
    assignment = get_assignment_by_id(db, assignment_id)
    if assignment.course_id != course_id:
        raise AssignmentNotFoundError("id", str(assignment_id))
    _check_can_manage(db, user, course_id)

    assignment.instructions = data.instructions.strip() if data.instructions else None
    db.commit()
    db.refresh(assignment)
    logger.info("Instructions updated for assignment id=%s", assignment_id)
    return assignment


# Get course assignments (GET), students see their own submission state
def get_course_assignments(db: Session, course_id, user: SessionClaims):
    logger.debug("Fetching assignments for course id=%s", course_id)
    get_course_by_id(db, course_id)

    if user.role == UserRole.student and not is_enrolled(db, user.user_id, course_id):
        logger.warning("Student id=%s not enrolled in course id=%s", user.user_id, course_id)
        raise NotEnrolledError(str(user.user_id), str(course_id))

    assignments = db.query(Assignment).filter(Assignment.course_id == course_id).order_by(Assignment.created_at).all()
    if user.role != UserRole.student:
        return [
            {"id": a.id, "title": a.title, "instructions": a.instructions}
            for a in assignments
        ]

    own = {
        s.assignment_id: s
        for s in db.query(AssignmentSubmission).filter(
            AssignmentSubmission.student_id == user.user_id,
            AssignmentSubmission.assignment_id.in_([a.id for a in assignments]),
        )
    } if assignments else {}

    result = []
    for a in assignments:
        submission = own.get(a.id)
        result.append({
            "id": a.id,
            "title": a.title,
            "instructions": a.instructions,
            "status": submission.status if submission else SubmissionStatus.pending,
            "grade": submission.grade if submission else None,
            "feedback": submission.feedback if submission else None,
            "submission_date": submission.submission_date if submission else None,
            "file_url": submission.file_url if submission else None,
        })
    return result


# Submit assignment (POST), one row per (assignment, student)
def submit_assignment(db: Session, assignment_id, student_id, file: UploadFile):
    logger.info("Submitting assignment id=%s student id=%s", assignment_id, student_id)
    assignment = get_assignment_by_id(db, assignment_id)

    # Enrollment is checked before anything about the file
    if not is_enrolled(db, student_id, assignment.course_id):
        logger.warning("Student id=%s not enrolled in course id=%s", student_id, assignment.course_id)
        raise NotEnrolledError(str(student_id), str(assignment.course_id))

    if file is None or not file.filename:
        raise MissingFileError()

    extension = validate_extension(file.filename)
    file_url = _store_upload(file, extension)

    submission = _find_submission(db, assignment_id, student_id)
    previous_file = submission.file_url if submission else None

    if submission is None:
        submission = AssignmentSubmission(assignment_id = assignment_id, student_id = student_id)
        db.add(submission)
    _apply_upload(submission, file_url)

    try:
        db.commit()

    except IntegrityError as e:
        # A concurrent first submission won the insert, last write wins
        db.rollback()
        logger.warning("Concurrent submission for assignment id=%s student id=%s: %s", assignment_id, student_id, str(e))
        submission = _find_submission(db, assignment_id, student_id)
        if submission is None:
            remove_file(file_url)
            raise IntegrityConstraintError("Submit Assignment")
        previous_file = submission.file_url
        _apply_upload(submission, file_url)
        db.commit()

    db.refresh(submission)
    if previous_file and previous_file != file_url:
        remove_file(previous_file)

    logger.info("Submission stored id=%s path=%s", submission.id, url_to_path(file_url))
    return submission


# Get own submission (GET)
def get_submission(db: Session, assignment_id, student_id):
    logger.debug("Fetching submission assignment id=%s student id=%s", assignment_id, student_id)
    submission = _find_submission(db, assignment_id, student_id)
    if not submission:
        raise SubmissionNotFoundError("assignment_id", str(assignment_id))
    return submission


# Get all submissions of a student (GET)
def get_student_submissions(db: Session, student_id):
    logger.debug("Fetching submissions for student id=%s", student_id)
    return (
        db.query(AssignmentSubmission)
        .options(*_detail_loaders())
        .filter(AssignmentSubmission.student_id == student_id)
        .order_by(AssignmentSubmission.submission_date.desc())
        .all()
    )


# Get all submissions of a course (GET)
def get_course_submissions(db: Session, course_id, user: SessionClaims):
    logger.debug("Fetching submissions for course id=%s", course_id)
    get_course_by_id(db, course_id)
    _check_can_manage(db, user, course_id)
    return (
        db.query(AssignmentSubmission)
        .join(Assignment, Assignment.id == AssignmentSubmission.assignment_id)
        .options(*_detail_loaders())
        .filter(Assignment.course_id == course_id)
        .order_by(AssignmentSubmission.submission_date.desc())
        .all()
    )


# Pending and completed reviews for a supervisor (GET)
def get_reviews(db: Session, supervisor_id):
    logger.debug("Fetching reviews for supervisor id=%s", supervisor_id)
    course_ids = [
        row.course_id
        for row in db.query(SupervisorCourse.course_id).filter(SupervisorCourse.supervisor_id == supervisor_id)
    ]
    if not course_ids:
        return {"pending": [], "completed": []}

    submissions = (
        db.query(AssignmentSubmission)
        .join(Assignment, Assignment.id == AssignmentSubmission.assignment_id)
        .options(*_detail_loaders())
        .filter(
            Assignment.course_id.in_(course_ids),
            AssignmentSubmission.status.in_([SubmissionStatus.submitted, SubmissionStatus.graded]),
        )
        .order_by(AssignmentSubmission.submission_date)
        .all()
    )
    return {
        "pending": [s for s in submissions if s.status == SubmissionStatus.submitted],
        "completed": [s for s in submissions if s.status == SubmissionStatus.graded],
    }


# Grade submission (POST)
def grade_submission(db: Session, submission_id, supervisor_id, grade: float, feedback: str = None):
    logger.info("Grading submission id=%s", submission_id)
    if grade is None or not (MIN_GRADE <= grade <= MAX_GRADE):
        logger.warning("Rejected grade=%s for submission id=%s", grade, submission_id)
        raise InvalidGradeError(grade)

    submission = db.query(AssignmentSubmission).options(selectinload(AssignmentSubmission.assignment)).filter(AssignmentSubmission.id == submission_id).first()
    if not submission:
        raise SubmissionNotFoundError("id", str(submission_id))

    course_id = submission.assignment.course_id
    if not is_course_supervisor(db, supervisor_id, course_id):
        logger.warning("User id=%s does not supervise course id=%s", supervisor_id, course_id)
        raise NotCourseSupervisorError(str(supervisor_id), str(course_id))

    submission.grade = grade
    submission.feedback = feedback
    submission.status = SubmissionStatus.graded
    db.commit()
    db.refresh(submission)
    logger.info("Submission graded id=%s grade=%s", submission_id, grade)
    return submission
