from errors.assignment_errors import (
    AssignmentNotFoundError,
    SubmissionNotFoundError,
    UnsupportedFileTypeError,
    FileTooLargeError,
    MissingFileError,
    InvalidGradeError,
    NotCourseSupervisorError,
)
from schemas.assignment_schema import SubmissionResponse, SubmissionDetailResponse, ReviewsResponse, GradeRequest
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from errors.db_errors import IntegrityConstraintError
from errors.course_errors import NotEnrolledError
from middlewares.jwt_auth import require_roles
from schemas.auth_schema import SessionClaims
from models.user_model import UserRole
from sqlalchemy.orm import Session
from config.database import get_db
from uuid import UUID
from services.assignment_service import (
    submit_assignment,
    get_submission,
    get_student_submissions,
    get_reviews,
    grade_submission,
)

router = APIRouter(prefix = "/api/assignments", tags = ["Assignments"])

submit_responses = {
    400: {
        "description": "Invalid upload (missing file or unsupported type)",
        "content": {"application/json": {"examples": {
            "unsupported_type": {"summary": "Unsupported file type",
                                 "value": {"detail": r"Invalid file type {extension}. Allowed types: .pdf, .doc, .docx"}},
            "missing_file": {"summary": "No file uploaded",
                             "value": {"detail": "No file uploaded"}},
        }}},
    },
    403: {
        "description": "Student is not enrolled in the assignment's course",
        "content": {"application/json": {"example":
            {"detail": r"Student {student_id} is not enrolled in course {course_id}"}
        }},
    },
    413: {
        "description": "File exceeds maximum size",
        "content": {"application/json": {"example":
            {"detail": r"File size {size} bytes exceeds maximum allowed size of {max_size} bytes"}
        }},
    },
}

grade_responses = {
    400: {
        "description": "Grade outside 0-100",
        "content": {"application/json": {"example":
            {"detail": r"Grade {grade} is outside the allowed range 0-100"}
        }},
    },
    403: {
        "description": "Caller does not supervise the submission's course",
        "content": {"application/json": {"example":
            {"detail": r"User {supervisor_id} does not supervise course {course_id}"}
        }},
    },
}

# Get own submissions
@router.get("/student/submissions", response_model = list[SubmissionDetailResponse])
def get_student_submissions_endpoint(current_user: SessionClaims = Depends(require_roles(UserRole.student)), db: Session = Depends(get_db)):
    return get_student_submissions(db, current_user.user_id)


# Get reviews of the supervisor
@router.get("/reviews", response_model = ReviewsResponse)
def get_reviews_endpoint(current_user: SessionClaims = Depends(require_roles(UserRole.supervisor)), db: Session = Depends(get_db)):
    return get_reviews(db, current_user.user_id)


# Grade Submission
@router.post("/submissions/{submission_id}/grade", response_model = SubmissionResponse, responses = grade_responses)
def grade_submission_endpoint(submission_id: UUID, data: GradeRequest, current_user: SessionClaims = Depends(require_roles(UserRole.supervisor)), db: Session = Depends(get_db)):
    try:
        return grade_submission(db, submission_id, current_user.user_id, data.grade, data.feedback)
    except InvalidGradeError as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except NotCourseSupervisorError as e:
        raise HTTPException(status_code = status.HTTP_403_FORBIDDEN, detail = str(e))


# Submit Assignment
@router.post("/{assignment_id}/submit", response_model = SubmissionResponse, responses = submit_responses)
def submit_assignment_endpoint(assignment_id: UUID, file: UploadFile = File(None), current_user: SessionClaims = Depends(require_roles(UserRole.student)), db: Session = Depends(get_db)):
    try:
        return submit_assignment(db, assignment_id, current_user.user_id, file)
    except AssignmentNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except NotEnrolledError as e:
        raise HTTPException(status_code = status.HTTP_403_FORBIDDEN, detail = str(e))
    except (MissingFileError, UnsupportedFileTypeError) as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))
    except FileTooLargeError as e:
        raise HTTPException(status_code = 413, detail = str(e))
    except IntegrityConstraintError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))


# Get own Submission
@router.get("/{assignment_id}/submission", response_model = SubmissionResponse)
def get_submission_endpoint(assignment_id: UUID, current_user: SessionClaims = Depends(require_roles(UserRole.student)), db: Session = Depends(get_db)):
    try:
        return get_submission(db, assignment_id, current_user.user_id)
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
