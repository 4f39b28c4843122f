from models.assignment_model import SubmissionStatus
from typing import Optional, List
from pydantic import BaseModel
from datetime import datetime
from uuid import UUID

# Examples
UUID_COURSE = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
UUID_ASSIGNMENT = "11111111-2222-3333-4444-555555555555"
UUID_SUBMISSION = "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"
UUID_STUDENT = "77777777-8888-9999-aaaa-bbbbbbbbbbbb"
ISO_TS = "2025-01-15T14:32:00Z"

# Embedded schemas
class CourseMinimal(BaseModel):
    id: UUID
    code: str
    name: str

    model_config = {
        "from_attributes": True
    }

class StudentMinimal(BaseModel):
    id: UUID
    first_name: str
    last_name: str

    model_config = {
        "from_attributes": True
    }

# Base Assignment schema
class AssignmentBase(BaseModel):
    title: str
    instructions: Optional[str] = None

class AssignmentCreate(AssignmentBase):

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "title": "Literature review",
                "instructions": "Submit a 10 page review as PDF"
            }]
        }
    }

class AssignmentUpdate(BaseModel):
    instructions: Optional[str] = None

class AssignmentResponse(AssignmentBase):
    id: UUID
    course_id: UUID
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

# Assignment as seen from a course page, with the caller's own submission state
class CourseAssignmentResponse(AssignmentBase):
    id: UUID
    status: Optional[SubmissionStatus] = None
    grade: Optional[float] = None
    feedback: Optional[str] = None
    submission_date: Optional[datetime] = None
    file_url: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "id": UUID_ASSIGNMENT,
                "title": "Literature review",
                "instructions": "Submit a 10 page review as PDF",
                "status": "PENDING",
                "grade": None,
                "feedback": None,
                "submission_date": None,
                "file_url": None
            }]
        }
    }

# Submission schemas
class SubmissionResponse(BaseModel):
    id: UUID
    assignment_id: UUID
    student_id: UUID
    status: SubmissionStatus
    grade: Optional[float] = None
    feedback: Optional[str] = None
    file_url: str
    submission_date: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [{
                "id": UUID_SUBMISSION,
                "assignment_id": UUID_ASSIGNMENT,
                "student_id": UUID_STUDENT,
                "status": "SUBMITTED",
                "grade": None,
                "feedback": None,
                "file_url": "uploads/assignments/1736951520-123456789.pdf",
                "submission_date": ISO_TS
            }]
        }
    }

class AssignmentWithCourse(BaseModel):
    id: UUID
    title: str
    course: CourseMinimal

    model_config = {
        "from_attributes": True
    }

class SubmissionDetailResponse(SubmissionResponse):
    assignment: AssignmentWithCourse
    student: StudentMinimal

class ReviewsResponse(BaseModel):
    pending: List[SubmissionDetailResponse] = []
    completed: List[SubmissionDetailResponse] = []

class GradeRequest(BaseModel):
    grade: float
    feedback: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "grade": 87.5,
                "feedback": "Solid structure, expand the related work section"
            }]
        }
    }
