from typing import Optional, List
from pydantic import BaseModel
from datetime import datetime
from uuid import UUID

# Examples
UUID_COURSE = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
UUID_SUPERVISOR = "9f8f5e64-5717-4562-b3fc-2c963f66afa6"
UUID_STUDENT = "77777777-8888-9999-aaaa-bbbbbbbbbbbb"

# Embedded supervisor schema
class CourseSupervisorResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str

    model_config = {
        "from_attributes": True
    }

# Base Course schema
class CourseBase(BaseModel):
    code: str
    name: str
    category: str

# Create Course schema
class CourseCreate(CourseBase):

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "code": "CS101",
                "name": "Introduction to Computer Science",
                "category": "Undergraduate"
            }]
        }
    }

# Response Course schema
class CourseResponse(CourseBase):
    id: UUID
    supervisors: Optional[List[CourseSupervisorResponse]] = []
    enrolled_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [{
                "id": UUID_COURSE,
                "code": "CS101",
                "name": "Introduction to Computer Science",
                "category": "Undergraduate",
                "supervisors": [{
                    "id": UUID_SUPERVISOR,
                    "first_name": "Grace",
                    "last_name": "Hopper"
                }],
                "enrolled_count": 12
            }]
        }
    }

# Enrollment schemas
class EnrollmentRequest(BaseModel):
    student_id: UUID
    course_id: UUID

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "student_id": UUID_STUDENT,
                "course_id": UUID_COURSE
            }]
        }
    }

class SupervisorAssignRequest(BaseModel):
    supervisor_id: UUID

class CourseStudentResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    student_id: Optional[str] = None
