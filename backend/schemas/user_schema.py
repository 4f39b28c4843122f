from typing import Annotated, Literal, Optional, List, Union
from pydantic import BaseModel, Field
from models.user_model import UserRole
from datetime import datetime
from uuid import UUID

# Examples
UUID_USER = "9f8f5e64-5717-4562-b3fc-2c963f66afa6"

# Embedded profile schemas
class StudentProfileResponse(BaseModel):
    student_id: str
    department: str
    program: str
    enrollment_year: int

    model_config = {
        "from_attributes": True
    }

class SupervisorProfileResponse(BaseModel):
    department: str
    specialization: str

    model_config = {
        "from_attributes": True
    }

class AdminProfileResponse(BaseModel):
    department: str
    position: str
    permissions: List[str] = []

    model_config = {
        "from_attributes": True
    }

# Base User schema
class UserBase(BaseModel):
    email: str
    first_name: str
    last_name: str
    role: UserRole

# Response User schema, never carries the password hash
class UserResponse(UserBase):
    id: UUID
    created_at: Optional[datetime] = None
    student_profile: Optional[StudentProfileResponse] = None
    supervisor_profile: Optional[SupervisorProfileResponse] = None
    admin_profile: Optional[AdminProfileResponse] = None

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [{
                "id": UUID_USER,
                "email": "a@x.com",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "role": "STUDENT",
                "student_profile": {
                    "student_id": "S-1001",
                    "department": "Computer Science",
                    "program": "Thesis Program",
                    "enrollment_year": 2024
                },
                "supervisor_profile": None,
                "admin_profile": None
            }]
        }
    }

class LoginResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"

# Admin-created users, server generates the password
class NewUserBase(BaseModel):
    email: str
    first_name: str
    last_name: str

class NewStudent(NewUserBase):
    role: Literal["STUDENT"]
    student_id: str
    department: str = "Not Specified"
    program: str = "Thesis Program"
    enrollment_year: Optional[int] = None

class NewSupervisor(NewUserBase):
    role: Literal["SUPERVISOR"]
    department: str
    specialization: str

class NewAdmin(NewUserBase):
    role: Literal["ADMIN"]
    department: str
    position: str
    permissions: List[str] = ["VIEW_REPORTS"]

AdminUserCreate = Annotated[
    Union[NewStudent, NewSupervisor, NewAdmin],
    Field(discriminator = "role"),
]

class AdminUserCreatedResponse(UserResponse):
    temporary_password: str

# Student self-service profile update
class StudentProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    student_id: Optional[str] = None
    department: Optional[str] = None
    program: Optional[str] = None
    enrollment_year: Optional[int] = None

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "first_name": "Ada",
                "program": "MSc Thesis",
                "enrollment_year": 2025
            }]
        }
    }

# Search results
class StudentSearchResult(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    student_id: str

class SupervisorSearchResult(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    department: Optional[str] = None
