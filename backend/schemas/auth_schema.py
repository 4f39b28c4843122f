from pydantic import BaseModel, Field
from typing import Annotated, Literal, Union
from models.user_model import UserRole
from uuid import UUID

# Identity carried by a session token
class SessionClaims(BaseModel):
    user_id: UUID
    role: UserRole

# Base registration schema
class RegistrationBase(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str

class StudentRegistration(RegistrationBase):
    role: Literal["STUDENT"]
    student_id: str
    department: str
    program: str
    enrollment_year: int

class SupervisorRegistration(RegistrationBase):
    role: Literal["SUPERVISOR"]
    department: str
    specialization: str

class AdminRegistration(RegistrationBase):
    role: Literal["ADMIN"]
    department: str
    position: str

# Registration payload, tagged by role
RegistrationRequest = Annotated[
    Union[StudentRegistration, SupervisorRegistration, AdminRegistration],
    Field(discriminator = "role"),
]

# Login schemas
class LoginRequest(BaseModel):
    email: str
    password: str

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "email": "a@x.com",
                "password": "Passw0rd!"
            }]
        }
    }

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer"
            }]
        }
    }

class ResetPasswordRequest(BaseModel):
    email: str
    new_password: str

class MessageResponse(BaseModel):
    message: str
