from schemas.user_schema import (
    AdminUserCreate,
    AdminUserCreatedResponse,
    UserResponse,
    StudentProfileUpdate,
    StudentSearchResult,
    SupervisorSearchResult,
)
from errors.user_errors import UserNotFoundError, DuplicateUserError, SearchQueryTooShortError
from fastapi import APIRouter, Depends, HTTPException, Query, status
from schemas.auth_schema import MessageResponse, SessionClaims
from middlewares.jwt_auth import require_roles, get_current_user
from errors.db_errors import IntegrityConstraintError
from models.user_model import UserRole
from sqlalchemy.orm import Session
from config.database import get_db
from uuid import UUID
from services.user_service import (
    create_user_with_temporary_password,
    get_users_by_role,
    delete_user,
    update_student_profile,
    search_students,
    search_supervisors,
)

# Admin only routes
admin_router = APIRouter(
    prefix = "/api/admin",
    tags = ["Admin"],
    dependencies = [Depends(require_roles(UserRole.admin))],
)

# Create User, returns the generated temporary password once
@admin_router.post("/users", response_model = AdminUserCreatedResponse, status_code = status.HTTP_201_CREATED)
def create_user_endpoint(data: AdminUserCreate, db: Session = Depends(get_db)):
    try:
        user, password = create_user_with_temporary_password(db, data)
        response = UserResponse.model_validate(user).model_dump()
        return AdminUserCreatedResponse(**response, temporary_password = password)
    except DuplicateUserError as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))
    except IntegrityConstraintError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))


# Delete User
@admin_router.delete("/users/{user_id}", response_model = MessageResponse)
def delete_user_endpoint(user_id: UUID, db: Session = Depends(get_db)):
    try:
        delete_user(db, user_id)
        return MessageResponse(message = "User deleted successfully")
    except UserNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except IntegrityConstraintError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))


# Get Students
@admin_router.get("/students", response_model = list[UserResponse])
def get_students_endpoint(db: Session = Depends(get_db)):
    return get_users_by_role(db, UserRole.student)


# Get Supervisors
@admin_router.get("/supervisors", response_model = list[UserResponse])
def get_supervisors_endpoint(db: Session = Depends(get_db)):
    return get_users_by_role(db, UserRole.supervisor)


# Search Supervisors
@admin_router.get("/supervisors/search", response_model = list[SupervisorSearchResult])
def search_supervisors_endpoint(q: str = Query(""), db: Session = Depends(get_db)):
    try:
        return search_supervisors(db, q)
    except SearchQueryTooShortError as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))


# Student search, any authenticated user
students_router = APIRouter(prefix = "/api/students", tags = ["Students"])

@students_router.get("/search", response_model = list[StudentSearchResult], dependencies = [Depends(get_current_user)])
def search_students_endpoint(q: str = Query(""), db: Session = Depends(get_db)):
    try:
        return search_students(db, q)
    except SearchQueryTooShortError as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))


# Student self-service
student_router = APIRouter(prefix = "/api/student", tags = ["Student"])

@student_router.put("/profile", response_model = UserResponse)
def update_profile_endpoint(data: StudentProfileUpdate, current_user: SessionClaims = Depends(require_roles(UserRole.student)), db: Session = Depends(get_db)):
    try:
        return update_student_profile(db, current_user.user_id, data)
    except UserNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except DuplicateUserError as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))
    except IntegrityConstraintError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))
