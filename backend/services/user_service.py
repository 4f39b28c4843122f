import logging
import secrets
import string
import os
import re
from datetime import datetime, timezone
from typing import Union
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from errors.user_errors import (
    UserNotFoundError,
    DuplicateUserError,
    InvalidCredentialsError,
    WeakPasswordError,
    SearchQueryTooShortError,
)
from errors.db_errors import IntegrityConstraintError
from services.storage_service import remove_files
from models.user_model import User, UserRole, StudentProfile, SupervisorProfile, AdminProfile
from schemas.auth_schema import StudentRegistration, SupervisorRegistration, AdminRegistration
from schemas.user_schema import NewStudent, NewSupervisor, NewAdmin, StudentProfileUpdate
from passlib.context import CryptContext

logger = logging.getLogger("app.services.user")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
MIN_SEARCH_LENGTH = 2
TEMPORARY_PASSWORD_LENGTH = 12
DEFAULT_ADMIN_PERMISSIONS = ["VIEW_REPORTS"]

pwd_ctx = CryptContext(schemes = ["bcrypt"], deprecated = "auto", bcrypt__rounds = BCRYPT_ROUNDS)

# Loader options are built per query, after every model is mapped
def _profile_loaders():
    return (
        selectinload(User.student_profile),
        selectinload(User.supervisor_profile),
        selectinload(User.admin_profile),
    )

# Helpers to manage password securely
def _hash_password(plain: str) -> str:
    return pwd_ctx.hash(plain)

def _verify_password(plain: str, hashed: str) -> bool:
    return pwd_ctx.verify(plain, hashed)

def _check_password_strength(password: str):
    if (
        len(password) < 8
        or not re.search(r"[A-Z]", password)
        or not re.search(r"[a-z]", password)
        or not re.search(r"\d", password)
    ):
        raise WeakPasswordError()

def _generate_temporary_password() -> str:
    # Guarantee one character of each class so the password passes the policy
    alphabet = string.ascii_letters + string.digits
    chars = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
    ]
    chars += [secrets.choice(alphabet) for _ in range(TEMPORARY_PASSWORD_LENGTH - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


ProfilePayload = Union[StudentRegistration, SupervisorRegistration, AdminRegistration, NewStudent, NewSupervisor, NewAdmin]

# Attach the profile matching the payload role
def _attach_profile(user: User, data: ProfilePayload):
    role = UserRole(data.role)
    if role == UserRole.student:
        user.student_profile = StudentProfile(
            student_id = data.student_id,
            department = data.department,
            program = data.program,
            enrollment_year = data.enrollment_year or datetime.now(timezone.utc).year,
        )
    elif role == UserRole.supervisor:
        user.supervisor_profile = SupervisorProfile(
            department = data.department,
            specialization = data.specialization,
        )
    else:
        user.admin_profile = AdminProfile(
            department = data.department,
            position = data.position,
            permissions = list(getattr(data, "permissions", None) or DEFAULT_ADMIN_PERMISSIONS),
        )


# Create user (POST)
def create_user(db: Session, email: str, password: str, first_name: str, last_name: str, role: UserRole, profile: ProfilePayload = None) -> User:
    logger.info("Creating user email=%s role=%s", email, role.value)

    # Check for duplicates
    existing_email = db.query(User).filter(User.email == email).first()
    if existing_email:
        logger.warning("User with email=%s already exist", email)
        raise DuplicateUserError("email", email)

    student_id = getattr(profile, "student_id", None)
    if student_id and db.query(StudentProfile).filter(StudentProfile.student_id == student_id).first():
        logger.warning("Student profile with student_id=%s already exist", student_id)
        raise DuplicateUserError("student_id", student_id)

    user = User(
        email = email,
        password = _hash_password(password),
        first_name = first_name,
        last_name = last_name,
        role = role,
    )
    if profile is not None:
        _attach_profile(user, profile)

    # User and profile are committed together
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("User created successfully id=%s", user.id)
        return get_user_by_id(db, user.id)

    except IntegrityError as e:
        db.rollback()
        logger.error("IntegrityError creating user: %s", str(e))
        raise IntegrityConstraintError("Create User")


# Register user with its role profile (POST)
def register(db: Session, data: Union[StudentRegistration, SupervisorRegistration, AdminRegistration]) -> User:
    return create_user(
        db,
        email = data.email,
        password = data.password,
        first_name = data.first_name,
        last_name = data.last_name,
        role = UserRole(data.role),
        profile = data,
    )


# Admin creates a user, the generated password is returned once
def create_user_with_temporary_password(db: Session, data: Union[NewStudent, NewSupervisor, NewAdmin]):
    password = _generate_temporary_password()
    user = create_user(
        db,
        email = data.email,
        password = password,
        first_name = data.first_name,
        last_name = data.last_name,
        role = UserRole(data.role),
        profile = data,
    )
    return user, password


# Get users by role (GET)
def get_users_by_role(db: Session, role: UserRole):
    logger.debug("Fetching users with role=%s", role.value)
    return db.query(User).options(*_profile_loaders()).filter(User.role == role).order_by(User.last_name, User.first_name).all()


# Get user by id (GET)
def get_user_by_id(db: Session, user_id):
    logger.debug("Fetching user by id=%s", user_id)
    user = db.query(User).options(*_profile_loaders()).filter(User.id == user_id).first()
    if not user:
        raise UserNotFoundError("id", str(user_id))
    return user


# Get user by email (GET)
def get_user_by_email(db: Session, user_email: str):
    logger.debug("Fetching user by email=%s", user_email)
    user = db.query(User).options(*_profile_loaders()).filter(User.email == user_email).first()
    if not user:
        raise UserNotFoundError("email", user_email)
    return user


# Check a password without revealing whether the email exists
def verify_password(db: Session, email: str, password: str) -> bool:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        # Same hashing effort as a real comparison
        pwd_ctx.dummy_verify()
        return False
    return _verify_password(password, user.password)


# Authenticate User (POST)
def authenticate_user(db: Session, user_email: str, password: str) -> User:
    logger.info("Authenticating user email=%s", user_email)
    if not verify_password(db, user_email, password):
        logger.warning("Invalid credentials email=%s", user_email)
        raise InvalidCredentialsError()
    return get_user_by_email(db, user_email)


# Reset password (POST)
def reset_password(db: Session, user_email: str, new_password: str):
    logger.info("Resetting password email=%s", user_email)
    _check_password_strength(new_password)
    user = get_user_by_email(db, user_email)
    user.password = _hash_password(new_password)
    db.commit()
    logger.info("Password reset id=%s", user.id)


# Update student profile (PUT)
def update_student_profile(db: Session, user_id, data: StudentProfileUpdate) -> User:
    logger.info("Updating student profile user_id=%s", user_id)
    user = get_user_by_id(db, user_id)
    payload = data.model_dump(exclude_unset = True, exclude_none = True)

    student_id = payload.get("student_id")
    if student_id and db.query(StudentProfile).filter(StudentProfile.student_id == student_id, StudentProfile.user_id != user.id).first():
        logger.warning("Student profile with student_id=%s already exist", student_id)
        raise DuplicateUserError("student_id", student_id)

    for key in ("first_name", "last_name"):
        if key in payload:
            setattr(user, key, payload.pop(key))

    if payload:
        if user.student_profile is None:
            # A missing profile can only be created from the full field set
            missing = {"student_id", "department", "program", "enrollment_year"} - payload.keys()
            if missing:
                raise UserNotFoundError("student_profile", str(user_id))
            user.student_profile = StudentProfile(**payload)
        else:
            for k, v in payload.items():
                setattr(user.student_profile, k, v)

    try:
        db.commit()
        logger.info("Student profile updated user_id=%s", user_id)
        return get_user_by_id(db, user_id)

    except IntegrityError as e:
        db.rollback()
        logger.error("IntegrityError updating student profile: %s", str(e))
        raise IntegrityConstraintError("Update Student Profile")


# Delete user (DELETE), relationships cascade in the same transaction
def delete_user(db: Session, user_id):
    logger.info("Deleting user id=%s", user_id)
    user = get_user_by_id(db, user_id)
    file_urls = [s.file_url for s in user.submissions]
    try:
        db.delete(user)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error("IntegrityError deleting user: %s", str(e))
        raise IntegrityConstraintError("Delete User")
    remove_files(file_urls)
    logger.info("User deleted id=%s", user_id)
    return user


# Search students by name or student ID (GET)
def search_students(db: Session, query: str):
    if query is None or len(query.strip()) < MIN_SEARCH_LENGTH:
        raise SearchQueryTooShortError(MIN_SEARCH_LENGTH)

    term = query.strip()
    logger.debug("Searching students query=%s", query)
    students = (
        db.query(User)
        .join(StudentProfile, StudentProfile.user_id == User.id)
        .options(selectinload(User.student_profile))
        .filter(
            User.role == UserRole.student,
            or_(
                User.first_name.icontains(term, autoescape = True),
                User.last_name.icontains(term, autoescape = True),
                StudentProfile.student_id.icontains(term, autoescape = True),
            ),
        )
        .order_by(User.last_name, User.first_name)
        .all()
    )
    return [
        {
            "id": s.id,
            "first_name": s.first_name,
            "last_name": s.last_name,
            "student_id": s.student_profile.student_id,
        }
        for s in students
    ]


# Search supervisors by name or email (GET)
def search_supervisors(db: Session, query: str):
    if query is None or len(query.strip()) < MIN_SEARCH_LENGTH:
        raise SearchQueryTooShortError(MIN_SEARCH_LENGTH)

    term = query.strip()
    logger.debug("Searching supervisors query=%s", query)
    supervisors = (
        db.query(User)
        .options(selectinload(User.supervisor_profile))
        .filter(
            User.role == UserRole.supervisor,
            or_(
                User.first_name.icontains(term, autoescape = True),
                User.last_name.icontains(term, autoescape = True),
                User.email.icontains(term, autoescape = True),
            ),
        )
        .order_by(User.last_name, User.first_name)
        .all()
    )
    return [
        {
            "id": s.id,
            "first_name": s.first_name,
            "last_name": s.last_name,
            "email": s.email,
            "department": s.supervisor_profile.department if s.supervisor_profile else None,
        }
        for s in supervisors
    ]
