from errors.course_errors import (
    CourseNotFoundError,
    DuplicateCourseError,
    AlreadyEnrolledError,
    NotEnrolledError,
    AlreadyAssignedError,
    NotAssignedError,
)
from models.course_model import Course, Enrollment, SupervisorCourse
from errors.db_errors import IntegrityConstraintError
from services.storage_service import remove_files
from sqlalchemy.orm import Session, selectinload
from errors.user_errors import UserNotFoundError
from models.user_model import User, UserRole
from schemas.course_schema import CourseCreate
from sqlalchemy.exc import IntegrityError
import logging

logger = logging.getLogger("app.services.course")

def _course_loaders():
    return (
        selectinload(Course.supervisor_links).selectinload(SupervisorCourse.supervisor),
        selectinload(Course.enrollments),
    )

def _get_user_with_role(db: Session, user_id, role: UserRole) -> User:
    user = db.query(User).filter(User.id == user_id, User.role == role).first()
    if not user:
        logger.warning("User not found or not a %s id=%s", role.value, user_id)
        raise UserNotFoundError("id", str(user_id))
    return user


# Create course (POST)
def create_course(db: Session, course_data: CourseCreate):
    logger.info("Creating new course with code=%s", course_data.code)

    # Check that there is no course with the same code
    existing_code = db.query(Course).filter(Course.code == course_data.code).first()
    if existing_code:
        logger.warning("Course with code=%s already exists", course_data.code)
        raise DuplicateCourseError("code", course_data.code)

    course = Course(
        code = course_data.code,
        name = course_data.name,
        category = course_data.category,
    )

    try:
        db.add(course)
        db.commit()
        db.refresh(course)
        logger.info("Course created successfully id=%s", course.id)
        return get_course_by_id(db, course.id)

    except IntegrityError as e:
        db.rollback()
        logger.error("IntegrityError when creating course: %s", str(e))
        # A concurrent insert with the same code lost the race
        raise DuplicateCourseError("code", course_data.code)


# Get all courses (GET)
def get_courses(db: Session):
    logger.debug("Fetching all courses")
    return db.query(Course).options(*_course_loaders()).order_by(Course.code).all()


# Get course by id (GET)
def get_course_by_id(db: Session, course_id):
    logger.debug("Fetching course by id=%s", course_id)
    course = db.query(Course).options(*_course_loaders()).filter(Course.id == course_id).first()
    if not course:
        raise CourseNotFoundError("id", str(course_id))
    return course


# Delete course (DELETE), dependent rows go in the same transaction
def delete_course(db: Session, course_id):
    logger.info("Deleting course id=%s", course_id)
    course = get_course_by_id(db, course_id)
    file_urls = [s.file_url for a in course.assignments for s in a.submissions]

    # Enrollments, supervisor links, assignments and their submissions cascade
    try:
        db.delete(course)
        db.commit()

    except IntegrityError as e:
        db.rollback()
        logger.error("IntegrityError when deleting course: %s", str(e))
        raise IntegrityConstraintError("Delete Course")

    # Uploaded files go only once the rows are gone
    remove_files(file_urls)
    logger.info("Course deleted successfully id=%s", course_id)
    return course


# Enroll student (POST)
def enroll_student(db: Session, student_id, course_id) -> Enrollment:
    logger.info("Enrolling student id=%s in course id=%s", student_id, course_id)
    _get_user_with_role(db, student_id, UserRole.student)
    get_course_by_id(db, course_id)

    existing = db.query(Enrollment).filter(Enrollment.user_id == student_id, Enrollment.course_id == course_id).first()
    if existing:
        logger.warning("Student id=%s already enrolled in course id=%s", student_id, course_id)
        raise AlreadyEnrolledError(str(student_id), str(course_id))

    enrollment = Enrollment(user_id = student_id, course_id = course_id)
    try:
        db.add(enrollment)
        db.commit()
        db.refresh(enrollment)
        logger.info("Student enrolled successfully id=%s", enrollment.id)
        return enrollment

    except IntegrityError as e:
        db.rollback()
        logger.warning("Concurrent enrollment rejected by unique constraint: %s", str(e))
        raise AlreadyEnrolledError(str(student_id), str(course_id))


# Unenroll student (DELETE)
def unenroll_student(db: Session, student_id, course_id):
    logger.info("Unenrolling student id=%s from course id=%s", student_id, course_id)
    enrollment = db.query(Enrollment).filter(Enrollment.user_id == student_id, Enrollment.course_id == course_id).first()
    if not enrollment:
        logger.warning("Student id=%s not enrolled in course id=%s", student_id, course_id)
        raise NotEnrolledError(str(student_id), str(course_id))

    db.delete(enrollment)
    db.commit()
    logger.info("Student unenrolled id=%s course id=%s", student_id, course_id)


def is_enrolled(db: Session, student_id, course_id) -> bool:
    return db.query(Enrollment).filter(Enrollment.user_id == student_id, Enrollment.course_id == course_id).first() is not None


# Assign supervisor (POST)
def assign_supervisor(db: Session, supervisor_id, course_id) -> SupervisorCourse:
    logger.info("Assigning supervisor id=%s to course id=%s", supervisor_id, course_id)
    _get_user_with_role(db, supervisor_id, UserRole.supervisor)
    get_course_by_id(db, course_id)

    existing = db.query(SupervisorCourse).filter(SupervisorCourse.supervisor_id == supervisor_id, SupervisorCourse.course_id == course_id).first()
    if existing:
        logger.warning("Supervisor id=%s already assigned to course id=%s", supervisor_id, course_id)
        raise AlreadyAssignedError(str(supervisor_id), str(course_id))

    link = SupervisorCourse(supervisor_id = supervisor_id, course_id = course_id)
    try:
        db.add(link)
        db.commit()
        db.refresh(link)
        logger.info("Supervisor assigned successfully id=%s", link.id)
        return link

    except IntegrityError as e:
        db.rollback()
        logger.warning("Concurrent supervisor assignment rejected by unique constraint: %s", str(e))
        raise AlreadyAssignedError(str(supervisor_id), str(course_id))


# Remove supervisor (DELETE)
def remove_supervisor(db: Session, supervisor_id, course_id):
    logger.info("Removing supervisor id=%s from course id=%s", supervisor_id, course_id)
    link = db.query(SupervisorCourse).filter(SupervisorCourse.supervisor_id == supervisor_id, SupervisorCourse.course_id == course_id).first()
    if not link:
        logger.warning("Supervisor id=%s not assigned to course id=%s", supervisor_id, course_id)
        raise NotAssignedError(str(supervisor_id), str(course_id))

    db.delete(link)
    db.commit()
    logger.info("Supervisor removed id=%s course id=%s", supervisor_id, course_id)


def is_course_supervisor(db: Session, supervisor_id, course_id) -> bool:
    return db.query(SupervisorCourse).filter(SupervisorCourse.supervisor_id == supervisor_id, SupervisorCourse.course_id == course_id).first() is not None


# Get course roster (GET)
def get_course_students(db: Session, course_id):
    logger.debug("Fetching students for course id=%s", course_id)
    get_course_by_id(db, course_id)
    students = (
        db.query(User)
        .join(Enrollment, Enrollment.user_id == User.id)
        .options(selectinload(User.student_profile))
        .filter(Enrollment.course_id == course_id)
        .order_by(User.last_name, User.first_name)
        .all()
    )
    return [
        {
            "id": s.id,
            "first_name": s.first_name,
            "last_name": s.last_name,
            "email": s.email,
            "student_id": s.student_profile.student_id if s.student_profile else None,
        }
        for s in students
    ]


# Get courses a student is enrolled in (GET)
def get_student_courses(db: Session, student_id):
    logger.debug("Fetching enrolled courses for user id=%s", student_id)
    return (
        db.query(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .options(*_course_loaders())
        .filter(Enrollment.user_id == student_id)
        .order_by(Course.code)
        .all()
    )


# Get courses a supervisor is assigned to (GET)
def get_supervisor_courses(db: Session, supervisor_id):
    logger.debug("Fetching supervised courses for user id=%s", supervisor_id)
    return (
        db.query(Course)
        .join(SupervisorCourse, SupervisorCourse.course_id == Course.id)
        .options(*_course_loaders())
        .filter(SupervisorCourse.supervisor_id == supervisor_id)
        .order_by(Course.code)
        .all()
    )
