from errors.course_errors import (
    CourseNotFoundError,
    DuplicateCourseError,
    AlreadyEnrolledError,
    NotEnrolledError,
    AlreadyAssignedError,
    NotAssignedError,
)
from schemas.course_schema import CourseCreate, CourseResponse, EnrollmentRequest, SupervisorAssignRequest, CourseStudentResponse
from schemas.assignment_schema import AssignmentCreate, AssignmentUpdate, AssignmentResponse, CourseAssignmentResponse, SubmissionDetailResponse
from errors.assignment_errors import AssignmentNotFoundError, NotCourseSupervisorError
from fastapi import APIRouter, Depends, HTTPException, status
from middlewares.jwt_auth import require_roles, get_current_user
from schemas.auth_schema import MessageResponse, SessionClaims
from errors.db_errors import IntegrityConstraintError
from errors.user_errors import UserNotFoundError
from models.user_model import UserRole
from sqlalchemy.orm import Session
from config.database import get_db
from uuid import UUID
from services.course_service import (
    create_course,
    get_courses,
    get_course_by_id,
    delete_course,
    enroll_student,
    unenroll_student,
    assign_supervisor,
    remove_supervisor,
    get_course_students,
    get_student_courses,
    get_supervisor_courses,
)
from services.assignment_service import (
    create_assignment,
    update_instructions,
    get_course_assignments,
    get_course_submissions,
)

router = APIRouter(prefix = "/api/courses", tags = ["Courses"])

ANY_STAFF = (UserRole.supervisor, UserRole.admin)

# Get All Courses
@router.get("", response_model = list[CourseResponse], dependencies = [Depends(get_current_user)])
def get_courses_endpoint(db: Session = Depends(get_db)):
    return get_courses(db)


# Create Course
@router.post("", response_model = CourseResponse, status_code = status.HTTP_201_CREATED, dependencies = [Depends(require_roles(UserRole.admin))])
def create_course_endpoint(course_data: CourseCreate, db: Session = Depends(get_db)):
    try:
        return create_course(db, course_data)
    except DuplicateCourseError as e:
        raise HTTPException(status_code = status.HTTP_400_BAD_REQUEST, detail = str(e))


# Get Enrolled Courses of the caller
@router.get("/enrolled", response_model = list[CourseResponse])
def get_enrolled_courses_endpoint(current_user: SessionClaims = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_student_courses(db, current_user.user_id)


# Get Supervised Courses of the caller
@router.get("/supervisor/courses", response_model = list[CourseResponse])
def get_supervised_courses_endpoint(current_user: SessionClaims = Depends(require_roles(UserRole.supervisor)), db: Session = Depends(get_db)):
    return get_supervisor_courses(db, current_user.user_id)


# Enroll Student
@router.post("/enroll", response_model = MessageResponse, status_code = status.HTTP_201_CREATED, dependencies = [Depends(require_roles(*ANY_STAFF))])
def enroll_endpoint(data: EnrollmentRequest, db: Session = Depends(get_db)):
    try:
        enroll_student(db, data.student_id, data.course_id)
        return MessageResponse(message = "Student enrolled successfully")
    except (UserNotFoundError, CourseNotFoundError) as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except AlreadyEnrolledError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))


# Unenroll Student
@router.delete("/enroll", response_model = MessageResponse, dependencies = [Depends(require_roles(*ANY_STAFF))])
def unenroll_endpoint(data: EnrollmentRequest, db: Session = Depends(get_db)):
    try:
        unenroll_student(db, data.student_id, data.course_id)
        return MessageResponse(message = "Student removed successfully")
    except NotEnrolledError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))


# Get Course by ID
@router.get("/{course_id}", response_model = CourseResponse, dependencies = [Depends(get_current_user)])
def get_course_by_id_endpoint(course_id: UUID, db: Session = Depends(get_db)):
    try:
        return get_course_by_id(db, course_id)
    except CourseNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))


# Delete Course
@router.delete("/{course_id}", response_model = MessageResponse, dependencies = [Depends(require_roles(UserRole.admin))])
def delete_course_endpoint(course_id: UUID, db: Session = Depends(get_db)):
    try:
        delete_course(db, course_id)
        return MessageResponse(message = "Course deleted successfully")
    except CourseNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except IntegrityConstraintError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))


# Get Course Students
@router.get("/{course_id}/students", response_model = list[CourseStudentResponse], dependencies = [Depends(require_roles(*ANY_STAFF))])
def get_course_students_endpoint(course_id: UUID, db: Session = Depends(get_db)):
    try:
        return get_course_students(db, course_id)
    except CourseNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))


# Assign Supervisor
@router.post("/{course_id}/supervisors", response_model = MessageResponse, status_code = status.HTTP_201_CREATED, dependencies = [Depends(require_roles(UserRole.admin))])
def assign_supervisor_endpoint(course_id: UUID, data: SupervisorAssignRequest, db: Session = Depends(get_db)):
    try:
        assign_supervisor(db, data.supervisor_id, course_id)
        return MessageResponse(message = "Supervisor assigned successfully")
    except (UserNotFoundError, CourseNotFoundError) as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except AlreadyAssignedError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))


# Remove Supervisor
@router.delete("/{course_id}/supervisors/{supervisor_id}", response_model = MessageResponse, dependencies = [Depends(require_roles(UserRole.admin))])
def remove_supervisor_endpoint(course_id: UUID, supervisor_id: UUID, db: Session = Depends(get_db)):
    try:
        remove_supervisor(db, supervisor_id, course_id)
        return MessageResponse(message = "Supervisor removed successfully")
    except NotAssignedError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))


# Get Course Submissions
@router.get("/{course_id}/assignments/submissions", response_model = list[SubmissionDetailResponse])
def get_course_submissions_endpoint(course_id: UUID, current_user: SessionClaims = Depends(require_roles(*ANY_STAFF)), db: Session = Depends(get_db)):
    try:
        return get_course_submissions(db, course_id, current_user)
    except CourseNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except NotCourseSupervisorError as e:
        raise HTTPException(status_code = status.HTTP_403_FORBIDDEN, detail = str(e))


# Get Course Assignments, students must be enrolled
@router.get("/{course_id}/assignments", response_model = list[CourseAssignmentResponse])
def get_course_assignments_endpoint(course_id: UUID, current_user: SessionClaims = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return get_course_assignments(db, course_id, current_user)
    except CourseNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except NotEnrolledError as e:
        raise HTTPException(status_code = status.HTTP_403_FORBIDDEN, detail = str(e))


# Create Assignment
@router.post("/{course_id}/assignments", response_model = AssignmentResponse, status_code = status.HTTP_201_CREATED)
def create_assignment_endpoint(course_id: UUID, data: AssignmentCreate, current_user: SessionClaims = Depends(require_roles(*ANY_STAFF)), db: Session = Depends(get_db)):
    try:
        return create_assignment(db, course_id, data, current_user)
    except CourseNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except NotCourseSupervisorError as e:
        raise HTTPException(status_code = status.HTTP_403_FORBIDDEN, detail = str(e))
    except IntegrityConstraintError as e:
        raise HTTPException(status_code = status.HTTP_409_CONFLICT, detail = str(e))


# Update Assignment Instructions
@router.put("/{course_id}/assignments/{assignment_id}", response_model = AssignmentResponse)
def update_assignment_endpoint(course_id: UUID, assignment_id: UUID, data: AssignmentUpdate, current_user: SessionClaims = Depends(require_roles(*ANY_STAFF)), db: Session = Depends(get_db)):
    try:
        return update_instructions(db, course_id, assignment_id, data, current_user)
    except AssignmentNotFoundError as e:
        raise HTTPException(status_code = status.HTTP_404_NOT_FOUND, detail = str(e))
    except NotCourseSupervisorError as e:
        raise HTTPException(status_code = status.HTTP_403_FORBIDDEN, detail = str(e))
