from sqlalchemy import Column, String, ForeignKey, DateTime, UniqueConstraint, Uuid
from models.user_model import _utcnow
from sqlalchemy.orm import relationship
from config.database import Base
import uuid

# Define course model
class Course(Base):
    __tablename__ = "courses"

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    code = Column(String(20), unique = True, nullable = False)
    name = Column(String(100), nullable = False)
    category = Column(String(100), nullable = False)
    created_at = Column(DateTime(timezone = True), default = _utcnow, nullable = False)
    updated_at = Column(DateTime(timezone = True), default = _utcnow, onupdate = _utcnow, nullable = False)

    supervisor_links = relationship("SupervisorCourse", back_populates = "course", cascade = "all, delete")
    enrollments = relationship("Enrollment", back_populates = "course", cascade = "all, delete")
    assignments = relationship("Assignment", back_populates = "course", cascade = "all, delete")

    @property
    def supervisors(self):
        return [link.supervisor for link in self.supervisor_links]

    @property
    def enrolled_count(self) -> int:
        return len(self.enrollments)

# Supervisor assigned to a course
class SupervisorCourse(Base):
    __tablename__ = "supervisor_courses"
    __table_args__ = (
        UniqueConstraint("supervisor_id", "course_id", name = "uq_supervisor_course"),
    )

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    supervisor_id = Column(Uuid, ForeignKey("users.id"), nullable = False)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable = False)
    created_at = Column(DateTime(timezone = True), default = _utcnow, nullable = False)

    supervisor = relationship("User", back_populates = "supervisor_courses")
    course = relationship("Course", back_populates = "supervisor_links")

# Student enrolled in a course
class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name = "uq_enrollment_user_course"),
    )

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable = False)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable = False)
    created_at = Column(DateTime(timezone = True), default = _utcnow, nullable = False)

    user = relationship("User", back_populates = "enrollments")
    course = relationship("Course", back_populates = "enrollments")
