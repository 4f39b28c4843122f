from sqlalchemy import Column, String, Text, Integer, ForeignKey, Enum, DateTime, JSON, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from config.database import Base
import uuid
import enum

def _utcnow():
    return datetime.now(timezone.utc)

# Define role enumeration
class UserRole(enum.Enum):
    student = "STUDENT"
    supervisor = "SUPERVISOR"
    admin = "ADMIN"

# Define user model
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    email = Column(String(255), unique = True, nullable = False, index = True)
    password = Column(Text, nullable = False)
    first_name = Column(String(100), nullable = False)
    last_name = Column(String(100), nullable = False)
    role = Column(Enum(UserRole), nullable = False)
    created_at = Column(DateTime(timezone = True), default = _utcnow, nullable = False)
    updated_at = Column(DateTime(timezone = True), default = _utcnow, onupdate = _utcnow, nullable = False)

    student_profile = relationship("StudentProfile", back_populates = "user", uselist = False, cascade = "all, delete-orphan")
    supervisor_profile = relationship("SupervisorProfile", back_populates = "user", uselist = False, cascade = "all, delete-orphan")
    admin_profile = relationship("AdminProfile", back_populates = "user", uselist = False, cascade = "all, delete-orphan")

    enrollments = relationship("Enrollment", back_populates = "user", cascade = "all, delete")
    supervisor_courses = relationship("SupervisorCourse", back_populates = "supervisor", cascade = "all, delete")
    submissions = relationship("AssignmentSubmission", back_populates = "student", cascade = "all, delete")

# Define student profile model
class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), unique = True, nullable = False)
    student_id = Column(String(50), unique = True, nullable = False)
    department = Column(String(100), nullable = False)
    program = Column(String(100), nullable = False)
    enrollment_year = Column(Integer, nullable = False)

    user = relationship("User", back_populates = "student_profile")

# Define supervisor profile model
class SupervisorProfile(Base):
    __tablename__ = "supervisor_profiles"

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), unique = True, nullable = False)
    department = Column(String(100), nullable = False)
    specialization = Column(String(100), nullable = False)

    user = relationship("User", back_populates = "supervisor_profile")

# Define admin profile model
class AdminProfile(Base):
    __tablename__ = "admin_profiles"

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), unique = True, nullable = False)
    department = Column(String(100), nullable = False)
    position = Column(String(100), nullable = False)
    permissions = Column(JSON, nullable = False, default = list)

    user = relationship("User", back_populates = "admin_profile")
