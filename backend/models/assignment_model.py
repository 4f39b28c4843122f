from sqlalchemy import Column, String, Text, Float, ForeignKey, Enum, DateTime, UniqueConstraint, Uuid
from models.user_model import _utcnow
from sqlalchemy.orm import relationship
from config.database import Base
import uuid
import enum

# Define submission status enumeration
class SubmissionStatus(enum.Enum):
    pending = "PENDING"
    submitted = "SUBMITTED"
    graded = "GRADED"

# Define assignment model
class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable = False)
    title = Column(String(200), nullable = False)
    instructions = Column(Text)
    created_at = Column(DateTime(timezone = True), default = _utcnow, nullable = False)

    course = relationship("Course", back_populates = "assignments")
    submissions = relationship("AssignmentSubmission", back_populates = "assignment", cascade = "all, delete")

# Define submission model, one row per (assignment, student)
class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name = "uq_submission_assignment_student"),
    )

    id = Column(Uuid, primary_key = True, default = uuid.uuid4)
    assignment_id = Column(Uuid, ForeignKey("assignments.id"), nullable = False)
    student_id = Column(Uuid, ForeignKey("users.id"), nullable = False)
    status = Column(Enum(SubmissionStatus), nullable = False, default = SubmissionStatus.pending)
    grade = Column(Float)
    feedback = Column(Text)
    file_url = Column(String(500), nullable = False)
    submission_date = Column(DateTime(timezone = True), default = _utcnow, nullable = False)

    assignment = relationship("Assignment", back_populates = "submissions")
    student = relationship("User", back_populates = "submissions")
