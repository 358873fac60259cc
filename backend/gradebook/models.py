from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .db import Base


def _new_id() -> str:
	return uuid.uuid4().hex


class AuthUser(Base):
	__tablename__ = "auth_users"
	# Primary key is username
	username = Column(String(128), primary_key=True, index=True)
	password_hash = Column(String(256), nullable=False)
	email = Column(String(256), nullable=True)
	# Every query a user makes is scoped to this tenant (school)
	tenant_id = Column(String(64), nullable=False, index=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class AuthSession(Base):
	__tablename__ = "auth_sessions"
	# jti claim of the issued token
	session_id = Column(String(64), primary_key=True)
	username = Column(String(128), nullable=False, index=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	last_activity_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Subject(Base):
	__tablename__ = "subjects"
	id = Column(String(32), primary_key=True, default=_new_id)
	tenant_id = Column(String(64), nullable=False, index=True)
	subject_name = Column(String(128), nullable=False)
	subject_code = Column(String(32), nullable=False)
	subject_level = Column(String(16), nullable=False)
	subject_type = Column(String(16), nullable=False, default="CORE")
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	__table_args__ = (UniqueConstraint("tenant_id", "subject_code", name="uq_subject_code"),)


class Student(Base):
	__tablename__ = "students"
	id = Column(String(32), primary_key=True, default=_new_id)
	tenant_id = Column(String(64), nullable=False, index=True)
	admission_number = Column(String(64), nullable=False)
	first_name = Column(String(128), nullable=False)
	last_name = Column(String(128), nullable=False)
	email = Column(String(256), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	__table_args__ = (UniqueConstraint("tenant_id", "admission_number", name="uq_student_admission"),)

	@property
	def full_name(self) -> str:
		return f"{self.first_name} {self.last_name}"


class Examination(Base):
	__tablename__ = "examinations"
	id = Column(String(32), primary_key=True, default=_new_id)
	tenant_id = Column(String(64), nullable=False, index=True)
	exam_name = Column(String(256), nullable=False)
	exam_type = Column(String(16), nullable=False)
	exam_level = Column(String(16), nullable=False)
	subject_id = Column(String(32), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True)
	academic_year = Column(String(32), nullable=True)
	start_date = Column(Date, nullable=False)
	end_date = Column(Date, nullable=True)
	max_marks = Column(Integer, nullable=False, default=100)
	weight = Column(Float, nullable=False, default=1.0)
	description = Column(Text, nullable=True)
	status = Column(String(16), nullable=False, default="DRAFT")
	created_by = Column(String(128), nullable=True)
	updated_by = Column(String(128), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	subject = relationship("Subject")
	grades = relationship("Grade", back_populates="examination", cascade="all, delete-orphan", passive_deletes=True)


class Grade(Base):
	__tablename__ = "grades"
	id = Column(String(32), primary_key=True, default=_new_id)
	tenant_id = Column(String(64), nullable=False, index=True)
	examination_id = Column(String(32), ForeignKey("examinations.id", ondelete="CASCADE"), nullable=False, index=True)
	student_id = Column(String(32), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
	subject_id = Column(String(32), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
	raw_marks = Column(Float, nullable=False)
	# Computed by grading.classify; overwritten whenever raw_marks changes
	percentage = Column(Float, nullable=False)
	letter_grade = Column(String(2), nullable=False)
	grade_points = Column(Float, nullable=False)
	comments = Column(Text, nullable=True)
	status = Column(String(16), nullable=False, default="DRAFT")
	created_by = Column(String(128), nullable=True)
	updated_by = Column(String(128), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	examination = relationship("Examination", back_populates="grades")
	student = relationship("Student")
	subject = relationship("Subject")

	__table_args__ = (
		UniqueConstraint("tenant_id", "examination_id", "student_id", "subject_id", name="uq_grade_exam_student_subject"),
	)


class GradingScale(Base):
	__tablename__ = "grading_scales"
	id = Column(String(32), primary_key=True, default=_new_id)
	tenant_id = Column(String(64), nullable=False, index=True)
	scale_name = Column(String(128), nullable=False)
	exam_level = Column(String(16), nullable=False)
	grade_ranges = Column(JSON, nullable=False)  # [{grade, min, max, points}]
	is_default = Column(Boolean, nullable=False, default=False)
	created_by = Column(String(128), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	__table_args__ = (UniqueConstraint("tenant_id", "scale_name", "exam_level", name="uq_scale_name_level"),)
