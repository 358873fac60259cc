"""
Examination endpoints.

An examination carries the maximum marks and academic level that every grade
recorded against it is classified with. Changing either re-classifies the
stored grades so they never disagree with their examination.
"""

from __future__ import annotations
import logging
from datetime import date
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session, selectinload

from ..db import get_db
from ..grading import AcademicLevel, GradingError, classify
from ..models import Examination, Subject
from ..serializers import examination_to_dict
from ..statistics import summarize
from .auth import User, get_current_user
from .common import commit, get_owned

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/examinations", tags=["examinations"])

ExamType = Literal["QUIZ", "MID_TERM", "FINAL", "MOCK", "NECTA", "ASSIGNMENT", "PROJECT"]
ExamStatus = Literal["DRAFT", "SCHEDULED", "ONGOING", "COMPLETED", "PUBLISHED", "ARCHIVED"]


class ExaminationCreate(BaseModel):
	exam_name: str = Field(min_length=1, max_length=256)
	exam_type: ExamType
	exam_level: AcademicLevel
	subject_id: Optional[str] = None
	academic_year: Optional[str] = None
	start_date: date
	end_date: Optional[date] = None
	max_marks: int = Field(default=100, ge=1)
	weight: float = Field(default=1.0, ge=0)
	description: Optional[str] = None

	@model_validator(mode="after")
	def _check_dates(self):
		if self.end_date is not None and self.end_date < self.start_date:
			raise ValueError("end_date must not be before start_date")
		return self


class ExaminationUpdate(BaseModel):
	exam_name: Optional[str] = Field(default=None, min_length=1, max_length=256)
	exam_type: Optional[ExamType] = None
	exam_level: Optional[AcademicLevel] = None
	subject_id: Optional[str] = None
	academic_year: Optional[str] = None
	start_date: Optional[date] = None
	end_date: Optional[date] = None
	max_marks: Optional[int] = Field(default=None, ge=1)
	weight: Optional[float] = Field(default=None, ge=0)
	description: Optional[str] = None
	status: Optional[ExamStatus] = None


def _check_subject(db: Session, subject_id: Optional[str], tenant_id: str) -> None:
	if subject_id:
		get_owned(db, Subject, subject_id, tenant_id, "Subject")


def _name_taken(db: Session, tenant_id: str, exam_name: str, exam_type: str, exclude_id: Optional[str] = None) -> bool:
	q = db.query(Examination).filter(
		Examination.tenant_id == tenant_id,
		Examination.exam_name == exam_name,
		Examination.exam_type == exam_type,
	)
	if exclude_id:
		q = q.filter(Examination.id != exclude_id)
	return q.first() is not None


def reclassify_grades(exam: Examination, username: str) -> int:
	"""Recompute every stored grade of ``exam`` from its current max marks and level.

	All results are computed before any row is touched, so a GradingError leaves
	the grades unchanged.
	"""
	results = [(g, classify(g.raw_marks, exam.max_marks, exam.exam_level)) for g in exam.grades]
	for grade, result in results:
		grade.percentage = result.percentage
		grade.letter_grade = result.letter_grade
		grade.grade_points = result.grade_points
		grade.updated_by = username
	return len(results)


@router.get("")
def list_examinations(
	exam_type: Optional[ExamType] = None,
	exam_level: Optional[AcademicLevel] = None,
	subject_id: Optional[str] = None,
	academic_year: Optional[str] = None,
	status: Optional[ExamStatus] = None,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	q = db.query(Examination).options(selectinload(Examination.grades)).filter(Examination.tenant_id == user.tenant_id)
	if exam_type:
		q = q.filter(Examination.exam_type == exam_type)
	if exam_level:
		q = q.filter(Examination.exam_level == exam_level.value)
	if subject_id:
		q = q.filter(Examination.subject_id == subject_id)
	if academic_year:
		q = q.filter(Examination.academic_year == academic_year)
	if status:
		q = q.filter(Examination.status == status)
	rows = q.order_by(Examination.start_date.desc()).all()
	return {"success": True, "data": [examination_to_dict(e) for e in rows]}


@router.get("/{examination_id}")
def get_examination(examination_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	exam = get_owned(db, Examination, examination_id, user.tenant_id, "Examination")
	return {"success": True, "data": examination_to_dict(exam, include_grades=True)}


@router.get("/{examination_id}/statistics")
def get_examination_statistics(examination_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	exam = get_owned(db, Examination, examination_id, user.tenant_id, "Examination")
	stats = summarize(exam.grades)
	return {
		"success": True,
		"data": {
			"examination_id": exam.id,
			"max_marks": exam.max_marks,
			"exam_level": exam.exam_level,
			**stats.as_dict(),
		},
	}


@router.post("", status_code=201)
def create_examination(req: ExaminationCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	exam_name = req.exam_name.strip()
	if _name_taken(db, user.tenant_id, exam_name, req.exam_type):
		raise HTTPException(status_code=409, detail="Examination with this name and type already exists in this tenant")
	_check_subject(db, req.subject_id, user.tenant_id)

	exam = Examination(
		tenant_id=user.tenant_id,
		exam_name=exam_name,
		exam_type=req.exam_type,
		exam_level=req.exam_level.value,
		subject_id=req.subject_id or None,
		academic_year=req.academic_year or None,
		start_date=req.start_date,
		end_date=req.end_date,
		max_marks=req.max_marks,
		weight=req.weight,
		description=req.description,
		created_by=user.username,
		updated_by=user.username,
	)
	db.add(exam)
	commit(db, "create examination")
	db.refresh(exam)
	logger.info("Examination %s created by %s", exam.id, user.username)
	return {"success": True, "message": "Examination created successfully", "data": examination_to_dict(exam)}


@router.put("/{examination_id}")
def update_examination(examination_id: str, req: ExaminationUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	exam = get_owned(db, Examination, examination_id, user.tenant_id, "Examination")
	changes: Dict[str, Any] = req.model_dump(exclude_unset=True)
	# Fields that cannot be nulled out
	for key in ("exam_name", "exam_type", "exam_level", "start_date", "max_marks", "weight", "status"):
		if key in changes and changes[key] is None:
			changes.pop(key)

	if "exam_name" in changes or "exam_type" in changes:
		name = changes.get("exam_name", exam.exam_name).strip()
		etype = changes.get("exam_type", exam.exam_type)
		if _name_taken(db, user.tenant_id, name, etype, exclude_id=exam.id):
			raise HTTPException(status_code=409, detail="Examination with this name and type already exists in this tenant")
		if "exam_name" in changes:
			changes["exam_name"] = name
	if "subject_id" in changes:
		changes["subject_id"] = changes["subject_id"] or None
		_check_subject(db, changes["subject_id"], user.tenant_id)
	if isinstance(changes.get("exam_level"), AcademicLevel):
		changes["exam_level"] = changes["exam_level"].value

	start = changes.get("start_date", exam.start_date)
	end = changes.get("end_date", exam.end_date)
	if end is not None and start is not None and end < start:
		raise HTTPException(status_code=400, detail="end_date must not be before start_date")

	rescale = (
		("max_marks" in changes and changes["max_marks"] != exam.max_marks)
		or ("exam_level" in changes and changes["exam_level"] != exam.exam_level)
	)
	for key, value in changes.items():
		setattr(exam, key, value)
	exam.updated_by = user.username

	if rescale:
		try:
			count = reclassify_grades(exam, user.username)
		except GradingError as e:
			db.rollback()
			raise HTTPException(status_code=400, detail=f"Existing grades do not fit the new settings: {e}")
		logger.info("Re-classified %d grade(s) of examination %s", count, exam.id)

	commit(db, "update examination")
	db.refresh(exam)
	return {"success": True, "message": "Examination updated successfully", "data": examination_to_dict(exam)}


@router.delete("/{examination_id}")
def delete_examination(examination_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	exam = get_owned(db, Examination, examination_id, user.tenant_id, "Examination")
	db.delete(exam)
	commit(db, "delete examination")
	logger.info("Examination %s deleted by %s", examination_id, user.username)
	return {"success": True, "message": "Examination deleted successfully"}
