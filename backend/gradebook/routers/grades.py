"""
Grade record endpoints.

A grade is keyed by id and, uniquely within a tenant, by
(examination, student, subject). Percentage, letter grade and grade points are
never accepted from clients: they are always produced by ``grading.classify``
from the raw marks and the examination's max marks and level, and are
overwritten whenever the raw marks change.
"""

from __future__ import annotations
import logging
import math
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..grading import GradeResult, classify
from ..models import Examination, Grade, Student, Subject
from ..serializers import examination_summary, grade_to_dict
from ..settings import settings
from .auth import User, get_current_user
from .common import commit, get_owned

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/examinations/grades", tags=["grades"])

GradeStatus = Literal["DRAFT", "SUBMITTED", "APPROVED", "PUBLISHED", "ARCHIVED"]

DUPLICATE_GRADE = "Grade already exists for this student, examination, and subject"


class GradeCreate(BaseModel):
	examination_id: str
	student_id: str
	subject_id: str
	raw_marks: float = Field(strict=True)
	comments: Optional[str] = None


class GradeUpsert(GradeCreate):
	status: Optional[GradeStatus] = None


class GradeUpdate(BaseModel):
	raw_marks: Optional[float] = Field(default=None, strict=True)
	comments: Optional[str] = None
	status: Optional[GradeStatus] = None


class PreviewRequest(BaseModel):
	examination_id: str
	raw_marks: float = Field(strict=True)


def _apply(grade: Grade, raw_marks: float, result: GradeResult) -> None:
	grade.raw_marks = raw_marks
	grade.percentage = result.percentage
	grade.letter_grade = result.letter_grade
	grade.grade_points = result.grade_points


def _find_by_key(db: Session, tenant_id: str, examination_id: str, student_id: str, subject_id: str) -> Optional[Grade]:
	return (
		db.query(Grade)
		.filter(
			Grade.tenant_id == tenant_id,
			Grade.examination_id == examination_id,
			Grade.student_id == student_id,
			Grade.subject_id == subject_id,
		)
		.first()
	)


def _resolve_refs(db: Session, req: GradeCreate, tenant_id: str) -> Examination:
	exam = get_owned(db, Examination, req.examination_id, tenant_id, "Examination")
	get_owned(db, Student, req.student_id, tenant_id, "Student")
	get_owned(db, Subject, req.subject_id, tenant_id, "Subject")
	return exam


def _new_grade(req: GradeCreate, exam: Examination, user: User) -> Grade:
	result = classify(req.raw_marks, exam.max_marks, exam.exam_level)
	grade = Grade(
		tenant_id=user.tenant_id,
		examination_id=exam.id,
		student_id=req.student_id,
		subject_id=req.subject_id,
		comments=req.comments,
		status="DRAFT",
		created_by=user.username,
		updated_by=user.username,
	)
	_apply(grade, req.raw_marks, result)
	return grade


@router.get("")
def list_grades(
	examination_id: Optional[str] = None,
	student_id: Optional[str] = None,
	subject_id: Optional[str] = None,
	status: Optional[GradeStatus] = None,
	page: int = Query(1, ge=1),
	limit: Optional[int] = Query(None, ge=1, le=settings.max_page_limit),
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	limit = limit or settings.default_page_limit
	q = db.query(Grade).filter(Grade.tenant_id == user.tenant_id)
	if examination_id:
		q = q.filter(Grade.examination_id == examination_id)
	if student_id:
		q = q.filter(Grade.student_id == student_id)
	if subject_id:
		q = q.filter(Grade.subject_id == subject_id)
	if status:
		q = q.filter(Grade.status == status)
	total = q.count()
	rows = (
		q.order_by(Grade.created_at.desc(), Grade.id.asc())
		.offset((page - 1) * limit)
		.limit(limit)
		.all()
	)
	return {
		"success": True,
		"data": [grade_to_dict(g) for g in rows],
		"pagination": {
			"page": page,
			"limit": limit,
			"total": total,
			"pages": math.ceil(total / limit) if total else 0,
		},
	}


@router.get("/lookup")
def lookup_grade(
	examination_id: str,
	student_id: str,
	subject_id: str,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	grade = _find_by_key(db, user.tenant_id, examination_id, student_id, subject_id)
	if grade is None:
		raise HTTPException(status_code=404, detail="Grade not found")
	return {"success": True, "data": grade_to_dict(grade)}


@router.post("/preview")
def preview_grade(req: PreviewRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	exam = get_owned(db, Examination, req.examination_id, user.tenant_id, "Examination")
	result = classify(req.raw_marks, exam.max_marks, exam.exam_level)
	return {
		"success": True,
		"data": {
			"raw_marks": req.raw_marks,
			"examination": examination_summary(exam),
			**result.as_dict(),
		},
	}


@router.get("/{grade_id}")
def get_grade(grade_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	grade = get_owned(db, Grade, grade_id, user.tenant_id, "Grade")
	return {"success": True, "data": grade_to_dict(grade)}


@router.post("", status_code=201)
def create_grade(req: GradeCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	exam = _resolve_refs(db, req, user.tenant_id)
	if _find_by_key(db, user.tenant_id, req.examination_id, req.student_id, req.subject_id):
		raise HTTPException(status_code=409, detail=DUPLICATE_GRADE)
	grade = _new_grade(req, exam, user)
	db.add(grade)
	commit(db, "create grade", conflict=DUPLICATE_GRADE)
	db.refresh(grade)
	logger.info("Grade %s created (%s, %s)", grade.id, grade.letter_grade, grade.percentage)
	return {"success": True, "message": "Grade created successfully", "data": grade_to_dict(grade)}


@router.put("")
def upsert_grade(req: GradeUpsert, response: Response, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	exam = _resolve_refs(db, req, user.tenant_id)
	grade = _find_by_key(db, user.tenant_id, req.examination_id, req.student_id, req.subject_id)
	if grade is None:
		grade = _new_grade(req, exam, user)
		if req.status:
			grade.status = req.status
		db.add(grade)
		response.status_code = 201
		message = "Grade created successfully"
	else:
		_apply(grade, req.raw_marks, classify(req.raw_marks, exam.max_marks, exam.exam_level))
		if req.comments is not None:
			grade.comments = req.comments
		if req.status:
			grade.status = req.status
		grade.updated_by = user.username
		message = "Grade updated successfully"
	commit(db, "save grade", conflict=DUPLICATE_GRADE)
	db.refresh(grade)
	return {"success": True, "message": message, "data": grade_to_dict(grade)}


@router.put("/{grade_id}")
def update_grade(grade_id: str, req: GradeUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	grade = get_owned(db, Grade, grade_id, user.tenant_id, "Grade")
	if req.raw_marks is not None:
		exam = grade.examination
		_apply(grade, req.raw_marks, classify(req.raw_marks, exam.max_marks, exam.exam_level))
		logger.debug("Grade %s re-classified as %s", grade.id, grade.letter_grade)
	if req.comments is not None:
		grade.comments = req.comments
	if req.status:
		grade.status = req.status
	grade.updated_by = user.username
	commit(db, "update grade")
	db.refresh(grade)
	return {"success": True, "message": "Grade updated successfully", "data": grade_to_dict(grade)}


@router.delete("/{grade_id}")
def delete_grade(grade_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	grade = get_owned(db, Grade, grade_id, user.tenant_id, "Grade")
	db.delete(grade)
	commit(db, "delete grade")
	return {"success": True, "message": "Grade deleted successfully"}
