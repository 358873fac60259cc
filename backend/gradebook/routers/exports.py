from __future__ import annotations
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session, contains_eager, joinedload, selectinload

from ..db import get_db
from ..exports import examinations_csv, export_filename, grades_csv
from ..models import Examination, Grade, Student
from ..serializers import examination_to_dict, grade_to_dict
from .auth import User, get_current_user

router = APIRouter(prefix="/examinations/export", tags=["exports"])

ExportFormat = Literal["csv", "json"]


def _csv_response(body: str, kind: str) -> Response:
	return Response(
		content=body,
		media_type="text/csv",
		headers={"Content-Disposition": f"attachment; filename={export_filename(kind)}"},
	)


@router.get("/grades")
def export_grades(
	format: ExportFormat = "csv",
	examination_id: Optional[str] = None,
	subject_id: Optional[str] = None,
	academic_year: Optional[str] = None,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	q = (
		db.query(Grade)
		.join(Grade.examination)
		.join(Grade.student)
		.options(contains_eager(Grade.examination), contains_eager(Grade.student), joinedload(Grade.subject))
		.filter(Grade.tenant_id == user.tenant_id)
	)
	if examination_id:
		q = q.filter(Grade.examination_id == examination_id)
	if subject_id:
		q = q.filter(Grade.subject_id == subject_id)
	if academic_year:
		q = q.filter(Examination.academic_year == academic_year)
	grades = q.order_by(
		Examination.start_date.desc(),
		Student.last_name.asc(),
		Student.first_name.asc(),
	).all()

	if format == "csv":
		return _csv_response(grades_csv(grades), "grades")
	return {"success": True, "data": [grade_to_dict(g) for g in grades], "count": len(grades)}


@router.get("/examinations")
def export_examinations(
	format: ExportFormat = "csv",
	academic_year: Optional[str] = None,
	subject_id: Optional[str] = None,
	exam_type: Optional[str] = None,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	q = (
		db.query(Examination)
		.options(selectinload(Examination.grades), joinedload(Examination.subject))
		.filter(Examination.tenant_id == user.tenant_id)
	)
	if academic_year:
		q = q.filter(Examination.academic_year == academic_year)
	if subject_id:
		q = q.filter(Examination.subject_id == subject_id)
	if exam_type:
		q = q.filter(Examination.exam_type == exam_type)
	examinations = q.order_by(Examination.start_date.desc(), Examination.exam_name.asc()).all()

	if format == "csv":
		return _csv_response(examinations_csv(examinations), "examinations")
	return {"success": True, "data": [examination_to_dict(e) for e in examinations], "count": len(examinations)}
