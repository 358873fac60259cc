from __future__ import annotations
from typing import Any, Dict, Optional

from .models import Examination, Grade, GradingScale, Student, Subject


def _iso(value) -> Optional[str]:
	return value.isoformat() if value else None


def subject_summary(subject: Optional[Subject]) -> Optional[Dict[str, Any]]:
	if subject is None:
		return None
	return {
		"id": subject.id,
		"subject_name": subject.subject_name,
		"subject_code": subject.subject_code,
		"subject_level": subject.subject_level,
		"subject_type": subject.subject_type,
	}


def student_summary(student: Optional[Student]) -> Optional[Dict[str, Any]]:
	if student is None:
		return None
	return {
		"id": student.id,
		"admission_number": student.admission_number,
		"first_name": student.first_name,
		"last_name": student.last_name,
		"email": student.email,
	}


def examination_summary(exam: Examination) -> Dict[str, Any]:
	return {
		"id": exam.id,
		"exam_name": exam.exam_name,
		"exam_type": exam.exam_type,
		"exam_level": exam.exam_level,
		"max_marks": exam.max_marks,
		"weight": exam.weight,
		"status": exam.status,
	}


def examination_to_dict(exam: Examination, *, include_grades: bool = False) -> Dict[str, Any]:
	data: Dict[str, Any] = {
		**examination_summary(exam),
		"subject_id": exam.subject_id,
		"subject": subject_summary(exam.subject),
		"academic_year": exam.academic_year,
		"start_date": _iso(exam.start_date),
		"end_date": _iso(exam.end_date),
		"description": exam.description,
		"created_by": exam.created_by,
		"updated_by": exam.updated_by,
		"created_at": _iso(exam.created_at),
		"updated_at": _iso(exam.updated_at),
		"grade_count": len(exam.grades),
	}
	if include_grades:
		data["grades"] = [grade_to_dict(g, include_examination=False) for g in exam.grades]
	return data


def grade_to_dict(grade: Grade, *, include_examination: bool = True) -> Dict[str, Any]:
	data: Dict[str, Any] = {
		"id": grade.id,
		"examination_id": grade.examination_id,
		"student_id": grade.student_id,
		"subject_id": grade.subject_id,
		"raw_marks": grade.raw_marks,
		"percentage": grade.percentage,
		"letter_grade": grade.letter_grade,
		"grade_points": grade.grade_points,
		"comments": grade.comments,
		"status": grade.status,
		"student": student_summary(grade.student),
		"subject": subject_summary(grade.subject),
		"created_by": grade.created_by,
		"updated_by": grade.updated_by,
		"created_at": _iso(grade.created_at),
		"updated_at": _iso(grade.updated_at),
	}
	if include_examination:
		data["examination"] = examination_summary(grade.examination)
	return data


def grading_scale_to_dict(scale: GradingScale) -> Dict[str, Any]:
	return {
		"id": scale.id,
		"scale_name": scale.scale_name,
		"exam_level": scale.exam_level,
		"grade_ranges": scale.grade_ranges,
		"is_default": scale.is_default,
		"created_by": scale.created_by,
		"created_at": _iso(scale.created_at),
	}
