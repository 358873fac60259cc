from __future__ import annotations
import csv
from datetime import date
from io import StringIO
from typing import Any, Iterable, List, Optional, Sequence

from .models import Examination, Grade

GRADE_COLUMNS: List[str] = [
	"Student Name",
	"Student Email",
	"Examination",
	"Subject",
	"Raw Marks",
	"Max Marks",
	"Percentage",
	"Grade",
	"Points",
	"Status",
	"Exam Date",
	"Comments",
	"Graded By",
]

EXAMINATION_COLUMNS: List[str] = [
	"Examination Name",
	"Type",
	"Level",
	"Subject",
	"Academic Year",
	"Start Date",
	"End Date",
	"Max Marks",
	"Weight",
	"Status",
	"Total Grades",
	"Created By",
]


def _fmt_date(value: Optional[date]) -> str:
	return value.isoformat() if value else ""


_FORMULA_PREFIXES = ("=", "+", "-", "@")


def _text(value: Optional[str]) -> str:
	# Spreadsheets evaluate cells starting with these as formulas
	text = value or ""
	if text.startswith(_FORMULA_PREFIXES):
		return "'" + text
	return text


def _fmt_number(value: Any) -> str:
	# 75.0 -> "75", 72.5 -> "72.5"
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	return str(value)


def grade_row(grade: Grade) -> List[str]:
	exam = grade.examination
	return [
		_text(grade.student.full_name),
		_text(grade.student.email),
		_text(exam.exam_name),
		_text(grade.subject.subject_name),
		_fmt_number(grade.raw_marks),
		_fmt_number(exam.max_marks),
		f"{grade.percentage:.1f}",
		grade.letter_grade or "",
		_fmt_number(grade.grade_points),
		grade.status,
		_fmt_date(exam.start_date),
		_text(grade.comments),
		_text(grade.created_by),
	]


def examination_row(exam: Examination) -> List[str]:
	return [
		_text(exam.exam_name),
		exam.exam_type.replace("_", " "),
		exam.exam_level.replace("_", "-"),
		_text(exam.subject.subject_name) if exam.subject else "All Subjects",
		_text(exam.academic_year),
		_fmt_date(exam.start_date),
		_fmt_date(exam.end_date),
		_fmt_number(exam.max_marks),
		_fmt_number(exam.weight),
		exam.status,
		str(len(exam.grades)),
		_text(exam.created_by),
	]


def render_csv(header: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
	buf = StringIO()
	writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
	writer.writerow(header)
	writer.writerows(rows)
	return buf.getvalue()


def grades_csv(grades: Iterable[Grade]) -> str:
	return render_csv(GRADE_COLUMNS, (grade_row(g) for g in grades))


def examinations_csv(examinations: Iterable[Examination]) -> str:
	return render_csv(EXAMINATION_COLUMNS, (examination_row(e) for e in examinations))


def export_filename(kind: str, today: Optional[date] = None) -> str:
	return f"{kind}-export-{(today or date.today()).isoformat()}.csv"
