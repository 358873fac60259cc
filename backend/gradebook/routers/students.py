from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Student
from ..serializers import student_summary
from .auth import User, get_current_user
from .common import commit, get_owned

router = APIRouter(prefix="/students", tags=["students"])


class StudentCreate(BaseModel):
	admission_number: str = Field(min_length=1, max_length=64)
	first_name: str = Field(min_length=1, max_length=128)
	last_name: str = Field(min_length=1, max_length=128)
	email: Optional[str] = None


@router.get("")
def list_students(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	rows = (
		db.query(Student)
		.filter(Student.tenant_id == user.tenant_id)
		.order_by(Student.last_name.asc(), Student.first_name.asc())
		.all()
	)
	return {"success": True, "data": [student_summary(s) for s in rows]}


@router.get("/{student_id}")
def get_student(student_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	student = get_owned(db, Student, student_id, user.tenant_id, "Student")
	return {"success": True, "data": student_summary(student)}


@router.post("", status_code=201)
def create_student(req: StudentCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	student = Student(
		tenant_id=user.tenant_id,
		admission_number=req.admission_number.strip(),
		first_name=req.first_name.strip(),
		last_name=req.last_name.strip(),
		email=(req.email or "").strip() or None,
	)
	db.add(student)
	commit(db, "create student", conflict="Student with this admission number already exists in this tenant")
	db.refresh(student)
	return {"success": True, "message": "Student created successfully", "data": student_summary(student)}
