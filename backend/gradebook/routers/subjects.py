from __future__ import annotations
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..grading import AcademicLevel
from ..models import Subject
from ..serializers import subject_summary
from .auth import User, get_current_user
from .common import commit, get_owned

router = APIRouter(prefix="/subjects", tags=["subjects"])


class SubjectCreate(BaseModel):
	subject_name: str = Field(min_length=1, max_length=128)
	subject_code: str = Field(min_length=1, max_length=32)
	subject_level: AcademicLevel
	subject_type: Literal["CORE", "OPTIONAL", "COMBINATION"] = "CORE"


@router.get("")
def list_subjects(subject_level: Optional[AcademicLevel] = None, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	q = db.query(Subject).filter(Subject.tenant_id == user.tenant_id)
	if subject_level:
		q = q.filter(Subject.subject_level == subject_level.value)
	rows = q.order_by(Subject.subject_name.asc()).all()
	return {"success": True, "data": [subject_summary(s) for s in rows]}


@router.get("/{subject_id}")
def get_subject(subject_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	subject = get_owned(db, Subject, subject_id, user.tenant_id, "Subject")
	return {"success": True, "data": subject_summary(subject)}


@router.post("", status_code=201)
def create_subject(req: SubjectCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	subject = Subject(
		tenant_id=user.tenant_id,
		subject_name=req.subject_name.strip(),
		subject_code=req.subject_code.strip().upper(),
		subject_level=req.subject_level.value,
		subject_type=req.subject_type,
	)
	db.add(subject)
	commit(db, "create subject", conflict="Subject with this code already exists in this tenant")
	db.refresh(subject)
	return {"success": True, "message": "Subject created successfully", "data": subject_summary(subject)}
