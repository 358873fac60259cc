from __future__ import annotations
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from ..db import get_db
from ..grading import AcademicLevel, scale_for
from ..models import GradingScale
from ..serializers import grading_scale_to_dict
from .auth import User, get_current_user
from .common import commit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/examinations/grading-scales", tags=["grading-scales"])


class GradeRange(BaseModel):
	grade: str = Field(min_length=1, max_length=2)
	min: float = Field(ge=0, le=100)
	max: float = Field(ge=0, le=100)
	points: Optional[float] = Field(default=None, ge=0)

	@model_validator(mode="after")
	def _check_bounds(self):
		if self.min > self.max:
			raise ValueError("min must not exceed max")
		return self


class GradingScaleCreate(BaseModel):
	scale_name: str = Field(min_length=1, max_length=128)
	exam_level: AcademicLevel
	grade_ranges: List[GradeRange] = Field(min_length=1)
	is_default: bool = False


@router.get("")
def list_grading_scales(exam_level: Optional[AcademicLevel] = None, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	q = db.query(GradingScale).filter(GradingScale.tenant_id == user.tenant_id)
	if exam_level:
		q = q.filter(GradingScale.exam_level == exam_level.value)
	rows = q.order_by(GradingScale.is_default.desc(), GradingScale.scale_name.asc()).all()
	return {"success": True, "data": [grading_scale_to_dict(s) for s in rows]}


@router.get("/built-in")
def list_built_in_scales(user: User = Depends(get_current_user)):
	"""Scales actually applied when grades are classified."""
	data = {
		level.value: [
			{"grade": band.letter, "min": band.min_percentage, "points": band.points}
			for band in scale_for(level)
		]
		for level in AcademicLevel
	}
	return {"success": True, "data": data}


@router.post("", status_code=201)
def create_grading_scale(req: GradingScaleCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	level = req.exam_level.value
	if req.is_default:
		# Only one default scale per level
		db.query(GradingScale).filter(
			GradingScale.tenant_id == user.tenant_id,
			GradingScale.exam_level == level,
			GradingScale.is_default.is_(True),
		).update({GradingScale.is_default: False}, synchronize_session=False)
	scale = GradingScale(
		tenant_id=user.tenant_id,
		scale_name=req.scale_name.strip(),
		exam_level=level,
		grade_ranges=[r.model_dump() for r in req.grade_ranges],
		is_default=req.is_default,
		created_by=user.username,
	)
	db.add(scale)
	commit(db, "create grading scale", conflict="Grading scale with this name and level already exists in this tenant")
	db.refresh(scale)
	logger.info("Grading scale %s created for %s", scale.id, level)
	return {"success": True, "message": "Grading scale created successfully", "data": grading_scale_to_dict(scale)}
