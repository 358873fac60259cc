from __future__ import annotations
import logging
from typing import Any, Optional, Type

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..settings import settings

logger = logging.getLogger(__name__)


def server_error(action: str, exc: Exception) -> HTTPException:
	detail = f"Failed to {action}"
	if settings.expose_error_details:
		detail = f"{detail}: {exc}"
	return HTTPException(status_code=500, detail=detail)


def commit(db: Session, action: str, *, conflict: Optional[str] = None) -> None:
	"""Commit the request session; roll back and map failures to HTTP errors."""
	try:
		db.commit()
	except IntegrityError as e:
		db.rollback()
		if conflict:
			raise HTTPException(status_code=409, detail=conflict)
		logger.exception("Integrity error while trying to %s", action)
		raise server_error(action, e)
	except SQLAlchemyError as e:
		db.rollback()
		logger.exception("Database error while trying to %s", action)
		raise server_error(action, e)


def get_owned(db: Session, model: Type[Any], obj_id: str, tenant_id: str, label: str) -> Any:
	"""Fetch a row by id within the tenant or raise 404."""
	row = db.query(model).filter(model.id == obj_id, model.tenant_id == tenant_id).first()
	if row is None:
		raise HTTPException(status_code=404, detail=f"{label} not found")
	return row
