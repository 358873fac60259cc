import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .db import SessionLocal, init_db
from .cleanup import purge_stale_sessions
from .grading import GradingError
from .settings import settings
from .routers import health
from .routers import auth
from .routers import subjects
from .routers import students
from .routers import grades
from .routers import grading_scales
from .routers import exports
from .routers import examinations

logger = logging.getLogger(__name__)

app = FastAPI(title="School Gradebook API")
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(subjects.router)
app.include_router(students.router)
# Fixed /examinations/* paths must be registered before /examinations/{examination_id}
app.include_router(grades.router)
app.include_router(grading_scales.router)
app.include_router(exports.router)
app.include_router(examinations.router)


@app.exception_handler(GradingError)
async def grading_error_handler(request: Request, exc: GradingError):
	return JSONResponse(
		status_code=400,
		content={"success": False, "message": str(exc), "error_kind": exc.kind},
	)


@app.get("/info")
def root():
	return {"status": "ok", "title": app.title}


def configure_logging() -> None:
	logging.basicConfig(
		level=getattr(logging, settings.log_level.upper(), logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)


def _purge_once() -> None:
	db = SessionLocal()
	try:
		purge_stale_sessions(db)
	except Exception:
		db.rollback()
		logger.exception("Session cleanup failed")
	finally:
		db.close()


_cleanup_task = None


async def _cleanup_watcher():
	# Startup run happens in startup_event; then daily
	while True:
		await asyncio.sleep(24 * 60 * 60)
		_purge_once()


@app.on_event("startup")
async def startup_event():
	global _cleanup_task
	configure_logging()
	init_db()
	_purge_once()
	# The event loop only holds a weak reference to tasks
	_cleanup_task = asyncio.create_task(_cleanup_watcher())
