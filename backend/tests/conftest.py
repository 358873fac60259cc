import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gradebook import models  # noqa: F401
from gradebook.db import Base, enable_sqlite_foreign_keys, get_db
from gradebook.main import app
from gradebook.routers.auth import User, get_current_user

TENANT = "school-a"
OTHER_TENANT = "school-b"


@pytest.fixture
def engine():
	eng = create_engine(
		"sqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
		future=True,
	)
	enable_sqlite_foreign_keys(eng)
	Base.metadata.create_all(bind=eng)
	yield eng
	Base.metadata.drop_all(bind=eng)
	eng.dispose()


@pytest.fixture
def session_factory(engine):
	return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def db_session(session_factory):
	db = session_factory()
	try:
		yield db
	finally:
		db.close()


@pytest.fixture
def anon_client(session_factory):
	"""Client with the real authentication dependency."""
	def override_get_db():
		db = session_factory()
		try:
			yield db
		finally:
			db.close()

	app.dependency_overrides[get_db] = override_get_db
	yield TestClient(app)
	app.dependency_overrides.clear()


def login_as(username: str, tenant_id: str) -> None:
	app.dependency_overrides[get_current_user] = lambda: User(username=username, tenant_id=tenant_id)


@pytest.fixture
def client(anon_client):
	login_as("teacher1", TENANT)
	return anon_client


@pytest.fixture
def school(client):
	"""One subject, two students and an O-Level examination out of 100."""
	subject = client.post(
		"/subjects",
		json={"subject_name": "Mathematics", "subject_code": "math", "subject_level": "O_LEVEL"},
	).json()["data"]
	amina = client.post(
		"/students",
		json={"admission_number": "S-001", "first_name": "Amina", "last_name": "Juma", "email": "amina@example.com"},
	).json()["data"]
	baraka = client.post(
		"/students",
		json={"admission_number": "S-002", "first_name": "Baraka", "last_name": "Mushi"},
	).json()["data"]
	exam = client.post(
		"/examinations",
		json={
			"exam_name": "Form Two Terminal",
			"exam_type": "FINAL",
			"exam_level": "O_LEVEL",
			"subject_id": subject["id"],
			"academic_year": "2026",
			"start_date": "2026-06-01",
			"end_date": "2026-06-05",
		},
	).json()["data"]
	return {"subject": subject, "students": [amina, baraka], "exam": exam}


def grade_payload(school, raw_marks, student=0, **extra):
	body = {
		"examination_id": school["exam"]["id"],
		"student_id": school["students"][student]["id"],
		"subject_id": school["subject"]["id"],
		"raw_marks": raw_marks,
	}
	body.update(extra)
	return body
