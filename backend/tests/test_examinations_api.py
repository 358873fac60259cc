from conftest import OTHER_TENANT, grade_payload, login_as


def _exam_body(**overrides):
	body = {
		"exam_name": "Mid Term Physics",
		"exam_type": "MID_TERM",
		"exam_level": "A_LEVEL",
		"start_date": "2026-03-02",
	}
	body.update(overrides)
	return body


def test_create_examination_defaults(client):
	res = client.post("/examinations", json=_exam_body())
	assert res.status_code == 201
	data = res.json()["data"]
	assert data["max_marks"] == 100
	assert data["weight"] == 1.0
	assert data["status"] == "DRAFT"
	assert data["subject"] is None
	assert data["grade_count"] == 0
	assert data["created_by"] == "teacher1"


def test_duplicate_name_and_type_conflicts(client):
	assert client.post("/examinations", json=_exam_body()).status_code == 201
	assert client.post("/examinations", json=_exam_body()).status_code == 409
	# Same name with a different type is allowed
	assert client.post("/examinations", json=_exam_body(exam_type="MOCK")).status_code == 201


def test_create_validation(client):
	assert client.post("/examinations", json=_exam_body(exam_level="COLLEGE")).status_code == 422
	assert client.post("/examinations", json=_exam_body(exam_type="ORAL")).status_code == 422
	assert client.post("/examinations", json=_exam_body(max_marks=0)).status_code == 422
	assert client.post("/examinations", json=_exam_body(end_date="2026-03-01")).status_code == 422
	assert client.post("/examinations", json=_exam_body(subject_id="missing")).status_code == 404


def test_list_filters_and_order(client, school):
	client.post("/examinations", json=_exam_body(start_date="2026-09-01"))
	client.post("/examinations", json=_exam_body(exam_name="University Stats", exam_level="UNIVERSITY", start_date="2026-01-10"))

	names = [e["exam_name"] for e in client.get("/examinations").json()["data"]]
	assert names == ["Mid Term Physics", "Form Two Terminal", "University Stats"]

	uni = client.get("/examinations", params={"exam_level": "UNIVERSITY"}).json()["data"]
	assert [e["exam_name"] for e in uni] == ["University Stats"]

	by_subject = client.get("/examinations", params={"subject_id": school["subject"]["id"]}).json()["data"]
	assert [e["exam_name"] for e in by_subject] == ["Form Two Terminal"]


def test_get_examination_includes_grades(client, school):
	client.post("/examinations/grades", json=grade_payload(school, 72))
	data = client.get(f"/examinations/{school['exam']['id']}").json()["data"]
	assert data["grade_count"] == 1
	assert data["grades"][0]["letter_grade"] == "B"
	assert client.get("/examinations/missing").status_code == 404


def test_changing_max_marks_reclassifies_grades(client, school):
	exam_id = school["exam"]["id"]
	grade = client.post("/examinations/grades", json=grade_payload(school, 40)).json()["data"]
	assert grade["letter_grade"] == "C"

	res = client.put(f"/examinations/{exam_id}", json={"max_marks": 50})
	assert res.status_code == 200
	assert res.json()["data"]["max_marks"] == 50

	stored = client.get(f"/examinations/grades/{grade['id']}").json()["data"]
	assert (stored["percentage"], stored["letter_grade"], stored["grade_points"]) == (80.0, "A", 7)


def test_changing_level_reclassifies_grades(client, school):
	grade = client.post("/examinations/grades", json=grade_payload(school, 85)).json()["data"]
	client.put(f"/examinations/{school['exam']['id']}", json={"exam_level": "UNIVERSITY"})
	stored = client.get(f"/examinations/grades/{grade['id']}").json()["data"]
	assert (stored["letter_grade"], stored["grade_points"]) == ("A", 3.7)


def test_shrinking_max_below_stored_marks_is_rejected(client, school):
	exam_id = school["exam"]["id"]
	client.post("/examinations/grades", json=grade_payload(school, 90))
	res = client.put(f"/examinations/{exam_id}", json={"max_marks": 60, "exam_name": "Renamed"})
	assert res.status_code == 400
	exam = client.get(f"/examinations/{exam_id}").json()["data"]
	assert exam["max_marks"] == 100
	assert exam["exam_name"] == "Form Two Terminal"
	assert exam["grades"][0]["percentage"] == 90.0


def test_partial_update(client, school):
	exam_id = school["exam"]["id"]
	res = client.put(f"/examinations/{exam_id}", json={"status": "COMPLETED", "description": "Marked", "subject_id": None})
	data = res.json()["data"]
	assert data["status"] == "COMPLETED"
	assert data["description"] == "Marked"
	assert data["subject_id"] is None
	assert data["exam_name"] == "Form Two Terminal"
	assert client.put(f"/examinations/{exam_id}", json={"end_date": "2026-05-01"}).status_code == 400


def test_rename_into_existing_name_conflicts(client, school):
	client.post("/examinations", json=_exam_body(exam_name="Final A", exam_type="FINAL"))
	res = client.put(f"/examinations/{school['exam']['id']}", json={"exam_name": "Final A"})
	assert res.status_code == 409


def test_delete_cascades_to_grades(client, school):
	grade = client.post("/examinations/grades", json=grade_payload(school, 50)).json()["data"]
	assert client.delete(f"/examinations/{school['exam']['id']}").status_code == 200
	assert client.get(f"/examinations/{school['exam']['id']}").status_code == 404
	assert client.get(f"/examinations/grades/{grade['id']}").status_code == 404


def test_statistics(client, school):
	exam_id = school["exam"]["id"]
	client.post("/examinations/grades", json=grade_payload(school, 80, student=0))
	client.post("/examinations/grades", json=grade_payload(school, 10, student=1))
	data = client.get(f"/examinations/{exam_id}/statistics").json()["data"]
	assert data["count"] == 2
	assert data["average_raw_marks"] == 45.0
	assert data["min_raw_marks"] == 10
	assert data["max_raw_marks"] == 80
	assert data["pass_count"] == 1
	assert data["pass_rate"] == 50.0
	assert data["grade_distribution"] == {"A": 1, "F": 1}
	assert data["max_marks"] == 100


def test_statistics_of_ungraded_examination(client, school):
	data = client.get(f"/examinations/{school['exam']['id']}/statistics").json()["data"]
	assert data["count"] == 0
	assert data["average_percentage"] is None


def test_examinations_are_tenant_scoped(client, school):
	login_as("intruder", OTHER_TENANT)
	assert client.get("/examinations").json()["data"] == []
	assert client.get(f"/examinations/{school['exam']['id']}").status_code == 404
	assert client.delete(f"/examinations/{school['exam']['id']}").status_code == 404
