# tests/test_question_bank_api.py

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from app.core.jwt import create_jwt_token
from app.main import app
from conftest import FakeCollection

client = TestClient(app)
TEACHER = {"Authorization": f"Bearer {create_jwt_token('acc-teacher', ['teacher'])}"}


@pytest.fixture
def collections(monkeypatch):
    fakes = {
        "subjects": FakeCollection(unique=("name",)),
        "themes": FakeCollection(unique=("name",)),
        "questions": FakeCollection(),
        "specialties": FakeCollection(unique=("name",)),
    }
    for name, collection in fakes.items():
        monkeypatch.setattr(f"app.routers.question_bank.{name}_collection", collection)
    return fakes


def question_payload(theme_id, points=5, text="2 + 2?"):
    return {"text": text, "answers": [{"text": "4", "correct": True}], "points": points, "themeId": theme_id}


def create_theme(name="Arithmetic"):
    subject = client.post("/subjects", json={"name": "Maths"}, headers=TEACHER).json()["data"]
    response = client.post("/themes", json={"name": name, "subjectId": subject["id"]}, headers=TEACHER)
    assert response.status_code == 201
    return response.json()["data"]


def test_create_subject_and_theme(collections):
    theme = create_theme()
    assert theme["name"] == "Arithmetic"
    assert collections["themes"].docs[0]["subject_id"] == theme["subjectId"]

    listed = client.get("/themes", params={"subjectId": theme["subjectId"]}, headers=TEACHER).json()
    assert [t["id"] for t in listed] == [theme["id"]]
    assert client.get("/themes", params={"subjectId": "other"}, headers=TEACHER).json() == []


def test_theme_needs_existing_subject(collections):
    response = client.post("/themes", json={"name": "Orphan", "subjectId": str(ObjectId())}, headers=TEACHER)
    assert response.status_code == 400
    assert collections["themes"].docs == []


def test_duplicate_subject_name_conflicts(collections):
    assert client.post("/subjects", json={"name": "Maths"}, headers=TEACHER).status_code == 201
    response = client.post("/subjects", json={"name": "Maths"}, headers=TEACHER)
    assert response.status_code == 409
    assert len(collections["subjects"].docs) == 1


def test_create_and_fetch_question(collections):
    theme = create_theme()
    response = client.post("/questions", json=question_payload(theme["id"]), headers=TEACHER)
    assert response.status_code == 201
    question = response.json()["data"]
    assert question["themeId"] == theme["id"]

    fetched = client.get(f"/questions/{question['id']}", headers=TEACHER).json()
    assert fetched["answers"] == [{"text": "4", "correct": True}]
    assert client.get(f"/questions/{ObjectId()}", headers=TEACHER).status_code == 404


def test_question_needs_existing_theme(collections):
    response = client.post("/questions", json=question_payload(str(ObjectId())), headers=TEACHER)
    assert response.status_code == 400
    assert collections["questions"].docs == []


def test_list_questions_by_theme_and_page(collections):
    first = create_theme()
    second = client.post("/themes", json={"name": "Geometry", "subjectId": first["subjectId"]}, headers=TEACHER).json()["data"]
    for i in range(5):
        client.post("/questions", json=question_payload(first["id"], text=f"Q{i}"), headers=TEACHER)
    client.post("/questions", json=question_payload(second["id"], text="Angles"), headers=TEACHER)

    page_one = client.get("/questions", params={"themeId": first["id"], "pageSize": 2}, headers=TEACHER).json()
    page_three = client.get("/questions", params={"themeId": first["id"], "pageSize": 2, "page": 3}, headers=TEACHER).json()
    assert [q["text"] for q in page_one] == ["Q0", "Q1"]
    assert [q["text"] for q in page_three] == ["Q4"]
    assert len(client.get("/questions", headers=TEACHER).json()) == 6


def test_replace_question(collections):
    theme = create_theme()
    question = client.post("/questions", json=question_payload(theme["id"]), headers=TEACHER).json()["data"]

    response = client.put(f"/questions/{question['id']}", json=question_payload(theme["id"], points=10, text="3 + 3?"), headers=TEACHER)
    assert response.status_code == 200
    assert response.json()["points"] == 10
    assert collections["questions"].docs[0]["text"] == "3 + 3?"

    bad_points = client.put(f"/questions/{question['id']}", json=question_payload(theme["id"], points=7), headers=TEACHER)
    assert bad_points.status_code == 422
    assert collections["questions"].docs[0]["points"] == 10

    missing = client.put(f"/questions/{ObjectId()}", json=question_payload(theme["id"]), headers=TEACHER)
    assert missing.status_code == 404


def test_delete_question(collections):
    theme = create_theme()
    question = client.post("/questions", json=question_payload(theme["id"]), headers=TEACHER).json()["data"]

    assert client.delete(f"/questions/{question['id']}", headers=TEACHER).status_code == 200
    assert collections["questions"].docs == []
    assert client.delete(f"/questions/{question['id']}", headers=TEACHER).status_code == 404
    assert client.delete("/questions/not-an-id", headers=TEACHER).status_code == 404


def test_get_and_rename_theme(collections):
    theme = create_theme()
    client.post("/themes", json={"name": "Geometry", "subjectId": theme["subjectId"]}, headers=TEACHER)

    assert client.get(f"/themes/{theme['id']}", headers=TEACHER).json()["name"] == "Arithmetic"

    renamed = client.patch(f"/themes/{theme['id']}", json={"name": "Algebra"}, headers=TEACHER)
    assert renamed.status_code == 200
    assert renamed.json() == {"id": theme["id"], "name": "Algebra", "subjectId": theme["subjectId"]}

    taken = client.patch(f"/themes/{theme['id']}", json={"name": "Geometry"}, headers=TEACHER)
    assert taken.status_code == 409
    assert client.patch(f"/themes/{ObjectId()}", json={"name": "Calculus"}, headers=TEACHER).status_code == 404


def test_rename_only_changes_name(collections):
    theme = create_theme()
    client.patch(f"/themes/{theme['id']}", json={"name": "Algebra", "subjectId": "elsewhere"}, headers=TEACHER)
    assert collections["themes"].docs[0]["subject_id"] == theme["subjectId"]


def test_delete_theme_refused_while_questions_reference_it(collections):
    theme = create_theme()
    question = client.post("/questions", json=question_payload(theme["id"]), headers=TEACHER).json()["data"]

    assert client.delete(f"/themes/{theme['id']}", headers=TEACHER).status_code == 409
    assert len(collections["themes"].docs) == 1

    client.delete(f"/questions/{question['id']}", headers=TEACHER)
    assert client.delete(f"/themes/{theme['id']}", headers=TEACHER).status_code == 200
    assert client.get(f"/themes/{theme['id']}", headers=TEACHER).status_code == 404


def test_specialties(collections):
    assert client.post("/specialties", json={"name": "Physics"}, headers=TEACHER).status_code == 201
    assert client.post("/specialties", json={"name": "Physics"}, headers=TEACHER).status_code == 409
    assert [s["name"] for s in client.get("/specialties", headers=TEACHER).json()] == ["Physics"]
