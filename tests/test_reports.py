"""
Teacher dashboard and student performance
"""
from quiz_api.models import Question, Result

from conftest import QUESTION, auth, register


def add_result(db, student_id, question_id, score, is_correct=True, quiz_id="q"):
    db.add(Result(
        student_id=student_id,
        question_id=question_id,
        selected_option="b",
        is_correct=is_correct,
        score=score,
        quiz_id=quiz_id,
    ))


def test_top_student_tie_break_is_stable(client, teacher, db):
    a = register(client, "anna", "Student")
    b = register(client, "ben", "Student")
    c = register(client, "cleo", "Student")
    question = Question(teacher_id=teacher["id"], **QUESTION)
    db.add(question)
    db.commit()

    add_result(db, a, question.id, 3)
    add_result(db, b, question.id, 5)
    add_result(db, c, question.id, 5)
    db.commit()

    for _ in range(3):
        body = client.get("/teacher-dashboard", headers=auth(teacher["token"])).json()
        assert body["topStudent"] == {"id": b, "username": "ben", "score": 5}


def test_dashboard_lists_students_only(client, teacher, student):
    body = client.get("/teacher-dashboard", headers=auth(teacher["token"])).json()
    assert body["students"] == [{"id": student["id"], "username": "arnold"}]
    assert body["topStudent"] is None


def test_dashboard_requires_teacher(client, student):
    assert client.get("/teacher-dashboard", headers=auth(student["token"])).status_code == 403
    assert client.get("/teacher-dashboard").status_code == 403


def test_student_performance_ordering(client, teacher, make_question):
    questions = [make_question(correct_option="a") for _ in range(3)]

    register(client, "low", "Student")
    register(client, "high", "Student")
    register(client, "idle", "Student")
    low = client.post("/login", json={"username": "low", "password": "secret-pw"}).json()["token"]
    high = client.post("/login", json={"username": "high", "password": "secret-pw"}).json()["token"]

    client.post("/submit", headers=auth(low), json={"answers": [
        {"id": questions[0], "selectedOption": "a"},
        {"id": questions[1], "selectedOption": "b"},
    ]})
    client.post("/submit", headers=auth(high), json={"answers": [
        {"id": q, "selectedOption": "a"} for q in questions
    ]})

    response = client.get("/student-performance", headers=auth(teacher["token"]))
    assert response.status_code == 200
    rows = response.json()
    assert [(r["student_name"], r["total_score"]) for r in rows] == [("high", 3), ("low", 1)]
    assert all(r["last_attempt"] for r in rows)


def test_student_performance_requires_teacher(client, student):
    assert client.get("/student-performance", headers=auth(student["token"])).status_code == 403
