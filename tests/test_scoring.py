"""
Quiz submission and scoring
"""
import pytest
from sqlalchemy.exc import OperationalError

from quiz_api.exceptions import StoreError
from quiz_api.models import Result
from quiz_api.schemas.quiz import SubmittedAnswer
from quiz_api.services.scoring_service import scoring_service

from conftest import auth


def submit(client, token, answers, path="/submit"):
    return client.post(path, json={"answers": answers}, headers=auth(token))


def test_correct_answer_scores(client, student, make_question, db):
    question_id = make_question(correct_option="b")

    response = submit(client, student["token"], [{"id": question_id, "selectedOption": "b"}])
    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 1
    assert body["total"] == 1
    assert body["breakdown"][0]["is_correct"] is True

    row = db.query(Result).one()
    assert row.student_id == student["id"]
    assert row.is_correct is True
    assert row.score == 1
    assert row.quiz_id == body["quiz_id"]


def test_wrong_answer_does_not_score(client, student, make_question):
    question_id = make_question(correct_option="b")

    body = submit(client, student["token"], [{"id": question_id, "selectedOption": "a"}]).json()
    assert body["score"] == 0
    assert body["breakdown"][0]["correct_option"] == "b"


def test_option_comparison_ignores_case(client, student, make_question):
    question_id = make_question(correct_option="c")
    body = submit(client, student["token"], [{"questionId": question_id, "selectedOption": "C"}]).json()
    assert body["score"] == 1


def test_running_score_is_recorded_per_row(client, student, make_question, db):
    q1 = make_question(correct_option="a")
    q2 = make_question(correct_option="b")
    q3 = make_question(correct_option="c")

    body = submit(client, student["token"], [
        {"id": q1, "selectedOption": "a"},
        {"id": q2, "selectedOption": "d"},
        {"id": q3, "selectedOption": "c"},
    ]).json()
    assert body["score"] == 2

    rows = db.query(Result).order_by(Result.id).all()
    assert [r.score for r in rows] == [1, 1, 2]
    assert len({r.quiz_id for r in rows}) == 1


def test_unknown_question_rejects_submission(client, student, make_question, db):
    question_id = make_question()

    response = submit(client, student["token"], [
        {"id": question_id, "selectedOption": "b"},
        {"id": 9999, "selectedOption": "a"},
    ])
    assert response.status_code == 404
    assert response.json()["error"] == "invalid_question_reference"
    assert db.query(Result).count() == 0


def test_duplicate_answers_in_one_submission(client, student, make_question, db):
    question_id = make_question(correct_option="b")

    body = submit(client, student["token"], [
        {"id": question_id, "selectedOption": "b"},
        {"id": question_id, "selectedOption": "b"},
        {"id": question_id, "selectedOption": "a"},
    ]).json()

    rows = db.query(Result).all()
    assert len(rows) == 1
    assert rows[0].selected_option == "b"
    assert body["score"] == sum(1 for r in rows if r.is_correct) == 1


def test_resubmission_is_skipped(client, student, make_question, db):
    first = make_question(correct_option="b")
    second = make_question(correct_option="a")

    submit(client, student["token"], [{"id": first, "selectedOption": "a"}])
    body = submit(client, student["token"], [
        {"id": first, "selectedOption": "b"},
        {"id": second, "selectedOption": "a"},
    ]).json()

    assert body["skipped"] == [first]
    assert body["score"] == 1
    assert body["total"] == 1

    stored = {r.question_id: r for r in db.query(Result).all()}
    assert len(stored) == 2
    assert stored[first].selected_option == "a"


def test_empty_submission(client, student, db):
    response = submit(client, student["token"], [])
    assert response.status_code == 200
    assert response.json()["score"] == 0
    assert response.json()["quiz_id"] is None
    assert db.query(Result).count() == 0


def test_submit_alias(client, student, make_question):
    question_id = make_question()
    response = submit(
        client, student["token"], [{"questionId": question_id, "selectedOption": "b"}],
        path="/quiz/submit",
    )
    assert response.status_code == 200
    assert response.json()["score"] == 1


def test_teacher_cannot_submit(client, teacher, make_question, db):
    question_id = make_question()
    response = submit(client, teacher["token"], [{"id": question_id, "selectedOption": "b"}])
    assert response.status_code == 403
    assert db.query(Result).count() == 0


def test_submit_requires_token(client, make_question):
    question_id = make_question()
    response = client.post("/submit", json={"answers": [{"id": question_id, "selectedOption": "b"}]})
    assert response.status_code == 403


def test_malformed_answers_rejected(client, student):
    response = submit(client, student["token"], [{"selectedOption": "b"}])
    assert response.status_code == 400


def test_store_failure_rolls_back(client, student, make_question, db, monkeypatch):
    q1 = make_question()
    q2 = make_question()

    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(db, "commit", failing_commit)

    answers = [
        SubmittedAnswer(question_id=q1, selected_option="b"),
        SubmittedAnswer(question_id=q2, selected_option="b"),
    ]
    with pytest.raises(StoreError):
        scoring_service.score_submission(db, student["id"], answers)

    monkeypatch.undo()
    assert db.query(Result).count() == 0


def test_out_of_range_question_id_rejected(client, student, make_question, db):
    make_question()

    response = submit(client, student["token"], [{"id": 2**70, "selectedOption": "b"}])
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert db.query(Result).count() == 0


def test_unknown_option_label_rejected(client, student, make_question, db):
    question_id = make_question(correct_option="b")

    response = submit(client, student["token"], [
        {"id": question_id, "selectedOption": "b"},
        {"id": question_id, "selectedOption": "option_b"},
    ])
    assert response.status_code == 400
    assert db.query(Result).count() == 0

    response = submit(client, student["token"], [{"id": question_id, "selectedOption": "option_b"}])
    assert response.status_code == 400
    assert db.query(Result).count() == 0


def test_lookup_failure_is_a_store_error(student, make_question, db, monkeypatch):
    question_id = make_question()

    def failing_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "query", failing_query)

    with pytest.raises(StoreError):
        scoring_service.score_submission(
            db, student["id"], [SubmittedAnswer(question_id=question_id, selected_option="b")]
        )

    monkeypatch.undo()
    assert db.query(Result).count() == 0
